"""Decoding of framework annotations into HTTP mappings and parameter bindings."""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .models import Action, ActionKind, Annotation
from .models import Enum as EnumDeclaration
from .types import NUMERIC_KINDS, TypeKind, TypeRef

SPRING = "org.springframework.web.bind.annotation"

# Spring's ValueConstants.DEFAULT_NONE: "no default value was given".
DEFAULT_NONE = "\n\t\t\n\t\t\n\ue000\ue001\ue002\n\t\t\t\t\n"


def parse_annotations(raw: Any) -> tuple[Annotation, ...]:
    """Build annotation records from the input graph, skipping malformed entries."""
    if not isinstance(raw, list):
        return ()
    annotations = []
    for item in raw:
        if not isinstance(item, dict) or not isinstance(item.get("type"), str):
            continue
        attributes = item.get("attributes")
        annotations.append(Annotation(item["type"], attributes if isinstance(attributes, dict) else {}))
    return tuple(annotations)


def find_annotation(annotations: Iterable[Annotation], iface: str) -> Annotation | None:
    """Return the first annotation of the given type."""
    for annotation in annotations:
        if annotation.type == iface:
            return annotation
    return None


def _first_string(value: Any) -> str | None:
    """Read a string attribute that may have been serialized as a one-element list."""
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if isinstance(value, str) and value:
        return value
    return None


def _as_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    return None


# =============================================================================
# Route mappings
# =============================================================================


@dataclass(frozen=True)
class RequestMapping:
    """HTTP exposure decoded from a mapping annotation."""

    method: str | None
    pattern: str
    consumes: str | None = None


def _normalize_method(value: Any) -> str | None:
    method = _first_string(value)
    if method is None:
        return None
    # "RequestMethod.GET" and "GET" are both accepted
    return method.rsplit(".", 1)[-1].upper()


def _mapping_extractor(fixed_method: str | None) -> Callable[[Annotation], RequestMapping]:
    def extract(annotation: Annotation) -> RequestMapping:
        attrs = annotation.attributes
        pattern = _first_string(attrs.get("path")) or _first_string(attrs.get("value")) or ""
        method = fixed_method or _normalize_method(attrs.get("method"))
        return RequestMapping(method, pattern, _first_string(attrs.get("consumes")))

    return extract


def _is(iface: str) -> Callable[[Annotation], bool]:
    return lambda annotation: annotation.type == iface


# Method-specific mappings are tried before the generic one.
ROUTE_MAPPING_RULES: list[tuple[Callable[[Annotation], bool], Callable[[Annotation], RequestMapping]]] = [
    (_is(f"{SPRING}.GetMapping"), _mapping_extractor("GET")),
    (_is(f"{SPRING}.PostMapping"), _mapping_extractor("POST")),
    (_is(f"{SPRING}.PutMapping"), _mapping_extractor("PUT")),
    (_is(f"{SPRING}.DeleteMapping"), _mapping_extractor("DELETE")),
    (_is(f"{SPRING}.PatchMapping"), _mapping_extractor("PATCH")),
    (_is(f"{SPRING}.RequestMapping"), _mapping_extractor(None)),
]


def decode_request_mapping(annotations: Iterable[Annotation]) -> RequestMapping | None:
    """Return the mapping of the highest-priority mapping annotation present."""
    bag = list(annotations)
    for predicate, extractor in ROUTE_MAPPING_RULES:
        for annotation in bag:
            if predicate(annotation):
                return extractor(annotation)
    return None


# =============================================================================
# Parameter bindings
# =============================================================================


class BindingKind(Enum):
    """Parameter-binding annotation families."""

    QUERY = "query"
    PATH = "path"
    BODY = "body"
    FORM = "form"
    COOKIE = "cookie"
    HEADER = "header"
    PART = "part"


@dataclass(frozen=True)
class Binding:
    """A decoded parameter binding."""

    kind: BindingKind
    alias: str
    required: bool = True
    default_value: str | None = None


BINDING_RULES: list[tuple[str, BindingKind]] = [
    (f"{SPRING}.RequestParam", BindingKind.QUERY),
    (f"{SPRING}.PathVariable", BindingKind.PATH),
    (f"{SPRING}.RequestBody", BindingKind.BODY),
    (f"{SPRING}.ModelAttribute", BindingKind.FORM),
    (f"{SPRING}.CookieValue", BindingKind.COOKIE),
    (f"{SPRING}.RequestHeader", BindingKind.HEADER),
    (f"{SPRING}.RequestPart", BindingKind.PART),
]

BINDING_ACTIONS: dict[BindingKind, ActionKind] = {
    BindingKind.QUERY: ActionKind.QUERY,
    BindingKind.PATH: ActionKind.PATH,
    BindingKind.BODY: ActionKind.BODY,
    BindingKind.FORM: ActionKind.FORM,
    BindingKind.COOKIE: ActionKind.COOKIE,
    BindingKind.HEADER: ActionKind.HEADER,
    BindingKind.PART: ActionKind.FILE,
}

# Runtime methods that take the alias as a leading literal argument.
NAMED_ACTIONS = frozenset({ActionKind.QUERY, ActionKind.PATH, ActionKind.HEADER, ActionKind.COOKIE, ActionKind.FILE})

# Binding for parameters without any binding annotation, by HTTP method:
# (scalar parameters, structured parameters).
DEFAULT_BINDINGS: dict[str, tuple[BindingKind, BindingKind]] = {
    "GET": (BindingKind.QUERY, BindingKind.FORM),
    "HEAD": (BindingKind.QUERY, BindingKind.FORM),
    "DELETE": (BindingKind.QUERY, BindingKind.FORM),
    "OPTIONS": (BindingKind.QUERY, BindingKind.FORM),
    "POST": (BindingKind.QUERY, BindingKind.FORM),
    "PUT": (BindingKind.QUERY, BindingKind.FORM),
    "PATCH": (BindingKind.QUERY, BindingKind.FORM),
}
FALLBACK_BINDING = (BindingKind.QUERY, BindingKind.FORM)

SCALAR_KINDS = NUMERIC_KINDS | {TypeKind.TEXT, TypeKind.BOOLEAN, TypeKind.FILE_UPLOAD}


def _alias(annotation: Annotation, fallback: str) -> str:
    attrs = annotation.attributes
    return _first_string(attrs.get("name")) or _first_string(attrs.get("value")) or fallback


def decode_binding(annotations: Iterable[Annotation], parameter_name: str) -> Binding | None:
    """Decode the first binding annotation in rule order, or None when there is none."""
    bag = list(annotations)
    for iface, kind in BINDING_RULES:
        annotation = find_annotation(bag, iface)
        if annotation is None:
            continue
        required = _as_bool(annotation.attributes.get("required"))
        default_value = None
        if kind is BindingKind.QUERY:
            raw_default = annotation.attributes.get("defaultValue")
            if isinstance(raw_default, str) and raw_default != DEFAULT_NONE:
                default_value = raw_default
        return Binding(
            kind=kind,
            alias=_alias(annotation, parameter_name),
            required=True if required is None else required,
            default_value=default_value,
        )
    return None


def is_scalar(type_ref: TypeRef | None) -> bool:
    """Whether a parameter type binds as a single request value."""
    if type_ref is None:
        return False
    kind = type_ref.kind
    if kind in SCALAR_KINDS:
        return True
    if kind is TypeKind.DECLARED:
        return isinstance(type_ref.declaration, EnumDeclaration)
    return False


def default_binding(
    parameter_name: str,
    type_ref: TypeRef | None,
    http_method: str,
    policy: Mapping[str, tuple[BindingKind, BindingKind]] | None = None,
) -> Binding:
    """Pick the binding of an unannotated parameter from the policy table."""
    table = DEFAULT_BINDINGS if policy is None else policy
    scalar_kind, structured_kind = table.get(http_method.upper(), FALLBACK_BINDING)
    kind = scalar_kind if is_scalar(type_ref) else structured_kind
    return Binding(kind=kind, alias=parameter_name, required=False)


def binding_actions(binding: Binding, type_ref: TypeRef | None) -> tuple[Action, ...]:
    """Translate a binding into the ordered request-attachment actions."""
    kind = BINDING_ACTIONS[binding.kind]
    if kind is ActionKind.QUERY and type_ref is not None and type_ref.kind is TypeKind.FILE_UPLOAD:
        kind = ActionKind.FILE
    if kind in NAMED_ACTIONS:
        return (Action(kind, (binding.alias,)),)
    return (Action(kind),)


# =============================================================================
# Documentation annotations
# =============================================================================

DESCRIPTION_RULES: list[tuple[str, str]] = [
    ("io.swagger.annotations.ApiOperation", "value"),
    ("io.swagger.v3.oas.annotations.Operation", "summary"),
    ("io.swagger.v3.oas.annotations.Operation", "description"),
    ("io.swagger.annotations.ApiParam", "value"),
    ("io.swagger.v3.oas.annotations.Parameter", "description"),
    ("io.swagger.annotations.ApiModel", "description"),
    ("io.swagger.annotations.ApiModel", "value"),
    ("io.swagger.annotations.ApiModelProperty", "value"),
    ("io.swagger.v3.oas.annotations.media.Schema", "description"),
    ("io.swagger.v3.oas.annotations.media.Schema", "title"),
]

NOT_NULL_ANNOTATIONS = frozenset(
    {
        "javax.validation.constraints.NotNull",
        "javax.validation.constraints.NotEmpty",
        "javax.validation.constraints.NotBlank",
        "jakarta.validation.constraints.NotNull",
        "jakarta.validation.constraints.NotEmpty",
        "jakarta.validation.constraints.NotBlank",
        "org.springframework.lang.NonNull",
        "lombok.NonNull",
    }
)


def decode_description(annotations: Iterable[Annotation], explicit: Any = None) -> str:
    """An explicit description wins; otherwise the first documentation annotation."""
    if isinstance(explicit, str) and explicit:
        return explicit
    bag = list(annotations)
    for iface, attribute in DESCRIPTION_RULES:
        annotation = find_annotation(bag, iface)
        if annotation is None:
            continue
        text = _first_string(annotation.attributes.get(attribute))
        if text:
            return text
    return ""


def is_not_null(annotations: Iterable[Annotation]) -> bool:
    return any(annotation.type in NOT_NULL_ANNOTATIONS for annotation in annotations)
