"""Assembly of the semantic model from the raw input graph."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .annotations import (
    BindingKind,
    binding_actions,
    decode_binding,
    decode_description,
    decode_request_mapping,
    default_binding,
    is_not_null,
    parse_annotations,
)
from .errors import MissingFieldError
from .models import ActionKind, Class, Declaration, Enum, EnumConstant, Member, Module, Parameter, Route
from .naming import UniqueNamer, fix_module_name, group_by_bean, matches_apis
from .ordering import order_declarations
from .resolver import AliasRegistry
from .types import INJECTED_TYPES, TypeKind, TypeRef, parse_type
from .utils import fix_identifier, simple_name


@dataclass(frozen=True)
class RootOptions:
    """Per-target knobs of model assembly."""

    unique_name_separator: str = "$"
    apis: tuple[str, ...] | None = None
    default_bindings: Mapping[str, tuple[BindingKind, BindingKind]] | None = None
    reserved_words: frozenset[str] = frozenset()


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _require_str(record: Any, key: str, path: str) -> str:
    value = record.get(key) if isinstance(record, Mapping) else None
    if not isinstance(value, str) or not value:
        raise MissingFieldError(f"{path}.{key}")
    return value


def _type_variables(record: Mapping[str, Any]) -> tuple[str, ...]:
    return tuple(t for t in _as_list(record.get("typeParameters")) if isinstance(t, str) and t)


def _value_type(constants: tuple[EnumConstant, ...]) -> str:
    """'string' or 'number' when every raw value has that type, otherwise 'unknown'."""
    kinds = set()
    for constant in constants:
        value = constant.raw_value
        if isinstance(value, str):
            kinds.add("string")
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            kinds.add("number")
        else:
            kinds.add("unknown")
    return kinds.pop() if len(kinds) == 1 else "unknown"


def _memo(record: Mapping[str, Any]) -> str:
    memo = record.get("memo")
    if isinstance(memo, str):
        return memo
    properties = record.get("properties")
    if isinstance(properties, dict):
        return ", ".join(f"{k}: {v}" for k, v in properties.items())
    return ""


class Root:
    """
    The fully resolved graph of one build.

    Built once from the raw input graph; afterwards only ``common_defs``, the
    alias registry filled in while emitters resolve types, changes.
    """

    def __init__(self, raw: Mapping[str, Any], options: RootOptions | None = None) -> None:
        if not isinstance(raw, Mapping):
            raise MissingFieldError("routes", "Input graph must be a mapping with a 'routes' list")
        self.options = options or RootOptions()
        self.common_defs = AliasRegistry()
        self._declarations: dict[str, Declaration] = {}

        raw_routes = raw.get("routes")
        if not isinstance(raw_routes, list) or not raw_routes:
            raise MissingFieldError("routes")

        declaration_names = UniqueNamer(self.options.unique_name_separator)
        for index, record in enumerate(_as_list(raw.get("classes"))):
            self._add(self._build_class(record, f"classes[{index}]", declaration_names))
        for index, record in enumerate(_as_list(raw.get("enums"))):
            self._add(self._build_enum(record, f"enums[{index}]", declaration_names))

        route_names = UniqueNamer(self.options.unique_name_separator)
        routes = []
        for index, record in enumerate(raw_routes):
            route = self._build_route(record, f"routes[{index}]", route_names)
            if route is not None:
                routes.append(route)
        self.routes: tuple[Route, ...] = tuple(routes)

        module_names = UniqueNamer(self.options.unique_name_separator)
        self.modules: tuple[Module, ...] = tuple(
            Module(
                name=bean,
                display_name=simple_name(bean) if bean else "",
                identifier=module_names.take(fix_identifier(fix_module_name(bean), self.options.reserved_words)),
                routes=tuple(items),
            )
            for bean, items in group_by_bean(routes, lambda r: r.bean).items()
        )

        collected = self._collect_declarations()
        self.declaration_list: tuple[Class, ...] = tuple(
            order_declarations((d for d in collected if isinstance(d, Class)), self.find_declaration)
        )
        self.enum_list: tuple[Enum, ...] = tuple(d for d in collected if isinstance(d, Enum))

    def find_declaration(self, name: str) -> Declaration | None:
        """Look a declaration up by its qualified name."""
        return self._declarations.get(name)

    @property
    def declarations(self) -> dict[str, Declaration]:
        return dict(self._declarations)

    def _add(self, declaration: Declaration) -> None:
        # The first declaration of a qualified name wins.
        self._declarations.setdefault(declaration.name, declaration)

    def _type(self, text: Any, variables: tuple[str, ...] = ()) -> TypeRef | None:
        return parse_type(text, variables, self.find_declaration)

    # =========================================================================
    # Declarations
    # =========================================================================

    def _build_class(self, record: Any, path: str, names: UniqueNamer) -> Class:
        name = _require_str(record, "name", path)
        variables = _type_variables(record)
        superclass = self._type(record.get("superclass"), variables)
        if superclass is not None and superclass.kind is TypeKind.UNKNOWN:
            # Extending Object is the same as extending nothing
            superclass = None
        annotations = parse_annotations(record.get("annotations"))
        members = tuple(
            self._build_member(member, f"{path}.members[{i}]", variables)
            for i, member in enumerate(_as_list(record.get("members")))
        )
        return Class(
            name=name,
            simple_name=names.take(simple_name(name)),
            type_parameters=variables,
            superclass=superclass,
            members=members,
            description=decode_description(annotations, record.get("description")),
            annotations=annotations,
        )

    def _build_member(self, record: Any, path: str, variables: tuple[str, ...]) -> Member:
        name = _require_str(record, "name", path)
        annotations = parse_annotations(record.get("annotations"))
        if isinstance(record.get("optional"), bool):
            optional = record["optional"]
        elif isinstance(record.get("required"), bool):
            optional = not record["required"]
        else:
            optional = not is_not_null(annotations)
        return Member(
            name=name,
            type=self._type(record.get("type"), variables),
            optional=optional,
            description=decode_description(annotations, record.get("description")),
        )

    def _build_enum(self, record: Any, path: str, names: UniqueNamer) -> Enum:
        name = _require_str(record, "name", path)
        annotations = parse_annotations(record.get("annotations"))
        constants = []
        for i, item in enumerate(_as_list(record.get("constants"))):
            constant_name = _require_str(item, "name", f"{path}.constants[{i}]")
            constants.append(
                EnumConstant(
                    name=constant_name,
                    raw_value=item.get("value", constant_name),
                    description=decode_description(parse_annotations(item.get("annotations")), item.get("description")),
                    memo=_memo(item),
                )
            )
        return Enum(
            name=name,
            simple_name=names.take(simple_name(name)),
            constants=tuple(constants),
            value_type=_value_type(tuple(constants)),
            description=decode_description(annotations, record.get("description")),
            annotations=annotations,
        )

    # =========================================================================
    # Routes
    # =========================================================================

    def _build_route(self, record: Any, path: str, names: UniqueNamer) -> Route | None:
        name = _require_str(record, "name", path)
        bean = record.get("bean") if isinstance(record.get("bean"), str) else ""
        if self.options.apis is not None and not matches_apis(bean, name, self.options.apis):
            return None

        variables = _type_variables(record)
        annotations = parse_annotations(record.get("annotations"))
        mapping = decode_request_mapping(annotations)

        methods = [m for m in _as_list(record.get("methods")) if isinstance(m, str) and m]
        patterns = [p for p in _as_list(record.get("patterns")) if isinstance(p, str)]
        if mapping is not None and mapping.method:
            method = mapping.method
        elif methods:
            method = methods[0].upper()
        else:
            method = "GET"
        if patterns:
            pattern = patterns[0]
        else:
            pattern = mapping.pattern if mapping is not None else ""

        parameters = tuple(
            self._build_parameter(item, index, method, variables)
            for index, item in enumerate(_as_list(record.get("parameters")))
        )

        content_type = mapping.consumes if mapping is not None else None
        if content_type is None and any(a.kind is ActionKind.FILE for p in parameters for a in p.actions):
            content_type = "multipart/form-data"

        return Route(
            bean=bean,
            name=name,
            uniq_name=names.take(name),
            method=method,
            pattern=pattern,
            parameters=parameters,
            return_type=self._type(record.get("returnType"), variables),
            description=decode_description(annotations, record.get("description")),
            request_content_type=content_type,
            mapped=mapping is not None,
        )

    def _build_parameter(self, record: Any, index: int, method: str, variables: tuple[str, ...]) -> Parameter:
        record = record if isinstance(record, Mapping) else {}
        raw_name = record.get("name")
        name = raw_name if isinstance(raw_name, str) and raw_name else f"arg{index}"
        type_ref = self._type(record.get("type"), variables)
        annotations = parse_annotations(record.get("annotations"))
        description = decode_description(annotations, record.get("description"))

        if type_ref is not None and type_ref.name in INJECTED_TYPES:
            return Parameter(name=name, type=type_ref, required=False, description=description)

        binding = decode_binding(annotations, name)
        if binding is None:
            binding = default_binding(name, type_ref, method, self.options.default_bindings)
        return Parameter(
            name=name,
            type=type_ref,
            required=binding.required and binding.default_value is None,
            actions=binding_actions(binding, type_ref),
            description=description,
        )

    # =========================================================================
    # Reachability
    # =========================================================================

    def _collect_declarations(self) -> list[Declaration]:
        """Declarations reachable from routes, in discovery order.

        Without an ``apis`` filter, unreachable declarations follow in input order.
        """
        found: dict[str, Declaration] = {}
        pending: list[TypeRef | None] = []
        for route in self.routes:
            pending.extend(p.type for p in route.parameters)
            pending.append(route.return_type)

        # Depth-first, with each type's own declaration visited before its arguments
        stack = list(reversed(pending))
        while stack:
            ref = stack.pop()
            if ref is None:
                continue
            nested: list[TypeRef | None] = []
            declaration = ref.declaration
            if declaration is not None and declaration.name not in found:
                found[declaration.name] = declaration
                if isinstance(declaration, Class):
                    nested.append(declaration.superclass)
                    nested.extend(m.type for m in declaration.members)
            nested = list(ref.parameters) + nested
            stack.extend(reversed(nested))

        if self.options.apis is None:
            for name, declaration in self._declarations.items():
                found.setdefault(name, declaration)
        return list(found.values())
