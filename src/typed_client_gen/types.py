"""Type references and classification of canonical type names."""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

ARRAY = "[]"

# Canonical names are grouped the way the resolver consults them.
DECIMAL_TYPE = "java.math.BigDecimal"
BIG_INTEGER_TYPE = "java.math.BigInteger"
FILE_UPLOAD_TYPE = "org.springframework.web.multipart.MultipartFile"

WIDE_INTEGER_TYPES = frozenset(
    {
        "long",
        "java.lang.Long",
        "java.util.concurrent.atomic.AtomicLong",
    }
)

NUMBER_TYPES = frozenset(
    {
        "byte",
        "short",
        "int",
        "float",
        "double",
        "java.lang.Byte",
        "java.lang.Short",
        "java.lang.Integer",
        "java.lang.Float",
        "java.lang.Double",
        "java.lang.Number",
        "java.util.concurrent.atomic.AtomicInteger",
        "java.util.Date",
        "java.sql.Timestamp",
    }
)

TEXT_TYPES = frozenset(
    {
        "char",
        "java.lang.Character",
        "java.lang.String",
        "java.lang.CharSequence",
        "java.lang.StringBuilder",
        "java.util.UUID",
        "java.time.LocalDate",
        "java.time.LocalDateTime",
        "java.time.LocalTime",
        "java.time.OffsetDateTime",
        "java.time.ZonedDateTime",
        "java.time.Instant",
        "java.time.Duration",
    }
)

BOOLEAN_TYPES = frozenset(
    {
        "boolean",
        "java.lang.Boolean",
        "java.util.concurrent.atomic.AtomicBoolean",
    }
)

VOID_TYPES = frozenset({"void", "java.lang.Void"})

MAP_TYPES = frozenset(
    {
        "java.util.Map",
        "java.util.HashMap",
        "java.util.LinkedHashMap",
        "java.util.TreeMap",
        "java.util.SortedMap",
        "java.util.NavigableMap",
        "java.util.Hashtable",
        "java.util.concurrent.ConcurrentMap",
        "java.util.concurrent.ConcurrentHashMap",
    }
)

LIST_TYPES = frozenset(
    {
        ARRAY,
        "java.lang.Iterable",
        "java.util.Collection",
        "java.util.List",
        "java.util.ArrayList",
        "java.util.LinkedList",
        "java.util.Set",
        "java.util.HashSet",
        "java.util.LinkedHashSet",
        "java.util.TreeSet",
        "java.util.SortedSet",
        "java.util.Queue",
        "java.util.Deque",
        "java.util.ArrayDeque",
        "java.util.concurrent.CopyOnWriteArrayList",
    }
)

WRAPPER_TYPES = frozenset(
    {
        "java.util.Optional",
        "java.util.concurrent.Future",
        "java.util.concurrent.CompletableFuture",
        "java.util.concurrent.CompletionStage",
        "java.util.concurrent.Callable",
        "java.lang.ref.WeakReference",
        "java.lang.ref.SoftReference",
        "org.springframework.http.HttpEntity",
        "org.springframework.http.ResponseEntity",
        "org.springframework.web.context.request.async.DeferredResult",
        "reactor.core.publisher.Mono",
    }
)

TUPLE_TYPES = frozenset(
    {
        "org.apache.commons.lang3.tuple.Pair",
        "org.apache.commons.lang3.tuple.ImmutablePair",
        "org.apache.commons.lang3.tuple.MutablePair",
        "org.apache.commons.lang3.tuple.Triple",
        "org.apache.commons.lang3.tuple.ImmutableTriple",
        "org.apache.commons.lang3.tuple.MutableTriple",
        "javafx.util.Pair",
    }
)

UNKNOWN_TYPES = frozenset(
    {
        "?",
        "java.lang.Object",
        "java.io.Serializable",
        "com.fasterxml.jackson.databind.JsonNode",
        "com.fasterxml.jackson.databind.node.ObjectNode",
        "com.fasterxml.jackson.databind.node.ArrayNode",
        "com.alibaba.fastjson.JSONObject",
        "com.alibaba.fastjson.JSONArray",
    }
)

# Parameters of these types are supplied by the server framework, never by callers.
INJECTED_TYPES = frozenset(
    {
        "javax.servlet.http.HttpServletRequest",
        "javax.servlet.http.HttpServletResponse",
        "javax.servlet.http.HttpSession",
        "jakarta.servlet.http.HttpServletRequest",
        "jakarta.servlet.http.HttpServletResponse",
        "jakarta.servlet.http.HttpSession",
        "java.security.Principal",
        "java.util.Locale",
        "org.springframework.ui.Model",
        "org.springframework.ui.ModelMap",
        "org.springframework.validation.BindingResult",
        "org.springframework.validation.Errors",
        "org.springframework.web.context.request.WebRequest",
    }
)


class TypeKind(Enum):
    """Classification of a canonical name, in the order the resolver checks them."""

    DECIMAL = "decimal"
    BIG_INTEGER = "big_integer"
    FILE_UPLOAD = "file_upload"
    WIDE_INTEGER = "wide_integer"
    NUMBER = "number"
    TEXT = "text"
    BOOLEAN = "boolean"
    VOID = "void"
    MAP = "map"
    LIST = "list"
    WRAPPER = "wrapper"
    TUPLE = "tuple"
    UNKNOWN = "unknown"
    DECLARED = "declared"


CLASSIFICATION: list[tuple[TypeKind, frozenset[str]]] = [
    (TypeKind.DECIMAL, frozenset({DECIMAL_TYPE})),
    (TypeKind.BIG_INTEGER, frozenset({BIG_INTEGER_TYPE})),
    (TypeKind.FILE_UPLOAD, frozenset({FILE_UPLOAD_TYPE})),
    (TypeKind.WIDE_INTEGER, WIDE_INTEGER_TYPES),
    (TypeKind.NUMBER, NUMBER_TYPES),
    (TypeKind.TEXT, TEXT_TYPES),
    (TypeKind.BOOLEAN, BOOLEAN_TYPES),
    (TypeKind.VOID, VOID_TYPES),
    (TypeKind.MAP, MAP_TYPES),
    (TypeKind.LIST, LIST_TYPES),
    (TypeKind.WRAPPER, WRAPPER_TYPES),
    (TypeKind.TUPLE, TUPLE_TYPES),
    (TypeKind.UNKNOWN, UNKNOWN_TYPES),
]

NUMERIC_KINDS = frozenset({TypeKind.NUMBER, TypeKind.WIDE_INTEGER, TypeKind.DECIMAL, TypeKind.BIG_INTEGER})


def classify_name(name: str) -> TypeKind:
    """Classify a canonical type name; anything unrecognised is a declared type."""
    for kind, names in CLASSIFICATION:
        if name in names:
            return kind
    return TypeKind.DECLARED


@dataclass(frozen=True)
class TypeRef:
    """One occurrence of a type anywhere in the input graph."""

    name: str
    parameters: tuple["TypeRef", ...] = ()
    is_generic_variable: bool = False
    lookup: Callable[[str], Any] | None = field(default=None, compare=False, repr=False)

    @property
    def kind(self) -> TypeKind:
        return classify_name(self.name)

    @property
    def declaration(self) -> Any:
        """The Class or Enum this reference names, if the build knows it."""
        if self.is_generic_variable or self.lookup is None:
            return None
        return self.lookup(self.name)

    def __str__(self) -> str:
        if self.name == ARRAY and self.parameters:
            return f"{self.parameters[0]}[]"
        if not self.parameters:
            return self.name
        return f"{self.name}<{', '.join(str(p) for p in self.parameters)}>"


TOKEN = re.compile(r"\s*(\[\]|[<>,?]|[^\s<>,\[\]?]+)")


class _TypeParser:
    """Recursive-descent parser for generic type strings such as ``Map<K, List<V>>``."""

    def __init__(
        self,
        text: str,
        type_variables: frozenset[str],
        lookup: Callable[[str], Any] | None,
    ) -> None:
        self.tokens = [m.group(1) for m in TOKEN.finditer(text)]
        self.pos = 0
        self.type_variables = type_variables
        self.lookup = lookup

    def peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self) -> str | None:
        token = self.peek()
        self.pos += 1
        return token

    def parse(self) -> TypeRef:
        token = self.take()
        if token is None:
            return TypeRef("?")
        if token == "?":
            # "? extends X" and "? super X" are both read as X
            if self.peek() in ("extends", "super"):
                self.take()
                ref = self.parse()
            else:
                ref = TypeRef("?")
            return ref
        parameters: list[TypeRef] = []
        if self.peek() == "<":
            self.take()
            while self.peek() not in (None, ">"):
                parameters.append(self.parse())
                if self.peek() == ",":
                    self.take()
            self.take()
        ref = TypeRef(
            name=token,
            parameters=tuple(parameters),
            is_generic_variable=token in self.type_variables and not parameters,
            lookup=self.lookup,
        )
        while self.peek() == ARRAY:
            self.take()
            ref = TypeRef(ARRAY, (ref,), lookup=self.lookup)
        return ref


def parse_type(
    text: Any,
    type_variables: frozenset[str] | set[str] = frozenset(),
    lookup: Callable[[str], Any] | None = None,
) -> TypeRef | None:
    """Parse a type string from the input graph; absent or blank input yields None."""
    if not isinstance(text, str) or not text.strip():
        return None
    return _TypeParser(text, frozenset(type_variables), lookup).parse()
