"""Resolution of type references into target type expressions."""

import logging
from collections.abc import Iterator

from .models import Class, Declaration, Enum
from .types import NUMERIC_KINDS, TypeKind, TypeRef

logger = logging.getLogger(__name__)

SPECIAL_KINDS = (TypeKind.DECIMAL, TypeKind.BIG_INTEGER, TypeKind.FILE_UPLOAD, TypeKind.WIDE_INTEGER)
PRIMITIVE_KINDS = (TypeKind.NUMBER, TypeKind.TEXT, TypeKind.BOOLEAN)


class AliasRegistry:
    """Auxiliary type aliases needed by one build's output, in first-registration order."""

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def upsert(self, alias: str, underlying: str) -> str:
        """Register ``alias`` once; later registrations of the same alias are no-ops."""
        self._entries.setdefault(alias, underlying)
        return alias

    def get(self, alias: str) -> str | None:
        return self._entries.get(alias)

    def items(self) -> list[tuple[str, str]]:
        return list(self._entries.items())

    def __contains__(self, alias: object) -> bool:
        return alias in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class TypeGrammar:
    """Surface syntax of type expressions for the TypeScript-like target."""

    unknown = "unknown"
    property_key = "PropertyKey"

    primitives: dict[TypeKind, str] = {
        TypeKind.NUMBER: "number",
        TypeKind.TEXT: "string",
        TypeKind.BOOLEAN: "boolean",
    }

    # kind -> (alias, underlying); an alias of None means "use the underlying type directly"
    specials: dict[TypeKind, tuple[str | None, str]] = {
        TypeKind.DECIMAL: ("BigDecimal", "string | number"),
        TypeKind.BIG_INTEGER: ("BigInteger", "string | number"),
        TypeKind.FILE_UPLOAD: ("MultipartFile", "Blob | File | string"),
        TypeKind.WIDE_INTEGER: ("Long", "string | number"),
    }

    optional_alias: tuple[str, str] | None = ("Optional<T>", "T | null")

    def void(self, nested: bool) -> str:
        return "void"

    def map_of(self, key: str, value: str) -> str:
        return f"Record<{key}, {value}>"

    def list_of(self, item: str) -> str:
        return f"{item}[]"

    def optional_of(self, item: str) -> str:
        return f"Optional<{item}>"

    def tuple_of(self, items: list[str]) -> str:
        return f"[ {', '.join(items)} ]"

    def generic(self, declaration: Class, arguments: list[str]) -> str:
        return f"{declaration.simple_name}<{', '.join(arguments)}>"

    def declared(self, declaration: Declaration) -> str:
        return declaration.simple_name


class TypeResolver:
    """Turns type references into target type expressions.

    Resolution never fails: anything that cannot be classified or found
    resolves to the grammar's unknown type.
    """

    def __init__(self, registry: AliasRegistry, grammar: TypeGrammar | None = None) -> None:
        self.registry = registry
        self.grammar = grammar or TypeGrammar()

    def resolve(self, ref: TypeRef | None, nested: bool = False) -> str:
        g = self.grammar
        if ref is None:
            return g.unknown
        if ref.is_generic_variable:
            return ref.name

        kind = ref.kind
        args = ref.parameters
        if kind in SPECIAL_KINDS:
            alias, underlying = g.specials[kind]
            if alias is None:
                return underlying
            return self.registry.upsert(alias, underlying)
        if kind in PRIMITIVE_KINDS:
            return g.primitives[kind]
        if kind is TypeKind.VOID:
            return g.void(nested)
        if kind is TypeKind.MAP:
            key = args[0] if args else None
            value = args[1] if len(args) > 1 else None
            key_repr = self.resolve(key, True) if self.is_key_type(key) else g.property_key
            return g.map_of(key_repr, self.resolve(value, True))
        if kind is TypeKind.LIST:
            return g.list_of(self.resolve(args[0] if args else None, True))
        if kind is TypeKind.WRAPPER:
            if not args:
                return g.unknown
            if g.optional_alias is not None:
                self.registry.upsert(*g.optional_alias)
            return g.optional_of(self.resolve(args[0], True))
        if kind is TypeKind.TUPLE:
            return g.tuple_of([self.resolve(arg, True) for arg in args])
        if kind is TypeKind.UNKNOWN:
            return g.unknown

        declaration = ref.declaration
        if declaration is None:
            logger.debug("Unresolved type reference %s", ref.name)
            return g.unknown
        if isinstance(declaration, Class) and declaration.type_parameters:
            arguments = [
                self.resolve(args[i] if i < len(args) else None, True)
                for i in range(len(declaration.type_parameters))
            ]
            return g.generic(declaration, arguments)
        return g.declared(declaration)

    @staticmethod
    def is_key_type(ref: TypeRef | None) -> bool:
        """Map keys keep their own type only when textual, numeric or an enum."""
        if ref is None or ref.is_generic_variable:
            return False
        kind = ref.kind
        if kind in NUMERIC_KINDS or kind is TypeKind.TEXT:
            return True
        return kind is TypeKind.DECLARED and isinstance(ref.declaration, Enum)
