"""Data models for the resolved semantic graph."""

from dataclasses import dataclass, field
from enum import Enum as PyEnum
from typing import Any, Union

from .types import TypeRef


class ActionKind(PyEnum):
    """How a parameter value attaches to the outgoing request.

    The value is the runtime method the generated stub calls.
    """

    QUERY = "addRequestParam"
    PATH = "addPathVariable"
    HEADER = "addRequestHeader"
    COOKIE = "addRequestCookie"
    BODY = "addRequestBody"
    FORM = "addModelAttribute"
    FILE = "addMultipartFile"


@dataclass(frozen=True)
class Annotation:
    """A framework annotation record attached to a route, parameter or declaration."""

    type: str
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Action:
    """One request-attachment instruction."""

    kind: ActionKind
    args: tuple[str, ...] = ()

    @property
    def method(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class Parameter:
    """One route argument."""

    name: str
    type: TypeRef | None
    required: bool
    actions: tuple[Action, ...] = ()
    description: str = ""


@dataclass(frozen=True)
class Route:
    """One backend operation."""

    bean: str
    name: str
    uniq_name: str
    method: str
    pattern: str
    parameters: tuple[Parameter, ...]
    return_type: TypeRef | None
    description: str = ""
    request_content_type: str | None = None
    mapped: bool = True  # False when no mapping annotation matched

    @property
    def exposed_parameters(self) -> tuple[Parameter, ...]:
        """Parameters callers supply, i.e. those with at least one action."""
        return tuple(p for p in self.parameters if p.actions)


@dataclass(frozen=True)
class Module:
    """Routes sharing one backend interface."""

    name: str  # qualified bean name
    display_name: str  # "FooController"
    identifier: str  # "fooController"
    routes: tuple[Route, ...]


@dataclass(frozen=True)
class Member:
    """A field of a user-defined class."""

    name: str
    type: TypeRef | None
    optional: bool = True
    description: str = ""


@dataclass(frozen=True)
class Class:
    """A user-defined structured type."""

    name: str
    simple_name: str
    type_parameters: tuple[str, ...] = ()
    superclass: TypeRef | None = None
    members: tuple[Member, ...] = ()
    description: str = ""
    annotations: tuple[Annotation, ...] = ()

    @property
    def def_name(self) -> str:
        """Simple name with its type parameter list, e.g. ``Page<T>``."""
        if not self.type_parameters:
            return self.simple_name
        return f"{self.simple_name}<{', '.join(self.type_parameters)}>"


@dataclass(frozen=True)
class EnumConstant:
    """One enum member."""

    name: str
    raw_value: Any
    description: str = ""
    memo: str = ""

    @property
    def value(self) -> str | int | float:
        """The literal emitted for this constant; falls back to the name."""
        if isinstance(self.raw_value, (str, int, float)) and not isinstance(self.raw_value, bool):
            return self.raw_value
        return self.name


@dataclass(frozen=True)
class Enum:
    """A user-defined enumerated type."""

    name: str
    simple_name: str
    constants: tuple[EnumConstant, ...] = ()
    value_type: str = "unknown"  # "string", "number" or "unknown"
    description: str = ""
    annotations: tuple[Annotation, ...] = ()


Declaration = Union[Class, Enum]
