"""Shared machinery of the target emitters."""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from jinja2 import Environment

from ..models import Parameter, Route
from ..naming import UniqueNamer
from ..rendering import create_jinja_environment, render_template
from ..resolver import TypeGrammar, TypeResolver
from ..root import Root
from ..types import TypeRef
from ..utils import fix_identifier
from ..writer import LINE_BREAK, LineWriter


@dataclass(frozen=True)
class EmitterOptions:
    """Target-facing settings of one build."""

    base: str = ""
    no_head: bool = False
    runtime_pkg_name: str | None = None


class ParameterMode(Enum):
    """How a parameter appears in a stub signature."""

    REQUIRED = "required"
    NULLABLE = "nullable"  # must be passed, but may be null
    OPTIONAL = "optional"


def arrange_parameters(parameters: tuple[Parameter, ...]) -> list[tuple[Parameter, ParameterMode]]:
    """
    Assign a signature mode to each parameter without reordering them.

    Some target grammars reject an optional parameter before a required one,
    so every optional parameter to the left of the last required parameter
    becomes required-but-nullable.
    """
    arranged: list[tuple[Parameter, ParameterMode]] = []
    seen_required = False
    for parameter in reversed(parameters):
        if parameter.required:
            seen_required = True
            mode = ParameterMode.REQUIRED
        elif seen_required:
            mode = ParameterMode.NULLABLE
        else:
            mode = ParameterMode.OPTIONAL
        arranged.append((parameter, mode))
    arranged.reverse()
    return arranged


class Emitter:
    """Walks a Root and drives a LineWriter to produce one target's text."""

    target: ClassVar[str] = ""
    unique_name_separator: ClassVar[str] = "$"
    default_runtime_pkg_name: ClassVar[str] = ""
    # Words that cannot name a module or parameter in the target grammar.
    reserved_words: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, root: Root, options: EmitterOptions) -> None:
        self.root = root
        self.options = options
        self.writer = LineWriter()
        self.resolver = TypeResolver(root.common_defs, self.create_grammar())

    def create_grammar(self) -> TypeGrammar:
        return TypeGrammar()

    @property
    def runtime_pkg_name(self) -> str:
        return self.options.runtime_pkg_name or self.default_runtime_pkg_name

    def t2s(self, ref: TypeRef | None, nested: bool = False) -> str:
        return self.resolver.resolve(ref, nested)

    def write(self, *texts: str | None) -> None:
        self.writer.write(*texts)

    def parameter_names(self, route: Route) -> list[str]:
        """Target identifiers of the exposed parameters, distinct within the route."""
        names = UniqueNamer(self.unique_name_separator)
        return [names.take(fix_identifier(p.name, self.reserved_words)) for p in route.exposed_parameters]

    def amend_memo(self, memo: str) -> None:
        """Append a memo as a trailing line comment of the last written line."""
        if not memo:
            return
        text = LINE_BREAK.sub(" ", memo.strip())
        self.writer.amend(lambda line: f"{line} // {text}")

    def write_template(self, env: Environment, template_name: str, **context: object) -> None:
        self.write(render_template(env, template_name, **context))

    def jinja_environment(self) -> Environment:
        return create_jinja_environment()

    def emit(self) -> str:
        raise NotImplementedError
