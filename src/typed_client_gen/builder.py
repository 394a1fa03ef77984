"""Orchestration of one build: raw graph -> semantic model -> target text."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .annotations import BindingKind
from .emitters import EMITTERS, EmitterOptions
from .errors import InvalidTargetError
from .root import Root, RootOptions


@dataclass(frozen=True)
class BuildOptions:
    """Optional settings of a build."""

    no_head: bool = False
    runtime_pkg_name: str | None = None
    apis: tuple[str, ...] | None = None
    default_bindings: Mapping[str, tuple[BindingKind, BindingKind]] | None = None


@dataclass(frozen=True)
class BuildResult:
    """Generated code of one build."""

    target: str
    code: str


class Builder:
    """
    Builds client code for one target.

    Construction does all the work; ``root`` and ``code`` hold the results.
    """

    def __init__(self, target: str, base: str, raw: Mapping[str, Any], options: BuildOptions | None = None) -> None:
        emitter_cls = EMITTERS.get(target) if isinstance(target, str) else None
        if emitter_cls is None:
            raise InvalidTargetError(target, sorted(EMITTERS))
        options = options or BuildOptions()
        self.target = target
        self.root = Root(
            raw,
            RootOptions(
                unique_name_separator=emitter_cls.unique_name_separator,
                reserved_words=emitter_cls.reserved_words,
                apis=options.apis,
                default_bindings=options.default_bindings,
            ),
        )
        emitter = emitter_cls(
            self.root,
            EmitterOptions(base=base, no_head=options.no_head, runtime_pkg_name=options.runtime_pkg_name),
        )
        self.code = emitter.emit()


def build(target: str, base: str, raw: Mapping[str, Any], options: BuildOptions | None = None) -> BuildResult:
    """Build client code for ``target`` from a raw input graph."""
    builder = Builder(target, base, raw, options)
    return BuildResult(target=target, code=builder.code)
