"""Typed API client code generator."""

from .builder import Builder, BuildOptions, BuildResult, build
from .cli import main
from .errors import GeneratorError, InvalidTargetError, InvalidUrlError, MissingFieldError, MisuseError
from .root import Root
from .writer import LineWriter

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "main",
    "build",
    "Builder",
    "BuildOptions",
    "BuildResult",
    "GeneratorError",
    "InvalidTargetError",
    "InvalidUrlError",
    "LineWriter",
    "MissingFieldError",
    "MisuseError",
    "Root",
]
