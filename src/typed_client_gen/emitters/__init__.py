"""Target emitters, keyed by target id."""

from .base import Emitter, EmitterOptions, ParameterMode, arrange_parameters
from .oc import ObjcEmitter
from .raw import RawEmitter
from .ts import TsEmitter

EMITTERS: dict[str, type[Emitter]] = {
    TsEmitter.target: TsEmitter,
    ObjcEmitter.target: ObjcEmitter,
    RawEmitter.target: RawEmitter,
}

__all__ = [
    "EMITTERS",
    "Emitter",
    "EmitterOptions",
    "ObjcEmitter",
    "ParameterMode",
    "RawEmitter",
    "TsEmitter",
    "arrange_parameters",
]
