"""Raw target: the resolved semantic model as pretty-printed JSON."""

import json
from typing import Any

from ..models import Class, Enum, Module, Parameter, Route
from ..types import TypeRef
from .base import Emitter


def _type(ref: TypeRef | None) -> str | None:
    return None if ref is None else str(ref)


def _parameter(parameter: Parameter) -> dict[str, Any]:
    return {
        "name": parameter.name,
        "type": _type(parameter.type),
        "required": parameter.required,
        "description": parameter.description,
        "actions": [[action.method, *action.args] for action in parameter.actions],
    }


def _route(route: Route) -> dict[str, Any]:
    return {
        "bean": route.bean,
        "name": route.name,
        "uniqName": route.uniq_name,
        "method": route.method,
        "pattern": route.pattern,
        "mapped": route.mapped,
        "requestContentType": route.request_content_type,
        "description": route.description,
        "returnType": _type(route.return_type),
        "parameters": [_parameter(p) for p in route.parameters],
    }


def _module(module: Module) -> dict[str, Any]:
    return {
        "name": module.name,
        "displayName": module.display_name,
        "identifier": module.identifier,
        "routes": [_route(r) for r in module.routes],
    }


def _class(clz: Class) -> dict[str, Any]:
    return {
        "name": clz.name,
        "simpleName": clz.simple_name,
        "typeParameters": list(clz.type_parameters),
        "superclass": _type(clz.superclass),
        "description": clz.description,
        "members": [
            {"name": m.name, "type": _type(m.type), "optional": m.optional, "description": m.description}
            for m in clz.members
        ],
    }


def _enum(enum: Enum) -> dict[str, Any]:
    return {
        "name": enum.name,
        "simpleName": enum.simple_name,
        "valueType": enum.value_type,
        "description": enum.description,
        "constants": [
            {"name": c.name, "value": c.raw_value, "description": c.description, "memo": c.memo}
            for c in enum.constants
        ],
    }


class RawEmitter(Emitter):
    """Dumps modules, declarations and enums without any target grammar."""

    target = "raw"

    def emit(self) -> str:
        document = {
            "base": self.options.base,
            "modules": [_module(m) for m in self.root.modules],
            "classes": [_class(c) for c in self.root.declaration_list],
            "enums": [_enum(e) for e in self.root.enum_list],
        }
        self.write(json.dumps(document, indent=2, ensure_ascii=False, default=str))
        return self.writer.render()
