"""Utility functions for the client code generator."""

import re
from typing import Any

IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def to_lower_camel(name: str) -> str:
    """Convert a PascalCase, snake_case or dashed name to lowerCamelCase."""
    parts = [p for p in re.split(r"[^A-Za-z0-9]+", name) if p]
    if not parts:
        return ""
    head, *tail = parts
    return head[0].lower() + head[1:] + "".join(p[0].upper() + p[1:] for p in tail)


def to_upper_camel(name: str) -> str:
    """Convert a name to UpperCamelCase."""
    lower = to_lower_camel(name)
    return lower[:1].upper() + lower[1:]


def simple_name(qualified_name: str) -> str:
    """Strip the package and any enclosing class: ``a.b.Outer$Inner`` -> ``Inner``."""
    return re.split(r"[.$]", qualified_name)[-1]


def fix_identifier(name: str, reserved: frozenset[str] = frozenset()) -> str:
    """Make a name usable as an identifier of the target grammar."""
    name = re.sub(r"[^A-Za-z0-9_$]", "_", name)
    if not name or name[0].isdigit() or name in reserved:
        name = f"_{name}"
    return name


def escape_single_quoted(value: str | int | float | bool) -> str:
    """Render a value as a single-quoted string literal (numbers and booleans stay bare).

    Quotes, backslashes and line breaks are written as ``\\xNN`` escapes.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if not isinstance(value, str):
        raise TypeError(f"Cannot render {type(value).__name__} as a literal")
    escaped = re.sub(r"['\\\r\n]", lambda m: f"\\x{ord(m.group()):02x}", value)
    return f"'{escaped}'"


def escape_objc_string(value: Any) -> str:
    """Render a value as an Objective-C ``NSString`` literal."""
    text = str(value)
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\r", "\\r").replace("\n", "\\n")
    return f'@"{escaped}"'
