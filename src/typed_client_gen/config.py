"""Configuration loading for the client code generator."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast
from urllib.parse import urlparse

import yaml

from .emitters import EMITTERS
from .errors import InvalidTargetError, InvalidUrlError, MissingFieldError


@dataclass(frozen=True)
class TargetConfig:
    """One build requested by a configuration file or the command line."""

    target: str
    url: str
    input: Path
    output: Path | None = None
    apis: tuple[str, ...] | None = None
    no_head: bool = False
    runtime_pkg_name: str | None = None


def load_config(config_path: Path) -> dict[str, Any]:
    """Load the generator configuration file."""
    with open(config_path) as f:
        return cast(dict[str, Any], yaml.safe_load(f) or {})


def load_definitions(input_path: Path) -> dict[str, Any]:
    """Load a raw input graph; JSON input is read as YAML."""
    with open(input_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise MissingFieldError("routes", f"{input_path} does not contain a mapping")
    return cast(dict[str, Any], data)


def parse_apis(value: Any) -> tuple[str, ...] | None:
    """Accept a list of names or a comma-separated string."""
    if value is None:
        return None
    if isinstance(value, str):
        return tuple(v.strip() for v in value.split(",") if v.strip())
    return tuple(str(v) for v in value)


def validate_url(url: Any) -> str:
    """Return ``url`` as a string when it is an absolute http(s) URL."""
    text = str(url)
    parsed = urlparse(text)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidUrlError(url)
    return text


def parse_target_config(entry: dict[str, Any], path: str, base_dir: Path) -> TargetConfig:
    """Validate one ``targets`` entry of a configuration file."""
    for key in ("target", "url", "input"):
        if not entry.get(key):
            raise MissingFieldError(f"{path}.{key}")
    if entry["target"] not in EMITTERS:
        raise InvalidTargetError(entry["target"], sorted(EMITTERS))
    output = entry.get("output")
    return TargetConfig(
        target=entry["target"],
        url=validate_url(entry["url"]),
        input=base_dir / entry["input"],
        output=base_dir / output if output else None,
        apis=parse_apis(entry.get("apis")),
        no_head=bool(entry.get("no_head", False)),
        runtime_pkg_name=entry.get("runtime_pkg_name"),
    )


def load_target_configs(config_path: Path) -> list[TargetConfig]:
    """Load every build listed under ``targets`` in a configuration file.

    Relative ``input`` and ``output`` paths are taken relative to the file.
    """
    config = load_config(config_path)
    targets = config.get("targets") if isinstance(config, dict) else None
    if not isinstance(targets, list) or not targets:
        raise MissingFieldError("targets")
    return [
        parse_target_config(entry if isinstance(entry, dict) else {}, f"targets[{index}]", config_path.parent)
        for index, entry in enumerate(targets)
    ]
