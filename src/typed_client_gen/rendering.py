"""Template rendering for the client code generator."""

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .utils import escape_objc_string, escape_single_quoted

TEMPLATES_DIR = Path(__file__).parent / "templates"


def create_jinja_environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    """Create and configure a Jinja2 environment."""
    env = Environment(
        loader=FileSystemLoader(templates_dir),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["ss"] = escape_single_quoted
    env.filters["objc_string"] = escape_objc_string
    return env


def render_template(env: Environment, template_name: str, **context: Any) -> str:
    """Render a template, dropping the trailing newline so the result can go straight to a LineWriter."""
    template = env.get_template(template_name)
    return str(template.render(**context)).rstrip("\n")
