"""Jinja2 environment shared by the descriptor and shim synthesizers.

Templates live in ``synth/templates/``. Rendering must be pure: the context
holds only frozen models and plain strings, templates never read the clock
or the environment, and dict-valued inputs are iterated in insertion order.
Together this guarantees byte-identical output for identical inputs.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``synth/templates/``)."""

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(name: str) -> str:
    """Convert ``GraphServiceClient`` into ``graph_service_client``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def quote(value: Any) -> str:  # noqa: ANN401
    """Render *value* as a double-quoted string literal.

    JSON string escaping is valid for TOML basic strings, C# regular string
    literals and Python string literals alike.
    """
    return json.dumps(str(value), ensure_ascii=False)


def create_env() -> Environment:
    """Create the Jinja2 environment for artifact templates.

    Autoescape is enabled only for ``.csproj.j2`` (XML) templates. Undefined
    variables raise instead of rendering as empty strings so a template
    typo cannot silently produce a broken artifact.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(enabled_extensions=("csproj.j2",), default=False),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["snake_case"] = snake_case
    env.filters["quote"] = quote
    return env


def render(template_name: str, context: dict[str, Any]) -> str:
    """Render *template_name* with *context* and normalise line endings to ``\\n``."""
    text = create_env().get_template(template_name).render(**context)
    return text.replace("\r\n", "\n")
