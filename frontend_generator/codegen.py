"""Render templates and write generated output.

Takes the context from context_builder and produces the types module
(<name>-types.d.ts) and the implementation module (<name>.ts or
<name>.mjs).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jinja2

from .context_builder import build_context
from .dialects import get_dialect
from .schema_parser import js_string

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


@dataclass(frozen=True)
class GeneratedClient:
    implementation: str
    types: str | None = None
    language: str = "ts"
    operation_count: int = 0


def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["js_string"] = js_string
    return env


def render_types(context: dict[str, Any]) -> str:
    """Render the TypeScript declarations module."""
    return _environment().get_template("types.d.ts.j2").render(**context)


def render_implementation(context: dict[str, Any], language: str) -> str:
    """Render the runtime module in the requested dialect."""
    dialect = get_dialect(language, context["name"], context["client_name"])
    template = _environment().get_template("implementation.j2")
    return template.render(dialect=dialect, **context)


def generate(
    spec: dict[str, Any],
    *,
    name: str,
    language: str = "ts",
    full_response: bool = False,
    include_types: bool | None = None,
    strict: bool = False,
) -> GeneratedClient:
    """Generate the frontend client modules for an OpenAPI document.

    ``include_types`` defaults to what the dialect emits: always for
    TypeScript, never for JavaScript.
    """
    dialect = get_dialect(language, name, "")
    context = build_context(spec, name, full_response=full_response, strict=strict)

    if include_types is None:
        include_types = dialect.emits_types

    types = render_types(context) if include_types else None
    implementation = render_implementation(context, language)
    logger.debug("Rendered %d operations as %s", context["operation_count"], language)

    return GeneratedClient(
        implementation=implementation,
        types=types,
        language=language,
        operation_count=context["operation_count"],
    )


def write_client(client: GeneratedClient, output_dir: Path, name: str) -> list[Path]:
    """Write the generated modules and return their paths."""
    dialect = get_dialect(client.language, name, "")
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    if client.types is not None:
        types_path = output_dir / f"{name}-types.d.ts"
        types_path.write_text(client.types, encoding="utf-8")
        written.append(types_path)

    implementation_path = output_dir / f"{name}.{dialect.extension}"
    implementation_path.write_text(client.implementation, encoding="utf-8")
    written.append(implementation_path)

    for path in written:
        logger.debug("Wrote %s", path)
    return written
