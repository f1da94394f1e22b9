"""Route parameters and render OpenAPI schemas as TypeScript shapes.

Handles:
- Query/header parameter routing (path params go through the URL template)
- Path template substitution ({id} -> ${request['id']})
- Primitive, enum, array, object and map schemas
- oneOf/anyOf unions, allOf intersections
- nullable and OpenAPI 3.1 type lists
- $ref -> named shared declaration (looked up once, never chased)
- readOnly field exclusion from request bodies
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from .loader import get_schemas
from .naming import is_identifier, pascal_case
from .responses import content_type_of, decode_method_for, is_json_content_type

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")

_SCHEMA_PREFIX = "#/components/schemas/"

_PRIMITIVES: dict[str, str] = {
    "string": "string",
    "integer": "number",
    "number": "number",
    "boolean": "boolean",
    "null": "null",
}

_REQUEST_LOCATIONS = ("path", "query", "header")


def js_string(value: str) -> str:
    """Quote a value as a single-quoted JavaScript string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


def _literal(value: Any) -> str:
    if isinstance(value, str):
        return js_string(value)
    return json.dumps(value)


# ---------------------------------------------------------------------------
# Parameter routing
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParameterRoutes:
    query: tuple[str, ...] = ()
    header: tuple[str, ...] = ()

    @property
    def consumed(self) -> tuple[str, ...]:
        """Request fields that must not be sent in the JSON body."""
        return self.query + self.header


def route_parameters(parameters: Any) -> ParameterRoutes:
    """Split declared parameters into query and header names, in source order."""
    query: list[str] = []
    header: list[str] = []
    for param in parameters or ():
        if not isinstance(param, dict) or "name" not in param:
            continue
        location = param.get("in")
        if location == "query":
            query.append(param["name"])
        elif location == "header":
            header.append(param["name"])
    return ParameterRoutes(query=tuple(query), header=tuple(header))


def path_placeholders(path: str) -> list[str]:
    """Names of the {placeholders} in a path template."""
    return _PLACEHOLDER.findall(path)


def _template_text(text: str) -> str:
    """Escape literal text for a JavaScript template literal."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def path_to_template(path: str) -> str:
    """Turn /orgs/{orgId} into the template literal body /orgs/${request['orgId']}."""
    parts = _PLACEHOLDER.split(path)
    return "".join(
        "${request[" + js_string(part) + "]}" if i % 2 else _template_text(part)
        for i, part in enumerate(parts)
    )


# ---------------------------------------------------------------------------
# Shape rendering
# ---------------------------------------------------------------------------

def _field(name: str, type_: str, required: bool) -> dict[str, Any]:
    return {"name": name, "type": type_, "required": required}


class ShapeRenderer:
    """Render schemas to TypeScript type expressions.

    Named shapes reached through ``$ref`` are declared once in
    ``declarations``, which the types template emits ahead of the
    per-operation shapes.
    """

    def __init__(self, spec: dict[str, Any]):
        self.schemas = get_schemas(spec)
        self.declarations: list[dict[str, Any]] = []
        self._declared: set[str] = set()

    def render(self, schema: Any) -> str:
        """Return the TypeScript type expression for a schema."""
        if not isinstance(schema, dict) or not schema:
            return "unknown"

        rendered = self._render(schema)
        if schema.get("nullable") and rendered not in ("null", "unknown"):
            rendered = f"{rendered} | null"
        return rendered

    def _render(self, schema: dict[str, Any]) -> str:
        if "$ref" in schema:
            return self.reference(schema["$ref"])

        if "enum" in schema:
            values = schema["enum"] or []
            return " | ".join(_literal(v) for v in values) or "never"

        if "const" in schema:
            return _literal(schema["const"])

        for key in ("oneOf", "anyOf"):
            if key in schema:
                return self._combine(schema[key], " | ")

        if "allOf" in schema:
            return self._combine(schema["allOf"], " & ")

        schema_type = schema.get("type")
        if isinstance(schema_type, list):
            return " | ".join(self._render({**schema, "type": t}) for t in schema_type) or "unknown"

        if schema_type in _PRIMITIVES:
            return _PRIMITIVES[schema_type]

        if schema_type == "array":
            return f"Array<{self.render(schema.get('items'))}>"

        if schema_type == "object" or "properties" in schema:
            return self._render_object(schema)

        return "unknown"

    def _combine(self, schemas: Any, separator: str) -> str:
        parts = []
        for sub in schemas or ():
            rendered = self.render(sub)
            if " " in rendered and not rendered.startswith("{"):
                rendered = f"({rendered})"
            if rendered not in parts:
                parts.append(rendered)
        return separator.join(parts) or "unknown"

    def _render_object(self, schema: dict[str, Any]) -> str:
        properties = schema.get("properties") or {}
        additional = schema.get("additionalProperties")

        if not properties:
            if isinstance(additional, dict) and additional:
                return f"Record<string, {self.render(additional)}>"
            return "Record<string, unknown>"

        members = "; ".join(
            f"{js_string(f['name'])}{'' if f['required'] else '?'}: {f['type']}"
            for f in self.object_fields(schema)
        )
        return "{ " + members + " }"

    def object_fields(self, schema: dict[str, Any], skip_read_only: bool = False) -> list[dict[str, Any]]:
        """Fields of an object schema, in declaration order."""
        required = set(schema.get("required") or ())
        fields = []
        for name, prop in (schema.get("properties") or {}).items():
            if skip_read_only and isinstance(prop, dict) and prop.get("readOnly"):
                continue
            fields.append(_field(name, self.render(prop), name in required))
        return fields

    def component(self, ref: str) -> dict[str, Any] | None:
        """Look up a component schema by reference, without following further refs."""
        if not ref.startswith(_SCHEMA_PREFIX):
            return None
        found = self.schemas.get(ref[len(_SCHEMA_PREFIX):])
        return found if isinstance(found, dict) else None

    def reference(self, ref: str) -> str:
        """Return the declared name for a $ref, declaring it on first use."""
        raw_name = ref.rsplit("/", 1)[-1]
        name = raw_name if is_identifier(raw_name) else pascal_case(raw_name) or "Unnamed"
        if name in self._declared:
            return name
        self._declared.add(name)

        schema = self.component(ref)
        if schema is not None and schema.get("properties") and "$ref" not in schema:
            declaration = {
                "kind": "interface",
                "name": name,
                "extends": [],
                "fields": self.object_fields(schema),
            }
        else:
            declaration = {
                "kind": "type",
                "name": name,
                "type": self.render(schema) if schema is not None else "unknown",
            }
        self.declarations.append(declaration)
        return name

    # -----------------------------------------------------------------------
    # Operation shapes
    # -----------------------------------------------------------------------

    def request_shape(self, name: str, parameters: Any, request_body: Any) -> dict[str, Any]:
        """Interface declaration for an operation's request payload.

        Object bodies are merged into the request without their readOnly
        fields, whether inline or referenced. Any other JSON body travels
        as a single ``body`` field, and ``body_field`` tells the
        implementation to send that field alone.
        """
        fields: list[dict[str, Any]] = []
        extends: list[str] = []
        seen: set[str] = set()
        body_field = False

        for param in parameters or ():
            if not isinstance(param, dict) or param.get("in") not in _REQUEST_LOCATIONS:
                continue
            param_name = param.get("name")
            if not param_name or param_name in seen:
                continue
            seen.add(param_name)
            required = param.get("in") == "path" or bool(param.get("required", False))
            fields.append(_field(param_name, self.render(param.get("schema")), required))

        body_schema = _json_body_schema(request_body)
        if body_schema:
            ref = body_schema.get("$ref")
            component = self.component(ref) if ref else None
            if component is not None and (
                component.get("type") == "object" or "properties" in component
            ):
                base = self.reference(ref)
                read_only = _read_only_names(component)
                if read_only:
                    base = f"Omit<{base}, {' | '.join(js_string(n) for n in read_only)}>"
                extends.append(base)
            elif not ref and body_schema.get("properties"):
                for field in self.object_fields(body_schema, skip_read_only=True):
                    if field["name"] not in seen:
                        seen.add(field["name"])
                        fields.append(field)
            else:
                body_required = bool(request_body.get("required", False))
                fields.append(_field("body", self.render(body_schema), body_required))
                body_field = True

        return {
            "kind": "interface",
            "name": name,
            "extends": extends,
            "fields": fields,
            "body_field": body_field,
        }

    def response_body_type(self, response: Any) -> str:
        """Type of a response body once decoded by the generated client."""
        content_type = content_type_of(response)
        method = decode_method_for(content_type)
        if method == "json":
            media = response["content"][content_type]
            return self.render(media.get("schema") if isinstance(media, dict) else None)
        if method == "text":
            return "string"
        if method == "blob":
            return "Blob"
        return "unknown"


def _read_only_names(schema: dict[str, Any]) -> list[str]:
    return [
        name for name, prop in (schema.get("properties") or {}).items()
        if isinstance(prop, dict) and prop.get("readOnly")
    ]


def _json_body_schema(request_body: Any) -> dict[str, Any] | None:
    if not isinstance(request_body, dict):
        return None
    content = request_body.get("content")
    if not isinstance(content, dict):
        return None
    for content_type, media in content.items():
        if is_json_content_type(content_type) and isinstance(media, dict):
            schema = media.get("schema")
            return schema if isinstance(schema, dict) else None
    return None
