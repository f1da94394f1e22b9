"""Derive identifiers for generated code from OpenAPI operations.

Operation ids:
  - declared operationId kept when it is already a JS identifier
  - otherwise camel-cased (list-movies -> listMovies)
  - missing operationId -> {method}{PascalPathSegments}

Examples:
  GET    /movies                    -> getMovies
  GET    /movies/{id}               -> getMoviesId
  DELETE /orgs/{orgId}/members      -> deleteOrgsOrgIdMembers
  GET    /user-profiles             -> getUserProfiles

Collisions are resolved by prefixing the method, then by a counter:
  getMovies, getGetMovies, getGetMovies1, ...

Type names derived from an id:
  getMovies -> GetMoviesRequest / GetMoviesResponses / _getMovies
"""

from __future__ import annotations

import re
from http import HTTPStatus
from typing import Any

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def _split_words(text: str) -> list[str]:
    """Split text on separators and camelCase/PascalCase boundaries."""
    text = re.sub(r"[^A-Za-z0-9]+", " ", text)
    text = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1 \2", text)
    text = re.sub(r"([a-z\d])([A-Z])", r"\1 \2", text)
    return text.split()


def capitalize(text: str) -> str:
    """Upper-case the first character, leave the rest untouched."""
    return text[:1].upper() + text[1:]


def camel_case(text: str) -> str:
    """Convert kebab, snake, dotted or PascalCase text to camelCase."""
    words = [w.lower() for w in _split_words(text)]
    if not words:
        return ""
    return words[0] + "".join(capitalize(w) for w in words[1:])


def pascal_case(text: str) -> str:
    """Convert arbitrary text to PascalCase."""
    return capitalize(camel_case(text))


def is_identifier(name: str) -> bool:
    """Check if a name is usable as a bare JavaScript identifier."""
    return bool(_IDENTIFIER.match(name))


def _sanitize_operation_id(operation_id: str) -> str:
    if is_identifier(operation_id):
        return operation_id
    name = camel_case(operation_id)
    if not name or name[0].isdigit():
        name = "op" + capitalize(name)
    return name


def _derive_operation_id(method: str, path: str) -> str:
    """Build an id from the method and path segments."""
    segments = []
    for segment in path.split("/"):
        if not segment:
            continue
        if segment.startswith("{") and segment.endswith("}"):
            segment = segment[1:-1]
        segments.append(pascal_case(segment))
    return method.lower() + ("".join(segments) or "Root")


def generate_operation_id(
    path: str,
    method: str,
    operation: dict[str, Any],
    seen: list[str],
) -> str:
    """Return an operation id unique within ``seen`` and record it there."""
    declared = operation.get("operationId") if isinstance(operation, dict) else None
    if declared:
        base = _sanitize_operation_id(str(declared))
    else:
        base = _derive_operation_id(method, path)

    candidate = base
    counter = 0
    while candidate in seen:
        if counter == 0:
            candidate = f"{method.lower()}{capitalize(base)}"
        else:
            candidate = f"{method.lower()}{capitalize(base)}{counter}"
        counter += 1

    seen.append(candidate)
    return candidate


def type_prefix(operation_id: str) -> str:
    return capitalize(camel_case(operation_id))


def request_type_name(operation_id: str) -> str:
    return type_prefix(operation_id) + "Request"


def response_type_name(operation_id: str) -> str:
    return type_prefix(operation_id) + "Responses"


def private_function_name(operation_id: str) -> str:
    return "_" + operation_id


def client_type_name(name: str) -> str:
    """Name of the aggregate client interface (movies-api -> MoviesApi)."""
    return capitalize(camel_case(name))


def status_phrase(status: str) -> str:
    """PascalCase reason phrase for a status key (404 -> NotFound)."""
    if status == "default":
        return "Default"
    try:
        phrase = HTTPStatus(int(status)).phrase
    except ValueError:
        return status
    if phrase.isupper():
        return phrase.replace(" ", "")
    return pascal_case(phrase)


def response_body_type_name(operation_id: str, status: str) -> str:
    return f"{type_prefix(operation_id)}Response{status_phrase(status)}"
