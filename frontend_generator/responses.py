"""Response-code utilities and full-response classification.

An operation is emitted in "full response" mode (the generated call
returns a {statusCode, headers, body} envelope) when its success contract
is ambiguous or empty, or when the caller asks for it globally.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .context_builder import Operation

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

# Dispatch order of decode groups in generated code
DECODE_METHODS: tuple[str, ...] = ("json", "text", "blob")


def is_json_content_type(content_type: str | None) -> bool:
    """Check for application/json or a +json structured syntax suffix."""
    if not content_type:
        return False
    media_type = content_type.split(";")[0].strip().lower()
    return media_type == JSON_CONTENT_TYPE or media_type.endswith("+json")


def content_type_of(response: Any) -> str | None:
    """Return the declared content type of a response, or None when empty.

    JSON is preferred when several media types are declared.
    """
    if not isinstance(response, dict):
        return None
    content = response.get("content")
    if not isinstance(content, dict) or not content:
        return None
    for content_type in content:
        if is_json_content_type(content_type):
            return content_type
    return next(iter(content))


def decode_method_for(content_type: str | None) -> str | None:
    """Map a content type to the fetch Response method that decodes it."""
    if content_type is None:
        return None
    if is_json_content_type(content_type):
        return "json"
    if content_type.lower().startswith("text/"):
        return "text"
    return "blob"


def success_codes(responses: dict[str, Any]) -> list[str]:
    """Status keys of the 2xx responses, in declaration order."""
    return [code for code in responses if str(code).startswith("2")]


def all_response_codes(responses: dict[str, Any]) -> list[int]:
    """Numeric status literals of every declared response."""
    return [int(code) for code in responses if str(code).isdigit()]


def response_codes_by_decode_method(responses: dict[str, Any]) -> dict[str, list[int]]:
    """Group numeric status literals by decode method, dropping empty groups."""
    groups: dict[str, list[int]] = {method: [] for method in DECODE_METHODS}
    for code, response in responses.items():
        if not str(code).isdigit():
            continue
        method = decode_method_for(content_type_of(response))
        if method is not None:
            groups[method].append(int(code))
    return {method: codes for method, codes in groups.items() if codes}


def is_plain_json_200(responses: dict[str, Any]) -> bool:
    """Check if the operation declares a JSON 200 response."""
    return "200" in responses and is_json_content_type(content_type_of(responses["200"]))


def classify(operation: Operation, default_full_response: bool) -> bool:
    """Decide whether an operation is emitted in full-response mode.

    Zero or several success responses, or a single success response
    without content, always force the envelope. Otherwise the document-wide
    default applies.
    """
    successes = success_codes(operation.responses)
    if len(successes) != 1:
        logger.debug(
            "%s: %d success responses, using full response",
            operation.operation_id, len(successes),
        )
        return True
    if content_type_of(operation.responses[successes[0]]) is None:
        logger.debug(
            "%s: empty %s response, using full response",
            operation.operation_id, successes[0],
        )
        return True
    return default_full_response
