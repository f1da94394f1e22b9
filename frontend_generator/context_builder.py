"""Build the Jinja2 template context from an OpenAPI document.

Flattens paths into an ordered list of operations, assigns each a unique
id, classifies its response contract and routes its parameters. The same
context feeds the types template and the implementation template, so
both agree on names and on full-response mode.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .loader import get_paths
from .naming import (
    client_type_name,
    generate_operation_id,
    private_function_name,
    request_type_name,
    response_body_type_name,
    response_type_name,
)
from .responses import (
    all_response_codes,
    classify,
    is_plain_json_200,
    response_codes_by_decode_method,
    success_codes,
)
from .schema_parser import (
    ShapeRenderer,
    path_placeholders,
    path_to_template,
    route_parameters,
)

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "patch", "delete")


class MissingPathParameterError(ValueError):
    """A path placeholder has no matching path parameter (strict mode only)."""


@dataclass(frozen=True)
class Operation:
    path: str
    method: str
    operation_id: str
    parameters: tuple[dict[str, Any], ...] = ()
    responses: dict[str, Any] = field(default_factory=dict)
    request_body: dict[str, Any] | None = None
    summary: str = ""
    description: str = ""
    deprecated: bool = False


def _merge_parameters(path_level: Any, operation_level: Any) -> tuple[dict[str, Any], ...]:
    """Path-item parameters first, overridden by operation ones on (name, in)."""
    merged: dict[tuple[Any, Any], dict[str, Any]] = {}
    for param in list(path_level or []) + list(operation_level or []):
        if isinstance(param, dict):
            merged[(param.get("name"), param.get("in"))] = param
    return tuple(merged.values())


def extract_operations(spec: dict[str, Any]) -> list[Operation]:
    """List every (path, method) operation in document order."""
    operations: list[Operation] = []
    seen_ids: list[str] = []

    for path, path_item in get_paths(spec).items():
        if not isinstance(path_item, dict):
            continue

        for method, operation in path_item.items():
            method = str(method).lower()
            if method not in HTTP_METHODS:
                continue
            if not isinstance(operation, dict):
                operation = {}

            operation_id = generate_operation_id(path, method, operation, seen_ids)
            responses = operation.get("responses")
            if not isinstance(responses, dict):
                responses = {}
            request_body = operation.get("requestBody")

            operations.append(Operation(
                path=path,
                method=method,
                operation_id=operation_id,
                parameters=_merge_parameters(
                    path_item.get("parameters"), operation.get("parameters"),
                ),
                # YAML loads bare status codes as ints
                responses={str(code): value for code, value in responses.items()},
                request_body=request_body if isinstance(request_body, dict) else None,
                summary=operation.get("summary") or "",
                description=operation.get("description") or "",
                deprecated=bool(operation.get("deprecated", False)),
            ))
            logger.debug("Extracted %s %s as %s", method.upper(), path, operation_id)

    return operations


def _check_path_parameters(operation: Operation, strict: bool) -> None:
    declared = {p.get("name") for p in operation.parameters if p.get("in") == "path"}
    for placeholder in path_placeholders(operation.path):
        if placeholder in declared:
            continue
        message = (
            f"{operation.operation_id}: path placeholder {{{placeholder}}} in "
            f"{operation.path} has no matching path parameter"
        )
        if strict:
            raise MissingPathParameterError(message)
        logger.warning(message)


def _status_literal(status: str) -> str:
    return status if status.isdigit() else "number"


def build_operation_context(
    operation: Operation,
    renderer: ShapeRenderer,
    full_response: bool,
    strict: bool = False,
) -> dict[str, Any]:
    """Everything both templates need to emit one operation."""
    _check_path_parameters(operation, strict)

    operation_id = operation.operation_id
    request_name = request_type_name(operation_id)
    response_name = response_type_name(operation_id)
    routes = route_parameters(operation.parameters)
    is_full_response = classify(operation, full_response)
    plain_json_200 = is_plain_json_200(operation.responses)

    response_bodies = [
        {
            "status": status,
            "name": response_body_type_name(operation_id, status),
            "type": renderer.response_body_type(response),
        }
        for status, response in operation.responses.items()
    ]
    bodies_by_status = {body["status"]: body for body in response_bodies}
    request_shape = renderer.request_shape(
        request_name, operation.parameters, operation.request_body,
    )

    if is_full_response:
        response_union = " | ".join(
            f"FullResponse<{body['name']}, {_status_literal(body['status'])}>"
            for body in response_bodies
        ) or "FullResponse<unknown, number>"
    elif plain_json_200:
        response_union = bodies_by_status["200"]["name"]
    else:
        response_union = "string"

    all_codes = all_response_codes(operation.responses)

    return {
        "operation_id": operation_id,
        "method": operation.method,
        "path": operation.path,
        "summary": operation.summary,
        "deprecated": operation.deprecated,
        "url_template": path_to_template(operation.path),
        "request_name": request_name,
        "response_name": response_name,
        "request_type": f"Types.{request_name}",
        "response_type": f"Types.{response_name}",
        "private_name": private_function_name(operation_id),
        "query_params": list(routes.query),
        "header_params": list(routes.header),
        "consumed_params": list(routes.consumed),
        "full_response": is_full_response,
        "plain_json_200": plain_json_200,
        "success_codes": success_codes(operation.responses),
        "decode_groups": response_codes_by_decode_method(operation.responses),
        "status_union": " | ".join(str(code) for code in all_codes) or "number",
        "request_shape": request_shape,
        "body_field": request_shape["body_field"],
        "response_bodies": response_bodies,
        "response_union": response_union,
    }


def build_context(
    spec: dict[str, Any],
    name: str,
    full_response: bool = False,
    strict: bool = False,
) -> dict[str, Any]:
    """Build the full template context from the OpenAPI spec."""
    renderer = ShapeRenderer(spec)
    operations = [
        build_operation_context(operation, renderer, full_response, strict)
        for operation in extract_operations(spec)
    ]

    return {
        "name": name,
        "client_name": client_type_name(name),
        "operations": operations,
        "operation_count": len(operations),
        "declarations": renderer.declarations,
        "full_response": full_response,
        "api_title": (spec.get("info") or {}).get("title", ""),
        "api_version": (spec.get("info") or {}).get("version", "unknown"),
    }
