"""Tests for response-code utilities and full-response classification."""

import pytest

from frontend_generator.context_builder import Operation
from frontend_generator.responses import (
    all_response_codes,
    classify,
    content_type_of,
    decode_method_for,
    is_plain_json_200,
    response_codes_by_decode_method,
    success_codes,
)

JSON_BODY = {"content": {"application/json": {"schema": {"type": "object"}}}}
TEXT_BODY = {"content": {"text/plain": {"schema": {"type": "string"}}}}
EMPTY = {"description": "No content"}


def _operation(responses: dict) -> Operation:
    return Operation(path="/x", method="get", operation_id="getX", responses=responses)


class TestContentType:

    def test_empty_response(self):
        assert content_type_of(EMPTY) is None
        assert content_type_of({"content": {}}) is None

    def test_prefers_json(self):
        response = {"content": {"text/plain": {}, "application/json": {}}}
        assert content_type_of(response) == "application/json"

    def test_first_declared_otherwise(self):
        response = {"content": {"application/octet-stream": {}, "text/csv": {}}}
        assert content_type_of(response) == "application/octet-stream"

    @pytest.mark.parametrize("content_type, method", [
        ("application/json", "json"),
        ("application/problem+json", "json"),
        ("application/json; charset=utf-8", "json"),
        ("text/plain", "text"),
        ("text/csv", "text"),
        ("application/octet-stream", "blob"),
        (None, None),
    ])
    def test_decode_method(self, content_type, method):
        assert decode_method_for(content_type) == method


class TestResponseCodes:

    def test_success_codes(self):
        responses = {"200": JSON_BODY, "201": JSON_BODY, "404": TEXT_BODY, "default": EMPTY}
        assert success_codes(responses) == ["200", "201"]

    def test_all_codes_skip_non_numeric(self):
        responses = {"200": JSON_BODY, "404": TEXT_BODY, "default": EMPTY, "5XX": EMPTY}
        assert all_response_codes(responses) == [200, 404]

    def test_grouped_by_decode_method(self):
        responses = {
            "200": JSON_BODY,
            "400": JSON_BODY,
            "404": TEXT_BODY,
            "204": EMPTY,
            "415": {"content": {"application/octet-stream": {}}},
        }
        assert response_codes_by_decode_method(responses) == {
            "json": [200, 400],
            "text": [404],
            "blob": [415],
        }

    def test_empty_groups_dropped(self):
        assert response_codes_by_decode_method({"200": TEXT_BODY}) == {"text": [200]}

    def test_plain_json_200(self):
        assert is_plain_json_200({"200": JSON_BODY})
        assert not is_plain_json_200({"200": TEXT_BODY})
        assert not is_plain_json_200({"201": JSON_BODY})


class TestClassify:
    """Full-response mode is a per-operation override of a global default."""

    def test_single_success_uses_default(self):
        op = _operation({"200": JSON_BODY, "404": TEXT_BODY})
        assert classify(op, False) is False
        assert classify(op, True) is True

    def test_no_success_forces_full_response(self):
        op = _operation({"404": TEXT_BODY, "default": JSON_BODY})
        assert classify(op, False) is True

    def test_two_successes_force_full_response(self):
        op = _operation({"200": JSON_BODY, "201": JSON_BODY})
        assert classify(op, False) is True

    def test_empty_success_forces_full_response(self):
        op = _operation({"204": EMPTY})
        assert classify(op, False) is True

    def test_classification_does_not_leak(self):
        """An override on one operation must not affect the next."""
        forced = _operation({"204": EMPTY})
        plain = _operation({"200": JSON_BODY})
        results = [classify(op, False) for op in (forced, plain, forced, plain)]
        assert results == [True, False, True, False]
