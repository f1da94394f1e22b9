"""Shared fixtures: a small OpenAPI document and a Node.js harness.

Integration tests execute the generated JavaScript under Node.js with a
stubbed global fetch. They are skipped when no node >= 18 is on PATH.
"""

from __future__ import annotations

import copy
import json
import shutil
import subprocess
from pathlib import Path
from typing import Any, Callable

import pytest


MOVIE_REF = {"$ref": "#/components/schemas/Movie"}

MOVIES_SPEC: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Movies", "version": "1.0.0"},
    "paths": {
        "/movies": {
            "get": {
                "operationId": "getMovies",
                "parameters": [
                    {"name": "limit", "in": "query", "schema": {"type": "integer"}},
                    {"name": "offset", "in": "query", "schema": {"type": "integer"}},
                ],
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {
                            "application/json": {
                                "schema": {"type": "array", "items": MOVIE_REF},
                            },
                        },
                    },
                },
            },
            "post": {
                "operationId": "createMovie",
                "parameters": [
                    {"name": "x-trace", "in": "header", "schema": {"type": "string"}},
                ],
                "requestBody": {
                    "required": True,
                    "content": {
                        "application/json": {
                            "schema": {
                                "type": "object",
                                "required": ["title"],
                                "properties": {
                                    "id": {"type": "integer", "readOnly": True},
                                    "title": {"type": "string"},
                                },
                            },
                        },
                    },
                },
                "responses": {
                    "200": {
                        "description": "Created movie",
                        "content": {"application/json": {"schema": MOVIE_REF}},
                    },
                },
            },
        },
        "/movies/{id}": {
            "parameters": [
                {"name": "id", "in": "path", "required": True, "schema": {"type": "integer"}},
            ],
            "get": {
                "operationId": "getMovieById",
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {"application/json": {"schema": MOVIE_REF}},
                    },
                    "404": {
                        "description": "Not found",
                        "content": {"text/plain": {"schema": {"type": "string"}}},
                    },
                },
            },
            "delete": {
                "operationId": "deleteMovie",
                "responses": {"204": {"description": "No content"}},
            },
        },
        "/orgs/{orgId}/members/{memberId}": {
            "put": {
                "operationId": "updateMember",
                "parameters": [
                    {"name": "orgId", "in": "path", "required": True, "schema": {"type": "string"}},
                    {"name": "memberId", "in": "path", "required": True, "schema": {"type": "string"}},
                ],
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {
                                "type": "object",
                                "properties": {"name": {"type": "string"}},
                            },
                        },
                    },
                },
                "responses": {
                    "200": {
                        "description": "Updated",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "object",
                                    "properties": {"ok": {"type": "boolean"}},
                                },
                            },
                        },
                    },
                    "202": {"description": "Accepted, processing"},
                },
            },
        },
    },
    "components": {
        "schemas": {
            "Movie": {
                "type": "object",
                "required": ["id", "title"],
                "properties": {
                    "id": {"type": "integer"},
                    "title": {"type": "string"},
                    "rating": {"type": "number", "nullable": True},
                },
            },
        },
    },
}


@pytest.fixture
def movies_spec() -> dict[str, Any]:
    """A fresh copy of the movies document for each test."""
    return copy.deepcopy(MOVIES_SPEC)


# ---------------------------------------------------------------------------
# Node.js harness, skipped when node isn't installed
# ---------------------------------------------------------------------------

_FETCH_STUB = """\
import build, * as api from './api.mjs'

const calls = []
let nextResponse = { status: 200, headers: { 'content-type': 'application/json' }, body: '{}' }

function respond (status, headers, body) {
  nextResponse = { status, headers, body }
}

globalThis.fetch = async (url, init = {}) => {
  calls.push({
    url,
    method: init.method || 'GET',
    headers: init.headers || null,
    body: init.body === undefined ? null : init.body
  })
  const body = [101, 204, 205, 304].includes(nextResponse.status) ? null : nextResponse.body
  return new Response(body, { status: nextResponse.status, headers: nextResponse.headers })
}

const result = {}
"""


@pytest.fixture(scope="session")
def node_binary() -> str:
    """Path to a node >= 18 binary (global fetch Response), else skip."""
    node = shutil.which("node")
    if node is None:
        pytest.skip("node is not installed")
    version = subprocess.run(
        [node, "--version"], capture_output=True, text=True, check=True,
    ).stdout.strip()
    major = int(version.lstrip("v").split(".")[0])
    if major < 18:
        pytest.skip(f"node {version} has no global Response")
    return node


@pytest.fixture
def run_client(tmp_path: Path, node_binary: str) -> Callable[[str, str], dict[str, Any]]:
    """Return a callable that runs a script against a generated .mjs client.

    The script sees ``api`` (named exports), ``build``, ``calls``,
    ``respond(status, headers, body)`` and must fill ``result``, which is
    returned decoded together with the recorded fetch calls::

        out = run_client(source, "result.value = await api.getMovies({})")
    """
    def _run(client_source: str, script: str) -> dict[str, Any]:
        (tmp_path / "api.mjs").write_text(client_source)
        harness = (
            _FETCH_STUB
            + script
            + "\nconsole.log(JSON.stringify({ calls, result }))\n"
        )
        (tmp_path / "harness.mjs").write_text(harness)
        completed = subprocess.run(
            [node_binary, "harness.mjs"],
            cwd=tmp_path, capture_output=True, text=True, timeout=60,
        )
        if completed.returncode != 0:
            pytest.fail(f"node failed:\n{completed.stderr}")
        return json.loads(completed.stdout.strip().splitlines()[-1])
    return _run
