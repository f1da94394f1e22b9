"""Load an OpenAPI document from a file or URL.

JSON and YAML documents are supported. Remote documents are fetched
with httpx.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx
import yaml

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = (".yaml", ".yml")


class SpecLoadError(ValueError):
    """Raised when a document cannot be decoded into an OpenAPI mapping."""


def _is_url(source: str | Path) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def _decode(text: str, yaml_hint: bool, origin: str) -> dict[str, Any]:
    try:
        if yaml_hint:
            document = yaml.safe_load(text)
        else:
            document = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SpecLoadError(f"Cannot decode {origin}: {e}") from e

    if not isinstance(document, dict):
        raise SpecLoadError(f"{origin} does not contain an OpenAPI object")
    return document


def load_spec(source: str | Path, timeout: float = 30.0) -> dict[str, Any]:
    """Load the OpenAPI document at a path or http(s) URL."""
    if _is_url(source):
        logger.debug("Fetching %s", source)
        response = httpx.get(str(source), timeout=timeout, follow_redirects=True)
        response.raise_for_status()
        content_type = response.headers.get("content-type", "")
        yaml_hint = "yaml" in content_type or str(source).endswith(_YAML_SUFFIXES)
        return _decode(response.text, yaml_hint, str(source))

    spec_file = Path(source)
    logger.debug("Reading %s", spec_file)
    text = spec_file.read_text(encoding="utf-8")
    return _decode(text, spec_file.suffix.lower() in _YAML_SUFFIXES, str(spec_file))


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the spec."""
    paths = spec.get("paths") or {}
    return paths if isinstance(paths, dict) else {}


def get_schemas(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract component schemas from the spec."""
    schemas = (spec.get("components") or {}).get("schemas") or {}
    return schemas if isinstance(schemas, dict) else {}
