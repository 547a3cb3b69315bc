"""Load OpenAPI documents from local YAML or JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from openapi_scorecard.core.exceptions import SpecLoadError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = frozenset({".yaml", ".yml"})
JSON_SUFFIXES = frozenset({".json"})
REMOTE_PREFIXES = ("http://", "https://", "ftp://")


def load_spec(source: str | Path) -> dict[str, Any]:
    """Read and parse an OpenAPI 3.x document.

    Args:
        source: Path to a ``.yaml``, ``.yml`` or ``.json`` file.

    Returns:
        The parsed document as a plain dict.

    Raises:
        SpecLoadError: If ``source`` is a URL, is missing, has an unsupported
            extension, cannot be parsed, or is not an OpenAPI 3.x document.

    """
    text_source = str(source)
    if text_source.lower().startswith(REMOTE_PREFIXES):
        raise SpecLoadError("Remote documents are not supported; download the file first", source=text_source)

    path = Path(source)
    suffix = path.suffix.lower()
    if suffix not in YAML_SUFFIXES | JSON_SUFFIXES:
        raise SpecLoadError(
            f"Unsupported file extension '{path.suffix}'. Expected .yaml, .yml or .json",
            source=text_source,
        )

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise SpecLoadError(f"File not found: {path}", source=text_source) from e
    except OSError as e:
        raise SpecLoadError(f"Cannot read {path}: {e}", source=text_source) from e

    try:
        document = json.loads(raw) if suffix in JSON_SUFFIXES else yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SpecLoadError(f"Cannot parse {path}: {e}", source=text_source) from e

    validate_document(document, text_source)
    logger.debug("Loaded OpenAPI %s document from %s", document["openapi"], path)
    return document


def validate_document(document: Any, source: str | None = None) -> None:
    """Check the minimal shape of an OpenAPI 3.x document.

    Raises:
        SpecLoadError: If the root is not a mapping, ``openapi`` is not a 3.x
            version string, or ``info`` is missing.

    """
    if not isinstance(document, dict):
        raise SpecLoadError("Document root must be a mapping", source=source)

    version = document.get("openapi")
    if not isinstance(version, str) or not version.startswith("3."):
        if "swagger" in document:
            raise SpecLoadError("Swagger 2.0 documents are not supported; convert to OpenAPI 3", source=source)
        raise SpecLoadError(f"Unsupported or missing 'openapi' version: {version!r}", source=source)

    if not isinstance(document.get("info"), dict):
        raise SpecLoadError("Document is missing the required 'info' object", source=source)
