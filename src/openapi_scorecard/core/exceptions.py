"""Exceptions for openapi-scorecard.

Rule evaluators never raise for problems found in a specification; those
become violations. The exceptions here cover the collaborator boundary:
loading a document from disk and loading configuration.
"""

from __future__ import annotations

from pathlib import Path


class ScorecardError(Exception):
    """Base exception for openapi-scorecard.

    All package specific exceptions inherit from this class.
    """

    pass


class ConfigError(ScorecardError):
    """Configuration file is unreadable or fails validation."""

    pass


class SpecLoadError(ScorecardError):
    """An OpenAPI document could not be loaded.

    Raised when:
    - The file does not exist or is not readable
    - The extension is not .yaml, .yml or .json
    - The content is not valid YAML/JSON
    - The root object is not an OpenAPI 3.x document

    Attributes:
        source: Path or string the caller asked to load.

    """

    def __init__(self, message: str, source: str | Path | None = None) -> None:
        """Initialize SpecLoadError with the offending source.

        Args:
            message: Human-readable error message.
            source: Path or string that failed to load.

        """
        super().__init__(message)
        self.source = source
