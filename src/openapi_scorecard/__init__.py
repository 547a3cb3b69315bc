"""openapi-scorecard - best-practice scoring for OpenAPI 3 documents."""

from importlib.metadata import version

try:
    __version__ = version("openapi-scorecard")
except Exception:
    __version__ = "0.0.0-dev"
