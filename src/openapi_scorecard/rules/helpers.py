"""Shared walkers and predicates for rule evaluators.

Parsed documents are plain mappings produced by YAML/JSON loaders, so
nothing here assumes a node has the right shape: ``as_mapping`` and
``as_list`` turn anything unexpected into an empty container.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from openapi_scorecard.core.location import Location
from openapi_scorecard.core.refs import as_reference, resolve

HTTP_METHODS: tuple[str, ...] = ("get", "post", "put", "delete", "patch", "head", "options", "trace")
MUTATING_METHODS: frozenset[str] = frozenset({"post", "put", "patch", "delete"})

PATH_PARAM_PATTERN = re.compile(r"\{([^{}/]+)\}")

EMPTY: Mapping[str, Any] = {}


@dataclass(frozen=True, slots=True)
class OperationRef:
    """One operation found while walking ``paths``.

    Attributes:
        path: URL template the operation lives under.
        method: Lower-case HTTP method.
        operation: The operation mapping.
        path_item: The enclosing path item mapping.

    """

    path: str
    method: str
    operation: Mapping[str, Any]
    path_item: Mapping[str, Any]

    @property
    def verb(self) -> str:
        """Upper-case method for messages."""
        return self.method.upper()

    @property
    def location(self) -> Location:
        return Location.of(self.path, self.method)


def as_mapping(value: Any) -> Mapping[str, Any]:
    """Return ``value`` if it is a mapping, else an empty mapping."""
    if isinstance(value, Mapping):
        return value
    return EMPTY


def as_list(value: Any) -> list[Any]:
    """Return ``value`` if it is a list, else an empty list."""
    if isinstance(value, list):
        return value
    return []


def has_text(value: Any, min_length: int = 1) -> bool:
    """True if ``value`` is a string with at least ``min_length`` non-blank chars."""
    return isinstance(value, str) and len(value.strip()) >= min_length


def iter_paths(spec: Mapping[str, Any]) -> Iterator[tuple[str, Mapping[str, Any]]]:
    """Yield (path, path_item) pairs, skipping null or malformed path items."""
    for path, path_item in as_mapping(spec.get("paths")).items():
        if isinstance(path_item, Mapping):
            yield str(path), path_item


def iter_path_operations(path: str, path_item: Mapping[str, Any]) -> Iterator[OperationRef]:
    """Yield the operations of a single path item in document order."""
    for method, operation in path_item.items():
        if method in HTTP_METHODS and isinstance(operation, Mapping):
            yield OperationRef(path, method, operation, path_item)


def iter_operations(spec: Mapping[str, Any]) -> Iterator[OperationRef]:
    """Yield every operation in the document."""
    for path, path_item in iter_paths(spec):
        yield from iter_path_operations(path, path_item)


def response_items(operation: Mapping[str, Any]) -> list[tuple[str, Any]]:
    """(status code, response) pairs with codes normalized to strings.

    YAML loaders turn unquoted status codes into integers.
    """
    return [(str(code), response) for code, response in as_mapping(operation.get("responses")).items()]


def path_segments(path: str) -> list[str]:
    """Non-empty segments of a URL template."""
    return [segment for segment in path.split("/") if segment]


def is_param_segment(segment: str) -> bool:
    return segment.startswith("{")


def path_param_names(path: str) -> list[str]:
    """Names of ``{param}`` tokens in a URL template, in order."""
    return PATH_PARAM_PATTERN.findall(path)


def declared_path_params(
    spec: Mapping[str, Any],
    path_item: Mapping[str, Any],
    operation: Mapping[str, Any],
) -> set[str]:
    """Names of ``in: path`` parameters visible to an operation.

    Includes parameters inherited from the path item. ``$ref`` parameters are
    resolved; unresolvable ones are ignored here.
    """
    names: set[str] = set()
    for param in as_list(path_item.get("parameters")) + as_list(operation.get("parameters")):
        resolved = resolve(param, spec)
        if resolved is not None and resolved.get("in") == "path" and isinstance(resolved.get("name"), str):
            names.add(resolved["name"])
    return names


def ref_or_name(node: Any, fallback: str) -> str:
    """Display name for a parameter-like node: its ``name``, ref tail, or ``fallback``."""
    ref = as_reference(node)
    if ref is not None:
        return ref.name
    name = as_mapping(node).get("name")
    if isinstance(name, str) and name:
        return name
    return fallback


def media_types(node: Mapping[str, Any]) -> list[tuple[str, Mapping[str, Any]]]:
    """(media type, media type object) pairs of a body's ``content``."""
    return [(str(media_type), as_mapping(obj)) for media_type, obj in as_mapping(node.get("content")).items()]


def has_example(node: Mapping[str, Any]) -> bool:
    """True if ``node`` has an ``example`` or a non-empty ``examples`` map."""
    if "example" in node:
        return True
    examples = node.get("examples")
    return isinstance(examples, (Mapping, list)) and len(examples) > 0
