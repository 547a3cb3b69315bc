"""Reference resolution for local ``$ref`` JSON pointers.

Every reusable OpenAPI node (schema, parameter, request body, response,
header) is either inline or a ``{"$ref": "#/..."}`` reference. This module
makes that union explicit: :func:`classify` returns a :class:`Reference` or
the inline mapping, and :func:`resolve` returns the target mapping or
``None``.

``None`` is an expected outcome, not a fault. It is returned when the
pointer is external (does not start with ``#/``), malformed, dangling, points
at a non-mapping value, or when a chain of references loops back on itself.
Nothing in this module raises for document content.

Example:
    >>> doc = {"components": {"schemas": {"Pet": {"type": "object"}}}}
    >>> resolve({"$ref": "#/components/schemas/Pet"}, doc)
    {'type': 'object'}
    >>> resolve({"$ref": "#/components/schemas/Missing"}, doc) is None
    True

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

LOCAL_PREFIX = "#/"


@dataclass(frozen=True, slots=True)
class Reference:
    """A ``$ref`` indirection.

    Attributes:
        pointer: The raw ``$ref`` string.

    """

    pointer: str

    @property
    def is_local(self) -> bool:
        return self.pointer.startswith(LOCAL_PREFIX)

    @property
    def name(self) -> str:
        """Last pointer segment, unescaped (e.g. the component name)."""
        return unescape(self.pointer.rsplit("/", 1)[-1])


def unescape(segment: str) -> str:
    """Unescape one JSON pointer segment (RFC 6901)."""
    return segment.replace("~1", "/").replace("~0", "~")


def as_reference(node: Any) -> Reference | None:
    """Return a Reference if ``node`` is a ``$ref`` object, else None."""
    if isinstance(node, Mapping):
        pointer = node.get("$ref")
        if isinstance(pointer, str):
            return Reference(pointer)
    return None


def classify(node: Any) -> Reference | Mapping[str, Any] | None:
    """Split a node into the reference or inline branch.

    Returns:
        Reference for ``$ref`` objects, the mapping itself for inline
        objects, None for anything that is not a mapping.

    """
    ref = as_reference(node)
    if ref is not None:
        return ref
    if isinstance(node, Mapping):
        return node
    return None


def resolve_pointer(pointer: str, document: Mapping[str, Any]) -> Any | None:
    """Walk a local JSON pointer through ``document``.

    Args:
        pointer: Pointer of the form ``#/a/b/c``.
        document: Root OpenAPI document.

    Returns:
        The target node, or None if the pointer is not local, a segment is
        missing, or an intermediate node cannot be indexed.

    """
    if not isinstance(pointer, str) or not pointer.startswith(LOCAL_PREFIX):
        return None

    current: Any = document
    for raw in pointer[len(LOCAL_PREFIX) :].split("/"):
        part = unescape(raw)
        if isinstance(current, Mapping):
            if part not in current:
                return None
            current = current[part]
        elif isinstance(current, Sequence) and not isinstance(current, str):
            if not part.isdigit() or int(part) >= len(current):
                return None
            current = current[int(part)]
        else:
            return None
        if current is None:
            return None
    return current


def resolve(node: Any, document: Mapping[str, Any]) -> Mapping[str, Any] | None:
    """Resolve ``node`` to an inline mapping, following ``$ref`` chains.

    Returns:
        The inline mapping, or None for unresolvable, cyclic, or non-mapping
        targets.

    """
    seen: set[str] = set()
    current = node
    while True:
        ref = as_reference(current)
        if ref is None:
            break
        if ref.pointer in seen:
            return None
        seen.add(ref.pointer)
        current = resolve_pointer(ref.pointer, document)
    if isinstance(current, Mapping):
        return current
    return None
