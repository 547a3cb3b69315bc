"""Immutable location context for tree walks.

Rules thread a ``Location`` through every recursive call instead of
concatenating strings. Rendering joins name segments with dots and renders
integer segments as ``[i]``:

    >>> Location.of("/users", "get").child("responses", "200").render()
    '/users.get.responses.200'
    >>> Location.of("components", "schemas", "Pet").child("allOf", 0).render()
    'components.schemas.Pet.allOf[0]'

"""

from __future__ import annotations

from dataclasses import dataclass

Segment = str | int


@dataclass(frozen=True, slots=True)
class Location:
    """Path of segments from the document root to a node."""

    segments: tuple[Segment, ...] = ()

    @classmethod
    def of(cls, *segments: Segment) -> Location:
        """Build a location from segments."""
        return cls(tuple(segments))

    def child(self, *segments: Segment) -> Location:
        """Return a new location extended by ``segments``."""
        return Location(self.segments + tuple(segments))

    @property
    def root(self) -> str:
        """First named segment, or "" for the empty location."""
        if not self.segments:
            return ""
        return str(self.segments[0])

    @property
    def depth(self) -> int:
        return len(self.segments)

    def render(self) -> str:
        parts: list[str] = []
        for segment in self.segments:
            if isinstance(segment, int):
                if parts:
                    parts[-1] += f"[{segment}]"
                else:
                    parts.append(f"[{segment}]")
            else:
                parts.append(segment)
        return ".".join(parts)

    def __str__(self) -> str:
        return self.render()
