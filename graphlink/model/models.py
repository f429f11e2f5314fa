"""Data models for elements read from the host model service.

These are plain read-only views; nothing here is cached between runs.
``to_dict`` produces the camelCase wire shape the graph expects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

ROOT_PATH = "root"


def child_path(parent: str, key: str) -> str:
    return f"{parent}/{key}"


def path_keys(path: str) -> list[str]:
    """Split an element path into its child keys (the root token excluded)."""
    parts = path.split("/")
    if not parts or parts[0] != ROOT_PATH:
        raise ValueError(f"Element paths must start with {ROOT_PATH!r}: {path!r}")
    return parts[1:]


@dataclass(frozen=True)
class Child:
    key: str
    urn: str
    transform: list[float] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"key": self.key, "urn": self.urn}
        if self.transform is not None:
            data["transform"] = list(self.transform)
        return data


@dataclass(frozen=True)
class Element:
    urn: str
    children: list[Child] = field(default_factory=list)
    representations: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def volume_representation(self) -> dict[str, Any] | None:
        return self.representations.get("volume25DCollection")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"urn": self.urn}
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        if self.representations:
            data["representations"] = self.representations
        if self.properties:
            data["properties"] = self.properties
        return data

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Element:
        return cls(
            urn=raw["urn"],
            children=[
                Child(key=c["key"], urn=c["urn"], transform=c.get("transform"))
                for c in raw.get("children") or []
            ],
            representations=dict(raw.get("representations") or {}),
            properties=dict(raw.get("properties") or {}),
        )


@dataclass
class ElementLookup:
    """Result of a lookup: the requested element plus, for recursive
    lookups, every descendant keyed by URN (the element itself included)."""

    element: Element | None
    elements: dict[str, Element] = field(default_factory=dict)


@dataclass
class GeometryBundle:
    """Everything the graph receives for one selected path."""

    element: Element | None
    triangles: list[float] | None = None
    footprints: list[list[list[float]]] | None = None
    volume_collection: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "element": self.element.to_dict() if self.element else None,
            "triangles": self.triangles,
            "footprints": self.footprints,
            "volume25DCollection": self.volume_collection,
        }
