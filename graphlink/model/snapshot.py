"""In-memory ``ModelService`` backed by a JSON snapshot of a model.

Snapshot layout::

    {
      "rootUrn": "urn:root",
      "region": "EMEA",
      "projectId": "pro_123",
      "project": {"id": "pro_123", "name": "Site A", ...},
      "elements": {
        "urn:root": {"urn": "urn:root", "children": [{"key": "b1", "urn": "urn:b1",
                     "transform": [...16 floats...]}]},
        "urn:b1": {"urn": "urn:b1", "properties": {"category": "building"},
                   "geometry": {"triangles": [...], "footprint": [[[x, y], ...]]},
                   "representations": {"volume25DCollection": {...}}}
      },
      "blobs": {"blob-1": {"type": "FeatureCollection", "features": [...]}}
    }

World transforms are composed from the optional per-child local transforms
along the path, root first.  Used by the CLI and as the test double for the
assembly pipeline.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Sequence

from graphlink.errors import BlobNotFoundError, ElementNotFoundError
from graphlink.geometry.transform import IDENTITY, multiply
from graphlink.model.models import ROOT_PATH, Element, ElementLookup, child_path, path_keys
from graphlink.model.service import ModelService

logger = logging.getLogger(__name__)


def _ring_area(ring: Sequence[Sequence[float]]) -> float:
    total = 0.0
    for (x1, y1, *_), (x2, y2, *_) in zip(ring, list(ring[1:]) + [ring[0]]):
        total += x1 * y2 - x2 * y1
    return abs(total) / 2.0


def polygon_area(rings: Sequence[Sequence[Sequence[float]]]) -> float:
    """Shoelace area of an outer ring minus its holes."""
    if not rings:
        return 0.0
    outer, *holes = rings
    return _ring_area(outer) - sum(_ring_area(h) for h in holes)


class SnapshotModelService(ModelService):
    def __init__(self, document: dict[str, Any]) -> None:
        self._root_urn: str = document["rootUrn"]
        self._region: str = document.get("region", "")
        self._project: dict[str, Any] = dict(document.get("project") or {})
        self._project_id: str = document.get("projectId") or self._project.get("id", "")
        self._blobs: dict[str, Any] = dict(document.get("blobs") or {})
        self._geometry: dict[str, dict[str, Any]] = {}
        self._elements: dict[str, Element] = {}
        for urn, raw in (document.get("elements") or {}).items():
            self._elements[urn] = Element.from_dict({"urn": urn, **raw})
            if raw.get("geometry"):
                self._geometry[urn] = raw["geometry"]

    @classmethod
    def from_file(cls, path: str | Path) -> SnapshotModelService:
        logger.debug("Loading model snapshot from %s", path)
        return cls(json.loads(Path(path).read_text(encoding="utf-8")))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _resolve(self, path: str) -> tuple[Element | None, list[float]]:
        """Return the element at *path* and its composed world transform."""
        element = self._elements.get(self._root_urn)
        transform: list[float] = list(IDENTITY)
        for key in path_keys(path):
            if element is None:
                return None, transform
            child = next((c for c in element.children if c.key == key), None)
            if child is None:
                return None, transform
            if child.transform is not None:
                transform = multiply(transform, child.transform)
            element = self._elements.get(child.urn)
        return element, transform

    def _descendants(self, element: Element) -> dict[str, Element]:
        found = {element.urn: element}
        stack = [element]
        while stack:
            current = stack.pop()
            for child in current.children:
                nested = self._elements.get(child.urn)
                if nested is not None and nested.urn not in found:
                    found[nested.urn] = nested
                    stack.append(nested)
        return found

    def _all_paths(self) -> list[tuple[str, Element]]:
        root = self._elements[self._root_urn]
        out: list[tuple[str, Element]] = []
        stack = [(ROOT_PATH, root)]
        while stack:
            path, element = stack.pop()
            out.append((path, element))
            for child in reversed(element.children):
                nested = self._elements.get(child.urn)
                if nested is not None:
                    stack.append((child_path(path, child.key), nested))
        return out

    def _geometry_at(self, path: str) -> dict[str, Any]:
        element, _ = self._resolve(path)
        if element is None:
            raise ElementNotFoundError(path)
        return self._geometry.get(element.urn, {})

    # ------------------------------------------------------------------
    # ModelService
    # ------------------------------------------------------------------

    async def get_root_urn(self) -> str:
        return self._root_urn

    async def get_element(self, urn: str, recursive: bool = False) -> ElementLookup:
        element = self._elements.get(urn)
        if element is None:
            return ElementLookup(element=None)
        elements = self._descendants(element) if recursive else {urn: element}
        return ElementLookup(element=element, elements=elements)

    async def get_by_path(self, path: str, recursive: bool = False) -> ElementLookup:
        element, _ = self._resolve(path)
        if element is None:
            return ElementLookup(element=None)
        elements = self._descendants(element) if recursive else {element.urn: element}
        return ElementLookup(element=element, elements=elements)

    async def get_world_transform(self, path: str) -> list[float]:
        element, transform = self._resolve(path)
        if element is None:
            raise ElementNotFoundError(path)
        return transform

    async def get_triangles(self, path: str) -> list[float] | None:
        triangles = self._geometry_at(path).get("triangles")
        return list(triangles) if triangles else None

    async def get_footprint(self, path: str) -> list[list[list[float]]] | None:
        footprint = self._geometry_at(path).get("footprint")
        return [list(ring) for ring in footprint] if footprint else None

    async def get_blob(self, blob_id: str) -> bytes:
        if blob_id not in self._blobs:
            raise BlobNotFoundError(blob_id)
        data = self._blobs[blob_id]
        if isinstance(data, str):
            return data.encode("utf-8")
        return json.dumps(data).encode("utf-8")

    async def calculate_area_metrics(self, paths: Sequence[str]) -> dict[str, Any]:
        by_path: dict[str, float] = {}
        for path in paths:
            footprint = await self.get_footprint(path)
            by_path[path] = polygon_area(footprint) if footprint else 0.0
        return {"footprintArea": sum(by_path.values()), "byPath": by_path}

    async def get_paths_by_category(self, category: str) -> list[str]:
        return [
            path
            for path, element in self._all_paths()
            if element.properties.get("category") == category
        ]

    async def get_project(self) -> dict[str, Any]:
        return dict(self._project)

    def get_region(self) -> str:
        return self._region

    def get_project_id(self) -> str:
        return self._project_id
