"""Depth-first traversal of a model's element hierarchy.

Both traversals use an explicit stack of ``(path, element)`` pairs so large
trees never hit the recursion limit.  Every call re-reads the hierarchy from
the model service; nothing is cached between walks.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Iterable

from graphlink.elements.volumes import volumes_for_subtree
from graphlink.errors import ElementNotFoundError
from graphlink.model.models import ROOT_PATH, Element, GeometryBundle, child_path, path_keys
from graphlink.model.service import ModelService

logger = logging.getLogger(__name__)


class ElementTreeWalker:
    """Walks the element tree of one model."""

    def __init__(self, model: ModelService, *, scale_elevation: bool | None = None) -> None:
        self._model = model
        self._scale_elevation = scale_elevation

    async def _snapshot(self) -> tuple[Element, dict[str, Element]]:
        urn = await self._model.get_root_urn()
        lookup = await self._model.get_element(urn, recursive=True)
        if lookup.element is None:
            raise ElementNotFoundError(ROOT_PATH)
        return lookup.element, lookup.elements

    # ------------------------------------------------------------------
    # Path enumeration
    # ------------------------------------------------------------------

    async def iter_paths(self) -> AsyncIterator[str]:
        """Yield every reachable path, root first, in pre-order.

        Raises:
            ElementNotFoundError: If a child reference does not resolve.
        """
        root, elements = await self._snapshot()
        stack: list[tuple[str, Element]] = [(ROOT_PATH, root)]
        while stack:
            path, element = stack.pop()
            yield path
            # Reversed so the first child is popped first.
            for child in reversed(element.children):
                nested = elements.get(child.urn)
                if nested is None:
                    raise ElementNotFoundError(child_path(path, child.key))
                stack.append((child_path(path, child.key), nested))

    async def enumerate_paths(self) -> list[str]:
        return [path async for path in self.iter_paths()]

    async def resolve_path(self, path: str) -> Element:
        """Follow *path* key by key from the root.

        Raises:
            ElementNotFoundError: If any key along the way is missing.
        """
        element, elements = await self._snapshot()
        for key in path_keys(path):
            child = next((c for c in element.children if c.key == key), None)
            if child is None or child.urn not in elements:
                raise ElementNotFoundError(path)
            element = elements[child.urn]
        return element

    # ------------------------------------------------------------------
    # Geometry collection
    # ------------------------------------------------------------------

    async def _bundle(self, path: str) -> GeometryBundle:
        lookup, triangles, footprints, volumes = await asyncio.gather(
            self._model.get_by_path(path),
            self._model.get_triangles(path),
            self._model.get_footprint(path),
            volumes_for_subtree(self._model, path, scale_elevation=self._scale_elevation),
        )
        return GeometryBundle(
            element=lookup.element,
            triangles=list(triangles) if triangles else None,
            footprints=footprints or None,
            volume_collection=volumes,
        )

    async def collect_geometry_for(self, paths: Iterable[str]) -> list[GeometryBundle]:
        """Fetch element, triangles, footprint and volumes for every path.

        Output order follows *paths*.
        """
        paths = list(paths)
        logger.debug("Collecting geometry for %d path(s)", len(paths))
        return list(await asyncio.gather(*(self._bundle(path) for path in paths)))
