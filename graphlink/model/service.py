"""Abstract interface to the host model service.

The host platform (element store, geometry kernel, metrics engine) is an
external collaborator.  Everything graphlink needs from it goes through
``ModelService`` so the assembly pipeline can run against a live platform
adapter or against :class:`~graphlink.model.snapshot.SnapshotModelService`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from graphlink.model.models import ElementLookup


class ModelService(ABC):
    """Async, read-only view of one design model."""

    @abstractmethod
    async def get_root_urn(self) -> str:
        """URN of the model's root element."""

    @abstractmethod
    async def get_element(self, urn: str, recursive: bool = False) -> ElementLookup:
        """Look an element up by URN."""

    @abstractmethod
    async def get_by_path(self, path: str, recursive: bool = False) -> ElementLookup:
        """Look an element up by path.  ``element`` is ``None`` when absent."""

    @abstractmethod
    async def get_world_transform(self, path: str) -> list[float]:
        """Column-major 4x4 transform from *path*'s frame to world space."""

    @abstractmethod
    async def get_triangles(self, path: str) -> list[float] | None:
        """Flat ``[x, y, z, ...]`` triangle soup, or ``None`` for non-mesh elements."""

    @abstractmethod
    async def get_footprint(self, path: str) -> list[list[list[float]]] | None:
        """Footprint polygon rings, or ``None`` when the element has none."""

    @abstractmethod
    async def get_blob(self, blob_id: str) -> bytes:
        """Raw content of a stored blob."""

    @abstractmethod
    async def calculate_area_metrics(self, paths: Sequence[str]) -> dict[str, Any]:
        """Area metrics computed over *paths*."""

    @abstractmethod
    async def get_paths_by_category(self, category: str) -> list[str]:
        """Paths of every element tagged with *category*."""

    @abstractmethod
    async def get_project(self) -> dict[str, Any]:
        """Project record of the open model."""

    @abstractmethod
    def get_region(self) -> str:
        """Identifier of the active storage region."""

    @abstractmethod
    def get_project_id(self) -> str:
        """Identifier of the open project."""
