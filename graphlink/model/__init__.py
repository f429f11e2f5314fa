"""Model service package — boundary to the host design model."""

from graphlink.model.models import (
    ROOT_PATH,
    Child,
    Element,
    ElementLookup,
    GeometryBundle,
    child_path,
)
from graphlink.model.service import ModelService
from graphlink.model.snapshot import SnapshotModelService

__all__ = [
    "ROOT_PATH",
    "Child",
    "Element",
    "ElementLookup",
    "GeometryBundle",
    "ModelService",
    "SnapshotModelService",
    "child_path",
]
