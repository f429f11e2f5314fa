"""Elements package — tree traversal and volume collection loading."""

from graphlink.elements.volumes import (
    load_volume_collection,
    selection_predicate,
    volumes_for_subtree,
)
from graphlink.elements.walker import ElementTreeWalker

__all__ = [
    "ElementTreeWalker",
    "load_volume_collection",
    "selection_predicate",
    "volumes_for_subtree",
]
