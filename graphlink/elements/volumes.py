"""2.5D volume collections gathered over an element subtree.

A volume representation is either ``embedded-json`` (the collection travels
inline) or ``linked`` (the collection lives in a blob).  Each node's features
are filtered by the representation's selection rule, moved into world space
with the node's transform, and merged into one flat ``FeatureCollection``.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable

from graphlink.config import settings
from graphlink.errors import ElementNotFoundError, SelectionRuleError
from graphlink.geometry.transform import offset_elevation, scale_height, transform_ring
from graphlink.model.models import Element, child_path
from graphlink.model.service import ModelService

logger = logging.getLogger(__name__)

FeatureCollection = dict[str, Any]


async def load_volume_collection(
    model: ModelService,
    representation: dict[str, Any] | None,
) -> FeatureCollection | None:
    """Resolve a volume representation to its feature collection.

    Unknown representation kinds yield ``None``; they are not an error.
    """
    if not representation:
        return None
    kind = representation.get("type")
    if kind == "embedded-json":
        return representation.get("data")
    if kind == "linked":
        raw = await model.get_blob(representation["blobId"])
        return json.loads(raw.decode("utf-8"))
    logger.debug("Ignoring volume representation of type %r", kind)
    return None


def selection_predicate(selection: dict[str, Any] | None) -> Callable[[str], bool]:
    """Build the feature-id filter for a representation's selection rule.

    Raises:
        SelectionRuleError: If the rule kind is not recognised.
    """
    kind = selection.get("type") if selection else None
    if kind is None:
        return lambda value: True
    if kind == "equals":
        expected = selection["value"]
        return lambda value: value == expected
    if kind == "startsWith":
        prefix = selection["value"]
        return lambda value: isinstance(value, str) and value.startswith(prefix)
    raise SelectionRuleError(f"Invalid selection: {json.dumps(selection)}")


def transform_feature(
    feature: dict[str, Any],
    transform: list[float],
    *,
    scale_elevation: bool = True,
) -> dict[str, Any]:
    properties = feature.get("properties") or {}
    geometry = feature.get("geometry") or {}
    return {
        **feature,
        "properties": {
            **properties,
            "height": scale_height(transform, properties.get("height", 0.0)),
            "elevation": offset_elevation(
                transform, properties.get("elevation"), scale=scale_elevation
            ),
        },
        "geometry": {
            **geometry,
            "coordinates": [
                transform_ring(transform, ring) for ring in geometry.get("coordinates", [])
            ],
        },
    }


async def _features_for_node(
    model: ModelService,
    path: str,
    element: Element,
    scale_elevation: bool,
) -> list[dict[str, Any]]:
    representation = element.volume_representation
    collection = await load_volume_collection(model, representation)
    if not collection:
        return []

    predicate = selection_predicate(representation.get("selection"))
    transform = await model.get_world_transform(path)
    return [
        transform_feature(feature, transform, scale_elevation=scale_elevation)
        for feature in collection.get("features", [])
        if predicate(feature.get("id"))
    ]


async def volumes_for_subtree(
    model: ModelService,
    path: str,
    *,
    scale_elevation: bool | None = None,
) -> FeatureCollection | None:
    """Merge every volume collection found at or below *path*.

    Returns ``None`` when the subtree contributes no features.

    Raises:
        ElementNotFoundError: If a child reference below *path* does not resolve.
    """
    if scale_elevation is None:
        scale_elevation = settings.scale_elevation

    lookup = await model.get_by_path(path, recursive=True)
    if lookup.element is None:
        return None

    visited: list[tuple[str, Element]] = []
    stack: list[tuple[str, Element]] = [(path, lookup.element)]
    while stack:
        node_path, element = stack.pop()
        visited.append((node_path, element))
        for child in element.children:
            nested = lookup.elements.get(child.urn)
            if nested is None:
                raise ElementNotFoundError(child_path(node_path, child.key))
            stack.append((child_path(node_path, child.key), nested))

    per_node = await asyncio.gather(
        *(
            _features_for_node(model, node_path, element, scale_elevation)
            for node_path, element in visited
            if element.volume_representation
        )
    )
    features = [feature for node_features in per_node for feature in node_features]
    if not features:
        return None
    logger.debug("Collected %d volume feature(s) below %s", len(features), path)
    return {"type": "FeatureCollection", "features": features}
