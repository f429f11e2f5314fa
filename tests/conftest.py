"""Shared fixtures: a small site model used across the pipeline tests.

Tree (keys → URNs)::

    root
    ├── terrain          category=terrain, triangles
    ├── b1               translate(10, 20); footprint 2x2; one embedded volume
    │   └── floor        z-scale 2, z-offset 5; embedded volumes, startsWith "lvl"
    └── group
        ├── a            linked volume (blob-a); footprint 4x1
        └── b            volume of an unsupported kind
"""

from __future__ import annotations

from typing import Any

import pytest

from graphlink.model.snapshot import SnapshotModelService

IDENTITY = [1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0, 1.0]


def translation(tx: float, ty: float, tz: float = 0.0) -> list[float]:
    return [1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, tx, ty, tz, 1.0]


def z_scale(scale: float, tz: float = 0.0) -> list[float]:
    return [1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0, scale, 0.0, 0.0, 0.0, tz, 1.0]


def feature(
    fid: str,
    ring: list[list[float]],
    height: float,
    elevation: float | None = None,
) -> dict[str, Any]:
    properties: dict[str, Any] = {"height": height}
    if elevation is not None:
        properties["elevation"] = elevation
    return {
        "type": "Feature",
        "id": fid,
        "properties": properties,
        "geometry": {"type": "Polygon", "coordinates": [ring]},
    }


def embedded(features: list[dict[str, Any]], selection: dict | None = None) -> dict[str, Any]:
    rep: dict[str, Any] = {
        "type": "embedded-json",
        "data": {"type": "FeatureCollection", "features": features},
    }
    if selection is not None:
        rep["selection"] = selection
    return rep


TRIANGLE = [[0.0, 0.0], [2.0, 0.0], [2.0, 2.0]]


def build_site_document() -> dict[str, Any]:
    return {
        "rootUrn": "urn:root",
        "region": "EMEA",
        "projectId": "pro_1",
        "project": {"id": "pro_1", "name": "Site"},
        "elements": {
            "urn:root": {
                "children": [
                    {"key": "terrain", "urn": "urn:terrain"},
                    {"key": "b1", "urn": "urn:b1", "transform": translation(10, 20)},
                    {"key": "group", "urn": "urn:group"},
                ]
            },
            "urn:terrain": {
                "properties": {"category": "terrain"},
                "geometry": {"triangles": [0, 0, 0, 100, 0, 0, 0, 100, 0]},
            },
            "urn:b1": {
                "properties": {"category": "building"},
                "children": [{"key": "floor", "urn": "urn:floor", "transform": z_scale(2, 5)}],
                "geometry": {
                    "triangles": [0, 0, 0, 2, 0, 0, 2, 2, 0],
                    "footprint": [[[0, 0], [2, 0], [2, 2], [0, 2]]],
                },
                "representations": {
                    "volume25DCollection": embedded([feature("b1-main", TRIANGLE, 10)])
                },
            },
            "urn:floor": {
                "representations": {
                    "volume25DCollection": embedded(
                        [
                            feature("lvl-1", TRIANGLE, 3, elevation=1),
                            feature("roof", TRIANGLE, 1),
                        ],
                        selection={"type": "startsWith", "value": "lvl"},
                    )
                },
            },
            "urn:group": {
                "children": [
                    {"key": "a", "urn": "urn:a"},
                    {"key": "b", "urn": "urn:b"},
                ]
            },
            "urn:a": {
                "geometry": {"footprint": [[[0, 0], [4, 0], [4, 1], [0, 1]]]},
                "representations": {
                    "volume25DCollection": {"type": "linked", "blobId": "blob-a"}
                },
            },
            "urn:b": {
                "representations": {"volume25DCollection": {"type": "external-ref"}},
            },
        },
        "blobs": {
            "blob-a": {
                "type": "FeatureCollection",
                "features": [feature("a-1", [[0, 0], [1, 0], [1, 1]], 6, elevation=2)],
            }
        },
    }


SITE_PATHS = [
    "root",
    "root/terrain",
    "root/b1",
    "root/b1/floor",
    "root/group",
    "root/group/a",
    "root/group/b",
]


@pytest.fixture()
def site_document() -> dict[str, Any]:
    return build_site_document()


@pytest.fixture()
def site_model(site_document: dict[str, Any]) -> SnapshotModelService:
    return SnapshotModelService(site_document)
