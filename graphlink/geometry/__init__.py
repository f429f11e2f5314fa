"""Geometry package — homogeneous transform helpers."""

from graphlink.geometry.transform import (
    IDENTITY,
    compose_coordinate,
    offset_elevation,
    scale_height,
    transform_ring,
)

__all__ = [
    "IDENTITY",
    "compose_coordinate",
    "transform_ring",
    "scale_height",
    "offset_elevation",
]
