"""Tests for graphlink.geometry.transform — column-major 4x4 helpers."""

from __future__ import annotations

import pytest

from graphlink.geometry.transform import (
    IDENTITY,
    compose_coordinate,
    multiply,
    offset_elevation,
    scale_height,
    transform_ring,
)

from conftest import translation, z_scale


# Rotation by 90° about z followed by translation (5, -1, 0), column-major.
ROTATE_90_THEN_MOVE = [
    0.0, 1.0, 0.0, 0.0,
    -1.0, 0.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0,
    5.0, -1.0, 0.0, 1.0,
]


class TestComposeCoordinate:
    def test_identity_keeps_point(self) -> None:
        assert compose_coordinate(IDENTITY, [3.5, -2.0]) == [3.5, -2.0]

    def test_translation(self) -> None:
        assert compose_coordinate(translation(10, 20), [1, 2]) == [11, 22]

    def test_rotation_and_translation(self) -> None:
        # (1, 0) rotates to (0, 1), then moves by (5, -1).
        assert compose_coordinate(ROTATE_90_THEN_MOVE, [1, 0]) == [5.0, 0.0]

    def test_vertical_terms_do_not_leak_into_plane(self) -> None:
        assert compose_coordinate(z_scale(3, tz=7), [2, 4]) == [2, 4]

    def test_ignores_extra_ordinates(self) -> None:
        assert compose_coordinate(translation(1, 1), [0, 0, 99]) == [1, 1]

    def test_rejects_short_matrix(self) -> None:
        with pytest.raises(ValueError):
            compose_coordinate([1, 0, 0, 1], [0, 0])


class TestTransformRing:
    def test_preserves_point_order(self) -> None:
        ring = [[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]
        moved = transform_ring(translation(2, 3), ring)
        assert moved == [[2, 3], [3, 3], [3, 4], [2, 4], [2, 3]]


class TestScaleHeight:
    def test_multiplies_by_vertical_scale(self) -> None:
        assert scale_height(z_scale(2), 7.5) == 15.0

    def test_translation_does_not_change_height(self) -> None:
        assert scale_height(translation(0, 0, 40), 3) == 3


class TestOffsetElevation:
    def test_absent_elevation_yields_exact_translation(self) -> None:
        assert offset_elevation(z_scale(4, tz=9), None) == 9

    def test_absent_elevation_without_scaling(self) -> None:
        assert offset_elevation(z_scale(4, tz=9), None, scale=False) == 9

    def test_present_elevation_is_scaled_then_translated(self) -> None:
        assert offset_elevation(z_scale(2, tz=5), 3) == 11

    def test_present_elevation_unscaled_mode(self) -> None:
        assert offset_elevation(z_scale(2, tz=5), 3, scale=False) == 8

    def test_zero_elevation_matches_absent(self) -> None:
        transform = z_scale(2, tz=5)
        assert offset_elevation(transform, 0) == offset_elevation(transform, None) == 5


class TestMultiply:
    def test_identity_is_neutral(self) -> None:
        m = translation(3, 4, 5)
        assert multiply(IDENTITY, m) == m
        assert multiply(m, IDENTITY) == m

    def test_parent_translation_then_child_scale(self) -> None:
        world = multiply(translation(10, 20), z_scale(2, tz=5))
        assert world[10] == 2
        assert world[12:15] == [10, 20, 5]

    def test_translations_accumulate(self) -> None:
        world = multiply(translation(1, 2, 3), translation(4, 5, 6))
        assert world[12:15] == [5, 7, 9]
