"""4x4 homogeneous transforms applied to planar coordinates and 2.5D attributes.

Matrices are flat sequences of 16 numbers in **column-major** order (the
OpenGL / gl-matrix layout used by the model service)::

    [m00, m10, m20, m30,  m01, m11, m21, m31,  m02, m12, m22, m32,  tx, ty, tz, 1]

so index 10 is the vertical scale term and indices 12, 13, 14 hold the
translation.  The coordinate and attribute helpers take the already-composed
path-to-world transform; :func:`multiply` is there for model services that
compose it.
"""

from __future__ import annotations

from typing import Sequence

Transform = Sequence[float]

IDENTITY: tuple[float, ...] = (
    1.0, 0.0, 0.0, 0.0,
    0.0, 1.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0,
    0.0, 0.0, 0.0, 1.0,
)

_Z_SCALE = 10
_Z_TRANSLATION = 14


def _check(transform: Transform) -> None:
    if len(transform) != 16:
        raise ValueError(f"Expected a 16-element transform, got {len(transform)}")


def compose_coordinate(transform: Transform, point: Sequence[float]) -> list[float]:
    """Re-project a planar ``[x, y]`` point (z = 0, w = 1) and drop z/w."""
    _check(transform)
    x, y = point[0], point[1]
    t = transform
    return [
        t[0] * x + t[4] * y + t[12],
        t[1] * x + t[5] * y + t[13],
    ]


def transform_ring(transform: Transform, ring: Sequence[Sequence[float]]) -> list[list[float]]:
    """Apply :func:`compose_coordinate` to every point of *ring*, keeping order."""
    return [compose_coordinate(transform, point) for point in ring]


def scale_height(transform: Transform, height: float) -> float:
    _check(transform)
    return height * transform[_Z_SCALE]


def offset_elevation(
    transform: Transform,
    elevation: float | None,
    *,
    scale: bool = True,
) -> float:
    """Move an elevation into world space.

    An absent elevation counts as zero *before* scaling, so the result is the
    bare vertical translation.  With ``scale=False`` a present elevation is only
    translated, never scaled, which is how older model exports were read.
    """
    _check(transform)
    base = 0.0 if elevation is None else elevation
    if scale:
        base = transform[_Z_SCALE] * base
    return base + transform[_Z_TRANSLATION]


def multiply(a: Transform, b: Transform) -> list[float]:
    """Return ``a @ b`` for two column-major matrices.

    Used by model-service implementations that compose a world transform
    from the local transforms along a path; the engine functions above
    never call it.
    """
    _check(a)
    _check(b)
    out = [0.0] * 16
    for col in range(4):
        for row in range(4):
            out[col * 4 + row] = sum(a[k * 4 + row] * b[col * 4 + k] for k in range(4))
    return out
