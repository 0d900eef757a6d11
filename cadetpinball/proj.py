"""Perspective projection of table coordinates onto the screen."""

from __future__ import annotations

from typing import Sequence

from .maths import Vector, magnitude

Matrix = tuple[tuple[float, float, float, float], ...]

_ZERO_DEPTH_COEFFICIENT = 999999.88


def matrix_vector_multiply(matrix: Sequence[Sequence[float]], vec: Vector) -> Vector:
    """Transform ``vec`` by the first three rows of a 4x4 row-major matrix."""
    x, y, z = vec.x, vec.y, vec.z
    rows = [z * row[2] + y * row[1] + x * row[0] + row[3] for row in matrix[:3]]
    return Vector(*rows)


class Projection:
    """A camera: a 4x3 transform, a focal distance and a screen centre."""

    def __init__(self, mat4x3: Sequence[float], d: float, center_x: float, center_y: float) -> None:
        values = [float(v) for v in mat4x3]
        if len(values) != 12:
            raise ValueError(f"expected 12 matrix values, got {len(values)}")
        rows = tuple(tuple(values[i:i + 4]) for i in range(0, 12, 4))
        self.matrix: Matrix = rows + ((0.0, 0.0, 0.0, 1.0),)
        self.d = d
        self.center_x = center_x
        self.center_y = center_y

    def z_distance(self, vec: Vector) -> float:
        """Distance of ``vec`` from the camera."""
        return magnitude(matrix_vector_multiply(self.matrix, vec))

    def xform_to_2d(self, vec: Vector) -> tuple[int, int]:
        """Project ``vec`` to integer screen coordinates."""
        transformed = matrix_vector_multiply(self.matrix, vec)
        if transformed.z == 0.0:
            coef = _ZERO_DEPTH_COEFFICIENT
        else:
            coef = self.d / transformed.z
        return (
            int(transformed.x * coef + self.center_x),
            int(transformed.y * coef + self.center_y),
        )

    def recenter(self, center_x: float, center_y: float) -> None:
        self.center_x = center_x
        self.center_y = center_y