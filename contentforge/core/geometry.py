"""호스트 좌표계용 최소 벡터/행렬 헬퍼"""

from __future__ import annotations

import math
from typing import NamedTuple

# 호스트 월드 단위: 행성 반지름 = 1.0
PLANET_RADIUS_METERS = 8388608.0


class Vec3(NamedTuple):
    x: float
    y: float
    z: float

    def scaled(self, factor: float) -> "Vec3":
        return Vec3(self.x * factor, self.y * factor, self.z * factor)


Mat3 = tuple[tuple[float, float, float], tuple[float, float, float], tuple[float, float, float]]

ZERO = Vec3(0.0, 0.0, 0.0)

MAT3_IDENTITY: Mat3 = (
    (1.0, 0.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, 0.0, 1.0),
)


def m_to_p(value: float) -> float:
    """미터 -> 호스트 월드 단위"""
    return value / PLANET_RADIUS_METERS


def vec3_m_to_p(value: Vec3) -> Vec3:
    return value.scaled(1.0 / PLANET_RADIUS_METERS)


def mat3_multiply(a: Mat3, b: Mat3) -> Mat3:
    return tuple(  # type: ignore[return-value]
        tuple(sum(a[i][k] * b[k][j] for k in range(3)) for j in range(3))
        for i in range(3)
    )


def mat3_rotate(matrix: Mat3, angle: float, axis: Vec3) -> Mat3:
    """matrix에 axis 기준 angle(rad) 회전을 곱한다. 영벡터 축이면 그대로 반환."""
    length = math.sqrt(axis[0] ** 2 + axis[1] ** 2 + axis[2] ** 2)
    if length == 0.0:
        return matrix

    x, y, z = axis[0] / length, axis[1] / length, axis[2] / length
    c = math.cos(angle)
    s = math.sin(angle)
    t = 1.0 - c

    rotation: Mat3 = (
        (t * x * x + c, t * x * y - s * z, t * x * z + s * y),
        (t * x * y + s * z, t * y * y + c, t * y * z - s * x),
        (t * x * z - s * y, t * y * z + s * x, t * z * z + c),
    )
    return mat3_multiply(matrix, rotation)
