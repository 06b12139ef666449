"""
Geometry module - Ground-plane vectors and rigid transforms.

This module contains:
- Vector2: Horizontal direction (x, z)
- Vector3: World-space point
- RigidTransform: Yaw rotation about a pivot plus translation
- Angle helpers: normalize_angle, angle_difference, yaw_matrix
"""

from roadnet.geometry.vectors import (
    ORIGIN,
    TWO_PI,
    Vector2,
    Vector3,
    angle_difference,
    normalize_angle,
    yaw_matrix,
)
from roadnet.geometry.transform import RigidTransform

__all__ = [
    "ORIGIN",
    "TWO_PI",
    "Vector2",
    "Vector3",
    "RigidTransform",
    "angle_difference",
    "normalize_angle",
    "yaw_matrix",
]
