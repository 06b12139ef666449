"""
Vectors - Points, directions and horizontal-plane rotation.

Coordinate frame:
- x points east, y points up, z points south
- Yaw rotates about +y: R(yaw) maps (x, z) to
  (x*cos(yaw) + z*sin(yaw), -x*sin(yaw) + z*cos(yaw))
- The heading of a horizontal direction (dx, dz) is atan2(dx, dz), so
  R(yaw) applied to (0, 0, 1) has heading yaw
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union
import math
import numpy as np


TWO_PI = 2 * math.pi


def normalize_angle(angle: float) -> float:
    """Wrap an angle into [0, 2*pi).

    Args:
        angle: Angle in radians

    Returns:
        Equivalent angle in [0, 2*pi)
    """
    wrapped = math.fmod(angle, TWO_PI)
    if wrapped < 0:
        wrapped += TWO_PI
    # fmod of a tiny negative can round up to exactly 2*pi
    if wrapped >= TWO_PI:
        wrapped = 0.0
    return wrapped


def angle_difference(a: float, b: float) -> float:
    """Smallest signed difference a - b, in [-pi, pi)."""
    return normalize_angle(a - b + math.pi) - math.pi


def yaw_matrix(yaw: float) -> np.ndarray:
    """Get the 2x2 matrix rotating (x, z) pairs by yaw.

    Args:
        yaw: Rotation about the vertical axis in radians

    Returns:
        Rotation matrix acting on column vectors (x, z)
    """
    c = math.cos(yaw)
    s = math.sin(yaw)
    return np.array([[c, s], [-s, c]])


@dataclass(frozen=True)
class Vector2:
    """Direction or offset in the horizontal plane.

    Components are (x, z) in world terms.
    """
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def of(cls, value: Union["Vector2", Sequence[float]]) -> "Vector2":
        """Coerce a Vector2 or a 2-sequence."""
        if isinstance(value, Vector2):
            return value
        x, y = value
        return cls(float(x), float(y))

    @classmethod
    def from_heading(cls, heading: float) -> "Vector2":
        """Unit vector with the given heading."""
        return cls(math.sin(heading), math.cos(heading))

    @property
    def heading(self) -> float:
        """Heading in radians, [0, 2*pi)."""
        return normalize_angle(math.atan2(self.x, self.y))

    @property
    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalized(self) -> "Vector2":
        """Unit vector in the same direction (zero stays zero)."""
        length = self.length
        if length == 0:
            return self
        return Vector2(self.x / length, self.y / length)

    def dot(self, other: "Vector2") -> float:
        return self.x * other.x + self.y * other.y

    def distance_to(self, other: "Vector2") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def rotated(self, yaw: float) -> "Vector2":
        """Rotate about the vertical axis."""
        x, y = yaw_matrix(yaw) @ np.array([self.x, self.y])
        return Vector2(float(x), float(y))

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __neg__(self) -> "Vector2":
        return Vector2(-self.x, -self.y)

    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2":
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__


@dataclass(frozen=True)
class Vector3:
    """Point or offset in world space."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def of(cls, value: Union["Vector3", Sequence[float]]) -> "Vector3":
        """Coerce a Vector3, a 3-sequence or a numpy array."""
        if isinstance(value, Vector3):
            return value
        x, y, z = value
        return cls(float(x), float(y), float(z))

    def flattened(self) -> "Vector3":
        """Same point with y forced to 0."""
        return Vector3(self.x, 0.0, self.z)

    def is_flat(self, tolerance: float = 0.0) -> bool:
        return abs(self.y) <= tolerance

    def rotated_y(self, yaw: float) -> "Vector3":
        """Rotate about the vertical axis through the origin."""
        x, z = yaw_matrix(yaw) @ np.array([self.x, self.z])
        return Vector3(float(x), self.y, float(z))

    def distance_to(self, other: "Vector3") -> float:
        return math.sqrt(
            (self.x - other.x) ** 2
            + (self.y - other.y) ** 2
            + (self.z - other.z) ** 2
        )

    def is_close(self, other: "Vector3", tolerance: float) -> bool:
        return self.distance_to(other) <= tolerance

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Vector3":
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__


ORIGIN = Vector3()
