"""
Rigid transform - Yaw rotation about a pivot followed by a translation.

Used by the connector to move a segment (or a linked group of segments)
as one rigid body.
"""

from dataclasses import dataclass, field
import math

from roadnet.geometry.vectors import Vector2, Vector3, normalize_angle, ORIGIN


@dataclass(frozen=True)
class RigidTransform:
    """Rotation by `rotation` radians about `pivot`, then `translation`."""
    pivot: Vector3 = field(default=ORIGIN)
    rotation: float = 0.0
    translation: Vector3 = field(default=ORIGIN)

    @property
    def is_identity(self) -> bool:
        return (
            normalize_angle(self.rotation) == 0.0
            and self.translation == ORIGIN
        )

    def apply_point(self, point: Vector3) -> Vector3:
        """Transform a point; the result is always on the ground plane."""
        offset = (point - self.pivot).rotated_y(self.rotation)
        return (self.pivot + offset + self.translation).flattened()

    def apply_direction(self, direction: Vector2) -> Vector2:
        """Rotate a direction; translation does not affect directions."""
        return direction.rotated(self.rotation).normalized()

    def apply_yaw(self, yaw: float) -> float:
        return normalize_angle(yaw + self.rotation)

    def then_translate(self, translation: Vector3) -> "RigidTransform":
        """Same rotation with an extra translation appended."""
        return RigidTransform(
            pivot=self.pivot,
            rotation=self.rotation,
            translation=(self.translation + translation).flattened(),
        )

    def __repr__(self) -> str:
        return (
            f"RigidTransform(rotation={math.degrees(self.rotation):.2f}deg, "
            f"pivot={self.pivot.to_tuple()}, translation={self.translation.to_tuple()})"
        )
