"""
Configuration - Tolerances and segment defaults.

Defines:
- Geometric tolerances shared by the factory, connector and builder
- Default segment dimensions used when a parameter is omitted
"""

from dataclasses import dataclass
import math


@dataclass
class GeometryConfig:
    """Numerical tolerances for geometry checks."""
    # Linked connection points must coincide within this distance
    connection_tolerance: float = 0.01

    # Linked directions must be antiparallel within this distance
    direction_tolerance: float = 0.01

    # Height above which a point is considered off the flat surface
    flat_tolerance: float = 0.001

    # Pitch/roll magnitude above which a rotation is not pure yaw
    rotation_tolerance: float = 0.001

    def __post_init__(self):
        """Validate tolerances."""
        for name in (
            "connection_tolerance",
            "direction_tolerance",
            "flat_tolerance",
            "rotation_tolerance",
        ):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"{name} must be positive, got {value}")


@dataclass
class SegmentDefaults:
    """Default dimensions for factory-built segments.

    Distances are in world units (meters for the bundled layouts).
    """
    # Shared
    width: float = 7.0
    pavement_width: float = 1.5
    lanes: int = 2

    # Straight
    straight_length: float = 20.0

    # Curve
    curve_radius: float = 15.0
    curve_angle: float = math.pi / 2   # Quarter turn

    # Junction
    junction_length: float = 14.0

    # Crosswalks are drawn on intersections and junctions by default
    straight_crosswalk: bool = False
    curve_crosswalk: bool = False
    intersection_crosswalk: bool = True
    junction_crosswalk: bool = True
