"""
Connection resolver - Maps abstract keys to concrete connections.

A key is either a segment's own connection name ("start", "branch",
"north" on an intersection, ...) or a compass direction. Compass keys on
straights, curves and junctions depend on the segment's current yaw:
yaw is quantized into four 90 degree sectors and each sector rotates a
fixed table of compass names.
"""

from enum import Enum
from typing import Dict, Tuple, Union
import math
import numpy as np

from roadnet.errors import UnknownConnectionKey
from roadnet.geometry import normalize_angle
from roadnet.segments.connection import RoadConnection
from roadnet.segments.segment import (
    CurvedRoadSegment,
    IntersectionRoadSegment,
    JunctionRoadSegment,
    RoadSegment,
    StraightRoadSegment,
    TurnDirection,
)

QUARTER_TURN = math.pi / 2


class CompassDirection(Enum):
    """Compass directions in the ground plane (north is -Z, east is +X)."""
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def heading(self) -> float:
        """Heading of an outward direction pointing this way."""
        return _COMPASS_ORDER.index(self) * QUARTER_TURN

    @property
    def opposite(self) -> "CompassDirection":
        return self.rotated(2)

    def rotated(self, quarter_turns: int) -> "CompassDirection":
        """Rotate by a number of positive-yaw quarter turns (north -> west)."""
        index = _COMPASS_ORDER.index(self)
        return _COMPASS_ORDER[(index + quarter_turns) % 4]

    @classmethod
    def from_heading(cls, heading: float) -> "CompassDirection":
        """Compass direction whose 90 degree sector contains `heading`."""
        return _COMPASS_ORDER[yaw_sector(heading)]


# Ordered by increasing heading, starting from +Z
_COMPASS_ORDER: Tuple[CompassDirection, ...] = (
    CompassDirection.SOUTH,
    CompassDirection.EAST,
    CompassDirection.NORTH,
    CompassDirection.WEST,
)

ConnectionKey = Union[str, CompassDirection]


def yaw_sector(yaw: float) -> int:
    """Quantize an angle into one of four sectors.

    Sector k is centered on k * 90 degrees and covers
    [k * 90 - 45, k * 90 + 45). A boundary angle belongs to the sector
    above it; the ratio is rounded first so angles that only miss a
    boundary by float noise land on it.

    Args:
        yaw: Angle in radians (any range)

    Returns:
        Sector index 0-3
    """
    ratio = (normalize_angle(yaw) + QUARTER_TURN / 2) / QUARTER_TURN
    return int(np.floor(np.round(ratio, 9))) % 4


class ConnectionResolver:
    """Resolves connection keys on segments.

    Pure: the result depends only on the segment kind, its shape, its yaw
    and the requested key.

    Usage:
        resolver = ConnectionResolver()
        conn = resolver.resolve(straight, "north")  # "start" at yaw 0
    """

    def resolve(self, segment: RoadSegment, key: ConnectionKey) -> RoadConnection:
        """Get the connection a key refers to.

        Raises:
            UnknownConnectionKey: if the key does not apply to the segment
        """
        return segment.get_connection(self.resolve_name(segment, key))

    def resolve_name(self, segment: RoadSegment, key: ConnectionKey) -> str:
        """Get the connection name a key refers to.

        Raises:
            UnknownConnectionKey: if the key does not apply to the segment
        """
        name = self._key_name(key)
        if name in segment.connection_names:
            return name

        compass = self._compass(name)
        if compass is not None and not isinstance(segment, IntersectionRoadSegment):
            for semantic, facing in self.compass_table(segment).items():
                if facing is compass:
                    return semantic

        raise UnknownConnectionKey(key, segment.type, self.valid_keys(segment))

    def valid_keys(self, segment: RoadSegment) -> Tuple[str, ...]:
        """Keys that currently resolve on the segment."""
        names = list(segment.connection_names)
        if not isinstance(segment, IntersectionRoadSegment):
            for facing in self.compass_table(segment).values():
                if facing.value not in names:
                    names.append(facing.value)
        return tuple(names)

    def compass_table(self, segment: RoadSegment) -> Dict[str, CompassDirection]:
        """Compass direction of each connection at the segment's current yaw."""
        sector = yaw_sector(segment.yaw)
        return {
            name: compass.rotated(sector)
            for name, compass in self.sector_zero_table(segment).items()
        }

    @staticmethod
    def sector_zero_table(segment: RoadSegment) -> Dict[str, CompassDirection]:
        """Compass direction of each connection when yaw is in sector 0."""
        if isinstance(segment, StraightRoadSegment):
            return {"start": CompassDirection.NORTH, "end": CompassDirection.SOUTH}
        if isinstance(segment, CurvedRoadSegment):
            end_heading = segment.direction.sign * segment.angle
            return {
                "start": CompassDirection.NORTH,
                "end": CompassDirection.from_heading(end_heading),
            }
        if isinstance(segment, JunctionRoadSegment):
            branch = (
                CompassDirection.EAST
                if segment.branch_direction is TurnDirection.RIGHT
                else CompassDirection.WEST
            )
            return {
                "main": CompassDirection.NORTH,
                "end": CompassDirection.SOUTH,
                "branch": branch,
            }
        if isinstance(segment, IntersectionRoadSegment):
            return {name: CompassDirection(name) for name in segment.connection_names}
        raise TypeError(f"Unsupported segment: {type(segment).__name__}")

    @staticmethod
    def _key_name(key: ConnectionKey) -> str:
        if isinstance(key, CompassDirection):
            return key.value
        return str(key).strip().lower()

    @staticmethod
    def _compass(name: str) -> CompassDirection | None:
        try:
            return CompassDirection(name)
        except ValueError:
            return None
