"""
Road segment - Immutable descriptors for the four segment kinds.

Defines:
- RoadSegmentType: straight, curve, intersection, junction
- TurnDirection: left/right for curves and junction branches
- RoadSegment and its four variants, each with its own connection map

Segments are frozen. Re-placing a segment produces a new value with its
position, yaw and every connection rewritten together.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar, Dict, Iterator, Mapping, Tuple
import math

from roadnet.geometry import RigidTransform, Vector3
from roadnet.segments.connection import (
    ConnectionMap,
    CurvedConnections,
    IntersectionConnections,
    JunctionConnections,
    RoadConnection,
    StraightConnections,
)


class RoadSegmentType(Enum):
    """Types of road segments."""
    STRAIGHT = "straight"
    CURVE = "curve"
    INTERSECTION = "intersection"
    JUNCTION = "junction"


class TurnDirection(Enum):
    """Turn direction of a curve or side of a junction branch."""
    LEFT = "left"
    RIGHT = "right"

    @property
    def sign(self) -> int:
        """+1 for left, -1 for right (heading change per unit angle)."""
        return 1 if self is TurnDirection.LEFT else -1


@dataclass(frozen=True)
class RoadSegment:
    """Common fields of every road segment.

    `position` is the segment's anchor on the ground plane: the center for
    straights, intersections and junctions, the start point for curves.
    `texture_options` is carried through untouched for renderers.
    """
    segment_type: ClassVar[RoadSegmentType]

    id: str
    position: Vector3
    yaw: float
    width: float
    length: float
    connections: ConnectionMap
    lanes: int = 2
    pavement_width: float = 1.5
    has_crosswalk: bool = False
    texture_options: Mapping[str, Any] = field(default_factory=dict)

    @property
    def type(self) -> str:
        return self.segment_type.value

    @property
    def connection_names(self) -> Tuple[str, ...]:
        return self.connections.names()

    def get_connection(self, name: str) -> RoadConnection:
        """Get a connection by its semantic name.

        Raises:
            KeyError: if the segment kind has no connection of that name
        """
        if name not in self.connection_names:
            raise KeyError(name)
        return self.connections.get(name)

    def iter_connections(self) -> Iterator[Tuple[str, RoadConnection]]:
        return self.connections.items()

    @property
    def linked_segment_ids(self) -> Tuple[str, ...]:
        return tuple(
            conn.connected_to_id
            for _, conn in self.iter_connections()
            if conn.connected_to_id is not None
        )

    @property
    def open_connection_names(self) -> Tuple[str, ...]:
        return tuple(name for name, conn in self.iter_connections() if conn.is_open)

    def with_connection(self, name: str, connection: RoadConnection) -> "RoadSegment":
        return replace(self, connections=self.connections.with_connection(name, connection))

    def transformed(self, transform: RigidTransform) -> "RoadSegment":
        """Apply a rigid transform to the segment and all its connections."""
        return replace(
            self,
            position=transform.apply_point(self.position),
            yaw=transform.apply_yaw(self.yaw),
            connections=self.connections.map(lambda conn: conn.transformed(transform)),
        )

    def describe(self) -> Dict[str, Any]:
        """Summary of the segment's placement for logs and debugging."""
        return {
            "id": self.id,
            "type": self.type,
            "position": self.position.to_tuple(),
            "yaw_deg": math.degrees(self.yaw),
            "width": self.width,
            "length": self.length,
            "connections": {
                name: {
                    "position": conn.position.to_tuple(),
                    "direction": conn.direction.to_tuple(),
                    "connected_to": conn.connected_to_id,
                }
                for name, conn in self.iter_connections()
            },
        }


@dataclass(frozen=True)
class StraightRoadSegment(RoadSegment):
    segment_type: ClassVar[RoadSegmentType] = RoadSegmentType.STRAIGHT

    connections: StraightConnections


@dataclass(frozen=True)
class CurvedRoadSegment(RoadSegment):
    """Circular arc starting at `position`.

    Travel enters through `start` and turns `direction` by `angle` radians.
    """
    segment_type: ClassVar[RoadSegmentType] = RoadSegmentType.CURVE

    connections: CurvedConnections
    radius: float = 15.0
    angle: float = math.pi / 2
    direction: TurnDirection = TurnDirection.RIGHT


@dataclass(frozen=True)
class IntersectionRoadSegment(RoadSegment):
    segment_type: ClassVar[RoadSegmentType] = RoadSegmentType.INTERSECTION

    connections: IntersectionConnections


@dataclass(frozen=True)
class JunctionRoadSegment(RoadSegment):
    """T-junction: a stem from `main` to `end` with a side `branch`."""
    segment_type: ClassVar[RoadSegmentType] = RoadSegmentType.JUNCTION

    connections: JunctionConnections
    branch_direction: TurnDirection = TurnDirection.RIGHT


def connection_names_for(segment_type: RoadSegmentType) -> Tuple[str, ...]:
    """Connection names carried by a segment kind."""
    connection_map = {
        RoadSegmentType.STRAIGHT: StraightConnections,
        RoadSegmentType.CURVE: CurvedConnections,
        RoadSegmentType.INTERSECTION: IntersectionConnections,
        RoadSegmentType.JUNCTION: JunctionConnections,
    }[segment_type]
    return connection_map.names()
