"""
Layout definitions - Declarative descriptions of road networks.

A layout lists segment parameter sets, connections by index and key, and
network options. It holds no placed geometry and no randomness; the
builder turns it into a network.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import math

from roadnet.connectors import ConnectionKey
from roadnet.geometry import Vector2, Vector3
from roadnet.segments.segment import RoadSegmentType, TurnDirection


@dataclass(frozen=True)
class SegmentSpec:
    """Segment kind plus keyword parameters for the factory."""
    segment_type: RoadSegmentType
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ConnectionSpec:
    """Connection between two segments of a layout, by index."""
    from_index: int
    from_connection: ConnectionKey
    to_index: int
    to_connection: ConnectionKey


@dataclass(frozen=True)
class LayoutOptions:
    """Network-level options of a layout."""
    id: Optional[str] = None
    name: Optional[str] = None
    start_point: Optional[Vector3] = None
    checkpoints: Tuple[Vector3, ...] = ()


@dataclass(frozen=True)
class RoadNetworkLayout:
    """Complete declarative network definition."""
    segments: Tuple[SegmentSpec, ...]
    connections: Tuple[ConnectionSpec, ...] = ()
    options: LayoutOptions = field(default_factory=LayoutOptions)

    @property
    def num_segments(self) -> int:
        return len(self.segments)


def chain_connections(count: int, closed: bool = False) -> List[ConnectionSpec]:
    """Connect each segment's end to the next segment's start.

    Args:
        count: Number of segments in the chain
        closed: Also connect the last segment back to the first

    Returns:
        Connection specs in chain order
    """
    connections = [ConnectionSpec(i, "end", i + 1, "start") for i in range(count - 1)]
    if closed and count > 1:
        connections.append(ConnectionSpec(count - 1, "end", 0, "start"))
    return connections


class PathWalker:
    """Pen that lays straights and curves end to end.

    Tracks the pose (ground position and heading) at the end of the last
    segment and emits segment specs that start exactly there, so a chain
    built from its output needs no correction when connected.

    Usage:
        walker = PathWalker(x=0.0, z=-10.0)
        specs = [walker.straight(20), walker.curve(15, math.pi / 2, "right")]
        walker.position   # pose after the curve
    """

    def __init__(self, x: float = 0.0, z: float = 0.0, heading: float = 0.0):
        self.x = x
        self.z = z
        self.heading = heading

    @property
    def position(self) -> Vector3:
        return Vector3(self.x, 0.0, self.z)

    @property
    def forward(self) -> Vector2:
        return Vector2.from_heading(self.heading)

    def straight(self, length: float, **params) -> SegmentSpec:
        """Straight of `length` ahead of the pen."""
        forward = self.forward
        center = (self.x + forward.x * length / 2, 0.0, self.z + forward.y * length / 2)
        spec = SegmentSpec(
            RoadSegmentType.STRAIGHT,
            dict(params, position=center, yaw=self.heading, length=length),
        )
        self.x += forward.x * length
        self.z += forward.y * length
        return spec

    def curve(
        self,
        radius: float,
        angle: float,
        direction: TurnDirection | str = TurnDirection.RIGHT,
        **params,
    ) -> SegmentSpec:
        """Circular curve from the pen, turning `direction` by `angle`."""
        turn = direction if isinstance(direction, TurnDirection) else TurnDirection(direction)
        spec = SegmentSpec(
            RoadSegmentType.CURVE,
            dict(
                params,
                position=(self.x, 0.0, self.z),
                yaw=self.heading,
                radius=radius,
                angle=angle,
                direction=turn,
            ),
        )
        offset = Vector3(
            turn.sign * radius * (1 - math.cos(angle)), 0.0, radius * math.sin(angle)
        ).rotated_y(self.heading)
        self.x += offset.x
        self.z += offset.z
        self.heading += turn.sign * angle
        return spec
