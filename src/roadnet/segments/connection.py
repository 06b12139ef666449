"""
Road connection - Named attachment points on a segment.

Defines:
- RoadConnection: position, outward direction, width and optional link
- Connection maps, one per segment kind, with a fixed set of names
"""

from dataclasses import dataclass, fields, replace
from typing import Callable, Iterator, Optional, Tuple

from roadnet.geometry import RigidTransform, Vector2, Vector3


@dataclass(frozen=True)
class RoadConnection:
    """Point at which a segment may be joined to another.

    `direction` is a unit vector in the ground plane pointing away from
    the segment. `connected_to_id` holds the id of the linked segment,
    or None while the connection is open.
    """
    position: Vector3
    direction: Vector2
    width: float
    connected_to_id: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.connected_to_id is None

    def linked_to(self, segment_id: Optional[str]) -> "RoadConnection":
        return replace(self, connected_to_id=segment_id)

    def transformed(self, transform: RigidTransform) -> "RoadConnection":
        return replace(
            self,
            position=transform.apply_point(self.position),
            direction=transform.apply_direction(self.direction),
        )


class ConnectionMap:
    """Base for the per-kind connection records.

    Subclasses are frozen dataclasses whose fields are RoadConnections;
    the field names are the connection names of that segment kind.
    """

    @classmethod
    def names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def get(self, name: str) -> RoadConnection:
        return getattr(self, name)

    def items(self) -> Iterator[Tuple[str, RoadConnection]]:
        for name in self.names():
            yield name, getattr(self, name)

    def with_connection(self, name: str, connection: RoadConnection):
        return replace(self, **{name: connection})

    def map(self, fn: Callable[[RoadConnection], RoadConnection]):
        """Apply `fn` to every connection, returning a new map."""
        return replace(self, **{name: fn(conn) for name, conn in self.items()})

    def __iter__(self) -> Iterator[RoadConnection]:
        for _, conn in self.items():
            yield conn


@dataclass(frozen=True)
class StraightConnections(ConnectionMap):
    start: RoadConnection
    end: RoadConnection


@dataclass(frozen=True)
class CurvedConnections(ConnectionMap):
    start: RoadConnection
    end: RoadConnection


@dataclass(frozen=True)
class IntersectionConnections(ConnectionMap):
    north: RoadConnection
    south: RoadConnection
    east: RoadConnection
    west: RoadConnection


@dataclass(frozen=True)
class JunctionConnections(ConnectionMap):
    main: RoadConnection
    end: RoadConnection
    branch: RoadConnection
