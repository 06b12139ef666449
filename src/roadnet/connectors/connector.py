"""
Segment connector - Rigid alignment of one segment onto another.

Snapping segment B onto segment A:
1. Resolve the chosen connection on each segment
2. Rotate B about its own position so the two directions are antiparallel
3. Translate B so the two connection points coincide
4. Link both connections and check the result is within tolerance

B is never modified in place; every operation returns new segment values.
"""

from dataclasses import dataclass
from typing import Tuple
import logging
import math

from roadnet.config import GeometryConfig
from roadnet.connectors.resolver import ConnectionKey, ConnectionResolver
from roadnet.errors import AlignmentFailure, ConnectionInUse
from roadnet.geometry import RigidTransform, normalize_angle
from roadnet.segments.connection import RoadConnection
from roadnet.segments.segment import RoadSegment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectionGap:
    """Mismatch between two connections that should meet."""
    distance: float
    direction_error: float   # |dir_a + dir_b|, zero when antiparallel

    def within(self, config: GeometryConfig) -> bool:
        return (
            self.distance <= config.connection_tolerance
            and self.direction_error <= config.direction_tolerance
        )


class SegmentConnector:
    """Snaps segments together at named connections.

    Usage:
        connector = SegmentConnector()
        a, b = connector.connect(a, "end", b, "start")
        # b.connections.start now sits on a.connections.end
    """

    def __init__(
        self,
        config: GeometryConfig | None = None,
        resolver: ConnectionResolver | None = None,
    ):
        """Initialize connector.

        Args:
            config: Geometry tolerances
            resolver: Key resolver. A default resolver is used if None.
        """
        self.config = config or GeometryConfig()
        self.resolver = resolver or ConnectionResolver()

    @staticmethod
    def gap(conn_a: RoadConnection, conn_b: RoadConnection) -> ConnectionGap:
        """Measure how far two connections are from meeting."""
        return ConnectionGap(
            distance=conn_a.position.distance_to(conn_b.position),
            direction_error=(conn_a.direction + conn_b.direction).length,
        )

    def alignment_transform(
        self,
        a: RoadSegment,
        key_a: ConnectionKey,
        b: RoadSegment,
        key_b: ConnectionKey,
    ) -> RigidTransform:
        """Rigid transform that brings B's connection onto A's.

        The rotation is applied about B's position, then the translation.

        Raises:
            UnknownConnectionKey: if either key does not resolve
        """
        conn_a = self.resolver.resolve(a, key_a)
        conn_b = self.resolver.resolve(b, key_b)

        yaw_delta = normalize_angle((-conn_a.direction).heading - conn_b.direction.heading)
        rotation = RigidTransform(pivot=b.position, rotation=yaw_delta)
        rotated_b = rotation.apply_point(conn_b.position)
        return rotation.then_translate(conn_a.position - rotated_b)

    def align(
        self,
        a: RoadSegment,
        key_a: ConnectionKey,
        b: RoadSegment,
        key_b: ConnectionKey,
    ) -> RoadSegment:
        """Return B moved onto A without linking (dry run).

        Raises:
            UnknownConnectionKey: if either key does not resolve
            AlignmentFailure: if the moved connection misses A's
        """
        name_a, name_b = self.resolve_names(a, key_a, b, key_b)
        moved = b.transformed(self.alignment_transform(a, name_a, b, name_b))
        self.check(a, name_a, moved, name_b)
        return moved

    def connect(
        self,
        a: RoadSegment,
        key_a: ConnectionKey,
        b: RoadSegment,
        key_b: ConnectionKey,
    ) -> Tuple[RoadSegment, RoadSegment]:
        """Move B onto A and link the two connections.

        Returns:
            Tuple of (A with its connection linked, B moved and linked)

        Raises:
            UnknownConnectionKey: if either key does not resolve
            ConnectionInUse: if either connection is linked elsewhere
            AlignmentFailure: if the moved connection misses A's
        """
        # Compass keys depend on yaw, so pin the names before B rotates
        name_a, name_b = self.resolve_names(a, key_a, b, key_b)
        self._check_free(a, name_a, b)
        self._check_free(b, name_b, a)
        transform = self.alignment_transform(a, name_a, b, name_b)
        moved = b.transformed(transform)
        logger.debug(
            "Aligning segment %s (%s) onto segment %s (%s) with %r",
            b.id, name_b, a.id, name_a, transform,
        )
        return self.link(a, name_a, moved, name_b)

    def resolve_names(
        self,
        a: RoadSegment,
        key_a: ConnectionKey,
        b: RoadSegment,
        key_b: ConnectionKey,
    ) -> Tuple[str, str]:
        """Resolve both keys to connection names.

        Raises:
            UnknownConnectionKey: if either key does not resolve
        """
        return self.resolver.resolve_name(a, key_a), self.resolver.resolve_name(b, key_b)

    def link(
        self,
        a: RoadSegment,
        key_a: ConnectionKey,
        b: RoadSegment,
        key_b: ConnectionKey,
    ) -> Tuple[RoadSegment, RoadSegment]:
        """Link two connections that already meet, without moving either.

        Raises:
            UnknownConnectionKey: if either key does not resolve
            ConnectionInUse: if either connection is linked elsewhere
            AlignmentFailure: if the connections do not meet
        """
        self._check_free(a, key_a, b)
        self._check_free(b, key_b, a)
        self.check(a, key_a, b, key_b)

        name_a = self.resolver.resolve_name(a, key_a)
        name_b = self.resolver.resolve_name(b, key_b)
        linked_a = a.with_connection(name_a, a.get_connection(name_a).linked_to(b.id))
        linked_b = b.with_connection(name_b, b.get_connection(name_b).linked_to(a.id))
        logger.debug("Connected segment %s.%s to segment %s.%s", a.id, name_a, b.id, name_b)
        return linked_a, linked_b

    def check(
        self,
        a: RoadSegment,
        key_a: ConnectionKey,
        b: RoadSegment,
        key_b: ConnectionKey,
    ) -> ConnectionGap:
        """Verify two connections meet within tolerance.

        Raises:
            AlignmentFailure: if they do not
        """
        gap = self.gap(self.resolver.resolve(a, key_a), self.resolver.resolve(b, key_b))
        if not gap.within(self.config) or not math.isfinite(gap.distance):
            raise AlignmentFailure(gap.distance, gap.direction_error, self.config.connection_tolerance)
        return gap

    def _check_free(self, segment: RoadSegment, key: ConnectionKey, other: RoadSegment) -> None:
        conn = self.resolver.resolve(segment, key)
        if conn.connected_to_id is not None and conn.connected_to_id != other.id:
            raise ConnectionInUse(
                segment.id, self.resolver.resolve_name(segment, key), conn.connected_to_id
            )
