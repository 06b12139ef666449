"""
Road network builder - Assembles segments and connections into a network.

Provides:
- Fluent accumulation of segments, start point, checkpoints, connections
- Non-mutating validation that returns a full issue list
- A single build() that replays connections and freezes a RoadNetwork
- Construction from declarative layouts
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union
import logging
import math
import uuid

from roadnet.config import GeometryConfig
from roadnet.connectors import ConnectionKey, SegmentConnector
from roadnet.errors import (
    AlignmentFailure,
    BuilderReused,
    ConnectionInUse,
    FlatSurfaceViolation,
    GeometryWarning,
    UnknownConnectionKey,
    YawOnlyViolation,
)
from roadnet.geometry import ORIGIN, Vector3
from roadnet.layouts.layout import RoadNetworkLayout
from roadnet.network.issues import IssueCode, IssueSeverity, NetworkIssue
from roadnet.network.network import RoadNetwork
from roadnet.segments.factory import RoadSegmentFactory
from roadnet.segments.segment import (
    CurvedRoadSegment,
    RoadSegment,
    StraightRoadSegment,
)

logger = logging.getLogger(__name__)

PointLike = Union[Vector3, Sequence[float]]


class BuilderState(Enum):
    """Lifecycle of a builder."""
    ACCUMULATING = "accumulating"
    BUILT = "built"


@dataclass(frozen=True)
class SegmentConnection:
    """Declared connection between two segments, by index."""
    from_index: int
    from_key: ConnectionKey
    to_index: int
    to_key: ConnectionKey


class RoadNetworkBuilder:
    """Builder for road networks.

    Declarations are cheap and never fail on geometry: connections are
    resolved and executed during build(). Connectivity problems are
    collected as issues and the affected declaration is skipped, so a
    partial network is still produced. Misuse (building twice) raises.

    Usage:
        builder = RoadNetworkBuilder("Demo")
        builder.add_segments([a, b]).connect_segments(0, "end", 1, "start")
        network = builder.build()
        builder.issues   # diagnostics from the build
    """

    def __init__(
        self,
        name: str = "Road Network",
        config: GeometryConfig | None = None,
        connector: SegmentConnector | None = None,
    ):
        """Initialize builder.

        Args:
            name: Network name
            config: Geometry tolerances
            connector: Segment connector. Built from `config` if None.
        """
        self.config = config or GeometryConfig()
        self.connector = connector or SegmentConnector(self.config)

        self._id: str = str(uuid.uuid4())
        self._name: str = name
        self._state = BuilderState.ACCUMULATING

        # Declarations
        self._segments: List[RoadSegment] = []
        self._start_point: Optional[Vector3] = None
        self._checkpoints: List[Vector3] = []
        self._connections: List[Tuple[int, SegmentConnection]] = []  # (declaration index, connection)
        self._declaration_count: int = 0

        # Diagnostics
        self._declaration_issues: List[NetworkIssue] = []
        self._warnings: List[GeometryWarning] = []
        self._issues: List[NetworkIssue] = []

    @property
    def state(self) -> BuilderState:
        return self._state

    @property
    def is_built(self) -> bool:
        return self._state is BuilderState.BUILT

    @property
    def segments(self) -> Tuple[RoadSegment, ...]:
        """Declared segments, as added (before connections are executed)."""
        return tuple(self._segments)

    @property
    def connections(self) -> Tuple[SegmentConnection, ...]:
        """Accepted connection declarations, in order."""
        return tuple(connection for _, connection in self._connections)

    @property
    def issues(self) -> List[NetworkIssue]:
        """Issues from the last build(), or from declarations before it."""
        if self.is_built:
            return list(self._issues)
        return list(self._declaration_issues)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def set_id(self, network_id: str) -> "RoadNetworkBuilder":
        self._require_accumulating("set the network id")
        self._id = network_id
        return self

    def set_name(self, name: str) -> "RoadNetworkBuilder":
        self._require_accumulating("set the network name")
        self._name = name
        return self

    def add_segment(self, segment: RoadSegment) -> "RoadNetworkBuilder":
        """Append a segment to the network."""
        self._require_accumulating("add segments")
        self._segments.append(segment)
        return self

    def add_segments(self, segments: Iterable[RoadSegment]) -> "RoadNetworkBuilder":
        """Append several segments, keeping their order."""
        self._require_accumulating("add segments")
        self._segments.extend(segments)
        return self

    def set_start_point(self, point: PointLike) -> "RoadNetworkBuilder":
        self._require_accumulating("set the start point")
        self._start_point = self._ground_point("set_start_point", point)
        return self

    def add_checkpoint(self, point: PointLike) -> "RoadNetworkBuilder":
        self._require_accumulating("add checkpoints")
        self._checkpoints.append(self._ground_point("add_checkpoint", point))
        return self

    def add_checkpoints(self, points: Iterable[PointLike]) -> "RoadNetworkBuilder":
        for point in points:
            self.add_checkpoint(point)
        return self

    def record_warnings(self, warnings: Iterable[GeometryWarning]) -> "RoadNetworkBuilder":
        """Attach geometry corrections made upstream (e.g. by a factory)."""
        self._require_accumulating("record warnings")
        self._warnings.extend(warnings)
        return self

    def connect_segments(
        self,
        from_index: int,
        from_key: ConnectionKey,
        to_index: int,
        to_key: ConnectionKey,
    ) -> "RoadNetworkBuilder":
        """Declare a connection; segment `to_index` is snapped onto `from_index`.

        Indices are checked now against the segments added so far; a bad
        declaration is recorded as an issue and dropped. Keys are resolved
        during build().
        """
        self._require_accumulating("connect segments")
        declaration = self._declaration_count
        self._declaration_count += 1

        count = len(self._segments)
        if not (self._valid_index(from_index, count) and self._valid_index(to_index, count)):
            self._declaration_issues.append(NetworkIssue(
                IssueSeverity.ERROR,
                IssueCode.INVALID_CONNECTION_INDEX,
                f"Segment index out of bounds: {from_index} -> {to_index} "
                f"with {count} segments",
                connection_index=declaration,
            ))
            return self

        if from_index == to_index:
            self._declaration_issues.append(NetworkIssue(
                IssueSeverity.ERROR,
                IssueCode.SELF_CONNECTION,
                f"Cannot connect segment {from_index} to itself",
                connection_index=declaration,
                segment_index=from_index,
            ))
            return self

        self._connections.append(
            (declaration, SegmentConnection(from_index, from_key, to_index, to_key))
        )
        return self

    # ------------------------------------------------------------------
    # Validation and build
    # ------------------------------------------------------------------

    def validate(self) -> List[NetworkIssue]:
        """Check the declarations without changing anything.

        Returns:
            Every issue the current declarations would produce, including a
            dry run of all declared connections
        """
        issues = self._base_issues()
        if self._start_point is None:
            issues.append(NetworkIssue(
                IssueSeverity.ERROR,
                IssueCode.NO_START_POINT,
                "Network must have a start point",
            ))
        segments, flat_issues = self._corrected_segments(self._segments)
        _, connection_issues = self._replay_connections(segments)
        return issues + flat_issues + connection_issues

    def build(self) -> RoadNetwork:
        """Execute all declared connections and freeze the network.

        Returns:
            The built network

        Raises:
            BuilderReused: if build() was already called on this builder
        """
        if self.is_built:
            raise BuilderReused("This builder has already been used")

        issues = self._base_issues()
        segments, flat_issues = self._corrected_segments(self._segments)
        segments, connection_issues = self._replay_connections(segments)
        self._issues = issues + flat_issues + connection_issues

        network = RoadNetwork(
            id=self._id,
            name=self._name,
            segments=tuple(segments),
            start_point=self._start_point or self._default_start_point(segments),
            checkpoints=tuple(self._checkpoints),
        )
        self._state = BuilderState.BUILT

        logger.info(
            "Built network %r: %d segments, %d connections, %d issues",
            network.name, network.num_segments, len(self._connections), len(self._issues),
        )
        return network

    # ------------------------------------------------------------------
    # Factory methods
    # ------------------------------------------------------------------

    @classmethod
    def create_from_layout(
        cls,
        layout: RoadNetworkLayout,
        factory: RoadSegmentFactory | None = None,
        config: GeometryConfig | None = None,
    ) -> RoadNetwork:
        """Build a network from a layout definition.

        Args:
            layout: Segment specs, connections and options
            factory: Segment factory. A default factory is used if None.
            config: Geometry tolerances

        Returns:
            The built network

        Raises:
            InvalidGeometry: if a segment spec has degenerate sizes
        """
        return cls.from_layout(layout, factory, config).build()

    @classmethod
    def from_layout(
        cls,
        layout: RoadNetworkLayout,
        factory: RoadSegmentFactory | None = None,
        config: GeometryConfig | None = None,
    ) -> "RoadNetworkBuilder":
        """Builder holding a layout's declarations, not yet built."""
        factory = factory or RoadSegmentFactory(geometry=config)
        builder = cls(layout.options.name or "Road Network", config=config)
        if layout.options.id:
            builder.set_id(layout.options.id)

        first_warning = len(factory.warnings)
        builder.add_segments(
            factory.create(spec.segment_type, **spec.params) for spec in layout.segments
        )
        builder.record_warnings(factory.warnings[first_warning:])

        if layout.options.start_point is not None:
            builder.set_start_point(layout.options.start_point)
        builder.add_checkpoints(layout.options.checkpoints)

        for connection in layout.connections:
            builder.connect_segments(
                connection.from_index,
                connection.from_connection,
                connection.to_index,
                connection.to_connection,
            )
        return builder

    @classmethod
    def create_test_network(cls) -> RoadNetwork:
        """Small open L-shaped network."""
        from roadnet.layouts.tracks import test_track
        return cls.create_from_layout(test_track())

    @classmethod
    def create_square_network(
        cls,
        side_length: float = 80.0,
        corner_radius: float = 15.0,
        road_width: float = 7.0,
    ) -> RoadNetwork:
        """Closed square loop with quarter-circle corners."""
        from roadnet.layouts.tracks import square
        return cls.create_from_layout(square(side_length, corner_radius, road_width))

    @classmethod
    def create_figure8_network(
        cls,
        track_width: float = 80.0,
        corner_radius: float = 20.0,
        road_width: float = 7.0,
    ) -> RoadNetwork:
        """Closed self-crossing figure-eight loop."""
        from roadnet.layouts.tracks import figure8
        return cls.create_from_layout(figure8(track_width, corner_radius, road_width))

    @classmethod
    def create_grid_city_network(cls, size: int = 3, tile_size: float = 7.0) -> RoadNetwork:
        """Street grid of intersections joined by straights."""
        from roadnet.layouts.grid import grid_city
        return cls.create_from_layout(grid_city(size, tile_size))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_accumulating(self, action: str) -> None:
        if self.is_built:
            raise BuilderReused(f"Cannot {action}: this builder has already been used")

    @staticmethod
    def _valid_index(index: int, count: int) -> bool:
        return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < count

    def _ground_point(self, context: str, point: PointLike) -> Vector3:
        point = Vector3.of(point)
        if not point.is_flat(self.config.flat_tolerance):
            warning = FlatSurfaceViolation(
                context, f"Point must be on flat surface (y = 0), got y = {point.y}. Correcting to y = 0."
            )
            logger.warning("%s", warning)
            self._warnings.append(warning)
        return point.flattened()

    def _base_issues(self) -> List[NetworkIssue]:
        """Issues shared by validate() and build()."""
        issues = list(self._declaration_issues)
        if not self._segments:
            issues.append(NetworkIssue(
                IssueSeverity.ERROR,
                IssueCode.NO_SEGMENTS,
                "Network must have at least one segment",
            ))
        for warning in self._warnings:
            code = IssueCode.YAW_ONLY if isinstance(warning, YawOnlyViolation) else IssueCode.FLAT_SURFACE
            issues.append(NetworkIssue(IssueSeverity.WARNING, code, str(warning)))

        seen: Dict[str, int] = {}
        for index, segment in enumerate(self._segments):
            if segment.id in seen:
                issues.append(NetworkIssue(
                    IssueSeverity.ERROR,
                    IssueCode.DUPLICATE_SEGMENT_ID,
                    f"Segment {index} reuses id {segment.id} of segment {seen[segment.id]}; "
                    "it is given a new id",
                    segment_index=index,
                ))
            else:
                seen[segment.id] = index
        return issues

    def _corrected_segments(
        self, segments: Sequence[RoadSegment]
    ) -> Tuple[List[RoadSegment], List[NetworkIssue]]:
        """Enforce the flat-surface, yaw-only and unique-id invariants on each segment.

        Heights are zeroed and non-unit directions renormalized; both are
        reported as warnings. A non-finite yaw cannot be corrected and is
        reported as an error. A repeated id is replaced with a fresh one so
        that connections resolve to a single segment.
        """
        corrected: List[RoadSegment] = []
        issues: List[NetworkIssue] = []
        seen_ids: Set[str] = set()
        flat_tolerance = self.config.flat_tolerance
        direction_tolerance = self.config.direction_tolerance

        for index, segment in enumerate(segments):
            if not math.isfinite(segment.yaw):
                issues.append(NetworkIssue(
                    IssueSeverity.ERROR,
                    IssueCode.YAW_ONLY,
                    f"Segment {index} has a non-finite yaw {segment.yaw}",
                    segment_index=index,
                ))

            fixed = segment
            if segment.id in seen_ids:
                fixed = replace(fixed, id=str(uuid.uuid4()))
            seen_ids.add(fixed.id)

            if not segment.position.is_flat(flat_tolerance):
                issues.append(NetworkIssue(
                    IssueSeverity.WARNING,
                    IssueCode.FLAT_SURFACE,
                    f"Segment {index} position has y = {segment.position.y}; corrected to y = 0",
                    segment_index=index,
                ))
            fixed = replace(fixed, position=segment.position.flattened())

            for name, conn in segment.iter_connections():
                if not conn.position.is_flat(flat_tolerance):
                    issues.append(NetworkIssue(
                        IssueSeverity.WARNING,
                        IssueCode.FLAT_SURFACE,
                        f'Segment {index} connection "{name}" has y = {conn.position.y}; '
                        "corrected to y = 0",
                        segment_index=index,
                    ))
                if abs(conn.direction.length - 1.0) > direction_tolerance:
                    issues.append(NetworkIssue(
                        IssueSeverity.WARNING,
                        IssueCode.YAW_ONLY,
                        f'Segment {index} connection "{name}" direction is not a unit '
                        f"vector (length {conn.direction.length:.4f}); renormalized",
                        segment_index=index,
                    ))
                fixed = fixed.with_connection(
                    name,
                    replace(
                        conn,
                        position=conn.position.flattened(),
                        direction=conn.direction.normalized(),
                    ),
                )
            corrected.append(fixed)
        return corrected, issues

    def _replay_connections(
        self, segments: Sequence[RoadSegment]
    ) -> Tuple[List[RoadSegment], List[NetworkIssue]]:
        """Execute declared connections in order on a working copy.

        The target segment is moved together with every segment already
        linked to it. When the target is already linked to the source
        (closing a loop), the connections are only checked and linked.
        """
        working = list(segments)
        issues: List[NetworkIssue] = []

        for declaration, connection in self._connections:
            a_index, b_index = connection.from_index, connection.to_index
            a, b = working[a_index], working[b_index]
            try:
                name_a, name_b = self.connector.resolve_names(
                    a, connection.from_key, b, connection.to_key
                )
                source_group = self._linked_group(working, a_index)
                if b_index in source_group:
                    working[a_index], working[b_index] = self.connector.link(a, name_a, b, name_b)
                else:
                    transform = self.connector.alignment_transform(a, name_a, b, name_b)
                    trial = list(working)
                    for index in self._linked_group(working, b_index):
                        trial[index] = working[index].transformed(transform)
                    trial[a_index], trial[b_index] = self.connector.link(
                        a, name_a, trial[b_index], name_b
                    )
                    working = trial
            except UnknownConnectionKey as exc:
                issues.append(self._connection_issue(
                    IssueCode.UNKNOWN_CONNECTION_KEY, declaration, connection, exc
                ))
            except ConnectionInUse as exc:
                issues.append(self._connection_issue(
                    IssueCode.CONNECTION_IN_USE, declaration, connection, exc
                ))
            except AlignmentFailure as exc:
                issues.append(self._connection_issue(
                    IssueCode.ALIGNMENT_FAILURE, declaration, connection, exc
                ))
        return working, issues

    @staticmethod
    def _connection_issue(
        code: IssueCode,
        declaration: int,
        connection: SegmentConnection,
        exc: Exception,
    ) -> NetworkIssue:
        message = (
            f"Cannot connect segment {connection.from_index} at {connection.from_key} "
            f"to segment {connection.to_index} at {connection.to_key}: {exc}"
        )
        logger.warning("Skipping connection %d: %s", declaration, message)
        return NetworkIssue(
            IssueSeverity.ERROR,
            code,
            message,
            connection_index=declaration,
            segment_index=connection.to_index,
        )

    @staticmethod
    def _linked_group(segments: Sequence[RoadSegment], start: int) -> Set[int]:
        """Indices of all segments reachable from `start` through links."""
        by_id: Dict[str, int] = {}
        for index, segment in enumerate(segments):
            by_id.setdefault(segment.id, index)

        group = {start}
        pending = [start]
        while pending:
            current = pending.pop()
            for linked_id in segments[current].linked_segment_ids:
                index = by_id.get(linked_id)
                if index is not None and index not in group:
                    group.add(index)
                    pending.append(index)
        return group

    @staticmethod
    def _default_start_point(segments: Sequence[RoadSegment]) -> Vector3:
        """Start of the first segment, or the origin for an empty network."""
        if not segments:
            return ORIGIN
        first = segments[0]
        if isinstance(first, (StraightRoadSegment, CurvedRoadSegment)):
            return first.connections.start.position
        return first.position
