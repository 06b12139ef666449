"""
Road network - Frozen result of a network build.

Contains:
- Ordered segment sequence
- Start point and checkpoints
- Read-only connectivity queries
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from roadnet.geometry import ORIGIN, Vector3
from roadnet.segments.segment import RoadSegment


@dataclass(frozen=True)
class RoadNetwork:
    """Placed, interconnected road segments plus route metadata.

    Immutable once built and safe to share between readers.

    Usage:
        network = RoadNetworkBuilder.create_from_layout(square())
        network.num_segments   # 12
        network.is_closed      # True
    """
    id: str
    name: str
    segments: Tuple[RoadSegment, ...] = ()
    start_point: Vector3 = ORIGIN
    checkpoints: Tuple[Vector3, ...] = ()
    _index: Dict[str, int] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "segments", tuple(self.segments))
        object.__setattr__(self, "checkpoints", tuple(self.checkpoints))
        object.__setattr__(
            self, "_index", {segment.id: i for i, segment in enumerate(self.segments)}
        )

    @property
    def num_segments(self) -> int:
        return len(self.segments)

    @property
    def length(self) -> float:
        """Sum of segment lengths."""
        return sum(segment.length for segment in self.segments)

    @property
    def is_closed(self) -> bool:
        """True when every connection of every segment is linked."""
        if not self.segments:
            return False
        return not self.open_connections()

    def get_segment(self, segment_id: str) -> RoadSegment:
        """Get a segment by id.

        Raises:
            KeyError: if no segment has that id
        """
        return self.segments[self._index[segment_id]]

    def index_of(self, segment_id: str) -> Optional[int]:
        return self._index.get(segment_id)

    def open_connections(self) -> List[Tuple[str, str]]:
        """Get (segment_id, connection_name) for every unlinked connection."""
        return [
            (segment.id, name)
            for segment in self.segments
            for name in segment.open_connection_names
        ]

    def neighbors(self, segment_id: str) -> List[RoadSegment]:
        """Segments linked to the given segment, in connection order."""
        segment = self.get_segment(segment_id)
        return [
            self.get_segment(linked_id)
            for linked_id in segment.linked_segment_ids
            if linked_id in self._index
        ]
