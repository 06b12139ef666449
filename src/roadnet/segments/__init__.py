"""
Segments module - Road segment descriptors and their factory.

This module contains:
- RoadConnection: Attachment point with outward direction and optional link
- RoadSegment: Straight, curve, intersection and junction variants
- RoadSegmentFactory: Builds segments with exact connection geometry
"""

from roadnet.segments.connection import (
    ConnectionMap,
    CurvedConnections,
    IntersectionConnections,
    JunctionConnections,
    RoadConnection,
    StraightConnections,
)
from roadnet.segments.segment import (
    CurvedRoadSegment,
    IntersectionRoadSegment,
    JunctionRoadSegment,
    RoadSegment,
    RoadSegmentType,
    StraightRoadSegment,
    TurnDirection,
    connection_names_for,
)
from roadnet.segments.factory import RoadSegmentFactory

__all__ = [
    "ConnectionMap",
    "CurvedConnections",
    "IntersectionConnections",
    "JunctionConnections",
    "RoadConnection",
    "StraightConnections",
    "CurvedRoadSegment",
    "IntersectionRoadSegment",
    "JunctionRoadSegment",
    "RoadSegment",
    "RoadSegmentType",
    "StraightRoadSegment",
    "TurnDirection",
    "connection_names_for",
    "RoadSegmentFactory",
]
