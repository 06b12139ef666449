"""
RoadNet - Procedural road networks on a flat ground plane.

This package provides construction of drivable road networks with:
- Straight, curved, intersection and junction segments with exact connection geometry
- Compass and semantic connection keys resolved against segment yaw
- Rigid snapping of segments onto each other at their connections
- A builder that validates, connects and freezes networks
- Ready-made layouts: test track, square, figure-eight and tile grids
"""

__version__ = "0.1.0"

from roadnet.segments.factory import RoadSegmentFactory
from roadnet.connectors.connector import SegmentConnector
from roadnet.network.builder import RoadNetworkBuilder
from roadnet.network.network import RoadNetwork

__all__ = [
    "RoadSegmentFactory",
    "SegmentConnector",
    "RoadNetworkBuilder",
    "RoadNetwork",
    "__version__",
]
