"""
Network module - Building and querying road networks.

This module contains:
- RoadNetwork: Frozen network of placed, linked segments
- RoadNetworkBuilder: Accumulates declarations and builds networks
- NetworkIssue: Diagnostics collected during validation and build
"""

from roadnet.network.network import RoadNetwork
from roadnet.network.issues import IssueCode, IssueSeverity, NetworkIssue
from roadnet.network.builder import BuilderState, RoadNetworkBuilder, SegmentConnection

__all__ = [
    "RoadNetwork",
    "IssueCode",
    "IssueSeverity",
    "NetworkIssue",
    "BuilderState",
    "RoadNetworkBuilder",
    "SegmentConnection",
]
