"""
Layouts module - Declarative network definitions.

This module contains:
- RoadNetworkLayout: Segment specs, connections and options
- PathWalker: Lays straights and curves end to end
- Track layouts: test track, square, figure-eight
- Grid layouts: tile grids, grid city, square ring
"""

from roadnet.layouts.layout import (
    ConnectionSpec,
    LayoutOptions,
    PathWalker,
    RoadNetworkLayout,
    SegmentSpec,
    chain_connections,
)
from roadnet.layouts.tracks import figure8, square, test_track
from roadnet.layouts.grid import (
    RoadTile,
    TileDirection,
    TileType,
    grid_city,
    grid_layout,
    square_grid,
)

__all__ = [
    "ConnectionSpec",
    "LayoutOptions",
    "PathWalker",
    "RoadNetworkLayout",
    "SegmentSpec",
    "chain_connections",
    "figure8",
    "square",
    "test_track",
    "RoadTile",
    "TileDirection",
    "TileType",
    "grid_city",
    "grid_layout",
    "square_grid",
]
