"""
Grid layouts - Road networks drawn on a square tile grid.

Each tile holds one segment (or nothing) and faces one of four
directions. Neighbouring tiles whose openings meet on a shared edge are
connected automatically.

Tile (row, col) is centered at (col * tile_size, 0, row * tile_size):
columns grow east (+X) and rows grow south (+Z).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union
import logging
import math

from roadnet.connectors import CompassDirection
from roadnet.errors import InvalidGeometry
from roadnet.geometry import Vector3
from roadnet.layouts.layout import (
    ConnectionSpec,
    LayoutOptions,
    RoadNetworkLayout,
    SegmentSpec,
)
from roadnet.segments.segment import RoadSegmentType, TurnDirection

logger = logging.getLogger(__name__)


class TileType(Enum):
    """Contents of a grid tile."""
    STRAIGHT = "straight"
    CURVE = "curve"
    TJUNCTION = "tjunction"
    CROSS = "cross"
    EMPTY = "empty"


class TileDirection(Enum):
    """Facing of a tile; each step is a quarter turn of positive yaw."""
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def quarter_turns(self) -> int:
        return list(TileDirection).index(self)

    @property
    def yaw(self) -> float:
        return self.quarter_turns * math.pi / 2


# Openings of each tile kind when facing north, by connection name
_NORTH_OPENINGS: Dict[TileType, Dict[str, CompassDirection]] = {
    TileType.STRAIGHT: {"start": CompassDirection.NORTH, "end": CompassDirection.SOUTH},
    TileType.CURVE: {"start": CompassDirection.SOUTH, "end": CompassDirection.EAST},
    TileType.TJUNCTION: {
        "main": CompassDirection.NORTH,
        "end": CompassDirection.SOUTH,
        "branch": CompassDirection.EAST,
    },
    TileType.CROSS: {
        "north": CompassDirection.NORTH,
        "south": CompassDirection.SOUTH,
        "east": CompassDirection.EAST,
        "west": CompassDirection.WEST,
    },
    TileType.EMPTY: {},
}


@dataclass(frozen=True)
class RoadTile:
    """One grid cell."""
    type: TileType = TileType.EMPTY
    direction: TileDirection = TileDirection.NORTH

    @classmethod
    def of(cls, value: Union["RoadTile", Tuple[str, str], None]) -> "RoadTile":
        """Accept a tile, None (empty) or a (type, direction) pair."""
        if value is None:
            return cls()
        if isinstance(value, RoadTile):
            return value
        tile_type, direction = value
        return cls(TileType(tile_type), TileDirection(direction))

    @property
    def openings(self) -> Dict[str, CompassDirection]:
        """Connection name -> the tile edge it opens onto."""
        turns = self.direction.quarter_turns
        return {
            name: facing.rotated(turns)
            for name, facing in _NORTH_OPENINGS[self.type].items()
        }


TileGrid = Sequence[Sequence[Union[RoadTile, Tuple[str, str], None]]]


def _tile_spec(tile: RoadTile, center: Vector3, tile_size: float, road_width: float) -> SegmentSpec:
    yaw = tile.direction.yaw
    if tile.type is TileType.STRAIGHT:
        return SegmentSpec(
            RoadSegmentType.STRAIGHT,
            {"position": center, "yaw": yaw, "length": tile_size, "width": road_width},
        )
    if tile.type is TileType.CURVE:
        # Curve enters from the south edge and turns right onto the east edge
        entry = center + Vector3(0.0, 0.0, tile_size / 2).rotated_y(yaw)
        return SegmentSpec(
            RoadSegmentType.CURVE,
            {
                "position": entry,
                "yaw": yaw + math.pi,
                "radius": tile_size / 2,
                "angle": math.pi / 2,
                "direction": TurnDirection.RIGHT,
                "width": road_width,
            },
        )
    if tile.type is TileType.TJUNCTION:
        return SegmentSpec(
            RoadSegmentType.JUNCTION,
            {
                "position": center,
                "yaw": yaw,
                "width": tile_size,
                "length": tile_size,
                "branch_direction": TurnDirection.RIGHT,
            },
        )
    if tile.type is TileType.CROSS:
        return SegmentSpec(
            RoadSegmentType.INTERSECTION,
            {"position": center, "yaw": yaw, "width": tile_size},
        )
    raise ValueError(f"Tile type {tile.type.value} has no segment")


def grid_layout(
    grid: TileGrid,
    tile_size: float = 7.0,
    name: str = "Grid Network",
    start_tile: Tuple[int, int] = (0, 0),
    road_width: Optional[float] = None,
) -> RoadNetworkLayout:
    """Turn a tile grid into a layout.

    Args:
        grid: Rows of tiles (RoadTile, (type, direction) pairs or None)
        tile_size: Edge length of a tile
        name: Network name
        start_tile: (col, row) of the tile whose center is the start point
        road_width: Width of straights and curves. Defaults to tile_size.

    Returns:
        Layout with one segment per non-empty tile, in row-major order

    Raises:
        InvalidGeometry: if tile_size is not positive
    """
    if not tile_size > 0:
        raise InvalidGeometry(f"Tile size must be positive, got {tile_size}")
    road_width = tile_size if road_width is None else road_width

    tiles: List[List[RoadTile]] = [[RoadTile.of(cell) for cell in row] for row in grid]
    segments: List[SegmentSpec] = []
    index_of: Dict[Tuple[int, int], int] = {}

    for row, cells in enumerate(tiles):
        for col, tile in enumerate(cells):
            if tile.type is TileType.EMPTY:
                continue
            center = Vector3(col * tile_size, 0.0, row * tile_size)
            index_of[(row, col)] = len(segments)
            segments.append(_tile_spec(tile, center, tile_size, road_width))

    connections: List[ConnectionSpec] = []
    for (row, col), index in index_of.items():
        openings = tiles[row][col].openings
        for facing, neighbour in (
            (CompassDirection.EAST, (row, col + 1)),
            (CompassDirection.SOUTH, (row + 1, col)),
        ):
            if neighbour not in index_of:
                continue
            neighbour_openings = tiles[neighbour[0]][neighbour[1]].openings
            name_here = _opening(openings, facing)
            name_there = _opening(neighbour_openings, facing.opposite)
            if name_here is not None and name_there is not None:
                connections.append(
                    ConnectionSpec(index, name_here, index_of[neighbour], name_there)
                )

    col, row = start_tile
    logger.debug(
        "Grid layout %r: %d segments, %d connections", name, len(segments), len(connections)
    )
    return RoadNetworkLayout(
        segments=tuple(segments),
        connections=tuple(connections),
        options=LayoutOptions(
            name=name,
            start_point=Vector3(col * tile_size, 0.0, row * tile_size),
        ),
    )


def _opening(openings: Dict[str, CompassDirection], facing: CompassDirection) -> Optional[str]:
    for name, edge in openings.items():
        if edge is facing:
            return name
    return None


def grid_city(size: int = 3, tile_size: float = 7.0) -> RoadNetworkLayout:
    """City blocks: crossings on even cells joined by straights.

    Rows and columns with an odd index between crossings hold straights;
    cells where both indices are odd stay empty. `size` counts crossings
    per side and is clamped to at least 2.
    """
    size = max(2, size)
    cells = 2 * size - 1
    grid = []
    for row in range(cells):
        line = []
        for col in range(cells):
            if row % 2 == 0 and col % 2 == 0:
                line.append(RoadTile(TileType.CROSS))
            elif row % 2 == 0:
                line.append(RoadTile(TileType.STRAIGHT, TileDirection.EAST))
            elif col % 2 == 0:
                line.append(RoadTile(TileType.STRAIGHT, TileDirection.NORTH))
            else:
                line.append(RoadTile())
        grid.append(line)
    return grid_layout(grid, tile_size, name="Grid City")


def square_grid(size: int = 5, tile_size: float = 7.0) -> RoadNetworkLayout:
    """Closed ring of tiles around an empty center.

    `size` is the number of tiles per side, clamped to at least 4.
    """
    size = max(4, size)
    last = size - 1
    corners = {
        (0, 0): TileDirection.NORTH,
        (0, last): TileDirection.WEST,
        (last, last): TileDirection.SOUTH,
        (last, 0): TileDirection.EAST,
    }

    grid = []
    for row in range(size):
        line = []
        for col in range(size):
            if (row, col) in corners:
                line.append(RoadTile(TileType.CURVE, corners[(row, col)]))
            elif row in (0, last):
                line.append(RoadTile(TileType.STRAIGHT, TileDirection.EAST))
            elif col in (0, last):
                line.append(RoadTile(TileType.STRAIGHT, TileDirection.NORTH))
            else:
                line.append(RoadTile())
        grid.append(line)
    return grid_layout(grid, tile_size, name="Square Grid", start_tile=(1, 0))
