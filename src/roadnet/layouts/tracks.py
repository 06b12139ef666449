"""
Track layouts - Ready-made closed and open circuits.

Includes:
- Test track: short open L-shape
- Square: closed loop with quarter-circle corners
- Figure-eight: closed loop that crosses itself at the origin
"""

import math

from roadnet.errors import InvalidGeometry
from roadnet.geometry import Vector3
from roadnet.layouts.layout import (
    LayoutOptions,
    PathWalker,
    RoadNetworkLayout,
    chain_connections,
)
from roadnet.segments.segment import TurnDirection


def test_track() -> RoadNetworkLayout:
    """Open track: two straights, a right-hand corner, one more straight."""
    walker = PathWalker(x=0.0, z=-10.0, heading=0.0)
    segments = (
        walker.straight(20.0),
        walker.straight(20.0),
        walker.curve(15.0, math.pi / 2, TurnDirection.RIGHT),
        walker.straight(25.0),
    )
    return RoadNetworkLayout(
        segments=segments,
        connections=tuple(chain_connections(len(segments))),
        options=LayoutOptions(id="test-track", name="Test Track"),
    )


# Pytest would otherwise collect the layout function from test modules
test_track.__test__ = False


def square(
    side_length: float = 80.0,
    corner_radius: float = 15.0,
    road_width: float = 7.0,
) -> RoadNetworkLayout:
    """Closed square circuit, driven clockwise in plan view.

    Each side is two straights followed by a right-hand quarter curve, so
    checkpoints can sit between the straights at the middle of each side.

    Args:
        side_length: Outer side of the square, corner to corner
        corner_radius: Radius of the corner curves
        road_width: Road width

    Raises:
        InvalidGeometry: if the corners do not fit on the sides
    """
    if corner_radius <= 0 or side_length <= 2 * corner_radius:
        raise InvalidGeometry(
            f"Square side {side_length} is too short for corner radius {corner_radius}"
        )

    half = side_length / 2
    straight_length = (side_length - 2 * corner_radius) / 2
    walker = PathWalker(x=-half + corner_radius, z=-half, heading=math.pi / 2)
    start = walker.position

    segments = []
    side_midpoints = []
    for _ in range(4):
        segments.append(walker.straight(straight_length, width=road_width))
        side_midpoints.append(walker.position)
        segments.append(walker.straight(straight_length, width=road_width))
        segments.append(
            walker.curve(corner_radius, math.pi / 2, TurnDirection.RIGHT, width=road_width)
        )

    return RoadNetworkLayout(
        segments=tuple(segments),
        connections=tuple(chain_connections(len(segments), closed=True)),
        options=LayoutOptions(
            id="square-track",
            name="Square Track",
            start_point=start,
            # Mid-side of the right, far and left sides; the first side holds the start
            checkpoints=tuple(side_midpoints[1:]),
        ),
    )


def figure8(
    track_width: float = 80.0,
    corner_radius: float = 20.0,
    road_width: float = 7.0,
) -> RoadNetworkLayout:
    """Closed figure-eight circuit crossing itself at the origin.

    Two circular lobes of `corner_radius` are centered at x = +/- c with
    c = track_width / 2. Straights run from the origin tangent to each
    lobe; the right lobe is driven with left turns and the left lobe with
    right turns. Each lobe is split into two equal curves.

    Each curve sweeps (pi + 2*beta) / 2 where sin(beta) = corner_radius / c,
    not pi / 2: quarter turns cannot close a loop that crosses itself, so
    the lobes turn through more than half a circle.

    Args:
        track_width: Distance between the lobe centers
        corner_radius: Lobe radius
        road_width: Road width

    Raises:
        InvalidGeometry: if the lobes overlap the crossing
    """
    half = track_width / 2
    if corner_radius <= 0 or corner_radius >= half:
        raise InvalidGeometry(
            f"Figure-eight corner radius {corner_radius} must be positive and "
            f"smaller than half the track width ({half})"
        )

    # Angle between the x axis and the tangent from the origin to a lobe
    beta = math.asin(corner_radius / half)
    tangent_length = half * math.cos(beta)
    lobe_curve = (math.pi + 2 * beta) / 2

    walker = PathWalker(x=0.0, z=0.0, heading=math.pi / 2 - beta)
    start = walker.position

    segments = [
        walker.straight(tangent_length, width=road_width),
        walker.curve(corner_radius, lobe_curve, TurnDirection.LEFT, width=road_width),
        walker.curve(corner_radius, lobe_curve, TurnDirection.LEFT, width=road_width),
        walker.straight(tangent_length, width=road_width),
        walker.straight(tangent_length, width=road_width),
        walker.curve(corner_radius, lobe_curve, TurnDirection.RIGHT, width=road_width),
        walker.curve(corner_radius, lobe_curve, TurnDirection.RIGHT, width=road_width),
    ]
    last_straight_middle = walker.position + (
        Vector3(0.0, 0.0, tangent_length / 2).rotated_y(walker.heading)
    )
    segments.append(walker.straight(tangent_length, width=road_width))

    return RoadNetworkLayout(
        segments=tuple(segments),
        connections=tuple(chain_connections(len(segments), closed=True)),
        options=LayoutOptions(
            id="figure-8-track",
            name="Figure 8 Track",
            start_point=start,
            checkpoints=(
                Vector3(half + corner_radius, 0.0, 0.0),
                Vector3(-half - corner_radius, 0.0, 0.0),
                last_straight_middle,
            ),
        ),
    )
