#!/usr/bin/env python3
"""
Road Network Example

This example demonstrates how to:
1. Build the ready-made tracks from their layouts
2. Assemble a network by hand with the builder
3. Inspect issues reported for broken declarations
4. Build tile grid networks

Run with: python build_networks.py
"""

import logging
import math

from roadnet import RoadNetworkBuilder, RoadSegmentFactory
from roadnet.layouts import figure8, grid_city, square, square_grid
from roadnet.segments import RoadSegmentType


def build_ready_made_tracks():
    """Build the square and figure-eight tracks."""
    print("=" * 60)
    print("1. Ready-made Tracks")
    print("=" * 60)

    for layout in (square(), figure8()):
        network = RoadNetworkBuilder.create_from_layout(layout)
        print(f"\nNetwork: {network.name}")
        print(f"Length: {network.length:.1f} m")
        print(f"Segments: {network.num_segments}")
        print(f"Is closed: {network.is_closed}")
        print(f"Checkpoints: {len(network.checkpoints)}")


def build_by_hand():
    """Assemble a T-junction with three arms."""
    print("\n" + "=" * 60)
    print("2. Hand-built Network")
    print("=" * 60)

    factory = RoadSegmentFactory()
    builder = RoadNetworkBuilder("Junction Demo")

    # Segments can be created anywhere; connecting snaps them into place
    builder.add_segments([
        factory.create_junction(),
        factory.create_straight(position=(50, 0, 50), yaw=1.0),
        factory.create_straight(length=30),
        factory.create_curved(direction="left", angle=math.pi / 3),
    ])
    builder.connect_segments(0, "main", 1, "start")
    builder.connect_segments(0, "branch", 2, "start")
    builder.connect_segments(0, "end", 3, "start")

    network = builder.build()
    print(f"\nNetwork: {network.name}")
    print(f"Open connections: {len(network.open_connections())}")
    for segment in network.segments:
        print(f"  {segment.type:<12} at ({segment.position.x:7.2f}, {segment.position.z:7.2f}) "
              f"yaw {math.degrees(segment.yaw):6.1f}°")


def report_issues():
    """Show how broken declarations are reported."""
    print("\n" + "=" * 60)
    print("3. Issue Reporting")
    print("=" * 60)

    factory = RoadSegmentFactory()
    builder = RoadNetworkBuilder("Broken")
    builder.add_segments([factory.create_straight(), factory.create_intersection()])
    builder.connect_segments(0, "end", 1, "start")   # intersections have no "start"
    builder.connect_segments(0, "end", 7, "north")   # no segment 7

    print("\nValidation:")
    for issue in builder.validate():
        print(f"  {issue}")

    network = builder.build()
    errors = sum(1 for issue in builder.issues if issue.is_error)
    print(f"\nBuilt anyway with {network.num_segments} segments ({errors} errors skipped)")


def build_grids():
    """Build tile grid networks."""
    print("\n" + "=" * 60)
    print("4. Tile Grids")
    print("=" * 60)

    for layout in (grid_city(3), square_grid(6)):
        network = RoadNetworkBuilder.create_from_layout(layout)
        crossings = sum(1 for s in network.segments if s.type == RoadSegmentType.INTERSECTION.value)
        print(f"\nNetwork: {network.name}")
        print(f"Segments: {network.num_segments} ({crossings} intersections)")
        print(f"Is closed: {network.is_closed}")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    build_ready_made_tracks()
    build_by_hand()
    report_issues()
    build_grids()

    print("\n" + "=" * 60)
    print("Road network examples complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
