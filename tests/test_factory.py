"""Tests for the roadnet segment factory."""

import logging
import math

import numpy as np
import pytest

from roadnet.config import SegmentDefaults
from roadnet.errors import FlatSurfaceViolation, InvalidGeometry, YawOnlyViolation
from roadnet.geometry import Vector2, Vector3
from roadnet.segments import (
    CurvedRoadSegment,
    IntersectionRoadSegment,
    JunctionRoadSegment,
    RoadSegmentFactory,
    RoadSegmentType,
    StraightRoadSegment,
    TurnDirection,
    connection_names_for,
)


def assert_point(actual: Vector3, expected, tol: float = 1e-9):
    assert np.allclose(actual.to_array(), np.array(expected, dtype=float), atol=tol), actual


def assert_direction(actual: Vector2, expected, tol: float = 1e-9):
    assert np.allclose(actual.to_tuple(), expected, atol=tol), actual


class TestStraight:
    """Test straight segments."""

    def test_default_straight(self):
        """Straight of length 20 at the origin."""
        factory = RoadSegmentFactory()
        segment = factory.create_straight(position=(0, 0, 0), yaw=0.0, length=20, width=7)

        assert isinstance(segment, StraightRoadSegment)
        assert segment.type == "straight"
        assert_point(segment.connections.start.position, (0, 0, -10))
        assert_point(segment.connections.end.position, (0, 0, 10))
        assert_direction(segment.connections.start.direction, (0, -1))
        assert_direction(segment.connections.end.direction, (0, 1))
        assert segment.connections.start.is_open
        assert segment.connections.end.width == 7

    def test_length_preserved_for_all_yaw(self):
        """Connection spacing equals length and is parallel to the rotated axis."""
        factory = RoadSegmentFactory()
        for yaw in np.linspace(-2 * math.pi, 2 * math.pi, 37):
            segment = factory.create_straight(position=(3.0, 0.0, -4.0), yaw=yaw, length=12.5)
            start = segment.connections.start.position
            end = segment.connections.end.position

            assert start.distance_to(end) == pytest.approx(12.5)
            span = end - start
            forward = Vector2.from_heading(yaw)
            # 2D cross product vanishes for parallel vectors
            assert span.x * forward.y - span.z * forward.x == pytest.approx(0.0, abs=1e-9)
            assert span.x * forward.x + span.z * forward.y > 0

    def test_defaults(self):
        """Omitted parameters come from SegmentDefaults."""
        segment = RoadSegmentFactory().create_straight()
        assert segment.length == 20.0
        assert segment.width == 7.0
        assert segment.pavement_width == 1.5
        assert segment.lanes == 2
        assert segment.has_crosswalk is False

    def test_custom_defaults(self):
        """Factory defaults can be overridden."""
        factory = RoadSegmentFactory(SegmentDefaults(straight_length=50.0, lanes=4))
        segment = factory.create_straight()
        assert segment.length == 50.0
        assert segment.lanes == 4

    def test_unique_ids(self):
        """Each segment gets a fresh id."""
        factory = RoadSegmentFactory()
        ids = {factory.create_straight().id for _ in range(20)}
        assert len(ids) == 20

    def test_get_connection_idempotent(self):
        """Repeated lookups return equal values."""
        segment = RoadSegmentFactory().create_straight(yaw=0.8)
        assert segment.get_connection("end") == segment.get_connection("end")
        with pytest.raises(KeyError):
            segment.get_connection("branch")


class TestCurve:
    """Test curved segments."""

    def test_length_is_radius_times_angle(self):
        """Arc length for several shapes."""
        factory = RoadSegmentFactory()
        for radius, angle in [(15, math.pi / 2), (7.5, 0.3), (40, 2.0), (3, math.pi)]:
            segment = factory.create_curved(radius=radius, angle=angle)
            assert segment.length == pytest.approx(radius * angle, rel=1e-6)

    def test_right_quarter_turn(self):
        """Right quarter turn from the origin ends west of the start."""
        segment = RoadSegmentFactory().create_curved(radius=15, angle=math.pi / 2)

        assert isinstance(segment, CurvedRoadSegment)
        assert segment.direction is TurnDirection.RIGHT
        assert_point(segment.connections.start.position, (0, 0, 0))
        assert_direction(segment.connections.start.direction, (0, -1))
        assert_point(segment.connections.end.position, (-15, 0, 15))
        assert_direction(segment.connections.end.direction, (-1, 0))

    def test_left_quarter_turn(self):
        """Left quarter turn mirrors the right one."""
        segment = RoadSegmentFactory().create_curved(radius=15, direction="left")
        assert segment.direction is TurnDirection.LEFT
        assert_point(segment.connections.end.position, (15, 0, 15))
        assert_direction(segment.connections.end.direction, (1, 0))

    def test_end_on_arc(self):
        """The end sits on the circle tangent to the start direction."""
        segment = RoadSegmentFactory().create_curved(
            position=(2, 0, 3), yaw=0.6, radius=10, angle=1.0, direction=TurnDirection.LEFT
        )
        # Left of travel along heading 0.6
        normal = Vector2(math.cos(0.6), -math.sin(0.6))
        center = Vector3(2 + 10 * normal.x, 0, 3 + 10 * normal.y)
        end = segment.connections.end
        assert end.position.distance_to(center) == pytest.approx(10.0)
        assert angle_diff_zero(end.direction.heading, 0.6 + 1.0)

    def test_full_turn_rejected(self):
        """A curve must be less than a full circle."""
        with pytest.raises(InvalidGeometry):
            RoadSegmentFactory().create_curved(angle=2 * math.pi)


def angle_diff_zero(a: float, b: float) -> bool:
    return abs(math.remainder(a - b, 2 * math.pi)) < 1e-9


class TestIntersectionAndJunction:
    """Test intersections and junctions."""

    def test_intersection_connections(self):
        """Four outward connections at half width."""
        segment = RoadSegmentFactory().create_intersection(width=8)

        assert isinstance(segment, IntersectionRoadSegment)
        assert segment.has_crosswalk is True
        assert segment.connection_names == ("north", "south", "east", "west")
        assert_point(segment.connections.north.position, (0, 0, -4))
        assert_point(segment.connections.south.position, (0, 0, 4))
        assert_point(segment.connections.east.position, (4, 0, 0))
        assert_point(segment.connections.west.position, (-4, 0, 0))
        assert_direction(segment.connections.east.direction, (1, 0))
        assert_direction(segment.connections.west.direction, (-1, 0))

    def test_junction_right_branch(self):
        """Right branch sits on local +X."""
        segment = RoadSegmentFactory().create_junction()

        assert isinstance(segment, JunctionRoadSegment)
        assert segment.length == 14.0
        assert_point(segment.connections.main.position, (0, 0, -7))
        assert_point(segment.connections.end.position, (0, 0, 7))
        assert_point(segment.connections.branch.position, (3.5, 0, 0))
        assert_direction(segment.connections.branch.direction, (1, 0))

    def test_junction_left_branch(self):
        """Left branch sits on local -X."""
        segment = RoadSegmentFactory().create_junction(branch_direction="left")
        assert_point(segment.connections.branch.position, (-3.5, 0, 0))
        assert_direction(segment.connections.branch.direction, (-1, 0))

    def test_connection_names_for(self):
        """Names per kind."""
        assert connection_names_for(RoadSegmentType.JUNCTION) == ("main", "end", "branch")
        assert connection_names_for(RoadSegmentType.CURVE) == ("start", "end")


class TestValidation:
    """Test rejection and correction of inputs."""

    @pytest.mark.parametrize("bad", [0, -1, float("nan"), float("inf")])
    def test_invalid_sizes(self, bad):
        """Non-positive or non-finite sizes raise InvalidGeometry."""
        factory = RoadSegmentFactory()
        with pytest.raises(InvalidGeometry):
            factory.create_straight(length=bad)
        with pytest.raises(InvalidGeometry):
            factory.create_curved(radius=bad)
        with pytest.raises(InvalidGeometry):
            factory.create_intersection(width=bad)
        with pytest.raises(InvalidGeometry):
            factory.create_junction(length=bad)

    def test_invalid_lanes(self):
        """Lanes must be a positive integer."""
        with pytest.raises(InvalidGeometry):
            RoadSegmentFactory().create_straight(lanes=0)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), 2.5])
    def test_non_integer_lanes(self, bad):
        """Non-finite or fractional lane counts raise InvalidGeometry."""
        with pytest.raises(InvalidGeometry):
            RoadSegmentFactory().create_straight(lanes=bad)

    def test_invalid_geometry_is_value_error(self):
        """InvalidGeometry can be caught as ValueError."""
        with pytest.raises(ValueError):
            RoadSegmentFactory().create_curved(angle=-1)

    def test_height_corrected_with_warning(self, caplog):
        """Positions off the ground are flattened and recorded."""
        factory = RoadSegmentFactory()
        with caplog.at_level(logging.WARNING, logger="roadnet.segments.factory"):
            segment = factory.create_straight(position=(0, 0.5, 0))

        assert segment.position.y == 0.0
        assert segment.connections.end.position.y == 0.0
        assert len(factory.warnings) == 1
        assert isinstance(factory.warnings[0], FlatSurfaceViolation)
        assert "flat surface" in caplog.text

    def test_small_height_ignored(self):
        """Heights within tolerance are silently flattened."""
        factory = RoadSegmentFactory()
        factory.create_straight(position=(0, 0.0005, 0))
        assert factory.warnings == []

    def test_pitch_roll_corrected_with_warning(self):
        """Euler rotations keep only their yaw."""
        factory = RoadSegmentFactory()
        segment = factory.create_intersection(yaw=(0.2, 0.5, 0.0))

        assert segment.yaw == pytest.approx(0.5)
        assert isinstance(factory.warnings[0], YawOnlyViolation)
        assert len(factory.clear_warnings()) == 1
        assert factory.warnings == []

    def test_pure_yaw_triple_accepted(self):
        """An Euler triple with only yaw records nothing."""
        factory = RoadSegmentFactory()
        segment = factory.create_straight(yaw=(0.0, 1.2, 0.0))
        assert segment.yaw == pytest.approx(1.2)
        assert factory.warnings == []

    def test_numpy_scalar_yaw(self):
        """Yaw given as a numpy scalar is a plain yaw."""
        factory = RoadSegmentFactory()
        straight = factory.create_straight(yaw=np.float32(1.0))
        crossing = factory.create_intersection(yaw=np.int64(2))

        assert straight.yaw == pytest.approx(1.0)
        assert crossing.yaw == pytest.approx(2.0)
        assert factory.warnings == []


class TestCreateDispatch:
    """Test the generic create() entry point."""

    def test_create_by_type(self):
        """Enum and string kinds both dispatch."""
        factory = RoadSegmentFactory()
        assert isinstance(factory.create(RoadSegmentType.STRAIGHT), StraightRoadSegment)
        assert isinstance(factory.create("curve", radius=5), CurvedRoadSegment)
        assert isinstance(factory.create("curved", radius=5), CurvedRoadSegment)
        assert isinstance(factory.create("junction"), JunctionRoadSegment)

    def test_unknown_type(self):
        """Unknown kinds raise InvalidGeometry."""
        with pytest.raises(InvalidGeometry):
            RoadSegmentFactory().create("roundabout")

    def test_texture_options_carried(self):
        """Texture options pass through untouched."""
        segment = RoadSegmentFactory().create("straight", texture_options={"asphalt": "wet"})
        assert segment.texture_options == {"asphalt": "wet"}
