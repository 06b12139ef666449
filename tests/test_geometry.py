"""Tests for the roadnet geometry module."""

import math

import numpy as np
import pytest

from roadnet.geometry import (
    ORIGIN,
    TWO_PI,
    RigidTransform,
    Vector2,
    Vector3,
    angle_difference,
    normalize_angle,
    yaw_matrix,
)


class TestAngles:
    """Test angle helpers."""

    def test_normalize_angle_range(self):
        """Normalized angles land in [0, 2*pi)."""
        for angle in np.linspace(-20.0, 20.0, 81):
            wrapped = normalize_angle(angle)
            assert 0.0 <= wrapped < TWO_PI
            assert math.isclose(math.cos(wrapped), math.cos(angle), abs_tol=1e-9)
            assert math.isclose(math.sin(wrapped), math.sin(angle), abs_tol=1e-9)

    def test_normalize_full_turn(self):
        """A full turn wraps to zero."""
        assert normalize_angle(TWO_PI) == 0.0
        assert normalize_angle(-TWO_PI) == 0.0

    def test_normalize_tiny_negative(self):
        """Tiny negative angles never come back as 2*pi."""
        assert normalize_angle(-1e-18) < TWO_PI

    def test_angle_difference(self):
        """Difference is the short way around."""
        assert angle_difference(0.1, TWO_PI - 0.1) == pytest.approx(0.2)
        assert angle_difference(TWO_PI - 0.1, 0.1) == pytest.approx(-0.2)


class TestVector2:
    """Test horizontal directions."""

    def test_from_heading(self):
        """Heading 0 points south (+z), pi/2 points east (+x)."""
        south = Vector2.from_heading(0.0)
        east = Vector2.from_heading(math.pi / 2)
        assert south.x == pytest.approx(0.0, abs=1e-12)
        assert south.y == pytest.approx(1.0)
        assert east.x == pytest.approx(1.0)
        assert east.y == pytest.approx(0.0, abs=1e-12)

    def test_heading_roundtrip(self):
        """from_heading and heading agree up to wrapping."""
        for heading in (0.3, 1.7, 3.0, -2.5):
            direction = Vector2.from_heading(heading)
            assert angle_difference(direction.heading, heading) == pytest.approx(0.0, abs=1e-12)

    def test_normalized(self):
        """Normalized vectors have unit length."""
        v = Vector2(3.0, 4.0).normalized()
        assert v.length == pytest.approx(1.0)
        assert v.x == pytest.approx(0.6)

    def test_rotated_matches_heading(self):
        """Rotating by yaw adds yaw to the heading."""
        v = Vector2.from_heading(0.4).rotated(0.5)
        assert angle_difference(v.heading, 0.9) == pytest.approx(0.0, abs=1e-12)

    def test_negation(self):
        """Negating reverses the direction."""
        v = Vector2(0.6, 0.8)
        assert (-v).dot(v) == pytest.approx(-1.0)


class TestVector3:
    """Test world-space points."""

    def test_rotated_y_forward(self):
        """Local +z rotated by yaw points along that heading."""
        yaw = 1.1
        rotated = Vector3(0.0, 0.0, 1.0).rotated_y(yaw)
        expected = Vector2.from_heading(yaw)
        assert rotated.x == pytest.approx(expected.x)
        assert rotated.z == pytest.approx(expected.y)

    def test_yaw_matrix_is_rotation(self):
        """Yaw matrices are orthonormal with determinant 1."""
        matrix = yaw_matrix(0.7)
        assert np.allclose(matrix @ matrix.T, np.eye(2))
        assert np.linalg.det(matrix) == pytest.approx(1.0)

    def test_flattened(self):
        """Flattening drops height only."""
        point = Vector3(1.0, 2.0, 3.0).flattened()
        assert point == Vector3(1.0, 0.0, 3.0)
        assert point.is_flat()

    def test_of_sequence(self):
        """Tuples and arrays coerce to Vector3."""
        assert Vector3.of((1, 2, 3)) == Vector3(1.0, 2.0, 3.0)
        assert Vector3.of(np.array([1.0, 0.0, -1.0])) == Vector3(1.0, 0.0, -1.0)

    def test_arithmetic(self):
        """Addition, subtraction and scaling."""
        a = Vector3(1.0, 0.0, 2.0)
        b = Vector3(-1.0, 0.0, 1.0)
        assert a + b == Vector3(0.0, 0.0, 3.0)
        assert a - b == Vector3(2.0, 0.0, 1.0)
        assert 2 * a == Vector3(2.0, 0.0, 4.0)
        assert a.distance_to(b) == pytest.approx(math.sqrt(5.0))


class TestRigidTransform:
    """Test rigid transforms."""

    def test_identity(self):
        """Default transform changes nothing."""
        transform = RigidTransform()
        assert transform.is_identity
        assert transform.apply_point(Vector3(1.0, 0.0, 2.0)) == Vector3(1.0, 0.0, 2.0)

    def test_rotation_about_pivot(self):
        """The pivot stays fixed under rotation."""
        pivot = Vector3(5.0, 0.0, 5.0)
        transform = RigidTransform(pivot=pivot, rotation=math.pi / 2)
        assert transform.apply_point(pivot).is_close(pivot, 1e-12)

        # (0, 0, 1) from the pivot turns to (1, 0, 0)
        moved = transform.apply_point(Vector3(5.0, 0.0, 6.0))
        assert moved.is_close(Vector3(6.0, 0.0, 5.0), 1e-9)

    def test_rotate_then_translate(self):
        """Translation applies after rotation."""
        transform = RigidTransform(rotation=math.pi).then_translate(Vector3(0.0, 0.0, 10.0))
        moved = transform.apply_point(Vector3(0.0, 0.0, 1.0))
        assert moved.is_close(Vector3(0.0, 0.0, 9.0), 1e-9)

    def test_results_are_flat(self):
        """Transformed points are forced onto the ground plane."""
        transform = RigidTransform(translation=Vector3(0.0, 3.0, 0.0))
        assert transform.apply_point(ORIGIN).y == 0.0

    def test_direction_and_yaw(self):
        """Directions rotate without translating; yaws wrap."""
        transform = RigidTransform(rotation=math.pi).then_translate(Vector3(4.0, 0.0, 4.0))
        direction = transform.apply_direction(Vector2(0.0, 1.0))
        assert direction.x == pytest.approx(0.0, abs=1e-12)
        assert direction.y == pytest.approx(-1.0)
        assert transform.apply_yaw(3 * math.pi / 2) == pytest.approx(math.pi / 2)
