"""
Road segment factory - Builds segments with exact connection geometry.

Provides:
- One constructor per segment kind (straight, curve, intersection, junction)
- Closed-form connection positions and outward directions
- Flat-surface and yaw-only correction of noisy inputs, recorded as warnings
- Rejection of degenerate sizes with InvalidGeometry
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
import logging
import numbers
import math
import uuid

from roadnet.config import GeometryConfig, SegmentDefaults
from roadnet.errors import (
    FlatSurfaceViolation,
    GeometryWarning,
    InvalidGeometry,
    YawOnlyViolation,
)
from roadnet.geometry import TWO_PI, Vector2, Vector3
from roadnet.segments.connection import (
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
)

logger = logging.getLogger(__name__)

PositionLike = Union[Vector3, Sequence[float]]
RotationLike = Union[float, Vector3, Sequence[float]]


def new_segment_id() -> str:
    """Generate a unique segment id."""
    return str(uuid.uuid4())


class RoadSegmentFactory:
    """Factory for road segments.

    Every constructor takes a position, a yaw and shape parameters, and
    returns a frozen segment whose connections are exact functions of
    those inputs. Omitted parameters fall back to `SegmentDefaults`.

    Inputs off the ground plane or with pitch/roll are corrected, and the
    correction is appended to `warnings` rather than raised.

    Usage:
        factory = RoadSegmentFactory()
        straight = factory.create_straight(position=(0, 0, 0), length=20)
        straight.connections.end.position  # Vector3(0, 0, 10)
    """

    def __init__(
        self,
        defaults: SegmentDefaults | None = None,
        geometry: GeometryConfig | None = None,
    ):
        """Initialize factory.

        Args:
            defaults: Default segment dimensions
            geometry: Tolerances for input correction
        """
        self.defaults = defaults or SegmentDefaults()
        self.geometry = geometry or GeometryConfig()
        self.warnings: List[GeometryWarning] = []

    def clear_warnings(self) -> List[GeometryWarning]:
        """Return recorded warnings and reset the list."""
        recorded, self.warnings = self.warnings, []
        return recorded

    # ------------------------------------------------------------------
    # Segment constructors
    # ------------------------------------------------------------------

    def create_straight(
        self,
        position: PositionLike = (0.0, 0.0, 0.0),
        yaw: RotationLike = 0.0,
        length: float | None = None,
        width: float | None = None,
        pavement_width: float | None = None,
        lanes: int | None = None,
        has_crosswalk: bool | None = None,
        texture_options: Mapping[str, Any] | None = None,
    ) -> StraightRoadSegment:
        """Create a straight segment centered on `position`.

        Connections sit at -length/2 (start) and +length/2 (end) along the
        local Z axis.
        """
        context = "create_straight"
        length = self._positive(context, "length", self._pick(length, self.defaults.straight_length))
        width = self._positive(context, "width", self._pick(width, self.defaults.width))
        origin = self._flat_position(context, position)
        heading = self._yaw_only(context, yaw)

        half_length = length / 2
        connections = StraightConnections(
            start=self._connection(origin, heading, 0.0, -half_length, math.pi, width),
            end=self._connection(origin, heading, 0.0, half_length, 0.0, width),
        )

        return StraightRoadSegment(
            id=new_segment_id(),
            position=origin,
            yaw=heading,
            width=width,
            length=length,
            connections=connections,
            **self._shared(
                context, pavement_width, lanes, has_crosswalk,
                self.defaults.straight_crosswalk, texture_options,
            ),
        )

    def create_curved(
        self,
        position: PositionLike = (0.0, 0.0, 0.0),
        yaw: RotationLike = 0.0,
        radius: float | None = None,
        angle: float | None = None,
        direction: TurnDirection | str = TurnDirection.RIGHT,
        width: float | None = None,
        pavement_width: float | None = None,
        lanes: int | None = None,
        has_crosswalk: bool | None = None,
        texture_options: Mapping[str, Any] | None = None,
    ) -> CurvedRoadSegment:
        """Create a circular curve starting at `position`.

        Travel enters through `start` heading along local +Z and turns
        `direction` by `angle` radians on a circle of `radius`.
        """
        context = "create_curved"
        radius = self._positive(context, "radius", self._pick(radius, self.defaults.curve_radius))
        angle = self._positive(context, "angle", self._pick(angle, self.defaults.curve_angle))
        if angle >= TWO_PI:
            raise InvalidGeometry(f"{context}: angle must be less than a full turn, got {angle}")
        width = self._positive(context, "width", self._pick(width, self.defaults.width))
        turn = self._turn_direction(direction)
        origin = self._flat_position(context, position)
        heading = self._yaw_only(context, yaw)

        # Arc tangent to local +Z at the start; left bends toward +X
        end_x = turn.sign * radius * (1 - math.cos(angle))
        end_z = radius * math.sin(angle)
        connections = CurvedConnections(
            start=self._connection(origin, heading, 0.0, 0.0, math.pi, width),
            end=self._connection(origin, heading, end_x, end_z, turn.sign * angle, width),
        )

        return CurvedRoadSegment(
            id=new_segment_id(),
            position=origin,
            yaw=heading,
            width=width,
            length=radius * angle,
            connections=connections,
            radius=radius,
            angle=angle,
            direction=turn,
            **self._shared(
                context, pavement_width, lanes, has_crosswalk,
                self.defaults.curve_crosswalk, texture_options,
            ),
        )

    def create_intersection(
        self,
        position: PositionLike = (0.0, 0.0, 0.0),
        yaw: RotationLike = 0.0,
        width: float | None = None,
        pavement_width: float | None = None,
        lanes: int | None = None,
        has_crosswalk: bool | None = None,
        texture_options: Mapping[str, Any] | None = None,
    ) -> IntersectionRoadSegment:
        """Create a four-way intersection centered on `position`."""
        context = "create_intersection"
        width = self._positive(context, "width", self._pick(width, self.defaults.width))
        origin = self._flat_position(context, position)
        heading = self._yaw_only(context, yaw)

        half_width = width / 2
        connections = IntersectionConnections(
            north=self._connection(origin, heading, 0.0, -half_width, math.pi, width),
            south=self._connection(origin, heading, 0.0, half_width, 0.0, width),
            east=self._connection(origin, heading, half_width, 0.0, math.pi / 2, width),
            west=self._connection(origin, heading, -half_width, 0.0, -math.pi / 2, width),
        )

        return IntersectionRoadSegment(
            id=new_segment_id(),
            position=origin,
            yaw=heading,
            width=width,
            length=width,
            connections=connections,
            **self._shared(
                context, pavement_width, lanes, has_crosswalk,
                self.defaults.intersection_crosswalk, texture_options,
            ),
        )

    def create_junction(
        self,
        position: PositionLike = (0.0, 0.0, 0.0),
        yaw: RotationLike = 0.0,
        width: float | None = None,
        length: float | None = None,
        branch_direction: TurnDirection | str = TurnDirection.RIGHT,
        pavement_width: float | None = None,
        lanes: int | None = None,
        has_crosswalk: bool | None = None,
        texture_options: Mapping[str, Any] | None = None,
    ) -> JunctionRoadSegment:
        """Create a T-junction centered on `position`.

        `main` and `end` close the stem along local Z. `branch` sits at
        width/2 on local +X for a right branch (plan view, north up) or on
        local -X for a left branch.
        """
        context = "create_junction"
        width = self._positive(context, "width", self._pick(width, self.defaults.width))
        length = self._positive(context, "length", self._pick(length, self.defaults.junction_length))
        side = self._turn_direction(branch_direction)
        origin = self._flat_position(context, position)
        heading = self._yaw_only(context, yaw)

        half_width = width / 2
        half_length = length / 2
        if side is TurnDirection.RIGHT:
            branch = self._connection(origin, heading, half_width, 0.0, math.pi / 2, width)
        else:
            branch = self._connection(origin, heading, -half_width, 0.0, -math.pi / 2, width)

        connections = JunctionConnections(
            main=self._connection(origin, heading, 0.0, -half_length, math.pi, width),
            end=self._connection(origin, heading, 0.0, half_length, 0.0, width),
            branch=branch,
        )

        return JunctionRoadSegment(
            id=new_segment_id(),
            position=origin,
            yaw=heading,
            width=width,
            length=length,
            connections=connections,
            branch_direction=side,
            **self._shared(
                context, pavement_width, lanes, has_crosswalk,
                self.defaults.junction_crosswalk, texture_options,
            ),
        )

    def create(self, segment_type: RoadSegmentType | str, **params) -> RoadSegment:
        """Create a segment of the given kind from keyword parameters.

        Args:
            segment_type: Segment kind or its string value
            **params: Keyword arguments of the matching constructor

        Returns:
            New road segment
        """
        kind = self._segment_type(segment_type)
        constructors = {
            RoadSegmentType.STRAIGHT: self.create_straight,
            RoadSegmentType.CURVE: self.create_curved,
            RoadSegmentType.INTERSECTION: self.create_intersection,
            RoadSegmentType.JUNCTION: self.create_junction,
        }
        return constructors[kind](**params)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _connection(
        origin: Vector3,
        yaw: float,
        local_x: float,
        local_z: float,
        local_heading: float,
        width: float,
    ) -> RoadConnection:
        """Place a connection given its local offset and outward heading."""
        offset = Vector3(local_x, 0.0, local_z).rotated_y(yaw)
        return RoadConnection(
            position=(origin + offset).flattened(),
            direction=Vector2.from_heading(yaw + local_heading),
            width=width,
        )

    @staticmethod
    def _pick(value, default):
        return default if value is None else value

    @staticmethod
    def _positive(context: str, name: str, value: float) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise InvalidGeometry(f"{context}: {name} must be a number, got {value!r}") from None
        if not math.isfinite(number) or number <= 0:
            raise InvalidGeometry(f"{context}: {name} must be positive, got {value}")
        return number

    def _shared(
        self,
        context: str,
        pavement_width: float | None,
        lanes: int | None,
        has_crosswalk: bool | None,
        default_crosswalk: bool,
        texture_options: Mapping[str, Any] | None,
    ) -> Dict[str, Any]:
        """Fields common to every segment kind."""
        lanes = self._pick(lanes, self.defaults.lanes)
        if not math.isfinite(lanes) or int(lanes) != lanes or lanes < 1:
            raise InvalidGeometry(f"{context}: lanes must be a positive integer, got {lanes}")
        pavement_width = self._pick(pavement_width, self.defaults.pavement_width)
        if not math.isfinite(pavement_width) or pavement_width < 0:
            raise InvalidGeometry(
                f"{context}: pavement_width must be non-negative, got {pavement_width}"
            )
        return {
            "lanes": int(lanes),
            "pavement_width": float(pavement_width),
            "has_crosswalk": bool(self._pick(has_crosswalk, default_crosswalk)),
            "texture_options": {} if texture_options is None else texture_options,
        }

    def _flat_position(self, context: str, position: PositionLike) -> Vector3:
        point = Vector3.of(position)
        if not point.is_flat(self.geometry.flat_tolerance):
            self._warn(FlatSurfaceViolation(
                context,
                f"Position must be on flat surface (y = 0), got y = {point.y}. "
                "Correcting to y = 0.",
            ))
        return point.flattened()

    def _yaw_only(self, context: str, rotation: RotationLike) -> float:
        """Extract yaw from a scalar or an (x, y, z) Euler rotation."""
        if isinstance(rotation, numbers.Real):
            yaw = float(rotation)
        else:
            pitch, yaw, roll = Vector3.of(rotation).to_tuple()
            tolerance = self.geometry.rotation_tolerance
            if abs(pitch) > tolerance or abs(roll) > tolerance:
                self._warn(YawOnlyViolation(
                    context,
                    f"Rotation must be around Y axis only. Got rotation "
                    f"({pitch}, {yaw}, {roll}). Correcting to Y-axis rotation.",
                ))
        if not math.isfinite(yaw):
            raise InvalidGeometry(f"{context}: yaw must be finite, got {yaw}")
        return yaw

    @staticmethod
    def _turn_direction(value: TurnDirection | str) -> TurnDirection:
        if isinstance(value, TurnDirection):
            return value
        try:
            return TurnDirection(str(value).lower())
        except ValueError:
            raise InvalidGeometry(f"Unknown turn direction: {value!r}") from None

    @staticmethod
    def _segment_type(value: RoadSegmentType | str) -> RoadSegmentType:
        if isinstance(value, RoadSegmentType):
            return value
        name = str(value).lower()
        if name == "curved":
            name = RoadSegmentType.CURVE.value
        try:
            return RoadSegmentType(name)
        except ValueError:
            raise InvalidGeometry(f"Unknown segment type: {value!r}") from None

    def _warn(self, warning: GeometryWarning) -> None:
        self.warnings.append(warning)
        logger.warning("%s", warning)
