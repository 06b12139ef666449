"""
Errors - Exception and warning types for road network construction.

Fatal errors derive from RoadNetworkError. Geometry corrections are
GeometryWarning instances that get recorded and logged, never raised.
"""


class RoadNetworkError(Exception):
    """Base class for road network errors."""


class InvalidGeometry(RoadNetworkError, ValueError):
    """A size parameter is non-positive or not finite."""


class UnknownConnectionKey(RoadNetworkError, LookupError):
    """A connection key does not exist on the given segment."""

    def __init__(self, key, segment_type: str, valid_keys=()):
        self.key = key
        self.segment_type = segment_type
        self.valid_keys = tuple(valid_keys)
        message = f'Invalid connection key "{key}" for segment type "{segment_type}"'
        if self.valid_keys:
            message += f" (expected one of: {', '.join(self.valid_keys)})"
        super().__init__(message)


class AlignmentFailure(RoadNetworkError):
    """A rigid transform failed to bring two connections together."""

    def __init__(self, distance: float, direction_error: float, tolerance: float):
        self.distance = distance
        self.direction_error = direction_error
        self.tolerance = tolerance
        super().__init__(
            f"Failed to align segments: connection points {distance:.3f} units apart, "
            f"direction error {direction_error:.3f} (tolerance {tolerance})"
        )


class ConnectionInUse(RoadNetworkError):
    """A connection is already linked to a different segment."""

    def __init__(self, segment_id: str, name: str, connected_to_id: str):
        self.segment_id = segment_id
        self.name = name
        self.connected_to_id = connected_to_id
        super().__init__(
            f'Connection "{name}" of segment {segment_id} is already '
            f"connected to segment {connected_to_id}"
        )


class BuilderReused(RoadNetworkError, RuntimeError):
    """A builder was used again after build()."""


class GeometryWarning(UserWarning):
    """An input violated a geometric invariant and was corrected."""

    def __init__(self, context: str, message: str):
        self.context = context
        self.message = message
        super().__init__(f"{context}: {message}")


class FlatSurfaceViolation(GeometryWarning):
    """A point had a non-zero height and was moved onto y = 0."""


class YawOnlyViolation(GeometryWarning):
    """A rotation had pitch/roll components, or a direction was not a unit vector."""
