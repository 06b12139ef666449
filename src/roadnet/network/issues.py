"""
Network issues - Diagnostics collected while validating and building.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class IssueSeverity(Enum):
    """How serious a recorded issue is."""
    WARNING = "warning"   # Corrected automatically
    ERROR = "error"       # Declaration skipped or network incomplete


class IssueCode(Enum):
    """Kinds of recorded issues."""
    NO_SEGMENTS = "no_segments"
    NO_START_POINT = "no_start_point"
    DUPLICATE_SEGMENT_ID = "duplicate_segment_id"
    FLAT_SURFACE = "flat_surface"
    YAW_ONLY = "yaw_only"
    INVALID_CONNECTION_INDEX = "invalid_connection_index"
    SELF_CONNECTION = "self_connection"
    UNKNOWN_CONNECTION_KEY = "unknown_connection_key"
    ALIGNMENT_FAILURE = "alignment_failure"
    CONNECTION_IN_USE = "connection_in_use"


@dataclass(frozen=True)
class NetworkIssue:
    """One diagnostic entry.

    `connection_index` is the position of the offending declaration in
    declaration order; `segment_index` the position of the segment.
    """
    severity: IssueSeverity
    code: IssueCode
    message: str
    connection_index: Optional[int] = None
    segment_index: Optional[int] = None

    @property
    def is_error(self) -> bool:
        return self.severity is IssueSeverity.ERROR

    def __str__(self) -> str:
        return f"[{self.severity.value}] {self.code.value}: {self.message}"
