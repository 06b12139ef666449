"""
Connectors module - Key resolution and rigid segment alignment.

This module contains:
- ConnectionResolver: Maps semantic or compass keys to connections
- CompassDirection: North/east/south/west with quarter-turn rotation
- SegmentConnector: Snaps one segment onto another and links them
"""

from roadnet.connectors.resolver import (
    CompassDirection,
    ConnectionKey,
    ConnectionResolver,
    yaw_sector,
)
from roadnet.connectors.connector import ConnectionGap, SegmentConnector

__all__ = [
    "CompassDirection",
    "ConnectionKey",
    "ConnectionResolver",
    "yaw_sector",
    "ConnectionGap",
    "SegmentConnector",
]
