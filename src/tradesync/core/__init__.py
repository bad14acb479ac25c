"""
Core types for tradesync.

This module provides the value types, settings and session-fatal errors
used across the state mirror, reconciler and engine.
"""

from .types import (
    Item,
    RemoteEvent,
    PartyStatus,
    StatusSnapshot,
    TradeStatus,
    EventKind,
)
from .exceptions import (
    TradeException,
    VersionMismatchError,
    LocalItemsMismatchError,
)
from .config import TradeSettings

__all__ = [
    "Item",
    "RemoteEvent",
    "PartyStatus",
    "StatusSnapshot",
    "TradeStatus",
    "EventKind",
    "TradeException",
    "VersionMismatchError",
    "LocalItemsMismatchError",
    "TradeSettings",
]
