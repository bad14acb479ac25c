"""
tradesync - Polling negotiation engine for remotely hosted item trades.
"""

from .coordinators import NegotiationEngine, open_session
from .core import (
    Item,
    StatusSnapshot,
    TradeSettings,
    TradeException,
    VersionMismatchError,
    LocalItemsMismatchError,
)
from .handlers import TradeHandler
from .state import NotificationType

__version__ = "0.1.0"
__all__ = [
    "NegotiationEngine",
    "open_session",
    "Item",
    "StatusSnapshot",
    "TradeSettings",
    "TradeException",
    "VersionMismatchError",
    "LocalItemsMismatchError",
    "TradeHandler",
    "NotificationType",
]
