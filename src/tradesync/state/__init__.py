"""
State management subsystem.

Provides:
- Session state (mutable local mirror of the remote trade)
- Event log (deduplicating ledger of processed remote events)
- Notifications delivered to the session owner
"""

from .events import Notification, NotificationType
from .session_state import TradeState
from .event_log import EventLog

__all__ = [
    # Notifications
    "Notification",
    "NotificationType",
    # State
    "TradeState",
    # Ledger
    "EventLog",
]
