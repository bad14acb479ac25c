"""
Notification types emitted to the owner of a negotiation session.

A Notification is a single discriminated value: the reconciler produces
them in snapshot order and the engine routes each one to the callback
registered for its type.
"""

from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any
import uuid

from ..core.types import Item, RemoteEvent


class NotificationType(Enum):
    """
    Kinds of notifications a session can deliver.

    Each kind has exactly one callback slot on the engine.
    """

    # Lifecycle
    AFTER_INIT = "after_init"
    SESSION_COMPLETED = "session_completed"
    SESSION_CLOSED = "session_closed"

    # Problems
    ERROR = "error"
    WARNING = "warning"

    # Counterpart actions
    ITEM_ADDED = "item_added"
    ITEM_REMOVED = "item_removed"
    READY_CHANGED = "ready_changed"
    ACCEPTED = "accepted"
    CHAT_MESSAGE = "chat_message"


@dataclass(frozen=True)
class Notification:
    """
    Immutable notification for the session owner.

    Only the field matching the type is populated:
    - ITEM_ADDED / ITEM_REMOVED: item
    - READY_CHANGED: ready
    - CHAT_MESSAGE, ERROR, WARNING: message
    """

    notification_id: str
    session_id: str
    notification_type: NotificationType
    timestamp: datetime

    item: Optional[Item] = None
    ready: Optional[bool] = None
    message: Optional[str] = None

    # Remote event this notification was derived from, if any
    source: Optional[RemoteEvent] = None

    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        session_id: str,
        notification_type: NotificationType,
        item: Optional[Item] = None,
        ready: Optional[bool] = None,
        message: Optional[str] = None,
        source: Optional[RemoteEvent] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "Notification":
        """
        Create a new notification with auto-generated ID.

        Args:
            session_id: Session this notification belongs to
            notification_type: Type of notification
            item: Item for item added/removed notifications
            ready: New ready state for READY_CHANGED
            message: Text for chat, error and warning notifications
            source: Remote event that produced this notification
            metadata: Additional metadata (optional)

        Returns:
            Notification instance
        """
        return cls(
            notification_id=f"ntf-{uuid.uuid4().hex[:12]}",
            session_id=session_id,
            notification_type=notification_type,
            timestamp=datetime.now(),
            item=item,
            ready=ready,
            message=message,
            source=source,
            metadata=metadata or {},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict for logging/diagnostics."""
        return {
            "notification_id": self.notification_id,
            "session_id": self.session_id,
            "notification_type": self.notification_type.value,
            "timestamp": self.timestamp.isoformat(),
            "item": self.item.to_dict() if self.item else None,
            "ready": self.ready,
            "message": self.message,
            "metadata": self.metadata,
        }
