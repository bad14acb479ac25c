"""
Core data types for tradesync.

These types are shared by the state mirror, the reconciler and the
negotiation engine. Snapshot models are validated with pydantic since they
are built by the external transport from untrusted remote data.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Dict, Any, List

from pydantic import BaseModel, ConfigDict, Field


class TradeStatus(IntEnum):
    """Known remote trade status codes."""

    ONGOING = 0
    COMPLETED = 1
    CLOSED = 3
    CLOSED_OTHER = 4


class EventKind(IntEnum):
    """Remote action codes reported in a status snapshot's event log."""

    ITEM_ADDED = 0
    ITEM_REMOVED = 1
    READY_SET = 2
    READY_UNSET = 3
    ACCEPTED = 4
    CURRENCY_MODIFIED = 6
    CHAT_MESSAGE = 7


@dataclass(frozen=True)
class Item:
    """
    One discrete item offered in a trade.

    Identity is (item_id, app_id, context_id) plus the amount; two items are
    equal only if all four fields match.
    """

    item_id: int
    app_id: int
    context_id: int
    amount: int = 1

    def __post_init__(self):
        if self.item_id < 0:
            raise ValueError(f"item_id must be non-negative, got {self.item_id}")

    def __str__(self) -> str:
        return (
            f"id:{self.item_id}, appid:{self.app_id}, "
            f"contextid:{self.context_id}, amount:{self.amount}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "item_id": self.item_id,
            "app_id": self.app_id,
            "context_id": self.context_id,
            "amount": self.amount,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Item":
        """Create from dictionary."""
        return cls(
            item_id=int(data["item_id"]),
            app_id=int(data["app_id"]),
            context_id=int(data["context_id"]),
            amount=int(data.get("amount", 1)),
        )


@dataclass(frozen=True)
class RemoteEvent:
    """
    One action taken by either party, as listed in a status snapshot.

    Equality covers every observable field, so the same event listed by two
    consecutive snapshots compares equal and is only processed once.
    """

    actor: str
    action: int
    timestamp: int = 0
    item: Optional[Item] = None
    text: Optional[str] = None

    @property
    def kind(self) -> Optional[EventKind]:
        """Known event kind, or None for codes this core does not interpret."""
        if self.action == EventKind.CURRENCY_MODIFIED:
            return None
        try:
            return EventKind(self.action)
        except ValueError:
            return None


class PartyStatus(BaseModel):
    """Per-side view of the trade in a status snapshot."""

    model_config = ConfigDict(frozen=True)

    ready: bool = False
    confirmed: bool = False
    assets: List[Item] = Field(default_factory=list)


class StatusSnapshot(BaseModel):
    """
    Remote-sourced view of the trade, consumed once per poll cycle.

    `new_version` marks a full refresh: only then do `me.assets` and
    `them.assets` carry the complete authoritative item lists.
    """

    model_config = ConfigDict(frozen=True)

    trade_status: int
    version: int = Field(ge=0)
    new_version: bool = False
    me: Optional[PartyStatus] = None
    them: Optional[PartyStatus] = None
    events: List[RemoteEvent] = Field(default_factory=list)
    log_pos: int = Field(default=0, ge=0)
