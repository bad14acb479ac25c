"""
Session state for one negotiation.

State is MUTABLE working memory owned by the NegotiationEngine.
The reconciler writes remote-confirmed facts into it, the engine writes the
locally intended offer (slot map) into it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Any

from ..core.types import Item
from ..core.exceptions import LocalItemsMismatchError


@dataclass
class TradeState:
    """
    Local mirror of one remote trade session.

    Two views of the local offer are kept:
    - my_offered_items: what the server last confirmed (full refresh only)
    - my_offered_by_slot: what this side has successfully asked to offer

    Outside a version transition they must agree; validate_local_items()
    enforces that before anything is readied or accepted.
    """

    # ========================================================================
    # IDENTIFIERS
    # ========================================================================

    my_id: str
    """Identity of the local agent"""

    other_id: str
    """Identity of the remote counterpart"""

    session_id: str
    """Remote session identifier"""

    token: str
    """Session token presented to the remote service"""

    # ========================================================================
    # VERSIONING
    # ========================================================================

    version: int = 0
    """Last authoritative remote version seen (never decreases)"""

    log_pos: int = 0
    """Server-side event log cursor to acknowledge on the next poll"""

    # ========================================================================
    # FLAGS
    # ========================================================================

    me_ready: bool = False
    other_ready: bool = False
    other_accepted: bool = False

    started: bool = False
    """Set on the first poll"""

    completed_ok: bool = False
    """Terminal: the trade went through"""

    other_cancelled: bool = False
    """Terminal: the trade was closed remotely"""

    # ========================================================================
    # ITEMS
    # ========================================================================

    my_offered_items: List[Item] = field(default_factory=list)
    other_offered_items: List[Item] = field(default_factory=list)
    my_offered_by_slot: Dict[int, Item] = field(default_factory=dict)

    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.version < 0:
            raise ValueError(f"version must be non-negative, got {self.version}")

    @property
    def is_terminal(self) -> bool:
        """True once the trade has completed or been cancelled remotely."""
        return self.completed_ok or self.other_cancelled

    def touch(self):
        self.updated_at = datetime.now()

    # ========================================================================
    # SLOTS
    # ========================================================================

    def next_slot(self) -> int:
        """Lowest non-negative slot not currently holding an item."""
        slot = 0
        while slot in self.my_offered_by_slot:
            slot += 1
        return slot

    def slot_of(self, item: Item) -> Optional[int]:
        """
        Find the slot holding an item equal to `item`.

        Args:
            item: Item to look up

        Returns:
            Slot index or None if the item is not tracked locally
        """
        for slot, offered in self.my_offered_by_slot.items():
            if offered == item:
                return slot
        return None

    def is_offered_locally(self, item: Item) -> bool:
        """True if the item is in the slot map or the confirmed local list."""
        return item in self.my_offered_by_slot.values() or item in self.my_offered_items

    def assign_slot(self, slot: int, item: Item):
        self.my_offered_by_slot[slot] = item
        self.touch()

    def free_slot(self, slot: int):
        self.my_offered_by_slot.pop(slot, None)
        self.touch()

    def validate_local_items(self):
        """
        Check the slot map against the last confirmed local item list.

        Raises:
            LocalItemsMismatchError: if counts differ or a slotted item is
                missing from the confirmed list
        """
        slotted = list(self.my_offered_by_slot.values())

        if len(slotted) != len(self.my_offered_items):
            raise LocalItemsMismatchError(
                "Count mismatch",
                slot_count=len(slotted),
                confirmed_count=len(self.my_offered_items),
            )

        if any(item not in self.my_offered_items for item in slotted):
            raise LocalItemsMismatchError(
                "Item was not in the remote copy.",
                slot_count=len(slotted),
                confirmed_count=len(self.my_offered_items),
            )

    # ========================================================================
    # REMOTE UPDATES
    # ========================================================================

    def replace_offered_items(self, mine: List[Item], theirs: List[Item]):
        """Replace both confirmed item lists wholesale."""
        self.my_offered_items = list(mine)
        self.other_offered_items = list(theirs)
        self.touch()

    def advance_log_pos(self, log_pos: int):
        """Move the event log cursor forward; zero or older positions are ignored."""
        if log_pos > self.log_pos:
            self.log_pos = log_pos

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "my_id": self.my_id,
            "other_id": self.other_id,
            "session_id": self.session_id,
            "version": self.version,
            "log_pos": self.log_pos,
            "me_ready": self.me_ready,
            "other_ready": self.other_ready,
            "other_accepted": self.other_accepted,
            "started": self.started,
            "completed_ok": self.completed_ok,
            "other_cancelled": self.other_cancelled,
            "my_offered_items": [item.to_dict() for item in self.my_offered_items],
            "other_offered_items": [
                item.to_dict() for item in self.other_offered_items
            ],
            "my_offered_by_slot": {
                slot: item.to_dict() for slot, item in self.my_offered_by_slot.items()
            },
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "metadata": self.metadata,
        }
