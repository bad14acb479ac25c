"""
Remote command interface consumed by a negotiation session.

The concrete client (authentication, HTTP calls, JSON decoding) lives
outside this package. Anything implementing this protocol can drive a
session: every method returns a falsy value on failure and may raise on
transport faults.
"""

from enum import Enum
from typing import Optional, Protocol

from ..core.types import Item, StatusSnapshot


class CommandName(Enum):
    """Names of the remote commands, used in logs and retry descriptions."""

    FETCH_STATUS = "tradestatus"
    ADD_ITEM = "additem"
    REMOVE_ITEM = "removeitem"
    SET_READY = "toggleready"
    ACCEPT = "confirm"
    CANCEL = "cancel"
    CHAT = "chat"


class WebCommandClient(Protocol):
    """
    Remote command client for one trade session.

    Example Implementation:
        class HttpTradeCommands:
            async def send_add_item(self, item, slot):
                response = await self._post("additem", {
                    "appid": item.app_id,
                    "contextid": item.context_id,
                    "itemid": item.item_id,
                    "slot": slot,
                })
                return response.get("success", False)
            ...
    """

    async def fetch_status(
        self, version: int, log_pos: int
    ) -> Optional[StatusSnapshot]:
        """
        Fetch the latest status snapshot.

        Args:
            version: Last authoritative version known locally
            log_pos: Event log cursor to acknowledge

        Returns:
            StatusSnapshot, or None if unavailable
        """
        ...

    async def send_add_item(self, item: Item, slot: int) -> bool:
        ...

    async def send_remove_item(self, item: Item, slot: int) -> bool:
        ...

    async def send_set_ready(self, ready: bool, version: int) -> bool:
        ...

    async def send_accept(self, version: int) -> bool:
        ...

    async def send_cancel(self) -> bool:
        ...

    async def send_chat(self, text: str, version: int, log_pos: int) -> bool:
        ...
