"""
Fake remote command client for deterministic testing.

WHAT: In-memory WebCommandClient plus snapshot/event builders
WHY: Drive the engine without a network transport
HOW: Record every call and replay scripted results
"""

from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple

from tradesync.core import Item, PartyStatus, RemoteEvent, StatusSnapshot


MY_ID = "76561198000000001"
OTHER_ID = "76561198000000002"


class FakeTradeClient:
    """
    In-memory WebCommandClient.

    Each command returns `default_result` unless results were queued for it
    with `script()`. A queued Exception instance is raised instead of returned.
    Status snapshots are served from `statuses` in order; None when empty.
    """

    def __init__(self, default_result: Any = True):
        self.default_result = default_result
        self.calls: List[Tuple[str, tuple]] = []
        self.statuses: Deque[Optional[StatusSnapshot]] = deque()
        self._scripted: Dict[str, Deque[Any]] = {}

    def script(self, command: str, *results: Any):
        self._scripted.setdefault(command, deque()).extend(results)

    def calls_to(self, command: str) -> List[tuple]:
        return [args for name, args in self.calls if name == command]

    def _respond(self, command: str, *args):
        self.calls.append((command, args))
        queue = self._scripted.get(command)
        result = queue.popleft() if queue else self.default_result
        if isinstance(result, Exception):
            raise result
        return result

    async def fetch_status(self, version, log_pos):
        self.calls.append(("fetch_status", (version, log_pos)))
        queue = self._scripted.get("fetch_status")
        if queue:
            result = queue.popleft()
            if isinstance(result, Exception):
                raise result
            return result
        return self.statuses.popleft() if self.statuses else None

    async def send_add_item(self, item, slot):
        return self._respond("send_add_item", item, slot)

    async def send_remove_item(self, item, slot):
        return self._respond("send_remove_item", item, slot)

    async def send_set_ready(self, ready, version):
        return self._respond("send_set_ready", ready, version)

    async def send_accept(self, version):
        return self._respond("send_accept", version)

    async def send_cancel(self):
        return self._respond("send_cancel")

    async def send_chat(self, text, version, log_pos):
        return self._respond("send_chat", text, version, log_pos)


class RecordingHandler:
    """TradeHandler that records every notification it receives."""

    def __init__(self):
        self.received: List[Tuple[str, Any]] = []

    def on_close(self):
        self.received.append(("close", None))

    def on_success(self):
        self.received.append(("success", None))

    def on_error(self, message):
        self.received.append(("error", message))

    def on_after_init(self):
        self.received.append(("after_init", None))

    def on_user_add_item(self, item):
        self.received.append(("add", item))

    def on_user_remove_item(self, item):
        self.received.append(("remove", item))

    def on_message(self, message):
        self.received.append(("message", message))

    def on_user_set_ready(self, ready):
        self.received.append(("ready", ready))

    def on_user_accept(self):
        self.received.append(("accept", None))

    def kinds(self) -> List[str]:
        return [kind for kind, _ in self.received]


def make_item(item_id: int, app_id: int = 440, context_id: int = 2) -> Item:
    return Item(item_id=item_id, app_id=app_id, context_id=context_id)


def make_event(
    action: int,
    actor: str = OTHER_ID,
    timestamp: int = 1,
    item: Optional[Item] = None,
    text: Optional[str] = None,
) -> RemoteEvent:
    return RemoteEvent(actor=actor, action=action, timestamp=timestamp, item=item, text=text)


def make_status(
    trade_status: int = 0,
    version: int = 1,
    new_version: bool = False,
    mine: Optional[List[Item]] = None,
    theirs: Optional[List[Item]] = None,
    events: Optional[List[RemoteEvent]] = None,
    log_pos: int = 0,
    me_ready: bool = False,
    them_ready: bool = False,
    them_confirmed: bool = False,
) -> StatusSnapshot:
    return StatusSnapshot(
        trade_status=trade_status,
        version=version,
        new_version=new_version,
        me=PartyStatus(ready=me_ready, assets=mine or []),
        them=PartyStatus(ready=them_ready, confirmed=them_confirmed, assets=theirs or []),
        events=events or [],
        log_pos=log_pos,
    )

