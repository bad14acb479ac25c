"""
Simulated Trade Example
This drives a full trade against an in-memory remote that behaves like the
real trade service: versions bump on item changes, events accumulate in a
log, and the counterpart acts on a fixed script.
"""

import asyncio
import logging
import argparse
from typing import List, Optional

from tradesync import Item, StatusSnapshot, TradeSettings, open_session
from tradesync.core import PartyStatus, RemoteEvent, EventKind

logging.basicConfig(level=logging.WARNING, format="%(message)s")
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

BOT_ID = "76561198000000001"
PARTNER_ID = "76561198000000002"


class SimulatedRemote:
    """In-memory stand-in for the remote trade service."""

    def __init__(self, partner_item: Item):
        self.version = 1
        self.status = 0
        self.events: List[RemoteEvent] = []
        self.bot_items: List[Item] = []
        self.partner_items: List[Item] = []
        self.bot_ready = False
        self.partner_ready = False
        self.pending_refresh = False
        self.clock = 0
        self._partner_item = partner_item
        self._script = ["add", "chat", "ready", "accept"]

    def _log(self, actor: str, kind: EventKind, item: Optional[Item] = None, text: Optional[str] = None):
        self.clock += 1
        self.events.append(
            RemoteEvent(actor=actor, action=kind, timestamp=self.clock, item=item, text=text)
        )

    def _bump(self):
        self.version += 1
        self.pending_refresh = True

    def _partner_turn(self):
        if not self._script:
            return
        step = self._script.pop(0)
        if step == "add":
            self.partner_items.append(self._partner_item)
            self._log(PARTNER_ID, EventKind.ITEM_ADDED, item=self._partner_item)
            self._bump()
        elif step == "chat":
            self._log(PARTNER_ID, EventKind.CHAT_MESSAGE, text="Fair swap?")
        elif step == "ready":
            self.partner_ready = True
            self._log(PARTNER_ID, EventKind.READY_SET)
        elif step == "accept" and self.bot_ready:
            self._log(PARTNER_ID, EventKind.ACCEPTED)
        else:
            self._script.insert(0, step)

    async def fetch_status(self, version, log_pos):
        new_version = self.pending_refresh
        self.pending_refresh = False
        snapshot = StatusSnapshot(
            trade_status=self.status,
            version=self.version,
            new_version=new_version,
            me=PartyStatus(ready=self.bot_ready, assets=self.bot_items),
            them=PartyStatus(ready=self.partner_ready, assets=self.partner_items),
            events=list(self.events),
            log_pos=len(self.events),
        )
        if not new_version:
            self._partner_turn()
        return snapshot

    async def send_add_item(self, item, slot):
        self.bot_items.append(item)
        self._log(BOT_ID, EventKind.ITEM_ADDED, item=item)
        self._bump()
        return True

    async def send_remove_item(self, item, slot):
        self.bot_items.remove(item)
        self._log(BOT_ID, EventKind.ITEM_REMOVED, item=item)
        self._bump()
        return True

    async def send_set_ready(self, ready, version):
        self.bot_ready = ready
        self._log(BOT_ID, EventKind.READY_SET if ready else EventKind.READY_UNSET)
        return True

    async def send_accept(self, version):
        self.status = 1
        return True

    async def send_cancel(self):
        self.status = 3
        return True

    async def send_chat(self, text, version, log_pos):
        self._log(BOT_ID, EventKind.CHAT_MESSAGE, text=text)
        return True


class SwapHandler:
    """Offers one item, readies when the partner does, accepts when asked."""

    def __init__(self, engine, offer: Item):
        self.engine = engine
        self.offer = offer

    async def on_after_init(self):
        logger.info("Trade started, offering our item")
        await self.engine.add_item(self.offer)

    def on_user_add_item(self, item):
        logger.info(f"Partner added {item}")

    async def on_message(self, message):
        logger.info(f"Partner says: {message}")
        await self.engine.send_message("Looks fair to me.")

    async def on_user_set_ready(self, ready):
        logger.info(f"Partner ready: {ready}")
        await self.engine.set_ready(ready)

    async def on_user_accept(self):
        logger.info("Partner accepted, accepting too")
        await self.engine.accept_trade()

    def on_error(self, message):
        logger.warning(f"Trade error: {message}")

    def on_success(self):
        logger.info("Trade complete!")


async def main(max_polls: int = 20):
    """Run the simulated trade."""
    settings = TradeSettings.from_env()
    remote = SimulatedRemote(partner_item=Item(item_id=5002, app_id=440, context_id=2))

    engine = open_session(
        remote,
        my_id=BOT_ID,
        other_id=PARTNER_ID,
        session_id="simulated",
        token="token",
        start_version=remote.version,
        settings=settings,
    )
    engine.set_handler(SwapHandler(engine, Item(item_id=5021, app_id=440, context_id=2)))

    for _ in range(max_polls):
        await engine.poll()
        if engine.is_terminal:
            break
        await asyncio.sleep(settings.poll_interval)

    print(engine.get_status())


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulated Trade Example")
    parser.add_argument("--max-polls", type=int, default=20, help="Polls before giving up")
    args = parser.parse_args()

    asyncio.run(main(max_polls=args.max_polls))
