"""
Negotiation Engine.

Drives one trade session: outbound commands go through the retry policy
and update the local slot map on success, inbound state is learned only by
polling and reconciled into the local mirror.
"""

import inspect
import logging
from typing import Any, Callable, Dict, List, Optional

from .reconciler import Reconciler
from ..core.config import TradeSettings
from ..core.exceptions import TradeException
from ..core.types import Item
from ..handlers.base import TradeHandler, handler_callbacks
from ..state import TradeState, EventLog, Notification, NotificationType
from ..transport.commands import WebCommandClient, CommandName
from ..transport.retry import RetryExecutor

logger = logging.getLogger(__name__)


class NegotiationEngine:
    """
    Public surface of a trade session.

    Not safe for concurrent use: poll() and the mutating operations of one
    engine must be awaited one at a time. Separate engines share nothing.

    Callback exceptions other than TradeException are logged and do not
    propagate out of poll(); handler bugs show up only in the logs.

    Usage:
        engine = open_session(client, my_id, other_id, session_id, token, 1)
        engine.set_handler(MyHandler(engine))

        while not engine.is_terminal:
            await engine.poll()
            await asyncio.sleep(settings.poll_interval)
    """

    def __init__(
        self,
        client: WebCommandClient,
        state: TradeState,
        event_log: Optional[EventLog] = None,
        retry: Optional[RetryExecutor] = None,
        settings: Optional[TradeSettings] = None,
    ):
        """
        Initialize negotiation engine.

        Args:
            client: Remote command client for this session
            state: Local mirror (owned by this engine from now on)
            event_log: Ledger of processed remote events (created if None)
            retry: Retry policy (built from settings if None)
            settings: Retry/polling settings (defaults if None)
        """
        self.settings = settings or TradeSettings()
        self.client = client
        self.state = state
        self.event_log = event_log or EventLog()
        self.retry = retry or RetryExecutor(
            state,
            max_attempts=self.settings.max_retries,
            delay=self.settings.retry_delay,
        )
        self.reconciler = Reconciler(state, self.event_log)

        self._callbacks: Dict[NotificationType, Callable] = {}

    # ========================================================================
    # CALLBACKS
    # ========================================================================

    def on(self, notification_type: NotificationType, callback: Callable):
        """
        Register the callback for one notification kind.

        Args:
            notification_type: Kind to listen for
            callback: Function or coroutine function

        Raises:
            ValueError: if a callback is already registered for this kind
        """
        if notification_type in self._callbacks:
            raise ValueError(
                f"A callback is already registered for {notification_type.value}"
            )
        self._callbacks[notification_type] = callback

    def off(self, notification_type: NotificationType):
        """Unregister the callback for one notification kind, if any."""
        self._callbacks.pop(notification_type, None)

    def set_handler(self, handler: TradeHandler):
        """
        Register every method a handler implements.

        Replaces previously registered callbacks for the same kinds.
        """
        for notification_type, callback in handler_callbacks(handler).items():
            self.off(notification_type)
            self.on(notification_type, callback)

    async def _dispatch(self, notification: Notification):
        notification_type = notification.notification_type
        callback = self._callbacks.get(notification_type)

        # Warnings share the error channel unless someone asked for them
        if callback is None and notification_type == NotificationType.WARNING:
            callback = self._callbacks.get(NotificationType.ERROR)

        if callback is None:
            return

        if notification_type in (NotificationType.ITEM_ADDED, NotificationType.ITEM_REMOVED):
            args = (notification.item,)
        elif notification_type == NotificationType.READY_CHANGED:
            args = (notification.ready,)
        elif notification_type in (
            NotificationType.CHAT_MESSAGE,
            NotificationType.ERROR,
            NotificationType.WARNING,
        ):
            args = (notification.message,)
        else:
            args = ()

        try:
            result = callback(*args)
            if inspect.isawaitable(result):
                await result
        except TradeException:
            raise
        except Exception as e:
            logger.error(
                f"[NegotiationEngine] Error in {notification_type.value} callback: {e}",
                exc_info=True,
            )

    # ========================================================================
    # OUTBOUND COMMANDS
    # ========================================================================

    async def add_item(self, item: Item) -> bool:
        """
        Offer an item in the next free slot.

        Returns:
            False if the item is already offered or the remote call failed
        """
        if self.state.is_offered_locally(item):
            logger.debug(f"[NegotiationEngine] Item already offered: {item}")
            return False

        slot = self.state.next_slot()
        outcome = await self.retry.execute(
            lambda: self.client.send_add_item(item, slot),
            CommandName.ADD_ITEM.value,
        )

        if outcome:
            self.state.assign_slot(slot, item)
            logger.info(
                f"[NegotiationEngine] Added item {item.item_id} in slot {slot} "
                f"({self.state.session_id})"
            )

        return outcome.ok

    async def add_item_by_id(self, item_id: int, app_id: int, context_id: int) -> bool:
        """Offer an item identified by its id, app id and context id."""
        return await self.add_item(
            Item(item_id=item_id, app_id=app_id, context_id=context_id)
        )

    async def remove_item(self, item: Item) -> bool:
        """
        Withdraw a previously added item.

        Returns:
            False if no slot holds the item or the remote call failed
        """
        slot = self.state.slot_of(item)
        if slot is None:
            return False

        outcome = await self.retry.execute(
            lambda: self.client.send_remove_item(item, slot),
            CommandName.REMOVE_ITEM.value,
        )

        if outcome:
            self.state.free_slot(slot)
            logger.info(
                f"[NegotiationEngine] Removed item {item.item_id} from slot {slot} "
                f"({self.state.session_id})"
            )

        return outcome.ok

    async def remove_all_items(self) -> int:
        """
        Withdraw every locally tracked item, one at a time.

        Best effort: earlier removals stand even if later ones fail.

        Returns:
            Number of items removed
        """
        removed = 0
        for item in list(self.state.my_offered_by_slot.values()):
            if await self.remove_item(item):
                removed += 1
            else:
                logger.warning(f"[NegotiationEngine] Couldn't remove item {item}")
        return removed

    async def send_message(self, text: str) -> bool:
        """Send a chat message over the trade."""
        outcome = await self.retry.execute(
            lambda: self.client.send_chat(text, self.state.version, self.state.log_pos),
            CommandName.CHAT.value,
        )
        return outcome.ok

    async def set_ready(self, ready: bool) -> bool:
        """
        Set the local ready state.

        Raises:
            LocalItemsMismatchError: if the slot map disagrees with the
                confirmed item list
        """
        # Cleared even if the remote call fails
        if not ready:
            self.state.me_ready = False

        if self.state.is_terminal:
            return False

        self.state.validate_local_items()

        outcome = await self.retry.execute(
            lambda: self.client.send_set_ready(ready, self.state.version),
            CommandName.SET_READY.value,
        )
        return outcome.ok

    async def accept_trade(self) -> bool:
        """
        Accept the trade as it currently stands.

        Raises:
            LocalItemsMismatchError: if the slot map disagrees with the
                confirmed item list
        """
        if self.state.is_terminal:
            return False

        self.state.validate_local_items()

        outcome = await self.retry.execute(
            lambda: self.client.send_accept(self.state.version),
            CommandName.ACCEPT.value,
        )
        if outcome:
            logger.info(f"[NegotiationEngine] Accepted trade {self.state.session_id}")
        return outcome.ok

    async def cancel_trade(self) -> bool:
        """
        Ask the remote side to cancel the trade.

        Cancellation is only reflected locally once a poll reports it.
        """
        outcome = await self.retry.execute(
            self.client.send_cancel,
            CommandName.CANCEL.value,
        )
        return outcome.ok

    # ========================================================================
    # POLLING
    # ========================================================================

    async def poll(self) -> bool:
        """
        Fetch the latest status and dispatch what changed.

        Returns:
            True if the counterpart did something this cycle

        Raises:
            VersionMismatchError: if an update was missed; the session
                must be abandoned
        """
        if not self.state.started:
            self.state.started = True
            # There is no remote signal that the trade is initialized,
            # so the first poll is taken as the start
            await self._dispatch(
                Notification.create(self.state.session_id, NotificationType.AFTER_INIT)
            )

        outcome = await self.retry.execute(
            lambda: self.client.fetch_status(self.state.version, self.state.log_pos),
            CommandName.FETCH_STATUS.value,
        )
        if not outcome:
            return False

        try:
            result = self.reconciler.reconcile(outcome.value)
        except TradeException as e:
            logger.error(
                f"[NegotiationEngine] Session {self.state.session_id} aborted: {e.message}"
            )
            raise

        for notification in result.notifications:
            await self._dispatch(notification)

        return result.other_did_something

    # ========================================================================
    # QUERIES
    # ========================================================================

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    @property
    def my_offered_items(self) -> List[Item]:
        return list(self.state.my_offered_items)

    @property
    def other_offered_items(self) -> List[Item]:
        return list(self.state.other_offered_items)

    def get_status(self) -> Dict[str, Any]:
        """Get current session status."""
        return {
            "session_id": self.state.session_id,
            "other_id": self.state.other_id,
            "version": self.state.version,
            "started": self.state.started,
            "completed_ok": self.state.completed_ok,
            "other_cancelled": self.state.other_cancelled,
            "me_ready": self.state.me_ready,
            "other_ready": self.state.other_ready,
            "other_accepted": self.state.other_accepted,
            "my_offered_count": len(self.state.my_offered_items),
            "other_offered_count": len(self.state.other_offered_items),
            "events_processed": len(self.event_log),
        }


def open_session(
    client: WebCommandClient,
    my_id: str,
    other_id: str,
    session_id: str,
    token: str,
    start_version: int,
    settings: Optional[TradeSettings] = None,
    handler: Optional[TradeHandler] = None,
) -> NegotiationEngine:
    """
    Create an engine for a freshly opened trade session.

    Args:
        client: Remote command client bound to this session
        my_id: Local identity
        other_id: Counterpart identity
        session_id: Remote session identifier
        token: Session token
        start_version: Version the remote side reported when the trade opened
        settings: Optional retry/polling settings
        handler: Optional listener to register

    Returns:
        NegotiationEngine ready to be polled
    """
    state = TradeState(
        my_id=my_id,
        other_id=other_id,
        session_id=session_id,
        token=token,
        version=start_version,
    )
    engine = NegotiationEngine(client=client, state=state, settings=settings)

    if handler is not None:
        engine.set_handler(handler)

    logger.info(
        f"[NegotiationEngine] Opened session {session_id} with {other_id} "
        f"at version {start_version}"
    )
    return engine
