"""
Listener protocol for trade session owners.

A TradeHandler has one method per notification kind. Pass one to
NegotiationEngine.set_handler() to register all of them at once, or
register individual callbacks with NegotiationEngine.on().

Methods may be plain functions or coroutines; the engine awaits coroutines.
"""

from typing import Protocol, Dict, Callable, Any

from ..core.types import Item
from ..state.events import NotificationType


class TradeHandler(Protocol):
    """
    Receives everything a session learns from polling.

    Example Implementation:
        class EchoHandler:
            def __init__(self, engine):
                self.engine = engine

            async def on_user_add_item(self, item):
                await self.engine.send_message(str(item))

            async def on_user_set_ready(self, ready):
                # Re-poll before deciding, our own ready flag may be stale
                await self.engine.poll()
                await self.engine.set_ready(ready)

            async def on_user_accept(self):
                await self.engine.accept_trade()

            ...
    """

    def on_close(self) -> Any:
        """The trade ended, whatever the reason."""
        ...

    def on_success(self) -> Any:
        """The trade completed successfully."""
        ...

    def on_error(self, message: str) -> Any:
        """Something went wrong (includes remote cancellation)."""
        ...

    def on_warning(self, message: str) -> Any:
        """Non-fatal oddity, such as an unknown remote event."""
        ...

    def on_after_init(self) -> Any:
        """The session was polled for the first time."""
        ...

    def on_user_add_item(self, item: Item) -> Any:
        ...

    def on_user_remove_item(self, item: Item) -> Any:
        ...

    def on_message(self, message: str) -> Any:
        ...

    def on_user_set_ready(self, ready: bool) -> Any:
        ...

    def on_user_accept(self) -> Any:
        ...


def handler_callbacks(handler: TradeHandler) -> Dict[NotificationType, Callable]:
    """
    Map a handler's methods to the notification kinds they serve.

    Methods the handler does not define are left out.

    Args:
        handler: Object implementing some or all of TradeHandler

    Returns:
        Dictionary of notification type -> bound method
    """
    method_names = {
        NotificationType.SESSION_CLOSED: "on_close",
        NotificationType.SESSION_COMPLETED: "on_success",
        NotificationType.ERROR: "on_error",
        NotificationType.WARNING: "on_warning",
        NotificationType.AFTER_INIT: "on_after_init",
        NotificationType.ITEM_ADDED: "on_user_add_item",
        NotificationType.ITEM_REMOVED: "on_user_remove_item",
        NotificationType.CHAT_MESSAGE: "on_message",
        NotificationType.READY_CHANGED: "on_user_set_ready",
        NotificationType.ACCEPTED: "on_user_accept",
    }

    callbacks = {}
    for notification_type, name in method_names.items():
        method = getattr(handler, name, None)
        if callable(method):
            callbacks[notification_type] = method
    return callbacks
