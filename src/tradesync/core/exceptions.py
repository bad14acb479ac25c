"""
Exceptions that are fatal to a negotiation session.

Transient remote failures never raise; they are retried and surface as a
False return. These exceptions are reserved for conditions where continuing
would mean acting on stale or inconsistent trade state.
"""

from typing import Optional, Any


class TradeException(Exception):
    """Base class for session-fatal trade errors."""

    def __init__(
        self,
        message: str,
        code: str = "TRADE_ERROR",
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


class VersionMismatchError(TradeException):
    """Raised when a status snapshot reveals a missed incremental update."""

    def __init__(self, local_version: int, remote_version: int):
        super().__init__(
            message="The trade version does not match. Aborting.",
            code="VERSION_MISMATCH",
            details={
                "local_version": local_version,
                "remote_version": remote_version,
            },
        )


class LocalItemsMismatchError(TradeException):
    """Raised when local slot bookkeeping disagrees with the confirmed item list."""

    def __init__(self, reason: str, slot_count: int, confirmed_count: int):
        super().__init__(
            message=f"Error validating local copy of items in the trade: {reason}",
            code="LOCAL_ITEMS_MISMATCH",
            details={
                "slot_count": slot_count,
                "confirmed_count": confirmed_count,
            },
        )
