"""
Bounded retry policy for remote commands.

Every outbound command and status fetch goes through RetryExecutor.execute().
Attempts stop early once the owning session is terminal so a dying session
never keeps mutating remote state.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from ..core.exceptions import TradeException
from ..state.session_state import TradeState

logger = logging.getLogger(__name__)

T = TypeVar("T")

WEB_REQUEST_MAX_RETRIES = 3
WEB_REQUEST_TIME_BETWEEN_RETRIES = 0.6


class RetryStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"
    ABORTED = "aborted"


@dataclass
class RetryOutcome(Generic[T]):
    """
    Result of a retried remote operation.

    - SUCCESS: an attempt returned a truthy value (in `value`)
    - FAILED: every attempt returned a falsy value or raised
    - ABORTED: the session was terminal before an attempt could be made
    """

    status: RetryStatus
    value: Optional[T] = None
    attempts: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == RetryStatus.SUCCESS

    def __bool__(self) -> bool:
        return self.ok


class RetryExecutor:
    """
    Calls a remote operation until it returns a truthy result.

    A falsy result (False, None, 0, empty) or a raised error counts as a
    failed attempt. TradeException is never swallowed: it signals that the
    local mirror can no longer be trusted.
    """

    def __init__(
        self,
        state: TradeState,
        max_attempts: int = WEB_REQUEST_MAX_RETRIES,
        delay: float = WEB_REQUEST_TIME_BETWEEN_RETRIES,
    ):
        """
        Initialize retry executor.

        Args:
            state: Session whose terminal flags gate each attempt
            max_attempts: Attempts before giving up
            delay: Seconds to suspend between attempts
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.state = state
        self.max_attempts = max_attempts
        self.delay = delay

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        description: str = "remote command",
    ) -> RetryOutcome[T]:
        """
        Run `operation` under the retry policy.

        Args:
            operation: Zero-argument coroutine function issuing one remote call
            description: Label used in log messages

        Returns:
            RetryOutcome describing the result
        """
        last_error: Optional[str] = None

        for attempt in range(1, self.max_attempts + 1):
            # Don't make any more requests if the trade has ended
            if self.state.is_terminal:
                logger.debug(
                    f"[RetryExecutor] Session {self.state.session_id} is terminal, "
                    f"not sending {description}"
                )
                return RetryOutcome(
                    status=RetryStatus.ABORTED,
                    attempts=attempt - 1,
                    error=last_error,
                )

            try:
                result: Any = await operation()
                if result:
                    return RetryOutcome(
                        status=RetryStatus.SUCCESS,
                        value=result,
                        attempts=attempt,
                    )
                logger.warning(
                    f"[RetryExecutor] {description} returned {result!r} "
                    f"(attempt {attempt}/{self.max_attempts})"
                )

            except TradeException:
                raise

            except Exception as e:
                last_error = str(e)
                logger.warning(
                    f"[RetryExecutor] {description} failed "
                    f"(attempt {attempt}/{self.max_attempts}): {e}",
                    exc_info=True,
                )

            if attempt < self.max_attempts:
                await asyncio.sleep(self.delay)

        logger.error(
            f"[RetryExecutor] {description} failed after {self.max_attempts} attempts"
        )
        return RetryOutcome(
            status=RetryStatus.FAILED,
            attempts=self.max_attempts,
            error=last_error,
        )
