"""
Transport-facing components shared by every session:
- WebCommandClient: protocol for the external remote command client
- RetryExecutor: bounded retry policy around remote calls
"""

from .commands import WebCommandClient, CommandName
from .retry import RetryExecutor, RetryOutcome, RetryStatus

__all__ = [
    "WebCommandClient",
    "CommandName",
    "RetryExecutor",
    "RetryOutcome",
    "RetryStatus",
]
