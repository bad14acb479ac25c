"""
Listener protocol for session owners.

These protocols define the interface that user-provided trade handlers
implement to react to counterpart actions.
"""

from .base import TradeHandler, handler_callbacks

__all__ = [
    "TradeHandler",
    "handler_callbacks",
]
