"""
Coordinators for trade sessions.

The engine executes outbound commands and polling; the reconciler folds
status snapshots into the local mirror.
"""

from .negotiation import NegotiationEngine, open_session
from .reconciler import Reconciler, ReconcileResult

__all__ = [
    "NegotiationEngine",
    "open_session",
    "Reconciler",
    "ReconcileResult",
]
