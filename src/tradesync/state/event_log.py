"""
Ledger of remote events already processed by a session.

Append-only: snapshots may list events that were handled on an earlier poll,
and side effects must only fire once per event.
"""

import logging
from typing import List, Optional, Set

from ..core.types import RemoteEvent, EventKind


logger = logging.getLogger(__name__)


class EventLog:
    """
    Deduplicating record of remote events.

    Keeps arrival order for inspection and a set for O(1) membership.
    Lives as long as the session it belongs to.
    """

    def __init__(self):
        self._events: List[RemoteEvent] = []
        self._seen: Set[RemoteEvent] = set()

    def __contains__(self, event: RemoteEvent) -> bool:
        return event in self._seen

    def __len__(self) -> int:
        return len(self._events)

    def record(self, event: RemoteEvent) -> bool:
        """
        Record an event if it has not been seen before.

        Args:
            event: Remote event from a status snapshot

        Returns:
            True if the event was new, False if it was a duplicate
        """
        if event in self._seen:
            logger.debug(
                f"[EventLog] Skipping already processed event {event.action} from {event.actor}"
            )
            return False

        self._seen.add(event)
        self._events.append(event)
        return True

    def get_events(
        self,
        actor: Optional[str] = None,
        kind: Optional[EventKind] = None,
    ) -> List[RemoteEvent]:
        """
        Get recorded events with optional filters.

        Args:
            actor: Filter by acting identity
            kind: Filter by event kind

        Returns:
            List of events in arrival order
        """
        events = list(self._events)

        if actor is not None:
            events = [e for e in events if e.actor == actor]

        if kind is not None:
            events = [e for e in events if e.kind == kind]

        return events
