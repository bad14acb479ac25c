"""
Reconciler.

Folds one polled status snapshot into the session's local mirror and
returns the notifications the owner should see, in snapshot order.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from ..core.types import StatusSnapshot, TradeStatus, EventKind, RemoteEvent
from ..core.exceptions import VersionMismatchError
from ..state import TradeState, EventLog, Notification, NotificationType

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Outcome of reconciling one snapshot."""

    items_changed: bool = False
    """True when the confirmed item lists were replaced by a full refresh"""

    other_did_something: bool = False
    """True when the counterpart took an observable action this cycle"""

    notifications: List[Notification] = field(default_factory=list)


class Reconciler:
    """
    Applies remote status snapshots to a TradeState.

    Handles, in order:
    - terminal status codes (completed / closed / unknown)
    - full refreshes (wholesale item list replacement)
    - version skew (missed update, fatal)
    - incremental events (deduplicated through the EventLog)
    """

    def __init__(self, state: TradeState, event_log: EventLog):
        """
        Initialize reconciler.

        Args:
            state: Session state to update
            event_log: Ledger of already processed remote events
        """
        self.state = state
        self.event_log = event_log

    def reconcile(self, snapshot: StatusSnapshot) -> ReconcileResult:
        """
        Reconcile one snapshot against the local mirror.

        Args:
            snapshot: Freshly polled status

        Returns:
            ReconcileResult with notifications in arrival order

        Raises:
            VersionMismatchError: if the snapshot is newer than the local
                version but is not a full refresh
        """
        result = ReconcileResult()

        if snapshot.trade_status != TradeStatus.ONGOING:
            self._handle_terminal_status(snapshot, result)
            return result

        if snapshot.new_version:
            self._handle_full_refresh(snapshot, result)
            return result

        if snapshot.version > self.state.version:
            # We missed a version update. Only a full refresh tells us what
            # the server thinks is in the trade, so the events can't be trusted.
            logger.error(
                f"[Reconciler] Session {self.state.session_id} missed an update: "
                f"local version {self.state.version}, remote {snapshot.version}"
            )
            raise VersionMismatchError(self.state.version, snapshot.version)

        for event in snapshot.events:
            self._handle_event(event, result)

        # Snapshot flags are current, the events may be older
        self._update_flags(snapshot)

        if snapshot.log_pos != 0:
            self.state.advance_log_pos(snapshot.log_pos)

        return result

    def _handle_terminal_status(self, snapshot: StatusSnapshot, result: ReconcileResult):
        session_id = self.state.session_id

        if snapshot.trade_status == TradeStatus.COMPLETED:
            self.state.completed_ok = True
            self.state.touch()
            logger.info(f"[Reconciler] Session {session_id} completed")
            result.notifications.append(
                Notification.create(session_id, NotificationType.SESSION_COMPLETED)
            )

        else:
            # 3, 4 and anything unrecognized all mean the trade is gone
            self.state.other_cancelled = True
            self.state.touch()
            logger.warning(
                f"[Reconciler] Session {session_id} closed remotely "
                f"(status {snapshot.trade_status})"
            )
            result.notifications.append(
                Notification.create(
                    session_id,
                    NotificationType.ERROR,
                    message=f"Trade was closed by other user. Trade status: {snapshot.trade_status}",
                    metadata={"trade_status": snapshot.trade_status},
                )
            )

        result.notifications.append(
            Notification.create(session_id, NotificationType.SESSION_CLOSED)
        )

    def _handle_full_refresh(self, snapshot: StatusSnapshot, result: ReconcileResult):
        mine = snapshot.me.assets if snapshot.me else []
        theirs = snapshot.them.assets if snapshot.them else []

        logger.info(
            f"[Reconciler] Session {self.state.session_id} full refresh to version "
            f"{snapshot.version} ({len(mine)} mine, {len(theirs)} theirs)"
        )

        self.state.version = snapshot.version
        self.state.replace_offered_items(mine, theirs)

        result.items_changed = True
        result.other_did_something = True

    def _update_flags(self, snapshot: StatusSnapshot):
        if snapshot.them is not None:
            self.state.other_ready = snapshot.them.ready
            self.state.other_accepted = snapshot.them.confirmed
        if snapshot.me is not None:
            self.state.me_ready = snapshot.me.ready

    def _handle_event(self, event: RemoteEvent, result: ReconcileResult):
        if not self.event_log.record(event):
            return

        # Our own actions are recorded for dedup but never reported back
        if event.actor == self.state.my_id:
            return

        result.other_did_something = True
        session_id = self.state.session_id
        kind = event.kind

        if kind in (EventKind.ITEM_ADDED, EventKind.ITEM_REMOVED):
            notification_type = (
                NotificationType.ITEM_ADDED
                if kind == EventKind.ITEM_ADDED
                else NotificationType.ITEM_REMOVED
            )
            notification = Notification.create(
                session_id, notification_type, item=event.item, source=event
            )

        elif kind in (EventKind.READY_SET, EventKind.READY_UNSET):
            ready = kind == EventKind.READY_SET
            self.state.other_ready = ready
            notification = Notification.create(
                session_id, NotificationType.READY_CHANGED, ready=ready, source=event
            )

        elif kind == EventKind.ACCEPTED:
            self.state.other_accepted = True
            notification = Notification.create(
                session_id, NotificationType.ACCEPTED, source=event
            )

        elif kind == EventKind.CHAT_MESSAGE:
            notification = Notification.create(
                session_id,
                NotificationType.CHAT_MESSAGE,
                message=event.text or "",
                source=event,
            )

        else:
            logger.warning(
                f"[Reconciler] Unknown event {event.action} in session {session_id}"
            )
            notification = Notification.create(
                session_id,
                NotificationType.WARNING,
                message=f"Unknown Event ID: {event.action}",
                source=event,
            )

        logger.debug(f"[Reconciler] Notification from {event.actor}: {notification.to_dict()}")
        result.notifications.append(notification)
