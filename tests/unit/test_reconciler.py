"""
Unit tests for snapshot reconciliation.

WHAT: Status-code mapping, full refresh, version skew, event scanning
WHY: The local mirror must never silently diverge from the remote state
HOW: Feed hand-built snapshots to a Reconciler over a fresh TradeState
"""

import pytest

from tradesync.coordinators import Reconciler
from tradesync.core import VersionMismatchError
from tradesync.state import TradeState, EventLog, NotificationType
from tests.fixtures.fake_client import make_event, make_item, make_status, MY_ID, OTHER_ID


@pytest.fixture
def state():
    return TradeState(my_id=MY_ID, other_id=OTHER_ID, session_id="s", token="t", version=5)


@pytest.fixture
def reconciler(state):
    return Reconciler(state, EventLog())


def types_of(result):
    return [n.notification_type for n in result.notifications]


# Status codes

@pytest.mark.unit
def test_status_completed_sets_completed_ok(reconciler, state):
    result = reconciler.reconcile(make_status(trade_status=1, version=5))

    assert state.completed_ok
    assert not state.other_cancelled
    assert not result.other_did_something
    assert types_of(result) == [
        NotificationType.SESSION_COMPLETED,
        NotificationType.SESSION_CLOSED,
    ]


@pytest.mark.unit
@pytest.mark.parametrize("code", [3, 4, 2, 99])
def test_closed_and_unknown_codes_cancel(reconciler, state, code):
    result = reconciler.reconcile(make_status(trade_status=code, version=5))

    assert state.other_cancelled
    assert not state.completed_ok
    assert types_of(result) == [NotificationType.ERROR, NotificationType.SESSION_CLOSED]
    assert result.notifications[0].message.endswith(f"Trade status: {code}")


@pytest.mark.unit
def test_terminal_status_skips_events(reconciler, state):
    snapshot = make_status(
        trade_status=1, version=9, new_version=True, mine=[make_item(1)],
        events=[make_event(7, text="bye")],
    )

    reconciler.reconcile(snapshot)

    assert state.version == 5
    assert state.my_offered_items == []
    assert len(reconciler.event_log) == 0


# Versions

@pytest.mark.unit
def test_full_refresh_replaces_item_lists(reconciler, state):
    state.replace_offered_items([make_item(1), make_item(2)], [make_item(50)])
    mine = [make_item(3)]
    theirs = [make_item(60), make_item(61)]

    result = reconciler.reconcile(
        make_status(version=9, new_version=True, mine=mine, theirs=theirs,
                    events=[make_event(7, text="ignored")])
    )

    assert state.version == 9
    assert state.my_offered_items == mine
    assert state.other_offered_items == theirs
    assert result.items_changed
    assert result.other_did_something
    assert result.notifications == []
    assert len(reconciler.event_log) == 0


@pytest.mark.unit
def test_full_refresh_can_move_version_backwards(reconciler, state):
    reconciler.reconcile(make_status(version=2, new_version=True))

    assert state.version == 2


@pytest.mark.unit
def test_version_skew_raises_without_mutation(reconciler, state):
    state.replace_offered_items([make_item(1)], [make_item(2)])

    with pytest.raises(VersionMismatchError) as exc_info:
        reconciler.reconcile(
            make_status(version=7, mine=[], theirs=[], events=[make_event(0, item=make_item(9))])
        )

    assert exc_info.value.details == {"local_version": 5, "remote_version": 7}
    assert state.version == 5
    assert state.my_offered_items == [make_item(1)]
    assert state.other_offered_items == [make_item(2)]
    assert len(reconciler.event_log) == 0


@pytest.mark.unit
def test_stale_version_processes_events(reconciler):
    result = reconciler.reconcile(make_status(version=3, events=[make_event(7, text="hi")]))

    assert types_of(result) == [NotificationType.CHAT_MESSAGE]


# Events

@pytest.mark.unit
def test_events_become_notifications_in_order(reconciler, state):
    events = [
        make_event(0, timestamp=1, item=make_item(10)),
        make_event(7, timestamp=2, text="take it"),
        make_event(1, timestamp=3, item=make_item(10)),
        make_event(2, timestamp=4),
        make_event(4, timestamp=5),
    ]

    result = reconciler.reconcile(make_status(version=5, events=events, them_ready=True,
                                              them_confirmed=True))

    assert types_of(result) == [
        NotificationType.ITEM_ADDED,
        NotificationType.CHAT_MESSAGE,
        NotificationType.ITEM_REMOVED,
        NotificationType.READY_CHANGED,
        NotificationType.ACCEPTED,
    ]
    assert result.notifications[0].item == make_item(10)
    assert result.notifications[1].message == "take it"
    assert result.notifications[3].ready is True
    assert result.other_did_something
    assert state.other_ready
    assert state.other_accepted


@pytest.mark.unit
def test_duplicate_events_reported_once(reconciler):
    event = make_event(7, text="hello", timestamp=42)

    first = reconciler.reconcile(make_status(version=5, events=[event]))
    second = reconciler.reconcile(make_status(version=5, events=[event]))

    assert len(first.notifications) == 1
    assert second.notifications == []
    assert not second.other_did_something


@pytest.mark.unit
def test_own_events_recorded_but_not_reported(reconciler):
    own = make_event(0, actor=MY_ID, item=make_item(1))

    result = reconciler.reconcile(make_status(version=5, events=[own]))

    assert result.notifications == []
    assert not result.other_did_something
    assert own in reconciler.event_log


@pytest.mark.unit
def test_unknown_event_becomes_warning(reconciler):
    result = reconciler.reconcile(
        make_status(version=5, events=[make_event(12, timestamp=1), make_event(7, timestamp=2, text="x")])
    )

    assert types_of(result) == [NotificationType.WARNING, NotificationType.CHAT_MESSAGE]
    assert result.notifications[0].message == "Unknown Event ID: 12"


@pytest.mark.unit
def test_ready_unset_event_clears_flag(reconciler, state):
    state.other_ready = True

    result = reconciler.reconcile(
        make_status(version=5, events=[make_event(3)], them_ready=False)
    )

    assert result.notifications[0].ready is False
    assert not state.other_ready


@pytest.mark.unit
def test_snapshot_flags_applied(reconciler, state):
    reconciler.reconcile(make_status(version=5, me_ready=True, them_ready=True))

    assert state.me_ready
    assert state.other_ready
    assert not state.other_accepted


@pytest.mark.unit
def test_log_pos_advances_only_when_set(reconciler, state):
    reconciler.reconcile(make_status(version=5, log_pos=3))
    assert state.log_pos == 3

    reconciler.reconcile(make_status(version=5, log_pos=0))
    assert state.log_pos == 3
