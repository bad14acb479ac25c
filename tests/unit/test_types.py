"""
Unit tests for core value types.

WHAT: Item identity, remote event classification, snapshot validation
WHY: Deduplication and slot lookups rely on exact equality semantics
HOW: Construct values directly and compare
"""

import pytest
from pydantic import ValidationError

from tradesync.core import Item, RemoteEvent, StatusSnapshot, EventKind, PartyStatus


@pytest.mark.unit
def test_items_equal_only_when_all_fields_match():
    base = Item(item_id=10, app_id=440, context_id=2)

    assert base == Item(item_id=10, app_id=440, context_id=2, amount=1)
    assert base != Item(item_id=10, app_id=440, context_id=2, amount=2)
    assert base != Item(item_id=10, app_id=730, context_id=2)
    assert base != Item(item_id=10, app_id=440, context_id=6)
    assert len({base, Item(item_id=10, app_id=440, context_id=2)}) == 1


@pytest.mark.unit
def test_item_rejects_negative_id():
    with pytest.raises(ValueError):
        Item(item_id=-1, app_id=440, context_id=2)


@pytest.mark.unit
def test_item_dict_conversion():
    item = Item.from_dict({"item_id": "77", "app_id": 753, "context_id": 6})

    assert item == Item(item_id=77, app_id=753, context_id=6)
    assert item.to_dict()["amount"] == 1
    assert str(item) == "id:77, appid:753, contextid:6, amount:1"


@pytest.mark.unit
@pytest.mark.parametrize(
    "action,expected",
    [
        (0, EventKind.ITEM_ADDED),
        (1, EventKind.ITEM_REMOVED),
        (2, EventKind.READY_SET),
        (3, EventKind.READY_UNSET),
        (4, EventKind.ACCEPTED),
        (7, EventKind.CHAT_MESSAGE),
        (5, None),
        (6, None),
        (42, None),
    ],
)
def test_remote_event_kind(action, expected):
    assert RemoteEvent(actor="x", action=action).kind == expected


@pytest.mark.unit
def test_remote_events_compare_on_every_field():
    first = RemoteEvent(actor="x", action=7, timestamp=100, text="hi")

    assert first == RemoteEvent(actor="x", action=7, timestamp=100, text="hi")
    assert first != RemoteEvent(actor="x", action=7, timestamp=101, text="hi")
    assert first != RemoteEvent(actor="y", action=7, timestamp=100, text="hi")


@pytest.mark.unit
def test_snapshot_builds_from_plain_data():
    snapshot = StatusSnapshot.model_validate(
        {
            "trade_status": 0,
            "version": 3,
            "new_version": True,
            "me": {"ready": True, "assets": [{"item_id": 1, "app_id": 440, "context_id": 2}]},
            "them": {"assets": []},
            "events": [{"actor": "x", "action": 0, "timestamp": 5}],
            "log_pos": 1,
        }
    )

    assert snapshot.me.assets == [Item(item_id=1, app_id=440, context_id=2)]
    assert snapshot.them == PartyStatus()
    assert snapshot.events[0].kind == EventKind.ITEM_ADDED


@pytest.mark.unit
def test_snapshot_rejects_negative_version():
    with pytest.raises(ValidationError):
        StatusSnapshot(trade_status=0, version=-1)
