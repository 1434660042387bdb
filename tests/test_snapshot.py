import json
from decimal import Decimal

import pytest

from fooddelivery.adapters.json_snapshot_store import JsonSnapshotStore
from fooddelivery.core.orders.models import OrderStatus
from fooddelivery.workflows.platform import Platform


def _busy_platform(platform, actor, place_order):
    order = place_order(lines=(("burger", 2, "Large"), ("coke", 1)), note="ring twice")
    platform.engine.claim(order.id, actor("ship_a"))
    platform.engine.post_message(order.id, actor("alice"), "hi")
    other = place_order(customer="bob")
    platform.complaints.file_complaint(actor("bob"), "slow app")
    platform.catalog.add_rating("coke", 4.0, "fizzy")
    return order, other


def test_snapshot_is_plain_json(platform, actor, place_order):
    _busy_platform(platform, actor, place_order)
    data = platform.snapshot()
    assert json.loads(json.dumps(data)) == data
    assert data["version"] == 1


def test_restore_round_trip(platform, clock, actor, place_order):
    order, other = _busy_platform(platform, actor, place_order)
    data = json.loads(json.dumps(platform.snapshot()))

    fresh = Platform(clock=clock)
    fresh.restore(data)

    got = fresh.orders.require(order.id)
    assert got.status == OrderStatus.ACCEPTED_BY_SHIPPER
    assert got.assigned_shipper == "ship_a"
    assert got.total == Decimal("17.48")
    assert got.items[0].variation == "Large"
    assert got.note == "ring twice"
    assert [m.text for m in got.chat] == ["hi"]
    assert fresh.orders.require(other.id).customer == "bob"
    assert fresh.catalog.require("coke").rating == 4.0
    assert fresh.users.require("pizzahub").restaurant_name == "Pizza Hub"
    assert [c.message for c in fresh.complaints.all()] == ["slow app"]

    # Hersteld platform werkt gewoon verder
    fresh.engine.start_delivery(order.id, fresh.users.require("ship_a").actor)
    assert got.status == OrderStatus.DELIVERING


def test_bad_snapshot_leaves_stores_untouched(platform, clock, place_order):
    order = place_order()
    data = platform.snapshot()
    data["orders"][0]["status"] = "LOST_IN_SPACE"
    fresh = Platform(clock=clock)
    fresh.restore(json.loads(json.dumps(platform.snapshot())))
    with pytest.raises(ValueError):
        fresh.restore(data)
    assert fresh.orders.require(order.id).status == OrderStatus.PLACED


def test_unknown_version_rejected(platform):
    with pytest.raises(ValueError, match="version"):
        platform.restore({"version": 99})


def test_json_store_save_and_load(tmp_path, platform, place_order):
    place_order()
    store = JsonSnapshotStore(tmp_path / "nested" / "data.json")
    assert store.load() is None
    store.save(platform.snapshot())
    assert store.load() == json.loads(json.dumps(platform.snapshot()))
    assert not (tmp_path / "nested" / "data.json.tmp").exists()


def test_restore_keeps_review_pairs(platform, clock):
    platform.catalog.add_rating("burger", 2.0)
    platform.catalog.add_rating("burger", 4.0, "better now")
    fresh = Platform(clock=clock)
    fresh.restore(json.loads(json.dumps(platform.snapshot())))
    assert fresh.catalog.reviews("burger") == [(2.0, ""), (4.0, "better now")]
    assert fresh.catalog.require("burger").rating == 3.0


def test_snapshot_waits_for_order_being_changed(platform, place_order):
    from concurrent.futures import ThreadPoolExecutor, TimeoutError

    order = place_order()
    with ThreadPoolExecutor(max_workers=1) as pool:
        with platform.orders.locked(order.id):
            future = pool.submit(platform.snapshot)
            with pytest.raises(TimeoutError):
                future.result(timeout=0.2)
        data = future.result(timeout=5)
    assert order.id in [o["id"] for o in data["orders"]]
