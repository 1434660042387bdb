import pytest

from fooddelivery.core.errors import ChatNotAvailable, EmptyMessage, Unauthorized


def test_chat_between_customer_and_shipper(platform, clock, actor, place_order):
    order = place_order()
    with pytest.raises(ChatNotAvailable):
        platform.engine.post_message(order.id, actor("alice"), "hello?")

    platform.engine.claim(order.id, actor("ship_a"))
    platform.engine.post_message(order.id, actor("alice"), "hello?")
    clock.advance(30)
    platform.engine.start_delivery(order.id, actor("ship_a"))
    msg = platform.engine.post_message(order.id, actor("ship_a"), "  on my way ")

    assert msg.text == "on my way"
    chat = platform.engine.chat(order.id, actor("alice"))
    assert [(m.sender, m.text) for m in chat] == [("alice", "hello?"), ("ship_a", "on my way")]
    assert chat[1].time > chat[0].time


def test_outsiders_cannot_chat(platform, actor, place_order):
    order = place_order()
    platform.engine.claim(order.id, actor("ship_a"))
    for name in ("bob", "ship_b", "pizzahub"):
        with pytest.raises(Unauthorized):
            platform.engine.post_message(order.id, actor(name), "hi")
        with pytest.raises(Unauthorized):
            platform.engine.chat(order.id, actor(name))


def test_empty_message_rejected(platform, actor, place_order):
    order = place_order()
    platform.engine.claim(order.id, actor("ship_a"))
    with pytest.raises(EmptyMessage):
        platform.engine.post_message(order.id, actor("alice"), "   ")


def test_delivery_clears_chat_for_good(platform, actor, place_order):
    order = place_order()
    platform.engine.claim(order.id, actor("ship_a"))
    platform.engine.start_delivery(order.id, actor("ship_a"))
    platform.engine.post_message(order.id, actor("alice"), "door code 1234")
    platform.engine.mark_delivered(order.id, actor("ship_a"))

    assert order.chat == []
    assert platform.engine.chat(order.id, actor("alice")) == []
    with pytest.raises(ChatNotAvailable):
        platform.engine.post_message(order.id, actor("alice"), "thanks!")
    with pytest.raises(ChatNotAvailable):
        platform.engine.post_message(order.id, actor("ship_a"), "enjoy")
