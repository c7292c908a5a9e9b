from dataclasses import dataclass

import pytest

from crosslink.channel import channel
from crosslink.errors import (
    InternalInconsistency,
    PathwayAlreadyRegistered,
    PathwayNotFound,
    SendFailed,
    TypeMismatch,
)
from crosslink.router import Router


@dataclass
class Ping:
    text: str


@dataclass
class Pong:
    text: str


class PingerSend:
    pass


class PingerRecv:
    pass


class PongerSend:
    pass


class PongerRecv:
    pass


def build_router(buffer_size=4):
    router = Router()
    ping_tx, ping_rx = channel(buffer_size)
    pong_tx, pong_rx = channel(buffer_size)
    router.register_sender(PingerSend, Ping, ping_tx)
    router.register_receiver(PingerRecv, Pong, pong_rx)
    router.register_sender(PongerSend, Pong, pong_tx)
    router.register_receiver(PongerRecv, Ping, ping_rx)
    return router


@pytest.mark.asyncio
async def test_round_trip():
    router = build_router()
    ponger_rx = router.take_receiver(PongerRecv, Ping)
    pinger_rx = router.take_receiver(PingerRecv, Pong)
    await router.send(PingerSend, Ping("hello"))
    assert await ponger_rx.recv() == Ping("hello")
    await router.send(PongerSend, Pong("ack"))
    assert await pinger_rx.recv() == Pong("ack")


def test_duplicate_sender_rejected():
    router = build_router()
    tx, _ = channel(1)
    with pytest.raises(PathwayAlreadyRegistered) as info:
        router.register_sender(PingerSend, Ping, tx)
    assert "PingerSend" in str(info.value)


def test_duplicate_receiver_rejected():
    router = build_router()
    _, rx = channel(1)
    with pytest.raises(PathwayAlreadyRegistered) as info:
        router.register_receiver(PongerRecv, Ping, rx)
    assert "PongerRecv" in str(info.value)


@pytest.mark.asyncio
async def test_send_unknown_marker():
    router = Router()
    with pytest.raises(PathwayNotFound):
        await router.send("nowhere", Ping("x"))


def test_take_unknown_marker():
    router = Router()
    with pytest.raises(PathwayNotFound):
        router.take_receiver("nowhere", Ping)


def test_take_with_wrong_type_then_right_type():
    router = build_router()
    with pytest.raises(TypeMismatch):
        router.take_receiver(PongerRecv, Pong)
    receiver = router.take_receiver(PongerRecv, Ping)
    assert receiver is not router.take_receiver(PingerRecv, Pong)


def test_receiver_taken_only_once():
    router = build_router()
    router.take_receiver(PingerRecv, Pong)
    with pytest.raises(InternalInconsistency):
        router.take_receiver(PingerRecv, Pong)


@pytest.mark.asyncio
async def test_send_wrong_type_is_not_delivered():
    router = build_router()
    rx = router.take_receiver(PongerRecv, Ping)
    with pytest.raises(InternalInconsistency):
        await router.send(PingerSend, Pong("wrong"))
    await router.send(PingerSend, Ping("right"))
    assert await rx.recv() == Ping("right")


@pytest.mark.asyncio
async def test_send_after_receiver_closed():
    router = build_router()
    rx = router.take_receiver(PongerRecv, Ping)
    rx.close()
    with pytest.raises(SendFailed) as info:
        await router.send(PingerSend, Ping("gone"))
    assert "Ping" in str(info.value)


@pytest.mark.asyncio
async def test_string_markers_work():
    router = Router()
    tx, rx = channel(1)
    router.register_sender("out", int, tx)
    router.register_receiver("in", int, rx)
    await router.send("out", 42)
    taken = router.take_receiver("in", int)
    assert await taken.recv() == 42