import asyncio

import pytest

from crosslink.channel import channel
from crosslink.errors import SendFailed


@pytest.mark.asyncio
async def test_messages_arrive_in_order():
    tx, rx = channel(4)
    for value in ("a", "b", "c"):
        await tx.send(value)
    assert [await rx.recv() for _ in range(3)] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_recv_none_after_senders_closed_and_drained():
    tx, rx = channel(2)
    await tx.send(1)
    tx.close()
    assert await rx.recv() == 1
    assert await rx.recv() is None


@pytest.mark.asyncio
async def test_clone_keeps_channel_open():
    tx, rx = channel(2)
    other = tx.clone()
    tx.close()
    await other.send("still")
    assert await rx.recv() == "still"
    other.close()
    assert await rx.recv() is None


@pytest.mark.asyncio
async def test_send_blocks_when_full():
    tx, rx = channel(1)
    await tx.send(1)
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(tx.send(2), 0.05)
    assert await rx.recv() == 1
    await asyncio.wait_for(tx.send(3), 1)
    assert await rx.recv() == 3


@pytest.mark.asyncio
async def test_blocked_send_resumes_after_recv():
    tx, rx = channel(1)
    await tx.send(1)
    task = asyncio.create_task(tx.send(2))
    await asyncio.sleep(0)
    assert not task.done()
    assert await rx.recv() == 1
    await asyncio.wait_for(task, 1)
    assert await rx.recv() == 2


@pytest.mark.asyncio
async def test_recv_waits_for_message():
    tx, rx = channel(1)
    task = asyncio.create_task(rx.recv())
    await asyncio.sleep(0)
    assert not task.done()
    await tx.send("late")
    assert await asyncio.wait_for(task, 1) == "late"


@pytest.mark.asyncio
async def test_closing_sender_wakes_waiting_receiver():
    tx, rx = channel(1)
    task = asyncio.create_task(rx.recv())
    await asyncio.sleep(0)
    tx.close()
    assert await asyncio.wait_for(task, 1) is None


@pytest.mark.asyncio
async def test_send_after_receiver_closed_fails_but_buffer_drains():
    tx, rx = channel(2)
    await tx.send("kept")
    rx.close()
    with pytest.raises(SendFailed):
        await tx.send("lost")
    assert tx.is_disconnected
    assert await rx.recv() == "kept"
    assert await rx.recv() is None


@pytest.mark.asyncio
async def test_receiver_close_wakes_blocked_sender():
    tx, rx = channel(1)
    await tx.send(1)
    task = asyncio.create_task(tx.send(2))
    await asyncio.sleep(0)
    assert not task.done()
    rx.close()
    with pytest.raises(SendFailed):
        await asyncio.wait_for(task, 1)
    assert tx.is_disconnected
    assert await rx.recv() == 1
    assert await rx.recv() is None


@pytest.mark.asyncio
async def test_closed_sender_cannot_send_or_clone():
    tx, _rx = channel(1)
    tx.close()
    assert tx.closed
    with pytest.raises(SendFailed):
        await tx.send(1)
    with pytest.raises(SendFailed):
        tx.clone()


@pytest.mark.asyncio
async def test_async_iteration_includes_none_messages():
    tx, rx = channel(4)
    with tx:
        await tx.send(None)
        await tx.send(5)
    collected = [item async for item in rx]
    assert collected == [None, 5]


@pytest.mark.parametrize("size", [0, -1])
def test_invalid_buffer_size(size):
    with pytest.raises(ValueError):
        channel(size)


def test_buffer_size_must_be_int():
    with pytest.raises(TypeError):
        channel(1.5)