"""Bounded asynchronous multi-producer, single-consumer channels."""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from .errors import SendFailed

T = TypeVar("T")

_CLOSED = object()


@dataclass
class _Shared:
    capacity: int
    items: deque = field(default_factory=deque)
    senders: int = 1
    receiver_closed: bool = False
    recv_waiters: deque = field(default_factory=deque)
    send_waiters: deque = field(default_factory=deque)


def _wake(waiters: deque) -> None:
    while waiters:
        future = waiters.popleft()
        if not future.done():
            future.set_result(None)


async def _wait(waiters: deque) -> None:
    future = asyncio.get_running_loop().create_future()
    waiters.append(future)
    try:
        await future
    finally:
        if future in waiters:
            waiters.remove(future)


class Sender(Generic[T]):
    """The sending half of a channel; clone it to get more producers."""

    def __init__(self, shared: _Shared) -> None:
        self._shared = shared
        self._closed = False

    @property
    def closed(self) -> bool:
        """True once this sender has been closed."""
        return self._closed

    @property
    def is_disconnected(self) -> bool:
        """True once the receiving half has been closed."""
        return self._shared.receiver_closed

    async def send(self, message: T) -> None:
        """Deliver a message, waiting while the buffer is full."""
        if self._closed:
            raise SendFailed("sender has been closed")
        shared = self._shared
        while True:
            if shared.receiver_closed:
                raise SendFailed(f"channel closed, {message!r} was not delivered")
            if len(shared.items) < shared.capacity:
                shared.items.append(message)
                _wake(shared.recv_waiters)
                return
            await _wait(shared.send_waiters)

    def clone(self) -> Sender[T]:
        """Return another sender feeding the same receiver."""
        if self._closed:
            raise SendFailed("cannot clone a closed sender")
        self._shared.senders += 1
        return Sender(self._shared)

    def close(self) -> None:
        """Release this sender; the receiver ends once every sender is closed."""
        if self._closed:
            return
        self._closed = True
        self._shared.senders -= 1
        if self._shared.senders == 0:
            _wake(self._shared.recv_waiters)

    def __enter__(self) -> Sender[T]:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class Receiver(Generic[T]):
    """The receiving half of a channel."""

    def __init__(self, shared: _Shared) -> None:
        self._shared = shared

    async def _next(self) -> Any:
        shared = self._shared
        while True:
            if shared.items:
                item = shared.items.popleft()
                _wake(shared.send_waiters)
                return item
            if shared.senders == 0 or shared.receiver_closed:
                return _CLOSED
            await _wait(shared.recv_waiters)

    async def recv(self) -> T | None:
        """Return the next message, or None once the channel is closed and drained."""
        item = await self._next()
        return None if item is _CLOSED else item

    def close(self) -> None:
        """Stop accepting messages; those already buffered can still be received."""
        self._shared.receiver_closed = True
        _wake(self._shared.send_waiters)
        _wake(self._shared.recv_waiters)

    def __aiter__(self) -> Receiver[T]:
        return self

    async def __anext__(self) -> T:
        item = await self._next()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item

    def __enter__(self) -> Receiver[T]:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def channel(buffer_size: int) -> tuple[Sender[Any], Receiver[Any]]:
    """Create a channel that buffers at most ``buffer_size`` messages."""
    if isinstance(buffer_size, bool) or not isinstance(buffer_size, int):
        raise TypeError("buffer size must be an integer")
    if buffer_size < 1:
        raise ValueError("buffer size must be at least 1")
    shared = _Shared(capacity=buffer_size)
    return Sender(shared), Receiver(shared)