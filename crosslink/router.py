"""A registry of channel ends addressed by marker keys."""

from __future__ import annotations

import threading
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any

from .channel import Receiver, Sender
from .errors import (
    InternalInconsistency,
    PathwayAlreadyRegistered,
    PathwayNotFound,
    SendFailed,
    TypeMismatch,
)


def _name(obj: Any) -> str:
    qualname = getattr(obj, "__qualname__", None)
    return qualname if isinstance(qualname, str) else repr(obj)


@dataclass
class _ReceiverSlot:
    message_type: type
    receiver: Receiver | None


class Router:
    """Holds the senders and receivers of every link, keyed by marker."""

    def __init__(self) -> None:
        self._senders: dict[Hashable, tuple[type, Sender]] = {}
        self._receivers: dict[Hashable, _ReceiverSlot] = {}
        self._lock = threading.Lock()

    def register_sender(self, marker: Hashable, message_type: type, sender: Sender) -> None:
        """Register the sender used for messages sent under ``marker``."""
        if marker in self._senders:
            raise PathwayAlreadyRegistered(
                f"Sender for marker type '{_name(marker)}' already registered."
            )
        self._senders[marker] = (message_type, sender)

    def register_receiver(
        self, marker: Hashable, message_type: type, receiver: Receiver
    ) -> None:
        """Register the receiver handed out under ``marker``."""
        if marker in self._receivers:
            raise PathwayAlreadyRegistered(
                f"Receiver for marker type '{_name(marker)}' already registered."
            )
        self._receivers[marker] = _ReceiverSlot(message_type, receiver)

    async def send(self, marker: Hashable, message: Any) -> None:
        """Send a message on the pathway registered under ``marker``."""
        entry = self._senders.get(marker)
        if entry is None:
            raise PathwayNotFound(
                f"No pathway configured for marker type '{_name(marker)}' that accepts "
                f"message type '{_name(type(message))}'. "
                "Ensure this message type is defined for sending on this link"
            )
        message_type, sender = entry
        if not isinstance(message, message_type):
            raise InternalInconsistency(
                f"Metadata mismatch for link '{_name(marker)}', pathway "
                f"'{_name(message_type)}'. Expected type '{_name(type(message))}' for "
                f"sending, but sender is configured for '{_name(message_type)}'."
            )
        try:
            await sender.send(message)
        except SendFailed as exc:
            raise SendFailed(
                f"Failed to send message of type {_name(message_type)}: {exc.detail}"
            ) from exc

    def take_receiver(self, marker: Hashable, message_type: type) -> Receiver:
        """Hand out the receiver registered under ``marker``; it can be taken once."""
        slot = self._receivers.get(marker)
        if slot is None:
            raise PathwayNotFound(
                f"No receiver for link '{_name(marker)}' and handle "
                f"'{_name(message_type)}' found."
            )
        if slot.message_type is not message_type:
            raise TypeMismatch(f"Expected type '{_name(message_type)}' for receiving.")
        with self._lock:
            receiver, slot.receiver = slot.receiver, None
        if receiver is None:
            raise InternalInconsistency(
                f"Failed to take receiver for link '{_name(marker)}' and handle "
                f"'{_name(message_type)}'."
            )
        return receiver