"""Errors raised by channels and the router."""

from __future__ import annotations


class CommsError(Exception):
    """Base class of every communication error."""

    prefix = "Communication error"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.prefix}: {self.detail}"


class SendFailed(CommsError):
    """A message could not be delivered."""

    prefix = "Send failed"


class RecvFailed(CommsError):
    """A message could not be received."""

    prefix = "Receive failed"


class TypeMismatch(CommsError):
    """A message type did not match the one a pathway was set up for."""

    prefix = "Type mismatch"


class PathwayAlreadyRegistered(CommsError):
    """A marker was registered twice."""

    prefix = "Pathway already registered"


class PathwayNotFound(CommsError):
    """No pathway is registered for a marker."""

    prefix = "Pathway not found"


class LinkNotFound(CommsError):
    """No link is known under the given name."""

    prefix = "Link not found"


class MessageTypeNotMappedForLink(CommsError):
    """A message type is not carried by the link."""

    prefix = "Message type not mapped for link"


class InternalInconsistency(CommsError):
    """The router's state does not agree with a request."""

    prefix = "Internal inconsistency"