"""Typed, asynchronous message links between asyncio components, managed by a central router."""

__version__ = "0.1.0"

__all__ = ["channel", "errors", "link", "ping_pong", "router"]