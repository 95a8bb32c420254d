"""Transport interfaces.

A transport moves one encoded request to ``path`` and returns the raw reply
body plus the ``session_id`` cookie the server set, if any.  It never looks
inside the JSON-RPC payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

SESSION_COOKIE = "session_id"


@dataclass(frozen=True)
class Reply:
    body: bytes
    session_id: str | None = None


@runtime_checkable
class Transport(Protocol):
    """Blocking transport."""

    def send(self, path: str, payload: bytes, session_id: str | None = None) -> Reply: ...

    def close(self) -> None: ...


@runtime_checkable
class AsyncTransport(Protocol):
    """Asyncio transport."""

    async def send(self, path: str, payload: bytes, session_id: str | None = None) -> Reply: ...

    async def close(self) -> None: ...


def as_reply(value: bytes | str | tuple | Reply) -> Reply:
    """Coerce what a caller-supplied function returned into a :class:`Reply`."""
    if isinstance(value, Reply):
        return value
    session_id = None
    if isinstance(value, tuple):
        value, session_id = value
    if isinstance(value, str):
        value = value.encode("utf-8")
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError(f"transport function returned {type(value).__name__}, expected bytes or str")
    return Reply(body=bytes(value), session_id=session_id)
