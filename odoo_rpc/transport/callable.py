"""Transports wrapping a caller-supplied function.

The function receives ``(path, payload, session_id)`` and returns the reply
body (``bytes`` or ``str``), a ``(body, session_id)`` tuple, or a
:class:`Reply`.  Anything it raises surfaces as :class:`TransportError`.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from odoo_rpc.errors import TransportError
from odoo_rpc.transport.base import Reply, as_reply

logger = logging.getLogger("odoo_rpc.transport.callable")

SendFunction = Callable[[str, bytes, "str | None"], Any]
AsyncSendFunction = Callable[[str, bytes, "str | None"], Awaitable[Any]]


class CallableTransport:
    def __init__(self, fn: SendFunction) -> None:
        self._fn = fn

    def send(self, path: str, payload: bytes, session_id: str | None = None) -> Reply:
        try:
            value = self._fn(path, payload, session_id)
            return as_reply(value)
        except TransportError:
            raise
        except Exception as e:
            logger.debug("Transport function failed for %s: %s", path, e)
            raise TransportError(f"Transport function failed: {e}") from e

    def close(self) -> None:
        pass


class AsyncCallableTransport:
    def __init__(self, fn: AsyncSendFunction) -> None:
        self._fn = fn

    async def send(self, path: str, payload: bytes, session_id: str | None = None) -> Reply:
        try:
            value = await self._fn(path, payload, session_id)
            return as_reply(value)
        except TransportError:
            raise
        except Exception as e:
            logger.debug("Transport function failed for %s: %s", path, e)
            raise TransportError(f"Transport function failed: {e}") from e

    async def close(self) -> None:
        pass
