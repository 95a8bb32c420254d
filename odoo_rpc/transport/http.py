"""HTTP transports built on httpx.

The session cookie is passed per request and never stored on the underlying
client, so one httpx client can serve several sessions.
"""

from __future__ import annotations

import logging

import httpx

from odoo_rpc.errors import TransportError
from odoo_rpc.transport.base import SESSION_COOKIE, Reply

logger = logging.getLogger("odoo_rpc.transport.http")

HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


def _verify(verify_ssl: bool, ca_cert: str | None) -> bool | str:
    return ca_cert if ca_cert else verify_ssl


def _request_headers(session_id: str | None) -> dict[str, str]:
    if session_id:
        return {"Cookie": f"{SESSION_COOKIE}={session_id}"}
    return {}


def _to_reply(response: httpx.Response, path: str) -> Reply:
    if not response.is_success:
        raise TransportError(
            f"HTTP {response.status_code} from {path}", status_code=response.status_code
        )
    return Reply(body=response.content, session_id=response.cookies.get(SESSION_COOKIE))


class HttpxTransport:
    """Blocking transport over ``httpx.Client``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        verify_ssl: bool = True,
        ca_cert: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(
            base_url=self._base_url,
            timeout=timeout,
            verify=_verify(verify_ssl, ca_cert),
            headers=HEADERS,
        )

    def send(self, path: str, payload: bytes, session_id: str | None = None) -> Reply:
        try:
            response = self._client.post(path, content=payload, headers=_request_headers(session_id))
        except httpx.TimeoutException as e:
            raise TransportError(f"Request to {path} timed out") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Connection failed: {e}") from e
        self._client.cookies.clear()
        logger.debug("POST %s -> %s", path, response.status_code)
        return _to_reply(response, path)

    def close(self) -> None:
        self._client.close()


class AsyncHttpxTransport:
    """Asyncio transport over ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        verify_ssl: bool = True,
        ca_cert: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            verify=_verify(verify_ssl, ca_cert),
            headers=HEADERS,
        )

    async def send(self, path: str, payload: bytes, session_id: str | None = None) -> Reply:
        try:
            response = await self._client.post(
                path, content=payload, headers=_request_headers(session_id)
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"Request to {path} timed out") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Connection failed: {e}") from e
        self._client.cookies.clear()
        logger.debug("POST %s -> %s", path, response.status_code)
        return _to_reply(response, path)

    async def close(self) -> None:
        await self._client.aclose()
