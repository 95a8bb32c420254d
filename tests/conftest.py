"""Shared test fixtures for odoo-rpc tests."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable

import pytest

from odoo_rpc.client import AsyncOdooClient, OdooClient
from odoo_rpc.jsonrpc import decode_request, encode_response
from odoo_rpc.transport import AsyncCallableTransport, CallableTransport, Reply


# ---------------------------------------------------------------------------
# Error payloads
# ---------------------------------------------------------------------------

def odoo_error(
    message: str = "Odoo Server Error",
    code: int = 200,
    name: str | None = "odoo.exceptions.UserError",
    data_message: str | None = None,
) -> dict[str, Any]:
    """Build the ``error`` member of an Odoo JSON-RPC response."""
    error: dict[str, Any] = {"code": code, "message": message}
    if name is not None:
        error["data"] = {
            "name": name,
            "debug": "Traceback (most recent call last): ...",
            "message": data_message or message,
            "arguments": [data_message or message],
            "context": {},
        }
    return error


SESSION_EXPIRED = odoo_error(
    "Odoo Session Expired", code=100, name="odoo.http.SessionExpiredException",
    data_message="Session expired",
)

ACCESS_DENIED = {"code": 1, "message": "Access Denied"}


# ---------------------------------------------------------------------------
# Scripted stub server
# ---------------------------------------------------------------------------

@dataclass
class Call:
    path: str
    params: dict[str, Any]
    identifier: Any
    session_id: str | None
    payload: bytes


@dataclass
class Step:
    result: Any = None
    error: dict[str, Any] | None = None
    session_id: str | None = None


class StubServer:
    """Answers requests from a script of steps, echoing request ids."""

    def __init__(self) -> None:
        self.calls: list[Call] = []
        self._script: list[Step] = []
        self._lock = threading.Lock()

    def reply(self, result: Any = None, *, error: dict | None = None, session_id: str | None = None) -> StubServer:
        self._script.append(Step(result, error, session_id))
        return self

    def record(self, path: str, payload: bytes, session_id: str | None) -> Call:
        request = decode_request(payload)
        call = Call(path, request.params, request.identifier, session_id, payload)
        with self._lock:
            self.calls.append(call)
        return call

    def answer(self, call: Call, step: Step) -> Reply:
        body = encode_response(call.identifier, result=step.result, error=step.error)
        return Reply(body=body, session_id=step.session_id)

    def handle(self, path: str, payload: bytes, session_id: str | None) -> Reply:
        call = self.record(path, payload, session_id)
        with self._lock:
            if not self._script:
                raise AssertionError(f"Unexpected request to {path}: {call.params}")
            step = self._script.pop(0)
        return self.answer(call, step)

    async def handle_async(self, path: str, payload: bytes, session_id: str | None) -> Reply:
        return self.handle(path, payload, session_id)

    @property
    def last(self) -> Call:
        return self.calls[-1]


@pytest.fixture
def server() -> StubServer:
    return StubServer()


@pytest.fixture
def client(server: StubServer) -> OdooClient:
    return OdooClient(CallableTransport(server.handle))


@pytest.fixture
def authed_client(client: OdooClient) -> OdooClient:
    """Client with an installed session (db ``testdb``, uid 2, password ``secret``)."""
    client.authenticate_manual("testdb", "admin", 2, "secret")
    return client


@pytest.fixture
def async_client(server: StubServer) -> AsyncOdooClient:
    return AsyncOdooClient(AsyncCallableTransport(server.handle_async))


@pytest.fixture
def authed_async_client(async_client: AsyncOdooClient) -> AsyncOdooClient:
    async_client.authenticate_manual("testdb", "admin", 2, "secret")
    return async_client


@pytest.fixture
def session_expired() -> dict[str, Any]:
    return dict(SESSION_EXPIRED)


@pytest.fixture
def make_error() -> Callable[..., dict[str, Any]]:
    return odoo_error


@pytest.fixture
def access_denied() -> dict[str, Any]:
    return dict(ACCESS_DENIED)
