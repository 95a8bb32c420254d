"""JSON-RPC 2.0 envelope codec.

Pure transformations between Python values and the bytes exchanged with
Odoo.  Nothing here knows about transports, sessions or asyncio, so the
blocking and async clients share it unchanged.

Request::

    {"jsonrpc": "2.0", "method": "call", "params": {...}, "id": 7}

Response::

    {"jsonrpc": "2.0", "id": 7, "result": ...}
    {"jsonrpc": "2.0", "id": 7, "error": {"code": ..., "message": ..., "data": {...}}}
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from odoo_rpc.errors import ApiError, EncodingError, ProtocolError

JSONRPC_VERSION = "2.0"
JSONRPC_METHOD = "call"


# ---------------------------------------------------------------------------
# Decoded shapes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorObject:
    """The ``error`` member of a failed response."""

    code: int | None
    message: str
    name: str | None = None
    debug: str | None = None
    arguments: list[Any] = field(default_factory=list)
    context: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)

    def to_exception(self, **ctx: Any) -> ApiError:
        return ApiError.from_error_object(self.raw, **ctx)


@dataclass(frozen=True)
class DecodedEnvelope:
    """Tagged success/error union for a single response."""

    identifier: Any
    result: Any = None
    error: ErrorObject | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def unwrap(self, **ctx: Any) -> Any:
        """Return ``result`` or raise the server error as :class:`ApiError`."""
        if self.error is not None:
            raise self.error.to_exception(**ctx)
        return self.result


@dataclass(frozen=True)
class RequestEnvelope:
    identifier: Any
    params: dict[str, Any]


# ---------------------------------------------------------------------------
# JSON-representability check
# ---------------------------------------------------------------------------

def ensure_json(value: Any, path: str = "params") -> None:
    """Raise :class:`EncodingError` unless *value* maps onto plain JSON."""
    if value is None or isinstance(value, (bool, str)):
        return
    if isinstance(value, int):
        return
    if isinstance(value, float):
        if not math.isfinite(value):
            raise EncodingError(f"{path}: non-finite float {value!r} is not valid JSON")
        return
    if isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            ensure_json(item, f"{path}[{i}]")
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            if not isinstance(key, str):
                raise EncodingError(
                    f"{path}: mapping keys must be strings, got {type(key).__name__}: {key!r}"
                )
            ensure_json(item, f"{path}.{key}")
        return
    raise EncodingError(
        f"{path}: {type(value).__name__} is not JSON-representable: {value!r}"
    )


def _to_plain(value: Any) -> Any:
    """Normalize tuples to lists and mappings to dicts, preserving order."""
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    if isinstance(value, Mapping):
        return {k: _to_plain(v) for k, v in value.items()}
    return value


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def service_params(service: str, method: str, args: list[Any]) -> dict[str, Any]:
    """Params block for the ``/jsonrpc`` dispatcher (``common``, ``db``, ``object``)."""
    return {"service": service, "method": method, "args": list(args)}


def encode_request(params: Mapping[str, Any], identifier: int) -> bytes:
    """Serialize a request envelope."""
    ensure_json(params)
    envelope = {
        "jsonrpc": JSONRPC_VERSION,
        "method": JSONRPC_METHOD,
        "params": _to_plain(params),
        "id": identifier,
    }
    return json.dumps(envelope, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def encode_response(
    identifier: Any,
    result: Any = None,
    error: Mapping[str, Any] | None = None,
) -> bytes:
    """Serialize a response envelope (used by stubs and custom transports)."""
    envelope: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "id": identifier}
    if error is not None:
        ensure_json(error, "error")
        envelope["error"] = _to_plain(error)
    else:
        ensure_json(result, "result")
        envelope["result"] = _to_plain(result)
    return json.dumps(envelope, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _load_object(raw: bytes | str, what: str) -> dict[str, Any]:
    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ProtocolError(f"{what} body is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ProtocolError(f"{what} body must be a JSON object, got {type(data).__name__}")
    return data


def _parse_error(error: Any) -> ErrorObject:
    if not isinstance(error, dict):
        raise ProtocolError(f"'error' must be an object, got {type(error).__name__}")
    data = error.get("data") or {}
    if not isinstance(data, dict):
        raise ProtocolError("'error.data' must be an object")
    code = error.get("code")
    if code is not None and (isinstance(code, bool) or not isinstance(code, int)):
        raise ProtocolError(f"'error.code' must be an integer, got {code!r}")
    return ErrorObject(
        code=code,
        message=data.get("message") or error.get("message") or "Unknown error",
        name=data.get("name"),
        debug=data.get("debug"),
        arguments=list(data.get("arguments") or []),
        context=dict(data.get("context") or {}),
        raw=error,
    )


def decode_response(raw: bytes | str, expected_id: Any = None) -> DecodedEnvelope:
    """Parse a response body into a :class:`DecodedEnvelope`.

    When *expected_id* is given, a response carrying any other identifier is
    rejected rather than matched to the wrong call.
    """
    data = _load_object(raw, "Response")

    if "id" not in data:
        raise ProtocolError("Response is missing the 'id' field")
    has_result = "result" in data
    has_error = "error" in data
    if has_result and has_error:
        raise ProtocolError("Response carries both 'result' and 'error'")
    if not has_result and not has_error:
        raise ProtocolError("Response carries neither 'result' nor 'error'")

    identifier = data["id"]
    if expected_id is not None and identifier != expected_id:
        raise ProtocolError(
            f"Response id {identifier!r} does not match request id {expected_id!r}"
        )

    if has_error:
        return DecodedEnvelope(identifier=identifier, error=_parse_error(data["error"]))
    return DecodedEnvelope(identifier=identifier, result=data["result"])


def decode_request(raw: bytes | str) -> RequestEnvelope:
    """Parse a request body (the inverse of :func:`encode_request`)."""
    data = _load_object(raw, "Request")
    if data.get("jsonrpc") != JSONRPC_VERSION:
        raise ProtocolError(f"Unsupported jsonrpc version: {data.get('jsonrpc')!r}")
    if data.get("method") != JSONRPC_METHOD:
        raise ProtocolError(f"Unsupported request method: {data.get('method')!r}")
    if "id" not in data:
        raise ProtocolError("Request is missing the 'id' field")
    params = data.get("params")
    if not isinstance(params, dict):
        raise ProtocolError("'params' must be an object")
    return RequestEnvelope(identifier=data["id"], params=params)
