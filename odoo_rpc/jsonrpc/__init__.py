"""JSON-RPC envelope codec and call identifiers."""

from odoo_rpc.jsonrpc.envelope import (
    JSONRPC_METHOD,
    JSONRPC_VERSION,
    DecodedEnvelope,
    ErrorObject,
    RequestEnvelope,
    decode_request,
    decode_response,
    encode_request,
    encode_response,
    ensure_json,
    service_params,
)
from odoo_rpc.jsonrpc.ids import CallIdGenerator

__all__ = [
    "JSONRPC_METHOD",
    "JSONRPC_VERSION",
    "CallIdGenerator",
    "DecodedEnvelope",
    "ErrorObject",
    "RequestEnvelope",
    "decode_request",
    "decode_response",
    "encode_request",
    "encode_response",
    "ensure_json",
    "service_params",
]
