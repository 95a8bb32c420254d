"""Typed JSON-RPC client for Odoo: blocking, asyncio or bring-your-own transport."""

from importlib.metadata import version, PackageNotFoundError

from odoo_rpc.catalog import DomainBuilder, ServerVersion
from odoo_rpc.client import AsyncOdooClient, OdooClient
from odoo_rpc.config import OdooRpcConfig, load_config
from odoo_rpc.errors import (
    AccessDeniedError,
    ApiError,
    AuthError,
    EncodingError,
    OdooRpcError,
    ProtocolError,
    TransportError,
    ValidationError,
)
from odoo_rpc.session import Session, SessionState
from odoo_rpc.transport import (
    AsyncCallableTransport,
    AsyncHttpxTransport,
    CallableTransport,
    HttpxTransport,
    Reply,
)

try:
    __version__ = version("odoo-rpc")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "AccessDeniedError",
    "ApiError",
    "AsyncCallableTransport",
    "AsyncHttpxTransport",
    "AsyncOdooClient",
    "AuthError",
    "CallableTransport",
    "DomainBuilder",
    "EncodingError",
    "HttpxTransport",
    "OdooClient",
    "OdooRpcConfig",
    "OdooRpcError",
    "ProtocolError",
    "Reply",
    "ServerVersion",
    "Session",
    "SessionState",
    "TransportError",
    "ValidationError",
    "load_config",
]
