"""Transport abstraction and reference implementations."""

from odoo_rpc.transport.base import AsyncTransport, Reply, Transport
from odoo_rpc.transport.callable import AsyncCallableTransport, CallableTransport
from odoo_rpc.transport.http import AsyncHttpxTransport, HttpxTransport

__all__ = [
    "AsyncCallableTransport",
    "AsyncHttpxTransport",
    "AsyncTransport",
    "CallableTransport",
    "HttpxTransport",
    "Reply",
    "Transport",
]
