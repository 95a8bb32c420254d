"""Error taxonomy shared by the codec, catalog, transports and session layer."""

from __future__ import annotations

from typing import Any


class OdooRpcError(Exception):
    """Base class for every error raised by odoo_rpc."""


class ValidationError(OdooRpcError, ValueError):
    """Caller supplied malformed or missing arguments (raised before any I/O)."""

    def __init__(self, message: str, argument: str | None = None) -> None:
        super().__init__(message)
        self.argument = argument


class EncodingError(OdooRpcError):
    """A value cannot be represented as JSON."""


class ProtocolError(OdooRpcError):
    """The wire data does not follow the JSON-RPC envelope contract."""


class TransportError(OdooRpcError):
    """Network / HTTP-level failure (connection refused, timeout, non-2xx)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApiError(OdooRpcError):
    """A well-formed error response returned by the Odoo server."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        name: str | None = None,
        debug: str | None = None,
        arguments: list[Any] | None = None,
        context: dict[str, Any] | None = None,
        model: str | None = None,
        method: str | None = None,
        server_message: str | None = None,
        raw: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.server_message = server_message if server_message is not None else message
        self.raw = dict(raw or {})
        self.code = code
        self.name = name
        self.debug = debug
        self.arguments = list(arguments or [])
        self.context = dict(context or {})
        self.model = model
        self.method = method

    @property
    def data(self) -> dict[str, Any]:
        """The ``error.data`` member as the server sent it."""
        return self.raw.get("data") or {}

    @property
    def error_class(self) -> str | None:
        """Short exception class name, e.g. ``ValidationError``."""
        if not self.name:
            return None
        return self.name.rsplit(".", 1)[-1]

    @classmethod
    def from_error_object(cls, error: dict[str, Any], **ctx: Any) -> ApiError:
        """Create from the ``error`` member of a JSON-RPC response.

        The more specific ``data.message`` becomes ``message``; the top-level
        one ("Odoo Server Error") stays in ``server_message`` and the error
        object itself in ``raw``.
        """
        data = error.get("data") or {}
        message = data.get("message") or error.get("message") or "Unknown error"
        name = data.get("name")
        klass = AccessDeniedError if name in ACCESS_DENIED_NAMES else cls
        return klass(
            message=message,
            code=error.get("code"),
            name=name,
            debug=data.get("debug"),
            arguments=data.get("arguments"),
            context=data.get("context"),
            server_message=error.get("message"),
            raw=error,
            **ctx,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, name={self.name!r}, message={self.message!r})"


class AccessDeniedError(ApiError):
    """Access denied by Odoo security rules or credentials."""


ACCESS_DENIED_NAMES: frozenset[str] = frozenset({
    "odoo.exceptions.AccessDenied",
    "odoo.exceptions.AccessError",
})


class AuthError(OdooRpcError):
    """Authentication rejected, or expired with no valid retry path."""
