"""Method descriptors: declarative records for every remote operation.

A descriptor maps a logical operation to its argument specs, its response
shape and its route.  ``build()`` validates caller input into a
:class:`Request`; the session later binds that request to the wire
(credentials, context, path) and ``parse()`` turns the decoded envelope into
the typed result.

Three kinds exist, mirroring Odoo's three entry points:

* :class:`ServiceMethod`: ``/jsonrpc`` with ``{"service", "method", "args"}``
* :class:`OrmMethod`: ``object.execute_kw`` specialised to one ORM method
* :class:`WebMethod`: a ``/web/...`` route with a plain params mapping
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

from odoo_rpc.catalog import shapes
from odoo_rpc.errors import AuthError, ProtocolError, ValidationError
from odoo_rpc.jsonrpc.envelope import DecodedEnvelope, service_params

JSONRPC_PATH = "/jsonrpc"
CALL_KW_PATH = "/web/dataset/call_kw"

_MISSING = object()


class Kind(str, enum.Enum):
    SERVICE = "service"
    ORM = "orm"
    WEB = "web"


@dataclass(frozen=True)
class Arg:
    """One argument of a remote method.

    Optional arguments left unset fall back to *default* when one is given
    (the default is checked like a caller value); otherwise they stay ``None``.
    """

    name: str
    check: Callable[[Any, str], Any] = shapes.anything
    required: bool = True
    default: Any = _MISSING

    def resolve(self, value: Any, owner: str) -> Any:
        if value is None:
            if self.default is not _MISSING:
                return self.check(self.default, self.name)
            if self.required:
                raise ValidationError(
                    f"{owner}() missing required argument {self.name!r}", self.name
                )
            return None
        return self.check(value, self.name)


def bind_arguments(
    owner: str,
    specs: Sequence[Arg],
    args: Sequence[Any],
    kwargs: Mapping[str, Any],
) -> dict[str, Any]:
    """Match call arguments to *specs* the way Python binds a signature."""
    if len(args) > len(specs):
        raise ValidationError(
            f"{owner}() takes at most {len(specs)} arguments ({len(args)} given)"
        )
    names = {spec.name for spec in specs}
    given: dict[str, Any] = dict(zip((s.name for s in specs), args))
    for key, value in kwargs.items():
        if key not in names:
            raise ValidationError(f"{owner}() got an unexpected argument {key!r}", key)
        if key in given:
            raise ValidationError(f"{owner}() got multiple values for argument {key!r}", key)
        given[key] = value
    return {spec.name: spec.resolve(given.get(spec.name), owner) for spec in specs}


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Request:
    """A validated call, not yet bound to a session.

    ``args`` are the positional wire arguments (without the credential
    prefix), ``kwargs`` the ORM keyword mapping or the web params.
    """

    descriptor: MethodDescriptor
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)
    model: str | None = None
    method: str | None = None
    path: str | None = None

    @property
    def kind(self) -> Kind:
        return self.descriptor.kind

    @property
    def needs_auth(self) -> bool:
        return self.descriptor.auth

    def bind(
        self,
        credentials: tuple[str, int, str] | None = None,
        context: Mapping[str, Any] | None = None,
        via_web: bool = False,
    ) -> tuple[str, dict[str, Any]]:
        """Return ``(path, params)`` for this call.

        *credentials* is the ``(database, uid, credential)`` prefix for
        authenticated ``/jsonrpc`` calls.  *context* is merged into ORM
        keyword arguments under ``"context"``; keys set explicitly on the
        call win.  With *via_web*, ORM calls go through ``call_kw`` and rely
        on the session cookie instead of repeated credentials.
        """
        kind = self.descriptor.kind

        if kind is Kind.WEB:
            return self.path or self.descriptor.path, dict(self.kwargs)

        if kind is Kind.ORM:
            kwargs = dict(self.kwargs)
            if context:
                kwargs["context"] = {**context, **(kwargs.get("context") or {})}
            if via_web:
                return call_kw_route(self.model, self.method, list(self.args), kwargs)
            if credentials is None:
                raise AuthError(f"{self.model}.{self.method}: not authenticated")
            args = [*credentials, self.model, self.method, list(self.args), kwargs]
            return JSONRPC_PATH, service_params("object", "execute_kw", args)

        args = list(self.args)
        if self.descriptor.auth:
            if credentials is None:
                raise AuthError(f"{self.descriptor.name}: not authenticated")
            args = [*credentials, *args]
        return (
            self.path or self.descriptor.path,
            service_params(self.descriptor.service, self.method or self.descriptor.method, args),
        )

    def parse(self, envelope: DecodedEnvelope) -> Any:
        return self.descriptor.parse(envelope, model=self.model, method=self.method)


def call_kw_route(
    model: str | None, method: str | None, args: list[Any], kwargs: dict[str, Any]
) -> tuple[str, dict[str, Any]]:
    return (
        f"{CALL_KW_PATH}/{model}/{method}",
        {"model": model, "method": method, "args": args, "kwargs": kwargs},
    )


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MethodDescriptor:
    """Shared parsing for all descriptor kinds."""

    name: str
    response: Callable[[Any], Any] = shapes.any_result

    kind = Kind.SERVICE
    service = ""
    path = JSONRPC_PATH
    auth = False

    def build(self, *args: Any, **kwargs: Any) -> Request:
        raise NotImplementedError

    def __call__(self, *args: Any, **kwargs: Any) -> Request:
        return self.build(*args, **kwargs)

    def parse(self, envelope: DecodedEnvelope, **ctx: Any) -> Any:
        """Typed result, :class:`ApiError` for error envelopes."""
        result = envelope.unwrap(**ctx)
        try:
            return self.response(result)
        except ProtocolError as exc:
            raise ProtocolError(f"{self.name}: {exc}") from exc


@dataclass(frozen=True)
class ServiceMethod(MethodDescriptor):
    """A ``/jsonrpc`` service method with positional arguments."""

    service: str = ""
    method: str = ""
    args: tuple[Arg, ...] = ()
    auth: bool = False

    def build(self, *args: Any, **kwargs: Any) -> Request:
        bound = bind_arguments(self.name, self.args, args, kwargs)
        return Request(self, args=tuple(bound.values()), method=self.method)


@dataclass(frozen=True)
class OrmMethod(MethodDescriptor):
    """``execute_kw`` specialised to one ORM method.

    ``args`` become the positional list, ``kwargs`` the keyword mapping
    (unset keywords are omitted).  Every ORM method also accepts a
    ``context`` mapping.
    """

    method: str = ""
    args: tuple[Arg, ...] = ()
    kwargs: tuple[Arg, ...] = ()

    kind = Kind.ORM
    auth = True

    def build(self, model: str, *args: Any, **kwargs: Any) -> Request:
        model = shapes.model_name(model, "model")
        context = kwargs.pop("context", None)
        bound = bind_arguments(self.name, self.args + self.kwargs, args, kwargs)
        positional = [bound[spec.name] for spec in self.args]
        keywords = {
            spec.name: bound[spec.name]
            for spec in self.kwargs
            if bound[spec.name] is not None
        }
        if context is not None:
            keywords["context"] = shapes.mapping(context, "context")
        return Request(self, args=tuple(positional), kwargs=keywords, model=model, method=self.method)


@dataclass(frozen=True)
class WebMethod(MethodDescriptor):
    """A ``/web/...`` route taking a params mapping (unset params omitted)."""

    path: str = ""
    params: tuple[Arg, ...] = ()

    kind = Kind.WEB

    def build(self, *args: Any, **kwargs: Any) -> Request:
        bound = bind_arguments(self.name, self.params, args, kwargs)
        return Request(self, kwargs={k: v for k, v in bound.items() if v is not None})


# ---------------------------------------------------------------------------
# Generic entry points
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExecuteKw(OrmMethod):
    """``object.execute_kw`` with caller-chosen method, args and kwargs."""

    def build(  # type: ignore[override]
        self,
        model: str,
        method: str,
        args: Sequence[Any] | None = None,
        kwargs: Mapping[str, Any] | None = None,
    ) -> Request:
        model = shapes.model_name(model, "model")
        method = shapes.method_name(method, "method")
        if args is None:
            raise ValidationError("execute_kw() requires a positional argument list", "args")
        args = shapes.sequence(args, "args")
        kwargs = shapes.mapping(kwargs, "kwargs") if kwargs is not None else {}
        return Request(self, args=tuple(args), kwargs=kwargs, model=model, method=method)


@dataclass(frozen=True)
class Execute(ServiceMethod):
    """``object.execute(db, uid, password, model, method, *args)``."""

    def build(self, model: str, method: str, *args: Any) -> Request:  # type: ignore[override]
        model = shapes.model_name(model, "model")
        method = shapes.method_name(method, "method")
        return Request(self, args=(model, method, *args), model=model, method=self.method)


@dataclass(frozen=True)
class RawService(MethodDescriptor):
    """Any ``/jsonrpc`` service method, untyped."""

    auth: bool = False

    def build(  # type: ignore[override]
        self, service: str, method: str, args: Sequence[Any] | None = None
    ) -> Request:
        service = shapes.method_name(service, "service")
        method = shapes.nonempty_text(method, "method")
        args = shapes.sequence(args if args is not None else [], "args")
        return Request(
            _RawBound(name=self.name, service=service, auth=self.auth),
            args=tuple(args),
            method=method,
        )


@dataclass(frozen=True)
class _RawBound(ServiceMethod):
    """Descriptor instance carrying a raw call's service name."""


@dataclass(frozen=True)
class RawWeb(MethodDescriptor):
    """Any ``/web/...`` route, untyped."""

    kind = Kind.WEB

    def build(self, path: str, params: Mapping[str, Any] | None = None) -> Request:  # type: ignore[override]
        path = shapes.nonempty_text(path, "path")
        if not path.startswith("/"):
            raise ValidationError(f"path must start with '/', got {path!r}", "path")
        params = shapes.mapping(params, "params") if params is not None else {}
        return Request(self, kwargs=params, path=path)
