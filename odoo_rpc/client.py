"""Client facade: blocking ``OdooClient`` and asyncio ``AsyncOdooClient``.

Both build requests from the catalog, assign call identifiers, encode,
decode and parse in one shared base; only the transport call and the
session lock differ.

Usage::

    client = OdooClient(HttpxTransport("https://odoo.example.com"))
    client.authenticate("prod", "admin", "secret")
    users = client.search_read("res.users", [("active", "=", True)], fields=["login"])
    langs = client.db.list_lang()
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence

from odoo_rpc.catalog import NAMESPACES, RAW, RAW_WEB, common, orm
from odoo_rpc.catalog import object as object_service
from odoo_rpc.catalog.descriptor import MethodDescriptor, Request
from odoo_rpc.catalog.shapes import ServerVersion
from odoo_rpc.errors import ValidationError
from odoo_rpc.jsonrpc import CallIdGenerator, decode_response, encode_request
from odoo_rpc.log import set_package_level
from odoo_rpc.session import (
    AsyncSessionManager,
    Bound,
    Outcome,
    Session,
    SessionManager,
    SessionState,
)
from odoo_rpc.transport.base import Reply
from odoo_rpc.transport.callable import AsyncCallableTransport, CallableTransport
from odoo_rpc.transport.http import AsyncHttpxTransport, HttpxTransport

if TYPE_CHECKING:
    from odoo_rpc.config import OdooRpcConfig

logger = logging.getLogger("odoo_rpc.client")


class Namespace:
    """Exposes one catalog namespace as methods, e.g. ``client.db.list()``."""

    def __init__(self, client: _ClientBase, name: str, descriptors: Mapping[str, MethodDescriptor]) -> None:
        self._client = client
        self._name = name
        self._descriptors = descriptors

    def __getattr__(self, item: str) -> Any:
        try:
            descriptor = self._descriptors[item]
        except KeyError:
            raise AttributeError(f"'{self._name}' has no method {item!r}") from None

        def invoke(*args: Any, **kwargs: Any) -> Any:
            return self._client.call(descriptor.build(*args, **kwargs))

        invoke.__name__ = item
        invoke.__qualname__ = f"{self._name}.{item}"
        return invoke

    def __dir__(self) -> list[str]:
        return sorted(self._descriptors)

    def __repr__(self) -> str:
        return f"<Namespace {self._name}: {', '.join(sorted(self._descriptors))}>"


class _ClientBase(ABC):
    """Request building and envelope handling shared by both clients.

    ``call()`` returns the typed result in the blocking client and a
    coroutine in the async one; the convenience methods below just return
    whatever ``call()`` returns.
    """

    _session: SessionManager | AsyncSessionManager

    def __init__(self, transport: Any, ids: CallIdGenerator | None = None) -> None:
        self._transport = transport
        self._ids = ids or CallIdGenerator()
        self.common = Namespace(self, "common", NAMESPACES["common"])
        self.db = Namespace(self, "db", NAMESPACES["db"])
        self.object = Namespace(self, "object", NAMESPACES["object"])
        self.orm = Namespace(self, "orm", NAMESPACES["orm"])
        self.web = Namespace(self, "web", NAMESPACES["web"])

    # --- Properties ---

    @property
    def transport(self) -> Any:
        return self._transport

    @property
    def session(self) -> Session | None:
        return self._session.session

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def uid(self) -> int | None:
        session = self._session.session
        return session.uid if session else None

    @property
    def context(self) -> dict[str, Any]:
        return self._session.context

    def update_context(self, **values: Any) -> None:
        self._session.update_context(**values)

    # --- Envelope handling ---

    def _prepare(self, bound: Bound) -> tuple[int, bytes]:
        identifier = self._ids.next()
        payload = encode_request(bound.params, identifier)
        logger.debug("-> %s %s (id=%d)", bound.path, bound.request.descriptor.name, identifier)
        return identifier, payload

    def _finish(self, bound: Bound, identifier: int, reply: Reply) -> Outcome:
        envelope = decode_response(reply.body, expected_id=identifier)
        if envelope.is_error:
            logger.debug(
                "<- %s error code=%s name=%s (id=%d)",
                bound.path, envelope.error.code, envelope.error.name, identifier,
            )
        return Outcome(bound.request.parse(envelope), reply.session_id)

    @abstractmethod
    def call(self, request: Request) -> Any:
        """Dispatch *request* through the session manager."""

    def authenticate_manual(
        self,
        database: str,
        login: str,
        uid: int,
        credential: str,
        session_id: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Session:
        """Install a known session (uid and credential) without a round trip."""
        return self._session.authenticate_manual(
            database, login, uid, credential, session_id=session_id, context=context
        )

    def logout(self) -> None:
        """Drop the local session; no request is sent."""
        self._session.logout()

    def _login_args(
        self, database: str | None, login: str | None, password: str | None
    ) -> tuple[str, str, str]:
        config = getattr(self, "_config", None)
        if config is not None:
            database = database or config.database
            login = login or config.username
            password = password if password is not None else config.password
        if database is None or login is None or password is None:
            raise ValidationError("authenticate() requires database, login and password")
        return database, login, password

    # --- Generic entry points ---

    def execute_kw(
        self,
        model: str,
        method: str,
        args: Sequence[Any],
        kwargs: Mapping[str, Any] | None = None,
    ) -> Any:
        """``object.execute_kw``; *args* may be empty but must be given."""
        return self.call(object_service.EXECUTE_KW.build(model, method, args, kwargs))

    def execute(self, model: str, method: str, *args: Any) -> Any:
        return self.call(object_service.EXECUTE.build(model, method, *args))

    def raw(self, service: str, method: str, args: Sequence[Any] | None = None) -> Any:
        """Call any ``/jsonrpc`` service method and return the untyped result."""
        return self.call(RAW.build(service, method, args))

    def raw_web(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        """POST to any ``/web`` route and return the untyped result."""
        return self.call(RAW_WEB.build(path, params))

    def version(self) -> ServerVersion:
        return self.call(common.VERSION.build())

    # --- ORM verbs ---

    def create(self, model: str, values: Any, context: Mapping[str, Any] | None = None) -> Any:
        return self.call(orm.CREATE.build(model, values, context=context))

    def read(
        self,
        model: str,
        ids: int | Sequence[int],
        fields: Sequence[str] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        return self.call(orm.READ.build(model, ids, fields=fields, context=context))

    def write(
        self,
        model: str,
        ids: int | Sequence[int],
        values: Mapping[str, Any],
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        return self.call(orm.WRITE.build(model, ids, values, context=context))

    def unlink(
        self, model: str, ids: int | Sequence[int], context: Mapping[str, Any] | None = None
    ) -> Any:
        return self.call(orm.UNLINK.build(model, ids, context=context))

    def search(
        self,
        model: str,
        domain: Sequence[Any] | None = None,
        offset: int | None = None,
        limit: int | None = None,
        order: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        return self.call(orm.SEARCH.build(
            model, domain, offset=offset, limit=limit, order=order, context=context,
        ))

    def search_read(
        self,
        model: str,
        domain: Sequence[Any] | None = None,
        fields: Sequence[str] | None = None,
        offset: int | None = None,
        limit: int | None = None,
        order: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        """Search and read in one call.  The domain travels positionally."""
        return self.call(orm.SEARCH_READ.build(
            model, domain, fields=fields, offset=offset, limit=limit, order=order,
            context=context,
        ))

    def search_count(
        self,
        model: str,
        domain: Sequence[Any] | None = None,
        limit: int | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        return self.call(orm.SEARCH_COUNT.build(model, domain, limit=limit, context=context))

    def read_group(
        self,
        model: str,
        domain: Sequence[Any] | None,
        fields: Sequence[str],
        groupby: Sequence[str],
        offset: int | None = None,
        limit: int | None = None,
        orderby: str | None = None,
        lazy: bool | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        return self.call(orm.READ_GROUP.build(
            model, domain, fields, groupby,
            offset=offset, limit=limit, orderby=orderby, lazy=lazy, context=context,
        ))

    def name_search(
        self,
        model: str,
        name: str = "",
        args: Sequence[Any] | None = None,
        operator: str | None = None,
        limit: int | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        return self.call(orm.NAME_SEARCH.build(
            model, name, args=args, operator=operator, limit=limit, context=context,
        ))

    def fields_get(
        self,
        model: str,
        attributes: Sequence[str] | None = None,
        allfields: Sequence[str] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        return self.call(orm.FIELDS_GET.build(
            model, allfields=allfields, attributes=attributes, context=context,
        ))

    # --- Construction ---

    @staticmethod
    def _session_options(config: OdooRpcConfig) -> dict[str, Any]:
        context: dict[str, Any] = {}
        if config.lang:
            context["lang"] = config.lang
        if config.tz:
            context["tz"] = config.tz
        return {
            "auth_style": config.auth_style,
            "context": context,
            "expiry_codes": config.session_expiry_codes,
            "expiry_names": config.session_expiry_names,
        }


class OdooClient(_ClientBase):
    """Blocking client."""

    def __init__(
        self,
        transport: Any,
        auth_style: str = "jsonrpc",
        context: Mapping[str, Any] | None = None,
        expiry_codes: Iterable[int] | None = None,
        expiry_names: Iterable[str] | None = None,
        ids: CallIdGenerator | None = None,
    ) -> None:
        if not hasattr(transport, "send") and callable(transport):
            transport = CallableTransport(transport)
        super().__init__(transport, ids)
        self._session = SessionManager(auth_style, context, expiry_codes, expiry_names)
        self._config: OdooRpcConfig | None = None

    @classmethod
    def from_config(cls, config: OdooRpcConfig) -> OdooClient:
        """Client over :class:`HttpxTransport`; call :meth:`authenticate` next."""
        transport = HttpxTransport(
            config.url,
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
            ca_cert=config.ca_cert,
        )
        set_package_level(config.log_level)
        client = cls(transport, **cls._session_options(config))
        client._config = config
        return client

    def _exchange(self, bound: Bound) -> Outcome:
        identifier, payload = self._prepare(bound)
        reply = self._transport.send(bound.path, payload, bound.session_id)
        return self._finish(bound, identifier, reply)

    def call(self, request: Request) -> Any:
        return self._session.run(request, self._exchange)

    def authenticate(
        self,
        database: str | None = None,
        login: str | None = None,
        password: str | None = None,
    ) -> Session:
        """Log in; credentials default to the configuration the client was built from."""
        return self._session.authenticate(*self._login_args(database, login, password), self._exchange)

    def close(self) -> None:
        self.logout()
        self._transport.close()

    def __enter__(self) -> OdooClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class AsyncOdooClient(_ClientBase):
    """Asyncio client; every call returns an awaitable."""

    def __init__(
        self,
        transport: Any,
        auth_style: str = "jsonrpc",
        context: Mapping[str, Any] | None = None,
        expiry_codes: Iterable[int] | None = None,
        expiry_names: Iterable[str] | None = None,
        ids: CallIdGenerator | None = None,
    ) -> None:
        if not hasattr(transport, "send") and callable(transport):
            transport = AsyncCallableTransport(transport)
        super().__init__(transport, ids)
        self._session = AsyncSessionManager(auth_style, context, expiry_codes, expiry_names)
        self._config: OdooRpcConfig | None = None

    @classmethod
    def from_config(cls, config: OdooRpcConfig) -> AsyncOdooClient:
        """Client over :class:`AsyncHttpxTransport`; await :meth:`authenticate` next."""
        transport = AsyncHttpxTransport(
            config.url,
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
            ca_cert=config.ca_cert,
        )
        set_package_level(config.log_level)
        client = cls(transport, **cls._session_options(config))
        client._config = config
        return client

    async def _exchange(self, bound: Bound) -> Outcome:
        identifier, payload = self._prepare(bound)
        reply = await self._transport.send(bound.path, payload, bound.session_id)
        return self._finish(bound, identifier, reply)

    async def call(self, request: Request) -> Any:
        return await self._session.run(request, self._exchange)

    async def authenticate(
        self,
        database: str | None = None,
        login: str | None = None,
        password: str | None = None,
    ) -> Session:
        """Log in; credentials default to the configuration the client was built from."""
        return await self._session.authenticate(
            *self._login_args(database, login, password), self._exchange
        )

    async def aclose(self) -> None:
        self.logout()
        await self._transport.close()

    async def __aenter__(self) -> AsyncOdooClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
