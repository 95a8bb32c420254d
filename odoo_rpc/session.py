"""Session and authentication state machine.

States::

    UNAUTHENTICATED -> AUTHENTICATING -> AUTHENTICATED
    AUTHENTICATED -> EXPIRED -> AUTHENTICATING -> AUTHENTICATED | FAILED
    any -> UNAUTHENTICATED (logout)

The manager binds every request to the current session (credential prefix,
context, cookie), recognises session-expiry errors, re-authenticates once
with the stored credential and retries the call once.  Concurrent callers
that hit the same expiry share a single re-authentication.

``SessionManager`` and ``AsyncSessionManager`` differ only in how they wait:
the first uses ``threading.Lock`` and plain calls, the second
``asyncio.Lock`` and coroutines.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable, Mapping

from odoo_rpc.catalog import common, shapes, web
from odoo_rpc.catalog.descriptor import Request
from odoo_rpc.errors import ApiError, AuthError, ValidationError

logger = logging.getLogger("odoo_rpc.session")

AUTH_STYLES = ("jsonrpc", "web")

DEFAULT_EXPIRY_CODES: frozenset[int] = frozenset({100})
DEFAULT_EXPIRY_NAMES: frozenset[str] = frozenset({"odoo.http.SessionExpiredException"})


class SessionState(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    EXPIRED = "expired"
    FAILED = "failed"


@dataclass
class Session:
    """An authenticated identity.  Only the session manager mutates it."""

    database: str
    login: str
    uid: int
    credential: str = field(repr=False)
    session_id: str | None = field(default=None, repr=False)
    context: dict[str, Any] = field(default_factory=dict)
    user_info: dict[str, Any] = field(default_factory=dict)

    @property
    def credentials(self) -> tuple[str, int, str]:
        return self.database, self.uid, self.credential


@dataclass(frozen=True)
class Outcome:
    """A parsed result together with the session cookie the server set."""

    value: Any
    session_id: str | None = None


@dataclass(frozen=True)
class Bound:
    """A request bound to one session snapshot."""

    request: Request
    path: str
    params: dict[str, Any]
    session_id: str | None
    session: Session | None


Exchange = Callable[[Bound], Outcome]
AsyncExchange = Callable[[Bound], Awaitable[Outcome]]


class _SessionCore:
    """State and pure decisions shared by the blocking and async managers."""

    def __init__(
        self,
        auth_style: str = "jsonrpc",
        context: Mapping[str, Any] | None = None,
        expiry_codes: Iterable[int] | None = None,
        expiry_names: Iterable[str] | None = None,
    ) -> None:
        if auth_style not in AUTH_STYLES:
            raise ValidationError(
                f"auth_style must be one of {', '.join(AUTH_STYLES)}, got {auth_style!r}",
                "auth_style",
            )
        self._auth_style = auth_style
        self._context: dict[str, Any] = dict(context or {})
        self._expiry_codes = frozenset(DEFAULT_EXPIRY_CODES if expiry_codes is None else expiry_codes)
        self._expiry_names = frozenset(DEFAULT_EXPIRY_NAMES if expiry_names is None else expiry_names)
        self._state = SessionState.UNAUTHENTICATED
        self._session: Session | None = None

    # --- Properties ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def auth_style(self) -> str:
        return self._auth_style

    @property
    def is_authenticated(self) -> bool:
        return self._state == SessionState.AUTHENTICATED

    @property
    def context(self) -> dict[str, Any]:
        return dict(self._context)

    def update_context(self, **values: Any) -> None:
        """Set base context keys (``lang``, ``tz``, ``allowed_company_ids``, ...)."""
        self._context.update(values)

    # --- Binding ---

    def bind(self, request: Request) -> Bound:
        session = self._session
        if request.needs_auth and session is None:
            raise AuthError(
                f"{request.descriptor.name}: not authenticated, call authenticate() first"
            )
        if session is None:
            path, params = request.bind(context=self._context)
            return Bound(request, path, params, None, None)

        context = {**session.context, **self._context}
        path, params = request.bind(
            session.credentials, context, via_web=self._auth_style == "web"
        )
        return Bound(request, path, params, session.session_id, session)

    # --- Expiry ---

    def is_expiry(self, error: ApiError) -> bool:
        return error.code in self._expiry_codes or error.name in self._expiry_names

    def _check_second_expiry(self, error: ApiError) -> None:
        if self.is_expiry(error):
            self._state = SessionState.EXPIRED
            raise AuthError("Session expired again after re-authentication") from error

    def _expired(self, error: ApiError, bound: Bound) -> Session:
        """Record an expiry seen by *bound*; return the session to renew."""
        session = bound.session
        if session is None or self._session is None:
            raise AuthError(f"Session expired: {error.message}") from error
        logger.warning(
            "Session expired (code=%s, name=%s), re-authenticating", error.code, error.name
        )
        return session

    # --- Authentication ---

    def _login_request(self, database: str, login: str, credential: str) -> Request:
        if self._auth_style == "web":
            return web.SESSION_AUTHENTICATE.build(database, login, credential)
        return common.AUTHENTICATE.build(database, login, credential, {})

    def _begin_login(self, database: str, login: str, credential: str) -> Bound:
        request = self._login_request(database, login, credential)
        self._state = SessionState.AUTHENTICATING
        path, params = request.bind()
        return Bound(request, path, params, None, None)

    def _fail_login(self, error: Exception, database: str, login: str) -> None:
        self._state = SessionState.FAILED
        self._session = None
        logger.error("Authentication failed for %s@%s: %s", login, database, error)

    def _complete_login(
        self, outcome: Outcome, database: str, login: str, credential: str
    ) -> Session:
        if self._auth_style == "web":
            info = outcome.value
            uid = info.get("uid")
            context = dict(info.get("user_context") or {})
        else:
            info = {}
            uid = outcome.value
            context = {}

        if not uid or isinstance(uid, bool) or not isinstance(uid, int):
            raise AuthError(f"Authentication failed for {login!r} on {database!r}: no uid returned")

        session = Session(
            database=database,
            login=login,
            uid=uid,
            credential=credential,
            session_id=outcome.session_id,
            context=context,
            user_info={k: v for k, v in info.items() if k != "user_context"},
        )
        self._session = session
        self._state = SessionState.AUTHENTICATED
        logger.info("Authenticated as %s on %s (uid=%d, style=%s)", login, database, uid, self._auth_style)
        return session

    def authenticate_manual(
        self,
        database: str,
        login: str,
        uid: int,
        credential: str,
        session_id: str | None = None,
        context: Mapping[str, Any] | None = None,
        user_info: Mapping[str, Any] | None = None,
    ) -> Session:
        """Install a known session without a round trip."""
        session = Session(
            database=shapes.database(database, "database"),
            login=shapes.nonempty_text(login, "login"),
            uid=shapes.record_id(uid, "uid"),
            credential=shapes.credential(credential, "credential"),
            session_id=session_id,
            context=dict(context or {}),
            user_info=dict(user_info or {}),
        )
        self._session = session
        self._state = SessionState.AUTHENTICATED
        logger.debug("Installed session for %s on %s (uid=%d)", login, database, uid)
        return session

    def logout(self) -> None:
        """Forget the session locally; no I/O."""
        if self._session is not None:
            logger.info("Logged out %s from %s", self._session.login, self._session.database)
        self._session = None
        self._state = SessionState.UNAUTHENTICATED

    def _track_cookie(self, bound: Bound, session_id: str | None) -> None:
        session = bound.session
        if session is not None and session is self._session and session_id:
            session.session_id = session_id


class SessionManager(_SessionCore):
    """Blocking session manager."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._auth_lock = threading.Lock()

    def authenticate(self, database: str, login: str, credential: str, exchange: Exchange) -> Session:
        with self._auth_lock:
            return self._login(database, login, credential, exchange)

    def _login(self, database: str, login: str, credential: str, exchange: Exchange) -> Session:
        bound = self._begin_login(database, login, credential)
        try:
            outcome = exchange(bound)
            return self._complete_login(outcome, database, login, credential)
        except ApiError as e:
            self._fail_login(e, database, login)
            raise AuthError(f"Authentication failed: {e.message}") from e
        except Exception as e:
            self._fail_login(e, database, login)
            raise

    def _reauthenticate(self, expired: Session, exchange: Exchange) -> None:
        with self._auth_lock:
            if self._session is not expired:
                logger.debug("Session already renewed by another caller")
                if self._session is None:
                    raise AuthError("Session was closed during re-authentication")
                return
            self._state = SessionState.EXPIRED
            self._login(expired.database, expired.login, expired.credential, exchange)

    def run(self, request: Request, exchange: Exchange) -> Any:
        """Dispatch *request*, re-authenticating and retrying once on expiry."""
        bound = self.bind(request)
        try:
            outcome = exchange(bound)
        except ApiError as e:
            if not self.is_expiry(e):
                raise
            self._reauthenticate(self._expired(e, bound), exchange)
            bound = self.bind(request)
            try:
                outcome = exchange(bound)
            except ApiError as retry_error:
                self._check_second_expiry(retry_error)
                raise
        self._track_cookie(bound, outcome.session_id)
        return outcome.value


class AsyncSessionManager(_SessionCore):
    """Asyncio session manager."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._auth_lock = asyncio.Lock()

    async def authenticate(
        self, database: str, login: str, credential: str, exchange: AsyncExchange
    ) -> Session:
        async with self._auth_lock:
            return await self._login(database, login, credential, exchange)

    async def _login(
        self, database: str, login: str, credential: str, exchange: AsyncExchange
    ) -> Session:
        bound = self._begin_login(database, login, credential)
        try:
            outcome = await exchange(bound)
            return self._complete_login(outcome, database, login, credential)
        except ApiError as e:
            self._fail_login(e, database, login)
            raise AuthError(f"Authentication failed: {e.message}") from e
        except Exception as e:
            self._fail_login(e, database, login)
            raise

    async def _reauthenticate(self, expired: Session, exchange: AsyncExchange) -> None:
        async with self._auth_lock:
            if self._session is not expired:
                logger.debug("Session already renewed by another caller")
                if self._session is None:
                    raise AuthError("Session was closed during re-authentication")
                return
            self._state = SessionState.EXPIRED
            await self._login(expired.database, expired.login, expired.credential, exchange)

    async def run(self, request: Request, exchange: AsyncExchange) -> Any:
        """Dispatch *request*, re-authenticating and retrying once on expiry."""
        bound = self.bind(request)
        try:
            outcome = await exchange(bound)
        except ApiError as e:
            if not self.is_expiry(e):
                raise
            await self._reauthenticate(self._expired(e, bound), exchange)
            bound = self.bind(request)
            try:
                outcome = await exchange(bound)
            except ApiError as retry_error:
                self._check_second_expiry(retry_error)
                raise
        self._track_cookie(bound, outcome.session_id)
        return outcome.value
