"""Session-based ``/web`` routes.

These carry a plain params mapping and rely on the ``session_id`` cookie the
server sets on ``/web/session/authenticate`` for continuity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from odoo_rpc.catalog import shapes
from odoo_rpc.catalog.descriptor import Arg, Request, WebMethod, call_kw_route

SESSION_AUTHENTICATE = WebMethod(
    name="session_authenticate",
    path="/web/session/authenticate",
    params=(
        Arg("db", shapes.database),
        Arg("login", shapes.nonempty_text),
        Arg("password", shapes.credential),
    ),
    response=shapes.mapping_result,
)

SESSION_INFO = WebMethod(
    name="session_info",
    path="/web/session/get_session_info",
    response=shapes.mapping_result,
)

SESSION_DESTROY = WebMethod(
    name="session_destroy",
    path="/web/session/destroy",
)

DATABASE_LIST = WebMethod(
    name="database_list",
    path="/web/database/list",
    response=shapes.str_list_result,
)


@dataclass(frozen=True)
class CallKw(WebMethod):
    """``/web/dataset/call_kw/<model>/<method>``, the web client's ORM entry point."""

    def build(  # type: ignore[override]
        self,
        model: str,
        method: str,
        args: Sequence[Any] | None = None,
        kwargs: Mapping[str, Any] | None = None,
    ) -> Request:
        model = shapes.model_name(model, "model")
        method = shapes.method_name(method, "method")
        args = shapes.sequence(args if args is not None else [], "args")
        kwargs = shapes.mapping(kwargs, "kwargs") if kwargs is not None else {}
        path, params = call_kw_route(model, method, args, kwargs)
        return Request(self, kwargs=params, model=model, method=method, path=path)


CALL_KW = CallKw(name="call_kw", path="/web/dataset/call_kw")

DESCRIPTORS = {
    d.name: d
    for d in (SESSION_AUTHENTICATE, SESSION_INFO, SESSION_DESTROY, DATABASE_LIST, CALL_KW)
}
