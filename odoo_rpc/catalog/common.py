"""``common`` service: server identity and credential checks (no session needed)."""

from __future__ import annotations

from odoo_rpc.catalog import shapes
from odoo_rpc.catalog.descriptor import Arg, ServiceMethod

SERVICE = "common"

LOGIN = ServiceMethod(
    name="login",
    service=SERVICE,
    method="login",
    args=(
        Arg("db", shapes.database),
        Arg("login", shapes.nonempty_text),
        Arg("password", shapes.credential),
    ),
    response=shapes.uid_result,
)

AUTHENTICATE = ServiceMethod(
    name="authenticate",
    service=SERVICE,
    method="authenticate",
    args=(
        Arg("db", shapes.database),
        Arg("login", shapes.nonempty_text),
        Arg("password", shapes.credential),
        Arg("user_agent_env", shapes.mapping, default={}),
    ),
    response=shapes.uid_result,
)

VERSION = ServiceMethod(
    name="version",
    service=SERVICE,
    method="version",
    response=shapes.version_result,
)

ABOUT = ServiceMethod(
    name="about",
    service=SERVICE,
    method="about",
    args=(Arg("extended", shapes.boolean, default=False),),
    response=shapes.about_result,
)

DESCRIPTORS = {d.name: d for d in (LOGIN, AUTHENTICATE, VERSION, ABOUT)}
