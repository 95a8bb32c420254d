"""``db`` service: database management.

Most methods take the server master password (``passwd``) first.  Dumps and
restores carry the archive as a base64 string.
"""

from __future__ import annotations

from odoo_rpc.catalog import shapes
from odoo_rpc.catalog.descriptor import Arg, ServiceMethod

SERVICE = "db"

DUMP_FORMATS = ("zip", "dump")

_PASSWD = Arg("passwd", shapes.credential)
_DB_NAME = Arg("db_name", shapes.database)


def _db(name: str, *args: Arg, response=shapes.bool_result) -> ServiceMethod:
    return ServiceMethod(name=name, service=SERVICE, method=name, args=args, response=response)


CREATE_DATABASE = _db(
    "create_database",
    _PASSWD,
    _DB_NAME,
    Arg("demo", shapes.boolean, default=False),
    Arg("lang", shapes.nonempty_text, default="en_US"),
    Arg("user_password", shapes.credential, default="admin"),
    Arg("login", shapes.nonempty_text, default="admin"),
    Arg("country_code", shapes.text, required=False),
    Arg("phone", shapes.text, required=False),
)

DUPLICATE_DATABASE = _db(
    "duplicate_database",
    _PASSWD,
    Arg("db_original_name", shapes.database),
    _DB_NAME,
)

DROP = _db("drop", _PASSWD, _DB_NAME)

DUMP = _db(
    "dump",
    _PASSWD,
    _DB_NAME,
    Arg("format", shapes.one_of(*DUMP_FORMATS), default="zip"),
    response=shapes.str_result,
)

RESTORE = _db(
    "restore",
    _PASSWD,
    _DB_NAME,
    Arg("data", shapes.nonempty_text),
    Arg("copy", shapes.boolean, default=False),
)

RENAME = _db(
    "rename",
    _PASSWD,
    Arg("old_name", shapes.database),
    Arg("new_name", shapes.database),
)

CHANGE_ADMIN_PASSWORD = _db(
    "change_admin_password",
    _PASSWD,
    Arg("new_password", shapes.nonempty_text),
)

MIGRATE_DATABASES = _db(
    "migrate_databases",
    _PASSWD,
    Arg("databases", shapes.string_list),
)

DB_EXIST = _db("db_exist", _DB_NAME)

LIST = _db(
    "list",
    Arg("document", shapes.boolean, default=False),
    response=shapes.str_list_result,
)

LIST_LANG = _db("list_lang", response=shapes.pairs_result)

LIST_COUNTRIES = _db("list_countries", _PASSWD, response=shapes.pairs_result)

SERVER_VERSION = _db("server_version", response=shapes.str_result)

DESCRIPTORS = {
    d.name: d
    for d in (
        CREATE_DATABASE, DUPLICATE_DATABASE, DROP, DUMP, RESTORE, RENAME,
        CHANGE_ADMIN_PASSWORD, MIGRATE_DATABASES, DB_EXIST, LIST, LIST_LANG,
        LIST_COUNTRIES, SERVER_VERSION,
    )
}
