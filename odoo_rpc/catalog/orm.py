"""Common ORM methods as typed specialisations of ``execute_kw``.

Each entry encodes to exactly what a manual ``execute_kw`` call with the same
positional list and keyword mapping would send, e.g.::

    SEARCH_READ.build("res.users", [["active", "=", True]], fields=["login"])
    # args   [[["active", "=", True]]]
    # kwargs {"fields": ["login"]}
"""

from __future__ import annotations

from odoo_rpc.catalog import shapes
from odoo_rpc.catalog.descriptor import Arg, OrmMethod

_IDS = Arg("ids", shapes.id_list)
_DOMAIN = Arg("domain", shapes.domain, default=())
_FIELDS = Arg("fields", shapes.string_list, required=False)
_OFFSET = Arg("offset", shapes.non_negative, required=False)
_LIMIT = Arg("limit", shapes.non_negative, required=False)
_ORDER = Arg("order", shapes.text, required=False)
_OPERATION = Arg("operation", shapes.access_operation)

CREATE = OrmMethod(
    name="create",
    method="create",
    args=(Arg("values", shapes.create_values),),
    response=shapes.id_or_ids_result,
)

READ = OrmMethod(
    name="read",
    method="read",
    args=(_IDS,),
    kwargs=(_FIELDS,),
    response=shapes.records_result,
)

WRITE = OrmMethod(
    name="write",
    method="write",
    args=(_IDS, Arg("values", shapes.mapping)),
    response=shapes.bool_result,
)

UNLINK = OrmMethod(
    name="unlink",
    method="unlink",
    args=(_IDS,),
    response=shapes.bool_result,
)

SEARCH = OrmMethod(
    name="search",
    method="search",
    args=(_DOMAIN,),
    kwargs=(_OFFSET, _LIMIT, _ORDER),
    response=shapes.ids_result,
)

SEARCH_READ = OrmMethod(
    name="search_read",
    method="search_read",
    args=(_DOMAIN,),
    kwargs=(_FIELDS, _OFFSET, _LIMIT, _ORDER),
    response=shapes.records_result,
)

SEARCH_COUNT = OrmMethod(
    name="search_count",
    method="search_count",
    args=(_DOMAIN,),
    kwargs=(_LIMIT,),
    response=shapes.int_result,
)

READ_GROUP = OrmMethod(
    name="read_group",
    method="read_group",
    args=(
        _DOMAIN,
        Arg("fields", shapes.string_list),
        Arg("groupby", shapes.string_list),
    ),
    kwargs=(
        _OFFSET,
        _LIMIT,
        Arg("orderby", shapes.text, required=False),
        Arg("lazy", shapes.boolean, required=False),
    ),
    response=shapes.records_result,
)

COPY = OrmMethod(
    name="copy",
    method="copy",
    args=(Arg("id", shapes.record_id),),
    kwargs=(Arg("default", shapes.mapping, required=False),),
    response=shapes.int_result,
)

EXISTS = OrmMethod(
    name="exists",
    method="exists",
    args=(_IDS,),
    response=shapes.ids_result,
)

FIELDS_GET = OrmMethod(
    name="fields_get",
    method="fields_get",
    kwargs=(
        Arg("allfields", shapes.string_list, required=False),
        Arg("attributes", shapes.string_list, required=False),
    ),
    response=shapes.mapping_result,
)

CHECK_ACCESS_RIGHTS = OrmMethod(
    name="check_access_rights",
    method="check_access_rights",
    args=(_OPERATION,),
    kwargs=(Arg("raise_exception", shapes.boolean, required=False),),
    response=shapes.bool_result,
)

CHECK_FIELD_ACCESS_RIGHTS = OrmMethod(
    name="check_field_access_rights",
    method="check_field_access_rights",
    args=(_OPERATION, Arg("fields", shapes.string_list)),
    response=shapes.optional_str_list_result,
)

CHECK_ACCESS_RULE = OrmMethod(
    name="check_access_rule",
    method="check_access_rule",
    args=(_IDS, _OPERATION),
    response=shapes.null_result,
)

GET_METADATA = OrmMethod(
    name="get_metadata",
    method="get_metadata",
    args=(_IDS,),
    response=shapes.records_result,
)

GET_EXTERNAL_ID = OrmMethod(
    name="get_external_id",
    method="get_external_id",
    args=(_IDS,),
    response=shapes.external_ids_result,
)

# deprecated server-side alias of get_external_id
GET_XML_ID = OrmMethod(
    name="get_xml_id",
    method="get_xml_id",
    args=(_IDS,),
    response=shapes.external_ids_result,
)

NAME_GET = OrmMethod(
    name="name_get",
    method="name_get",
    args=(_IDS,),
    response=shapes.pairs_result,
)

NAME_CREATE = OrmMethod(
    name="name_create",
    method="name_create",
    args=(Arg("name", shapes.nonempty_text),),
    response=shapes.pair_result,
)

NAME_SEARCH = OrmMethod(
    name="name_search",
    method="name_search",
    args=(Arg("name", shapes.text, default=""),),
    kwargs=(
        Arg("args", shapes.domain, required=False),
        Arg("operator", shapes.nonempty_text, required=False),
        _LIMIT,
    ),
    response=shapes.pairs_result,
)

DESCRIPTORS = {
    d.name: d
    for d in (
        CREATE, READ, WRITE, UNLINK, SEARCH, SEARCH_READ, SEARCH_COUNT,
        READ_GROUP, COPY, EXISTS, FIELDS_GET, CHECK_ACCESS_RIGHTS,
        CHECK_FIELD_ACCESS_RIGHTS, CHECK_ACCESS_RULE, GET_METADATA,
        GET_EXTERNAL_ID, GET_XML_ID, NAME_GET, NAME_CREATE, NAME_SEARCH,
    )
}
