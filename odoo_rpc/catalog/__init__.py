"""Method catalog: descriptors for every remote operation, grouped by namespace."""

from odoo_rpc.catalog import common, db, orm, web
from odoo_rpc.catalog import object as object_service
from odoo_rpc.catalog.descriptor import (
    Arg,
    Kind,
    MethodDescriptor,
    OrmMethod,
    RawService,
    RawWeb,
    Request,
    ServiceMethod,
    WebMethod,
)
from odoo_rpc.catalog.domain import DomainBuilder, normalize_domain
from odoo_rpc.catalog.shapes import ServerVersion

RAW = RawService(name="raw")
RAW_WEB = RawWeb(name="raw_web")

NAMESPACES = {
    "common": common.DESCRIPTORS,
    "db": db.DESCRIPTORS,
    "object": object_service.DESCRIPTORS,
    "orm": orm.DESCRIPTORS,
    "web": web.DESCRIPTORS,
}

__all__ = [
    "Arg",
    "DomainBuilder",
    "Kind",
    "MethodDescriptor",
    "NAMESPACES",
    "OrmMethod",
    "RAW",
    "RAW_WEB",
    "Request",
    "ServerVersion",
    "ServiceMethod",
    "WebMethod",
    "normalize_domain",
]
