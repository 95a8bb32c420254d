"""``object`` service: generic model method calls."""

from __future__ import annotations

from odoo_rpc.catalog.descriptor import Execute, ExecuteKw

EXECUTE = Execute(name="execute", service="object", method="execute", auth=True)

EXECUTE_KW = ExecuteKw(name="execute_kw")

DESCRIPTORS = {d.name: d for d in (EXECUTE, EXECUTE_KW)}
