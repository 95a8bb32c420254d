"""Tests for the OdooClient facade."""

from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock

import pytest

from odoo_rpc.catalog import orm
from odoo_rpc.catalog.shapes import ServerVersion
from odoo_rpc.client import OdooClient, _ClientBase
from odoo_rpc.config import OdooRpcConfig
from odoo_rpc.errors import ApiError, ProtocolError, ValidationError
from odoo_rpc.jsonrpc import encode_response
from odoo_rpc.session import SessionState
from odoo_rpc.transport import HttpxTransport, Reply


class TestOrmVerbs:

    def test_search_read_wire_shape(self, authed_client, server):
        server.reply([{"id": 2, "login": "admin"}])

        records = authed_client.search_read("res.users", [["active", "=", True]], fields=["login"])

        assert records == [{"id": 2, "login": "admin"}]
        envelope = json.loads(server.last.payload)
        assert envelope["jsonrpc"] == "2.0"
        assert envelope["method"] == "call"
        assert envelope["params"] == {
            "service": "object",
            "method": "execute_kw",
            "args": [
                "testdb", 2, "secret", "res.users", "search_read",
                [[["active", "=", True]]],
                {"fields": ["login"]},
            ],
        }

    def test_search_read_in_filter(self, authed_client, server):
        server.reply([{"id": 1, "name": "Acme"}, {"id": 2, "name": "Globex"}])

        records = authed_client.search_read("res.partner", [["id", "in", [1, 2]]], fields=["name"])

        assert [r["id"] for r in records] == [1, 2]
        assert server.last.params["args"][3:] == [
            "res.partner", "search_read",
            [[["id", "in", [1, 2]]]],
            {"fields": ["name"]},
        ]

    def test_search_count_any_filter(self, authed_client, server):
        server.reply(4)
        domain = [["child_ids", "any", [["active", "=", True]]]]
        assert authed_client.search_count("res.partner", domain) == 4
        assert server.last.params["args"][5] == [domain]

    def test_execute_kw_null_context_with_base_context(self, server):
        client = OdooClient(server.handle, context={"lang": "fr_FR"})
        client.authenticate_manual("testdb", "admin", 2, "secret")
        server.reply(3)
        assert client.execute_kw("res.partner", "search_count", [[]], {"context": None}) == 3
        assert server.last.params["args"][-1] == {"context": {"lang": "fr_FR"}}

    def test_verbs_match_execute_kw_bytes(self, server):
        def run(fn):
            client = OdooClient(server.handle)
            client.authenticate_manual("testdb", "admin", 2, "secret")
            server.reply([])
            fn(client)
            return server.last.payload

        typed = run(lambda c: c.search("res.partner", [("is_company", "=", True)], limit=10, order="name"))
        manual = run(lambda c: c.execute_kw(
            "res.partner", "search", [[["is_company", "=", True]]], {"limit": 10, "order": "name"}
        ))
        assert typed == manual

    def test_create(self, authed_client, server):
        server.reply(42)
        assert authed_client.create("res.partner", {"name": "Acme"}) == 42
        assert server.last.params["args"][3:] == ["res.partner", "create", [{"name": "Acme"}], {}]

    def test_write_with_context(self, authed_client, server):
        server.reply(True)
        assert authed_client.write("res.partner", [1, 2], {"active": False}, context={"tracking_disable": True})
        assert server.last.params["args"][-1] == {"context": {"tracking_disable": True}}

    def test_read_group(self, authed_client, server):
        server.reply([{"partner_id": [1, "Acme"], "amount_total": 100.0}])
        authed_client.read_group("sale.order", [], ["amount_total:sum"], ["partner_id"], lazy=False)
        assert server.last.params["args"][5:] == [
            [[], ["amount_total:sum"], ["partner_id"]],
            {"lazy": False},
        ]

    def test_name_search(self, authed_client, server):
        server.reply([[1, "Acme"]])
        assert authed_client.name_search("res.partner", "ac", limit=5) == [(1, "Acme")]

    def test_fields_get(self, authed_client, server):
        server.reply({"name": {"type": "char", "string": "Name"}})
        fields = authed_client.fields_get("res.partner", attributes=["type", "string"])
        assert fields["name"]["type"] == "char"
        assert server.last.params["args"][-1] == {"attributes": ["type", "string"]}

    def test_validation_happens_before_io(self, authed_client, server):
        with pytest.raises(ValidationError):
            authed_client.search_read("res.partner", fields="name")
        assert server.calls == []

    def test_execute(self, authed_client, server):
        server.reply([1])
        assert authed_client.execute("res.partner", "search", []) == [1]
        assert server.last.params["method"] == "execute"

    def test_call_with_descriptor(self, authed_client, server):
        server.reply([{"id": 1, "create_uid": [2, "Admin"]}])
        assert authed_client.call(orm.GET_METADATA.build("res.partner", [1]))[0]["id"] == 1


class TestNamespaces:

    def test_db_namespace(self, client, server):
        server.reply(True)
        assert client.db.db_exist("prod") is True
        assert server.last.params == {"service": "db", "method": "db_exist", "args": ["prod"]}

    def test_common_version(self, client, server):
        server.reply({"server_version": "16.0", "server_version_info": [16, 0, 0, "final", 0, ""]})
        version = client.version()
        assert isinstance(version, ServerVersion)
        assert version.major == 16

    def test_orm_namespace(self, authed_client, server):
        server.reply([1])
        assert authed_client.orm.exists("res.partner", [1, 99]) == [1]

    def test_get_external_id(self, authed_client, server):
        server.reply({"1": "base.main_partner", "7": "__export__.res_partner_7"})
        assert authed_client.orm.get_external_id("res.partner", [1, 7]) == {
            1: "base.main_partner", 7: "__export__.res_partner_7",
        }
        assert server.last.params["args"][3:] == ["res.partner", "get_external_id", [[1, 7]], {}]

    def test_check_field_access_rights(self, authed_client, server):
        server.reply(["email", "name"])
        result = authed_client.orm.check_field_access_rights("res.partner", "read", ["email", "name"])
        assert result == ["email", "name"]
        assert server.last.params["args"][3:] == [
            "res.partner", "check_field_access_rights", ["read", ["email", "name"]], {},
        ]

    def test_web_namespace(self, client, server):
        server.reply(["prod"])
        assert client.web.database_list() == ["prod"]
        assert server.last.path == "/web/database/list"

    def test_unknown_method(self, client):
        with pytest.raises(AttributeError, match="no method 'nuke'"):
            client.db.nuke

    def test_dir_lists_methods(self, client):
        assert "dump" in dir(client.db)


class TestRaw:

    def test_raw_result_untyped(self, client, server):
        server.reply({"anything": [1, 2]})
        assert client.raw("common", "about", [True]) == {"anything": [1, 2]}
        assert server.last.params == {"service": "common", "method": "about", "args": [True]}

    def test_raw_error_surfaces_unchanged(self, authed_client, server, make_error):
        error = make_error("Odoo Server Error", name="builtins.AttributeError", data_message="No such method")
        server.reply(error=error)
        with pytest.raises(ApiError) as exc_info:
            authed_client.raw("object", "execute_kw", ["testdb", 2, "secret", "res.partner", "frobnicate", [], {}])
        assert exc_info.value.name == "builtins.AttributeError"
        assert exc_info.value.message == "No such method"
        assert exc_info.value.server_message == "Odoo Server Error"
        assert exc_info.value.raw == error

    def test_raw_web(self, client, server):
        server.reply({"server_version": "17.0"})
        assert client.raw_web("/web/webclient/version_info") == {"server_version": "17.0"}
        assert server.last.path == "/web/webclient/version_info"


class TestEnvelopeHandling:

    def test_mismatched_id_rejected(self):
        def wrong_id(path, payload, session_id):
            return encode_response(999, result=True)

        client = OdooClient(wrong_id)
        with pytest.raises(ProtocolError, match="does not match"):
            client.db.db_exist("prod")

    def test_ids_increase(self, client, server):
        server.reply(True).reply(True)
        client.db.db_exist("a")
        client.db.db_exist("b")
        assert [c.identifier for c in server.calls] == [1, 2]

    def test_cookie_rotation_tracked(self, server):
        client = OdooClient(server.handle, auth_style="web")
        client.authenticate_manual("testdb", "admin", 2, "secret", session_id="one")
        server.reply(3, session_id="two")
        client.search_count("res.partner")
        assert client.session.session_id == "two"


class TestLifecycle:

    def test_context_manager_closes(self):
        transport = MagicMock()
        transport.send.return_value = Reply(encode_response(1, result=True))
        with OdooClient(transport) as client:
            client.authenticate_manual("testdb", "admin", 2, "secret")
        transport.close.assert_called_once()
        assert client.state == SessionState.UNAUTHENTICATED

    def test_from_config(self):
        config = OdooRpcConfig(
            url="https://test.odoo.com/",
            database="testdb",
            username="admin",
            password="secret",
            lang="fr_FR",
            tz="Europe/Paris",
        )
        client = OdooClient.from_config(config)
        assert isinstance(client.transport, HttpxTransport)
        assert client.context == {"lang": "fr_FR", "tz": "Europe/Paris"}
        client.close()

    def test_from_config_applies_log_level(self):
        package_logger = logging.getLogger("odoo_rpc")
        previous = package_logger.level
        config = OdooRpcConfig(url="https://test.odoo.com", log_level="debug")
        try:
            OdooClient.from_config(config).close()
            assert package_logger.level == logging.DEBUG
        finally:
            package_logger.setLevel(previous)

    def test_base_client_is_abstract(self):
        with pytest.raises(TypeError):
            _ClientBase(MagicMock())

    def test_authenticate_uses_config_credentials(self, server):
        config = OdooRpcConfig(url="https://test.odoo.com", database="testdb", username="admin", password="secret")
        client = OdooClient(server.handle)
        client._config = config
        server.reply(2)
        client.authenticate()
        assert server.last.params["args"][:3] == ["testdb", "admin", "secret"]

    def test_authenticate_without_credentials(self, client):
        with pytest.raises(ValidationError, match="requires database"):
            client.authenticate()
