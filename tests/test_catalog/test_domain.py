"""Tests for odoo_rpc.catalog.domain: normalization, validation, DomainBuilder."""

import logging

import pytest

from odoo_rpc.catalog.domain import DomainBuilder, normalize_domain
from odoo_rpc.errors import ValidationError


class TestNormalizeDomain:

    def test_none_is_empty(self):
        assert normalize_domain(None) == []

    def test_tuples_become_lists(self):
        assert normalize_domain([("active", "=", True)]) == [["active", "=", True]]

    def test_logical_operators_kept(self):
        domain = ["|", ("state", "=", "draft"), ("state", "=", "sent")]
        assert normalize_domain(domain) == ["|", ["state", "=", "draft"], ["state", "=", "sent"]]

    def test_implicit_and(self):
        domain = [("a", "=", 1), ("b", "=", 2), ("c", "=", 3)]
        assert len(normalize_domain(domain)) == 3

    def test_constant_leaves(self):
        assert normalize_domain([(1, "=", 1)]) == [[1, "=", 1]]
        assert normalize_domain([(0, "=", 1)]) == [[0, "=", 1]]

    def test_list_values(self):
        domain = [("id", "in", [1, 2]), ("tag_ids", "not in", (3,))]
        assert normalize_domain(domain) == [["id", "in", [1, 2]], ["tag_ids", "not in", (3,)]]

    def test_nested_domain_value(self):
        domain = [("child_ids", "any", [("active", "=", True)])]
        assert normalize_domain(domain) == [["child_ids", "any", [("active", "=", True)]]]

    def test_mapping_value(self):
        assert normalize_domain([("name", "=", {"en_US": "x"})]) == [["name", "=", {"en_US": "x"}]]

    def test_integer_field_outside_constant_leaf(self):
        with pytest.raises(ValidationError, match="field name"):
            normalize_domain([(1, "in", [1])])

    def test_unknown_operator_passed_through(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="odoo_rpc.catalog.domain"):
            result = normalize_domain([("name", "=similar", "x")])
        assert result == [["name", "=similar", "x"]]
        assert "=similar" in caplog.text

    def test_not_a_list(self):
        with pytest.raises(ValidationError, match="list of conditions") as exc_info:
            normalize_domain("active = True")
        assert exc_info.value.argument == "domain"

    def test_invalid_logical_operator(self):
        with pytest.raises(ValidationError, match="invalid logical operator"):
            normalize_domain(["^", ("a", "=", 1), ("b", "=", 2)])

    def test_wrong_arity(self):
        with pytest.raises(ValidationError, match="exactly 3 elements"):
            normalize_domain([("active", "=")])

    def test_empty_field_name(self):
        with pytest.raises(ValidationError, match="field name"):
            normalize_domain([("", "=", 1)])

    def test_in_requires_list(self):
        with pytest.raises(ValidationError, match="requires a list"):
            normalize_domain([("id", "in", 5)])

    def test_missing_operand(self):
        with pytest.raises(ValidationError, match="missing its operand"):
            normalize_domain(["|", ("a", "=", 1)])

    def test_not_operator(self):
        assert normalize_domain(["!", ("a", "=", 1)]) == ["!", ["a", "=", 1]]

    def test_argument_name_in_error(self):
        with pytest.raises(ValidationError, match="^args"):
            normalize_domain(42, "args")


class TestDomainBuilder:

    def test_equals(self):
        assert DomainBuilder().equals("state", "draft").build() == [["state", "=", "draft"]]

    def test_chaining(self):
        d = DomainBuilder().equals("active", True).contains("name", "acme").build()
        assert d == [["active", "=", True], ["name", "ilike", "acme"]]

    def test_in_list(self):
        assert DomainBuilder().in_list("id", (1, 2)).build() == [["id", "in", [1, 2]]]

    def test_between(self):
        d = DomainBuilder().between("date", "2025-01-01", "2025-12-31").build()
        assert d == [["date", ">=", "2025-01-01"], ["date", "<=", "2025-12-31"]]

    def test_or(self):
        a = DomainBuilder().equals("state", "draft")
        b = DomainBuilder().equals("state", "sent")
        c = DomainBuilder().equals("state", "sale")
        d = DomainBuilder.or_(a, b, c).build()
        assert d[:2] == ["|", "|"]
        assert len(d) == 5

    def test_or_keeps_builder_conditions_together(self):
        both = DomainBuilder().equals("state", "draft").equals("active", True)
        other = DomainBuilder().equals("state", "sale")
        d = DomainBuilder.or_(both, other).build()
        assert d == [
            "|",
            "&", ["state", "=", "draft"], ["active", "=", True],
            ["state", "=", "sale"],
        ]

    def test_nested_or(self):
        a = DomainBuilder().equals("a", 1)
        b = DomainBuilder().equals("b", 2)
        c = DomainBuilder().equals("c", 3)
        d = DomainBuilder.or_(DomainBuilder.or_(a, b), c).build()
        assert d == ["|", "|", ["a", "=", 1], ["b", "=", 2], ["c", "=", 3]]

    def test_or_with_in_list(self):
        a = DomainBuilder().in_list("id", [1, 2])
        b = DomainBuilder().equals("name", "Acme")
        d = DomainBuilder.or_(a, b).build()
        assert d == ["|", ["id", "in", [1, 2]], ["name", "=", "Acme"]]

    def test_or_skips_empty_builders(self):
        a = DomainBuilder().equals("a", 1)
        assert DomainBuilder.or_(a, DomainBuilder()).build() == [["a", "=", 1]]
