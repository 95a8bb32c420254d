"""Search domain validation, normalization and a small fluent builder.

A domain is a list of ``(field, operator, value)`` conditions and the prefix
logical operators ``&``, ``|`` and ``!``.  Conditions are encoded as ordered
three-element arrays.
"""

from __future__ import annotations

import logging
from typing import Any

from odoo_rpc.errors import ValidationError

logger = logging.getLogger("odoo_rpc.catalog.domain")

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------

KNOWN_OPERATORS: frozenset[str] = frozenset({
    "=", "!=",
    ">", ">=", "<", "<=",
    "like", "not like",
    "ilike", "not ilike",
    "=like", "=ilike",
    "in", "not in",
    "child_of", "parent_of",
    "any", "not any",
    "=?",
})

LOGICAL_OPERATORS: frozenset[str] = frozenset({"&", "|", "!"})

LIST_OPERATORS: frozenset[str] = frozenset({"in", "not in"})

# [1, "=", 1] and [0, "=", 1] are Odoo's constant true/false leaves
_CONSTANT_FIELDS = (0, 1)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def normalize_domain(domain: Any, argument: str = "domain") -> list[Any]:
    """Validate *domain* and return it with every condition as a list.

    Unknown operators are passed through unchanged so that operators added
    by newer servers keep working.
    """
    if domain is None:
        return []
    if not isinstance(domain, (list, tuple)):
        raise ValidationError(
            f"{argument} must be a list of conditions, got {type(domain).__name__}",
            argument,
        )

    normalized: list[Any] = []
    for i, element in enumerate(domain):
        if isinstance(element, str):
            if element not in LOGICAL_OPERATORS:
                raise ValidationError(
                    f"{argument}[{i}]: invalid logical operator {element!r}; "
                    f"expected one of {', '.join(sorted(LOGICAL_OPERATORS))}",
                    argument,
                )
            normalized.append(element)
            continue

        if not isinstance(element, (list, tuple)):
            raise ValidationError(
                f"{argument}[{i}]: expected a (field, operator, value) condition "
                f"or a logical operator, got {element!r}",
                argument,
            )
        if len(element) != 3:
            raise ValidationError(
                f"{argument}[{i}]: a condition must have exactly 3 elements, "
                f"got {len(element)}: {element!r}",
                argument,
            )

        field_name, operator, value = element
        if not _is_constant_leaf(field_name, operator, value):
            if not isinstance(field_name, str) or not field_name:
                raise ValidationError(
                    f"{argument}[{i}]: field name must be a non-empty string, got {field_name!r}",
                    argument,
                )
        if not isinstance(operator, str) or not operator:
            raise ValidationError(
                f"{argument}[{i}]: operator must be a non-empty string, got {operator!r}",
                argument,
            )
        if operator not in KNOWN_OPERATORS:
            logger.debug("Passing through unknown domain operator %r", operator)
        elif operator in LIST_OPERATORS and not isinstance(value, (list, tuple)):
            raise ValidationError(
                f"{argument}[{i}]: operator {operator!r} requires a list value, got {value!r}",
                argument,
            )

        normalized.append([field_name, operator, value])

    _check_prefix_notation(normalized, argument)
    return normalized


def _is_constant_leaf(field_name: Any, operator: Any, value: Any) -> bool:
    if isinstance(field_name, bool) or isinstance(value, bool):
        return False
    return field_name in _CONSTANT_FIELDS and operator == "=" and value == 1


def _check_prefix_notation(domain: list[Any], argument: str) -> None:
    """Reject logical operators that are missing operands.

    Conditions left over after the operators are consumed are joined with an
    implicit ``&`` by the server, so only shortages are errors.
    """
    _count_terms(domain, argument)


def _count_terms(domain: list[Any], argument: str = "domain") -> int:
    count = pos = 0
    while pos < len(domain):
        pos = _consume(domain, pos, argument)
        count += 1
    return count


def _consume(domain: list[Any], pos: int, argument: str) -> int:
    if pos >= len(domain):
        raise ValidationError(
            f"{argument}: a logical operator is missing its operand(s)", argument
        )
    element = domain[pos]
    if isinstance(element, str):
        if element == "!":
            return _consume(domain, pos + 1, argument)
        return _consume(domain, _consume(domain, pos + 1, argument), argument)
    return pos + 1


# ---------------------------------------------------------------------------
# DomainBuilder
# ---------------------------------------------------------------------------

class DomainBuilder:
    """Fluent builder for search domains.

    Example::

        DomainBuilder().equals("active", True).contains("name", "acme").build()
        # [["active", "=", True], ["name", "ilike", "acme"]]
    """

    def __init__(self) -> None:
        self._conditions: list[Any] = []

    def where(self, field: str, operator: str, value: Any) -> DomainBuilder:
        self._conditions.append([field, operator, value])
        return self

    def equals(self, field: str, value: Any) -> DomainBuilder:
        return self.where(field, "=", value)

    def not_equals(self, field: str, value: Any) -> DomainBuilder:
        return self.where(field, "!=", value)

    def contains(self, field: str, value: str) -> DomainBuilder:
        """Case-insensitive ``ilike`` match."""
        return self.where(field, "ilike", value)

    def in_list(self, field: str, values: list) -> DomainBuilder:
        return self.where(field, "in", list(values))

    def between(self, field: str, low: Any, high: Any) -> DomainBuilder:
        return self.where(field, ">=", low).where(field, "<=", high)

    def _as_operand(self) -> list[Any]:
        """The conditions as one term, AND-ing top-level terms explicitly."""
        terms = _count_terms(self._conditions)
        return ["&"] * max(terms - 1, 0) + list(self._conditions)

    @staticmethod
    def or_(*builders: DomainBuilder) -> DomainBuilder:
        """OR several builders together; each builder counts as one operand.

        ``or_(a.equals("x", 1).equals("y", 2), c)`` means ``(x AND y) OR c``.
        """
        operands = [b._as_operand() for b in builders if b._conditions]

        result = DomainBuilder()
        result._conditions = ["|"] * max(len(operands) - 1, 0)
        for operand in operands:
            result._conditions.extend(operand)
        return result

    def build(self) -> list:
        return normalize_domain(self._conditions)
