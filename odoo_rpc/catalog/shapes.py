"""Argument checks and response shapes used by the method descriptor tables.

Argument checks take ``(value, name)`` and return the value to put on the
wire, raising :class:`ValidationError` before any I/O.  Response shapes take
the decoded ``result`` and return a typed value, raising
:class:`ProtocolError` when the server answered with something else.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from odoo_rpc.catalog.domain import normalize_domain
from odoo_rpc.errors import ProtocolError, ValidationError

MODEL_NAME_RE = re.compile(r"^[a-z_][a-z0-9_]*(\.[a-z0-9_]+)*$")
METHOD_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

ACCESS_OPERATIONS = ("create", "read", "write", "unlink")


# ---------------------------------------------------------------------------
# Argument checks
# ---------------------------------------------------------------------------

def text(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string, got {type(value).__name__}", name)
    return value


def nonempty_text(value: Any, name: str) -> str:
    value = text(value, name)
    if not value.strip():
        raise ValidationError(f"{name} must not be empty", name)
    return value


database = nonempty_text
credential = text


def model_name(value: Any, name: str) -> str:
    value = text(value, name)
    if not MODEL_NAME_RE.match(value):
        raise ValidationError(
            f"{name} {value!r} is not a valid model name (e.g. 'res.partner')", name
        )
    return value


def method_name(value: Any, name: str) -> str:
    value = text(value, name)
    if not METHOD_NAME_RE.match(value):
        raise ValidationError(f"{name} {value!r} is not a valid method name", name)
    return value


def integer(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}", name)
    return value


def non_negative(value: Any, name: str) -> int:
    value = integer(value, name)
    if value < 0:
        raise ValidationError(f"{name} must be >= 0, got {value}", name)
    return value


def boolean(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be a boolean, got {value!r}", name)
    return value


def record_id(value: Any, name: str) -> int:
    value = integer(value, name)
    if value <= 0:
        raise ValidationError(f"{name} must be a positive record id, got {value}", name)
    return value


def id_list(value: Any, name: str) -> list[int] | int:
    """A single id or a list of ids (Odoo accepts both for recordset methods)."""
    if isinstance(value, int) and not isinstance(value, bool):
        return record_id(value, name)
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{name} must be an id or a list of ids, got {value!r}", name)
    return [record_id(v, f"{name}[{i}]") for i, v in enumerate(value)]


def string_list(value: Any, name: str) -> list[str]:
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{name} must be a list of strings, got {value!r}", name)
    return [text(v, f"{name}[{i}]") for i, v in enumerate(value)]


def mapping(value: Any, name: str) -> dict[str, Any]:
    if not isinstance(value, Mapping):
        raise ValidationError(f"{name} must be a mapping, got {type(value).__name__}", name)
    for key in value:
        if not isinstance(key, str):
            raise ValidationError(f"{name} keys must be strings, got {key!r}", name)
    return dict(value)


def create_values(value: Any, name: str) -> dict[str, Any] | list[dict[str, Any]]:
    """One value mapping, or a list of them for batch creation."""
    if isinstance(value, (list, tuple)):
        return [mapping(v, f"{name}[{i}]") for i, v in enumerate(value)]
    return mapping(value, name)


def sequence(value: Any, name: str) -> list[Any]:
    """A positional-argument list; may be empty but must be present."""
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{name} must be a list, got {type(value).__name__}", name)
    return list(value)


def domain(value: Any, name: str) -> list[Any]:
    return normalize_domain(value, name)


def anything(value: Any, name: str) -> Any:
    return value


def one_of(*choices: str) -> Callable[[Any, str], str]:
    def check(value: Any, name: str) -> str:
        if value not in choices:
            raise ValidationError(
                f"{name} must be one of {', '.join(choices)}, got {value!r}", name
            )
        return value
    return check


access_operation = one_of(*ACCESS_OPERATIONS)


# ---------------------------------------------------------------------------
# Response shapes
# ---------------------------------------------------------------------------

def _mismatch(expected: str, result: Any) -> ProtocolError:
    return ProtocolError(f"Expected {expected} in result, got {type(result).__name__}: {result!r}")


def any_result(result: Any) -> Any:
    return result


def null_result(result: Any) -> None:
    if result not in (None, False, True):
        raise _mismatch("null", result)
    return None


def bool_result(result: Any) -> bool:
    if not isinstance(result, bool):
        raise _mismatch("a boolean", result)
    return result


def int_result(result: Any) -> int:
    if isinstance(result, bool) or not isinstance(result, int):
        raise _mismatch("an integer", result)
    return result


def uid_result(result: Any) -> int | None:
    """``common.login``/``authenticate`` answer a uid, or ``False`` on bad credentials."""
    if result is False or result is None:
        return None
    return int_result(result)


def str_result(result: Any) -> str:
    if not isinstance(result, str):
        raise _mismatch("a string", result)
    return result


def str_list_result(result: Any) -> list[str]:
    if not isinstance(result, list) or not all(isinstance(r, str) for r in result):
        raise _mismatch("a list of strings", result)
    return result


def optional_str_list_result(result: Any) -> list[str] | None:
    if result is None:
        return None
    return str_list_result(result)


def ids_result(result: Any) -> list[int]:
    if not isinstance(result, list):
        raise _mismatch("a list of ids", result)
    return [int_result(r) for r in result]


def id_or_ids_result(result: Any) -> int | list[int]:
    """``create`` answers one id, or a list of ids for batch creation."""
    if isinstance(result, list):
        return ids_result(result)
    return int_result(result)


def mapping_result(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        raise _mismatch("an object", result)
    return result


def records_result(result: Any) -> list[dict[str, Any]]:
    """A list of records, each a free-form field mapping."""
    if not isinstance(result, list) or not all(isinstance(r, dict) for r in result):
        raise _mismatch("a list of records", result)
    return result


def pair_result(result: Any) -> tuple[Any, str]:
    if not isinstance(result, list) or len(result) != 2:
        raise _mismatch("an (id, name) pair", result)
    return result[0], result[1]


def pairs_result(result: Any) -> list[tuple[Any, str]]:
    if not isinstance(result, list):
        raise _mismatch("a list of pairs", result)
    return [pair_result(r) for r in result]


def external_ids_result(result: Any) -> dict[int, str | bool]:
    """``{"1": "base.main_partner"}`` with record ids as integer keys."""
    result = mapping_result(result)
    try:
        return {int(k): v for k, v in result.items()}
    except ValueError as exc:
        raise _mismatch("a mapping keyed by record id", result) from exc


def about_result(result: Any) -> str | tuple[str, str]:
    if isinstance(result, str):
        return result
    return pair_result(result)


@dataclass(frozen=True)
class ServerVersion:
    """Server version as reported by ``common.version``."""

    server_version: str
    major: int
    minor: int
    micro: int = 0
    level: str = "final"
    serial: int = 0
    edition: str = "community"
    server_serie: str = ""
    protocol_version: int = 1

    def __str__(self) -> str:
        return self.server_version or f"{self.major}.{self.minor}"


def version_result(result: Any) -> ServerVersion:
    result = mapping_result(result)
    info = result.get("server_version_info")
    if not isinstance(info, list) or len(info) < 2:
        raise _mismatch("server_version_info", info)
    # saas versions report major as e.g. "saas~17"
    major = info[0]
    if isinstance(major, str):
        major = int(re.sub(r"\D", "", major) or 0)
    edition = "enterprise" if len(info) > 5 and info[5] == "e" else "community"
    return ServerVersion(
        server_version=result.get("server_version", ""),
        major=major,
        minor=info[1] if isinstance(info[1], int) else 0,
        micro=info[2] if len(info) > 2 and isinstance(info[2], int) else 0,
        level=info[3] if len(info) > 3 else "final",
        serial=info[4] if len(info) > 4 and isinstance(info[4], int) else 0,
        edition=edition,
        server_serie=result.get("server_serie", ""),
        protocol_version=result.get("protocol_version", 1),
    )
