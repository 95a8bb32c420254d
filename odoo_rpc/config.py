"""Configuration management using Pydantic Settings.

Priority: explicit overrides > env vars (``ODOO_*``) > config file > defaults.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode

from odoo_rpc.session import DEFAULT_EXPIRY_CODES, DEFAULT_EXPIRY_NAMES


def _parse_comma_list(v: Any) -> list[str]:
    """Parse comma-separated string into list of strings."""
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    if isinstance(v, (list, tuple, set, frozenset)):
        return list(v)
    return []


def _parse_comma_int_list(v: Any) -> list[int]:
    """Parse comma-separated string into list of ints."""
    if isinstance(v, str):
        return [int(item.strip()) for item in v.split(",") if item.strip()]
    if isinstance(v, (list, tuple, set, frozenset)):
        return [int(i) for i in v]
    return []


class OdooRpcConfig(BaseSettings):
    """Connection settings for :meth:`OdooClient.from_config`."""

    # === Connection ===
    url: str = ""
    database: str = ""
    username: str | None = None
    password: str | None = None
    timeout: float = 30
    verify_ssl: bool = True
    ca_cert: str | None = None

    # === Session ===
    auth_style: Literal["jsonrpc", "web"] = "jsonrpc"
    lang: str | None = None
    tz: str | None = None
    session_expiry_codes: Annotated[list[int], NoDecode] = Field(default_factory=lambda: sorted(DEFAULT_EXPIRY_CODES))
    session_expiry_names: Annotated[list[str], NoDecode] = Field(default_factory=lambda: sorted(DEFAULT_EXPIRY_NAMES))

    # === Logging ===
    log_level: str = "info"

    model_config = {
        "env_prefix": "ODOO_",
        "case_sensitive": False,
        "extra": "ignore",
    }

    # --- Validators for comma-separated list env vars ---

    @field_validator("session_expiry_names", mode="before")
    @classmethod
    def parse_comma_list(cls, v: Any) -> list[str]:
        return _parse_comma_list(v)

    @field_validator("session_expiry_codes", mode="before")
    @classmethod
    def parse_comma_int_list(cls, v: Any) -> list[int]:
        return _parse_comma_int_list(v)

    # --- Startup validation ---

    @model_validator(mode="after")
    def validate_startup(self) -> "OdooRpcConfig":
        errors: list[str] = []

        if self.url:
            url = self.url.rstrip("/")
            self.url = url
            if not url.startswith(("http://", "https://")):
                errors.append(f"url must start with http:// or https://, got: {url}")

        # Credentials are only required once a database is named
        if self.url and self.database:
            if not self.username or self.password is None:
                errors.append("username and password are required when database is set")

        if self.timeout <= 0:
            errors.append(f"timeout must be > 0, got: {self.timeout}")

        if not self.session_expiry_codes and not self.session_expiry_names:
            errors.append(
                "session_expiry_codes and session_expiry_names cannot both be empty"
            )

        if errors:
            raise ValueError(
                "Configuration validation failed:\n  - " + "\n  - ".join(errors)
            )

        return self


def load_config(
    overrides: dict[str, Any] | None = None,
) -> OdooRpcConfig:
    """Load configuration with priority: overrides > env > config file > defaults."""
    overrides = dict(overrides or {})

    config_path = overrides.pop("_config_path", None) or os.environ.get("ODOO_RPC_CONFIG")

    file_values: dict[str, Any] = {}
    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                file_values = json.load(f)
        else:
            raise FileNotFoundError(f"Config file not found: {config_path}")

    merged = {**file_values, **overrides}

    return OdooRpcConfig(**merged)
