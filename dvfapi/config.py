from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from dvfapi.errors import ConfigurationError

ENDPOINT = "https://api.deversifi.com"
DEFAULT_TIMEOUT = 10.0
# Published service limit. Exceeding it yields HTTP 429; nothing here enforces it.
RATE_LIMIT_PER_SECOND = 10


def validate_base_url(url: str) -> str:
    """Return ``url`` without a trailing slash, or raise ConfigurationError."""
    raw = (url or "").strip()
    try:
        parts = urlsplit(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid base URL {url!r}: {e}") from e
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigurationError(
            f"Invalid base URL {url!r}: expected an absolute http(s) URL"
        )
    if parts.query or parts.fragment:
        raise ConfigurationError(
            f"Invalid base URL {url!r}: query and fragment are not allowed"
        )
    return raw.rstrip("/")


class ClientConfig(BaseModel):
    model_config = {"frozen": True}

    private_key: SecretStr = Field(default=SecretStr(""))
    subaccount: str = ""
    base_url: str = ENDPOINT
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0.0)

    @field_validator("base_url")
    @classmethod
    def check_base_url(cls, v: str) -> str:
        return validate_base_url(v)

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "ClientConfig":
        try:
            return cls(**{k: v for k, v in data.items() if v is not None})
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

    @classmethod
    def from_env(cls, prefix: str = "DVF_", dotenv_path: Optional[str] = None) -> "ClientConfig":
        """Build from ``<prefix>PRIVATE_KEY``, ``SUBACCOUNT``, ``BASE_URL``, ``TIMEOUT``."""
        load_dotenv(dotenv_path)
        data: Dict[str, Any] = {
            "private_key": os.getenv(f"{prefix}PRIVATE_KEY"),
            "subaccount": os.getenv(f"{prefix}SUBACCOUNT"),
            "base_url": os.getenv(f"{prefix}BASE_URL"),
            "timeout": os.getenv(f"{prefix}TIMEOUT"),
        }
        return cls.from_mapping({k: (v.strip() or None) if isinstance(v, str) else v for k, v in data.items()})


def load_config(path: str | Path) -> ClientConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    with open(p, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config {p} must contain a mapping, got {type(data).__name__}")
    return ClientConfig.from_mapping(data)
