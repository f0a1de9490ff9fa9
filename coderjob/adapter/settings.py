"""Adapter configuration loaded from CODERJOB_* environment variables."""

from __future__ import annotations

import getpass
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class CoderJobSettings(BaseSettings):
    """Coder job adapter settings.

    All fields are read from environment variables with the ``CODERJOB_``
    prefix.  For example, ``CODERJOB_HOST=https://coder.example.org`` maps to
    ``host``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CODERJOB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"

    # -- Coder API -------------------------------------------------------------
    host: str = "http://localhost:3000"
    """Base URL of the Coder deployment, including the scheme."""

    token: SecretStr = SecretStr("")
    """Session token sent as ``Coder-Session-Token``."""

    service_user: str = "me"
    """Coder member that owns created workspaces."""

    request_timeout: float = 30.0

    # -- Identity --------------------------------------------------------------
    username: str = Field(default_factory=getpass.getuser)
    """Submitting user, prefixed to every workspace name.

    Resolved once when settings are constructed and passed explicitly to the
    submission flow.
    """

    # -- Deletion --------------------------------------------------------------
    deletion_max_attempts: int = Field(default=5, ge=1)
    deletion_timeout_interval_seconds: float = Field(default=10, ge=0)

    # -- Credential storage ----------------------------------------------------
    credential_store: Literal["local"] = "local"
    data_root: str = "./data"
    data_prefix: str | None = None
    """Optional namespace inserted into credential paths (``{data_root}/{data_prefix}/...``)."""


def get_settings() -> CoderJobSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``get_settings.cache_clear()`` in tests to force a
    re-read after overriding env vars.
    """
    return _get_settings_cached()


def _get_settings_cached() -> CoderJobSettings:
    """Inner function wrapped by lru_cache (allows type-safe cache_clear)."""
    return CoderJobSettings()


# Apply lru_cache at runtime so the function is only called once.
from functools import lru_cache  # noqa: E402

_get_settings_cached = lru_cache(maxsize=1)(_get_settings_cached)
