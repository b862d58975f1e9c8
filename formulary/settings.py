"""CLI configuration loaded from FORMULARY_* environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class FormularySettings(BaseSettings):
    """Formulary settings.

    All fields are read from environment variables with the ``FORMULARY_``
    prefix.  For example, ``FORMULARY_LOG_LEVEL=DEBUG`` maps to ``log_level``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FORMULARY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "WARNING"
    """Kept quiet by default so prompts and success messages stay readable."""

    # -- Locations -------------------------------------------------------------
    home: Path = Path.home() / ".rit"
    """Tool home: workspace registry and the ``repos/`` mirror caches."""

    user_home: Path = Path.home()

    # -- Naming ----------------------------------------------------------------
    invocation: str = "rit"
    """First word of every formula command (``rit test unit``)."""

    default_workspace_name: str = "Default"
    default_workspace_dir: str = "ritchie-formulas-local"
    """Directory under ``user_home`` backing the default workspace."""

    # -- Helpers ---------------------------------------------------------------

    @property
    def repos_dir(self) -> Path:
        return self.home / "repos"

    @property
    def registry_file(self) -> Path:
        return self.home / "formula_workspaces.json"

    @property
    def default_workspace_path(self) -> Path:
        return self.user_home / self.default_workspace_dir


@lru_cache(maxsize=1)
def get_settings() -> FormularySettings:
    """Return a cached settings instance.

    Call ``get_settings.cache_clear()`` in tests to force a re-read after
    overriding env vars.
    """
    return FormularySettings()
