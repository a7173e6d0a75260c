"""Settings for implicit timers.

Loaded from ``WALKTIMERS_*`` environment variables (or a ``.env`` file)
using Pydantic settings.
"""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TimerSettings(BaseSettings):
    """Implicit-timer configuration."""

    # Master switch; when off, walk processing makes no store calls at all.
    implicit_timers: bool = True

    # How the engine spells pattern variables, e.g. "?delay".
    variable_prefix: str = "?"

    model_config = SettingsConfigDict(
        env_prefix="WALKTIMERS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("variable_prefix")
    @classmethod
    def _prefix_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("variable_prefix must not be empty")
        return v
