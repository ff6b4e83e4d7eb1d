"""Runtime settings for zat.

Values are read from ``ZAT_*`` environment variables (or a ``.env``
file in the working directory) via pydantic-settings, so the CLI and the
infra adapters share one typed configuration contract.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_global_cache_path() -> Path:
    """Location of the read-only, per-user cache (``~/.zat``)."""
    return Path.home() / ".zat"


class Settings(BaseSettings):
    """Central zat configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ZAT_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    subdomain: str | None = Field(
        default=None,
        description="Account subdomain or full URL used when no flag is given.",
    )
    username: str | None = Field(
        default=None,
        description="Login email (optionally suffixed with /token).",
    )
    password: str | None = Field(
        default=None,
        description="Password or API token.",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout per API request (seconds).",
    )
    poll_interval_seconds: float = Field(
        default=3.0,
        gt=0,
        description="Delay between job-status polls (seconds).",
    )
    poll_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Give up waiting for a build job after this many seconds.",
    )

    registry_url: str = Field(
        default="https://pypi.org/pypi/{package}/json",
        min_length=8,
        description="Package registry JSON endpoint used by the update check.",
    )
    scaffold_url: str = Field(
        default="https://github.com/zendesk/app_scaffold/archive/master.zip",
        min_length=8,
        description="Zip archive unpacked by `zat new --scaffold`.",
    )
    update_check_interval_days: int = Field(
        default=7,
        ge=0,
        description="Days between two update checks (0 checks every run).",
    )

    global_cache_path: Path = Field(
        default_factory=default_global_cache_path,
        description="Per-user cache consulted after the app-local .zat file.",
    )
