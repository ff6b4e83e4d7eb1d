"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from zat.core.models import AppSummary, JobStatus


class CacheStore(Protocol):
    """Contract for the persisted key/value cache."""

    def fetch(self, key: str, subdomain: str | None = None) -> Any:
        """Return the cached value for *key*, or ``None``."""
        ...  # pragma: no cover

    def save(self, values: dict[str, Any]) -> None:
        """Merge *values* into the cache and persist it."""
        ...  # pragma: no cover


class AppsApi(Protocol):
    """Contract for the helpdesk apps REST API.

    Implementations must map all transport and HTTP failures to
    :class:`~zat.exceptions.ApiError` subclasses.
    """

    def upload(self, zip_path: Path) -> str:
        """Upload a zipped app and return the upload id."""
        ...  # pragma: no cover

    def create_app(self, body: dict[str, Any]) -> str:
        """Start a create job and return its job id."""
        ...  # pragma: no cover

    def update_app(self, app_id: int | str, body: dict[str, Any]) -> str:
        """Start an update job for *app_id* and return its job id."""
        ...  # pragma: no cover

    def job_status(self, job_id: str) -> JobStatus:
        """Fetch the current state of a build job."""
        ...  # pragma: no cover

    def app_exists(self, app_id: int | str) -> bool:
        """Return ``True`` when ``GET`` on the app answers 2xx."""
        ...  # pragma: no cover

    def list_apps(self) -> list[AppSummary]:
        """List the apps owned by the account."""
        ...  # pragma: no cover

    def install_app(self, product: str, body: dict[str, Any]) -> dict[str, Any]:
        """Install an app into *product* and return the installation JSON."""
        ...  # pragma: no cover


class VersionRegistry(Protocol):
    """Contract for the public package registry used by the update check."""

    def latest_version(self, package: str) -> str:
        """Return the newest released version string for *package*."""
        ...  # pragma: no cover
