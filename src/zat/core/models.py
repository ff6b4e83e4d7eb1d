"""Domain models for zat.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and small derived properties.  They carry
zero I/O and no dependencies on external packages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

KNOWN_PRODUCTS: tuple[str, ...] = ("support", "chat", "sell")
"""Products an app may declare locations for, in install order."""

DEFAULT_PRODUCT: str = "support"


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Credentials:
    """Resolved API credentials for one account."""

    subdomain: str
    """Subdomain (``acme``) or full URL (``https://help.acme.com``)."""

    username: str
    """Login email, optionally suffixed with ``/token``."""

    password: str = field(repr=False)
    """Password or API token.  Hidden from ``repr``."""

    @property
    def base_url(self) -> str:
        from zat.core.api_connection import full_url

        return full_url(self.subdomain)

    @property
    def auth_header(self) -> dict[str, str]:
        from zat.core.api_connection import basic_auth_header

        return basic_auth_header(self.username, self.password)


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AppParameter:
    """One installation setting declared in the manifest."""

    name: str
    type: str = "text"
    required: bool = False
    secure: bool = False
    default: Any = None


@dataclass(frozen=True, slots=True)
class Manifest:
    """App metadata read from ``manifest.json``."""

    name: str
    """App name shown on the platform; also the default upload name."""

    version: str | None = None
    author: dict[str, Any] = field(default_factory=dict)
    default_locale: str | None = None
    location: Any = None
    """Raw ``location`` value: mapping of product → locations, or a list."""

    parameters: tuple[AppParameter, ...] = ()
    framework_version: str | None = None
    private: bool = True

    @property
    def products(self) -> list[str]:
        """Products the app installs into, derived from ``location``."""
        if isinstance(self.location, dict):
            found = [name for name in KNOWN_PRODUCTS if name in self.location]
            if found:
                return found
        return [DEFAULT_PRODUCT]

    @property
    def parameter_names(self) -> list[str]:
        return [param.name for param in self.parameters]


# ---------------------------------------------------------------------------
# API values
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AppSummary:
    """An app as listed by ``GET api/apps.json``."""

    id: int
    name: str


@dataclass(frozen=True, slots=True)
class JobStatus:
    """Snapshot of an asynchronous build job."""

    job_id: str
    status: str
    """``queued``, ``working``, ``completed`` or ``failed``."""

    app_id: int | None = None
    message: str | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    @property
    def is_failed(self) -> bool:
        return self.status == "failed"

    @property
    def is_finished(self) -> bool:
        return self.is_completed or self.is_failed
