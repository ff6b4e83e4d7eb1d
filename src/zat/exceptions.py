"""Custom exception hierarchy for zat.

All exceptions that cross layer boundaries must inherit from
:class:`ZatError`.  Raw third-party exceptions (httpx, json, OS errors)
must NEVER propagate beyond the infrastructure layer — they must be
caught and re-raised as a typed subclass defined here.

Hierarchy
---------
ZatError
├── InvalidSubdomainError
├── InvalidEmailError
├── CacheError
├── ConfigFileError
├── ManifestError
├── PackagingError
├── ApiError
│   ├── ApiConnectionError
│   └── ApiRequestError
├── AppNotFoundError
├── DeployFailedError
│   └── DeployTimeoutError
├── RegistryError
└── EnvironmentError
"""

from __future__ import annotations


class ZatError(Exception):
    """Base exception for all zat errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Input validation ------------------------------------------------------

class InvalidSubdomainError(ZatError):
    """Raised when the subdomain is neither a valid subdomain nor a full URL."""


class InvalidEmailError(ZatError):
    """Raised when the username is not an email (or ``email/token``)."""


# --- Local files -----------------------------------------------------------

class CacheError(ZatError):
    """Raised when the ``.zat`` cache file cannot be read or written."""


class ConfigFileError(ZatError):
    """Raised when an app settings file is missing, unreadable or incomplete."""


class ManifestError(ZatError):
    """Raised when ``manifest.json`` is missing or malformed."""


class PackagingError(ZatError):
    """Raised when an app directory cannot be validated or zipped."""


# --- Platform API ----------------------------------------------------------

class ApiError(ZatError):
    """Base class for failures talking to the helpdesk apps API."""


class ApiConnectionError(ApiError):
    """Raised when the API host cannot be reached (DNS, TLS, timeout)."""


class ApiRequestError(ApiError):
    """Raised when the API answers with a non-2xx status code."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code: int | None = status_code


class AppNotFoundError(ZatError):
    """Raised when the target app id cannot be resolved on the account."""


class DeployFailedError(ZatError):
    """Raised when the platform reports the build job as failed."""


class DeployTimeoutError(DeployFailedError):
    """Raised when the build job does not finish within the poll timeout."""


# --- Package registry ------------------------------------------------------

class RegistryError(ZatError):
    """Raised when the package registry lookup fails."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(ZatError):
    """Raised when a required runtime dependency is not available."""


def append_clean_suggestion(hint: str) -> str:
    """Append ``--clean`` guidance to an existing hint text.

    Stale cache entries (a deleted app, another subdomain) are the usual
    cause of lookup failures, so the suggestion is appended only once and
    the original hint is preserved verbatim.
    """
    marker = "Try again with --clean"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            f"{marker} to discard cached values:",
            "    zat update --clean",
        )
    )
