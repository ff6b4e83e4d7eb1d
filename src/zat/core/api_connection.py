"""Subdomain/URL validation and API credential building.

Every API command funnels through :func:`prepare_api_auth`, which
resolves the account subdomain, username and password from explicit
values, the cache, or interactive prompts, validates them against fixed
patterns and returns an immutable :class:`~zat.core.models.Credentials`.

Guarantees
----------
* No network access, no ``print()``.
* Prompts and the cache are injected, so every path is testable.
* The password is never written to the cache.
"""

from __future__ import annotations

import base64
import re
from collections.abc import Callable

from zat.core.models import Credentials
from zat.core.protocols import CacheStore
from zat.exceptions import InvalidEmailError, InvalidSubdomainError

DEFAULT_URL_TEMPLATE: str = "https://%s.zendesk.com/"
"""Base URL for a plain subdomain; ``%s`` is replaced by the subdomain."""

SUBDOMAIN_VALIDATION_PATTERN: re.Pattern[str] = re.compile(
    r"^[a-z0-9][a-z0-9\-]+[a-z0-9]$",
    re.IGNORECASE,
)

URL_VALIDATION_PATTERN: re.Pattern[str] = re.compile(
    r"^(https?)://[a-z0-9]+(([.]|[-]{1,2})[a-z0-9]+)*"
    r"\.([a-z]{2,16}|[0-9]{1,3})"
    r"((:[0-9]{1,5})?(/?|/.*))?$",
    re.IGNORECASE,
)
"""Full account URL, including host-mapped domains (``https://help.acme.com``)."""

EMAIL_VALIDATION_PATTERN: re.Pattern[str] = re.compile(
    r"^[^@\s]+@((?:[-a-z0-9]+\.)+[a-z]{2,})(/token)?$",
    re.IGNORECASE,
)

URL_ERROR_MSG: str = (
    "Invalid subdomain or URL. Enter your account subdomain "
    "(e.g. 'acme' for acme.zendesk.com) or the full URL including "
    "the protocol (e.g. 'https://help.acme.com')."
)
EMAIL_ERROR_MSG: str = (
    "Invalid email address. Enter the email you sign in with, "
    "or 'email/token' when authenticating with an API token."
)


# ---------------------------------------------------------------------------
# Pattern checks
# ---------------------------------------------------------------------------

def valid_subdomain(value: str) -> bool:
    return SUBDOMAIN_VALIDATION_PATTERN.match(value) is not None


def valid_full_url(value: str) -> bool:
    return URL_VALIDATION_PATTERN.match(value) is not None


def valid_email(value: str) -> bool:
    return EMAIL_VALIDATION_PATTERN.match(value) is not None


# ---------------------------------------------------------------------------
# URL / header construction (pure)
# ---------------------------------------------------------------------------

def full_url(subdomain: str) -> str:
    """Return the API base URL for *subdomain*, always ending in ``/``.

    A value that already matches :data:`URL_VALIDATION_PATTERN` is used
    verbatim; anything else is treated as a plain subdomain.
    """
    if valid_full_url(subdomain):
        return subdomain if subdomain.endswith("/") else f"{subdomain}/"
    return DEFAULT_URL_TEMPLATE % subdomain


def basic_auth_header(username: str, password: str) -> dict[str, str]:
    """Build the HTTP Basic ``Authorization`` header."""
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return {"Authorization": f"Basic {token}"}


# ---------------------------------------------------------------------------
# Credential resolution
# ---------------------------------------------------------------------------

def prepare_api_auth(
    cache: CacheStore,
    prompt: Callable[[str], str],
    prompt_password: Callable[[str], str],
    *,
    subdomain: str | None = None,
    username: str | None = None,
    password: str | None = None,
) -> Credentials:
    """Resolve, validate and cache API credentials.

    Each value is taken from the explicit argument, then the cache, then
    an interactive prompt.  Validation happens as soon as a value is
    known, so a bad subdomain fails before the user is asked for a
    username.

    Raises
    ------
    InvalidSubdomainError
        If the subdomain is neither a subdomain nor a full URL.
    InvalidEmailError
        If the username is not an email address.
    """
    resolved_subdomain = (
        subdomain
        or cache.fetch("subdomain")
        or prompt("Enter your account subdomain or full URL:")
    ).strip()
    if not (valid_subdomain(resolved_subdomain) or valid_full_url(resolved_subdomain)):
        raise InvalidSubdomainError(URL_ERROR_MSG)

    resolved_username = (
        username
        or cache.fetch("username", resolved_subdomain)
        or prompt("Enter your username:")
    ).strip()
    if not valid_email(resolved_username):
        raise InvalidEmailError(EMAIL_ERROR_MSG)

    resolved_password = (
        password
        or cache.fetch("password", resolved_subdomain)
        or prompt_password("Enter your password:")
    )

    cache.save({"subdomain": resolved_subdomain, "username": resolved_username})

    return Credentials(
        subdomain=resolved_subdomain,
        username=resolved_username,
        password=resolved_password,
    )
