"""Weekly self-update check against the public package registry.

The decision logic (:func:`should_check`, :func:`is_outdated`) is pure;
:func:`check_for_update` wires it to an injected registry, cache and
status reporter.  A failing registry lookup is logged and skipped — it
must never fail the command that triggered it.
"""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Callable

from packaging.version import InvalidVersion, Version

from zat.core.protocols import CacheStore, VersionRegistry
from zat.exceptions import ZatError

logger = logging.getLogger(__name__)

PACKAGE_NAME: str = "zat"
CACHE_KEY: str = "zat_update_check"

CHECKING_MSG: str = f"Checking for new version of {PACKAGE_NAME}"
OUTDATED_MSG: str = (
    f"Your version of {PACKAGE_NAME} is outdated. "
    f"Update by running: pip install --upgrade {PACKAGE_NAME}"
)


def _parse_date(value: object) -> dt.date | None:
    if not isinstance(value, str):
        return None
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        return None


def should_check(
    last_check: object,
    today: dt.date,
    interval_days: int = 7,
) -> bool:
    """Return ``True`` when no check ran within the last *interval_days*.

    An absent or unparseable *last_check* always triggers a check.
    """
    last = _parse_date(last_check)
    if last is None:
        return True
    return (today - last).days >= interval_days


def is_outdated(current: str, latest: str) -> bool:
    """Return ``True`` when *latest* is a newer release than *current*."""
    try:
        return Version(latest) > Version(current)
    except InvalidVersion:
        logger.debug("Cannot compare versions %r and %r", current, latest)
        return False


def check_for_update(
    registry: VersionRegistry,
    cache: CacheStore,
    current_version: str,
    report: Callable[[str, str], None],
    *,
    today: dt.date | None = None,
    interval_days: int = 7,
) -> bool:
    """Warn when a newer release exists; return whether it does.

    *report* receives ``(status, message)`` pairs where status is
    ``"info"`` or ``"warning"``.
    """
    today = today or dt.date.today()
    if not should_check(cache.fetch(CACHE_KEY), today, interval_days):
        return False

    report("info", CHECKING_MSG)
    try:
        latest = registry.latest_version(PACKAGE_NAME)
    except ZatError as exc:
        logger.warning("Update check skipped: %s", exc)
        return False

    outdated = is_outdated(current_version, latest)
    if outdated:
        report("warning", OUTDATED_MSG)

    cache.save({CACHE_KEY: today.isoformat()})
    return outdated
