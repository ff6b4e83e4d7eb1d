"""Download the hosted app scaffold used by ``zat new --scaffold``.

Any httpx failure or non-2xx response is re-raised as
:class:`~zat.exceptions.PackagingError`; unpacking is left to
:func:`zat.infra.packager.create_app_skeleton`.
"""

from __future__ import annotations

import logging

import httpx

from zat.config import Settings
from zat.exceptions import PackagingError
from zat.version import __version__

logger = logging.getLogger(__name__)


def download_scaffold(
    settings: Settings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> bytes:
    """Return the bytes of the scaffold zip at ``settings.scaffold_url``."""
    settings = settings or Settings()
    url = settings.scaffold_url
    logger.debug("Downloading scaffold from %s", url)
    try:
        with httpx.Client(
            timeout=httpx.Timeout(settings.http_timeout_seconds),
            follow_redirects=True,
            headers={"User-Agent": f"zat/{__version__}"},
            transport=transport,
        ) as client:
            response = client.get(url)
            response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise PackagingError(
            f"Scaffold download failed with HTTP {exc.response.status_code}: {url}",
            hint="Run 'zat new' without --scaffold to use the bundled template.",
        ) from exc
    except httpx.HTTPError as exc:
        raise PackagingError(
            f"Cannot download scaffold from {url}: {exc}",
            hint="Check your internet connection or set ZAT_SCAFFOLD_URL.",
        ) from exc
    return response.content
