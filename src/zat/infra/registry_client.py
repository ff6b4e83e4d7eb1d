"""Package-registry lookup backing the update check.

Satisfies :class:`~zat.core.protocols.VersionRegistry`.  Any httpx or
decoding failure is re-raised as :class:`~zat.exceptions.RegistryError`.
"""

from __future__ import annotations

import httpx

from zat.config import Settings
from zat.exceptions import RegistryError
from zat.version import __version__


class RegistryClient:
    """Fetches the latest released version from a PyPI-style JSON API."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        settings = settings or Settings()
        self._url_template = settings.registry_url
        self._timeout = httpx.Timeout(settings.http_timeout_seconds)
        self._transport = transport

    def latest_version(self, package: str) -> str:
        url = self._url_template.format(package=package)
        try:
            with httpx.Client(
                timeout=self._timeout,
                follow_redirects=True,
                headers={"User-Agent": f"zat/{__version__}"},
                transport=self._transport,
            ) as client:
                response = client.get(url)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise RegistryError(f"Registry lookup failed: {exc}") from exc
        except ValueError as exc:
            raise RegistryError(f"Registry returned invalid JSON: {exc}") from exc

        info = data.get("info") if isinstance(data, dict) else None
        version = info.get("version") if isinstance(info, dict) else None
        if not isinstance(version, str) or not version:
            raise RegistryError(f"Registry response for {package} has no version.")
        return version
