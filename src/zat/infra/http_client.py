"""httpx-backed implementation of :class:`~zat.core.protocols.AppsApi`.

This module is the **only** place in the codebase that talks to the
helpdesk REST API.  All httpx exceptions and non-2xx responses are
caught here and re-raised as :class:`~zat.exceptions.ApiError`
subclasses — nothing raw escapes the infrastructure boundary.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx

from zat.config import Settings
from zat.core.models import AppSummary, Credentials, JobStatus
from zat.exceptions import ApiConnectionError, ApiRequestError
from zat.version import __version__

logger = logging.getLogger(__name__)

UPLOADS_PATH: str = "api/v2/apps/uploads.json"
APPS_PATH: str = "api/apps.json"
APP_PATH: str = "api/v2/apps/{app_id}.json"
JOB_STATUS_PATH: str = "api/v2/apps/job_statuses/{job_id}"
INSTALLATIONS_PATH: str = "api/{product}/apps/installations.json"


def build_client(
    credentials: Credentials,
    settings: Settings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an ``httpx.Client`` bound to the account's base URL.

    Centralises timeouts and headers so that every request carries the
    Basic-Auth header and the zat User-Agent.
    """
    settings = settings or Settings()
    headers: dict[str, str] = {
        "User-Agent": f"zat/{__version__}",
        "Accept": "application/json",
        **credentials.auth_header,
    }
    return httpx.Client(
        base_url=credentials.base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def _error_detail(response: httpx.Response) -> str | None:
    """Pull a human-readable message out of an API error body."""
    try:
        data = response.json()
    except ValueError:
        text = response.text.strip()
        return text[:200] or None
    if not isinstance(data, dict):
        return None
    for key in ("description", "error", "message", "details"):
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
        if isinstance(value, dict):
            nested = value.get("message") or value.get("title")
            if isinstance(nested, str) and nested:
                return nested
    return None


class HelpdeskApiClient:
    """Concrete :class:`AppsApi` backed by an ``httpx.Client``.

    Usage::

        with HelpdeskApiClient(build_client(credentials)) as api:
            upload_id = api.upload(Path("tmp/app.zip"))

    This class satisfies the :class:`~zat.core.protocols.AppsApi`
    protocol structurally — no explicit inheritance required.
    """

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def __enter__(self) -> HelpdeskApiClient:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s", method, url)
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiConnectionError(
                f"Cannot reach {self._client.base_url}: {exc}",
                hint="Check your subdomain and your internet connection.",
            ) from exc
        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        response = self._send(method, url, **kwargs)
        if response.is_success:
            return response

        detail = _error_detail(response)
        message = f"{method} {url} failed with status {response.status_code}"
        if detail:
            message = f"{message}: {detail}"
        hint = None
        if response.status_code in (401, 403):
            hint = "Check your username and password (or API token)."
        raise ApiRequestError(message, status_code=response.status_code, hint=hint)

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        if not response.content.strip():
            return {}
        try:
            data = response.json()
        except ValueError as exc:
            raise ApiRequestError(
                f"Unexpected non-JSON response from {response.request.url}",
                status_code=response.status_code,
            ) from exc
        return data if isinstance(data, dict) else {}

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def upload(self, zip_path: Path) -> str:
        """Upload *zip_path* as multipart ``uploaded_data``; return its id."""
        try:
            with Path(zip_path).open("rb") as handle:
                response = self._request(
                    "POST",
                    UPLOADS_PATH,
                    files={"uploaded_data": (Path(zip_path).name, handle, "application/zip")},
                )
        except OSError as exc:
            raise ApiRequestError(f"Cannot read package {zip_path}: {exc}") from exc

        upload_id = self._json(response).get("id")
        if upload_id is None:
            raise ApiRequestError("Upload response did not include an id.")
        return str(upload_id)

    def create_app(self, body: dict[str, Any]) -> str:
        response = self._request("POST", APPS_PATH, json=body)
        return self._job_id(response)

    def update_app(self, app_id: int | str, body: dict[str, Any]) -> str:
        response = self._request("PUT", APP_PATH.format(app_id=app_id), json=body)
        return self._job_id(response)

    def job_status(self, job_id: str) -> JobStatus:
        data = self._json(self._request("GET", JOB_STATUS_PATH.format(job_id=job_id)))
        raw_app_id = data.get("app_id")
        return JobStatus(
            job_id=str(data.get("id") or job_id),
            status=str(data.get("status") or "queued"),
            app_id=int(raw_app_id) if raw_app_id is not None else None,
            message=data.get("message"),
        )

    def app_exists(self, app_id: int | str) -> bool:
        response = self._send("GET", APP_PATH.format(app_id=app_id))
        return response.is_success

    def list_apps(self) -> list[AppSummary]:
        data = self._json(self._request("GET", APPS_PATH))
        raw_apps = data.get("apps")
        if not isinstance(raw_apps, list):
            return []
        return [
            AppSummary(id=int(entry["id"]), name=str(entry.get("name", "")))
            for entry in raw_apps
            if isinstance(entry, dict) and entry.get("id") is not None
        ]

    def install_app(self, product: str, body: dict[str, Any]) -> dict[str, Any]:
        response = self._request(
            "POST",
            INSTALLATIONS_PATH.format(product=product),
            json=body,
        )
        return self._json(response)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _job_id(self, response: httpx.Response) -> str:
        job_id = self._json(response).get("job_id")
        if job_id is None:
            raise ApiRequestError(
                "The API did not return a job id for the build.",
                status_code=response.status_code,
            )
        return str(job_id)
