"""Core deploy service — orchestrates upload, build jobs and installs.

The service depends on an :class:`~zat.core.protocols.AppsApi` and a
:class:`~zat.core.protocols.CacheStore` injected at construction time,
keeping the core free of any HTTP or filesystem imports.  The sleep
function is injected as well so polling is deterministic under test.

Guarantees
----------
* Pure orchestration — no ``print()``, no direct I/O.
* Only :class:`~zat.exceptions.ZatError` subclasses escape.
* The cached ``app_id`` is updated only after a job completes.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from zat.core.models import JobStatus
from zat.core.protocols import AppsApi, CacheStore
from zat.exceptions import (
    AppNotFoundError,
    DeployFailedError,
    DeployTimeoutError,
    ZatError,
    append_clean_suggestion,
)

logger = logging.getLogger(__name__)

APP_NOT_FOUND_MSG: str = (
    "App not found. "
    "Please verify that your credentials, subdomain, and app name are correct."
)
APP_ID_NOT_FOUND_MSG: str = (
    "App id not found\n"
    "Please try running command with --clean or check your internet connection."
)


class DeployService:
    """Drives the create / update / install pipeline.

    Parameters
    ----------
    api:
        Any object satisfying the :class:`AppsApi` protocol.
    cache:
        Any object satisfying the :class:`CacheStore` protocol.
    sleep:
        Called between job-status polls with the delay in seconds.
    poll_interval:
        Seconds between two job-status requests.
    poll_timeout:
        Total seconds to wait for a job before giving up.
    """

    def __init__(
        self,
        api: AppsApi,
        cache: CacheStore,
        *,
        sleep: Callable[[float], None] = time.sleep,
        poll_interval: float = 3.0,
        poll_timeout: float = 300.0,
    ) -> None:
        self._api: AppsApi = api
        self._cache: CacheStore = cache
        self._sleep = sleep
        self._poll_interval = poll_interval
        self._poll_timeout = poll_timeout

    # ------------------------------------------------------------------
    # Upload / build jobs
    # ------------------------------------------------------------------

    def upload(self, zip_path: Path) -> str:
        """Upload *zip_path* and return the platform's upload id."""
        logger.debug("Uploading %s", zip_path)
        return str(self._guard(self._api.upload, zip_path))

    def deploy_app(
        self,
        zip_path: Path,
        body: dict[str, Any],
        *,
        app_id: int | str | None = None,
        on_poll: Callable[[JobStatus], None] | None = None,
    ) -> int:
        """Upload the package, start a create (or update) job and wait for it.

        A create job is started when *app_id* is ``None``; otherwise the
        existing app is updated.  Returns the app id reported by the
        completed job.
        """
        payload = {**body, "upload_id": self.upload(zip_path)}
        if app_id is None:
            job_id = self._guard(self._api.create_app, payload)
        else:
            job_id = self._guard(self._api.update_app, app_id, payload)
        return self.check_status(str(job_id), on_poll=on_poll)

    def check_status(
        self,
        job_id: str,
        *,
        on_poll: Callable[[JobStatus], None] | None = None,
    ) -> int:
        """Poll *job_id* until it completes or fails.

        Raises
        ------
        DeployFailedError
            When the job reports ``failed``.
        DeployTimeoutError
            When the job is still running after ``poll_timeout`` seconds.
        """
        waited = 0.0
        while True:
            status: JobStatus = self._guard(self._api.job_status, job_id)
            logger.debug("Job %s is %s", job_id, status.status)
            if on_poll is not None:
                on_poll(status)

            if status.is_completed:
                if status.app_id is None:
                    raise DeployFailedError(
                        f"Job {job_id} completed without an app id.",
                    )
                self._cache.save({"app_id": status.app_id})
                return status.app_id

            if status.is_failed:
                raise DeployFailedError(
                    status.message or f"Job {job_id} failed.",
                    hint="Run 'zat validate' to check the package locally.",
                )

            if waited >= self._poll_timeout:
                raise DeployTimeoutError(
                    f"Job {job_id} did not finish within "
                    f"{self._poll_timeout:g} seconds (last status: {status.status}).",
                )
            self._sleep(self._poll_interval)
            waited += self._poll_interval

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create(
        self,
        app_name: str,
        zip_path: Path,
        *,
        on_poll: Callable[[JobStatus], None] | None = None,
    ) -> int:
        return self.deploy_app(zip_path, {"name": app_name}, on_poll=on_poll)

    def update(
        self,
        app_id: int | str,
        zip_path: Path,
        *,
        on_poll: Callable[[JobStatus], None] | None = None,
    ) -> int:
        return self.deploy_app(zip_path, {}, app_id=app_id, on_poll=on_poll)

    def install(
        self,
        app_id: int | str | None,
        app_name: str,
        settings: dict[str, Any],
        products: list[str],
    ) -> list[dict[str, Any]]:
        """Install the app into every product it declares."""
        body = {"app_id": app_id, "settings": {"name": app_name, **settings}}
        return [
            self._guard(self._api.install_app, product, body)
            for product in products
        ]

    # ------------------------------------------------------------------
    # App id resolution
    # ------------------------------------------------------------------

    def find_app_id(self, app_name: str) -> int:
        """Look up an app by exact name and cache its id.

        Raises
        ------
        AppNotFoundError
            If no app on the account has that name.
        """
        apps = self._guard(self._api.list_apps)
        match = next((app for app in apps if app.name == app_name), None)
        if match is None:
            raise AppNotFoundError(APP_NOT_FOUND_MSG)
        self._cache.save({"app_id": match.id})
        return match.id

    def resolve_app_id(self, ask_app_name: Callable[[], str]) -> int:
        """Return the cached app id, or find it by a prompted name.

        The id must be numeric and answer ``GET`` with 2xx, otherwise
        :class:`AppNotFoundError` is raised and nothing is deployed.
        """
        cached = self._cache.fetch("app_id")
        if cached is None:
            logger.info("App id is missing, searching by name")
            app_id: Any = self.find_app_id(ask_app_name())
        else:
            app_id = cached

        if not str(app_id).isdigit() or not self._guard(self._api.app_exists, app_id):
            raise AppNotFoundError(
                APP_ID_NOT_FOUND_MSG,
                hint=append_clean_suggestion(f"Cached app id: {app_id}"),
            )
        return int(app_id)

    # ------------------------------------------------------------------
    # Safe boundary
    # ------------------------------------------------------------------

    @staticmethod
    def _guard(func: Callable[..., Any], *args: Any) -> Any:
        """Call an API method and ensure only our exceptions escape."""
        try:
            return func(*args)
        except ZatError:
            raise
        except Exception as exc:
            raise DeployFailedError(
                f"Unexpected API error: {exc}",
            ) from exc
