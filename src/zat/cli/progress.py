"""Rich status display driven by build-job polling.

This module bridges :meth:`DeployService.check_status`'s ``on_poll``
callback with a Rich status spinner.  It is used by the CLI layer — the
core layer only forwards :class:`~zat.core.models.JobStatus` snapshots.

Design
------
* :class:`JobStatusSpinner` manages a Rich ``Status`` context.
* :meth:`__call__` is the callback passed to the deploy service.
* Shutdown-safe: if the spinner is already stopped, calls are
  silently ignored.
"""

from __future__ import annotations

from typing import Any

from zat.cli.console import get_rich_console
from zat.core.models import JobStatus
from zat.exceptions import EnvironmentError


class JobStatusSpinner:
    """Callable poll-hook adapter for Rich.

    Usage::

        with JobStatusSpinner("Deploying app") as spinner:
            service.create(name, zip_path, on_poll=spinner)
    """

    def __init__(self, title: str = "Waiting for the build job") -> None:
        try:
            from rich.status import Status
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "rich is not installed. Install with: pip install rich",
            ) from exc

        self._title = title
        self._status: Any = Status(
            f"[bold blue]{title}…",
            console=get_rich_console(),
            spinner="dots",
        )
        self._started: bool = False
        self.polls: int = 0
        self.last_status: str | None = None

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> JobStatusSpinner:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the Rich spinner."""
        if not self._started:
            self._status.start()
            self._started = True

    def stop(self) -> None:
        """Stop the Rich spinner (idempotent)."""
        if self._started:
            self._status.stop()
            self._started = False

    # ------------------------------------------------------------------
    # Hook callback
    # ------------------------------------------------------------------

    def __call__(self, job: JobStatus) -> None:
        """Poll callback: refresh the spinner text with the job state."""
        if not self._started:
            return
        self.polls += 1
        self.last_status = job.status
        self._status.update(
            f"[bold blue]{self._title}…[/bold blue] "
            f"[dim]job {job.job_id}: {job.status} (poll {self.polls})[/dim]"
        )
