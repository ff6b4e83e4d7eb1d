"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* Collaborators (API, cache, prompts, sleep) are injected.
"""

from zat.core.deploy_service import DeployService
from zat.core.models import AppParameter, AppSummary, Credentials, JobStatus, Manifest
from zat.core.protocols import AppsApi, CacheStore, VersionRegistry

__all__: list[str] = [
    "AppParameter",
    "AppSummary",
    "AppsApi",
    "CacheStore",
    "Credentials",
    "DeployService",
    "JobStatus",
    "Manifest",
    "VersionRegistry",
]
