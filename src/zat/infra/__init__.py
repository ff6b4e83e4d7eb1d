"""Infrastructure layer — external system integration.

This layer wraps all interaction with the helpdesk REST API, the package
registry and the local filesystem.  Every raw third-party exception must
be caught here and re-raised as a :class:`~zat.exceptions.ZatError`
subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.

The FastAPI dev server (:mod:`zat.infra.server`) is not re-exported so
that importing the layer stays cheap.
"""

from zat.infra.cache import Cache
from zat.infra.http_client import HelpdeskApiClient, build_client
from zat.infra.packager import build_package, clean_packages, read_manifest, validate_app
from zat.infra.registry_client import RegistryClient
from zat.infra.scaffold_client import download_scaffold
from zat.infra.settings_loader import load_settings_file

__all__: list[str] = [
    "Cache",
    "HelpdeskApiClient",
    "RegistryClient",
    "build_client",
    "build_package",
    "clean_packages",
    "download_scaffold",
    "load_settings_file",
    "read_manifest",
    "validate_app",
]
