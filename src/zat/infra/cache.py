"""Infrastructure: the ``.zat`` key/value cache.

Two JSON files back the cache:

* the **local** file ``<app path>/.zat`` — read and written by commands;
* the **global** file ``~/.zat`` — read only.  It is either a flat
  mapping or keyed by subdomain with a ``default`` section::

      {"acme": {"username": "dev@acme.com"}, "default": {"password": "..."}}

Rules
-----
* No user-facing output — callers handle messages.
* Raw ``OSError`` / ``json`` errors are re-raised as :class:`CacheError`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from zat.exceptions import CacheError

logger = logging.getLogger(__name__)

CACHE_FILENAME: str = ".zat"


def _read_json(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8") or "{}")
    except (OSError, ValueError) as exc:
        raise CacheError(
            f"Cannot read cache file {path}: {exc}",
            hint=f"Delete {path} or run the command with --clean.",
        ) from exc
    if not isinstance(data, dict):
        raise CacheError(f"Cache file {path} must contain a JSON object.")
    return data


class Cache:
    """Local-then-global key/value store.

    Parameters
    ----------
    app_path:
        App directory holding the local ``.zat`` file.
    global_path:
        Optional per-user cache file consulted after the local one.
    clean:
        When ``True`` the local cache is ignored on read and removed by
        :meth:`clear` (``--clean`` on the command line).
    """

    def __init__(
        self,
        app_path: Path,
        *,
        global_path: Path | None = None,
        clean: bool = False,
    ) -> None:
        self.local_path: Path = Path(app_path) / CACHE_FILENAME
        self.global_path: Path | None = global_path
        self._clean = clean
        self._local: dict[str, Any] | None = None
        self._global: dict[str, Any] | None = None

    # ------------------------------------------------------------------
    # Lazy loading
    # ------------------------------------------------------------------

    @property
    def local_cache(self) -> dict[str, Any]:
        if self._local is None:
            self._local = {} if self._clean else _read_json(self.local_path)
        return self._local

    @property
    def global_cache(self) -> dict[str, Any]:
        if self._global is None:
            self._global = _read_json(self.global_path) if self.global_path else {}
        return self._global

    # ------------------------------------------------------------------
    # CacheStore protocol
    # ------------------------------------------------------------------

    def fetch(self, key: str, subdomain: str | None = None) -> Any:
        """Return *key* from the local cache, then the global one."""
        value = self.local_cache.get(key)
        if value is not None:
            return value

        scoped = self.global_cache.get(subdomain) if subdomain else None
        if isinstance(scoped, dict) and scoped.get(key) is not None:
            return scoped[key]

        default = self.global_cache.get("default")
        if isinstance(default, dict) and default.get(key) is not None:
            return default[key]

        value = self.global_cache.get(key)
        return None if isinstance(value, dict) else value

    def save(self, values: dict[str, Any]) -> None:
        """Merge *values* into the local cache and write it to disk."""
        self.local_cache.update(values)
        try:
            self.local_path.parent.mkdir(parents=True, exist_ok=True)
            self.local_path.write_text(
                json.dumps(self.local_cache, indent=2, sort_keys=True) + "\n",
                encoding="utf-8",
            )
        except OSError as exc:
            raise CacheError(f"Cannot write cache file {self.local_path}: {exc}") from exc
        logger.debug("Saved %s to %s", sorted(values), self.local_path)

    def clear(self) -> None:
        """Remove the local cache file when running with ``--clean``."""
        if not self._clean:
            return
        self._local = {}
        try:
            self.local_path.unlink(missing_ok=True)
        except OSError as exc:
            raise CacheError(f"Cannot remove cache file {self.local_path}: {exc}") from exc
