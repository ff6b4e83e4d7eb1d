"""Single source of truth for the zat version string."""

from __future__ import annotations

__version__: str = "0.4.0"
