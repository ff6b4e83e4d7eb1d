"""Process exit codes returned by ``zat``.

Every command handler and the :func:`zat.cli.app.cli` boundary return
one of these, so scripts driving ``zat create`` / ``zat update`` in CI
can tell a rejected deploy from a crash.
"""

from __future__ import annotations

SUCCESS: int = 0
"""The command finished (the app was validated, packaged or deployed)."""

GENERAL_ERROR: int = 1
"""A ZatError was reported, e.g. invalid credentials or a failed build job."""

UNEXPECTED_ERROR: int = 2
"""A bug: an exception outside the ZatError hierarchy reached the boundary."""

KEYBOARD_INTERRUPT: int = 130
"""Ctrl+C, including an aborted prompt (128 + SIGINT)."""
