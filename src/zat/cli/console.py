"""CLI console and logging helpers with optional Rich support.

This module intentionally avoids module-level imports of Rich so
bootstrap paths (``--help``, ``--version``) remain functional even when
it is not installed.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Any

from zat.exceptions import EnvironmentError

_MARKUP_RE = re.compile(r"\[/?[a-z ]+\]")

STATUS_COLOURS: dict[str, str] = {
    "info": "green",
    "create": "green",
    "update": "green",
    "package": "green",
    "warning": "yellow",
    "error": "red",
}


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console() -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True)


def strip_markup(text: str) -> str:
	"""Drop ``[bold]``-style Rich markup for plain-text output."""
	return _MARKUP_RE.sub("", text)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain stderr print."""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(*(strip_markup(str(obj)) for obj in objects), file=sys.stderr)
			return
		rich_console.print(*objects)


console = _ConsoleProxy()


def say_status(status: str, message: str, colour: str | None = None) -> None:
	"""Print ``<status>  <message>`` with the status right-aligned and coloured."""
	colour = colour or STATUS_COLOURS.get(status, "cyan")
	console.print(f"[bold {colour}]{status:>10}[/bold {colour}]  {message}")


def configure_logging(verbose: bool = False) -> None:
	"""Route ``zat.*`` loggers to stderr.

	Uses ``rich.logging.RichHandler`` when Rich is importable.  Only
	warnings are shown unless *verbose* is set.
	"""
	level = logging.DEBUG if verbose else logging.WARNING
	handler: logging.Handler
	try:
		from rich.logging import RichHandler

		handler = RichHandler(
			console=get_rich_console(),
			show_path=verbose,
			rich_tracebacks=verbose,
		)
		handler.setFormatter(logging.Formatter("%(message)s"))
	except (ModuleNotFoundError, EnvironmentError):
		handler = logging.StreamHandler(sys.stderr)
		handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

	root = logging.getLogger("zat")
	root.handlers.clear()
	root.addHandler(handler)
	root.setLevel(level)
	root.propagate = False
