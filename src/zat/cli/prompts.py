"""Interactive prompts for the CLI layer.

Thin wrappers around questionary used to ask for the subdomain,
credentials, app names and installation settings.  questionary is
imported lazily so non-interactive commands work without it.
"""

from __future__ import annotations

from typing import Any

from zat.exceptions import EnvironmentError


def _import_questionary() -> Any:
    """Import questionary lazily for interactive input."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def _answered(answer: str | None) -> str:
    # questionary returns None when the prompt is aborted with Ctrl+C.
    if answer is None:
        raise KeyboardInterrupt
    return answer


def get_value_from_stdin(message: str, default: str = "") -> str:
    """Ask for a single line of text; an empty answer is re-asked."""
    questionary = _import_questionary()
    answer: str | None = questionary.text(
        message,
        default=default,
        validate=lambda text: bool(text.strip()) or "A value is required.",
    ).ask()
    return _answered(answer).strip()


def get_optional_value(message: str, default: str = "") -> str:
    """Ask for a line of text that may be left empty."""
    questionary = _import_questionary()
    return _answered(questionary.text(message, default=default).ask()).strip()


def get_password_from_stdin(message: str) -> str:
    """Ask for a secret without echoing it."""
    questionary = _import_questionary()
    return _answered(questionary.password(message).ask())
