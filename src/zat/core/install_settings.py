"""Resolve installation settings for the manifest's parameters.

Values come from a settings file when one was given, otherwise from the
parameter defaults and interactive prompts.  Prompts are injected so
the resolution stays pure.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from zat.core.models import AppParameter
from zat.exceptions import ConfigFileError


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def resolve_install_settings(
    parameters: Sequence[AppParameter],
    file_values: dict[str, Any] | None,
    *,
    prompt: Callable[[str, str], str] | None = None,
    prompt_secret: Callable[[str], str] | None = None,
    strict: bool = True,
) -> dict[str, Any]:
    """Return a ``{parameter name: value}`` mapping.

    Parameters
    ----------
    parameters:
        Parameters declared by the manifest.
    file_values:
        Contents of the settings file, or ``None`` when no file was given.
        With a file no prompting happens.
    prompt, prompt_secret:
        Ask for a value (``prompt`` receives the message and the default).
        When ``None`` the default is used as-is.
    strict:
        Raise :class:`ConfigFileError` when a required parameter has no
        value; the dev server passes ``False`` and tolerates gaps.
    """
    settings: dict[str, Any] = {}
    missing: list[str] = []

    for param in parameters:
        if file_values is not None:
            value = file_values.get(param.name, param.default)
        elif param.secure and prompt_secret is not None:
            value = prompt_secret(f"Enter a value for parameter '{param.name}':") or param.default
        elif prompt is not None:
            default = "" if param.default is None else str(param.default)
            value = prompt(f"Enter a value for parameter '{param.name}':", default)
        else:
            value = param.default

        if _is_blank(value):
            if param.required:
                missing.append(param.name)
            continue
        settings[param.name] = value

    if missing and strict:
        raise ConfigFileError(
            "Missing value for required parameter(s): " + ", ".join(missing) + ".",
            hint="Add them to the settings file passed with --config.",
        )
    return settings
