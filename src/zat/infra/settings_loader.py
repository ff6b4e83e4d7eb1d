"""Infrastructure: read app installation settings from a JSON or YAML file.

The file is a flat mapping of parameter name → value.  ``.yml`` /
``.yaml`` files are parsed with PyYAML; everything else as JSON.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from zat.exceptions import ConfigFileError

YAML_SUFFIXES: frozenset[str] = frozenset({".yml", ".yaml"})


def load_settings_file(path: Path) -> dict[str, Any]:
    """Return the settings mapping stored in *path*.

    Raises
    ------
    ConfigFileError
        If the file cannot be read, cannot be parsed, or is not a mapping.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigFileError(f"Cannot read settings file {path}: {exc}") from exc

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text) if text.strip() else {}
    except (yaml.YAMLError, ValueError) as exc:
        raise ConfigFileError(f"Cannot parse settings file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(f"Settings file {path} must contain a mapping of settings.")
    return {str(key): value for key, value in data.items()}


def load_optional_settings(path: Path | None) -> dict[str, Any] | None:
    """Like :func:`load_settings_file` but ``None`` when *path* does not exist."""
    if path is None or not Path(path).is_file():
        return None
    return load_settings_file(path)
