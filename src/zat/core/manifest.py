"""Manifest parsing and validation (pure).

Converts the decoded ``manifest.json`` mapping into a
:class:`~zat.core.models.Manifest` and reports structural problems.
Reading the file itself is the job of :mod:`zat.infra.packager`.
"""

from __future__ import annotations

from typing import Any

from zat.core.models import KNOWN_PRODUCTS, AppParameter, Manifest
from zat.exceptions import ManifestError


def _parse_parameter(raw: dict[str, Any]) -> AppParameter:
    return AppParameter(
        name=str(raw.get("name") or ""),
        type=str(raw.get("type") or "text"),
        required=bool(raw.get("required", False)),
        secure=bool(raw.get("secure", False)),
        default=raw.get("default"),
    )


def parse_manifest(data: object) -> Manifest:
    """Build a :class:`Manifest` from decoded JSON.

    Raises
    ------
    ManifestError
        If *data* is not an object, has no ``name``, or ``parameters``
        is not a list of objects.
    """
    if not isinstance(data, dict):
        raise ManifestError("manifest.json must contain a JSON object.")

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ManifestError(
            "manifest.json has no app name.",
            hint='Add a "name" field to manifest.json.',
        )

    raw_params = data.get("parameters") or []
    if not isinstance(raw_params, list) or not all(
        isinstance(entry, dict) for entry in raw_params
    ):
        raise ManifestError('"parameters" in manifest.json must be a list of objects.')

    author = data.get("author")
    return Manifest(
        name=name.strip(),
        version=str(data["version"]) if data.get("version") is not None else None,
        author=author if isinstance(author, dict) else {},
        default_locale=data.get("defaultLocale"),
        location=data.get("location"),
        parameters=tuple(_parse_parameter(entry) for entry in raw_params),
        framework_version=data.get("frameworkVersion"),
        private=bool(data.get("private", True)),
    )


def validate_manifest(manifest: Manifest) -> list[str]:
    """Return human-readable problems found in *manifest* (empty when valid)."""
    problems: list[str] = []

    if not manifest.author.get("name"):
        problems.append("Missing author name.")
    if not manifest.default_locale:
        problems.append("Missing defaultLocale.")

    seen: set[str] = set()
    for param in manifest.parameters:
        if not param.name:
            problems.append("A parameter is missing its name.")
            continue
        if param.name in seen:
            problems.append(f"Duplicate parameter name: {param.name}.")
        seen.add(param.name)

    if isinstance(manifest.location, dict):
        for product in manifest.location:
            if product not in KNOWN_PRODUCTS:
                problems.append(f"Unknown product location: {product}.")

    return problems


def asset_paths(manifest: Manifest) -> list[str]:
    """Collect relative asset paths referenced by the manifest's locations.

    Only relative URLs are returned; absolute ``http(s)://`` locations
    are hosted elsewhere and cannot be checked locally.
    """
    paths: list[str] = []

    def _walk(node: object) -> None:
        if isinstance(node, dict):
            for value in node.values():
                _walk(value)
        elif isinstance(node, list):
            for value in node:
                _walk(value)
        elif isinstance(node, str) and "." in node:
            if not node.startswith(("http://", "https://", "_legacy")):
                paths.append(node)

    _walk(manifest.location)
    return paths
