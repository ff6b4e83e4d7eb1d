"""Infrastructure: app directory validation, zipping and scaffolding.

Rules
-----
* Only this module reads ``manifest.json`` from disk.
* Raw ``OSError`` / ``zipfile`` / ``json`` errors are re-raised as
  :class:`~zat.exceptions.PackagingError` or
  :class:`~zat.exceptions.ManifestError`.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import datetime as dt
import fnmatch
import io
import json
import logging
import zipfile
from importlib import resources
from pathlib import Path, PurePosixPath
from string import Template
from typing import TYPE_CHECKING

from zat.core.manifest import asset_paths, parse_manifest, validate_manifest
from zat.core.models import Manifest
from zat.exceptions import ManifestError, PackagingError

if TYPE_CHECKING:
    from importlib.resources.abc import Traversable

logger = logging.getLogger(__name__)

MANIFEST_FILENAME: str = "manifest.json"
IGNORE_FILENAME: str = ".zatignore"
TMP_DIRNAME: str = "tmp"
PACKAGE_GLOB: str = "app-*.zip"

_ALWAYS_EXCLUDED_DIRS: frozenset[str] = frozenset({TMP_DIRNAME, "node_modules", "__pycache__"})


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

def read_manifest(app_path: Path) -> Manifest:
    """Load ``manifest.json`` from *app_path*.

    Raises
    ------
    ManifestError
        If the file is missing or is not valid JSON.
    """
    manifest_path = Path(app_path) / MANIFEST_FILENAME
    if not manifest_path.is_file():
        raise ManifestError(
            f"Could not find {MANIFEST_FILENAME} in {Path(app_path).resolve()}.",
            hint="Run the command from the app directory or pass --path.",
        )
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ManifestError(f"Cannot parse {manifest_path}: {exc}") from exc
    return parse_manifest(data)


def validate_app(app_path: Path) -> Manifest:
    """Validate the manifest and its referenced assets.

    Raises
    ------
    PackagingError
        Listing every problem found, one per line.
    """
    app_path = Path(app_path)
    manifest = read_manifest(app_path)
    problems = validate_manifest(manifest)

    for relative in asset_paths(manifest):
        if not (app_path / relative).is_file():
            problems.append(f"Missing asset referenced by location: {relative}.")

    if problems:
        raise PackagingError(
            "App validation failed:\n" + "\n".join(f"  - {p}" for p in problems),
        )
    return manifest


# ---------------------------------------------------------------------------
# Zipping
# ---------------------------------------------------------------------------

def _ignore_patterns(app_path: Path) -> list[str]:
    ignore_file = app_path / IGNORE_FILENAME
    if not ignore_file.is_file():
        return []
    patterns: list[str] = []
    for line in ignore_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            # "docs/" and "docs" both name the directory.
            patterns.append(line.rstrip("/") or line)
    return patterns


def _is_excluded(relative: Path, patterns: list[str]) -> bool:
    if relative.parts[0] in _ALWAYS_EXCLUDED_DIRS:
        return True
    if any(part.startswith(".") for part in relative.parts):
        return True
    # A pattern matching any parent directory excludes everything below it.
    prefixes = [
        Path(*relative.parts[:depth]).as_posix()
        for depth in range(1, len(relative.parts) + 1)
    ]
    return any(
        fnmatch.fnmatch(prefix, pattern) or fnmatch.fnmatch(relative.parts[depth], pattern)
        for pattern in patterns
        for depth, prefix in enumerate(prefixes)
    )


def package_files(app_path: Path) -> list[Path]:
    """Return the files that belong in the package, relative to *app_path*."""
    app_path = Path(app_path)
    patterns = _ignore_patterns(app_path)
    files = [
        path.relative_to(app_path)
        for path in sorted(app_path.rglob("*"))
        if path.is_file()
    ]
    return [rel for rel in files if not _is_excluded(rel, patterns)]


def build_package(
    app_path: Path,
    *,
    output_dir: Path | None = None,
    now: dt.datetime | None = None,
) -> Path:
    """Zip *app_path* into ``tmp/app-YYYYMMDDHHMMSS.zip`` and return its path."""
    app_path = Path(app_path)
    read_manifest(app_path)

    now = now or dt.datetime.now()
    output_dir = Path(output_dir) if output_dir else app_path / TMP_DIRNAME
    zip_path = output_dir / f"app-{now:%Y%m%d%H%M%S}.zip"

    files = package_files(app_path)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for relative in files:
                archive.write(app_path / relative, arcname=relative.as_posix())
    except (OSError, zipfile.BadZipFile) as exc:
        raise PackagingError(f"Cannot create package {zip_path}: {exc}") from exc

    logger.debug("Packaged %d files into %s", len(files), zip_path)
    return zip_path


def clean_packages(app_path: Path) -> list[Path]:
    """Delete previously built packages; return the removed paths."""
    removed: list[Path] = []
    for zip_path in sorted((Path(app_path) / TMP_DIRNAME).glob(PACKAGE_GLOB)):
        try:
            zip_path.unlink()
        except OSError as exc:
            raise PackagingError(f"Cannot remove {zip_path}: {exc}") from exc
        removed.append(zip_path)
    return removed


# ---------------------------------------------------------------------------
# Scaffolding
# ---------------------------------------------------------------------------

def _template_root() -> Traversable:
    return resources.files("zat") / "templates" / "app_template"


def _copy_tree(source: Traversable, target: Path, values: dict[str, str]) -> list[Path]:
    written: list[Path] = []
    for entry in source.iterdir():
        destination = target / entry.name
        if entry.is_dir():
            destination.mkdir(parents=True, exist_ok=True)
            written.extend(_copy_tree(entry, destination, values))
        else:
            text = entry.read_text(encoding="utf-8")
            destination.write_text(Template(text).safe_substitute(values), encoding="utf-8")
            written.append(destination)
    return written


def _extract_scaffold(archive: bytes, target: Path) -> list[Path]:
    """Unpack a scaffold zip into *target*, dropping its top-level folder.

    Hosted archives wrap everything in one ``<repo>-<branch>/`` directory;
    its contents land directly in *target*.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(archive)) as bundle:
            members = [info for info in bundle.infolist() if not info.is_dir()]
            paths = [PurePosixPath(info.filename) for info in members]
            roots = {path.parts[0] for path in paths}
            strip = len(roots) == 1 and all(len(path.parts) > 1 for path in paths)

            written: list[Path] = []
            for info, path in zip(members, paths):
                parts = path.parts[1:] if strip else path.parts
                if path.is_absolute() or ".." in parts:
                    raise PackagingError(f"Scaffold archive has an unsafe entry: {info.filename}")
                destination = target.joinpath(*parts)
                destination.parent.mkdir(parents=True, exist_ok=True)
                destination.write_bytes(bundle.read(info))
                written.append(destination)
    except zipfile.BadZipFile as exc:
        raise PackagingError(f"Scaffold download is not a valid zip archive: {exc}") from exc
    if not written:
        raise PackagingError("Scaffold archive is empty.")
    return written


def create_app_skeleton(
    target: Path,
    *,
    app_name: str,
    author_name: str,
    author_email: str,
    author_url: str = "",
    scaffold: bytes | None = None,
) -> list[Path]:
    """Create a new app directory from the bundled template.

    With *scaffold* (the bytes of a scaffold zip) the archive is unpacked
    instead and only ``manifest.json`` is rendered from the template.

    Raises
    ------
    PackagingError
        If *target* already exists and is not empty, or the scaffold
        archive cannot be unpacked.
    """
    target = Path(target)
    if target.exists() and any(target.iterdir()):
        raise PackagingError(
            f"{target} already exists and is not empty.",
            hint="Choose another --path.",
        )
    values = {
        "app_name": json.dumps(app_name)[1:-1],
        "author_name": json.dumps(author_name)[1:-1],
        "author_email": json.dumps(author_email)[1:-1],
        "author_url": json.dumps(author_url)[1:-1],
    }
    try:
        target.mkdir(parents=True, exist_ok=True)
        if scaffold is None:
            return _copy_tree(_template_root(), target, values)

        written = _extract_scaffold(scaffold, target)
        manifest = _template_root() / MANIFEST_FILENAME
        manifest_path = target / MANIFEST_FILENAME
        manifest_path.write_text(
            Template(manifest.read_text(encoding="utf-8")).safe_substitute(values),
            encoding="utf-8",
        )
        if manifest_path not in written:
            written.append(manifest_path)
        return written
    except OSError as exc:
        raise PackagingError(f"Cannot create app in {target}: {exc}") from exc
