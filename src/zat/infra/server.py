"""Local development server for an app directory.

Serves the app's files and an ``/app.json`` document (manifest plus
resolved settings) so the app can be loaded from ``localhost`` while it
is being built.  The manifest and the settings file are re-read on every
request; edits show up without restarting.

Dotfiles (including the ``.zat`` credential cache) are never served.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from zat.core.install_settings import resolve_install_settings
from zat.exceptions import ManifestError, ZatError
from zat.infra.packager import MANIFEST_FILENAME, read_manifest
from zat.infra.settings_loader import load_optional_settings

logger = logging.getLogger(__name__)

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 4567


def _app_document(app_path: Path, config_path: Path | None) -> dict[str, Any]:
    manifest = read_manifest(app_path)
    settings = resolve_install_settings(
        manifest.parameters,
        load_optional_settings(config_path),
        strict=False,
    )
    return {
        "name": manifest.name,
        "version": manifest.version,
        "location": manifest.location,
        "products": manifest.products,
        "frameworkVersion": manifest.framework_version,
        "parameters": manifest.parameter_names,
        "settings": {"title": manifest.name, **settings},
    }


def create_app(app_path: Path, *, config_path: Path | None = None) -> FastAPI:
    """Build the FastAPI application serving *app_path*."""
    root = Path(app_path).resolve()
    app = FastAPI(title="zat development server", docs_url=None, redoc_url=None)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(ZatError)
    async def zat_error_handler(_request: Request, exc: ZatError) -> JSONResponse:
        logger.warning("%s", exc)
        missing_manifest = isinstance(exc, ManifestError) and not (root / MANIFEST_FILENAME).is_file()
        status_code = 404 if missing_manifest else 422
        return JSONResponse(
            status_code=status_code,
            content={"error": str(exc), "hint": exc.hint},
        )

    @app.get("/app.json")
    def app_json() -> dict[str, Any]:
        return _app_document(root, config_path)

    @app.get("/{file_path:path}")
    def app_file(file_path: str) -> FileResponse:
        candidate = (root / file_path).resolve()
        relative_parts = Path(file_path).parts
        if (
            not candidate.is_relative_to(root)
            or any(part.startswith(".") for part in relative_parts)
            or not candidate.is_file()
        ):
            raise HTTPException(status_code=404, detail=f"{file_path} not found")
        return FileResponse(candidate)

    return app


def run_server(
    app_path: Path,
    *,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    config_path: Path | None = None,
) -> None:
    """Serve *app_path* with uvicorn until interrupted."""
    import uvicorn

    read_manifest(app_path)
    logger.info("Serving %s on http://%s:%d", Path(app_path).resolve(), host, port)
    uvicorn.run(
        create_app(app_path, config_path=config_path),
        host=host,
        port=port,
        log_level="warning",
    )
