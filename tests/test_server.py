"""Tests for the local development server (infra/server.py)."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from conftest import sample_manifest
from zat.exceptions import ManifestError
from zat.infra.server import create_app, run_server


@pytest.fixture()
def client(app_dir: Path) -> TestClient:
    return TestClient(create_app(app_dir))


class TestAppJson:
    def test_describes_manifest(self, client: TestClient) -> None:
        response = client.get("/app.json")
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "abc"
        assert body["products"] == ["support"]
        assert body["frameworkVersion"] == "2.0"
        assert body["settings"] == {"title": "abc"}

    def test_settings_file_and_defaults(self, app_dir: Path) -> None:
        (app_dir / "manifest.json").write_text(
            json.dumps(
                sample_manifest(
                    parameters=[
                        {"name": "token", "required": True},
                        {"name": "color", "default": "blue"},
                    ],
                ),
            ),
            encoding="utf-8",
        )
        config = app_dir / "settings.yml"
        config.write_text("token: abc\n", encoding="utf-8")

        body = TestClient(create_app(app_dir, config_path=config)).get("/app.json").json()
        assert body["parameters"] == ["token", "color"]
        assert body["settings"] == {"title": "abc", "token": "abc", "color": "blue"}

    def test_manifest_edits_are_picked_up(self, app_dir: Path, client: TestClient) -> None:
        (app_dir / "manifest.json").write_text(
            json.dumps(sample_manifest(name="renamed")), encoding="utf-8",
        )
        assert client.get("/app.json").json()["name"] == "renamed"


class TestErrorResponses:
    def test_unparseable_settings_file_is_reported(self, app_dir: Path) -> None:
        config = app_dir / "settings.json"
        config.write_text("{bad", encoding="utf-8")
        client = TestClient(create_app(app_dir, config_path=config), raise_server_exceptions=False)

        response = client.get("/app.json")
        assert response.status_code == 422
        assert "Cannot parse settings file" in response.json()["error"]

    def test_invalid_manifest_is_reported(self, app_dir: Path) -> None:
        (app_dir / "manifest.json").write_text("{", encoding="utf-8")
        client = TestClient(create_app(app_dir), raise_server_exceptions=False)

        response = client.get("/app.json")
        assert response.status_code == 422
        assert "Cannot parse" in response.json()["error"]

    def test_missing_manifest_is_404_with_hint(self, app_dir: Path) -> None:
        (app_dir / "manifest.json").unlink()
        client = TestClient(create_app(app_dir), raise_server_exceptions=False)

        response = client.get("/app.json")
        assert response.status_code == 404
        body = response.json()
        assert "Could not find manifest.json" in body["error"]
        assert body["hint"]


class TestStaticFiles:
    def test_serves_asset(self, client: TestClient) -> None:
        response = client.get("/assets/iframe.html")
        assert response.status_code == 200
        assert response.text == "<html></html>"

    def test_missing_file_is_404(self, client: TestClient) -> None:
        assert client.get("/assets/nope.js").status_code == 404

    def test_dotfiles_are_hidden(self, app_dir: Path, client: TestClient) -> None:
        (app_dir / ".zat").write_text('{"username": "dev@acme.com"}', encoding="utf-8")
        assert client.get("/.zat").status_code == 404

    def test_symlink_outside_root_is_404(self, app_dir: Path, tmp_path: Path, client: TestClient) -> None:
        secret = tmp_path / "secret.txt"
        secret.write_text("secret", encoding="utf-8")
        (app_dir / "assets" / "link.txt").symlink_to(secret)
        assert client.get("/assets/link.txt").status_code == 404


class TestRunServer:
    @patch("uvicorn.run")
    def test_runs_uvicorn(self, mock_run: MagicMock, app_dir: Path) -> None:
        run_server(app_dir, host="127.0.0.1", port=5000)
        assert len(mock_run.call_args.args) == 1
        assert mock_run.call_args.kwargs["host"] == "127.0.0.1"
        assert mock_run.call_args.kwargs["port"] == 5000

    def test_requires_manifest(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestError):
            run_server(tmp_path)
