"""Tests for manifest parsing and validation (core/manifest.py)."""

from __future__ import annotations

from typing import Any

import pytest

from conftest import sample_manifest
from zat.core.manifest import asset_paths, parse_manifest, validate_manifest
from zat.core.models import AppParameter
from zat.exceptions import ManifestError


class TestParseManifest:
    def test_parses_fields(self) -> None:
        manifest = parse_manifest(
            sample_manifest(
                parameters=[
                    {"name": "token", "type": "text", "required": True, "secure": True},
                    {"name": "color", "default": "blue"},
                ],
            ),
        )
        assert manifest.name == "abc"
        assert manifest.version == "1.0.0"
        assert manifest.default_locale == "en"
        assert manifest.framework_version == "2.0"
        assert manifest.parameters == (
            AppParameter(name="token", type="text", required=True, secure=True),
            AppParameter(name="color", default="blue"),
        )
        assert manifest.parameter_names == ["token", "color"]

    @pytest.mark.parametrize("data", [[], "manifest", None])
    def test_non_object_raises(self, data: Any) -> None:
        with pytest.raises(ManifestError, match="JSON object"):
            parse_manifest(data)

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_missing_name_raises(self, name: Any) -> None:
        with pytest.raises(ManifestError, match="no app name"):
            parse_manifest(sample_manifest(name=name))

    def test_parameters_must_be_objects(self) -> None:
        with pytest.raises(ManifestError, match="parameters"):
            parse_manifest(sample_manifest(parameters=["token"]))


class TestProducts:
    def test_products_from_location_keys(self) -> None:
        manifest = parse_manifest(
            sample_manifest(location={"chat": {}, "support": {}}),
        )
        assert manifest.products == ["support", "chat"]

    def test_list_location_defaults_to_support(self) -> None:
        manifest = parse_manifest(sample_manifest(location=["ticket_sidebar"]))
        assert manifest.products == ["support"]

    def test_missing_location_defaults_to_support(self) -> None:
        data = sample_manifest()
        del data["location"]
        assert parse_manifest(data).products == ["support"]


class TestValidateManifest:
    def test_valid_manifest_has_no_problems(self) -> None:
        assert validate_manifest(parse_manifest(sample_manifest())) == []

    def test_reports_every_problem(self) -> None:
        manifest = parse_manifest(
            sample_manifest(
                author={},
                defaultLocale=None,
                location={"support": {}, "crm": {}},
                parameters=[{"name": "a"}, {"name": "a"}, {"type": "text"}],
            ),
        )
        problems = validate_manifest(manifest)
        assert "Missing author name." in problems
        assert "Missing defaultLocale." in problems
        assert "Duplicate parameter name: a." in problems
        assert "A parameter is missing its name." in problems
        assert "Unknown product location: crm." in problems


class TestAssetPaths:
    def test_collects_relative_urls(self) -> None:
        manifest = parse_manifest(
            sample_manifest(
                location={
                    "support": {
                        "ticket_sidebar": {"url": "assets/iframe.html", "flexible": True},
                        "nav_bar": "assets/nav.html",
                        "top_bar": "https://cdn.example.com/app.html",
                    },
                },
            ),
        )
        assert sorted(asset_paths(manifest)) == ["assets/iframe.html", "assets/nav.html"]
