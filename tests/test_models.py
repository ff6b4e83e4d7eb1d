"""Tests for domain models and runtime settings."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest
from pydantic import ValidationError

from zat.config import Settings
from zat.core.models import AppSummary, JobStatus


class TestJobStatus:
    @pytest.mark.parametrize(
        ("status", "completed", "failed", "finished"),
        [
            ("queued", False, False, False),
            ("working", False, False, False),
            ("completed", True, False, True),
            ("failed", False, True, True),
        ],
    )
    def test_flags(self, status: str, completed: bool, failed: bool, finished: bool) -> None:
        job = JobStatus("j-1", status)
        assert job.is_completed is completed
        assert job.is_failed is failed
        assert job.is_finished is finished

    def test_is_frozen(self) -> None:
        job = JobStatus("j-1", "queued")
        with pytest.raises(dataclasses.FrozenInstanceError):
            job.status = "completed"  # type: ignore[misc]


class TestAppSummary:
    def test_equality(self) -> None:
        assert AppSummary(1, "abc") == AppSummary(1, "abc")


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.poll_interval_seconds == 3.0
        assert settings.poll_timeout_seconds == 300.0
        assert settings.update_check_interval_days == 7
        assert "{package}" in settings.registry_url

    def test_reads_prefixed_environment(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("ZAT_SUBDOMAIN", "acme")
        monkeypatch.setenv("ZAT_POLL_TIMEOUT_SECONDS", "12")
        monkeypatch.setenv("ZAT_GLOBAL_CACHE_PATH", str(tmp_path / "cache"))

        settings = Settings()
        assert settings.subdomain == "acme"
        assert settings.poll_timeout_seconds == 12.0
        assert settings.global_cache_path == tmp_path / "cache"

    def test_rejects_non_positive_interval(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ZAT_POLL_INTERVAL_SECONDS", "0")
        with pytest.raises(ValidationError):
            Settings()
