"""Smoke tests — verify scaffold wiring.

These tests prove that:
* The CLI entry point is importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from zat import __version__
from zat.cli import exit_codes
from zat.cli.app import cli, main
from zat.exceptions import (
    ApiConnectionError,
    ApiError,
    ApiRequestError,
    AppNotFoundError,
    CacheError,
    ConfigFileError,
    DeployFailedError,
    DeployTimeoutError,
    EnvironmentError,
    InvalidEmailError,
    InvalidSubdomainError,
    ManifestError,
    PackagingError,
    RegistryError,
    ZatError,
    append_clean_suggestion,
)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_string(self) -> None:
        assert isinstance(__version__, str)

    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            InvalidSubdomainError,
            InvalidEmailError,
            CacheError,
            ConfigFileError,
            ManifestError,
            PackagingError,
            ApiError,
            AppNotFoundError,
            DeployFailedError,
            RegistryError,
            EnvironmentError,
        ],
    )
    def test_all_exceptions_inherit_from_base(self, exc_class: type[ZatError]) -> None:
        assert issubclass(exc_class, ZatError)

    def test_api_errors_share_a_base(self) -> None:
        assert issubclass(ApiConnectionError, ApiError)
        assert issubclass(ApiRequestError, ApiError)

    def test_timeout_is_a_deploy_failure(self) -> None:
        assert issubclass(DeployTimeoutError, DeployFailedError)

    def test_hint_is_stored(self) -> None:
        err = ZatError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_hint_defaults_to_none(self) -> None:
        assert ZatError("boom").hint is None

    def test_request_error_keeps_status_code(self) -> None:
        err = ApiRequestError("nope", status_code=404)
        assert err.status_code == 404


class TestAppendCleanSuggestion:
    def test_appends_once(self) -> None:
        hint = append_clean_suggestion("Cached app id: 1")
        assert hint.startswith("Cached app id: 1")
        assert "--clean" in hint
        assert append_clean_suggestion(hint) == hint


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_success_is_zero(self) -> None:
        assert exit_codes.SUCCESS == 0

    def test_general_error_is_one(self) -> None:
        assert exit_codes.GENERAL_ERROR == 1

    def test_keyboard_interrupt_is_130(self) -> None:
        assert exit_codes.KEYBOARD_INTERRUPT == 130

    def test_unexpected_error_is_two(self) -> None:
        assert exit_codes.UNEXPECTED_ERROR == 2


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestCLIRouting:
    def test_no_args_returns_success(self) -> None:
        assert main([]) == exit_codes.SUCCESS

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0

    def test_version_command_prints_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["version"]) == exit_codes.SUCCESS
        assert capsys.readouterr().out.strip() == __version__

    @patch("zat.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_returns_success(self, _mock_doc: object) -> None:
        assert main(["doctor"]) == exit_codes.SUCCESS

    def test_unknown_command_exits_with_usage_error(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["deploy-everything"])
        assert exc_info.value.code == 2

    @pytest.mark.parametrize("command", ["create", "update"])
    def test_api_commands_route_to_handlers(
        self, command: str, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        from zat.cli import app as app_module

        seen: list[str] = []
        monkeypatch.setattr(
            app_module,
            f"_handle_{command}",
            lambda args: seen.append(args.command) or exit_codes.SUCCESS,
        )
        assert main([command, "--subdomain", "acme"]) == exit_codes.SUCCESS
        assert seen == [command]


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def _run_cli(self, monkeypatch: pytest.MonkeyPatch, error: BaseException) -> int:
        from zat.cli import app as app_module

        def _raise(argv: object = None) -> int:
            raise error

        monkeypatch.setattr(app_module, "main", _raise)
        with pytest.raises(SystemExit) as exc_info:
            cli()
        return int(exc_info.value.code)

    def test_known_error_exits_one(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = self._run_cli(monkeypatch, InvalidSubdomainError("bad", hint="fix it"))
        assert code == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "bad" in err
        assert "fix it" in err

    def test_keyboard_interrupt_exits_130(self, monkeypatch: pytest.MonkeyPatch) -> None:
        assert self._run_cli(monkeypatch, KeyboardInterrupt()) == exit_codes.KEYBOARD_INTERRUPT

    def test_unexpected_error_exits_two(self, monkeypatch: pytest.MonkeyPatch) -> None:
        assert self._run_cli(monkeypatch, RuntimeError("kaboom")) == exit_codes.UNEXPECTED_ERROR
