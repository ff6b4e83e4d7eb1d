"""Tests for the ``zat doctor`` command (cli/doctor.py).

Coverage:
* Individual check functions return correct tuples.
* Doctor returns SUCCESS unless a required check fails.
* Plain-text fallback when Rich is missing.
* CLI routing dispatches to ``run_doctor``.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from zat.cli import exit_codes
from zat.config import Settings


# ---------------------------------------------------------------------------
# Individual check functions
# ---------------------------------------------------------------------------

class TestPythonVersionCheck:
    def test_returns_tuple(self) -> None:
        from zat.cli.doctor import _python_version_check

        label, value, status = _python_version_check()
        assert label == "Python"
        assert isinstance(value, str)
        assert "OK" in status


class TestModuleCheck:
    def test_installed(self) -> None:
        from zat.cli.doctor import _module_check

        label, value, status = _module_check("httpx", "httpx")
        assert label == "httpx"
        assert "OK" in status

    @patch.dict("sys.modules", {"fastapi": None})
    def test_optional_missing_is_warning(self) -> None:
        from zat.cli.doctor import _module_check

        _label, value, status = _module_check("fastapi", "fastapi", required=False)
        assert value == "NOT INSTALLED"
        assert "WARN" in status

    @patch.dict("sys.modules", {"httpx": None})
    def test_required_missing_fails(self) -> None:
        from zat.cli.doctor import _module_check

        _label, _value, status = _module_check("httpx", "httpx")
        assert "FAIL" in status


class TestAccountCheck:
    def test_configured(self) -> None:
        from zat.cli.doctor import _account_check

        assert _account_check(Settings(subdomain="acme")) == ("Account", "acme", "[green]OK[/green]")

    def test_missing_is_warning(self) -> None:
        from zat.cli.doctor import _account_check

        _label, value, status = _account_check(Settings())
        assert "ZAT_SUBDOMAIN" in value
        assert "WARN" in status


class TestOsCheck:
    @patch("zat.cli.doctor.platform.machine", return_value="arm64")
    @patch("zat.cli.doctor.platform.release", return_value="23.4.0")
    @patch("zat.cli.doctor.platform.system", return_value="Darwin")
    def test_darwin_is_displayed_as_macos(
        self,
        _mock_system: MagicMock,
        _mock_release: MagicMock,
        _mock_machine: MagicMock,
    ) -> None:
        from zat.cli.doctor import _os_check

        _label, value, status = _os_check()
        assert value == "macOS 23.4.0 (arm64)"
        assert "OK" in status


# ---------------------------------------------------------------------------
# run_doctor integration
# ---------------------------------------------------------------------------

class TestRunDoctor:
    def test_all_pass_returns_success(self) -> None:
        from zat.cli.doctor import run_doctor

        assert run_doctor() == exit_codes.SUCCESS

    @patch("zat.cli.doctor.collect_checks", return_value=[("httpx", "NOT INSTALLED", "[red]FAIL[/red]")])
    def test_failure_returns_general_error(self, _mock_checks: MagicMock) -> None:
        from zat.cli.doctor import run_doctor

        assert run_doctor() == exit_codes.GENERAL_ERROR

    @patch.dict("sys.modules", {"rich": None, "rich.table": None, "rich.console": None})
    def test_plain_output_without_rich(self, capsys: pytest.CaptureFixture[str]) -> None:
        from zat.cli.doctor import run_doctor

        run_doctor()
        captured = capsys.readouterr()
        assert "zat doctor" in captured.err
        assert "[green]" not in captured.err


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestDoctorRouting:
    @patch("zat.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_dispatches(self, mock_run: MagicMock) -> None:
        from zat.cli.app import main

        assert main(["doctor"]) == exit_codes.SUCCESS
        mock_run.assert_called_once()

    @patch("zat.cli.doctor.run_doctor", return_value=exit_codes.GENERAL_ERROR)
    def test_doctor_failure_propagates(self, _mock_run: MagicMock) -> None:
        from zat.cli.app import main

        assert main(["doctor"]) == exit_codes.GENERAL_ERROR
