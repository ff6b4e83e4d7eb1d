"""``zat doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment satisfies zat's requirements.

This module lives in the CLI layer — it may import from ``infra``
and ``core``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import importlib
import platform
import sys

from zat.cli import exit_codes
from zat.cli.console import console
from zat.config import Settings
from zat.version import __version__

OK: str = "[green]OK[/green]"
WARN: str = "[yellow]WARN[/yellow]"
FAIL: str = "[red]FAIL[/red]"


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    major, minor = sys.version_info[:2]
    ok = major >= 3 and minor >= 10
    status = OK if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _module_check(
    label: str,
    module_name: str,
    *,
    required: bool = True,
) -> tuple[str, str, str]:
    """Return (label, value, status) for an importable dependency."""
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return label, "NOT INSTALLED", FAIL if required else WARN
    version = getattr(module, "__version__", None) or "installed"
    return label, str(version), OK


def _os_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    release = platform.release()
    machine = platform.machine()
    value = f"{system_display} {release} ({machine})"
    return "OS", value, OK


def _zat_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the zat version row."""
    return "zat", __version__, OK


def _account_check(settings: Settings | None = None) -> tuple[str, str, str]:
    """Return (label, value, status) for the configured account row.

    A missing subdomain is only a warning: commands prompt for it.
    """
    settings = settings or Settings()
    if settings.subdomain:
        return "Account", settings.subdomain, OK
    return "Account", "not configured (ZAT_SUBDOMAIN)", WARN


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    if "FAIL" in status:
        return "FAIL"
    if "WARN" in status:
        return "WARN"
    if "OK" in status:
        return "OK"
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\nzat doctor", file=sys.stderr)
    print("=" * 56, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<32} {'Status':<8}", file=sys.stderr)
    print("-" * 56, file=sys.stderr)
    for label, value, status in checks:
        plain_status = _status_plain(status)
        print(f"{label:<12} {value:<32} {plain_status:<8}", file=sys.stderr)
    print(file=sys.stderr)


def collect_checks() -> list[tuple[str, str, str]]:
    return [
        _zat_version_check(),
        _python_version_check(),
        _module_check("httpx", "httpx"),
        _module_check("pydantic", "pydantic"),
        _module_check("rich", "rich", required=False),
        _module_check("questionary", "questionary", required=False),
        _module_check("fastapi", "fastapi", required=False),
        _module_check("uvicorn", "uvicorn", required=False),
        _account_check(),
        _os_check(),
    ]


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor() -> int:
    """Execute all diagnostic checks and render a Rich summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    checks = collect_checks()
    has_failure = any("FAIL" in status for _, _, status in checks)

    rich_available = True
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        rich_available = False

    if rich_available:
        table = Table(
            title="zat doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=12)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)

        for label, value, status in checks:
            table.add_row(label, value, status)

        console.print()
        console.print(table)
        console.print()
    else:
        _print_plain_doctor_table(checks)

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
