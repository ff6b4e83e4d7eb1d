"""CLI application entry point and command routing for zat.

This module is the **sole error boundary** for the entire application.
It catches :class:`~zat.exceptions.ZatError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core/service
  and infrastructure layers.
* Heavy imports (httpx, FastAPI, questionary) happen inside the command
  handlers so ``--help`` and ``--version`` stay fast.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from zat.cli import exit_codes
from zat.cli.console import configure_logging, console, say_status
from zat.exceptions import PackagingError, ZatError
from zat.version import __version__

if TYPE_CHECKING:
    from zat.config import Settings
    from zat.core.models import Credentials, Manifest
    from zat.infra.cache import Cache

SETTINGS_FILENAMES: tuple[str, ...] = ("settings.json", "settings.yml", "settings.yaml")


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _path_options() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "-p",
        "--path",
        type=Path,
        default=Path("."),
        help="App directory (default: current directory).",
    )
    return parent


def _api_options() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--subdomain", help="Account subdomain or full URL.")
    parent.add_argument("--username", help="Login email (or email/token).")
    parent.add_argument("--password", help="Password or API token.")
    parent.add_argument(
        "--clean",
        action="store_true",
        help="Discard the cached subdomain, username and app id first.",
    )
    return parent


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser with one sub-command per action."""
    parser = argparse.ArgumentParser(
        prog="zat",
        description="Package, validate, upload and deploy helpdesk apps.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging on stderr.",
    )

    path_opts = _path_options()
    api_opts = _api_options()
    commands = parser.add_subparsers(dest="command", metavar="<command>")

    new = commands.add_parser("new", help="Create a new app from the template.")
    new.add_argument("-p", "--path", type=Path, default=None, help="Directory for the new app.")
    new.add_argument(
        "--scaffold",
        action="store_true",
        help="Start from the hosted app scaffold instead of the bundled template.",
    )

    commands.add_parser("validate", parents=[path_opts], help="Validate the app.")
    commands.add_parser("package", parents=[path_opts], help="Zip the app for upload.")
    commands.add_parser("clean", parents=[path_opts], help="Remove built app packages.")

    server = commands.add_parser("server", parents=[path_opts], help="Run the local dev server.")
    server.add_argument("-c", "--config", type=Path, default=None, help="Settings file (JSON/YAML).")
    server.add_argument("--port", type=int, default=4567, help="Port to listen on (default: 4567).")
    server.add_argument("--bind", default="0.0.0.0", help="Address to bind (default: 0.0.0.0).")

    create = commands.add_parser(
        "create",
        parents=[path_opts, api_opts],
        help="Upload the app and create it on the account.",
    )
    create.add_argument("--zipfile", type=Path, default=None, help="Upload this zip instead of packaging.")
    create.add_argument("-c", "--config", type=Path, default=None, help="Installation settings file.")
    create.add_argument(
        "--no-install",
        dest="install",
        action="store_false",
        help="Create the app without installing it.",
    )

    update = commands.add_parser(
        "update",
        parents=[path_opts, api_opts],
        help="Upload the app and update the existing one.",
    )
    update.add_argument("--zipfile", type=Path, default=None, help="Upload this zip instead of packaging.")

    commands.add_parser("doctor", help="Run environment diagnostics.")
    commands.add_parser("version", help="Print the zat version.")
    return parser


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _load_settings() -> Settings:
    from zat.config import Settings

    return Settings()


def _open_cache(args: argparse.Namespace, settings: Settings) -> Cache:
    from zat.infra.cache import Cache

    cache = Cache(args.path, global_path=settings.global_cache_path, clean=args.clean)
    cache.clear()
    return cache


def _check_for_update(cache: Cache, settings: Settings) -> None:
    from zat.core.update_check import check_for_update
    from zat.infra.registry_client import RegistryClient

    check_for_update(
        RegistryClient(settings),
        cache,
        __version__,
        say_status,
        interval_days=settings.update_check_interval_days,
    )


def _credentials(args: argparse.Namespace, cache: Cache, settings: Settings) -> Credentials:
    from zat.cli.prompts import get_password_from_stdin, get_value_from_stdin
    from zat.core.api_connection import prepare_api_auth

    return prepare_api_auth(
        cache,
        get_value_from_stdin,
        get_password_from_stdin,
        subdomain=args.subdomain or settings.subdomain,
        username=args.username or settings.username,
        password=args.password or settings.password,
    )


def _zip_path(args: argparse.Namespace) -> Path:
    """Return the given ``--zipfile`` or validate and package the app."""
    from zat.infra.packager import build_package, validate_app

    if args.zipfile is not None:
        if not args.zipfile.is_file():
            raise PackagingError(f"Zip file not found: {args.zipfile}")
        return args.zipfile

    validate_app(args.path)
    zip_path = build_package(args.path)
    say_status("package", f"created at {zip_path}")
    return zip_path


def _optional_manifest(path: Path) -> Manifest | None:
    from zat.exceptions import ManifestError
    from zat.infra.packager import read_manifest

    try:
        return read_manifest(path)
    except ManifestError:
        return None


def _settings_file(args: argparse.Namespace) -> Path | None:
    if args.config is not None:
        return args.config
    for name in SETTINGS_FILENAMES:
        candidate = args.path / name
        if candidate.is_file():
            return candidate
    return None


def _deploy_service(api: Any, cache: Cache, settings: Settings) -> Any:
    from zat.core.deploy_service import DeployService

    return DeployService(
        api,
        cache,
        poll_interval=settings.poll_interval_seconds,
        poll_timeout=settings.poll_timeout_seconds,
    )


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_new(args: argparse.Namespace) -> int:
    from zat.cli.prompts import get_optional_value, get_value_from_stdin
    from zat.infra.packager import create_app_skeleton

    app_name = get_value_from_stdin("Enter a name for this new app:")
    author_name = get_value_from_stdin("Enter this app author's name:")
    author_email = get_value_from_stdin("Enter this app author's email:")
    author_url = get_optional_value("Enter this app author's url (optional):")

    target = args.path
    if target is None:
        default_dir = "-".join(app_name.lower().split())
        target = Path(get_value_from_stdin("Enter a directory name to save the new app:", default_dir))

    scaffold = None
    if args.scaffold:
        from zat.infra.scaffold_client import download_scaffold

        say_status("download", "fetching app scaffold")
        scaffold = download_scaffold(_load_settings())

    create_app_skeleton(
        target,
        app_name=app_name,
        author_name=author_name,
        author_email=author_email,
        author_url=author_url,
        scaffold=scaffold,
    )
    say_status("create", f"{app_name} in {target}")
    return exit_codes.SUCCESS


def _handle_validate(args: argparse.Namespace) -> int:
    from zat.infra.packager import validate_app

    manifest = validate_app(args.path)
    say_status("info", f"{manifest.name}: no validation errors")
    return exit_codes.SUCCESS


def _handle_package(args: argparse.Namespace) -> int:
    from zat.infra.packager import build_package, validate_app

    validate_app(args.path)
    zip_path = build_package(args.path)
    say_status("package", f"created at {zip_path}")
    return exit_codes.SUCCESS


def _handle_clean(args: argparse.Namespace) -> int:
    from zat.infra.packager import clean_packages

    removed = clean_packages(args.path)
    say_status("info", f"removed {len(removed)} package(s)")
    return exit_codes.SUCCESS


def _handle_server(args: argparse.Namespace) -> int:
    from zat.infra.server import run_server

    say_status("info", f"serving {args.path.resolve()} on http://{args.bind}:{args.port}")
    run_server(args.path, host=args.bind, port=args.port, config_path=_settings_file(args))
    return exit_codes.SUCCESS


def _handle_create(args: argparse.Namespace) -> int:
    """Upload the app, wait for the create job, then install it.

    Flow:
    1. Resolve credentials and run the update check.
    2. Package the app (or take ``--zipfile`` and prompt for the name).
    3. Upload, create and poll the job until it completes.
    4. Unless ``--no-install``, install with resolved settings.
    """
    from zat.cli.progress import JobStatusSpinner
    from zat.cli.prompts import get_password_from_stdin, get_value_from_stdin
    from zat.core.install_settings import resolve_install_settings
    from zat.infra.http_client import HelpdeskApiClient, build_client
    from zat.infra.settings_loader import load_optional_settings

    settings = _load_settings()
    cache = _open_cache(args, settings)
    _check_for_update(cache, settings)
    credentials = _credentials(args, cache, settings)

    manifest = _optional_manifest(args.path)
    if args.zipfile is not None or manifest is None:
        app_name = get_value_from_stdin("Enter app name:")
    else:
        app_name = manifest.name
    zip_path = _zip_path(args)

    with HelpdeskApiClient(build_client(credentials, settings)) as api:
        service = _deploy_service(api, cache, settings)
        say_status("create", f"uploading {app_name}")
        with JobStatusSpinner(f"Creating {app_name}") as spinner:
            app_id = service.create(app_name, zip_path, on_poll=spinner)
        say_status("create", f"OK, app id {app_id}")

        if args.install:
            parameters = manifest.parameters if manifest else ()
            products = manifest.products if manifest else ["support"]
            values = resolve_install_settings(
                parameters,
                load_optional_settings(_settings_file(args)),
                prompt=get_value_from_stdin,
                prompt_secret=get_password_from_stdin,
            )
            service.install(app_id, app_name, values, products)
            say_status("install", f"{app_name} installed in {', '.join(products)}", "green")

    return exit_codes.SUCCESS


def _handle_update(args: argparse.Namespace) -> int:
    """Upload the app and update the cached (or looked-up) app id."""
    from zat.cli.progress import JobStatusSpinner
    from zat.cli.prompts import get_value_from_stdin
    from zat.infra.http_client import HelpdeskApiClient, build_client

    settings = _load_settings()
    cache = _open_cache(args, settings)
    _check_for_update(cache, settings)
    credentials = _credentials(args, cache, settings)

    with HelpdeskApiClient(build_client(credentials, settings)) as api:
        service = _deploy_service(api, cache, settings)
        if cache.fetch("app_id") is None:
            say_status("update", "app id is missing, searching...")
        app_id = service.resolve_app_id(
            lambda: get_value_from_stdin("Enter the name of the app:"),
        )
        zip_path = _zip_path(args)
        say_status("update", f"uploading to app {app_id}")
        with JobStatusSpinner(f"Updating app {app_id}") as spinner:
            service.update(app_id, zip_path, on_poll=spinner)
        say_status("update", "OK")

    return exit_codes.SUCCESS


def _handle_doctor(_args: argparse.Namespace) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from zat.cli.doctor import run_doctor

    return run_doctor()


def _handle_version(_args: argparse.Namespace) -> int:
    print(__version__)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the zat CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    configure_logging(args.verbose)
    handler = globals()[f"_handle_{args.command}"]
    return handler(args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except ZatError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
