#!/usr/bin/env python3
"""
Application Entry Script.

Main entry point for the notes application. All functionality is accessible
through command-line options.

Usage:
    python run.py --help
    python run.py --action tui
    python run.py --action health --debug
    python run.py --action config
    python run.py --action test --test-type unit
"""

import asyncio
import subprocess
import sys
from pathlib import Path

import click

# Ensure the checkout is importable when run as a script
sys.path.insert(0, str(Path(__file__).parent))

from micronotes.core.config import find_project_root
from micronotes.core.logging import get_logger, setup_logging


def validate_project_root() -> Path:
    """
    Validate that we're running inside the project.

    The root is found from the working directory, so an installed
    `micronotes` script works from anywhere inside a checkout.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        click.echo(click.style(f"Error: {e} Run from inside the project.", fg="red"), err=True)
        sys.exit(1)


@click.command()
@click.option(
    "--action",
    type=click.Choice(["tui", "health", "config", "test", "info"]),
    default="tui",
    help="Action to perform.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option(
    "--test-type",
    type=click.Choice(["all", "unit", "integration"]),
    default="all",
    help="Test type to run (for test action).",
)
@click.option(
    "--coverage",
    is_flag=True,
    help="Run tests with coverage (for test action).",
)
def main(
    action: str,
    verbose: bool,
    debug: bool,
    test_type: str,
    coverage: bool,
) -> None:
    """
    Notes Application Entry Point.

    Open the notes screen, check health, view configuration,
    or run tests.

    Examples:

        # Open the notes screen
        python run.py --action tui

        # Check configuration and remote table access
        python run.py --action health --debug

        # View loaded configuration
        python run.py --action config

        # Run unit tests with coverage
        python run.py --action test --test-type unit --coverage
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    if action == "tui":
        # Records go to the JSONL file only; console output would draw over the screen.
        setup_logging(level=log_level, enable_console=False, enable_file_logging=True)
    else:
        setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)

    logger.debug("Starting application", extra={"action": action, "log_level": log_level})

    if action == "tui":
        run_tui(logger)
    elif action == "health":
        check_health(logger)
    elif action == "config":
        show_config(logger)
    elif action == "test":
        run_tests(logger, test_type, coverage)
    elif action == "info":
        show_info(logger)


def run_tui(logger) -> None:
    """Open the notes screen."""
    from micronotes.client import RestClient
    from micronotes.core.config import get_app_config, get_remote_config
    from micronotes.core.exceptions import ConfigurationError
    from micronotes.repositories.note import NoteRepository
    from micronotes.services.note_store import NoteStore
    from micronotes.tui.app import NotesApp

    try:
        remote = get_remote_config()
        ui = get_app_config().application.ui
    except (ConfigurationError, ValueError, FileNotFoundError) as e:
        message = e.message if isinstance(e, ConfigurationError) else str(e)
        logger.error("Configuration failed", extra={"error": message})
        click.echo(click.style(f"Error: {message}", fg="red"), err=True)
        click.echo("Set SUPABASE_URL and SUPABASE_ANON_KEY in the environment or config/.env.", err=True)
        sys.exit(1)

    client = RestClient(base_url=remote.rest_url, api_key=remote.api_key, timeout=remote.timeout)
    store = NoteStore(NoteRepository(client, table=remote.table))
    app = NotesApp(
        store,
        client=client,
        title=ui.title,
        preview_length=ui.preview_length,
        date_format=ui.date_format,
    )

    logger.info("Opening notes screen", extra={"table": remote.table})
    app.run()
    logger.info("Notes screen closed")


def check_health(logger) -> None:
    """Check configuration and access to the remote notes table."""
    click.echo("Checking application health...\n")

    checks = []

    # Check 1: Core imports
    try:
        from micronotes.core.config import get_app_config, get_remote_config, get_settings
        checks.append(("Core imports", True, None))
        logger.debug("Core imports successful")
    except Exception as e:
        checks.append(("Core imports", False, str(e)))
        logger.error("Core imports failed", extra={"error": str(e)})

    # Check 2: Configuration loading
    try:
        app_config = get_app_config()
        app_name = app_config.application.name
        checks.append(("YAML configuration", True, f"App: {app_name}"))
        logger.debug("Configuration loaded", extra={"app_name": app_name})
    except Exception as e:
        checks.append(("YAML configuration", False, str(e)))
        logger.error("Configuration failed", extra={"error": str(e)})

    # Check 3: Environment settings
    settings_ok = False
    try:
        settings = get_settings()
        checks.append(("Environment settings", True, f"URL: {settings.supabase_url}"))
        settings_ok = True
        logger.debug("Settings loaded")
    except Exception as e:
        checks.append(("Environment settings", False, getattr(e, "message", str(e))))
        logger.warning("Environment settings not configured", extra={"error": str(e)})

    # Check 4: Remote table
    if settings_ok:
        try:
            count = asyncio.run(_count_remote_notes(get_remote_config()))
            checks.append(("Remote notes table", True, f"{count} notes"))
            logger.debug("Remote table reachable", extra={"count": count})
        except Exception as e:
            detail = getattr(e, "message", str(e))
            checks.append(("Remote notes table", False, detail))
            logger.error("Remote table check failed", extra={"error": detail})
    else:
        checks.append(("Remote notes table", False, "skipped, settings missing"))

    click.echo("Health Check Results:")
    click.echo("-" * 50)

    all_passed = True
    for name, passed, detail in checks:
        status = click.style("✓ PASS", fg="green") if passed else click.style("✗ FAIL", fg="red")
        detail_str = f" ({detail})" if detail else ""
        click.echo(f"  {status}  {name}{detail_str}")
        if not passed:
            all_passed = False

    click.echo("-" * 50)

    if all_passed:
        click.echo(click.style("\nAll checks passed!", fg="green"))
    else:
        click.echo(click.style("\nSome checks failed. See details above.", fg="yellow"))
        click.echo("Note: SUPABASE_URL and SUPABASE_ANON_KEY must be set (environment or config/.env).")


async def _count_remote_notes(remote) -> int:
    from micronotes.client import RestClient
    from micronotes.repositories.note import NoteRepository

    client = RestClient(base_url=remote.rest_url, api_key=remote.api_key, timeout=remote.timeout)
    try:
        notes = await NoteRepository(client, table=remote.table).list_recent()
    finally:
        await client.close()
    return len(notes)


def show_config(logger) -> None:
    """Display loaded configuration."""
    click.echo("Application Configuration:\n")

    try:
        from micronotes.core.config import get_app_config

        app_config = get_app_config()

        click.echo("Application Settings (from YAML):")
        click.echo("-" * 40)
        for key, value in app_config.application.model_dump().items():
            if isinstance(value, dict):
                click.echo(f"  {key}:")
                for k, v in value.items():
                    click.echo(f"    {k}: {v}")
            else:
                click.echo(f"  {key}: {value}")

        click.echo("\nLogging Settings (from YAML):")
        click.echo("-" * 40)
        for key, value in app_config.logging.model_dump().items():
            if isinstance(value, dict):
                click.echo(f"  {key}:")
                for k, v in value.items():
                    click.echo(f"    {k}: {v}")
            else:
                click.echo(f"  {key}: {value}")

        logger.info("Configuration displayed successfully")

    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)


def run_tests(logger, test_type: str, coverage: bool) -> None:
    """Run the test suite."""
    logger.info("Running tests", extra={"type": test_type, "coverage": coverage})

    cmd = [sys.executable, "-m", "pytest"]

    if test_type == "unit":
        cmd.append("tests/unit")
    elif test_type == "integration":
        cmd.append("tests/integration")
    else:
        cmd.append("tests/")

    cmd.append("-v")

    if coverage:
        cmd.extend(["--cov=micronotes", "--cov-report=term-missing"])

    click.echo(f"Running: {' '.join(cmd)}\n")

    try:
        result = subprocess.run(cmd)
        sys.exit(result.returncode)
    except FileNotFoundError:
        logger.error("pytest not found. Install with: pip install -e '.[test]'")
        sys.exit(1)


def show_info(logger) -> None:
    """Display application information."""
    click.echo("Micronotes")
    click.echo("=" * 40)

    try:
        from micronotes.core.config import get_app_config
        app_config = get_app_config()
        click.echo(f"Name: {app_config.application.name}")
        click.echo(f"Version: {app_config.application.version}")
        click.echo(f"Description: {app_config.application.description}")
    except Exception:
        click.echo("Name: Micronotes")
        click.echo("Version: 0.1.0")

    click.echo()
    click.echo("Available Actions:")
    click.echo("  --action tui      Open the notes screen (default)")
    click.echo("  --action health   Check configuration and remote table access")
    click.echo("  --action config   Display configuration")
    click.echo("  --action test     Run test suite")
    click.echo("  --action info     Show this information")
    click.echo()
    click.echo("Logging Options:")
    click.echo("  --verbose, -v     Enable INFO level logging")
    click.echo("  --debug, -d       Enable DEBUG level logging")
    click.echo()
    click.echo("Examples:")
    click.echo("  python run.py")
    click.echo("  python run.py --action health --debug")
    click.echo("  python run.py --action test --test-type unit --coverage")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
