"""
CLI Main Application - Typer app entry point for the plugin workflow.

This module provides the main CLI application: global options, logging
setup, and the init, build, sign, test-device and submit commands.
"""

import sys
import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.traceback import install as install_rich_traceback

from vidplug import __version__
from vidplug.core.config_schemas import ToolingSettings
from vidplug.ui import setup_console, get_console, handle_error
from vidplug.cli.context import get_layout, get_tooling_settings, is_debug, set_tooling_settings


# Create main Typer application
app = typer.Typer(
    name="vidplug",
    help="🔌 Build, sign, test and publish video content source plugins",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
    if value:
        console = get_console()
        console.print(f"[bold blue]VidPlug[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version information and exit",
    ),
    project_dir: Optional[Path] = typer.Option(
        None,
        "--project-dir",
        "-C",
        help="Plugin project directory",
        exists=False,
        file_okay=False,
        dir_okay=True,
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode with detailed logging",
    ),
) -> None:
    """
    🔌 VidPlug - Plugin developer toolkit.

    Checks your environment, builds and signs the plugin, injects it into a
    device in developer mode, and submits it to the plugin catalog.
    """
    _setup_logging(debug)
    install_rich_traceback(show_locals=debug)
    setup_console()

    settings = ToolingSettings()
    if project_dir is not None:
        settings = settings.model_copy(update={"project_dir": str(project_dir)})
    set_tooling_settings(settings, debug=debug)


def _setup_logging(debug: bool = False) -> None:
    """
    Set up application logging.

    Args:
        debug: Enable debug logging
    """
    level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )

    # Reduce noise from third-party libraries
    if not debug:
        logging.getLogger("aiohttp").setLevel(logging.WARNING)
        logging.getLogger("asyncio").setLevel(logging.WARNING)


def _fail(error: Exception, context: str) -> None:
    handle_error(error, context, show_traceback=is_debug())
    raise typer.Exit(1)


@app.command(name="init")
def init_command() -> None:
    """🩺 Check the development environment."""
    from vidplug.cli.commands.init import run_init

    try:
        ready = run_init(get_layout(), get_tooling_settings())
    except Exception as e:
        _fail(e, "While checking the environment")
        return

    if not ready:
        raise typer.Exit(1)


@app.command(name="build")
def build_command(
    bump: bool = typer.Option(False, "--bump", help="Increment the plugin version"),
) -> None:
    """📦 Build the plugin into dist/."""
    from vidplug.cli.commands.build import run_build

    try:
        run_build(get_layout(), bump_version=bump)
    except Exception as e:
        _fail(e, "While building the plugin")


@app.command(name="sign")
def sign_command() -> None:
    """🔐 Sign the built plugin with the project key."""
    from vidplug.cli.commands.build import run_sign

    try:
        run_sign(get_layout())
    except Exception as e:
        _fail(e, "While signing the plugin")


@app.command(name="test-device")
def test_device_command(
    dev_ip: Optional[str] = typer.Option(None, "--dev-ip", help="Device address (skips discovery)"),
    dev_port: Optional[int] = typer.Option(None, "--dev-port", help="Device dev server port"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Local server port"),
    no_browser: bool = typer.Option(False, "--no-browser", help="Do not open the dev portal"),
    skip_mdns: bool = typer.Option(False, "--skip-mdns", help="Skip mDNS and discover by network scan"),
) -> None:
    """📱 Test the built plugin on a device in developer mode."""
    from vidplug.cli.commands.test_device import test_on_device

    try:
        asyncio.run(test_on_device(
            get_layout(),
            get_tooling_settings(),
            dev_ip=dev_ip,
            dev_port=dev_port,
            port=port,
            open_portal=not no_browser,
            skip_mdns=skip_mdns,
        ))
    except KeyboardInterrupt:
        get_console().print("\n[yellow]👋 Stopped local server[/yellow]")
    except Exception as e:
        _fail(e, "While testing on device")


@app.command(name="submit")
def submit_command() -> None:
    """🚀 Submit the plugin to the catalog as a pull request."""
    from vidplug.cli.commands.submit import run_submit

    try:
        run_submit(get_layout(), get_tooling_settings())
    except Exception as e:
        _fail(e, "While submitting the plugin")


def cli_main() -> None:
    """
    Main CLI entry point for the vidplug command.
    """
    try:
        app()
    except KeyboardInterrupt:
        console = get_console()
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)  # Standard exit code for SIGINT
    except Exception as e:
        handle_error(e, "Unexpected error in CLI")
        sys.exit(1)


__all__ = ["app", "cli_main"]
