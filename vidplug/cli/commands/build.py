"""
Build and Sign Commands - Assemble and sign the plugin in ``dist/``.
"""

import logging

from vidplug.tools.project import ProjectLayout, build_plugin
from vidplug.tools.signing import sign_plugin
from vidplug.ui import display_info, get_console, status_spinner


logger = logging.getLogger(__name__)


def run_build(layout: ProjectLayout, bump_version: bool = False) -> None:
    """Build the plugin and print what was written."""
    with status_spinner("Building plugin..."):
        config = build_plugin(layout, bump_version=bump_version)

    get_console().print(
        f"[green]✅ Built[/green] [bold]{config.name}[/bold] v{config.version} "
        f"into [cyan]{layout.dist_dir}[/cyan]"
    )


def run_sign(layout: ProjectLayout) -> None:
    """Sign the built plugin and print a summary."""
    with status_spinner("Signing plugin..."):
        result = sign_plugin(layout)

    if result.key_generated:
        get_console().print(f"[yellow]🔑 Generated new signing key at {result.key_path}[/yellow]")

    display_info(
        f"Private Key: {result.key_path}\n"
        f"Signature Length: {len(result.signature)} chars\n"
        f"Public Key Length: {len(result.public_key)} chars",
        "🔐 Plugin signed"
    )


__all__ = ["run_build", "run_sign"]
