"""
Submit Command - Catalog pull request with a summary.
"""

import logging

from vidplug.core.config_schemas import ToolingSettings
from vidplug.tools.project import ProjectLayout
from vidplug.tools.submission import submit_plugin
from vidplug.ui import display_info, display_warning, get_console, status_spinner


logger = logging.getLogger(__name__)


def run_submit(layout: ProjectLayout, settings: ToolingSettings) -> None:
    """Submit the built plugin and print the outcome."""
    console = get_console()
    console.print(
        f"\n[bold blue]🚀 Submitting to {settings.catalog_owner}/{settings.catalog_repo}[/bold blue]\n"
    )

    with status_spinner("Forking, updating sources.json and pushing..."):
        result = submit_plugin(layout, settings)

    verb = "Updated" if result.action == "update" else "Added"
    console.print(f"[green]✅ {verb} entry for[/green] [bold]{result.plugin_name}[/bold] "
                  f"v{result.version} on branch [cyan]{result.branch}[/cyan]")

    if result.pr_url:
        display_info(
            f"Pull Request: {result.pr_url}\n\n"
            "1. Wait for maintainers to review your PR\n"
            "2. Address any feedback if requested",
            "🔗 Submission complete"
        )
    else:
        display_warning(
            f"Create the PR manually:\nhttps://github.com/{result.fork}/compare/{result.branch}?expand=1",
            "⚠️  Pull request not created"
        )


__all__ = ["run_submit"]
