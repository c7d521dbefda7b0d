"""
Init Command - Development environment checks.

This module implements the init command: it checks the Python version,
external tools, git and GitHub CLI setup, installed Python packages and the
project layout, then prints a results table and a list of warnings about
workflow steps that will not work yet.
"""

import logging
from importlib.metadata import PackageNotFoundError, version
from typing import Dict, List, Tuple

from rich.table import Table

from vidplug.core.config_schemas import ToolingSettings
from vidplug.tools.project import ProjectLayout
from vidplug.tools.shell import (
    OPTIONAL_TOOLS,
    REQUIRED_TOOLS,
    check_all_dependencies,
    check_dependency,
    check_git_config,
    check_github_auth,
    check_python_version,
    command_exists,
    get_git_email,
    get_git_username,
    get_github_username,
    get_install_instructions,
)
from vidplug.ui import display_info, display_warning, get_console, status_spinner


logger = logging.getLogger(__name__)


CheckResult = Tuple[bool, str, List[str]]

PYTHON_PACKAGES = [
    ("aiohttp", "HTTP client"),
    ("pydantic", "Data validation"),
    ("typer", "CLI framework"),
    ("rich", "Terminal formatting"),
    ("beautifulsoup4", "HTML parsing"),
]

CHECK_NAMES = {
    "python_check": "Python Version",
    "required_check": "Required Tools",
    "optional_check": "Optional Tools",
    "git_check": "Git Config",
    "github_check": "GitHub CLI",
    "packages_check": "Python Packages",
    "project_check": "Project Files",
}


def _check_required_tools() -> CheckResult:
    ok, results = check_all_dependencies(REQUIRED_TOOLS)
    status = ", ".join(f"{r.name} {r.version or ''}".strip() for r in results if r.installed) or "none found"
    issues = [
        f"{r.name} not found. Install: {get_install_instructions(r.name)}"
        for r in results if not r.installed
    ]
    return ok, status, issues


def _check_optional_tools() -> CheckResult:
    results = [check_dependency(tool) for tool in OPTIONAL_TOOLS]
    installed = [r.name for r in results if r.installed]
    issues = [
        f"{r.name} not installed (optional). Install: {get_install_instructions(r.name)}"
        for r in results if not r.installed
    ]
    return True, f"{len(installed)}/{len(results)} installed", issues


def _check_git_config() -> CheckResult:
    if check_git_config():
        return True, f"{get_git_username()} <{get_git_email()}>", []
    return False, "Not configured", [
        'git config --global user.name "Your Name"',
        'git config --global user.email "your.email@example.com"',
    ]


def _check_github_cli() -> CheckResult:
    if not command_exists("gh"):
        return True, "Not installed", ["GitHub CLI not installed; vidplug submit will not work"]
    if check_github_auth():
        return True, f"Authenticated as {get_github_username()}", []
    return True, "Not authenticated", ["Run: gh auth login (required for vidplug submit)"]


def _check_python_packages() -> CheckResult:
    missing = []
    for package, description in PYTHON_PACKAGES:
        try:
            version(package)
        except PackageNotFoundError:
            missing.append(f"Missing: {package} ({description})")

    available = len(PYTHON_PACKAGES) - len(missing)
    return not missing, f"{available}/{len(PYTHON_PACKAGES)} packages available", missing


def _check_project_structure(layout: ProjectLayout) -> CheckResult:
    required = [layout.config_path, layout.script_path]
    missing = [f"Missing file: {path.name}" for path in required if not path.exists()]

    if not layout.dist_dir.exists():
        missing.append("dist/ not built yet; run vidplug build")

    status = "All files present" if not missing else f"{len(missing)} item(s) missing"
    return not any(issue.startswith("Missing file") for issue in missing), status, missing


def run_checks(layout: ProjectLayout, settings: ToolingSettings) -> Dict[str, CheckResult]:
    """Run every environment check and return results keyed by check."""
    return {
        "python_check": check_python_version(settings.min_python),
        "required_check": _check_required_tools(),
        "optional_check": _check_optional_tools(),
        "git_check": _check_git_config(),
        "github_check": _check_github_cli(),
        "packages_check": _check_python_packages(),
        "project_check": _check_project_structure(layout),
    }


def collect_warnings(results: Dict[str, CheckResult]) -> List[str]:
    """Workflow steps that will not work given the check results."""
    warnings = []

    if not command_exists("gh"):
        warnings.append("GitHub CLI not installed - vidplug submit will not work")
    elif results["github_check"][1] == "Not authenticated":
        warnings.append("Not authenticated with GitHub - run: gh auth login")

    if not command_exists("openssl"):
        warnings.append("OpenSSL not found - plugin signing (vidplug sign) will not work")

    if not results["git_check"][0]:
        warnings.append("Git not configured - commits will fail")

    return warnings


def _display_results(results: Dict[str, CheckResult]) -> None:
    console = get_console()

    table = Table(title="Environment Checks", show_lines=False)
    table.add_column("Check", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Result")
    table.add_column("Issues")

    for key, name in CHECK_NAMES.items():
        is_ok, status, issues = results[key]
        issues_text = "[green]None[/green]" if not issues else "\n".join(issues)
        table.add_row(name, "✅" if is_ok else "❌", status, issues_text)

    console.print(table)


def run_init(layout: ProjectLayout, settings: ToolingSettings) -> bool:
    """
    Check the development environment and print a report.

    Returns:
        True when Python and every required tool are usable
    """
    console = get_console()
    console.print("\n[bold blue]🎨 Plugin Development Setup[/bold blue]\n")

    with status_spinner("Checking development environment..."):
        results = run_checks(layout, settings)

    _display_results(results)

    warnings = collect_warnings(results)
    if warnings:
        console.print()
        display_warning("\n".join(f"• {w}" for w in warnings), "📌 Warnings")

    ready = results["python_check"][0] and results["required_check"][0]
    if ready:
        display_info(
            "Available commands:\n"
            "• vidplug build        - Build the plugin into dist/\n"
            "• vidplug sign         - Sign the plugin\n"
            "• vidplug test-device  - Test on a device in developer mode\n"
            "• vidplug submit       - Submit to the plugin catalog",
            "🎉 Setup Complete"
        )
    else:
        logger.error("Missing required dependencies")

    return ready


__all__ = ["run_init", "run_checks", "collect_warnings"]
