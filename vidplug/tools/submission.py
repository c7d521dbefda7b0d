"""
Catalog Submission - Open a pull request adding the plugin to the catalog.

The public plugin catalog is a GitHub repository whose ``sources.json`` lists
every plugin config. Submitting forks that repository with the ``gh`` CLI,
adds or replaces this plugin's entry on a branch, pushes it, and opens a
pull request. The working clone lives in a temporary directory that is
always removed.
"""

import logging
import re
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional

from vidplug.core.config_schemas import ToolingSettings
from vidplug.core.exceptions import ToolingError
from vidplug.tools.project import ProjectLayout
from vidplug.tools.shell import (
    check_all_dependencies,
    check_github_auth,
    exec_command,
    exec_command_inherit,
    get_github_username,
    read_json_file,
    write_json_file,
)


logger = logging.getLogger(__name__)


SOURCES_FILE = "sources.json"


class SubmissionResult(NamedTuple):
    """Outcome of a catalog submission."""

    plugin_name: str
    version: int
    action: str
    fork: str
    branch: str
    pr_url: Optional[str]


def branch_name(plugin_name: str) -> str:
    """Branch for a plugin, e.g. ``add-my-source-plugin``."""
    slug = re.sub(r"\s+", "-", plugin_name.strip().lower())
    return f"add-{slug}-plugin"


def check_submission_prerequisites() -> None:
    """
    Raises:
        ToolingError: If git or gh is missing, or gh is not authenticated
    """
    ok, results = check_all_dependencies(["git", "gh"])
    if not ok:
        missing = ", ".join(r.name for r in results if not r.installed)
        raise ToolingError(f"Missing dependencies: {missing}")

    if not check_github_auth():
        raise ToolingError("Not authenticated with GitHub. Run: gh auth login", command="gh auth status")


def get_or_create_fork(owner: str, repo: str) -> str:
    """
    Find the user's fork of ``owner/repo``, creating it if needed.

    Returns:
        ``username/repo`` of the fork
    """
    username = get_github_username()
    if not username:
        raise ToolingError("Could not determine GitHub username", command="gh api user")

    fork = f"{username}/{repo}"
    try:
        exec_command(["gh", "repo", "view", fork])
        logger.info(f"Fork already exists: {fork}")
    except ToolingError:
        logger.info(f"Creating fork of {owner}/{repo}")
        exec_command(["gh", "repo", "fork", f"{owner}/{repo}", "--clone=false"])

    return fork


def clone_repository(fork: str, parent_dir: Path) -> Path:
    """Clone ``fork`` into ``parent_dir`` and return the clone path."""
    repo_dir = parent_dir / fork.split("/")[-1]
    exec_command(["gh", "repo", "clone", fork, str(repo_dir)])
    logger.info(f"Cloned {fork} to {repo_dir}")
    return repo_dir


def update_sources(sources: List[Dict[str, Any]], plugin_config: Dict[str, Any]) -> str:
    """
    Add or replace the plugin's entry in a catalog list, in place.

    Entries match on ``id`` or ``name``. The entry is the plugin config plus
    ``_installUrl`` pointing at its ``sourceUrl``.

    Returns:
        ``"update"`` if an entry was replaced, ``"add"`` otherwise
    """
    entry = {**plugin_config, "_installUrl": plugin_config.get("sourceUrl")}
    plugin_id = plugin_config.get("id")
    name = plugin_config.get("name")

    for index, source in enumerate(sources):
        if (plugin_id and source.get("id") == plugin_id) or (name and source.get("name") == name):
            logger.info(f"Updating existing entry for: {plugin_config.get('name')}")
            sources[index] = entry
            return "update"

    logger.info(f"Adding new entry for: {plugin_config.get('name')}")
    sources.append(entry)
    return "add"


def update_sources_json(repo_dir: Path, plugin_config: Dict[str, Any]) -> str:
    """Apply ``update_sources`` to the clone's ``sources.json``."""
    sources_path = repo_dir / SOURCES_FILE
    if not sources_path.exists():
        raise ToolingError(f"{SOURCES_FILE} not found in cloned repository")

    sources = read_json_file(sources_path)
    if not isinstance(sources, list):
        raise ToolingError(f"{SOURCES_FILE} is not a list of sources")

    action = update_sources(sources, plugin_config)
    write_json_file(sources_path, sources)
    return action


def commit_message(plugin_name: str, action: str) -> str:
    if action == "update":
        return f"chore: Update {plugin_name} plugin\n\n- Updated plugin configuration\n- Version bump or metadata changes"
    return f"feat: Add {plugin_name} plugin\n\n- Added new plugin for {plugin_name}\n- Includes all required configuration"


def pull_request_text(plugin_name: str, action: str) -> Dict[str, str]:
    """Title and body of the catalog pull request."""
    if action == "update":
        return {
            "title": f"Update {plugin_name} plugin",
            "body": (
                f"## Update {plugin_name} Plugin\n\n"
                f"This PR updates the configuration for the {plugin_name} plugin.\n\n"
                "### Changes\n- Updated plugin configuration\n- Version bump or metadata changes\n"
            ),
        }
    return {
        "title": f"Add {plugin_name} plugin",
        "body": (
            f"## Add {plugin_name} Plugin\n\n"
            f"This PR adds a new plugin for {plugin_name}.\n\n"
            "### Features\n- Home feed support\n- Search functionality\n- Channel browsing\n- Video playback\n"
        ),
    }


def commit_and_push(repo_dir: Path, plugin_name: str, action: str) -> str:
    """Commit ``sources.json`` on the plugin branch and push it; returns the branch."""
    branch = branch_name(plugin_name)

    exec_command(["git", "checkout", "-b", branch], cwd=repo_dir)
    exec_command(["git", "add", SOURCES_FILE], cwd=repo_dir)
    exec_command(["git", "commit", "-m", commit_message(plugin_name, action)], cwd=repo_dir)
    exec_command_inherit(["git", "push", "-u", "origin", branch], cwd=repo_dir)

    logger.info(f"Pushed branch {branch}")
    return branch


def create_pull_request(repo_dir: Path, upstream: str, plugin_name: str, action: str) -> Optional[str]:
    """
    Open the pull request against ``upstream``.

    Returns:
        The pull request URL, or None if creation failed
    """
    text = pull_request_text(plugin_name, action)
    try:
        return exec_command(
            ["gh", "pr", "create", "--repo", upstream, "--title", text["title"], "--body", text["body"]],
            cwd=repo_dir,
        ).strip()
    except ToolingError as e:
        logger.error(f"Failed to create pull request: {e}")
        return None


def submit_plugin(layout: ProjectLayout, settings: Optional[ToolingSettings] = None) -> SubmissionResult:
    """
    Submit the built plugin to the catalog.

    Args:
        layout: Project paths
        settings: Catalog owner and repository

    Returns:
        Submission outcome; ``pr_url`` is None when the PR must be opened
        manually

    Raises:
        ToolingError: If prerequisites are missing or a git step fails
    """
    settings = settings or layout.settings
    check_submission_prerequisites()

    if not layout.dist_config_path.exists():
        raise ToolingError("dist/config.json not found. Build the plugin first with: vidplug build")
    plugin_config = read_json_file(layout.dist_config_path)
    plugin_name = plugin_config.get("name", "")
    if not plugin_name:
        raise ToolingError("dist/config.json has no plugin name")

    upstream = f"{settings.catalog_owner}/{settings.catalog_repo}"
    fork = get_or_create_fork(settings.catalog_owner, settings.catalog_repo)

    temp_dir = Path(tempfile.mkdtemp(prefix="vidplug-catalog-"))
    try:
        repo_dir = clone_repository(fork, temp_dir)
        action = update_sources_json(repo_dir, plugin_config)
        branch = commit_and_push(repo_dir, plugin_name, action)
        pr_url = create_pull_request(repo_dir, upstream, plugin_name, action)
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)
        logger.debug(f"Removed {temp_dir}")

    return SubmissionResult(
        plugin_name=plugin_name,
        version=int(plugin_config.get("version", 1)),
        action=action,
        fork=fork,
        branch=branch,
        pr_url=pr_url,
    )


__all__ = [
    "SubmissionResult",
    "SOURCES_FILE",
    "branch_name",
    "check_submission_prerequisites",
    "get_or_create_fork",
    "clone_repository",
    "update_sources",
    "update_sources_json",
    "commit_and_push",
    "create_pull_request",
    "submit_plugin",
]
