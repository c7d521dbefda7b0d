"""
Shell Helpers - External commands, dependency checks and file utilities.

The developer workflow drives ``git``, ``gh`` and ``openssl``. Every external
call goes through ``exec_command`` (captured output) or
``exec_command_inherit`` (output shown to the user), and a failing command
raises ``ToolingError`` carrying the command line and its stderr.
"""

import json
import logging
import platform
import re
import shutil
import socket
import subprocess
import sys
import webbrowser
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel

from vidplug.core.exceptions import ToolingError


logger = logging.getLogger(__name__)


PathLike = Union[str, Path]

REQUIRED_TOOLS = ["git", "python"]
OPTIONAL_TOOLS = ["gh", "openssl"]

INSTALL_INSTRUCTIONS: Dict[str, Dict[str, str]] = {
    "git": {
        "Windows": "winget install Git.Git",
        "Darwin": "brew install git",
        "Linux": "sudo apt install git",
    },
    "gh": {
        "Windows": "winget install GitHub.cli",
        "Darwin": "brew install gh",
        "Linux": "sudo apt install gh",
    },
    "python": {
        "Windows": "Download from https://www.python.org/ or use: winget install Python.Python.3.12",
        "Darwin": "brew install python",
        "Linux": "sudo apt install python3",
    },
    "openssl": {
        "Windows": "Included with Git for Windows, or download from https://slproweb.com/products/Win32OpenSSL.html",
        "Darwin": "brew install openssl",
        "Linux": "sudo apt install openssl",
    },
}


class DependencyStatus(BaseModel):
    """Result of checking one external tool."""

    name: str
    command: str
    installed: bool
    version: Optional[str] = None


def _display(args: Sequence[str]) -> str:
    return " ".join(str(a) for a in args)


def exec_command(
    args: Sequence[str],
    cwd: Optional[PathLike] = None,
    input: Optional[Union[str, bytes]] = None,
    text: bool = True,
) -> Any:
    """
    Run a command and return its standard output.

    Args:
        args: Command and arguments
        cwd: Working directory
        input: Data written to the command's stdin
        text: Decode output as text; bytes are returned otherwise

    Returns:
        Captured stdout

    Raises:
        ToolingError: If the command cannot be started or exits non-zero
    """
    command = _display(args)
    logger.debug(f"Running: {command}")

    try:
        result = subprocess.run(
            [str(a) for a in args],
            cwd=str(cwd) if cwd else None,
            input=input,
            capture_output=True,
            text=text,
        )
    except OSError as e:
        raise ToolingError(f"Command failed: {command}\n{e}", command=command)

    if result.returncode != 0:
        stderr = result.stderr if text else result.stderr.decode(errors="replace")
        raise ToolingError(f"Command failed: {command}\n{stderr.strip()}", command=command, details=stderr)

    return result.stdout


def exec_command_inherit(args: Sequence[str], cwd: Optional[PathLike] = None) -> None:
    """
    Run a command with its output shown on the terminal.

    Raises:
        ToolingError: If the command cannot be started or exits non-zero
    """
    command = _display(args)
    logger.debug(f"Running (inherited output): {command}")

    try:
        result = subprocess.run([str(a) for a in args], cwd=str(cwd) if cwd else None)
    except OSError as e:
        raise ToolingError(f"Command failed: {command}\n{e}", command=command)

    if result.returncode != 0:
        raise ToolingError(f"Command failed: {command}", command=command)


def command_exists(command: str) -> bool:
    return shutil.which(command) is not None


def get_command_version(command: str) -> Optional[str]:
    """First line of ``<command> --version``, or None."""
    args = [command, "version"] if command == "openssl" else [command, "--version"]
    try:
        output = exec_command(args).strip()
    except ToolingError:
        return None
    return output.splitlines()[0] if output else None


def check_dependency(command: str, name: Optional[str] = None) -> DependencyStatus:
    """Check whether a tool is on PATH and get its version."""
    name = name or command
    if command == "python":
        command = sys.executable
    if not command_exists(command):
        return DependencyStatus(name=name, command=command, installed=False)
    return DependencyStatus(name=name, command=command, installed=True, version=get_command_version(command))


def get_install_instructions(tool: str) -> str:
    """Platform-specific install hint for a tool."""
    return INSTALL_INSTRUCTIONS.get(tool, {}).get(platform.system(), f"Install {tool} for your platform")


def check_all_dependencies(required: Sequence[str] = tuple(REQUIRED_TOOLS)) -> Tuple[bool, List[DependencyStatus]]:
    """
    Check a set of tools.

    Returns:
        Tuple of (all installed, per-tool statuses)
    """
    results = [check_dependency(tool) for tool in required]
    missing = [r.name for r in results if not r.installed]
    if missing:
        logger.warning(f"Missing dependencies: {', '.join(missing)}")
    return not missing, results


def check_python_version(min_version: str = "3.9") -> Tuple[bool, str, List[str]]:
    """Check the running interpreter against a minimum ``major.minor``."""
    required = tuple(int(part) for part in min_version.split("."))
    version = sys.version_info

    is_compatible = version[:len(required)] >= required
    status = f"Python {version.major}.{version.minor}.{version.micro}"

    issues = []
    if not is_compatible:
        issues.append(f"Python {min_version}+ is required")
        issues.append(f"Consider upgrading: {get_install_instructions('python')}")

    return is_compatible, status, issues


def ensure_dir(path: PathLike) -> Path:
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def read_json_file(path: PathLike) -> Any:
    """
    Read and parse a JSON file.

    Raises:
        ToolingError: If the file is missing or not valid JSON
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ToolingError(f"Failed to read JSON file {path}: {e}")


def write_json_file(path: PathLike, data: Any) -> None:
    """
    Write JSON with two-space indentation and a trailing newline.

    Raises:
        ToolingError: If the file cannot be written
    """
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        raise ToolingError(f"Failed to write JSON file {path}: {e}")


def get_git_username() -> Optional[str]:
    try:
        return exec_command(["git", "config", "user.name"]).strip() or None
    except ToolingError:
        return None


def get_git_email() -> Optional[str]:
    try:
        return exec_command(["git", "config", "user.email"]).strip() or None
    except ToolingError:
        return None


def check_git_config() -> bool:
    """Whether git has both a user name and email configured."""
    return bool(get_git_username() and get_git_email())


def get_github_username() -> Optional[str]:
    try:
        return exec_command(["gh", "api", "user", "-q", ".login"]).strip() or None
    except ToolingError:
        return None


def check_github_auth() -> bool:
    try:
        exec_command(["gh", "auth", "status"])
        return True
    except ToolingError:
        return False


GITHUB_REPO_PATTERN = re.compile(r"github\.com[:/]([^/]+)/([^/]+?)(?:\.git)?/?$")


def parse_github_url(url: str) -> Tuple[str, str]:
    """
    Extract ``(owner, repo)`` from a GitHub HTTPS or SSH URL.

    Raises:
        ToolingError: If the URL is not a GitHub repository URL
    """
    match = GITHUB_REPO_PATTERN.search(url)
    if not match:
        raise ToolingError(f"Could not parse GitHub repository from {url}")
    return match.group(1), match.group(2)


def get_github_info(repository_url: Optional[str] = None, cwd: Optional[PathLike] = None) -> Tuple[str, str]:
    """
    GitHub owner and repo of the project.

    Uses ``repository_url`` when given, otherwise the ``origin`` remote.

    Raises:
        ToolingError: If no GitHub repository can be determined
    """
    url = repository_url or exec_command(["git", "remote", "get-url", "origin"], cwd=cwd).strip()
    return parse_github_url(url)


def get_local_ips() -> List[str]:
    """Non-loopback IPv4 addresses of this machine."""
    ips: List[str] = []

    try:
        for info in socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET):
            ips.append(info[4][0])
    except socket.gaierror as e:
        logger.debug(f"Hostname lookup failed: {e}")

    # Address of the interface holding the default route; nothing is sent
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            s.connect(("10.255.255.255", 1))
            ips.append(s.getsockname()[0])
    except OSError as e:
        logger.debug(f"Default route lookup failed: {e}")

    unique = []
    for ip in ips:
        if not ip.startswith("127.") and ip not in unique:
            unique.append(ip)
    return unique


def open_browser(url: str) -> bool:
    """Open ``url`` in the default browser; False when no browser is available."""
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as e:
        logger.warning(f"Could not open browser automatically: {e}")
        return False
    if not opened:
        logger.warning(f"Could not open browser automatically, open manually: {url}")
    return opened


__all__ = [
    "DependencyStatus",
    "REQUIRED_TOOLS",
    "OPTIONAL_TOOLS",
    "exec_command",
    "exec_command_inherit",
    "command_exists",
    "get_command_version",
    "check_dependency",
    "get_install_instructions",
    "check_all_dependencies",
    "check_python_version",
    "ensure_dir",
    "read_json_file",
    "write_json_file",
    "get_git_username",
    "get_git_email",
    "check_git_config",
    "get_github_username",
    "check_github_auth",
    "parse_github_url",
    "get_github_info",
    "get_local_ips",
    "open_browser",
]
