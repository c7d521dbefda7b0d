"""
CLI Tests

Tests the Typer app, the init checks and the error panels.
"""

import io
import json
from unittest.mock import AsyncMock, patch

import pytest
from rich.console import Console
from typer.testing import CliRunner

from vidplug import __version__
from vidplug.cli.commands.init import collect_warnings
from vidplug.cli.main import app
from vidplug.core.exceptions import ConfigurationError, GraphQLError, NetworkError, ToolingError
from vidplug.ui.error_handler import ErrorHandler


@pytest.fixture
def project_dir(tmp_path, plugin_config_data):
    (tmp_path / "script.js").write_text("source.enable = function () {};\n", encoding="utf-8")
    (tmp_path / "config.json").write_text(json.dumps(plugin_config_data), encoding="utf-8")
    return tmp_path


class TestCLIMain:
    """Test main CLI application."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_version(self):
        result = self.runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_help_lists_commands(self):
        result = self.runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("init", "build", "sign", "test-device", "submit"):
            assert command in result.stdout


class TestBuildCommand:
    """Test build through the CLI."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_build_with_bump(self, project_dir):
        result = self.runner.invoke(app, ["--project-dir", str(project_dir), "build", "--bump"])

        assert result.exit_code == 0
        built = json.loads((project_dir / "dist" / "config.json").read_text(encoding="utf-8"))
        assert built["version"] == 4

    def test_build_without_script_fails(self, project_dir):
        (project_dir / "script.js").unlink()

        result = self.runner.invoke(app, ["--project-dir", str(project_dir), "build"])

        assert result.exit_code == 1
        assert "Tooling Error" in result.stdout

    def test_sign_requires_openssl(self, project_dir):
        with patch("vidplug.tools.signing.command_exists", return_value=False):
            result = self.runner.invoke(app, ["--project-dir", str(project_dir), "sign"])

        assert result.exit_code == 1


class TestTestDeviceCommand:
    """Test option handling of test-device."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_options_forwarded(self, project_dir):
        run = AsyncMock()

        with patch("vidplug.cli.commands.test_device.test_on_device", run):
            result = self.runner.invoke(app, [
                "--project-dir", str(project_dir),
                "--debug",
                "test-device",
                "--dev-ip", "192.168.1.50",
                "--skip-mdns",
                "--no-browser",
            ])

        assert result.exit_code == 0
        kwargs = run.call_args[1]
        assert kwargs["dev_ip"] == "192.168.1.50"
        assert kwargs["skip_mdns"] is True
        assert kwargs["open_portal"] is False

    def test_mdns_on_by_default(self, project_dir):
        run = AsyncMock()

        with patch("vidplug.cli.commands.test_device.test_on_device", run):
            result = self.runner.invoke(app, ["--project-dir", str(project_dir), "test-device"])

        assert result.exit_code == 0
        assert run.call_args[1]["skip_mdns"] is False


class TestInitCommand:
    """Test environment checks."""

    def setup_method(self):
        self.runner = CliRunner()

    def _results(self, python_ok=True, required_ok=True, git_ok=True, github_status="Authenticated as dev"):
        return {
            "python_check": (python_ok, "Python 3.12.1", []),
            "required_check": (required_ok, "git, python", []),
            "optional_check": (True, "2/2 installed", []),
            "git_check": (git_ok, "Dev <dev@example.com>", []),
            "github_check": (True, github_status, []),
            "packages_check": (True, "5/5 packages available", []),
            "project_check": (True, "All files present", []),
        }

    def test_ready(self, project_dir):
        with patch("vidplug.cli.commands.init.run_checks", return_value=self._results()), \
                patch("vidplug.cli.commands.init.command_exists", return_value=True):
            result = self.runner.invoke(app, ["--project-dir", str(project_dir), "init"])

        assert result.exit_code == 0
        assert "Setup Complete" in result.stdout

    def test_missing_required_tools(self, project_dir):
        with patch("vidplug.cli.commands.init.run_checks", return_value=self._results(required_ok=False)), \
                patch("vidplug.cli.commands.init.command_exists", return_value=True):
            result = self.runner.invoke(app, ["--project-dir", str(project_dir), "init"])

        assert result.exit_code == 1

    def test_warnings(self):
        with patch("vidplug.cli.commands.init.command_exists", side_effect=lambda c: c != "openssl"):
            warnings = collect_warnings(self._results(git_ok=False, github_status="Not authenticated"))

        assert any("gh auth login" in w for w in warnings)
        assert any("OpenSSL" in w for w in warnings)
        assert any("Git not configured" in w for w in warnings)


class TestErrorHandler:
    """Test error panels."""

    def _render(self, error, **kwargs):
        buffer = io.StringIO()
        console = Console(file=buffer, width=120, force_terminal=False)
        with patch("vidplug.ui.error_handler.get_console", return_value=console):
            ErrorHandler().handle_error(error, **kwargs)
        return buffer.getvalue()

    def test_network_error(self):
        output = self._render(NetworkError("Request failed", url="https://api.example.com/x", status_code=503))

        assert "Network Error" in output
        assert "https://api.example.com/x" in output
        assert "503" in output

    def test_configuration_error(self):
        output = self._render(ConfigurationError("Bad config", config_path="dist/config.json"), context="While building")

        assert "Configuration Error" in output
        assert "dist/config.json" in output
        assert "While building" in output

    def test_tooling_error(self):
        output = self._render(ToolingError("Command failed", command="git push"))

        assert "Tooling Error" in output
        assert "git push" in output

    def test_graphql_error(self):
        output = self._render(GraphQLError("A, B", code="GQL_ERROR", operation_name="Home"))

        assert "GQL_ERROR" in output
        assert "Home" in output

    def test_generic_error(self):
        output = self._render(RuntimeError("boom"))

        assert "boom" in output
