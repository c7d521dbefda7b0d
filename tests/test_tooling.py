"""
Developer Workflow Tests

Tests building, signing and catalog submission with every external command
mocked at the ``exec_command`` seam.
"""

import base64
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from vidplug.core.config_schemas import ToolingSettings
from vidplug.core.exceptions import ToolingError
from vidplug.tools.project import ProjectLayout, build_plugin
from vidplug.tools.signing import generate_signature, sign_plugin, strip_pem
from vidplug.tools.submission import (
    branch_name,
    create_pull_request,
    submit_plugin,
    update_sources,
    update_sources_json,
)


PUBLIC_PEM = """-----BEGIN PUBLIC KEY-----
MIIBIjANBgkqhkiG9w0BAQEFAAOCAQ8A
MIIBCgKCAQEAu1SU1LfVLPHCozMxH2Mo
-----END PUBLIC KEY-----
"""


@pytest.fixture
def project(tmp_path, plugin_config_data):
    (tmp_path / "script.js").write_text("source.enable = function () {};\n", encoding="utf-8")
    (tmp_path / "config.json").write_text(json.dumps(plugin_config_data), encoding="utf-8")
    return ProjectLayout(ToolingSettings(project_dir=str(tmp_path)))


class TestBuild:
    """Test assembling dist/."""

    def test_build_copies_script_and_config(self, project):
        config = build_plugin(project)

        assert project.dist_script_path.read_text(encoding="utf-8").startswith("source.enable")
        built = json.loads(project.dist_config_path.read_text(encoding="utf-8"))
        assert built["name"] == "Example Videos"
        assert built["platformUrl"] == "https://videos.example.com"
        assert config.version == 3

    def test_bump_version_updates_project_config(self, project):
        config = build_plugin(project, bump_version=True)

        assert config.version == 4
        assert json.loads(project.config_path.read_text(encoding="utf-8"))["version"] == 4
        assert json.loads(project.dist_config_path.read_text(encoding="utf-8"))["version"] == 4

    def test_missing_script(self, project):
        project.script_path.unlink()

        with pytest.raises(ToolingError):
            build_plugin(project)

    def test_require_dist(self, project):
        with pytest.raises(ToolingError) as exc_info:
            project.require_dist()

        assert "vidplug build" in str(exc_info.value)


class TestSigning:
    """Test signing with OpenSSL mocked."""

    def test_strip_pem(self):
        assert strip_pem(PUBLIC_PEM) == "MIIBIjANBgkqhkiG9w0BAQEFAAOCAQ8AMIIBCgKCAQEAu1SU1LfVLPHCozMxH2Mo"

    def test_signature_is_base64_of_raw_output(self, tmp_path):
        script = tmp_path / "script.js"
        script.write_text("x", encoding="utf-8")

        with patch("vidplug.tools.signing.exec_command", return_value=b"\x01\x02\xff") as run:
            signature = generate_signature(tmp_path / "key.pem", script)

        assert signature == base64.b64encode(b"\x01\x02\xff").decode("ascii")
        assert run.call_args[1]["text"] is False
        assert run.call_args[0][0][:3] == ["openssl", "dgst", "-sha512"]

    def test_sign_plugin_generates_key_and_updates_config(self, project):
        build_plugin(project)
        commands = []

        def fake_exec(args, cwd=None, input=None, text=True):
            commands.append(args[:2])
            if args[1] == "genrsa":
                Path(args[3]).write_text("PRIVATE", encoding="utf-8")
                return ""
            if args[1] == "dgst":
                return b"signed-bytes"
            if "-pubout" in args:
                return PUBLIC_PEM
            return ""

        with patch("vidplug.tools.signing.command_exists", return_value=True), \
                patch("vidplug.tools.signing.exec_command", side_effect=fake_exec):
            result = sign_plugin(project)

        assert result.key_generated is True
        assert result.key_path == project.private_key_path
        assert ["openssl", "genrsa"] in commands
        assert ["openssl", "rsa"] in commands

        built = json.loads(project.dist_config_path.read_text(encoding="utf-8"))
        assert built["scriptSignature"] == base64.b64encode(b"signed-bytes").decode("ascii")
        assert built["scriptPublicKey"] == strip_pem(PUBLIC_PEM)

    def test_existing_key_is_reused(self, project):
        build_plugin(project)
        project.private_key_path.parent.mkdir(parents=True)
        project.private_key_path.write_text("PRIVATE", encoding="utf-8")

        def fake_exec(args, cwd=None, input=None, text=True):
            return b"sig" if args[1] == "dgst" else PUBLIC_PEM

        with patch("vidplug.tools.signing.command_exists", return_value=True), \
                patch("vidplug.tools.signing.exec_command", side_effect=fake_exec) as run:
            result = sign_plugin(project)

        assert result.key_generated is False
        assert all(call[0][0][1] != "genrsa" for call in run.call_args_list)

    def test_invalid_key(self, project):
        build_plugin(project)
        project.private_key_path.parent.mkdir(parents=True)
        project.private_key_path.write_text("garbage", encoding="utf-8")

        with patch("vidplug.tools.signing.command_exists", return_value=True), \
                patch("vidplug.tools.signing.exec_command", side_effect=ToolingError("bad", command="openssl rsa")):
            with pytest.raises(ToolingError) as exc_info:
                sign_plugin(project)

        assert "validation failed" in str(exc_info.value)

    def test_openssl_missing(self, project):
        with patch("vidplug.tools.signing.command_exists", return_value=False):
            with pytest.raises(ToolingError) as exc_info:
                sign_plugin(project)

        assert exc_info.value.command == "openssl"

    def test_unbuilt_project(self, project):
        with patch("vidplug.tools.signing.command_exists", return_value=True):
            with pytest.raises(ToolingError):
                sign_plugin(project)


class TestSources:
    """Test catalog entry updates."""

    def test_branch_name(self):
        assert branch_name("My  Video Source") == "add-my-video-source-plugin"
        assert branch_name("  Tabs\tand\nLines ") == "add-tabs-and-lines-plugin"

    def test_add(self):
        sources = [{"id": "other", "name": "Other"}]

        action = update_sources(sources, {"id": "p1", "name": "Mine", "sourceUrl": "https://x/config.json"})

        assert action == "add"
        assert sources[-1]["_installUrl"] == "https://x/config.json"
        assert len(sources) == 2

    def test_update_by_id(self):
        sources = [{"id": "p1", "name": "Old Name", "version": 1}]

        action = update_sources(sources, {"id": "p1", "name": "New Name", "version": 2})

        assert action == "update"
        assert sources == [{"id": "p1", "name": "New Name", "version": 2, "_installUrl": None}]

    def test_update_by_name(self):
        sources = [{"name": "Mine"}]

        assert update_sources(sources, {"name": "Mine", "version": 5}) == "update"
        assert sources[0]["version"] == 5

    def test_missing_ids_do_not_match(self):
        sources = [{"name": "Other"}]

        assert update_sources(sources, {"name": "Mine"}) == "add"

    def test_update_sources_json(self, tmp_path):
        (tmp_path / "sources.json").write_text("[]", encoding="utf-8")

        action = update_sources_json(tmp_path, {"id": "p1", "name": "Mine"})

        assert action == "add"
        assert json.loads((tmp_path / "sources.json").read_text(encoding="utf-8"))[0]["id"] == "p1"

    def test_update_sources_json_requires_list(self, tmp_path):
        (tmp_path / "sources.json").write_text("{}", encoding="utf-8")

        with pytest.raises(ToolingError):
            update_sources_json(tmp_path, {"name": "Mine"})


class TestSubmission:
    """Test the full submission flow with git and gh mocked."""

    def test_pull_request_failure_returns_none(self, tmp_path):
        with patch("vidplug.tools.submission.exec_command", side_effect=ToolingError("no")):
            assert create_pull_request(tmp_path, "owner/repo", "Mine", "add") is None

    def test_submit(self, project):
        build_plugin(project)
        commands = []

        def fake_exec(args, cwd=None, input=None, text=True):
            commands.append(list(args))
            if args[:3] == ["gh", "repo", "clone"]:
                repo_dir = Path(args[4])
                repo_dir.mkdir(parents=True)
                (repo_dir / "sources.json").write_text(
                    json.dumps([{"id": "4e2a1a2c-0b7d-4d7e-9d3c-2f8f3b6a9c11", "name": "Example Videos"}]),
                    encoding="utf-8",
                )
            if args[:3] == ["gh", "pr", "create"]:
                return "https://github.com/owner/repo/pull/7\n"
            return ""

        with patch("vidplug.tools.submission.check_submission_prerequisites"), \
                patch("vidplug.tools.submission.get_github_username", return_value="dev"), \
                patch("vidplug.tools.submission.exec_command", side_effect=fake_exec), \
                patch("vidplug.tools.submission.exec_command_inherit", side_effect=lambda args, cwd=None: commands.append(list(args))):
            result = submit_plugin(project, ToolingSettings(catalog_owner="owner", catalog_repo="repo"))

        assert result.action == "update"
        assert result.fork == "dev/repo"
        assert result.branch == "add-example-videos-plugin"
        assert result.pr_url == "https://github.com/owner/repo/pull/7"
        assert ["git", "push", "-u", "origin", "add-example-videos-plugin"] in commands
        clone_dir = Path(next(c for c in commands if c[:3] == ["gh", "repo", "clone"])[4])
        assert not clone_dir.parent.exists()

    def test_submit_requires_build(self, project):
        with patch("vidplug.tools.submission.check_submission_prerequisites"):
            with pytest.raises(ToolingError):
                submit_plugin(project)
