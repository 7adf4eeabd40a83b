"""
Tests for CLI commands — detect, distro, env, targets, config check,
and global options.

Detection is patched to a simulated snapshot so the output does not
depend on the machine running the tests.
"""

import json
import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from pkgtarget.core.config.loader import SETTINGS_ENV_VAR
from pkgtarget.main import cli
from tests.platform.simulated_snapshots import SNAPSHOTS

_DETECT = "pkgtarget.core.services.platform.orchestration.bootstrap.detect"


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch):
    """Run each command from an empty directory with no settings."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)


@pytest.fixture
def host():
    patcher = None

    def use(name: str):
        nonlocal patcher
        patcher = patch(_DETECT, return_value=SNAPSHOTS[name])
        patcher.start()

    yield use
    if patcher is not None:
        patcher.stop()


@pytest.fixture
def variants_file(tmp_path: Path) -> Path:
    path = tmp_path / "variants.yml"
    path.write_text(textwrap.dedent("""\
        - target: freebsd_arm64
          url: https://example.com/tool-freebsd.tgz
        - target: linux_arm64
          url: https://example.com/tool-linux-arm64.tgz
        - target: darwin_arm64
          url: https://example.com/tool-macos.tgz
    """))
    return path


def _run(*args):
    return CliRunner().invoke(cli, list(args), obj={})


class TestCLIGlobal:
    def test_help(self):
        result = _run("--help")
        assert result.exit_code == 0
        assert "pkgtarget" in result.output

    def test_version(self):
        result = _run("--version")
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_missing_explicit_config(self, host, tmp_path: Path):
        host("linux-glibc-x64")
        result = _run("--config", str(tmp_path / "nope.yml"), "detect")
        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestDetectCommand:
    def test_json(self, host):
        host("linux-glibc-x64")
        result = _run("detect", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["snapshot"]["os_family"] == "linux"
        assert data["family_priority"] == ["linux", "unix"]
        assert data["default_target"] == "linux_x64"
        assert data["override_active"] is False

    def test_human_with_compat(self, host):
        host("freebsd-arm64-compat")
        result = _run("detect")
        assert result.exit_code == 0
        assert "Compatibility layer" in result.output
        assert "el7" in result.output
        assert "freebsd → linux → unix" in result.output
        assert "freebsd_arm64" in result.output


class TestDistroCommand:
    def test_darwin_json(self, host):
        host("darwin-arm64")
        result = _run("distro", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output)["id"] == "macOS"

    def test_windows(self, host):
        host("windows-x64")
        result = _run("distro")
        assert result.exit_code == 0
        assert "windows" in result.output


class TestEnvCommand:
    def test_prepend(self, host, tmp_path: Path, monkeypatch):
        host("linux-glibc-x64")
        (tmp_path / "pkgtarget.yml").write_text(f"install_root_dir: {tmp_path / 'root'}\n")
        monkeypatch.setenv("PATH", "/usr/bin:/bin")
        result = _run("env")
        assert result.exit_code == 0
        assert result.output.strip() == f"PATH={tmp_path / 'root' / 'bin'}:/usr/bin:/bin"

    def test_skip(self, host, tmp_path: Path, monkeypatch):
        host("linux-glibc-x64")
        (tmp_path / "pkgtarget.yml").write_text("PATH: skip\n")
        monkeypatch.setenv("PATH", "/usr/bin")
        result = _run("env")
        assert result.output.strip() == "PATH=/usr/bin"


class TestTargetsCommands:
    def test_check_satisfied(self, host):
        host("freebsd-arm64-compat")
        result = _run("targets", "check", "linux_x64", "linux_arm64")
        assert result.exit_code == 0
        assert "✅ linux_arm64" in result.output
        assert "❌ linux_x64" in result.output

    def test_check_none(self, host):
        host("linux-glibc-x64")
        result = _run("targets", "check", "win_x64", "--json")
        assert result.exit_code == 1
        assert json.loads(result.output)["any_satisfied"] is False

    def test_priority(self, host):
        host("freebsd-arm64-compat")
        result = _run("targets", "priority", "--json")
        assert json.loads(result.output) == {"family_priority": ["freebsd", "linux", "unix"]}

    def test_resolve_native(self, host, variants_file: Path):
        host("freebsd-arm64-compat")
        result = _run("targets", "resolve", str(variants_file), "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["variant"]["url"].endswith("tool-freebsd.tgz")

    def test_resolve_explicit(self, host, variants_file: Path):
        host("linux-glibc-x64")
        result = _run("targets", "resolve", str(variants_file), "--target", "darwin_arm64")
        assert result.exit_code == 0
        assert "tool-macos.tgz" in result.output

    def test_resolve_settings_target(self, host, variants_file: Path, tmp_path: Path):
        host("linux-glibc-x64")
        (tmp_path / "pkgtarget.yml").write_text("target: linux_arm64\n")
        result = _run("targets", "resolve", str(variants_file), "--json")
        assert json.loads(result.output)["effective_target"] == "linux_arm64"

    def test_resolve_unsupported(self, host, variants_file: Path):
        host("windows-x64")
        result = _run("targets", "resolve", str(variants_file))
        assert result.exit_code == 1
        assert "No compatible distribution" in result.output


class TestConfigCheckCommand:
    def test_valid(self, tmp_path: Path):
        (tmp_path / "pkgtarget.yml").write_text("PATH: append\n")
        result = _run("config", "check")
        assert result.exit_code == 0
        assert "Settings are valid" in result.output

    def test_invalid_json(self, tmp_path: Path):
        config = tmp_path / "custom.yml"
        config.write_text("target: a_b_c_d\n")
        result = _run("--config", str(config), "config", "check", "--json")
        assert result.exit_code == 1
        assert json.loads(result.output)["valid"] is False

    def test_no_file_warns(self):
        result = _run("config", "check")
        assert result.exit_code == 0
        assert "defaults apply" in result.output
