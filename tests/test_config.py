"""
Tests for configuration loading — pkgtarget.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from pkgtarget.core.config.loader import (
    SETTINGS_ENV_VAR,
    ConfigError,
    find_settings_file,
    load_settings,
)
from pkgtarget.core.use_cases.config_check import check_config


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch):
    monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)


@pytest.fixture
def valid_settings_yml(tmp_path: Path) -> Path:
    """Create a valid pkgtarget.yml in a temp directory."""
    content = textwrap.dedent("""\
        target: linux_x64_musl
        PATH: append
        install_root_dir: /opt/pkgtarget

        compat:
          enabled: true
          root: /compat/linux
          probe_binaries:
            - bin/true
          probe_timeout: 1.5

        github:
          download_url_template: "https://mirror.example/{repo}/{version}/{file}"
    """)
    path = tmp_path / "pkgtarget.yml"
    path.write_text(content)
    return path


class TestFindSettingsFile:
    def test_finds_in_current_dir(self, valid_settings_yml: Path):
        assert find_settings_file(valid_settings_yml.parent) == valid_settings_yml

    def test_finds_in_parent(self, valid_settings_yml: Path):
        child = valid_settings_yml.parent / "a" / "b"
        child.mkdir(parents=True)
        assert find_settings_file(child) == valid_settings_yml


class TestLoadSettings:
    def test_valid(self, valid_settings_yml: Path):
        settings = load_settings(valid_settings_yml)
        assert settings.target == "linux_x64_musl"
        assert settings.PATH == "append"
        assert settings.compat.root == "/compat/linux"
        assert settings.compat.probe_binaries == ["bin/true"]
        assert settings.compat.probe_timeout == 1.5
        assert settings.github.download_url_template.startswith("https://mirror.example/")

    def test_wrapped(self, tmp_path: Path):
        path = tmp_path / "pkgtarget.yml"
        path.write_text("pkgtarget:\n  PATH: skip\n")
        assert load_settings(path).PATH == "skip"

    def test_empty_file_defaults(self, tmp_path: Path):
        path = tmp_path / "pkgtarget.yml"
        path.write_text("")
        settings = load_settings(path)
        assert settings.compat.enabled
        assert settings.PATH == "prepend"

    def test_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_settings(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "pkgtarget.yml"
        path.write_text("compat: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "pkgtarget.yml"
        path.write_text("- one\n- two\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_settings(path)

    def test_validation_error(self, tmp_path: Path):
        path = tmp_path / "pkgtarget.yml"
        path.write_text("compat:\n  probe_timeout: 60\n")
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(path)

    def test_bad_path_mode(self, tmp_path: Path):
        path = tmp_path / "pkgtarget.yml"
        path.write_text("PATH: replace\n")
        with pytest.raises(ConfigError):
            load_settings(path)

    def test_env_var(self, valid_settings_yml: Path, monkeypatch):
        monkeypatch.setenv(SETTINGS_ENV_VAR, str(valid_settings_yml))
        assert load_settings().target == "linux_x64_musl"

    def test_auto_detect(self, valid_settings_yml: Path, monkeypatch):
        monkeypatch.chdir(valid_settings_yml.parent)
        assert load_settings().PATH == "append"


class TestCheckConfig:
    def test_valid(self, valid_settings_yml: Path):
        result = check_config(valid_settings_yml)
        assert result.valid
        assert result.errors == []

    def test_missing_compat_root_warns(self, tmp_path: Path):
        path = tmp_path / "pkgtarget.yml"
        path.write_text(f"compat:\n  root: {tmp_path / 'missing'}\n")
        result = check_config(path)
        assert result.valid
        assert any("compat.root" in w for w in result.warnings)

    def test_existing_compat_root(self, tmp_path: Path, compat_root: Path):
        path = tmp_path / "pkgtarget.yml"
        path.write_text(f"compat:\n  root: {compat_root}\n")
        result = check_config(path)
        assert not any("compat.root" in w for w in result.warnings)

    def test_invalid_target(self, tmp_path: Path):
        path = tmp_path / "pkgtarget.yml"
        path.write_text("target: linux__gnu\n")
        result = check_config(path)
        assert not result.valid
        assert result.errors[0].startswith("target:")

    def test_template_without_file(self, tmp_path: Path):
        path = tmp_path / "pkgtarget.yml"
        path.write_text('github:\n  download_url_template: "https://x/{repo}"\n')
        result = check_config(path)
        assert not result.valid
        assert "{file}" in result.errors[0]

    def test_unbalanced_brace_template(self, tmp_path: Path):
        path = tmp_path / "pkgtarget.yml"
        path.write_text('github:\n  download_url_template: "https://x/{repo}/{file}}"\n')
        result = check_config(path)
        assert not result.valid
        assert "not a valid template" in result.errors[0]

    def test_unknown_template_field(self, tmp_path: Path):
        path = tmp_path / "pkgtarget.yml"
        path.write_text('github:\n  download_url_template: "https://x/{owner}/{file}"\n')
        result = check_config(path)
        assert not result.valid
        assert "not a valid template" in result.errors[0]

    def test_empty_probe_binaries_warns(self, tmp_path: Path):
        path = tmp_path / "pkgtarget.yml"
        path.write_text("compat:\n  probe_binaries: []\n")
        result = check_config(path)
        assert result.valid
        assert any("probe_binaries" in w for w in result.warnings)

    def test_load_error(self, tmp_path: Path):
        path = tmp_path / "pkgtarget.yml"
        path.write_text("compat: [unclosed\n")
        result = check_config(path)
        assert not result.valid
        assert result.settings is None

    def test_to_dict(self, valid_settings_yml: Path):
        d = check_config(valid_settings_yml).to_dict()
        assert d["valid"] is True
        assert d["config_path"] == str(valid_settings_yml)
        assert d["settings"]["target"] == "linux_x64_musl"
