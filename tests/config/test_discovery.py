"""Tests for config discovery and loading."""

from pathlib import Path

import pytest

from marketctl.config.discovery import CONFIG_ENV_VAR, CONFIG_FILENAME, find_config, load_config
from marketctl.config.models import MarketFileConfig


class TestFindConfig:
    def test_finds_in_current_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[market]\nname = "test"\n')
        assert find_config(tmp_path) == config_file

    def test_walks_up(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[market]\nname = "test"\n')
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        assert find_config(child) == config_file

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        child = tmp_path / "empty"
        child.mkdir()
        assert find_config(child) is None

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text('[market]\nname = "env"\n')
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))
        assert find_config(tmp_path / "elsewhere") == config_file

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None


class TestLoadConfig:
    def test_loads_from_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[market]\ncurrency = "EUR"\n[plugins]\nenabled = false\n')
        cfg = load_config(config_file)
        assert cfg.market.currency == "EUR"
        assert cfg.market.name == "marketplace"
        assert cfg.plugins.enabled is False

    def test_returns_defaults_when_no_file(self, tmp_path: Path) -> None:
        child = tmp_path / "nothing-here"
        child.mkdir()
        assert load_config(cwd=child) == MarketFileConfig()
