"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from promptlab.config import DEFAULT_HOME, ConfigManager, PromptLabConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("PROMPTLAB_DATA_DIR", "PROMPTLAB_MODEL", "PROMPTLAB_TEMPERATURE"):
        monkeypatch.delenv(var, raising=False)


class TestConfigManager:
    """Test ConfigManager sources and precedence."""

    def test_defaults_without_file(self, tmp_path) -> None:
        """Should use dataclass defaults when nothing is configured."""
        config = ConfigManager(tmp_path).load_config()

        assert config == PromptLabConfig()
        assert config.data_dir == DEFAULT_HOME

    def test_loads_yaml_file(self, tmp_path) -> None:
        """Should apply values from config.yaml."""
        (tmp_path / "config.yaml").write_text(yaml.safe_dump({
            "data_dir": str(tmp_path / "data"),
            "default_model": "claude",
            "default_temperature": 0.1,
        }))

        config = ConfigManager(tmp_path).load_config()

        assert config.data_dir == tmp_path / "data"
        assert config.default_model == "claude"
        assert config.default_temperature == 0.1

    def test_env_overrides_file(self, tmp_path, monkeypatch) -> None:
        """Environment variables win over the file."""
        (tmp_path / "config.yaml").write_text(yaml.safe_dump({"default_model": "from-file"}))
        monkeypatch.setenv("PROMPTLAB_MODEL", "from-env")
        monkeypatch.setenv("PROMPTLAB_DATA_DIR", str(tmp_path / "env-data"))
        monkeypatch.setenv("PROMPTLAB_TEMPERATURE", "0.9")

        config = ConfigManager(tmp_path).load_config()

        assert config.default_model == "from-env"
        assert config.data_dir == tmp_path / "env-data"
        assert config.default_temperature == 0.9

    def test_invalid_env_temperature_ignored(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("PROMPTLAB_TEMPERATURE", "hot")

        assert ConfigManager(tmp_path).load_config().default_temperature == 0.7

    def test_malformed_yaml_falls_back_to_defaults(self, tmp_path) -> None:
        (tmp_path / "config.yaml").write_text("default_model: [unclosed")

        assert ConfigManager(tmp_path).load_config() == PromptLabConfig()

    def test_non_mapping_yaml_ignored(self, tmp_path) -> None:
        (tmp_path / "config.yaml").write_text("- just\n- a list\n")

        assert ConfigManager(tmp_path).load_config() == PromptLabConfig()

    def test_save_and_reload(self, tmp_path) -> None:
        config_dir = tmp_path / "nested"
        config = PromptLabConfig(data_dir=Path("/srv/prompts"), default_model="m", default_temperature=0.2)

        ConfigManager(config_dir).save_config(config)

        assert ConfigManager(config_dir).load_config() == config

    def test_config_info(self, tmp_path) -> None:
        info = ConfigManager(tmp_path).get_config_info()

        assert info["config_exists"] is False
        assert info["config_file"] == str(tmp_path / "config.yaml")
        assert info["data_dir"] == str(DEFAULT_HOME)
