"""
Configuration management for promptlab.

Handles loading and managing configuration from a YAML file and
environment variables. The prompt store itself only needs the data root.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_HOME = Path.home() / '.promptlab'


@dataclass
class PromptLabConfig:
    """Main configuration for promptlab."""

    # Root of index.json and the prompts/ directory
    data_dir: Path = field(default_factory=lambda: DEFAULT_HOME)

    # Metadata used when creating prompts without explicit values
    default_model: str = "gpt-4o"
    default_temperature: float = 0.7
    default_description: str = ""


class ConfigManager:
    """Manages promptlab configuration from multiple sources."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or DEFAULT_HOME
        self.config_file = self.config_dir / 'config.yaml'
        self._config: Optional[PromptLabConfig] = None

    def load_config(self) -> PromptLabConfig:
        """Load configuration from all sources."""
        if self._config:
            return self._config

        config = PromptLabConfig()

        if self.config_file.exists():
            config = self._merge_configs(config, self._load_from_file())

        config = self._merge_configs(config, self._load_from_env())

        self._config = config
        return config

    def _load_from_file(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Could not load config file %s: %s", self.config_file, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config file %s: expected a mapping", self.config_file)
            return {}
        return data

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        data_dir = os.getenv('PROMPTLAB_DATA_DIR')
        if data_dir:
            env_config['data_dir'] = data_dir

        model = os.getenv('PROMPTLAB_MODEL')
        if model:
            env_config['default_model'] = model

        temperature = os.getenv('PROMPTLAB_TEMPERATURE')
        if temperature:
            try:
                env_config['default_temperature'] = float(temperature)
            except ValueError:
                logger.warning("Ignoring PROMPTLAB_TEMPERATURE=%r: not a number", temperature)

        return env_config

    def _merge_configs(self, base: PromptLabConfig, override: Dict[str, Any]) -> PromptLabConfig:
        """Apply recognised keys from ``override`` onto ``base``."""
        if override.get('data_dir'):
            base.data_dir = Path(override['data_dir']).expanduser()
        if 'default_model' in override:
            base.default_model = str(override['default_model'])
        if 'default_temperature' in override:
            try:
                base.default_temperature = float(override['default_temperature'])
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid default_temperature: %r", override['default_temperature'])
        if 'default_description' in override:
            base.default_description = str(override['default_description'])
        return base

    def save_config(self, config: PromptLabConfig) -> None:
        """Save configuration to file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        config_dict = {
            'data_dir': str(config.data_dir),
            'default_model': config.default_model,
            'default_temperature': config.default_temperature,
            'default_description': config.default_description,
        }

        with open(self.config_file, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, indent=2)
        self._config = config

    def get_config_info(self) -> Dict[str, Any]:
        """Get information about current configuration."""
        config = self.load_config()

        return {
            'config_file': str(self.config_file),
            'config_exists': self.config_file.exists(),
            'data_dir': str(config.data_dir),
            'default_model': config.default_model,
            'default_temperature': config.default_temperature,
        }


# Global config manager instance
_config_manager: Optional[ConfigManager] = None

def get_config_manager() -> ConfigManager:
    """Get the global config manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager

def load_config() -> PromptLabConfig:
    """Load the current configuration."""
    return get_config_manager().load_config()
