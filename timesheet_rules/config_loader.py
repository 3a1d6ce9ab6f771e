"""Configuration loading for timesheet-rules."""

import logging
from importlib.resources import files
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads the rule engine configuration (bundled local-config.yaml by default)."""

    DEFAULT_RULE_TYPE = "all"

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_path: Optional path to a YAML config file. When omitted the
                local-config.yaml bundled with the timesheet_rules package is used.

        Raises:
            RuntimeError: If the config file cannot be read or parsed
            ValueError: If the config file does not contain a mapping
        """
        if config_path is None:
            # Bundled config is read through importlib.resources (works for zipped installs)
            config_file = files('timesheet_rules').joinpath('local-config.yaml')
        else:
            config_file = Path(config_path)
        self.config_path = str(config_file)

        self.config = self._load_yaml(config_file)

        logger.debug(
            f"Loaded config from {self.config_path}",
            extra={'criteria_types': sorted(self.get_criteria_types())}
        )

    def _load_yaml(self, config_file) -> Dict[str, Any]:
        """Load YAML from a Path or importlib.resources Traversable."""
        try:
            with config_file.open('r') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise RuntimeError(f"Failed to load config from {config_file}: {e}") from e

        # An empty file parses to None
        if config is None:
            return {}

        if not isinstance(config, dict):
            raise ValueError(
                f"Config at {config_file} must be a mapping, got {type(config).__name__}"
            )

        return config

    def get_config(self) -> Dict[str, Any]:
        """Get the full configuration dict."""
        return self.config

    def get_default_rule_type(self) -> str:
        """Rule type used when a rule does not declare one."""
        return self.config.get('default_rule_type', self.DEFAULT_RULE_TYPE)

    def get_criteria_types(self) -> Dict[str, str]:
        """Get rule type tag -> criteria class path mapping."""
        return self.config.get('criteria_types') or {}

    def get_entry_field_mapping(self) -> Dict[str, str]:
        """Get logical entry field -> physical path mapping."""
        return self.config.get('entry_field_mapping') or {}
