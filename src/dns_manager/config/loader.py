"""Configuration loader for the DNS manager.

Settings come from three layers, later layers winning: dataclass defaults,
an optional YAML or JSON file, and DNS_MANAGER_<SECTION>_<KEY> environment
variables.
"""

import json
import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .schema import DNSManagerConfig, LoggingConfig, RecordsConfig, StoreConfig

ENV_PREFIX = "DNS_MANAGER_"

SECTIONS = {
    "store": StoreConfig,
    "records": RecordsConfig,
    "logging": LoggingConfig,
}


class ConfigLoader:
    """Configuration loader."""

    def __init__(self, config_file: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_file: Path to configuration file (YAML or JSON)
        """
        self.config_file = config_file

    def load_config(self) -> DNSManagerConfig:
        """Load configuration from file and environment variables.

        Returns:
            Loaded and validated DNS manager configuration

        Raises:
            FileNotFoundError: If config file is specified but not found
            ValueError: If configuration is invalid
            yaml.YAMLError: If YAML parsing fails
        """
        settings: Dict[str, Dict[str, Any]] = {section: {} for section in SECTIONS}

        if self.config_file:
            for section, values in self._read_file(Path(self.config_file)).items():
                if section not in SECTIONS:
                    raise ValueError(f"Unknown configuration section '{section}'")
                if values is None:
                    continue
                if not isinstance(values, dict):
                    raise ValueError(
                        f"Configuration section '{section}' must be a mapping"
                    )
                settings[section].update(values)

        for section, overrides in self._read_environment().items():
            settings[section].update(overrides)

        built = {}
        for section, section_class in SECTIONS.items():
            try:
                built[section] = section_class(**settings[section])
            except TypeError as e:
                raise ValueError(f"Invalid '{section}' configuration: {e}") from e

        return DNSManagerConfig(**built)

    def _read_file(self, path: Path) -> Dict[str, Any]:
        """Parse the configuration file; anything but .json is read as YAML."""
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            content = json.loads(text)
        else:
            content = yaml.safe_load(text)

        return content if isinstance(content, dict) else {}

    def _read_environment(self) -> Dict[str, Dict[str, Any]]:
        """Collect overrides for known settings, e.g. DNS_MANAGER_RECORDS_DEFAULT_TTL.

        Integer settings are converted; everything else stays a string.
        """
        overrides: Dict[str, Dict[str, Any]] = {}

        for section, section_class in SECTIONS.items():
            for setting in fields(section_class):
                env_key = f"{ENV_PREFIX}{section}_{setting.name}".upper()
                if env_key not in os.environ:
                    continue

                value: Any = os.environ[env_key]
                if setting.type is int:
                    try:
                        value = int(value)
                    except ValueError:
                        raise ValueError(f"{env_key} must be an integer: {value!r}")
                overrides.setdefault(section, {})[setting.name] = value

        return overrides
