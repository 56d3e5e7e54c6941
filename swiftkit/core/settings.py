"""
User settings for swiftkit.

Settings are read from an optional YAML file in the data directory
(`settings.yaml`). Every key is optional; command-line flags take
precedence over the file.

Example settings.yaml:
    platform: ubuntu22.04
    verify_signatures: true
    keys_url: https://www.swift.org/keys/all-keys.asc
    download_base_url: https://download.swift.org
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from swiftkit.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SWIFT_KEYS_URL = "https://www.swift.org/keys/all-keys.asc"
SWIFT_DOWNLOAD_BASE_URL = "https://download.swift.org"


@dataclass
class Settings:
    """
    swiftkit settings.

    Attributes:
        platform: Platform hint used instead of detection (e.g. 'ubuntu22.04')
        verify_signatures: Verify toolchain signatures with gpg
        keys_url: URL of the Swift signing key bundle
        download_base_url: Root of the toolchain download tree
    """

    platform: Optional[str] = None
    verify_signatures: bool = True
    keys_url: str = SWIFT_KEYS_URL
    download_base_url: str = SWIFT_DOWNLOAD_BASE_URL

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """
        Build settings from a parsed mapping.

        Raises:
            ConfigurationError: If a known key has the wrong type
        """
        known = {f.name for f in fields(cls)}
        values = {}

        for key, value in data.items():
            if key not in known:
                logger.debug(f"Ignoring unknown setting: {key}")
                continue
            values[key] = value

        if "verify_signatures" in values and not isinstance(
            values["verify_signatures"], bool
        ):
            raise ConfigurationError(
                f"Setting 'verify_signatures' must be true or false, "
                f"got {values['verify_signatures']!r}"
            )

        for key in ("platform", "keys_url", "download_base_url"):
            if key in values and values[key] is not None and not isinstance(
                values[key], str
            ):
                raise ConfigurationError(
                    f"Setting '{key}' must be a string, got {values[key]!r}"
                )

        return cls(**values)


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        FileNotFoundError: If required=True and file doesn't exist
        ConfigurationError: If YAML parsing fails or the top level is not a mapping
    """
    if not config_file.exists():
        if required:
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Expected a mapping at the top level of {config_file}"
        )

    return config


def load_settings(settings_file: Path) -> Settings:
    """Load settings, falling back to defaults when the file is absent."""
    return Settings.from_dict(load_yaml_config(settings_file))


__all__ = [
    "SWIFT_KEYS_URL",
    "SWIFT_DOWNLOAD_BASE_URL",
    "Settings",
    "load_yaml_config",
    "load_settings",
]
