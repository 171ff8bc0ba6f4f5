"""Configuration module for VerifierKit.

This module provides YAML configuration parsing and validation for verifierkit.yaml.
"""

from verifierkit.config.parser import (
    CONFIG_FILENAME,
    VerifierConfig,
    RuntimeConfig,
    DirectoriesConfig,
    NetworkConfig,
    VerifierKitConfig,
    ConfigError,
    parse_config,
    parse_config_data,
)

__all__ = [
    "CONFIG_FILENAME",
    "VerifierConfig",
    "RuntimeConfig",
    "DirectoriesConfig",
    "NetworkConfig",
    "VerifierKitConfig",
    "ConfigError",
    "parse_config",
    "parse_config_data",
]
