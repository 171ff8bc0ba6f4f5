"""YAML configuration parser for VerifierKit.

This module provides parsing and validation for verifierkit.yaml configuration files.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Union

import yaml

from verifierkit.core.exceptions import ConfigError
from verifierkit.ide.channels import CACHE_REDIRECTOR
from verifierkit.runtime.jbr import JBR_REPOSITORY
from verifierkit.verifier.failure_levels import (
    DEFAULT_LEVELS,
    FailureLevel,
    parse_failure_levels,
)
from verifierkit.verifier.resolver import VERIFIER_VERSION_LATEST
from verifierkit.verifier.runner import SUBSYSTEMS

CONFIG_FILENAME = "verifierkit.yaml"
DEFAULT_REPORTS_DIR = "build/reports/pluginVerifier"


@dataclass
class VerifierConfig:
    """Plugin Verifier selection."""

    version: str = VERIFIER_VERSION_LATEST
    path: Optional[str] = None  # explicit jar, wins when it exists


@dataclass
class RuntimeConfig:
    """Java runtime selection."""

    dir: Optional[str] = None
    jbr_version: Optional[str] = None


@dataclass
class DirectoriesConfig:
    """Output and cache locations."""

    reports: str = DEFAULT_REPORTS_DIR
    downloads: Optional[str] = None  # default: <verifier home>/ides
    cache: Optional[str] = None  # default: <verifier home>


@dataclass
class NetworkConfig:
    """Download settings."""

    mirror: Optional[str] = CACHE_REDIRECTOR
    jre_repository: str = JBR_REPOSITORY
    timeout: Optional[float] = None
    parallel_downloads: int = 1


@dataclass
class VerifierKitConfig:
    """Complete VerifierKit configuration."""

    version: int = 1
    plugin: Optional[str] = None
    ides: List[str] = field(default_factory=list)
    local_paths: List[str] = field(default_factory=list)
    failure_levels: FrozenSet[FailureLevel] = DEFAULT_LEVELS
    verifier: VerifierConfig = field(default_factory=VerifierConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    directories: DirectoriesConfig = field(default_factory=DirectoriesConfig)
    external_prefixes: List[str] = field(default_factory=list)
    team_city: bool = False
    subsystems_to_check: Optional[str] = None
    offline: bool = False
    network: NetworkConfig = field(default_factory=NetworkConfig)
    base_dir: Path = field(default_factory=Path.cwd)

    def resolve_path(self, value: Optional[Union[str, Path]]) -> Optional[Path]:
        """Resolve a configured path relative to the configuration's directory."""
        if value is None or value == "":
            return None
        path = Path(value).expanduser()
        return path if path.is_absolute() else self.base_dir / path


def parse_config(config_path: Path) -> VerifierKitConfig:
    """
    Parse verifierkit.yaml configuration file.

    Relative paths in the file are resolved against the file's directory.

    Args:
        config_path: Path to verifierkit.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if data is None:
        raise ConfigError("Configuration file is empty")

    return parse_config_data(data, base_dir=config_path.resolve().parent)


def parse_config_data(data: Dict[str, Any], base_dir: Optional[Path] = None) -> VerifierKitConfig:
    """Parse and validate configuration data."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    if "version" not in data:
        raise ConfigError("Missing required field: version")

    if data["version"] != 1:
        raise ConfigError(f"Unsupported version: {data['version']} (expected 1)")

    subsystems = data.get("subsystems_to_check")
    if subsystems is not None and subsystems not in SUBSYSTEMS:
        raise ConfigError(
            f"Invalid subsystems_to_check: {subsystems} (expected one of {list(SUBSYSTEMS)})"
        )

    failure_levels = data.get("failure_levels")
    if failure_levels is None:
        levels = DEFAULT_LEVELS
    else:
        levels = parse_failure_levels(_string_list(failure_levels, "failure_levels"))

    return VerifierKitConfig(
        version=data["version"],
        plugin=data.get("plugin"),
        ides=_string_list(data.get("ides", []), "ides"),
        local_paths=_string_list(data.get("local_paths", []), "local_paths"),
        failure_levels=levels,
        verifier=_parse_verifier_config(_section(data, "verifier")),
        runtime=_parse_runtime_config(_section(data, "runtime")),
        directories=_parse_directories_config(_section(data, "directories")),
        external_prefixes=_string_list(data.get("external_prefixes", []), "external_prefixes"),
        team_city=_flag(data, "team_city"),
        subsystems_to_check=subsystems,
        offline=_flag(data, "offline"),
        network=_parse_network_config(_section(data, "network")),
        base_dir=base_dir or Path.cwd(),
    )


def _section(data: dict, name: str) -> dict:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be a dictionary")
    return value


def _flag(data: dict, name: str) -> bool:
    value = data.get(name)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be true or false: {value!r}")
    return value


def _string_list(value: Any, name: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ConfigError(f"{name} must be a list")
    return [str(item) for item in value]


def _parse_verifier_config(data: dict) -> VerifierConfig:
    """Parse verifier configuration."""
    return VerifierConfig(
        version=str(data.get("version") or VERIFIER_VERSION_LATEST),
        path=data.get("path"),
    )


def _parse_runtime_config(data: dict) -> RuntimeConfig:
    """Parse runtime configuration."""
    jbr_version = data.get("jbr_version")
    return RuntimeConfig(
        dir=data.get("dir"),
        jbr_version=str(jbr_version) if jbr_version is not None else None,
    )


def _parse_directories_config(data: dict) -> DirectoriesConfig:
    """Parse directories configuration."""
    return DirectoriesConfig(
        reports=data.get("reports") or DEFAULT_REPORTS_DIR,
        downloads=data.get("downloads"),
        cache=data.get("cache"),
    )


def _parse_network_config(data: dict) -> NetworkConfig:
    """Parse network configuration."""
    timeout = data.get("timeout")
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid network timeout: {timeout}")
        if timeout <= 0:
            raise ConfigError(f"Network timeout must be positive: {timeout}")

    parallel = data.get("parallel_downloads", 1)
    if not isinstance(parallel, int) or isinstance(parallel, bool) or parallel < 1:
        raise ConfigError(f"parallel_downloads must be a positive integer: {parallel}")

    return NetworkConfig(
        mirror=data.get("mirror", CACHE_REDIRECTOR),
        jre_repository=data.get("jre_repository") or JBR_REPOSITORY,
        timeout=timeout,
        parallel_downloads=parallel,
    )
