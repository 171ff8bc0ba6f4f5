"""
Shared utilities for CLI commands.

Provides configuration loading and command-line overrides shared by all
commands, plus console output helpers.
"""

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from verifierkit.config.parser import (
    CONFIG_FILENAME,
    VerifierKitConfig,
    parse_config,
)
from verifierkit.verifier.failure_levels import parse_failure_levels

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Management
# ============================================================================


def find_config_file(args) -> Optional[Path]:
    """Get the explicit --config file, or verifierkit.yaml in the project root."""
    if getattr(args, "config", None):
        return Path(args.config)

    default_config = resolve_project_root(getattr(args, "project_root", None)) / CONFIG_FILENAME
    return default_config if default_config.exists() else None


def load_config(args) -> VerifierKitConfig:
    """
    Build the effective configuration for a command.

    The configuration file (if any) is parsed first; command-line flags
    then override individual values.

    Raises:
        ConfigError: If the configuration file is missing or invalid
    """
    config_file = find_config_file(args)
    if config_file is not None:
        config = parse_config(config_file)
    else:
        logger.debug("No configuration file, using defaults")
        config = VerifierKitConfig(
            base_dir=resolve_project_root(getattr(args, "project_root", None))
        )

    return apply_overrides(config, args)


def apply_overrides(config: VerifierKitConfig, args) -> VerifierKitConfig:
    """Apply command-line flags on top of a configuration."""
    cwd = Path.cwd()
    config = replace(config)

    def path_arg(name: str) -> Optional[str]:
        value = getattr(args, name, None)
        return str((cwd / value).resolve()) if value else None

    def list_arg(name: str):
        return list(getattr(args, name, None) or [])

    if path_arg("plugin"):
        config = replace(config, plugin=path_arg("plugin"))
    if list_arg("ide"):
        config = replace(config, ides=list_arg("ide"))
    if list_arg("local_path"):
        config = replace(
            config, local_paths=[str((cwd / p).resolve()) for p in list_arg("local_path")]
        )
    if list_arg("failure_level"):
        config = replace(config, failure_levels=parse_failure_levels(list_arg("failure_level")))
    if list_arg("external_prefix"):
        config = replace(config, external_prefixes=list_arg("external_prefix"))
    if getattr(args, "team_city", False):
        config = replace(config, team_city=True)
    if getattr(args, "subsystems_to_check", None):
        config = replace(config, subsystems_to_check=args.subsystems_to_check)
    if getattr(args, "offline", False):
        config = replace(config, offline=True)

    if getattr(args, "verifier_version", None):
        config.verifier = replace(config.verifier, version=args.verifier_version)
    if path_arg("verifier_path"):
        config.verifier = replace(config.verifier, path=path_arg("verifier_path"))

    if path_arg("runtime_dir"):
        config.runtime = replace(config.runtime, dir=path_arg("runtime_dir"))
    if getattr(args, "jbr_version", None):
        config.runtime = replace(config.runtime, jbr_version=args.jbr_version)

    if path_arg("reports_dir"):
        config.directories = replace(config.directories, reports=path_arg("reports_dir"))
    if path_arg("download_dir"):
        config.directories = replace(config.directories, downloads=path_arg("download_dir"))

    if getattr(args, "parallel", None):
        config.network = replace(config.network, parallel_downloads=args.parallel)

    return config


# ============================================================================
# Output Formatting
# ============================================================================


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr.

    Args:
        message: Main error message
        details: Optional detailed explanation
    """
    safe_print(f"❌ Error: {message}", file=sys.stderr)
    if details:
        print(f"   {details}", file=sys.stderr)


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for Windows console.

    Falls back to ASCII-safe characters if Unicode emojis can't be encoded.

    Args:
        message: Message to print
        file: Output file (default: stdout)
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        safe_message = (
            message.replace("⚠️", "WARNING:")
            .replace("✅", "[OK]")
            .replace("❌", "[ERROR]")
        )
        print(safe_message, file=file)


# ============================================================================
# Path Utilities
# ============================================================================


def resolve_project_root(path: Optional[Path] = None) -> Path:
    """
    Resolve project root directory.

    Args:
        path: Optional project root path (uses cwd if None)

    Returns:
        Resolved absolute path to project root
    """
    if path is None:
        return Path.cwd()
    return Path(path).resolve()
