"""
Directory structure management for VerifierKit.

The cache layout follows the Plugin Verifier's own home directory so that
IDEs downloaded by either tool can be shared.

Directory Structure:
    Verifier Home ($PLUGIN_VERIFIER_HOME_DIR or ~/.pluginVerifier/):
        - ides/   : Downloaded and extracted IDE distributions ("IC-2020.2")
        - jbr/    : Downloaded JetBrains Runtime builds
        - maven/  : Resolved Maven artifacts (Plugin Verifier CLI jars)
        - lock/   : Per-artifact advisory lock files
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

HOME_DIR_ENV = "PLUGIN_VERIFIER_HOME_DIR"


class DirectoryError(Exception):
    """Base exception for directory-related errors."""

    pass


def get_verifier_home_dir() -> Path:
    """
    Get the Plugin Verifier home directory.

    Resolution order matches the Plugin Verifier itself:
    ``$PLUGIN_VERIFIER_HOME_DIR``, then ``~/.pluginVerifier``, then
    ``<tempdir>/.pluginVerifier`` when no home directory is available.

    Example:
        >>> get_verifier_home_dir()
        PosixPath('/home/user/.pluginVerifier')
    """
    override = os.environ.get(HOME_DIR_ENV)
    if override:
        return Path(override)

    try:
        return Path.home() / ".pluginVerifier"
    except RuntimeError:
        return Path(tempfile.gettempdir()) / ".pluginVerifier"


def get_ide_download_dir(home: Optional[Path] = None) -> Path:
    """Get the directory used for storing downloaded IDEs."""
    return (home or get_verifier_home_dir()) / "ides"


def get_jbr_cache_dir(home: Optional[Path] = None) -> Path:
    """Get the directory used for storing downloaded JetBrains Runtimes."""
    return (home or get_verifier_home_dir()) / "jbr"


def get_maven_cache_dir(home: Optional[Path] = None) -> Path:
    """Get the directory used for storing resolved Maven artifacts."""
    return (home or get_verifier_home_dir()) / "maven"


def get_lock_dir(home: Optional[Path] = None) -> Path:
    """Get the directory holding advisory lock files."""
    return (home or get_verifier_home_dir()) / "lock"


def ensure_cache_structure(home: Optional[Path] = None) -> Dict[str, Path]:
    """
    Create the cache directory structure if it doesn't exist.

    Args:
        home: Cache root (default: verifier home directory)

    Returns:
        Mapping of directory role to path

    Raises:
        DirectoryError: If a directory cannot be created
    """
    home = home or get_verifier_home_dir()
    paths = {
        "home": home,
        "ides": get_ide_download_dir(home),
        "jbr": get_jbr_cache_dir(home),
        "maven": get_maven_cache_dir(home),
        "lock": get_lock_dir(home),
    }

    for role, path in paths.items():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryError(f"Failed to create {role} directory {path}: {e}") from e

    logger.debug(f"Cache structure ready at {home}")
    return paths
