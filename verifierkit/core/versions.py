"""
Version comparison helpers.

Verifier and JBR versions are compared with ``packaging.version``; values
that are not PEP 440 compliant are compared by their leading numeric part.
"""

import re

from packaging.version import InvalidVersion, Version

_NUMERIC_PREFIX = re.compile(r"\d+(\.\d+)*")


def parse_version_lenient(version: str) -> Version:
    """
    Parse a version, falling back to its leading numeric part.

    Example:
        >>> parse_version_lenient("1.255-SNAPSHOT")
        <Version('1.255')>
        >>> parse_version_lenient("b159")
        <Version('0')>
    """
    try:
        return Version(version)
    except InvalidVersion:
        match = _NUMERIC_PREFIX.match(version.strip())
        return Version(match.group(0)) if match else Version("0")


__all__ = ["parse_version_lenient"]
