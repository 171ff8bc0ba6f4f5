"""
Unit tests for lenient version parsing.
"""

import pytest
from packaging.version import Version

from verifierkit.core.versions import parse_version_lenient


class TestParseVersionLenient:
    """Test parse_version_lenient function."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("1.255", "1.255"),
            ("1.255-SNAPSHOT", "1.255"),
            ("1483.24", "1483.24"),
            ("b159", "0"),
            ("", "0"),
        ],
    )
    def test_parse(self, raw, expected):
        assert parse_version_lenient(raw) == Version(expected)

    def test_numeric_ordering(self):
        """Test components compare numerically, not lexically."""
        assert parse_version_lenient("1.100") < parse_version_lenient("1.255")
        assert parse_version_lenient("1319.6") < parse_version_lenient("1341.41")
