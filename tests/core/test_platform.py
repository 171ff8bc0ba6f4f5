"""
Unit tests for platform detection.
"""

from unittest.mock import patch

import pytest

from verifierkit.core.platform import PlatformInfo, detect_platform


class TestPlatformInfo:
    """Test PlatformInfo naming used by JBR artifacts."""

    def test_platform_string(self):
        assert PlatformInfo("linux", "x64").platform_string() == "linux-x64"

    @pytest.mark.parametrize(
        "os_name,expected", [("linux", "linux"), ("windows", "windows"), ("macos", "osx")]
    )
    def test_jbr_os(self, os_name, expected):
        """Test macOS is called 'osx' in JBR artifact names."""
        assert PlatformInfo(os_name, "x64").jbr_os == expected

    @pytest.mark.parametrize(
        "arch,new_format,expected",
        [
            ("x64", True, "x64"),
            ("x64", False, "x64"),
            ("arm64", True, "aarch64"),
            ("x86", True, "i586"),
            ("x86", False, "x86"),
        ],
    )
    def test_jbr_arch(self, arch, new_format, expected):
        assert PlatformInfo("linux", arch).jbr_arch(new_format=new_format) == expected


class TestDetectPlatform:
    """Test detect_platform function."""

    @patch("verifierkit.core.platform.platform.machine", return_value="aarch64")
    @patch("verifierkit.core.platform.platform.system", return_value="Darwin")
    def test_detect_macos_arm(self, mock_system, mock_machine):
        info = detect_platform()

        assert info == PlatformInfo("macos", "arm64")
        assert info.is_macos

    @patch("verifierkit.core.platform.platform.machine", return_value="AMD64")
    @patch("verifierkit.core.platform.platform.system", return_value="Windows")
    def test_detect_windows_x64(self, mock_system, mock_machine):
        assert detect_platform() == PlatformInfo("windows", "x64")

    @patch("verifierkit.core.platform.platform.system", return_value="Plan9")
    def test_unsupported_os(self, mock_system):
        with pytest.raises(RuntimeError, match="Unsupported operating system"):
            detect_platform()
