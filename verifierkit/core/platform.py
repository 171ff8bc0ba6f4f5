"""
Platform detection for VerifierKit.

Detects the host operating system and CPU architecture, and maps them onto
the naming used by JetBrains Runtime artifacts and IDE layouts.

Usage:
    from verifierkit.core.platform import detect_platform

    info = detect_platform()
    print(info.platform_string())   # 'linux-x64'
    print(info.jbr_os)              # 'linux'
"""

import functools
import platform
from dataclasses import dataclass


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform information.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos')
        arch: CPU architecture ('x64', 'arm64', 'x86', or the raw machine name)
    """

    os: str
    arch: str

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'linux-x64', 'macos-arm64').

        Example:
            >>> PlatformInfo('linux', 'x64').platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    @property
    def is_macos(self) -> bool:
        return self.os == "macos"

    @property
    def jbr_os(self) -> str:
        """OS name used in JBR artifact names ('osx' instead of 'macos')."""
        return "osx" if self.is_macos else self.os

    def jbr_arch(self, new_format: bool = True) -> str:
        """
        Architecture name used in JBR artifact names.

        Args:
            new_format: 32-bit builds are named 'i586' in the new naming
                scheme and 'x86' in the old ``jbrex`` one

        Example:
            >>> PlatformInfo('linux', 'arm64').jbr_arch()
            'aarch64'
        """
        if self.arch == "arm64":
            return "aarch64"
        if self.arch == "x64":
            return "x64"
        return "i586" if new_format else "x86"

    def __str__(self) -> str:
        return self.platform_string()


_OS_NAMES = {"windows": "windows", "linux": "linux", "darwin": "macos"}

_ARCH_NAMES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "x86",
    "i686": "x86",
    "x86": "x86",
}


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect the host platform (cached for the process lifetime).

    Raises:
        RuntimeError: On an operating system JetBrains ships no IDEs for
    """
    system = platform.system().lower()
    if system not in _OS_NAMES:
        raise RuntimeError(f"Unsupported operating system: {system}")

    machine = platform.machine().lower()
    return PlatformInfo(os=_OS_NAMES[system], arch=_ARCH_NAMES.get(machine, machine))


def clear_platform_cache():
    """Forget the cached detect_platform() result."""
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
]
