"""
Java runtime selection for the Plugin Verifier.

The runtime is chosen by a fixed precedence, first match wins:

1. An explicitly configured runtime directory (used verbatim)
2. An explicitly configured JBR version
3. The runtime bundled with the first resolved IDE
4. The Java runtime of the host
"""

import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from verifierkit.core.exceptions import RuntimeResolutionError
from verifierkit.core.fallback import first_success
from verifierkit.core.platform import PlatformInfo, detect_platform
from verifierkit.ide.channels import IDE_DOWNLOAD_PLATFORM
from verifierkit.runtime.jbr import JbrResolver, get_builtin_jbr_version, jbr_subpath

logger = logging.getLogger(__name__)


class RuntimeSource(Enum):
    """Which precedence step produced the runtime."""

    EXPLICIT_DIR = "explicit-dir"
    EXPLICIT_VERSION = "jbr-version"
    IDE_BUNDLED = "ide-bundled"
    HOST = "host"


@dataclass(frozen=True)
class RuntimeSpec:
    """Chosen Java home and where it came from."""

    java_home: Path
    source: RuntimeSource


def detect_host_java_home() -> Path:
    """
    Locate the Java installation of the host.

    Uses ``JAVA_HOME`` when set, otherwise derives the home from the ``java``
    launcher on PATH (``<home>/bin/java``).

    Raises:
        RuntimeResolutionError: If no Java installation can be found
    """
    java_home = os.environ.get("JAVA_HOME")
    if java_home:
        return Path(java_home)

    java = shutil.which("java")
    if java:
        return Path(java).resolve().parent.parent

    raise RuntimeResolutionError(
        "Cannot find a Java runtime on this machine. Set JAVA_HOME or add java to PATH."
    )


class RuntimeResolver:
    """
    Picks the Java runtime used to run the verifier.

    Example:
        >>> resolver = RuntimeResolver(JbrResolver())
        >>> spec = resolver.resolve(first_ide=Path("~/.pluginVerifier/ides/IC-2020.2"))
        >>> spec.source
        <RuntimeSource.IDE_BUNDLED: 'ide-bundled'>
    """

    def __init__(
        self,
        jbr_resolver: Optional[JbrResolver] = None,
        platform: Optional[PlatformInfo] = None,
    ):
        self.platform = platform or detect_platform()
        self.jbr_resolver = jbr_resolver or JbrResolver(platform=self.platform)

    def resolve(
        self,
        explicit_dir: Optional[Union[str, Path]] = None,
        explicit_version: Optional[str] = None,
        first_ide: Optional[Path] = None,
        host_java_home: Optional[Path] = None,
    ) -> RuntimeSpec:
        """
        Resolve the runtime directory.

        Args:
            explicit_dir: Configured runtime directory
            explicit_version: Configured JBR version
            first_ide: Directory of the first resolved IDE
            host_java_home: Host Java home (default: detected)

        Returns:
            RuntimeSpec of the first precedence step that applies

        Raises:
            RuntimeResolutionError: If every step is skipped and the host has
                no Java installation
        """
        steps = [
            (RuntimeSource.EXPLICIT_DIR.value, lambda: self._from_explicit_dir(explicit_dir)),
            (
                RuntimeSource.EXPLICIT_VERSION.value,
                lambda: self._from_explicit_version(explicit_version),
            ),
            (RuntimeSource.IDE_BUNDLED.value, lambda: self._from_ide(first_ide)),
            (RuntimeSource.HOST.value, lambda: host_java_home or detect_host_java_home()),
        ]

        result = first_success(steps)
        spec = RuntimeSpec(java_home=Path(result.value), source=RuntimeSource(result.name))
        logger.debug(f"Runtime directory: {spec.java_home} ({spec.source.value})")
        return spec

    def _from_explicit_dir(self, explicit_dir: Optional[Union[str, Path]]) -> Optional[Path]:
        if not explicit_dir:
            return None
        return Path(explicit_dir)

    def _from_explicit_version(self, version: Optional[str]) -> Optional[Path]:
        if not version:
            return None

        java_home = self.jbr_resolver.resolve(version)
        if java_home is None:
            logger.warning(f"Cannot resolve JBR {version}. Falling back to built-in JBR.")
        return java_home

    def _from_ide(self, ide_dir: Optional[Path]) -> Optional[Path]:
        if ide_dir is None:
            return None

        version = get_builtin_jbr_version(ide_dir)
        if not version:
            logger.debug(f"No bundled runtime declared in {ide_dir}")
            return None

        if self.platform == IDE_DOWNLOAD_PLATFORM:
            bundled = Path(ide_dir) / jbr_subpath(self.platform)
            if bundled.is_dir():
                return bundled
        else:
            logger.debug(
                f"Runtime inside {ide_dir} is built for {IDE_DOWNLOAD_PLATFORM}, "
                f"resolving JBR {version} for {self.platform}"
            )

        java_home = self.jbr_resolver.resolve(version)
        if java_home is not None and java_home.exists():
            return java_home

        logger.warning(f"Cannot resolve builtin JBR {version}. Falling back to local Java.")
        return None


__all__ = [
    "RuntimeSource",
    "RuntimeSpec",
    "RuntimeResolver",
    "detect_host_java_home",
]
