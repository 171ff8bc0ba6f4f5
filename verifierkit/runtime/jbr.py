"""
JetBrains Runtime (JBR) resolution.

Maps a JBR version identifier onto an artifact name for the host platform,
downloads the artifact from the JBR repository into the local cache and
reports the resulting Java home.

Supports identifiers in the forms used by IDE build metadata and by users:
    - 11_0_9b1145.77
    - u202b1483.24          (Java 8, 'u' shorthand)
    - jbr_jcef-17.0.6b829.5 (explicit prefix)
    - jbrex8u152b1024.10    (legacy Java 8 builds)
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import requests
from packaging.version import Version

from verifierkit.core.directory import get_jbr_cache_dir
from verifierkit.core.download import DownloadError, download_file
from verifierkit.core.filesystem import (
    ArchiveExtractionError,
    FilesystemError,
    extract_archive,
    flatten_single_root,
    is_empty_directory,
    safe_rmtree,
)
from verifierkit.core.platform import PlatformInfo, detect_platform
from verifierkit.core.versions import parse_version_lenient

logger = logging.getLogger(__name__)

JBR_REPOSITORY = "https://cache-redirector.jetbrains.com/intellij-jbr"

# Longest first so that 'jbr_jcef-' is not read as 'jbr'
KNOWN_PREFIXES: Tuple[str, ...] = (
    "jbr_dcevm-",
    "jbr_jcef-",
    "jbrsdk-",
    "jbr_fd-",
    "jbrx-",
    "jbrex",
    "jbr-",
)

JCEF_DEFAULT_SINCE = Version("1319.6")
JBREX_UNTIL = Version("1483.24")

DEPENDENCIES_FILE = "dependencies.txt"
RUNTIME_BUILD_KEYS = ("runtimeBuild", "jdkBuild")


# =============================================================================
# Artifact naming
# =============================================================================


def _split_version(version: str) -> Tuple[str, str, str]:
    """Split an identifier into (prefix, major, build)."""
    if version.startswith("u"):
        version = f"8{version}"

    prefix = next((p for p in KNOWN_PREFIXES if version.startswith(p)), "")
    body = version[len(prefix):]

    index = body.rfind("b")
    if index > 0:
        major, build = body[:index], body[index + 1:]
    else:
        major, _, build = body.rpartition("-")

    major = major.rstrip("-_")
    if not major or not build:
        raise ValueError(f"Cannot parse JetBrains Runtime version: '{version}'")

    return prefix, major, build


def jbr_artifact_name(version: str, platform: Optional[PlatformInfo] = None) -> str:
    """
    Build the JBR artifact name for a version and platform.

    Args:
        version: JBR version identifier
        platform: Target platform (default: host platform)

    Returns:
        Artifact name without the archive extension

    Raises:
        ValueError: If the identifier has no recognizable build number

    Example:
        >>> jbr_artifact_name("11_0_10b1341.41", PlatformInfo("linux", "x64"))
        'jbr_jcef-11_0_10-linux-x64-b1341.41'
        >>> jbr_artifact_name("u202b1483.24", PlatformInfo("macos", "x64"))
        'jbrx-8u202-osx-x64-b1483.24'
    """
    platform = platform or detect_platform()
    prefix, major, build = _split_version(version.strip())
    is_java8 = major.startswith("8")
    build_version = parse_version_lenient(build)

    if prefix == "jbrex" or (not prefix and is_java8 and build_version < JBREX_UNTIL):
        return (
            f"jbrex{major}b{build}_{platform.jbr_os}_{platform.jbr_arch(new_format=False)}"
        )

    if not prefix:
        if is_java8:
            prefix = "jbrx-"
        elif build_version < JCEF_DEFAULT_SINCE:
            prefix = "jbr-"
        else:
            prefix = "jbr_jcef-"

    return f"{prefix}{major}-{platform.jbr_os}-{platform.jbr_arch()}-b{build}"


def jbr_subpath(platform: Optional[PlatformInfo] = None) -> str:
    """Location of the Java home inside an IDE or JBR distribution."""
    platform = platform or detect_platform()
    return "jbr/Contents/Home" if platform.is_macos else "jbr"


def java_home_of(directory: Path, platform: Optional[PlatformInfo] = None) -> Path:
    """
    Find the Java home inside an extracted JBR archive.

    JCEF builds nest the runtime in a ``jbr`` directory and macOS builds keep
    it under ``Contents/Home``; a flat archive is its own Java home.
    """
    platform = platform or detect_platform()

    nested = directory / jbr_subpath(platform)
    if nested.is_dir():
        return nested

    if platform.is_macos and (directory / "Contents" / "Home").is_dir():
        return directory / "Contents" / "Home"

    return directory


# =============================================================================
# IDE metadata
# =============================================================================


def read_properties(path: Union[str, Path]) -> Dict[str, str]:
    """Read a simple ``key=value`` / ``key: value`` properties file."""
    properties: Dict[str, str] = {}

    for line in Path(path).read_text(encoding="utf-8", errors="replace").splitlines():
        line = line.strip()
        if not line or line[0] in "#!":
            continue

        separators = [i for i in (line.find("="), line.find(":")) if i > 0]
        if not separators:
            continue
        index = min(separators)
        properties[line[:index].strip()] = line[index + 1:].strip()

    return properties


def get_builtin_jbr_version(ide_dir: Union[str, Path]) -> Optional[str]:
    """
    Read the runtime identifier an IDE distribution was built with.

    Returns:
        Value of ``runtimeBuild`` (or ``jdkBuild``) from the IDE's
        dependencies.txt, or None when the IDE does not declare one
    """
    dependencies = Path(ide_dir) / DEPENDENCIES_FILE
    if not dependencies.is_file():
        return None

    try:
        properties = read_properties(dependencies)
    except OSError as e:
        logger.debug(f"Cannot read {dependencies}: {e}")
        return None

    for key in RUNTIME_BUILD_KEYS:
        value = properties.get(key)
        if value:
            return value
    return None


# =============================================================================
# Resolver
# =============================================================================


class JbrResolver:
    """
    Downloads and caches JetBrains Runtime builds.

    Example:
        >>> resolver = JbrResolver()
        >>> resolver.resolve("11_0_10b1341.41")
        PosixPath('/home/user/.pluginVerifier/jbr/jbr_jcef-11_0_10-linux-x64-b1341.41/jbr')
    """

    def __init__(
        self,
        cache_dir: Optional[Path] = None,
        repository_url: str = JBR_REPOSITORY,
        offline: bool = False,
        platform: Optional[PlatformInfo] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.cache_dir = Path(cache_dir) if cache_dir else get_jbr_cache_dir()
        self.repository_url = repository_url.rstrip("/")
        self.offline = offline
        self.platform = platform or detect_platform()
        self.session = session or requests.Session()
        self.timeout = timeout

    def resolve(self, version: Optional[str]) -> Optional[Path]:
        """
        Resolve a JBR version to a local Java home.

        Failures are reported as warnings; the caller decides what to fall
        back to.

        Returns:
            Java home directory, or None when the runtime is unavailable
        """
        if not version:
            return None

        try:
            artifact = jbr_artifact_name(version, self.platform)
        except ValueError as e:
            logger.warning(str(e))
            return None

        target = self.cache_dir / artifact
        if target.is_dir() and any(target.iterdir()):
            logger.debug(f"JetBrains Runtime {artifact} already cached at {target}")
            return java_home_of(target, self.platform)

        if self.offline:
            logger.warning(
                f"Cannot download JetBrains Java Runtime '{artifact}'. Offline mode is enabled."
            )
            return None

        return self._download(artifact, target)

    def _download(self, artifact: str, target: Path) -> Optional[Path]:
        url = f"{self.repository_url}/{artifact}.tar.gz"
        archive = self.cache_dir / f"{artifact}.tar.gz"
        logger.info(f"Downloading JetBrains Runtime {artifact}")

        try:
            download_file(url, archive, timeout=self.timeout, session=self.session)
            extract_archive(archive, target)
            flatten_single_root(target)
            if is_empty_directory(target):
                raise ArchiveExtractionError(f"Archive {archive.name} contains no files")
        except (DownloadError, FilesystemError, OSError) as e:
            logger.warning(f"Cannot download JetBrains Java Runtime '{artifact}': {e}")
            if target.exists():
                safe_rmtree(target, require_prefix=self.cache_dir)
            return None
        finally:
            archive.unlink(missing_ok=True)

        return java_home_of(target, self.platform)


__all__ = [
    "JBR_REPOSITORY",
    "JbrResolver",
    "jbr_artifact_name",
    "jbr_subpath",
    "java_home_of",
    "get_builtin_jbr_version",
    "read_properties",
]
