"""
IntelliJ Plugin Verifier resolution.

Locates the verifier-cli jar: an explicit local path when one is given and
exists, otherwise a concrete (or "latest") version fetched from the
verifier's Maven repository.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import requests
from packaging.version import Version

from verifierkit.core.download import DownloadError, fetch_text
from verifierkit.core.exceptions import (
    ArtifactResolutionError,
    OfflineVerifierError,
    VerifierResolutionError,
)
from verifierkit.core.versions import parse_version_lenient
from verifierkit.verifier.maven import MavenArtifactResolver

logger = logging.getLogger(__name__)

VERIFIER_VERSION_LATEST = "latest"
VERIFIER_METADATA_URL = (
    "https://cache-redirector.jetbrains.com/packages.jetbrains.team/maven/p/"
    "intellij-plugin-verifier/intellij-plugin-verifier/org/jetbrains/intellij/"
    "plugins/verifier-cli/maven-metadata.xml"
)
VERIFIER_REPOSITORY = (
    "https://cache-redirector.jetbrains.com/packages.jetbrains.team/maven/p/"
    "intellij-plugin-verifier/intellij-plugin-verifier"
)
OLD_VERIFIER_REPOSITORY = (
    "https://cache-redirector.jetbrains.com/jetbrains.bintray.com/intellij-plugin-service"
)
# The verifier moved to the JetBrains Space repository with this release
REPOSITORY_CUTOFF = Version("1.255")
VERIFIER_COORDINATE = "org.jetbrains.intellij.plugins:verifier-cli:{version}:all@jar"


@dataclass(frozen=True)
class VerifierSpec:
    """Requested Plugin Verifier: an explicit jar path or a version."""

    version: str = VERIFIER_VERSION_LATEST
    explicit_path: Optional[Path] = None


def repository_for_version(version: str) -> str:
    """Get the Maven repository hosting a verifier version."""
    if parse_version_lenient(version) >= REPOSITORY_CUTOFF:
        return VERIFIER_REPOSITORY
    return OLD_VERIFIER_REPOSITORY


def parse_latest_version(metadata_xml: str) -> str:
    """
    Read ``<versioning><latest>`` from a maven-metadata.xml document.

    Raises:
        VerifierResolutionError: If the document is malformed or has no latest version
    """
    try:
        root = ET.fromstring(metadata_xml)
    except ET.ParseError as e:
        raise VerifierResolutionError(f"Invalid Plugin Verifier metadata: {e}") from e

    latest = root.findtext("versioning/latest")
    if not latest or not latest.strip():
        raise VerifierResolutionError("Cannot resolve the latest Plugin Verifier version")
    return latest.strip()


class VerifierResolver:
    """
    Resolves the Plugin Verifier jar path.

    Example:
        >>> resolver = VerifierResolver()
        >>> resolver.resolve(VerifierSpec(version="latest"), offline=False)
        PosixPath('/home/user/.pluginVerifier/maven/org/jetbrains/.../verifier-cli-1.255-all.jar')
    """

    def __init__(
        self,
        artifact_resolver: Optional[MavenArtifactResolver] = None,
        metadata_url: str = VERIFIER_METADATA_URL,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.metadata_url = metadata_url
        self.artifact_resolver = artifact_resolver or MavenArtifactResolver(
            session=self.session, timeout=timeout
        )

    def resolve(self, spec: VerifierSpec, offline: bool = False) -> Path:
        """
        Resolve the verifier jar.

        Args:
            spec: Requested verifier
            offline: Refuse any network access

        Returns:
            Path to the verifier-cli jar

        Raises:
            OfflineVerifierError: If a download is needed in offline mode
            VerifierResolutionError: If the version or the jar cannot be resolved
        """
        if spec.explicit_path:
            path = Path(spec.explicit_path)
            if path.exists():
                logger.debug(f"Verifier path: {path}")
                return path
            logger.warning(
                f"Provided Plugin Verifier path doesn't exist: '{path}'. "
                f"Downloading Plugin Verifier: {spec.version}"
            )

        if offline:
            raise OfflineVerifierError()

        version = self.resolve_version(spec.version)
        repository = repository_for_version(version)
        coordinate = VERIFIER_COORDINATE.format(version=version)
        logger.debug(f"Using Verifier in {version} version from {repository}")

        try:
            return self.artifact_resolver.resolve_artifact(coordinate, repository)
        except ArtifactResolutionError as e:
            logger.error(f"Error when resolving Plugin Verifier path: {e}")
            raise VerifierResolutionError(str(e)) from e

    def resolve_version(self, version: Optional[str]) -> str:
        """Turn "latest" (or nothing) into a concrete version."""
        if version and version != VERIFIER_VERSION_LATEST:
            return version
        return self.resolve_latest_version()

    def resolve_latest_version(self) -> str:
        """
        Fetch the latest verifier version from the repository metadata.

        Raises:
            VerifierResolutionError: If the metadata cannot be fetched or parsed
        """
        logger.debug("Resolving Latest Verifier version")
        try:
            metadata = fetch_text(
                self.metadata_url, timeout=self.timeout, session=self.session
            )
        except DownloadError as e:
            raise VerifierResolutionError(
                f"Cannot resolve the latest Plugin Verifier version: {e}"
            ) from e

        version = parse_latest_version(metadata)
        logger.info(f"Latest Plugin Verifier version: {version}")
        return version


__all__ = [
    "VERIFIER_VERSION_LATEST",
    "VERIFIER_METADATA_URL",
    "VERIFIER_REPOSITORY",
    "OLD_VERIFIER_REPOSITORY",
    "VerifierSpec",
    "VerifierResolver",
    "parse_latest_version",
    "repository_for_version",
]
