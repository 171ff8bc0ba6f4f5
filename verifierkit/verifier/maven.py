"""
Minimal Maven repository artifact resolver.

Resolves a single artifact coordinate against a single repository URL into
a local file, using the standard Maven repository layout both remotely and
in the local cache. Transitive dependencies are not resolved.
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import requests

from verifierkit.core.directory import get_maven_cache_dir
from verifierkit.core.download import DownloadError, download_file, fetch_text
from verifierkit.core.exceptions import ArtifactResolutionError
from verifierkit.core.filesystem import compute_file_hash

logger = logging.getLogger(__name__)

SHA1_PATTERN = re.compile(r"^[0-9a-fA-F]{40}$")


def _is_not_found(error: DownloadError) -> bool:
    response = getattr(error.__cause__, "response", None)
    return response is not None and response.status_code == 404


@dataclass(frozen=True)
class MavenCoordinate:
    """Parsed ``group:artifact:version[:classifier][@extension]`` coordinate."""

    group: str
    artifact: str
    version: str
    classifier: Optional[str] = None
    extension: str = "jar"

    @classmethod
    def parse(cls, coordinate: str) -> "MavenCoordinate":
        """
        Parse a Gradle-style coordinate string.

        Example:
            >>> MavenCoordinate.parse("org.jetbrains.intellij.plugins:verifier-cli:1.255:all@jar").filename
            'verifier-cli-1.255-all.jar'

        Raises:
            ValueError: If the coordinate has fewer than three parts
        """
        body, _, extension = coordinate.strip().partition("@")
        parts = body.split(":")
        if len(parts) not in (3, 4) or not all(parts):
            raise ValueError(f"Invalid Maven coordinate: '{coordinate}'")

        return cls(
            group=parts[0],
            artifact=parts[1],
            version=parts[2],
            classifier=parts[3] if len(parts) == 4 else None,
            extension=extension or "jar",
        )

    @property
    def filename(self) -> str:
        classifier = f"-{self.classifier}" if self.classifier else ""
        return f"{self.artifact}-{self.version}{classifier}.{self.extension}"

    @property
    def relative_path(self) -> str:
        """Path of the artifact in the Maven repository layout."""
        group_path = self.group.replace(".", "/")
        return f"{group_path}/{self.artifact}/{self.version}/{self.filename}"


class MavenArtifactResolver:
    """
    Downloads Maven artifacts into a local cache.

    Example:
        >>> resolver = MavenArtifactResolver()
        >>> resolver.resolve_artifact(
        ...     "org.jetbrains.intellij.plugins:verifier-cli:1.255:all@jar",
        ...     "https://cache-redirector.jetbrains.com/packages.jetbrains.team/maven/p/intellij-plugin-verifier/intellij-plugin-verifier",
        ... )
    """

    def __init__(
        self,
        cache_dir: Optional[Path] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        verify_checksums: bool = True,
    ):
        """
        Initialize resolver.

        Args:
            cache_dir: Local repository root (default: verifier home/maven)
            session: Optional requests session to reuse
            timeout: Network timeout in seconds
            verify_checksums: Check downloads against published .sha1 files
        """
        self.cache_dir = Path(cache_dir) if cache_dir else get_maven_cache_dir()
        self.session = session or requests.Session()
        self.timeout = timeout
        self.verify_checksums = verify_checksums

    def local_path(self, coordinate: MavenCoordinate) -> Path:
        return self.cache_dir / coordinate.relative_path

    def resolve_artifact(self, coordinate: str, repository_url: str) -> Path:
        """
        Resolve an artifact to a local file.

        Args:
            coordinate: Coordinate such as "group:artifact:version:classifier@jar"
            repository_url: Base URL of the Maven repository

        Returns:
            Path to the local artifact file

        Raises:
            ArtifactResolutionError: If the coordinate is invalid, the artifact
                cannot be downloaded, or its checksum does not match
        """
        try:
            parsed = MavenCoordinate.parse(coordinate)
        except ValueError as e:
            raise ArtifactResolutionError(coordinate, repository_url, str(e)) from e

        target = self.local_path(parsed)
        if target.is_file():
            logger.debug(f"Artifact {coordinate} already cached at {target}")
            return target

        url = f"{repository_url.rstrip('/')}/{parsed.relative_path}"
        logger.info(f"Downloading {coordinate}")

        # Only a verified file is moved to the cached name
        staging = target.with_name(f".{target.name}.download")
        try:
            try:
                download_file(url, staging, timeout=self.timeout, session=self.session)
            except DownloadError as e:
                raise ArtifactResolutionError(coordinate, repository_url, str(e)) from e

            if self.verify_checksums:
                self._verify_checksum(coordinate, repository_url, url, staging)

            os.replace(staging, target)
        finally:
            staging.unlink(missing_ok=True)

        return target

    def _verify_checksum(
        self, coordinate: str, repository_url: str, url: str, target: Path
    ) -> None:
        """Check a downloaded artifact against its published SHA-1, if any."""
        try:
            published = fetch_text(
                f"{url}.sha1", timeout=self.timeout, session=self.session
            )
        except DownloadError as e:
            if _is_not_found(e):
                logger.debug(f"No checksum published for {coordinate}, skipping verification")
                return
            raise ArtifactResolutionError(
                coordinate, repository_url, f"cannot fetch checksum: {e}"
            ) from e

        fields = published.split()
        expected = fields[0].lower() if fields else ""
        if not SHA1_PATTERN.match(expected):
            logger.debug(f"Unrecognized checksum for {coordinate}: '{published.strip()}'")
            return

        actual = compute_file_hash(target, "sha1")
        if actual != expected:
            raise ArtifactResolutionError(
                coordinate,
                repository_url,
                f"checksum mismatch (expected {expected}, got {actual})",
            )
        logger.debug(f"Checksum verified for {coordinate}")


__all__ = [
    "MavenCoordinate",
    "MavenArtifactResolver",
]
