"""
IDE download and extraction with release-channel fallback.

This module orchestrates resolving an IDE distribution into the local cache,
coordinating the channel URL resolution, the download manager, archive
extraction and the per-key locks that keep concurrent workers from
extracting into the same directory.
"""

import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import requests

from verifierkit.core.directory import get_ide_download_dir
from verifierkit.core.download import DownloadError, DownloadProgress, download_file
from verifierkit.core.exceptions import IdeResolutionError, OfflineDownloadError
from verifierkit.core.fallback import FallbackChain, FallbackExhausted
from verifierkit.core.filesystem import (
    ArchiveExtractionError,
    FilesystemError,
    extract_archive,
    flatten_single_root,
    is_empty_directory,
    safe_rmtree,
)
from verifierkit.core.locking import LockManager
from verifierkit.ide.cache import ArtifactCache
from verifierkit.ide.channels import (
    CACHE_REDIRECTOR,
    IDE_DOWNLOAD_URL,
    DownloadChannel,
    build_download_url,
    resolve_download_url,
)
from verifierkit.ide.version_spec import IdeSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedArtifact:
    """An IDE available on disk."""

    spec: IdeSpec
    """IDE the directory holds"""

    directory: Path
    """Path to the extracted IDE"""

    channel: Optional[DownloadChannel] = None
    """Channel the IDE was downloaded from (None when served from cache)"""

    was_cached: bool = False
    """Whether the IDE was already cached (no download needed)"""


class IdeDownloader:
    """
    Resolves IDE specs to extracted directories, downloading when needed.

    The workflow for a single spec:
    1. Return the cached directory if present (no network access)
    2. Fail in offline mode
    3. For each channel (release, rc, eap, beta): resolve the download URL,
       download the archive, extract and normalize it
    4. The first channel that succeeds wins; if none does, fail with
       IdeResolutionError

    Example:
        >>> downloader = IdeDownloader(download_dir=Path("/tmp/ides"))
        >>> artifact = downloader.resolve(parse_ide_spec("IC-2020.2"))
        >>> print(f"Installed at: {artifact.directory}")
    """

    def __init__(
        self,
        download_dir: Optional[Path] = None,
        offline: bool = False,
        mirror: Optional[str] = CACHE_REDIRECTOR,
        base_url: str = IDE_DOWNLOAD_URL,
        lock_manager: Optional[LockManager] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        """
        Initialize IDE downloader.

        Args:
            download_dir: Directory for extracted IDEs (default: verifier home/ides)
            offline: Refuse any network access
            mirror: Caching mirror for resolved download URLs (None disables it)
            base_url: Data-service endpoint for product downloads
            lock_manager: Optional lock manager (default: locks in download_dir/.lock)
            session: Optional requests session to reuse
            timeout: Network timeout in seconds (None waits indefinitely)
            progress_callback: Optional callback for download progress
        """
        self.download_dir = Path(download_dir) if download_dir else get_ide_download_dir()
        self.offline = offline
        self.mirror = mirror
        self.base_url = base_url
        self.session = session or requests.Session()
        self.timeout = timeout
        self.progress_callback = progress_callback

        self.cache = ArtifactCache(self.download_dir)
        self.lock_manager = lock_manager or LockManager(self.download_dir / ".lock")

        logger.debug(f"Initialized IDE downloader with cache: {self.download_dir}")

    def resolve(self, spec: IdeSpec) -> ResolvedArtifact:
        """
        Resolve an IDE into the local cache.

        Args:
            spec: Parsed IDE identifier

        Returns:
            ResolvedArtifact pointing at the extracted IDE

        Raises:
            OfflineDownloadError: If the IDE is not cached and offline mode is on
            IdeResolutionError: If no channel provides the IDE
        """
        logger.debug(f"Resolving IDE path for {spec.name}")

        cached = self.cache.lookup(spec)
        if cached is not None:
            return ResolvedArtifact(spec=spec, directory=cached, was_cached=True)

        if self.offline:
            raise OfflineDownloadError(spec)

        with self.lock_manager.artifact_lock(f"ide-{spec.name}"):
            # Another worker may have finished while we waited for the lock
            cached = self.cache.lookup(spec)
            if cached is not None:
                logger.info(f"IDE {spec.name} downloaded by another worker")
                return ResolvedArtifact(spec=spec, directory=cached, was_cached=True)

            chain: FallbackChain[Path] = FallbackChain(
                tolerate=(DownloadError, FilesystemError, OSError)
            )
            for channel in DownloadChannel.ordered():
                chain.add(
                    channel.value,
                    functools.partial(self._download_from_channel, spec, channel),
                )

            try:
                result = chain.run()
            except FallbackExhausted as e:
                raise IdeResolutionError(spec, e.attempted) from e

        logger.info(f"Resolved IDE '{spec.name}' path: {result.value}")
        return ResolvedArtifact(
            spec=spec,
            directory=result.value,
            channel=DownloadChannel(result.name),
            was_cached=False,
        )

    def resolve_all(
        self, specs: Iterable[IdeSpec], max_workers: int = 1
    ) -> List[ResolvedArtifact]:
        """
        Resolve several IDEs, preserving input order and dropping duplicates.

        Args:
            specs: IDE specs to resolve
            max_workers: Number of parallel workers (1 resolves sequentially)

        Returns:
            Resolved artifacts in input order
        """
        unique = list(dict.fromkeys(specs))

        if max_workers <= 1 or len(unique) <= 1:
            return [self.resolve(spec) for spec in unique]

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self.resolve, unique))

    def _download_from_channel(self, spec: IdeSpec, channel: DownloadChannel) -> Path:
        """
        Download and extract an IDE from a single channel.

        Partial state (archive, extraction directory) is removed whatever the
        outcome.

        Returns:
            Path to the cached IDE directory
        """
        logger.debug(
            f"Downloading IDE '{spec.name}' from {channel.value} channel "
            f"to {self.download_dir}"
        )
        archive_path = self.download_dir / f"{spec.name}.tar.gz"
        extract_dir = self.download_dir / f".{spec.name}.extract"

        try:
            url = resolve_download_url(
                build_download_url(spec, channel, self.base_url),
                mirror=self.mirror,
                session=self.session,
                timeout=self.timeout,
            )
            logger.info(f"Downloading IDE: {spec.name}")
            download_file(
                url,
                archive_path,
                progress_callback=self.progress_callback,
                timeout=self.timeout,
                session=self.session,
            )

            logger.debug("IDE downloaded, extracting...")
            if extract_dir.exists():
                safe_rmtree(extract_dir, require_prefix=self.download_dir)
            extract_archive(archive_path, extract_dir)
            flatten_single_root(extract_dir)
            if is_empty_directory(extract_dir):
                raise ArchiveExtractionError(f"Archive for {spec.name} contains no files")

            directory = self.cache.store(spec, extract_dir)
            logger.debug(f"IDE extracted to {directory}, archive removed")
            return directory

        except (DownloadError, FilesystemError, OSError) as e:
            logger.debug(
                f"Cannot download IDE '{spec.name}' from {channel.value} channel: {e}. "
                "Trying another channel..."
            )
            raise

        finally:
            archive_path.unlink(missing_ok=True)
            if extract_dir.exists():
                safe_rmtree(extract_dir, require_prefix=self.download_dir)


__all__ = [
    "ResolvedArtifact",
    "IdeDownloader",
]
