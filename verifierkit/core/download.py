"""
Network download helpers with progress tracking and atomic writes.

This module provides the download primitives used by the IDE, JBR and
Maven resolvers:
- HTTP/HTTPS downloads with TLS verification
- Atomic placement (download to a temporary file, then move into place)
- Progress reporting (bytes, percentage, speed, ETA)
- Small text fetches for metadata documents
"""

import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


class DownloadError(Exception):
    """Exception raised when download fails."""

    pass


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Download file from URL to destination atomically.

    The body is streamed into ``<destination>.part`` and renamed onto the
    destination only after the transfer completed, so an interrupted
    download never leaves a truncated file at the destination path.

    Args:
        url: URL to download from
        destination: Local path to save file
        progress_callback: Optional callback for progress updates
        timeout: Request timeout in seconds (None waits indefinitely)
        session: Optional requests session to reuse

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the request or the write fails
        ValueError: If URL or destination is invalid

    Example:
        >>> download_file("https://example.com/ideaIC.tar.gz", Path("IC-2020.2.tar.gz"))
    """
    if not url:
        raise ValueError("URL cannot be empty")
    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    part = destination.with_name(destination.name + ".part")
    getter = session.get if session is not None else requests.get

    logger.info(f"Downloading from {url}")
    try:
        with getter(url, stream=True, timeout=timeout, allow_redirects=True) as response:
            response.raise_for_status()
            tracker = _ProgressTracker(int(response.headers.get("content-length") or 0))

            with open(part, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    f.write(chunk)
                    progress = tracker.advance(len(chunk))
                    if progress_callback and progress:
                        progress_callback(progress)

        os.replace(part, destination)
    except RequestException as e:
        raise DownloadError(f"Download of {url} failed: {e}") from e
    except OSError as e:
        raise DownloadError(f"Cannot write {destination}: {e}") from e
    finally:
        part.unlink(missing_ok=True)

    logger.debug(f"Download complete: {destination}")
    return destination


class _ProgressTracker:
    """Turns byte counts into DownloadProgress snapshots, at most twice a second."""

    INTERVAL = 0.5

    def __init__(self, total: int):
        self.total = total
        self.done = 0
        self.started = time.monotonic()
        self.reported = self.started

    def advance(self, size: int) -> Optional[DownloadProgress]:
        self.done += size
        now = time.monotonic()
        finished = self.total > 0 and self.done >= self.total
        if now - self.reported < self.INTERVAL and not finished:
            return None

        self.reported = now
        elapsed = now - self.started
        speed = self.done / elapsed if elapsed > 0 else 0.0
        if self.total <= 0:
            return DownloadProgress(self.done, self.done, 0.0, speed, 0.0)

        remaining = max(self.total - self.done, 0)
        return DownloadProgress(
            bytes_downloaded=self.done,
            total_bytes=self.total,
            percentage=self.done * 100.0 / self.total,
            speed_bps=speed,
            eta_seconds=remaining / speed if speed > 0 else 0.0,
        )


def fetch_text(
    url: str,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Fetch a small text document (e.g. maven-metadata.xml).

    Args:
        url: URL to fetch
        timeout: Request timeout in seconds
        session: Optional requests session to reuse

    Returns:
        Response body as text

    Raises:
        DownloadError: If the request fails or returns an error status
    """
    getter = session.get if session is not None else requests.get
    logger.debug(f"Fetching {url}")
    try:
        response = getter(url, timeout=timeout)
        response.raise_for_status()
    except RequestException as e:
        raise DownloadError(f"Cannot fetch {url}: {e}") from e
    return response.text


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mib = 1024 * 1024
    done = f"{progress.bytes_downloaded / mib:.1f}"
    speed = f"at {progress.speed_bps / mib:.1f} MB/s"

    if progress.total_bytes <= 0:
        return f"{done} MB {speed}"
    return (
        f"{done}/{progress.total_bytes / mib:.1f} MB ({progress.percentage:.1f}%) "
        f"{speed} ETA: {progress.eta_seconds:.0f}s"
    )
