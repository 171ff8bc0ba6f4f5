"""
File system utilities for VerifierKit.

Archive extraction and cache-directory housekeeping shared by the IDE, JBR
and Maven resolvers:
- Extraction of downloaded distributions (tar.gz, tar.xz, tar.bz2, zip),
  refusing members that would land outside the target directory
- Hoisting the single wrapper directory most distributions ship with
- Guarded deletion of cache entries and checksum computation
"""

import hashlib
import logging
import os
import shutil
import stat
import sys
import tarfile
import uuid
import zipfile
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

TAR_MODES = (
    ((".tar.gz", ".tgz"), "r:gz"),
    ((".tar.xz",), "r:xz"),
    ((".tar.bz2", ".tbz2"), "r:bz2"),
)


# ============================================================================
# Error Handling
# ============================================================================


class FilesystemError(Exception):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """A downloaded archive could not be unpacked."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """The archive extension is not one VerifierKit knows how to unpack."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """An archive member points outside the extraction directory."""

    pass


def is_relative_to(path: Path, parent: Path) -> bool:
    """Whether ``path`` lies inside ``parent``."""
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return True


# ============================================================================
# Archive Extraction
# ============================================================================


def _check_member(name: str, root: Path) -> None:
    if not is_relative_to((root / name).resolve(), root):
        raise InsecureArchiveError(
            f"Archive member '{name}' would be extracted outside {root}; "
            "extraction blocked"
        )


def extract_archive(archive_path: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Unpack a downloaded distribution into ``destination``.

    The format is chosen from the file name: ``.zip``, ``.tar.gz``/``.tgz``,
    ``.tar.xz`` or ``.tar.bz2``/``.tbz2``. Every member is checked before
    anything is written.

    Raises:
        UnsupportedArchiveFormat: If the extension is not recognized
        InsecureArchiveError: If a member escapes the destination
        ArchiveExtractionError: If the archive is missing or corrupt

    Example:
        >>> extract_archive('IC-2020.2.tar.gz', '/tmp/ides/.IC-2020.2.extract')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    name = archive_path.name.lower()
    if name.endswith(".zip"):
        mode = None
    else:
        mode = next((m for suffixes, m in TAR_MODES if name.endswith(suffixes)), "")
        if not mode:
            raise UnsupportedArchiveFormat(
                f"Cannot unpack {archive_path.name}: expected .zip, .tar.gz, "
                ".tar.xz or .tar.bz2"
            )

    destination.mkdir(parents=True, exist_ok=True)
    root = destination.resolve()
    logger.debug(f"Extracting {archive_path} to {destination}")

    try:
        if mode is None:
            _extract_zip(archive_path, root)
        else:
            _extract_tar(archive_path, root, mode)
    except InsecureArchiveError:
        raise
    except (OSError, tarfile.TarError, zipfile.BadZipFile) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _extract_zip(archive_path: Path, root: Path) -> None:
    with zipfile.ZipFile(archive_path) as zf:
        names = zf.namelist()
        for name in names:
            _check_member(name, root)
        zf.extractall(root)


def _extract_tar(archive_path: Path, root: Path, mode: str) -> None:
    with tarfile.open(archive_path, mode) as tar:
        for member in tar.getmembers():
            _check_member(member.name, root)

        if sys.version_info >= (3, 12):
            tar.extractall(root, filter="data")
        else:
            tar.extractall(root)


def flatten_single_root(directory: Union[str, Path]) -> bool:
    """
    Hoist the contents of a single top-level wrapper directory.

    IDE and JBR archives usually wrap everything in one directory such as
    ``idea-IC-202.6397.94/``. When ``directory`` holds exactly one entry and
    that entry is a directory, its children are moved up one level and the
    emptied wrapper is removed.

    Args:
        directory: Extraction target directory

    Returns:
        True if a wrapper directory was flattened

    Example:
        >>> flatten_single_root('/tmp/ides/IC-2020.2')
        True
    """
    directory = Path(directory)
    entries = list(directory.iterdir())

    if len(entries) != 1 or not entries[0].is_dir() or entries[0].is_symlink():
        return False

    # Rename first so a child sharing the wrapper's name cannot collide with it
    wrapper = entries[0].rename(directory / f".wrapper-{uuid.uuid4().hex}")
    for child in wrapper.iterdir():
        child.rename(directory / child.name)
    wrapper.rmdir()

    logger.debug(f"Flattened wrapper directory '{entries[0].name}' in {directory}")
    return True


# ============================================================================
# Cache Housekeeping
# ============================================================================


def _clear_readonly(func, path, _exc_info):
    os.chmod(path, stat.S_IWRITE)
    func(path)


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Delete a cache entry, refusing anything outside ``require_prefix``.

    Read-only files (common in extracted IDE trees on Windows) are made
    writable and retried. A missing path is not an error.

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If path is a file or cannot be removed

    Example:
        >>> safe_rmtree('/tmp/ides/IC-2020.2', require_prefix='/tmp/ides')
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, prefix):
            raise ValueError(f"Refusing to delete '{path}': not under '{prefix}'")

    if not path.exists():
        return
    if not path.is_dir():
        raise FilesystemError(f"Not a directory: {path}")

    try:
        shutil.rmtree(path, onerror=_clear_readonly)
    except OSError as e:
        raise FilesystemError(f"Failed to remove '{path}': {e}") from e


def is_empty_directory(path: Union[str, Path]) -> bool:
    """True if path is an existing directory without entries."""
    path = Path(path)
    return path.is_dir() and not any(path.iterdir())


def compute_file_hash(file_path: Union[str, Path], algorithm: str = "sha256") -> str:
    """
    Hex digest of a file, read in 1 MiB chunks.

    Args:
        file_path: File to hash
        algorithm: Any ``hashlib`` algorithm name ('sha1' for Maven checksums)

    Raises:
        FilesystemError: If the file does not exist
        ValueError: If the algorithm is unknown
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise FilesystemError(f"File not found: {file_path}")

    hasher = hashlib.new(algorithm)
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


__all__ = [
    "FilesystemError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "is_relative_to",
    "extract_archive",
    "flatten_single_root",
    "safe_rmtree",
    "is_empty_directory",
    "compute_file_hash",
]
