"""
On-disk cache of extracted IDE distributions.

Each IDE lives in ``<root>/<type>-<version>``. The presence of a non-empty
directory is the only source of truth: there is no index file and entries
are never re-validated. A corrupted entry is removed with ``remove()`` or
the ``cleanup`` command.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from verifierkit.core.exceptions import InvalidVersionSpecError
from verifierkit.core.filesystem import is_empty_directory, safe_rmtree
from verifierkit.ide.version_spec import IdeSpec, parse_ide_spec

logger = logging.getLogger(__name__)


class ArtifactCache:
    """
    Maps IDE specs to extracted directories under a cache root.

    Example:
        >>> cache = ArtifactCache(Path.home() / ".pluginVerifier" / "ides")
        >>> cache.lookup(parse_ide_spec("IC-2020.2"))
        PosixPath('/home/user/.pluginVerifier/ides/IC-2020.2')
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, spec: IdeSpec) -> Path:
        """Directory an IDE is (or would be) cached in."""
        return self.root / spec.name

    def lookup(self, spec: IdeSpec) -> Optional[Path]:
        """
        Find a cached IDE.

        An empty leftover directory is removed and reported as a miss.

        Returns:
            The cached directory, or None if the IDE is not cached
        """
        directory = self.path_for(spec)

        if not directory.is_dir():
            return None

        if is_empty_directory(directory):
            logger.debug(f"Removing empty cache entry: {directory}")
            directory.rmdir()
            return None

        logger.debug(f"IDE already available in {directory}")
        return directory

    def store(self, spec: IdeSpec, source: Path) -> Path:
        """
        Move an extracted tree into the cache entry for spec.

        Args:
            spec: IDE the tree belongs to
            source: Extracted directory (on the same filesystem as the cache)

        Returns:
            The cache directory for spec
        """
        directory = self.path_for(spec)
        source = Path(source)

        if source.resolve() == directory.resolve():
            return directory

        if directory.exists():
            safe_rmtree(directory, require_prefix=self.root)
        os.replace(source, directory)

        logger.debug(f"Stored {spec.name} in {directory}")
        return directory

    def remove(self, spec: IdeSpec) -> bool:
        """
        Delete a cached IDE.

        Returns:
            True if an entry was removed
        """
        directory = self.path_for(spec)
        if not directory.exists():
            return False

        safe_rmtree(directory, require_prefix=self.root)
        logger.info(f"Removed cached IDE: {directory}")
        return True

    def list_entries(self) -> List[IdeSpec]:
        """List cached IDEs, sorted by name."""
        entries = []
        for item in sorted(self.root.iterdir()):
            if not item.is_dir() or item.name.startswith("."):
                continue
            try:
                entries.append(parse_ide_spec(item.name))
            except InvalidVersionSpecError:
                continue
        return entries

    def clear(self) -> int:
        """
        Delete every cached IDE.

        Returns:
            Number of entries removed
        """
        removed = 0
        for spec in self.list_entries():
            if self.remove(spec):
                removed += 1
        return removed


__all__ = ["ArtifactCache"]
