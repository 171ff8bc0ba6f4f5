"""
Cleanup command implementation.

Removes downloaded IDEs from the cache.
"""

import logging

from verifierkit.cli.utils import load_config, print_error
from verifierkit.core.directory import (
    get_ide_download_dir,
    get_lock_dir,
    get_verifier_home_dir,
)
from verifierkit.core.locking import LockManager
from verifierkit.ide.cache import ArtifactCache
from verifierkit.ide.version_spec import parse_ide_spec

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the cleanup command.

    Args:
        args: Parsed command-line arguments with:
            - ide: Specific IDEs to remove
            - all: Remove every cached IDE
            - dry_run: Only list what would be removed

    Returns:
        Exit code (0 for success, 1 when nothing was selected)
    """
    if not args.all and not args.ide:
        print_error(
            "Specify --ide SPEC or --all",
            "Use 'verifierkit cleanup --help' for more information",
        )
        return 1

    config = load_config(args)
    home = config.resolve_path(config.directories.cache) or get_verifier_home_dir()
    download_dir = config.resolve_path(config.directories.downloads) or get_ide_download_dir(home)
    cache = ArtifactCache(download_dir)

    if args.all:
        specs = cache.list_entries()
    else:
        specs = [parse_ide_spec(raw) for raw in args.ide]

    removed = 0
    for spec in specs:
        if args.dry_run:
            if cache.path_for(spec).is_dir():
                print(f"Would remove {cache.path_for(spec)}")
                removed += 1
        elif cache.remove(spec):
            print(f"Removed {cache.path_for(spec)}")
            removed += 1
        else:
            logger.warning(f"IDE {spec.name} is not cached")

    action = "would be removed" if args.dry_run else "removed"
    print(f"{removed} IDE(s) {action}")

    if args.all and not args.dry_run:
        stale = LockManager(get_lock_dir(home)).cleanup_stale_locks()
        if stale:
            print(f"{stale} stale lock file(s) removed")
    return 0
