"""
Download-IDE command implementation.

Resolves IDE builds into the local cache and prints their directories.
"""

import logging
import sys
from dataclasses import replace

from verifierkit.cli.utils import load_config
from verifierkit.core.download import DownloadProgress
from verifierkit.verifier.orchestrator import PluginVerification

logger = logging.getLogger(__name__)


def _show_progress(progress: DownloadProgress):
    sys.stderr.write(f"\r  {progress}   ")
    sys.stderr.flush()


def run(args) -> int:
    """
    Run the download-ide command.

    Args:
        args: Parsed command-line arguments with:
            - ides: IDE specs to download
            - parallel: Number of parallel downloads
            - offline: Use cached IDEs only

    Returns:
        Exit code (0 for success)
    """
    config = replace(load_config(args), ides=list(args.ides))

    # Progress is only drawn for sequential downloads
    show_progress = not args.quiet and config.network.parallel_downloads == 1
    verification = PluginVerification(
        config, progress_callback=_show_progress if show_progress else None
    )

    artifacts = verification.resolve_ides()
    if show_progress and not all(artifact.was_cached for artifact in artifacts):
        sys.stderr.write("\n")

    for artifact in artifacts:
        source = "cached" if artifact.was_cached else f"{artifact.channel.value} channel"
        print(f"{artifact.spec.name}\t{artifact.directory}\t({source})")

    return 0
