"""
Resolve-runtime command implementation.

Prints the Java runtime that would run the Plugin Verifier and which
precedence step selected it.
"""

import logging
from pathlib import Path

from verifierkit.cli.utils import load_config
from verifierkit.verifier.orchestrator import PluginVerification

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve-runtime command.

    Args:
        args: Parsed command-line arguments with:
            - runtime_dir: Explicit runtime directory
            - jbr_version: JetBrains Runtime version
            - ide_dir: IDE whose bundled runtime should be used

    Returns:
        Exit code (0 for success)
    """
    config = load_config(args)
    ide_dir = Path(args.ide_dir).resolve() if args.ide_dir else None

    runtime = PluginVerification(config).resolve_runtime(ide_dir)

    print(f"{runtime.java_home}\t({runtime.source.value})")
    return 0
