"""
Verify command implementation.

Runs the Plugin Verifier for the configured plugin against the configured
IDEs and local IDE installations.
"""

import logging

from verifierkit.cli.utils import load_config, safe_print
from verifierkit.verifier.orchestrator import PluginVerification

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)

    Raises:
        VerificationFailedError: If the verifier reports a configured failure level
    """
    config = load_config(args)
    logger.debug(f"Arguments: {args}")

    result = PluginVerification(config).run()

    safe_print("✅ Plugin verification passed")
    return 0 if result.passed else 1
