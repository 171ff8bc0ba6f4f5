"""
Resolve-verifier command implementation.

Prints the path of the Plugin Verifier jar, downloading it if needed.
"""

from verifierkit.cli.utils import load_config
from verifierkit.verifier.orchestrator import PluginVerification


def run(args) -> int:
    """
    Run the resolve-verifier command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_config(args)
    print(PluginVerification(config).resolve_verifier())
    return 0
