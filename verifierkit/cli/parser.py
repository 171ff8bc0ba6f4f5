"""
VerifierKit CLI argument parser.

This module implements the command-line interface for VerifierKit using argparse.
"""

import argparse
import importlib
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from verifierkit.core.exceptions import VerificationFailedError
from verifierkit.runtime.jbr import JBR_REPOSITORY
from verifierkit.verifier.runner import SUBSYSTEMS

# Get version from package
try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("verifierkit")
except PackageNotFoundError:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """VerifierKit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="verifierkit",
            description="VerifierKit - IntelliJ Plugin Verifier runner",
            epilog='Use "verifierkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"VerifierKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./verifierkit.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Project root directory (default: current directory)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_verify_command(subparsers)
        self._add_download_ide_command(subparsers)
        self._add_resolve_verifier_command(subparsers)
        self._add_resolve_runtime_command(subparsers)
        self._add_cleanup_command(subparsers)

        return parser

    def _add_common_resolution_arguments(self, parser):
        parser.add_argument(
            "--offline",
            action="store_true",
            help="Use cached artifacts only, never access the network",
        )
        parser.add_argument(
            "--download-dir",
            metavar="PATH",
            help="Directory for downloaded IDEs (default: ~/.pluginVerifier/ides)",
        )

    def _add_verify_command(self, subparsers):
        """Add 'verify' subcommand."""
        parser = subparsers.add_parser(
            "verify",
            help="Verify a plugin against IDE builds",
            description="Resolve IDEs, the Plugin Verifier and a Java runtime, "
            "then verify the plugin",
        )
        parser.add_argument("--plugin", metavar="PATH", help="Plugin archive to verify")
        parser.add_argument(
            "--ide",
            action="append",
            metavar="SPEC",
            help="IDE to verify against, e.g. IC-2020.2 or 203.1234.56 "
            "(can be used multiple times)",
        )
        parser.add_argument(
            "--local-path",
            action="append",
            metavar="PATH",
            help="Locally installed IDE to verify against (can be used multiple times)",
        )
        parser.add_argument(
            "--failure-level",
            action="append",
            metavar="LEVEL",
            help="Failure level that fails the build, or ALL/NONE "
            "(can be used multiple times) [default: COMPATIBILITY_PROBLEMS]",
        )
        parser.add_argument(
            "--verifier-version", metavar="VERSION", help="Plugin Verifier version or 'latest'"
        )
        parser.add_argument(
            "--verifier-path", metavar="PATH", help="Local Plugin Verifier jar"
        )
        parser.add_argument(
            "--runtime-dir", metavar="PATH", help="Java runtime used to run the verifier"
        )
        parser.add_argument(
            "--jbr-version",
            metavar="VERSION",
            help=f"JetBrains Runtime version downloaded from {JBR_REPOSITORY}",
        )
        parser.add_argument(
            "--reports-dir", metavar="PATH", help="Directory for verification reports"
        )
        parser.add_argument(
            "--external-prefix",
            action="append",
            metavar="PREFIX",
            help="Package prefix of classes provided externally (can be used multiple times)",
        )
        parser.add_argument(
            "--team-city", action="store_true", help="Report results as TeamCity messages"
        )
        parser.add_argument(
            "--subsystems-to-check",
            choices=list(SUBSYSTEMS),
            metavar="SUBSYSTEMS",
            help="Subsystems to check (all|android-only|without-android)",
        )
        parser.add_argument(
            "--parallel",
            type=int,
            metavar="N",
            help="Number of IDEs downloaded in parallel [default: 1]",
        )
        self._add_common_resolution_arguments(parser)

    def _add_download_ide_command(self, subparsers):
        """Add 'download-ide' subcommand."""
        parser = subparsers.add_parser(
            "download-ide",
            help="Download IDEs into the cache",
            description="Resolve IDE builds through the release, rc, eap and beta "
            "channels and extract them into the cache",
        )
        parser.add_argument(
            "ides", nargs="+", metavar="SPEC", help="IDE to download, e.g. IU-2020.3"
        )
        parser.add_argument(
            "--parallel",
            type=int,
            metavar="N",
            help="Number of IDEs downloaded in parallel [default: 1]",
        )
        self._add_common_resolution_arguments(parser)

    def _add_resolve_verifier_command(self, subparsers):
        """Add 'resolve-verifier' subcommand."""
        parser = subparsers.add_parser(
            "resolve-verifier",
            help="Print the Plugin Verifier jar path",
            description="Resolve the Plugin Verifier jar, downloading it if needed",
        )
        parser.add_argument(
            "--verifier-version", metavar="VERSION", help="Plugin Verifier version or 'latest'"
        )
        parser.add_argument(
            "--verifier-path", metavar="PATH", help="Local Plugin Verifier jar"
        )
        parser.add_argument(
            "--offline",
            action="store_true",
            help="Use cached artifacts only, never access the network",
        )

    def _add_resolve_runtime_command(self, subparsers):
        """Add 'resolve-runtime' subcommand."""
        parser = subparsers.add_parser(
            "resolve-runtime",
            help="Print the Java runtime used to run the verifier",
            description="Resolve the Java runtime by precedence: explicit directory, "
            "JBR version, runtime bundled with the IDE, host Java",
        )
        parser.add_argument(
            "--runtime-dir", metavar="PATH", help="Java runtime directory"
        )
        parser.add_argument(
            "--jbr-version", metavar="VERSION", help="JetBrains Runtime version"
        )
        parser.add_argument(
            "--ide-dir", metavar="PATH", help="IDE whose bundled runtime should be used"
        )
        parser.add_argument(
            "--offline",
            action="store_true",
            help="Use cached artifacts only, never access the network",
        )

    def _add_cleanup_command(self, subparsers):
        """Add 'cleanup' subcommand."""
        parser = subparsers.add_parser(
            "cleanup",
            help="Remove cached IDEs",
            description="Remove downloaded IDEs from the cache",
        )
        parser.add_argument(
            "--ide",
            action="append",
            metavar="SPEC",
            help="Remove a specific IDE (can be used multiple times)",
        )
        parser.add_argument("--all", action="store_true", help="Remove all cached IDEs")
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be removed without removing",
        )
        parser.add_argument(
            "--download-dir",
            metavar="PATH",
            help="Directory for downloaded IDEs (default: ~/.pluginVerifier/ides)",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except VerificationFailedError as e:
            logger.error(f"Plugin verification failed: {e.level.name} ({e.level.marker})")
            return 1
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "verify": "verifierkit.cli.commands.verify",
            "download-ide": "verifierkit.cli.commands.download_ide",
            "resolve-verifier": "verifierkit.cli.commands.resolve_verifier",
            "resolve-runtime": "verifierkit.cli.commands.resolve_runtime",
            "cleanup": "verifierkit.cli.commands.cleanup",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
