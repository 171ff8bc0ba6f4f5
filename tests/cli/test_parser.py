"""
Tests for CLI argument parser.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from verifierkit.cli.parser import CLI
from verifierkit.core.exceptions import MissingArtifactError, VerificationFailedError
from verifierkit.verifier.failure_levels import FailureLevel


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_no_command_shows_help(self, capsys):
        """Test that running without command shows help."""
        result = CLI().run([])

        assert result == 1
        captured = capsys.readouterr()
        assert "usage:" in captured.out.lower()

    def test_version_flag(self, capsys):
        """Test --version flag."""
        with pytest.raises(SystemExit) as exc_info:
            CLI().run(["--version"])

        assert exc_info.value.code == 0
        assert "VerifierKit" in capsys.readouterr().out

    def test_verbose_logging(self):
        """Test --verbose enables debug logging."""
        with patch("verifierkit.cli.parser.importlib.import_module") as mock_import:
            mock_import.return_value.run.return_value = 0
            CLI().run(["-v", "cleanup", "--all"])

        assert logging.getLogger().level == logging.DEBUG

    def test_quiet_logging(self):
        """Test --quiet limits logging to errors."""
        with patch("verifierkit.cli.parser.importlib.import_module") as mock_import:
            mock_import.return_value.run.return_value = 0
            CLI().run(["-q", "cleanup", "--all"])

        assert logging.getLogger().level == logging.ERROR


class TestVerifyCommand:
    """Test verify command parsing."""

    def test_verify_defaults(self):
        args = CLI().parse_args(["verify"])

        assert args.command == "verify"
        assert args.plugin is None
        assert args.ide is None
        assert args.team_city is False
        assert args.offline is False

    def test_verify_repeated_options(self):
        args = CLI().parse_args(
            [
                "verify",
                "--plugin", "build/my-plugin.zip",
                "--ide", "IC-2020.2",
                "--ide", "IU-2020.3",
                "--failure-level", "COMPATIBILITY_PROBLEMS",
                "--failure-level", "MISSING_DEPENDENCIES",
                "--external-prefix", "com.example",
                "--subsystems-to-check", "android-only",
                "--parallel", "2",
            ]
        )

        assert args.plugin == "build/my-plugin.zip"
        assert args.ide == ["IC-2020.2", "IU-2020.3"]
        assert args.failure_level == ["COMPATIBILITY_PROBLEMS", "MISSING_DEPENDENCIES"]
        assert args.external_prefix == ["com.example"]
        assert args.subsystems_to_check == "android-only"
        assert args.parallel == 2

    def test_invalid_subsystems(self):
        with pytest.raises(SystemExit):
            CLI().parse_args(["verify", "--subsystems-to-check", "ios-only"])


class TestOtherCommands:
    """Test parsing of the remaining commands."""

    def test_download_ide_requires_spec(self):
        with pytest.raises(SystemExit):
            CLI().parse_args(["download-ide"])

    def test_download_ide(self):
        args = CLI().parse_args(["download-ide", "IC-2020.2", "203.5981.155", "--offline"])

        assert args.ides == ["IC-2020.2", "203.5981.155"]
        assert args.offline is True

    def test_resolve_runtime(self):
        args = CLI().parse_args(["resolve-runtime", "--jbr-version", "11_0_10b1341.41"])

        assert args.jbr_version == "11_0_10b1341.41"
        assert args.runtime_dir is None

    def test_cleanup(self):
        args = CLI().parse_args(["cleanup", "--ide", "IC-2020.2", "--dry-run"])

        assert args.ide == ["IC-2020.2"]
        assert args.dry_run is True
        assert args.all is False


class TestDispatch:
    """Test command dispatch and error mapping."""

    @pytest.mark.parametrize(
        "argv,module",
        [
            (["verify"], "verifierkit.cli.commands.verify"),
            (["download-ide", "IC-2020.2"], "verifierkit.cli.commands.download_ide"),
            (["resolve-verifier"], "verifierkit.cli.commands.resolve_verifier"),
            (["resolve-runtime"], "verifierkit.cli.commands.resolve_runtime"),
            (["cleanup", "--all"], "verifierkit.cli.commands.cleanup"),
        ],
    )
    def test_dispatch(self, argv, module):
        with patch("verifierkit.cli.parser.importlib.import_module") as mock_import:
            mock_import.return_value.run.return_value = 0

            assert CLI().run(argv) == 0

        mock_import.assert_called_once_with(module)

    def test_verification_failure(self):
        failure = VerificationFailedError(FailureLevel.COMPATIBILITY_PROBLEMS)

        with patch.object(CLI, "_dispatch_command", side_effect=failure):
            with patch("verifierkit.cli.parser.logger") as mock_logger:
                result = CLI().run(["verify"])

        assert result == 1
        message = mock_logger.error.call_args.args[0]
        assert "COMPATIBILITY_PROBLEMS" in message
        assert "Compatibility problems" in message

    def test_error(self):
        with patch.object(CLI, "_dispatch_command", side_effect=MissingArtifactError(None)):
            with patch("verifierkit.cli.parser.logger") as mock_logger:
                result = CLI().run(["verify"])

        assert result == 1
        assert "Plugin file does not exist" in mock_logger.error.call_args.args[0]

    def test_keyboard_interrupt(self):
        command = MagicMock()
        command.run.side_effect = KeyboardInterrupt

        with patch("verifierkit.cli.parser.importlib.import_module", return_value=command):
            assert CLI().run(["verify"]) == 130
