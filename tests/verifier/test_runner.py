"""
Unit tests for the verification runner.
"""

import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from verifierkit.core.exceptions import (
    MissingArtifactError,
    NoTargetsError,
    VerificationFailedError,
    VerifierProcessError,
)
from verifierkit.runtime.resolver import RuntimeSource, RuntimeSpec
from verifierkit.verifier.failure_levels import FailureLevel
from verifierkit.verifier.process import ProcessResult
from verifierkit.verifier.runner import (
    VerificationOptions,
    VerificationRequest,
    VerificationRunner,
)

PROBLEM_OUTPUT = "Plugin my-plugin:1.0 against IC-202.6397.94: Compatibility problems (1)"


@pytest.fixture
def request_factory(tmp_path, plugin_archive):
    def make(**overrides):
        options = VerificationOptions(
            reports_dir=tmp_path / "reports",
            failure_levels=overrides.pop(
                "failure_levels", frozenset({FailureLevel.COMPATIBILITY_PROBLEMS})
            ),
        )
        values = dict(
            plugin_artifact=plugin_archive,
            ide_directories=[tmp_path / "ides" / "IC-2020.2"],
            local_paths=[],
            verifier_path=tmp_path / "verifier-cli.jar",
            runtime=RuntimeSpec(tmp_path / "jbr", RuntimeSource.HOST),
            options=options,
        )
        values.update(overrides)
        return VerificationRequest(**values)

    return make


def make_runner(output="", exit_code=0):
    invoker = MagicMock(return_value=ProcessResult(exit_code=exit_code, output=output))
    stream = io.StringIO()
    return VerificationRunner(invoker=invoker, stream=stream), invoker, stream


@patch("verifierkit.verifier.runner.find_java_executable", return_value="/jbr/bin/java")
class TestVerificationRunner:
    """Test VerificationRunner class."""

    def test_passes_clean_output(self, mock_java, request_factory):
        runner, invoker, stream = make_runner("Plugin my-plugin:1.0: Compatible")

        result = runner.run(request_factory())

        assert result.passed is True
        assert result.failed_level is None
        assert stream.getvalue() == "Plugin my-plugin:1.0: Compatible"
        java, classpath, args = invoker.call_args.args
        assert java == "/jbr/bin/java"
        assert args[0] == "check-plugin"

    def test_configured_level_fails(self, mock_java, request_factory):
        runner, _, stream = make_runner(PROBLEM_OUTPUT)

        with pytest.raises(VerificationFailedError) as exc_info:
            runner.run(request_factory())

        assert exc_info.value.level is FailureLevel.COMPATIBILITY_PROBLEMS
        assert str(exc_info.value) == "COMPATIBILITY_PROBLEMS"
        assert exc_info.value.result.passed is False
        assert stream.getvalue() == PROBLEM_OUTPUT

    def test_unconfigured_level_passes(self, mock_java, request_factory):
        runner, _, _ = make_runner(PROBLEM_OUTPUT)
        request = request_factory(
            failure_levels=frozenset({FailureLevel.DEPRECATED_API_USAGES})
        )

        assert runner.run(request).passed is True

    def test_nonzero_exit(self, mock_java, request_factory):
        """Test a failed process is reported after its output was echoed."""
        runner, _, stream = make_runner("Exception in thread main", exit_code=1)

        with pytest.raises(VerifierProcessError) as exc_info:
            runner.run(request_factory())

        assert exc_info.value.exit_code == 1
        assert stream.getvalue() == "Exception in thread main"

    def test_missing_plugin(self, mock_java, request_factory, tmp_path):
        runner, invoker, _ = make_runner()

        with pytest.raises(MissingArtifactError):
            runner.run(request_factory(plugin_artifact=tmp_path / "missing.zip"))

        invoker.assert_not_called()

    def test_no_targets(self, mock_java, request_factory):
        runner, invoker, _ = make_runner()

        with pytest.raises(NoTargetsError):
            runner.run(request_factory(ide_directories=[], local_paths=[]))

        invoker.assert_not_called()

    def test_local_paths_only(self, mock_java, request_factory, tmp_path):
        runner, invoker, _ = make_runner()

        runner.run(request_factory(ide_directories=[], local_paths=[tmp_path / "idea"]))

        assert invoker.call_args.args[2][-1] == str((tmp_path / "idea").resolve())


class TestBuildArguments:
    """Test verifier argument assembly."""

    def test_minimal(self, request_factory, tmp_path, plugin_archive):
        args = VerificationRunner().build_arguments(request_factory())

        assert args == [
            "check-plugin",
            "-verification-reports-dir",
            str((tmp_path / "reports").resolve()),
            "-runtime-dir",
            str((tmp_path / "jbr").resolve()),
            str(plugin_archive.resolve()),
            str((tmp_path / "ides" / "IC-2020.2").resolve()),
        ]

    def test_all_options(self, request_factory, tmp_path, plugin_archive):
        request = request_factory(local_paths=[tmp_path / "local-idea"])
        request.options.external_prefixes = ["com.example", "org.acme"]
        request.options.team_city = True
        request.options.subsystems_to_check = "without-android"
        request.options.offline = True

        args = VerificationRunner().build_arguments(request)

        assert args[5:12] == [
            "-external-prefixes",
            "com.example:org.acme",
            "-team-city",
            "-subsystems-to-check",
            "without-android",
            "-offline",
            str(plugin_archive.resolve()),
        ]
        assert args[-2:] == [
            str((tmp_path / "ides" / "IC-2020.2").resolve()),
            str((tmp_path / "local-idea").resolve()),
        ]


class TestEvaluate:
    """Test output evaluation."""

    def test_evaluate_pass(self):
        result = VerificationRunner().evaluate("Compatible", frozenset(FailureLevel))

        assert result.passed is True
        assert result.raw_output == "Compatible"

    def test_evaluate_fail(self):
        with pytest.raises(VerificationFailedError):
            VerificationRunner().evaluate(
                "Missing dependencies", frozenset({FailureLevel.MISSING_DEPENDENCIES})
            )
