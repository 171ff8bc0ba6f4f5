"""
Plugin Verifier invocation and result evaluation.

Assembles the ``check-plugin`` command line from a verification request,
runs the verifier, echoes its output and turns the output into a pass/fail
result according to the configured failure levels.
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, FrozenSet, List, Optional, Sequence, TextIO

from verifierkit.core.exceptions import (
    MissingArtifactError,
    NoTargetsError,
    VerificationFailedError,
    VerifierProcessError,
)
from verifierkit.runtime.resolver import RuntimeSpec
from verifierkit.verifier.failure_levels import (
    DEFAULT_LEVELS,
    FailureLevel,
    classify_output,
)
from verifierkit.verifier.process import (
    ProcessResult,
    find_java_executable,
    invoke_verifier,
)

logger = logging.getLogger(__name__)

SUBSYSTEMS = ("all", "android-only", "without-android")

Invoker = Callable[[str, Sequence[Path], Sequence[str]], ProcessResult]


@dataclass
class VerificationOptions:
    """Verifier CLI options."""

    reports_dir: Path
    external_prefixes: List[str] = field(default_factory=list)
    team_city: bool = False
    subsystems_to_check: Optional[str] = None
    offline: bool = False
    failure_levels: FrozenSet[FailureLevel] = DEFAULT_LEVELS


@dataclass
class VerificationRequest:
    """Everything needed for a single verifier run."""

    plugin_artifact: Path
    ide_directories: List[Path]
    local_paths: List[Path]
    verifier_path: Path
    runtime: RuntimeSpec
    options: VerificationOptions


@dataclass
class VerificationResult:
    """Outcome of a verifier run."""

    passed: bool
    raw_output: str
    failed_level: Optional[FailureLevel] = None
    exit_code: int = 0


class VerificationRunner:
    """
    Runs the Plugin Verifier for a request.

    Example:
        >>> runner = VerificationRunner()
        >>> result = runner.run(request)
        >>> result.passed
        True
    """

    def __init__(self, invoker: Optional[Invoker] = None, stream: Optional[TextIO] = None):
        """
        Initialize runner.

        Args:
            invoker: Callable running the verifier (default: invoke_verifier)
            stream: Where verifier output is echoed (default: sys.stdout)
        """
        self.invoker = invoker or invoke_verifier
        self.stream = stream

    def build_arguments(self, request: VerificationRequest) -> List[str]:
        """Build the ``check-plugin`` argument list."""
        options = request.options
        args = [
            "check-plugin",
            "-verification-reports-dir",
            str(Path(options.reports_dir).resolve()),
            "-runtime-dir",
            str(Path(request.runtime.java_home).resolve()),
        ]

        if options.external_prefixes:
            args += ["-external-prefixes", ":".join(options.external_prefixes)]
        if options.team_city:
            args.append("-team-city")
        if options.subsystems_to_check:
            args += ["-subsystems-to-check", options.subsystems_to_check]
        if options.offline:
            args.append("-offline")

        args.append(str(Path(request.plugin_artifact).resolve()))
        args += [str(Path(p).resolve()) for p in request.ide_directories]
        args += [str(Path(p).resolve()) for p in request.local_paths]
        return args

    def evaluate(
        self, output: str, levels: FrozenSet[FailureLevel], exit_code: int = 0
    ) -> VerificationResult:
        """
        Turn verifier output into a result.

        Raises:
            VerificationFailedError: If the output reports a configured level
        """
        level = classify_output(output, levels)
        if level is not None:
            result = VerificationResult(
                passed=False, raw_output=output, failed_level=level, exit_code=exit_code
            )
            raise VerificationFailedError(level, result)

        return VerificationResult(passed=True, raw_output=output, exit_code=exit_code)

    def run(self, request: VerificationRequest) -> VerificationResult:
        """
        Run the verifier.

        Returns:
            VerificationResult with ``passed=True``

        Raises:
            MissingArtifactError: If the plugin artifact does not exist
            NoTargetsError: If there is nothing to verify against
            VerifierProcessError: If the verifier cannot start or exits non-zero
            VerificationFailedError: If the output reports a configured level
        """
        if not request.plugin_artifact or not Path(request.plugin_artifact).exists():
            raise MissingArtifactError(request.plugin_artifact)

        if not request.ide_directories and not request.local_paths:
            raise NoTargetsError()

        args = self.build_arguments(request)
        java = find_java_executable(request.runtime.java_home)
        logger.debug(f"Distribution file: {Path(request.plugin_artifact).resolve()}")

        completed = self.invoker(java, [Path(request.verifier_path)], args)

        stream = self.stream or sys.stdout
        stream.write(completed.output)
        stream.flush()

        if completed.exit_code != 0:
            raise VerifierProcessError(
                f"Plugin Verifier exited with code {completed.exit_code}",
                exit_code=completed.exit_code,
            )

        levels = ", ".join(sorted(level.name for level in request.options.failure_levels))
        logger.debug(f"Current failure levels: {levels or 'none'}")
        return self.evaluate(
            completed.output, request.options.failure_levels, completed.exit_code
        )


__all__ = [
    "SUBSYSTEMS",
    "VerificationOptions",
    "VerificationRequest",
    "VerificationResult",
    "VerificationRunner",
]
