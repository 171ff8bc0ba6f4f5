"""
IntelliJ Plugin Verifier resolution and execution.

The orchestrator depends on the configuration package and is not re-exported
here; import it from ``verifierkit.verifier.orchestrator``.
"""

from .failure_levels import (
    FailureLevel,
    ALL_LEVELS,
    DEFAULT_LEVELS,
    classify_output,
    parse_failure_levels,
)
from .maven import MavenCoordinate, MavenArtifactResolver
from .resolver import VerifierSpec, VerifierResolver
from .process import ProcessResult, invoke_verifier, find_java_executable
from .runner import (
    VerificationOptions,
    VerificationRequest,
    VerificationResult,
    VerificationRunner,
)

__all__ = [
    "FailureLevel",
    "ALL_LEVELS",
    "DEFAULT_LEVELS",
    "classify_output",
    "parse_failure_levels",
    "MavenCoordinate",
    "MavenArtifactResolver",
    "VerifierSpec",
    "VerifierResolver",
    "ProcessResult",
    "invoke_verifier",
    "find_java_executable",
    "VerificationOptions",
    "VerificationRequest",
    "VerificationResult",
    "VerificationRunner",
]
