"""
Centralized exception hierarchy for VerifierKit.

This module defines all custom exceptions raised while resolving IDEs,
the Plugin Verifier, Java runtimes, and while running the verification.
"""

from pathlib import Path
from typing import Iterable, Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class VerifierKitError(Exception):
    """Base exception for all VerifierKit errors."""

    pass


class InvalidVersionSpecError(VerifierKitError):
    """Raised when an IDE identifier cannot be parsed into type and version."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"Invalid IDE version specification: '{raw}'")


# ============================================================================
# Resolution Exceptions
# ============================================================================


class ResolutionError(VerifierKitError):
    """Base exception for artifact resolution errors."""

    pass


class IdeResolutionError(ResolutionError):
    """Raised when an IDE cannot be downloaded from any release channel."""

    def __init__(self, spec, channels: Iterable[str]):
        self.spec = spec
        self.channels = list(channels)
        super().__init__(
            f"IDE '{spec.name}' cannot be downloaded "
            f"(tried channels: {', '.join(self.channels)}). "
            "Please verify the specified IDE version against the products "
            "available for testing: https://jb.gg/intellij-platform-builds-list"
        )


class VerifierResolutionError(ResolutionError):
    """Raised when the Plugin Verifier version or jar cannot be resolved."""

    pass


class ArtifactResolutionError(ResolutionError):
    """Raised when a Maven artifact cannot be fetched from a repository."""

    def __init__(self, coordinate: str, repository_url: str, reason: str):
        self.coordinate = coordinate
        self.repository_url = repository_url
        super().__init__(
            f"Cannot resolve artifact {coordinate} from {repository_url}: {reason}"
        )


class RuntimeResolutionError(ResolutionError):
    """Raised when no Java runtime can be located on the host."""

    pass


# ============================================================================
# Offline Mode Exceptions
# ============================================================================


class OfflineError(VerifierKitError):
    """Base exception for operations that need network access in offline mode."""

    pass


class OfflineDownloadError(OfflineError):
    """Raised when an uncached IDE is requested in offline mode."""

    def __init__(self, spec):
        self.spec = spec
        super().__init__(
            f"Cannot download IDE: {spec.name}. Running in offline mode. "
            "Provide pre-downloaded IDEs in the download directory "
            "or use local paths instead."
        )


class OfflineVerifierError(OfflineError):
    """Raised when the Plugin Verifier must be downloaded in offline mode."""

    def __init__(self):
        super().__init__(
            "Cannot resolve Plugin Verifier in offline mode. "
            "Provide a pre-downloaded Plugin Verifier jar file with the verifier path."
        )


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(VerifierKitError):
    """Base exception for caller misconfiguration."""

    pass


class ConfigError(ConfigurationError):
    """Configuration parsing or validation error."""

    pass


class MissingArtifactError(ConfigurationError):
    """Raised when the plugin artifact to verify does not exist."""

    def __init__(self, path: Optional[Path]):
        self.path = path
        super().__init__(f"Plugin file does not exist: {path}")


class NoTargetsError(ConfigurationError):
    """Raised when neither remote IDE versions nor local IDE paths are given."""

    def __init__(self):
        super().__init__("IDE versions and local paths should not both be empty")


# ============================================================================
# Verification Exceptions
# ============================================================================


class VerificationError(VerifierKitError):
    """Base exception for errors raised while running the verifier."""

    pass


class VerifierProcessError(VerificationError):
    """Raised when the verifier process cannot start or exits with failure."""

    def __init__(self, message: str, exit_code: Optional[int] = None):
        self.exit_code = exit_code
        super().__init__(message)


class VerificationFailedError(VerificationError):
    """Raised when the verifier output contains a configured failure level."""

    def __init__(self, level, result=None):
        self.level = level
        self.result = result
        super().__init__(level.name)
