"""
Core functionality for VerifierKit.

This package contains the foundational modules that the IDE, verifier and
runtime resolvers depend on.
"""

from .directory import (
    get_verifier_home_dir,
    get_ide_download_dir,
    get_jbr_cache_dir,
    get_maven_cache_dir,
    get_lock_dir,
    ensure_cache_structure,
    DirectoryError,
)

from .locking import (
    LockManager,
    LockTimeout,
)

from .platform import (
    PlatformInfo,
    detect_platform,
    clear_platform_cache,
)

from .fallback import (
    FallbackChain,
    FallbackExhausted,
    FallbackResult,
    first_success,
)

from .exceptions import (
    VerifierKitError,
    InvalidVersionSpecError,
    ResolutionError,
    IdeResolutionError,
    VerifierResolutionError,
    ArtifactResolutionError,
    RuntimeResolutionError,
    OfflineError,
    OfflineDownloadError,
    OfflineVerifierError,
    ConfigurationError,
    ConfigError,
    MissingArtifactError,
    NoTargetsError,
    VerificationError,
    VerifierProcessError,
    VerificationFailedError,
)

__all__ = [
    "get_verifier_home_dir",
    "get_ide_download_dir",
    "get_jbr_cache_dir",
    "get_maven_cache_dir",
    "get_lock_dir",
    "ensure_cache_structure",
    "DirectoryError",
    "LockManager",
    "LockTimeout",
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
    "FallbackChain",
    "FallbackExhausted",
    "FallbackResult",
    "first_success",
    "VerifierKitError",
    "InvalidVersionSpecError",
    "ResolutionError",
    "IdeResolutionError",
    "VerifierResolutionError",
    "ArtifactResolutionError",
    "RuntimeResolutionError",
    "OfflineError",
    "OfflineDownloadError",
    "OfflineVerifierError",
    "ConfigurationError",
    "ConfigError",
    "MissingArtifactError",
    "NoTargetsError",
    "VerificationError",
    "VerifierProcessError",
    "VerificationFailedError",
]
