"""
Java runtime resolution for running the Plugin Verifier.
"""

from .jbr import (
    JBR_REPOSITORY,
    JbrResolver,
    jbr_artifact_name,
    jbr_subpath,
    get_builtin_jbr_version,
)
from .resolver import (
    RuntimeSource,
    RuntimeSpec,
    RuntimeResolver,
    detect_host_java_home,
)

__all__ = [
    "JBR_REPOSITORY",
    "JbrResolver",
    "jbr_artifact_name",
    "jbr_subpath",
    "get_builtin_jbr_version",
    "RuntimeSource",
    "RuntimeSpec",
    "RuntimeResolver",
    "detect_host_java_home",
]
