"""
IDE distribution resolution.

Parses IDE identifiers, resolves them through the release channels of the
JetBrains download service and keeps extracted IDEs in a local cache.
"""

from .version_spec import (
    ProductCode,
    IdeSpec,
    parse_ide_spec,
    is_build_number,
    version_parameter_name,
)
from .channels import (
    DownloadChannel,
    build_download_url,
    rewrite_through_mirror,
    resolve_download_url,
)
from .cache import ArtifactCache
from .downloader import IdeDownloader, ResolvedArtifact

__all__ = [
    "ProductCode",
    "IdeSpec",
    "parse_ide_spec",
    "is_build_number",
    "version_parameter_name",
    "DownloadChannel",
    "build_download_url",
    "rewrite_through_mirror",
    "resolve_download_url",
    "ArtifactCache",
    "IdeDownloader",
    "ResolvedArtifact",
]
