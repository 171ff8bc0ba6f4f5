"""
Release channels and download URL resolution for IDE distributions.

The JetBrains data service answers a product query with an HTTP redirect to
the actual archive. The redirect target is routed through a caching mirror
so repeated downloads are served from the cache.
"""

import logging
from enum import Enum
from typing import Optional, Tuple
from urllib.parse import urlencode, urlsplit

import requests
from requests.exceptions import RequestException

from verifierkit.core.platform import PlatformInfo
from verifierkit.ide.version_spec import IdeSpec, version_parameter_name

logger = logging.getLogger(__name__)

IDE_DOWNLOAD_URL = "https://data.services.jetbrains.com/products/download"
CACHE_REDIRECTOR = "https://cache-redirector.jetbrains.com"
DOWNLOAD_PLATFORM = "linux"

# Layout of every downloaded IDE, including its bundled runtime
IDE_DOWNLOAD_PLATFORM = PlatformInfo(DOWNLOAD_PLATFORM, "x64")


class DownloadChannel(Enum):
    """Release-maturity tracks, in fallback priority order."""

    RELEASE = "release"
    RC = "rc"
    EAP = "eap"
    BETA = "beta"

    @classmethod
    def ordered(cls) -> Tuple["DownloadChannel", ...]:
        """Fixed priority order used for fallback."""
        return (cls.RELEASE, cls.RC, cls.EAP, cls.BETA)


def build_download_url(
    spec: IdeSpec, channel: DownloadChannel, base_url: str = IDE_DOWNLOAD_URL
) -> str:
    """
    Build the data-service query URL for an IDE in a given channel.

    Example:
        >>> build_download_url(IdeSpec(ProductCode.IC, "2020.2"), DownloadChannel.EAP)
        'https://data.services.jetbrains.com/products/download?code=IC&platform=linux&type=eap&version=2020.2'
    """
    params = [
        ("code", spec.type.value),
        ("platform", DOWNLOAD_PLATFORM),
        ("type", channel.value),
        (version_parameter_name(spec.version), spec.version),
    ]
    return f"{base_url}?{urlencode(params)}"


def rewrite_through_mirror(url: str, mirror: Optional[str]) -> str:
    """
    Prefix a direct download URL with the caching mirror host.

    ``https://download.jetbrains.com/idea/ideaIC.tar.gz`` becomes
    ``{mirror}/download.jetbrains.com/idea/ideaIC.tar.gz``. Without a mirror
    the URL is returned unchanged.
    """
    if not mirror:
        return url

    parts = urlsplit(url)
    rewritten = f"{mirror.rstrip('/')}/{parts.netloc}{parts.path}"
    if parts.query:
        rewritten += f"?{parts.query}"
    return rewritten


def resolve_download_url(
    url: str,
    mirror: Optional[str] = CACHE_REDIRECTOR,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> str:
    """
    Resolve the direct archive URL behind a data-service query.

    The query is probed without following redirects. A redirect response
    yields its Location rewritten through the mirror; anything else, including
    a failed probe, yields the original URL so the download itself reports
    the failure.

    Args:
        url: Data-service query URL
        mirror: Caching mirror base URL (None disables rewriting)
        session: Optional requests session to reuse
        timeout: Request timeout in seconds

    Returns:
        URL to download the archive from
    """
    logger.debug(f"Resolving direct IDE download URL for: {url}")
    getter = session.get if session is not None else requests.get

    try:
        response = getter(url, allow_redirects=False, stream=True, timeout=timeout)
    except RequestException as e:
        logger.info(f"Cannot resolve direct download URL for: {url}")
        logger.debug(f"Download exception: {e}")
        return url

    with response:
        location = response.headers.get("Location")
        if response.is_redirect and location:
            resolved = rewrite_through_mirror(location, mirror)
            logger.debug(f"Resolved IDE download URL: {resolved}")
            return resolved

    logger.debug("IDE download URL has no redirection provided, skipping.")
    return url


__all__ = [
    "IDE_DOWNLOAD_URL",
    "CACHE_REDIRECTOR",
    "IDE_DOWNLOAD_PLATFORM",
    "DownloadChannel",
    "build_download_url",
    "rewrite_through_mirror",
    "resolve_download_url",
]
