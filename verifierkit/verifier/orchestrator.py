"""
End-to-end plugin verification.

Wires the IDE, verifier and runtime resolvers together from a
VerifierKitConfig and hands the resulting request to the runner:

1. Check the plugin artifact exists and something is configured to verify against
2. Resolve the Plugin Verifier jar
3. Resolve every requested IDE into the cache
4. Pick the Java runtime
5. Run the verifier and evaluate its output
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

import requests

from verifierkit.config.parser import VerifierKitConfig
from verifierkit.core.directory import ensure_cache_structure, get_verifier_home_dir
from verifierkit.core.download import DownloadProgress
from verifierkit.core.exceptions import MissingArtifactError, NoTargetsError
from verifierkit.core.locking import LockManager
from verifierkit.core.platform import PlatformInfo, detect_platform
from verifierkit.ide.downloader import IdeDownloader, ResolvedArtifact
from verifierkit.ide.version_spec import parse_ide_spec
from verifierkit.runtime.jbr import JbrResolver
from verifierkit.runtime.resolver import RuntimeResolver, RuntimeSpec
from verifierkit.verifier.maven import MavenArtifactResolver
from verifierkit.verifier.resolver import VerifierResolver, VerifierSpec
from verifierkit.verifier.runner import (
    VerificationOptions,
    VerificationRequest,
    VerificationResult,
    VerificationRunner,
)

logger = logging.getLogger(__name__)


class PluginVerification:
    """
    Runs a complete verification described by a configuration.

    Collaborators are built from the configuration unless given explicitly.

    Example:
        >>> config = parse_config(Path("verifierkit.yaml"))
        >>> result = PluginVerification(config).run()
        >>> result.passed
        True
    """

    def __init__(
        self,
        config: VerifierKitConfig,
        ide_downloader: Optional[IdeDownloader] = None,
        verifier_resolver: Optional[VerifierResolver] = None,
        runtime_resolver: Optional[RuntimeResolver] = None,
        runner: Optional[VerificationRunner] = None,
        platform: Optional[PlatformInfo] = None,
        session: Optional[requests.Session] = None,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        self.config = config
        self.offline = config.offline
        self.platform = platform or detect_platform()
        self.session = session or requests.Session()

        home = config.resolve_path(config.directories.cache) or get_verifier_home_dir()
        self.home = home
        paths = ensure_cache_structure(home)
        timeout = config.network.timeout

        self.ide_downloader = ide_downloader or IdeDownloader(
            download_dir=config.resolve_path(config.directories.downloads) or paths["ides"],
            offline=self.offline,
            mirror=config.network.mirror,
            lock_manager=LockManager(paths["lock"]),
            session=self.session,
            timeout=timeout,
            progress_callback=progress_callback,
        )
        self.verifier_resolver = verifier_resolver or VerifierResolver(
            artifact_resolver=MavenArtifactResolver(
                cache_dir=paths["maven"], session=self.session, timeout=timeout
            ),
            session=self.session,
            timeout=timeout,
        )
        self.runtime_resolver = runtime_resolver or RuntimeResolver(
            JbrResolver(
                cache_dir=paths["jbr"],
                repository_url=config.network.jre_repository,
                offline=self.offline,
                platform=self.platform,
                session=self.session,
                timeout=timeout,
            ),
            platform=self.platform,
        )
        self.runner = runner or VerificationRunner()

    @property
    def plugin_artifact(self) -> Optional[Path]:
        return self.config.resolve_path(self.config.plugin)

    @property
    def local_paths(self) -> List[Path]:
        return [self.config.resolve_path(p) for p in self.config.local_paths]

    def check_inputs(self) -> None:
        """
        Validate the request before any network access.

        Raises:
            MissingArtifactError: If the plugin artifact does not exist
            NoTargetsError: If neither IDEs nor local paths are configured
        """
        plugin = self.plugin_artifact
        if plugin is None or not plugin.exists():
            raise MissingArtifactError(plugin)

        if not self.config.ides and not self.config.local_paths:
            raise NoTargetsError()

    def resolve_verifier(self) -> Path:
        spec = VerifierSpec(
            version=self.config.verifier.version,
            explicit_path=self.config.resolve_path(self.config.verifier.path),
        )
        return self.verifier_resolver.resolve(spec, offline=self.offline)

    def resolve_ides(self) -> List[ResolvedArtifact]:
        specs = [parse_ide_spec(raw) for raw in self.config.ides]
        return self.ide_downloader.resolve_all(
            specs, max_workers=self.config.network.parallel_downloads
        )

    def resolve_runtime(self, first_ide: Optional[Path]) -> RuntimeSpec:
        return self.runtime_resolver.resolve(
            explicit_dir=self.config.resolve_path(self.config.runtime.dir),
            explicit_version=self.config.runtime.jbr_version,
            first_ide=first_ide,
        )

    def build_options(self) -> VerificationOptions:
        reports_dir = self.config.resolve_path(self.config.directories.reports)
        reports_dir.mkdir(parents=True, exist_ok=True)

        return VerificationOptions(
            reports_dir=reports_dir,
            external_prefixes=list(self.config.external_prefixes),
            team_city=self.config.team_city,
            subsystems_to_check=self.config.subsystems_to_check,
            offline=self.offline,
            failure_levels=self.config.failure_levels,
        )

    def run(self) -> VerificationResult:
        """
        Run the verification.

        Returns:
            VerificationResult of a passing run

        Raises:
            VerifierKitError: Any resolution, configuration or verification
                failure; VerificationFailedError when a configured failure
                level is reported
        """
        self.check_inputs()

        verifier_path = self.resolve_verifier()
        ides = [artifact.directory for artifact in self.resolve_ides()]
        local_paths = self.local_paths

        first_ide = ides[0] if ides else (local_paths[0] if local_paths else None)
        runtime = self.resolve_runtime(first_ide)

        request = VerificationRequest(
            plugin_artifact=self.plugin_artifact,
            ide_directories=ides,
            local_paths=local_paths,
            verifier_path=verifier_path,
            runtime=runtime,
            options=self.build_options(),
        )
        logger.info(
            f"Verifying {request.plugin_artifact.name} against "
            f"{len(ides) + len(local_paths)} IDE(s)"
        )
        return self.runner.run(request)


__all__ = ["PluginVerification"]
