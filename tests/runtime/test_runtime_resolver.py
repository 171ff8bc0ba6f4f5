"""
Unit tests for Java runtime selection.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from tests.utils.builders import JBR_FILES, build_tree
from verifierkit.core.exceptions import RuntimeResolutionError
from verifierkit.core.platform import PlatformInfo
from verifierkit.runtime.resolver import (
    RuntimeResolver,
    RuntimeSource,
    detect_host_java_home,
)

LINUX = PlatformInfo("linux", "x64")


@pytest.fixture
def jbr_resolver():
    resolver = MagicMock()
    resolver.resolve.return_value = None
    return resolver


class TestRuntimeResolver:
    """Test RuntimeResolver precedence."""

    def test_explicit_dir_wins(self, jbr_resolver, fake_ide_dir, tmp_path):
        resolver = RuntimeResolver(jbr_resolver, platform=LINUX)

        spec = resolver.resolve(
            explicit_dir=tmp_path / "custom-jdk",
            explicit_version="11_0_10b1341.41",
            first_ide=fake_ide_dir,
        )

        assert spec.java_home == tmp_path / "custom-jdk"
        assert spec.source is RuntimeSource.EXPLICIT_DIR
        jbr_resolver.resolve.assert_not_called()

    def test_explicit_version(self, jbr_resolver, tmp_path):
        jbr_resolver.resolve.return_value = tmp_path / "jbr"
        resolver = RuntimeResolver(jbr_resolver, platform=LINUX)

        spec = resolver.resolve(explicit_version="11_0_10b1341.41")

        assert spec.java_home == tmp_path / "jbr"
        assert spec.source is RuntimeSource.EXPLICIT_VERSION
        jbr_resolver.resolve.assert_called_once_with("11_0_10b1341.41")

    def test_failed_version_falls_back_to_ide(self, jbr_resolver, fake_ide_dir, caplog):
        caplog.set_level(logging.WARNING)
        build_tree(fake_ide_dir, JBR_FILES)
        resolver = RuntimeResolver(jbr_resolver, platform=LINUX)

        spec = resolver.resolve(explicit_version="11_0_10b1341.41", first_ide=fake_ide_dir)

        assert spec.java_home == fake_ide_dir / "jbr"
        assert spec.source is RuntimeSource.IDE_BUNDLED
        assert "Falling back to built-in JBR" in caplog.text

    def test_ide_runtime_downloaded(self, jbr_resolver, fake_ide_dir, tmp_path):
        downloaded = build_tree(tmp_path / "jbr-cache" / "jbr", JBR_FILES)
        jbr_resolver.resolve.return_value = downloaded
        resolver = RuntimeResolver(jbr_resolver, platform=LINUX)

        spec = resolver.resolve(first_ide=fake_ide_dir)

        assert spec.java_home == downloaded
        assert spec.source is RuntimeSource.IDE_BUNDLED
        jbr_resolver.resolve.assert_called_once_with("1335.42")

    def test_ide_runtime_skipped_on_other_architecture(
        self, jbr_resolver, fake_ide_dir, tmp_path
    ):
        """Test the IDE's own jbr is only used on the platform it was downloaded for."""
        build_tree(fake_ide_dir, JBR_FILES)
        downloaded = build_tree(tmp_path / "jbr-cache" / "jbr", JBR_FILES)
        jbr_resolver.resolve.return_value = downloaded
        resolver = RuntimeResolver(jbr_resolver, platform=PlatformInfo("linux", "arm64"))

        spec = resolver.resolve(first_ide=fake_ide_dir)

        assert spec.java_home == downloaded
        assert spec.source is RuntimeSource.IDE_BUNDLED
        jbr_resolver.resolve.assert_called_once_with("1335.42")

    def test_ide_without_declared_runtime(self, jbr_resolver, tmp_path):
        ide = build_tree(tmp_path / "ide", {"build.txt": "IC-202.6397.94"})
        resolver = RuntimeResolver(jbr_resolver, platform=LINUX)

        spec = resolver.resolve(first_ide=ide, host_java_home=tmp_path / "host-jdk")

        assert spec.java_home == tmp_path / "host-jdk"
        assert spec.source is RuntimeSource.HOST
        jbr_resolver.resolve.assert_not_called()

    def test_unresolvable_ide_runtime_falls_back_to_host(
        self, jbr_resolver, fake_ide_dir, tmp_path, caplog
    ):
        caplog.set_level(logging.WARNING)
        resolver = RuntimeResolver(jbr_resolver, platform=LINUX)

        spec = resolver.resolve(first_ide=fake_ide_dir, host_java_home=tmp_path / "host-jdk")

        assert spec.source is RuntimeSource.HOST
        assert "Falling back to local Java" in caplog.text

    def test_no_runtime_anywhere(self, jbr_resolver, monkeypatch):
        monkeypatch.delenv("JAVA_HOME", raising=False)
        resolver = RuntimeResolver(jbr_resolver, platform=LINUX)

        with patch("verifierkit.runtime.resolver.shutil.which", return_value=None):
            with pytest.raises(RuntimeResolutionError):
                resolver.resolve()


class TestDetectHostJavaHome:
    """Test detect_host_java_home function."""

    def test_java_home_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("JAVA_HOME", str(tmp_path / "jdk"))

        assert detect_host_java_home() == tmp_path / "jdk"

    def test_java_on_path(self, monkeypatch, tmp_path):
        java = build_tree(tmp_path / "jdk", {"bin/java": ""}) / "bin" / "java"
        monkeypatch.delenv("JAVA_HOME", raising=False)

        with patch("verifierkit.runtime.resolver.shutil.which", return_value=str(java)):
            assert detect_host_java_home() == (tmp_path / "jdk").resolve()

    def test_not_found(self, monkeypatch):
        monkeypatch.delenv("JAVA_HOME", raising=False)

        with patch("verifierkit.runtime.resolver.shutil.which", return_value=None):
            with pytest.raises(RuntimeResolutionError, match="JAVA_HOME"):
                detect_host_java_home()
