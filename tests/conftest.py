"""
Pytest configuration and shared fixtures for VerifierKit tests.
"""

from pathlib import Path

import pytest

from tests.utils.builders import IDE_FILES, build_tar_gz, build_tree


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """
    Skip integration tests unless --integration flag is provided.
    """
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def ide_archive(tmp_path: Path) -> Path:
    """IDE distribution archive wrapped in a single top-level directory."""
    return build_tar_gz(
        tmp_path / "archives" / "ideaIC-2020.2.tar.gz",
        IDE_FILES,
        root="idea-IC-202.6397.94",
    )


@pytest.fixture
def fake_ide_dir(tmp_path: Path) -> Path:
    """Extracted IDE directory declaring a bundled runtime."""
    return build_tree(tmp_path / "ides" / "IC-2020.2", IDE_FILES)


@pytest.fixture
def plugin_archive(tmp_path: Path) -> Path:
    """Plugin distribution to verify."""
    plugin = tmp_path / "build" / "distributions" / "my-plugin-1.0.zip"
    plugin.parent.mkdir(parents=True)
    plugin.write_bytes(b"PK\x05\x06" + b"\x00" * 18)
    return plugin


@pytest.fixture
def verifier_home(tmp_path: Path, monkeypatch) -> Path:
    """Isolated Plugin Verifier home directory."""
    home = tmp_path / "verifier-home"
    monkeypatch.setenv("PLUGIN_VERIFIER_HOME_DIR", str(home))
    return home


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    from verifierkit.core import platform

    platform.clear_platform_cache()
    yield
