"""
Unit tests for IDE version specification parsing.
"""

import pytest

from verifierkit.core.exceptions import InvalidVersionSpecError
from verifierkit.ide.version_spec import (
    IdeSpec,
    ProductCode,
    is_build_number,
    parse_ide_spec,
    version_parameter_name,
)


class TestParseIdeSpec:
    """Test parse_ide_spec function."""

    def test_with_product_code(self):
        assert parse_ide_spec("IU-2020.2") == IdeSpec(ProductCode.IU, "2020.2")

    def test_default_product_code(self):
        """Test identifiers without a product code default to IC."""
        assert parse_ide_spec("2020.2") == IdeSpec(ProductCode.IC, "2020.2")

    def test_build_number(self):
        spec = parse_ide_spec("203.1234.56")

        assert spec.type is ProductCode.IC
        assert spec.version == "203.1234.56"

    def test_whitespace_trimmed(self):
        assert parse_ide_spec("  PY-2021.1  ") == IdeSpec(ProductCode.PY, "2021.1")

    def test_unknown_prefix_kept_in_version(self):
        """Test an unknown prefix stays part of the version."""
        spec = parse_ide_spec("XX-2020.2")

        assert spec.type is ProductCode.IC
        assert spec.version == "XX-2020.2"

    @pytest.mark.parametrize(
        "raw, code",
        [
            ("PS-2021.1", ProductCode.PS),
            ("WS-2021.1", ProductCode.WS),
            ("RM-2021.1", ProductCode.RM),
            ("DG-2021.1", ProductCode.DG),
        ],
    )
    def test_other_products(self, raw, code):
        """Test product codes beyond the IntelliJ family are split off."""
        assert parse_ide_spec(raw) == IdeSpec(code, "2021.1")

    def test_lowercase_product_code(self):
        assert parse_ide_spec("iu-2020.2") == IdeSpec(ProductCode.IU, "2020.2")

    def test_service_alias(self):
        """Test the download service's long codes map onto the short ones."""
        assert parse_ide_spec("PCP-2021.1") == IdeSpec(ProductCode.PY, "2021.1")
        assert parse_ide_spec("iic-2020.2").name == "IC-2020.2"

    def test_only_first_dash_splits(self):
        assert parse_ide_spec("IC-2020.3-EAP").version == "2020.3-EAP"

    @pytest.mark.parametrize("raw", ["", "   ", "IU-"])
    def test_empty_version_rejected(self, raw):
        with pytest.raises(InvalidVersionSpecError):
            parse_ide_spec(raw)

    def test_name(self):
        """Test the cache key format."""
        assert parse_ide_spec("IC-2020.2").name == "IC-2020.2"
        assert parse_ide_spec("203.1234.56").name == "IC-203.1234.56"


class TestIsBuildNumber:
    """Test build number detection."""

    @pytest.mark.parametrize("version", ["203.1234.56", "202.6397", "211.1.2.3"])
    def test_build_numbers(self, version):
        assert is_build_number(version) is True
        assert version_parameter_name(version) == "build"

    @pytest.mark.parametrize("version", ["2020.2", "2020.2.3", "20.1", "203", "203.x"])
    def test_marketing_versions(self, version):
        assert is_build_number(version) is False
        assert version_parameter_name(version) == "version"


class TestProductCodeFromString:
    """Test ProductCode.from_string lookup."""

    @pytest.mark.parametrize("value", ["IC", "ic", " Ic "])
    def test_case_insensitive(self, value):
        assert ProductCode.from_string(value) is ProductCode.IC

    def test_unknown(self):
        assert ProductCode.from_string("XX") is None
        assert ProductCode.from_string("") is None
