"""
Unit tests for product and platform identifiers.
"""

from unittest.mock import patch

import pytest

from browserfetch.core.exceptions import UnsupportedPlatform, UnsupportedProduct
from browserfetch.core.platform import (
    Platform,
    Product,
    detect_architecture,
    detect_platform,
)


class TestProduct:
    """Test Product parsing."""

    def test_parse_case_insensitive(self):
        assert Product.parse("Firefox") is Product.FIREFOX
        assert Product.parse("CHROME") is Product.CHROME

    def test_parse_default_is_chrome(self):
        assert Product.parse(None) is Product.CHROME
        assert Product.parse("") is Product.CHROME

    def test_parse_passthrough(self):
        assert Product.parse(Product.FIREFOX) is Product.FIREFOX

    def test_parse_unknown(self):
        with pytest.raises(UnsupportedProduct, match='Unknown product: "opera"'):
            Product.parse("opera")

    def test_unknown_product_is_value_error(self):
        with pytest.raises(ValueError):
            Product.parse("safari")


class TestPlatform:
    """Test Platform parsing and properties."""

    @pytest.mark.parametrize("value", ["linux", "linux-arm64", "mac", "win32", "win64"])
    def test_parse_known(self, value):
        assert Platform.parse(value).value == value

    def test_parse_unknown(self):
        with pytest.raises(UnsupportedPlatform, match="Unsupported platform: freebsd"):
            Platform.parse("freebsd")

    def test_is_windows(self):
        assert Platform.WIN32.is_windows
        assert Platform.WIN64.is_windows
        assert not Platform.MAC.is_windows

    def test_is_linux(self):
        assert Platform.LINUX.is_linux
        assert Platform.LINUX_ARM64.is_linux
        assert not Platform.WIN64.is_linux

    def test_str(self):
        assert str(Platform.LINUX_ARM64) == "linux-arm64"


class TestDetectPlatform:
    """Test host platform detection."""

    @pytest.mark.parametrize(
        "system,machine,expected",
        [
            ("Linux", "x86_64", Platform.LINUX),
            ("Linux", "aarch64", Platform.LINUX_ARM64),
            ("Darwin", "arm64", Platform.MAC),
            ("Darwin", "x86_64", Platform.MAC),
            ("Windows", "AMD64", Platform.WIN64),
            ("Windows", "x86", Platform.WIN32),
        ],
    )
    def test_detection(self, system, machine, expected):
        with patch("browserfetch.core.platform._platform.system", return_value=system), patch(
            "browserfetch.core.platform._platform.machine", return_value=machine
        ):
            assert detect_platform() is expected

    def test_unsupported_os(self):
        with patch("browserfetch.core.platform._platform.system", return_value="SunOS"):
            with pytest.raises(UnsupportedPlatform):
                detect_platform()

    def test_detection_is_cached(self):
        with patch(
            "browserfetch.core.platform._platform.system", return_value="Linux"
        ) as system, patch(
            "browserfetch.core.platform._platform.machine", return_value="x86_64"
        ):
            detect_platform()
            detect_platform()

        assert system.call_count == 1


class TestDetectArchitecture:
    @pytest.mark.parametrize(
        "machine,expected",
        [("x86_64", "x64"), ("AMD64", "x64"), ("aarch64", "arm64"), ("i686", "x86"), ("armv7l", "arm")],
    )
    def test_normalization(self, machine, expected):
        with patch("browserfetch.core.platform._platform.machine", return_value=machine):
            assert detect_architecture() == expected
