"""
Tests for host platform detection (zig_toolchain/host.py).
"""

from unittest.mock import patch

import pytest

from zig_toolchain.errors import UnsupportedHostError
from zig_toolchain.host import (
    HostArch,
    HostOS,
    HostPlatform,
    SUPPORTED_HOSTS,
    detect_host,
    parse_host,
)


class TestHostPlatform:
    """Tests for HostPlatform keys."""

    def test_index_key(self):
        host = HostPlatform(HostOS.LINUX, HostArch.X86_64)
        assert host.index_key == "x86_64-linux"
        assert str(host) == "x86_64-linux"

    def test_archive_tag(self):
        host = HostPlatform(HostOS.MACOS, HostArch.AARCH64)
        assert host.archive_tag == "macos-aarch64"


class TestDetectHost:
    """Tests for detect_host."""

    @pytest.mark.parametrize("system,machine,expected", [
        ("Linux", "x86_64", HostPlatform(HostOS.LINUX, HostArch.X86_64)),
        ("Linux", "aarch64", HostPlatform(HostOS.LINUX, HostArch.AARCH64)),
        ("Linux", "i686", HostPlatform(HostOS.LINUX, HostArch.X86)),
        ("Darwin", "arm64", HostPlatform(HostOS.MACOS, HostArch.AARCH64)),
        ("Darwin", "x86_64", HostPlatform(HostOS.MACOS, HostArch.X86_64)),
        ("Windows", "AMD64", HostPlatform(HostOS.WINDOWS, HostArch.X86_64)),
    ])
    def test_detect_known_hosts(self, system, machine, expected):
        """Test platform names map onto index targets."""
        assert detect_host(system, machine) == expected

    def test_detect_uses_platform_module(self):
        """Test detection falls back to the platform module."""
        with patch("zig_toolchain.host.platform.system", return_value="Linux"), \
             patch("zig_toolchain.host.platform.machine", return_value="x86_64"):
            assert detect_host() == HostPlatform(HostOS.LINUX, HostArch.X86_64)

    def test_unknown_os(self):
        with pytest.raises(UnsupportedHostError):
            detect_host("SunOS", "x86_64")

    def test_unknown_arch(self):
        with pytest.raises(UnsupportedHostError):
            detect_host("Linux", "riscv64")

    def test_unpublished_pair(self):
        """Test a known OS/arch pair with no published builds is rejected."""
        with pytest.raises(UnsupportedHostError):
            detect_host("Darwin", "i686")

    def test_supported_host_count(self):
        assert len(SUPPORTED_HOSTS) == 8


class TestParseHost:
    """Tests for parse_host."""

    def test_parse_index_key(self):
        assert parse_host("aarch64-linux") == HostPlatform(HostOS.LINUX, HostArch.AARCH64)

    def test_parse_invalid(self):
        with pytest.raises(UnsupportedHostError):
            parse_host("sparc-solaris")

    def test_parse_unpublished(self):
        with pytest.raises(UnsupportedHostError):
            parse_host("x86-macos")
