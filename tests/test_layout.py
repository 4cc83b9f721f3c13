"""
Tests for filesystem layout conventions (zig_toolchain/layout.py).
"""

from pathlib import Path

import pytest

from zig_toolchain.host import HostArch, HostOS, HostPlatform
from zig_toolchain.layout import (
    ToolchainPaths,
    archive_path_from_url,
    ensure_directories,
    extracted_dir_for,
    list_archive_names,
    list_install_dirs,
    parse_archive_name,
    parse_install_dir_name,
    partial_path_for,
)
from zig_toolchain.version import Version, VersionParseError

LINUX = HostPlatform(HostOS.LINUX, HostArch.X86_64)


@pytest.fixture
def paths(tmp_path):
    return ToolchainPaths.from_root(tmp_path / "root", tmp_path / "bin" / "zig")


class TestToolchainPaths:
    """Tests for ToolchainPaths."""

    def test_from_root(self, tmp_path):
        paths = ToolchainPaths.from_root(tmp_path, tmp_path / "zig")
        assert paths.tarballs_dir == tmp_path / "tarballs"
        assert paths.current_dir == tmp_path / "current"
        assert paths.bin_link == tmp_path / "zig"

    def test_ensure_directories(self, paths):
        ensure_directories(paths)
        assert paths.tarballs_dir.is_dir()
        assert paths.current_dir.is_dir()

    def test_ensure_directories_idempotent(self, paths):
        ensure_directories(paths)
        ensure_directories(paths)
        assert paths.current_dir.is_dir()


class TestArchiveNames:
    """Tests for archive and install directory name conventions."""

    def test_archive_path_from_url(self, paths):
        url = "https://ziglang.org/download/0.10.1/zig-linux-x86_64-0.10.1.tar.xz"
        assert archive_path_from_url(paths, url) == paths.tarballs_dir / "zig-linux-x86_64-0.10.1.tar.xz"

    def test_archive_path_ignores_query(self, paths):
        url = "https://example.com/builds/zig-linux-x86_64-0.10.1.tar.xz?mirror=1"
        assert archive_path_from_url(paths, url).name == "zig-linux-x86_64-0.10.1.tar.xz"

    def test_partial_path(self):
        archive = Path("/tmp/zig-linux-x86_64-0.10.1.tar.xz")
        assert partial_path_for(archive).name == "zig-linux-x86_64-0.10.1.tar.xz.part"

    def test_parse_release_archive(self):
        assert parse_archive_name("zig-linux-x86_64-0.10.1.tar.xz") == Version(0, 10, 1)

    def test_parse_dev_archive(self):
        v = parse_archive_name("zig-linux-x86_64-0.12.0-dev.100+abcdef12.tar.xz")
        assert v == Version(0, 12, 0, dev=True, build=100)
        assert v.commit == "abcdef12"

    @pytest.mark.parametrize("name", [
        "README.md",
        "zig-linux-x86_64-0.10.1.zip",
        "zig-linux-x86_64-0.10.1.tar.xz.part",
        "other-linux-x86_64-0.10.1.tar.xz",
    ])
    def test_non_archives_ignored(self, name):
        assert parse_archive_name(name) is None

    def test_parse_archive_for_host(self):
        assert parse_archive_name("zig-linux-x86_64-0.10.1.tar.xz", LINUX) == Version(0, 10, 1)

    @pytest.mark.parametrize("name", [
        "zig-macos-aarch64-0.10.1.tar.xz",
        "zig-linux-aarch64-0.10.1.tar.xz",
        "zig-linux-x86-0.10.1.tar.xz",
    ])
    def test_foreign_host_archives_not_matched(self, name):
        assert parse_archive_name(name, LINUX) is None

    def test_malformed_archive_version(self):
        with pytest.raises(VersionParseError):
            parse_archive_name("zig-linux-x86_64-latest.tar.xz")

    def test_archive_without_version(self):
        with pytest.raises(VersionParseError):
            parse_archive_name("zig-linux.tar.xz")

    def test_parse_install_dir(self):
        assert parse_install_dir_name("zig-linux-x86_64-0.10.1") == Version(0, 10, 1)
        assert parse_install_dir_name("lost+found") is None

    def test_extracted_dir_release(self, paths):
        assert extracted_dir_for(paths, LINUX, Version(0, 10, 1)) == \
            paths.current_dir / "zig-linux-x86_64-0.10.1"

    def test_extracted_dir_dev(self, paths):
        v = Version(0, 12, 0, dev=True, build=100, commit="abcdef12")
        assert extracted_dir_for(paths, LINUX, v).name == "zig-linux-x86_64-0.12.0-dev.100+abcdef12"

    def test_extracted_dir_round_trips(self, paths):
        """Test the extracted directory name parses back to the same version."""
        v = Version(0, 12, 0, dev=True, build=100, commit="abcdef12")
        assert parse_install_dir_name(extracted_dir_for(paths, LINUX, v).name) == v


class TestListing:
    """Tests for directory listings."""

    def test_missing_directories_list_empty(self, paths):
        assert list_archive_names(paths) == []
        assert list_install_dirs(paths) == []

    def test_list_archive_names_sorted_files_only(self, paths):
        ensure_directories(paths)
        (paths.tarballs_dir / "zig-linux-x86_64-0.9.0.tar.xz").write_bytes(b"")
        (paths.tarballs_dir / "zig-linux-x86_64-0.10.1.tar.xz").write_bytes(b"")
        (paths.tarballs_dir / "subdir").mkdir()
        assert list_archive_names(paths) == [
            "zig-linux-x86_64-0.10.1.tar.xz",
            "zig-linux-x86_64-0.9.0.tar.xz",
        ]

    def test_list_install_dirs_only_directories(self, paths):
        ensure_directories(paths)
        (paths.current_dir / "zig-linux-x86_64-0.10.1").mkdir()
        (paths.current_dir / "stray-file").write_text("x")
        assert list_install_dirs(paths) == ["zig-linux-x86_64-0.10.1"]
