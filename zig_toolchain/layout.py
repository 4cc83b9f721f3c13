"""
On-disk layout of the toolchain manager.

    <root>/tarballs/zig-<os>-<arch>-<tag>.tar.xz     downloaded archives
    <root>/current/zig-<os>-<arch>-<tag>/zig         the extracted active install
    <bin_link>                                       symlink to the active zig binary
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from .host import HostPlatform
from .version import Version, VersionParseError, parse_version

logger = logging.getLogger(__name__)

ARCHIVE_PREFIX = "zig-"
ARCHIVE_SUFFIX = ".tar.xz"
PARTIAL_SUFFIX = ".part"
BINARY_NAME = "zig"


@dataclass(frozen=True)
class ToolchainPaths:
    """
    Resolved filesystem locations.

    Attributes:
        root: Base directory
        tarballs_dir: Cache of downloaded archives
        current_dir: Extraction directory of the active install
        bin_link: Symlink to the active zig binary
    """
    root: Path
    tarballs_dir: Path
    current_dir: Path
    bin_link: Path

    @classmethod
    def from_root(cls, root: Path, bin_link: Path) -> "ToolchainPaths":
        """Derive the standard layout below root."""
        return cls(
            root=root,
            tarballs_dir=root / "tarballs",
            current_dir=root / "current",
            bin_link=bin_link,
        )


def ensure_directories(paths: ToolchainPaths) -> None:
    """Create the tarball cache and current-install directories."""
    paths.tarballs_dir.mkdir(parents=True, exist_ok=True)
    paths.current_dir.mkdir(parents=True, exist_ok=True)


def archive_path_from_url(paths: ToolchainPaths, url: str) -> Path:
    """Local archive path for a remote URL (the URL's final path segment)."""
    filename = urlparse(url).path.rsplit("/", 1)[-1]
    return paths.tarballs_dir / filename


def partial_path_for(archive: Path) -> Path:
    """Temporary path an archive is written to while downloading."""
    return archive.with_name(archive.name + PARTIAL_SUFFIX)


def _version_from_dir_style_name(name: str) -> Version:
    # zig-<os>-<arch>-<tag>; the tag itself may contain one "-"
    parts = name.split("-")
    if len(parts) < 4:
        raise VersionParseError(f"Missing version in name: {name!r}")
    return parse_version("-".join(parts[3:]))


def parse_archive_name(name: str, host: HostPlatform | None = None) -> Version | None:
    """
    Extract the version embedded in an archive filename.

    Args:
        name: Filename (e.g., "zig-linux-x86_64-0.10.1.tar.xz")
        host: If given, archives built for any other platform are not matched

    Returns:
        Version, or None if the file is not a zig archive (for host)

    Raises:
        VersionParseError: If the name looks like an archive but its version is malformed
    """
    if not name.startswith(ARCHIVE_PREFIX) or not name.endswith(ARCHIVE_SUFFIX):
        return None
    if host is not None and not name.startswith(f"{ARCHIVE_PREFIX}{host.archive_tag}-"):
        return None
    return _version_from_dir_style_name(name[:-len(ARCHIVE_SUFFIX)])


def parse_install_dir_name(name: str) -> Version | None:
    """
    Extract the version embedded in an extracted install directory name.

    Returns:
        Version, or None if the entry is not a zig install directory

    Raises:
        VersionParseError: If the version part is malformed
    """
    if not name.startswith(ARCHIVE_PREFIX):
        return None
    return _version_from_dir_style_name(name)


def extracted_dir_for(paths: ToolchainPaths, host: HostPlatform, version: Version) -> Path:
    """Directory an archive for version unpacks into below the current dir."""
    return paths.current_dir / f"{ARCHIVE_PREFIX}{host.archive_tag}-{version.tag}"


def list_archive_names(paths: ToolchainPaths) -> list[str]:
    """List files in the tarball cache, sorted by name."""
    if not paths.tarballs_dir.is_dir():
        return []
    names = sorted(entry.name for entry in paths.tarballs_dir.iterdir() if entry.is_file())
    logger.debug(f"Found {len(names)} files in {paths.tarballs_dir}")
    return names


def list_install_dirs(paths: ToolchainPaths) -> list[str]:
    """List subdirectories of the current-install directory, sorted by name."""
    if not paths.current_dir.is_dir():
        return []
    return sorted(entry.name for entry in paths.current_dir.iterdir() if entry.is_dir())
