"""
Zig release versions.

Two tag grammars are published by the upstream index:

    0.10.1                      release
    0.11.0-dev.1234+abc123de    dev build (build number, commit hash)

Dev builds order below the release they precede, and between themselves by
build number. The commit hash is carried but never takes part in comparisons:
upstream issues build numbers monotonically, and an index entry may be
re-published with a new commit at the same build number.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

from packaging import version as pkg_version

_RELEASE_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)", re.ASCII)
_DEV_RE = re.compile(r"dev\.(\d+)\+([0-9A-Za-z]+)", re.ASCII)


class VersionParseError(ValueError):
    """Raised when a string matches neither the release nor the dev grammar."""
    pass


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """
    A Zig release or dev build.

    Attributes:
        major: Major version number
        minor: Minor version number
        patch: Patch version number
        dev: Whether this is a dev (pre-release) build
        build: Dev build number (0 for releases)
        commit: Dev build commit hash ("" for releases)
    """
    major: int
    minor: int
    patch: int
    dev: bool = False
    build: int = 0
    commit: str = ""

    @property
    def sort_key(self) -> pkg_version.Version:
        """PEP 440 equivalent: dev builds map onto ``.devN`` pre-releases."""
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.dev:
            return pkg_version.Version(f"{base}.dev{self.build}")
        return pkg_version.Version(base)

    @property
    def tag(self) -> str:
        """Full tag as used in archive and directory names."""
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.dev:
            return f"{base}-dev.{self.build}+{self.commit}"
        return base

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key == other.sort_key

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __hash__(self) -> int:
        return hash(self.sort_key)

    def __str__(self) -> str:
        s = f"{self.major}.{self.minor}.{self.patch}"
        if self.dev:
            s += f"-dev-{self.build}"
        return s


def parse_version(text: str) -> Version:
    """
    Parse a release or dev tag.

    Args:
        text: Version tag (e.g., "0.10.1", "0.11.0-dev.1234+abc123de")

    Returns:
        Parsed Version

    Raises:
        VersionParseError: If the text matches neither grammar
    """
    text = text.strip()
    segments = text.split("-")
    if len(segments) > 2:
        raise VersionParseError(f"Failed to parse version: {text!r}")

    release = _RELEASE_RE.fullmatch(segments[0])
    if not release:
        raise VersionParseError(f"Failed to parse version: {text!r}")
    major, minor, patch = (int(part) for part in release.groups())

    if len(segments) == 1:
        return Version(major, minor, patch)

    dev = _DEV_RE.fullmatch(segments[1])
    if not dev:
        raise VersionParseError(
            f"Failed to parse version: {text!r} (expected MAJOR.MINOR.PATCH-dev.BUILD+COMMIT)"
        )
    return Version(major, minor, patch, dev=True, build=int(dev.group(1)), commit=dev.group(2))


def compare_versions(a: Version, b: Version) -> int:
    """
    Compare two versions.

    Returns:
        -1 if a < b, 0 if a == b, 1 if a > b
    """
    if a < b:
        return -1
    elif a > b:
        return 1
    else:
        return 0
