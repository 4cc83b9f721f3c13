"""
Reconciliation of the remote index with local state.

Three independent observations are folded, in order, into one inventory keyed
by version equality:

1. Remote index records published for this host (indexed items)
2. Archives present in the local tarball cache (downloaded items)
3. The extracted install in the current directory (the active item)

A field set by an earlier fold is never overwritten by a later one, except
that the local archive path discovered on disk replaces the path derived from
the remote URL. The inventory is rebuilt from scratch on every run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Iterator, Sequence

from .common import vlog
from .errors import InconsistentStateError, IndexFormatError
from .host import HostPlatform
from .index import IndexEntry, fetch_index
from .layout import (
    ToolchainPaths,
    archive_path_from_url,
    ensure_directories,
    list_archive_names,
    list_install_dirs,
    parse_archive_name,
    parse_install_dir_name,
)
from .version import Version, VersionParseError, parse_version

logger = logging.getLogger(__name__)


class ItemState(str, Enum):
    NOT_DOWNLOADED = "not_downloaded"
    DOWNLOADED = "downloaded"
    ACTIVE = "active"


@dataclass
class Item:
    """
    One version known to the inventory.

    Attributes:
        version: Release or dev build version (the identity key)
        indexed: Present in the remote index for this host
        downloaded: Archive exists in the local tarball cache
        current: This version is the active install
        master: This is the rolling master build
        local_path: Where the archive is (or will be) stored locally
        remote_url: Archive URL from the index ("" when not indexed)
        shasum: Published archive checksum, if indexed
        size: Published archive size in bytes, if indexed
        date: Publication date, if indexed
    """
    version: Version
    indexed: bool = False
    downloaded: bool = False
    current: bool = False
    master: bool = False
    local_path: Path | None = None
    remote_url: str = ""
    shasum: str = ""
    size: str = ""
    date: str = ""

    @property
    def state(self) -> ItemState:
        """Activation state of this item."""
        if self.current:
            return ItemState.ACTIVE
        if self.downloaded:
            return ItemState.DOWNLOADED
        return ItemState.NOT_DOWNLOADED

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "version": str(self.version),
            "tag": self.version.tag,
            "indexed": self.indexed,
            "downloaded": self.downloaded,
            "current": self.current,
            "master": self.master,
            "state": self.state.value,
            "local_path": str(self.local_path) if self.local_path else None,
            "remote_url": self.remote_url,
            "shasum": self.shasum,
            "size": self.size,
            "date": self.date,
        }


class Inventory:
    """Items keyed by version equality, at most one per version."""

    def __init__(self, items: Iterable[Item] = ()):
        self._items: list[Item] = []
        self._by_version: dict[Version, Item] = {}
        for item in items:
            self.add(item)

    def add(self, item: Item) -> Item:
        """
        Add an item.

        Raises:
            ValueError: If an item with an equal version is already present
        """
        if item.version in self._by_version:
            raise ValueError(f"Duplicate inventory entry for version {item.version}")
        self._items.append(item)
        self._by_version[item.version] = item
        return item

    def get(self, version: Version) -> Item | None:
        """Item whose version equals version, if any."""
        return self._by_version.get(version)

    def master(self) -> Item | None:
        """The master channel item, if the index published one for this host."""
        for item in self._items:
            if item.master:
                return item
        return None

    def current(self) -> Item | None:
        """The active item, if any."""
        for item in self._items:
            if item.current:
                return item
        return None

    def indexed(self) -> list[Item]:
        return [item for item in self._items if item.indexed]

    def downloaded(self) -> list[Item]:
        return [item for item in self._items if item.downloaded]

    def sort(self) -> None:
        """Sort items in descending version order."""
        self._items.sort(key=lambda item: item.version.sort_key, reverse=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"items": [item.to_dict() for item in self._items]}

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Inventory):
            return NotImplemented
        return self._items == other._items


def fold_remote_index(
    inventory: Inventory,
    entries: Sequence[IndexEntry],
    host: HostPlatform,
    paths: ToolchainPaths,
) -> None:
    """
    Fold remote index records into the inventory.

    Records without a download descriptor for host are skipped.

    Raises:
        IndexFormatError: If a record's version does not parse
    """
    for entry in entries:
        file_entry = entry.file_for_host(host)
        if file_entry is None:
            logger.debug(f"Index record {entry.key!r} has no build for {host}")
            continue

        try:
            version = parse_version(entry.version_string)
        except VersionParseError as e:
            raise IndexFormatError(
                f"Malformed version in index record {entry.key!r}: {e}",
                remediation="The upstream index format may have changed",
            ) from e

        existing = inventory.get(version)
        if existing is not None:
            logger.debug(f"Index record {entry.key!r} duplicates {existing.version}")
            existing.master = existing.master or entry.is_channel
            continue

        inventory.add(Item(
            version=version,
            indexed=True,
            master=entry.is_channel,
            remote_url=file_entry.tarball,
            local_path=archive_path_from_url(paths, file_entry.tarball),
            shasum=file_entry.shasum,
            size=file_entry.size,
            date=entry.date,
        ))


def fold_local_archives(
    inventory: Inventory,
    archive_names: Sequence[str],
    host: HostPlatform,
    paths: ToolchainPaths,
) -> None:
    """
    Fold archives found in the tarball cache into the inventory.

    Files that are not zig archives for host are ignored. Archives whose
    embedded version cannot be parsed are skipped with a warning.
    """
    for name in archive_names:
        try:
            version = parse_archive_name(name, host)
        except VersionParseError as e:
            logger.warning(f"Ignoring archive with unrecognized version: {name} ({e})")
            continue
        if version is None:
            continue

        local_path = paths.tarballs_dir / name
        item = inventory.get(version)
        if item is not None:
            item.downloaded = True
            item.local_path = local_path
        else:
            inventory.add(Item(
                version=version,
                indexed=False,
                downloaded=True,
                local_path=local_path,
            ))


def fold_current_install(
    inventory: Inventory,
    install_dirs: Sequence[str],
    paths: ToolchainPaths,
) -> None:
    """
    Mark the item matching the extracted install as current.

    Only the first zig install directory is considered. An install whose
    archive is gone from the tarball cache is left inactive with a warning.

    Raises:
        InconsistentStateError: If the install cannot be matched to an item
    """
    remediation = f"Remove {paths.current_dir} and activate a version again"

    for name in install_dirs:
        try:
            version = parse_install_dir_name(name)
        except VersionParseError as e:
            raise InconsistentStateError(
                f"Unrecognized install directory {name!r}: {e}",
                remediation=remediation,
            ) from e
        if version is None:
            continue

        item = inventory.get(version)
        if item is None:
            raise InconsistentStateError(
                f"Active install {version} is not in the inventory",
                remediation=remediation,
            )
        if item.downloaded:
            item.current = True
        else:
            # current implies downloaded
            logger.warning(
                f"Active install {version} has no archive in {paths.tarballs_dir}; "
                f"treating it as inactive until activated again"
            )
        break


def reconcile(
    entries: Sequence[IndexEntry],
    archive_names: Sequence[str],
    install_dirs: Sequence[str],
    host: HostPlatform,
    paths: ToolchainPaths,
) -> Inventory:
    """
    Build the inventory from the three observations.

    Args:
        entries: Remote index records
        archive_names: Filenames in the tarball cache
        install_dirs: Directory names in the current-install directory
        host: Host platform the index is filtered for
        paths: Filesystem layout

    Returns:
        Inventory sorted in descending version order
    """
    inventory = Inventory()
    fold_remote_index(inventory, entries, host, paths)
    fold_local_archives(inventory, archive_names, host, paths)
    fold_current_install(inventory, install_dirs, paths)
    inventory.sort()
    return inventory


def collect_inventory(
    paths: ToolchainPaths,
    host: HostPlatform,
    index_url: str,
    timeout: int = 30,
    index_entries: Sequence[IndexEntry] | None = None,
    verbose: bool = False,
) -> Inventory:
    """
    Read all three sources and reconcile them.

    Args:
        paths: Filesystem layout
        host: Host platform
        index_url: Remote index URL
        timeout: Network timeout in seconds
        index_entries: Pre-fetched index records (skips the network fetch)
        verbose: Enable verbose logging

    Returns:
        Reconciled inventory
    """
    ensure_directories(paths)

    if index_entries is None:
        vlog(f"Fetching release index from {index_url}", verbose)
        index_entries = fetch_index(index_url, timeout=timeout)

    inventory = reconcile(
        index_entries,
        list_archive_names(paths),
        list_install_dirs(paths),
        host,
        paths,
    )
    vlog(
        f"Inventory: {len(inventory)} versions, {len(inventory.indexed())} indexed, "
        f"{len(inventory.downloaded())} downloaded",
        verbose,
    )
    return inventory
