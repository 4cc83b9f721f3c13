"""
Download and activation of inventory items.

Each item moves through NOT_DOWNLOADED -> DOWNLOADED -> ACTIVE. Every
transition is a no-op when the item is already in (or past) the target state.

Activation replaces the whole current-install directory: it is removed,
recreated, and the archive is unpacked into it with ``tar``. There is no
rollback; a failure after the directory is cleared leaves no active install.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from .common import vlog
from .errors import (
    ExtractionError,
    InvalidVersionError,
    LinkError,
    NotIndexedError,
    VersionNotFoundError,
)
from .host import HostOS, HostPlatform
from .index import download_file
from .layout import BINARY_NAME, ToolchainPaths, ensure_directories, extracted_dir_for
from .reconcile import Inventory, Item
from .version import Version, VersionParseError, parse_version

logger = logging.getLogger(__name__)

MASTER = "master"

Downloader = Callable[[str, Path, int], Path]
Runner = Callable[..., subprocess.CompletedProcess]


@dataclass(frozen=True)
class ActivationContext:
    """
    Everything the transitions need besides the item itself.

    Attributes:
        paths: Filesystem layout
        host: Host platform
        timeout_seconds: Network timeout for downloads
        downloader: Callable(url, dest, timeout) fetching an archive to dest
        runner: subprocess.run-compatible callable used for extraction
        verbose: Enable verbose logging
    """
    paths: ToolchainPaths
    host: HostPlatform
    timeout_seconds: int = 30
    downloader: Downloader = field(default=download_file)
    runner: Runner = field(default=subprocess.run)
    verbose: bool = False


@dataclass(frozen=True)
class ActivationResult:
    """
    Outcome of a download or activation request.

    Attributes:
        item: The item acted on
        action: "downloaded", "already_downloaded", "activated" or "already_active"
        message: Human-readable summary
        binary_path: Symlink that now points at the active binary (activation only)
        duration_seconds: Time taken
    """
    item: Item
    action: str
    message: str
    binary_path: str | None = None
    duration_seconds: float = 0.0

    @property
    def changed(self) -> bool:
        """Whether anything on disk was modified."""
        return not self.action.startswith("already_")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "version": str(self.item.version),
            "action": self.action,
            "message": self.message,
            "binary_path": self.binary_path,
            "duration_seconds": self.duration_seconds,
        }


def binary_name(host: HostPlatform) -> str:
    """Name of the zig executable inside an extracted install."""
    return f"{BINARY_NAME}.exe" if host.os == HostOS.WINDOWS else BINARY_NAME


def ensure_downloaded(item: Item, ctx: ActivationContext) -> ActivationResult:
    """
    Make sure the item's archive is in the tarball cache.

    Raises:
        NotIndexedError: If the item is not downloaded and has no remote URL
        NetworkError: If the download fails
    """
    if item.downloaded:
        vlog(f"Tarball for {item.version} already downloaded: {item.local_path}", ctx.verbose)
        return ActivationResult(
            item=item,
            action="already_downloaded",
            message=f"Tarball for {item.version} already downloaded",
        )

    if not item.indexed or not item.remote_url or item.local_path is None:
        raise NotIndexedError(
            f"Version {item.version} is not indexed for {ctx.host}; nothing to download",
        )

    start_time = time.time()
    logger.info(f"Downloading {item.remote_url}")
    ctx.downloader(item.remote_url, item.local_path, ctx.timeout_seconds)
    item.downloaded = True
    duration = time.time() - start_time

    return ActivationResult(
        item=item,
        action="downloaded",
        message=f"Downloaded {item.version} to {item.local_path}",
        duration_seconds=duration,
    )


def _clear_current_dir(paths: ToolchainPaths) -> None:
    try:
        if paths.current_dir.exists():
            shutil.rmtree(paths.current_dir)
        ensure_directories(paths)
    except OSError as e:
        raise ExtractionError(f"Failed to clear {paths.current_dir}: {e}") from e


def _extract(item: Item, ctx: ActivationContext) -> None:
    command = ["tar", "-xf", str(item.local_path)]
    vlog(f"Executing: {' '.join(command)} (in {ctx.paths.current_dir})", ctx.verbose)

    try:
        result = ctx.runner(
            command,
            cwd=str(ctx.paths.current_dir),
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise ExtractionError(
            "Command not found: tar",
            remediation="Install tar (with xz support) and try again",
        ) from e

    if result.returncode != 0:
        output = (result.stdout or "") + (result.stderr or "")
        raise ExtractionError(
            f"Extracting {item.local_path} failed with exit code {result.returncode}",
            output=output.strip(),
        )


def _replace_link(link: Path, target: Path) -> None:
    try:
        if link.is_symlink() or link.exists():
            link.unlink()
        link.parent.mkdir(parents=True, exist_ok=True)
        link.symlink_to(target)
    except OSError as e:
        raise LinkError(f"Failed to link {link} -> {target}: {e}") from e


def activate(item: Item, inventory: Inventory, ctx: ActivationContext) -> ActivationResult:
    """
    Make item the active install.

    Downloads the archive if needed, unpacks it into a freshly cleared
    current directory and points the binary symlink at it.

    Raises:
        NotIndexedError: If the archive is missing and cannot be downloaded
        NetworkError: If the download fails
        ExtractionError: If clearing or unpacking fails
        LinkError: If the symlink cannot be replaced
    """
    if item.current:
        return ActivationResult(
            item=item,
            action="already_active",
            message=f"Version {item.version} is already active",
            binary_path=str(ctx.paths.bin_link),
        )

    start_time = time.time()
    ensure_downloaded(item, ctx)

    logger.info(f"Extracting {item.local_path.name if item.local_path else item.version}")
    _clear_current_dir(ctx.paths)
    for other in inventory:
        other.current = False
    _extract(item, ctx)

    target = extracted_dir_for(ctx.paths, ctx.host, item.version) / binary_name(ctx.host)
    if not target.exists():
        logger.warning(f"Expected binary not found after extraction: {target}")

    vlog(f"Linking {ctx.paths.bin_link} -> {target}", ctx.verbose)
    _replace_link(ctx.paths.bin_link, target)
    item.current = True

    return ActivationResult(
        item=item,
        action="activated",
        message=f"Activated {item.version}",
        binary_path=str(ctx.paths.bin_link),
        duration_seconds=time.time() - start_time,
    )


def parse_version_argument(argument: str) -> Version:
    """
    Parse a user-supplied version.

    Raises:
        InvalidVersionError: If the argument is not a valid version tag
    """
    try:
        return parse_version(argument)
    except VersionParseError as e:
        raise InvalidVersionError(
            f"Invalid version: {argument!r}",
            remediation="Use MAJOR.MINOR.PATCH, MAJOR.MINOR.PATCH-dev.BUILD+COMMIT or 'master'",
        ) from e


def find_version(inventory: Inventory, version: Version) -> Item:
    """
    Look up an item by exact version.

    Raises:
        VersionNotFoundError: If no item matches
    """
    item = inventory.get(version)
    if item is None:
        raise VersionNotFoundError(
            f"Version not found: {version}",
            remediation="Run 'list' to see available versions",
        )
    return item


def find_master(inventory: Inventory) -> Item:
    """
    Look up the master item.

    Raises:
        VersionNotFoundError: If the index published no master build for this host
    """
    item = inventory.master()
    if item is None:
        raise VersionNotFoundError("Master version not found")
    return item


def select_item(inventory: Inventory, argument: str) -> Item:
    """Resolve a CLI argument (a version tag or "master") to an item."""
    if argument.strip() == MASTER:
        return find_master(inventory)
    return find_version(inventory, parse_version_argument(argument))


def download_version(inventory: Inventory, version: Version, ctx: ActivationContext) -> ActivationResult:
    return ensure_downloaded(find_version(inventory, version), ctx)


def download_master(inventory: Inventory, ctx: ActivationContext) -> ActivationResult:
    return ensure_downloaded(find_master(inventory), ctx)


def activate_version(inventory: Inventory, version: Version, ctx: ActivationContext) -> ActivationResult:
    return activate(find_version(inventory, version), inventory, ctx)


def activate_master(inventory: Inventory, ctx: ActivationContext) -> ActivationResult:
    return activate(find_master(inventory), inventory, ctx)
