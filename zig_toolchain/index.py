"""
Remote release index.

The index is a JSON object keyed by release tag or channel name:

    {
      "master": {"version": "0.12.0-dev.100+abcdef12", "date": "...",
                 "x86_64-linux": {"tarball": "...", "shasum": "...", "size": "..."}},
      "0.10.1": {"date": "...", "x86_64-linux": {...}, "aarch64-macos": {...}}
    }

Release records carry no "version" field; their key is the tag. Channel
records carry an explicit "version".
"""

from __future__ import annotations

import json
import logging
import os
import urllib.request
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import IndexFormatError, NetworkError
from .host import HostPlatform
from .layout import partial_path_for

logger = logging.getLogger(__name__)

USER_AGENT = "zig-toolchain/1.0"
CHUNK_SIZE = 64 * 1024

# Record fields that are metadata rather than per-host download descriptors
_METADATA_KEYS = ("version", "date", "docs", "stdDocs", "notes")


@dataclass(frozen=True)
class IndexFileEntry:
    """Download descriptor for one host."""

    tarball: str
    shasum: str = ""
    size: str = ""

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {
            "tarball": self.tarball,
            "shasum": self.shasum,
            "size": self.size,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IndexFileEntry":
        """
        Create from dictionary.

        Raises:
            IndexFormatError: If the tarball URL is not a string
        """
        tarball = data.get("tarball", "")
        if not isinstance(tarball, str):
            raise IndexFormatError(f"Expected a string tarball URL, got {tarball!r}")
        return cls(
            tarball=tarball,
            shasum=str(data.get("shasum") or ""),
            size=str(data.get("size", "")),
        )


@dataclass(frozen=True)
class IndexEntry:
    """One record of the remote index."""

    key: str
    version: str = ""
    date: str = ""
    docs: str = ""
    std_docs: str = ""
    files: dict[str, IndexFileEntry] = field(default_factory=dict)

    @property
    def is_channel(self) -> bool:
        """Whether the record names a channel (carries an explicit version)."""
        return bool(self.version)

    @property
    def version_string(self) -> str:
        """Version tag of this record: the explicit version, else the key."""
        return self.version or self.key

    def file_for_host(self, host: HostPlatform) -> IndexFileEntry | None:
        """Download descriptor for host, or None if not published for it."""
        return self.files.get(host.index_key)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary in the index's own format."""
        data: dict[str, Any] = {}
        if self.version:
            data["version"] = self.version
        if self.date:
            data["date"] = self.date
        if self.docs:
            data["docs"] = self.docs
        if self.std_docs:
            data["stdDocs"] = self.std_docs
        for target, file_entry in self.files.items():
            data[target] = file_entry.to_dict()
        return data

    @classmethod
    def from_dict(cls, key: str, data: dict[str, Any]) -> "IndexEntry":
        """
        Create from an index record.

        Raises:
            IndexFormatError: If the version or a tarball URL is not a string
        """
        version = data.get("version", "") or ""
        if not isinstance(version, str):
            raise IndexFormatError(f"Index record {key!r} has a non-string version: {version!r}")
        files = {
            target: IndexFileEntry.from_dict(value)
            for target, value in data.items()
            if target not in _METADATA_KEYS and isinstance(value, dict) and "tarball" in value
        }
        return cls(
            key=key,
            version=version,
            date=str(data.get("date") or ""),
            docs=data.get("docs", "") or "",
            std_docs=data.get("stdDocs", "") or "",
            files=files,
        )


def parse_index(data: Any) -> list[IndexEntry]:
    """
    Parse a decoded index document.

    Args:
        data: Decoded JSON

    Returns:
        Entries in sorted key order

    Raises:
        IndexFormatError: If the document is not an object of records
    """
    if not isinstance(data, dict):
        raise IndexFormatError(f"Expected a JSON object at index top level, got {type(data).__name__}")

    entries = []
    for key in sorted(data):
        record = data[key]
        if not isinstance(record, dict):
            raise IndexFormatError(f"Index record {key!r} is not an object")
        entries.append(IndexEntry.from_dict(key, record))
    return entries


def http_get(url: str, timeout: int = 30, headers: dict[str, str] | None = None) -> bytes:
    """
    Perform HTTP GET request.

    Args:
        url: URL to fetch
        timeout: Timeout in seconds
        headers: Optional HTTP headers

    Returns:
        Response body as bytes

    Raises:
        NetworkError: If request fails
    """
    try:
        default_headers = {"User-Agent": USER_AGENT}
        if headers:
            default_headers.update(headers)

        req = urllib.request.Request(url, headers=default_headers)
        with urllib.request.urlopen(req, timeout=timeout) as response:
            return response.read()
    except Exception as e:
        raise NetworkError(f"Failed to fetch {url}: {e}") from e


def fetch_index(url: str, timeout: int = 30) -> list[IndexEntry]:
    """
    Fetch and parse the remote index.

    Raises:
        NetworkError: If the index cannot be fetched
        IndexFormatError: If the index is not valid JSON of the expected shape
    """
    logger.debug(f"Fetching index: {url}")
    body = http_get(url, timeout=timeout)
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise IndexFormatError(f"Index at {url} is not valid JSON: {e}") from e
    entries = parse_index(data)
    logger.debug(f"Index has {len(entries)} records")
    return entries


def download_file(url: str, dest: Path, timeout: int = 30) -> Path:
    """
    Download url to dest.

    The body is streamed to a ``.part`` file next to dest and renamed into
    place once complete.

    Args:
        url: Archive URL
        dest: Final local path
        timeout: Socket timeout in seconds

    Returns:
        dest

    Raises:
        NetworkError: If the transfer fails
    """
    partial = partial_path_for(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    logger.debug(f"Downloading {url} -> {dest}")

    try:
        req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        with urllib.request.urlopen(req, timeout=timeout) as response, open(partial, "wb") as f:
            for chunk in iter(lambda: response.read(CHUNK_SIZE), b""):
                f.write(chunk)
        os.replace(partial, dest)
    except Exception as e:
        partial.unlink(missing_ok=True)
        raise NetworkError(f"Failed to download {url}: {e}") from e

    return dest
