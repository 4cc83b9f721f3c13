"""
zig-toolchain - Zig compiler version manager.

Core Modules:
- Versions: release and dev build tags with a total order
- Index: remote release index and archive downloads
- Reconciliation: merges the index, the tarball cache and the active install
- Activation: download, extract and link a version as the active zig
"""

__version__ = "1.0.0"

from .version import Version, VersionParseError, parse_version, compare_versions
from .host import HostOS, HostArch, HostPlatform, detect_host, parse_host
from .errors import (
    ToolchainError,
    UserInputError,
    FatalError,
    InvalidVersionError,
    VersionNotFoundError,
    ConfigError,
    UnsupportedHostError,
    NetworkError,
    IndexFormatError,
    InconsistentStateError,
    NotIndexedError,
    ExtractionError,
    LinkError,
)
from .layout import ToolchainPaths, ensure_directories, extracted_dir_for
from .index import IndexEntry, IndexFileEntry, parse_index, fetch_index, download_file
from .reconcile import (
    Item,
    ItemState,
    Inventory,
    fold_remote_index,
    fold_local_archives,
    fold_current_install,
    reconcile,
    collect_inventory,
)
from .activation import (
    ActivationContext,
    ActivationResult,
    ensure_downloaded,
    activate,
    select_item,
    download_version,
    download_master,
    activate_version,
    activate_master,
)
from .config import Config, Preferences, load_config
from .logging_config import setup_logging, get_logger

__all__ = [
    "__version__",
    # Versions
    "Version",
    "VersionParseError",
    "parse_version",
    "compare_versions",
    # Host
    "HostOS",
    "HostArch",
    "HostPlatform",
    "detect_host",
    "parse_host",
    # Errors
    "ToolchainError",
    "UserInputError",
    "FatalError",
    "InvalidVersionError",
    "VersionNotFoundError",
    "ConfigError",
    "UnsupportedHostError",
    "NetworkError",
    "IndexFormatError",
    "InconsistentStateError",
    "NotIndexedError",
    "ExtractionError",
    "LinkError",
    # Layout and index
    "ToolchainPaths",
    "ensure_directories",
    "extracted_dir_for",
    "IndexEntry",
    "IndexFileEntry",
    "parse_index",
    "fetch_index",
    "download_file",
    # Reconciliation
    "Item",
    "ItemState",
    "Inventory",
    "fold_remote_index",
    "fold_local_archives",
    "fold_current_install",
    "reconcile",
    "collect_inventory",
    # Activation
    "ActivationContext",
    "ActivationResult",
    "ensure_downloaded",
    "activate",
    "select_item",
    "download_version",
    "download_master",
    "activate_version",
    "activate_master",
    # Config and logging
    "Config",
    "Preferences",
    "load_config",
    "setup_logging",
    "get_logger",
]
