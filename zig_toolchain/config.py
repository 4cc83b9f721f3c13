"""
Configuration file parsing and management.

Configuration is read once at the CLI boundary from a YAML file and the
environment, then passed by parameter into the core modules.
Precedence (highest to lowest): environment → custom path → user config → defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from .common import vlog
from .errors import ConfigError
from .host import HostPlatform, detect_host, parse_host
from .layout import ToolchainPaths


DEFAULT_INDEX_URL = "https://ziglang.org/download/index.json"
DEFAULT_ROOT_DIR = "~/.zig-toolchain"
DEFAULT_BIN_LINK = "~/.local/bin/zig"

# Configuration file locations (in priority order)
CONFIG_LOCATIONS = [
    os.path.expanduser("~/.config/zig-toolchain/config.yml"),
    os.path.expanduser("~/.config/zig-toolchain/config.yaml"),
]


@dataclass(frozen=True)
class Preferences:
    """
    User preferences for network and output behavior.

    Attributes:
        timeout_seconds: Timeout for network operations
        color: Colorize listings
        emoji: Use emoji status icons in listings
    """
    timeout_seconds: int = 30
    color: bool = True
    emoji: bool = True

    def __post_init__(self):
        """Validate preferences after initialization."""
        if self.timeout_seconds < 1 or self.timeout_seconds > 3600:
            raise ValueError(
                f"Invalid timeout_seconds: {self.timeout_seconds}. "
                "Must be between 1 and 3600"
            )

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Preferences:
        """Create Preferences from dictionary."""
        return Preferences(
            timeout_seconds=data.get("timeout_seconds", 30),
            color=data.get("color", True),
            emoji=data.get("emoji", True),
        )


@dataclass(frozen=True)
class Config:
    """
    Complete configuration for the toolchain manager.

    Attributes:
        version: Config schema version
        index_url: URL of the remote release index
        root_dir: Directory holding the tarball cache and current install
        bin_link: Path of the symlink pointing at the active zig binary
        host: Host platform override in index form (e.g., "x86_64-linux"), or None to detect
        preferences: Global preferences
        source: Path to the configuration file that was loaded
    """
    version: int = 1
    index_url: str = DEFAULT_INDEX_URL
    root_dir: str = DEFAULT_ROOT_DIR
    bin_link: str = DEFAULT_BIN_LINK
    host: str | None = None
    preferences: Preferences = field(default_factory=Preferences)
    source: str = ""

    def __post_init__(self):
        """Validate config after initialization."""
        if self.version != 1:
            raise ValueError(f"Unsupported config version: {self.version}. Expected version 1")

        if not self.index_url.startswith(("https://", "http://", "file://")):
            raise ValueError(f"Invalid index_url: {self.index_url}")

        if not self.root_dir:
            raise ValueError("root_dir must not be empty")

        if not self.bin_link:
            raise ValueError("bin_link must not be empty")

    @staticmethod
    def from_dict(data: dict[str, Any], source: str = "") -> Config:
        """Create Config from dictionary."""
        preferences = Preferences.from_dict(data.get("preferences", {}) or {})

        return Config(
            version=data.get("version", 1),
            index_url=data.get("index_url", DEFAULT_INDEX_URL),
            root_dir=data.get("root_dir", DEFAULT_ROOT_DIR),
            bin_link=data.get("bin_link", DEFAULT_BIN_LINK),
            host=data.get("host"),
            preferences=preferences,
            source=source,
        )

    def paths(self) -> ToolchainPaths:
        """Resolve the on-disk layout described by this config."""
        return ToolchainPaths.from_root(
            Path(self.root_dir).expanduser(),
            Path(self.bin_link).expanduser(),
        )

    def resolve_host(self, verbose: bool = False) -> HostPlatform:
        """Return the configured host platform, detecting it when not set."""
        if self.host:
            return parse_host(self.host)
        return detect_host(verbose=verbose)


def _load_yaml(file_path: str) -> dict[str, Any] | None:
    """
    Load YAML configuration file.

    Args:
        file_path: Path to YAML file

    Returns:
        Parsed configuration dictionary, or None if the file is invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return None


def load_config_file(file_path: str, verbose: bool = False) -> Config | None:
    """
    Load configuration from a single file.

    Args:
        file_path: Path to configuration file
        verbose: Enable verbose logging

    Returns:
        Config object, or None if file cannot be loaded
    """
    if not os.path.exists(file_path):
        return None

    vlog(f"Loading config from: {file_path}", verbose)

    data = _load_yaml(file_path)
    if data is None:
        vlog(f"Invalid config file: {file_path}", verbose)
        return None

    try:
        config = Config.from_dict(data, source=file_path)
        vlog(f"Loaded config successfully: {file_path}", verbose)
        return config
    except (ValueError, TypeError) as e:
        vlog(f"Config validation failed for {file_path}: {e}", verbose)
        return None


def apply_environment(config: Config, environ: Mapping[str, str] | None = None) -> Config:
    """
    Apply ZIG_TOOLCHAIN_* environment overrides.

    Args:
        config: Base configuration
        environ: Environment mapping (defaults to os.environ)

    Returns:
        New Config with overrides applied

    Raises:
        ConfigError: If an override value is invalid
    """
    if environ is None:
        environ = os.environ

    overrides: dict[str, Any] = {}
    if environ.get("ZIG_TOOLCHAIN_HOME"):
        overrides["root_dir"] = environ["ZIG_TOOLCHAIN_HOME"]
    if environ.get("ZIG_TOOLCHAIN_BIN"):
        overrides["bin_link"] = environ["ZIG_TOOLCHAIN_BIN"]
    if environ.get("ZIG_TOOLCHAIN_INDEX_URL"):
        overrides["index_url"] = environ["ZIG_TOOLCHAIN_INDEX_URL"]

    try:
        if environ.get("ZIG_TOOLCHAIN_TIMEOUT"):
            overrides["preferences"] = replace(
                config.preferences,
                timeout_seconds=int(environ["ZIG_TOOLCHAIN_TIMEOUT"]),
            )
        return replace(config, **overrides)
    except ValueError as e:
        raise ConfigError(f"Invalid environment override: {e}") from e


def load_config(
    custom_path: str | None = None,
    verbose: bool = False,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """
    Load configuration from file and environment.

    Args:
        custom_path: Optional path to custom configuration file
        verbose: Enable verbose logging
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Config object (never None, returns defaults if no config found)

    Raises:
        ConfigError: If custom_path is provided but the file cannot be loaded
    """
    config: Config | None = None

    if custom_path:
        config = load_config_file(custom_path, verbose)
        if config is None:
            raise ConfigError(f"Could not load config from specified path: {custom_path}")
        vlog(f"Using custom config: {custom_path}", verbose)
    else:
        for location in CONFIG_LOCATIONS:
            config = load_config_file(location, verbose)
            if config is not None:
                vlog(f"Found config at: {location}", verbose)
                break

    if config is None:
        vlog("No config files found, using defaults", verbose)
        config = Config()

    return apply_environment(config, environ)
