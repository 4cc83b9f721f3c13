#!/usr/bin/env python3
"""
zig-toolchain - Zig compiler version manager.

Discovers releases from the upstream index, downloads archives on demand and
switches the active zig via a symlink.

Usage:
    toolchain.py list                  # List indexed versions
    toolchain.py show                  # List downloaded versions
    toolchain.py download VERSION      # Download a version (or 'master')
    toolchain.py activate VERSION      # Make a version (or 'master') the active zig
"""

import argparse
import os
import sys

from zig_toolchain.activation import ActivationContext, activate, ensure_downloaded, select_item
from zig_toolchain.config import Config, load_config
from zig_toolchain.errors import ExtractionError, ToolchainError
from zig_toolchain.logging_config import get_logger, setup_logging
from zig_toolchain.reconcile import Inventory, collect_inventory
from zig_toolchain.render import RenderOptions, render_json, render_local, render_remote


def build_inventory(config: Config, verbose: bool = False) -> tuple[Inventory, ActivationContext]:
    """Resolve paths and host from config and reconcile all sources."""
    paths = config.paths()
    host = config.resolve_host(verbose=verbose)
    inventory = collect_inventory(
        paths,
        host,
        config.index_url,
        timeout=config.preferences.timeout_seconds,
        verbose=verbose,
    )
    ctx = ActivationContext(
        paths=paths,
        host=host,
        timeout_seconds=config.preferences.timeout_seconds,
        verbose=verbose,
    )
    return inventory, ctx


def _render_options(config: Config) -> RenderOptions:
    color = config.preferences.color and sys.stdout.isatty() and "NO_COLOR" not in os.environ
    return RenderOptions(color=color, emoji=config.preferences.emoji)


def cmd_list(args: argparse.Namespace, config: Config) -> int:
    """List versions published in the remote index."""
    inventory, _ = build_inventory(config, args.verbose)
    if args.json:
        render_json(inventory, remote=True)
    else:
        render_remote(inventory, _render_options(config))
    return 0


def cmd_show(args: argparse.Namespace, config: Config) -> int:
    """List versions in the local tarball cache."""
    inventory, _ = build_inventory(config, args.verbose)
    if args.json:
        render_json(inventory, remote=False)
    else:
        render_local(inventory, _render_options(config))
    return 0


def cmd_download(args: argparse.Namespace, config: Config) -> int:
    """Download a version's archive."""
    inventory, ctx = build_inventory(config, args.verbose)
    result = ensure_downloaded(select_item(inventory, args.version), ctx)
    print(result.message)
    return 0


def cmd_activate(args: argparse.Namespace, config: Config) -> int:
    """Activate a version, downloading it first if needed."""
    inventory, ctx = build_inventory(config, args.verbose)
    result = activate(select_item(inventory, args.version), inventory, ctx)
    print(result.message)
    return 0


COMMANDS = {
    "list": cmd_list,
    "show": cmd_show,
    "download": cmd_download,
    "activate": cmd_activate,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="zig-toolchain",
        description="Zig compiler version manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    verbosity.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only report warnings and errors",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Configuration file (YAML)",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Also write a debug log to PATH",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    list_parser = subparsers.add_parser("list", help="List remote versions")
    list_parser.add_argument("--json", action="store_true", help="Output JSON")

    show_parser = subparsers.add_parser("show", help="List local versions")
    show_parser.add_argument("--json", action="store_true", help="Output JSON")

    download_parser = subparsers.add_parser("download", help="Download a zig version")
    download_parser.add_argument("version", metavar="VERSION", help="Version tag or 'master'")

    activate_parser = subparsers.add_parser("activate", help="Activate a given zig version")
    activate_parser.add_argument("version", metavar="VERSION", help="Version tag or 'master'")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)
    logger = get_logger()

    try:
        config = load_config(args.config, verbose=args.verbose)
        return COMMANDS[args.command](args, config)
    except ToolchainError as e:
        logger.error(e.message)
        if isinstance(e, ExtractionError) and e.output:
            logger.error(e.output)
        if e.remediation:
            logger.warning(f"Hint: {e.remediation}")
        return e.exit_code
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return 2


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)
