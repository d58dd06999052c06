"""Command-line interface for the tonpack build system.

Running ``tonpack-build`` with no arguments builds the native library in
release mode and packages the artifacts for the current platform.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, List, Optional

from tonpack.build.builder import Builder
from tonpack.build.config import load_build_config
from tonpack.core.logging_manager import LoggingManager, get_logger
from tonpack.utils.exceptions import TonpackError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tonpack-build",
        description="Build the ton_client library and package release archives",
    )
    parser.add_argument("--config", help="JSON or YAML build configuration file")
    parser.add_argument(
        "--dev",
        action="store_true",
        default=None,
        help="Development mode: skip the dependency refresh",
    )
    parser.add_argument("--output-dir", help="Directory receiving the archives")
    parser.add_argument(
        "--version-override",
        dest="version",
        help="Release version to use instead of the manifest version",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        help="Logging level",
    )
    parser.add_argument("--log-format", choices=["text", "json"], help="Logging output format")
    return parser


def _cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {
        "dev_mode": args.dev,
        "output_dir": args.output_dir,
        "version": args.version,
    }
    logging_overrides = {
        key: value
        for key, value in (("level", args.log_level), ("format", args.log_format))
        if value is not None
    }
    if logging_overrides:
        overrides["logging"] = logging_overrides
    return overrides


def main(args: Optional[List[str]] = None) -> int:
    """Run a release build.

    Args:
        args: Command-line arguments, ``sys.argv[1:]`` when None

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parsed = build_parser().parse_args(args)

    try:
        config = load_build_config(parsed.config, overrides=_cli_overrides(parsed))
    except TonpackError as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    logging_manager = LoggingManager(config.logging)
    logging_manager.initialize()
    logger = get_logger("tonpack.cli")

    try:
        report = Builder(config).build()
    except TonpackError as e:
        logger.error("Release build failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        logging_manager.shutdown()

    for archive in report.archives:
        print(archive)
    return 0


if __name__ == "__main__":
    sys.exit(main())
