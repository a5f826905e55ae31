"""CLI entrypoint for the tzmap renderer."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from .config import AppConfig, load_config
from .errors import EXIT_OK, EXIT_USAGE, InputOutputError, TzMapError, UsageError
from .pipeline import format_report_lines, run_pipeline
from .util import ensure_directories, setup_logging

LOGGER = logging.getLogger("tzmap.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tzmap",
        description="Render a GeoJSON polygon collection into a flat-color PNG and tzid legend.",
    )
    parser.add_argument("input", help="Path to a GeoJSON FeatureCollection.")
    parser.add_argument("--config", default=None, help="Optional path to YAML config.")
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for timezone_colors.json and output.png (overrides config).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logs.")
    return parser


def _load_and_setup(args: argparse.Namespace) -> AppConfig:
    try:
        cfg = load_config(args.config)
    except (OSError, ValueError) as exc:
        raise UsageError(f"Invalid config: {exc}") from exc
    if args.output_dir is not None:
        cfg = cfg.with_output_directory(Path(args.output_dir))
    try:
        setup_logging(cfg.logging.file, verbose=args.verbose)
        ensure_directories([cfg.output.directory])
    except OSError as exc:
        raise InputOutputError(f"Cannot prepare output locations: {exc}") from exc
    return cfg


def _dispatch(args: argparse.Namespace) -> int:
    cfg = _load_and_setup(args)
    report = run_pipeline(cfg, Path(args.input))
    for line in format_report_lines(report):
        LOGGER.info(line)
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # argparse already printed usage; remap its status 2 onto ours.
        return EXIT_OK if exc.code in (0, None) else EXIT_USAGE
    try:
        return _dispatch(args)
    except TzMapError as exc:
        if not logging.getLogger().handlers:
            setup_logging(verbose=args.verbose)
        LOGGER.error("%s: %s", type(exc).__name__, exc)
        return exc.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
