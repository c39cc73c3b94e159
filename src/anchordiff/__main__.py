from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import Sequence

from . import __version__
from .analysis import compare_snapshots
from .catalog import AnalyzerConfig, load_catalog
from .errors import AnchorDiffError, SinkWriteError
from .report import (
    DEFAULT_HTML_OUTPUT,
    DEFAULT_JSON_OUTPUT,
    result_to_json,
    write_html_report,
    write_json_report,
)
from .sources import (
    DEFAULT_MODE,
    DEFAULT_SNAPSHOT_DIR,
    capture_rendered_markup,
    read_snapshot,
    resolve_mode_paths,
)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anchordiff",
        description="Analyze differences between two HTML snapshots and recommend stable anchors.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    modes = parser.add_mutually_exclusive_group()
    modes.add_argument("--inbox", dest="mode", action="store_const", const="inbox",
                       help="Analyze inbox snapshots (inbox-A.html and inbox-B.html)")
    modes.add_argument("--read", dest="mode", action="store_const", const="read",
                       help="Analyze read snapshots (read-A.html and read-B.html)")
    modes.add_argument("--write", dest="mode", action="store_const", const="write",
                       help="Analyze compose snapshots (write-A.html and write-B.html)")

    parser.add_argument("--before", type=Path, help="Path to the before-update snapshot")
    parser.add_argument("--after", type=Path, help="Path to the after-update snapshot")
    parser.add_argument("--before-url", help="Capture the before snapshot from a live URL")
    parser.add_argument("--after-url", help="Capture the after snapshot from a live URL")
    parser.add_argument("--snapshot-dir", type=Path, default=DEFAULT_SNAPSHOT_DIR,
                        help="Folder holding the named mode snapshots (default: ./html)")
    parser.add_argument("--catalog", type=Path, help="JSON catalog overriding attributes, landmarks or features")
    parser.add_argument("--output-json", type=Path, default=DEFAULT_JSON_OUTPUT,
                        help="Path to save the analysis results as JSON")
    parser.add_argument("--output-html", type=Path, default=DEFAULT_HTML_OUTPUT,
                        help="Path to save the HTML report")
    parser.add_argument("--no-html", action="store_true", help="Skip the HTML report")
    parser.add_argument("--log-file", type=Path, help="Also write log output to this file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def _validate_arguments(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    has_paths = args.before is not None or args.after is not None
    has_urls = args.before_url is not None or args.after_url is not None
    if has_paths and (args.before is None or args.after is None):
        parser.error("--before and --after must be given together.")
    if has_urls and (args.before_url is None or args.after_url is None):
        parser.error("--before-url and --after-url must be given together.")
    chosen = sum(1 for flag in (args.mode is not None, has_paths, has_urls) if flag)
    if chosen > 1:
        parser.error("Choose one of a comparison mode, --before/--after, or --before-url/--after-url.")


def _build_logger(log_file: Path | None, verbose: bool) -> logging.Logger:
    root = logging.getLogger("anchordiff")
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.propagate = False
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(_LOG_FORMAT)
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as exc:
            root.warning("Could not open log file %s: %s", log_file, exc)
        else:
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
    return logging.getLogger("anchordiff.cli")


def _load_pair(args: argparse.Namespace, logger: logging.Logger) -> tuple[str, str, str, str]:
    if args.before_url:
        logger.info("Capturing live snapshots:")
        logger.info("  - before-update URL: %s", args.before_url)
        logger.info("  - after-update URL: %s", args.after_url)
        before = capture_rendered_markup(args.before_url)
        after = capture_rendered_markup(args.after_url)
        return before, after, args.before_url, args.after_url

    if args.before is not None:
        before_path, after_path = args.before, args.after
    else:
        before_path, after_path = resolve_mode_paths(args.mode or DEFAULT_MODE, args.snapshot_dir)

    logger.info("Starting HTML snapshot differential analysis of:")
    logger.info("  - before-update file: %s", before_path)
    logger.info("  - after-update file: %s", after_path)
    return read_snapshot(before_path), read_snapshot(after_path), before_path.name, after_path.name


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _validate_arguments(parser, args)
    logger = _build_logger(args.log_file, args.verbose)

    try:
        config = load_catalog(args.catalog) if args.catalog else AnalyzerConfig()
        before, after, before_label, after_label = _load_pair(args, logger)
        result = compare_snapshots(before, after, config, on_progress=logger.info)
    except AnchorDiffError as exc:
        logger.error("Error during snapshot analysis: %s", exc)
        return 1

    try:
        write_json_report(result, args.output_json)
        if not args.no_html:
            write_html_report(result, args.output_html, before_label, after_label)
    except SinkWriteError as exc:
        logger.error("%s", exc)
        logger.error("Printing the analysis results to stdout instead.")
        print(result_to_json(result))
        return 1

    logger.info("Analysis completed successfully!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
