"""Command-line interface for the activity log regrouper.

WHY: Users need a simple way to turn a decoded Xcode activity log into
per-target reports from the terminal. The CLI wires together loading,
target regrouping, per-file Swift step expansion and the pluggable
formatters behind a single command.

HOW: Uses argparse to accept the decoder's JSON dump, output format
selection, output directory and the grouping tunables. Checks the text
patterns at startup, loads and validates the log, regroups it, runs the
selected formatters and saves each output next to the input (or to
--output-dir). Status messages go to stderr.

RULES:
- Positional argument: JSON dump produced by the activity log decoder
- A broken built-in pattern is fatal before any input is read (exit 2)
- --formats: comma-separated formatter keys (default: all registered)
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-steps-2.json)
- Invalid input or I/O failure -> message on stderr, exit 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from xclog_regroup.config import (
    DEFAULT_FORMATS,
    FLATTEN_SAMPLE_SIZE,
    LOG_LEVEL,
    TARGET_SECTION_TYPE,
)
from xclog_regroup.core.grouper import group_by_target
from xclog_regroup.core.loader import LogFormatError, load_log_file
from xclog_regroup.core.patterns import PatternConfigurationError, validate_patterns
from xclog_regroup.formatters import FORMATTERS
from xclog_regroup.formatters.base import BaseFormatter, FormatterOutput
from xclog_regroup.formatters.steps_json import StepsJSONFormatter

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr, flushed."""
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding a numeric suffix on conflict.

    RULES:
    - First attempt: {stem}{suffix} (e.g. build-steps.json)
    - Conflict: insert a counter before the extension (build-steps-2.json)
    - Counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _select_formats(raw: Optional[str]) -> List[str]:
    """Parse a comma-separated format list; empty means every formatter.

    Raises:
        ValueError: If a key is not registered in FORMATTERS.
    """
    if not raw:
        return list(FORMATTERS.keys())
    keys = [f.strip() for f in raw.split(",") if f.strip()]
    for key in keys:
        if key not in FORMATTERS:
            available = ", ".join(sorted(FORMATTERS.keys()))
            raise ValueError("Unknown format '{}'. Available formats: {}".format(key, available))
    return keys


def _make_formatter(key: str, expand_swift: bool) -> BaseFormatter:
    if key == "steps_json":
        return StepsJSONFormatter(expand_swift=expand_swift)
    return FORMATTERS[key]()


def run(args: argparse.Namespace) -> int:
    """Execute the regrouping pipeline and return the process exit code."""
    try:
        validate_patterns()
    except PatternConfigurationError as e:
        print("Fatal: {}".format(e), file=sys.stderr)
        return 2

    input_path = Path(args.input_file).resolve()
    if not input_path.is_file():
        print("Error: File not found: {}".format(input_path), file=sys.stderr)
        return 1

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        print("Error: Output directory does not exist: {}".format(output_dir), file=sys.stderr)
        return 1

    try:
        format_keys = _select_formats(args.formats)
    except ValueError as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    try:
        _status("Loading {}...".format(input_path.name))
        section = load_log_file(input_path)
        _status("  {} top-level sections".format(len(section.sub_sections)))

        if args.group:
            section = group_by_target(section, sample_size=args.sample_size)
            targets = sum(1 for s in section.sub_sections if s.section_type == TARGET_SECTION_TYPE)
            _status("  Grouped into {} target sections".format(targets))

        stem = input_path.stem
        saved_files: List[Path] = []
        for key in format_keys:
            formatter = _make_formatter(key, args.expand)
            _status("  Running {} formatter...".format(formatter.name))
            for output in formatter.format(section):
                saved_path = _save_output(output, stem, output_dir)
                saved_files.append(saved_path)
                _status("  Saved: {}".format(saved_path.name))
    except LogFormatError as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1
    except OSError as e:
        logger.debug("I/O failure", exc_info=True)
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    _status("")
    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))
    return 0


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("expected an integer, got {!r}".format(value)) from None
    if number <= 0:
        raise argparse.ArgumentTypeError("must be positive, got {}".format(number))
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="xclog_regroup",
        description="Regroup a decoded Xcode activity log by target and "
                    "produce per-target and per-file reports.",
    )

    parser.add_argument(
        "input_file",
        help="Path to the JSON dump of a decoded .xcactivitylog.",
    )

    parser.add_argument(
        "--formats",
        default=DEFAULT_FORMATS or None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )

    parser.add_argument(
        "--sample-size",
        type=_positive_int,
        default=FLATTEN_SAMPLE_SIZE,
        help="Leading sections inspected to detect a flat log (default: %(default)s).",
    )

    parser.add_argument(
        "--group",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Regroup flat logs by target (default: %(default)s).",
    )

    parser.add_argument(
        "--expand",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Split whole-module Swift compiles into per-file steps (default: %(default)s).",
    )

    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level for diagnostics on stderr (default: %(default)s).",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m xclog_regroup`` and the console script.

    argv=None means use sys.argv; explicit argv is for testing.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    sys.exit(run(args))


if __name__ == "__main__":
    main()
