"""Command-line interface for the OpenCover preprocessor.

WHY: Coverage pipelines call tools from build scripts. The CLI wires
together the whole flow (report validation, XML loading, startup-code
attribution, pluggable formatter output and file saving) behind a single
command that can run right after the coverage collector.

HOW: Uses argparse to accept a report path, output format selection,
output directory, worker count and verbosity. Status messages go to
stderr; output files are saved next to the report (or to --output-dir).

RULES:
- Positional argument: OpenCover XML report path
- Validates file extension against SUPPORTED_REPORT_EXTENSIONS first
- --formats: comma-separated formatter keys (default: opencover_xml)
- Output naming: {stem}{suffix}, numeric suffix for conflicts
  (-preprocessed-2.xml)
- Every applied rename is printed as "old -> new"
- Status output goes to stderr (not stdout)
- Malformed reports and bad arguments exit with status 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from opencover_preprocessor.config import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_WORKERS,
    SUPPORTED_REPORT_EXTENSIONS,
)
from opencover_preprocessor.core.startup_code import StartupCodeRename, normalize_report
from opencover_preprocessor.formatters import DEFAULT_FORMATS, FORMATTERS
from opencover_preprocessor.formatters.base import FormatterOutput
from opencover_preprocessor.parser.opencover_xml import load_report

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr, so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    WHY: Running the preprocessor twice must not silently replace the
    output of a previous run.

    HOW: Check if {stem}{suffix} exists. If so, increment a counter
    and insert it before the file extension until a free name is found.

    RULES:
    - First attempt: {stem}{suffix} (e.g. coverage-preprocessed.xml)
    - Conflict: split suffix at last dot, insert counter before extension
      (e.g. coverage-preprocessed-2.xml)
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


def _save_output(
    output: FormatterOutput,
    stem: str,
    output_dir: Path,
) -> Path:
    """Save a single formatter output to disk and return its path."""
    path = _resolve_output_path(stem, output.suffix, output_dir)

    if isinstance(output.content, bytes):
        path.write_bytes(output.content)
    else:
        path.write_text(output.content, encoding="utf-8")

    return path


def _resolve_log_level(verbose: bool, name: str) -> int:
    """Map --verbose / OPENCOVER_LOG_LEVEL to a logging level.

    Raises:
        ValueError: If ``name`` is not a standard logging level name.
    """
    if verbose:
        return logging.DEBUG
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(
            "OPENCOVER_LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, "
            "CRITICAL; got {!r}".format(name)
        )
    return level


def _parse_format_keys(raw: Optional[str]) -> List[str]:
    if not raw:
        return list(DEFAULT_FORMATS)

    keys = [f.strip() for f in raw.split(",") if f.strip()]
    for key in keys:
        if key not in FORMATTERS:
            available = ", ".join(sorted(FORMATTERS.keys()))
            _fail("Unknown format '{}'. Available formats: {}".format(key, available))
    return keys


def run(args: argparse.Namespace) -> List[Path]:
    """Execute the full preprocessing pipeline.

    HOW: Validates the input, loads the report, normalizes startup code,
    runs the selected formatters and saves their output files.

    Returns:
        Paths of all files written.
    """
    input_path = Path(args.report).resolve()

    if not input_path.is_file():
        _fail("File not found: {}".format(input_path))

    ext = input_path.suffix.lower()
    if ext not in SUPPORTED_REPORT_EXTENSIONS:
        _fail("Unsupported file type '{}'. Supported formats: {}".format(
            ext, ", ".join(sorted(SUPPORTED_REPORT_EXTENSIONS)),
        ))

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    if args.workers < 1:
        _fail("--workers must be at least 1")

    format_keys = _parse_format_keys(args.formats)

    renames: List[StartupCodeRename] = []
    saved_files: List[Path] = []
    try:
        _status("Loading {}...".format(input_path.name))
        report = load_report(input_path)
        _status("  {} module(s), {} class(es)".format(
            len(report.modules),
            sum(len(m.classes) for m in report.modules),
        ))

        _status("Attributing startup code...")
        normalize_report(report, max_workers=args.workers, on_rename=renames.append)
        for rename in renames:
            _status("  {} -> {}".format(rename.old_name, rename.new_name))
        _status("  Renamed {} startup class(es)".format(len(renames)))

        _status("Formatting output...")
        for key in format_keys:
            formatter = FORMATTERS[key]()
            _status("  Running {} formatter...".format(formatter.name))
            for output in formatter.format(report):
                saved_path = _save_output(output, input_path.stem, output_dir)
                saved_files.append(saved_path)
                _status("  Saved: {}".format(saved_path.name))
    except ValueError as e:
        # MalformedReportError and invalid formatter input
        logger.debug("Preprocessing failed", exc_info=True)
        _fail(str(e))
    except Exception as e:
        logger.debug("Preprocessing failed", exc_info=True)
        _fail(str(e) or type(e).__name__)

    _status("")
    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))
    return saved_files


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="opencover_preprocessor",
        description="Nest compiler-generated startup code classes of an OpenCover "
                    "report under the classes that own them.",
    )

    parser.add_argument(
        "report",
        help="Path to the OpenCover XML report.",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: {}.".format(
                 ", ".join(sorted(FORMATTERS.keys())), ",".join(DEFAULT_FORMATS),
             ),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as the report).",
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_MAX_WORKERS,
        help="Number of modules processed in parallel (default: %(default)s).",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log skipped startup classes and other details.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        level = _resolve_log_level(args.verbose, DEFAULT_LOG_LEVEL)
    except ValueError as e:
        _fail(str(e))

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    run(args)


if __name__ == "__main__":
    main()
