"""CLI entry point for parsing exported chat transcripts.

Each input (a ``.txt`` transcript or a ``.zip`` export with media) is parsed,
filtered, and written out as a ZIP bundle of per-message files plus a JSON
statistics summary. Charts and a CSV table are optional.
"""

from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from .archive import ArchiveError, read_archive_file
from .export import ExportFormat, write_bundle
from .filters import split_denylist
from .plots import (
    render_daily_frequency_chart,
    render_hourly_activity_chart,
    render_top_senders_chart,
)
from .processor import ParseOptions, ProcessResult, process_transcript
from .stats import daily_frequency, hourly_activity, media_breakdown, records_to_frame
from .util import default_output_dir, write_json

LOGGER_NAME = "chat_export_parser"


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the ``chat-export-parser`` command."""
    parser = argparse.ArgumentParser(
        prog="chat-export-parser",
        description="Split exported chat transcripts into individual messages",
    )
    parser.add_argument(
        "inputs", nargs="+", type=Path, help="Transcript .txt or export .zip files"
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        help="Output directory (default: INPUT_STEM + '_parsed' next to each input)",
    )
    parser.add_argument(
        "--exclude-senders",
        default="",
        help="Comma-separated sender substrings to exclude (case-insensitive)",
    )
    parser.add_argument(
        "--exclude-text",
        default="",
        help="Comma-separated message substrings to exclude (case-insensitive)",
    )
    parser.add_argument(
        "--since",
        type=date.fromisoformat,
        default=None,
        help="Keep messages on or after this date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--until",
        type=date.fromisoformat,
        default=None,
        help="Keep messages on or before this date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--day-first",
        action="store_true",
        help="Read transcript dates as day/month/year for --since/--until",
    )
    parser.add_argument(
        "--format",
        dest="fmt",
        choices=[f.value for f in ExportFormat],
        default=ExportFormat.TEXT.value,
        help="Per-message file format inside the export bundle (default: text)",
    )
    parser.add_argument(
        "--top-n", type=int, default=5, help="Number of top senders to report"
    )
    parser.add_argument(
        "--charts", action="store_true", help="Render statistics charts as PNG"
    )
    parser.add_argument(
        "--csv", action="store_true", help="Write a CSV table of kept messages"
    )
    parser.add_argument(
        "--no-progress", action="store_true", help="Disable the progress bar"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    parser.add_argument("--log-file", help="Write a detailed log under the output dir")
    return parser


def _configure_logging(args, log_dir: Path) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.INFO)
    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO if args.verbose else logging.WARNING)
    ch.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(ch)
    if args.log_file:
        lf_path = log_dir / args.log_file
        lf_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(lf_path), encoding="utf-8")
        fh.setLevel(logging.INFO)
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
        logger.addHandler(fh)
    # matplotlib is chatty about fonts
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    return logger


def options_from_args(args) -> ParseOptions:
    """Map parsed CLI arguments onto :class:`ParseOptions`."""
    return ParseOptions(
        excluded_senders=tuple(split_denylist(args.exclude_senders)),
        excluded_texts=tuple(split_denylist(args.exclude_text)),
        since=args.since,
        until=args.until,
        day_first=args.day_first,
        top_n=args.top_n,
    )


def write_outputs(
    src: Path,
    out_dir: Path,
    result: ProcessResult,
    media: dict,
    args,
) -> List[Path]:
    """Write the bundle, statistics, and optional charts/CSV for one input."""

    out_dir.mkdir(parents=True, exist_ok=True)
    stem = src.stem
    written: List[Path] = []

    bundle_path = out_dir / f"{stem}_export.zip"
    bundle_path.write_bytes(write_bundle(result.kept, args.fmt, media))
    written.append(bundle_path)

    stats_path = out_dir / f"{stem}_stats.json"
    payload = {
        "source": src.name,
        "stats": result.stats.to_dict(),
        "daily_frequency": daily_frequency(result.kept),
        "hourly_activity": hourly_activity(result.kept),
        "media_breakdown": media_breakdown(result.kept),
        "notes": result.notes,
    }
    write_json(stats_path, payload)
    written.append(stats_path)

    if args.csv:
        csv_path = out_dir / f"{stem}_messages.csv"
        records_to_frame(result.kept).to_csv(csv_path, index=False)
        written.append(csv_path)

    if args.charts:
        top_path = out_dir / f"{stem}_top_senders.png"
        if render_top_senders_chart(result.stats, top_path):
            written.append(top_path)
        daily_path = out_dir / f"{stem}_daily.png"
        if render_daily_frequency_chart(payload["daily_frequency"], daily_path):
            written.append(daily_path)
        hourly_path = out_dir / f"{stem}_hourly.png"
        if render_hourly_activity_chart(payload["hourly_activity"], hourly_path):
            written.append(hourly_path)

    return written


def run(argv: Optional[List[str]] = None) -> int:
    """Process every input and return the number of failures."""
    args = build_parser().parse_args(argv)
    options = options_from_args(args)

    first_input = args.inputs[0].expanduser().resolve()
    log_dir = args.output_dir or default_output_dir(first_input)
    logger = _configure_logging(args, Path(log_dir).expanduser().resolve())

    ok = 0
    fail = 0
    inputs = [p.expanduser().resolve() for p in args.inputs]
    iterator = inputs if args.no_progress else tqdm(inputs, desc="Files", unit="file")
    for src in iterator:
        out_dir = (
            args.output_dir.expanduser().resolve()
            if args.output_dir
            else default_output_dir(src)
        )
        try:
            contents = read_archive_file(src)
        except (OSError, ArchiveError) as e:
            fail += 1
            logger.error("[FAIL] %s: %s", src, e)
            continue

        result = process_transcript(contents.transcript_text, options)
        if not result.ok:
            fail += 1
            logger.warning("[EMPTY] %s: no messages found", src)
            continue

        try:
            written = write_outputs(
                src, out_dir, result, contents.media_by_filename, args
            )
        except OSError as e:
            fail += 1
            logger.error("[FAIL] %s: %s", src, e)
            continue

        ok += 1
        media_count = sum(len(r.media_references) for r in result.kept)
        logger.info(
            "[OK] %s: %d messages with %d media files -> %s",
            src.name,
            result.stats.total_kept,
            media_count,
            ", ".join(p.name for p in written),
        )

    print(f"Summary: ok={ok}, fail={fail}, total={len(inputs)}")
    return fail


def main() -> None:
    """Console script entry point."""
    failures = run()
    if failures:
        raise SystemExit(1)
