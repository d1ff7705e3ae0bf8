"""
End-to-end tests for the command line entry point.
"""

from __future__ import annotations

import io
import json
import zipfile
from datetime import date
from pathlib import Path

from chat_export_parser.commands import build_parser, options_from_args, run
from chat_export_parser.processor import ParseOptions, process_transcript

TRANSCRIPT = "\n".join(
    [
        "1/2/2023, 10:30 AM - Messages and calls are end-to-end encrypted.",
        "1/2/2023, 10:30 AM - Alice: Hello there",
        "1/2/2023, 10:31 AM - Bob: IMG-20230102-WA0001.jpg (file attached)",
        "look at this",
        "1/3/2023, 9:00 PM - Bob: https://example.com",
        "1/3/2023, 9:05 PM - Alice: Lunch tomorrow?",
        "1/3/2023, 9:06 PM - Bot Reminder: drink water",
    ]
)


def _write_export(tmp_path: Path) -> Path:
    """Write a ZIP export with one transcript and one image."""

    path = tmp_path / "group.zip"
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("WhatsApp Chat with Group.txt", TRANSCRIPT)
        zf.writestr("IMG-20230102-WA0001.jpg", b"jpeg")
    path.write_bytes(buf.getvalue())
    return path


def test_options_from_args_splits_denylists() -> None:
    """CLI flags map onto ParseOptions."""

    args = build_parser().parse_args(
        [
            "chat.txt",
            "--exclude-senders",
            "bot, spam",
            "--since",
            "2023-01-02",
            "--day-first",
        ]
    )

    options = options_from_args(args)

    assert options.excluded_senders == ("bot", "spam")
    assert options.excluded_texts == ()
    assert options.since == date(2023, 1, 2)
    assert options.day_first is True


def test_process_transcript_reports_raw_and_kept() -> None:
    """System lines, bare links, and denylisted senders are excluded."""

    result = process_transcript(TRANSCRIPT, ParseOptions(excluded_senders=("bot",)))

    assert len(result.raw) == 6
    assert [r.sender for r in result.kept] == ["Alice", "Bob", "Alice"]
    assert result.kept[1].body == "IMG-20230102-WA0001.jpg (file attached)\nlook at this"
    assert result.stats.excluded_count == 3


def test_process_transcript_applies_date_bounds() -> None:
    """Date bounds trim kept messages and leave a note."""

    options = ParseOptions(since=date(2023, 1, 3))

    result = process_transcript(TRANSCRIPT, options)

    assert [r.body for r in result.kept] == ["Lunch tomorrow?", "drink water"]
    assert result.notes


def test_run_writes_bundle_and_stats(tmp_path: Path) -> None:
    """A ZIP export produces a bundle with media and a stats summary."""

    src = _write_export(tmp_path)
    out_dir = tmp_path / "out"

    failures = run(
        [
            str(src),
            "-o",
            str(out_dir),
            "--exclude-senders",
            "bot",
            "--format",
            "structured",
            "--csv",
            "--no-progress",
        ]
    )

    assert failures == 0
    with zipfile.ZipFile(out_dir / "group_export.zip") as zf:
        names = zf.namelist()
    assert "media/IMG-20230102-WA0001.jpg" in names
    assert sum(1 for n in names if n.endswith(".json")) == 3

    stats = json.loads((out_dir / "group_stats.json").read_text(encoding="utf-8"))
    assert stats["stats"]["total_kept"] == 3
    assert stats["stats"]["top_senders"][0] == {"sender": "Alice", "count": 2}
    assert stats["media_breakdown"] == {"image": 1}
    assert (out_dir / "group_messages.csv").exists()


def test_run_counts_unreadable_inputs_as_failures(tmp_path: Path) -> None:
    """Missing files and empty transcripts are failures, not crashes."""

    empty = tmp_path / "empty.txt"
    empty.write_text("nothing to see here\n", encoding="utf-8")

    failures = run(
        [
            str(tmp_path / "missing.txt"),
            str(empty),
            "-o",
            str(tmp_path / "out"),
            "--no-progress",
        ]
    )

    assert failures == 2
