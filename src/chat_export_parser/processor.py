"""Run one transcript through parsing, filtering, and statistics.

This is the seam between the pure parsing core and the command line: it
takes already-read transcript text and the user's options and returns every
intermediate result a caller may want to write out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from .assembler import parse_raw
from .filters import filter_by_date_range, filter_records
from .models import MessageRecord
from .stats import MessageStats, compute_stats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseOptions:
    """User-selected filtering options.

    Parameters
    ----------
    excluded_senders:
        Sender substrings to drop (case-insensitive).
    excluded_texts:
        Body substrings to drop (case-insensitive).
    since, until:
        Optional inclusive date bounds applied after exclusion.
    day_first:
        Read date literals as day/month/year for the date bounds.
    top_n:
        Number of senders reported in the statistics.
    """

    excluded_senders: Tuple[str, ...] = ()
    excluded_texts: Tuple[str, ...] = ()
    since: Optional[date] = None
    until: Optional[date] = None
    day_first: bool = False
    top_n: int = 5


@dataclass
class ProcessResult:
    """Raw and kept records of one transcript plus their statistics."""

    raw: List[MessageRecord]
    kept: List[MessageRecord]
    stats: MessageStats
    notes: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.kept)


def process_transcript(text: str, options: ParseOptions) -> ProcessResult:
    """Parse ``text`` and apply exclusions, date bounds, and statistics."""

    raw = parse_raw(text)
    filtered = filter_records(raw, options.excluded_senders, options.excluded_texts)
    kept = filter_by_date_range(
        filtered.kept, options.since, options.until, day_first=options.day_first
    )

    notes: List[str] = []
    if len(kept) != len(filtered.kept):
        notes.append(
            f"date range removed {len(filtered.kept) - len(kept)} message(s)"
        )
    if not raw:
        notes.append("no message start lines recognized")

    stats = compute_stats(kept, raw_total=len(raw), top_n=options.top_n)
    logger.info(
        "Parsed %d raw messages; kept %d (%d excluded)",
        len(raw),
        stats.total_kept,
        stats.excluded_count,
    )
    return ProcessResult(raw=raw, kept=kept, stats=stats, notes=notes)
