"""
Pure computation helpers for aggregating message statistics.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Sequence

import pandas as pd

from .media import media_category
from .models import MessageRecord

_TIME_RE = re.compile(r"(\d{1,2}):(\d{2})\s*(am|pm)?", re.I)


@dataclass(frozen=True)
class SenderCount:
    """Number of kept messages attributed to one sender."""

    sender: str
    count: int


@dataclass(frozen=True)
class MessageStats:
    """Summary counts for a kept record sequence.

    Parameters
    ----------
    total_kept:
        Number of kept records.
    unique_senders:
        Number of distinct senders among the kept records.
    top_senders:
        Most active senders, highest count first. Ties keep the order in
        which senders were first seen.
    excluded_count:
        ``raw_total - total_kept`` when a raw total was supplied, else 0.
    """

    total_kept: int
    unique_senders: int
    top_senders: List[SenderCount] = field(default_factory=list)
    excluded_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_stats(
    kept: Sequence[MessageRecord], raw_total: int = 0, top_n: int = 5
) -> MessageStats:
    """Count kept records per sender and summarize them.

    Parameters
    ----------
    kept:
        Records that survived the exclusion filter.
    raw_total:
        Number of records before filtering. Zero means unknown.
    top_n:
        Maximum number of senders reported in ``top_senders``.

    Returns
    -------
    MessageStats
        Totals, distinct sender count, top senders, and excluded count.
    """

    # Counter keeps first-seen order and sorted() is stable, so ties keep it too.
    counts = Counter(record.sender for record in kept)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    top = [
        SenderCount(sender=sender, count=count) for sender, count in ranked[:top_n]
    ]
    excluded = raw_total - len(kept) if raw_total > 0 else 0
    return MessageStats(
        total_kept=len(kept),
        unique_senders=len(counts),
        top_senders=top,
        excluded_count=excluded,
    )


def daily_frequency(records: Sequence[MessageRecord]) -> Dict[str, int]:
    """Return message counts keyed by the literal date, in first-seen order."""
    counts: Dict[str, int] = {}
    for record in records:
        counts[record.date] = counts.get(record.date, 0) + 1
    return counts


def record_hour(record: MessageRecord) -> int | None:
    """Return the 0-23 hour of the record's time literal, or None."""
    m = _TIME_RE.fullmatch(record.time.strip())
    if not m:
        return None
    hour = int(m.group(1))
    meridiem = (m.group(3) or "").lower()
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12 + (12 if meridiem == "pm" else 0)
    if not 0 <= hour <= 23:
        return None
    return hour


def hourly_activity(records: Sequence[MessageRecord]) -> List[int]:
    """Return 24 message counts, one per hour of day."""
    buckets = [0] * 24
    for record in records:
        hour = record_hour(record)
        if hour is not None:
            buckets[hour] += 1
    return buckets


def media_breakdown(records: Sequence[MessageRecord]) -> Dict[str, int]:
    """Count referenced media files per category, most frequent first."""
    counts: Counter[str] = Counter()
    for record in records:
        for name in record.media_references:
            counts[media_category(name) or "other"] += 1
    return dict(counts.most_common())


def records_to_frame(records: Sequence[MessageRecord]) -> pd.DataFrame:
    """Return one row per record for tabular output."""
    rows = [
        {
            "sequence_position": record.sequence_position,
            "date": record.date,
            "time": record.time,
            "sender": record.sender,
            "body": record.body,
            "media_count": len(record.media_references),
            "media_files": ";".join(record.media_references),
        }
        for record in records
    ]
    columns = [
        "sequence_position",
        "date",
        "time",
        "sender",
        "body",
        "media_count",
        "media_files",
    ]
    return pd.DataFrame(rows, columns=columns)
