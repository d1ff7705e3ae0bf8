"""Exclusion rules that separate real chat content from export noise.

Matching logic:
- Records carrying the system sentinel sender are always excluded.
- Sender and body denylists use case-insensitive substring containment,
  without word boundaries ("al" excludes both "Al" and "Sally").
- Bodies containing a built-in meta phrase are excluded.
- Bodies that are empty, or only links, are excluded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence

from .models import MessageRecord

SYSTEM_PHRASES = (
    "joined using a group link",
    "joined using this group's invite link",
    "left",
    "added",
    "removed",
    "changed this group's icon",
    "changed the subject",
    "this message was deleted",
    "you deleted this message",
    "<media omitted>",
    "<attached:",
)

URL_RE = re.compile(r"https?://\S+", re.I)

_RECORD_DATE_RE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")


@dataclass(frozen=True)
class FilterResult:
    """Records kept by :func:`filter_records` and how many were removed."""

    kept: List[MessageRecord]
    excluded_count: int


def _lowered(entries: Iterable[str]) -> List[str]:
    return [e.lower() for e in entries]


def is_excluded(
    record: MessageRecord,
    excluded_senders: Iterable[str] = (),
    excluded_body_substrings: Iterable[str] = (),
) -> bool:
    """Return True if ``record`` should be dropped from the kept sequence."""

    sender = record.sender.lower()
    body = record.body.lower()

    if record.is_system:
        return True
    if any(entry in sender for entry in _lowered(excluded_senders)):
        return True
    if any(phrase in body for phrase in SYSTEM_PHRASES):
        return True
    if any(entry in body for entry in _lowered(excluded_body_substrings)):
        return True
    if not URL_RE.sub("", record.body).strip():
        # Covers both link-only and whitespace-only bodies
        return True
    return False


def filter_records(
    records: Sequence[MessageRecord],
    excluded_senders: Iterable[str] = (),
    excluded_body_substrings: Iterable[str] = (),
) -> FilterResult:
    """Apply :func:`is_excluded` to every record, preserving order."""

    senders = list(excluded_senders)
    texts = list(excluded_body_substrings)
    kept = [r for r in records if not is_excluded(r, senders, texts)]
    return FilterResult(kept=kept, excluded_count=len(records) - len(kept))


def split_denylist(raw: Optional[str]) -> List[str]:
    """Split a comma-separated denylist into trimmed, non-empty entries."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def record_date(record: MessageRecord, *, day_first: bool = False) -> Optional[date]:
    """Interpret the record's literal date, or None when it is not a real date.

    The literal is read as month/day/year unless ``day_first`` is set. This
    is only used for optional date-range filtering; records keep their
    captured text.
    """
    m = _RECORD_DATE_RE.fullmatch(record.date)
    if not m:
        return None
    first, second, year = (int(g) for g in m.groups())
    month, day = (second, first) if day_first else (first, second)
    try:
        return date(year, month, day)
    except ValueError:
        return None


def filter_by_date_range(
    records: Sequence[MessageRecord],
    start: Optional[date] = None,
    end: Optional[date] = None,
    *,
    day_first: bool = False,
) -> List[MessageRecord]:
    """Keep records whose date falls within ``[start, end]``.

    Either bound may be omitted. With no bounds the records are returned
    unchanged. When a bound is given, records whose date literal cannot be
    interpreted are dropped.
    """
    if start is None and end is None:
        return list(records)

    kept: List[MessageRecord] = []
    for record in records:
        when = record_date(record, day_first=day_first)
        if when is None:
            continue
        if start is not None and when < start:
            continue
        if end is not None and when > end:
            continue
        kept.append(record)
    return kept
