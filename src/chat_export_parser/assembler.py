"""Group transcript lines into message records.

Each line is trimmed and matched against the grammars in :mod:`.grammar`.
A match closes the message currently being built and opens a new one; any
other non-blank line is appended to the open message. Lines before the first
match cannot be attributed and are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional

from .filters import filter_records
from .grammar import LineMatch, match_line
from .media import extract_media_references
from .models import MessageRecord

logger = logging.getLogger(__name__)


@dataclass
class _OpenMessage:
    """Mutable state of the message being assembled."""

    start: LineMatch
    lines: List[str]
    media: List[str] = field(default_factory=list)

    def append(self, line: str) -> None:
        self.lines.append(line)
        self.media.extend(extract_media_references(line))

    def close(self, position: int) -> MessageRecord:
        return MessageRecord(
            date=self.start.date,
            time=self.start.time,
            sender=self.start.sender,
            body="\n".join(self.lines),
            sequence_position=position,
            media_references=tuple(self.media),
        )


def _open(start: LineMatch) -> _OpenMessage:
    return _OpenMessage(
        start=start,
        lines=[start.body],
        media=extract_media_references(start.body),
    )


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def trim_line(line: str) -> str:
    """Strip whitespace and byte-order marks from both ends of a line."""
    return line.strip().strip("\ufeff").strip()


def iter_records(text: str) -> Iterator[MessageRecord]:
    """Yield raw message records from ``text`` in document order.

    The iterator is single-pass. The last open message is emitted when the
    input is exhausted. Empty or unrecognized input yields nothing.
    """
    current: Optional[_OpenMessage] = None
    position = 0

    for raw in normalize_newlines(text).split("\n"):
        line = trim_line(raw)
        if not line:
            continue

        start = match_line(line)
        if start is not None:
            if current is not None:
                yield current.close(position)
                position += 1
            current = _open(start)
            continue

        if current is not None:
            current.append(line)
        # Preamble before the first message start is dropped

    if current is not None:
        yield current.close(position)


def parse_raw(text: str) -> List[MessageRecord]:
    """Return every record in ``text`` without applying exclusion rules."""
    return list(iter_records(text))


def parse(
    transcript_text: str,
    excluded_senders: Iterable[str] = (),
    excluded_body_substrings: Iterable[str] = (),
) -> List[MessageRecord]:
    """Parse a transcript and drop noise records.

    Parameters
    ----------
    transcript_text:
        Full transcript text.
    excluded_senders:
        Case-insensitive substrings; records whose sender contains one are
        dropped.
    excluded_body_substrings:
        Case-insensitive substrings; records whose body contains one are
        dropped.

    Returns
    -------
    List[MessageRecord]
        Kept records in original order. System lines, bare links, and
        built-in meta notices are always removed.
    """
    raw = parse_raw(transcript_text)
    result = filter_records(raw, excluded_senders, excluded_body_substrings)
    logger.debug(
        "Parsed %d records, kept %d, excluded %d",
        len(raw),
        len(result.kept),
        result.excluded_count,
    )
    return result.kept
