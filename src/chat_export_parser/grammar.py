"""Line grammars for exported chat transcripts.

A message starts on a line shaped like one of:

  1/2/2023, 10:30 AM - Alice: Hello there
  1/2/2023, 10:30 AM - Alice added Bob

The first form is attributed to a sender; the second is a system/meta line.
Anything else is a continuation of the message above it. Dates and times are
captured literally and never validated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .models import SYSTEM_SENDER

_DATE = r"(?P<date>\d{1,2}/\d{1,2}/\d{4})"
_TIME = r"(?P<time>\d{1,2}:\d{2}\s*(?:am|pm)?)"

ATTRIBUTED_LINE = re.compile(
    rf"{_DATE},\s*{_TIME}\s*-\s*(?P<sender>[^:]+?):\s*(?P<body>.+)",
    re.I,
)
SYSTEM_LINE = re.compile(
    rf"{_DATE},\s*{_TIME}\s*-\s*(?P<body>.+)",
    re.I,
)


@dataclass(frozen=True)
class LineMatch:
    """Fields captured from a message-start line."""

    date: str
    time: str
    sender: str
    body: str


def match_line(line: str) -> Optional[LineMatch]:
    """Classify one trimmed line as a message start.

    The attributed grammar is tried first, then the system grammar. Both are
    anchored to the whole line so text inside a multi-line body does not
    start a new message. Returns None for continuation lines.
    """
    m = ATTRIBUTED_LINE.fullmatch(line)
    if m:
        return LineMatch(
            date=m.group("date").strip(),
            time=m.group("time").strip(),
            sender=m.group("sender").strip(),
            body=m.group("body").strip(),
        )
    m = SYSTEM_LINE.fullmatch(line)
    if m:
        return LineMatch(
            date=m.group("date").strip(),
            time=m.group("time").strip(),
            sender=SYSTEM_SENDER,
            body=m.group("body").strip(),
        )
    return None
