"""Detection of attached-media filenames inside message bodies.

Exported chats refer to bundled media by generated filenames such as
``IMG-20230615-WA0007.jpg``: a category prefix, an 8-digit date, the ``WA``
infix, a 4-digit sequence number, and an extension.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class MediaPattern:
    """Filename shape for one media category."""

    category: str
    prefix: str
    extensions: Tuple[str, ...]

    def regex(self) -> str:
        # Longest first: an extension must never win over a longer one it prefixes.
        exts = sorted(self.extensions, key=len, reverse=True)
        return (
            rf"(?P<{self.category}>{self.prefix}-\d{{8}}-WA\d{{4}}"
            rf"\.(?:{'|'.join(exts)}))"
        )


MEDIA_PATTERNS: Tuple[MediaPattern, ...] = (
    MediaPattern("image", "IMG", ("jpg", "jpeg", "png", "gif", "webp")),
    MediaPattern("video", "VID", ("mp4", "3gp", "avi", "mov")),
    MediaPattern("audio", "AUD", ("opus", "mp3", "m4a", "aac", "ogg")),
    MediaPattern("voice_note", "PTT", ("opus", "mp3", "m4a", "aac")),
    MediaPattern("sticker", "STK", ("webp", "png")),
    MediaPattern("document", "DOC", ("pdf", "docx", "xlsx", "txt", "zip")),
)

# One alternation so a single scan yields matches in left-to-right order.
MEDIA_RE = re.compile("|".join(p.regex() for p in MEDIA_PATTERNS), re.I)


def extract_media_references(line_text: str) -> List[str]:
    """Return media filenames found in ``line_text``, left to right.

    Matches never overlap. An empty list means the line references no media.
    """
    return [m.group(0) for m in MEDIA_RE.finditer(line_text)]


def media_category(filename: str) -> Optional[str]:
    """Return the catalogue category for ``filename`` or None if unrecognized."""
    m = MEDIA_RE.fullmatch(filename.strip())
    if not m:
        return None
    return m.lastgroup
