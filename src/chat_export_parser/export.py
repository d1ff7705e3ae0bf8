"""Package parsed messages, and the media they reference, into a ZIP bundle."""

from __future__ import annotations

import io
import json
import logging
import re
import zipfile
from enum import Enum
from typing import Mapping, Optional, Sequence, Set

from .models import MessageRecord

logger = logging.getLogger(__name__)

MEDIA_DIR = "media"


class ExportFormat(str, Enum):
    """Per-message file format inside an export bundle."""

    TEXT = "text"
    STRUCTURED = "structured"

    @property
    def extension(self) -> str:
        return "txt" if self is ExportFormat.TEXT else "json"


def sanitize_filename(text: str, max_length: int = 15) -> str:
    """Return a short, filesystem-friendly slug taken from the start of ``text``."""

    sanitized = text[:max_length].lower()
    sanitized = re.sub(r"[^a-z0-9\s-]", "", sanitized)
    sanitized = re.sub(r"\s+", "-", sanitized)
    sanitized = re.sub(r"-+", "-", sanitized)
    return sanitized.strip("-") or "message"


def render_record(record: MessageRecord, fmt: ExportFormat) -> str:
    """Render one record as the content of its bundle file."""
    if fmt is ExportFormat.STRUCTURED:
        return json.dumps(record.to_dict(), ensure_ascii=False, indent=2)
    return (
        f"Date: {record.date}\nTime: {record.time}\nSender: {record.sender}\n\n"
        f"{record.body}"
    )


def write_bundle(
    records: Sequence[MessageRecord],
    fmt: ExportFormat | str,
    media_by_filename: Optional[Mapping[str, bytes]] = None,
) -> bytes:
    """Build a ZIP bundle with one file per record.

    Entries are named ``<slug>-<index>.<ext>`` where ``index`` is the record's
    position in ``records``. Media files referenced by the records and present
    in ``media_by_filename`` are stored once under ``media/``, matching names
    without regard to case.

    Returns the ZIP archive as bytes.
    """

    fmt = ExportFormat(fmt)
    # Reference case can differ from the stored name; look up by lowered name
    media = {
        name.lower(): (name, payload)
        for name, payload in (media_by_filename or {}).items()
    }
    written_media: Set[str] = set()
    missing_media: Set[str] = set()

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for index, record in enumerate(records):
            name = f"{sanitize_filename(record.body)}-{index}.{fmt.extension}"
            zf.writestr(name, render_record(record, fmt))
            for media_name in record.media_references:
                key = media_name.lower()
                if key in written_media or key in missing_media:
                    continue
                entry = media.get(key)
                if entry is None:
                    missing_media.add(key)
                    logger.debug("Media %s not found in bundle input", media_name)
                    continue
                stored_name, payload = entry
                zf.writestr(f"{MEDIA_DIR}/{stored_name}", payload)
                written_media.add(key)

    if missing_media:
        logger.warning(
            "%d referenced media file(s) were not available", len(missing_media)
        )
    logger.info(
        "Bundled %d messages and %d media files", len(records), len(written_media)
    )
    return buf.getvalue()
