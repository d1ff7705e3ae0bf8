"""Read chat exports delivered as plain text or as a ZIP bundle with media.

A ZIP export holds one ``.txt`` transcript next to the media files it refers
to. Plain ``.txt`` exports carry the transcript alone.
"""

from __future__ import annotations

import io
import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Dict, Optional

logger = logging.getLogger(__name__)

ZIP_MAGIC = b"PK\x03\x04"
EMPTY_ZIP_MAGIC = b"PK\x05\x06"


class ArchiveError(Exception):
    """Raised when an upload cannot provide a transcript."""


class UnsupportedFormat(ArchiveError):
    """Raised when the payload is neither a text transcript nor a readable ZIP."""


class NoTranscriptFound(ArchiveError):
    """Raised when a ZIP archive holds no ``.txt`` transcript member."""


@dataclass
class ArchiveContents:
    """Transcript text plus the media payloads bundled alongside it."""

    transcript_text: str
    media_by_filename: Dict[str, bytes] = field(default_factory=dict)


def _guess_bomless_utf16(raw: bytes, sample_size: int = 4096) -> Optional[str]:
    """Return a UTF-16 codec name when NULs sit in every other byte.

    ASCII-range text encoded as UTF-16 without a BOM has a NUL in each code
    unit: at odd offsets for little endian, even offsets for big endian.
    """
    data = raw[:sample_size]
    data = data[: len(data) - len(data) % 2]
    if not data:
        return None
    even_nuls = data[0::2].count(0)
    odd_nuls = data[1::2].count(0)
    units = len(data) // 2
    if odd_nuls >= units // 2 and even_nuls == 0:
        return "utf-16-le"
    if even_nuls >= units // 2 and odd_nuls == 0:
        return "utf-16-be"
    return None


def decode_text_best_effort(raw: bytes) -> str:
    """Decode bytes using a best-effort set of encodings.

    Tries BOMs first, then BOM-less UTF-16 when NUL bytes alternate, then
    several common encodings before falling back to UTF-8 with replacement
    for undecodable bytes.
    """
    if raw.startswith(b"\xef\xbb\xbf"):
        return raw.decode("utf-8-sig", errors="replace")
    if raw.startswith((b"\xff\xfe", b"\xfe\xff")):
        return raw.decode("utf-16", errors="replace")
    encodings = ["utf-8", "cp1252", "latin-1"]
    guess = _guess_bomless_utf16(raw)
    if guess:
        encodings.insert(0, guess)
    for enc in encodings:
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue
    return raw.decode("utf-8", errors="replace")


def looks_like_text(raw: bytes, sample_size: int = 4096) -> bool:
    """Heuristically decide if a payload is text by sampling bytes."""
    data = raw[:sample_size]
    if not data:
        return True
    if data.startswith((b"\xff\xfe", b"\xfe\xff")):
        return True
    if _guess_bomless_utf16(data):
        return True
    return b"\x00" not in data


def looks_like_zip(raw: bytes) -> bool:
    return raw.startswith((ZIP_MAGIC, EMPTY_ZIP_MAGIC))


def _read_zip(raw: bytes) -> ArchiveContents:
    try:
        zf = zipfile.ZipFile(io.BytesIO(raw))
    except zipfile.BadZipFile as e:
        raise UnsupportedFormat(f"Unreadable ZIP archive: {e}") from e

    transcript: Optional[str] = None
    media: Dict[str, bytes] = {}
    with zf:
        for info in zf.infolist():
            if info.is_dir():
                continue
            name = PurePosixPath(info.filename).name
            if transcript is None and name.lower().endswith(".txt"):
                transcript = decode_text_best_effort(zf.read(info))
                logger.debug("Using %s as the transcript", info.filename)
                continue
            media[name] = zf.read(info)

    if transcript is None:
        raise NoTranscriptFound("No .txt file found in the ZIP archive")
    logger.info("Read transcript with %d bundled files", len(media))
    return ArchiveContents(transcript_text=transcript, media_by_filename=media)


def read_archive(data: bytes, filename: Optional[str] = None) -> ArchiveContents:
    """Return the transcript text and media map from an uploaded export.

    Parameters
    ----------
    data:
        Raw bytes of the upload.
    filename:
        Optional original filename. Its extension selects the reader; without
        it the payload is sniffed.

    Returns
    -------
    ArchiveContents
        Transcript text and a mapping from media base name to payload.

    Raises
    ------
    UnsupportedFormat
        If the payload is not a ``.txt`` transcript or a readable ZIP.
    NoTranscriptFound
        If a ZIP archive contains no ``.txt`` member.
    """

    suffix = Path(filename).suffix.lower() if filename else ""
    if suffix == ".zip" or (not suffix and looks_like_zip(data)):
        return _read_zip(data)
    if suffix == ".txt" or (not suffix and looks_like_text(data)):
        return ArchiveContents(transcript_text=decode_text_best_effort(data))
    raise UnsupportedFormat(
        "Unsupported file format. Please provide a .txt or .zip file."
    )


def read_archive_file(path: Path) -> ArchiveContents:
    """Read an export from disk; see :func:`read_archive`."""
    return read_archive(path.read_bytes(), path.name)
