"""
Tests for reading text and ZIP chat exports.
"""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest

from chat_export_parser.archive import (
    ArchiveError,
    NoTranscriptFound,
    UnsupportedFormat,
    decode_text_best_effort,
    read_archive,
    read_archive_file,
)
from chat_export_parser.assembler import parse

TRANSCRIPT = "1/2/2023, 10:30 AM - Alice: IMG-20230102-WA0001.jpg (file attached)\n"


def _zip_bytes(members: dict[str, bytes]) -> bytes:
    """Return an in-memory ZIP archive holding ``members``."""

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, payload in members.items():
            zf.writestr(name, payload)
    return buf.getvalue()


def test_plain_text_export_has_no_media() -> None:
    """A .txt upload is returned as the transcript text."""

    contents = read_archive(TRANSCRIPT.encode("utf-8"), "chat.txt")

    assert contents.transcript_text == TRANSCRIPT
    assert contents.media_by_filename == {}


def test_zip_export_splits_transcript_and_media() -> None:
    """The first .txt member is the transcript; other members are media."""

    data = _zip_bytes(
        {
            "export/IMG-20230102-WA0001.jpg": b"\xff\xd8jpeg",
            "export/WhatsApp Chat with Alice.txt": TRANSCRIPT.encode("utf-8"),
            "export/notes.txt": b"second text file",
        }
    )

    contents = read_archive(data, "export.zip")

    assert contents.transcript_text == TRANSCRIPT
    assert contents.media_by_filename["IMG-20230102-WA0001.jpg"] == b"\xff\xd8jpeg"
    assert contents.media_by_filename["notes.txt"] == b"second text file"


def test_zip_is_detected_without_filename() -> None:
    """ZIP payloads are recognized by their magic bytes."""

    data = _zip_bytes({"chat.txt": TRANSCRIPT.encode("utf-8")})

    assert read_archive(data).transcript_text == TRANSCRIPT


def test_zip_without_text_member_raises_no_transcript() -> None:
    """An archive holding only media has no transcript."""

    data = _zip_bytes({"IMG-20230102-WA0001.jpg": b"jpeg"})

    with pytest.raises(NoTranscriptFound):
        read_archive(data, "export.zip")


def test_corrupt_zip_raises_unsupported_format() -> None:
    """Bytes that claim to be a ZIP but are not readable are rejected."""

    with pytest.raises(UnsupportedFormat):
        read_archive(b"not a zip at all", "export.zip")


def test_unknown_extension_raises_unsupported_format() -> None:
    """Only .txt and .zip uploads are accepted."""

    with pytest.raises(UnsupportedFormat) as excinfo:
        read_archive(b"%PDF-1.4", "chat.pdf")

    assert isinstance(excinfo.value, ArchiveError)


def test_binary_payload_without_name_is_unsupported() -> None:
    """Unnamed binary payloads are not treated as transcripts."""

    with pytest.raises(UnsupportedFormat):
        read_archive(b"\x00\x01\x02binary")


def test_decode_handles_bom_and_legacy_encodings() -> None:
    """BOM-prefixed UTF-8 and cp1252 bytes decode to the same text."""

    assert decode_text_best_effort(b"\xef\xbb\xbf" + "café".encode("utf-8")) == "café"
    assert decode_text_best_effort("café".encode("cp1252")) == "café"
    assert decode_text_best_effort("hi".encode("utf-16")) == "hi"


def test_read_archive_file_uses_path_suffix(tmp_path: Path) -> None:
    """Files on disk are read by extension."""

    path = tmp_path / "chat.txt"
    path.write_text(TRANSCRIPT, encoding="utf-8")

    assert read_archive_file(path).transcript_text == TRANSCRIPT


def test_txt_export_in_utf16_without_bom_is_decoded() -> None:
    """UTF-16 transcripts missing a BOM still parse into messages."""

    for codec in ("utf-16-le", "utf-16-be"):
        contents = read_archive(TRANSCRIPT.encode(codec), "chat.txt")

        assert contents.transcript_text == TRANSCRIPT
        assert len(parse(contents.transcript_text)) == 1


def test_utf16_without_bom_and_without_name_is_treated_as_text() -> None:
    """Sniffing recognizes BOM-less UTF-16 as a transcript."""

    contents = read_archive(TRANSCRIPT.encode("utf-16-le"))

    assert contents.transcript_text == TRANSCRIPT
