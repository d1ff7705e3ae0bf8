"""Chat export parsing package metadata and public exports."""

from .archive import (
    ArchiveContents,
    ArchiveError,
    NoTranscriptFound,
    UnsupportedFormat,
    read_archive,
)
from .assembler import iter_records, parse, parse_raw
from .export import ExportFormat, write_bundle
from .filters import filter_records, is_excluded
from .media import extract_media_references
from .models import SYSTEM_SENDER, MessageRecord
from .stats import MessageStats, SenderCount, compute_stats
