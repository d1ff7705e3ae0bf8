"""Message record shared by the parser, filters, statistics, and exporters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

# Sender assigned to lines matching the unattributed (system/meta) grammar.
SYSTEM_SENDER = "System"


@dataclass(frozen=True)
class MessageRecord:
    """One reconstructed chat message.

    Parameters
    ----------
    date:
        Date text exactly as captured from the start line (never validated).
    time:
        Time text exactly as captured, including any meridiem marker.
    sender:
        Attributed sender name, or :data:`SYSTEM_SENDER` for system lines.
    body:
        Message text. Continuation lines are joined with ``"\\n"``.
    sequence_position:
        Emission index within one parse. This is an ordering key only.
    media_references:
        Media filenames found in the body, in first-seen order.
    """

    date: str
    time: str
    sender: str
    body: str
    sequence_position: int
    media_references: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_system(self) -> bool:
        """Return True when the record carries the system sentinel sender."""
        return self.sender.lower() == SYSTEM_SENDER.lower()

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly mapping of the record's content."""
        return {
            "date": self.date,
            "time": self.time,
            "sender": self.sender,
            "message": self.body,
            "media_files": list(self.media_references),
        }
