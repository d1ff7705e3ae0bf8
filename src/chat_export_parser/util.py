"""Output location and JSON writing helpers for the command line."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping


def default_output_dir(src: Path) -> Path:
    """Return the ``<stem>_parsed`` directory next to ``src``."""

    return src.with_name(src.stem + "_parsed")


def write_json(path: Path, payload: Mapping[str, Any]) -> Path:
    """Write ``payload`` as indented UTF-8 JSON, creating parent folders."""

    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    path.write_text(text + "\n", encoding="utf-8")
    return path
