"""
Tests for statistics chart rendering.
"""

from __future__ import annotations

from pathlib import Path

from chat_export_parser.plots import (
    render_daily_frequency_chart,
    render_hourly_activity_chart,
    render_top_senders_chart,
)
from chat_export_parser.stats import MessageStats, SenderCount


def test_charts_are_written_as_png(tmp_path: Path) -> None:
    """Each renderer writes a PNG file when it has data."""

    stats = MessageStats(
        total_kept=3,
        unique_senders=2,
        top_senders=[SenderCount("Alice", 2), SenderCount("Bob", 1)],
    )
    buckets = [0] * 24
    buckets[10] = 3

    top = tmp_path / "charts" / "top.png"
    daily = tmp_path / "charts" / "daily.png"
    hourly = tmp_path / "charts" / "hourly.png"

    assert render_top_senders_chart(stats, top) is True
    assert render_daily_frequency_chart({"1/2/2023": 2, "1/3/2023": 1}, daily)
    assert render_hourly_activity_chart(buckets, hourly) is True
    for path in (top, daily, hourly):
        assert path.read_bytes().startswith(b"\x89PNG")


def test_empty_inputs_skip_rendering(tmp_path: Path) -> None:
    """Nothing is written when there is nothing to plot."""

    out = tmp_path / "empty.png"

    assert render_top_senders_chart(MessageStats(0, 0), out) is False
    assert render_daily_frequency_chart({}, out) is False
    assert render_hourly_activity_chart([0] * 24, out) is False
    assert not out.exists()
