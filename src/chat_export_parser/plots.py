"""
Matplotlib-based chart rendering for message statistics.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Sequence

import matplotlib.pyplot as plt

from .stats import MessageStats

logger = logging.getLogger(__name__)

# Primary series colors.
COLOR_PRIMARY = "#16a34a"
COLOR_SECONDARY = "#2563eb"


def _save(fig, output_path: Path) -> None:
    fig.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    logger.info("Saved chart to %s", output_path)


def render_top_senders_chart(stats: MessageStats, output_path: Path) -> bool:
    """Render a horizontal bar chart of the most active senders.

    Parameters
    ----------
    stats:
        Statistics whose ``top_senders`` are plotted, most active on top.
    output_path:
        Path where the PNG chart should be written.

    Returns
    -------
    bool
        True if a chart was written.
    """

    if not stats.top_senders:
        logger.warning("No senders counted; skipping top senders chart.")
        return False

    plt.switch_backend("Agg")
    labels = [entry.sender for entry in reversed(stats.top_senders)]
    values = [entry.count for entry in reversed(stats.top_senders)]

    height = max(3.0, 0.6 * len(labels) + 1.5)
    fig, ax = plt.subplots(figsize=(7.0, height))
    ax.barh(labels, values, color=COLOR_PRIMARY)
    ax.set_xlabel("Messages")
    ax.set_title("Top Senders")
    ax.set_xlim(0, max(values) * 1.15)
    _save(fig, output_path)
    return True


def render_daily_frequency_chart(counts: Dict[str, int], output_path: Path) -> bool:
    """Render messages per day as a line chart, in transcript order.

    The x axis uses the literal date labels from the transcript.
    """

    if not counts:
        logger.warning("No dated messages; skipping daily frequency chart.")
        return False

    plt.switch_backend("Agg")
    labels = list(counts.keys())
    values = [counts[label] for label in labels]

    width = max(6.0, 0.35 * len(labels))
    fig, ax = plt.subplots(figsize=(width, 4.5))
    ax.plot(range(len(labels)), values, marker="o", color=COLOR_PRIMARY)
    ax.set_ylabel("Messages")
    ax.set_title("Message Frequency Over Time")
    ax.set_xticks(range(len(labels)))
    ax.set_xticklabels(labels, rotation=45, ha="right")
    ax.set_ylim(0, max(values) * 1.15)
    _save(fig, output_path)
    return True


def render_hourly_activity_chart(buckets: Sequence[int], output_path: Path) -> bool:
    """Render a 24-bar chart of messages per hour of day."""

    if not any(buckets):
        logger.warning("No parseable message times; skipping hourly chart.")
        return False

    plt.switch_backend("Agg")
    labels = [f"{hour:02d}:00" for hour in range(len(buckets))]
    fig, ax = plt.subplots(figsize=(9.0, 4.5))
    ax.bar(labels, list(buckets), color=COLOR_SECONDARY)
    ax.set_ylabel("Messages")
    ax.set_title("Most Active Hours")
    ax.set_xticks(range(len(labels)))
    ax.set_xticklabels(labels, rotation=90)
    _save(fig, output_path)
    return True
