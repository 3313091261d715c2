"""Chart rendering for the weekly completion series."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from .stats import WeekDay  # noqa: E402

# Empty days still get a sliver of bar so the chart keeps seven columns.
MIN_BAR_PERCENT = 5


def build_week_chart(series: Sequence[WeekDay]) -> Figure:
    """Create a bar chart of daily completion percentages, oldest day first.

    Each bar is labelled with its weekday and day of month and annotated with
    the percentage. Today's bar (the last one) is highlighted.
    """

    labels = [f"{day.day_label}\n{day.day_of_month}" for day in series]
    heights = [max(day.percent, MIN_BAR_PERCENT) for day in series]

    fig, ax = plt.subplots(figsize=(8, 4))
    colors = ["#6366f1"] * len(series)
    if colors:
        colors[-1] = "#22c55e"

    bars = ax.bar(range(len(series)), heights, color=colors, edgecolor="white", linewidth=1.0)
    for bar, day in zip(bars, series):
        ax.annotate(
            f"{day.percent}%",
            xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
            xytext=(0, 3),
            textcoords="offset points",
            ha="center",
            va="bottom",
            fontsize=9,
        )

    ax.set_xticks(range(len(series)))
    ax.set_xticklabels(labels)
    ax.set_ylim(0, 110)
    ax.set_ylabel("Completed (%)")
    ax.set_title("Last 7 days", fontsize=12, fontweight="bold")
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    fig.tight_layout()
    return fig


def export_week_png(*, series: Sequence[WeekDay], output_path: Path) -> Path:
    """Render the weekly chart to PNG and return the path written."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = build_week_chart(series)
    try:
        fig.savefig(output_path, format="png", dpi=120)
    finally:
        plt.close(fig)
    return output_path


__all__ = ["MIN_BAR_PERCENT", "build_week_chart", "export_week_png"]
