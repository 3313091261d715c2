"""JSON snapshot and CSV export helpers."""

from __future__ import annotations

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Mapping

from ..constants import category_label
from .stats import HabitStat


def default_export_filename(moment: datetime, *, suffix: str = "json") -> str:
    """Return a timestamped file name such as ``habitpulse-export-20240103-120000.json``."""

    return f"habitpulse-export-{moment.strftime('%Y%m%d-%H%M%S')}.{suffix}"


def export_snapshot_json(*, snapshot: Mapping[str, Any], output_path: Path) -> Path:
    """Write an ``export_snapshot()`` payload as pretty-printed UTF-8 JSON.

    Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as fh:
        json.dump(snapshot, fh, ensure_ascii=False, indent=2)
        fh.write("\n")
    return output_path


def export_habit_stats_csv(*, stats: Iterable[HabitStat], output_path: Path) -> Path:
    """Write per-habit statistics to CSV at `output_path`.

    Columns are deterministic: id, name, category, category_label, percent, streak.
    Returns the path written.
    """

    headers = ["id", "name", "category", "category_label", "percent", "streak"]
    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(
            fh, fieldnames=headers, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
        )
        writer.writeheader()
        for stat in stats:
            writer.writerow(
                {
                    "id": stat.id,
                    "name": stat.name,
                    "category": stat.category,
                    "category_label": category_label(stat.category),
                    "percent": stat.percent,
                    "streak": stat.streak,
                }
            )

    return output_path


__all__ = ["default_export_filename", "export_habit_stats_csv", "export_snapshot_json"]
