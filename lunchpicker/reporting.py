"""Output reporting helpers."""
from __future__ import annotations

import csv
import json
import os
import tempfile
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional, TextIO

from .models import RestaurantRecord

RESULT_FIELDNAMES = ["name", "rating", "website", "distance_text", "duration_text"]


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


@contextmanager
def atomic_writer(
    path: str,
    mode: str = "w",
    encoding: str = "utf-8",
    newline: Optional[str] = None,
) -> Iterator[TextIO]:
    dir_path = os.path.dirname(path) or "."
    base = os.path.basename(path)
    fd, tmp_path = tempfile.mkstemp(prefix=f".{base}.", suffix=".tmp", dir=dir_path)
    try:
        with os.fdopen(fd, mode, encoding=encoding, newline=newline) as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except Exception:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def atomic_write_text(path: str, text: str) -> None:
    with atomic_writer(path, mode="w", encoding="utf-8") as f:
        f.write(text)


def write_results_json(path: str, records: Iterable[RestaurantRecord]) -> None:
    with atomic_writer(path, mode="w", encoding="utf-8") as f:
        json.dump([r.to_row() for r in records], f, ensure_ascii=False, indent=2)


def write_results_csv(path: str, records: Iterable[RestaurantRecord]) -> None:
    with atomic_writer(path, mode="w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=RESULT_FIELDNAMES)
        writer.writeheader()
        for record in records:
            row = record.to_row()
            row["rating"] = "" if row["rating"] is None else row["rating"]
            row["website"] = row["website"] or ""
            writer.writerow(row)


def write_summary(path: str, summary_lines: List[str]) -> None:
    atomic_write_text(path, "\n".join(summary_lines))


def render_results(records: Iterable[RestaurantRecord]) -> List[str]:
    lines = []
    for idx, record in enumerate(records, start=1):
        rating = "n/a" if record.rating is None else f"{record.rating:.1f}"
        line = f"{idx}. {record.name} rating={rating} walk={record.distance_text} / {record.duration_text}"
        if record.website:
            line += f" {record.website}"
        lines.append(line)
    return lines
