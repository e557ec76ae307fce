# backend/app/services/quality.py
"""
Data-quality detectors: infinite values and duplicated values per column.
"""
from __future__ import annotations

from collections import Counter
from typing import Dict, List, Sequence, Tuple

from ..schemas.analysis import DuplicateStat, InfiniteStat, ValueCount
from .cells import Cell, Dataset, cell_key, column_values, columns_of, format_cell, format_percent, is_infinite, present_values

TOP_DUPLICATES = 5
LABEL_MAX_CHARS = 30


def value_counts(values: Sequence[Cell], limit: int | None = None) -> List[Tuple[Cell, int]]:
    """
    (value, count) pairs, most frequent first.

    Equal counts keep first-seen order; each entry carries the first
    occurrence of its value as representative.
    """
    counts: Counter = Counter()
    first_seen: Dict = {}
    for v in values:
        key = cell_key(v)
        counts[key] += 1
        first_seen.setdefault(key, v)
    # most_common() is stable for ties, and Counter preserves insertion order
    return [(first_seen[key], count) for key, count in counts.most_common(limit)]


def detect_infinite_values(dataset: Dataset) -> Tuple[bool, Dict[str, InfiniteStat]]:
    """Count +/-inf cells per column; only affected columns are reported."""
    stats: Dict[str, InfiniteStat] = {}
    total = len(dataset)
    for col in columns_of(dataset):
        count = sum(1 for v in column_values(dataset, col) if is_infinite(v))
        if count > 0:
            stats[col] = InfiniteStat(count=count, percentage=format_percent(count, total))
    return bool(stats), stats


def detect_duplicates(dataset: Dataset) -> Dict[str, DuplicateStat]:
    """Report columns whose present values repeat, with their top repeated values."""
    stats: Dict[str, DuplicateStat] = {}
    for col in columns_of(dataset):
        values = present_values(column_values(dataset, col))
        counts = value_counts(values)
        unique = len(counts)
        duplicate_count = len(values) - unique
        if duplicate_count <= 0:
            continue

        top = [
            ValueCount(value=format_cell(value)[:LABEL_MAX_CHARS], count=count)
            for value, count in counts
            if count > 1
        ][:TOP_DUPLICATES]

        stats[col] = DuplicateStat(
            duplicate_count=duplicate_count,
            duplicate_percentage=format_percent(duplicate_count, len(values)),
            total_values=len(values),
            unique_values=unique,
            top_duplicates=top,
        )
    return stats
