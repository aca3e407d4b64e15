"""Ranking of merged label counts."""

from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_TOP = 10


@dataclass(frozen=True)
class RankedLabel:
    """One line of the report: 1-based rank, label and its count."""

    rank: int
    label: str
    count: int


def rank_labels(counts: Mapping[str, int], limit: int = DEFAULT_TOP) -> list[RankedLabel]:
    """Sort labels by count, most frequent first.

    The sort is stable, so equal counts keep the mapping's insertion order.
    Returns at most ``min(limit, len(counts))`` entries.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [
        RankedLabel(rank=i, label=label, count=count)
        for i, (label, count) in enumerate(ordered[:limit], start=1)
    ]
