"""Data models for the scanning layer."""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

# Reserved pseudo-labels for entries that are not classified by content
SYMLINK = "symlink"
OTHER = "other"
WALK_ERROR = "walk-error"
CLASSIFY_ERROR = "classify-error"

PSEUDO_LABELS = frozenset({SYMLINK, OTHER, WALK_ERROR, CLASSIFY_ERROR})


class NodeState(Enum):
    """Lifecycle of a ScanNode."""

    CREATED = "created"
    WALKING = "walking"
    DISPATCHED = "dispatched"
    JOINING = "joining"
    MERGED = "merged"


@dataclass
class ScanResult:
    """Outcome of scanning one root directory."""

    root: Path
    workers: int
    join_mode: str
    label_counts: Counter = field(default_factory=Counter)
    entries: int = 0
    directories: int = 0
    dispatched: int = 0
    elapsed_seconds: float = 0.0

    @property
    def total(self) -> int:
        """Sum of all label counts."""
        return sum(self.label_counts.values())

    @property
    def error_count(self) -> int:
        return self.label_counts[WALK_ERROR] + self.label_counts[CLASSIFY_ERROR]
