"""Bounded-parallel recursive directory scanning."""

from .budget import WorkerBudget
from .models import (
    CLASSIFY_ERROR,
    OTHER,
    PSEUDO_LABELS,
    SYMLINK,
    WALK_ERROR,
    NodeState,
    ScanResult,
)
from .node import ScanContext, ScanNode
from .scanner import TreeScanner, scan_tree

__all__ = [
    "WorkerBudget",
    "ScanContext",
    "ScanNode",
    "NodeState",
    "ScanResult",
    "TreeScanner",
    "scan_tree",
    "SYMLINK",
    "OTHER",
    "WALK_ERROR",
    "CLASSIFY_ERROR",
    "PSEUDO_LABELS",
]
