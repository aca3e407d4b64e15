"""
filetally - content-type census of a directory tree

Walks a directory tree with a bounded pool of worker threads, labels every
regular file by its content and ranks the most frequent labels.
"""

__version__ = "0.1.0"

from .config import ScanConfig, load_config
from .report import RankedLabel, rank_labels
from .scanning import ScanNode, ScanResult, TreeScanner, WorkerBudget, scan_tree

__all__ = [
    "scan_tree",  # Main entry point
    "TreeScanner",
    "ScanNode",
    "ScanResult",
    "WorkerBudget",
    "ScanConfig",
    "load_config",
    "RankedLabel",
    "rank_labels",
]
