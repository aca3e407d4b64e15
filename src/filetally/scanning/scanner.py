"""TreeScanner: scan one root directory and collect its label totals."""

from __future__ import annotations

import time
from functools import partial
from pathlib import Path
from typing import Optional

from ..classification import ClassifierFactory, SignatureClassifier
from ..config import DEFAULT_CONFIG, ScanConfig
from ..logging_config import get_logger
from .budget import WorkerBudget
from .models import ScanResult
from .node import ScanContext, ScanNode

logger = get_logger(__name__)


class TreeScanner:
    """Runs a bounded-parallel scan of a directory tree.

    Args:
        config: Scan configuration (defaults to DEFAULT_CONFIG)
        classifier_factory: Opens one classifier per directory node; defaults
            to the built-in SignatureClassifier
        budget: Worker budget to draw from; a fresh one sized from
            ``config.effective_workers`` is created per scan when omitted
    """

    def __init__(
        self,
        config: Optional[ScanConfig] = None,
        classifier_factory: Optional[ClassifierFactory] = None,
        budget: Optional[WorkerBudget] = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.classifier_factory = classifier_factory or partial(
            SignatureClassifier, sniff_bytes=self.config.sniff_bytes
        )
        self.budget = budget
        self.last_tree: Optional[ScanNode] = None

    def scan(self, root: Path | str) -> ScanResult:
        """Scan *root* to completion and return its merged label counts.

        Walk and classification failures are counted, never raised.
        """
        root = Path(root)
        budget = self.budget if self.budget is not None else WorkerBudget(
            self.config.effective_workers
        )
        context = ScanContext(
            budget=budget,
            classifier_factory=self.classifier_factory,
            join_mode=self.config.join_mode,
            label_separators=self.config.label_separators,
        )

        logger.info(
            f"Scanning {root} with {budget.capacity} workers ({self.config.join_mode} joins)"
        )
        t0 = time.perf_counter()
        tree = ScanNode(root, context)
        tree.start()
        counts = tree.join()
        elapsed = time.perf_counter() - t0

        if self.budget is None and budget.available != budget.capacity:
            logger.warning(
                f"Worker budget not conserved: {budget.available}/{budget.capacity} free after scan"
            )

        entries = directories = dispatched = 0
        for node in tree.iter_nodes():
            entries += node.entry_count
            directories += 1
            dispatched += node.dispatched

        self.last_tree = tree
        result = ScanResult(
            root=root,
            workers=budget.capacity,
            join_mode=self.config.join_mode,
            label_counts=counts.copy(),
            entries=entries,
            directories=directories,
            dispatched=dispatched,
            elapsed_seconds=elapsed,
        )
        logger.info(
            f"Scanned {entries} entries in {directories} directories "
            f"({dispatched} on workers) in {elapsed:.2f}s"
        )
        if result.error_count:
            logger.info(f"{result.error_count} entries could not be walked or classified")
        return result


def scan_tree(
    root: Path | str,
    config: Optional[ScanConfig] = None,
    classifier_factory: Optional[ClassifierFactory] = None,
    budget: Optional[WorkerBudget] = None,
) -> ScanResult:
    """Convenience wrapper: ``TreeScanner(...).scan(root)``."""
    return TreeScanner(config, classifier_factory=classifier_factory, budget=budget).scan(root)
