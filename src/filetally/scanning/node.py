"""ScanNode: one directory of the recursive, budget-bounded traversal.

Lifecycle:
    CREATED   classifier handle opened
    WALKING   immediate entries listed and counted (inline or on a worker)
    DISPATCHED walk handed to a worker thread holding a budget slot
    JOINING   worker awaited, children joined and absorbed in discovery order
    MERGED    label_counts holds the whole subtree; classifier handle closed

A worker slot is released as soon as the node's own walk returns. Children
hold their own slots, so a parent never waits on its descendants while
keeping a slot busy.

Join modes:
    deferred   children are started during the walk and joined afterwards,
               so sibling subtrees run side by side
    immediate  every child is joined right after it is started

Label totals are identical in both modes because merging is a commutative
sum of counters.
"""

from __future__ import annotations

import os
import threading
from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..classification import ClassifierFactory, ClassifierHandle
from ..exceptions import ClassificationError, ClassifierInitError
from ..logging_config import get_logger
from .budget import WorkerBudget
from .models import CLASSIFY_ERROR, OTHER, SYMLINK, WALK_ERROR, NodeState

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScanContext:
    """Shared, read-only settings handed from a node to its children."""

    budget: WorkerBudget
    classifier_factory: ClassifierFactory
    join_mode: str = "deferred"
    label_separators: str = ","


class ScanNode:
    """A directory whose subtree is scanned and merged exactly once.

    Attributes:
        path: Directory this node scans
        entry_count: Entries seen while walking this directory
        label_counts: Directly observed counts, then subtree totals once joined
        children: Child nodes in discovery order
        dispatched: Whether the walk ran on a worker holding a budget slot
    """

    def __init__(self, path: Path | str, context: ScanContext) -> None:
        self.path = Path(path)
        self.context = context
        self.entry_count = 0
        self.label_counts: Counter = Counter()
        self.children: list[ScanNode] = []
        self.state = NodeState.CREATED
        self.dispatched = False
        self._worker: Optional[threading.Thread] = None
        self._failure: Optional[BaseException] = None
        self._absorbed = False
        self._classifier: Optional[ClassifierHandle] = None

        try:
            self._classifier = ClassifierHandle.open(
                context.classifier_factory, separators=context.label_separators
            )
        except ClassifierInitError as e:
            logger.warning(f"{e}; files in {self.path} will count as {CLASSIFY_ERROR}")

    @property
    def absorbed(self) -> bool:
        """True once this node's counts have been moved into its parent."""
        return self._absorbed

    @property
    def classifier_closed(self) -> bool:
        return self._classifier is None or self._classifier.closed

    # ── Dispatch ───────────────────────────────────────────────

    def start(self) -> None:
        """Walk this directory, on a worker if the budget has a free slot."""
        if self.state is not NodeState.CREATED:
            raise RuntimeError(f"ScanNode for {self.path} already started")

        if self._try_dispatch():
            return
        logger.debug(f"Walking {self.path} inline")
        self._walk()

    def _try_dispatch(self) -> bool:
        if not self.context.budget.try_acquire():
            return False

        self.dispatched = True
        self.state = NodeState.DISPATCHED
        self._worker = threading.Thread(
            target=self._run_worker,
            name=f"filetally-{self.path.name or self.path}",
            daemon=True,
        )
        logger.debug(f"Dispatching {self.path} to {self._worker.name}")
        self._worker.start()
        return True

    def _run_worker(self) -> None:
        try:
            self._walk()
        except BaseException as e:
            # Re-raised on the joining thread
            self._failure = e
        finally:
            self.context.budget.release()

    # ── Walking ────────────────────────────────────────────────

    def _walk(self) -> None:
        """Walk this directory and every descendant that is not dispatched.

        Inline descendants are kept on an explicit stack of pending listings,
        so tree depth never grows the call stack.
        """
        listings = [(self, self._list())]
        while listings:
            node, entries = listings[-1]
            entry = next(entries, None)
            if entry is None:
                listings.pop()
                if node is not self and self.context.join_mode == "immediate":
                    node.join()
                continue
            child = node._visit(entry)
            if child is not None:
                logger.debug(f"Walking {child.path} inline")
                listings.append((child, child._list()))

    def _list(self) -> Iterator[os.DirEntry]:
        """Read this directory's entries; listing failures count as walk-error."""
        self.state = NodeState.WALKING
        listed: list[os.DirEntry] = []
        try:
            with os.scandir(self.path) as entries:
                for entry in entries:
                    listed.append(entry)
        except OSError as e:
            logger.debug(f"Cannot list {self.path}: {e}")
            self.label_counts[WALK_ERROR] += 1
        self.entry_count += len(listed)
        return iter(listed)

    def _visit(self, entry: os.DirEntry) -> Optional[ScanNode]:
        """Count one entry.

        Returns:
            A child node that the caller must walk inline, or None
        """
        try:
            if entry.is_symlink():
                self.label_counts[SYMLINK] += 1
                return None
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = not is_dir and entry.is_file(follow_symlinks=False)
        except OSError as e:
            logger.debug(f"Cannot inspect {entry.path}: {e}")
            self.label_counts[WALK_ERROR] += 1
            return None

        if is_dir:
            return self._descend(Path(entry.path))
        if is_file:
            self._classify(Path(entry.path))
        else:
            self.label_counts[OTHER] += 1
        return None

    def _descend(self, path: Path) -> Optional[ScanNode]:
        child = ScanNode(path, self.context)
        self.children.append(child)
        if not child._try_dispatch():
            return child
        if self.context.join_mode == "immediate":
            child.join()
        return None

    def _classify(self, path: Path) -> None:
        if self._classifier is None:
            self.label_counts[CLASSIFY_ERROR] += 1
            return
        try:
            label = self._classifier.label(path)
        except ClassificationError as e:
            logger.debug(str(e))
            self.label_counts[CLASSIFY_ERROR] += 1
            return
        self.label_counts[label] += 1

    # ── Joining ────────────────────────────────────────────────

    def join(self) -> Counter:
        """Wait for this subtree and merge it into label_counts.

        Descendants are joined in post-order from an explicit stack, and
        every node absorbs its children in discovery order. Idempotent: a
        node that already reached MERGED returns its counts without merging
        anything again.

        Returns:
            This node's label counts (subtree totals until absorbed by a parent)
        """
        if self.state is NodeState.MERGED:
            return self.label_counts
        if self.state is NodeState.CREATED:
            raise RuntimeError(f"ScanNode for {self.path} joined before start()")

        pending: list[tuple[ScanNode, bool]] = [(self, False)]
        try:
            while pending:
                node, expanded = pending.pop()
                if expanded:
                    node._merge()
                    continue
                if node.state is NodeState.MERGED:
                    continue
                node._await_worker()
                node.state = NodeState.JOINING
                pending.append((node, True))
                pending.extend((child, False) for child in reversed(node.children))
        except BaseException:
            # Ancestors that were mid-join still release their classifiers
            for node, expanded in pending:
                if expanded:
                    node._close_classifier()
            raise

        return self.label_counts

    def _await_worker(self) -> None:
        if self._worker is not None:
            self._worker.join()
            self._worker = None

    def _merge(self) -> None:
        try:
            for child in self.children:
                self._absorb(child)
        finally:
            self._close_classifier()

        if self._failure is not None:
            failure, self._failure = self._failure, None
            raise failure

        self.state = NodeState.MERGED
        logger.debug(f"Joined {self.path} ({sum(self.label_counts.values())} entries counted)")

    def _close_classifier(self) -> None:
        if self._classifier is not None:
            self._classifier.close()

    def _absorb(self, child: ScanNode) -> None:
        if child._absorbed:
            return
        self.label_counts.update(child.label_counts)
        child.label_counts.clear()
        child._absorbed = True

    # ── Structure ──────────────────────────────────────────────

    def iter_nodes(self) -> Iterator[ScanNode]:
        """Yield this node and every descendant, parents before children."""
        stack: list[ScanNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def __repr__(self) -> str:
        return f"ScanNode(path={str(self.path)!r}, state={self.state.value})"
