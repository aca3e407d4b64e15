"""End-to-end tests for TreeScanner."""

import os
from collections import Counter
from pathlib import Path

import pytest

from filetally.classification import ClassifierHandle
from filetally.config import ScanConfig
from filetally.exceptions import ClassificationError
from filetally.report import rank_labels
from filetally.scanning import (
    CLASSIFY_ERROR,
    SYMLINK,
    WALK_ERROR,
    TreeScanner,
    WorkerBudget,
    scan_tree,
)


def _independent_counts(root: Path, factory) -> Counter:
    """Count labels with os.walk, one classifier call per file."""
    counts: Counter = Counter()
    with ClassifierHandle.open(factory) as handle:
        for dirpath, dirnames, filenames in os.walk(root):
            for name in dirnames + filenames:
                path = Path(dirpath) / name
                if path.is_symlink():
                    counts[SYMLINK] += 1
                elif path.is_file():
                    try:
                        counts[handle.label(path)] += 1
                    except ClassificationError:
                        counts[CLASSIFY_ERROR] += 1
    return counts


class TestScenarios:
    def test_empty_directory(self, make_tree, content_classifier):
        result = scan_tree(make_tree({}), ScanConfig(workers=2), content_classifier)
        assert result.label_counts == {}
        assert result.entries == 0
        assert result.directories == 1
        assert rank_labels(result.label_counts) == []

    def test_three_files_and_a_symlink(self, make_tree, content_classifier):
        root = make_tree({"notes": "text", "todo": "text", "photo": "image"})
        os.symlink(root / "photo", root / "shortcut")
        result = scan_tree(root, ScanConfig(workers=2), content_classifier)
        assert dict(result.label_counts) == {"text": 2, "image": 1, SYMLINK: 1}

    def test_unlistable_subdirectory_keeps_going(self, make_tree, content_classifier, monkeypatch):
        root = make_tree({"a": "text", "secret": {"b": "text"}, "c": {"d": "image"}})
        real_scandir = os.scandir

        def scandir(path):
            if Path(path).name == "secret":
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", scandir)
        result = scan_tree(root, ScanConfig(workers=4), content_classifier)
        assert result.label_counts[WALK_ERROR] >= 1
        assert result.label_counts["text"] == 1
        assert result.label_counts["image"] == 1

    def test_budget_one_matches_budget_eight(self, nested_tree, content_classifier):
        small = scan_tree(nested_tree, ScanConfig(workers=1), content_classifier)
        large = scan_tree(nested_tree, ScanConfig(workers=8), content_classifier)
        assert small.label_counts == large.label_counts
        assert small.workers == 1
        assert large.workers == 8

    def test_deep_tree_completes(self, deep_chain, deep_levels, content_classifier):
        result = scan_tree(deep_chain, ScanConfig(workers=0), content_classifier)
        assert dict(result.label_counts) == {"text": 1}
        assert result.directories == deep_levels + 1


class TestCommutativity:
    @pytest.mark.parametrize("workers", [0, 1, 4])
    @pytest.mark.parametrize("join_mode", ["deferred", "immediate"])
    def test_matches_independent_count(self, nested_tree, content_classifier, workers, join_mode):
        os.symlink(nested_tree / "a", nested_tree / "b" / "to-a")
        config = ScanConfig(workers=workers, join_mode=join_mode)
        result = TreeScanner(config, content_classifier).scan(nested_tree)
        assert result.label_counts == _independent_counts(nested_tree, content_classifier)

    def test_builtin_classifier_matches_independent_count(self, make_tree):
        root = make_tree(
            {
                "a.txt": "hello\n",
                "b.png": b"\x89PNG\r\n\x1a\n" + b"\x00" * 24,
                "sub": {"c.gz": b"\x1f\x8b\x08\x00" + b"\x00" * 8, "d": "", "e.txt": "x"},
            }
        )
        scanner = TreeScanner(ScanConfig(workers=2))
        result = scanner.scan(root)
        assert result.label_counts == _independent_counts(root, scanner.classifier_factory)
        assert result.label_counts["ASCII text"] == 2
        assert result.label_counts["PNG image data"] == 1
        assert result.label_counts["gzip compressed data"] == 1
        assert result.label_counts["empty"] == 1


class TestScanResult:
    def test_structure_counts(self, nested_tree, content_classifier):
        result = scan_tree(nested_tree, ScanConfig(workers=0), content_classifier)
        # root, a, aa, aaa, ab, b, ba, bb, c, ca, cb
        assert result.directories == 11
        assert result.dispatched == 0
        assert result.entries == 12 + 10
        assert result.total == 12
        assert result.error_count == 1

    def test_last_tree_kept(self, nested_tree, content_classifier):
        scanner = TreeScanner(ScanConfig(workers=2), content_classifier)
        result = scanner.scan(nested_tree)
        assert scanner.last_tree is not None
        assert scanner.last_tree.label_counts == result.label_counts

    def test_shared_budget_conserved(self, nested_tree, content_classifier):
        budget = WorkerBudget(3)
        scanner = TreeScanner(ScanConfig(), content_classifier, budget=budget)
        first = scanner.scan(nested_tree)
        second = scanner.scan(nested_tree)
        assert budget.available == 3
        assert first.label_counts == second.label_counts
        assert first.workers == 3

    def test_separators_from_config(self, make_tree, content_classifier):
        root = make_tree({"a": "ELF 64-bit; dynamically linked", "b": "ELF 64-bit, static"})
        result = scan_tree(root, ScanConfig(workers=0, label_separators=",;"), content_classifier)
        assert dict(result.label_counts) == {"ELF 64-bit": 2}

    def test_result_counts_survive_rescan(self, nested_tree, nested_tree_counts, content_classifier):
        scanner = TreeScanner(ScanConfig(workers=2), content_classifier)
        result = scanner.scan(nested_tree)
        scanner.scan(nested_tree)
        assert dict(result.label_counts) == nested_tree_counts


@pytest.mark.slow
def test_wide_and_deep_tree(tmp_path, content_classifier):
    """Many directories, many workers: totals stay exact."""
    root = tmp_path / "big"
    expected: Counter = Counter()
    for i in range(40):
        for j in range(10):
            d = root / f"d{i}" / f"e{j}"
            d.mkdir(parents=True)
            for k in range(5):
                label = f"kind{(i + j + k) % 7}"
                (d / f"f{k}").write_text(label)
                expected[label] += 1

    for workers in (1, 8, 64):
        result = scan_tree(root, ScanConfig(workers=workers), content_classifier)
        assert result.label_counts == expected
