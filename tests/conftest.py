"""Shared test fixtures for filetally scanning tests."""

import threading
from pathlib import Path
from typing import Union

import pytest

from filetally.exceptions import ClassificationError

Tree = dict[str, Union[str, bytes, "Tree"]]


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def build_tree(root: Path, layout: Tree) -> Path:
    """Create files (str/bytes values) and directories (dict values) under root."""
    root.mkdir(parents=True, exist_ok=True)
    for name, value in layout.items():
        target = root / name
        if isinstance(value, dict):
            build_tree(target, value)
        elif isinstance(value, bytes):
            target.write_bytes(value)
        else:
            target.write_text(value)
    return root


class ContentClassifier:
    """Labels a file by its text content; ``!fail`` files cannot be classified.

    A pure function of file content, so counts can be predicted exactly.
    """

    instances: list["ContentClassifier"] = []
    _lock = threading.Lock()

    def __init__(self) -> None:
        self.close_calls = 0
        with ContentClassifier._lock:
            ContentClassifier.instances.append(self)

    def classify(self, path: Path) -> str:
        content = path.read_text().strip()
        if content.startswith("!fail"):
            raise ClassificationError(path, "refused by test classifier")
        return content

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def content_classifier():
    """Factory for ContentClassifier with a fresh instance registry."""
    ContentClassifier.instances = []
    yield ContentClassifier
    ContentClassifier.instances = []


@pytest.fixture
def make_tree(tmp_path):
    """Build a directory tree from a nested dict under tmp_path."""

    def _make(layout: Tree, name: str = "root") -> Path:
        return build_tree(tmp_path / name, layout)

    return _make


@pytest.fixture
def nested_tree(make_tree):
    """Three levels deep, several directories per level."""
    return make_tree(
        {
            "readme": "text",
            "logo": "image",
            "a": {
                "one": "text",
                "two": "code",
                "aa": {"deep": "code", "deeper": "image", "aaa": {"leaf": "text"}},
                "ab": {"x": "text"},
            },
            "b": {
                "three": "archive",
                "ba": {"y": "text", "z": "!fail"},
                "bb": {},
            },
            "c": {"ca": {"cb": {"cc": "code"}}},
        }
    )


@pytest.fixture
def nested_tree_counts():
    """Expected subtree totals for nested_tree."""
    return {"text": 5, "image": 2, "code": 3, "archive": 1, "classify-error": 1}


@pytest.fixture
def deep_levels():
    """Nesting depth well past the default recursion limit."""
    return 1000


@pytest.fixture
def deep_chain(tmp_path, deep_levels):
    """A chain of deep_levels nested directories with one text file at the bottom."""
    root = tmp_path / "deep"
    levels = [root]
    root.mkdir()
    for _ in range(deep_levels):
        levels.append(levels[-1] / "d")
        levels[-1].mkdir()
    leaf = levels[-1] / "leaf"
    leaf.write_text("text")
    yield root
    # shutil.rmtree recurses once per level on Python 3.11 and 3.12
    leaf.unlink()
    for level in reversed(levels):
        level.rmdir()
