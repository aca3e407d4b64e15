"""Classifier adapter: content classification behind a scoped handle.

A scan node owns exactly one ClassifierHandle. The handle is opened when the
node is created and closed once, when the node has been joined.

Usage:
    with ClassifierHandle.open(SignatureClassifier) as handle:
        label = handle.label(Path("README.md"))  # "ASCII text"
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Protocol

from ..exceptions import ClassificationError, ClassifierInitError
from ..logging_config import get_logger
from .signatures import describe

logger = get_logger(__name__)

DEFAULT_SNIFF_BYTES = 4096
FALLBACK_LABEL = "data"


class Classifier(Protocol):
    """Anything that turns a file path into a content description."""

    def classify(self, path: Path) -> str:
        """Return the full description of *path*, or raise ClassificationError."""
        ...

    def close(self) -> None:
        """Release resources held by the classifier."""
        ...


ClassifierFactory = Callable[[], Classifier]


class SignatureClassifier:
    """Built-in classifier driven by the signature table in signatures.py."""

    def __init__(self, sniff_bytes: int = DEFAULT_SNIFF_BYTES) -> None:
        self.sniff_bytes = sniff_bytes
        self.closed = False

    def classify(self, path: Path) -> str:
        if self.closed:
            raise ClassificationError(path, "classifier is closed")
        try:
            with open(path, "rb") as f:
                head = f.read(self.sniff_bytes)
        except OSError as e:
            raise ClassificationError(path, f"Cannot read file: {e}") from e
        return describe(head)

    def close(self) -> None:
        self.closed = True


def normalize_label(description: str, separators: str = ",") -> str:
    """Shorten a verbose description to its leading category.

    >>> normalize_label("PNG image data, 16 x 16, 8-bit/color RGBA")
    'PNG image data'
    """
    cut = len(description)
    for sep in separators:
        idx = description.find(sep)
        if idx != -1 and idx < cut:
            cut = idx
    return description[:cut].strip() or FALLBACK_LABEL


def open_classifier(factory: ClassifierFactory) -> Classifier:
    """Call *factory*, reporting any failure as ClassifierInitError."""
    try:
        return factory()
    except ClassifierInitError:
        raise
    except Exception as e:
        raise ClassifierInitError(f"{type(e).__name__}: {e}") from e


class ClassifierHandle:
    """Scoped, close-once wrapper around a Classifier."""

    def __init__(self, classifier: Classifier, separators: str = ",") -> None:
        self._classifier: Optional[Classifier] = classifier
        self.separators = separators

    @classmethod
    def open(cls, factory: ClassifierFactory, separators: str = ",") -> "ClassifierHandle":
        """Open a handle from *factory*.

        Raises:
            ClassifierInitError: If the factory fails
        """
        return cls(open_classifier(factory), separators=separators)

    @property
    def closed(self) -> bool:
        return self._classifier is None

    def label(self, path: Path) -> str:
        """Classify *path* and return its short label.

        Raises:
            ClassificationError: If the file cannot be classified
        """
        if self._classifier is None:
            raise ClassificationError(path, "classifier handle is closed")
        try:
            description = self._classifier.classify(path)
        except ClassificationError:
            raise
        except Exception as e:
            # Third-party classifiers raise whatever they like
            raise ClassificationError(path, f"{type(e).__name__}: {e}") from e
        return normalize_label(description, self.separators)

    def close(self) -> None:
        """Release the underlying classifier. Safe to call more than once."""
        classifier, self._classifier = self._classifier, None
        if classifier is None:
            return
        try:
            classifier.close()
        except Exception as e:
            logger.warning(f"Error closing classifier: {e}")

    def __enter__(self) -> "ClassifierHandle":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
