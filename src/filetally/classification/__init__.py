"""Content classification: the collaborator that labels regular files."""

from .classifier import (
    Classifier,
    ClassifierFactory,
    ClassifierHandle,
    SignatureClassifier,
    normalize_label,
    open_classifier,
)
from .signatures import describe

__all__ = [
    "Classifier",
    "ClassifierFactory",
    "ClassifierHandle",
    "SignatureClassifier",
    "describe",
    "normalize_label",
    "open_classifier",
]
