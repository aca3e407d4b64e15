"""Exception hierarchy for filetally."""

from .base import FileTallyError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)
from .scanning import (
    BudgetError,
    ClassificationError,
    ClassifierInitError,
    ScanError,
)

__all__ = [
    "FileTallyError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "ScanError",
    "ClassificationError",
    "ClassifierInitError",
    "BudgetError",
]
