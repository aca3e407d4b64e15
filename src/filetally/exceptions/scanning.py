"""Scan-time exceptions: classification and worker accounting.

None of these cross a scan node boundary. The scanner converts them into
label counts (``classify-error``) or log records.
"""

from pathlib import Path

from .base import FileTallyError


class ScanError(FileTallyError):
    """Base class for errors raised while scanning a tree."""

    pass


class ClassificationError(ScanError):
    """Raised when a single file cannot be classified."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot classify file: {path}",
            details={"path": path, "reason": reason},
        )
        self.path = path
        self.reason = reason


class ClassifierInitError(ScanError):
    """Raised when a classifier handle cannot be opened."""

    def __init__(self, reason: str):
        super().__init__("Cannot open classifier", details={"reason": reason})
        self.reason = reason


class BudgetError(ScanError):
    """Raised when worker slots are released without a matching acquire."""

    def __init__(self, capacity: int):
        super().__init__(
            "Worker budget released more often than acquired",
            details={"capacity": capacity},
        )
        self.capacity = capacity
