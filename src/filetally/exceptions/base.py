"""Base exception for filetally."""

from typing import Any, Dict, Optional


class FileTallyError(Exception):
    """Base exception for all filetally errors.

    ``details`` values may be paths, counts or any other object; they are
    stored as strings so messages render the same on every thread that logs
    them. Empty values are left out of ``str()``.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = {k: str(v) for k, v in (details or {}).items() if v is not None}

    def __str__(self) -> str:
        shown = [f"{k}={v}" for k, v in self.details.items() if v]
        if shown:
            return f"{self.message} ({', '.join(shown)})"
        return self.message
