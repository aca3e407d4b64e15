"""Configuration exceptions: config files, settings and output paths."""

from pathlib import Path
from typing import Any, Optional

from .base import FileTallyError


class ConfigurationError(FileTallyError):
    """Raised before any directory is walked; the CLI exits with code 1."""

    pass


class InvalidPathError(ConfigurationError):
    """A config file or log file path that cannot be used.

    ``option`` names where the path came from (``--config``, ``--log-file``)
    so the message points at the flag to fix.
    """

    def __init__(self, path: Path, reason: str, option: Optional[str] = None):
        source = f"{option} path" if option else "path"
        super().__init__(f"Unusable {source}: {path}", details={"reason": reason})
        self.path = path
        self.reason = reason
        self.option = option


class InvalidConfigError(ConfigurationError):
    """A setting whose value fails ScanConfig validation."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value!r}",
            details={"reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason
