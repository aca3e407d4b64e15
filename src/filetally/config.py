"""Configuration loading and management for filetally.

Configuration sources are merged in priority order:
    1. Defaults (defined in ScanConfig)
    2. Global config (~/.filetally.toml)
    3. Project config (./filetally.toml)
    4. Explicit config file
    5. Environment variables (FILETALLY_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(workers=0, quiet=True)
    >>> config.effective_workers
    0
    >>> config.verbosity
    'quiet'
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError, InvalidPathError

Verbosity = Literal["quiet", "normal", "verbose"]
JoinMode = Literal["deferred", "immediate"]

JOIN_MODES = ("deferred", "immediate")
VERBOSITIES = ("quiet", "normal", "verbose")

ENV_PREFIX = "FILETALLY_"
GLOBAL_CONFIG_NAME = ".filetally.toml"
PROJECT_CONFIG_NAME = "filetally.toml"

INTEGER_FIELDS = ("workers", "top", "sniff_bytes")


def detect_parallelism() -> int:
    """Number of hardware threads, never less than one."""
    return os.cpu_count() or 1


@dataclass(frozen=True)
class ScanConfig:
    """Configuration for a single scan-then-report run.

    Attributes:
        workers: Worker budget. None = detected hardware parallelism,
            0 = walk every directory inline on the calling thread.
        top: Number of ranked labels to report.
        join_mode: "deferred" starts every child of a directory before
            joining any of them; "immediate" joins each child right after
            starting it.
        label_separators: Characters that end the short label taken from a
            classifier description.
        sniff_bytes: Leading bytes read by the built-in classifier.
        verbosity: Logging verbosity level.
    """

    workers: Optional[int] = None
    top: int = 10
    join_mode: JoinMode = "deferred"
    label_separators: str = ","
    sniff_bytes: int = 4096
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        for name in INTEGER_FIELDS:
            value = getattr(self, name)
            if value is None and name == "workers":
                continue
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an integer, got {value!r}")

        if self.workers is not None and self.workers < 0:
            raise ValueError("workers must be non-negative")
        if self.top < 1:
            raise ValueError("top must be at least 1")
        if self.join_mode not in JOIN_MODES:
            raise ValueError(f"join_mode must be one of: {', '.join(JOIN_MODES)}")
        if not self.label_separators:
            raise ValueError("label_separators must not be empty")
        if self.sniff_bytes < 16:
            raise ValueError("sniff_bytes must be at least 16")
        if self.verbosity not in VERBOSITIES:
            raise ValueError(f"verbosity must be one of: {', '.join(VERBOSITIES)}")

    @property
    def effective_workers(self) -> int:
        """Worker budget with auto-detection resolved."""
        if self.workers is None:
            return detect_parallelism()
        return self.workers


DEFAULT_CONFIG = ScanConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> ScanConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated ScanConfig instance

    Raises:
        ConfigurationError: If a config source is unreadable or invalid
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        merged.update(_load_toml_file(global_config, "global config"))

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config, "project config"))

    if config_file is not None:
        if not config_file.exists():
            raise InvalidPathError(config_file, "config file not found", option="--config")
        merged.update(_load_toml_file(config_file, "config file"))

    merged.update(_load_env_vars())

    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"
    merged.update(overrides)

    unknown = sorted(set(merged) - set(ScanConfig.__dataclass_fields__))
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {', '.join(unknown)}",
            details={"allowed": ", ".join(ScanConfig.__dataclass_fields__)},
        )

    try:
        return ScanConfig(**merged)
    except ValueError as e:
        key = str(e).split(" ", 1)[0]
        raise InvalidConfigError(key, merged.get(key), str(e)) from e
    except TypeError as e:
        # Wrong value type from a TOML file, e.g. workers = "four"
        key = str(e).split(" ", 1)[0]
        if key in merged:
            raise InvalidConfigError(key, merged[key], str(e)) from e
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from FILETALLY_* environment variables.

    Returns:
        Dict of field_name -> parsed_value for any FILETALLY_* vars found.
    """
    type_hints = get_type_hints(ScanConfig)

    result: dict[str, Any] = {}

    for field_name in ScanConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e)) from e
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the type of a dataclass field.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if origin is not Literal and type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)
        if value.strip().lower() in ("", "auto", "none"):
            return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path, source: str) -> dict[str, Any]:
    """Load a TOML file, accepting either top-level keys or a [filetally] table."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid {source} '{path}': {e}") from e

    section = data.get("filetally", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid {source} '{path}': [filetally] must be a table")
    return dict(section)
