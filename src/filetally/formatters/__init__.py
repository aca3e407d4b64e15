"""Output formatters for filetally."""

from .base import BaseFormatter
from .csv_formatter import CsvFormatter
from .json_formatter import JsonFormatter
from .rich_formatter import RichFormatter
from .text_formatter import TextFormatter

FORMATTERS = {
    "text": TextFormatter,
    "rich": RichFormatter,
    "json": JsonFormatter,
    "csv": CsvFormatter,
}


def get_formatter(name: str) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "text", "rich", "json", "csv"

    Returns:
        Formatter instance

    Raises:
        ValueError: If name is not recognized
    """
    cls = FORMATTERS.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(FORMATTERS))}")
    return cls()


__all__ = [
    "BaseFormatter",
    "TextFormatter",
    "RichFormatter",
    "JsonFormatter",
    "CsvFormatter",
    "FORMATTERS",
    "get_formatter",
]
