"""Base formatter interface for filetally report rendering."""

from abc import ABC, abstractmethod
from typing import List

from ..report import RankedLabel
from ..scanning import ScanResult


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    def render(self, ranked: List[RankedLabel], result: ScanResult) -> None:
        """Write the report to stdout."""
        print(self.format(ranked, result))

    @abstractmethod
    def format(self, ranked: List[RankedLabel], result: ScanResult) -> str:
        """Return formatted string representation of the report."""
