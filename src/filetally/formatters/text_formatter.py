"""Plain text formatter: the classic ranked list."""

from typing import List

from ..report import RankedLabel
from ..scanning import ScanResult
from .base import BaseFormatter


class TextFormatter(BaseFormatter):
    """Render a preamble followed by ``rank)<TAB>label: count`` lines."""

    def format(self, ranked: List[RankedLabel], result: ScanResult) -> str:
        lines = [
            f"Scanning {result.root} (workers available: {result.workers})",
            f"Top {len(ranked)} file types:",
        ]
        lines.extend(f"{r.rank})\t{r.label}: {r.count}" for r in ranked)
        return "\n".join(lines)
