"""CSV formatter for filetally."""

import csv
import io
from typing import List

from ..report import RankedLabel
from ..scanning import ScanResult
from .base import BaseFormatter


class CsvFormatter(BaseFormatter):
    """Render ``rank,label,count`` rows with a header."""

    def format(self, ranked: List[RankedLabel], result: ScanResult) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(["rank", "label", "count"])
        for r in ranked:
            writer.writerow([r.rank, r.label, r.count])
        return buf.getvalue().rstrip("\n")
