"""JSON formatter for filetally."""

import json
from dataclasses import asdict
from typing import List

from ..report import RankedLabel
from ..scanning import ScanResult
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render the scan summary and ranking as JSON."""

    def format(self, ranked: List[RankedLabel], result: ScanResult) -> str:
        data = {
            "root": str(result.root),
            "workers": result.workers,
            "join_mode": result.join_mode,
            "entries": result.entries,
            "directories": result.directories,
            "dispatched": result.dispatched,
            "elapsed_seconds": round(result.elapsed_seconds, 3),
            "totals": dict(result.label_counts),
            "top": [asdict(r) for r in ranked],
        }
        return json.dumps(data, indent=2)
