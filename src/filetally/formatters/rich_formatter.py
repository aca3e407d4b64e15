"""Rich terminal formatter for filetally."""

import io
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..report import RankedLabel
from ..scanning import PSEUDO_LABELS, ScanResult
from .base import BaseFormatter


class RichFormatter(BaseFormatter):
    """Summary line plus a table of the most frequent labels."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def render(self, ranked: List[RankedLabel], result: ScanResult) -> None:
        self.console.print(self._summary(result))
        self.console.print(self._table(ranked, result))

    def format(self, ranked: List[RankedLabel], result: ScanResult) -> str:
        buf = io.StringIO()
        console = Console(file=buf, width=100, color_system=None)
        console.print(self._summary(result))
        console.print(self._table(ranked, result))
        return buf.getvalue().rstrip("\n")

    def _summary(self, result: ScanResult) -> str:
        return (
            f"[bold cyan]Scanned[/bold cyan] [blue]{escape(str(result.root))}[/blue]: "
            f"{result.entries} entries in {result.directories} directories, "
            f"[yellow]{result.workers}[/yellow] workers available, "
            f"{result.elapsed_seconds:.2f}s"
        )

    def _table(self, ranked: List[RankedLabel], result: ScanResult) -> Table:
        table = Table(title=f"Top {len(ranked)} file types")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Label")
        table.add_column("Count", justify="right")
        table.add_column("Share", justify="right")
        total = result.total or 1
        for r in ranked:
            label = f"[dim]{r.label}[/dim]" if r.label in PSEUDO_LABELS else escape(r.label)
            table.add_row(str(r.rank), label, str(r.count), f"{r.count / total:.1%}")
        return table
