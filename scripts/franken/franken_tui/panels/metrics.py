"""Metric sparklines panel."""

from __future__ import annotations

from rich.table import Table

from franken_tui.formatting import sparkline
from franken_tui.panels import Panel, render_lines


def _number(value: float) -> str:
    return f"{value:.0f}" if float(value).is_integer() else f"{value:.2f}"


class MetricsPanel(Panel):
    def render(self, width: int, height: int) -> list[str]:
        lines = [self.title_line(f"last {self.data.meta.get('history', 0)} samples")]
        if not self.data.items:
            lines.append(self.no_data_line())
            return lines

        # value columns are short; the sparkline takes the rest of the row
        spark_width = max(4, width - 48)
        table = Table(box=None, expand=True, pad_edge=False, header_style="bold")
        table.add_column("Series", no_wrap=True)
        table.add_column("Trend", no_wrap=True, style="primary", ratio=1)
        table.add_column("Now", justify="right", no_wrap=True)
        table.add_column("Avg", justify="right", no_wrap=True)
        table.add_column("Max", justify="right", no_wrap=True)
        for item in self.data.items:
            samples = list(item.get("samples", []))[-spark_width:]
            table.add_row(
                str(item.get("name", "-")),
                sparkline(samples),
                _number(item.get("current", 0)),
                _number(item.get("average", 0)),
                _number(item.get("max", 0)),
            )
        lines.extend(render_lines(table, width, self.theme))
        return lines[:height]
