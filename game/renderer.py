"""
Score Renderer - Text views of the learner for round-end diagnostics.
"""

from typing import List

from core.score_table import ScoreTable
from core.segments import segment_label

# Light to dark, indexed 0-9
SHADES = " .:-=+*#%@"


class ScoreRenderer:
    """Plain-text rendering of score tables and round summaries."""

    @staticmethod
    def render_table(table: ScoreTable, decimals: int = 2) -> str:
        """One header line and one line of scores per segment."""
        lines = []
        for segment, row in table.scores.items():
            lines.append(f"Segment {segment_label(segment)}:")
            cells = " | ".join(f"{value:.{decimals}f}" for value in row)
            lines.append(f"  {cells} |")
        return "\n".join(lines)

    @staticmethod
    def render_bars(table: ScoreTable) -> str:
        """Compact bar view of each row, scaled to the largest score."""
        rows: List[str] = []
        peak = max((float(row.max()) for row in table.scores.values()),
                   default=0.0)
        for segment, row in table.scores.items():
            if peak > 0:
                bars = "".join(SHADES[max(0, min(9, int(9 * value / peak)))]
                               for value in row)
            else:
                bars = "." * len(row)
            rows.append(f"{segment_label(segment):>16} [{bars}]")
        return "\n".join(rows)

    @staticmethod
    def render_report(table: ScoreTable, accuracy: float,
                      hits: int, shots: int) -> str:
        lines = [
            "------ Learning scores ------",
            ScoreRenderer.render_table(table),
            f"Accuracy: {accuracy:.2f} ({hits}/{shots})",
        ]
        return "\n".join(lines)
