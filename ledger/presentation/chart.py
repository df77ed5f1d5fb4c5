"""
Waterfall Chart Payload

Converts a balance series into what a bar chart needs: one label,
one floating [start, end] bar and one colour per interval.
"""

import json

from pydantic import BaseModel, Field

from ledger.models.transaction import BalanceInterval, IntervalSign
from ledger.presentation.table import format_amount


SIGN_COLOURS: dict[IntervalSign, str] = {
    IntervalSign.POSITIVE: "rgba(60, 179, 113, 1)",
    IntervalSign.NEGATIVE: "rgba(255, 0, 0, 1)",
}


class ChartData(BaseModel):
    """Parallel lists, one element per bar."""

    labels: list[str] = Field(default_factory=list)
    bars: list[tuple[float, float]] = Field(default_factory=list)
    colours: list[str] = Field(default_factory=list)
    tooltips: list[str] = Field(default_factory=list)

    def to_records(self) -> list[dict]:
        """One dict per bar, in the shape a declarative chart library expects."""
        return [
            {
                "order": position,
                "label": label,
                "start": start,
                "end": end,
                "colour": colour,
                "tooltip": tooltip,
            }
            for position, (label, (start, end), colour, tooltip) in enumerate(
                zip(self.labels, self.bars, self.colours, self.tooltips)
            )
        ]

    def axis_label_expr(self) -> str:
        """
        Vega expression mapping a bar's `order` to its label.

        Bars are placed by position, not by label, so two entries on the
        same date stay side by side instead of stacking.
        """
        return f"{json.dumps(self.labels, ensure_ascii=False)}[datum.value]"


def tooltip_label(interval: BalanceInterval, currency_symbol: str) -> str:
    """E.g. "₱ -40.00 (₱100.00 > ₱60.00)"."""
    return (
        f"{currency_symbol} {format_amount(interval.amount)} "
        f"({currency_symbol}{format_amount(interval.start)} > "
        f"{currency_symbol}{format_amount(interval.end)})"
    )


def build_chart_data(
    series: list[BalanceInterval],
    currency_symbol: str,
) -> ChartData:
    return ChartData(
        labels=[interval.label for interval in series],
        bars=[(float(interval.start), float(interval.end)) for interval in series],
        colours=[SIGN_COLOURS[interval.sign] for interval in series],
        tooltips=[tooltip_label(interval, currency_symbol) for interval in series],
    )
