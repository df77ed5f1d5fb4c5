"""Table and chart presentation helpers."""

from ledger.presentation.chart import (
    SIGN_COLOURS,
    ChartData,
    build_chart_data,
    tooltip_label,
)
from ledger.presentation.table import (
    build_table_rows,
    format_amount,
    format_money,
    search_rows,
    total_amount,
)

__all__ = [
    "SIGN_COLOURS",
    "ChartData",
    "build_chart_data",
    "build_table_rows",
    "format_amount",
    "format_money",
    "search_rows",
    "tooltip_label",
    "total_amount",
]
