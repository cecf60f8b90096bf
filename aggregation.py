import math
from decimal import ROUND_HALF_UP, Context, Decimal
from enum import Enum
from typing import Optional

import numpy as np

from cell_classifier import is_numeric, number_text


class Metric(Enum):
    SUM = "sum"
    AVG = "avg"
    MAX = "max"
    MIN = "min"

    @classmethod
    def parse(cls, value) -> "Metric":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown metric '{value}' (use sum, avg, max or min)"
            ) from None


def to_fixed(value: float, digits: int = 2) -> str:
    """Fixed-point text rounding ties away from zero, sign kept for negatives."""
    if not math.isfinite(value):
        return number_text(value)
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(abs(value)).quantize(
        quantum, rounding=ROUND_HALF_UP, context=Context(prec=400)
    )
    text = f"{rounded:f}"
    return f"-{text}" if value < 0 else text


def column_values(rows, column: int) -> list[float]:
    return [
        float(row[column])
        for row in rows
        if column < len(row) and is_numeric(row[column])
    ]


def aggregate(rows, column: int, metric) -> Optional[str]:
    """Aggregate the numeric cells of a column; None when there are none."""
    metric = Metric.parse(metric)
    values = np.asarray(column_values(rows, column), dtype=float)
    if values.size == 0:
        return None

    if metric is Metric.SUM:
        result = values.sum()
    elif metric is Metric.AVG:
        result = values.sum() / values.size
    elif metric is Metric.MAX:
        result = values.max()
    else:
        result = values.min()
    return to_fixed(float(result))


def numeric_columns(rows) -> list[int]:
    width = len(rows[0]) if rows else 0
    return [
        col for col in range(width) if any(is_numeric(row[col]) for row in rows)
    ]


class MetricBoard:
    """Active metric selection per column and the last computed results."""

    def __init__(self):
        self.selected: dict[int, Metric] = {}
        self.results: dict[int, Optional[str]] = {}

    def select(self, column: int, metric, rows) -> Optional[str]:
        if metric is None or metric == "":
            self.selected.pop(column, None)
            self.results.pop(column, None)
            return None
        self.selected[column] = Metric.parse(metric)
        self.results[column] = aggregate(rows, column, self.selected[column])
        return self.results[column]

    def refresh(self, rows):
        for column, metric in self.selected.items():
            self.results[column] = aggregate(rows, column, metric)

    def clear(self):
        self.selected.clear()
        self.results.clear()

    def label(self, column: int) -> str:
        metric = self.selected.get(column)
        if metric is None:
            return ""
        result = self.results.get(column)
        return f"{metric.value.upper()}: {result if result is not None else ''}"
