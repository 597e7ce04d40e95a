"""Numeric helpers shared by detection algorithms and analysis rules."""

from .statistics import (
    SeriesStatistics,
    TrendResult,
    coefficient_of_variation,
    describe,
    linear_trend,
    mean,
    pearson_correlation,
    stddev,
    variance,
)

__all__ = [
    "SeriesStatistics",
    "TrendResult",
    "coefficient_of_variation",
    "describe",
    "linear_trend",
    "mean",
    "pearson_correlation",
    "stddev",
    "variance",
]
