"""Metric aggregation over numeric series.

All functions are pure and return plain floats. Degenerate input (empty
series, constant series, zero denominators) yields a neutral 0.0 instead of
raising or producing NaN/inf. Variance and standard deviation use the
population formula.
"""

from typing import NamedTuple, Sequence
import math

import numpy as np


class TrendResult(NamedTuple):
    """Least-squares fit of a series against its index positions."""
    slope: float
    correlation: float


class SeriesStatistics(NamedTuple):
    mean: float
    stddev: float


def _as_array(values: Sequence[float]) -> np.ndarray:
    return np.asarray(list(values), dtype=float)


def _is_constant(arr: np.ndarray) -> bool:
    # Checked explicitly: a float mean of identical values can drift by one ulp.
    return bool(np.all(arr == arr[0]))


def _finite(value: float) -> float:
    value = float(value)
    return value if math.isfinite(value) else 0.0


def mean(values: Sequence[float]) -> float:
    arr = _as_array(values)
    if arr.size == 0:
        return 0.0
    return _finite(arr.mean())


def variance(values: Sequence[float]) -> float:
    """Population variance: sum((x - mean)^2) / n."""
    arr = _as_array(values)
    if arr.size == 0 or _is_constant(arr):
        return 0.0
    return _finite(np.mean((arr - arr.mean()) ** 2))


def stddev(values: Sequence[float]) -> float:
    """Population standard deviation."""
    return math.sqrt(variance(values))


def describe(values: Sequence[float]) -> SeriesStatistics:
    return SeriesStatistics(mean=mean(values), stddev=stddev(values))


def coefficient_of_variation(values: Sequence[float]) -> float:
    """stddev / mean, or 0.0 when the mean is zero."""
    avg = mean(values)
    if avg == 0:
        return 0.0
    return _finite(stddev(values) / avg)


def linear_trend(values: Sequence[float]) -> TrendResult:
    """Ordinary least squares of value against index 0..n-1.

    Returns the slope and the Pearson correlation between index and value.
    Both are 0.0 when the corresponding denominator is zero.
    """
    y = _as_array(values)
    n = y.size
    if n < 2 or _is_constant(y):
        return TrendResult(0.0, 0.0)

    x = np.arange(n, dtype=float)
    x_diff = x - x.mean()
    y_diff = y - y.mean()
    sxy = float(np.dot(x_diff, y_diff))
    sxx = float(np.dot(x_diff, x_diff))
    syy = float(np.dot(y_diff, y_diff))

    slope = sxy / sxx if sxx != 0 else 0.0
    denom = math.sqrt(sxx * syy)
    correlation = sxy / denom if denom != 0 else 0.0

    return TrendResult(_finite(slope), _finite(correlation))


def pearson_correlation(series_a: Sequence[float], series_b: Sequence[float]) -> float:
    """Pearson r over the overlapping prefix of two series."""
    a = _as_array(series_a)
    b = _as_array(series_b)
    n = min(a.size, b.size)
    if n == 0:
        return 0.0

    a, b = a[:n], b[:n]
    if _is_constant(a) or _is_constant(b):
        return 0.0

    a_diff = a - a.mean()
    b_diff = b - b.mean()
    denom_a = float(np.dot(a_diff, a_diff))
    denom_b = float(np.dot(b_diff, b_diff))
    if denom_a == 0 or denom_b == 0:
        return 0.0

    return _finite(float(np.dot(a_diff, b_diff)) / math.sqrt(denom_a * denom_b))
