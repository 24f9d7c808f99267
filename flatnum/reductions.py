"""Pure-Python reductions folding a flat buffer into a single float.

Empty-input conventions: ``mean``, ``variance`` and ``std``
return 0.0, while ``max``/``min`` return the −∞/+∞ fold seeds.
"""

from __future__ import annotations

import math
from typing import List

from ._validation import as_buffer


def _accumulate(values: List[float]) -> float:
    total = 0.0
    for v in values:
        total += v
    return total


def sum(data) -> float:
    return _accumulate(as_buffer(data))


def mean(data) -> float:
    values = as_buffer(data)
    if not values:
        return 0.0
    return _accumulate(values) / len(values)


def max(data) -> float:
    best = -math.inf
    for v in as_buffer(data):
        if v > best:
            best = v
    return best


def min(data) -> float:
    best = math.inf
    for v in as_buffer(data):
        if v < best:
            best = v
    return best


def variance(data) -> float:
    values = as_buffer(data)
    n = len(values)
    if n == 0:
        return 0.0
    mean_val = _accumulate(values) / n
    accum = 0.0
    for v in values:
        diff = v - mean_val
        accum += diff * diff
    return accum / n


def std(data) -> float:
    return math.sqrt(variance(data))


def prod(data) -> float:
    product = 1.0
    for v in as_buffer(data):
        product *= v
    return product


def median(data) -> float:
    values = as_buffer(data)
    if not values:
        return 0.0
    if any(v != v for v in values):
        return math.nan
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return 0.5 * (ordered[mid - 1] + ordered[mid])


def ptp(data) -> float:
    values = as_buffer(data)
    if not values:
        return 0.0
    return max(values) - min(values)


__all__ = [
    "max",
    "mean",
    "median",
    "min",
    "prod",
    "ptp",
    "std",
    "sum",
    "variance",
]
