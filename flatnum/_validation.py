"""Buffer coercion and argument checks shared by every backend.

Both the pure-Python kernels and the NumPy backend validate through these
helpers, so identical input raises identical errors.
"""

from __future__ import annotations

import operator
from typing import Iterable, List

from .errors import DimensionMismatch, InvalidBuffer, InvalidFFTLength, LengthMismatch

SINGULAR_THRESHOLD = 1e-10


def as_buffer(values: Iterable) -> List[float]:
    if hasattr(values, "tolist"):
        values = values.tolist()
    try:
        return [float(v) for v in values]
    except (TypeError, ValueError) as exc:
        raise InvalidBuffer("buffer values must be real numbers: %s" % exc) from exc


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def check_same_length(a, b, op: str) -> None:
    if len(a) != len(b):
        raise LengthMismatch(
            "%s expects buffers of equal length; got %d and %d" % (op, len(a), len(b))
        )


def _index(value, error, op: str, what: str) -> int:
    try:
        return operator.index(value)
    except TypeError:
        raise error("%s %s must be an integer; got %r" % (op, what, value)) from None


def check_dims(op: str, *dims: int) -> None:
    for dim in dims:
        dim = _index(dim, DimensionMismatch, op, "dimensions")
        if dim < 0:
            raise DimensionMismatch("%s dimensions must be non-negative; got %r" % (op, dims))


def check_matrix(buffer, rows: int, cols: int, op: str, label: str = "matrix") -> None:
    check_dims(op, rows, cols)
    if len(buffer) != rows * cols:
        raise DimensionMismatch(
            "%s expects %s of %d×%d = %d values; got %d"
            % (op, label, rows, cols, rows * cols, len(buffer))
        )


def as_length(n: int, op: str) -> int:
    return _index(n, InvalidFFTLength, op, "length")


def check_fft_length(n: int, op: str) -> None:
    if not is_power_of_two(as_length(n, op)):
        raise InvalidFFTLength("%s requires a power-of-two length; got %d" % (op, n))


def check_interleaved(buffer, n: int, op: str) -> None:
    check_fft_length(n, op)
    if len(buffer) != 2 * n:
        raise LengthMismatch(
            "%s expects an interleaved buffer of %d values for n=%d; got %d"
            % (op, 2 * n, n, len(buffer))
        )


def check_half_spectrum(buffer, n: int, op: str) -> int:
    """Validate ``n//2 + 1`` interleaved bins for a length-``n`` signal."""

    check_fft_length(n, op)
    bins = n // 2 + 1
    if len(buffer) != 2 * bins:
        raise LengthMismatch(
            "%s expects %d interleaved values (%d bins) for n=%d; got %d"
            % (op, 2 * bins, bins, n, len(buffer))
        )
    return bins
