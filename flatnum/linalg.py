"""Pure-Python linear algebra on row-major flat buffers.

Shapes are always supplied by the caller.  ``determinant`` and ``inverse``
are closed-form cofactor expansions for 2×2 and 3×3 matrices only; larger
sizes are rejected rather than routed through an approximate solver.
"""

from __future__ import annotations

import math
from typing import List, Tuple

from ._validation import (
    SINGULAR_THRESHOLD,
    as_buffer,
    check_matrix,
    check_same_length,
)
from .errors import SingularMatrix, UnsupportedMatrixSize

_CLOSED_FORM_SIZES = (2, 3)


def matmul(a, b, m: int, k: int, n: int) -> List[float]:
    """Multiply an ``m×k`` matrix by a ``k×n`` matrix.

    The loops run (row, contraction index, output column) so the innermost
    loop walks one row of ``b`` and one row of the result sequentially.
    """

    left = as_buffer(a)
    right = as_buffer(b)
    check_matrix(left, m, k, "matmul", "left operand")
    check_matrix(right, k, n, "matmul", "right operand")
    out = [0.0] * (m * n)
    for i in range(m):
        out_row = i * n
        a_row = i * k
        for t in range(k):
            a_it = left[a_row + t]
            b_row = t * n
            for j in range(n):
                out[out_row + j] += a_it * right[b_row + j]
    return out


def dot(a, b) -> float:
    left = as_buffer(a)
    right = as_buffer(b)
    check_same_length(left, right, "dot")
    total = 0.0
    for x, y in zip(left, right):
        total += x * y
    return total


def transpose(a, rows: int, cols: int) -> List[float]:
    values = as_buffer(a)
    check_matrix(values, rows, cols, "transpose")
    out = [0.0] * len(values)
    for i in range(rows):
        for j in range(cols):
            out[j * rows + i] = values[i * cols + j]
    return out


def trace(a, rows: int, cols: int) -> float:
    values = as_buffer(a)
    check_matrix(values, rows, cols, "trace")
    total = 0.0
    for i in range(min(rows, cols)):
        total += values[i * cols + i]
    return total


def outer(a, b) -> List[float]:
    left = as_buffer(a)
    right = as_buffer(b)
    return [x * y for x in left for y in right]


def norm(a) -> float:
    total = 0.0
    for v in as_buffer(a):
        total += v * v
    return math.sqrt(total)


def _square(a, n: int, op: str) -> List[float]:
    if n not in _CLOSED_FORM_SIZES:
        raise UnsupportedMatrixSize("%s only supports 2×2 and 3×3 matrices; got n=%r" % (op, n))
    values = as_buffer(a)
    check_matrix(values, n, n, op)
    return values


def _det3(m: List[float]) -> float:
    a11, a12, a13, a21, a22, a23, a31, a32, a33 = m
    return (
        a11 * a22 * a33
        + a12 * a23 * a31
        + a13 * a21 * a32
        - a13 * a22 * a31
        - a12 * a21 * a33
        - a11 * a23 * a32
    )


def _closed_form_det(values: List[float], n: int) -> float:
    if n == 2:
        return values[0] * values[3] - values[1] * values[2]
    return _det3(values)


def determinant(a, n: int) -> float:
    return _closed_form_det(_square(a, n, "determinant"), n)


def _adjugate(values: List[float], n: int) -> Tuple[float, ...]:
    if n == 2:
        a11, a12, a21, a22 = values
        return (a22, -a12, -a21, a11)
    a11, a12, a13, a21, a22, a23, a31, a32, a33 = values
    return (
        a22 * a33 - a23 * a32,
        a13 * a32 - a12 * a33,
        a12 * a23 - a13 * a22,
        a23 * a31 - a21 * a33,
        a11 * a33 - a13 * a31,
        a13 * a21 - a11 * a23,
        a21 * a32 - a22 * a31,
        a12 * a31 - a11 * a32,
        a11 * a22 - a12 * a21,
    )


def inverse(a, n: int) -> List[float]:
    values = _square(a, n, "inverse")
    det = _closed_form_det(values, n)
    if abs(det) < SINGULAR_THRESHOLD:
        raise SingularMatrix("Matrix is singular: |det| = %.3e" % abs(det))
    return [entry / det for entry in _adjugate(values, n)]


__all__ = [
    "determinant",
    "dot",
    "inverse",
    "matmul",
    "norm",
    "outer",
    "trace",
    "transpose",
]
