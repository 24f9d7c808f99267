"""NumPy-vectorized implementations of the kernel operations.

Operations here carry the same names and argument order as the pure-Python
kernels and produce the same results within floating-point tolerance.  The
dispatcher in :mod:`flatnum.kernel` routes to this module first and falls
back to the reference kernels for any name it does not define; the closed-form
``determinant``/``inverse`` are always served by the reference
implementation.

All arithmetic runs under ``numpy.errstate(all="ignore")`` so that degenerate
inputs produce IEEE-754 values silently, as they do in the reference kernels.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, List

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidBuffer

from ._validation import (
    check_fft_length,
    check_half_spectrum,
    check_interleaved,
    check_matrix,
    check_same_length,
)

_Array = NDArray[np.float64]


def is_available() -> bool:
    return True


def _as_array(data: Any) -> _Array:
    try:
        return np.asarray(data, dtype=np.float64).reshape(-1)
    except (TypeError, ValueError) as exc:
        raise InvalidBuffer("buffer values must be real numbers: %s" % exc) from exc


def _quiet(func: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with np.errstate(all="ignore"):
            return func(*args, **kwargs)

    return wrapper


def _map(ufunc) -> Callable[[Any], List[float]]:
    @_quiet
    def apply(data) -> List[float]:
        return ufunc(_as_array(data)).tolist()

    return apply


def _zip(ufunc, op: str) -> Callable[[Any, Any], List[float]]:
    @_quiet
    def apply(a, b) -> List[float]:
        left = _as_array(a)
        right = _as_array(b)
        check_same_length(left, right, op)
        return ufunc(left, right).tolist()

    return apply


def _with_scalar(ufunc) -> Callable[[Any, Any], List[float]]:
    @_quiet
    def apply(a, scalar) -> List[float]:
        return ufunc(_as_array(a), np.float64(scalar)).tolist()

    return apply


# elementwise ----------------------------------------------------------------

add_arrays = _zip(np.add, "add_arrays")
sub_arrays = _zip(np.subtract, "sub_arrays")
mul_arrays = _zip(np.multiply, "mul_arrays")
div_arrays = _zip(np.divide, "div_arrays")
mod_arrays = _zip(np.fmod, "mod_arrays")
arctan2 = _zip(np.arctan2, "arctan2")
hypot = _zip(np.hypot, "hypot")
maximum = _zip(np.maximum, "maximum")
minimum = _zip(np.minimum, "minimum")

add_scalar = _with_scalar(np.add)
sub_scalar = _with_scalar(np.subtract)
mul_scalar = _with_scalar(np.multiply)
div_scalar = _with_scalar(np.divide)
mod_scalar = _with_scalar(np.fmod)


def _is_odd_integer(value: float) -> bool:
    return bool(np.isfinite(value)) and value == int(value) and int(value) % 2 == 1


@_quiet
def pow_scalar(a, exponent) -> List[float]:
    base = _as_array(a)
    power = float(exponent)
    out = np.power(base, power)
    if power > 0.0 and not _is_odd_integer(power):
        # IEEE pow: (-inf) ** p == +inf and (+-0) ** p == +0 for these exponents
        out[base == -np.inf] = np.inf
        out[base == 0.0] = 0.0
    return out.tolist()

abs = _map(np.abs)
square = _map(np.square)
sqrt = _map(np.sqrt)
cbrt = _map(np.cbrt)
reciprocal = _map(np.reciprocal)
sign = _map(np.sign)
exp = _map(np.exp)
exp2 = _map(np.exp2)
expm1 = _map(np.expm1)
log = _map(np.log)
log2 = _map(np.log2)
log10 = _map(np.log10)
log1p = _map(np.log1p)
sin = _map(np.sin)
cos = _map(np.cos)
tan = _map(np.tan)
arcsin = _map(np.arcsin)
arccos = _map(np.arccos)
arctan = _map(np.arctan)
sinh = _map(np.sinh)
cosh = _map(np.cosh)
tanh = _map(np.tanh)
arcsinh = _map(np.arcsinh)
arccosh = _map(np.arccosh)
arctanh = _map(np.arctanh)
round = _map(np.rint)
floor = _map(np.floor)
ceil = _map(np.ceil)
trunc = _map(np.trunc)


@_quiet
def deg2rad(data) -> List[float]:
    return (_as_array(data) * np.pi / 180.0).tolist()


@_quiet
def rad2deg(data) -> List[float]:
    return (_as_array(data) * 180.0 / np.pi).tolist()


@_quiet
def clip(data, lo, hi) -> List[float]:
    return np.minimum(np.maximum(_as_array(data), float(lo)), float(hi)).tolist()


# reductions -----------------------------------------------------------------

@_quiet
def sum(data) -> float:
    return float(np.add.reduce(_as_array(data)))


@_quiet
def mean(data) -> float:
    arr = _as_array(data)
    if arr.size == 0:
        return 0.0
    return float(np.add.reduce(arr) / arr.size)


@_quiet
def max(data) -> float:
    return float(np.fmax.reduce(_as_array(data), initial=-np.inf))


@_quiet
def min(data) -> float:
    return float(np.fmin.reduce(_as_array(data), initial=np.inf))


@_quiet
def variance(data) -> float:
    arr = _as_array(data)
    if arr.size == 0:
        return 0.0
    diff = arr - np.add.reduce(arr) / arr.size
    return float(np.add.reduce(diff * diff) / arr.size)


def std(data) -> float:
    return float(np.sqrt(variance(data)))


@_quiet
def prod(data) -> float:
    return float(np.multiply.reduce(_as_array(data)))


@_quiet
def median(data) -> float:
    arr = _as_array(data)
    if arr.size == 0:
        return 0.0
    return float(np.median(arr))


def ptp(data) -> float:
    arr = _as_array(data)
    if arr.size == 0:
        return 0.0
    return max(arr) - min(arr)


# linear algebra -------------------------------------------------------------

@_quiet
def matmul(a, b, m: int, k: int, n: int) -> List[float]:
    left = _as_array(a)
    right = _as_array(b)
    check_matrix(left, m, k, "matmul", "left operand")
    check_matrix(right, k, n, "matmul", "right operand")
    return (left.reshape(m, k) @ right.reshape(k, n)).reshape(-1).tolist()


@_quiet
def dot(a, b) -> float:
    left = _as_array(a)
    right = _as_array(b)
    check_same_length(left, right, "dot")
    return float(np.dot(left, right))


def transpose(a, rows: int, cols: int) -> List[float]:
    arr = _as_array(a)
    check_matrix(arr, rows, cols, "transpose")
    return arr.reshape(rows, cols).T.reshape(-1).tolist()


@_quiet
def trace(a, rows: int, cols: int) -> float:
    arr = _as_array(a)
    check_matrix(arr, rows, cols, "trace")
    return float(np.trace(arr.reshape(rows, cols)))


@_quiet
def outer(a, b) -> List[float]:
    return np.outer(_as_array(a), _as_array(b)).reshape(-1).tolist()


@_quiet
def norm(a) -> float:
    return float(np.linalg.norm(_as_array(a)))


# spectral -------------------------------------------------------------------

def _bit_reversal(n: int) -> NDArray[np.intp]:
    n_bits = n.bit_length() - 1
    idx = np.arange(n, dtype=np.intp)
    rev = np.zeros(n, dtype=np.intp)
    for _ in range(n_bits):
        rev = (rev << 1) | (idx & 1)
        idx >>= 1
    return rev


def _transform(x: NDArray[np.complex128]) -> NDArray[np.complex128]:
    """Iterative radix-2 DIT FFT.

    The input is permuted into bit-reversed order once, then each stage of
    size 2, 4, ..., n applies its butterflies to every block at once.
    """

    n = x.shape[0]
    out = x[_bit_reversal(n)]
    size = 2
    while size <= n:
        half = size // 2
        twiddle = np.exp(-2j * np.pi * np.arange(half) / size)
        blocks = out.reshape(-1, size)
        even = blocks[:, :half].copy()
        odd = blocks[:, half:] * twiddle
        blocks[:, :half] = even + odd
        blocks[:, half:] = even - odd
        size *= 2
    return out


def _interleave(values: NDArray[np.complex128]) -> List[float]:
    out = np.empty(2 * values.shape[0], dtype=np.float64)
    out[0::2] = values.real
    out[1::2] = values.imag
    return out.tolist()


@_quiet
def fft(data) -> List[float]:
    arr = _as_array(data)
    check_fft_length(arr.size, "fft")
    return _interleave(_transform(arr.astype(np.complex128)))


@_quiet
def ifft(data, n: int) -> List[float]:
    arr = _as_array(data)
    check_interleaved(arr, n, "ifft")
    spectrum = np.empty(n, dtype=np.complex128)
    spectrum.real = arr[0::2]
    spectrum.imag = -arr[1::2]
    return _interleave(np.conj(_transform(spectrum)) / n)


def rfft(data) -> List[float]:
    arr = _as_array(data)
    bins = arr.size // 2 + 1
    return fft(arr)[: 2 * bins]


@_quiet
def irfft(data, n: int) -> List[float]:
    arr = _as_array(data)
    bins = check_half_spectrum(arr, n, "irfft")
    half = np.empty(bins, dtype=np.complex128)
    half.real = arr[0::2]
    half.imag = arr[1::2]
    spectrum = np.empty(n, dtype=np.complex128)
    spectrum[:bins] = half
    spectrum[bins:] = np.conj(half[n - bins : 0 : -1])
    return (_transform(np.conj(spectrum)).real / n).tolist()
