"""Radix-2 Cooley-Tukey FFT over interleaved complex buffers.

Complex values are stored as ``[re0, im0, re1, im1, ...]``.  Transform
lengths must be powers of two.  This reference implementation is the
recursive decimation-in-time formulation: each level splits its input into
even- and odd-indexed halves, transforms both, and recombines them with the
butterfly ``X[k] = E[k] + w·O[k]``, ``X[k + n/2] = E[k] - w·O[k]`` where
``w = exp(-2πik/n)``.  Recursion depth is ``log2(n)``.
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from ._validation import (
    as_buffer,
    as_length,
    check_fft_length,
    check_half_spectrum,
    check_interleaved,
)
from .errors import InvalidFFTLength, KernelError, LengthMismatch


def _transform(real: Sequence[float], imag: Sequence[float]) -> Tuple[List[float], List[float]]:
    n = len(real)
    if n == 1:
        return [real[0]], [imag[0]]

    even_re, even_im = _transform(real[0::2], imag[0::2])
    odd_re, odd_im = _transform(real[1::2], imag[1::2])

    half = n // 2
    out_re = [0.0] * n
    out_im = [0.0] * n
    for k in range(half):
        angle = -2.0 * math.pi * k / n
        c = math.cos(angle)
        s = math.sin(angle)
        t_re = c * odd_re[k] - s * odd_im[k]
        t_im = c * odd_im[k] + s * odd_re[k]
        out_re[k] = even_re[k] + t_re
        out_im[k] = even_im[k] + t_im
        out_re[k + half] = even_re[k] - t_re
        out_im[k + half] = even_im[k] - t_im
    return out_re, out_im


def _interleave(real: Sequence[float], imag: Sequence[float]) -> List[float]:
    out = [0.0] * (2 * len(real))
    out[0::2] = real
    out[1::2] = imag
    return out


def fft(data) -> List[float]:
    """Forward transform of a real buffer; returns ``2n`` interleaved values."""

    values = as_buffer(data)
    n = len(values)
    check_fft_length(n, "fft")
    real, imag = _transform(values, [0.0] * n)
    return _interleave(real, imag)


def ifft(data, n: int) -> List[float]:
    """Inverse transform of ``n`` interleaved complex values.

    Uses the conjugation identity ``ifft(x) = conj(fft(conj(x))) / n``.
    """

    values = as_buffer(data)
    check_interleaved(values, n, "ifft")
    real, imag = _transform(values[0::2], [-v for v in values[1::2]])
    return _interleave([v / n for v in real], [-v / n for v in imag])


def rfft(data) -> List[float]:
    """Non-negative frequency bins ``0..n/2`` of :func:`fft`."""

    values = as_buffer(data)
    bins = len(values) // 2 + 1
    return fft(values)[: 2 * bins]


def irfft(data, n: int) -> List[float]:
    """Real signal of length ``n`` from its ``n//2 + 1`` non-negative bins.

    Bins ``n//2 + 1 .. n - 1`` are the complex conjugates of bins
    ``n//2 - 1 .. 1``; only the real part of the inverse transform is kept.
    """

    values = as_buffer(data)
    bins = check_half_spectrum(values, n, "irfft")
    real = values[0::2]
    imag = values[1::2]
    for k in range(bins, n):
        real.append(real[n - k])
        imag.append(-imag[n - k])
    return ifft(_interleave(real, imag), n)[0::2]


def _check_spacing(n: int, d: float, op: str) -> int:
    n = as_length(n, op)
    if n < 1:
        raise InvalidFFTLength("%s requires n >= 1; got %d" % (op, n))
    if d == 0.0:
        raise KernelError("%s requires a non-zero sample spacing" % op)
    return n


def fftfreq(n: int, d: float = 1.0) -> List[float]:
    n = _check_spacing(n, d, "fftfreq")
    scale = 1.0 / (n * d)
    positive = list(range(0, (n - 1) // 2 + 1))
    negative = list(range(-(n // 2), 0))
    return [k * scale for k in positive + negative]


def rfftfreq(n: int, d: float = 1.0) -> List[float]:
    n = _check_spacing(n, d, "rfftfreq")
    scale = 1.0 / (n * d)
    return [k * scale for k in range(n // 2 + 1)]


def _items(values: List[float], interleaved: bool, op: str) -> List:
    if not interleaved:
        return values
    if len(values) % 2:
        raise LengthMismatch("%s expects an even-length interleaved buffer; got %d" % (op, len(values)))
    return [values[i : i + 2] for i in range(0, len(values), 2)]


def _flatten_items(items: List, interleaved: bool) -> List[float]:
    if not interleaved:
        return items
    return [v for pair in items for v in pair]


def fftshift(data, interleaved: bool = False) -> List[float]:
    """Move the zero-frequency bin to the centre of the buffer."""

    items = _items(as_buffer(data), interleaved, "fftshift")
    pivot = (len(items) + 1) // 2
    return _flatten_items(items[pivot:] + items[:pivot], interleaved)


def ifftshift(data, interleaved: bool = False) -> List[float]:
    items = _items(as_buffer(data), interleaved, "ifftshift")
    pivot = len(items) // 2
    return _flatten_items(items[pivot:] + items[:pivot], interleaved)


__all__ = [
    "fft",
    "fftfreq",
    "fftshift",
    "ifft",
    "ifftshift",
    "irfft",
    "rfft",
    "rfftfreq",
]
