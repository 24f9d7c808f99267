"""Typed failures raised by the numeric kernels.

Every error is raised before any output is produced.  None of them are
transient.
"""

from __future__ import annotations


class KernelError(ValueError):
    """Base class for all input-dependent kernel failures."""


class LengthMismatch(KernelError):
    """Two buffers that must be the same length are not."""


class DimensionMismatch(KernelError):
    """A buffer length does not agree with the dimensions supplied for it."""


class SingularMatrix(KernelError):
    """Inverse requested for a matrix whose determinant is below threshold."""


class UnsupportedMatrixSize(KernelError):
    """Determinant or inverse requested for a size other than 2 or 3."""


class InvalidFFTLength(KernelError):
    """Transform length is not a power of two."""


class InvalidBuffer(KernelError):
    """A buffer holds values that cannot be read as real numbers."""


class BackendUnavailable(RuntimeError):
    """An explicitly requested backend cannot be loaded."""


__all__ = [
    "BackendUnavailable",
    "DimensionMismatch",
    "InvalidBuffer",
    "InvalidFFTLength",
    "KernelError",
    "LengthMismatch",
    "SingularMatrix",
    "UnsupportedMatrixSize",
]
