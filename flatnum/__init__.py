"""flatnum: numeric kernels over flat float buffers."""

from importlib.metadata import PackageNotFoundError, version

from .errors import (
    BackendUnavailable,
    DimensionMismatch,
    InvalidBuffer,
    InvalidFFTLength,
    KernelError,
    LengthMismatch,
    SingularMatrix,
    UnsupportedMatrixSize,
)
from .kernel import *  # noqa: F401,F403
from .kernel import __all__ as _kernel_all


try:  # pragma: no cover - metadata is provided at build time
    __version__ = version("flatnum")
except PackageNotFoundError:  # pragma: no cover - fallback during development
    __version__ = "0.0.0.dev0"


__all__ = [
    "__version__",
    "BackendUnavailable",
    "DimensionMismatch",
    "InvalidBuffer",
    "InvalidFFTLength",
    "KernelError",
    "LengthMismatch",
    "SingularMatrix",
    "UnsupportedMatrixSize",
    *_kernel_all,
]
