"""Public kernel surface with backend selection and reference fall-back.

Every operation is first offered to the accelerated backend (NumPy by
default).  When that backend does not define the operation, the call is
served by the pure-Python reference kernels in :mod:`flatnum.elementwise`,
:mod:`flatnum.reductions`, :mod:`flatnum.linalg` and :mod:`flatnum.spectral`.

Configuration is read from the environment at import time:

``FLATNUM_BACKEND``
    ``auto`` (default), ``numpy`` or ``python``.
``FLATNUM_STRICT``
    ``1``/``true``/``yes``/``on`` re-raises unexpected accelerated-backend
    failures; ``0``/``false``/``no``/``off`` logs them and retries on the
    reference kernels.  ``auto`` is strict only when a specific accelerated
    backend was requested.

Typed :class:`~flatnum.errors.KernelError` failures always propagate,
whatever the strict setting.
"""

from __future__ import annotations

import logging
import os
import types
from typing import Any, Callable, Dict, List, Tuple

from . import elementwise as _elementwise
from . import linalg as _linalg
from . import numpy_backend as _numpy_backend
from . import reductions as _reductions
from . import spectral as _spectral
from .errors import BackendUnavailable, KernelError

LOGGER = logging.getLogger(__name__)

_AUTO_PREFERENCES = {"auto", "accelerated"}
_ACCELERATED: Dict[str, types.ModuleType] = {"numpy": _numpy_backend}
_REFERENCE: Dict[str, Callable[..., Any]] = {
    name: getattr(module, name)
    for module in (_elementwise, _reductions, _linalg, _spectral)
    for name in module.__all__
}


def _parse_bool_env(value: str) -> bool | None:
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return None


def _select_backend(preference: str) -> Tuple[str, types.ModuleType | None]:
    preference = (preference or "auto").strip().lower()
    if preference in _AUTO_PREFERENCES:
        order: Tuple[str, ...] = tuple(_ACCELERATED) + ("python",)
    else:
        order = (preference,)

    for name in order:
        if name == "python":
            return "python", None
        module = _ACCELERATED.get(name)
        if module is None:
            continue
        try:
            if module.is_available():
                return name, module
        except Exception:
            LOGGER.debug("backend %s failed its availability probe", name, exc_info=True)
            continue
    if preference in _AUTO_PREFERENCES:
        return "python", None
    raise BackendUnavailable("numeric backend %r is not available" % preference)


_BACKEND_PREF = os.getenv("FLATNUM_BACKEND", "auto").strip().lower()
try:
    _BACKEND_NAME, _ACCEL_BACKEND = _select_backend(_BACKEND_PREF)
except BackendUnavailable:
    LOGGER.warning("FLATNUM_BACKEND=%s is not available; selecting automatically", _BACKEND_PREF)
    _BACKEND_PREF = "auto"
    _BACKEND_NAME, _ACCEL_BACKEND = _select_backend(_BACKEND_PREF)

_STRICT_PREF = os.getenv("FLATNUM_STRICT", "auto")
_STRICT_BACKEND_OVERRIDE = _parse_bool_env(_STRICT_PREF)
_STRICT_BACKEND = (
    _STRICT_BACKEND_OVERRIDE
    if _STRICT_BACKEND_OVERRIDE is not None
    else _BACKEND_PREF not in _AUTO_PREFERENCES
)
LOGGER.debug("numeric backend: %s (strict=%s)", _BACKEND_NAME, _STRICT_BACKEND)


def _backend_call(name: str, *args):
    if _ACCEL_BACKEND is None:
        return None
    func = getattr(_ACCEL_BACKEND, name, None)
    if func is None:
        return None
    try:
        return func(*args)
    except KernelError:
        raise
    except Exception:
        if _STRICT_BACKEND:
            raise
        LOGGER.warning(
            "%s backend failed in %s; retrying on the reference kernel",
            _BACKEND_NAME,
            name,
            exc_info=True,
        )
        return None


def _dispatch(name: str, *args):
    result = _backend_call(name, *args)
    if result is not None:
        return result
    return _REFERENCE[name](*args)


# configuration -----------------------------------------------------------------

def set_backend(name: str) -> str:
    """Switch the accelerated backend; ``"python"`` disables acceleration."""

    global _BACKEND_NAME, _ACCEL_BACKEND
    _BACKEND_NAME, _ACCEL_BACKEND = _select_backend(name)
    LOGGER.debug("numeric backend switched to %s", _BACKEND_NAME)
    return _BACKEND_NAME


def set_strict(flag: bool | None) -> None:
    """Force strict mode on or off; ``None`` restores the environment default."""

    global _STRICT_BACKEND
    if flag is None:
        _STRICT_BACKEND = (
            _STRICT_BACKEND_OVERRIDE
            if _STRICT_BACKEND_OVERRIDE is not None
            else _BACKEND_PREF not in _AUTO_PREFERENCES
        )
    else:
        _STRICT_BACKEND = bool(flag)


def get_backend_info() -> Dict[str, Any]:
    return {
        "name": _BACKEND_NAME,
        "accelerated": _ACCEL_BACKEND is not None,
        "strict": _STRICT_BACKEND,
    }


def available_backends() -> List[str]:
    names = []
    for name, module in _ACCELERATED.items():
        try:
            if module.is_available():
                names.append(name)
        except Exception:
            LOGGER.debug("backend %s failed its availability probe", name, exc_info=True)
    names.append("python")
    return names


# elementwise -------------------------------------------------------------------

def add_arrays(a, b) -> List[float]:
    return _dispatch("add_arrays", a, b)


def add_scalar(a, scalar: float) -> List[float]:
    return _dispatch("add_scalar", a, scalar)


def sub_arrays(a, b) -> List[float]:
    return _dispatch("sub_arrays", a, b)


def sub_scalar(a, scalar: float) -> List[float]:
    return _dispatch("sub_scalar", a, scalar)


def mul_arrays(a, b) -> List[float]:
    return _dispatch("mul_arrays", a, b)


def mul_scalar(a, scalar: float) -> List[float]:
    return _dispatch("mul_scalar", a, scalar)


def div_arrays(a, b) -> List[float]:
    return _dispatch("div_arrays", a, b)


def div_scalar(a, scalar: float) -> List[float]:
    return _dispatch("div_scalar", a, scalar)


def pow_scalar(a, exponent: float) -> List[float]:
    return _dispatch("pow_scalar", a, exponent)


def mod_arrays(a, b) -> List[float]:
    return _dispatch("mod_arrays", a, b)


def mod_scalar(a, scalar: float) -> List[float]:
    return _dispatch("mod_scalar", a, scalar)


def abs(data) -> List[float]:
    return _dispatch("abs", data)


def square(data) -> List[float]:
    return _dispatch("square", data)


def sqrt(data) -> List[float]:
    return _dispatch("sqrt", data)


def cbrt(data) -> List[float]:
    return _dispatch("cbrt", data)


def reciprocal(data) -> List[float]:
    return _dispatch("reciprocal", data)


def sign(data) -> List[float]:
    return _dispatch("sign", data)


def exp(data) -> List[float]:
    return _dispatch("exp", data)


def exp2(data) -> List[float]:
    return _dispatch("exp2", data)


def expm1(data) -> List[float]:
    return _dispatch("expm1", data)


def log(data) -> List[float]:
    return _dispatch("log", data)


def log2(data) -> List[float]:
    return _dispatch("log2", data)


def log10(data) -> List[float]:
    return _dispatch("log10", data)


def log1p(data) -> List[float]:
    return _dispatch("log1p", data)


def sin(data) -> List[float]:
    return _dispatch("sin", data)


def cos(data) -> List[float]:
    return _dispatch("cos", data)


def tan(data) -> List[float]:
    return _dispatch("tan", data)


def arcsin(data) -> List[float]:
    return _dispatch("arcsin", data)


def arccos(data) -> List[float]:
    return _dispatch("arccos", data)


def arctan(data) -> List[float]:
    return _dispatch("arctan", data)


def arctan2(y, x) -> List[float]:
    return _dispatch("arctan2", y, x)


def hypot(a, b) -> List[float]:
    return _dispatch("hypot", a, b)


def sinh(data) -> List[float]:
    return _dispatch("sinh", data)


def cosh(data) -> List[float]:
    return _dispatch("cosh", data)


def tanh(data) -> List[float]:
    return _dispatch("tanh", data)


def arcsinh(data) -> List[float]:
    return _dispatch("arcsinh", data)


def arccosh(data) -> List[float]:
    return _dispatch("arccosh", data)


def arctanh(data) -> List[float]:
    return _dispatch("arctanh", data)


def round(data) -> List[float]:
    return _dispatch("round", data)


def floor(data) -> List[float]:
    return _dispatch("floor", data)


def ceil(data) -> List[float]:
    return _dispatch("ceil", data)


def trunc(data) -> List[float]:
    return _dispatch("trunc", data)


def clip(data, lo: float, hi: float) -> List[float]:
    return _dispatch("clip", data, lo, hi)


def maximum(a, b) -> List[float]:
    return _dispatch("maximum", a, b)


def minimum(a, b) -> List[float]:
    return _dispatch("minimum", a, b)


def deg2rad(data) -> List[float]:
    return _dispatch("deg2rad", data)


def rad2deg(data) -> List[float]:
    return _dispatch("rad2deg", data)


# reductions --------------------------------------------------------------------

def sum(data) -> float:
    return _dispatch("sum", data)


def mean(data) -> float:
    """Arithmetic mean; 0.0 for an empty buffer."""

    return _dispatch("mean", data)


def max(data) -> float:
    """Largest element; ``-inf`` for an empty buffer."""

    return _dispatch("max", data)


def min(data) -> float:
    """Smallest element; ``+inf`` for an empty buffer."""

    return _dispatch("min", data)


def variance(data) -> float:
    return _dispatch("variance", data)


def std(data) -> float:
    return _dispatch("std", data)


def prod(data) -> float:
    return _dispatch("prod", data)


def median(data) -> float:
    return _dispatch("median", data)


def ptp(data) -> float:
    return _dispatch("ptp", data)


# linear algebra ----------------------------------------------------------------

def matmul(a, b, m: int, k: int, n: int) -> List[float]:
    """Row-major ``(m×k) @ (k×n)``."""

    return _dispatch("matmul", a, b, m, k, n)


def dot(a, b) -> float:
    return _dispatch("dot", a, b)


def transpose(a, rows: int, cols: int) -> List[float]:
    return _dispatch("transpose", a, rows, cols)


def trace(a, rows: int, cols: int) -> float:
    return _dispatch("trace", a, rows, cols)


def outer(a, b) -> List[float]:
    return _dispatch("outer", a, b)


def norm(a) -> float:
    return _dispatch("norm", a)


def determinant(a, n: int) -> float:
    return _dispatch("determinant", a, n)


def inverse(a, n: int) -> List[float]:
    return _dispatch("inverse", a, n)


# spectral ----------------------------------------------------------------------

def fft(data) -> List[float]:
    """Forward FFT of a real power-of-two buffer; interleaved output."""

    return _dispatch("fft", data)


def ifft(data, n: int) -> List[float]:
    return _dispatch("ifft", data, n)


def rfft(data) -> List[float]:
    return _dispatch("rfft", data)


def irfft(data, n: int) -> List[float]:
    """Inverse of :func:`rfft`: ``n//2 + 1`` interleaved bins to ``n`` reals."""

    return _dispatch("irfft", data, n)


def fftfreq(n: int, d: float = 1.0) -> List[float]:
    return _dispatch("fftfreq", n, d)


def rfftfreq(n: int, d: float = 1.0) -> List[float]:
    return _dispatch("rfftfreq", n, d)


def fftshift(data, interleaved: bool = False) -> List[float]:
    return _dispatch("fftshift", data, interleaved)


def ifftshift(data, interleaved: bool = False) -> List[float]:
    return _dispatch("ifftshift", data, interleaved)


__all__ = [
    "available_backends",
    "get_backend_info",
    "set_backend",
    "set_strict",
    *_REFERENCE,
]
