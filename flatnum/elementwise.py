"""Pure-Python elementwise kernels over flat float buffers.

Every operation returns a freshly allocated ``list`` of floats and never
mutates its inputs.  Degenerate inputs follow IEEE-754 rather than Python's
``math`` module: division by zero gives ±inf or NaN, domain errors give NaN,
poles give ±inf and overflow gives ±inf.  Nothing in this module raises for
such values; the only failure is :class:`~flatnum.errors.LengthMismatch` for
array-array operations on buffers of unequal length.
"""

from __future__ import annotations

import builtins as _builtins
import math
from typing import Callable, List

from ._validation import as_buffer, check_same_length

_INF = math.inf
_NAN = math.nan
_python_round = _builtins.round

Unary = Callable[[float], float]
Binary = Callable[[float, float], float]


def _unary(data, func: Unary) -> List[float]:
    return [func(v) for v in as_buffer(data)]


def _binary(a, b, func: Binary, op: str) -> List[float]:
    left = as_buffer(a)
    right = as_buffer(b)
    check_same_length(left, right, op)
    return [func(x, y) for x, y in zip(left, right)]


def _with_scalar(a, scalar, func: Binary) -> List[float]:
    value = float(scalar)
    return [func(x, value) for x in as_buffer(a)]


# IEEE-754 scalar helpers -----------------------------------------------------

def _is_odd_integer(value: float) -> bool:
    return math.isfinite(value) and value == int(value) and int(value) % 2 == 1


def _divide(x: float, y: float) -> float:
    try:
        return x / y
    except ZeroDivisionError:
        if x == 0.0 or x != x:
            return _NAN
        return math.copysign(_INF, x) * math.copysign(1.0, y)


def _power(x: float, exponent: float) -> float:
    try:
        return math.pow(x, exponent)
    except OverflowError:
        if x < 0.0 and _is_odd_integer(exponent):
            return -_INF
        return _INF
    except ValueError:
        if x == 0.0:
            # pole at zero for negative exponents
            if _is_odd_integer(exponent):
                return math.copysign(_INF, x)
            return _INF
        return _NAN


def _nan_on_domain_error(func: Unary) -> Unary:
    def wrapped(x: float) -> float:
        try:
            return func(x)
        except ValueError:
            return _NAN

    return wrapped


def _inf_on_overflow(func: Unary, signed: bool = False) -> Unary:
    def wrapped(x: float) -> float:
        try:
            return func(x)
        except OverflowError:
            return math.copysign(_INF, x) if signed else _INF

    return wrapped


def _logarithm(func: Unary, pole: float = 0.0) -> Unary:
    def wrapped(x: float) -> float:
        if x == pole:
            return -_INF
        if x < pole:
            return _NAN
        return func(x)

    return wrapped


def _integral(func) -> Unary:
    # Results always share the sign of the input, including signed zeros.
    def wrapped(x: float) -> float:
        if not math.isfinite(x):
            return x
        return math.copysign(float(func(x)), x)

    return wrapped


def _sqrt(x: float) -> float:
    if x < 0.0:
        return _NAN
    return math.sqrt(x)


def _sign(x: float) -> float:
    if x != x:
        return x
    if x > 0.0:
        return 1.0
    if x < 0.0:
        return -1.0
    return 0.0


def _arccosh(x: float) -> float:
    if x < 1.0:
        return _NAN
    return math.acosh(x)


def _arctanh(x: float) -> float:
    if x == 1.0 or x == -1.0:
        return math.copysign(_INF, x)
    if not -1.0 < x < 1.0:
        return _NAN
    return math.atanh(x)


def _fmod(x: float, y: float) -> float:
    try:
        return math.fmod(x, y)
    except ValueError:
        return _NAN


def _maximum(x: float, y: float) -> float:
    if x != x:
        return x
    if y != y:
        return y
    return x if x >= y else y


def _minimum(x: float, y: float) -> float:
    if x != x:
        return x
    if y != y:
        return y
    return x if x <= y else y


# arithmetic -----------------------------------------------------------------

def add_arrays(a, b) -> List[float]:
    return _binary(a, b, lambda x, y: x + y, "add_arrays")


def add_scalar(a, scalar) -> List[float]:
    return _with_scalar(a, scalar, lambda x, y: x + y)


def sub_arrays(a, b) -> List[float]:
    return _binary(a, b, lambda x, y: x - y, "sub_arrays")


def sub_scalar(a, scalar) -> List[float]:
    return _with_scalar(a, scalar, lambda x, y: x - y)


def mul_arrays(a, b) -> List[float]:
    return _binary(a, b, lambda x, y: x * y, "mul_arrays")


def mul_scalar(a, scalar) -> List[float]:
    return _with_scalar(a, scalar, lambda x, y: x * y)


def div_arrays(a, b) -> List[float]:
    return _binary(a, b, _divide, "div_arrays")


def div_scalar(a, scalar) -> List[float]:
    return _with_scalar(a, scalar, _divide)


def pow_scalar(a, exponent) -> List[float]:
    return _with_scalar(a, exponent, _power)


def mod_arrays(a, b) -> List[float]:
    """Remainder with the sign of the dividend, as C ``fmod``."""

    return _binary(a, b, _fmod, "mod_arrays")


def mod_scalar(a, scalar) -> List[float]:
    return _with_scalar(a, scalar, _fmod)


# magnitude ------------------------------------------------------------------

def abs(data) -> List[float]:
    return _unary(data, math.fabs)


def square(data) -> List[float]:
    return _unary(data, lambda x: x * x)


def sqrt(data) -> List[float]:
    return _unary(data, _sqrt)


def cbrt(data) -> List[float]:
    return _unary(data, math.cbrt)


def reciprocal(data) -> List[float]:
    return _unary(data, lambda x: _divide(1.0, x))


def sign(data) -> List[float]:
    return _unary(data, _sign)


# exponential and logarithm ---------------------------------------------------

def exp(data) -> List[float]:
    return _unary(data, _inf_on_overflow(math.exp))


def exp2(data) -> List[float]:
    return _unary(data, _inf_on_overflow(math.exp2))


def expm1(data) -> List[float]:
    return _unary(data, _inf_on_overflow(math.expm1))


def log(data) -> List[float]:
    return _unary(data, _logarithm(math.log))


def log2(data) -> List[float]:
    return _unary(data, _logarithm(math.log2))


def log10(data) -> List[float]:
    return _unary(data, _logarithm(math.log10))


def log1p(data) -> List[float]:
    return _unary(data, _logarithm(math.log1p, pole=-1.0))


# trigonometric --------------------------------------------------------------

def sin(data) -> List[float]:
    return _unary(data, _nan_on_domain_error(math.sin))


def cos(data) -> List[float]:
    return _unary(data, _nan_on_domain_error(math.cos))


def tan(data) -> List[float]:
    return _unary(data, _nan_on_domain_error(math.tan))


def arcsin(data) -> List[float]:
    return _unary(data, _nan_on_domain_error(math.asin))


def arccos(data) -> List[float]:
    return _unary(data, _nan_on_domain_error(math.acos))


def arctan(data) -> List[float]:
    return _unary(data, math.atan)


def arctan2(y, x) -> List[float]:
    return _binary(y, x, math.atan2, "arctan2")


def hypot(a, b) -> List[float]:
    return _binary(a, b, math.hypot, "hypot")


def deg2rad(data) -> List[float]:
    return _unary(data, lambda x: x * math.pi / 180.0)


def rad2deg(data) -> List[float]:
    return _unary(data, lambda x: x * 180.0 / math.pi)


# hyperbolic -----------------------------------------------------------------

def sinh(data) -> List[float]:
    return _unary(data, _inf_on_overflow(math.sinh, signed=True))


def cosh(data) -> List[float]:
    return _unary(data, _inf_on_overflow(math.cosh))


def tanh(data) -> List[float]:
    return _unary(data, math.tanh)


def arcsinh(data) -> List[float]:
    return _unary(data, math.asinh)


def arccosh(data) -> List[float]:
    return _unary(data, _arccosh)


def arctanh(data) -> List[float]:
    return _unary(data, _arctanh)


# rounding -------------------------------------------------------------------

def round(data) -> List[float]:
    """Round half to even."""

    return _unary(data, _integral(_python_round))


def floor(data) -> List[float]:
    return _unary(data, _integral(math.floor))


def ceil(data) -> List[float]:
    return _unary(data, _integral(math.ceil))


def trunc(data) -> List[float]:
    return _unary(data, _integral(math.trunc))


# ranges ---------------------------------------------------------------------

def clip(data, lo, hi) -> List[float]:
    lo = float(lo)
    hi = float(hi)

    def _clip(v: float) -> float:
        if v != v:
            return v
        if v < lo:
            v = lo
        if v > hi:
            v = hi
        return v

    return _unary(data, _clip)


def maximum(a, b) -> List[float]:
    return _binary(a, b, _maximum, "maximum")


def minimum(a, b) -> List[float]:
    return _binary(a, b, _minimum, "minimum")


__all__ = [
    "abs",
    "add_arrays",
    "add_scalar",
    "arccos",
    "arccosh",
    "arcsin",
    "arcsinh",
    "arctan",
    "arctan2",
    "arctanh",
    "cbrt",
    "ceil",
    "clip",
    "cos",
    "cosh",
    "deg2rad",
    "div_arrays",
    "div_scalar",
    "exp",
    "exp2",
    "expm1",
    "floor",
    "hypot",
    "log",
    "log10",
    "log1p",
    "log2",
    "maximum",
    "minimum",
    "mod_arrays",
    "mod_scalar",
    "mul_arrays",
    "mul_scalar",
    "pow_scalar",
    "rad2deg",
    "reciprocal",
    "round",
    "sign",
    "sin",
    "sinh",
    "sqrt",
    "square",
    "sub_arrays",
    "sub_scalar",
    "tan",
    "tanh",
    "trunc",
]
