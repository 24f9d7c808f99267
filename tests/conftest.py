import numpy as _np
import pytest

from flatnum import kernel


@pytest.fixture(params=["python", "numpy"])
def backend(request):
    """Run a test once per backend, restoring the original selection."""

    previous = kernel.get_backend_info()["name"]
    kernel.set_backend(request.param)
    try:
        yield request.param
    finally:
        kernel.set_backend(previous)


def assert_buffers_close(actual, expected, *, atol=1e-12, rtol=1e-12):
    assert len(actual) == len(expected)
    _np.testing.assert_allclose(
        _np.asarray(actual, dtype=float),
        _np.asarray(expected, dtype=float),
        rtol=rtol,
        atol=atol,
        equal_nan=True,
    )


@pytest.fixture
def close():
    return assert_buffers_close
