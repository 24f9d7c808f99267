from __future__ import annotations

import importlib
import logging

import pytest

import flatnum
from flatnum import kernel
from flatnum.errors import BackendUnavailable, InvalidBuffer, KernelError, LengthMismatch


def test_parse_bool_env_understands_synonyms():
    assert kernel._parse_bool_env("1") is True
    assert kernel._parse_bool_env("TRUE") is True
    assert kernel._parse_bool_env(" yes ") is True
    assert kernel._parse_bool_env("0") is False
    assert kernel._parse_bool_env("off") is False
    assert kernel._parse_bool_env("auto") is None


def test_backend_call_propagates_in_strict_mode(monkeypatch: pytest.MonkeyPatch):
    class FailingBackend:
        def mean(self, *_args):
            raise RuntimeError("backend failure")

    monkeypatch.setattr(kernel, "_ACCEL_BACKEND", FailingBackend())
    monkeypatch.setattr(kernel, "_STRICT_BACKEND", True)

    with pytest.raises(RuntimeError):
        kernel.mean([1.0, 2.0, 3.0])


def test_backend_call_falls_back_when_not_strict(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
):
    class FailingBackend:
        def mean(self, *_args):
            raise RuntimeError("backend failure")

    monkeypatch.setattr(kernel, "_ACCEL_BACKEND", FailingBackend())
    monkeypatch.setattr(kernel, "_STRICT_BACKEND", False)

    assert kernel._backend_call("mean", [1.0, 2.0, 3.0]) is None
    with caplog.at_level(logging.WARNING, logger="flatnum.kernel"):
        assert kernel.mean([1.0, 2.0, 3.0]) == 2.0
    assert "retrying on the reference kernel" in caplog.text


def test_kernel_errors_propagate_even_when_not_strict(monkeypatch: pytest.MonkeyPatch):
    class RejectingBackend:
        def dot(self, *_args):
            raise LengthMismatch("rejected")

    monkeypatch.setattr(kernel, "_ACCEL_BACKEND", RejectingBackend())
    monkeypatch.setattr(kernel, "_STRICT_BACKEND", False)

    with pytest.raises(LengthMismatch, match="rejected"):
        kernel.dot([1.0], [2.0])


def test_bad_input_is_not_reported_as_backend_failure(
    backend, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
):
    monkeypatch.setattr(kernel, "_STRICT_BACKEND", False)

    with caplog.at_level(logging.WARNING, logger="flatnum.kernel"):
        with pytest.raises(InvalidBuffer):
            kernel.sum(["a", "b"])
        with pytest.raises(InvalidBuffer):
            kernel.add_arrays([1.0, None], [1.0, 2.0])
    assert caplog.records == []
    assert issubclass(InvalidBuffer, ValueError)


def test_auto_selection_skips_unavailable_backends(monkeypatch: pytest.MonkeyPatch):
    class UnavailableBackend:
        @staticmethod
        def is_available():
            return False

    monkeypatch.setattr(kernel, "_ACCELERATED", {"numpy": UnavailableBackend})

    assert kernel._select_backend("auto") == ("python", None)
    assert kernel.available_backends() == ["python"]
    with pytest.raises(BackendUnavailable):
        kernel._select_backend("numpy")


def test_missing_operations_use_reference(monkeypatch: pytest.MonkeyPatch):
    calls = []

    class PartialBackend:
        def sum(self, data):
            calls.append("sum")
            return 42.0

    monkeypatch.setattr(kernel, "_ACCEL_BACKEND", PartialBackend())

    assert kernel.sum([1.0]) == 42.0
    assert kernel.determinant([1.0, 2.0, 3.0, 4.0], 2) == -2.0
    assert calls == ["sum"]


def test_set_backend_switches_and_reports(backend):
    info = kernel.get_backend_info()
    assert info["name"] == backend
    assert info["accelerated"] is (backend != "python")
    assert isinstance(info["strict"], bool)


def test_set_backend_rejects_unknown_name():
    before = kernel.get_backend_info()
    with pytest.raises(BackendUnavailable):
        kernel.set_backend("cuda")
    assert kernel.get_backend_info() == before


def test_set_strict_overrides_and_restores():
    default = kernel.get_backend_info()["strict"]
    try:
        kernel.set_strict(True)
        assert kernel.get_backend_info()["strict"] is True
        kernel.set_strict(False)
        assert kernel.get_backend_info()["strict"] is False
    finally:
        kernel.set_strict(None)
    assert kernel.get_backend_info()["strict"] is default


def test_available_backends_lists_numpy_and_python():
    names = kernel.available_backends()
    assert names[-1] == "python"
    assert "numpy" in names


def test_package_reexports_kernel_surface():
    assert set(kernel.__all__) <= set(flatnum.__all__)
    assert flatnum.dot([1.0, 2.0], [3.0, 4.0]) == 11.0
    assert issubclass(flatnum.SingularMatrix, KernelError)
    assert issubclass(KernelError, ValueError)
    assert isinstance(flatnum.__version__, str)


@pytest.fixture
def reload_kernel(monkeypatch: pytest.MonkeyPatch):
    def _reload(**env):
        for key in ("FLATNUM_BACKEND", "FLATNUM_STRICT"):
            monkeypatch.delenv(key, raising=False)
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return importlib.reload(kernel)

    yield _reload
    monkeypatch.undo()
    importlib.reload(kernel)


def test_environment_selects_python_backend(reload_kernel):
    module = reload_kernel(FLATNUM_BACKEND="python")
    info = module.get_backend_info()
    assert info["name"] == "python"
    assert info["accelerated"] is False
    assert info["strict"] is True


def test_environment_auto_prefers_numpy_and_is_lenient(reload_kernel):
    module = reload_kernel()
    assert module.get_backend_info() == {"name": "numpy", "accelerated": True, "strict": False}


def test_environment_strict_override(reload_kernel):
    module = reload_kernel(FLATNUM_BACKEND="numpy", FLATNUM_STRICT="off")
    assert module.get_backend_info()["strict"] is False


def test_unknown_environment_backend_falls_back(reload_kernel, caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.WARNING, logger="flatnum.kernel"):
        module = reload_kernel(FLATNUM_BACKEND="opencl")
    assert module.get_backend_info()["name"] == "numpy"
    assert "FLATNUM_BACKEND=opencl" in caplog.text
