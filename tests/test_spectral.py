from __future__ import annotations

import math

import numpy as real_numpy
import pytest

from flatnum import kernel
from flatnum.errors import InvalidFFTLength, LengthMismatch


def _complex(interleaved):
    values = real_numpy.asarray(interleaved, dtype=float)
    return values[0::2] + 1j * values[1::2]


def test_impulse_has_flat_spectrum(backend, close):
    close(kernel.fft([1.0, 0.0, 0.0, 0.0]), [1.0, 0.0] * 4, atol=1e-10)


def test_constant_signal_concentrates_in_dc(backend, close):
    close(kernel.fft([1.0, 1.0, 1.0, 1.0]), [4.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0], atol=1e-10)


def test_single_sample(backend):
    assert kernel.fft([5.0]) == [5.0, 0.0]
    assert kernel.ifft([5.0, 0.0], 1) == [5.0, 0.0]


def test_output_is_interleaved_and_twice_as_long(backend):
    assert len(kernel.fft([0.0] * 16)) == 32


@pytest.mark.parametrize("n", [2, 8, 64, 256])
def test_matches_numpy_fft(backend, close, n):
    rng = real_numpy.random.default_rng(n)
    signal = rng.normal(size=n)
    spectrum = _complex(kernel.fft(signal))
    expected = real_numpy.fft.fft(signal)
    close(spectrum.real, expected.real, atol=1e-9)
    close(spectrum.imag, expected.imag, atol=1e-9)


@pytest.mark.parametrize("n", [1, 2, 4, 32, 128])
def test_inverse_round_trip(backend, close, n):
    rng = real_numpy.random.default_rng(100 + n)
    signal = rng.uniform(-1.0, 1.0, size=n)
    restored = kernel.ifft(kernel.fft(signal), n)
    close(restored[0::2], signal, atol=1e-10)
    close(restored[1::2], [0.0] * n, atol=1e-10)


def test_ifft_matches_numpy_on_complex_input(backend, close):
    rng = real_numpy.random.default_rng(9)
    spectrum = rng.normal(size=16) + 1j * rng.normal(size=16)
    interleaved = real_numpy.empty(32)
    interleaved[0::2] = spectrum.real
    interleaved[1::2] = spectrum.imag
    result = _complex(kernel.ifft(interleaved, 16))
    expected = real_numpy.fft.ifft(spectrum)
    close(result.real, expected.real, atol=1e-12)
    close(result.imag, expected.imag, atol=1e-12)


def test_transform_is_linear(backend, close):
    rng = real_numpy.random.default_rng(21)
    x = rng.normal(size=32)
    y = rng.normal(size=32)
    combined = kernel.fft(2.0 * x + 3.0 * y)
    separate = real_numpy.array(kernel.fft(x)) * 2.0 + real_numpy.array(kernel.fft(y)) * 3.0
    close(combined, separate, atol=1e-9)


def test_sinusoid_peaks_at_its_bin(backend):
    n = 64
    signal = [math.sin(2.0 * math.pi * 3 * t / n) for t in range(n)]
    magnitudes = real_numpy.abs(_complex(kernel.fft(signal)))
    peaks = sorted(real_numpy.argsort(magnitudes)[-2:].tolist())
    assert peaks == [3, n - 3]
    assert magnitudes[3] == pytest.approx(n / 2)


@pytest.mark.parametrize("n", [0, 3, 6, 100])
def test_fft_rejects_non_power_of_two(backend, n):
    with pytest.raises(InvalidFFTLength):
        kernel.fft([0.0] * n)


def test_ifft_validates_length(backend):
    with pytest.raises(InvalidFFTLength):
        kernel.ifft([0.0] * 6, 3)
    with pytest.raises(LengthMismatch):
        kernel.ifft([1.0, 0.0, 0.0], 2)


def test_rfft_keeps_non_negative_bins(backend, close):
    rng = real_numpy.random.default_rng(4)
    signal = rng.normal(size=8)
    result = _complex(kernel.rfft(signal))
    expected = real_numpy.fft.rfft(signal)
    assert result.shape == (5,)
    close(result.real, expected.real, atol=1e-10)
    close(result.imag, expected.imag, atol=1e-10)


@pytest.mark.parametrize("n,d", [(8, 1.0), (5, 0.1), (1, 2.0)])
def test_frequency_grids_match_numpy(backend, close, n, d):
    close(kernel.fftfreq(n, d), real_numpy.fft.fftfreq(n, d))
    close(kernel.rfftfreq(n, d), real_numpy.fft.rfftfreq(n, d))


def test_frequency_grids_reject_bad_arguments(backend):
    with pytest.raises(InvalidFFTLength):
        kernel.fftfreq(0)
    with pytest.raises(ValueError):
        kernel.rfftfreq(4, 0.0)


@pytest.mark.parametrize("n", [4, 5])
def test_shift_matches_numpy(backend, n):
    data = [float(i) for i in range(n)]
    assert kernel.fftshift(data) == real_numpy.fft.fftshift(data).tolist()
    assert kernel.ifftshift(data) == real_numpy.fft.ifftshift(data).tolist()
    assert kernel.ifftshift(kernel.fftshift(data)) == data


def test_shift_moves_interleaved_pairs(backend):
    data = [0.0, 0.5, 1.0, 1.5, 2.0, 2.5, 3.0, 3.5]
    shifted = kernel.fftshift(data, True)
    assert shifted == [2.0, 2.5, 3.0, 3.5, 0.0, 0.5, 1.0, 1.5]
    assert kernel.ifftshift(shifted, True) == data
    with pytest.raises(LengthMismatch):
        kernel.fftshift([1.0, 2.0, 3.0], True)


@pytest.mark.parametrize("n", [1, 2, 8, 64])
def test_irfft_inverts_rfft(backend, close, n):
    rng = real_numpy.random.default_rng(300 + n)
    signal = rng.normal(size=n)
    restored = kernel.irfft(kernel.rfft(signal), n)
    assert len(restored) == n
    close(restored, signal, atol=1e-10)


@pytest.mark.parametrize("n", [4, 16])
def test_irfft_matches_numpy(backend, close, n):
    rng = real_numpy.random.default_rng(n)
    half = rng.normal(size=n // 2 + 1) + 1j * rng.normal(size=n // 2 + 1)
    interleaved = real_numpy.empty(2 * half.size)
    interleaved[0::2] = half.real
    interleaved[1::2] = half.imag
    close(kernel.irfft(interleaved, n), real_numpy.fft.irfft(half, n), atol=1e-12)


def test_irfft_validates_length(backend):
    with pytest.raises(InvalidFFTLength):
        kernel.irfft([0.0] * 6, 3)
    with pytest.raises(LengthMismatch):
        kernel.irfft([0.0] * 4, 4)


def test_lengths_must_be_integers(backend):
    with pytest.raises(InvalidFFTLength):
        kernel.ifft([1.0, 0.0, 0.0, 0.0], 2.0)
    with pytest.raises(InvalidFFTLength):
        kernel.irfft([1.0, 0.0, 0.0, 0.0], 2.0)
    with pytest.raises(InvalidFFTLength):
        kernel.fftfreq(4.0)
    assert kernel.ifft([1.0, 0.0, 0.0, 0.0], real_numpy.int64(2)) == [0.5, 0.0, 0.5, 0.0]
