import numpy as np
import pytest

from physio_features import fft
from physio_features.exceptions import PreconditionError

LENGTHS = [1, 2, 3, 5, 8, 12, 16, 17, 100, 128, 257]


def naive_circular_convolution(x, y):
    n = len(x)
    return np.array([sum(x[j] * y[(k - j) % n] for j in range(n)) for k in range(n)])


@pytest.mark.parametrize("n", LENGTHS)
def test_transform_matches_numpy(n):
    rng = np.random.default_rng(n)
    real, imag = rng.normal(size = n), rng.normal(size = n)
    out_real, out_imag = fft.transform(real, imag)
    expected = np.fft.fft(real + 1j * imag)
    np.testing.assert_allclose(out_real, expected.real, atol = 1e-8)
    np.testing.assert_allclose(out_imag, expected.imag, atol = 1e-8)


@pytest.mark.parametrize("n", LENGTHS)
def test_inverse_round_trip(n):
    rng = np.random.default_rng(100 + n)
    real, imag = rng.normal(size = n), rng.normal(size = n)
    back_real, back_imag = fft.inverse_transform(*fft.transform(real, imag))
    np.testing.assert_allclose(back_real / n, real, atol = 1e-9)
    np.testing.assert_allclose(back_imag / n, imag, atol = 1e-9)


def test_inverse_is_unnormalized():
    real = np.array([1.0, 0.0, 0.0, 0.0])
    out_real, out_imag = fft.inverse_transform(real, np.zeros(4))
    np.testing.assert_allclose(out_real, np.ones(4))
    np.testing.assert_allclose(out_imag, np.zeros(4), atol = 1e-12)


def test_bluestein_matches_radix2_on_power_of_two():
    rng = np.random.default_rng(7)
    real, imag = rng.normal(size = 32), rng.normal(size = 32)
    radix2 = fft.transform_radix2(real, imag)
    bluestein = fft.transform_bluestein(real, imag)
    np.testing.assert_allclose(bluestein[0], radix2[0], atol = 1e-9)
    np.testing.assert_allclose(bluestein[1], radix2[1], atol = 1e-9)


def test_transform_does_not_mutate_inputs():
    real = np.arange(6, dtype = float)
    imag = np.zeros(6)
    fft.transform(real, imag)
    np.testing.assert_array_equal(real, np.arange(6, dtype = float))
    np.testing.assert_array_equal(imag, np.zeros(6))


def test_empty_input_is_returned_unchanged():
    out_real, out_imag = fft.transform([], [])
    assert len(out_real) == 0
    assert len(out_imag) == 0


def test_mismatched_lengths_rejected():
    with pytest.raises(PreconditionError):
        fft.transform(np.zeros(4), np.zeros(3))
    with pytest.raises(PreconditionError):
        fft.convolve(np.zeros(4), np.zeros(5))


def test_radix2_rejects_other_lengths():
    with pytest.raises(PreconditionError):
        fft.transform_radix2(np.zeros(6), np.zeros(6))


def test_length_limit_applies_to_every_path(monkeypatch):
    monkeypatch.setattr(fft, "MAX_TRANSFORM_LENGTH", 16)
    with pytest.raises(PreconditionError):
        fft.transform(np.zeros(17), np.zeros(17))
    with pytest.raises(PreconditionError):
        fft.transform(np.zeros(16), np.zeros(16))
    with pytest.raises(PreconditionError):
        fft.transform_radix2(np.zeros(16), np.zeros(16))
    with pytest.raises(PreconditionError):
        fft.transform_bluestein(np.zeros(16), np.zeros(16))


def test_bluestein_padding_may_exceed_length_limit(monkeypatch):
    # Length 12 convolves at length 32 internally
    monkeypatch.setattr(fft, "MAX_TRANSFORM_LENGTH", 16)
    rng = np.random.default_rng(12)
    real, imag = rng.normal(size = 12), rng.normal(size = 12)
    out_real, out_imag = fft.transform(real, imag)
    expected = np.fft.fft(real + 1j * imag)
    np.testing.assert_allclose(out_real, expected.real, atol = 1e-9)
    np.testing.assert_allclose(out_imag, expected.imag, atol = 1e-9)


@pytest.mark.parametrize("n", [1, 4, 7, 10, 16])
def test_convolve_matches_naive(n):
    rng = np.random.default_rng(n)
    x, y = rng.normal(size = n), rng.normal(size = n)
    np.testing.assert_allclose(fft.convolve(x, y), naive_circular_convolution(x, y), atol = 1e-9)


def test_convolve_complex_matches_naive():
    rng = np.random.default_rng(3)
    x = rng.normal(size = 9) + 1j * rng.normal(size = 9)
    y = rng.normal(size = 9) + 1j * rng.normal(size = 9)
    out_real, out_imag = fft.convolve_complex(x.real, x.imag, y.real, y.imag)
    expected = naive_circular_convolution(x, y)
    np.testing.assert_allclose(out_real, expected.real, atol = 1e-9)
    np.testing.assert_allclose(out_imag, expected.imag, atol = 1e-9)


def test_power_of_two_helpers():
    assert fft.is_power_of_two(1)
    assert fft.is_power_of_two(64)
    assert not fft.is_power_of_two(0)
    assert not fft.is_power_of_two(12)
    assert fft.highest_power_of_two(12) == 8
    assert fft.highest_power_of_two(16) == 16
    assert fft.next_power_of_two(12) == 16
    assert fft.next_power_of_two(16) == 16
    assert fft.next_power_of_two(1) == 1
