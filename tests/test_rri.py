import numpy as np
import pytest

from physio_features.exceptions import ConfigurationError
from physio_features.exceptions import PreconditionError
from physio_features.rri import compute_heart_rate
from physio_features.rri import extract_rr_intervals
from physio_features.rri import find_peak_indices


def peak_train(indices, length):
    peaks = np.zeros(length, dtype = bool)
    peaks[indices] = True
    return peaks


def test_intervals_in_milliseconds():
    peaks = peak_train([10, 60, 110, 210], 300)
    np.testing.assert_allclose(extract_rr_intervals(peaks, 100.0), [500.0, 500.0, 1000.0])


def test_intervals_sum_to_first_last_peak_span():
    rng = np.random.default_rng(0)
    indices = np.sort(rng.choice(10000, size = 40, replace = False))
    rri = extract_rr_intervals(peak_train(indices, 10000), 250.0)
    assert len(rri) == 39
    assert np.sum(rri) == pytest.approx((indices[-1] - indices[0]) / 250.0 * 1000)


def test_default_sampling_rate_is_1000_hz():
    np.testing.assert_allclose(extract_rr_intervals(peak_train([0, 800, 1650], 2000)), [800.0, 850.0])


@pytest.mark.parametrize("indices", [[], [42]])
def test_fewer_than_two_peaks(indices):
    peaks = peak_train(indices, 100)
    assert len(extract_rr_intervals(peaks, 100.0)) == 0
    with pytest.raises(PreconditionError):
        extract_rr_intervals(peaks, 100.0, interpolate = True)


def test_interpolated_length_and_values():
    indices = [20, 100, 170, 260, 340]
    peaks = peak_train(indices, 400)
    rri = extract_rr_intervals(peaks, 100.0)
    resampled = extract_rr_intervals(peaks, 100.0, interpolate = True)

    assert len(resampled) == indices[-1]
    # Each interval is anchored at the peak that closes it
    np.testing.assert_allclose(resampled[indices[1:-1]], rri[:-1])
    # Samples before the first anchor hold its value
    np.testing.assert_allclose(resampled[:indices[1]], rri[0])
    assert np.all(resampled >= rri.min() - 1e-9)
    assert np.all(resampled <= rri.max() + 1e-9)


@pytest.mark.parametrize("method", ["monotone_cubic", "quadratic", "b_spline", "linear"])
def test_all_interpolation_methods(method):
    peaks = peak_train([0, 90, 185, 270, 370, 460], 500)
    resampled = extract_rr_intervals(peaks, 100.0, interpolate = True, method = method)
    assert len(resampled) == 460
    assert np.all(np.isfinite(resampled))


def test_unknown_interpolation_method():
    with pytest.raises(ConfigurationError):
        extract_rr_intervals(peak_train([0, 50, 100], 200), 100.0, interpolate = True, method = "nearest")


def test_invalid_sampling_rate():
    with pytest.raises(PreconditionError):
        extract_rr_intervals(peak_train([0, 50], 100), 0.0)


def test_find_peak_indices():
    np.testing.assert_array_equal(find_peak_indices([False, True, False, True]), [1, 3])


def test_heart_rate_of_regular_beats():
    fs = 100.0
    peaks = peak_train(np.arange(50, 6000, 100), 6000)
    heart_rate = compute_heart_rate(peaks, fs)
    assert len(heart_rate) == 6000
    np.testing.assert_allclose(heart_rate, 60.0)


def test_heart_rate_requires_one_minute():
    with pytest.raises(PreconditionError):
        compute_heart_rate(peak_train([0, 100, 200], 5999), 100.0)


def test_heart_rate_requires_two_peaks():
    with pytest.raises(PreconditionError):
        compute_heart_rate(peak_train([100], 6000), 100.0)
