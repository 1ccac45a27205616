import math

import numpy as np
import pytest

from physio_features import EDAConfig
from physio_features import EDAFeatures
from physio_features import Simulation
from physio_features import eda
from physio_features.exceptions import ConfigurationError
from physio_features.exceptions import PreconditionError


@pytest.fixture
def phasic_bumps():
    n = np.arange(300)
    bump = lambda center, amplitude: amplitude * np.exp(-(n - center) ** 2 / (2 * 5.0 ** 2))
    return bump(50, 0.5) + bump(150, 0.5) + bump(250, 0.02)


@pytest.fixture(scope = "module")
def recording():
    results = Simulation().simulate(120, sampling_rate = 20.0, seed = 3)
    return results.eda, results.fs


def test_find_peaks_locates_responses(phasic_bumps):
    peaks = eda.find_peaks(phasic_bumps)
    np.testing.assert_array_equal(peaks.peaks, [50, 150, 250])
    assert peaks.onsets[0] == 0
    assert 50 < peaks.onsets[1] < 150
    assert peaks.offsets[-1] == 299
    np.testing.assert_allclose(peaks.heights, [0.5, 0.5, 0.02], atol = 1e-3)


def test_small_responses_are_filtered(phasic_bumps):
    peaks = eda.filter_peaks(eda.find_peaks(phasic_bumps), min_height = 0.05)
    assert len(peaks) == 2
    np.testing.assert_array_equal(peaks.peaks, [50, 150])
    np.testing.assert_allclose(eda.instantaneous_peaks(peaks, 10.0), [10.0])


def test_no_peaks_in_monotonic_signal():
    peaks = eda.find_peaks(np.linspace(0, 1, 50))
    assert len(peaks) == 0
    assert len(eda.filter_peaks(peaks)) == 0
    assert len(eda.instantaneous_peaks(peaks, 10.0)) == 0


def test_signal_decomposition_keeps_length(recording):
    signal, fs = recording
    cleaned = eda.clean_signal(signal, fs)
    assert len(cleaned) == len(signal)
    assert len(eda.tonic_signal(cleaned, fs)) == len(signal)
    assert len(eda.phasic_signal(cleaned, fs)) == len(signal)
    # The phasic component is what the high-pass leaves of the tonic level
    assert abs(np.mean(eda.phasic_signal(cleaned, fs))) < 0.1


def test_statistical_features(recording):
    signal, _ = recording
    features = eda.compute_statistical_features(signal)
    assert features.meanEda == pytest.approx(np.mean(signal))
    assert features.varEda == pytest.approx(np.var(signal, ddof = 1))
    assert features.rangeEda == pytest.approx(np.ptp(signal))


def test_process_features_fills_every_field(recording):
    signal, fs = recording
    features = eda.process_features(signal, fs)
    assert isinstance(features, EDAFeatures)
    assert features.computed == len(features.to_dict(include_missing = True))
    assert features.meanTonicEda == pytest.approx(5.0, abs = 1.0)
    assert features.peaksEda >= 0


def test_no_responses_give_nan_statistics(recording):
    signal, fs = recording
    features = eda.process_features(signal, fs, config = EDAConfig(min_peak_height = 100.0))
    assert features.peaksEda == 0
    assert math.isnan(features.meanPeaksHeightEda)
    assert math.isnan(features.peaksHeight50Eda)
    assert math.isnan(features.instantaneousPeaks95Eda)


def test_process_features_argument_checks():
    with pytest.raises(PreconditionError):
        eda.process_features(np.ones(3), 4.0)
    with pytest.raises(PreconditionError):
        eda.process_features(np.ones(100), 0.0)


def test_invalid_eda_config():
    with pytest.raises(ConfigurationError):
        EDAConfig(tonic_cutoff = 0.0)
    with pytest.raises(ConfigurationError):
        EDAConfig(clean_order = 0)
