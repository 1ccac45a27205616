import math

import numpy as np
import pandas as pd
import pytest

from physio_features import HRVFeatures
from physio_features import Simulation
from physio_features import SpectralConfig
from physio_features import create_preset_config
from physio_features import extract_hrv_features
from physio_features import extract_rr_intervals
from physio_features import hrv
from physio_features.exceptions import ConfigurationError
from physio_features.exceptions import PreconditionError
from physio_features.hrv_frequency import compute_band_powers
from physio_features.hrv_frequency import compute_frequency_features
from physio_features.hrv_nonlinear import compute_nonlinear_features
from physio_features.hrv_nonlinear import run_lengths
from physio_features.hrv_nonlinear import zero_crossings
from physio_features.hrv_time import compute_time_features

RRI = np.array([800.0, 810.0, 790.0, 850.0, 800.0])


@pytest.fixture
def modulated_rr():
    fs = 4.0
    t = np.arange(0, 300, 1 / fs)
    rr = 800 + 50 * np.sin(2 * np.pi * 0.1 * t) + 30 * np.sin(2 * np.pi * 0.25 * t)
    return rr, fs


@pytest.fixture(scope = "module")
def simulated_peaks():
    results = Simulation(create_preset_config("pristine_lab")).simulate(120, sampling_rate = 50.0, seed = 11)
    return results, results.clean_ppg


def test_time_features_of_known_sequence():
    features = compute_time_features(RRI)
    diff = np.diff(RRI)

    assert features.RMSSD == pytest.approx(math.sqrt(1650.0))
    assert features.MeanNN == pytest.approx(810.0)
    assert features.SDNN == pytest.approx(np.std(RRI, ddof = 1))
    assert features.SDSD == pytest.approx(np.std(diff, ddof = 1))
    assert features.CVNN == pytest.approx(features.SDNN / 810.0)
    assert features.CVSD == pytest.approx(features.RMSSD / 810.0)
    assert features.MedianNN == pytest.approx(800.0)
    assert features.MadNN == pytest.approx(10.0 * 1.4826)
    assert features.IQR == pytest.approx(np.percentile(RRI, 75) - np.percentile(RRI, 25))
    assert features.pNN50 == pytest.approx(20.0)
    assert features.pNN20 == pytest.approx(40.0)


def test_time_features_need_three_intervals():
    with pytest.raises(PreconditionError):
        compute_time_features([800.0, 810.0])


def test_nonlinear_contributions_are_complementary():
    rng = np.random.default_rng(5)
    rri = 800 + rng.normal(0, 40, 200)
    features = compute_nonlinear_features(rri)

    assert features.C1d + features.C1a == pytest.approx(1.0)
    assert features.C2d + features.C2a == pytest.approx(1.0)
    assert features.Cd + features.Ca == pytest.approx(1.0)
    for index in (features.GI, features.SI, features.PI):
        assert 0.0 <= index <= 100.0
    assert features.SD1 == pytest.approx(np.std(np.diff(rri), ddof = 1) / math.sqrt(2))
    assert features.S == pytest.approx(math.pi * features.SD1 * features.SD2)
    assert features.CSI == pytest.approx(features.SD2 / features.SD1)
    assert 0.0 <= features.PIP <= 1.0
    assert 0.0 <= features.PSS <= 1.0


def test_alternating_sequence_is_fully_fragmented():
    rri = np.tile([800.0, 900.0], 20)
    features = compute_nonlinear_features(rri)
    assert features.PIP == pytest.approx(38 / 40)
    assert features.IALS == pytest.approx(1.0)
    assert features.PSS == pytest.approx(1.0)
    assert features.PAS == pytest.approx(1.0)
    assert features.PI == pytest.approx(50.0, abs = 3.0)


def test_nonlinear_features_need_three_intervals():
    with pytest.raises(PreconditionError):
        compute_nonlinear_features([800.0, 810.0])


def test_run_lengths_and_zero_crossings():
    np.testing.assert_array_equal(run_lengths(np.array([1, 2, 3, 7, 8, 10])), [3, 2, 1])
    assert len(run_lengths(np.array([], dtype = int))) == 0
    np.testing.assert_array_equal(zero_crossings(np.array([1.0, -1.0, -1.0, 2.0])), [0, 2])


def test_band_powers_are_non_negative(modulated_rr):
    rr, fs = modulated_rr
    powers = compute_band_powers(rr, fs)
    assert set(powers) == {"ulf", "vlf", "lf", "hf", "vhf"}
    assert all(power >= 0 for power in powers.values())


def test_frequency_features(modulated_rr):
    rr, fs = modulated_rr
    features = compute_frequency_features(rr, fs)

    total = features.ULF + features.VLF + features.LF + features.HF + features.VHF
    assert features.LFn == pytest.approx(features.LF / total)
    assert features.HFn == pytest.approx(features.HF / total)
    assert features.LFHF == pytest.approx(features.LF / features.HF)
    assert features.LnHF == pytest.approx(math.log(features.HF))
    assert features.LFHF > 1.0
    assert features.LF > features.VHF


def test_flat_rr_series_has_undefined_ratios():
    features = compute_frequency_features(np.full(1200, 800.0), 4.0)
    assert features.HF == 0.0
    assert math.isnan(features.LFHF)
    assert math.isnan(features.LFn)
    assert math.isnan(features.HFn)
    assert math.isnan(features.LnHF)


def test_custom_bands():
    rr = np.sin(2 * np.pi * 0.1 * np.arange(0, 300, 0.25))
    config = SpectralConfig(bands = {"lf": (0.04, 0.15)})
    features = compute_frequency_features(rr, 4.0, config = config)
    assert features.HF == 0.0
    assert features.LFn == pytest.approx(1.0)


def test_invalid_spectral_config():
    with pytest.raises(ConfigurationError):
        SpectralConfig(interpolation_method = "cubic")
    with pytest.raises(ConfigurationError):
        SpectralConfig(bands = {"lf": (0.15, 0.04)})


def test_process_features_on_simulated_recording(simulated_peaks):
    results, ppg = simulated_peaks
    features = extract_hrv_features(ppg, results.fs)

    assert features.meanHR == pytest.approx(results.mean_heart_rate, rel = 0.05)
    assert features.MeanNN == pytest.approx(np.mean(results.rr_intervals) * 1000, rel = 0.05)
    assert len(features.HR) == len(ppg)
    for name in ("RMSSD", "SD1", "PIP", "LF", "HF", "LFHF"):
        assert getattr(features, name) is not None


def test_stage_toggles_leave_fields_unset(simulated_peaks):
    results, ppg = simulated_peaks
    features = extract_hrv_features(ppg, results.fs, hr = False, frequency = False)
    assert features.HR is None
    assert features.LF is None
    assert features.RMSSD is not None
    assert features.SD1 is not None


def test_accumulator_is_filled_in_place():
    peaks = np.zeros(1000, dtype = bool)
    peaks[[50, 130, 215, 290, 380, 460, 545, 630, 700, 790, 870, 960]] = True
    accumulator = HRVFeatures()
    returned = hrv.process_features(peaks, 100.0, hr = False, features = accumulator)
    assert returned is accumulator
    assert accumulator.MeanNN is not None
    assert accumulator.LF is not None


def test_process_features_needs_two_peaks():
    peaks = np.zeros(1000, dtype = bool)
    peaks[10] = True
    with pytest.raises(PreconditionError):
        hrv.process_features(peaks, 100.0)


def test_feature_export():
    features = compute_time_features(RRI)
    exported = features.to_dict()
    assert exported["MeanNN"] == pytest.approx(810.0)
    assert "LF" not in exported
    assert "LF" in features.to_dict(include_missing = True)

    series = features.to_series()
    assert isinstance(series, pd.Series)
    assert series["RMSSD"] == pytest.approx(features.RMSSD)
    assert np.isnan(series["LF"])
    assert "HR" in series.index
    assert features.computed == 12


def test_frequency_stage_resamples_with_b_spline_by_default():
    assert SpectralConfig().interpolation_method == "b_spline"

    peaks = np.zeros(1000, dtype = bool)
    peaks[[50, 130, 215, 290, 380, 460, 545, 630, 700, 790, 870, 960]] = True
    features = hrv.process_features(peaks, 100.0, hr = False, nonlinear = False, time = False)

    resampled = extract_rr_intervals(peaks, 100.0, interpolate = True, method = "b_spline")
    expected = compute_frequency_features(resampled, 100.0)
    assert features.LF == pytest.approx(expected.LF)
    assert features.HF == pytest.approx(expected.HF)
