"""
Electrodermal activity features.

The cleaned EDA signal is split into a slow tonic level (low-pass) and a
fast phasic component (high-pass) at the same cutoff. Skin conductance
responses (SCRs) are the peaks of the phasic component.
"""
import logging
from dataclasses import dataclass
import math
import numpy as np

from numpy.typing import ArrayLike
from typing import Optional

from scipy import signal as sp_signal

from physio_features import stats
from physio_features.config import EDAConfig
from physio_features.exceptions import PreconditionError
from physio_features.features import EDAFeatures
from physio_features.filters import filter_signal

logger = logging.getLogger(__name__)

PERCENTILES = (25, 50, 65, 75, 85, 95)


@dataclass
class EDAPeaks:
    """Skin conductance responses: apex, onset and offset indices and heights."""

    peaks: np.ndarray
    onsets: np.ndarray
    offsets: np.ndarray
    heights: np.ndarray

    def __len__(self) -> int:
        return len(self.peaks)

    @classmethod
    def empty(cls) -> "EDAPeaks":
        return cls(
            peaks = np.zeros(0, dtype = int),
            onsets = np.zeros(0, dtype = int),
            offsets = np.zeros(0, dtype = int),
            heights = np.zeros(0)
        )


def clean_signal(eda: ArrayLike, sampling_rate: float, config: Optional[EDAConfig] = None) -> np.ndarray:
    """Remove high frequency noise with a zero-phase low-pass filter."""
    config = config if config is not None else EDAConfig()
    return filter_signal(eda, sampling_rate, highcut = config.clean_cutoff, order = config.clean_order)


def tonic_signal(clean_eda: ArrayLike, sampling_rate: float, config: Optional[EDAConfig] = None) -> np.ndarray:
    """Slow-varying skin conductance level."""
    config = config if config is not None else EDAConfig()
    return filter_signal(clean_eda, sampling_rate, highcut = config.tonic_cutoff, order = config.tonic_order)


def phasic_signal(clean_eda: ArrayLike, sampling_rate: float, config: Optional[EDAConfig] = None) -> np.ndarray:
    """Fast skin conductance responses riding on the tonic level."""
    config = config if config is not None else EDAConfig()
    return filter_signal(clean_eda, sampling_rate, lowcut = config.tonic_cutoff, order = config.tonic_order)


def find_peaks(phasic: ArrayLike) -> EDAPeaks:
    """
    Locate the responses of a phasic EDA signal.

    Each local maximum is paired with the minimum since the previous maximum
    (onset) and the minimum up to the next maximum (offset). The height is
    the rise from onset to apex.
    """
    phasic = np.asarray(phasic, dtype = float)
    if len(phasic) <= 2:
        return EDAPeaks.empty()

    peaks, _ = sp_signal.find_peaks(phasic)
    if len(peaks) == 0:
        return EDAPeaks.empty()

    bounds = np.concatenate([[0], peaks, [len(phasic) - 1]])
    onsets = np.array([
        bounds[i] + int(np.argmin(phasic[bounds[i]:bounds[i + 1] + 1])) for i in range(len(peaks))
    ])
    offsets = np.array([
        bounds[i + 1] + int(np.argmin(phasic[bounds[i + 1]:bounds[i + 2] + 1])) for i in range(len(peaks))
    ])
    heights = phasic[peaks] - phasic[onsets]
    return EDAPeaks(peaks = peaks, onsets = onsets, offsets = offsets, heights = heights)


def filter_peaks(peaks: EDAPeaks, min_height: float = 0.05) -> EDAPeaks:
    """
    Keep only responses of at least ``min_height`` microsiemens.

    Literature: Society for Psychophysiological Research Ad Hoc Committee on
    Electrodermal Measures (2012), Publication recommendations for
    electrodermal measurements. Psychophysiology, 49: 1017-1034.
    """
    keep = peaks.heights >= min_height
    return EDAPeaks(
        peaks = peaks.peaks[keep],
        onsets = peaks.onsets[keep],
        offsets = peaks.offsets[keep],
        heights = peaks.heights[keep]
    )


def instantaneous_peaks(peaks: EDAPeaks, sampling_rate: float) -> np.ndarray:
    """Time between consecutive responses in seconds."""
    return np.diff(peaks.peaks) / sampling_rate


def _percentile_or_nan(data: np.ndarray, q: float) -> float:
    return stats.percentile(data, q) if len(data) else math.nan


def _mean_or_nan(data: np.ndarray) -> float:
    return stats.mean(data) if len(data) else math.nan


def compute_statistical_features(eda: ArrayLike, features: Optional[EDAFeatures] = None) -> EDAFeatures:
    """Descriptive statistics of the raw EDA signal."""
    features = features if features is not None else EDAFeatures()
    eda = np.asarray(eda, dtype = float)

    features.meanEda = stats.mean(eda)
    features.stdEda = stats.std(eda, ddof = 1)
    features.varEda = stats.variance(eda, ddof = 1)
    features.minEda = float(np.min(eda))
    features.maxEda = float(np.max(eda))
    features.rangeEda = features.maxEda - features.minEda
    features.skewnessEda = stats.skewness(eda)
    features.kurtosisEda = stats.kurtosis(eda)
    return features


def _describe_component(component: np.ndarray, features: EDAFeatures, suffix: str) -> None:
    values = {
        "mean": stats.mean(component),
        "median": stats.median(component),
        "std": stats.std(component, ddof = 1),
        "var": stats.variance(component, ddof = 1),
        "min": float(np.min(component)),
        "max": float(np.max(component)),
        "skewness": stats.skewness(component),
        "kurtosis": stats.kurtosis(component),
    }
    values["range"] = values["max"] - values["min"]
    for name, value in values.items():
        setattr(features, f"{name}{suffix}", value)


def compute_phasic_tonic_features(
    eda: ArrayLike,
    sampling_rate: float,
    features: Optional[EDAFeatures] = None,
    config: Optional[EDAConfig] = None,
) -> EDAFeatures:
    """Statistics of the tonic and phasic components and of the SCRs."""
    features = features if features is not None else EDAFeatures()
    config = config if config is not None else EDAConfig()

    cleaned = clean_signal(eda, sampling_rate, config)
    phasic = phasic_signal(cleaned, sampling_rate, config)
    tonic = tonic_signal(cleaned, sampling_rate, config)
    peaks = filter_peaks(find_peaks(phasic), config.min_peak_height)
    logger.debug("Found %d skin conductance responses", len(peaks))

    _describe_component(phasic, features, "PhasicEda")
    _describe_component(tonic, features, "TonicEda")

    intervals = instantaneous_peaks(peaks, sampling_rate)
    features.peaksEda = float(len(peaks))
    features.meanPeaksHeightEda = _mean_or_nan(peaks.heights)
    features.meanInstantaneousPeaksEda = _mean_or_nan(intervals)
    for q in PERCENTILES:
        setattr(features, f"peaksHeight{q}Eda", _percentile_or_nan(peaks.heights, q))
        setattr(features, f"instantaneousPeaks{q}Eda", _percentile_or_nan(intervals, q))
    return features


def process_features(
    eda: ArrayLike,
    sampling_rate: float,
    features: Optional[EDAFeatures] = None,
    config: Optional[EDAConfig] = None,
) -> EDAFeatures:
    """
    Compute all EDA features of a galvanic skin response recording.

    Args:
        eda: Raw skin conductance signal (microsiemens)
        sampling_rate: Sampling rate in Hz
        features: Accumulator to fill in (a new one if None)
        config: EDA processing parameters (defaults if None)

    Returns:
        EDAFeatures accumulator
    """
    features = features if features is not None else EDAFeatures()
    eda = np.asarray(eda, dtype = float)
    if sampling_rate <= 0:
        raise PreconditionError(f"sampling_rate must be > 0, got {sampling_rate}")
    if len(eda) < 4:
        raise PreconditionError("EDA signal is too short", details = {"length": len(eda)})

    logger.debug("Processing EDA features of %d samples", len(eda))
    compute_statistical_features(eda, features)
    compute_phasic_tonic_features(eda, sampling_rate, features, config)
    return features
