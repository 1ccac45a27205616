"""Frequency-domain HRV features."""

import logging
import math
import numpy as np

from numpy.typing import ArrayLike
from typing import Dict
from typing import Optional

from physio_features.config import SpectralConfig
from physio_features.features import HRVFeatures
from physio_features.spectral import PSDResult
from physio_features.spectral import band_power
from physio_features.spectral import psd

logger = logging.getLogger(__name__)


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else math.nan


def compute_band_powers(
    rr_intervals: ArrayLike, sampling_rate: float, config: Optional[SpectralConfig] = None
) -> Dict[str, float]:
    """Integrated PSD power of every configured frequency band."""
    config = config if config is not None else SpectralConfig()
    psd_result: PSDResult = psd(
        rr_intervals,
        config.bands.values(),
        sampling_rate,
        method = config.method,
        window_type = config.window_type,
        scaling = config.scaling,
        normalize = config.normalize
    )
    return {name: band_power(psd_result, band) for name, band in config.bands.items()}


def compute_frequency_features(
    rr_intervals: ArrayLike,
    sampling_rate: float,
    features: Optional[HRVFeatures] = None,
    config: Optional[SpectralConfig] = None,
) -> HRVFeatures:
    """
    Compute frequency-domain HRV features.

    Args:
        rr_intervals: RR intervals resampled to one value per sample at
            ``sampling_rate``, see
            :func:`physio_features.rri.extract_rr_intervals` with
            ``interpolate=True``
        sampling_rate: Sampling rate of the resampled intervals in Hz
        features: Accumulator to fill in (a new one if None)
        config: Spectral estimation parameters (defaults if None)

    Returns:
        The accumulator with ULF, VLF, LF, HF, VHF, LFHF, LFn, HFn and LnHF set
    """
    features = features if features is not None else HRVFeatures()
    logger.debug("Computing frequency features")

    powers = compute_band_powers(np.asarray(rr_intervals, dtype = float), sampling_rate, config)
    ulf = powers.get("ulf", 0.0)
    vlf = powers.get("vlf", 0.0)
    lf = powers.get("lf", 0.0)
    hf = powers.get("hf", 0.0)
    vhf = powers.get("vhf", 0.0)
    total_power = ulf + vlf + lf + hf + vhf

    features.ULF = ulf
    features.VLF = vlf
    features.LF = lf
    features.HF = hf
    features.VHF = vhf
    features.LFHF = _ratio(lf, hf)
    features.LFn = _ratio(lf, total_power)
    features.HFn = _ratio(hf, total_power)
    features.LnHF = math.log(hf) if hf > 0 else math.nan
    return features
