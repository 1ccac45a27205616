from dataclasses import dataclass, field
from typing import Dict

from physio_features.constants import (
    BEAT_WINDOW,
    EDA_CLEAN_CUTOFF,
    EDA_TONIC_CUTOFF,
    FREQUENCY_BANDS,
    FrequencyBand,
    INTERPOLATION_METHODS,
    PEAK_BETA,
    PEAK_WINDOW,
    PPG_FILTER_ORDER,
    PPG_HIGHCUT,
    PPG_LOWCUT,
    SCR_MIN_AMPLITUDE,
)
from physio_features.exceptions import ConfigurationError


@dataclass
class PeakDetectorConfig:
    """Parameters of the PPG cleaning filter and the systolic peak detector."""

    peak_window: float = PEAK_WINDOW  # seconds, short moving average
    beat_window: float = BEAT_WINDOW  # seconds, long moving average
    beta: float = PEAK_BETA  # offset as a fraction of the mean squared signal
    lowcut: float = PPG_LOWCUT  # Hz
    highcut: float = PPG_HIGHCUT  # Hz
    filter_order: int = PPG_FILTER_ORDER

    def __post_init__(self) -> None:
        if self.peak_window <= 0 or self.beat_window <= 0:
            raise ConfigurationError("Moving average windows must be positive", parameter = "peak_window")
        if self.peak_window >= self.beat_window:
            raise ConfigurationError("peak_window must be shorter than beat_window", parameter = "beat_window")
        if self.beta < 0:
            raise ConfigurationError("beta must be non-negative", parameter = "beta")
        if self.filter_order < 1:
            raise ConfigurationError("filter_order must be at least 1", parameter = "filter_order")


@dataclass
class SpectralConfig:
    """Parameters of the PSD estimate used for frequency-domain HRV."""

    method: str = "welch"
    window_type: str = "hann"
    scaling: str = "density"
    normalize: bool = True
    interpolation_method: str = "b_spline"  # quadratic B-spline
    bands: Dict[str, FrequencyBand] = field(default_factory = lambda: dict(FREQUENCY_BANDS))

    def __post_init__(self) -> None:
        if self.interpolation_method not in INTERPOLATION_METHODS:
            raise ConfigurationError(
                f"Unknown interpolation method '{self.interpolation_method}'", parameter = "interpolation_method"
            )
        for name, (low, high) in self.bands.items():
            if low < 0 or high <= low:
                raise ConfigurationError(f"Invalid frequency band '{name}': ({low}, {high})", parameter = "bands")


@dataclass
class EDAConfig:
    """Parameters of the EDA cleaning and tonic/phasic decomposition."""

    clean_cutoff: float = EDA_CLEAN_CUTOFF  # Hz
    clean_order: int = 2
    tonic_cutoff: float = EDA_TONIC_CUTOFF  # Hz
    tonic_order: int = 1
    min_peak_height: float = SCR_MIN_AMPLITUDE  # microsiemens

    def __post_init__(self) -> None:
        if self.clean_cutoff <= 0 or self.tonic_cutoff <= 0:
            raise ConfigurationError("Cutoff frequencies must be positive", parameter = "clean_cutoff")
        if self.clean_order < 1 or self.tonic_order < 1:
            raise ConfigurationError("Filter orders must be at least 1", parameter = "clean_order")


@dataclass
class PulseConfig:
    """Physiological parameters of a simulated subject."""

    heart_rate: float = 70.0  # bpm
    hrv_std: float = 0.04  # seconds
    resp_rate: float = 15.0  # breaths per minute
    resp_modulation_strength: float = 0.15
    pulse_amplitude: float = 1.0
    noise_floor: float = 0.05
    eda_tonic_level: float = 5.0  # microsiemens
    scr_rate: float = 3.0  # responses per minute
    scr_amplitude: float = 0.3  # microsiemens

    def __post_init__(self) -> None:
        if not 20 <= self.heart_rate <= 220:
            raise ConfigurationError("heart_rate must lie between 20 and 220 bpm", parameter = "heart_rate")
        if self.hrv_std < 0:
            raise ConfigurationError("hrv_std must be non-negative", parameter = "hrv_std")
        if self.resp_rate <= 0:
            raise ConfigurationError("resp_rate must be positive", parameter = "resp_rate")
        if not 0 <= self.resp_modulation_strength < 1:
            raise ConfigurationError(
                "resp_modulation_strength must lie in [0, 1)", parameter = "resp_modulation_strength"
            )


@dataclass
class SignalConfig:
    """Waveform shape and noise parameters of the simulator."""

    systolic_width: float = 0.08  # seconds, gaussian sigma
    diastolic_width: float = 0.12  # seconds
    diastolic_delay: float = 0.3  # seconds after the systolic apex
    diastolic_ratio: float = 0.35
    pink_noise_amplitude: float = 1.0
    integration_smoothing: float = 0.95
    powerline_frequency: float = 50.0  # Hz
    powerline_amplitude: float = 0.2
    breathing_artifact_amplitude: float = 1.5
    spike_artifact_amplitude: float = 4.0
    spike_poisson_factor: float = 2.0
    scr_rise_time: float = 1.0  # seconds
    scr_decay_time: float = 4.0  # seconds
    eda_drift_amplitude: float = 0.5  # microsiemens


def create_preset_config(preset: str) -> PulseConfig:
    """Create a simulated subject from a named preset."""
    presets = {
        "resting_adult": PulseConfig(),
        "athlete": PulseConfig(
            heart_rate = 52.0, hrv_std = 0.07, resp_rate = 12.0, resp_modulation_strength = 0.2
        ),
        "elderly": PulseConfig(
            heart_rate = 72.0, hrv_std = 0.015, resp_rate = 16.0, resp_modulation_strength = 0.05
        ),
        "exercise": PulseConfig(
            heart_rate = 130.0, hrv_std = 0.01, resp_rate = 28.0, noise_floor = 0.15, scr_rate = 8.0
        ),
        "pristine_lab": PulseConfig(
            hrv_std = 0.03, noise_floor = 0.0
        ),
        "noisy_wearable": PulseConfig(
            noise_floor = 0.25, scr_amplitude = 0.2
        ),
    }

    if preset not in presets:
        raise ConfigurationError(
            f"Unknown preset '{preset}'. Available presets: {list(presets.keys())}", parameter = "preset"
        )

    return presets[preset]
