from dataclasses import dataclass
import numpy as np

from typing import Optional
from typing import Tuple

from physio_features.config import PulseConfig
from physio_features.config import SignalConfig
from physio_features.constants import RR_INTERVAL_MAX
from physio_features.constants import RR_INTERVAL_MIN
from physio_features.exceptions import PreconditionError
from physio_features.noise import generate_colored_noise
from physio_features.noise import generate_powerline_noise
from physio_features.noise import generate_respiratory_artifacts
from physio_features.noise import generate_spike_artifacts


@dataclass
class SimulationResults:
    """Container for synthetic PPG and EDA recordings with their ground truth."""

    time: np.ndarray
    clean_ppg: np.ndarray
    noisy_ppg: np.ndarray
    beat_times: np.ndarray
    rr_intervals: np.ndarray
    eda: np.ndarray
    scr_times: np.ndarray
    fs: float

    @property
    def duration(self) -> float:
        """Total recording duration in seconds."""
        return len(self.time) / self.fs

    @property
    def n_beats(self) -> int:
        """Total number of heart beats."""
        return len(self.beat_times)

    @property
    def mean_heart_rate(self) -> float:
        """Mean heart rate in bpm."""
        return 60.0 / float(np.mean(self.rr_intervals)) if len(self.rr_intervals) > 0 else 0.0

    def get_beat_indices(self) -> np.ndarray:
        """Sample index of every systolic apex."""
        return np.round(self.beat_times * self.fs).astype(int)


class Simulation:
    def __init__(self, pulse_config: Optional[PulseConfig] = None, signal_config: Optional[SignalConfig] = None) -> None:
        """
        Synthetic PPG and EDA generator.

        Args:
            pulse_config: Subject physiology (uses defaults if None)
            signal_config: Waveform shape and noise configuration (uses defaults if None)
        """
        self.pulse_config = pulse_config if pulse_config is not None else PulseConfig()
        self.signal_config = signal_config if signal_config is not None else SignalConfig()

    def _generate_cardiac_timing(self, rng: np.random.Generator, duration: float) -> Tuple[np.ndarray, np.ndarray]:
        """Generate beat times with heart rate variability and respiratory sinus arrhythmia."""
        mean_rr = 60.0 / self.pulse_config.heart_rate
        num_beats = int(duration / mean_rr) + 5

        rr_intervals = rng.normal(mean_rr, self.pulse_config.hrv_std, num_beats)
        beat_clock = np.cumsum(np.full(num_beats, mean_rr))
        rsa = 1 + 0.5 * self.pulse_config.resp_modulation_strength * np.sin(
            2 * np.pi * self.pulse_config.resp_rate / 60.0 * beat_clock
        )
        rr_intervals = np.clip(rr_intervals * rsa, RR_INTERVAL_MIN, RR_INTERVAL_MAX)

        # First beat half an interval in, so that its pulse is not cut off
        beat_times = mean_rr / 2 + np.cumsum(np.concatenate([[0], rr_intervals]))
        beat_times = beat_times[beat_times < duration - mean_rr / 2]

        return beat_times, np.diff(beat_times)

    def _generate_respiratory_modulation(self, t: np.ndarray) -> np.ndarray:
        """Pulse amplitude modulation caused by breathing."""
        resp_signal = np.cos(2 * np.pi * self.pulse_config.resp_rate / 60.0 * t)
        strength = self.pulse_config.resp_modulation_strength
        return 1.0 - strength / 2 + strength * (1 + resp_signal) / 2

    def _generate_clean_ppg(self, beat_times: np.ndarray, t: np.ndarray, modulation: np.ndarray) -> np.ndarray:
        """Sum of a systolic and a diastolic gaussian per beat."""
        cfg = self.signal_config
        ppg = np.zeros(len(t))
        fs = 1.0 / (t[1] - t[0]) if len(t) > 1 else 1.0
        support = int((cfg.diastolic_delay + 4 * max(cfg.systolic_width, cfg.diastolic_width)) * fs)

        for beat_time in beat_times:
            center = int(round(beat_time * fs))
            start = max(0, center - support)
            end = min(len(t), center + support)
            local_t = t[start:end] - beat_time

            systolic = np.exp(-local_t ** 2 / (2 * cfg.systolic_width ** 2))
            diastolic = cfg.diastolic_ratio * np.exp(
                -(local_t - cfg.diastolic_delay) ** 2 / (2 * cfg.diastolic_width ** 2)
            )
            ppg[start:end] += (systolic + diastolic) * modulation[start:end]

        return ppg * self.pulse_config.pulse_amplitude

    def _add_realistic_noise(self, rng: np.random.Generator, ppg: np.ndarray, t: np.ndarray) -> np.ndarray:
        """Add baseline wander, mains interference and motion artifacts."""
        noise_floor = self.pulse_config.noise_floor
        if noise_floor == 0:
            return ppg.copy()

        n_samples = len(t)
        pink_noise = generate_colored_noise(
            rng, n_samples,
            amplitude = noise_floor * self.signal_config.pink_noise_amplitude,
            integration_smoothing = self.signal_config.integration_smoothing
        )
        powerline_noise = generate_powerline_noise(
            t, self.signal_config.powerline_frequency, noise_floor * self.signal_config.powerline_amplitude
        )
        breathing_artifact = generate_respiratory_artifacts(
            t, self.pulse_config.resp_rate, noise_floor * self.signal_config.breathing_artifact_amplitude
        )
        spike_noise = generate_spike_artifacts(
            rng, n_samples,
            noise_floor * self.signal_config.spike_artifact_amplitude,
            self.signal_config.spike_poisson_factor
        )
        white_noise = rng.normal(0, noise_floor, n_samples)

        return ppg + pink_noise + powerline_noise + breathing_artifact + spike_noise + white_noise

    def _generate_eda(self, rng: np.random.Generator, t: np.ndarray, duration: float) -> Tuple[np.ndarray, np.ndarray]:
        """Tonic level with slow drift plus bi-exponential skin conductance responses."""
        cfg = self.signal_config
        tonic = self.pulse_config.eda_tonic_level + cfg.eda_drift_amplitude * np.sin(2 * np.pi * t / max(duration, 1.0))

        n_responses = rng.poisson(self.pulse_config.scr_rate * duration / 60.0)
        scr_times = np.sort(rng.uniform(0, duration, n_responses))
        phasic = np.zeros(len(t))
        for scr_time in scr_times:
            local_t = np.clip(t - scr_time, 0, None)
            shape = (1 - np.exp(-local_t / cfg.scr_rise_time)) * np.exp(-local_t / cfg.scr_decay_time)
            if np.max(shape) > 0:
                amplitude = self.pulse_config.scr_amplitude * rng.uniform(0.5, 1.5)
                phasic += shape / np.max(shape) * amplitude

        noise = rng.normal(0, 0.002 + 0.01 * self.pulse_config.noise_floor, len(t))
        return tonic + phasic + noise, scr_times

    def simulate(self, duration: float, sampling_rate: float = 100.0, seed: Optional[int] = None) -> SimulationResults:
        """
        Generate a synthetic recording.

        Args:
            duration: Recording duration in seconds
            sampling_rate: Sampling frequency in Hz
            seed: Random seed for reproducibility

        Returns:
            SimulationResults: Dataclass containing the signals and ground truth
        """
        if duration <= 0:
            raise PreconditionError("Duration must be positive")

        if sampling_rate < 20:
            raise PreconditionError("Sampling frequency must be at least 20 Hz")

        rng = np.random.default_rng(seed)

        t = np.arange(0, duration, 1 / sampling_rate)

        beat_times, rr_intervals = self._generate_cardiac_timing(rng, duration)
        modulation = self._generate_respiratory_modulation(t)
        clean_ppg = self._generate_clean_ppg(beat_times, t, modulation)
        noisy_ppg = self._add_realistic_noise(rng, clean_ppg, t)
        eda, scr_times = self._generate_eda(rng, t, duration)

        return SimulationResults(
            time = t,
            clean_ppg = clean_ppg,
            noisy_ppg = noisy_ppg,
            beat_times = beat_times,
            rr_intervals = rr_intervals,
            eda = eda,
            scr_times = scr_times,
            fs = sampling_rate
        )
