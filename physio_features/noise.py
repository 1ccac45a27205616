import numpy as np


def generate_colored_noise(
    rng: np.random.Generator, n_samples: int, amplitude: float = 1.0, integration_smoothing: float = 0.95
) -> np.ndarray:
    """Generate low-frequency dominated noise by exponentially smoothing white noise."""
    white_noise = rng.normal(0, 1, n_samples)
    if n_samples == 0:
        return white_noise

    # Apply exponential smoothing
    filtered_noise = np.zeros_like(white_noise)
    filtered_noise[0] = white_noise[0]

    for i in range(1, n_samples):
        filtered_noise[i] = (
            integration_smoothing * filtered_noise[i-1] + (1 - integration_smoothing) * white_noise[i])

    # Normalize and scale
    if np.std(filtered_noise) > 0:
        filtered_noise = filtered_noise / np.std(filtered_noise) * amplitude

    return filtered_noise


def generate_powerline_noise(t: np.ndarray, frequency: float, amplitude: float) -> np.ndarray:
    """Generate mains interference at the fundamental and first harmonic."""
    fundamental = amplitude * np.sin(2 * np.pi * frequency * t)
    harmonic = 0.5 * amplitude * np.sin(2 * np.pi * 2 * frequency * t)
    return fundamental + harmonic


def generate_respiratory_artifacts(t: np.ndarray, resp_rate: float, amplitude: float) -> np.ndarray:
    """Generate baseline wander caused by breathing."""
    resp_freq = resp_rate / 60.0
    return amplitude * np.sin(2 * np.pi * resp_freq * t)


def generate_spike_artifacts(
    rng: np.random.Generator, n_samples: int, amplitude: float, poisson_factor: float
) -> np.ndarray:
    """Generate random motion spikes."""
    spike_signal = np.zeros(n_samples)

    n_spikes = rng.poisson(poisson_factor)
    if n_spikes > 0 and n_samples > 0:
        spike_indices = rng.integers(0, n_samples, n_spikes)
        spike_amplitudes = rng.exponential(amplitude, n_spikes)
        spike_signs = rng.choice([-1, 1], n_spikes)

        for idx, amp, sign in zip(spike_indices, spike_amplitudes, spike_signs):
            spike_signal[idx] += amp * sign

    return spike_signal
