"""
Discrete Fourier transform and circular convolution for arbitrary lengths.

Power-of-two lengths go through an iterative radix-2 Cooley-Tukey
transform; every other length is reduced to a power-of-two circular
convolution with Bluestein's chirp z-transform. All functions are pure:
inputs are copied and fresh arrays are returned.

The forward transform follows the usual sign convention
``X[k] = sum_t x[t] * exp(-2j * pi * t * k / n)``. The inverse transform
is not scaled, so ``inverse_transform(*transform(re, im))`` returns ``n``
times the input.
"""
import numpy as np

from typing import Tuple

from physio_features.constants import MAX_TRANSFORM_LENGTH
from physio_features.exceptions import PreconditionError


def _as_pair(real: np.ndarray, imag: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    real = np.array(real, dtype = np.float64, copy = True).ravel()
    imag = np.array(imag, dtype = np.float64, copy = True).ravel()
    if len(real) != len(imag):
        raise PreconditionError(
            "Mismatched lengths", details = {"real": len(real), "imag": len(imag)}
        )
    return real, imag


def _check_length(n: int) -> None:
    if n >= MAX_TRANSFORM_LENGTH:
        raise PreconditionError("Array too large", details = {"length": n, "limit": MAX_TRANSFORM_LENGTH})


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def highest_power_of_two(n: int) -> int:
    """Largest power of two that is less than or equal to ``n``."""
    if n < 1:
        raise PreconditionError("n must be positive", details = {"n": n})
    return 1 << (int(n).bit_length() - 1)


def next_power_of_two(n: int) -> int:
    """Smallest power of two that is greater than or equal to ``n``."""
    if n <= 1:
        return 1
    return 1 << (int(n) - 1).bit_length()


def transform(real: np.ndarray, imag: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute the forward DFT of a complex vector of any length.

    Args:
        real: Real part of the input
        imag: Imaginary part of the input, same length as ``real``

    Returns:
        Tuple of (real, imag) arrays holding the transform
    """
    real, imag = _as_pair(real, imag)
    n = len(real)
    if n == 0:
        return real, imag
    _check_length(n)
    if is_power_of_two(n):
        _radix2_inplace(real, imag)
    else:
        real, imag = _bluestein(real, imag)
    return real, imag


def inverse_transform(real: np.ndarray, imag: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Un-normalized inverse DFT. Divide the result by ``n`` for a true inverse."""
    out_imag, out_real = transform(imag, real)
    return out_real, out_imag


def transform_radix2(real: np.ndarray, imag: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Forward DFT for power-of-two lengths (Cooley-Tukey decimation in time)."""
    real, imag = _as_pair(real, imag)
    _check_length(len(real))
    _radix2_inplace(real, imag)
    return real, imag


def transform_bluestein(real: np.ndarray, imag: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Forward DFT for arbitrary lengths using Bluestein's chirp z-transform."""
    real, imag = _as_pair(real, imag)
    if len(real) == 0:
        return real, imag
    _check_length(len(real))
    return _bluestein(real, imag)


def _bit_reversed_indices(n: int, levels: int) -> np.ndarray:
    indices = np.arange(n, dtype = np.int64)
    reversed_indices = np.zeros(n, dtype = np.int64)
    for bit in range(levels):
        reversed_indices |= ((indices >> bit) & 1) << (levels - 1 - bit)
    return reversed_indices


def _radix2_inplace(real: np.ndarray, imag: np.ndarray) -> None:
    n = len(real)
    if not is_power_of_two(n):
        raise PreconditionError("Length is not a power of 2", details = {"length": n})
    levels = n.bit_length() - 1

    # Trigonometric tables
    angles = 2 * np.pi * np.arange(n // 2) / n
    cos_table = np.cos(angles)
    sin_table = np.sin(angles)

    # Bit-reversed addressing permutation
    permutation = _bit_reversed_indices(n, levels)
    real[:] = real[permutation]
    imag[:] = imag[permutation]

    # Butterfly passes over spans of doubling size
    size = 2
    while size <= n:
        half_size = size // 2
        table_step = n // size
        k = np.arange(half_size) * table_step
        cos_k = cos_table[k]
        sin_k = sin_table[k]

        real_blocks = real.reshape(n // size, size)
        imag_blocks = imag.reshape(n // size, size)
        upper_real = real_blocks[:, half_size:]
        upper_imag = imag_blocks[:, half_size:]

        tp_real = upper_real * cos_k + upper_imag * sin_k
        tp_imag = -upper_real * sin_k + upper_imag * cos_k

        real_blocks[:, half_size:] = real_blocks[:, :half_size] - tp_real
        imag_blocks[:, half_size:] = imag_blocks[:, :half_size] - tp_imag
        real_blocks[:, :half_size] += tp_real
        imag_blocks[:, :half_size] += tp_imag
        size *= 2


def _bluestein(real: np.ndarray, imag: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    n = len(real)
    m = highest_power_of_two(n) * 4

    # Chirp tables. (i * i) % 2n keeps the angle small for large i.
    i = np.arange(n, dtype = np.int64)
    chirp_index = (i * i) % (2 * n)
    cos_table = np.cos(np.pi * chirp_index / n)
    sin_table = np.sin(np.pi * chirp_index / n)

    a_real = np.zeros(m)
    a_imag = np.zeros(m)
    a_real[:n] = real * cos_table + imag * sin_table
    a_imag[:n] = -real * sin_table + imag * cos_table

    # Kernel is symmetric around index 0
    b_real = np.zeros(m)
    b_imag = np.zeros(m)
    b_real[0] = cos_table[0]
    b_imag[0] = sin_table[0]
    b_real[i[1:]] = cos_table[1:]
    b_imag[i[1:]] = sin_table[1:]
    b_real[m - i[1:]] = cos_table[1:]
    b_imag[m - i[1:]] = sin_table[1:]

    # Length m convolution on the radix-2 path, m may exceed the input limit
    _radix2_inplace(a_real, a_imag)
    _radix2_inplace(b_real, b_imag)
    c_real = a_real * b_real - a_imag * b_imag
    c_imag = a_imag * b_real + a_real * b_imag
    # Inverse transform by swapping real and imaginary parts
    _radix2_inplace(c_imag, c_real)
    c_real /= m
    c_imag /= m

    out_real = c_real[:n] * cos_table + c_imag[:n] * sin_table
    out_imag = -c_real[:n] * sin_table + c_imag[:n] * cos_table
    return out_real, out_imag


def convolve(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Circular convolution of two real vectors of equal length."""
    x = np.asarray(x, dtype = np.float64).ravel()
    y = np.asarray(y, dtype = np.float64).ravel()
    if len(x) != len(y):
        raise PreconditionError("Mismatched lengths", details = {"x": len(x), "y": len(y)})
    out_real, _ = convolve_complex(x, np.zeros(len(x)), y, np.zeros(len(y)))
    return out_real


def convolve_complex(
    x_real: np.ndarray, x_imag: np.ndarray, y_real: np.ndarray, y_imag: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    """Circular convolution of two complex vectors of equal length."""
    n = len(x_real)
    if not (n == len(x_imag) == len(y_real) == len(y_imag)):
        raise PreconditionError(
            "Mismatched lengths",
            details = {"x_real": n, "x_imag": len(x_imag), "y_real": len(y_real), "y_imag": len(y_imag)}
        )
    if n == 0:
        return np.zeros(0), np.zeros(0)

    x_real, x_imag = transform(x_real, x_imag)
    y_real, y_imag = transform(y_real, y_imag)

    product_real = x_real * y_real - x_imag * y_imag
    product_imag = x_imag * y_real + x_real * y_imag

    out_real, out_imag = inverse_transform(product_real, product_imag)
    # Scaling, the inverse transform omits it
    return out_real / n, out_imag / n
