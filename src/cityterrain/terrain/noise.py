"""Seeded noise fields for terrain generation.

Everything here is built from one primitive: white noise blurred by a
Gaussian whose sigma tracks the wanted feature wavelength. fBm (in one or two
dimensions) and ridged multifractal noise stack octaves of it. Each octave
draws from its own ``default_rng`` seeded from the caller's seed, so equal
arguments give bit-identical output.
"""

from collections.abc import Iterator

import numpy as np
from numpy.typing import NDArray
from scipy import fft, ndimage

# Above this sigma the frequency-domain blur beats direct convolution
_FFT_SIGMA_THRESHOLD = 30.0

# Seed offsets keeping each noise family on its own streams
_OCTAVE_STRIDE = 1000
_PROFILE_OFFSET = 31
_RIDGED_OFFSET = 500


def _smooth_noise(
    shape: tuple[int, ...],
    rng: np.random.Generator,
    wavelength: float,
) -> NDArray[np.float32]:
    """Blurred white noise scaled to roughly [-1, 1].

    Args:
        shape: Output shape; 1D profiles and 2D fields both work.
        rng: Random stream for the white noise.
        wavelength: Approximate feature wavelength in samples.

    Returns:
        float32 array of ``shape``.
    """
    white = rng.standard_normal(shape).astype(np.float32)
    sigma = max(wavelength / 3.0, 0.5)

    if sigma > _FFT_SIGMA_THRESHOLD:
        # Periodic blur, same wrap-around behavior as the direct filter
        spectrum = ndimage.fourier_gaussian(fft.fftn(white), sigma=sigma)
        smoothed = np.real(fft.ifftn(spectrum)).astype(np.float32)
    else:
        smoothed = ndimage.gaussian_filter(white, sigma=sigma, mode="wrap")

    std = np.std(smoothed)
    if std > 0:
        smoothed /= 2.5 * std
    return smoothed


def _octaves(
    seed: int,
    base_wavelength: float,
    octaves: int,
    lacunarity: float,
    gain: float,
) -> Iterator[tuple[np.random.Generator, float, float]]:
    """Yield (rng, wavelength, amplitude) for each octave, coarsest first."""
    wavelength = base_wavelength
    amplitude = 1.0
    for i in range(octaves):
        yield np.random.default_rng(seed + i * _OCTAVE_STRIDE), wavelength, amplitude
        wavelength /= lacunarity
        amplitude *= gain


def _fbm(
    shape: tuple[int, ...],
    seed: int,
    base_wavelength: float,
    octaves: int,
    lacunarity: float,
    gain: float,
) -> NDArray[np.float32]:
    result = np.zeros(shape, dtype=np.float32)
    total = 0.0
    for rng, wavelength, amplitude in _octaves(
        seed, base_wavelength, octaves, lacunarity, gain
    ):
        result += amplitude * _smooth_noise(shape, rng, wavelength)
        total += amplitude

    if total > 0:
        result /= total
    return np.clip(result, -1.0, 1.0)


def fbm_noise(
    width: int,
    height: int,
    seed: int,
    base_wavelength: float,
    octaves: int = 4,
    lacunarity: float = 2.0,
    gain: float = 0.5,
) -> NDArray[np.float32]:
    """Fractal Brownian motion over a 2D grid.

    Args:
        width: Output width in tiles.
        height: Output height in tiles.
        seed: Random seed.
        base_wavelength: Wavelength of the coarsest octave in tiles.
        octaves: Number of octaves summed.
        lacunarity: Wavelength divisor between octaves.
        gain: Amplitude multiplier between octaves.

    Returns:
        Array of shape (height, width) with values in [-1, 1].
    """
    return _fbm((height, width), seed, base_wavelength, octaves, lacunarity, gain)


def fbm_noise_1d(
    length: int,
    seed: int,
    base_wavelength: float,
    octaves: int = 3,
    gain: float = 0.5,
) -> NDArray[np.float32]:
    """Periodic 1D fBm profile.

    The profile wraps, so it serves closed outlines sampled by angle as well
    as open ones like a coastline or a river centerline.

    Returns:
        Array of ``length`` values in [-1, 1].
    """
    return _fbm(
        (length,), seed + _PROFILE_OFFSET, base_wavelength, octaves, 2.0, gain
    )


def ridged_multifractal(
    width: int,
    height: int,
    seed: int,
    base_wavelength: float,
    octaves: int = 4,
    lacunarity: float = 2.0,
    gain: float = 0.5,
    offset: float = 1.0,
) -> NDArray[np.float32]:
    """Ridged multifractal noise for sharp crest lines.

    Each octave folds the noise into ``(offset - |n|)²`` ridges and is
    weighted by the previous octave's signal, so detail gathers along the
    crests.

    Args:
        width: Output width in tiles.
        height: Output height in tiles.
        seed: Random seed.
        base_wavelength: Wavelength of the coarsest octave in tiles.
        octaves: Number of octaves.
        lacunarity: Wavelength divisor between octaves.
        gain: Amplitude multiplier between octaves.
        offset: Ridge sharpness; the fold is taken around this value.

    Returns:
        Array of shape (height, width) with values in [0, 1].
    """
    shape = (height, width)
    result = np.zeros(shape, dtype=np.float32)
    weight = np.ones(shape, dtype=np.float32)
    total = 0.0

    for rng, wavelength, amplitude in _octaves(
        seed + _RIDGED_OFFSET, base_wavelength, octaves, lacunarity, gain
    ):
        ridge = offset - np.abs(_smooth_noise(shape, rng, wavelength))
        signal = ridge * ridge * weight
        result += amplitude * signal
        weight = np.clip(signal * 2.0, 0.0, 1.0)
        total += amplitude

    if total > 0:
        result /= total
    return np.clip(result, 0.0, 1.0)
