"""Gabor kernel synthesis: envelope width, evaluation and grid filling."""

from gabor_wavelet.kernel.params import PARAMETER_KEYS, InvalidParameterError, WaveletParameters
from gabor_wavelet.kernel.sigma import bandwidth_to_sigma
from gabor_wavelet.kernel.gabor import centered_offsets, gabor, gabor_grid_torch, gabor_row
from gabor_wavelet.kernel.grid import BACKENDS, generate_kernel, generate_with_sigma

__all__ = [
    "WaveletParameters",
    "InvalidParameterError",
    "PARAMETER_KEYS",
    "bandwidth_to_sigma",
    "gabor",
    "gabor_row",
    "gabor_grid_torch",
    "centered_offsets",
    "generate_kernel",
    "generate_with_sigma",
    "BACKENDS",
]
