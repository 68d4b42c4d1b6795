"""Synthesis of 2-D Gabor wavelet kernels."""
from importlib import metadata

from gabor_wavelet.config import GenerationConfig, load_config
from gabor_wavelet.data import MatrixIOError, read_matrix, write_matrix
from gabor_wavelet.kernel import (
    InvalidParameterError,
    WaveletParameters,
    bandwidth_to_sigma,
    gabor,
    gabor_grid_torch,
    gabor_row,
    generate_kernel,
    generate_with_sigma,
)

__all__ = [
    "__version__",
    "WaveletParameters",
    "InvalidParameterError",
    "bandwidth_to_sigma",
    "gabor",
    "gabor_row",
    "gabor_grid_torch",
    "generate_kernel",
    "generate_with_sigma",
    "MatrixIOError",
    "write_matrix",
    "read_matrix",
    "GenerationConfig",
    "load_config",
]


def _get_version() -> str:
    try:
        return metadata.version("gabor-wavelet")
    except metadata.PackageNotFoundError:  # pragma: no cover - fallback for dev installs
        return "0.0.0"


__version__ = _get_version()
