# gabor_wavelet/kernel/gabor.py
"""
Evaluation of the real 2-D Gabor function.

    x' =  x cos θ + y sin θ
    y' = -x sin θ + y cos θ
    g(x, y) = exp((x² + γ² y'²) / (-2σ²)) · cos(2π x' / λ + φ)

The envelope takes the unrotated ``x`` together with the rotated ``y'``.

All arithmetic is float64 and the result is rounded to float32. Three entry
points share the formula:

- ``gabor``            : one grid offset -> one value
- ``gabor_row``        : one row of offsets (NumPy), used by the row workers
- ``gabor_grid_torch`` : the whole grid as a tensor
"""
from __future__ import annotations

import math
from typing import Optional

import numpy as np
import numpy.typing as npt
import torch
from torch import Tensor

from gabor_wavelet.kernel.params import WaveletParameters

__all__ = ["gabor", "gabor_row", "gabor_grid_torch", "centered_offsets"]


NDArrayF32 = npt.NDArray[np.float32]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def centered_offsets(size: int) -> npt.NDArray[np.int64]:
    """Plane offsets ``i - size // 2`` for pixel indices ``0..size-1``."""
    return np.arange(size, dtype=np.int64) - (size // 2)


def _gabor_f64(gamma, theta, lambda_, sigma, phi, x, y):
    gamma = np.float64(gamma)
    sigma = np.float64(sigma)
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    # Non-finite inputs or a zero wavelength must propagate as IEEE values.
    with np.errstate(divide="ignore", invalid="ignore", over="ignore", under="ignore"):
        cos_t = np.cos(np.float64(theta))
        sin_t = np.sin(np.float64(theta))
        x_prime = x * cos_t + y * sin_t
        y_prime = -1.0 * x * sin_t + y * cos_t

        envelope = np.exp((x * x + gamma * gamma * y_prime * y_prime) / (-2.0 * sigma * sigma))
        carrier = np.cos(((2.0 * math.pi * x_prime) / np.float64(lambda_)) + np.float64(phi))
        return envelope * carrier


# ---------------------------------------------------------------------------
# Public evaluators
# ---------------------------------------------------------------------------

def gabor(
    gamma: float,
    theta: float,
    lambda_: float,
    sigma: float,
    phi: float,
    x: int,
    y: int,
) -> np.float32:
    """
    Value of the wavelet at plane offset ``(x, y)`` from the grid centre.

    Parameters
    ----------
    gamma : aspect ratio
    theta : orientation (radians)
    lambda_ : wavelength (pixels)
    sigma : envelope standard deviation (pixels), see ``bandwidth_to_sigma``
    phi : phase (radians)
    x, y : integer offsets, already centred

    Returns
    -------
    numpy.float32
    """
    return np.float32(_gabor_f64(gamma, theta, lambda_, sigma, phi, x, y))


def gabor_row(
    gamma: float,
    theta: float,
    lambda_: float,
    sigma: float,
    phi: float,
    xs: npt.ArrayLike,
    y: int,
) -> NDArrayF32:
    """Evaluate one row: every offset in ``xs`` at vertical offset ``y``."""

    xs = np.asarray(xs)
    if xs.ndim != 1:
        raise ValueError("xs must be 1D")
    return _gabor_f64(gamma, theta, lambda_, sigma, phi, xs, y).astype(np.float32)


def gabor_grid_torch(
    params: WaveletParameters,
    sigma: float,
    *,
    device: Optional[torch.device] = None,
) -> Tensor:
    """
    Evaluate the full ``(height, width)`` grid with torch.

    Computation runs in float64 on ``device`` (CPU by default) and the result
    is returned as a float32 tensor on the same device.
    """
    device = device or torch.device("cpu")
    dtype = torch.float64

    xs = torch.arange(params.width, device=device, dtype=torch.int64) - (params.width // 2)
    ys = torch.arange(params.height, device=device, dtype=torch.int64) - (params.height // 2)
    # (H, W)
    y, x = torch.meshgrid(ys.to(dtype), xs.to(dtype), indexing="ij")

    def scalar(value: float) -> Tensor:
        return torch.tensor(float(value), device=device, dtype=dtype)

    theta = scalar(params.theta)
    cos_t, sin_t = torch.cos(theta), torch.sin(theta)
    x_prime = x * cos_t + y * sin_t
    y_prime = -1.0 * x * sin_t + y * cos_t

    gamma, sigma_t = scalar(params.gamma), scalar(sigma)
    envelope = torch.exp((x * x + gamma * gamma * y_prime * y_prime) / (-2.0 * sigma_t * sigma_t))
    carrier = torch.cos(((2.0 * math.pi * x_prime) / scalar(params.lambda_)) + scalar(params.phi))
    return (envelope * carrier).to(torch.float32)
