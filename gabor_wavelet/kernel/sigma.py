"""Envelope width of a Gabor wavelet from its bandwidth."""
from __future__ import annotations

import math

import numpy as np

__all__ = ["bandwidth_to_sigma"]


_SIGMA_SCALE = (1.0 / math.pi) * math.sqrt(math.log(2.0) / 2.0)


def bandwidth_to_sigma(beta: float, lambda_: float) -> float:
    """
    Standard deviation of the Gaussian envelope for bandwidth ``beta``.

    σ = λ · (1/π) · √(ln 2 / 2) · (2^β + 1) / (2^β − 2)

    Evaluated in float64 and rounded to float32. ``beta == 1`` zeroes the
    denominator and yields ``±inf`` (or ``nan``) rather than raising.
    """

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        p = np.power(np.float64(2.0), np.float64(beta))
        ratio = (p + 1.0) / (p - 2.0)
        sigma = np.float64(lambda_) * (_SIGMA_SCALE * ratio)
    return float(np.float32(sigma))
