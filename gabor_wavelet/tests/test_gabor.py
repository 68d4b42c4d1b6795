"""Tests for the per-pixel Gabor evaluator and its vectorised forms."""
from __future__ import annotations

import math

import numpy as np
import pytest
import torch

from gabor_wavelet.kernel.gabor import centered_offsets, gabor, gabor_grid_torch, gabor_row
from gabor_wavelet.kernel.params import WaveletParameters
from gabor_wavelet.kernel.sigma import bandwidth_to_sigma


@pytest.mark.parametrize("gamma, lambda_", [(1.0, 50.0), (0.5, 8.0), (3.0, 120.0)])
def test_centre_is_cos_phi(gamma: float, lambda_: float) -> None:
    sigma = bandwidth_to_sigma(2.0, lambda_)
    assert gabor(gamma, 0.4, lambda_, sigma, 0.0, 0, 0) == np.float32(1.0)
    assert abs(gabor(gamma, 0.4, lambda_, sigma, math.pi / 2, 0, 0)) < 1e-7
    assert gabor(gamma, 0.4, lambda_, sigma, math.pi, 0, 0) == np.float32(-1.0)


def test_returns_float32() -> None:
    value = gabor(1.0, 0.0, 50.0, 23.4, 0.0, 3, -2)
    assert isinstance(value, np.float32)


def test_envelope_uses_unrotated_x() -> None:
    # theta = pi/2 swaps the axes: x' ~ y = 0 and y' = -x.
    sigma = 10.0
    value = gabor(1.0, math.pi / 2, 50.0, sigma, 0.0, 3, 0)
    expected = math.exp((9.0 + 9.0) / (-2.0 * sigma * sigma))
    assert float(value) == pytest.approx(expected, rel=1e-6)
    rotated_only = math.exp(9.0 / (-2.0 * sigma * sigma))
    assert abs(float(value) - rotated_only) > 1e-3


def test_carrier_period_along_x() -> None:
    # Half a wavelength from the centre the carrier is -1.
    sigma = 1e6
    value = gabor(1.0, 0.0, 20.0, sigma, 0.0, 10, 0)
    assert float(value) == pytest.approx(-1.0, abs=1e-6)


def test_row_matches_scalar() -> None:
    gamma, theta, lambda_, phi = 0.7, 0.3, 17.0, 0.2
    sigma = bandwidth_to_sigma(1.5, lambda_)
    xs = centered_offsets(9)
    row = gabor_row(gamma, theta, lambda_, sigma, phi, xs, -2)
    assert row.dtype == np.float32
    expected = [gabor(gamma, theta, lambda_, sigma, phi, int(x), -2) for x in xs]
    np.testing.assert_allclose(row, np.array(expected, dtype=np.float32), atol=1e-7)


def test_row_rejects_2d_offsets() -> None:
    with pytest.raises(ValueError):
        gabor_row(1.0, 0.0, 50.0, 10.0, 0.0, np.zeros((2, 2)), 0)


def test_centered_offsets_truncate_towards_left() -> None:
    assert centered_offsets(5).tolist() == [-2, -1, 0, 1, 2]
    assert centered_offsets(4).tolist() == [-2, -1, 0, 1]
    assert centered_offsets(1).tolist() == [0]


def test_infinite_sigma_flattens_envelope() -> None:
    value = gabor(1.0, 0.0, 50.0, math.inf, 0.0, 5, 5)
    assert float(value) == pytest.approx(math.cos(2.0 * math.pi * 5 / 50.0), rel=1e-6)


def test_zero_wavelength_is_non_finite() -> None:
    assert not np.isfinite(gabor(1.0, 0.0, 0.0, 10.0, 0.0, 3, 0))


def test_torch_grid_matches_rows() -> None:
    params = WaveletParameters(beta=1.8, gamma=0.6, theta=0.9, lambda_=12.0, phi=0.4, width=11, height=6)
    sigma = bandwidth_to_sigma(params.beta, params.lambda_)
    grid = gabor_grid_torch(params, sigma)
    assert grid.dtype == torch.float32
    assert tuple(grid.shape) == (6, 11)
    xs = centered_offsets(params.width)
    for j in range(params.height):
        row = gabor_row(params.gamma, params.theta, params.lambda_, sigma, params.phi, xs, j - params.height // 2)
        np.testing.assert_allclose(grid[j].numpy(), row, atol=1e-6)
