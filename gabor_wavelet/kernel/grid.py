"""Fill a kernel matrix row by row on a thread pool."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, wait
from typing import Optional, Tuple

import numpy as np
import numpy.typing as npt

from gabor_wavelet.kernel.gabor import centered_offsets, gabor_grid_torch, gabor_row
from gabor_wavelet.kernel.params import WaveletParameters
from gabor_wavelet.kernel.sigma import bandwidth_to_sigma

__all__ = ["BACKENDS", "generate_kernel", "generate_with_sigma"]


BACKENDS = ("threads", "torch")

KernelMatrix = npt.NDArray[np.float32]


def _fill_row(
    matrix: KernelMatrix,
    row: int,
    params: WaveletParameters,
    sigma: float,
    xs: npt.NDArray[np.int64],
) -> None:
    # Each task owns exactly one row of ``matrix``.
    y = row - (params.height // 2)
    matrix[row, :] = gabor_row(params.gamma, params.theta, params.lambda_, sigma, params.phi, xs, y)


def _generate_threads(params: WaveletParameters, sigma: float, workers: Optional[int]) -> KernelMatrix:
    matrix = np.empty(params.shape, dtype=np.float32)
    xs = centered_offsets(params.width)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="gabor-row") as executor:
        futures = [
            executor.submit(_fill_row, matrix, row, params, sigma, xs)
            for row in range(params.height)
        ]
        wait(futures)
    for future in futures:
        future.result()
    return matrix


def generate_with_sigma(
    params: WaveletParameters,
    *,
    workers: Optional[int] = None,
    strict: bool = False,
    backend: str = "threads",
) -> Tuple[KernelMatrix, float]:
    """
    Generate the kernel matrix and return it with the envelope width used.

    Parameters
    ----------
    params : WaveletParameters
        Wavelet and grid parameters.
    workers : int, optional
        Thread pool size for the ``"threads"`` backend. ``None`` uses the
        executor default.
    strict : bool
        Reject degenerate parameters (see ``WaveletParameters.validate``)
        instead of emitting non-finite or envelope-free kernels.
    backend : {"threads", "torch"}
        ``"threads"`` evaluates one row per task; ``"torch"`` evaluates the
        whole grid as a single tensor expression on the CPU.

    Returns
    -------
    matrix : (height, width) float32 array, row ``j`` / column ``i`` holding
        the value at offset ``(i - width // 2, j - height // 2)``
    sigma : float
    """
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend '{backend}', expected one of {BACKENDS}")
    if workers is not None and workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    params.validate(strict=strict)

    sigma = bandwidth_to_sigma(params.beta, params.lambda_)
    if backend == "torch":
        matrix = gabor_grid_torch(params, sigma).cpu().numpy()
    else:
        matrix = _generate_threads(params, sigma, workers)
    return matrix, sigma


def generate_kernel(
    params: WaveletParameters,
    *,
    workers: Optional[int] = None,
    strict: bool = False,
    backend: str = "threads",
) -> KernelMatrix:
    """Generate the ``(height, width)`` kernel matrix for ``params``."""

    matrix, _ = generate_with_sigma(params, workers=workers, strict=strict, backend=backend)
    return matrix
