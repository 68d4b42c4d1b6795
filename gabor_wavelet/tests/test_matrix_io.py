"""Tests for the comma-terminated matrix encoding."""
from __future__ import annotations

import math
from pathlib import Path

import numpy as np
import pytest

from gabor_wavelet.data.matrix_io import MatrixIOError, format_row, read_matrix, write_matrix
from gabor_wavelet.kernel.grid import generate_kernel
from gabor_wavelet.kernel.params import WaveletParameters


def test_exact_encoding(tmp_path: Path) -> None:
    matrix = np.array([[1.0, -0.5, 0.0], [0.25, 1e-9, -1e-9]], dtype=np.float32)
    path = write_matrix(matrix, tmp_path / "kernel.csv")
    assert path.read_bytes() == (
        b"1.000000,-0.500000,0.000000,\n"
        b"0.250000,0.000000,-0.000000,\n"
    )


def test_non_finite_tokens() -> None:
    assert format_row([math.nan, math.inf, -math.inf, 2.0]) == "NaN,+Inf,-Inf,2.000000,\n"


def test_line_and_token_counts(tmp_path: Path) -> None:
    params = WaveletParameters(theta=0.4, lambda_=6.0, width=17, height=5)
    path = write_matrix(generate_kernel(params), tmp_path / "kernel.csv")
    lines = path.read_text().split("\n")
    assert lines[-1] == ""
    lines = lines[:-1]
    assert len(lines) == params.height
    for line in lines:
        assert line.endswith(",")
        assert line.count(",") == params.width
        assert all(token for token in line[:-1].split(","))


def test_round_trip_precision(tmp_path: Path) -> None:
    matrix = generate_kernel(WaveletParameters(theta=0.9, phi=0.3, lambda_=9.0, width=25, height=19))
    restored = read_matrix(write_matrix(matrix, tmp_path / "kernel.csv"))
    assert restored.shape == matrix.shape
    assert np.max(np.abs(restored.astype(np.float64) - matrix.astype(np.float64))) <= 5e-7 + 1e-7


def test_read_non_finite(tmp_path: Path) -> None:
    path = tmp_path / "bad.csv"
    path.write_text("NaN,+Inf,\n-Inf,1.500000,\n")
    restored = read_matrix(path)
    assert np.isnan(restored[0, 0])
    assert restored[0, 1] == np.inf
    assert restored[1, 0] == -np.inf
    assert restored[1, 1] == np.float32(1.5)


@pytest.mark.parametrize("second_row", ["3.0,\n", "3.0\n"])
def test_read_rejects_short_rows(tmp_path: Path, second_row: str) -> None:
    path = tmp_path / "ragged.csv"
    path.write_text("1.0,2.0,\n" + second_row)
    with pytest.raises(ValueError, match="expected 2 values"):
        read_matrix(path)


def test_overwrites_existing_file(tmp_path: Path) -> None:
    path = tmp_path / "kernel.csv"
    path.write_text("stale\n" * 10)
    write_matrix(np.zeros((1, 2), dtype=np.float32), path)
    assert path.read_text() == "0.000000,0.000000,\n"


def test_unwritable_destination(tmp_path: Path) -> None:
    with pytest.raises(MatrixIOError) as info:
        write_matrix(np.zeros((2, 2)), tmp_path / "missing" / "kernel.csv")
    assert isinstance(info.value, OSError)
    assert isinstance(info.value.__cause__, FileNotFoundError)


def test_missing_file_on_read(tmp_path: Path) -> None:
    with pytest.raises(MatrixIOError):
        read_matrix(tmp_path / "absent.csv")


def test_rejects_non_2d() -> None:
    with pytest.raises(ValueError, match="2D"):
        write_matrix(np.zeros(3), "unused.csv")


@pytest.mark.skipif(not Path("/dev/full").exists(), reason="needs /dev/full")
def test_failed_write_after_open() -> None:
    with pytest.raises(MatrixIOError) as info:
        write_matrix(np.zeros((2000, 200), dtype=np.float32), "/dev/full")
    assert isinstance(info.value.__cause__, OSError)
