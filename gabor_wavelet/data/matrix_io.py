"""Comma-terminated text encoding of kernel matrices.

Each matrix row becomes one line. Every cell is written as ``%f`` (six
fractional digits) followed by a comma, including the last cell, and the line
ends with ``\\n``. There is no header. Non-finite cells are written as
``NaN``, ``+Inf`` and ``-Inf``.
"""
from __future__ import annotations

import math
from pathlib import Path

import numpy as np
import numpy.typing as npt

__all__ = ["MatrixIOError", "format_cell", "format_row", "write_matrix", "read_matrix"]


class MatrixIOError(OSError):
    """Raised when a matrix file cannot be created, written or read."""


def format_cell(value: float) -> str:
    value = float(value)
    if math.isnan(value):
        return "NaN,"
    if math.isinf(value):
        return "+Inf," if value > 0 else "-Inf,"
    return "%f," % value


def format_row(row: npt.ArrayLike) -> str:
    """One encoded line for ``row``, newline included."""
    return "".join(format_cell(v) for v in np.asarray(row).ravel()) + "\n"


def write_matrix(matrix: npt.ArrayLike, path: str | Path) -> Path:
    """
    Write ``matrix`` (rows x cols) to ``path``, replacing any existing file.

    Raises
    ------
    ValueError
        If ``matrix`` is not 2-D.
    MatrixIOError
        If the destination cannot be opened or written.
    """
    arr = np.asarray(matrix)
    if arr.ndim != 2:
        raise ValueError(f"matrix must be 2D, got shape {arr.shape}")
    p = Path(path)
    try:
        with p.open("w", encoding="utf-8", newline="\n") as f:
            for row in arr:
                f.write(format_row(row))
    except OSError as exc:
        raise MatrixIOError(f"Cannot write matrix to {p}: {exc}") from exc
    return p


def read_matrix(path: str | Path) -> npt.NDArray[np.float32]:
    """
    Parse a file produced by :func:`write_matrix` into a float32 array.

    The column count is taken from the first line; rows with fewer values
    raise ``ValueError``.
    """

    p = Path(path)
    try:
        with p.open(encoding="utf-8") as f:
            first = f.readline()
    except OSError as exc:
        raise MatrixIOError(f"Cannot read matrix from {p}: {exc}") from exc
    if not first.strip():
        return np.empty((0, 0), dtype=np.float32)

    # each cell carries its own trailing comma
    ncols = len(first.rstrip("\n").rstrip(",").split(","))
    try:
        return np.loadtxt(p, delimiter=",", usecols=range(ncols), ndmin=2, dtype=np.float32)
    except OSError as exc:
        raise MatrixIOError(f"Cannot read matrix from {p}: {exc}") from exc
    except ValueError as exc:
        raise ValueError(f"{p}: expected {ncols} values per row ({exc})") from exc
