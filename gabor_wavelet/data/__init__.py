"""Persistence of kernel matrices."""

from gabor_wavelet.data.matrix_io import MatrixIOError, format_cell, format_row, read_matrix, write_matrix

__all__ = [
    "MatrixIOError",
    "format_cell",
    "format_row",
    "write_matrix",
    "read_matrix",
]
