# smoothing_spline/linalg/dense_to_csc.py
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import scipy.sparse as sp

# Entries with |value| <= ZERO_THRESHOLD are treated as structural zeros.
ZERO_THRESHOLD = 1e-9


@dataclass(frozen=True)
class CscMatrix:
    """
    Compressed-sparse-column triplet.

    Shapes:
      - values      : (nnz,)   float
      - row_indices : (nnz,)   int
      - col_pointers: (cols+1,) int, non-decreasing, col_pointers[-1] == nnz
    """
    values: np.ndarray
    row_indices: np.ndarray
    col_pointers: np.ndarray
    shape: tuple[int, int]

    def __post_init__(self):
        rows, cols = self.shape
        if rows < 0 or cols < 0:
            raise ValueError("shape must be non-negative")
        if self.col_pointers.shape != (cols + 1,):
            raise ValueError("col_pointers must have length cols + 1")
        if self.values.shape != self.row_indices.shape:
            raise ValueError("values and row_indices length mismatch")
        if self.col_pointers[0] != 0 or self.col_pointers[-1] != self.values.shape[0]:
            raise ValueError("col_pointers must start at 0 and end at nnz")
        if np.any(np.diff(self.col_pointers) < 0):
            raise ValueError("col_pointers must be non-decreasing")
        if self.row_indices.size and (self.row_indices.min() < 0 or self.row_indices.max() >= rows):
            raise ValueError("row index out of range")

    @property
    def nnz(self) -> int:
        return int(self.values.shape[0])

    def to_scipy(self) -> sp.csc_matrix:
        return sp.csc_matrix(
            (self.values, self.row_indices, self.col_pointers), shape=self.shape
        )


def dense_to_csc_matrix(dense: np.ndarray, zero_threshold: float = ZERO_THRESHOLD) -> CscMatrix:
    r"""
    Convert a dense matrix to CSC, scanning columns left to right and rows
    top to bottom within a column. Entries with |a_ij| <= zero_threshold are
    dropped.

    A matrix with zero rows or zero columns gives empty values/row_indices and
    col_pointers = zeros(cols + 1).
    """
    dense = np.asarray(dense, dtype=float)
    if dense.ndim != 2:
        raise ValueError("dense must be a 2-D array")
    if not np.all(np.isfinite(dense)):
        raise ValueError("dense must be finite")
    if zero_threshold < 0.0:
        raise ValueError("zero_threshold must be non-negative")

    rows, cols = dense.shape

    # Transposing makes the C-order scan column-major: (col, row) pairs come
    # out sorted by column, then row.
    keep_t = np.abs(dense.T) > zero_threshold
    _, row_idx = np.nonzero(keep_t)
    values = dense.T[keep_t].astype(float, copy=True)

    col_counts = keep_t.sum(axis=1).astype(np.int64)
    col_pointers = np.zeros(cols + 1, dtype=np.int64)
    np.cumsum(col_counts, out=col_pointers[1:])

    return CscMatrix(
        values=values.reshape(-1),
        row_indices=row_idx.astype(np.int64).reshape(-1),
        col_pointers=col_pointers,
        shape=(rows, cols),
    )


def csc_to_dense(csc: CscMatrix) -> np.ndarray:
    """Rebuild the dense array from a CscMatrix (inverse of dense_to_csc_matrix)."""
    rows, cols = csc.shape
    dense = np.zeros((rows, cols), dtype=float)
    for j in range(cols):
        start, stop = csc.col_pointers[j], csc.col_pointers[j + 1]
        dense[csc.row_indices[start:stop], j] = csc.values[start:stop]
    return dense
