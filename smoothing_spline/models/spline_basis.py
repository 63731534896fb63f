# smoothing_spline/models/spline_basis.py
from __future__ import annotations

from math import factorial

import numpy as np


def num_spline_params(x_knots, order: int) -> int:
    """(order + 1) coefficients per segment, len(x_knots) - 1 segments."""
    return max(len(x_knots) - 1, 0) * (int(order) + 1)


def find_index(x_knots, x: float) -> int:
    """Segment index containing x; clamped to the first/last segment."""
    x_knots = np.asarray(x_knots, dtype=float).reshape(-1)
    if x_knots.shape[0] < 2:
        raise ValueError("need at least two knots")
    idx = int(np.searchsorted(x_knots, float(x), side="right")) - 1
    return int(np.clip(idx, 0, x_knots.shape[0] - 2))


def segment_basis(order: int, t: float, derivative: int = 0) -> np.ndarray:
    r"""
    Monomial basis of one segment evaluated at local coordinate t:
        d^k/dt^k [1, t, t^2, ..., t^order]
    Shape: (order + 1,)
    """
    if derivative < 0:
        raise ValueError("derivative must be non-negative")
    b = np.zeros(order + 1, dtype=float)
    for p in range(derivative, order + 1):
        b[p] = factorial(p) / factorial(p - derivative) * float(t) ** (p - derivative)
    return b


def basis_row(x_knots, order: int, x: float, derivative: int = 0) -> np.ndarray:
    """
    Row r such that r @ params is the derivative-th derivative of the spline
    at x. Shape: (num_params,)
    """
    x_knots = np.asarray(x_knots, dtype=float).reshape(-1)
    i = find_index(x_knots, x)
    row = np.zeros(num_spline_params(x_knots, order), dtype=float)
    k = order + 1
    row[i * k:(i + 1) * k] = segment_basis(order, x - x_knots[i], derivative)
    return row
