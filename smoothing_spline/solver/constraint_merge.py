# smoothing_spline/solver/constraint_merge.py
from __future__ import annotations

import numpy as np

# Half-width of the band used for equality rows: b - eps <= a x <= b + eps.
EQUALITY_EPSILON = 1e-9
# Stand-in for +inf on the upper side of inequality rows.
UPPER_LIMIT = 1e9


def _as_constraint_pair(matrix, boundary, name: str) -> tuple[np.ndarray, np.ndarray]:
    matrix = np.asarray(matrix, dtype=float)
    if matrix.ndim != 2:
        raise ValueError(f"{name} matrix must be 2-D")
    boundary = np.asarray(boundary, dtype=float).reshape(-1)
    if matrix.shape[0] != boundary.shape[0]:
        raise ValueError(f"{name} matrix rows and boundary length mismatch")
    return matrix, boundary


def merge_constraints(
    ineq_matrix: np.ndarray,
    ineq_bounds: np.ndarray,
    eq_matrix: np.ndarray,
    eq_bounds: np.ndarray,
    epsilon: float = EQUALITY_EPSILON,
    upper_limit: float = UPPER_LIMIT,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    r"""
    Stack inequality and equality constraints into one OSQP-style system
        l <= A x <= u

    Row layout:
        A = [A_ineq; A_eq]              shape (m_ineq + m_eq, n)
        l = [b_ineq; b_eq - eps]
        u = [upper_limit; b_eq + eps]

    Inequality rows mean A_ineq x >= b_ineq. Boundaries may be (m,) or (m,1).
    """
    A_ineq, b_ineq = _as_constraint_pair(ineq_matrix, ineq_bounds, "inequality")
    A_eq, b_eq = _as_constraint_pair(eq_matrix, eq_bounds, "equality")

    if A_ineq.shape[1] != A_eq.shape[1]:
        raise ValueError("inequality and equality constraint column count mismatch")
    if epsilon < 0.0:
        raise ValueError("epsilon must be non-negative")

    A = np.vstack((A_ineq, A_eq))

    l_ineq = b_ineq.copy()
    u_ineq = np.full_like(b_ineq, float(upper_limit))
    l_eq = b_eq - epsilon
    u_eq = b_eq + epsilon

    l = np.hstack((l_ineq, l_eq))
    u = np.hstack((u_ineq, u_eq))

    # an inequality boundary above the sentinel would flip the row
    if np.any(l > u):
        raise ValueError("lower bound exceeds upper bound")
    return A, l, u
