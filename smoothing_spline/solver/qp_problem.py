# smoothing_spline/solver/qp_problem.py
from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from smoothing_spline.linalg.dense_to_csc import CscMatrix, dense_to_csc_matrix
from smoothing_spline.solver.constraint_merge import merge_constraints

logger = logging.getLogger(__name__)


def _frozen(v: np.ndarray) -> np.ndarray:
    v = np.array(v, dtype=float, copy=True).reshape(-1)
    v.flags.writeable = False
    return v


@dataclass(frozen=True)
class QpProblem:
    """
    OSQP problem data:
        minimize    0.5 x^T P x + q^T x
        subject to  l <= A x <= u

    Shapes:
      - P: (n, n) CSC
      - q: (n,)
      - A: (m, n) CSC
      - l, u: (m,)
    """
    n: int
    m: int
    P: CscMatrix
    q: np.ndarray
    A: CscMatrix
    l: np.ndarray
    u: np.ndarray

    def __post_init__(self):
        if self.P.shape != (self.n, self.n):
            raise ValueError("P must be n x n")
        if self.A.shape != (self.m, self.n):
            raise ValueError("A must be m x n")
        if self.q.shape != (self.n,):
            raise ValueError("q must have length n")
        if self.l.shape != (self.m,) or self.u.shape != (self.m,):
            raise ValueError("l and u must have length m")
        if np.any(self.l > self.u):
            raise ValueError("l must not exceed u")


def build_problem(kernel, constraint) -> QpProblem | None:
    """
    Assemble a QpProblem from a kernel (kernel_matrix(), offset()) and a
    constraint collaborator (inequality_constraint(), equality_constraint()).

    Returns None when there is nothing to optimize or the inputs are
    inconsistent; the caller skips this cycle.
    """
    P_dense = np.array(kernel.kernel_matrix(), dtype=float, copy=True)
    if P_dense.ndim != 2:
        logger.warning("kernel matrix must be 2-D, got %d-D", P_dense.ndim)
        return None
    logger.debug("P: %d, %d", *P_dense.shape)
    if P_dense.shape[0] == 0:
        logger.warning("empty kernel matrix, nothing to optimize")
        return None
    if P_dense.shape[0] != P_dense.shape[1]:
        logger.warning("kernel matrix is not square: %s", P_dense.shape)
        return None
    n = P_dense.shape[0]

    q = np.array(kernel.offset(), dtype=float, copy=True).reshape(-1)
    if q.shape != (n,):
        logger.warning("offset length %d does not match %d params", q.shape[0], n)
        return None
    if not np.all(np.isfinite(q)):
        logger.warning("offset has non-finite entries")
        return None

    ineq = constraint.inequality_constraint()
    eq = constraint.equality_constraint()
    try:
        A_dense, l, u = merge_constraints(
            ineq.constraint_matrix(),
            ineq.constraint_boundary(),
            eq.constraint_matrix(),
            eq.constraint_boundary(),
        )
    except ValueError as e:
        logger.warning("cannot merge constraints: %s", e)
        return None

    logger.debug("A: %d, %d", *A_dense.shape)
    if A_dense.shape[0] == 0:
        logger.warning("empty constraint matrix")
        return None
    if A_dense.shape[1] != n:
        logger.warning("constraint columns %d do not match %d params", A_dense.shape[1], n)
        return None
    if not (np.all(np.isfinite(l)) and np.all(np.isfinite(u))):
        logger.warning("constraint bounds have non-finite entries")
        return None

    try:
        P = dense_to_csc_matrix(P_dense)
        A = dense_to_csc_matrix(A_dense)
    except ValueError as e:
        logger.warning("cannot convert problem to csc: %s", e)
        return None

    return QpProblem(
        n=n,
        m=A_dense.shape[0],
        P=P,
        q=_frozen(q),
        A=A,
        l=_frozen(l),
        u=_frozen(u),
    )
