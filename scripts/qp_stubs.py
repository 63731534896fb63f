# scripts/qp_stubs.py
"""Minimal kernel/constraint stand-ins shared by the test scripts."""
from __future__ import annotations

import sys
from pathlib import Path

import numpy as np

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from smoothing_spline.models.spline_1d_constraint import AffineConstraint


class StubKernel:
    def __init__(self, P, q):
        self.P = np.asarray(P, dtype=float)
        self.q = np.asarray(q, dtype=float).reshape(-1, 1)

    def kernel_matrix(self):
        return self.P

    def offset(self):
        return self.q


class StubConstraint:
    def __init__(self, n, ineq=None, eq=None):
        self._ineq = AffineConstraint(n)
        self._eq = AffineConstraint(n)
        if ineq is not None:
            self._ineq.add_constraint(*ineq)
        if eq is not None:
            self._eq.add_constraint(*eq)

    def inequality_constraint(self):
        return self._ineq

    def equality_constraint(self):
        return self._eq


class RawConstraint:
    """Hands over matrices AffineConstraint would refuse."""

    class _Pair:
        def __init__(self, M, b):
            self.M, self.b = M, b

        def constraint_matrix(self):
            return self.M

        def constraint_boundary(self):
            return self.b

    def __init__(self, ineq, eq):
        self._ineq = self._Pair(*ineq)
        self._eq = self._Pair(*eq)

    def inequality_constraint(self):
        return self._ineq

    def equality_constraint(self):
        return self._eq
