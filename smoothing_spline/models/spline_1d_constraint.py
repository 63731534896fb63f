# smoothing_spline/models/spline_1d_constraint.py
from __future__ import annotations

import numpy as np

from smoothing_spline.models.spline_basis import basis_row, num_spline_params, segment_basis


class AffineConstraint:
    """Stacked rows: constraint_matrix() (m, n), constraint_boundary() (m, 1)."""

    def __init__(self, num_params: int):
        self.num_params = int(num_params)
        self._matrix = np.zeros((0, self.num_params), dtype=float)
        self._boundary = np.zeros((0, 1), dtype=float)

    def constraint_matrix(self) -> np.ndarray:
        return self._matrix

    def constraint_boundary(self) -> np.ndarray:
        return self._boundary

    def add_constraint(self, matrix: np.ndarray, boundary: np.ndarray):
        matrix = np.atleast_2d(np.asarray(matrix, dtype=float))
        boundary = np.asarray(boundary, dtype=float).reshape(-1, 1)
        if matrix.shape[1] != self.num_params:
            raise ValueError("constraint matrix column count mismatch")
        if matrix.shape[0] != boundary.shape[0]:
            raise ValueError("constraint matrix rows and boundary length mismatch")
        self._matrix = np.vstack((self._matrix, matrix))
        self._boundary = np.vstack((self._boundary, boundary))


class Spline1dConstraint:
    """
    Inequality rows: A x >= b.   Equality rows: A x == b.
    Upper bounds are stored as negated inequality rows: -a x >= -ub.
    """

    def __init__(self, x_knots, order: int):
        self.x_knots = np.asarray(x_knots, dtype=float).reshape(-1)
        self.order = int(order)
        self.num_params = num_spline_params(self.x_knots, self.order)
        self._inequality = AffineConstraint(self.num_params)
        self._equality = AffineConstraint(self.num_params)

    def inequality_constraint(self) -> AffineConstraint:
        return self._inequality

    def equality_constraint(self) -> AffineConstraint:
        return self._equality

    def add_point_fx_constraint(self, x: float, fx: float):
        self._equality.add_constraint(basis_row(self.x_knots, self.order, x), [fx])

    def add_fx_boundary(self, x_coord, lower_bound=None, upper_bound=None):
        x_coord = np.asarray(x_coord, dtype=float).reshape(-1)
        rows = np.array([basis_row(self.x_knots, self.order, x) for x in x_coord]).reshape(-1, self.num_params)

        if lower_bound is not None:
            lb = np.broadcast_to(np.asarray(lower_bound, dtype=float), x_coord.shape)
            self._inequality.add_constraint(rows, lb)
        if upper_bound is not None:
            ub = np.broadcast_to(np.asarray(upper_bound, dtype=float), x_coord.shape)
            self._inequality.add_constraint(-rows, -ub)

    def add_smooth_constraint(self, derivative: int = 0):
        """Continuity of f, f', ..., f^(derivative) at every interior knot."""
        k = self.order + 1
        rows = []
        for s in range(1, self.x_knots.shape[0] - 1):
            h = self.x_knots[s] - self.x_knots[s - 1]
            for d in range(derivative + 1):
                row = np.zeros(self.num_params, dtype=float)
                row[(s - 1) * k:s * k] = segment_basis(self.order, h, d)
                row[s * k:(s + 1) * k] = -segment_basis(self.order, 0.0, d)
                rows.append(row)
        if rows:
            self._equality.add_constraint(np.array(rows), np.zeros(len(rows)))
