# smoothing_spline/solver/spline_1d_solver.py
from __future__ import annotations

import logging

import numpy as np

from smoothing_spline.models.spline_1d import Spline1d
from smoothing_spline.models.spline_1d_constraint import Spline1dConstraint
from smoothing_spline.models.spline_1d_kernel import Spline1dKernel

logger = logging.getLogger(__name__)


class Spline1dSolver:
    """
    Holds the spline being fitted plus the kernel (cost) and constraint
    collaborators that describe the current cycle's QP. Subclasses provide
    solve().
    """

    def __init__(self, x_knots, order: int):
        self.x_knots = np.asarray(x_knots, dtype=float).reshape(-1)
        self.order = int(order)
        self.spline = Spline1d(self.x_knots, self.order)
        self.kernel = Spline1dKernel(self.x_knots, self.order)
        self.constraint = Spline1dConstraint(self.x_knots, self.order)

        self.last_num_param = 0
        self.last_num_constraint = 0

    def reset_problem(self):
        """Fresh kernel and constraint for the next cycle; the spline is kept."""
        self.kernel = Spline1dKernel(self.x_knots, self.order)
        self.constraint = Spline1dConstraint(self.x_knots, self.order)

    def solve(self) -> bool:
        raise NotImplementedError

    def commit_solution(self, x: np.ndarray, num_params: int, num_constraints: int) -> bool:
        """
        Write x[:num_params] into the spline segments as a (num_params, 1)
        column. Returns the spline's own pass/fail.
        """
        x = np.asarray(x, dtype=float).reshape(-1)
        if x.shape[0] < num_params:
            raise ValueError("solution shorter than num_params")

        solved_params = np.zeros((num_params, 1), dtype=float)
        solved_params[:, 0] = x[:num_params]

        self.last_num_param = int(num_params)
        self.last_num_constraint = int(num_constraints)

        ok = self.spline.set_spline_segs(solved_params, self.spline.spline_order())
        if not ok:
            logger.warning("spline rejected %d solved params", num_params)
        return ok
