# smoothing_spline/solver/osqp_spline_1d_solver.py
from __future__ import annotations

import logging

import osqp

from smoothing_spline.solver.osqp_session import OsqpSession, OsqpSettings, SolveOutcome
from smoothing_spline.solver.qp_problem import build_problem
from smoothing_spline.solver.spline_1d_solver import Spline1dSolver

logger = logging.getLogger(__name__)


class OsqpSpline1dSolver(Spline1dSolver):
    """
    1-D smoothing spline QP solved with OSQP.

    One solve() per planning cycle:
        kernel + constraint -> QpProblem -> OSQP -> spline segments

    Returns False (spline untouched) when there is nothing to optimize, the
    inputs are inconsistent, or OSQP reports infeasible/unsolved. A solve
    that hits max_iter is committed as best effort; check last_outcome.
    """

    def __init__(self, x_knots, order: int, settings: OsqpSettings | None = None, solver_factory=osqp.OSQP):
        super().__init__(x_knots, order)
        self._session = OsqpSession(settings=settings, solver_factory=solver_factory)
        self.last_outcome: SolveOutcome | None = None

    @property
    def session(self) -> OsqpSession:
        return self._session

    def solve(self) -> bool:
        self.last_outcome = None
        problem = build_problem(self.kernel, self.constraint)
        if problem is None:
            return False

        # release whatever an earlier cycle left behind
        self._session.teardown()
        with self._session.bound(problem) as session:
            outcome = session.solve()
        self.last_outcome = outcome

        if not outcome.ok:
            logger.warning("osqp failed: %s after %d iterations", outcome.status.value, outcome.iterations)
            return False
        if not outcome.status.converged:
            logger.warning("osqp did not converge in %d iterations, using best-effort solution", outcome.iterations)

        return self.commit_solution(outcome.x, problem.n, problem.m)

    def reset_osqp(self):
        self._session.teardown()
        self._session.reset_state()
        self.last_outcome = None

    def close(self):
        self._session.teardown()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __del__(self):
        session = getattr(self, "_session", None)
        if session is not None:
            session.teardown()
