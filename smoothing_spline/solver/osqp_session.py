# smoothing_spline/solver/osqp_session.py
from __future__ import annotations

import enum
import logging
from contextlib import contextmanager
from dataclasses import asdict, dataclass

import numpy as np
import scipy.sparse as sp
import osqp

from smoothing_spline.solver.qp_problem import QpProblem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OsqpSettings:
    alpha: float = 1.0
    eps_abs: float = 1.0e-3
    eps_rel: float = 1.0e-3
    max_iter: int = 5000
    polish: bool = False
    verbose: bool = False
    warm_start: bool = True

    def as_kwargs(self) -> dict:
        """Setup keywords under the osqp >= 1.0 names."""
        kw = asdict(self)
        kw["polishing"] = kw.pop("polish")
        kw["warm_starting"] = kw.pop("warm_start")
        return kw


class SolverStatus(enum.Enum):
    SOLVED = "solved"
    SOLVED_INACCURATE = "solved inaccurate"
    MAX_ITER_REACHED = "maximum iterations reached"
    PRIMAL_INFEASIBLE = "primal infeasible"
    DUAL_INFEASIBLE = "dual infeasible"
    UNSOLVED = "unsolved"

    @classmethod
    def from_osqp(cls, status: str) -> "SolverStatus":
        s = str(status).strip().lower()
        if s == "solved":
            return cls.SOLVED
        if s == "solved inaccurate":
            return cls.SOLVED_INACCURATE
        if s.startswith("maximum iterations"):
            return cls.MAX_ITER_REACHED
        if s.startswith("primal infeasible"):
            return cls.PRIMAL_INFEASIBLE
        if s.startswith("dual infeasible"):
            return cls.DUAL_INFEASIBLE
        return cls.UNSOLVED

    @property
    def converged(self) -> bool:
        return self in (SolverStatus.SOLVED, SolverStatus.SOLVED_INACCURATE)

    @property
    def usable(self) -> bool:
        # max-iter solutions are best effort but still committed
        return self.converged or self is SolverStatus.MAX_ITER_REACHED


@dataclass(frozen=True)
class SolveOutcome:
    status: SolverStatus
    x: np.ndarray | None
    y: np.ndarray | None
    iterations: int

    @property
    def ok(self) -> bool:
        return self.status.usable and self.x is not None


class OsqpSession:
    """
    Owns OSQP settings and the per-solve working handle.

    Lifecycle per planning cycle:
        setup(problem) -> solve() -> teardown()

    The session keeps the problem and the scipy CSC arrays handed to OSQP
    for as long as the handle lives; teardown drops all of them together.
    Primal/dual iterates of the last usable solve survive teardown and are
    used as the warm start of the next setup when the shapes match.
    """

    def __init__(self, settings: OsqpSettings | None = None, solver_factory=osqp.OSQP):
        self._solver_factory = solver_factory
        self._init_settings = settings
        self.reset_state()

    # ------------------------------------------------------------------ state
    def reset_state(self):
        """
        Re-create settings and containers without teardown. Only valid on a
        torn-down session.
        """
        if getattr(self, "_work", None) is not None:
            raise RuntimeError("reset_state() on a live session; call teardown() first")
        self._settings = OsqpSettings() if self._init_settings is None else self._init_settings
        self._work = None
        self._problem = None
        self._P = None
        self._A = None
        self._x_prev = None
        self._y_prev = None
        self.last_outcome = None

    @property
    def settings(self) -> OsqpSettings:
        return self._settings

    @property
    def problem(self) -> QpProblem | None:
        return self._problem

    @property
    def is_live(self) -> bool:
        return self._work is not None

    # -------------------------------------------------------------- lifecycle
    def setup(self, problem: QpProblem):
        if self._work is not None:
            raise RuntimeError("setup() on a live session; call teardown() first")

        # OSQP reads the upper triangle of P only.
        P = sp.triu(problem.P.to_scipy(), format="csc")
        A = problem.A.to_scipy()

        work = self._solver_factory()
        work.setup(
            P=P,
            q=np.asarray(problem.q, dtype=float),
            A=A,
            l=np.asarray(problem.l, dtype=float),
            u=np.asarray(problem.u, dtype=float),
            **self._settings.as_kwargs(),
        )

        # Warm start only if the previous iterate fits the new shape.
        if (
            self._settings.warm_start
            and self._x_prev is not None
            and self._x_prev.shape == (problem.n,)
            and self._y_prev is not None
            and self._y_prev.shape == (problem.m,)
        ):
            work.warm_start(x=self._x_prev, y=self._y_prev)
            logger.debug("warm start with previous solution (n=%d, m=%d)", problem.n, problem.m)

        self._problem = problem
        self._P = P
        self._A = A
        self._work = work

    def solve(self) -> SolveOutcome:
        if self._work is None:
            raise RuntimeError("solve() without setup()")

        # failures are reported through the status, never raised
        res = self._work.solve(raise_error=False)
        status = SolverStatus.from_osqp(res.info.status)
        iterations = int(res.info.iter)

        x = None
        y = None
        if status.usable and res.x is not None:
            x = np.asarray(res.x, dtype=float).reshape(-1)
            y = None if res.y is None else np.asarray(res.y, dtype=float).reshape(-1)
            if not np.all(np.isfinite(x)):
                x = None

        outcome = SolveOutcome(status=status, x=x, y=y, iterations=iterations)
        self.last_outcome = outcome

        if outcome.ok:
            self._x_prev = x.copy()
            self._y_prev = None if y is None else y.copy()
        logger.debug("osqp status: %s, iter: %d", res.info.status, iterations)
        return outcome

    def teardown(self):
        """Release the handle and its backing arrays. Safe to call repeatedly."""
        self._work = None
        self._problem = None
        self._P = None
        self._A = None

    @contextmanager
    def bound(self, problem: QpProblem):
        """setup(problem) for the duration of the block; teardown on every exit."""
        self.setup(problem)
        try:
            yield self
        finally:
            self.teardown()
