# scripts/test_smoothing_rollout.py
from __future__ import annotations

import sys
import tempfile
from pathlib import Path

import numpy as np
import matplotlib

matplotlib.use("Agg")

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from smoothing_spline.sim.smoothing_rollout import rollout_smoothing
from smoothing_spline.solver.osqp_spline_1d_solver import OsqpSpline1dSolver
from smoothing_spline.viz.plot_solve_history import plot_solve_history


def drifting_reference(k, x):
    return np.sin(x + 0.02 * k)


def run_rollout(n_cycles=5):
    x_knots = np.linspace(0.0, 5.0, 6)
    x_coord = np.linspace(0.0, 5.0, 51)
    solver = OsqpSpline1dSolver(x_knots, 5)
    return rollout_smoothing(
        solver,
        drifting_reference,
        n_cycles=n_cycles,
        x_coord=x_coord,
        lower=-1.2,
        upper=1.2,
    )


def test_rollout_logs():
    n = 5
    logs = run_rollout(n)

    assert logs["ok"].shape == (n,)
    assert np.all(logs["ok"])
    assert len(logs["status"]) == n
    assert all(s in ("solved", "solved inaccurate") for s in logs["status"])
    assert np.all(logs["iter"] > 0)
    assert np.all(logs["num_param"] == 30)
    # 1 start point + 4 interior knots * 3 + 51 lower + 51 upper
    assert np.all(logs["num_constraint"] == 1 + 12 + 102)
    assert np.all(logs["fit_rmse"] < 0.05)


def test_skipped_cycle_logs_zero_sizes():
    def reference(k, x):
        # cycle 1 gets a broken sensor frame
        if k == 1:
            return np.full_like(x, np.nan)
        return drifting_reference(k, x)

    x_knots = np.linspace(0.0, 5.0, 6)
    x_coord = np.linspace(0.0, 5.0, 51)
    solver = OsqpSpline1dSolver(x_knots, 5)
    logs = rollout_smoothing(solver, reference, n_cycles=3, x_coord=x_coord, lower=-1.2, upper=1.2)

    assert list(logs["ok"]) == [True, False, True]
    assert logs["status"][1] == "skipped"
    assert logs["iter"][1] == 0
    assert logs["num_param"][1] == 0 and logs["num_constraint"][1] == 0
    assert np.isnan(logs["fit_rmse"][1])
    assert logs["num_param"][0] == logs["num_param"][2] == 30


def test_plot_solve_history():
    logs = run_rollout(3)
    with tempfile.TemporaryDirectory() as d:
        out = Path(d) / "plots" / "solve_history.png"
        plot_solve_history(logs, str(out))
        assert out.exists() and out.stat().st_size > 0


def main():
    test_rollout_logs()
    test_skipped_cycle_logs_zero_sizes()
    test_plot_solve_history()
    print("OK: smoothing rollout verified.")


if __name__ == "__main__":
    main()
