import logging
import os
import sys
from pathlib import Path

import numpy as np

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from smoothing_spline.sim.smoothing_rollout import rollout_smoothing
from smoothing_spline.solver.osqp_session import OsqpSettings
from smoothing_spline.solver.osqp_spline_1d_solver import OsqpSpline1dSolver
from smoothing_spline.viz.plot_solve_history import plot_solve_history

def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # ---------- params ----------
    n_cycles = 40
    order = 5
    x_knots = np.linspace(0.0, 20.0, 11)     # 10 segments, 60 params
    x_coord = np.linspace(0.0, 20.0, 201)

    # lateral bounds [m]
    lower = -0.6
    upper = 0.6

    rng = np.random.default_rng(0)
    noise = 0.02 * rng.standard_normal((n_cycles, x_coord.shape[0]))

    def reference(k, x):
        # slowly sliding obstacle bump plus sensor noise
        bump = 0.8 * np.exp(-0.5 * ((x - 6.0 - 0.1 * k) / 1.5) ** 2)
        return bump + noise[k]

    solver = OsqpSpline1dSolver(x_knots, order, settings=OsqpSettings())

    with solver:
        logs = rollout_smoothing(
            solver,
            reference,
            n_cycles=n_cycles,
            x_coord=x_coord,
            lower=lower,
            upper=upper,
            w_ref=1.0,
            w_dddx=1e-2,
        )

    os.makedirs("results/plots", exist_ok=True)
    plot_solve_history(logs, "results/plots/solve_history.png")

    print("Done.")
    print("ok cycles:", int(logs["ok"].sum()), "/", n_cycles)
    print("iterations: first", logs["iter"][0], "mean of rest", logs["iter"][1:].mean())

if __name__ == "__main__":
    main()
