import numpy as np

from smoothing_spline.models.spline_basis import basis_row


def stacked_params(spline) -> np.ndarray:
    segs = spline.splines()
    if not segs:
        return np.zeros(0)
    return np.concatenate([s.coefficients for s in segs])


def rollout_smoothing(solver,
                      reference_fn,
                      n_cycles: int,
                      x_coord: np.ndarray,
                      lower: float | None = None,
                      upper: float | None = None,
                      w_ref: float = 1.0,
                      w_dddx: float = 1e-3,
                      reg: float = 1e-6,
                      smooth_derivative: int = 2):
    """
    Planning loop: every cycle rebuilds the kernel/constraints from a fresh
    reference and calls solver.solve() once on the same solver (warm start
    carries over between cycles).

    reference_fn(k, x_coord) -> (len(x_coord),) reference values for cycle k.
    """
    x_coord = np.asarray(x_coord, dtype=float).reshape(-1)
    B = np.array([basis_row(solver.x_knots, solver.order, x) for x in x_coord])

    logs = {
        "cycle": np.arange(n_cycles),
        "ok": np.zeros(n_cycles, dtype=bool),
        "iter": np.zeros(n_cycles, dtype=int),
        "status": [],
        "num_param": np.zeros(n_cycles, dtype=int),
        "num_constraint": np.zeros(n_cycles, dtype=int),
        "fit_rmse": np.full(n_cycles, np.nan),
    }

    for k in range(n_cycles):
        ref = np.asarray(reference_fn(k, x_coord), dtype=float).reshape(-1)

        solver.reset_problem()
        solver.kernel.add_reference_line_kernel_matrix(x_coord, ref, w_ref)
        solver.kernel.add_derivative_kernel_matrix(3, w_dddx)
        solver.kernel.add_regularization(reg)

        solver.constraint.add_point_fx_constraint(x_coord[0], ref[0])
        solver.constraint.add_smooth_constraint(smooth_derivative)
        if lower is not None or upper is not None:
            solver.constraint.add_fx_boundary(x_coord, lower, upper)

        ok = solver.solve()
        outcome = solver.last_outcome

        logs["ok"][k] = ok
        logs["status"].append("skipped" if outcome is None else outcome.status.value)
        logs["iter"][k] = 0 if outcome is None else outcome.iterations
        # sizes of a skipped or failed cycle stay 0, not the last committed ones
        if ok:
            logs["num_param"][k] = solver.last_num_param
            logs["num_constraint"][k] = solver.last_num_constraint
        if ok:
            fit = B @ stacked_params(solver.spline)
            logs["fit_rmse"][k] = float(np.sqrt(np.mean((fit - ref) ** 2)))

    return logs
