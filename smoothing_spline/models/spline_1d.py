import numpy as np
from dataclasses import dataclass

from smoothing_spline.models.spline_basis import num_spline_params


@dataclass
class Spline1dSeg:
    coefficients: np.ndarray  # ascending: a0 + a1 t + ... + a_order t^order


class Spline1d:
    def __init__(self, x_knots, order: int):
        self._x_knots = np.asarray(x_knots, dtype=float).reshape(-1)
        if np.any(np.diff(self._x_knots) <= 0.0):
            raise ValueError("x_knots must be strictly increasing")
        self._spline_order = int(order)
        if self._spline_order < 0:
            raise ValueError("order must be non-negative")
        self._splines = []

    def x_knots(self) -> np.ndarray:
        return self._x_knots.copy()

    def spline_order(self) -> int:
        return self._spline_order

    def splines(self) -> list:
        return list(self._splines)

    @property
    def num_params(self) -> int:
        return num_spline_params(self._x_knots, self._spline_order)

    def set_spline_segs(self, params: np.ndarray, order: int) -> bool:
        """
        Replace every segment from a stacked parameter column
            params = [seg0 coeffs; seg1 coeffs; ...]   shape (num_params,) or (num_params,1)
        Returns False (segments untouched) on a size mismatch.
        """
        params = np.asarray(params, dtype=float).reshape(-1)
        k = int(order) + 1
        num_segs = self._x_knots.shape[0] - 1
        if num_segs <= 0 or params.shape[0] != k * num_segs:
            return False
        if not np.all(np.isfinite(params)):
            return False

        segs = [Spline1dSeg(params[i * k:(i + 1) * k].copy()) for i in range(num_segs)]
        self._splines = segs
        return True
