# scripts/test_constraint_merge.py
from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from smoothing_spline.solver.constraint_merge import (
    EQUALITY_EPSILON,
    UPPER_LIMIT,
    merge_constraints,
)


def test_stacking_and_bounds():
    A_in = np.array([[1.0, 0.0, 0.0],
                     [0.0, -1.0, 2.0]])
    b_in = np.array([[0.5], [-3.0]])  # (m,1) column like the constraint builders
    A_eq = np.array([[0.0, 1.0, 1.0]])
    b_eq = np.array([1.0])

    A, l, u = merge_constraints(A_in, b_in, A_eq, b_eq)

    assert A.shape == (3, 3)
    np.testing.assert_array_equal(A[:2], A_in)
    np.testing.assert_array_equal(A[2:], A_eq)

    np.testing.assert_array_equal(l[:2], [0.5, -3.0])
    np.testing.assert_array_equal(u[:2], [UPPER_LIMIT, UPPER_LIMIT])
    assert l[2] == pytest.approx(1.0 - EQUALITY_EPSILON, abs=0.0)
    assert u[2] == pytest.approx(1.0 + EQUALITY_EPSILON, abs=0.0)
    assert np.all(l <= u)


def test_random_rows_keep_l_below_u():
    rng = np.random.default_rng(11)
    n = 6
    A_in = rng.standard_normal((9, n))
    b_in = 10.0 * rng.standard_normal(9)
    A_eq = rng.standard_normal((4, n))
    b_eq = 10.0 * rng.standard_normal(4)

    A, l, u = merge_constraints(A_in, b_in, A_eq, b_eq)

    assert A.shape == (13, n)
    assert l.shape == u.shape == (13,)
    assert np.all(l <= u)
    assert np.all(np.abs(l[9:] - b_eq) <= EQUALITY_EPSILON * (1 + 1e-6))
    assert np.all(np.abs(u[9:] - b_eq) <= EQUALITY_EPSILON * (1 + 1e-6))


def test_empty_families():
    n = 2
    A, l, u = merge_constraints(np.zeros((0, n)), np.zeros(0), np.array([[1.0, 1.0]]), [2.0])
    assert A.shape == (1, n)
    A, l, u = merge_constraints(np.zeros((0, n)), np.zeros(0), np.zeros((0, n)), np.zeros(0))
    assert A.shape == (0, n) and l.shape == (0,) and u.shape == (0,)


def test_column_mismatch_raises():
    with pytest.raises(ValueError):
        merge_constraints(np.ones((1, 2)), [0.0], np.ones((1, 3)), [0.0])


def test_malformed_boundary_raises():
    with pytest.raises(ValueError):
        merge_constraints(np.ones((2, 2)), [0.0], np.ones((1, 2)), [0.0])
    with pytest.raises(ValueError):
        merge_constraints(np.ones((1, 2)), [0.0], np.ones((1, 2)), [0.0, 1.0])


def main():
    test_stacking_and_bounds()
    test_random_rows_keep_l_below_u()
    test_empty_families()
    test_column_mismatch_raises()
    test_malformed_boundary_raises()
    print("OK: constraint merge verified.")


if __name__ == "__main__":
    main()
