"""
Iterative Eigensolver Tests
===========================

Convergence of the single-vector and block solvers on diagonal test
problems with known spectra, preconditioner handling and diagnostics.

Run: python -m pytest tests/core/test_solvers.py -v
"""

import warnings

import numpy as np
import pytest

from eigen_core.builders import (
    build_power_test_matrix,
    build_shift_invert_example,
    build_block_test_matrix,
)
from eigen_core.solvers import (
    EigenResult,
    ortho_qr,
    power_method,
    shift_invert_operator,
    inverse_power_method,
    rayleigh_quotient_iteration,
    preconditioned_gradient_descent,
    lopcg,
    subspace_iteration,
    projected_subspace_iteration,
    lobpcg,
    reference_lobpcg,
)


@pytest.fixture(scope='module')
def block_problem():
    A = build_block_test_matrix(100, log_gaps=(-1.0, -0.5))
    return A, np.sort(np.diag(A))[:3]


# =============================================================================
# S1: SINGLE VECTOR
# =============================================================================

def test_power_method_dominant():
    """S1.1: Power method finds the largest eigenvalue 30 + δ."""
    A = build_power_test_matrix(1.0)
    res = power_method(A, tol=1e-8)
    assert res.converged
    assert abs(res.eigenvalues - 40.0) < 1e-6
    assert len(res.eigenvalue_history) == len(res.residual_history) == res.n_iter


def test_power_method_stagnates_for_small_gap():
    """S1.2: δ = 0.1 gives rate ≈ 0.993: not converged in 100 steps, warned when verbose."""
    A = build_power_test_matrix(-1.0)
    with pytest.warns(RuntimeWarning, match="not converged"):
        res = power_method(A, maxiter=100, verbose=True)
    assert not res.converged
    assert res.n_iter == 100


def test_silent_without_verbose():
    """S1.3: No warning is emitted unless verbose."""
    A = build_power_test_matrix(-1.0)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        res = power_method(A, maxiter=5)
    assert not res.converged


def test_verbose_prints_progress(capsys):
    """S1.4: One progress line per iteration."""
    power_method(build_power_test_matrix(1.0), maxiter=3, tol=0.0, verbose=False)
    with pytest.warns(RuntimeWarning):
        power_method(build_power_test_matrix(1.0), maxiter=3, tol=0.0, verbose=True)
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 3
    assert lines[0].split()[0] == "1"


def test_shift_invert_operator_solves():
    """S1.5: (A - σI)⁻¹ v through the LU factorisation."""
    A = build_shift_invert_example()
    op = shift_invert_operator(A, 0.3)
    v = np.array([1.0, -2.0, 0.5])
    np.testing.assert_allclose(op @ v, np.linalg.solve(A - 0.3 * np.eye(3), v))
    V = np.eye(3)
    np.testing.assert_allclose(op @ V, np.linalg.inv(A - 0.3 * np.eye(3)))


def test_inverse_iteration_closest_to_shift():
    """S1.6: Inverse iteration around 0.4 finds the middle eigenvalue (1.6 - sqrt(0.52))/2."""
    A = build_shift_invert_example()
    res = inverse_power_method(A, sigma=0.4, tol=1e-10)
    assert res.converged
    assert abs(res.eigenvalues - (1.6 - np.sqrt(0.52)) / 2) < 1e-8
    assert abs(res.eigenvalue_history[-1] - res.eigenvalues) < 1e-8


def test_inverse_iteration_diagonal():
    """S1.7: Shift 19 on diag(1, 20, 40) selects 20."""
    res = inverse_power_method(build_power_test_matrix(1.0), sigma=19.0, tol=1e-10)
    assert abs(res.eigenvalues - 20.0) < 1e-8


def test_rqi_converges_fast():
    """S1.8: RQI from a perturbed eigenvector converges in a handful of steps."""
    rng = np.random.default_rng(3)
    B = rng.standard_normal((10, 10))
    A = (B + B.T) / 2
    lam, U = np.linalg.eigh(A)
    x0 = U[:, 3] + 0.01 * rng.standard_normal(10)
    res = rayleigh_quotient_iteration(A, x0, tol=1e-10)
    assert res.converged
    assert res.n_iter <= 10
    assert abs(res.eigenvalues - lam[3]) < 1e-8


def test_non_square_raises():
    """S1.9: Operators must be square."""
    with pytest.raises(ValueError, match="square"):
        power_method(np.ones((2, 3)))


# =============================================================================
# S2: GRADIENT METHODS AND PRECONDITIONERS
# =============================================================================

def test_pgd_with_diagonal_preconditioner():
    """S2.1: PGD with P⁻¹ = diag(A)⁻¹ converges to the smallest eigenvalue."""
    A = build_block_test_matrix(50, log_gaps=(0.0,))
    res = preconditioned_gradient_descent(A, Pinv=1.0 / np.diag(A), tol=1e-8, maxiter=200)
    assert res.converged
    assert abs(res.eigenvalues - 1.0) < 1e-8


def test_preconditioner_forms_agree():
    """S2.2: Vector, matrix and callable preconditioners give identical iterates."""
    A = build_block_test_matrix(30, log_gaps=(0.0,))
    d = 1.0 / np.diag(A)
    runs = [
        preconditioned_gradient_descent(A, Pinv=P, maxiter=10, tol=0.0)
        for P in (d, np.diag(d), lambda r: d * r)
    ]
    for res in runs[1:]:
        np.testing.assert_allclose(res.residual_history, runs[0].residual_history)


def test_lopcg_smallest(block_problem):
    """S2.3: LOPCG finds the lowest eigenvalue."""
    A, lowest = block_problem
    res = lopcg(A, Pinv=1.0 / np.diag(A), tol=1e-8, maxiter=300)
    assert res.converged
    assert abs(res.eigenvalues - lowest[0]) < 1e-8


def test_lopcg_beats_pgd(block_problem):
    """S2.4: The locally optimal step needs fewer iterations than fixed-step PGD."""
    A, _ = block_problem
    Pinv = 1.0 / np.diag(A)
    res_pgd = preconditioned_gradient_descent(A, Pinv=Pinv, tol=1e-6, maxiter=500)
    res_lopcg = lopcg(A, Pinv=Pinv, tol=1e-6, maxiter=500)
    assert res_lopcg.n_iter <= res_pgd.n_iter


# =============================================================================
# S3: BLOCK METHODS
# =============================================================================

def test_ortho_qr_orthonormal():
    """S3.1: Columns are orthonormal and span the input."""
    V = np.random.default_rng(4).standard_normal((8, 3))
    Q = ortho_qr(V)
    np.testing.assert_allclose(Q.T @ Q, np.eye(3), atol=1e-14)
    np.testing.assert_allclose(Q @ (Q.T @ V), V, atol=1e-12)


def test_subspace_iterations():
    """S3.2: Both subspace iterations find the two dominant eigenvalues; Rayleigh-Ritz is faster."""
    A = np.diag([10.0, 9.0, 1.0, 0.5, 0.2, 0.1])
    plain = subspace_iteration(A, block_size=2, tol=1e-6, maxiter=500)
    projected = projected_subspace_iteration(A, block_size=2, tol=1e-6, maxiter=500)
    assert plain.converged and projected.converged
    np.testing.assert_allclose(np.sort(plain.eigenvalues), [9.0, 10.0], atol=1e-6)
    np.testing.assert_allclose(projected.eigenvalues, [9.0, 10.0], atol=1e-6)
    assert projected.n_iter < plain.n_iter
    assert plain.residual_norms.shape == (plain.n_iter, 2)


def test_lobpcg_block(block_problem):
    """S3.3: LOBPCG finds the three lowest eigenvalues."""
    A, lowest = block_problem
    res = lobpcg(A, block_size=3, Pinv=1.0 / np.diag(A), tol=1e-6, maxiter=200)
    assert res.converged
    np.testing.assert_allclose(res.eigenvalues, lowest, atol=1e-8)
    assert res.vectors.shape == (100, 3)


def test_reference_lobpcg_matches(block_problem):
    """S3.4: scipy's lobpcg wrapped in the same result type."""
    A, lowest = block_problem
    res = reference_lobpcg(A, block_size=3, Pinv=1.0 / np.diag(A), tol=1e-6, maxiter=200)
    assert isinstance(res, EigenResult)
    np.testing.assert_allclose(res.eigenvalues, lowest, atol=1e-8)
    assert res.n_iter >= 1


def test_block_start_must_be_2d():
    """S3.5: A 1D starting block is rejected."""
    with pytest.raises(ValueError, match="2D"):
        lobpcg(np.eye(4), X=np.ones(4))
