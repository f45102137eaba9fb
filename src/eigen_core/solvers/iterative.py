"""
Iterative Diagonalisation Algorithms
====================================

Textbook iterative eigensolvers, from single-vector iterations to blocked,
preconditioned subspace methods. All methods only need A through products
A @ x, so A may be a dense array, a sparse matrix or a
scipy.sparse.linalg.LinearOperator.

SINGLE VECTOR:
    power_method                     - dominant |λ|, rate |λ₂/λ₁|
    inverse_power_method             - power method on (A - σ)⁻¹
    rayleigh_quotient_iteration      - x ← (A - λI)⁻¹x, cubic for Hermitian A
    preconditioned_gradient_descent  - x ← x - α P⁻¹ r, smallest λ
    lopcg                            - Rayleigh-Ritz on span{x, p, P⁻¹r}

BLOCK:
    subspace_iteration               - block power method + QR
    projected_subspace_iteration     - + Rayleigh-Ritz step
    lobpcg                           - blocked lopcg
    reference_lobpcg                 - scipy.sparse.linalg.lobpcg, same result type

ORDERING CAVEAT:
    Power/subspace methods target the LARGEST-MAGNITUDE eigenvalues,
    gradient-type methods (PGD, LOPCG, LOBPCG) the SMALLEST (algebraic)
    eigenvalues of a Hermitian A. Do not mix the two when comparing.

All solvers stop once the residual norm ‖Ax - λx‖ drops below tol. They
never raise on non-convergence: converged=False is returned and, with
verbose=True, a RuntimeWarning is emitted. maxiter < 1 raises ValueError.

Oct 2026
"""

import warnings
import numpy as np
import scipy.linalg
from scipy.sparse.linalg import LinearOperator, aslinearoperator
from scipy.sparse.linalg import lobpcg as _scipy_lobpcg
from typing import Callable, Optional

from .result import EigenResult
from ..spec.constants import (
    DEFAULT_TOL,
    DEFAULT_MAXITER,
    DEFAULT_BLOCK_SIZE,
    DEFAULT_SEED,
    PROGRESS_FORMAT,
)


# =============================================================================
# HELPERS
# =============================================================================

def ortho_qr(V: np.ndarray) -> np.ndarray:
    """Orthonormal basis of the column span of V (thin QR)."""
    Q, _ = np.linalg.qr(V, mode='reduced')
    return Q


def _dimension(A) -> int:
    shape = A.shape
    if len(shape) != 2 or shape[0] != shape[1]:
        raise ValueError(f"Expected a square operator, got shape {shape}")
    return shape[1]


def _check_maxiter(maxiter: int) -> None:
    if maxiter < 1:
        raise ValueError(f"maxiter must be >= 1, got {maxiter}")


def _start_vector(A, x: Optional[np.ndarray]) -> np.ndarray:
    if x is not None:
        return np.array(x, dtype=np.result_type(x, A.dtype, float), copy=True)
    rng = np.random.default_rng(DEFAULT_SEED)
    return rng.standard_normal(_dimension(A)).astype(np.result_type(A.dtype, float))


def _start_block(A, X: Optional[np.ndarray], block_size: int) -> np.ndarray:
    if X is not None:
        X = np.array(X, dtype=np.result_type(X, A.dtype, float), copy=True)
        if X.ndim != 2:
            raise ValueError(f"Starting block must be 2D, got shape {X.shape}")
        return X
    rng = np.random.default_rng(DEFAULT_SEED)
    n = _dimension(A)
    return rng.standard_normal((n, block_size)).astype(np.result_type(A.dtype, float))


def _as_preconditioner(Pinv) -> Callable[[np.ndarray], np.ndarray]:
    """
    Turn a preconditioner spec into a callable applying P⁻¹.

    Accepts None (identity), a callable, a 1D array of diagonal entries of
    P⁻¹, or anything supporting `@` (dense/sparse matrix, LinearOperator).
    """
    if Pinv is None:
        return lambda r: r
    if callable(Pinv) and not isinstance(Pinv, (np.ndarray, LinearOperator)):
        return Pinv
    if isinstance(Pinv, np.ndarray) and Pinv.ndim == 1:
        diag = Pinv
        return lambda r: diag * r if r.ndim == 1 else diag[:, None] * r
    return lambda r: Pinv @ r


def _scalar(value):
    """Real scalar if the imaginary part is negligible."""
    value = np.real_if_close(value)
    return value.item() if np.ndim(value) == 0 else value


def _report(verbose: bool, i: int, lam, norm_r) -> None:
    if verbose:
        print(PROGRESS_FORMAT % (i, np.real(lam), norm_r))


def _warn_unconverged(verbose: bool, name: str, norm_r) -> None:
    if verbose:
        warnings.warn(
            f"{name} not converged (residual {np.max(norm_r):.3e}).",
            RuntimeWarning,
            stacklevel=3,
        )


# =============================================================================
# SINGLE VECTOR ITERATIONS
# =============================================================================

def power_method(A, x: Optional[np.ndarray] = None,
                 tol: float = DEFAULT_TOL, maxiter: int = DEFAULT_MAXITER,
                 verbose: bool = False) -> EigenResult:
    """
    Power method for the eigenvalue of largest magnitude.

    Each step: normalise x, λ = ⟨x, Ax⟩, r = Ax - λx, x ← Ax.

    Args:
        A: (n, n) operator supporting A @ x
        x: starting vector (default: seeded random)
        tol: residual norm tolerance
        maxiter: iteration cap
        verbose: print progress, warn when not converged

    Returns:
        EigenResult with scalar eigenvalue and (n,) vector
    """
    _check_maxiter(maxiter)
    x = _start_vector(A, x)
    eigenvalues = []
    residual_norms = []
    lam = np.nan

    for i in range(1, maxiter + 1):
        x = x / np.linalg.norm(x)
        Ax = A @ x
        lam = _scalar(np.vdot(x, Ax))
        norm_r = float(np.linalg.norm(Ax - lam * x))
        _report(verbose, i, lam, norm_r)
        eigenvalues.append(lam)
        residual_norms.append(norm_r)
        if norm_r < tol:
            break
        x = Ax

    converged = residual_norms[-1] < tol
    if not converged:
        _warn_unconverged(verbose, "Power method", residual_norms[-1])
    return EigenResult(lam, x, converged, eigenvalues, residual_norms)


def shift_invert_operator(A, sigma: complex = 0.0) -> LinearOperator:
    """
    Lazy (A - σI)⁻¹ as a LinearOperator.

    A - σI is LU-factorised once, each product is a pair of triangular solves.
    """
    A = np.asarray(A)
    n = _dimension(A)
    dtype = np.result_type(A.dtype, np.asarray(sigma).dtype, float)
    shifted = A.astype(dtype) - sigma * np.eye(n, dtype=dtype)
    lu_piv = scipy.linalg.lu_factor(shifted)

    def solve(v):
        return scipy.linalg.lu_solve(lu_piv, v)

    return LinearOperator((n, n), matvec=solve, matmat=solve, dtype=dtype)


def inverse_power_method(A, sigma: complex = 0.0, x: Optional[np.ndarray] = None,
                         tol: float = DEFAULT_TOL, maxiter: int = DEFAULT_MAXITER,
                         verbose: bool = False) -> EigenResult:
    """
    Power method on (A - σI)⁻¹: finds the eigenvalue of A closest to σ.

    The power method runs on the inverted operator, so the residual history
    refers to (A - σI)⁻¹. The returned eigenvalue is the Rayleigh quotient
    of the ORIGINAL A at the final vector; the eigenvalue history is mapped
    back through λ = σ + 1/μ.
    """
    inverted = shift_invert_operator(A, sigma)
    result = power_method(inverted, x=x, tol=tol, maxiter=maxiter, verbose=verbose)

    A = np.asarray(A)
    v = result.vectors / np.linalg.norm(result.vectors)
    result.eigenvalues = _scalar(np.vdot(v, A @ v))
    result.eigenvalue_history = [_scalar(sigma + 1.0 / mu) for mu in result.eigenvalue_history]
    return result


def rayleigh_quotient_iteration(A, x: Optional[np.ndarray] = None,
                                tol: float = DEFAULT_TOL, maxiter: int = DEFAULT_MAXITER,
                                verbose: bool = False) -> EigenResult:
    """
    Rayleigh quotient iteration: inverse iteration with the adaptive shift λ = R_A(x).

    Converges cubically for Hermitian A, but to whichever eigenpair the
    starting vector is closest to. A must be dense (a solve per step).
    """
    A = np.asarray(A)
    _check_maxiter(maxiter)
    x = _start_vector(A, x)
    n = _dimension(A)
    eigenvalues = []
    residual_norms = []
    lam = np.nan

    for i in range(1, maxiter + 1):
        x = x / np.linalg.norm(x)
        Ax = A @ x
        lam = _scalar(np.vdot(x, Ax))
        norm_r = float(np.linalg.norm(Ax - lam * x))
        _report(verbose, i, lam, norm_r)
        eigenvalues.append(lam)
        residual_norms.append(norm_r)
        if norm_r < tol:
            break
        # In the power method this was x = Ax
        x = np.linalg.solve(A - lam * np.eye(n), x)

    converged = residual_norms[-1] < tol
    if not converged:
        _warn_unconverged(verbose, "RQI", residual_norms[-1])
    return EigenResult(lam, x, converged, eigenvalues, residual_norms)


def preconditioned_gradient_descent(A, x: Optional[np.ndarray] = None,
                                    alpha: float = 1.0, Pinv=None,
                                    tol: float = DEFAULT_TOL,
                                    maxiter: int = DEFAULT_MAXITER,
                                    verbose: bool = False) -> EigenResult:
    """
    Preconditioned gradient descent on the Rayleigh quotient.

        x ← x - α P⁻¹ (Ax - R_A(x) x)

    Targets the smallest eigenvalue of a Hermitian A. With P⁻¹ = I and a
    spread spectrum the step size α must be tiny; a good P⁻¹ ≈ A⁻¹ fixes that.
    """
    apply_pinv = _as_preconditioner(Pinv)
    _check_maxiter(maxiter)
    x = _start_vector(A, x)
    eigenvalues = []
    residual_norms = []
    lam = np.nan

    for i in range(1, maxiter + 1):
        x = x / np.linalg.norm(x)
        Ax = A @ x
        lam = _scalar(np.vdot(x, Ax))   # Rayleigh quotient
        r = Ax - lam * x                # Residual
        norm_r = float(np.linalg.norm(r))
        _report(verbose, i, lam, norm_r)
        eigenvalues.append(lam)
        residual_norms.append(norm_r)
        if norm_r < tol:
            break
        x = x - alpha * apply_pinv(r)

    converged = residual_norms[-1] < tol
    if not converged:
        _warn_unconverged(verbose, "PGD", residual_norms[-1])
    return EigenResult(lam, x, converged, eigenvalues, residual_norms)


def lopcg(A, x: Optional[np.ndarray] = None, Pinv=None,
          ortho: Callable = ortho_qr, tol: float = DEFAULT_TOL,
          maxiter: int = DEFAULT_MAXITER, verbose: bool = False) -> EigenResult:
    """
    Locally optimal preconditioned conjugate gradient (single vector).

    Each step performs Rayleigh-Ritz on Z = span{x, p, P⁻¹r}, where
    p = x_prev - x_new is the previous search direction, and keeps the
    lowest Ritz pair. Optimal step sizes come for free from the projection.
    """
    apply_pinv = _as_preconditioner(Pinv)
    _check_maxiter(maxiter)
    x = _start_vector(A, x)
    eigenvalues = []
    residual_norms = []
    lam = np.nan
    p = None
    r = None

    for i in range(1, maxiter + 1):
        if i > 1:
            Z = np.column_stack([x, p, r])
        else:
            Z = x[:, None]
        Z = ortho(Z)

        # Rayleigh-Ritz step, keep only the smallest pair
        AZ = A @ Z
        theta, Y = np.linalg.eigh(Z.conj().T @ AZ)
        lam = float(theta[0])
        y = Y[:, 0]
        new_x = Z @ y

        eigenvalues.append(lam)
        r = AZ @ y - lam * new_x
        norm_r = float(np.linalg.norm(r))
        residual_norms.append(norm_r)
        _report(verbose, i, lam, norm_r)
        if norm_r < tol:
            x = new_x
            break

        r = apply_pinv(r)
        p = x - new_x
        x = new_x

    converged = residual_norms[-1] < tol
    if not converged:
        _warn_unconverged(verbose, "LOPCG", residual_norms[-1])
    return EigenResult(lam, x, converged, eigenvalues, residual_norms)


# =============================================================================
# BLOCK (SUBSPACE) ITERATIONS
# =============================================================================

def subspace_iteration(A, X: Optional[np.ndarray] = None,
                       block_size: int = DEFAULT_BLOCK_SIZE,
                       ortho: Callable = ortho_qr, tol: float = DEFAULT_TOL,
                       maxiter: int = DEFAULT_MAXITER,
                       verbose: bool = False) -> EigenResult:
    """
    Subspace (block power) iteration for the largest-magnitude eigenvalues.

    Columns are orthonormalised each step; eigenvalue estimates are the
    per-column Rayleigh quotients diag(Vᴴ A V). Convergence of column j
    goes like |λ_{m+1}/λ_j|, so the block converges from the top down.
    """
    _check_maxiter(maxiter)
    V = _start_block(A, X, block_size)
    eigenvalues = []
    residual_norms = []
    lam = np.full(V.shape[1], np.nan)

    for i in range(1, maxiter + 1):
        V = ortho(V)
        AV = A @ V
        lam = np.real_if_close(np.einsum('ij,ij->j', V.conj(), AV))
        R = AV - V * lam[None, :]
        norm_r = np.linalg.norm(R, axis=0)
        eigenvalues.append(lam)
        residual_norms.append(norm_r)
        _report(verbose, i, lam[-1], norm_r[-1])
        if np.max(norm_r) < tol:
            break
        V = AV

    converged = bool(np.max(residual_norms[-1]) < tol)
    if not converged:
        _warn_unconverged(verbose, "Subspace iteration", residual_norms[-1])
    return EigenResult(lam, V, converged, eigenvalues, residual_norms)


def projected_subspace_iteration(A, X: Optional[np.ndarray] = None,
                                 block_size: int = DEFAULT_BLOCK_SIZE,
                                 ortho: Callable = ortho_qr, tol: float = DEFAULT_TOL,
                                 maxiter: int = DEFAULT_MAXITER,
                                 verbose: bool = False) -> EigenResult:
    """
    Subspace iteration with a Rayleigh-Ritz step.

    Instead of per-column Rayleigh quotients, the projected matrix VᴴAV is
    diagonalised and the Ritz vectors X = VY used for the residuals. This
    removes the mixing between columns and speeds up the inner pairs.
    Ritz values are returned in ascending order (eigh convention).
    """
    _check_maxiter(maxiter)
    V = _start_block(A, X, block_size)
    eigenvalues = []
    residual_norms = []
    lam = np.full(V.shape[1], np.nan)
    ritz_vectors = V

    for i in range(1, maxiter + 1):
        V = ortho(V)
        AV = A @ V
        lam, Y = np.linalg.eigh(V.conj().T @ AV)   # Rayleigh-Ritz step
        ritz_vectors = V @ Y
        R = AV @ Y - ritz_vectors * lam[None, :]
        norm_r = np.linalg.norm(R, axis=0)
        eigenvalues.append(lam)
        residual_norms.append(norm_r)
        _report(verbose, i, lam[-1], norm_r[-1])
        if np.max(norm_r) < tol:
            break
        V = AV

    converged = bool(np.max(residual_norms[-1]) < tol)
    if not converged:
        _warn_unconverged(verbose, "Projected subspace iteration", residual_norms[-1])
    return EigenResult(lam, ritz_vectors, converged, eigenvalues, residual_norms)


def lobpcg(A, X: Optional[np.ndarray] = None, block_size: int = DEFAULT_BLOCK_SIZE,
           Pinv=None, ortho: Callable = ortho_qr, tol: float = DEFAULT_TOL,
           maxiter: int = DEFAULT_MAXITER, verbose: bool = False) -> EigenResult:
    """
    Locally optimal block preconditioned conjugate gradient.

    Block version of lopcg: Rayleigh-Ritz on span{X, P, P⁻¹R}, keeping the
    m = X.shape[1] lowest Ritz pairs of a Hermitian A.

    This plain version orthogonalises with a single QR and is less robust
    than production implementations near convergence; see reference_lobpcg.
    """
    apply_pinv = _as_preconditioner(Pinv)
    _check_maxiter(maxiter)
    X = _start_block(A, X, block_size)
    m = X.shape[1]
    eigenvalues = []
    residual_norms = []
    lam = np.full(m, np.nan)
    P = None
    R = None

    for i in range(1, maxiter + 1):
        if i > 1:
            Z = np.hstack([X, P, R])
        else:
            Z = X
        Z = ortho(Z)

        # Rayleigh-Ritz step to get the smallest eigenvalues
        AZ = A @ Z
        theta, Y = np.linalg.eigh(Z.conj().T @ AZ)
        lam = theta[:m]
        Y = Y[:, :m]
        new_X = Z @ Y

        eigenvalues.append(lam)
        R = AZ @ Y - new_X * lam[None, :]
        norm_r = np.linalg.norm(R, axis=0)
        residual_norms.append(norm_r)
        _report(verbose, i, lam[-1], norm_r[-1])
        if np.max(norm_r) < tol:
            X = new_X
            break

        R = apply_pinv(R)
        P = X - new_X
        X = new_X

    converged = bool(np.max(residual_norms[-1]) < tol)
    if not converged:
        _warn_unconverged(verbose, "LOBPCG", residual_norms[-1])
    return EigenResult(lam, X, converged, eigenvalues, residual_norms)


def reference_lobpcg(A, X: Optional[np.ndarray] = None,
                     block_size: int = DEFAULT_BLOCK_SIZE, Pinv=None,
                     tol: float = DEFAULT_TOL, maxiter: int = DEFAULT_MAXITER,
                     verbose: bool = False) -> EigenResult:
    """
    scipy.sparse.linalg.lobpcg wrapped into an EigenResult.

    Pinv plays the role of scipy's M (an approximation of A⁻¹). Convergence
    is decided from the final residuals recomputed here, not from scipy's
    internal flag.
    """
    _check_maxiter(maxiter)
    X = _start_block(A, X, block_size)
    n = _dimension(A)
    M = None
    if Pinv is not None:
        apply_pinv = _as_preconditioner(Pinv)
        M = LinearOperator((n, n), matvec=apply_pinv, matmat=apply_pinv,
                           dtype=np.result_type(X.dtype, float))

    lam, V, lambda_history, residual_history = _scipy_lobpcg(
        aslinearoperator(A), X, M=M, tol=tol, maxiter=maxiter, largest=False,
        verbosityLevel=1 if verbose else 0,
        retLambdaHistory=True, retResidualNormsHistory=True,
    )
    order = np.argsort(lam)
    lam = np.asarray(lam)[order]
    V = V[:, order]

    R = A @ V - V * lam[None, :]
    norm_r = np.linalg.norm(R, axis=0)
    converged = bool(np.max(norm_r) < tol)
    if not converged:
        _warn_unconverged(verbose, "reference LOBPCG", norm_r)

    eigenvalues = [np.sort(np.asarray(l)) for l in lambda_history]
    residuals = [np.asarray(r) for r in residual_history]
    return EigenResult(lam, V, converged, eigenvalues, residuals)
