r"""
Residual-Based Error Bounds
===========================

A posteriori bounds relating the computable residual r = Aṽ - λ̃ṽ of an
approximate eigenpair (λ̃, ṽ), ‖ṽ‖ = 1, to the unknown error against the
exact spectrum of a Hermitian matrix A.

BOUNDS:

    Bauer-Fike        min_i |λ_i - λ̃| ≤ ‖r‖

    Kato-Temple       r²/(a - λ̃) ≤ λ̃ - λ ≤ r²/(b - λ̃)
                      for (a, b) ∋ λ̃ containing only the eigenvalue λ

    Symmetric K-T     |λ̃ - λ| ≤ ‖r‖²/δ,   δ = distance of λ̃ to σ(A)\{λ}

    Eigenvector       sin θ(ṽ, v) ≤ ‖r‖/δ

GAP ESTIMATION:
    δ needs exact eigenvalues. The naive neighbour estimate
        δ_est = min(|λ̃_i - λ̃_{i-1}|, |λ̃_i - λ̃_{i+1}|)
    can OVERESTIMATE δ, which silently turns K-T into a non-bound.
    Subtracting the neighbours' Bauer-Fike radii gives a guaranteed lower
    bound:
        |λ̃_i - λ_{i+1}| ≥ |λ̃_i - λ̃_{i+1}| - ‖r_{i+1}‖
    which may be negative for clustered eigenvalues → clipped to 0, and the
    K-T bound becomes +inf (no information).

Oct 2026
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .gerschgorin import gerschgorin_discs, _as_square
from ..spec.constants import EPS_ZERO


# =============================================================================
# RESIDUALS
# =============================================================================

def rayleigh_quotient(A, v: np.ndarray) -> float:
    """R_A(v) = ⟨v, Av⟩ / ⟨v, v⟩ (real part for Hermitian A)."""
    v = np.asarray(v)
    Av = np.asarray(A) @ v
    value = np.vdot(v, Av) / np.vdot(v, v)
    if abs(np.imag(value)) <= EPS_ZERO * max(1.0, abs(value)):
        return float(np.real(value))
    return complex(value)


def residual(A, lam, v: np.ndarray) -> np.ndarray:
    """r = Av - λv."""
    v = np.asarray(v)
    return np.asarray(A) @ v - lam * v


def residual_norm(A, lam, v: np.ndarray) -> float:
    """‖Av - λv‖₂ for the normalised vector v/‖v‖."""
    v = np.asarray(v)
    norm_v = np.linalg.norm(v)
    if norm_v < EPS_ZERO:
        raise ValueError("Approximate eigenvector must be non-zero")
    return float(np.linalg.norm(residual(A, lam, v / norm_v)))


# =============================================================================
# BOUNDS
# =============================================================================

def bauer_fike_bound(A, lam, v: np.ndarray) -> float:
    """
    Bauer-Fike radius for Hermitian A.

    There is an eigenvalue λ of A with |λ - λ̃| ≤ ‖Aṽ - λ̃ṽ‖₂ (ṽ normalised).
    """
    return residual_norm(A, lam, v)


def kato_temple_interval(lam: float, r_norm: float,
                         a: float, b: float) -> Tuple[float, float]:
    """
    Kato-Temple enclosure of the error λ̃ - λ.

    Requires λ̃ = R_A(ṽ) (Rayleigh quotient) and that λ is the only
    eigenvalue in (a, b).

    Args:
        lam: approximate eigenvalue λ̃ (Rayleigh quotient)
        r_norm: residual norm ‖r‖₂
        a, b: isolating interval with a < λ̃ < b

    Returns:
        (lower, upper) with lower ≤ λ̃ - λ ≤ upper; lower ≤ 0 ≤ upper
    """
    if not (a < lam < b):
        raise ValueError(f"Kato-Temple requires a < λ̃ < b, got a={a}, λ̃={lam}, b={b}")
    r_sq = r_norm ** 2
    return r_sq / (a - lam), r_sq / (b - lam)


def kato_temple_bound(r_norm, gap):
    """
    Symmetric Kato-Temple bound |λ̃ - λ| ≤ ‖r‖²/δ.

    Vectorised over r_norm and gap. A non-positive gap gives +inf.
    """
    r_norm = np.asarray(r_norm, dtype=float)
    gap = np.asarray(gap, dtype=float)
    with np.errstate(divide='ignore', invalid='ignore'):
        bound = np.where(gap > 0, r_norm ** 2 / np.where(gap > 0, gap, 1.0), np.inf)
    return bound[()] if bound.ndim == 0 else bound


def eigenvector_angle_bound(r_norm, gap):
    """sin θ(ṽ, v) ≤ ‖r‖/δ, clipped at 1 (and 1 when δ ≤ 0)."""
    r_norm = np.asarray(r_norm, dtype=float)
    gap = np.asarray(gap, dtype=float)
    with np.errstate(divide='ignore', invalid='ignore'):
        bound = np.where(gap > 0, r_norm / np.where(gap > 0, gap, 1.0), 1.0)
    bound = np.minimum(bound, 1.0)
    return bound[()] if bound.ndim == 0 else bound


# =============================================================================
# GAP ESTIMATES
# =============================================================================

def naive_gap_estimates(eigenvalues: np.ndarray) -> np.ndarray:
    """
    Distance of each λ̃_i to its nearest computed neighbour.

    NOT a guaranteed lower bound to the true gap. Use gap_lower_bounds.
    """
    return gap_lower_bounds(eigenvalues, np.zeros(len(eigenvalues)), clip=False)


def gap_lower_bounds(eigenvalues: np.ndarray, residual_norms: np.ndarray,
                     clip: bool = True) -> np.ndarray:
    """
    Guaranteed lower bounds for the gap δ_i of each approximate eigenvalue.

        δ_i ≥ min(|λ̃_i - λ̃_{i-1}| - ‖r_{i-1}‖, |λ̃_i - λ̃_{i+1}| - ‖r_{i+1}‖)

    Neighbours refer to the ascending order of eigenvalues. Missing
    neighbours (ends of the spectrum) contribute +inf. Results are returned
    in the input order.

    Assumes no eigenpair was lost, i.e. λ̃_i approximates λ_i for all i.

    Args:
        eigenvalues: (n,) approximate eigenvalues (real)
        residual_norms: (n,) residual norms of the corresponding pairs
        clip: clip negative estimates to 0

    Returns:
        gaps: (n,) lower bounds on δ_i
    """
    lam = np.real(np.asarray(eigenvalues, dtype=complex))
    res = np.asarray(residual_norms, dtype=float)
    if lam.shape != res.shape:
        raise ValueError(f"Shape mismatch: {lam.shape} eigenvalues vs {res.shape} residuals")

    order = np.argsort(lam, kind="stable")
    lam_s = lam[order]
    res_s = res[order]
    n = len(lam_s)

    gaps_s = np.full(n, np.inf)
    for i in range(n):
        delta_left = delta_right = np.inf
        if i > 0:
            delta_left = abs(lam_s[i] - lam_s[i - 1]) - res_s[i - 1]
        if i < n - 1:
            delta_right = abs(lam_s[i] - lam_s[i + 1]) - res_s[i + 1]
        gaps_s[i] = min(delta_left, delta_right)

    if clip:
        gaps_s = np.maximum(0.0, gaps_s)

    gaps = np.empty(n)
    gaps[order] = gaps_s
    return gaps


# =============================================================================
# SHOWCASE: ALL BOUNDS AT ONCE
# =============================================================================

@dataclass
class ErrorBounds:
    """Per-eigenpair error bounds for a set of approximate eigenpairs."""
    eigenvalues: np.ndarray            # λ̃_i
    gerschgorin_centres: np.ndarray
    gerschgorin_radii: np.ndarray
    residual_norms: np.ndarray         # ‖r_i‖ = Bauer-Fike radii
    gaps: np.ndarray                   # guaranteed gap lower bounds
    kato_temple: np.ndarray            # ‖r_i‖²/δ_i
    angle: np.ndarray                  # sin θ_i bounds

    @property
    def bauer_fike(self) -> np.ndarray:
        return self.residual_norms

    def best(self) -> np.ndarray:
        """Tightest of the Bauer-Fike and Kato-Temple radii per pair."""
        return np.minimum(self.bauer_fike, self.kato_temple)


def compute_error_bounds(A, eigenvalues: Optional[np.ndarray] = None,
                         eigenvectors: Optional[np.ndarray] = None) -> ErrorBounds:
    """
    Compute Gerschgorin, Bauer-Fike and Kato-Temple bounds in one go.

    Defaults treat A as nearly diagonal: the diagonal entries are the
    approximate eigenvalues and the unit vectors the eigenvectors.

    Gap lower bounds need every eigenpair. For a partial set (m < n) the
    gaps are 0, so Kato-Temple is +inf and the angle bound 1; only
    Gerschgorin and Bauer-Fike carry information.

    Args:
        A: (n, n) Hermitian matrix
        eigenvalues: (m,) approximate eigenvalues (default: diag(A))
        eigenvectors: (n, m) approximate eigenvectors as columns
                      (default: identity)

    Returns:
        ErrorBounds
    """
    A = _as_square(A)
    n = A.shape[0]
    centres, radii = gerschgorin_discs(A)

    if eigenvalues is None:
        eigenvalues = np.real(np.diag(A)).astype(float)
    eigenvalues = np.asarray(eigenvalues)
    if eigenvectors is None:
        eigenvectors = np.eye(n)
    eigenvectors = np.asarray(eigenvectors)
    if eigenvectors.shape != (n, len(eigenvalues)):
        raise ValueError(
            f"eigenvectors must have shape ({n}, {len(eigenvalues)}), got {eigenvectors.shape}"
        )

    res = np.array([
        residual_norm(A, lam, eigenvectors[:, i]) for i, lam in enumerate(eigenvalues)
    ])
    if len(eigenvalues) < n:
        # Unsupplied eigenvalues may sit anywhere, so no gap is guaranteed
        gaps = np.zeros(len(eigenvalues))
    else:
        gaps = gap_lower_bounds(eigenvalues, res)

    return ErrorBounds(
        eigenvalues=eigenvalues,
        gerschgorin_centres=centres,
        gerschgorin_radii=radii,
        residual_norms=res,
        gaps=gaps,
        kato_temple=kato_temple_bound(res, gaps),
        angle=eigenvector_angle_bound(res, gaps),
    )


def check_bounds(bounds: ErrorBounds, exact: np.ndarray,
                 atol: float = 1e-12) -> Dict[str, np.ndarray]:
    """
    Verify the bounds against exact eigenvalues.

    Returns:
        dict of boolean arrays:
            'gerschgorin'  - each exact eigenvalue lies in the disc union
            'bauer_fike'   - each λ̃_i has an exact eigenvalue within ‖r_i‖
            'kato_temple'  - each λ̃_i has an exact eigenvalue within ‖r_i‖²/δ_i
    """
    exact = np.asarray(exact)
    lam = np.asarray(bounds.eigenvalues)

    in_discs = np.array([
        np.any(np.abs(e - bounds.gerschgorin_centres) <= bounds.gerschgorin_radii + atol)
        for e in exact
    ])
    dist = np.array([np.min(np.abs(exact - l)) for l in lam])

    return {
        'gerschgorin': in_discs,
        'bauer_fike': dist <= bounds.bauer_fike + atol,
        'kato_temple': dist <= bounds.kato_temple + atol,
    }
