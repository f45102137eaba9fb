"""
Plane-Wave Discretisation
=========================

Periodic operators H = -½Δ + V on [0, L) in the Fourier basis

    e_G(x) = e^{iGx} / sqrt(L),   G ∈ (2π/L) ℤ

truncated at a kinetic energy cutoff ½|k+G|² ≤ Ecut. For the Bloch fibre
H_k = ½(-i∇ + k)² + V the matrix elements are

    H_k[G, G'] = ½|k+G|² δ_GG' + V̂(G - G'),   V̂(q) = (1/L) ∫₀^L V(x) e^{-iqx} dx

A potential is given through its Fourier coefficients, either as a dict
{m: V̂(2πm/L)} or as a callable q ↦ V̂(q).

EXAMPLE:
    V(x) = cos(x) on [0, 2π]: V̂(±1) = ½, so H is ½ tridiag(1, G², 1).

Oct 2026
"""

import numpy as np
import scipy.linalg
from typing import Callable, Dict, Iterable, Optional, Sequence, Union

from .constants import DEFAULT_ECUT

PotentialCoefficients = Union[Dict[int, complex], Callable[[np.ndarray], np.ndarray]]


def build_plane_waves_matrix_cos(Ecut: float) -> np.ndarray:
    """
    -½Δ + cos(x) on [0, 2π] with |G| ≤ Gmax = floor(sqrt(2 Ecut)).

    Returns:
        (2Gmax+1, 2Gmax+1) dense matrix ½ tridiag(1, G², 1), G = -Gmax..Gmax
    """
    if Ecut < 0:
        raise ValueError(f"Ecut must be non-negative, got {Ecut}")
    Gmax = int(np.floor(np.sqrt(2 * Ecut)))
    Gsq = np.arange(-Gmax, Gmax + 1, dtype=float) ** 2
    off = np.ones(2 * Gmax)
    return 0.5 * (np.diag(Gsq) + np.diag(off, 1) + np.diag(off, -1))


class PlaneWaveHamiltonian:
    """
    Plane-wave matrix of a 1D periodic Hamiltonian at one k-point.

    Attributes:
        L: period
        k: wave vector (Cartesian, units of 1/length)
        Ecut: kinetic energy cutoff
        G: (N,) reciprocal lattice vectors in the basis
    """

    def __init__(self, L: float, potential_coefficients: PotentialCoefficients,
                 Ecut: float = DEFAULT_ECUT, k: float = 0.0):
        if L <= 0:
            raise ValueError(f"Period must be positive, got {L}")
        if Ecut < 0:
            raise ValueError(f"Ecut must be non-negative, got {Ecut}")
        self.L = L
        self.k = k
        self.Ecut = Ecut
        self.potential_coefficients = potential_coefficients

        # All m with ½|k + 2πm/L|² ≤ Ecut
        b = 2 * np.pi / L
        kmax = np.sqrt(2 * Ecut)
        m = np.arange(np.ceil((-kmax - k) / b), np.floor((kmax - k) / b) + 1)
        self.G = b * m[0.5 * (k + b * m) ** 2 <= Ecut]
        self._m = np.rint(self.G / b).astype(int)

    @property
    def n_basis(self) -> int:
        return len(self.G)

    def kinetic(self) -> np.ndarray:
        return 0.5 * (self.k + self.G) ** 2

    def potential(self) -> np.ndarray:
        """(N, N) matrix V̂(G - G')."""
        dm = self._m[:, None] - self._m[None, :]
        coeffs = self.potential_coefficients
        if callable(coeffs):
            return np.asarray(coeffs(2 * np.pi / self.L * dm), dtype=complex)
        V = np.zeros(dm.shape, dtype=complex)
        for m, value in coeffs.items():
            V[dm == m] = value
        return V

    def matrix(self) -> np.ndarray:
        """Dense Hermitian H_k (real if the potential is real and even)."""
        H = np.diag(self.kinetic()).astype(complex) + self.potential()
        if np.allclose(H.imag, 0.0):
            return H.real
        return H

    def eigenvalues(self, n: Optional[int] = None) -> np.ndarray:
        """Lowest n eigenvalues (all if n is None)."""
        H = self.matrix()
        if n is None:
            return scipy.linalg.eigh(H, eigvals_only=True)
        if n > self.n_basis:
            raise ValueError(
                f"Requested {n} eigenvalues but the basis has only {self.n_basis} "
                f"plane waves (Ecut={self.Ecut})"
            )
        return scipy.linalg.eigh(H, eigvals_only=True, subset_by_index=[0, n - 1])


def ecut_convergence(Ecut_range: Iterable[float], reference_Ecut: float = 200.0,
                     states: Sequence[int] = (0, 4),
                     builder: Callable[[float], np.ndarray] = build_plane_waves_matrix_cos) -> np.ndarray:
    """
    Absolute eigenvalue errors against a high-cutoff reference.

    Args:
        Ecut_range: cutoffs to test
        reference_Ecut: cutoff of the reference calculation
        states: eigenvalue indices (ascending order) to track
        builder: Ecut ↦ Hamiltonian matrix

    Returns:
        (len(Ecut_range), len(states)) array of |λ_s(Ecut) - λ_s(ref)|
    """
    states = list(states)
    reference = np.linalg.eigvalsh(builder(reference_Ecut))
    if max(states) >= len(reference):
        raise ValueError(f"State {max(states)} not available at reference Ecut={reference_Ecut}")

    errors = []
    for Ecut in Ecut_range:
        lam = np.linalg.eigvalsh(builder(Ecut))
        if max(states) >= len(lam):
            raise ValueError(f"State {max(states)} not available at Ecut={Ecut}")
        errors.append(np.abs(lam[states] - reference[states]))
    return np.array(errors)
