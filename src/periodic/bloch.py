"""
Bloch-Floquet Theory for 1D Periodic Problems
=============================================

A periodic operator H commutes with lattice translations and is
block-diagonalised by the Bloch transform into fibres H_k, k in the
Brillouin zone (-π/L, π/L]. Its spectrum is the union of the bands:

    σ(H) = ∪_k σ(H_k),   band n = {ε_n(k)}

Two realisations are provided here.

CONTINUUM (plane waves):
    GaussianAtom / PeriodicModel describe V(x) = Σ_R Σ_a v(x - x_a - R)
    with analytic Fourier coefficients; compute_bands diagonalises the
    plane-wave H_k (see plane_waves.PlaneWaveHamiltonian) along a k-path.

    Gaussian atom of strength α and width w:
        v(r)  = -α / (sqrt(2π) w) · exp(-(r/w)²/2)
        v̂(q) = ∫ v(r) e^{-iqr} dr = -α exp(-(qw)²/2)
    Periodised:
        V̂(q) = (1/L) Σ_a e^{-iq x_a} v̂(q)

DISCRETE (tight-binding chain):
    A chain of unit cells with m sites each, nearest-neighbour hopping t.
    H = Σ_n [c_nᴴ h₀ c_n + c_nᴴ h₁ c_{n+1} + h.c.] has the Bloch matrices

        H(k) = h₀ + h₁ e^{ika} + h₁ᴴ e^{-ika}

    A periodic chain of N cells only sees k_j = 2πj/(Na): its spectrum
    is the union of σ(H(k_j)) (supercell folding). The discrete Bloch
    transform is an orthonormal FFT over the cell index.

Oct 2026
"""

import numpy as np
import scipy.linalg
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from .plane_waves import PlaneWaveHamiltonian
from .constants import (
    DEFAULT_ECUT,
    DEFAULT_N_BANDS,
    DEFAULT_KLINE_POINTS,
    DEFAULT_HOPPING,
    DEFAULT_ONSITE,
    CHAIN_SPACING,
)


# =============================================================================
# CONTINUUM MODELS
# =============================================================================

@dataclass
class GaussianAtom:
    """Gaussian pseudo-atom: strength alpha, width (standard deviation) width."""
    alpha: float
    width: float

    def potential(self, r):
        r = np.asarray(r, dtype=float)
        return -self.alpha / (np.sqrt(2 * np.pi) * self.width) * np.exp(-(r / self.width) ** 2 / 2)

    def fourier(self, q):
        """v̂(q) = ∫ v(r) e^{-iqr} dr."""
        q = np.asarray(q, dtype=float)
        return -self.alpha * np.exp(-(q * self.width) ** 2 / 2)


class PeriodicModel:
    """
    Atoms repeated with period L.

    Args:
        L: lattice constant
        atoms: list of GaussianAtom (empty list: free electrons)
        positions: fractional positions in [0, 1), one per atom
    """

    def __init__(self, L: float, atoms: Sequence[GaussianAtom] = (),
                 positions: Sequence[float] = ()):
        if L <= 0:
            raise ValueError(f"Lattice constant must be positive, got {L}")
        if len(atoms) != len(positions):
            raise ValueError(f"Got {len(atoms)} atoms but {len(positions)} positions")
        self.L = L
        self.atoms = list(atoms)
        self.positions = [float(p) for p in positions]

    def potential(self, x, n_images: int = 3):
        """V(x), summing the 2·n_images+1 nearest periodic images of each atom."""
        x = np.asarray(x, dtype=float)
        V = np.zeros_like(x)
        for atom, pos in zip(self.atoms, self.positions):
            for R in range(-n_images, n_images + 1):
                V = V + atom.potential(x - (pos + R) * self.L)
        return V

    def fourier_coefficient(self, q):
        """V̂(q) = (1/L) Σ_a e^{-iq x_a} v̂_a(q) for q in the reciprocal lattice."""
        q = np.asarray(q, dtype=float)
        V = np.zeros(q.shape, dtype=complex)
        for atom, pos in zip(self.atoms, self.positions):
            V += np.exp(-1j * q * pos * self.L) * atom.fourier(q)
        return V / self.L

    def hamiltonian(self, k: float = 0.0, Ecut: float = DEFAULT_ECUT) -> PlaneWaveHamiltonian:
        return PlaneWaveHamiltonian(self.L, self.fourier_coefficient, Ecut=Ecut, k=k)


def brillouin_zone_path(L: float, n_points: int = DEFAULT_KLINE_POINTS) -> np.ndarray:
    """n_points equispaced k in [0, π/L] (Γ to zone boundary; H_{-k} ≅ H_k)."""
    if n_points < 2:
        raise ValueError(f"Need at least 2 k-points, got {n_points}")
    return np.linspace(0.0, np.pi / L, n_points)


@dataclass
class BandStructure:
    """Eigenvalues of H_k along a k-path."""
    kpoints: np.ndarray        # (nk,) Cartesian
    eigenvalues: np.ndarray    # (nk, n_bands), ascending per k
    L: float

    @property
    def n_bands(self) -> int:
        return self.eigenvalues.shape[1]

    @property
    def reduced_kpoints(self) -> np.ndarray:
        """k in units of 2π/L (0 … ½ for the standard path)."""
        return self.kpoints * self.L / (2 * np.pi)

    def band(self, n: int) -> np.ndarray:
        return self.eigenvalues[:, n]

    def band_ranges(self) -> np.ndarray:
        """(n_bands, 2) array of [min, max] of each band."""
        return np.column_stack([self.eigenvalues.min(axis=0), self.eigenvalues.max(axis=0)])

    def plot(self, ax=None, **kwargs):
        import matplotlib.pyplot as plt

        if ax is None:
            _, ax = plt.subplots(figsize=(6, 4))
        ax.plot(self.reduced_kpoints, self.eigenvalues, color=kwargs.pop('color', 'C0'), **kwargs)
        ax.set_xlabel('k (units of 2π/L)')
        ax.set_ylabel('ε_n(k)')
        ax.set_xlim(self.reduced_kpoints[0], self.reduced_kpoints[-1])
        return ax


def compute_bands(model: PeriodicModel, Ecut: float = DEFAULT_ECUT,
                  n_bands: int = DEFAULT_N_BANDS, kpoints=None) -> BandStructure:
    """
    Lowest n_bands eigenvalues of H_k for each k (default: brillouin_zone_path).

    Each k uses its own k-adapted basis ½|k+G|² ≤ Ecut.
    """
    if n_bands < 1:
        raise ValueError(f"n_bands must be >= 1, got {n_bands}")
    if kpoints is None:
        kpoints = brillouin_zone_path(model.L)
    kpoints = np.asarray(kpoints, dtype=float)

    eigenvalues = np.array([
        model.hamiltonian(k, Ecut).eigenvalues(n_bands) for k in kpoints
    ])
    return BandStructure(kpoints=kpoints, eigenvalues=eigenvalues, L=model.L)


def band_gaps(bands: BandStructure, open_only: bool = False) -> List[Tuple[float, float]]:
    """
    (max of band n, min of band n+1) for consecutive bands.

    A gap is open when the second entry exceeds the first. With
    open_only=True overlapping band pairs are dropped.
    """
    ranges = bands.band_ranges()
    gaps = []
    for n in range(bands.n_bands - 1):
        upper, lower = float(ranges[n, 1]), float(ranges[n + 1, 0])
        if open_only and lower <= upper:
            continue
        gaps.append((upper, lower))
    return gaps


# =============================================================================
# TIGHT-BINDING CHAIN
# =============================================================================

def _cell_blocks(hopping: float, onsite) -> Tuple[np.ndarray, np.ndarray]:
    """Intra-cell h₀ and inter-cell h₁ for a cell with len(onsite) sites."""
    onsite = np.atleast_1d(np.asarray(onsite, dtype=float))
    m = len(onsite)
    h0 = np.diag(onsite)
    for s in range(m - 1):
        h0[s, s + 1] = h0[s + 1, s] = -hopping
    h1 = np.zeros((m, m))
    h1[m - 1, 0] = -hopping     # last site of cell n → first site of cell n+1
    return h0, h1


def chain_hamiltonian(n_sites: int, hopping: float = DEFAULT_HOPPING,
                      onsite=DEFAULT_ONSITE, periodic: bool = True) -> np.ndarray:
    """
    Tight-binding chain with nearest-neighbour hopping.

    Args:
        n_sites: total number of sites
        hopping: hopping amplitude t (matrix entries -t)
        onsite: scalar, or per-site energies of one unit cell
        periodic: close the chain into a ring

    Returns:
        (n_sites, n_sites) real symmetric matrix
    """
    h0, h1 = _cell_blocks(hopping, onsite)
    m = h0.shape[0]
    if n_sites < 1 or n_sites % m:
        raise ValueError(f"n_sites={n_sites} must be a positive multiple of the cell size {m}")
    n_cells = n_sites // m

    H = np.kron(np.eye(n_cells), h0)
    shift = np.eye(n_cells, k=1)
    if periodic and n_cells > 1:
        shift[n_cells - 1, 0] = 1.0
    H += np.kron(shift, h1) + np.kron(shift, h1).T
    if periodic and n_cells == 1:
        H += h1 + h1.T
    return H


def chain_bloch_hamiltonian(k: float, hopping: float = DEFAULT_HOPPING,
                            onsite=DEFAULT_ONSITE, a: float = CHAIN_SPACING) -> np.ndarray:
    """H(k) = h₀ + h₁ e^{ika} + h₁ᴴ e^{-ika}."""
    h0, h1 = _cell_blocks(hopping, onsite)
    phase = np.exp(1j * k * a)
    return h0 + h1 * phase + h1.T * np.conj(phase)


def chain_bloch_eigenvalues(k, hopping: float = DEFAULT_HOPPING,
                            onsite=DEFAULT_ONSITE, a: float = CHAIN_SPACING) -> np.ndarray:
    """
    Bands ε_n(k) of the chain; (m,) for scalar k, (nk, m) for an array.

    For a single site per cell: ε(k) = onsite - 2t cos(ka).
    """
    ks = np.atleast_1d(np.asarray(k, dtype=float))
    bands = np.array([
        scipy.linalg.eigh(chain_bloch_hamiltonian(kk, hopping, onsite, a), eigvals_only=True)
        for kk in ks
    ])
    return bands[0] if np.ndim(k) == 0 else bands


def supercell_kpoints(n_cells: int, a: float = CHAIN_SPACING) -> np.ndarray:
    """k_j = 2πj/(n_cells·a), j = 0..n_cells-1, in FFT order."""
    if n_cells < 1:
        raise ValueError(f"n_cells must be >= 1, got {n_cells}")
    return 2 * np.pi * np.arange(n_cells) / (n_cells * a)


def bloch_transform(u: np.ndarray, n_cells: int) -> np.ndarray:
    """
    Discrete Bloch transform of a chain vector.

        û_j = n_cells^{-1/2} Σ_n e^{-i k_j n a} u_n,   k_j = supercell_kpoints(n_cells)

    Args:
        u: (n_cells·m,) values on the chain, cell-major
        n_cells: number of unit cells

    Returns:
        (n_cells, m) complex array; row j is the cell vector at k_j
    """
    u = np.asarray(u)
    if u.ndim != 1 or len(u) % n_cells:
        raise ValueError(f"Vector of length {u.shape} does not split into {n_cells} cells")
    return np.fft.fft(u.reshape(n_cells, -1), axis=0, norm="ortho")


def inverse_bloch_transform(u_hat: np.ndarray) -> np.ndarray:
    """Inverse of bloch_transform: (n_cells, m) → (n_cells·m,)."""
    u_hat = np.asarray(u_hat)
    if u_hat.ndim != 2:
        raise ValueError(f"Expected (n_cells, m) array, got shape {u_hat.shape}")
    return np.fft.ifft(u_hat, axis=0, norm="ortho").reshape(-1)


def folded_spectrum(n_cells: int, hopping: float = DEFAULT_HOPPING,
                    onsite=DEFAULT_ONSITE, a: float = CHAIN_SPACING) -> np.ndarray:
    """Sorted union of the Bloch bands at the supercell k-points."""
    bands = chain_bloch_eigenvalues(supercell_kpoints(n_cells, a), hopping, onsite, a)
    return np.sort(bands.ravel())
