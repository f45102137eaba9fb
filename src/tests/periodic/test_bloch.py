"""
Bloch-Floquet Tests
===================

Gaussian atoms and their Fourier coefficients, plane-wave band structures
and the tight-binding chain: supercell folding and block diagonalisation
by the discrete Bloch transform.

Run: python -m pytest tests/periodic/test_bloch.py -v
"""

import numpy as np
import pytest
from scipy.integrate import quad

from periodic.bloch import (
    GaussianAtom,
    PeriodicModel,
    brillouin_zone_path,
    BandStructure,
    compute_bands,
    band_gaps,
    chain_hamiltonian,
    chain_bloch_hamiltonian,
    chain_bloch_eigenvalues,
    supercell_kpoints,
    bloch_transform,
    inverse_bloch_transform,
    folded_spectrum,
)
from periodic.constants import (
    GAUSSIAN_ATOM_ALPHA,
    GAUSSIAN_ATOM_WIDTH,
    ATOM_LATTICE,
    ATOM_POSITIONS,
)


@pytest.fixture(scope='module')
def atom():
    return GaussianAtom(GAUSSIAN_ATOM_ALPHA, GAUSSIAN_ATOM_WIDTH)


@pytest.fixture(scope='module')
def crystal(atom):
    return PeriodicModel(ATOM_LATTICE, [atom, atom], ATOM_POSITIONS)


# =============================================================================
# BL1: CONTINUUM MODEL
# =============================================================================

def test_atom_fourier_matches_quadrature(atom):
    """BL1.1: v̂(q) = ∫ v(r) e^{-iqr} dr = -α exp(-(qw)²/2)."""
    for q in (0.0, 0.05, 0.2):
        numeric, _ = quad(lambda r: atom.potential(r) * np.cos(q * r), -200, 200, epsabs=1e-13, limit=200)
        assert abs(numeric - atom.fourier(q)) < 1e-10
    assert atom.fourier(0.0) == -GAUSSIAN_ATOM_ALPHA


def test_model_coefficients_match_quadrature(crystal):
    """BL1.2: V̂(G) equals (1/L)∫₀^L V(x) e^{-iGx} dx."""
    L = crystal.L
    for m in (0, 1, 3):
        q = 2 * np.pi * m / L
        re, _ = quad(lambda x: crystal.potential(x) * np.cos(q * x), 0, L, epsabs=1e-13, limit=200)
        im, _ = quad(lambda x: -crystal.potential(x) * np.sin(q * x), 0, L, epsabs=1e-13, limit=200)
        assert abs((re + 1j * im) / L - crystal.fourier_coefficient(q)) < 1e-10


def test_model_guards(atom):
    """BL1.3: Lattice constant and atom/position counts are checked."""
    with pytest.raises(ValueError, match="Lattice constant"):
        PeriodicModel(0.0)
    with pytest.raises(ValueError, match="positions"):
        PeriodicModel(10.0, [atom], [])


def test_brillouin_zone_path():
    """BL1.4: Γ to the zone boundary π/L."""
    k = brillouin_zone_path(20.0, 11)
    assert k[0] == 0.0 and abs(k[-1] - np.pi / 20) < 1e-15
    with pytest.raises(ValueError, match="2 k-points"):
        brillouin_zone_path(20.0, 1)


# =============================================================================
# BL2: BAND STRUCTURES
# =============================================================================

def test_free_electron_bands():
    """BL2.1: Empty lattice bands are ½(k + G)² and touch at Γ and π/L."""
    model = PeriodicModel(20.0)
    bands = compute_bands(model, Ecut=5.0, n_bands=4, kpoints=brillouin_zone_path(20.0, 11))
    assert bands.eigenvalues.shape == (11, 4)
    b = 2 * np.pi / 20.0
    G = b * np.arange(-10, 11)
    for i, k in enumerate(bands.kpoints):
        np.testing.assert_allclose(bands.eigenvalues[i], np.sort(0.5 * (k + G) ** 2)[:4], atol=1e-12)
    for upper, lower in band_gaps(bands):
        assert abs(lower - upper) < 1e-10


def test_band_structure_helpers():
    """BL2.2: Reduced k-points, band ranges and gap filtering."""
    bands = BandStructure(
        kpoints=np.array([0.0, np.pi / 2]),
        eigenvalues=np.array([[0.0, 1.0, 1.5], [0.5, 2.0, 1.8]]),
        L=2.0,
    )
    np.testing.assert_allclose(bands.reduced_kpoints, [0.0, 0.5])
    np.testing.assert_array_equal(bands.band(1), [1.0, 2.0])
    np.testing.assert_array_equal(bands.band_ranges(), [[0.0, 0.5], [1.0, 2.0], [1.5, 1.8]])
    assert band_gaps(bands) == [(0.5, 1.0), (2.0, 1.5)]
    assert band_gaps(bands, open_only=True) == [(0.5, 1.0)]


def test_band_structure_plot():
    """BL2.3: Plotting returns the axes with one line per band."""
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    bands = compute_bands(PeriodicModel(20.0), Ecut=2.0, n_bands=3,
                          kpoints=brillouin_zone_path(20.0, 5))
    ax = bands.plot()
    assert len(ax.get_lines()) == 3
    plt.close(ax.figure)


def test_compute_bands_guard():
    """BL2.4: At least one band."""
    with pytest.raises(ValueError, match="n_bands"):
        compute_bands(PeriodicModel(20.0), n_bands=0)


@pytest.mark.slow
def test_gaussian_crystal_opens_gaps(crystal):
    """BL2.5: A periodic potential lifts the free-electron degeneracies."""
    bands = compute_bands(crystal, Ecut=50.0, n_bands=6,
                          kpoints=brillouin_zone_path(crystal.L, 21))
    assert np.all(bands.eigenvalues[:, 0] < 0.5 * (np.pi / crystal.L) ** 2)
    open_gaps = band_gaps(bands, open_only=True)
    assert len(open_gaps) >= 3


# =============================================================================
# BL3: TIGHT-BINDING CHAIN
# =============================================================================

def test_single_site_dispersion():
    """BL3.1: ε(k) = ε₀ - 2t cos(ka)."""
    k = np.linspace(-np.pi, np.pi, 9)
    bands = chain_bloch_eigenvalues(k, hopping=1.5, onsite=0.3)
    assert bands.shape == (9, 1)
    np.testing.assert_allclose(bands[:, 0], 0.3 - 3.0 * np.cos(k), atol=1e-14)
    assert chain_bloch_eigenvalues(0.0).shape == (1,)


def test_bloch_hamiltonian_hermitian():
    """BL3.2: H(k) is Hermitian for a two-site cell."""
    H = chain_bloch_hamiltonian(0.7, onsite=[0.0, 0.5])
    np.testing.assert_allclose(H, H.conj().T)


def test_open_chain_spectrum():
    """BL3.3: Open chain: -2t cos(πj/(N+1))."""
    N = 12
    lam = np.linalg.eigvalsh(chain_hamiltonian(N, periodic=False))
    expected = np.sort(-2 * np.cos(np.pi * np.arange(1, N + 1) / (N + 1)))
    np.testing.assert_allclose(lam, expected, atol=1e-12)


@pytest.mark.parametrize("n_cells,onsite", [
    (1, 0.0),
    (2, 0.0),
    (10, 0.0),
    (7, [0.0, 0.5]),
    (6, [-1.0, 0.0, 1.0]),
])
def test_supercell_folding(n_cells, onsite):
    """BL3.4: Periodic chain spectrum = union of bands at k_j = 2πj/(Na)."""
    m = len(np.atleast_1d(onsite))
    lam = np.linalg.eigvalsh(chain_hamiltonian(n_cells * m, onsite=onsite))
    np.testing.assert_allclose(lam, folded_spectrum(n_cells, onsite=onsite), atol=1e-12)


def test_staggered_chain_gap():
    """BL3.5: Alternating onsite ±1 opens the gap (-1, 1) at the zone boundary."""
    k = np.linspace(-np.pi, np.pi, 101)
    bands = chain_bloch_eigenvalues(k, onsite=[-1.0, 1.0])
    assert abs(bands[:, 0].max() + 1.0) < 1e-12
    assert abs(bands[:, 1].min() - 1.0) < 1e-12


def test_chain_guards():
    """BL3.6: n_sites must be a multiple of the cell size."""
    with pytest.raises(ValueError, match="multiple"):
        chain_hamiltonian(3, onsite=[0.0, 1.0])
    with pytest.raises(ValueError, match="n_cells"):
        supercell_kpoints(0)


def test_bloch_transform_unitary():
    """BL3.7: Orthonormal FFT: norm preserved and exactly invertible."""
    u = np.random.default_rng(8).standard_normal(16)
    u_hat = bloch_transform(u, 8)
    assert u_hat.shape == (8, 2)
    assert abs(np.linalg.norm(u_hat) - np.linalg.norm(u)) < 1e-12
    np.testing.assert_allclose(inverse_bloch_transform(u_hat), u, atol=1e-14)
    with pytest.raises(ValueError, match="cells"):
        bloch_transform(np.ones(15), 8)


def test_bloch_transform_block_diagonalises():
    """BL3.8: (Hu)^_j = H(k_j) û_j for the periodic chain."""
    onsite = [0.2, -0.4]
    n_cells = 6
    H = chain_hamiltonian(n_cells * 2, hopping=0.8, onsite=onsite)
    u = np.random.default_rng(9).standard_normal(n_cells * 2)
    lhs = bloch_transform(H @ u, n_cells)
    u_hat = bloch_transform(u, n_cells)
    for j, k in enumerate(supercell_kpoints(n_cells)):
        Hk = chain_bloch_hamiltonian(k, hopping=0.8, onsite=onsite)
        np.testing.assert_allclose(lhs[j], Hk @ u_hat[j], atol=1e-12)
