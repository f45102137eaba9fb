"""
Periodic Problems
=================

Galerkin and plane-wave discretisations of -½Δ + V, and Bloch-Floquet
band structures. Built on numpy/scipy only, independent of eigen_core.

Modules:
    constants    - Model parameters and discretisation defaults
    galerkin     - Sine basis in a Dirichlet box, min-max convergence
    plane_waves  - Fourier basis with kinetic energy cutoff
    bloch        - Gaussian atoms, band structures, tight-binding chains

Oct 2026
"""

from .constants import (
    BOX_LENGTH,
    GAUSSIAN_WELL_DEPTH,
    GAUSSIAN_WELL_WIDTH,
    GAUSSIAN_WELL_CENTRE,
    QUAD_ATOL,
    QUAD_LIMIT,
    DEFAULT_ECUT,
    GAUSSIAN_ATOM_ALPHA,
    GAUSSIAN_ATOM_WIDTH,
    ATOM_LATTICE,
    ATOM_POSITIONS,
    FREE_ELECTRON_LATTICE,
    DEFAULT_N_BANDS,
    DEFAULT_KLINE_POINTS,
    DEFAULT_HOPPING,
    DEFAULT_ONSITE,
    CHAIN_SPACING,
)

from .galerkin import (
    gaussian_well,
    basis,
    matrix_element,
    build_galerkin_matrix,
    eigenvalues_vs_basis_size,
)

from .plane_waves import (
    build_plane_waves_matrix_cos,
    PlaneWaveHamiltonian,
    ecut_convergence,
)

from .bloch import (
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
