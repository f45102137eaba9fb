"""
Periodic Problems Constants
===========================

Model parameters and discretisation defaults shared by the Galerkin,
plane-wave and Bloch modules.

Oct 2026
"""

import numpy as np

# ---------------------------------------------------------------------
# DIRICHLET BOX (0, π) WITH A GAUSSIAN WELL
# ---------------------------------------------------------------------

BOX_LENGTH = np.pi

# V(x) = A exp(-((x - π/2)/σ)²)
GAUSSIAN_WELL_DEPTH = -1000.0
GAUSSIAN_WELL_WIDTH = np.pi / 16
GAUSSIAN_WELL_CENTRE = np.pi / 2

# Absolute tolerance and subinterval limit for scipy.integrate.quad
QUAD_ATOL = 1e-6
QUAD_LIMIT = 200

# ---------------------------------------------------------------------
# PLANE WAVES
# ---------------------------------------------------------------------

# Kinetic energy cutoff ½|k+G|² ≤ Ecut (Hartree)
DEFAULT_ECUT = 300.0

# Two Gaussian atoms of strength α and width w in a cell of length 100
GAUSSIAN_ATOM_ALPHA = 0.3
GAUSSIAN_ATOM_WIDTH = 10.0
ATOM_LATTICE = 100.0
ATOM_POSITIONS = (0.2, 0.8)     # fractional coordinates

FREE_ELECTRON_LATTICE = 20.0

DEFAULT_N_BANDS = 6
DEFAULT_KLINE_POINTS = 100

# ---------------------------------------------------------------------
# TIGHT-BINDING CHAIN
# ---------------------------------------------------------------------

DEFAULT_HOPPING = 1.0
DEFAULT_ONSITE = 0.0
CHAIN_SPACING = 1.0
