"""
Periodic Problems and Band Structures
=====================================

  1. Galerkin eigenvalues of -½Δ + Gaussian well in (0, π) vs basis size:
     monotone decrease (min-max)
  2. Plane-wave convergence of -½Δ + cos(x) vs Ecut: exponential
  3. Bands of free electrons (L = 20) and of two Gaussian atoms
     (L = 100, positions 0.2 and 0.8): gaps open, low bands flatten
  4. Tight-binding chain: supercell spectrum = folded Bloch bands

Oct 2026
"""

import sys
from pathlib import Path

def _find_src():
    """Find src/ by looking for periodic/ subdirectory."""
    current = Path(__file__).resolve().parent
    for _ in range(10):
        if (current / 'periodic').is_dir():
            return current
        candidate = current / 'src'
        if (candidate / 'periodic').is_dir():
            return candidate
        current = current.parent
    raise RuntimeError("Cannot find src/periodic directory")

sys.path.insert(0, str(_find_src()))

import numpy as np

from periodic import (
    eigenvalues_vs_basis_size,
    ecut_convergence,
    GaussianAtom,
    PeriodicModel,
    compute_bands,
    band_gaps,
    brillouin_zone_path,
    chain_hamiltonian,
    folded_spectrum,
    GAUSSIAN_ATOM_ALPHA,
    GAUSSIAN_ATOM_WIDTH,
    ATOM_LATTICE,
    ATOM_POSITIONS,
    FREE_ELECTRON_LATTICE,
)


def run_galerkin(n_max: int = 40):
    print("-" * 70)
    print("1. Galerkin sine basis, lowest 3 eigenvalues")
    print("-" * 70)
    n_range = list(range(4, n_max + 1, 4))
    table = eigenvalues_vs_basis_size(n_range)
    for c, n in enumerate(n_range):
        print(f"  n = {n:>3}: " + "  ".join(f"{v:>10.4f}" for v in table[:3, c]))
    monotone = np.all(np.diff(table[:3, :], axis=1) <= 1e-8)
    print(f"  Monotone decrease: {'PASS' if monotone else 'FAIL'}")
    print()


def run_ecut():
    print("-" * 70)
    print("2. -½Δ + cos(x): |λ(Ecut) - λ(ref)|")
    print("-" * 70)
    Ecuts = list(range(2, 21, 2))
    errors = ecut_convergence(Ecuts, reference_Ecut=200.0, states=(0, 4))
    print(f"{'Ecut':>6} | {'ground':>10} | {'5th':>10}")
    for Ecut, (e0, e4) in zip(Ecuts, errors):
        print(f"{Ecut:>6} | {e0:>10.3e} | {e4:>10.3e}")
    print()


def run_bands(Ecut: float = 50.0, n_points: int = 30, plot: str = None):
    print("-" * 70)
    print(f"3. Band structures (Ecut = {Ecut})")
    print("-" * 70)
    free = PeriodicModel(FREE_ELECTRON_LATTICE)
    atom = GaussianAtom(GAUSSIAN_ATOM_ALPHA, GAUSSIAN_ATOM_WIDTH)
    crystal = PeriodicModel(ATOM_LATTICE, [atom, atom], list(ATOM_POSITIONS))

    results = {}
    for name, model in (("free", free), ("gaussian", crystal)):
        bands = compute_bands(model, Ecut=Ecut, n_bands=6,
                              kpoints=brillouin_zone_path(model.L, n_points))
        results[name] = bands
        print(f"  {name}:")
        for n, (lo, hi) in enumerate(bands.band_ranges()):
            print(f"    band {n}: [{lo:.5f}, {hi:.5f}]")
        gaps = band_gaps(bands, open_only=True)
        print(f"    open gaps: {len(gaps)}")
    print()

    if plot:
        import matplotlib.pyplot as plt

        fig, axes = plt.subplots(1, 2, figsize=(10, 4))
        for ax, (name, bands) in zip(axes, results.items()):
            bands.plot(ax=ax)
            ax.set_title(name)
        fig.savefig(plot, dpi=150, bbox_inches='tight')
        print(f"Saved {plot}")
    return results


def run_chain(n_cells: int = 8):
    print("-" * 70)
    print(f"4. Tight-binding dimer chain, {n_cells} cells")
    print("-" * 70)
    onsite = [0.0, 0.5]
    H = chain_hamiltonian(2 * n_cells, hopping=1.0, onsite=onsite)
    direct = np.linalg.eigvalsh(H)
    folded = folded_spectrum(n_cells, hopping=1.0, onsite=onsite)
    err = np.max(np.abs(direct - folded))
    print(f"  max |σ(H_supercell) - ∪σ(H(k_j))| = {err:.2e}  {'PASS' if err < 1e-10 else 'FAIL'}")
    print()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Periodic problems and band structures")
    parser.add_argument("--ecut", type=float, default=50.0, help="plane-wave cutoff for bands")
    parser.add_argument("--kpoints", type=int, default=30)
    parser.add_argument("--plot", nargs="?", const="bands.png", default=None)
    args = parser.parse_args()

    print("=" * 70)
    print("PERIODIC PROBLEMS")
    print("=" * 70)
    print()
    run_galerkin()
    run_ecut()
    run_bands(args.ecut, args.kpoints, args.plot)
    run_chain()
