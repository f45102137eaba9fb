"""Demo matrices with controlled spectra."""

from .matrices import (
    build_perturbed_diagonal,
    build_power_test_matrix,
    build_shift_invert_example,
    build_spread_diagonal,
    build_block_test_matrix,
)
