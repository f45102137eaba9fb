"""Floating-point error analysis, error-free transformations and compensated sums."""

from .errors import (
    absolute_error,
    relative_error,
    spacing,
    machine_epsilon,
    unit_roundoff,
    condition_number,
    matrix_condition_number,
)

from .float_system import float_system, subnormal_numbers

from .eft import (
    two_sum,
    fast_two_sum,
    split,
    two_prod,
    DoubleWord,
    build_determinant_matrix,
    determinant_2x2,
    determinant_2x2_kahan,
    determinant_2x2_exact,
)

from .summation import (
    sum_naive,
    sum_pairwise,
    sum_kahan,
    sum_kbn,
    sum_doubleword,
    generate_unit_sum,
)

from .precision import (
    compute_e,
    kahan_rational,
    kahan_rational_exact,
    kahan_samples,
    eval_with_precision,
    precision_demo,
    precision_errors,
    kahan_log_function,
    kahan_log_function_interval,
    interval_eval,
    interval_sum,
)
