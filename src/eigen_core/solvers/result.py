"""Result container shared by all iterative eigensolvers."""

import numpy as np
from dataclasses import dataclass, field
from typing import List, Union


@dataclass
class EigenResult:
    """
    Outcome of an iterative eigensolver.

    Single-vector methods store a scalar eigenvalue and a (n,) vector;
    block methods store (m,) eigenvalues and (n, m) vectors. Histories hold
    one entry per iteration (scalars or (m,) arrays respectively).
    """
    eigenvalues: Union[float, np.ndarray]
    vectors: np.ndarray
    converged: bool
    eigenvalue_history: List = field(default_factory=list)
    residual_history: List = field(default_factory=list)

    @property
    def n_iter(self) -> int:
        return len(self.residual_history)

    @property
    def residual_norms(self) -> np.ndarray:
        """Residual history as an array: (n_iter,) or (n_iter, m)."""
        return np.array(self.residual_history)

    @property
    def final_residual(self) -> Union[float, np.ndarray]:
        if not self.residual_history:
            return np.nan
        return self.residual_history[-1]
