"""Convergence test of the inner fixed-point iteration."""

import numpy as np

from hillslope.data_file import DataFile
from hillslope.numba_kernels import max_interior_difference_kernel


class NonConvergenceError(RuntimeError):
    """Raised when the inner iteration exceeds its iteration budget.

    Attributes:
        time: Elapsed time of the step that failed
        iterations: Number of inner iterations performed
        max_diff: Last difference between successive iterates
    """

    def __init__(self, time: float, iterations: int, max_diff: float):
        super().__init__(f"no convergence at t = {time} after {iterations} iterations "
                         f"(max difference {max_diff:.3e})")
        self.time = time
        self.iterations = iterations
        self.max_diff = max_diff


class ConvergenceChecker:
    """Compares successive inner iterates over the interior nodes.

    Attributes:
        tolerance: Convergence threshold on max |h*_i - h^k_i|
        max_iterations: Iteration budget per step (0 means unbounded)
        iterations: Iterations performed in the current step
        max_diff: Difference measured by the last call to judge
    """

    def __init__(self, data_file: DataFile):
        self.tolerance = data_file.tolerance
        self.max_iterations = data_file.max_iterations
        self.iterations = 0
        self.max_diff = 0.0

    def reset(self):
        """Start counting iterations for a new time step."""
        self.iterations = 0
        self.max_diff = 0.0

    def judge(self, prior: np.ndarray, tentative: np.ndarray, time: float = 0.0) -> bool:
        """Return True when *tentative* is close enough to *prior*.

        The caller decides what to do with the buffers: on convergence the
        tentative profile becomes the accepted one, otherwise it becomes the
        next prior iterate.

        Raises:
            NonConvergenceError: If the step is still unconverged after
                max_iterations iterations.
        """
        self.iterations += 1
        self.max_diff = max_interior_difference_kernel(tentative, prior)
        if self.max_diff < self.tolerance:
            return True
        if self.max_iterations and self.iterations >= self.max_iterations:
            raise NonConvergenceError(time, self.iterations, self.max_diff)
        return False
