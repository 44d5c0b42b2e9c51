"""
Numba-accelerated computational kernels for the hillslope solver.

These JIT-compiled loops are called once per inner iteration, i.e. millions
of times per run, so they are kept free of Python objects.
"""

import numpy as np
from numba import njit


@njit
def flux_kernel(height: np.ndarray, flux: np.ndarray, conductivity: float,
                exponent: float, slope: float, dx: float) -> float:
    """Power-law discharge between neighbouring nodes (JIT-compiled).

    For i = N-1, ..., 0:
        h̄ = (h_i + h_{i+1}) / 2
        J = |(h_{i+1} - h_i)/dx + S0|
        q_i = K * h̄ * J^M

    Before the first interface is evaluated, the ghost value
        h_N = h_{N-1} - S0*dx
    is written into the last slot of *height*, which closes the upstream end
    with a gradient that only follows the bed.

    Upwind guard: whenever h_i > h_{i+1}, q_i = 0, so water never runs
    against the imposed downslope direction.

    Args:
        height: Height profile of shape (N+1,). Slot N is overwritten.
        flux: Output array of shape (N+1,). Slot N is set to 0.
        conductivity: Nonlinear conductivity K
        exponent: Nonlinear exponent M
        slope: Bed slope S0
        dx: Spatial step size

    Returns:
        float: The ghost value written into height[N].
    """
    n = height.shape[0] - 1
    ghost = height[n - 1] - slope * dx
    height[n] = ghost
    flux[n] = 0.0

    for i in range(n - 1, -1, -1):
        mean = 0.5 * (height[i] + height[i + 1])
        gradient = abs((height[i + 1] - height[i]) / dx + slope)
        flux[i] = conductivity * mean * gradient ** exponent
        if height[i] > height[i + 1]:
            flux[i] = 0.0

    return ghost


@njit
def height_kernel(height: np.ndarray, flux: np.ndarray, rain: float,
                  dt: float, dx: float, storage: float, out: np.ndarray):
    """Explicit continuity update of the interior nodes (JIT-compiled).

        h*_i = h_i - dt/(dx*Se) * (q_{i-1} - q_i) + dt/Se * r,  i = 1, ..., N-1

    Slots 0 and N of *out* are left untouched.
    """
    n = height.shape[0] - 1
    a = dt / dx / storage
    b = dt / storage * rain
    for i in range(n - 1, 0, -1):
        out[i] = height[i] - a * (flux[i - 1] - flux[i]) + b


@njit
def max_interior_difference_kernel(a: np.ndarray, b: np.ndarray) -> float:
    """Largest |a_i - b_i| over the interior nodes i = 1, ..., N-1."""
    n = a.shape[0] - 1
    diff_max = 0.0
    for i in range(1, n):
        diff = abs(a[i] - b[i])
        if diff > diff_max:
            diff_max = diff
    return diff_max
