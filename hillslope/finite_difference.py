"""
Finite difference operators for the hillslope flow equation.

FluxLaw evaluates the nonlinear discharge between nodes, MassBalance turns
those discharges into a tentative height profile.
"""

import numpy as np

from hillslope.data_file import DataFile
from hillslope.mesh import Mesh
from hillslope.numba_kernels import flux_kernel, height_kernel


class FluxLaw:
    """Power-law (Boussinesq type) discharge q = K * h̄ * |∂h/∂x + S0|^M.

    Attributes:
        flux_vector: Discharge at each interface, shape (N+1,). flux_vector[i]
                     is the discharge between nodes i and i+1; the last entry
                     is unused and kept at 0.
        ghost_value: Upstream ghost height synthesized by the last call.
    """

    def __init__(self, data_file: DataFile, mesh: Mesh):
        self._DF = data_file
        self._mesh = mesh
        self.flux_vector = np.zeros(mesh.get_number_of_nodes())
        self.ghost_value = 0.0

    def compute_flux(self, height: np.ndarray) -> np.ndarray:
        """Compute the discharge profile of *height*.

        The flux law owns the last slot of the profile it reads: the ghost
        value h_N = h_{N-1} - S0*dx is written there before the last
        interface is evaluated, and is also kept in self.ghost_value.

        Args:
            height: Height profile of shape (N+1,)

        Returns:
            np.ndarray: The flux vector (same buffer on every call).
        """
        self.ghost_value = flux_kernel(height, self.flux_vector,
                                       self._DF.conductivity, self._DF.exponent,
                                       self._DF.slope, self._mesh.get_space_step())
        return self.flux_vector

    def get_flux_vector(self) -> np.ndarray:
        """Get the flux vector of the last call."""
        return self.flux_vector

    def get_ghost_value(self) -> float:
        """Get the ghost height synthesized by the last call."""
        return self.ghost_value


class MassBalance:
    """Explicit continuity update with areal recharge."""

    def __init__(self, data_file: DataFile, mesh: Mesh):
        self._DF = data_file
        self._mesh = mesh

    def compute_height(self, height: np.ndarray, flux: np.ndarray, rain: float,
                       out: np.ndarray) -> np.ndarray:
        """Write the tentative heights of the interior nodes into *out*.

        Mathematical formulation:
            h*_i = h_i - Δt/(Δx·Se) * (q_{i-1} - q_i) + Δt/Se * r

        Only indices 1..N-1 are written: index 0 belongs to the boundary
        model and index N is never updated here.

        Args:
            height: Height profile at the start of the step, shape (N+1,)
            flux: Discharge profile, shape (N+1,)
            rain: Current recharge rate
            out: Tentative profile, shape (N+1,)

        Returns:
            np.ndarray: *out*, for chaining.
        """
        height_kernel(height, flux, rain, self._DF.time_step,
                      self._mesh.get_space_step(), self._DF.storage_coefficient, out)
        return out
