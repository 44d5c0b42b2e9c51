"""Downstream weir boundary condition."""

import math
from typing import Optional

import numpy as np

from hillslope.data_file import DataFile
from hillslope.mesh import Mesh


class WeirBoundary:
    """Boundary node 0, sitting on the weir.

    Two regimes, selected on the tentative height one node upstream:

        - sub-crest (h*_1 < crest): seepage face, h*_0 = h*_1 + S0*dx.
          The weir retains everything the bed slope does not carry.
        - overtopped: h*_0 = h*_ref - N*g, with h*_ref the tentative height
          at the reference station and g the empirical outflow gradient

              g = initial_gradient                            if Δt_o <= t_c
              g = a*ln(Δt_o) - b                              if Δt_o >  t_c

          where Δt_o is the time elapsed since overtopping.
    """

    def __init__(self, data_file: DataFile, mesh: Mesh):
        self._DF = data_file
        self._mesh = mesh
        self.reference_index = mesh.station_index(data_file.reference_station)

    def outflow_gradient(self, time: float, overtop_time: Optional[float]) -> float:
        """Empirical outflow gradient used once the weir is overtopped."""
        if overtop_time is not None and (time - overtop_time) > self._DF.gradient_transition_time:
            return (self._DF.gradient_log_coefficient * math.log(time - overtop_time)
                    - self._DF.gradient_offset)
        return self._DF.initial_gradient

    def is_overtopped(self, tentative: np.ndarray) -> bool:
        """True when the node upstream of the weir is at or above the crest."""
        return not tentative[1] < self._DF.crest_elevation

    def apply(self, tentative: np.ndarray, time: float, overtop_time: Optional[float]) -> float:
        """Overwrite tentative[0] according to the current regime.

        Args:
            tentative: Tentative profile of shape (N+1,)
            time: Elapsed time of the step being resolved
            overtop_time: Time the weir was first overtopped, None before that

        Returns:
            float: The new boundary height.
        """
        if not self.is_overtopped(tentative):
            tentative[0] = tentative[1] + self._DF.slope * self._mesh.get_space_step()
        else:
            gradient = self.outflow_gradient(time, overtop_time)
            tentative[0] = (tentative[self.reference_index]
                            - self._mesh.get_number_of_intervals() * gradient)
        return tentative[0]
