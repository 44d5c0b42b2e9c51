"""1D hillslope groundwater flow solver.

Public API
----------
DataFile          : frozen simulation parameters.
Mesh              : grid of N + 1 nodes and station lookup.
FrozenInputPicard : time stepping with the flux law held on the accepted profile.
Picard            : time stepping with a fixed-point iteration of the implicit step.
ResultWriter      : CSV, console and HDF5 output of the reported samples.
"""

from .convergence import NonConvergenceError
from .data_file import DataFile
from .mesh import Mesh
from .output import ResultWriter
from .time_scheme import FrozenInputPicard, Picard, TimeScheme

__all__ = [
    "DataFile",
    "Mesh",
    "TimeScheme",
    "FrozenInputPicard",
    "Picard",
    "ResultWriter",
    "NonConvergenceError",
]
