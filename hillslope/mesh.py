"""
Mesh class for the 1D hillslope grid and station lookup.
"""

import sys
from typing import List, Sequence

import numpy as np

from hillslope.data_file import DataFile


class Mesh:
    """Uniform 1D grid of N + 1 nodes along the slope.

    Node 0 sits at the weir, node N at the upstream (no-flow) end.

    Attributes:
        total_length: Length of the domain
        number_of_intervals: Number of grid intervals N
        dx: Spatial step size
        node_positions: Array of node coordinates, shape (N + 1,)
    """

    def __init__(self, data_file: DataFile = None):
        """Initialize mesh from DataFile.

        Args:
            data_file: DataFile object containing grid parameters
        """
        self._DF = data_file
        self.total_length = 1.0
        self.number_of_intervals = 10
        self.dx = 0.1
        self.node_positions = None

        if data_file is not None:
            self.total_length = data_file.total_length
            self.number_of_intervals = data_file.node_count
            self.dx = data_file.dx
            self.node_positions = np.zeros(self.number_of_intervals + 1)

    def initialize(self, verbosity: int = 1):
        """Compute node positions x_i = i * dx for i = 0, ..., N.

        Args:
            verbosity: Level of output verbosity (0=silent, 1=normal output)
        """
        if verbosity > 0:
            print("Generating a 1D hillslope grid...")

        self.node_positions = np.arange(self.number_of_intervals + 1) * self.dx

        if verbosity > 0:
            print("\033[92mSUCCESS::MESH : Grid generated successfully !\033[0m")
            print()

    def station_index(self, position: float) -> int:
        """Map a distance from the weir onto a node index.

        The index is the integer part of position / dx, so a station between
        two nodes is attached to the downstream one.

        Args:
            position: Distance from the weir

        Returns:
            int: Node index in [0, N].
        """
        index = int(position / self.dx)
        if position < 0 or index > self.number_of_intervals:
            print(f"\033[91mERROR::MESH : Station {position} lies outside the grid "
                  f"[0, {self.total_length}]\033[0m")
            sys.exit(-1)
        return index

    def station_indices(self, positions: Sequence[float]) -> List[int]:
        """Map several station positions onto node indices."""
        return [self.station_index(p) for p in positions]

    def get_node_positions(self) -> np.ndarray:
        """Get array of node coordinates."""
        return self.node_positions

    def get_number_of_intervals(self) -> int:
        """Get the number of grid intervals N."""
        return self.number_of_intervals

    def get_number_of_nodes(self) -> int:
        """Get the number of nodes N + 1."""
        return self.number_of_intervals + 1

    def get_space_step(self) -> float:
        """Get spatial step size."""
        return self.dx
