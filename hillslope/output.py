"""
Output channels for the hillslope solver.

Each reported time produces one row of water-table heights at the stations,
sent to a CSV table and to a fixed-width console table. The full profiles
are kept in memory and written to HDF5 when the run ends.
"""

import os
import sys
from typing import List, Optional

import h5py
import numpy as np
from tqdm import tqdm

from hillslope.data_file import DataFile
from hillslope.mesh import Mesh


class ResultWriter:
    """Sink for the reported samples of a run.

    Use as a context manager: the CSV file is opened on enter, and the HDF5
    file is written on a clean exit.

    Attributes:
        station_indices: Node index of each reported station
        labels: Column labels, e.g. "30cm"
        times: Reported times
        profiles: Accepted height profile at each reported time
    """

    def __init__(self, data_file: DataFile, mesh: Mesh, verbosity: int = 1):
        self._DF = data_file
        self._mesh = mesh
        self.verbosity = verbosity
        self.station_indices = mesh.station_indices(data_file.stations)
        self.labels = [f"{p:g}cm" for p in data_file.stations]
        self.csv_filename = os.path.join(data_file.results_dir, data_file.csv_file)
        self.h5_filename = os.path.join(data_file.results_dir, "solution.h5")
        self.times: List[float] = []
        self.profiles: List[np.ndarray] = []
        self.overtop_time: Optional[float] = None
        self._csv = None
        self._header_printed = False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close(save=exc_type is None)
        return False

    def open(self):
        """Open the CSV table and write its header row."""
        try:
            self._csv = open(self.csv_filename, 'w')
        except OSError as e:
            print(f"\033[91mERROR::OUTPUT : Unable to open file {self.csv_filename}\033[0m")
            print(f"Error: {e}")
            sys.exit(-1)
        self._csv.write(",".join(["Time"] + self.labels) + "\n")

    def stations(self, height: np.ndarray) -> List[float]:
        """Heights at the reported stations."""
        return [float(height[i]) for i in self.station_indices]

    def write_sample(self, time: float, height: np.ndarray):
        """Send one sample to every channel.

        Args:
            time: Elapsed time (truncated to an integer in the CSV table)
            height: Accepted height profile, shape (N+1,)
        """
        values = self.stations(height)

        self._csv.write(",".join([str(int(time))] + [f"{h:g}" for h in values]) + "\n")

        if self.verbosity > 0:
            if not self._header_printed:
                tqdm.write("".join(f"{s:>8}" for s in ["Time"] + self.labels))
                self._header_printed = True
            tqdm.write(f"{time:8.0f}" + "".join(f"{h:8.3f}" for h in values))

        self.times.append(time)
        self.profiles.append(height.copy())

    def close(self, save: bool = True):
        """Close the CSV table and, if requested, write the HDF5 file."""
        if self._csv is not None:
            self._csv.close()
            self._csv = None
        if save and self._DF.save_hdf5:
            self.save_hdf5()

    def save_hdf5(self):
        """Write all reported profiles and the run parameters to HDF5."""
        profiles = np.array(self.profiles) if self.profiles else np.zeros((0, self._mesh.get_number_of_nodes()))
        indices = np.array(self.station_indices, dtype=int)

        with h5py.File(self.h5_filename, 'w') as h5f:
            h5f.create_dataset('mesh/x', data=self._mesh.get_node_positions())
            h5f.attrs['dx'] = self._mesh.get_space_step()
            h5f.attrs['node_count'] = self._mesh.get_number_of_intervals()

            h5f.create_dataset('stations/position', data=np.array(self._DF.stations))
            h5f.create_dataset('stations/index', data=indices)
            h5f.create_dataset('stations/height', data=profiles[:, indices])

            h5f.create_dataset('solution/h', data=profiles)
            h5f.create_dataset('solution/time', data=np.array(self.times))

            for name in ('conductivity', 'exponent', 'storage_coefficient', 'slope',
                         'tolerance', 'time_step', 'final_time', 'rain_duration',
                         'rain_rate', 'initial_level', 'crest_elevation'):
                h5f.attrs[name] = getattr(self._DF, name)
            h5f.attrs['iteration_scheme'] = self._DF.iteration_scheme
            h5f.attrs['overtop_time'] = np.nan if self.overtop_time is None else self.overtop_time

        if self.verbosity > 0:
            print(f"Results saved to: {self.h5_filename}")
