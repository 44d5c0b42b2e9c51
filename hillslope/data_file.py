"""
DataFile class for reading and managing simulation parameters.

Parameters are read once from an optional JSON file and stay frozen for the
whole run. Every solver component receives the same DataFile instance.
"""

import json
import os
import sys
from dataclasses import dataclass, fields
from typing import Tuple


ITERATION_SCHEMES = ("FrozenInputPicard", "Picard")


@dataclass(frozen=True)
class DataFile:
    """Immutable set of simulation parameters.

    Attributes:
        file_name: Path to the parameter file ("" for built-in defaults)
        total_length: Length of the aquifer along the slope
        node_count: Number of grid intervals N (the grid has N + 1 nodes)
        conductivity: Nonlinear hydraulic conductivity coefficient K
        exponent: Nonlinear exponent M applied to the hydraulic gradient
        storage_coefficient: Effective porosity Se
        slope: Bed slope S0
        tolerance: Convergence tolerance of the inner iteration
        time_step: Time increment dt
        final_time: Total simulated duration
        rain_duration: Time after which rainfall stops for good
        rain_rate: Recharge rate while rain is active
        initial_level: Initial water-table elevation (uniform)
        crest_elevation: Elevation of the weir crest
        reference_station: Station the boundary is extrapolated from once overtopped
        initial_gradient: Outflow gradient right after overtopping
        gradient_log_coefficient: Coefficient of ln(t - t_overtop) in the decay law
        gradient_offset: Constant subtracted in the decay law
        gradient_transition_time: Delay after overtopping before the decay law applies
        stations: Reported station positions, measured from the weir
        report_interval: Interval between reported samples
        iteration_scheme: "FrozenInputPicard" or "Picard"
        max_iterations: Inner iterations allowed per step (0 for unbounded)
        results_dir: Directory where results are written
        csv_file: Name of the station table inside results_dir
        save_hdf5: Also write the full profiles to results_dir/solution.h5
    """

    file_name: str = ""
    total_length: float = 420.0
    node_count: int = 210
    conductivity: float = 1.7
    exponent: float = 0.7
    storage_coefficient: float = 0.25
    slope: float = 0.0
    tolerance: float = 0.01
    time_step: float = 0.001
    final_time: float = 10000.0
    rain_duration: float = 4800.0
    rain_rate: float = 67.5 / 10.0 / 3600.0
    initial_level: float = 12.50
    crest_elevation: float = 22.157
    reference_station: float = 210.0
    initial_gradient: float = 0.0010
    gradient_log_coefficient: float = 0.0004
    gradient_offset: float = 0.0010
    gradient_transition_time: float = 16.0
    stations: Tuple[float, ...] = (0.0, 30.0, 90.0, 140.0, 210.0, 280.0, 350.0)
    report_interval: float = 100.0
    iteration_scheme: str = "FrozenInputPicard"
    max_iterations: int = 100
    results_dir: str = "results"
    csv_file: str = "result.csv"
    save_hdf5: bool = True

    @property
    def dx(self) -> float:
        """Grid spacing DX = total_length / node_count."""
        return self.total_length / self.node_count

    @classmethod
    def from_json(cls, file_name: str, verbosity: int = 1) -> "DataFile":
        """Read and parse a JSON parameter file.

        Keys missing from the file keep their default value. Unknown keys are
        reported and ignored.

        Args:
            file_name: Path to the JSON parameter file
            verbosity: Level of output verbosity (0=silent, 1=normal)

        Returns:
            DataFile: Validated, frozen parameter set.
        """
        if not os.path.exists(file_name):
            print(f"\033[91mERROR::DATAFILE : Unable to open file {file_name}\033[0m")
            sys.exit(-1)

        if verbosity > 0:
            print(f"Reading JSON data file {file_name}")

        try:
            with open(file_name, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"\033[91mERROR::DATAFILE : Unable to parse file {file_name}\033[0m")
            print(f"Error: {e}")
            sys.exit(-1)

        known = {f.name for f in fields(cls)} - {"file_name"}
        params = {}
        for key, value in data.items():
            if key not in known:
                print(f"\033[95mWARNING::DATAFILE : Unknown parameter {key} ignored.\033[0m")
                continue
            params[key] = value

        if "stations" in params:
            params["stations"] = tuple(float(p) for p in params["stations"])

        data_file = cls(file_name=file_name, **params)
        data_file.validate()

        if verbosity > 0:
            print("\033[92mSUCCESS::DATAFILE : File read successfully\033[0m")
            print()

        return data_file

    def validate(self):
        """Abort the run if a parameter cannot describe a valid simulation."""
        errors = []
        for name in ("node_count", "max_iterations"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                errors.append(f"{name} must be an integer, got {value!r}")
        if self.node_count < 2:
            errors.append(f"node_count must be at least 2, got {self.node_count}")
        for name in ("total_length", "time_step", "storage_coefficient", "tolerance", "report_interval"):
            if getattr(self, name) <= 0:
                errors.append(f"{name} must be positive, got {getattr(self, name)}")
        if self.max_iterations < 0:
            errors.append(f"max_iterations must be non-negative, got {self.max_iterations}")
        if self.iteration_scheme not in ITERATION_SCHEMES:
            errors.append(f"iteration_scheme {self.iteration_scheme} not implemented")

        if errors:
            for error in errors:
                print(f"\033[91mERROR::DATAFILE : {error}\033[0m")
            sys.exit(-1)

    def make_results_dir(self, verbosity: int = 1):
        """Create the results directory if needed."""
        if verbosity > 0:
            print("Creating the results directory...")
        os.makedirs(self.results_dir, exist_ok=True)

    def print_data(self):
        """Print all parameters to console."""
        print(f"Parameter file       = {self.file_name or 'built-in defaults'}")
        print(f"Grid                 = Generated")
        print(f"   |Length           = {self.total_length}")
        print(f"   |N                = {self.node_count}")
        print(f"   |dx               = {self.dx}")
        print(f"Conductivity K       = {self.conductivity}")
        print(f"Exponent M           = {self.exponent}")
        print(f"Storage Se           = {self.storage_coefficient}")
        print(f"Bed slope            = {self.slope}")
        print(f"Initial level        = {self.initial_level}")
        print(f"Rain                 = {self.rain_rate}")
        print(f"   |Duration         = {self.rain_duration}")
        print(f"Weir crest           = {self.crest_elevation}")
        print(f"   |Reference        = {self.reference_station}")
        print(f"Iteration scheme     = {self.iteration_scheme}")
        print(f"   |Tolerance        = {self.tolerance}")
        print(f"   |Max iterations   = {self.max_iterations or 'unbounded'}")
        print(f"Time step            = {self.time_step}")
        print(f"Final time           = {self.final_time}")
        print(f"Report interval      = {self.report_interval}")
        print(f"Number of stations   = {len(self.stations)}")
        for position in self.stations:
            print(f"   |Station          = {position}")
        print(f"Results directory    = {self.results_dir}")
        print(f"SaveHDF5             = {self.save_hdf5}")
