"""
Main entry point for the 1D hillslope groundwater solver.

Simulates the water table of a sloped aquifer recharged by rain and drained
by a weir, and reports the water-table height at fixed stations.

Usage:
    python -m hillslope.main [parameter_file]

Examples:
    python -m hillslope.main
    python -m hillslope.main parameters.json
"""

import sys

from hillslope.convergence import NonConvergenceError
from hillslope.data_file import DataFile
from hillslope.mesh import Mesh
from hillslope.output import ResultWriter
from hillslope.time_scheme import FrozenInputPicard, Picard


def main(argv=None):
    """Main function to run the hillslope solver."""

    # Verbosity level (0=silent, 1=normal)
    VERBOSITY = 1

    argv = sys.argv[1:] if argv is None else argv

    # -------------------------------------------------------
    # Read parameter file (built-in defaults without one)
    # -------------------------------------------------------
    if argv:
        data_file = DataFile.from_json(argv[0], verbosity=0)
    else:
        data_file = DataFile()
        data_file.validate()

    # -------------------------------------------------------
    # Print header and parameters
    # -------------------------------------------------------
    print("Solving 1D hillslope flow with the following parameters")
    print('=' * 50)
    data_file.print_data()

    # -------------------------------------------------------
    # Build mesh
    # -------------------------------------------------------
    mesh = Mesh(data_file)
    mesh.initialize(verbosity=0)

    # -------------------------------------------------------
    # Select inner iteration scheme
    # -------------------------------------------------------
    scheme_name = data_file.iteration_scheme

    if scheme_name == "FrozenInputPicard":
        time_scheme = FrozenInputPicard(data_file, mesh)
    elif scheme_name == "Picard":
        time_scheme = Picard(data_file, mesh)
    else:
        print(f"\033[91mERROR::TIMESCHEME : Case {scheme_name} not implemented.\033[0m")
        return -1

    # -------------------------------------------------------
    # Solve
    # -------------------------------------------------------
    print('=' * 50)
    data_file.make_results_dir(verbosity=0)
    try:
        with ResultWriter(data_file, mesh, verbosity=VERBOSITY) as writer:
            time_scheme.solve(writer, verbosity=VERBOSITY)
    except NonConvergenceError as e:
        print(f"\033[91mERROR::TIMESCHEME : {e}\033[0m")
        return -1

    print("\033[92mSolved\033[0m")

    return 0


if __name__ == "__main__":
    sys.exit(main())
