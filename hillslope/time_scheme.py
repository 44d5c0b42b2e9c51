"""
Time stepping for the hillslope solver.

Each time step is resolved by a fixed-point iteration: flux law, mass
balance, weir boundary and convergence test are repeated until two
successive iterates agree within the tolerance. The two schemes differ only
in which profile the flux law reads during that iteration.
"""

import math
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np
from tqdm import tqdm

from hillslope.boundary import WeirBoundary
from hillslope.convergence import ConvergenceChecker
from hillslope.data_file import DataFile
from hillslope.finite_difference import FluxLaw, MassBalance
from hillslope.mesh import Mesh


class TimeScheme(ABC):
    """Base class for the time-stepping driver.

    The driver is the only component with memory across time steps: the
    accepted height profile, the rain latch and the overtop time.

    Three profile buffers are rotated by reference instead of being copied:

        - height: accepted profile of the last converged step
        - prior: previous inner iterate
        - tentative: iterate being evaluated

    Attributes:
        current_time: Elapsed simulated time
        rain: Current recharge rate (0 once the rain has stopped)
        is_raining: False once current_time has passed the rain duration
        overtop_time: Time the weir was first overtopped, None before that
        n_steps: Number of time steps performed
        total_iterations: Inner iterations summed over all steps
        max_step_iterations: Largest number of inner iterations in one step
    """

    scheme_name = "Base"

    def __init__(self, data_file: DataFile, mesh: Mesh):
        """Initialize the driver and its components.

        Args:
            data_file: DataFile with parameters
            mesh: Mesh object
        """
        self._DF = data_file
        self._mesh = mesh
        self._flux_law = FluxLaw(data_file, mesh)
        self._mass_balance = MassBalance(data_file, mesh)
        self._boundary = WeirBoundary(data_file, mesh)
        self._checker = ConvergenceChecker(data_file)

        n_nodes = mesh.get_number_of_nodes()
        self.height = np.full(n_nodes, data_file.initial_level)
        self.prior = self.height.copy()
        self.tentative = self.height.copy()

        self.time_step = data_file.time_step
        self.final_time = data_file.final_time
        self.current_time = 0.0
        self.rain = data_file.rain_rate
        self.is_raining = True
        self.overtop_time: Optional[float] = None

        self.n_steps = 0
        self.total_iterations = 0
        self.max_step_iterations = 0

    def advance_clock(self):
        """Move to the next time level and update the latched states.

        Overtopping is detected on the accepted boundary height of the
        previous step and is never re-armed. Rain stops for good once the
        rain duration has been passed.
        """
        self.current_time += self.time_step
        if self.overtop_time is None and self.height[0] >= self._DF.crest_elevation:
            self.overtop_time = self.current_time
        if self.is_raining and self.current_time > self._DF.rain_duration:
            self.is_raining = False
            self.rain = 0.0

    @abstractmethod
    def iterate(self):
        """Evaluate flux law and mass balance into self.tentative[1:N+1]."""
        pass

    def one_step(self):
        """Advance the clock and resolve one time step.

        Raises:
            NonConvergenceError: If the inner iteration exceeds its budget.
        """
        self.advance_clock()
        np.copyto(self.prior, self.height)
        self._checker.reset()

        while True:
            self.iterate()
            self._boundary.apply(self.tentative, self.current_time, self.overtop_time)
            if self._checker.judge(self.prior, self.tentative, self.current_time):
                self.height, self.tentative = self.tentative, self.height
                break
            self.prior, self.tentative = self.tentative, self.prior

        self.n_steps += 1
        self.total_iterations += self._checker.iterations
        self.max_step_iterations = max(self.max_step_iterations, self._checker.iterations)

    def is_reporting_time(self) -> bool:
        """True when the current time is within one time step past a report time."""
        return math.fmod(self.current_time, self._DF.report_interval) < self.time_step

    def solve(self, writer=None, verbosity: int = 1):
        """Main time loop.

        Args:
            writer: Object with a write_sample(time, height) method, e.g. a
                    ResultWriter. Receives the initial profile and every
                    converged profile at a reporting time.
            verbosity: Output verbosity level
        """
        n_steps = int((self.final_time - self.current_time) / self.time_step)

        if writer is not None:
            writer.write_sample(self.current_time, self.height)

        pbar = tqdm(total=n_steps, desc="Solving", unit="steps", disable=verbosity == 0,
                    bar_format='{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}]')

        while self.current_time < self.final_time:
            self.one_step()
            pbar.update(1)
            if writer is not None and self.is_reporting_time():
                writer.write_sample(self.current_time, self.height)

        pbar.close()

        if writer is not None:
            writer.overtop_time = self.overtop_time

        if verbosity > 0:
            if self.overtop_time is None:
                print("Weir crest never reached")
            else:
                print(f"Weir overtopped at t = {self.overtop_time}")
            print(f"Inner iterations     = {self.total_iterations} "
                  f"(max {self.max_step_iterations} per step)")

    def get_solution(self) -> np.ndarray:
        """Get the accepted height profile."""
        return self.height

    def get_current_time(self) -> float:
        """Get current time."""
        return self.current_time


class FrozenInputPicard(TimeScheme):
    """Inner iteration with the flux law evaluated on the accepted profile.

    The inputs of flux law and mass balance do not change inside a step, so
    the second iterate always equals the first and the step converges on
    the second iteration at the latest. The scheme is explicit in time.
    """

    scheme_name = "FrozenInputPicard"

    def iterate(self):
        flux = self._flux_law.compute_flux(self.height)
        self._mass_balance.compute_height(self.height, flux, self.rain, self.tentative)
        self.tentative[-1] = self._flux_law.get_ghost_value()


class Picard(TimeScheme):
    """Fixed-point iteration of the implicit step.

    The flux law is evaluated on the previous iterate while the mass balance
    still starts from the accepted profile, so a converged iterate solves

        h^{n+1}_i = h^n_i - Δt/(Δx·Se) * (q_{i-1}(h^{n+1}) - q_i(h^{n+1})) + Δt/Se * r
    """

    scheme_name = "Picard"

    def iterate(self):
        flux = self._flux_law.compute_flux(self.prior)
        self._mass_balance.compute_height(self.height, flux, self.rain, self.tentative)
        self.tentative[-1] = self._flux_law.get_ghost_value()
