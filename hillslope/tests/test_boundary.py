"""Tests for the weir boundary regimes."""

import math

import numpy as np
import pytest

from hillslope.boundary import WeirBoundary
from hillslope.data_file import DataFile
from hillslope.mesh import Mesh


def _boundary(**kwargs):
    data_file = DataFile(**kwargs)
    return WeirBoundary(data_file, Mesh(data_file)), data_file


class TestRegimeSwitch:
    """The sub-crest branch is taken only strictly below the crest."""

    def test_reference_index(self):
        boundary, _ = _boundary()
        assert boundary.reference_index == 105

    def test_below_crest_continues_bed(self):
        boundary, data_file = _boundary()
        tentative = np.full(211, 15.0)
        tentative[1] = data_file.crest_elevation - 1e-6
        boundary.apply(tentative, 10.0, None)
        assert tentative[0] == tentative[1]

    def test_below_crest_with_slope(self):
        boundary, data_file = _boundary(slope=0.01)
        tentative = np.full(211, 15.0)
        boundary.apply(tentative, 10.0, None)
        assert tentative[0] == pytest.approx(15.0 + 0.01 * data_file.dx)

    def test_exactly_at_crest_is_overtopped(self):
        boundary, data_file = _boundary()
        tentative = np.full(211, 20.0)
        tentative[1] = data_file.crest_elevation
        boundary.apply(tentative, 10.0, 5.0)
        assert tentative[0] == pytest.approx(20.0 - 210 * 0.0010)

    def test_above_crest_uses_reference_station(self):
        boundary, data_file = _boundary()
        tentative = np.full(211, 20.0)
        tentative[1] = data_file.crest_elevation + 1.0
        tentative[105] = 25.0
        value = boundary.apply(tentative, 10.0, 5.0)
        assert value == tentative[0]
        assert tentative[0] == pytest.approx(25.0 - 210 * 0.0010)


class TestOutflowGradient:
    """Constant gradient up to 16 time units after overtopping, log law after."""

    def test_not_overtopped(self):
        boundary, _ = _boundary()
        assert boundary.outflow_gradient(1000.0, None) == 0.0010

    def test_at_transition_is_constant(self):
        boundary, _ = _boundary()
        assert boundary.outflow_gradient(116.0, 100.0) == 0.0010

    def test_after_transition_is_logarithmic(self):
        boundary, _ = _boundary()
        expected = 0.0004 * math.log(17.0) - 0.0010
        assert boundary.outflow_gradient(117.0, 100.0) == pytest.approx(expected)

    def test_log_law_applied_to_boundary(self):
        boundary, data_file = _boundary()
        tentative = np.full(211, 23.0)
        boundary.apply(tentative, 200.0, 100.0)
        g = 0.0004 * math.log(100.0) - 0.0010
        assert tentative[0] == pytest.approx(23.0 - data_file.node_count * g)
