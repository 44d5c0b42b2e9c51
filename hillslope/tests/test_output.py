"""Tests for the CSV, console and HDF5 output channels and the entry point."""

import json

import h5py
import numpy as np

from hillslope.data_file import DataFile
from hillslope.main import main
from hillslope.mesh import Mesh
from hillslope.output import ResultWriter
from hillslope.time_scheme import FrozenInputPicard


def _run(tmp_path, verbosity=0, **kwargs):
    params = dict(time_step=0.25, final_time=2.0, report_interval=1.0, results_dir=str(tmp_path))
    params.update(kwargs)
    data_file = DataFile(**params)
    mesh = Mesh(data_file)
    mesh.initialize(verbosity=0)
    scheme = FrozenInputPicard(data_file, mesh)
    with ResultWriter(data_file, mesh, verbosity=verbosity) as writer:
        scheme.solve(writer, verbosity=0)
    return data_file, writer


class TestCsv:
    """Header once, then one row per reported time."""

    def test_rows(self, tmp_path):
        _run(tmp_path)
        lines = (tmp_path / "result.csv").read_text().splitlines()
        assert lines[0] == "Time,0cm,30cm,90cm,140cm,210cm,280cm,350cm"
        assert lines[1] == "0," + ",".join(["12.5"] * 7)
        assert [line.split(",")[0] for line in lines[1:]] == ["0", "1", "2"]

    def test_short_format(self, tmp_path):
        _run(tmp_path)
        row = (tmp_path / "result.csv").read_text().splitlines()[2]
        values = [float(v) for v in row.split(",")[1:]]
        np.testing.assert_allclose(values, 12.5075, rtol=1e-6)
        assert all(len(v.split(".")[-1]) <= 6 for v in row.split(",")[1:])


class TestConsole:
    """Fixed-width table, header printed with the first row."""

    def test_table(self, tmp_path, capsys):
        _run(tmp_path, verbosity=1, save_hdf5=False)
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "".join(f"{s:>8}" for s in
                                 ["Time", "0cm", "30cm", "90cm", "140cm", "210cm", "280cm", "350cm"])
        assert out[1] == "       0" + "  12.500" * 7
        assert out[2].startswith("       1")
        assert len(out[1]) == 64

    def test_silent(self, tmp_path, capsys):
        _run(tmp_path, verbosity=0)
        assert capsys.readouterr().out == ""


class TestHdf5:
    """Full profiles, station series and parameters are saved."""

    def test_contents(self, tmp_path):
        data_file, writer = _run(tmp_path)
        with h5py.File(tmp_path / "solution.h5", 'r') as f:
            assert f['solution/h'].shape == (3, 211)
            np.testing.assert_array_equal(f['solution/time'][:], [0.0, 1.0, 2.0])
            np.testing.assert_array_equal(f['stations/index'][:], [0, 15, 45, 70, 105, 140, 175])
            np.testing.assert_array_equal(f['stations/height'][0], np.full(7, 12.5))
            assert f.attrs['crest_elevation'] == data_file.crest_elevation
            assert np.isnan(f.attrs['overtop_time'])

    def test_disabled(self, tmp_path):
        _run(tmp_path, save_hdf5=False)
        assert not (tmp_path / "solution.h5").exists()


class TestMain:
    """The entry point returns 0 on success and -1 on non-convergence."""

    def _parameters(self, tmp_path, **kwargs):
        params = dict(time_step=0.25, final_time=1.0, report_interval=1.0)
        params.update(kwargs)
        path = tmp_path / "parameters.json"
        path.write_text(json.dumps(params))
        return str(path)

    def test_success(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        assert main([self._parameters(tmp_path)]) == 0
        assert (tmp_path / "results" / "result.csv").exists()
        assert (tmp_path / "results" / "solution.h5").exists()
        assert "Solved" in capsys.readouterr().out

    def test_non_convergence(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        file_name = self._parameters(tmp_path, rain_rate=0.01, tolerance=1e-12, max_iterations=1)
        assert main([file_name]) == -1
        assert "ERROR::TIMESCHEME" in capsys.readouterr().out
