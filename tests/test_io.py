"""Tests for forcing input and result writers."""

import netCDF4
import numpy as np
import pandas as pd
import pytest

from regioclima import Forcing
from regioclima.io import create_forcing_function, load_forcing_csv


@pytest.fixture
def results(engine, noon_forcing):
    return engine.run(6, 3600.0, forcing=noon_forcing, show_progress=False,
                      scenario_key="custom", scenario_info={"name": "Test"})


@pytest.fixture
def forcing_csv(tmp_path):
    path = tmp_path / "forcing.csv"
    path.write_text(
        "# forcing series\n"
        "time_s,solar_constant,day_of_year,time_of_day,pressure,greenhouse\n"
        "3600,600.0,0.4,0.9,0.7,4.0\n"
        "0,500.0,668.0,0.1,0.5,2.0\n"
    )
    return path


class TestLoadForcing:
    def test_sorted_by_time(self, forcing_csv):
        table = load_forcing_csv(forcing_csv)
        assert list(table["time_s"]) == [0.0, 3600.0]
        assert list(table.columns) == [
            "time_s", "solar_constant", "day_of_year", "time_of_day", "pressure", "greenhouse",
        ]

    def test_aliases_and_missing_columns(self, tmp_path):
        path = tmp_path / "aliases.csv"
        path.write_text("Time,S0,greenhouse_effect\n0,590,1.0\n100,591,2.0\n")
        table = load_forcing_csv(path)
        assert list(table["solar_constant"]) == [590.0, 591.0]
        assert list(table["greenhouse"]) == [1.0, 2.0]
        assert np.all(table["pressure"] == Forcing().atmospheric_pressure)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_forcing_csv(tmp_path / "missing.csv")

    def test_missing_time_column(self, tmp_path):
        path = tmp_path / "no_time.csv"
        path.write_text("solar_constant\n590\n")
        with pytest.raises(ValueError):
            load_forcing_csv(path)

    def test_header_only(self, tmp_path):
        path = tmp_path / "header.csv"
        path.write_text("time_s,greenhouse\n")
        with pytest.raises(ValueError, match="no data rows"):
            load_forcing_csv(path)

    def test_duplicate_times(self, tmp_path):
        path = tmp_path / "dupes.csv"
        path.write_text("time_s,greenhouse\n0,1\n0,2\n")
        with pytest.raises(ValueError):
            load_forcing_csv(path)

    def test_non_finite_values(self, tmp_path):
        path = tmp_path / "nan.csv"
        path.write_text("time_s,greenhouse\n0,1\n10,\n")
        with pytest.raises(ValueError):
            load_forcing_csv(path)


class TestForcingFunction:
    def test_linear_interpolation(self, forcing_csv):
        forcing = create_forcing_function(load_forcing_csv(forcing_csv), dt=1800.0)
        midpoint = forcing(1)
        assert midpoint.solar_constant == pytest.approx(550.0)
        assert midpoint.atmospheric_pressure == pytest.approx(0.6)
        assert midpoint.greenhouse_effect == pytest.approx(3.0)

    def test_phases_interpolate_across_wrap(self, forcing_csv):
        forcing = create_forcing_function(load_forcing_csv(forcing_csv), dt=1800.0)
        midpoint = forcing(1)
        assert midpoint.day_of_year == pytest.approx(668.5)
        # 0.1 -> 0.9 crosses midnight backwards
        assert min(midpoint.time_of_day, 1.0 - midpoint.time_of_day) == pytest.approx(0.0, abs=1e-9)

    def test_holds_end_values(self, forcing_csv):
        forcing = create_forcing_function(load_forcing_csv(forcing_csv), dt=1800.0)
        assert forcing(100).solar_constant == pytest.approx(600.0)

    def test_single_row_is_constant(self, tmp_path):
        path = tmp_path / "single.csv"
        path.write_text("time_s,solar_constant\n0,610\n")
        forcing = create_forcing_function(load_forcing_csv(path), dt=3600.0)
        assert forcing(0) == forcing(50)
        assert forcing(0).solar_constant == 610.0

    def test_drives_engine(self, engine, forcing_csv):
        forcing = create_forcing_function(load_forcing_csv(forcing_csv), dt=1800.0)
        results = engine.run(3, 1800.0, forcing=forcing, show_progress=False)
        assert list(results.solar_constant) == pytest.approx([500.0, 550.0, 600.0])


class TestWriters:
    def test_dataframe_columns(self, results):
        df = results.to_dataframe()
        assert len(df) == 6
        for column in (
            "step", "time_s", "time_sols", "solar_constant", "greenhouse_effect",
            "surface_temperature_k", "average_humidity", "total_ice_area_km2", "ice_fraction",
            "north_pole_surface_temperature_k", "equatorial_surface_temperature_k",
            "south_pole_ice_area_km2",
        ):
            assert column in df.columns
        assert "equatorial_ice_area_km2" not in df.columns

    def test_csv(self, results, tmp_path):
        path = tmp_path / "out" / "run.csv"
        results.to_csv(path)
        df = pd.read_csv(path)
        assert len(df) == 6
        assert df["step"].tolist() == [1, 2, 3, 4, 5, 6]
        assert df["time_s"].iloc[-1] == pytest.approx(21600.0)

    def test_netcdf(self, results, tmp_path):
        path = tmp_path / "run.nc"
        results.to_netcdf(path)
        with netCDF4.Dataset(path) as ds:
            assert ds.dimensions["time"].size == 6
            assert ds.dimensions["region"].size == 3
            assert ds.dimensions["polar_region"].size == 2
            assert ds.scenario == "Test"
            np.testing.assert_allclose(ds.variables["surface_temperature_k"][:], results.surface_temperature_k)
            assert ds.variables["region_surface_temperature"].shape == (3, 6)

    def test_png(self, results, tmp_path):
        path = tmp_path / "run.png"
        results.to_png(path, dpi=50)
        assert path.exists()
        assert path.stat().st_size > 0

    def test_repr_and_summary(self, results):
        assert "Test" in repr(results)
        summary = results.summary()
        assert summary["n_steps"] == 6
        assert summary["initial_ice_area_km2"] == pytest.approx(3.2e6)
