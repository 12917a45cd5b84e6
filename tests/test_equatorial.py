"""Tests for the equatorial region model."""

import pytest

from regioclima import (
    EquatorialRegionModel,
    Forcing,
    NumericalInstabilityError,
    RegionKindError,
    RegionState,
)


@pytest.fixture
def model():
    return EquatorialRegionModel()


class TestInsolation:
    def test_diurnal_cycle(self, model):
        assert model.insolation(Forcing(time_of_day=0.25)) == pytest.approx(589.0 * 0.8)
        assert model.insolation(Forcing(time_of_day=0.5)) == pytest.approx(589.0 * 0.8 * 0.5)
        assert model.insolation(Forcing(time_of_day=0.75)) == pytest.approx(0.0, abs=1e-9)


class TestSlowFields:
    def test_humidity_relaxes_to_target(self, model, equator):
        model.update(equator, Forcing(), dt=1000.0)
        # 2 * 0.05 moisture + (250 - 200) / 200
        assert equator.relative_humidity == pytest.approx(0.35, abs=1e-4)

    def test_wind_relaxes_to_target(self, model, equator):
        model.update(equator, Forcing(), dt=1000.0)
        # 2 + 0.1 * |250 - 255|
        assert equator.wind_speed_mps == pytest.approx(2.5, abs=1e-4)

    def test_short_step_moves_partway(self, model, equator):
        model.update(equator, Forcing(), dt=1.0)
        assert 0.15 < equator.relative_humidity < 0.35
        assert 2.5 < equator.wind_speed_mps < 5.0

    def test_humidity_ceiling(self, model):
        region = RegionState.equatorial(soil_moisture=0.9, relative_humidity=0.5)
        model.update(region, Forcing(), dt=1000.0)
        assert region.relative_humidity == pytest.approx(0.8, abs=1e-4)

    def test_humidity_floor(self, model):
        region = RegionState.equatorial(surface_temperature_k=100.0, soil_moisture=0.0)
        model.update(region, Forcing(time_of_day=0.75), dt=1000.0)
        assert region.relative_humidity == 0.01

    def test_wind_band(self, model):
        region = RegionState.equatorial(surface_temperature_k=350.0, atmospheric_temperature_k=100.0)
        model.update(region, Forcing(), dt=1000.0)
        assert region.wind_speed_mps == 20.0

    def test_zero_dt_keeps_slow_fields(self, model, equator):
        model.update(equator, Forcing(), dt=0.0)
        assert equator.relative_humidity == pytest.approx(0.15)
        assert equator.wind_speed_mps == pytest.approx(5.0)
        assert equator.surface_temperature_k == pytest.approx(250.0)


class TestUpdate:
    def test_daytime_warms(self, model, equator):
        model.update(equator, Forcing(time_of_day=0.25), dt=86400.0)
        assert equator.surface_temperature_k > 250.0
        surface_change = equator.surface_temperature_k - 250.0
        atmosphere_change = equator.atmospheric_temperature_k - 255.0
        assert atmosphere_change == pytest.approx(0.8 * surface_change)

    def test_extreme_forcing_is_clamped(self, model):
        hot = RegionState.equatorial(surface_area_km2=1000.0)
        model.update(hot, Forcing(greenhouse_effect=1e6), dt=86400.0)
        assert hot.surface_temperature_k == 350.0
        assert hot.atmospheric_temperature_k == 350.0

        cold = RegionState.equatorial(surface_area_km2=1000.0)
        model.update(cold, Forcing(greenhouse_effect=-1e6), dt=86400.0)
        assert cold.surface_temperature_k == 100.0
        assert 0.01 <= cold.relative_humidity <= 1.0
        assert 0.5 <= cold.wind_speed_mps <= 20.0

    def test_rejects_polar_region(self, model, north_pole):
        with pytest.raises(RegionKindError):
            model.update(north_pole, Forcing(), dt=3600.0)

    def test_overflow_raises_instability(self, model, equator):
        with pytest.raises(NumericalInstabilityError):
            model.update(equator, Forcing(greenhouse_effect=1e308), dt=3600.0)

    def test_invalid_params(self):
        with pytest.raises(ValueError):
            EquatorialRegionModel(specific_heat=-1.0)
        with pytest.raises(ValueError):
            EquatorialRegionModel(humidity_rate=-0.1)
