"""Tests for area-weighted aggregation."""

import pytest

from regioclima import GlobalClimateAverages, RegionKind, RegionState, aggregate


class TestAggregate:
    def test_empty_input_is_zero_snapshot(self):
        averages = aggregate([])
        assert averages == GlobalClimateAverages.empty()
        assert all(value == 0.0 for value in averages.to_dict().values())
        assert averages.ice_fraction == 0.0

    def test_default_planet(self, north_pole, south_pole, equator):
        averages = aggregate([north_pole, south_pole, equator])
        total = 2e6 + 2e6 + 5e7

        assert averages.total_surface_area_km2 == pytest.approx(total)
        assert averages.surface_temperature_k == pytest.approx((2e6 * 180 * 2 + 5e7 * 250) / total)
        assert averages.atmospheric_temperature_k == pytest.approx((2e6 * 185 * 2 + 5e7 * 255) / total)
        assert averages.total_ice_area_km2 == pytest.approx(3.2e6)

    def test_subset_fields_use_subset_area(self, north_pole, south_pole, equator):
        averages = aggregate([north_pole, south_pole, equator])
        # Equatorial area must not dilute polar-only averages and vice versa
        assert averages.ice_temperature_k == pytest.approx(170.0)
        assert averages.average_albedo == pytest.approx(0.52)
        assert averages.average_humidity == pytest.approx(0.15)
        assert averages.average_wind_speed == pytest.approx(5.0)

    def test_area_weighting_between_poles(self):
        small = RegionState.polar(RegionKind.NORTH_POLE, surface_area_km2=1e6, surface_temperature_k=150.0)
        large = RegionState.polar(RegionKind.SOUTH_POLE, surface_area_km2=3e6, surface_temperature_k=190.0)
        averages = aggregate([small, large])
        assert averages.surface_temperature_k == pytest.approx(180.0)
        assert averages.ice_temperature_k == pytest.approx(170.0)

    def test_poles_only_have_no_humidity_or_wind(self, north_pole, south_pole):
        averages = aggregate([north_pole, south_pole])
        assert averages.average_humidity == 0.0
        assert averages.average_wind_speed == 0.0
        assert averages.surface_temperature_k == pytest.approx(180.0)

    def test_equator_only_has_no_ice(self, equator):
        averages = aggregate([equator])
        assert averages.ice_temperature_k == 0.0
        assert averages.average_albedo == 0.0
        assert averages.total_ice_area_km2 == 0.0
        assert averages.surface_temperature_k == pytest.approx(250.0)

    def test_inputs_are_not_modified(self, north_pole, equator):
        before = [north_pole.to_dict(), equator.to_dict()]
        aggregate([north_pole, equator])
        assert [north_pole.to_dict(), equator.to_dict()] == before

    def test_ice_fraction(self, north_pole, equator):
        averages = aggregate([north_pole, equator])
        assert averages.ice_fraction == pytest.approx(1.6e6 / 5.2e7)

    def test_ice_temperature_ignores_iceless_poles(self):
        bare = RegionState.polar(RegionKind.NORTH_POLE, ice_fraction=0.0, surface_temperature_k=250.0)
        icy = RegionState.polar(RegionKind.SOUTH_POLE, surface_temperature_k=180.0)
        averages = aggregate([bare, icy])
        assert averages.ice_temperature_k == pytest.approx(170.0)
        assert averages.surface_temperature_k == pytest.approx(215.0)

    def test_no_ice_gives_zero_ice_temperature(self):
        bare = RegionState.polar(RegionKind.NORTH_POLE, ice_fraction=0.0, surface_temperature_k=250.0)
        averages = aggregate([bare])
        assert averages.ice_temperature_k == 0.0
        assert averages.average_albedo == pytest.approx(0.2)

    def test_ice_temperature_weighted_by_ice_area(self):
        full = RegionState.polar(RegionKind.NORTH_POLE, surface_area_km2=1e6, ice_fraction=1.0,
                                 surface_temperature_k=150.0)
        half = RegionState.polar(RegionKind.SOUTH_POLE, surface_area_km2=1e6, ice_fraction=0.5,
                                 surface_temperature_k=190.0)
        averages = aggregate([full, half])
        assert averages.ice_temperature_k == pytest.approx((1e6 * 140.0 + 5e5 * 180.0) / 1.5e6)
