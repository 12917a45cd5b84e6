"""Tests for habitability scoring, scenarios and sensitivity sweeps."""

import numpy as np
import pytest

from regioclima import Forcing, GlobalClimateAverages, get_scenario, list_scenarios
from regioclima.analysis import greenhouse_sensitivity
from regioclima.analysis.habitability import (
    TerraformingPhase,
    assess,
    phase_for,
    temperature_progress,
    temperature_score,
)
from regioclima.scenarios import clock_for, forcing_for, greenhouse_for
from regioclima.utils.config import DEFAULT_CONFIG


class TestTemperatureScore:
    def test_optimal_band(self):
        assert temperature_score(293.0) == 100.0

    def test_livable_band(self):
        assert temperature_score(280.0) == pytest.approx(70.0 + (1.0 - 8.15 / 15.0) * 30.0)

    def test_survivable_band(self):
        assert temperature_score(260.0) == pytest.approx(70.0 - 28.15 / 80.0 * 50.0)

    def test_extreme_cold(self):
        assert temperature_score(200.0) == pytest.approx(20.0 - 73.15 / 10.0)
        assert temperature_score(100.0) < temperature_score(200.0)

    def test_score_never_negative(self):
        assert temperature_score(1000.0) == 0.0

    def test_progress(self):
        assert temperature_progress(200.0) == 0.0
        assert temperature_progress(300.0) == 100.0
        assert temperature_progress((210.0 + 288.15) / 2) == pytest.approx(50.0)


class TestPhase:
    def test_thresholds(self):
        assert phase_for(0.0) is TerraformingPhase.PRE_TERRAFORMING
        assert phase_for(4.9) is TerraformingPhase.PRE_TERRAFORMING
        assert phase_for(5.0) is TerraformingPhase.EARLY_WARMING
        assert phase_for(25.0) is TerraformingPhase.ATMOSPHERE_BUILDUP
        assert phase_for(50.0) is TerraformingPhase.OXYGENATION
        assert phase_for(75.0) is TerraformingPhase.STABILIZATION
        assert phase_for(95.0) is TerraformingPhase.HABITABLE

    def test_description(self):
        assert TerraformingPhase.HABITABLE.description == "Planet is habitable!"


class TestAssess:
    def test_empty_snapshot_scores_zero(self):
        result = assess(GlobalClimateAverages.empty())
        assert result["habitability_pct"] == 0.0
        assert result["phase"] is TerraformingPhase.PRE_TERRAFORMING
        assert not result["liquid_water_possible"]

    def test_present_day_mars(self, engine):
        result = assess(engine.snapshot())
        assert 0.0 < result["habitability_pct"] < 20.0
        assert result["ice_fraction"] == pytest.approx(3.2e6 / 5.4e7)

    def test_warm_planet(self):
        averages = GlobalClimateAverages(surface_temperature_k=290.0, total_surface_area_km2=1.0)
        result = assess(averages)
        assert result["phase"] is TerraformingPhase.HABITABLE
        assert result["liquid_water_possible"]


class TestScenarios:
    def test_list(self):
        assert list_scenarios() == ["realistic", "game_balanced", "debug", "polar_winter"]

    def test_key_normalisation(self):
        assert get_scenario("Game-Balanced")["name"] == "Game Balanced"

    def test_unknown_scenario(self):
        with pytest.raises(KeyError):
            get_scenario("venus")

    def test_realistic_greenhouse(self):
        expected = np.log1p(57.0) * 5.0 + 0.028
        assert greenhouse_for(get_scenario("realistic")) == pytest.approx(expected)

    def test_forcing_for_polar_winter(self):
        forcing = forcing_for("polar_winter")
        assert forcing.day_of_year == 400.0
        assert forcing.time_of_day == 0.5

    def test_clock_for(self):
        clock = clock_for("debug")
        assert clock.greenhouse_effect == pytest.approx(greenhouse_for(get_scenario("debug")))
        assert clock.day_of_year == 0.0

    def test_start_day_override(self):
        assert clock_for("polar_winter", start_day=100.0).day_of_year == 100.0
        assert forcing_for("realistic", start_day=50.0).day_of_year == 50.0
        assert forcing_for("polar_winter", start_day=None).day_of_year == 400.0


class TestSensitivity:
    def test_warming_increases_with_greenhouse(self):
        results = greenhouse_sensitivity(
            DEFAULT_CONFIG,
            Forcing(),
            [0.0, 20.0, 40.0],
            n_steps=5,
            dt=86400.0,
            show_progress=False,
        )
        assert [gh for gh, _ in results] == [0.0, 20.0, 40.0]
        finals = [r.final.surface_temperature_k for _, r in results]
        assert finals == sorted(finals)

    def test_failed_sample_is_none(self):
        results = greenhouse_sensitivity(
            DEFAULT_CONFIG,
            Forcing(),
            [1e308],
            n_steps=2,
            dt=3600.0,
            show_progress=False,
        )
        assert results == [(1e308, None)]
