"""Tests for physics helpers, forcing records and the orbital clock."""

import numpy as np
import pytest

from regioclima import Forcing, NumericalInstabilityError, OrbitalClock, greenhouse_from_composition
from regioclima.core.physics import (
    MARTIAN_SOL_SECONDS,
    MARTIAN_YEAR_SOLS,
    clamp,
    emitted_flux,
    ensure_finite,
    relax,
    seasonal_phase,
)


class TestPhysics:
    def test_emitted_flux(self):
        assert emitted_flux(200.0) == pytest.approx(0.95 * 5.67e-8 * 200.0**4)

    def test_seasonal_phase_hemispheres_are_opposite(self):
        quarter = MARTIAN_YEAR_SOLS / 4
        assert seasonal_phase(quarter) == pytest.approx(1.0)
        assert seasonal_phase(quarter, offset=0.5) == pytest.approx(-1.0)

    def test_relax_reaches_target_for_long_steps(self):
        assert relax(0.1, 0.5, rate=0.1, dt=1e4) == pytest.approx(0.5)

    def test_relax_does_not_overshoot(self):
        value = relax(0.1, 0.5, rate=0.1, dt=5.0)
        assert 0.1 < value < 0.5

    def test_relax_zero_dt_is_identity(self):
        assert relax(0.3, 0.9, rate=0.05, dt=0.0) == pytest.approx(0.3)

    def test_clamp(self):
        assert clamp(400.0, (100.0, 350.0)) == 350.0
        assert clamp(50.0, (100.0, 350.0)) == 100.0
        assert clamp(200.0, (100.0, 350.0)) == 200.0

    def test_ensure_finite_raises(self):
        ensure_finite("ok", a=1.0, b=-2.0)
        with pytest.raises(NumericalInstabilityError):
            ensure_finite("test", a=1.0, b=np.nan)
        with pytest.raises(NumericalInstabilityError):
            ensure_finite("test", a=np.inf)

    def test_instability_is_arithmetic_error(self):
        assert issubclass(NumericalInstabilityError, ArithmeticError)


class TestForcing:
    def test_defaults(self):
        forcing = Forcing()
        assert forcing.solar_constant == 589.0
        assert forcing.atmospheric_pressure == 0.6
        assert forcing.greenhouse_effect == 0.0

    def test_non_finite_rejected(self):
        with pytest.raises(ValueError):
            Forcing(solar_constant=np.nan)
        with pytest.raises(ValueError):
            Forcing(greenhouse_effect=np.inf)

    def test_with_changes_copies(self):
        forcing = Forcing()
        changed = forcing.with_changes(greenhouse_effect=3.0)
        assert changed.greenhouse_effect == 3.0
        assert forcing.greenhouse_effect == 0.0

    def test_from_dict(self):
        forcing = Forcing.from_dict({"solar_constant": "600", "day_of_year": 10})
        assert forcing.solar_constant == 600.0
        assert forcing.day_of_year == 10.0
        assert Forcing.from_dict(None) == Forcing()


class TestOrbitalClock:
    def test_advance_one_sol(self):
        clock = OrbitalClock(start_day=10.0, start_time=0.25)
        forcing = clock.advance(MARTIAN_SOL_SECONDS)
        assert forcing.day_of_year == pytest.approx(11.0)
        assert forcing.time_of_day == pytest.approx(0.25)
        assert clock.elapsed_seconds == MARTIAN_SOL_SECONDS

    def test_half_sol_moves_time_of_day(self):
        clock = OrbitalClock(start_time=0.75)
        forcing = clock.advance(MARTIAN_SOL_SECONDS / 2)
        assert forcing.time_of_day == pytest.approx(0.25)

    def test_year_wraps(self):
        clock = OrbitalClock(start_day=668.0)
        forcing = clock.advance(MARTIAN_SOL_SECONDS)
        assert forcing.day_of_year == pytest.approx(0.4)

    def test_start_day_is_wrapped(self):
        clock = OrbitalClock(start_day=MARTIAN_YEAR_SOLS + 5.0)
        assert clock.day_of_year == pytest.approx(5.0)

    def test_negative_dt_rejected(self):
        with pytest.raises(ValueError):
            OrbitalClock().advance(-1.0)

    def test_forcing_carries_constants(self):
        clock = OrbitalClock(solar_constant=600.0, atmospheric_pressure=1.2, greenhouse_effect=4.0)
        forcing = clock.forcing()
        assert forcing.solar_constant == 600.0
        assert forcing.atmospheric_pressure == 1.2
        assert forcing.greenhouse_effect == 4.0


class TestGreenhouse:
    def test_water_vapour_baseline(self):
        assert greenhouse_from_composition(0.0) == pytest.approx(0.028)

    def test_co2_is_logarithmic(self):
        expected = np.log1p(57.0) * 5.0 + 0.028
        assert greenhouse_from_composition(0.57) == pytest.approx(expected)

    def test_engineered_gases_add_linearly(self):
        base = greenhouse_from_composition(0.5)
        assert greenhouse_from_composition(0.5, ghg_pressure=10.0) == pytest.approx(base + 1.0)

    def test_cap(self):
        assert greenhouse_from_composition(10.0, ghg_pressure=100.0, max_warming=10.0) == 10.0

    def test_negative_pressure_rejected(self):
        with pytest.raises(ValueError):
            greenhouse_from_composition(-0.1)
        with pytest.raises(ValueError):
            greenhouse_from_composition(0.5, ghg_pressure=-1.0)
