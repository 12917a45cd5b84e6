"""
External forcing supplied to the climate engine every step.

The engine never reads orbital position or atmospheric composition on its
own; callers hand it a ``Forcing`` record. ``OrbitalClock`` is the
built-in provider that advances the seasonal and diurnal phase with
simulated time, and ``greenhouse_from_composition`` turns gas partial
pressures into the scalar greenhouse term.
"""

from typing import Optional, Dict, Any
from dataclasses import dataclass, replace, asdict
import logging
import numpy as np

from regioclima.core.physics import MARTIAN_YEAR_SOLS, MARTIAN_SOL_SECONDS

logger = logging.getLogger(__name__)


# Mean solar constant at Mars (W/m²)
MARS_SOLAR_CONSTANT = 589.0

# Present-day mean surface pressure (kPa)
MARS_SURFACE_PRESSURE = 0.6


@dataclass(frozen=True)
class Forcing:
    """
    Shared forcing for one simulation step.

    Attributes
    ----------
    solar_constant : float
        Instantaneous stellar flux at the planet (W/m²).
    day_of_year : float
        Position in the seasonal cycle, in sols [0, 668.6).
    time_of_day : float
        Fraction of the sol [0, 1); 0 = midnight, 0.5 = noon.
    atmospheric_pressure : float
        Ambient surface pressure (kPa).
    greenhouse_effect : float
        Scalar warming contribution from atmospheric composition.
    """

    solar_constant: float = MARS_SOLAR_CONSTANT
    day_of_year: float = 0.0
    time_of_day: float = 0.5
    atmospheric_pressure: float = MARS_SURFACE_PRESSURE
    greenhouse_effect: float = 0.0

    def __post_init__(self):
        for name, value in asdict(self).items():
            if not np.isfinite(value):
                raise ValueError(f"Forcing.{name} must be finite, got {value}")

    def with_changes(self, **changes: float) -> "Forcing":
        """Copy with some fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, values: Optional[Dict[str, Any]]) -> "Forcing":
        if not values:
            return cls()
        return cls(**{key: float(value) for key, value in values.items()})


class OrbitalClock:
    """
    Advances seasonal and diurnal phase with simulated time.

    One sol is 24.66 h; the year is 668.6 sols. Both phases wrap, so the
    clock can run indefinitely.

    Parameters
    ----------
    solar_constant : float, optional
        Stellar flux (W/m²). Default is 589.
    atmospheric_pressure : float, optional
        Surface pressure (kPa). Default is 0.6.
    greenhouse_effect : float, optional
        Greenhouse scalar. Default is 0.
    start_day : float, optional
        Initial day of year (sols). Default is 0.
    start_time : float, optional
        Initial time of day (0-1). Default is 0.
    """

    def __init__(
        self,
        solar_constant: float = MARS_SOLAR_CONSTANT,
        atmospheric_pressure: float = MARS_SURFACE_PRESSURE,
        greenhouse_effect: float = 0.0,
        start_day: float = 0.0,
        start_time: float = 0.0,
    ):
        self.solar_constant = solar_constant
        self.atmospheric_pressure = atmospheric_pressure
        self.greenhouse_effect = greenhouse_effect
        self.day_of_year = start_day % MARTIAN_YEAR_SOLS
        self.time_of_day = start_time % 1.0
        self.elapsed_seconds = 0.0

    def forcing(self) -> Forcing:
        """Forcing at the clock's current position."""
        return Forcing(
            solar_constant=self.solar_constant,
            day_of_year=self.day_of_year,
            time_of_day=self.time_of_day,
            atmospheric_pressure=self.atmospheric_pressure,
            greenhouse_effect=self.greenhouse_effect,
        )

    def advance(self, dt: float) -> Forcing:
        """Move the clock forward by ``dt`` seconds and return the new forcing."""
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        sols = dt / MARTIAN_SOL_SECONDS
        self.elapsed_seconds += dt
        self.day_of_year = (self.day_of_year + sols) % MARTIAN_YEAR_SOLS
        self.time_of_day = (self.time_of_day + sols) % 1.0
        return self.forcing()

    def __repr__(self) -> str:
        return (f"OrbitalClock(day={self.day_of_year:.2f}, time={self.time_of_day:.3f}, "
                f"S={self.solar_constant}, P={self.atmospheric_pressure}, "
                f"GH={self.greenhouse_effect})")


def greenhouse_from_composition(
    co2_pressure: float,
    ghg_pressure: float = 0.0,
    co2_efficiency: float = 1.0,
    h2o_efficiency: float = 2.8,
    max_warming: float = 60.0,
) -> float:
    """
    Greenhouse scalar from atmospheric composition.

    CO2 responds logarithmically, water vapour contributes a small
    constant share and engineered greenhouse gases a linear one; the sum
    is capped to prevent runaway warming.

    Parameters
    ----------
    co2_pressure : float
        CO2 partial pressure (kPa).
    ghg_pressure : float, optional
        Engineered greenhouse gas partial pressure (kPa).
    co2_efficiency : float, optional
        CO2 efficiency factor. Default is 1.0.
    h2o_efficiency : float, optional
        Water vapour efficiency factor. Default is 2.8.
    max_warming : float, optional
        Upper cap on the result. Default is 60.

    Returns
    -------
    float
        Greenhouse scalar passed as ``Forcing.greenhouse_effect``.
    """
    if co2_pressure < 0 or ghg_pressure < 0:
        raise ValueError(
            f"Partial pressures must be non-negative, got CO2={co2_pressure}, GHG={ghg_pressure}"
        )

    co2_effect = co2_efficiency * float(np.log1p(co2_pressure * 100.0)) * 5.0
    h2o_effect = h2o_efficiency * 0.01
    ghg_effect = ghg_pressure * 0.1

    total = co2_effect + h2o_effect + ghg_effect
    logger.debug(f"Greenhouse: CO2={co2_effect:.2f}, H2O={h2o_effect:.3f}, "
                 f"GHG={ghg_effect:.2f}, total={total:.2f} (cap {max_warming})")
    return min(total, max_warming)
