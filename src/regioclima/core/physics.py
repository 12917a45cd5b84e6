"""
Shared physical relations for the regional climate models.

Both region archetypes integrate the same surface energy balance:

    C dT/dt = S_abs - εσT⁴ + G

    S_abs : absorbed insolation (W/m²)
    εσT⁴  : Stefan-Boltzmann emission
    G     : greenhouse contribution (W/m²)
    C     : heat capacity of the region (area · depth · specific heat)

and relax their slow atmospheric fields (humidity, wind) exponentially
toward a target. The helpers here are pure functions over floats so the
models stay readable and the formulas can be tested in isolation.
"""

from typing import Dict, Any, Tuple
import logging
import numpy as np

from regioclima.utils.logging import log_calculation_issue

logger = logging.getLogger(__name__)


# Stefan-Boltzmann constant (W m⁻² K⁻⁴)
STEFAN_BOLTZMANN = 5.67e-8

# Broadband surface emissivity of Martian regolith and ice
EMISSIVITY = 0.95

# Orbital timing (sols)
MARTIAN_YEAR_SOLS = 668.6
MARTIAN_SOL_SECONDS = 24.66 * 3600.0

# W/m² of forcing per unit of the upstream greenhouse scalar
GREENHOUSE_FLUX_GAIN = 5.0


class NumericalInstabilityError(ArithmeticError):
    """Raised when a model produces NaN or Inf before clamping."""


def emitted_flux(temperature_k: float, emissivity: float = EMISSIVITY) -> float:
    """
    Thermal emission of a grey body.

    Parameters
    ----------
    temperature_k : float
        Surface temperature in Kelvin.
    emissivity : float, optional
        Broadband emissivity. Default is 0.95.

    Returns
    -------
    float
        Emitted flux in W/m².
    """
    return emissivity * STEFAN_BOLTZMANN * temperature_k**4


def seasonal_phase(day_of_year: float, offset: float = 0.0) -> float:
    """Seasonal sine for a hemisphere; offset 0.5 flips the season."""
    return float(np.sin(2.0 * np.pi * (day_of_year / MARTIAN_YEAR_SOLS + offset)))


def diurnal_phase(time_of_day: float) -> float:
    """Diurnal sine over one sol, time_of_day in [0, 1)."""
    return float(np.sin(2.0 * np.pi * time_of_day))


def temperature_change(net_flux: float, dt: float, heat_capacity: float) -> float:
    """Explicit-Euler temperature increment ΔT = F·dt / C."""
    return net_flux * dt / heat_capacity


def relax(value: float, target: float, rate: float, dt: float) -> float:
    """
    Exponential relaxation of ``value`` toward ``target``.

    Uses the exact solution of dv/dt = rate · (target - v) over one step,
    so large ``dt`` saturates at the target instead of overshooting.
    """
    return target + (value - target) * float(np.exp(-rate * dt))


def clamp(value: float, bounds: Tuple[float, float]) -> float:
    """Clamp ``value`` into the closed interval ``bounds``."""
    low, high = bounds
    return float(min(max(value, low), high))


def ensure_finite(context: str, **values: float) -> None:
    """
    Check intermediate quantities for NaN or Inf.

    Non-finite values indicate a modeling defect rather than a physical
    state, so they are logged and raised instead of being clamped.

    Raises
    ------
    NumericalInstabilityError
        If any of the given values is not finite.
    """
    bad: Dict[str, Any] = {
        name: value for name, value in values.items() if not np.isfinite(value)
    }
    if not bad:
        return

    log_calculation_issue(
        "Non-finite value",
        f"{context}: {', '.join(sorted(bad))}",
        {"values": values},
    )
    raise NumericalInstabilityError(f"Non-finite value in {context}: {bad}")
