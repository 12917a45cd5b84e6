"""
Habitability scoring and terraforming phase classification from the
global climate snapshot.
"""

from typing import Dict, Any
from enum import IntEnum

from regioclima.core.aggregator import GlobalClimateAverages


# Optimal human temperature band, 15-25 °C
TEMP_OPTIMAL_MIN_K = 288.15
TEMP_OPTIMAL_MAX_K = 298.15

# Livable band, 0-50 °C
TEMP_LIVABLE_MIN_K = 273.15
TEMP_LIVABLE_MAX_K = 323.15

# Survivable with protection, -20 to 80 °C
TEMP_SURVIVABLE_MIN_K = 253.15
TEMP_SURVIVABLE_MAX_K = 353.15

# Present-day Mars mean temperature; zero terraforming progress
TEMP_MARS_CURRENT_K = 210.0


class TerraformingPhase(IntEnum):
    PRE_TERRAFORMING = 0
    EARLY_WARMING = 1
    ATMOSPHERE_BUILDUP = 2
    OXYGENATION = 3
    STABILIZATION = 4
    HABITABLE = 5

    @property
    def description(self) -> str:
        return _PHASE_DESCRIPTIONS[self]


_PHASE_DESCRIPTIONS = {
    TerraformingPhase.PRE_TERRAFORMING: "Initial warming required",
    TerraformingPhase.EARLY_WARMING: "Greenhouse effect building",
    TerraformingPhase.ATMOSPHERE_BUILDUP: "Atmospheric pressure increasing",
    TerraformingPhase.OXYGENATION: "Oxygen generation in progress",
    TerraformingPhase.STABILIZATION: "Final adjustments for habitability",
    TerraformingPhase.HABITABLE: "Planet is habitable!",
}

# Lower habitability bound (%) of each phase, highest first
_PHASE_THRESHOLDS = (
    (90.0, TerraformingPhase.HABITABLE),
    (70.0, TerraformingPhase.STABILIZATION),
    (40.0, TerraformingPhase.OXYGENATION),
    (20.0, TerraformingPhase.ATMOSPHERE_BUILDUP),
    (5.0, TerraformingPhase.EARLY_WARMING),
)


def temperature_score(temperature_k: float) -> float:
    """
    Temperature habitability score (0-100).

    100 inside the optimal band, 70-100 in the livable band, 20-70 when
    survivable with protection, and at most 20 beyond that.
    """
    if TEMP_OPTIMAL_MIN_K <= temperature_k <= TEMP_OPTIMAL_MAX_K:
        return 100.0

    if TEMP_LIVABLE_MIN_K <= temperature_k <= TEMP_LIVABLE_MAX_K:
        if temperature_k < TEMP_OPTIMAL_MIN_K:
            offset = (TEMP_OPTIMAL_MIN_K - temperature_k) / (TEMP_OPTIMAL_MIN_K - TEMP_LIVABLE_MIN_K)
        else:
            offset = (temperature_k - TEMP_OPTIMAL_MAX_K) / (TEMP_LIVABLE_MAX_K - TEMP_OPTIMAL_MAX_K)
        return 70.0 + (1.0 - offset) * 30.0

    if TEMP_SURVIVABLE_MIN_K <= temperature_k <= TEMP_SURVIVABLE_MAX_K:
        distance = min(abs(temperature_k - TEMP_OPTIMAL_MIN_K), abs(temperature_k - TEMP_OPTIMAL_MAX_K))
        return max(20.0, 70.0 - distance / 80.0 * 50.0)

    celsius = temperature_k - 273.15
    return max(0.0, 20.0 - abs(celsius) / 10.0)


def temperature_progress(temperature_k: float) -> float:
    """Warming progress (0-100) from present-day Mars (210 K) to 288.15 K."""
    if temperature_k <= TEMP_MARS_CURRENT_K:
        return 0.0
    if temperature_k >= TEMP_OPTIMAL_MIN_K:
        return 100.0
    return (temperature_k - TEMP_MARS_CURRENT_K) / (TEMP_OPTIMAL_MIN_K - TEMP_MARS_CURRENT_K) * 100.0


def phase_for(habitability_pct: float) -> TerraformingPhase:
    for threshold, phase in _PHASE_THRESHOLDS:
        if habitability_pct >= threshold:
            return phase
    return TerraformingPhase.PRE_TERRAFORMING


def assess(averages: GlobalClimateAverages) -> Dict[str, Any]:
    """
    Climate-side habitability assessment of a global snapshot.

    Parameters
    ----------
    averages : GlobalClimateAverages
        Snapshot from the engine.

    Returns
    -------
    dict
        ``habitability_pct``, ``warming_progress_pct``, ``phase`` (a
        TerraformingPhase), ``description``, ``ice_fraction`` and
        ``liquid_water_possible``. An empty snapshot scores zero.
    """
    if averages.total_surface_area_km2 <= 0:
        score = 0.0
        progress = 0.0
    else:
        score = temperature_score(averages.surface_temperature_k)
        progress = temperature_progress(averages.surface_temperature_k)

    phase = phase_for(score)
    return {
        "habitability_pct": score,
        "warming_progress_pct": progress,
        "phase": phase,
        "description": phase.description,
        "ice_fraction": averages.ice_fraction,
        "liquid_water_possible": averages.surface_temperature_k > TEMP_LIVABLE_MIN_K,
    }
