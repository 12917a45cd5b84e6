"""
Reduction of per-region state into planet-wide averages.
"""

from typing import Iterable, Dict, List
from dataclasses import dataclass, asdict
import numpy as np

from regioclima.core.region import RegionState


@dataclass(frozen=True)
class GlobalClimateAverages:
    """
    Area-weighted planet-wide climate snapshot.

    Albedo is averaged over polar regions only and humidity and wind over
    equatorial regions only, each subset weighted by its own area. Ice
    temperature is weighted by ice cap area, so poles without ice do not
    contribute.
    """

    surface_temperature_k: float = 0.0
    atmospheric_temperature_k: float = 0.0
    ice_temperature_k: float = 0.0
    average_albedo: float = 0.0
    average_humidity: float = 0.0
    average_wind_speed: float = 0.0
    total_ice_area_km2: float = 0.0
    total_surface_area_km2: float = 0.0

    @classmethod
    def empty(cls) -> "GlobalClimateAverages":
        """The "no data yet" snapshot: every field zero."""
        return cls()

    @property
    def ice_fraction(self) -> float:
        if self.total_surface_area_km2 <= 0:
            return 0.0
        return self.total_ice_area_km2 / self.total_surface_area_km2

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def _weighted_mean(values: List[float], weights: List[float]) -> float:
    if not weights:
        return 0.0
    return float(np.average(np.asarray(values, dtype=float), weights=np.asarray(weights, dtype=float)))


def aggregate(regions: Iterable[RegionState]) -> GlobalClimateAverages:
    """
    Reduce region states into a ``GlobalClimateAverages`` snapshot.

    Pure and deterministic; regions are only read. An empty input yields
    the zero snapshot rather than an error.

    Parameters
    ----------
    regions : iterable of RegionState
        Regions to reduce.

    Returns
    -------
    GlobalClimateAverages
        Area-weighted means and area totals.
    """
    regions = list(regions)
    if not regions:
        return GlobalClimateAverages.empty()

    polar = [r for r in regions if r.kind.is_polar]
    equatorial = [r for r in regions if not r.kind.is_polar]
    icy = [r for r in polar if r.ice_cap_area_km2 > 0]

    areas = [r.surface_area_km2 for r in regions]
    polar_areas = [r.surface_area_km2 for r in polar]
    equatorial_areas = [r.surface_area_km2 for r in equatorial]

    return GlobalClimateAverages(
        surface_temperature_k=_weighted_mean([r.surface_temperature_k for r in regions], areas),
        atmospheric_temperature_k=_weighted_mean([r.atmospheric_temperature_k for r in regions], areas),
        ice_temperature_k=_weighted_mean([r.ice_temperature_k for r in icy], [r.ice_cap_area_km2 for r in icy]),
        average_albedo=_weighted_mean([r.albedo for r in polar], polar_areas),
        average_humidity=_weighted_mean([r.relative_humidity for r in equatorial], equatorial_areas),
        average_wind_speed=_weighted_mean([r.wind_speed_mps for r in equatorial], equatorial_areas),
        total_ice_area_km2=float(sum(r.ice_cap_area_km2 for r in polar)),
        total_surface_area_km2=float(sum(areas)),
    )

