"""
Per-region physical state.

A planet is represented by a small, fixed collection of regions. Each
region carries a ``kind`` tag that selects which model updates it; the
fields a kind does not model stay ``None`` and are rejected if supplied.
"""

from typing import Optional, Dict, Any, Tuple
from dataclasses import dataclass, field
from enum import Enum
import logging
import numpy as np

from regioclima.core.physics import clamp

logger = logging.getLogger(__name__)


class RegionKind(str, Enum):
    """Closed set of region archetypes."""

    NORTH_POLE = "north_pole"
    SOUTH_POLE = "south_pole"
    EQUATORIAL = "equatorial"

    @property
    def is_polar(self) -> bool:
        return self is not RegionKind.EQUATORIAL

    @property
    def label(self) -> str:
        return {
            RegionKind.NORTH_POLE: "North Pole",
            RegionKind.SOUTH_POLE: "South Pole",
            RegionKind.EQUATORIAL: "Equator",
        }[self]


class RegionKindError(ValueError):
    """A field or model does not apply to the region's kind."""


POLAR_ONLY_FIELDS = ("ice_temperature_k", "ice_cap_area_km2", "albedo")
EQUATORIAL_ONLY_FIELDS = ("relative_humidity", "wind_speed_mps", "soil_moisture")

# Ice melts above this; also the ice temperature ceiling.
ICE_MELTING_POINT_K = 273.0


@dataclass(frozen=True)
class ClampBands:
    """
    Physically plausible bands every update is clamped into.

    Attributes
    ----------
    temperature : tuple
        Generic (min, max) temperature band in Kelvin.
    polar_temperature_max : float
        Upper cap on polar surface and atmospheric temperature.
    ice_temperature_max : float
        Upper cap on ice temperature.
    humidity : tuple
        Relative humidity band.
    wind_speed : tuple
        Wind speed band in m/s.
    albedo : tuple
        Albedo band.
    """

    temperature: Tuple[float, float] = (100.0, 350.0)
    polar_temperature_max: float = 280.0
    ice_temperature_max: float = ICE_MELTING_POINT_K
    humidity: Tuple[float, float] = (0.01, 1.0)
    wind_speed: Tuple[float, float] = (0.5, 20.0)
    albedo: Tuple[float, float] = (0.0, 1.0)

    def __post_init__(self):
        for name in ("temperature", "humidity", "wind_speed", "albedo"):
            low, high = getattr(self, name)
            if not low <= high:
                raise ValueError(f"Clamp band '{name}' is inverted: ({low}, {high})")
        if self.humidity[0] < 0 or self.humidity[1] > 1:
            raise ValueError(f"Humidity band must lie within [0, 1], got {self.humidity}")

    def temperature_band(self, kind: RegionKind) -> Tuple[float, float]:
        """Surface/atmosphere band for a region kind."""
        low, high = self.temperature
        if kind.is_polar:
            high = min(high, self.polar_temperature_max)
        return (low, high)

    def ice_band(self) -> Tuple[float, float]:
        return (self.temperature[0], min(self.temperature[1], self.ice_temperature_max))

    @classmethod
    def from_dict(cls, values: Optional[Dict[str, Any]]) -> "ClampBands":
        """Build from a config section, converting YAML lists to tuples."""
        if not values:
            return cls()
        kwargs = {
            key: tuple(value) if isinstance(value, (list, tuple)) else value
            for key, value in values.items()
        }
        return cls(**kwargs)


DEFAULT_BANDS = ClampBands()


@dataclass
class RegionState:
    """
    Physical state owned by one geographic region.

    Geography (kind, latitude, area) is fixed at construction; the
    thermodynamic fields are mutated in place by the region's model on
    every step.

    Attributes
    ----------
    kind : RegionKind
        Region archetype.
    latitude_degrees : float
        Latitude; positive north. Poles carry their hemisphere in the sign.
    surface_area_km2 : float
        Region area in km², strictly positive.
    surface_temperature_k : float
        Regolith / ground temperature (K).
    atmospheric_temperature_k : float
        Near-surface air temperature (K).
    ice_temperature_k : float, optional
        Polar only. Ice cap temperature (K).
    ice_cap_area_km2 : float, optional
        Polar only. Area covered by ice (km²).
    albedo : float, optional
        Polar only. Surface reflectivity, derived from ice fraction.
    relative_humidity : float, optional
        Equatorial only. Relative humidity (0-1).
    wind_speed_mps : float, optional
        Equatorial only. Surface wind speed (m/s).
    soil_moisture : float, optional
        Equatorial only. Soil moisture fraction feeding the humidity target.
    bands : ClampBands
        Bands the initial values must lie in. Default is ``DEFAULT_BANDS``.
    """

    kind: RegionKind
    latitude_degrees: float
    surface_area_km2: float
    surface_temperature_k: float
    atmospheric_temperature_k: float
    ice_temperature_k: Optional[float] = None
    ice_cap_area_km2: Optional[float] = None
    albedo: Optional[float] = None
    relative_humidity: Optional[float] = None
    wind_speed_mps: Optional[float] = None
    soil_moisture: Optional[float] = None
    name: str = field(default="", compare=False)
    bands: ClampBands = field(default=DEFAULT_BANDS, compare=False, repr=False)

    def __post_init__(self):
        self.kind = RegionKind(self.kind)
        if not self.name:
            self.name = self.kind.value
        self._validate()

    def _validate(self) -> None:
        """Reject degenerate geography and kind/field mismatches."""
        area = self.surface_area_km2
        if not np.isfinite(area) or area <= 0:
            raise ValueError(f"surface_area_km2 must be positive and finite, got {area}")

        if not -90.0 <= self.latitude_degrees <= 90.0:
            raise ValueError(f"latitude_degrees must be within [-90, 90], got {self.latitude_degrees}")

        if self.kind is RegionKind.NORTH_POLE and self.latitude_degrees < 0:
            raise RegionKindError(f"North pole latitude must be >= 0, got {self.latitude_degrees}")
        if self.kind is RegionKind.SOUTH_POLE and self.latitude_degrees > 0:
            raise RegionKindError(f"South pole latitude must be <= 0, got {self.latitude_degrees}")

        if self.kind.is_polar:
            required, forbidden = POLAR_ONLY_FIELDS, EQUATORIAL_ONLY_FIELDS
        else:
            required, forbidden = EQUATORIAL_ONLY_FIELDS, POLAR_ONLY_FIELDS

        wrong = [name for name in forbidden if getattr(self, name) is not None]
        if wrong:
            raise RegionKindError(f"{self.kind.value} region does not model: {', '.join(wrong)}")
        missing = [name for name in required if getattr(self, name) is None]
        if missing:
            raise RegionKindError(f"{self.kind.value} region requires: {', '.join(missing)}")

        self.check_bands(self.bands)

    def check_bands(self, bands: ClampBands) -> None:
        """
        Check every mutable field against ``bands``.

        Raises
        ------
        ValueError
            If a value is not finite or lies outside its band.
        """
        limits = {
            "surface_temperature_k": bands.temperature_band(self.kind),
            "atmospheric_temperature_k": bands.temperature_band(self.kind),
        }
        if self.kind.is_polar:
            limits["ice_temperature_k"] = bands.ice_band()
            limits["ice_cap_area_km2"] = (0.0, self.surface_area_km2)
            limits["albedo"] = bands.albedo
        else:
            limits["relative_humidity"] = bands.humidity
            limits["wind_speed_mps"] = bands.wind_speed
            limits["soil_moisture"] = (0.0, 1.0)

        for name, (low, high) in limits.items():
            value = getattr(self, name)
            if not np.isfinite(value) or not low <= value <= high:
                raise ValueError(f"{self.name}: {name} must be within [{low}, {high}], got {value}")

    # =========================================================================
    # Factories
    # =========================================================================

    @classmethod
    def polar(
        cls,
        kind: RegionKind,
        latitude: float = 85.0,
        surface_area_km2: float = 2_000_000.0,
        ice_fraction: float = 0.8,
        surface_temperature_k: float = 180.0,
        atmospheric_temperature_k: Optional[float] = None,
        ice_temperature_k: Optional[float] = None,
        name: str = "",
        bands: ClampBands = DEFAULT_BANDS,
    ) -> "RegionState":
        """
        Create a polar region with plausible initial conditions.

        ``latitude`` is given as a magnitude; the hemisphere sign follows
        from ``kind``. Albedo is derived from the ice fraction. Derived air and ice temperatures are
        clamped into ``bands``; explicit values are checked against them.
        """
        kind = RegionKind(kind)
        if not kind.is_polar:
            raise RegionKindError(f"RegionState.polar() needs a polar kind, got {kind.value}")
        if not 0.0 <= ice_fraction <= 1.0:
            raise ValueError(f"ice_fraction must be within [0, 1], got {ice_fraction}")

        signed_latitude = abs(latitude) if kind is RegionKind.NORTH_POLE else -abs(latitude)
        if atmospheric_temperature_k is None:
            atmospheric_temperature_k = clamp(surface_temperature_k + 5.0, bands.temperature_band(kind))
        if ice_temperature_k is None:
            ice_temperature_k = clamp(surface_temperature_k - 10.0, bands.ice_band())

        return cls(
            kind=kind,
            latitude_degrees=signed_latitude,
            surface_area_km2=surface_area_km2,
            surface_temperature_k=surface_temperature_k,
            atmospheric_temperature_k=atmospheric_temperature_k,
            ice_temperature_k=ice_temperature_k,
            ice_cap_area_km2=surface_area_km2 * ice_fraction,
            albedo=0.2 + 0.4 * ice_fraction,
            name=name,
            bands=bands,
        )

    @classmethod
    def equatorial(
        cls,
        latitude: float = 0.0,
        surface_area_km2: float = 50_000_000.0,
        surface_temperature_k: float = 250.0,
        atmospheric_temperature_k: Optional[float] = None,
        relative_humidity: float = 0.15,
        wind_speed_mps: float = 5.0,
        soil_moisture: float = 0.05,
        name: str = "",
        bands: ClampBands = DEFAULT_BANDS,
    ) -> "RegionState":
        """Create an equatorial band with dry, Mars-like initial conditions."""
        if atmospheric_temperature_k is None:
            atmospheric_temperature_k = clamp(
                surface_temperature_k + 5.0, bands.temperature_band(RegionKind.EQUATORIAL)
            )
        return cls(
            kind=RegionKind.EQUATORIAL,
            latitude_degrees=latitude,
            surface_area_km2=surface_area_km2,
            surface_temperature_k=surface_temperature_k,
            atmospheric_temperature_k=atmospheric_temperature_k,
            relative_humidity=relative_humidity,
            wind_speed_mps=wind_speed_mps,
            soil_moisture=soil_moisture,
            name=name,
            bands=bands,
        )

    @classmethod
    def from_dict(cls, values: Dict[str, Any], bands: ClampBands = DEFAULT_BANDS) -> "RegionState":
        """
        Build a region from a config entry.

        Entries name a ``kind`` and any factory keyword, e.g.
        ``{"kind": "north_pole", "latitude": 85, "ice_fraction": 0.8}``.
        Values are checked against ``bands``.
        """
        values = dict(values)
        kind = RegionKind(values.pop("kind"))
        if kind.is_polar:
            return cls.polar(kind, bands=bands, **values)
        return cls.equatorial(bands=bands, **values)

    # =========================================================================
    # Derived quantities
    # =========================================================================

    @property
    def ice_fraction(self) -> float:
        """Ice-covered share of the region (0 for equatorial regions)."""
        if self.ice_cap_area_km2 is None:
            return 0.0
        return self.ice_cap_area_km2 / self.surface_area_km2

    @property
    def average_temperature_k(self) -> float:
        """Mean of surface and atmospheric temperature."""
        return (self.surface_temperature_k + self.atmospheric_temperature_k) / 2.0

    @property
    def is_ice_stable(self) -> bool:
        return self.ice_temperature_k is not None and self.ice_temperature_k < ICE_MELTING_POINT_K

    @property
    def has_liquid_water(self) -> bool:
        return self.surface_temperature_k > ICE_MELTING_POINT_K and self.ice_fraction < 0.1

    def to_dict(self) -> Dict[str, Any]:
        """Flat dict of the region's fields, suitable for tabular export."""
        return {
            "name": self.name,
            "kind": self.kind.value,
            "latitude_degrees": self.latitude_degrees,
            "surface_area_km2": self.surface_area_km2,
            "surface_temperature_k": self.surface_temperature_k,
            "atmospheric_temperature_k": self.atmospheric_temperature_k,
            "ice_temperature_k": self.ice_temperature_k,
            "ice_cap_area_km2": self.ice_cap_area_km2,
            "albedo": self.albedo,
            "relative_humidity": self.relative_humidity,
            "wind_speed_mps": self.wind_speed_mps,
            "soil_moisture": self.soil_moisture,
        }

    def __str__(self) -> str:
        if self.kind.is_polar:
            return (
                f"{self.kind.label}: T_surf={self.surface_temperature_k:.1f}K, "
                f"T_ice={self.ice_temperature_k:.1f}K, "
                f"Ice={self.ice_cap_area_km2:.0f}km² ({self.ice_fraction:.0%}), "
                f"Albedo={self.albedo:.2f}"
            )
        return (
            f"{self.kind.label}: T_surf={self.surface_temperature_k:.1f}K, "
            f"T_atm={self.atmospheric_temperature_k:.1f}K, "
            f"Humidity={self.relative_humidity:.1%}, Wind={self.wind_speed_mps:.1f}m/s, "
            f"Moisture={self.soil_moisture:.1%}"
        )
