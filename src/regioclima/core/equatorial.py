"""
Equatorial region model: diurnal energy balance plus humidity and wind
relaxation.

    S      = S0 · f_eq · (0.5 + 0.5 sin 2πt)
    F_net  = S - εσT⁴ + G · gain
    ΔT     = F_net · dt / (A · 1000 · 1.3)
    T_s   += ΔT,  T_a += 0.8 ΔT
    RH    → min(0.8, 2·moisture + (T_s - 200)/200)   at rate k_h
    wind  → 2 + 0.1·|T_s - T_a|                      at rate k_w
"""

import logging

from regioclima.core.forcing import Forcing
from regioclima.core.physics import (
    EMISSIVITY,
    GREENHOUSE_FLUX_GAIN,
    emitted_flux,
    diurnal_phase,
    temperature_change,
    relax,
    clamp,
    ensure_finite,
)
from regioclima.core.region import (
    RegionKind,
    RegionKindError,
    RegionState,
    ClampBands,
    DEFAULT_BANDS,
)

logger = logging.getLogger(__name__)


class EquatorialRegionModel:
    """
    Energy balance, humidity and wind for the equatorial band.

    Parameters
    ----------
    insolation_fraction : float, optional
        Share of the solar constant reaching the band. Default 0.80.
    emissivity : float, optional
        Surface emissivity. Default 0.95.
    greenhouse_attenuation : float, optional
        Share of the greenhouse flux applied. Default 1.0.
    specific_heat : float, optional
        Regolith specific heat (MJ/m³/K). Default 1.3.
    atmosphere_damping : float, optional
        Fraction of ΔT the atmosphere follows. Default 0.8.
    humidity_rate : float, optional
        Humidity relaxation rate (1/s). Default 0.1.
    humidity_ceiling : float, optional
        Upper limit of the humidity target. Default 0.8.
    wind_rate : float, optional
        Wind relaxation rate (1/s). Default 0.05.
    base_wind_mps : float, optional
        Wind target with no thermal contrast. Default 2.
    wind_per_kelvin : float, optional
        Wind target gain per Kelvin of surface/air contrast. Default 0.1.
    bands : ClampBands, optional
        Clamp bands for the updated fields.
    """

    KINDS = (RegionKind.EQUATORIAL,)

    def __init__(
        self,
        insolation_fraction: float = 0.80,
        emissivity: float = EMISSIVITY,
        greenhouse_attenuation: float = 1.0,
        specific_heat: float = 1.3,
        atmosphere_damping: float = 0.8,
        humidity_rate: float = 0.1,
        humidity_ceiling: float = 0.8,
        wind_rate: float = 0.05,
        base_wind_mps: float = 2.0,
        wind_per_kelvin: float = 0.1,
        bands: ClampBands = DEFAULT_BANDS,
    ):
        if specific_heat <= 0:
            raise ValueError(f"specific_heat must be positive, got {specific_heat}")
        if humidity_rate < 0 or wind_rate < 0:
            raise ValueError("Relaxation rates must be non-negative")

        self.params = {
            "insolation_fraction": insolation_fraction,
            "emissivity": emissivity,
            "greenhouse_attenuation": greenhouse_attenuation,
            "specific_heat": specific_heat,
            "atmosphere_damping": atmosphere_damping,
            "humidity_rate": humidity_rate,
            "humidity_ceiling": humidity_ceiling,
            "wind_rate": wind_rate,
            "base_wind_mps": base_wind_mps,
            "wind_per_kelvin": wind_per_kelvin,
        }
        self.bands = bands

    def insolation(self, forcing: Forcing) -> float:
        p = self.params
        diurnal = 0.5 + 0.5 * diurnal_phase(forcing.time_of_day)
        return forcing.solar_constant * p["insolation_fraction"] * diurnal

    def heat_capacity(self, state: RegionState) -> float:
        return state.surface_area_km2 * 1000.0 * self.params["specific_heat"]

    def humidity_target(self, state: RegionState) -> float:
        """Humidity the band relaxes toward; warmer, wetter ground holds more vapour."""
        target = state.soil_moisture * 2.0 + (state.surface_temperature_k - 200.0) / 200.0
        return min(self.params["humidity_ceiling"], target)

    def wind_target(self, state: RegionState) -> float:
        contrast = abs(state.surface_temperature_k - state.atmospheric_temperature_k)
        return self.params["base_wind_mps"] + contrast * self.params["wind_per_kelvin"]

    def update(self, state: RegionState, forcing: Forcing, dt: float) -> None:
        """
        Advance the equatorial band by ``dt`` seconds in place.

        Raises
        ------
        RegionKindError
            If ``state`` is not an equatorial region.
        NumericalInstabilityError
            If an intermediate value is NaN or Inf.
        """
        if state.kind not in self.KINDS:
            raise RegionKindError(f"EquatorialRegionModel cannot update a {state.kind.value} region")

        p = self.params
        context = f"equatorial update ({state.name})"

        insolation = self.insolation(forcing)
        emitted = emitted_flux(state.surface_temperature_k, p["emissivity"])
        greenhouse = forcing.greenhouse_effect * GREENHOUSE_FLUX_GAIN * p["greenhouse_attenuation"]
        net_flux = insolation - emitted + greenhouse

        delta_t = temperature_change(net_flux, dt, self.heat_capacity(state))
        surface = state.surface_temperature_k + delta_t
        atmosphere = state.atmospheric_temperature_k + delta_t * p["atmosphere_damping"]
        ensure_finite(context, insolation=insolation, net_flux=net_flux,
                      delta_t=delta_t, surface=surface, atmosphere=atmosphere)

        band = self.bands.temperature_band(state.kind)
        state.surface_temperature_k = clamp(surface, band)
        state.atmospheric_temperature_k = clamp(atmosphere, band)

        # Slow fields follow the updated temperatures
        humidity = relax(state.relative_humidity, self.humidity_target(state), p["humidity_rate"], dt)
        wind = relax(state.wind_speed_mps, self.wind_target(state), p["wind_rate"], dt)
        ensure_finite(context, humidity=humidity, wind=wind)

        state.relative_humidity = clamp(humidity, self.bands.humidity)
        state.wind_speed_mps = clamp(wind, self.bands.wind_speed)

        logger.debug(f"{state.name}: S={insolation:.2f} W/m², F_net={net_flux:.2f} W/m², "
                     f"ΔT={delta_t:.3e} K, RH={state.relative_humidity:.3f}, "
                     f"wind={state.wind_speed_mps:.2f} m/s")

    def __repr__(self) -> str:
        return (f"EquatorialRegionModel(insolation_fraction={self.params['insolation_fraction']}, "
                f"humidity_rate={self.params['humidity_rate']}, wind_rate={self.params['wind_rate']})")
