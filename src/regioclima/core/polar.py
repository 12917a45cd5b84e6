"""
Polar region model: insolation by season, radiative balance, ice cap
sublimation/deposition and the ice-albedo feedback.

Update sequence for one step of length dt:

    S      = S0 · f_polar · max(0, sin 2π(d/668.6 + h)) · (0.8 + 0.2 sin 2πt)
    F_net  = S(1 - α) - εσT⁴ + G · gain · a_polar
    C      = A · 1000 · c_eff(ice fraction)
    ΔT     = F_net · dt / C
    T_s   += ΔT,  T_a += 0.9 ΔT,  T_ice = T_s - 10
    ice   -= r(T_ice) · dt     (150 K < T_ice < 273 K)
    ice   += k · P · dt        (T_ice ≤ 150 K, CO2 frost deposition)
    α      = 0.2 + 0.4 · ice / A

Less ice lowers albedo, which raises absorbed insolation and speeds up
warming: the feedback loop that drives cap retreat.
"""

import logging
import numpy as np

from regioclima.core.forcing import Forcing
from regioclima.core.physics import (
    EMISSIVITY,
    GREENHOUSE_FLUX_GAIN,
    emitted_flux,
    seasonal_phase,
    diurnal_phase,
    temperature_change,
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


class PolarRegionModel:
    """
    Energy balance and ice dynamics for high-latitude regions.

    Parameters
    ----------
    insolation_fraction : float, optional
        Share of the solar constant reaching the polar surface. Default 0.10.
    diurnal_amplitude : float, optional
        Relative day/night insolation swing. Default 0.2.
    emissivity : float, optional
        Surface emissivity. Default 0.95.
    greenhouse_attenuation : float, optional
        Polar share of the equatorial greenhouse flux. Default 0.4.
    ice_specific_heat : float, optional
        Specific heat of ice (MJ/m³/K). Default 2.0.
    regolith_specific_heat : float, optional
        Specific heat of bare regolith (MJ/m³/K). Default 1.3.
    atmosphere_damping : float, optional
        Fraction of ΔT the polar atmosphere follows. Default 0.9.
    ice_offset_k : float, optional
        Ice runs this many Kelvin below the surface. Default 10.
    sublimation_floor_k : float, optional
        Below this ice temperature CO2 frost deposits instead. Default 150.
    sublimation_constant : float, optional
        Sublimation rate scale (km²/s). Default 1e-3.
    deposition_constant : float, optional
        Frost deposition rate per kPa (km²/s/kPa). Default 1e-3.
    bare_albedo : float, optional
        Albedo of ice-free ground. Default 0.2.
    ice_albedo_gain : float, optional
        Albedo added by full ice cover. Default 0.4.
    bands : ClampBands, optional
        Clamp bands for the updated fields.
    """

    KINDS = (RegionKind.NORTH_POLE, RegionKind.SOUTH_POLE)

    def __init__(
        self,
        insolation_fraction: float = 0.10,
        diurnal_amplitude: float = 0.2,
        emissivity: float = EMISSIVITY,
        greenhouse_attenuation: float = 0.4,
        ice_specific_heat: float = 2.0,
        regolith_specific_heat: float = 1.3,
        atmosphere_damping: float = 0.9,
        ice_offset_k: float = 10.0,
        sublimation_floor_k: float = 150.0,
        sublimation_constant: float = 1e-3,
        deposition_constant: float = 1e-3,
        bare_albedo: float = 0.2,
        ice_albedo_gain: float = 0.4,
        bands: ClampBands = DEFAULT_BANDS,
    ):
        self.params = {
            "insolation_fraction": insolation_fraction,
            "diurnal_amplitude": diurnal_amplitude,
            "emissivity": emissivity,
            "greenhouse_attenuation": greenhouse_attenuation,
            "ice_specific_heat": ice_specific_heat,
            "regolith_specific_heat": regolith_specific_heat,
            "atmosphere_damping": atmosphere_damping,
            "ice_offset_k": ice_offset_k,
            "sublimation_floor_k": sublimation_floor_k,
            "sublimation_constant": sublimation_constant,
            "deposition_constant": deposition_constant,
            "bare_albedo": bare_albedo,
            "ice_albedo_gain": ice_albedo_gain,
        }
        self.bands = bands
        self._validate_params()

    def _validate_params(self) -> None:
        p = self.params
        if p["ice_specific_heat"] <= 0 or p["regolith_specific_heat"] <= 0:
            raise ValueError("Specific heats must be positive")
        if p["ice_albedo_gain"] < 0:
            raise ValueError(
                f"ice_albedo_gain must be non-negative so albedo rises with ice, "
                f"got {p['ice_albedo_gain']}"
            )
        if p["sublimation_constant"] < 0 or p["deposition_constant"] < 0:
            raise ValueError("Sublimation and deposition constants must be non-negative")
        if not 0 <= p["diurnal_amplitude"] <= 1:
            logger.warning(f"diurnal_amplitude={p['diurnal_amplitude']} outside [0, 1]; "
                           f"night-side insolation may go negative before clamping")
        if not 0 < p["atmosphere_damping"] <= 1:
            logger.warning(f"atmosphere_damping={p['atmosphere_damping']} outside (0, 1]")

    # =========================================================================
    # Component terms
    # =========================================================================

    def insolation(self, state: RegionState, forcing: Forcing) -> float:
        """Seasonal and diurnal insolation at the pole (W/m²); zero in polar winter."""
        p = self.params
        hemisphere_offset = 0.0 if state.kind is RegionKind.NORTH_POLE else 0.5
        seasonal = max(0.0, seasonal_phase(forcing.day_of_year, hemisphere_offset))
        diurnal = (1.0 - p["diurnal_amplitude"]) + p["diurnal_amplitude"] * diurnal_phase(forcing.time_of_day)
        return max(0.0, forcing.solar_constant * p["insolation_fraction"] * seasonal * diurnal)

    def greenhouse_flux(self, forcing: Forcing) -> float:
        return forcing.greenhouse_effect * GREENHOUSE_FLUX_GAIN * self.params["greenhouse_attenuation"]

    def heat_capacity(self, state: RegionState) -> float:
        """Region heat capacity; ice cover raises the effective specific heat."""
        p = self.params
        specific_heat = p["regolith_specific_heat"] + (
            p["ice_specific_heat"] - p["regolith_specific_heat"]
        ) * state.ice_fraction
        return state.surface_area_km2 * 1000.0 * specific_heat

    def albedo_for(self, state: RegionState) -> float:
        p = self.params
        return clamp(p["bare_albedo"] + p["ice_albedo_gain"] * state.ice_fraction, self.bands.albedo)

    def ice_area_rate(self, state: RegionState, forcing: Forcing) -> float:
        """
        Rate of change of ice cap area (km²/s).

        Negative while the ice sublimates (150 K < T_ice < 273 K), positive
        while CO2 frost deposits (T_ice ≤ floor), zero at or above melting.
        """
        p = self.params
        ice_t = state.ice_temperature_k
        if p["sublimation_floor_k"] < ice_t < self.bands.ice_temperature_max:
            rate = float(np.exp((self.bands.ice_temperature_max - ice_t) / 10.0)) * p["sublimation_constant"]
            return -rate
        if ice_t <= p["sublimation_floor_k"]:
            return p["deposition_constant"] * max(0.0, forcing.atmospheric_pressure)
        return 0.0

    # =========================================================================
    # Step
    # =========================================================================

    def update(self, state: RegionState, forcing: Forcing, dt: float) -> None:
        """
        Advance one polar region by ``dt`` seconds in place.

        Parameters
        ----------
        state : RegionState
            A north or south pole region.
        forcing : Forcing
            Shared forcing for this step.
        dt : float
            Step length in seconds.

        Raises
        ------
        RegionKindError
            If ``state`` is not a polar region.
        NumericalInstabilityError
            If an intermediate value is NaN or Inf.
        """
        if state.kind not in self.KINDS:
            raise RegionKindError(f"PolarRegionModel cannot update a {state.kind.value} region")

        p = self.params
        context = f"polar update ({state.name})"

        # Radiative balance
        insolation = self.insolation(state, forcing)
        absorbed = insolation * (1.0 - state.albedo)
        emitted = emitted_flux(state.surface_temperature_k, p["emissivity"])
        net_flux = absorbed - emitted + self.greenhouse_flux(forcing)

        # Integration
        delta_t = temperature_change(net_flux, dt, self.heat_capacity(state))
        surface = state.surface_temperature_k + delta_t
        atmosphere = state.atmospheric_temperature_k + delta_t * p["atmosphere_damping"]
        ensure_finite(context, insolation=insolation, net_flux=net_flux,
                      delta_t=delta_t, surface=surface, atmosphere=atmosphere)

        temperature_band = self.bands.temperature_band(state.kind)
        state.surface_temperature_k = clamp(surface, temperature_band)
        state.atmospheric_temperature_k = clamp(atmosphere, temperature_band)
        state.ice_temperature_k = clamp(state.surface_temperature_k - p["ice_offset_k"], self.bands.ice_band())

        # Ice dynamics and albedo feedback
        ice_rate = self.ice_area_rate(state, forcing)
        ice_area = state.ice_cap_area_km2 + ice_rate * dt
        ensure_finite(context, ice_rate=ice_rate, ice_area=ice_area)

        state.ice_cap_area_km2 = clamp(ice_area, (0.0, state.surface_area_km2))
        state.albedo = self.albedo_for(state)

        logger.debug(f"{state.name}: S={insolation:.2f} W/m², F_net={net_flux:.2f} W/m², "
                     f"ΔT={delta_t:.3e} K, ice={state.ice_cap_area_km2:.0f} km²")

    def __repr__(self) -> str:
        return (f"PolarRegionModel(insolation_fraction={self.params['insolation_fraction']}, "
                f"greenhouse_attenuation={self.params['greenhouse_attenuation']}, "
                f"sublimation_constant={self.params['sublimation_constant']})")
