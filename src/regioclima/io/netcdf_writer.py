"""NetCDF output writer (CF-style metadata)."""

from typing import TYPE_CHECKING
from pathlib import Path
from datetime import datetime
import logging
import numpy as np

if TYPE_CHECKING:
    from regioclima.core.results import SimulationResults

logger = logging.getLogger(__name__)

# name → (units, long_name) for the global series
_SERIES_ATTRS = {
    "solar_constant": ("W m-2", "Solar constant at the planet"),
    "day_of_year": ("sol", "Day of Martian year"),
    "time_of_day": ("1", "Fraction of sol (0 = midnight)"),
    "atmospheric_pressure": ("kPa", "Surface atmospheric pressure"),
    "greenhouse_effect": ("1", "Greenhouse forcing scalar"),
    "surface_temperature_k": ("K", "Area-weighted surface temperature"),
    "atmospheric_temperature_k": ("K", "Area-weighted near-surface air temperature"),
    "ice_temperature_k": ("K", "Ice-area-weighted polar ice temperature"),
    "average_albedo": ("1", "Area-weighted polar albedo"),
    "average_humidity": ("1", "Area-weighted equatorial relative humidity"),
    "average_wind_speed": ("m s-1", "Area-weighted equatorial wind speed"),
    "total_ice_area_km2": ("km2", "Total ice cap area"),
}


def write_netcdf(
    results: "SimulationResults",
    filepath: str | Path,
    compression: bool = True,
    compression_level: int = 4,
) -> None:
    """
    Write simulation results to a NetCDF4 file.

    Global series share the ``time`` dimension; per-region series are
    stored as 2-D variables over ``(region, time)`` with region names in
    a string variable.

    Parameters
    ----------
    results : SimulationResults
        Simulation results to export.
    filepath : str or Path
        Output file path.
    compression : bool, optional
        Enable zlib compression. Default is True.
    compression_level : int, optional
        Compression level (1-9). Default is 4.
    """
    import netCDF4 as nc
    from regioclima import __version__

    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Writing NetCDF to: {filepath}")

    comp_kwargs = {}
    if compression:
        comp_kwargs = {"zlib": True, "complevel": compression_level}

    with nc.Dataset(filepath, "w", format="NETCDF4") as ds:
        # =====================================================================
        # Global attributes
        # =====================================================================
        ds.title = "Regional Mars Climate Simulation"
        ds.institution = "regioclima"
        ds.source = f"regioclima regional climate engine v{__version__}"
        ds.history = f"Created {datetime.now().isoformat()} by regioclima"
        ds.Conventions = "CF-1.8"

        info = results.scenario_info or {}
        ds.scenario = info.get("name", "Custom Forcing")
        ds.scenario_key = results.scenario_key or "custom"
        ds.scenario_description = info.get("description", "N/A")

        ds.dt_seconds = float(results.simulation_params.get("dt", np.nan))
        ds.forcing_source = results.simulation_params.get("forcing_source", "unknown")
        ds.total_surface_area_km2 = results.total_surface_area_km2

        for kind, params in results.model_params.items():
            for name, value in params.items():
                setattr(ds, f"{kind}_{name}", float(value))

        for name, value in results.diagnostics.items():
            setattr(ds, name, float(value))

        # =====================================================================
        # Dimensions and time
        # =====================================================================
        n_time = results.n_steps
        ds.createDimension("time", n_time)

        time_var = ds.createVariable("time", "f8", ("time",), **comp_kwargs)
        time_var.units = "seconds since simulation start"
        time_var.long_name = "Elapsed simulated time"
        time_var.standard_name = "time"
        time_var[:] = results.time_s

        sol_var = ds.createVariable("time_sols", "f8", ("time",), **comp_kwargs)
        sol_var.units = "sol"
        sol_var.long_name = "Elapsed simulated time in Martian sols"
        sol_var.comment = "1 sol = 88776 s"
        sol_var[:] = results.sols

        # =====================================================================
        # Forcing and global averages
        # =====================================================================
        for name, (units, long_name) in _SERIES_ATTRS.items():
            var = ds.createVariable(name, "f8", ("time",), **comp_kwargs)
            var.units = units
            var.long_name = long_name
            var[:] = getattr(results, name)

        # =====================================================================
        # Per-region series
        # =====================================================================
        names = results.region_names
        if names:
            ds.createDimension("region", len(names))
            name_var = ds.createVariable("region_name", str, ("region",))
            for i, name in enumerate(names):
                name_var[i] = name

            temp_var = ds.createVariable("region_surface_temperature", "f8", ("region", "time"), **comp_kwargs)
            temp_var.units = "K"
            temp_var.long_name = "Regional surface temperature"
            temp_var[:, :] = np.vstack([results.region_surface_temperature_k[name] for name in names])

        ice_names = list(results.region_ice_area_km2.keys())
        if ice_names:
            ds.createDimension("polar_region", len(ice_names))
            polar_name_var = ds.createVariable("polar_region_name", str, ("polar_region",))
            for i, name in enumerate(ice_names):
                polar_name_var[i] = name

            ice_var = ds.createVariable("region_ice_area", "f8", ("polar_region", "time"), **comp_kwargs)
            ice_var.units = "km2"
            ice_var.long_name = "Regional ice cap area"
            ice_var[:, :] = np.vstack([results.region_ice_area_km2[name] for name in ice_names])

    logger.info(f"NetCDF written: {n_time} time steps, {len(names)} regions")
