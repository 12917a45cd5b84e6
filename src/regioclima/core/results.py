"""
Time series recorded by ``ClimateSimulationEngine.run`` with export helpers.
"""

from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
from pathlib import Path
import logging
import numpy as np
from numpy.typing import NDArray

from regioclima.core.aggregator import GlobalClimateAverages
from regioclima.core.physics import MARTIAN_SOL_SECONDS

logger = logging.getLogger(__name__)

# GlobalClimateAverages fields recorded as per-step arrays
AVERAGE_FIELDS = (
    "surface_temperature_k",
    "atmospheric_temperature_k",
    "ice_temperature_k",
    "average_albedo",
    "average_humidity",
    "average_wind_speed",
    "total_ice_area_km2",
)

FORCING_FIELDS = (
    "solar_constant",
    "day_of_year",
    "time_of_day",
    "atmospheric_pressure",
    "greenhouse_effect",
)


@dataclass
class SimulationResults:
    """
    Container for a stepped simulation run.

    Row ``i`` of every array describes step ``i``: the forcing applied
    during the step and the global averages after it.

    Attributes
    ----------
    time_s : NDArray
        Elapsed simulated time after each step (s).
    solar_constant, day_of_year, time_of_day, atmospheric_pressure, greenhouse_effect : NDArray
        Forcing applied at each step.
    surface_temperature_k, atmospheric_temperature_k, ice_temperature_k : NDArray
        Area-weighted temperatures (K).
    average_albedo, average_humidity, average_wind_speed : NDArray
        Area-weighted polar albedo, equatorial humidity and wind (m/s).
    total_ice_area_km2 : NDArray
        Total ice cap area (km²).
    total_surface_area_km2 : float
        Total modelled area (km²); fixed geography.
    region_surface_temperature_k : dict
        Region name → surface temperature series.
    region_ice_area_km2 : dict
        Polar region name → ice cap area series.
    scenario_key : str, optional
        Scenario identifier.
    scenario_info : dict, optional
        Scenario metadata.
    model_params : dict
        Model parameters per region kind.
    simulation_params : dict
        dt, step count and forcing source.
    diagnostics : dict
        Pre-computed diagnostic quantities.
    """

    time_s: NDArray[np.float64]
    solar_constant: NDArray[np.float64]
    day_of_year: NDArray[np.float64]
    time_of_day: NDArray[np.float64]
    atmospheric_pressure: NDArray[np.float64]
    greenhouse_effect: NDArray[np.float64]
    surface_temperature_k: NDArray[np.float64]
    atmospheric_temperature_k: NDArray[np.float64]
    ice_temperature_k: NDArray[np.float64]
    average_albedo: NDArray[np.float64]
    average_humidity: NDArray[np.float64]
    average_wind_speed: NDArray[np.float64]
    total_ice_area_km2: NDArray[np.float64]
    total_surface_area_km2: float = 0.0
    region_surface_temperature_k: Dict[str, NDArray[np.float64]] = field(default_factory=dict)
    region_ice_area_km2: Dict[str, NDArray[np.float64]] = field(default_factory=dict)
    scenario_key: Optional[str] = None
    scenario_info: Optional[Dict[str, Any]] = None
    model_params: Dict[str, Any] = field(default_factory=dict)
    simulation_params: Dict[str, Any] = field(default_factory=dict)
    diagnostics: Dict[str, Any] = field(default_factory=dict)

    @property
    def n_steps(self) -> int:
        return len(self.time_s)

    @property
    def sols(self) -> NDArray[np.float64]:
        """Elapsed time in sols."""
        return self.time_s / MARTIAN_SOL_SECONDS

    @property
    def ice_fraction(self) -> NDArray[np.float64]:
        """Global ice-covered share of the modelled area."""
        if self.total_surface_area_km2 <= 0:
            return np.zeros_like(self.total_ice_area_km2)
        return self.total_ice_area_km2 / self.total_surface_area_km2

    @property
    def final(self) -> GlobalClimateAverages:
        """Global averages after the last step."""
        if self.n_steps == 0:
            return GlobalClimateAverages.empty()
        return GlobalClimateAverages(
            total_surface_area_km2=self.total_surface_area_km2,
            **{name: float(getattr(self, name)[-1]) for name in AVERAGE_FIELDS},
        )

    @property
    def region_names(self) -> List[str]:
        return list(self.region_surface_temperature_k.keys())

    def summary(self) -> Dict[str, Any]:
        """Summary statistics of the run."""
        from regioclima.analysis.habitability import assess

        empty = self.n_steps == 0
        assessment = assess(self.final)
        return {
            "scenario": self.scenario_key,
            "name": self.scenario_info.get("name", "Custom") if self.scenario_info else "Custom",
            "n_steps": self.n_steps,
            "duration_sols": 0.0 if empty else float(self.sols[-1]),
            "final_surface_temperature_k": 0.0 if empty else float(self.surface_temperature_k[-1]),
            "min_surface_temperature_k": 0.0 if empty else float(np.min(self.surface_temperature_k)),
            "max_surface_temperature_k": 0.0 if empty else float(np.max(self.surface_temperature_k)),
            "initial_ice_area_km2": self.diagnostics.get("initial_ice_area_km2", 0.0),
            "final_ice_area_km2": 0.0 if empty else float(self.total_ice_area_km2[-1]),
            "ice_lost_pct": self.diagnostics.get("ice_lost_pct", 0.0),
            "habitability_pct": assessment["habitability_pct"],
            "phase": assessment["phase"].name,
        }

    def to_dataframe(self):
        """Results as a pandas DataFrame, one row per step."""
        import pandas as pd

        columns = {
            "step": np.arange(1, self.n_steps + 1),
            "time_s": self.time_s,
            "time_sols": self.sols,
        }
        for name in FORCING_FIELDS:
            columns[name] = getattr(self, name)
        for name in AVERAGE_FIELDS:
            columns[name] = getattr(self, name)
        columns["ice_fraction"] = self.ice_fraction

        for name, series in self.region_surface_temperature_k.items():
            columns[f"{name}_surface_temperature_k"] = series
        for name, series in self.region_ice_area_km2.items():
            columns[f"{name}_ice_area_km2"] = series

        return pd.DataFrame(columns)

    def to_csv(
        self,
        filepath: str | Path,
        include_header: bool = True,
        float_format: str = "%.6f",
    ) -> None:
        from regioclima.io.csv_writer import write_csv
        write_csv(self, filepath, include_header, float_format)

    def to_netcdf(
        self,
        filepath: str | Path,
        compression: bool = True,
        compression_level: int = 4,
    ) -> None:
        """
        Export results to NetCDF file.

        Parameters
        ----------
        filepath : str or Path
            Output file path.
        compression : bool, optional
            Enable zlib compression. Default is True.
        compression_level : int, optional
            Compression level (1-9). Default is 4.
        """
        from regioclima.io.netcdf_writer import write_netcdf
        write_netcdf(self, filepath, compression, compression_level)

    def to_png(
        self,
        filepath: str | Path,
        dpi: int = 200,
    ) -> None:
        from regioclima.visualization.timeseries import create_timeseries_plot
        create_timeseries_plot(self, filepath, dpi)

    def __repr__(self) -> str:
        name = self.scenario_info.get("name", "Custom") if self.scenario_info else "Custom"
        if self.n_steps == 0:
            return f"SimulationResults(scenario='{name}', steps=0)"
        return (
            f"SimulationResults(scenario='{name}', steps={self.n_steps}, "
            f"sols={self.sols[-1]:.1f}, T_surf={self.surface_temperature_k[-1]:.1f}K, "
            f"ice={self.total_ice_area_km2[-1]:.0f}km²)"
        )
