"""Configuration management for regioclima."""

from typing import Dict, Any, Optional
from pathlib import Path
import copy
import logging
import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".regioclima" / "config.yaml"


# =============================================================================
# DEFAULT CONFIGURATION
# =============================================================================
# Region entries are passed to RegionState.from_dict(); model sections to
# the PolarRegionModel / EquatorialRegionModel constructors.

DEFAULT_CONFIG: Dict[str, Any] = {
    "scenarios": {
        "default": "realistic",
        "available": ["realistic", "game_balanced", "debug", "polar_winter"],
    },
    # Forcing series file; when set, overrides the scenario forcing
    "forcing_file": None,
    "regions": [
        {"kind": "north_pole", "latitude": 85.0, "surface_area_km2": 2_000_000.0,
         "ice_fraction": 0.8, "surface_temperature_k": 180.0},
        {"kind": "south_pole", "latitude": 85.0, "surface_area_km2": 2_000_000.0,
         "ice_fraction": 0.8, "surface_temperature_k": 180.0},
        {"kind": "equatorial", "latitude": 0.0, "surface_area_km2": 50_000_000.0,
         "surface_temperature_k": 250.0, "relative_humidity": 0.15,
         "wind_speed_mps": 5.0, "soil_moisture": 0.05},
    ],
    "polar": {
        "insolation_fraction": 0.10,
        "diurnal_amplitude": 0.2,
        "greenhouse_attenuation": 0.4,
        "ice_specific_heat": 2.0,
        "regolith_specific_heat": 1.3,
        "atmosphere_damping": 0.9,
        "ice_offset_k": 10.0,
        "sublimation_floor_k": 150.0,
        "sublimation_constant": 1.0e-3,
        "deposition_constant": 1.0e-3,
        "bare_albedo": 0.2,
        "ice_albedo_gain": 0.4,
    },
    "equatorial": {
        "insolation_fraction": 0.80,
        "greenhouse_attenuation": 1.0,
        "specific_heat": 1.3,
        "atmosphere_damping": 0.8,
        "humidity_rate": 0.1,
        "humidity_ceiling": 0.8,
        "wind_rate": 0.05,
        "base_wind_mps": 2.0,
        "wind_per_kelvin": 0.1,
    },
    "bands": {
        "temperature": [100.0, 350.0],
        "polar_temperature_max": 280.0,
        "ice_temperature_max": 273.0,
        "humidity": [0.01, 1.0],
        "wind_speed": [0.5, 20.0],
        "albedo": [0.0, 1.0],
    },
    "simulation": {
        "dt": 3600.0,
        "n_steps": 2400,
        # Overrides the scenario start day when set
        "start_day": None,
        "start_time": 0.0,
    },
    "outputs": {
        "formats": ["csv", "netcdf", "png"],
        "base_dir": "./outputs",
        "subdirs": {
            "csv": "csv",
            "netcdf": "netcdf",
            "png": "png",
        },
    },
    "logging": {
        "level": "INFO",
        "log_dir": "./logs",
        "format_style": "detailed",
    },
    "visualization": {
        "timeseries_dpi": 200,
    },
}


def load_config(
    config_path: Optional[str | Path] = None,
    create_default: bool = True,
) -> Dict[str, Any]:
    """
    Load configuration from a YAML file, merged over the defaults.

    Parameters
    ----------
    config_path : str or Path, optional
        Path to config file. Defaults to ~/.regioclima/config.yaml
    create_default : bool, optional
        Write the default config when the file does not exist. Default True.

    Returns
    -------
    dict
        Configuration dictionary.
    """
    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    if config_path.exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            user_config = yaml.safe_load(f) or {}

        if not isinstance(user_config, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping at top level")

        config = _deep_merge(DEFAULT_CONFIG, user_config)

        # Forcing file paths are relative to the config file
        if config.get("forcing_file"):
            forcing_path = Path(config["forcing_file"])
            if not forcing_path.is_absolute():
                config["forcing_file"] = str(config_path.parent / forcing_path)

        return config

    if create_default:
        save_config(DEFAULT_CONFIG, config_path)

    return copy.deepcopy(DEFAULT_CONFIG)


def save_config(
    config: Dict[str, Any],
    config_path: Optional[str | Path] = None,
) -> None:
    """Write ``config`` as YAML, creating parent directories."""
    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Config saved to: {config_path}")


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge ``override`` into a copy of ``base``; lists are replaced."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result
