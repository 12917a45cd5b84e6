"""
Loading forcing time series from CSV and turning them into per-step
forcing providers for ``ClimateSimulationEngine.run``.

Expected columns (header names, case-insensitive)::

    time_s, solar_constant, day_of_year, time_of_day, pressure, greenhouse

``time_s`` is required. Missing columns are filled with the ``Forcing``
defaults.
"""

from typing import Callable, Dict
from pathlib import Path
import logging
import numpy as np

from regioclima.core.forcing import Forcing
from regioclima.core.physics import MARTIAN_YEAR_SOLS

logger = logging.getLogger(__name__)

# Column in file → Forcing field; aliases accepted on load
FORCING_COLUMNS: Dict[str, str] = {
    "solar_constant": "solar_constant",
    "day_of_year": "day_of_year",
    "time_of_day": "time_of_day",
    "pressure": "atmospheric_pressure",
    "greenhouse": "greenhouse_effect",
}

_ALIASES = {
    "time": "time_s",
    "t": "time_s",
    "seconds": "time_s",
    "solar": "solar_constant",
    "s0": "solar_constant",
    "day": "day_of_year",
    "atmospheric_pressure": "pressure",
    "pressure_kpa": "pressure",
    "greenhouse_effect": "greenhouse",
}

# Phase columns wrap; interpolation is done on the unwrapped series
_PERIODS = {
    "day_of_year": MARTIAN_YEAR_SOLS,
    "time_of_day": 1.0,
}


def load_forcing_csv(
    filepath: str | Path,
    delimiter: str = ",",
):
    """
    Load a forcing series from a CSV file.

    Parameters
    ----------
    filepath : str or Path
        Path to CSV file. Lines starting with ``#`` are comments.
    delimiter : str, optional
        Column delimiter. Default is ",".

    Returns
    -------
    pandas.DataFrame
        Columns ``time_s`` plus every key of ``FORCING_COLUMNS``, sorted
        by time.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If ``time_s`` is missing, the file has no rows, times repeat or a
        value is not finite.
    """
    import pandas as pd

    filepath = Path(filepath)
    logger.info(f"Loading forcing from CSV: {filepath}")

    if not filepath.exists():
        raise FileNotFoundError(f"Forcing file not found: {filepath}")

    df = pd.read_csv(filepath, delimiter=delimiter, comment="#")
    df.columns = [str(col).strip().lower() for col in df.columns]
    df = df.rename(columns={col: _ALIASES[col] for col in df.columns if col in _ALIASES})

    if "time_s" not in df.columns:
        raise ValueError(f"Forcing file {filepath} has no time_s column; found {list(df.columns)}")
    if df.empty:
        raise ValueError(f"Forcing file {filepath} has no data rows")

    defaults = Forcing()
    for column, field_name in FORCING_COLUMNS.items():
        if column not in df.columns:
            logger.warning(f"Column '{column}' missing, using constant {getattr(defaults, field_name)}")
            df[column] = getattr(defaults, field_name)

    df = df[["time_s", *FORCING_COLUMNS]].astype(np.float64).sort_values("time_s").reset_index(drop=True)

    if not np.all(np.isfinite(df.to_numpy())):
        raise ValueError(f"Forcing file {filepath} contains non-finite values")
    if df["time_s"].duplicated().any():
        raise ValueError(f"Forcing file {filepath} has repeated time_s values")

    logger.info(f"Loaded {len(df)} forcing rows")
    logger.debug(f"Time range: {df['time_s'].iloc[0]:.0f} - {df['time_s'].iloc[-1]:.0f} s")
    return df


def create_forcing_function(
    table,
    dt: float,
    kind: str = "linear",
    start_time_s: float = 0.0,
) -> Callable[[int], Forcing]:
    """
    Interpolating step-index → ``Forcing`` function.

    Step ``i`` reads the series at ``start_time_s + i·dt``. Times outside
    the table hold the first/last row.

    Parameters
    ----------
    table : pandas.DataFrame
        Output of :func:`load_forcing_csv`.
    dt : float
        Step length in seconds.
    kind : str, optional
        scipy interpolation kind. Default is "linear".
    start_time_s : float, optional
        Series time of step 0. Default is 0.

    Returns
    -------
    Callable
        ``forcing(step_index) -> Forcing``.
    """
    from scipy.interpolate import interp1d

    times = table["time_s"].to_numpy(dtype=np.float64)
    if len(times) < 2:
        row = {FORCING_COLUMNS[c]: float(table[c].iloc[0]) for c in FORCING_COLUMNS}
        constant = Forcing(**row)
        return lambda step_index: constant

    interpolators = {}
    for column in FORCING_COLUMNS:
        values = table[column].to_numpy(dtype=np.float64)
        if column in _PERIODS:
            values = np.unwrap(values, period=_PERIODS[column])
        interpolators[column] = interp1d(
            times, values,
            kind=kind,
            bounds_error=False,
            fill_value=(values[0], values[-1]),
        )

    def forcing(step_index: int) -> Forcing:
        t = start_time_s + step_index * dt
        row = {}
        for column, interpolator in interpolators.items():
            value = float(interpolator(t))
            if column in _PERIODS:
                value %= _PERIODS[column]
            row[FORCING_COLUMNS[column]] = value
        return Forcing(**row)

    return forcing
