"""CSV output writer."""

from typing import TYPE_CHECKING
from pathlib import Path
import logging

if TYPE_CHECKING:
    from regioclima.core.results import SimulationResults

logger = logging.getLogger(__name__)


def write_csv(
    results: "SimulationResults",
    filepath: str | Path,
    include_header: bool = True,
    float_format: str = "%.6f",
) -> None:
    """
    Write simulation results to a CSV file, one row per step.

    Parameters
    ----------
    results : SimulationResults
        Simulation results to export.
    filepath : str or Path
        Output file path.
    include_header : bool, optional
        Include column header. Default is True.
    float_format : str, optional
        Float format string. Default is "%.6f".
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Writing CSV to: {filepath}")

    df = results.to_dataframe()
    df.to_csv(filepath, index=False, header=include_header, float_format=float_format)

    if len(df):
        logger.info(f"CSV written: {len(df)} rows, {len(df.columns)} columns, "
                    f"sols {df['time_sols'].iloc[0]:.2f}-{df['time_sols'].iloc[-1]:.2f}")
    else:
        logger.info("CSV written: no rows")
