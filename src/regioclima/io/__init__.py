"""Input/Output operations for regioclima."""

from regioclima.io.forcing import load_forcing_csv, create_forcing_function, FORCING_COLUMNS
from regioclima.io.csv_writer import write_csv
from regioclima.io.netcdf_writer import write_netcdf

__all__ = [
    "load_forcing_csv",
    "create_forcing_function",
    "FORCING_COLUMNS",
    "write_csv",
    "write_netcdf",
]
