"""Visualization functions for regioclima."""

from regioclima.visualization.timeseries import create_timeseries_plot

__all__ = [
    "create_timeseries_plot",
]
