"""Pytest configuration."""
import logging
import matplotlib
import pytest

from regioclima import ClimateSimulationEngine, Forcing, RegionKind, RegionState
from regioclima.utils.logging import PACKAGE_LOGGER

matplotlib.use("Agg")


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers = []


@pytest.fixture
def north_pole():
    return RegionState.polar(RegionKind.NORTH_POLE)


@pytest.fixture
def south_pole():
    return RegionState.polar(RegionKind.SOUTH_POLE)


@pytest.fixture
def equator():
    return RegionState.equatorial()


@pytest.fixture
def engine():
    return ClimateSimulationEngine.default()


@pytest.fixture
def noon_forcing():
    return Forcing(
        solar_constant=590.0,
        day_of_year=0.0,
        time_of_day=0.5,
        atmospheric_pressure=0.6,
        greenhouse_effect=2.0,
    )


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config.yaml"
