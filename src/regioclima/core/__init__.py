"""Core simulation: region state, region models, aggregation and the engine."""

from regioclima.core.region import (
    RegionKind,
    RegionKindError,
    RegionState,
    ClampBands,
    DEFAULT_BANDS,
)
from regioclima.core.physics import NumericalInstabilityError
from regioclima.core.forcing import Forcing, OrbitalClock, greenhouse_from_composition
from regioclima.core.polar import PolarRegionModel
from regioclima.core.equatorial import EquatorialRegionModel
from regioclima.core.aggregator import GlobalClimateAverages, aggregate
from regioclima.core.engine import ClimateSimulationEngine
from regioclima.core.results import SimulationResults

__all__ = [
    "RegionKind",
    "RegionKindError",
    "RegionState",
    "ClampBands",
    "DEFAULT_BANDS",
    "NumericalInstabilityError",
    "Forcing",
    "OrbitalClock",
    "greenhouse_from_composition",
    "PolarRegionModel",
    "EquatorialRegionModel",
    "GlobalClimateAverages",
    "aggregate",
    "ClimateSimulationEngine",
    "SimulationResults",
]
