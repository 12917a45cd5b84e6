"""Habitability scoring and sensitivity sweeps of simulated climate."""

from regioclima.analysis.habitability import (
    TerraformingPhase,
    temperature_score,
    temperature_progress,
    phase_for,
    assess,
)
from regioclima.analysis.sensitivity import greenhouse_sensitivity

__all__ = [
    "TerraformingPhase",
    "temperature_score",
    "temperature_progress",
    "phase_for",
    "assess",
    "greenhouse_sensitivity",
]
