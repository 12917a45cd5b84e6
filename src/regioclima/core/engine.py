"""
Climate simulation engine: steps every region with the model registered
for its kind and reduces the result into global averages.
"""

from typing import Callable, Optional, Dict, Any, Union, Iterable, List, Tuple
import logging
import threading
import numpy as np
from tqdm import tqdm

from regioclima.core.aggregator import GlobalClimateAverages, aggregate
from regioclima.core.equatorial import EquatorialRegionModel
from regioclima.core.forcing import Forcing, OrbitalClock
from regioclima.core.physics import clamp
from regioclima.core.polar import PolarRegionModel
from regioclima.core.region import ClampBands, RegionKind, RegionState
from regioclima.core.results import SimulationResults, AVERAGE_FIELDS, FORCING_FIELDS
from regioclima.utils.logging import start_step, end_step, log_error, log_calculation_issue

logger = logging.getLogger(__name__)

RegionSelector = Union[None, RegionKind, str, Iterable[Union[RegionKind, str]]]
ForcingSource = Union[Forcing, Callable[[int], Forcing]]


class ClimateSimulationEngine:
    """
    Regional climate simulation over an arbitrary collection of regions.

    Each step applies the polar model to every pole and the equatorial
    model to every equatorial band, then aggregates once all regions are
    updated. Regions do not interact within a step.

    Parameters
    ----------
    regions : iterable of RegionState, optional
        Regions to simulate. May be empty.
    polar_model : PolarRegionModel, optional
        Model for north and south poles.
    equatorial_model : EquatorialRegionModel, optional
        Model for equatorial bands.

    Raises
    ------
    ValueError
        If a region starts outside the clamp bands of its model.

    Attributes
    ----------
    models : dict
        RegionKind → model used to update regions of that kind.
    """

    def __init__(
        self,
        regions: Iterable[RegionState] = (),
        polar_model: Optional[PolarRegionModel] = None,
        equatorial_model: Optional[EquatorialRegionModel] = None,
    ):
        self._regions: List[RegionState] = list(regions)
        polar_model = polar_model or PolarRegionModel()
        equatorial_model = equatorial_model or EquatorialRegionModel()
        self.models = {
            RegionKind.NORTH_POLE: polar_model,
            RegionKind.SOUTH_POLE: polar_model,
            RegionKind.EQUATORIAL: equatorial_model,
        }

        for region in self._regions:
            region.check_bands(self.models[region.kind].bands)

        # Serialises step() against override_temperature()
        self._lock = threading.RLock()
        self._elapsed_seconds = 0.0
        self._step_count = 0
        self._latest = aggregate(self._regions)

        logger.info(f"Initialized ClimateSimulationEngine with {len(self._regions)} regions: "
                    f"{[r.name for r in self._regions]}")

    # =========================================================================
    # Construction helpers
    # =========================================================================

    @classmethod
    def default(cls) -> "ClimateSimulationEngine":
        """Two poles and one equatorial band with plausible Mars conditions."""
        return cls([
            RegionState.polar(RegionKind.NORTH_POLE),
            RegionState.polar(RegionKind.SOUTH_POLE),
            RegionState.equatorial(),
        ])

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ClimateSimulationEngine":
        """
        Build an engine from a configuration dictionary.

        Reads the ``regions``, ``polar``, ``equatorial`` and ``bands``
        sections; missing sections fall back to the model defaults.
        """
        bands = ClampBands.from_dict(config.get("bands"))
        regions = [RegionState.from_dict(entry, bands=bands) for entry in config.get("regions", [])]
        return cls(
            regions,
            polar_model=PolarRegionModel(bands=bands, **config.get("polar", {})),
            equatorial_model=EquatorialRegionModel(bands=bands, **config.get("equatorial", {})),
        )

    # =========================================================================
    # Read-only views
    # =========================================================================

    @property
    def regions(self) -> Tuple[RegionState, ...]:
        return tuple(self._regions)

    @property
    def elapsed_seconds(self) -> float:
        return self._elapsed_seconds

    @property
    def step_count(self) -> int:
        return self._step_count

    def snapshot(self) -> GlobalClimateAverages:
        """Last computed global averages; does not step."""
        return self._latest

    # =========================================================================
    # Mutation
    # =========================================================================

    def step(self, forcing: Forcing, dt: float) -> GlobalClimateAverages:
        """
        Advance every region by ``dt`` seconds under shared forcing.

        Parameters
        ----------
        forcing : Forcing
            Forcing for this step.
        dt : float
            Step length in seconds, finite and non-negative.

        Returns
        -------
        GlobalClimateAverages
            Averages after all regions were updated.

        Raises
        ------
        ValueError
            If ``dt`` is negative or not finite.
        NumericalInstabilityError
            If a region update produces NaN or Inf. Regions updated
            earlier in the same step keep their new values.
        """
        if not np.isfinite(dt) or dt < 0:
            raise ValueError(f"dt must be finite and non-negative, got {dt}")

        with self._lock:
            for region in self._regions:
                self.models[region.kind].update(region, forcing, dt)

            self._latest = aggregate(self._regions)
            self._elapsed_seconds += dt
            self._step_count += 1
            return self._latest

    def override_temperature(self, selector: RegionSelector, temperature_k: float) -> None:
        """
        Impose a surface temperature on the selected regions.

        The value is clamped to each region's temperature band; poles also
        re-derive their ice temperature from it. The aggregate is refreshed
        so the change is visible through ``snapshot`` immediately.

        Parameters
        ----------
        selector : RegionKind, str, iterable of those, or None
            Region kind(s) to override; ``None`` selects every region.
        temperature_k : float
            Target surface temperature in Kelvin.

        Raises
        ------
        KeyError
            If the selector names an unknown kind or a kind with no regions.
        ValueError
            If ``temperature_k`` is not finite.
        """
        if not np.isfinite(temperature_k):
            raise ValueError(f"temperature_k must be finite, got {temperature_k}")

        with self._lock:
            kinds = self._resolve_selector(selector)
            targets = [r for r in self._regions if r.kind in kinds]

            for region in targets:
                model = self.models[region.kind]
                region.surface_temperature_k = clamp(temperature_k, model.bands.temperature_band(region.kind))
                if region.kind.is_polar:
                    region.ice_temperature_k = clamp(
                        region.surface_temperature_k - model.params["ice_offset_k"],
                        model.bands.ice_band(),
                    )

            self._latest = aggregate(self._regions)
            logger.info(f"Overrode surface temperature of {len(targets)} region(s) "
                        f"to {temperature_k:.2f} K (before clamping)")

    def _resolve_selector(self, selector: RegionSelector) -> set:
        if selector is None:
            return set(RegionKind)

        raw = [selector] if isinstance(selector, (RegionKind, str)) else list(selector)
        kinds = set()
        for item in raw:
            try:
                kinds.add(RegionKind(item))
            except ValueError:
                available = [kind.value for kind in RegionKind]
                raise KeyError(f"Unknown region kind '{item}'. Available: {available}") from None

        present = {r.kind for r in self._regions}
        missing = kinds - present
        if missing:
            raise KeyError(f"No regions of kind: {sorted(kind.value for kind in missing)}")
        return kinds

    # =========================================================================
    # Batch driver
    # =========================================================================

    def run(
        self,
        n_steps: int,
        dt: float,
        forcing: Optional[ForcingSource] = None,
        clock: Optional[OrbitalClock] = None,
        scenario_key: Optional[str] = None,
        scenario_info: Optional[Dict[str, Any]] = None,
        show_progress: bool = True,
    ) -> SimulationResults:
        """
        Step the engine repeatedly and record a time series.

        Exactly one forcing source must be given: a constant ``Forcing``,
        a callable mapping the step index to a ``Forcing``, or an
        ``OrbitalClock`` that advances by ``dt`` after each step.

        Parameters
        ----------
        n_steps : int
            Number of steps, >= 1.
        dt : float
            Step length in seconds.
        forcing : Forcing or Callable, optional
            Constant forcing or step-index → forcing function.
        clock : OrbitalClock, optional
            Orbital clock providing seasonal/diurnal forcing.
        scenario_key : str, optional
            Scenario identifier stored in the results.
        scenario_info : dict, optional
            Scenario metadata stored in the results.
        show_progress : bool
            Show a progress bar. Default True.

        Returns
        -------
        SimulationResults
            Per-step forcing, global averages and per-region series.
        """
        # =====================================================================
        # STEP 1: Setup
        # =====================================================================
        start_step("Setup and forcing resolution")

        try:
            if n_steps < 1:
                raise ValueError(f"n_steps must be >= 1, got {n_steps}")
            if (forcing is None) == (clock is None):
                raise ValueError("Provide exactly one of forcing or clock")

            if clock is not None:
                forcing_source = "orbital_clock"
            elif isinstance(forcing, Forcing):
                forcing_source = "constant"
            elif callable(forcing):
                forcing_source = "callable"
            else:
                raise TypeError(f"forcing must be a Forcing or a callable, got {type(forcing).__name__}")

            labels = self._region_labels()
            polar_labels = [label for label, region in zip(labels, self._regions) if region.kind.is_polar]

            forcing_series = {name: np.empty(n_steps) for name in FORCING_FIELDS}
            average_series = {name: np.empty(n_steps) for name in AVERAGE_FIELDS}
            region_temperature = {label: np.empty(n_steps) for label in labels}
            region_ice = {label: np.empty(n_steps) for label in polar_labels}
            time_s = np.empty(n_steps)

            initial = aggregate(self._regions)
            logger.info(f"Running {n_steps} steps of dt={dt:.0f}s "
                        f"({n_steps * dt / 86400:.1f} days), forcing={forcing_source}")

            end_step(success=True)

        except Exception as e:
            log_error(e, "Setup and forcing resolution")
            end_step(success=False)
            raise

        # =====================================================================
        # STEP 2: Time stepping
        # =====================================================================
        start_step("Time stepping")

        try:
            for i in tqdm(range(n_steps), desc="Stepping climate", disable=not show_progress):
                if clock is not None:
                    step_forcing = clock.forcing()
                elif forcing_source == "constant":
                    step_forcing = forcing
                else:
                    step_forcing = forcing(i)

                averages = self.step(step_forcing, dt)
                if clock is not None:
                    clock.advance(dt)

                time_s[i] = self._elapsed_seconds
                for name in FORCING_FIELDS:
                    forcing_series[name][i] = getattr(step_forcing, name)
                for name in AVERAGE_FIELDS:
                    average_series[name][i] = getattr(averages, name)
                for label, region in zip(labels, self._regions):
                    region_temperature[label][i] = region.surface_temperature_k
                    if label in region_ice:
                        region_ice[label][i] = region.ice_cap_area_km2

            logger.info(f"Stepping complete: {self._step_count} total steps, "
                        f"{self._elapsed_seconds / 86400:.1f} days simulated")
            end_step(success=True)

        except Exception as e:
            log_error(e, "Time stepping")
            end_step(success=False)
            raise

        # =====================================================================
        # STEP 3: Diagnostics
        # =====================================================================
        start_step("Computing diagnostics")

        try:
            surface = average_series["surface_temperature_k"]
            ice = average_series["total_ice_area_km2"]
            initial_ice = initial.total_ice_area_km2
            ice_lost_pct = (1.0 - ice[-1] / initial_ice) * 100.0 if initial_ice > 0 else 0.0

            bands = [model.bands for model in self.models.values()]
            at_floor = int(np.sum(surface <= min(b.temperature[0] for b in bands)))
            if at_floor:
                log_calculation_issue(
                    "Clamp floor reached",
                    f"global surface temperature at the floor for {at_floor} steps",
                    {"min_surface_temperature_k": float(np.min(surface))},
                )

            diagnostics = {
                "initial_surface_temperature_k": initial.surface_temperature_k,
                "final_surface_temperature_k": float(surface[-1]),
                "temperature_change_k": float(surface[-1] - initial.surface_temperature_k),
                "initial_ice_area_km2": initial_ice,
                "final_ice_area_km2": float(ice[-1]),
                "ice_lost_pct": float(ice_lost_pct),
                "last_step_delta_k": float(surface[-1] - surface[-2]) if n_steps > 1 else 0.0,
            }

            logger.info(f"Surface temperature: {diagnostics['initial_surface_temperature_k']:.2f} K → "
                        f"{diagnostics['final_surface_temperature_k']:.2f} K")
            logger.info(f"Ice area: {initial_ice:.0f} → {ice[-1]:.0f} km² ({ice_lost_pct:.1f}% lost)")

            end_step(success=True)

        except Exception as e:
            log_error(e, "Computing diagnostics")
            end_step(success=False)
            raise

        # =====================================================================
        # STEP 4: Build results
        # =====================================================================
        start_step("Building results object")

        try:
            results = SimulationResults(
                time_s=time_s,
                **forcing_series,
                **average_series,
                total_surface_area_km2=self._latest.total_surface_area_km2,
                region_surface_temperature_k=region_temperature,
                region_ice_area_km2=region_ice,
                scenario_key=scenario_key,
                scenario_info=scenario_info,
                model_params={
                    "polar": dict(self.models[RegionKind.NORTH_POLE].params),
                    "equatorial": dict(self.models[RegionKind.EQUATORIAL].params),
                },
                simulation_params={
                    "n_steps": n_steps,
                    "dt": dt,
                    "forcing_source": forcing_source,
                    "regions": [r.to_dict() for r in self._regions],
                },
                diagnostics=diagnostics,
            )
            logger.info(f"Simulation complete: {results!r}")
            end_step(success=True)

        except Exception as e:
            log_error(e, "Building results object")
            end_step(success=False)
            raise

        return results

    def _region_labels(self) -> List[str]:
        """Unique region names; duplicates get a numeric suffix."""
        labels = []
        seen: Dict[str, int] = {}
        for region in self._regions:
            count = seen.get(region.name, 0)
            seen[region.name] = count + 1
            labels.append(region.name if count == 0 else f"{region.name}_{count + 1}")
        return labels

    def __repr__(self) -> str:
        return (f"ClimateSimulationEngine(regions={len(self._regions)}, "
                f"steps={self._step_count}, elapsed={self._elapsed_seconds:.0f}s)")
