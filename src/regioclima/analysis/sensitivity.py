"""
Greenhouse sensitivity sweep: the same configured planet run under a
range of greenhouse forcing values.
"""

from typing import Dict, Any, List, Tuple, Optional, Sequence
import logging
from tqdm import tqdm

from regioclima.core.engine import ClimateSimulationEngine
from regioclima.core.forcing import Forcing
from regioclima.core.results import SimulationResults
from regioclima.utils.logging import start_step, end_step, log_error

logger = logging.getLogger(__name__)


def greenhouse_sensitivity(
    config: Dict[str, Any],
    base_forcing: Forcing,
    greenhouse_values: Sequence[float],
    n_steps: int,
    dt: float,
    show_progress: bool = True,
) -> List[Tuple[float, Optional[SimulationResults]]]:
    """
    Run one fresh engine per greenhouse value.

    Parameters
    ----------
    config : dict
        Configuration passed to ``ClimateSimulationEngine.from_config``.
    base_forcing : Forcing
        Forcing held constant apart from ``greenhouse_effect``.
    greenhouse_values : sequence of float
        Greenhouse values to test.
    n_steps : int
        Steps per run.
    dt : float
        Step length in seconds.
    show_progress : bool
        Show a progress bar over samples.

    Returns
    -------
    list
        ``(greenhouse_effect, SimulationResults)`` pairs; results are
        ``None`` for samples that failed (the error is logged).
    """
    start_step(f"Greenhouse sensitivity: {len(greenhouse_values)} samples")

    try:
        results_list = []
        for i, greenhouse in enumerate(tqdm(greenhouse_values, desc="Sensitivity analysis",
                                            disable=not show_progress)):
            logger.debug(f"Sample {i + 1}/{len(greenhouse_values)}: greenhouse_effect={greenhouse:.3f}")
            try:
                engine = ClimateSimulationEngine.from_config(config)
                results = engine.run(
                    n_steps,
                    dt,
                    forcing=base_forcing.with_changes(greenhouse_effect=float(greenhouse)),
                    show_progress=False,
                )
                results_list.append((float(greenhouse), results))
            except Exception as e:
                log_error(e, f"Sensitivity sample greenhouse_effect={greenhouse:.3f}")
                results_list.append((float(greenhouse), None))

        end_step(success=True)
        return results_list

    except Exception as e:
        log_error(e, "Greenhouse sensitivity")
        end_step(success=False)
        raise
