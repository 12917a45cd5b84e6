"""
Time series visualization of a regional climate run.
"""

from typing import TYPE_CHECKING
from pathlib import Path
import logging
import matplotlib.pyplot as plt

from regioclima.analysis.habitability import TEMP_LIVABLE_MIN_K

if TYPE_CHECKING:
    from regioclima.core.results import SimulationResults

logger = logging.getLogger(__name__)

# Line colours per region kind prefix
_REGION_COLORS = {
    "north_pole": "#00FFFF",
    "south_pole": "#8888FF",
    "equatorial": "#FF6B35",
}


def create_timeseries_plot(
    results: "SimulationResults",
    filepath: str | Path,
    dpi: int = 200,
) -> None:
    """
    Four-panel diagnostic plot of a run.

    - Regional and global surface temperature with the 273 K line
    - Polar ice cap area per region
    - Equatorial humidity and wind
    - Summary statistics

    Parameters
    ----------
    results : SimulationResults
        Simulation results to visualize.
    filepath : str or Path
        Output PNG file path.
    dpi : int, optional
        Resolution. Default is 200.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Creating time series plot: {filepath}")

    info = results.scenario_info or {}
    sols = results.sols

    plt.style.use("dark_background")
    fig = plt.figure(figsize=(16, 13))
    fig.patch.set_facecolor("#050510")

    gs = fig.add_gridspec(4, 1, height_ratios=[1.3, 1, 1, 0.5], hspace=0.25)

    def style_axis(ax):
        ax.set_facecolor("#0a0a15")
        ax.grid(True, alpha=0.12, color="white", linestyle="-", linewidth=0.4)
        ax.tick_params(colors="white", labelsize=9)
        for spine in ax.spines.values():
            spine.set_color("#333355")
            spine.set_linewidth(0.5)

    def region_color(name: str) -> str:
        for prefix, color in _REGION_COLORS.items():
            if name.startswith(prefix):
                return color
        return "#CCCCCC"

    color_primary = info.get("color_primary", "#FFD700")
    color_secondary = info.get("color_secondary", "#00E5CC")

    # === PANEL 1: Temperatures ===
    ax1 = fig.add_subplot(gs[0])
    style_axis(ax1)

    for name, series in results.region_surface_temperature_k.items():
        ax1.plot(sols, series, color=region_color(name), lw=1.2, alpha=0.85, label=name)
    ax1.plot(sols, results.surface_temperature_k, color="white", lw=2.5, label="Global (area-weighted)")
    ax1.axhline(TEMP_LIVABLE_MIN_K, color="#FF3333", alpha=0.7, linestyle="--", lw=1.5,
                label="Water freezing point")

    ax1.set_ylabel("Surface Temperature\n[K]", fontsize=10, color="white")
    ax1.legend(loc="upper left", fontsize=8, framealpha=0.4, ncol=2)

    # === PANEL 2: Ice caps ===
    ax2 = fig.add_subplot(gs[1])
    style_axis(ax2)

    for name, series in results.region_ice_area_km2.items():
        ax2.plot(sols, series / 1e6, color=region_color(name), lw=1.5, label=name)
        ax2.fill_between(sols, series / 1e6, alpha=0.15, color=region_color(name))

    ax2.set_ylabel("Ice Cap Area\n[10⁶ km²]", fontsize=10, color="white")
    if results.region_ice_area_km2:
        ax2.legend(loc="upper right", fontsize=8, framealpha=0.4)

    # === PANEL 3: Equatorial humidity and wind ===
    ax3 = fig.add_subplot(gs[2])
    style_axis(ax3)

    ax3.plot(sols, results.average_humidity * 100.0, color=color_primary, lw=2.0, label="Relative humidity")
    ax3.set_ylabel("Humidity\n[%]", fontsize=10, color="white")
    ax3.set_xlabel("Sols", fontsize=11, color="white")

    ax3b = ax3.twinx()
    ax3b.plot(sols, results.average_wind_speed, color=color_secondary, lw=1.2, alpha=0.7, linestyle="--")
    ax3b.set_ylabel("Wind (m/s)", fontsize=9, color="#888888")
    ax3b.tick_params(colors="#666666", labelsize=8)

    for ax in (ax1, ax2, ax3):
        if len(sols):
            ax.set_xlim([sols[0], sols[-1]])

    # === PANEL 4: Summary ===
    ax4 = fig.add_subplot(gs[3])
    ax4.set_facecolor("#0a0a15")
    ax4.axis("off")

    summary = results.summary()
    params_text = (
        f"dt = {results.simulation_params.get('dt', 0):.0f} s  |  "
        f"steps = {summary['n_steps']}  |  "
        f"forcing = {results.simulation_params.get('forcing_source', 'n/a')}  |  "
        f"area = {results.total_surface_area_km2:.3g} km²"
    )
    ax4.text(
        0.5, 0.85, params_text,
        transform=ax4.transAxes, fontsize=9, color="#888888",
        ha="center", family="monospace",
    )
    ax4.text(
        0.5, 0.55, f"Phase: {summary['phase']}  ({summary['habitability_pct']:.1f}% habitable)",
        transform=ax4.transAxes, fontsize=13, color=color_primary,
        ha="center", fontweight="bold",
    )
    stats_text = (
        f"T_surf: {summary['final_surface_temperature_k']:.1f} K "
        f"(min {summary['min_surface_temperature_k']:.1f}, max {summary['max_surface_temperature_k']:.1f})  |  "
        f"Ice lost: {summary['ice_lost_pct']:.1f}%"
    )
    ax4.text(
        0.5, 0.2, stats_text,
        transform=ax4.transAxes, fontsize=10, color="#CCCCCC",
        ha="center", family="monospace",
    )

    fig.suptitle(
        f"{info.get('name', 'Custom Forcing')}\n{info.get('subtitle', '')}",
        fontsize=18, color="white", fontweight="bold", y=0.98,
    )

    plt.savefig(
        filepath, dpi=dpi, facecolor="#050510",
        edgecolor="none", bbox_inches="tight",
    )
    plt.close(fig)

    logger.info(f"Time series plot saved: {filepath}")
