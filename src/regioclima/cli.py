"""
Command-line interface for regioclima.

Usage:
    regioclima run --scenario realistic
    regioclima run --scenario debug --steps 500 --dt 3600
    regioclima run --forcing ./forcing.csv --outputs csv
    regioclima list
    regioclima info polar_winter
    regioclima sensitivity --scenario realistic --gh-min 0 --gh-max 40
"""

import sys
import traceback
from pathlib import Path
import click

from regioclima import __version__, ClimateSimulationEngine, SCENARIOS, get_scenario, list_scenarios
from regioclima.analysis.habitability import assess
from regioclima.io.forcing import load_forcing_csv, create_forcing_function
from regioclima.scenarios import forcing_for, clock_for, greenhouse_for
from regioclima.utils.logging import (
    setup_logging,
    start_step,
    end_step,
    log_error,
    get_timing_logger,
)
from regioclima.utils.config import load_config

OUTPUT_FORMATS = ["csv", "netcdf", "png"]


@click.group()
@click.version_option(version=__version__, prog_name="regioclima")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug output")
@click.option("--config", type=click.Path(), help="Config file path")
@click.pass_context
def main(ctx, verbose, debug, config):
    """
    regioclima - Regional Mars Climate Simulation Engine

    Steps polar and equatorial regions under shared orbital and
    greenhouse forcing and reports area-weighted global climate.
    """
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config)
    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug


@main.command("run")
@click.option(
    "--scenario", "-s",
    type=click.Choice(list_scenarios()),
    help="Built-in scenario to run (default: from config)",
)
@click.option(
    "--forcing", "-f",
    type=click.Path(exists=True),
    help="Forcing series CSV (time_s, solar_constant, day_of_year, time_of_day, pressure, greenhouse)",
)
@click.option(
    "--steps", "-n",
    type=int,
    default=None,
    help="Number of steps (default: from config)",
)
@click.option(
    "--dt",
    type=float,
    default=None,
    help="Step length in seconds (default: from config)",
)
@click.option(
    "--constant",
    is_flag=True,
    help="Hold the scenario forcing constant instead of advancing the orbital clock",
)
@click.option(
    "--output-dir", "-o",
    type=click.Path(),
    default=None,
    help="Output directory (default: from config)",
)
@click.option(
    "--outputs",
    type=click.Choice(OUTPUT_FORMATS),
    multiple=True,
    help="Output formats (default: from config)",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=None,
    help="Log directory (default: from config)",
)
@click.option(
    "--experiment-name", "-e",
    type=str,
    default=None,
    help="Experiment name for log file and outputs",
)
@click.option("--no-progress", is_flag=True, help="Hide the progress bar")
@click.pass_context
def run(ctx, scenario, forcing, steps, dt, constant, output_dir, outputs, log_dir,
        experiment_name, no_progress):
    """Run a regional climate simulation."""
    config = ctx.obj["config"]
    debug = ctx.obj.get("debug", False)
    verbose = ctx.obj.get("verbose", False)

    sim = config["simulation"]
    steps = steps if steps is not None else sim["n_steps"]
    dt = dt if dt is not None else sim["dt"]
    output_dir = Path(output_dir or config["outputs"]["base_dir"])
    outputs = list(outputs) if outputs else list(config["outputs"]["formats"])
    log_dir = log_dir or config["logging"]["log_dir"]
    forcing = forcing or config.get("forcing_file")
    scenario = scenario or config["scenarios"]["default"]

    if experiment_name is None:
        experiment_name = Path(forcing).stem if forcing else scenario

    level = "DEBUG" if debug else ("INFO" if verbose else config["logging"]["level"])
    logger = setup_logging(
        level=level,
        log_dir=log_dir,
        experiment_name=experiment_name,
        format_style=config["logging"]["format_style"],
        always_save=True,
        include_timestamp=False,
    )

    try:
        # =====================================================================
        # STEP: Initialize output directories
        # =====================================================================
        start_step("Initialize output directories")

        subdir_names = config["outputs"].get("subdirs", {})
        subdirs = {fmt: output_dir / subdir_names.get(fmt, fmt) for fmt in outputs}
        for subdir in subdirs.values():
            subdir.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Created directory: {subdir}")

        end_step(success=True)

        # =====================================================================
        # STEP: Initialize engine
        # =====================================================================
        start_step("Initialize engine")

        engine = ClimateSimulationEngine.from_config(config)

        click.echo(f"\n{'═' * 60}")
        click.echo("  Regions:")
        click.echo(f"{'─' * 60}")
        for region in engine.regions:
            click.echo(f"  {region}")
        click.echo(f"{'═' * 60}")

        end_step(success=True)

        # =====================================================================
        # STEP: Resolve forcing
        # =====================================================================
        start_step("Resolve forcing")

        run_kwargs = {}
        scenario_info = None
        if forcing:
            table = load_forcing_csv(forcing)
            run_kwargs["forcing"] = create_forcing_function(table, dt)
            scenario_key = "custom"
            click.echo(f"\nUsing forcing file: {forcing} ({len(table)} rows)")
        else:
            scenario_info = get_scenario(scenario)
            scenario_key = scenario
            if constant:
                run_kwargs["forcing"] = forcing_for(scenario, start_day=sim.get("start_day"))
            else:
                run_kwargs["clock"] = clock_for(
                    scenario,
                    start_time=sim.get("start_time", 0.0),
                    start_day=sim.get("start_day"),
                )
            click.echo(f"\nRunning scenario: {scenario_info['name']}")
            click.echo(f"  {scenario_info['subtitle']}")
            click.echo(f"  Greenhouse effect: {greenhouse_for(scenario_info):.2f}")

        click.echo(f"  {steps} steps × {dt:.0f} s\n")
        end_step(success=True)

        # =====================================================================
        # Simulate
        # =====================================================================
        results = engine.run(
            steps,
            dt,
            scenario_key=scenario_key,
            scenario_info=scenario_info,
            show_progress=not no_progress,
            **run_kwargs,
        )

        # =====================================================================
        # Generate outputs
        # =====================================================================
        start_step(f"Generate outputs: {experiment_name}")

        if "csv" in outputs:
            csv_path = subdirs["csv"] / f"{experiment_name}_data.csv"
            results.to_csv(csv_path)
            click.echo(f"    ✓ CSV: {csv_path}")

        if "netcdf" in outputs:
            nc_path = subdirs["netcdf"] / f"{experiment_name}_data.nc"
            results.to_netcdf(nc_path)
            click.echo(f"    ✓ NetCDF: {nc_path}")

        if "png" in outputs:
            png_path = subdirs["png"] / f"{experiment_name}_timeseries.png"
            results.to_png(png_path, dpi=config["visualization"]["timeseries_dpi"])
            click.echo(f"    ✓ PNG: {png_path}")

        end_step(success=True)

        summary = results.summary()
        click.echo("\n  Results Summary:")
        click.echo(f"    Duration: {summary['duration_sols']:.1f} sols")
        click.echo(f"    Surface temperature: {summary['final_surface_temperature_k']:.2f} K "
                   f"(min {summary['min_surface_temperature_k']:.2f}, "
                   f"max {summary['max_surface_temperature_k']:.2f})")
        click.echo(f"    Ice area: {summary['final_ice_area_km2']:.0f} km² "
                   f"({summary['ice_lost_pct']:.1f}% lost)")
        click.echo(f"    Habitability: {summary['habitability_pct']:.1f}% ({summary['phase']})")

        click.echo(f"\n{'═' * 60}")
        click.echo("  COMPLETE")
        click.echo(f"{'═' * 60}")
        click.echo(f"\nOutput Directory: {output_dir}")
        click.echo(f"Log Directory: {log_dir}")

        timing_logger = get_timing_logger()
        if timing_logger:
            click.echo(timing_logger.get_summary())
        click.echo()

    except Exception as e:
        log_error(e, "Main execution")
        click.echo(f"\n{'!' * 60}", err=True)
        click.echo(f"  FATAL ERROR: {e}", err=True)
        click.echo(f"{'!' * 60}", err=True)
        click.echo(f"\nCheck log file in: {log_dir}", err=True)
        click.echo(traceback.format_exc(), err=True)
        sys.exit(1)


@main.command("list")
def list_command():
    """List available scenarios."""
    click.echo("\nAvailable Scenarios:")
    click.echo("─" * 60)

    for key, info in SCENARIOS.items():
        click.echo(f"\n  {key}:")
        click.echo(f"    Name: {info['name']}")
        click.echo(f"    Subtitle: {info['subtitle']}")
        click.echo(f"    Greenhouse effect: {greenhouse_for(info):.2f}")
        click.echo(f"    Description: {info['description']}")

    click.echo("\n" + "─" * 60)
    click.echo()


@main.command("info")
@click.argument("scenario")
def info(scenario):
    """Show detailed information about a scenario."""
    try:
        scenario_info = get_scenario(scenario)
    except KeyError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    forcing = forcing_for(scenario)
    engine = ClimateSimulationEngine.default()
    initial = assess(engine.snapshot())

    click.echo(f"\n{scenario_info['name']}")
    click.echo("=" * 60)
    click.echo(f"Subtitle: {scenario_info['subtitle']}")
    click.echo(f"Description: {scenario_info['description']}")
    click.echo("\nForcing:")
    click.echo(f"  Solar constant: {forcing.solar_constant:.1f} W/m²")
    click.echo(f"  Surface pressure: {forcing.atmospheric_pressure:.2f} kPa")
    click.echo(f"  Start day: {forcing.day_of_year:.1f} sol")
    click.echo(f"  Greenhouse effect: {forcing.greenhouse_effect:.2f}")
    click.echo("\nComposition:")
    click.echo(f"  CO2: {scenario_info['co2_pressure']:.2f} kPa "
               f"(efficiency {scenario_info['co2_efficiency']})")
    click.echo(f"  Engineered GHG: {scenario_info['ghg_pressure']:.2f} kPa")
    click.echo(f"  H2O efficiency: {scenario_info['h2o_efficiency']}")
    click.echo(f"  Max warming: {scenario_info['max_warming']}")
    click.echo("\nDefault planet at start:")
    click.echo(f"  Habitability: {initial['habitability_pct']:.1f}% ({initial['phase'].name})")
    click.echo("\nVisualization:")
    click.echo(f"  Primary Color: {scenario_info['color_primary']}")
    click.echo(f"  Secondary Color: {scenario_info['color_secondary']}")
    click.echo()


@main.command("sensitivity")
@click.option(
    "--scenario", "-s",
    type=click.Choice(list_scenarios()),
    default="realistic",
    help="Scenario providing the base forcing",
)
@click.option("--gh-min", type=float, default=0.0, help="Minimum greenhouse effect")
@click.option("--gh-max", type=float, default=40.0, help="Maximum greenhouse effect")
@click.option("--n-samples", type=int, default=10, help="Number of greenhouse values to test")
@click.option("--steps", "-n", type=int, default=240, help="Steps per run")
@click.option("--dt", type=float, default=3600.0, help="Step length in seconds")
@click.option(
    "--output-dir", "-o",
    type=click.Path(),
    default="./sensitivity",
    help="Output directory",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default="./logs",
    help="Log directory",
)
@click.pass_context
def sensitivity(ctx, scenario, gh_min, gh_max, n_samples, steps, dt, output_dir, log_dir):
    """Sweep the greenhouse effect and tabulate final climate."""
    import numpy as np
    import pandas as pd
    from regioclima.analysis.sensitivity import greenhouse_sensitivity

    config = ctx.obj["config"]

    setup_logging(
        level="INFO",
        log_dir=log_dir,
        experiment_name=f"sensitivity_{scenario}",
        format_style="detailed",
        always_save=True,
        include_timestamp=False,
    )

    try:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        click.echo(f"\nSensitivity Analysis: {scenario}")
        click.echo(f"Greenhouse range: [{gh_min}, {gh_max}]")
        click.echo(f"Samples: {n_samples}, {steps} steps × {dt:.0f} s")
        click.echo("─" * 50)

        results_list = greenhouse_sensitivity(
            config,
            forcing_for(scenario, start_day=config["simulation"].get("start_day")),
            np.linspace(gh_min, gh_max, n_samples),
            steps,
            dt,
        )

        start_step("Compile results")

        rows = []
        for greenhouse, results in results_list:
            if results is not None:
                summary = results.summary()
                rows.append({
                    "greenhouse_effect": greenhouse,
                    "final_surface_temperature_k": summary["final_surface_temperature_k"],
                    "final_ice_area_km2": summary["final_ice_area_km2"],
                    "ice_lost_pct": summary["ice_lost_pct"],
                    "habitability_pct": summary["habitability_pct"],
                    "phase": summary["phase"],
                })
            else:
                rows.append({
                    "greenhouse_effect": greenhouse,
                    "final_surface_temperature_k": np.nan,
                    "final_ice_area_km2": np.nan,
                    "ice_lost_pct": np.nan,
                    "habitability_pct": np.nan,
                    "phase": None,
                })

        df = pd.DataFrame(rows)
        csv_path = output_dir / f"{scenario}_sensitivity.csv"
        df.to_csv(csv_path, index=False)
        click.echo(f"\nResults saved to: {csv_path}")

        click.echo("\nResults:")
        click.echo(df.to_string(index=False))

        end_step(success=True)

        timing_logger = get_timing_logger()
        if timing_logger:
            click.echo(timing_logger.get_summary())
        click.echo()

    except Exception as e:
        log_error(e, "Sensitivity analysis")
        click.echo(f"\nFATAL ERROR: {e}", err=True)
        click.echo(f"Check log file in: {log_dir}", err=True)
        click.echo(traceback.format_exc(), err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
