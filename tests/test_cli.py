"""Tests for the command-line interface."""

import pandas as pd
import pytest
from click.testing import CliRunner

from regioclima.cli import main


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, config_path, *args):
    return runner.invoke(main, ["--config", str(config_path), *args])


class TestCommands:
    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "regioclima" in result.output

    def test_list(self, runner, config_path):
        result = invoke(runner, config_path, "list")
        assert result.exit_code == 0
        for key in ("realistic", "game_balanced", "debug", "polar_winter"):
            assert key in result.output

    def test_info(self, runner, config_path):
        result = invoke(runner, config_path, "info", "polar_winter")
        assert result.exit_code == 0
        assert "Northern Polar Winter" in result.output
        assert "Start day: 400.0" in result.output

    def test_info_unknown(self, runner, config_path):
        result = invoke(runner, config_path, "info", "venus")
        assert result.exit_code == 1

    def test_run_writes_csv(self, runner, config_path, tmp_path):
        out_dir = tmp_path / "out"
        result = invoke(
            runner, config_path, "run",
            "--scenario", "debug",
            "--steps", "5",
            "--dt", "3600",
            "--outputs", "csv",
            "--output-dir", str(out_dir),
            "--log-dir", str(tmp_path / "logs"),
            "--no-progress",
        )
        assert result.exit_code == 0, result.output
        csv_path = out_dir / "csv" / "debug_data.csv"
        assert csv_path.exists()
        assert len(pd.read_csv(csv_path)) == 5
        assert (tmp_path / "logs" / "debug.log").exists()

    def test_run_constant_forcing(self, runner, config_path, tmp_path):
        out_dir = tmp_path / "out"
        result = invoke(
            runner, config_path, "run",
            "--scenario", "realistic",
            "--constant",
            "--steps", "3",
            "--outputs", "csv",
            "--output-dir", str(out_dir),
            "--log-dir", str(tmp_path / "logs"),
            "--experiment-name", "flat",
            "--no-progress",
        )
        assert result.exit_code == 0, result.output
        df = pd.read_csv(out_dir / "csv" / "flat_data.csv")
        assert df["day_of_year"].nunique() == 1

    def test_run_with_forcing_file(self, runner, config_path, tmp_path):
        forcing_path = tmp_path / "series.csv"
        forcing_path.write_text("time_s,greenhouse\n0,0\n7200,10\n")
        out_dir = tmp_path / "out"
        result = invoke(
            runner, config_path, "run",
            "--forcing", str(forcing_path),
            "--steps", "3",
            "--outputs", "csv",
            "--output-dir", str(out_dir),
            "--log-dir", str(tmp_path / "logs"),
            "--no-progress",
        )
        assert result.exit_code == 0, result.output
        df = pd.read_csv(out_dir / "csv" / "series_data.csv")
        assert df["greenhouse_effect"].tolist() == pytest.approx([0.0, 5.0, 10.0])

    def test_sensitivity(self, runner, config_path, tmp_path):
        out_dir = tmp_path / "sens"
        result = invoke(
            runner, config_path, "sensitivity",
            "--scenario", "realistic",
            "--n-samples", "3",
            "--steps", "2",
            "--output-dir", str(out_dir),
            "--log-dir", str(tmp_path / "logs"),
        )
        assert result.exit_code == 0, result.output
        df = pd.read_csv(out_dir / "realistic_sensitivity.csv")
        assert df["greenhouse_effect"].tolist() == pytest.approx([0.0, 20.0, 40.0])

    def test_run_uses_configured_start_day(self, runner, config_path, tmp_path):
        config_path.write_text("simulation:\n  start_day: 100.0\n")
        out_dir = tmp_path / "out"
        result = invoke(
            runner, config_path, "run",
            "--scenario", "polar_winter",
            "--constant",
            "--steps", "2",
            "--outputs", "csv",
            "--output-dir", str(out_dir),
            "--log-dir", str(tmp_path / "logs"),
            "--experiment-name", "day100",
            "--no-progress",
        )
        assert result.exit_code == 0, result.output
        df = pd.read_csv(out_dir / "csv" / "day100_data.csv")
        assert df["day_of_year"].tolist() == pytest.approx([100.0, 100.0])
