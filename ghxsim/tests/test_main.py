import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from ghxsim.constants import VERSION
from ghxsim.main import run, run_manager_from_cli
from ghxsim.tests.test_base_case import GHEBaseTest
from ghxsim.utilities import load_input_file


def get_demo_files() -> list[Path]:
    demos_path = Path(__file__).parent.parent.parent / "demos"
    return sorted(demos_path.glob("*.json"))


@pytest.mark.parametrize("demo_file_path", get_demo_files(), ids=lambda f: "Demo: " + f.stem)
def test_demo_files_run(demo_file_path, tmp_path):
    assert run(demo_file_path, tmp_path) == 0
    summary = json.loads((tmp_path / "SimulationSummary.json").read_text())
    for ghe_summary in summary["ghe"].values():
        assert ghe_summary["number_of_steps"] > 0


class TestMain(GHEBaseTest):
    def test_run_writes_outputs(self):
        out_dir = self.test_outputs_directory / "cli_input"
        self.assertEqual(run(self.test_data_directory / "cli_input.json", out_dir), 0)

        summary = json.loads((out_dir / "SimulationSummary.json").read_text())
        self.assertEqual(summary["version"], VERSION)
        self.assertEqual(summary["ghe"]["bh1"]["number_of_steps"], 48)

        timeseries = (out_dir / "bh1_timeseries.csv").read_text().splitlines()
        self.assertEqual(len(timeseries), 49)
        self.assertTrue(timeseries[0].startswith("Time [hr],State,Inlet Temperature [C]"))
        self.assertTrue(timeseries[1].startswith("0.0,COLD,21.0"))
        self.assertTrue((out_dir / "bh1_gfunction.csv").exists())

    def test_bad_version(self):
        inputs = load_input_file(self.test_data_directory / "cli_input.json")
        inputs["version"] = 2
        inputs["simulation"]["inlet_temperature_file"] = str(self.test_data_directory / "cli_inlet.csv")
        input_path = self.test_outputs_directory / "bad_version.json"
        input_path.write_text(json.dumps(inputs))
        self.assertEqual(run(input_path, self.test_outputs_directory / "bad_version"), 1)

    def test_configuration_error_returns_one(self):
        inputs = load_input_file(self.test_data_directory / "cli_input.json")
        inputs["simulation"]["inlet_temperature_file"] = str(self.test_data_directory / "cli_inlet.csv")
        inputs["simulation"]["column_name"] = "Outlet"
        input_path = self.test_outputs_directory / "bad_column.json"
        input_path.write_text(json.dumps(inputs))
        self.assertEqual(run(input_path, self.test_outputs_directory / "bad_column"), 1)

    def test_cli_validate_only(self):
        runner = CliRunner()
        input_path = str(self.test_data_directory / "cli_input.json")
        result = runner.invoke(run_manager_from_cli, ["--validate-only", input_path])
        self.assertEqual(result.exit_code, 0)

    def test_cli_needs_output_directory(self):
        runner = CliRunner()
        result = runner.invoke(run_manager_from_cli, [str(self.test_data_directory / "cli_input.json")])
        self.assertEqual(result.exit_code, 1)

    def test_cli_run(self):
        runner = CliRunner()
        out_dir = self.test_outputs_directory / "cli_run"
        result = runner.invoke(run_manager_from_cli, [str(self.test_data_directory / "cli_input.json"), str(out_dir)])
        self.assertEqual(result.exit_code, 0)
        self.assertTrue((out_dir / "SimulationSummary.json").exists())

    def test_cli_version(self):
        runner = CliRunner()
        result = runner.invoke(run_manager_from_cli, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(VERSION, result.output)
