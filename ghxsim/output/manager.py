from pathlib import Path

from ghxsim.constants import VERSION
from ghxsim.ghe.ground_heat_exchangers import GroundHeatExchanger
from ghxsim.simulation import StepResult
from ghxsim.utilities import write_flat_dict_to_csv, write_json


class OutputManager:
    """
    Writes simulation outputs for every exchanger instance:
      - a time series CSV of the step results
      - the response table as CSV
      - a JSON summary
    """

    def __init__(self, project_name: str = "", notes: str = "") -> None:
        self.project_name = project_name
        self.notes = notes

    @staticmethod
    def timeseries_columns(results: list[StepResult]) -> dict[str, list]:
        return {
            "Time [hr]": [r.sim_time for r in results],
            "State": [r.state.name for r in results],
            "Inlet Temperature [C]": [r.inlet_temp for r in results],
            "Outlet Temperature [C]": [r.outlet_temp for r in results],
            "Average Fluid Temperature [C]": [r.avg_fluid_temp for r in results],
            "Borehole Temperature [C]": [r.borehole_temp for r in results],
            "Heat Transfer Rate [W]": [r.heat_rate for r in results],
            "Mass Flow Rate [kg/s]": [r.mass_flow_rate for r in results],
        }

    @staticmethod
    def just_write_g_function(output_directory: Path, ghe: GroundHeatExchanger) -> None:
        output_directory.mkdir(parents=True, exist_ok=True)
        table = ghe.field.response_table
        write_flat_dict_to_csv(
            output_directory / f"{ghe.name}_gfunction.csv",
            {"lntts": table.lntts.tolist(), "g": table.g.tolist()},
        )

    def summary_dict(self, ghes: list[GroundHeatExchanger], results: dict[str, list[StepResult]]) -> dict:
        summary = {"version": VERSION, "project_name": self.project_name, "notes": self.notes, "ghe": {}}
        for ghe in ghes:
            ghe_results = results.get(ghe.name, [])
            entry = ghe.as_dict()
            entry["number_of_steps"] = len(ghe_results)
            if ghe_results:
                outlet_temps = [r.outlet_temp for r in ghe_results]
                entry["final"] = ghe_results[-1].as_dict()
                entry["max_outlet_temperature"] = {"value": max(outlet_temps), "units": "C"}
                entry["min_outlet_temperature"] = {"value": min(outlet_temps), "units": "C"}
            summary["ghe"][ghe.name] = entry
        return summary

    def write_all_output_files(
        self, output_directory: Path, ghes: list[GroundHeatExchanger], results: dict[str, list[StepResult]]
    ) -> None:
        output_directory.mkdir(parents=True, exist_ok=True)
        for ghe in ghes:
            write_flat_dict_to_csv(
                output_directory / f"{ghe.name}_timeseries.csv", self.timeseries_columns(results.get(ghe.name, []))
            )
            self.just_write_g_function(output_directory, ghe)
        write_json(output_directory / "SimulationSummary.json", self.summary_dict(ghes, results))
