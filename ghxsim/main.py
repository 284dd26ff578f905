#!/usr/bin/env python
import logging
import sys
from pathlib import Path

import click
from jsonschema.exceptions import ValidationError

from ghxsim.constants import VERSION
from ghxsim.errors import ConfigurationError, GHELookupError
from ghxsim.ghe.manager import GHEManager
from ghxsim.output.manager import OutputManager
from ghxsim.simulation import SimulationParameters
from ghxsim.utilities import load_input_file, read_csv_column
from ghxsim.validate import validate_input_file

logging.basicConfig(level=logging.WARN, format="%(message)s", datefmt="[%X]")
logger = logging.getLogger(__name__)

SUPPORTED_INPUT_VERSION = 1


def get_inlet_temperatures(sim_inputs: dict, input_file_path: Path) -> float | list[float]:
    if "inlet_temperature" in sim_inputs:
        return sim_inputs["inlet_temperature"]
    # relative file paths are resolved against the input file location
    file_path = Path(sim_inputs["inlet_temperature_file"])
    if not file_path.is_absolute():
        file_path = input_file_path.parent / file_path
    return read_csv_column(file_path, sim_inputs["column_name"])


def run(input_file_path: Path, output_directory: Path) -> int:
    """
    Worker function to run a simulation.

    :param input_file_path: path to input file. Input file must exist.
    :param output_directory: path to write output files. Output directory must be a valid path.
    """

    try:
        validate_input_file(input_file_path)
    except ValidationError:
        return 1

    full_inputs = load_input_file(input_file_path)

    input_file_version: int = full_inputs["version"]
    if input_file_version != SUPPORTED_INPUT_VERSION:
        print(f"Bad input file version, right now we support these versions: {SUPPORTED_INPUT_VERSION}")
        return 1

    try:
        manager = GHEManager.init_from_dictionary(full_inputs)
        sim_params = SimulationParameters.init_from_dict(full_inputs["simulation"])
        inlet_temps = get_inlet_temperatures(full_inputs["simulation"], input_file_path)
        results = manager.run_simulation(sim_params, inlet_temps)
    except (ConfigurationError, GHELookupError) as e:
        logger.error(f"Simulation aborted: {e}")
        return 1

    output = OutputManager("ghxsim Run from CLI", f"Input file: {input_file_path.name}")
    output.write_all_output_files(output_directory, manager.ghes, results)
    return 0


@click.command(name="GHXSimCommandLine")
@click.argument("input-path", type=click.Path(exists=True), required=True)
@click.argument("output-directory", type=click.Path(exists=False), required=False)
@click.version_option(VERSION)
@click.option("--validate-only", default=False, is_flag=True, show_default=False, help="Validate input file and exit.")
def run_manager_from_cli(input_path, output_directory, validate_only):
    # click absorbs return values, so exit codes go through sys.exit
    input_path = Path(input_path).resolve()

    if validate_only:
        try:
            validate_input_file(input_path)
            logger.info("Valid input file.")
            sys.exit(0)
        except ValidationError as ve:
            logger.error(ve.message)
            sys.exit(1)

    if output_directory is None:
        print("Output directory path must be passed as an argument, aborting", file=sys.stderr)
        sys.exit(1)

    output_path = Path(output_directory).resolve()

    return_code = run(input_path, output_path)
    sys.exit(return_code)


if __name__ == "__main__":
    run_manager_from_cli()
