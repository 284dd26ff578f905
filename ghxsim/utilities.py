import csv
from json import dumps, loads
from pathlib import Path

from ghxsim.errors import ConfigurationError


# Time functions
# --------------
def eskilson_log_times() -> list[float]:
    # Return a list of Eskilson's 27 dimensionless points in time
    return [-8.5, -7.8, -7.2, -6.5, -5.9, -5.2, -4.5, -3.963, -3.27, -2.864, -2.577, -2.171, -1.884, -1.191,
            -0.497, -0.274, -0.051, 0.196, 0.419, 0.642, 0.873, 1.112, 1.335, 1.679, 2.028, 2.275, 3.003]


# Argument checks
# ---------------
def check_arg_bounds(lower: float, upper: float, lower_name: str, upper_name: str) -> None:
    if lower >= upper:
        raise ConfigurationError(f"{lower_name} ({lower}) must be less than {upper_name} ({upper})")


# File functions
# --------------
def load_input_file(input_file_path: Path) -> dict:
    return loads(input_file_path.read_text())


def read_csv_column(file_path: Path, column_name: str) -> list[float]:
    with file_path.open(newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None or column_name not in reader.fieldnames:
            raise ConfigurationError(f'Column "{column_name}" not found in {file_path}')
        return [float(row[column_name]) for row in reader if row[column_name].strip() != ""]


def write_json(write_path: Path, input_dict: dict) -> None:
    write_path.write_text(dumps(input_dict, sort_keys=True, indent=2, separators=(",", ": ")))


def write_flat_dict_to_csv(write_path: Path, input_dict: dict[str, list]) -> None:
    """Write equal-length columns keyed by header name."""
    headers = list(input_dict.keys())
    columns = [input_dict[h] for h in headers]
    with write_path.open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(headers)
        for row in zip(*columns):
            writer.writerow(row)
