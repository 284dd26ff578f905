import pytest

from ghxsim.errors import ConfigurationError
from ghxsim.utilities import check_arg_bounds, eskilson_log_times, read_csv_column, write_flat_dict_to_csv


def test_eskilson_log_times():
    log_times = eskilson_log_times()
    assert len(log_times) == 27
    assert log_times == sorted(log_times)


def test_check_arg_bounds():
    check_arg_bounds(1.0, 2.0, "a", "b")
    with pytest.raises(ConfigurationError):
        check_arg_bounds(2.0, 2.0, "a", "b")


def test_csv_round_trip(tmp_path):
    path = tmp_path / "cols.csv"
    write_flat_dict_to_csv(path, {"Hour": [1, 2, 3], "Inlet": [20.5, 21.0, 22.0]})
    assert read_csv_column(path, "Inlet") == [20.5, 21.0, 22.0]
    with pytest.raises(ConfigurationError):
        read_csv_column(path, "Outlet")
