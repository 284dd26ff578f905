from copy import deepcopy
from math import log, pi
from pathlib import Path

import pytest

from ghxsim.enums import GHEType, SlinkyConfigType
from ghxsim.errors import ConfigurationError
from ghxsim.ghe.fields import SlinkyField, VerticalBoreholeField, get_field_object
from ghxsim.utilities import load_input_file

TEST_DATA = load_input_file(Path(__file__).parent / "test_data" / "single_borehole.json")

SLINKY_INPUTS = {
    "type": "SLINKY",
    "flow_rate": 0.0002,
    "soil": {"conductivity": 1.08, "rho_cp": 1.9e6},
    "pipe": {"conductivity": 0.4, "rho_cp": 1.542e6, "outer_diameter": 0.02667, "wall_thickness": 0.002413},
    "coil": {"configuration": "VERTICAL", "diameter": 1.0, "pitch": 0.25},
    "trench": {"depth": 2.0, "length": 1.0, "count": 1, "spacing": 2.0},
    "max_simulation_years": 1,
    "ground_temperature": {"average": 15.5, "amplitude": 12.8, "phase_shift_days": 17.3},
    "quadrature": {"outer_points": 5, "inner_points_self": 9, "inner_points": 5},
}


@pytest.fixture
def vertical_inputs():
    return deepcopy(TEST_DATA)


@pytest.fixture
def slinky_inputs():
    return deepcopy(SLINKY_INPUTS)


def test_factory_types(vertical_inputs, slinky_inputs):
    assert isinstance(get_field_object(GHEType.VERTICAL, vertical_inputs), VerticalBoreholeField)
    assert isinstance(get_field_object(GHEType.SLINKY, slinky_inputs), SlinkyField)


def test_vertical_properties(vertical_inputs):
    field = VerticalBoreholeField.init_from_dict(vertical_inputs)
    assert field.total_tube_length == pytest.approx(100.0)
    assert field.time_scale == pytest.approx(100.0**2 / (9.0 * 1.0e-6) / 3600.0)
    assert field.ground_temperature(200) == 10.0


def test_vertical_needs_ground_temperature(vertical_inputs):
    del vertical_inputs["soil"]["undisturbed_temp"]
    with pytest.raises(ConfigurationError):
        VerticalBoreholeField.init_from_dict(vertical_inputs)


def test_vertical_needs_u_tube_distance(vertical_inputs):
    del vertical_inputs["pipe"]["u_tube_distance"]
    with pytest.raises(ConfigurationError):
        VerticalBoreholeField.init_from_dict(vertical_inputs)


def test_vertical_needs_table_or_layout(vertical_inputs):
    del vertical_inputs["g_function"]
    with pytest.raises(ConfigurationError):
        VerticalBoreholeField.init_from_dict(vertical_inputs)


def test_vertical_layout_count_mismatch(vertical_inputs):
    vertical_inputs["field"] = {"rows": 2, "columns": 2, "spacing": 5.0}
    with pytest.raises(ConfigurationError):
        VerticalBoreholeField.init_from_dict(vertical_inputs)


def test_vertical_horizon_beyond_table(vertical_inputs):
    vertical_inputs["g_function"]["lntts"] = [-16.0, -12.0, -8.0, -5.0]
    vertical_inputs["g_function"]["g"] = [-1.0, 0.9, 2.8, 5.0]
    field = VerticalBoreholeField.init_from_dict(vertical_inputs)
    with pytest.raises(ConfigurationError):
        field.prepare()


def test_vertical_radius_correction(vertical_inputs):
    field = VerticalBoreholeField.init_from_dict(vertical_inputs)
    assert field.get_response_value(0.0) == pytest.approx(6.8)

    vertical_inputs["borehole"]["radius"] = 0.12
    corrected = VerticalBoreholeField.init_from_dict(vertical_inputs)
    # the table was generated for r_b = 0.06 m
    assert corrected.get_response_value(0.0) == pytest.approx(6.8 - log(2.0))


def test_vertical_generated_table():
    inputs = deepcopy(TEST_DATA)
    del inputs["g_function"]
    inputs["field"] = {"rows": 1, "columns": 1, "spacing": 5.0}
    field = VerticalBoreholeField.init_from_dict(inputs)
    assert field.reference_ratio == pytest.approx(0.06 / 100.0)
    assert len(field.response_table) == 27


def test_slinky_properties(slinky_inputs):
    field = SlinkyField.init_from_dict(slinky_inputs)
    assert field.config == SlinkyConfigType.VERTICAL
    assert field.num_coils == 4
    assert field.coil_depth == pytest.approx(1.5)
    assert field.time_scale == 1.0
    assert field.total_tube_length == pytest.approx(pi * 1.0 * 1.0 * 1 / 0.25)
    expected = field.ground_temp_model.get_temperature(1.5, 10, field.soil.alpha)
    assert field.ground_temperature(10) == pytest.approx(expected)


def test_horizontal_coil_depth(slinky_inputs):
    slinky_inputs["coil"]["configuration"] = "HORIZONTAL"
    field = SlinkyField.init_from_dict(slinky_inputs)
    assert field.coil_depth == pytest.approx(2.0)


def test_vertical_coil_above_ground(slinky_inputs):
    slinky_inputs["trench"]["depth"] = 0.8
    with pytest.raises(ConfigurationError):
        SlinkyField.init_from_dict(slinky_inputs)


def test_slinky_needs_ground_temperature(slinky_inputs):
    del slinky_inputs["ground_temperature"]
    with pytest.raises(ConfigurationError):
        SlinkyField.init_from_dict(slinky_inputs)


def test_slinky_table_generated_once(slinky_inputs):
    field = SlinkyField.init_from_dict(slinky_inputs)
    table = field.response_table
    assert field.response_table is table
    assert table.min_lntts == pytest.approx(-2.0 * log(10.0))
