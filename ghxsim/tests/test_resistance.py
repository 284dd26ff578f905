from math import log, pi

import pytest

from ghxsim.errors import ConfigurationError
from ghxsim.ghe.pipe import Pipe
from ghxsim.ghe.resistance import (
    BoreholeResistanceModel,
    SlinkyResistanceModel,
    compute_reynolds,
    convective_resistance,
    grout_fit_coefficients,
    grout_resistance,
    pipe_conduction_resistance,
)
from ghxsim.media import Grout
from ghxsim.tests.test_base_case import MockFluid


@pytest.fixture
def pipe():
    return Pipe(0.4, 1542000.0, outer_diameter=0.0267, wall_thickness=0.0024, u_tube_distance=0.0254)


@pytest.fixture
def grout():
    return Grout(1.0, 3901000.0)


@pytest.mark.parametrize(
    "ratio, expected",
    [
        (0.0, (14.450872, -0.8176)),
        (0.25, (14.450872, -0.8176)),
        (0.3, (20.100377, -0.94467)),
        (0.5, (17.44268, -0.605154)),
        (0.75, (17.44268, -0.605154)),
        (0.9, (21.90587, -0.3796)),
    ],
)
def test_grout_fit_regimes(ratio, expected):
    assert grout_fit_coefficients(ratio) == expected


def test_zero_flow_film_resistance(pipe):
    assert convective_resistance(0.0, pipe.r_in, MockFluid()) == 0.0


def test_reynolds():
    fluid = MockFluid()
    r_in = 0.01
    m_flow = 0.1
    # Re = 4 m / (pi d mu)
    assert compute_reynolds(m_flow, r_in, fluid) == pytest.approx(4.0 * m_flow / (pi * 0.02 * fluid.mu))


def test_film_resistance_hand_calc(pipe):
    fluid = MockFluid()
    m_flow = 0.2
    d_in = 2.0 * pipe.r_in
    re = 4.0 * m_flow / (pi * d_in * fluid.mu)
    pr = fluid.cp * fluid.mu / fluid.k
    h = 0.023 * re**0.8 * pr**0.35 * fluid.k / d_in
    assert convective_resistance(m_flow, pipe.r_in, fluid) == pytest.approx(1.0 / (2.0 * pi * d_in * h))


def test_pipe_conduction(pipe):
    expected = log(pipe.r_out / pipe.r_in) / (2.0 * pi * 0.4) / 2.0
    assert pipe_conduction_resistance(pipe) == pytest.approx(expected)


def test_grout_resistance_hand_calc(pipe, grout):
    r_b = 0.06
    ratio = 0.0254 / (2.0 * r_b - 2.0 * 0.0267)
    b0, b1 = grout_fit_coefficients(ratio)
    assert b0 == 20.100377
    expected = 1.0 / (1.0 * b0 * (r_b / pipe.r_out) ** b1)
    assert grout_resistance(pipe, grout, r_b) == pytest.approx(expected)


def test_borehole_model_sums_parts(pipe, grout):
    model = BoreholeResistanceModel(pipe, grout, 0.06, num_boreholes=2)
    fluid = MockFluid()
    total = model.calc_resistance(0.4, fluid)
    # flow is split over the boreholes
    assert model.r_conv == pytest.approx(convective_resistance(0.2, pipe.r_in, fluid))
    assert total == pytest.approx(model.r_conv + model.r_cond + model.r_grout)


def test_borehole_model_zero_flow(pipe, grout):
    model = BoreholeResistanceModel(pipe, grout, 0.06, num_boreholes=1)
    total = model.calc_resistance(0.0, MockFluid())
    assert model.r_conv == 0.0
    assert total == pytest.approx(model.r_cond + model.r_grout)


def test_slinky_model_has_no_grout(pipe):
    model = SlinkyResistanceModel(pipe, num_trenches=3)
    fluid = MockFluid()
    total = model.calc_resistance(0.3, fluid)
    assert total == pytest.approx(convective_resistance(0.1, pipe.r_in, fluid) + pipe_conduction_resistance(pipe))


@pytest.mark.parametrize("r_b", [0.0267, 0.02])
def test_borehole_too_small_for_pipes(pipe, grout, r_b):
    # the legs need a positive spacing allowance inside the borehole
    with pytest.raises(ConfigurationError):
        BoreholeResistanceModel(pipe, grout, r_b, num_boreholes=1)
