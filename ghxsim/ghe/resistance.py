from math import log, pi

from ghxsim.constants import DB_COEFFICIENT, DB_PR_EXPONENT, DB_RE_EXPONENT, TWO_PI
from ghxsim.errors import ConfigurationError
from ghxsim.ghe.pipe import Pipe
from ghxsim.media import Grout


def compute_reynolds(m_flow_pipe: float, r_in: float, fluid) -> float:
    # Re = rho * V * D / mu, with V = m_dot / (rho * A)
    d_in = 2.0 * r_in
    velocity = m_flow_pipe / fluid.rho / (pi * r_in**2)
    return fluid.rho * d_in * velocity / fluid.mu


def convective_resistance(m_flow_pipe: float, r_in: float, fluid) -> float:
    """
    Film resistance of the fluid inside two parallel pipe legs (m.K/W).

    Dittus-Boelter with the heating exponent on Pr. Stagnant fluid gives zero.
    """
    if m_flow_pipe == 0.0:
        return 0.0

    re = compute_reynolds(m_flow_pipe, r_in, fluid)
    pr = fluid.cp * fluid.mu / fluid.k
    nu = DB_COEFFICIENT * re**DB_RE_EXPONENT * pr**DB_PR_EXPONENT
    d_in = 2.0 * r_in
    h_conv = nu * fluid.k / d_in
    return 1.0 / (TWO_PI * d_in * h_conv)


def pipe_conduction_resistance(pipe: Pipe) -> float:
    # pipe legs in parallel, so halved
    return log(pipe.r_out / pipe.r_in) / (TWO_PI * pipe.k) / 2.0


def grout_fit_coefficients(distance_ratio: float) -> tuple[float, float]:
    """Shape factor fit (B0, B1) for a U-tube leg spacing ratio."""
    if 0.0 <= distance_ratio <= 0.25:
        return 14.450872, -0.8176
    elif 0.25 < distance_ratio < 0.5:
        return 20.100377, -0.94467
    elif 0.5 <= distance_ratio <= 0.75:
        return 17.44268, -0.605154
    else:
        return 21.90587, -0.3796


def grout_resistance(pipe: Pipe, grout: Grout, r_b: float) -> float:
    max_distance = 2.0 * r_b - 2.0 * pipe.d_out
    b0, b1 = grout_fit_coefficients(pipe.u_tube_distance / max_distance)
    return 1.0 / (grout.k * b0 * (r_b / pipe.r_out) ** b1)


class ThermalResistanceModel:
    """
    Fluid to ground resistance of one exchanger, re-evaluated every step.

    The total mass flow is split evenly over the parallel circuits.
    """

    def __init__(self, pipe: Pipe, num_circuits: int) -> None:
        self.pipe = pipe
        self.num_circuits = num_circuits
        self.r_conv = 0.0
        self.r_cond = pipe_conduction_resistance(pipe)

    def calc_resistance(self, m_flow_total: float, fluid) -> float:
        m_flow_pipe = m_flow_total / self.num_circuits
        self.r_conv = convective_resistance(m_flow_pipe, self.pipe.r_in, fluid)
        return self.r_conv + self.r_cond


class BoreholeResistanceModel(ThermalResistanceModel):
    def __init__(self, pipe: Pipe, grout: Grout, r_b: float, num_boreholes: int) -> None:
        super().__init__(pipe, num_boreholes)
        if 2.0 * r_b - 2.0 * pipe.d_out <= 0.0:
            raise ConfigurationError(
                f"Borehole radius {r_b} m cannot hold two pipe legs of outer diameter {pipe.d_out} m"
            )
        self.grout = grout
        self.r_b = r_b
        self.r_grout = grout_resistance(pipe, grout, r_b)

    def calc_resistance(self, m_flow_total: float, fluid) -> float:
        return super().calc_resistance(m_flow_total, fluid) + self.r_grout


class SlinkyResistanceModel(ThermalResistanceModel):
    def __init__(self, pipe: Pipe, num_trenches: int) -> None:
        super().__init__(pipe, num_trenches)
