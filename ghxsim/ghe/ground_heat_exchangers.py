import logging
from collections.abc import Callable
from math import log

from ghxsim.constants import (
    AGG,
    DELTA_TEMP_LIMIT,
    DESIGN_FLOW_REF_TEMP,
    HRS_IN_DAY,
    HRS_IN_MONTH,
    MAX_TS_IN_HR,
    SUB_AGG,
    TWO_PI,
)
from ghxsim.enums import SimState
from ghxsim.ghe.fields.base import GHEFieldBase
from ghxsim.ghe.load_aggregation import LoadHistoryAggregator
from ghxsim.simulation import SimulationClock, StepResult

logger = logging.getLogger(__name__)

flow_request_type = Callable[[float], float]


class GroundHeatExchanger:
    """
    Time-stepped ground heat exchanger model driven by a host simulation.

    Each step takes the loop inlet temperature and returns the outlet temperature, using a
    response function (g-function) superposition over a load history aggregated at sub-hourly,
    hourly and monthly resolution.

    References:
    Eskilson, P. 'Thermal Analysis of Heat Extraction Boreholes' Ph.D. Thesis:
      Dept. of Mathematical Physics, University of Lund, Sweden, June 1987.
    Yavuzturk, C., J.D. Spitler. 1999. 'A Short Time Step Response Factor Model
      for Vertical Ground Loop Heat Exchangers. ASHRAE Transactions. 105(2): 475-485.
    """

    def __init__(
        self,
        name: str,
        field: GHEFieldBase,
        fluid,
        design_flow_rate: float,
        regulate_flow: flow_request_type | None = None,
        max_steps_per_hour: int = MAX_TS_IN_HR,
    ) -> None:
        """
        :param name: instance name
        :param field: vertical or slinky field
        :param fluid: fluid property provider, e.g. ghxsim.media.Fluid
        :param design_flow_rate: design volume flow rate (m3/s)
        :param regulate_flow: called with the design mass flow rate each step, returns the
            mass flow rate (kg/s) for the step. Defaults to the design mass flow rate.
        :param max_steps_per_hour: sizes the sub-hourly history
        """
        self.name = name
        self.field = field
        self.fluid = fluid
        self.design_flow_rate = design_flow_rate
        self.design_mass_flow = design_flow_rate * fluid.density_at(DESIGN_FLOW_REF_TEMP)
        self.regulate_flow = regulate_flow
        self.history = LoadHistoryAggregator(field.max_sim_years, max_steps_per_hour)

        self.state = SimState.RESET

        # boundary values of the latest step, seeded with the day 1 far-field temperature
        self.ground_temp = field.ground_temperature(1)
        self.inlet_temp = self.ground_temp
        self.outlet_temp = self.ground_temp
        self.avg_fluid_temp = self.ground_temp
        self.borehole_temp = self.ground_temp
        self.mass_flow_rate = 0.0
        self.heat_rate = 0.0  # W
        self.hx_resistance = 0.0  # m.K/W
        self.q_n = 0.0  # W/m, latest solved heat rate per unit length

        # heat rate per unit length credited to the interval ending at the current time
        self._committed_q = 0.0

        # environment and design day bookkeeping
        self._begin_envrn_pending = True
        self._update_cur_sim_time = True
        self._trigger_design_day_reset = False
        self._warned = False

    @property
    def total_tube_length(self) -> float:
        return self.field.total_tube_length

    def get_response_value(self, lntts: float) -> float:
        return self.field.get_response_value(lntts)

    def initialize(self, clock: SimulationClock) -> None:
        """
        Per-step initialization. Resets the instance once at the start of each environment
        and requests the step's mass flow rate.
        """
        self.field.prepare()

        if clock.begin_environment and self._begin_envrn_pending:
            self._begin_envrn_pending = False
            self.history.reset()
            self.state = SimState.RESET
            self.q_n = 0.0
            self._committed_q = 0.0
            self.heat_rate = 0.0
            self.ground_temp = self.field.ground_temperature(clock.day_of_sim)
            self.inlet_temp = self.ground_temp
            self.outlet_temp = self.ground_temp
            self.avg_fluid_temp = self.ground_temp
            self.borehole_temp = self.ground_temp

        if not clock.begin_environment:
            self._begin_envrn_pending = True

        if self.regulate_flow is None:
            self.mass_flow_rate = self.design_mass_flow
        else:
            self.mass_flow_rate = self.regulate_flow(self.design_mass_flow)

    def step(self, inlet_temp: float, clock: SimulationClock) -> StepResult:
        self.initialize(clock)
        self.inlet_temp = inlet_temp
        self._check_design_day_reset(clock)

        sim_time = clock.current_sim_time

        if sim_time <= 0.0:
            self.state = SimState.COLD
            self.history.clear_times()
            self.outlet_temp = inlet_temp
            self.avg_fluid_temp = inlet_temp
            self.borehole_temp = self.ground_temp
            self.heat_rate = 0.0
            return self._result(sim_time)

        loc_hour_of_day = int(sim_time % HRS_IN_DAY) + 1
        loc_day_of_sim = int(sim_time / HRS_IN_DAY) + 1

        if sim_time != self.history.times[0]:
            self._committed_q = self.q_n
        self.history.record_step(sim_time, self._committed_q)
        self.history.aggregate(loc_day_of_sim, loc_hour_of_day)

        self.fluid.update_props_with_new_temp(inlet_temp)
        self.hx_resistance = self.field.resistance_model.calc_resistance(self.mass_flow_rate, self.fluid)

        if self.history.n == 1:
            self.state = SimState.FIRST_STEP
            self._solve_first_step(sim_time)
        else:
            if sim_time < HRS_IN_MONTH + AGG + SUB_AGG:
                self.state = SimState.SHORT_HISTORY
                history_term = self._short_history_sum(sim_time)
            else:
                self.state = SimState.AGGREGATED_HISTORY
                history_term = self._aggregated_history_sum(sim_time)
            self._solve_with_history(sim_time, history_term)

        self.heat_rate = self.q_n * self.total_tube_length

        delta_t = abs(self.outlet_temp - inlet_temp)
        if delta_t > DELTA_TEMP_LIMIT and not clock.warmup and not self._warned:
            self._warned = True
            logger.warning(
                f"GHE {self.name}: outlet to inlet temperature difference of {delta_t:0.2f} C exceeds "
                f"{DELTA_TEMP_LIMIT:0.0f} C. Check design inputs and g-functions for consistency. "
                f"Mass flow rate: {self.mass_flow_rate:0.4f} kg/s, "
                f"design mass flow rate: {self.design_mass_flow:0.4f} kg/s"
            )

        return self._result(sim_time)

    def _check_design_day_reset(self, clock: SimulationClock) -> None:
        # a warm-up period following a regular period starts a fresh history on day 1
        if self._trigger_design_day_reset and clock.warmup:
            self._update_cur_sim_time = True
        if clock.day_of_sim == 1 and self._update_cur_sim_time:
            self.history.reset()
            self.state = SimState.RESET
            self._update_cur_sim_time = False
            self._trigger_design_day_reset = False
        if clock.day_of_sim > 1:
            self._update_cur_sim_time = True
        if not clock.warmup:
            self._trigger_design_day_reset = True

    def _unit_resistance(self, delta_t: float) -> float:
        """Ground resistance per unit length (m.K/W) of a load applied for ``delta_t`` hours."""
        lntts = log(delta_t / self.field.time_scale)
        return self.get_response_value(lntts) / (TWO_PI * self.field.soil.k)

    def _sub_hourly_sum(self, sim_time: float, limit: int, boundary_q: float) -> float:
        # pulses newer than the oldest tracked hour, the oldest one relative to ``boundary_q``
        h = self.history
        total = 0.0
        for i in range(limit - 1):
            total += (h.q_sub_hr[i] - h.q_sub_hr[i + 1]) * self._unit_resistance(sim_time - h.times[i + 1])
        if limit > 0:
            r_last = self._unit_resistance(sim_time - h.times[limit])
            total += (h.q_sub_hr[limit - 1] - boundary_q) * r_last
        return total

    def _short_history_sum(self, sim_time: float) -> float:
        h = self.history
        whole_hours = int(sim_time)

        if whole_hours < SUB_AGG:
            idx = whole_hours
            boundary_q = 0.0
        else:
            idx = SUB_AGG
            boundary_q = h.q_hr[idx]
        total = self._sub_hourly_sum(sim_time, h.n - h.last_hour_n[idx], boundary_q)

        # hours older than the sub-hourly window, 1-based position in the hourly store
        for i in range(SUB_AGG + 1, whole_hours):
            total += (h.q_hr[i - 1] - h.q_hr[i]) * self._unit_resistance(sim_time - whole_hours + i)
        if whole_hours >= SUB_AGG + 1:
            total += h.q_hr[whole_hours - 1] * self._unit_resistance(sim_time)

        return total

    def _aggregated_history_sum(self, sim_time: float) -> float:
        h = self.history

        num_months = int((sim_time + 1) / HRS_IN_MONTH)
        if sim_time < num_months * HRS_IN_MONTH + AGG + SUB_AGG:
            current_month = num_months - 1
        else:
            current_month = num_months

        # months, 1-based
        total = 0.0
        for i in range(1, current_month + 1):
            if i == 1:
                total += h.q_monthly[0] * self._unit_resistance(sim_time)
            else:
                r_month = self._unit_resistance(sim_time - (i - 1) * HRS_IN_MONTH)
                total += (h.q_monthly[i - 1] - h.q_monthly[i - 2]) * r_month

        # hours since the last complete month, 1-based position in the hourly store
        whole_hours = int(sim_time)
        hourly_limit = int(sim_time - current_month * HRS_IN_MONTH)
        for i in range(SUB_AGG + 1, hourly_limit):
            total += (h.q_hr[i - 1] - h.q_hr[i]) * self._unit_resistance(sim_time - whole_hours + i)
        if hourly_limit >= SUB_AGG + 1:
            r_last = self._unit_resistance(sim_time - whole_hours + hourly_limit)
            total += (h.q_hr[hourly_limit - 1] - h.q_monthly[current_month - 1]) * r_last

        total += self._sub_hourly_sum(sim_time, h.n - h.last_hour_n[SUB_AGG], h.q_hr[SUB_AGG])
        return total

    def _solve_first_step(self, sim_time: float) -> None:
        t_g = self.ground_temp
        self.borehole_temp = t_g

        if self.mass_flow_rate <= 0.0:
            self.q_n = 0.0
            self.avg_fluid_temp = t_g
            self.outlet_temp = self.inlet_temp
            return

        r_ground = self._unit_resistance(sim_time)
        r_b = self.hx_resistance
        c_1 = self.total_tube_length / (2.0 * self.mass_flow_rate * self.fluid.cp)

        self.q_n = (t_g - self.inlet_temp) / (r_ground + r_b + c_1)
        self.avg_fluid_temp = t_g - self.q_n * r_b
        self.outlet_temp = t_g - self.q_n * (r_ground + r_b - c_1)

    def _solve_with_history(self, sim_time: float, history_term: float) -> None:
        """
        Solve for the current heat rate with the history reduced to a ground temperature offset.

        The newest pulse is replaced by the unknown, so its stored value drops out.
        """
        t_g = self.ground_temp
        self.borehole_temp = t_g - history_term

        r_q_sub_hr = self._unit_resistance(sim_time - self.history.times[1])

        if self.mass_flow_rate <= 0.0:
            self.q_n = 0.0
            self.avg_fluid_temp = t_g - history_term
            self.outlet_temp = self.inlet_temp
            return

        r_b = self.hx_resistance
        c_0 = r_q_sub_hr
        c_1 = t_g - (history_term - self.history.q_sub_hr[0] * r_q_sub_hr)
        c_2 = self.total_tube_length / (2.0 * self.mass_flow_rate * self.fluid.cp)
        c_3 = self.mass_flow_rate * self.fluid.cp / self.total_tube_length

        self.q_n = (c_1 - self.inlet_temp) / (r_b + c_0 - c_2 + 1.0 / c_3)
        self.avg_fluid_temp = c_1 - (c_0 + r_b) * self.q_n
        self.outlet_temp = c_1 + (c_2 - c_0 - r_b) * self.q_n

    def _result(self, sim_time: float) -> StepResult:
        return StepResult(
            sim_time=sim_time,
            state=self.state,
            inlet_temp=self.inlet_temp,
            outlet_temp=self.outlet_temp,
            heat_rate=self.heat_rate,
            avg_fluid_temp=self.avg_fluid_temp,
            borehole_temp=self.borehole_temp,
            mass_flow_rate=self.mass_flow_rate,
        )

    def as_dict(self) -> dict:
        return {
            "name": self.name,
            "field": self.field.as_dict(),
            "fluid": self.fluid.as_dict(),
            "design_flow_rate": {"value": self.design_flow_rate, "units": "m3/s"},
            "design_mass_flow_rate": {"value": self.design_mass_flow, "units": "kg/s"},
        }
