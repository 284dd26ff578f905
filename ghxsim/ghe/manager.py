import logging

from ghxsim.constants import DAYS_IN_YEAR, HRS_IN_DAY
from ghxsim.enums import GHEType
from ghxsim.errors import ConfigurationError, GHELookupError
from ghxsim.ghe.fields.base import GHEFieldBase
from ghxsim.ghe.fields.factory import get_field_object
from ghxsim.ghe.ground_heat_exchangers import GroundHeatExchanger, flow_request_type
from ghxsim.media import Fluid
from ghxsim.simulation import SimulationClock, SimulationParameters, StepResult

logger = logging.getLogger(__name__)


class GHEManager:
    """Registry of named exchanger instances, stepped by the host in a fixed order."""

    def __init__(self) -> None:
        self.fluid_inputs: dict = {"fluid_name": "Water", "concentration_percent": 0.0, "temperature": 20.0}
        self.ghes: list[GroundHeatExchanger] = []
        self.results: dict[str, list[StepResult]] = {}

    def set_fluid(self, fluid_name: str = "Water", concentration_percent: float = 0.0, temperature: float = 20.0):
        # each instance gets its own Fluid since property state changes every step
        Fluid.get_fluid_type(fluid_name)
        self.fluid_inputs = {
            "fluid_name": fluid_name,
            "concentration_percent": concentration_percent,
            "temperature": temperature,
        }

    def add_ghe_from_field(
        self,
        name: str,
        field: GHEFieldBase,
        design_flow_rate: float,
        regulate_flow: flow_request_type | None = None,
        max_steps_per_hour: int | None = None,
    ) -> GroundHeatExchanger:
        if any(ghe.name.upper() == name.upper() for ghe in self.ghes):
            raise ConfigurationError(f'Duplicate ground heat exchanger name "{name}"')

        kwargs = {}
        if max_steps_per_hour is not None:
            kwargs["max_steps_per_hour"] = max_steps_per_hour
        ghe = GroundHeatExchanger(
            name, field, Fluid.init_from_dict(self.fluid_inputs), design_flow_rate, regulate_flow, **kwargs
        )
        self.ghes.append(ghe)
        self.results[name] = []
        logger.info(f'Added {field.ghe_type.name} ground heat exchanger "{name}"')
        return ghe

    def add_ghe(self, name: str, ghe_dict: dict, regulate_flow: flow_request_type | None = None) -> GroundHeatExchanger:
        type_str = ghe_dict["type"].upper()
        if type_str not in GHEType.__members__:
            raise ConfigurationError(f'Ground heat exchanger "{name}" has unsupported type "{ghe_dict["type"]}"')
        field = get_field_object(GHEType[type_str], ghe_dict)
        return self.add_ghe_from_field(name, field, ghe_dict["flow_rate"], regulate_flow)

    @classmethod
    def init_from_dictionary(cls, inputs: dict) -> "GHEManager":
        manager = cls()
        if "fluid" in inputs:
            manager.set_fluid(**inputs["fluid"])
        for name, ghe_dict in inputs["ground_heat_exchanger"].items():
            manager.add_ghe(name, ghe_dict)
        return manager

    def get_ghe_index(self, name: str) -> int:
        for idx, ghe in enumerate(self.ghes):
            if ghe.name.upper() == name.upper():
                return idx
        raise GHELookupError(f'Ground heat exchanger unit not found: "{name}"')

    def get_ghe(self, name: str) -> GroundHeatExchanger:
        return self.ghes[self.get_ghe_index(name)]

    def simulate(
        self,
        name: str,
        clock: SimulationClock,
        inlet_temp: float | None = None,
        comp_index: int | None = None,
        init_only: bool = False,
    ) -> tuple[int, StepResult | None]:
        """
        Initialize, and unless ``init_only``, step one instance.

        :param name: instance name
        :param clock: simulation context for this step
        :param inlet_temp: loop inlet temperature (C), required unless ``init_only``
        :param comp_index: cached index from an earlier call, None to look up by name
        :param init_only: only initialize the instance, e.g. during loop setup
        :return: the instance index, for the caller to cache, and the step result
        """
        if comp_index is None:
            comp_index = self.get_ghe_index(name)
        else:
            if comp_index < 0 or comp_index >= len(self.ghes):
                raise GHELookupError(
                    f"Invalid component index {comp_index} for unit {name}, number of units: {len(self.ghes)}"
                )
            stored_name = self.ghes[comp_index].name
            if stored_name.upper() != name.upper():
                raise GHELookupError(
                    f'Invalid component index {comp_index} for unit "{name}", stored unit name is "{stored_name}"'
                )

        ghe = self.ghes[comp_index]
        if init_only:
            ghe.initialize(clock)
            return comp_index, None

        if inlet_temp is None:
            raise ValueError(f'Inlet temperature is required to step "{name}"')

        result = ghe.step(inlet_temp, clock)
        self.results[ghe.name].append(result)
        return comp_index, result

    def run_simulation(
        self, sim_params: SimulationParameters, inlet_temps: float | list[float], keep_warmup: bool = False
    ) -> dict[str, list[StepResult]]:
        """
        Step every instance through the run.

        :param sim_params: run period and timestep
        :param inlet_temps: constant inlet temperature, or one value per step, repeated as needed
        :param keep_warmup: keep results of warm-up steps
        :return: step results by instance name
        """
        if isinstance(inlet_temps, list) and len(inlet_temps) == 0:
            raise ConfigurationError("Inlet temperature series is empty")

        # histories restart with each environment, so the longest one must fit
        longest_period = max(sim_params.num_days, sim_params.warmup_days)
        for ghe in self.ghes:
            if longest_period > ghe.field.max_sim_years * DAYS_IN_YEAR:
                raise ConfigurationError(
                    f'Ground heat exchanger "{ghe.name}" keeps {ghe.field.max_sim_years} year(s) of history, '
                    f"too short for a {longest_period} day run"
                )

        for name in self.results:
            self.results[name] = []

        indices: dict[str, int | None] = {ghe.name: None for ghe in self.ghes}
        for step_idx, clock in enumerate(sim_params.clocks()):
            if isinstance(inlet_temps, list):
                inlet_temp = inlet_temps[step_idx % len(inlet_temps)]
            else:
                inlet_temp = inlet_temps
            for name in indices:
                indices[name], _ = self.simulate(name, clock, inlet_temp, indices[name])

        if not keep_warmup and sim_params.warmup_days > 0:
            num_warmup_steps = sim_params.warmup_days * HRS_IN_DAY * sim_params.timesteps_per_hour
            for name in self.results:
                self.results[name] = self.results[name][num_warmup_steps:]

        return self.results
