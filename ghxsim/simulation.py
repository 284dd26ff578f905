from collections.abc import Iterator
from dataclasses import dataclass

from ghxsim.constants import HRS_IN_DAY
from ghxsim.enums import SimState
from ghxsim.errors import ConfigurationError


@dataclass
class SimulationClock:
    """Host simulation context for one step."""

    day_of_sim: int = 1
    hour_of_day: int = 1  # hour in progress, 1-24
    sub_hour: float = 0.0  # fraction of the hour elapsed at the start of the step
    warmup: bool = False
    begin_environment: bool = False

    @property
    def current_sim_time(self) -> float:
        """Elapsed simulation time (hr)."""
        return (self.day_of_sim - 1) * HRS_IN_DAY + self.hour_of_day - 1 + self.sub_hour


@dataclass
class StepResult:
    sim_time: float
    state: SimState
    inlet_temp: float
    outlet_temp: float
    heat_rate: float  # W, positive into the fluid
    avg_fluid_temp: float
    borehole_temp: float
    mass_flow_rate: float

    def as_dict(self) -> dict:
        return {
            "time": self.sim_time,
            "state": self.state.name,
            "inlet_temperature": self.inlet_temp,
            "outlet_temperature": self.outlet_temp,
            "heat_rate": self.heat_rate,
            "average_fluid_temperature": self.avg_fluid_temp,
            "borehole_temperature": self.borehole_temp,
            "mass_flow_rate": self.mass_flow_rate,
        }


class SimulationParameters:
    def __init__(self, timesteps_per_hour: int, num_days: int, warmup_days: int = 0) -> None:
        if timesteps_per_hour < 1 or num_days < 1:
            raise ConfigurationError("Simulation needs at least one day and one timestep per hour")
        self.timesteps_per_hour = timesteps_per_hour
        self.num_days = num_days
        self.warmup_days = warmup_days

    @classmethod
    def init_from_dict(cls, inputs: dict) -> "SimulationParameters":
        return cls(
            inputs["timesteps_per_hour"],
            inputs["num_days"],
            inputs.get("warmup_days", 0),
        )

    def clocks(self) -> Iterator[SimulationClock]:
        """
        Yield the clock for every step of the run.

        Warm-up days run as their own environment ahead of the run proper. Day numbering
        restarts at 1 in each environment.
        """
        periods = [(True, self.warmup_days), (False, self.num_days)]

        for warmup, num_days in periods:
            first = True
            for day in range(1, num_days + 1):
                for hour in range(1, HRS_IN_DAY + 1):
                    for step in range(self.timesteps_per_hour):
                        yield SimulationClock(
                            day_of_sim=day,
                            hour_of_day=hour,
                            sub_hour=step / self.timesteps_per_hour,
                            warmup=warmup,
                            begin_environment=first,
                        )
                        first = False

    def as_dict(self) -> dict:
        return {
            "timesteps_per_hour": self.timesteps_per_hour,
            "num_days": self.num_days,
            "warmup_days": self.warmup_days,
        }
