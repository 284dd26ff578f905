from abc import abstractmethod

from ghxsim.enums import GHEType
from ghxsim.ghe.gfunction import ResponseFunctionTable
from ghxsim.ghe.pipe import Pipe
from ghxsim.ghe.resistance import ThermalResistanceModel
from ghxsim.media import Soil


class GHEFieldBase:
    """
    Geometry and ground of one exchanger field.

    A field supplies what the superposition engine needs and nothing else: its response table,
    the step resistance model, the time scale of the response table, the total pipe length the
    heat rate is spread over and the undisturbed ground temperature.
    """

    ghe_type: GHEType

    def __init__(self, pipe: Pipe, soil: Soil, max_sim_years: int) -> None:
        self.pipe = pipe
        self.soil = soil
        self.max_sim_years = max_sim_years
        self._response_table: ResponseFunctionTable | None = None

    @property
    @abstractmethod
    def resistance_model(self) -> ThermalResistanceModel:
        pass

    @property
    @abstractmethod
    def total_tube_length(self) -> float:
        """Length the heat rate per unit length is referred to (m)."""

    @property
    @abstractmethod
    def time_scale(self) -> float:
        """Characteristic time of the response table (hr)."""

    @abstractmethod
    def build_response_table(self) -> ResponseFunctionTable:
        pass

    @abstractmethod
    def ground_temperature(self, day_of_sim: int) -> float:
        pass

    @property
    def response_table(self) -> ResponseFunctionTable:
        if self._response_table is None:
            self._response_table = self.build_response_table()
        return self._response_table

    def prepare(self) -> None:
        """Make sure the response table exists before the first step."""
        _ = self.response_table

    def get_response_value(self, lntts: float) -> float:
        return self.response_table.interpolate(lntts)

    def as_dict(self) -> dict:
        return {
            "type": self.ghe_type.name,
            "soil": self.soil.as_dict(),
            "pipe": self.pipe.as_dict(),
            "max_simulation_years": self.max_sim_years,
            "total_tube_length": {"value": self.total_tube_length, "units": "m"},
        }
