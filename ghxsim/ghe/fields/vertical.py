from math import log

from pygfunction.boreholes import Borehole

from ghxsim.constants import HRS_IN_YEAR, SEC_IN_HR
from ghxsim.enums import GHEType
from ghxsim.errors import ConfigurationError
from ghxsim.ghe.fields.base import GHEFieldBase
from ghxsim.ghe.gfunction import ResponseFunctionTable, borehole_radius_correction, calc_vertical_g_function
from ghxsim.ghe.pipe import Pipe
from ghxsim.ghe.resistance import BoreholeResistanceModel
from ghxsim.media import Grout, Soil


class VerticalBoreholeField(GHEFieldBase):
    ghe_type = GHEType.VERTICAL

    def __init__(
        self,
        borehole: Borehole,
        num_boreholes: int,
        pipe: Pipe,
        grout: Grout,
        soil: Soil,
        max_sim_years: int,
        response_table: ResponseFunctionTable | None = None,
        reference_ratio: float | None = None,
        field_layout: dict | None = None,
    ) -> None:
        super().__init__(pipe, soil, max_sim_years)

        if soil.ugt is None:
            raise ConfigurationError("Vertical fields need an undisturbed ground temperature")
        if response_table is None and field_layout is None:
            raise ConfigurationError("Vertical fields need either a g-function table or a field layout")
        if response_table is not None and reference_ratio is None:
            raise ConfigurationError("A supplied g-function table needs its reference radius-to-length ratio")
        if pipe.u_tube_distance is None:
            raise ConfigurationError("Vertical fields need the U-tube leg spacing, u_tube_distance")

        self.borehole = borehole
        self.num_boreholes = num_boreholes
        self.grout = grout
        self.field_layout = field_layout
        self._response_table = response_table
        # a generated table is computed at this field's own aspect ratio
        self.reference_ratio = reference_ratio if reference_ratio is not None else borehole.r_b / borehole.H
        self._resistance_model = BoreholeResistanceModel(pipe, grout, borehole.r_b, num_boreholes)

    @classmethod
    def init_from_dict(cls, inputs: dict) -> "VerticalBoreholeField":
        bh = inputs["borehole"]
        borehole = Borehole(bh["length"], bh.get("buried_depth", 0.0), bh["radius"], 0.0, 0.0)
        response_table = None
        reference_ratio = None
        if "g_function" in inputs:
            response_table = ResponseFunctionTable.init_from_dict(inputs["g_function"])
            reference_ratio = inputs["g_function"]["reference_ratio"]

        field_layout = inputs.get("field")
        num_boreholes = inputs["number_of_boreholes"]
        if field_layout is not None and field_layout["rows"] * field_layout["columns"] != num_boreholes:
            raise ConfigurationError("Field rows x columns must equal number_of_boreholes")

        return cls(
            borehole=borehole,
            num_boreholes=num_boreholes,
            pipe=Pipe.init_from_dict(inputs["pipe"]),
            grout=Grout.init_from_dict(inputs["grout"]),
            soil=Soil.init_from_dict(inputs["soil"]),
            max_sim_years=inputs["max_simulation_years"],
            response_table=response_table,
            reference_ratio=reference_ratio,
            field_layout=field_layout,
        )

    @property
    def resistance_model(self) -> BoreholeResistanceModel:
        return self._resistance_model

    @property
    def total_tube_length(self) -> float:
        return self.num_boreholes * self.borehole.H

    @property
    def time_scale(self) -> float:
        return self.borehole.H**2 / (9.0 * self.soil.alpha) / SEC_IN_HR

    def build_response_table(self) -> ResponseFunctionTable:
        layout = self.field_layout
        return calc_vertical_g_function(
            rows=layout["rows"],
            columns=layout["columns"],
            spacing=layout["spacing"],
            length=self.borehole.H,
            buried_depth=self.borehole.D,
            radius=self.borehole.r_b,
            alpha=self.soil.alpha,
        )

    def prepare(self) -> None:
        super().prepare()
        horizon = log(self.max_sim_years * HRS_IN_YEAR / self.time_scale)
        if horizon > self.response_table.max_lntts:
            raise ConfigurationError(
                f"{self.max_sim_years} years (lntts={horizon:0.3f}) is beyond the g-function table range "
                f"(max lntts={self.response_table.max_lntts:0.3f})"
            )

    def get_response_value(self, lntts: float) -> float:
        g = self.response_table.interpolate(lntts)
        r_b = self.borehole.r_b
        length = self.borehole.H
        if r_b / length != self.reference_ratio:
            g = borehole_radius_correction(g, length * self.reference_ratio, r_b)
        return g

    def ground_temperature(self, day_of_sim: int) -> float:
        return self.soil.ugt

    def as_dict(self) -> dict:
        output = super().as_dict()
        output["grout"] = self.grout.as_dict()
        output["number_of_boreholes"] = self.num_boreholes
        output["borehole_length"] = {"value": self.borehole.H, "units": "m"}
        output["borehole_radius"] = {"value": self.borehole.r_b, "units": "m"}
        output["reference_ratio"] = self.reference_ratio
        return output
