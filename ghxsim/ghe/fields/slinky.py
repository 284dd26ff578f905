from ghxsim.constants import PI
from ghxsim.enums import GHEType, SlinkyConfigType
from ghxsim.errors import ConfigurationError
from ghxsim.ghe.fields.base import GHEFieldBase
from ghxsim.ghe.gfunction import ResponseFunctionTable
from ghxsim.ghe.ground_temperature import KusudaAchenbach
from ghxsim.ghe.pipe import Pipe
from ghxsim.ghe.resistance import SlinkyResistanceModel
from ghxsim.ghe.slinky_gfunction import SlinkyGFunctionGenerator
from ghxsim.media import Soil


class SlinkyField(GHEFieldBase):
    """
    Slinky coils laid in parallel trenches, either standing upright or lying flat.

    The response table is generated on first use, which can take a while for large fields.
    """

    ghe_type = GHEType.SLINKY

    def __init__(
        self,
        config: SlinkyConfigType,
        coil_diameter: float,
        coil_pitch: float,
        trench_depth: float,
        trench_length: float,
        num_trenches: int,
        trench_spacing: float,
        pipe: Pipe,
        soil: Soil,
        ground_temp_model: KusudaAchenbach,
        max_sim_years: int,
        quadrature: dict | None = None,
    ) -> None:
        super().__init__(pipe, soil, max_sim_years)

        self.config = config
        self.coil_diameter = coil_diameter
        self.coil_pitch = coil_pitch
        self.trench_depth = trench_depth
        self.trench_length = trench_length
        self.num_trenches = num_trenches
        self.trench_spacing = trench_spacing
        self.ground_temp_model = ground_temp_model

        self.num_coils = int(trench_length / coil_pitch)

        if config == SlinkyConfigType.VERTICAL:
            if trench_depth - coil_diameter < 0.0:
                raise ConfigurationError(
                    f"Vertical coil of diameter {coil_diameter} m extends above the ground "
                    f"at trench depth {trench_depth} m"
                )
            self.coil_depth = trench_depth - coil_diameter / 2.0
        else:
            self.coil_depth = trench_depth

        self.generator = SlinkyGFunctionGenerator(
            coil_diameter=coil_diameter,
            coil_pitch=coil_pitch,
            coil_depth=self.coil_depth,
            pipe_outer_diameter=pipe.d_out,
            num_trenches=num_trenches,
            num_coils=self.num_coils,
            trench_spacing=trench_spacing,
            alpha=soil.alpha,
            max_sim_years=max_sim_years,
            config=config,
            **(quadrature or {}),
        )
        self._resistance_model = SlinkyResistanceModel(pipe, num_trenches)

    @classmethod
    def init_from_dict(cls, inputs: dict) -> "SlinkyField":
        coil = inputs["coil"]
        trench = inputs["trench"]
        if "ground_temperature" not in inputs:
            raise ConfigurationError("Slinky fields need far-field ground temperature data")
        return cls(
            config=SlinkyConfigType[coil.get("configuration", "HORIZONTAL").upper()],
            coil_diameter=coil["diameter"],
            coil_pitch=coil["pitch"],
            trench_depth=trench["depth"],
            trench_length=trench["length"],
            num_trenches=trench["count"],
            trench_spacing=trench["spacing"],
            pipe=Pipe.init_from_dict(inputs["pipe"]),
            soil=Soil.init_from_dict(inputs["soil"]),
            ground_temp_model=KusudaAchenbach.init_from_dict(inputs["ground_temperature"]),
            max_sim_years=inputs["max_simulation_years"],
            quadrature=inputs.get("quadrature"),
        )

    @property
    def resistance_model(self) -> SlinkyResistanceModel:
        return self._resistance_model

    @property
    def total_tube_length(self) -> float:
        return PI * self.coil_diameter * self.trench_length * self.num_trenches / self.coil_pitch

    @property
    def time_scale(self) -> float:
        # the table is tabulated against ln(t / 1 hr)
        return 1.0

    def build_response_table(self) -> ResponseFunctionTable:
        return self.generator.generate()

    def ground_temperature(self, day_of_sim: int) -> float:
        return self.ground_temp_model.get_temperature(self.coil_depth, day_of_sim, self.soil.alpha)

    def as_dict(self) -> dict:
        output = super().as_dict()
        output["configuration"] = self.config.name
        output["coil_diameter"] = {"value": self.coil_diameter, "units": "m"}
        output["coil_pitch"] = {"value": self.coil_pitch, "units": "m"}
        output["coil_depth"] = {"value": self.coil_depth, "units": "m"}
        output["number_of_coils"] = self.num_coils
        output["number_of_trenches"] = self.num_trenches
        output["trench_spacing"] = {"value": self.trench_spacing, "units": "m"}
        output["ground_temperature"] = self.ground_temp_model.as_dict()
        return output
