from ghxsim.media import ThermalProperty
from ghxsim.utilities import check_arg_bounds


class Pipe(ThermalProperty):
    """
    Pipe wall geometry shared by U-tube legs and slinky coils.

    The U-tube leg spacing is only meaningful inside a borehole and is None for coils.
    """

    def __init__(
        self,
        conductivity: float,
        rho_cp: float,
        outer_diameter: float,
        wall_thickness: float,
        u_tube_distance: float | None = None,
    ) -> None:
        super().__init__(conductivity, rho_cp)
        self.r_out = outer_diameter / 2.0  # Pipe outer radius (m)
        check_arg_bounds(wall_thickness, self.r_out, "wall_thickness", "outer_radius")
        self.thickness = wall_thickness
        self.r_in = self.r_out - wall_thickness  # Pipe inner radius (m)
        self.u_tube_distance = u_tube_distance  # Leg wall to leg wall spacing (m)

    @classmethod
    def init_from_dict(cls, pipe_props: dict) -> "Pipe":
        return cls(
            conductivity=pipe_props["conductivity"],
            rho_cp=pipe_props["rho_cp"],
            outer_diameter=pipe_props["outer_diameter"],
            wall_thickness=pipe_props["wall_thickness"],
            u_tube_distance=pipe_props.get("u_tube_distance"),
        )

    @property
    def d_out(self) -> float:
        return 2.0 * self.r_out

    @property
    def d_in(self) -> float:
        return 2.0 * self.r_in

    def as_dict(self) -> dict:
        output = {
            "base": super().as_dict(),
            "pipe_outer_diameter": {"value": self.d_out, "units": "m"},
            "pipe_wall_thickness": {"value": self.thickness, "units": "m"},
        }
        if self.u_tube_distance is not None:
            output["u_tube_distance"] = {"value": self.u_tube_distance, "units": "m"}
        return output
