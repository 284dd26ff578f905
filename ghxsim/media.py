from scp.ethyl_alcohol import EthylAlcohol
from scp.ethylene_glycol import EthyleneGlycol
from scp.methyl_alcohol import MethylAlcohol
from scp.propylene_glycol import PropyleneGlycol
from scp.water import Water

from ghxsim.enums import FluidType
from ghxsim.errors import ConfigurationError


class Fluid:
    def __init__(self, fluid_name: str = "Water", temperature: float = 20, percent: float = 0) -> None:
        self.name = fluid_name
        self.fluid_type = self.get_fluid_type(fluid_name)
        self.concentration_percent = percent

        concentration_frac = self.concentration_percent / 100
        match self.fluid_type:
            case FluidType.ETHYLALCOHOL:
                self._fluid = EthylAlcohol(concentration_frac)
            case FluidType.ETHYLENEGLYCOL:
                self._fluid = EthyleneGlycol(concentration_frac)
            case FluidType.METHYLALCOHOL:
                self._fluid = MethylAlcohol(concentration_frac)
            case FluidType.PROPYLENEGLYCOL:
                self._fluid = PropyleneGlycol(concentration_frac)
            case FluidType.WATER:
                self._fluid = Water()

        # supported props
        self.temperature: float = temperature
        self.cp: float = 0.0
        self.k: float = 0.0
        self.mu: float = 0.0
        self.rho: float = 0.0
        self.update_props_with_new_temp(temperature)

    @classmethod
    def init_from_dict(cls, inputs: dict) -> "Fluid":
        return cls(
            inputs.get("fluid_name", "Water"),
            inputs.get("temperature", 20),
            inputs.get("concentration_percent", 0),
        )

    @staticmethod
    def get_fluid_type(fluid_name: str) -> FluidType:
        fluid_name_upper = fluid_name.upper()
        if fluid_name_upper in ["MEA", "ETHYLALCOHOL", "ETHYL ALCOHOL"]:
            return FluidType.ETHYLALCOHOL
        if fluid_name_upper in ["MEG", "ETHYLENEGLYCOL", "ETHYLENE GLYCOL"]:
            return FluidType.ETHYLENEGLYCOL
        if fluid_name_upper in ["MMA", "METHYLALCOHOL", "METHYL ALCOHOL"]:
            return FluidType.METHYLALCOHOL
        if fluid_name_upper in ["MPG", "PROPYLENEGLYCOL", "PROPYLENE GLYCOL"]:
            return FluidType.PROPYLENEGLYCOL
        if fluid_name_upper == "WATER":
            return FluidType.WATER

        raise ValueError(f'Unsupported fluid type "{fluid_name}"')

    def update_props_with_new_temp(self, temperature: float) -> None:
        self.temperature = temperature
        self.cp = self._fluid.cp(self.temperature)
        self.k = self._fluid.k(self.temperature)
        self.mu = self._fluid.mu(self.temperature)
        self.rho = self._fluid.rho(self.temperature)

    def density_at(self, temperature: float) -> float:
        """Density without disturbing the current property state."""
        return self._fluid.rho(temperature)

    def as_dict(self) -> dict:
        return {
            "fluid_name": self.name,
            "concentration_percent": self.concentration_percent,
            "temperature": {"value": self.temperature, "units": "C"},
        }


class ThermalProperty:
    def __init__(self, k: float, rho_cp: float) -> None:
        if k <= 0.0 or rho_cp <= 0.0:
            raise ConfigurationError(
                f"{self.__class__.__name__} needs positive conductivity and heat capacity, got k={k}, rho_cp={rho_cp}"
            )
        self.k = k  # Thermal conductivity (W/m.K)
        self.rho_cp = rho_cp  # Volumetric heat capacity (J/K.m3)

    def as_dict(self) -> dict:
        output = {
            "type": self.__class__.__name__,
            "thermal_conductivity": {"value": self.k, "units": "W/m-K"},
            "volumetric_heat_capacity": {"value": self.rho_cp, "units": "J/K-m3"},
        }
        return output


class Grout(ThermalProperty):
    @classmethod
    def init_from_dict(cls, inputs: dict) -> "Grout":
        return cls(inputs["conductivity"], inputs["rho_cp"])


class Soil(ThermalProperty):
    def __init__(self, k: float, rho_cp: float, ugt: float | None = None) -> None:
        super().__init__(k, rho_cp)

        # Soil specific parameters
        self.ugt = ugt
        self.alpha = k / rho_cp  # m2/s

    @classmethod
    def init_from_dict(cls, inputs: dict) -> "Soil":
        return cls(inputs["conductivity"], inputs["rho_cp"], inputs.get("undisturbed_temp"))

    def as_dict(self) -> dict:
        output = super().as_dict()
        if self.ugt is not None:
            output["undisturbed_ground_temperature"] = {"value": self.ugt, "units": "C"}
        return output
