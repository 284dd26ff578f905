from math import cos, exp, sqrt

from ghxsim.constants import DAYS_IN_YEAR, MONTHS_IN_YEAR, PI, SEC_IN_DAY, SEC_IN_YEAR, TWO_PI
from ghxsim.errors import ConfigurationError


class KusudaAchenbach:
    """
    Undisturbed ground temperature from the Kusuda-Achenbach correlation.

    Kusuda, T. and P.R. Achenbach. 1965. 'Earth Temperature and Thermal Diffusivity at
    Selected Stations in the United States.' ASHRAE Transactions 71(1): 61-75.
    """

    def __init__(self, average: float, amplitude: float, phase_shift_days: float) -> None:
        self.average = average  # C
        self.amplitude = amplitude  # C
        self.phase_shift_days = phase_shift_days  # day of the surface minimum

    @classmethod
    def init_from_monthly_surface_temps(cls, surface_temps: list[float]) -> "KusudaAchenbach":
        if len(surface_temps) != MONTHS_IN_YEAR:
            raise ConfigurationError(
                f"Monthly surface ground temperatures need {MONTHS_IN_YEAR} values, got {len(surface_temps)}"
            )

        average = sum(surface_temps) / MONTHS_IN_YEAR
        amplitude = sum(abs(t - average) for t in surface_temps) / MONTHS_IN_YEAR

        # last occurrence of the minimum wins
        month_of_min = 0
        min_temp = float("inf")
        for month_idx, t in enumerate(surface_temps, start=1):
            if t <= min_temp:
                month_of_min = month_idx
                min_temp = t

        return cls(average, amplitude, month_of_min * DAYS_IN_YEAR / MONTHS_IN_YEAR)

    @classmethod
    def init_from_dict(cls, inputs: dict) -> "KusudaAchenbach":
        if all(k in inputs for k in ("average", "amplitude", "phase_shift_days")):
            return cls(inputs["average"], inputs["amplitude"], inputs["phase_shift_days"])
        if "monthly_surface_temperatures" in inputs:
            return cls.init_from_monthly_surface_temps(inputs["monthly_surface_temperatures"])
        raise ConfigurationError(
            "Ground temperature needs either Kusuda-Achenbach parameters or monthly surface temperatures"
        )

    def get_temperature(self, depth: float, day_of_sim: float, alpha: float) -> float:
        """
        :param depth: depth below the surface (m)
        :param day_of_sim: day of the simulation
        :param alpha: ground thermal diffusivity (m2/s)
        :return: undisturbed ground temperature (C)
        """
        term_1 = -depth * sqrt(PI / (SEC_IN_YEAR * alpha))
        term_2 = (TWO_PI / SEC_IN_YEAR) * (
            (day_of_sim - self.phase_shift_days) * SEC_IN_DAY - (depth / 2.0) * sqrt(SEC_IN_YEAR / (PI * alpha))
        )
        return self.average - self.amplitude * exp(term_1) * cos(term_2)

    def as_dict(self) -> dict:
        return {
            "average": {"value": self.average, "units": "C"},
            "amplitude": {"value": self.amplitude, "units": "C"},
            "phase_shift_days": {"value": self.phase_shift_days, "units": "days"},
        }
