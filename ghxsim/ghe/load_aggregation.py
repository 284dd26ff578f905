import numpy as np

from ghxsim.constants import AGG, HRS_IN_DAY, HRS_IN_MONTH, MAX_TS_IN_HR, MONTHS_IN_YEAR, SUB_AGG
from ghxsim.errors import ConfigurationError


def _shift_in(arr: np.ndarray, value) -> None:
    # newest first, oldest falls off the end
    arr[1:] = arr[:-1].copy()
    arr[0] = value


class LoadHistoryAggregator:
    """
    Heat pulse history kept at three resolutions.

    - sub-hourly: the most recent pulses, newest first, each tagged with the simulation time
      (hr) at which it ends
    - hourly: time-weighted means of the sub-hourly pulses of each past hour, newest first
    - monthly: mean of the 730 hourly values of each completed month, in calendar order

    ``last_hour_n`` records the sub-hourly pulse count at each of the most recent hour rolls,
    newest first, so the pulses belonging to the current and recent hours can be located.

    Based on: Yavuzturk, C., J.D. Spitler. 1999. 'A Short Time Step Response Factor Model for
    Vertical Ground Loop Heat Exchangers.' ASHRAE Transactions. 105(2): 475-485.
    """

    def __init__(self, max_sim_years: int, max_steps_per_hour: int = MAX_TS_IN_HR) -> None:
        self.max_sim_years = max_sim_years
        self.max_steps_per_hour = max_steps_per_hour

        num_sub_hr = (SUB_AGG + 1) * max_steps_per_hour + 1
        self.times = np.zeros(num_sub_hr)
        self.q_sub_hr = np.zeros(num_sub_hr)
        self.q_hr = np.zeros(HRS_IN_MONTH + AGG + SUB_AGG)
        self.q_monthly = np.zeros(max_sim_years * MONTHS_IN_YEAR)
        self.last_hour_n = np.zeros(SUB_AGG + 1, dtype=int)

        self.n = 0  # distinct simulation times recorded since the last reset
        self.prev_hour = 1

    def reset(self) -> None:
        self.times.fill(0.0)
        self.q_sub_hr.fill(0.0)
        self.q_hr.fill(0.0)
        self.q_monthly.fill(0.0)
        self.last_hour_n.fill(0)
        self.n = 0
        self.prev_hour = 1

    def clear_times(self) -> None:
        self.times.fill(0.0)

    def record_step(self, sim_time: float, q: float) -> bool:
        """
        Record the heat rate (W/m) in effect over the interval ending at ``sim_time`` (hr).

        :return: True when a new slot was appended, False when the current slot was updated
        """
        if sim_time != self.times[0]:
            _shift_in(self.times, sim_time)
            _shift_in(self.q_sub_hr, q)
            self.n += 1
            return True

        self.q_sub_hr[0] = q
        return False

    def hour_average(self) -> float:
        """Time-weighted mean of the sub-hourly pulses recorded since the last hour roll."""
        count = self.n - self.last_hour_n[0]
        span = abs(self.times[0] - self.times[count])
        if span == 0.0:
            return 0.0
        durations = np.abs(self.times[:count] - self.times[1 : count + 1])
        return float(np.sum(self.q_sub_hr[:count] * durations) / span)

    def roll_hour_if_needed(self, hour_of_day: int) -> bool:
        if hour_of_day == self.prev_hour:
            return False

        _shift_in(self.q_hr, self.hour_average())
        _shift_in(self.last_hour_n, self.n)
        self.prev_hour = hour_of_day
        return True

    def roll_month_if_needed(self, day_of_sim: int, hour_of_day: int, hour_rolled: bool) -> bool:
        if not hour_rolled or ((day_of_sim - 1) * HRS_IN_DAY + hour_of_day) % HRS_IN_MONTH != 0:
            return False

        month_num = (day_of_sim * HRS_IN_DAY + hour_of_day) // HRS_IN_MONTH
        if month_num > self.q_monthly.size:
            raise ConfigurationError(
                f"Simulation reached month {month_num}, beyond the {self.max_sim_years} year history limit"
            )
        self.q_monthly[month_num - 1] = np.mean(self.q_hr[:HRS_IN_MONTH])
        return True

    def aggregate(self, day_of_sim: int, hour_of_day: int) -> None:
        hour_rolled = self.roll_hour_if_needed(hour_of_day)
        self.roll_month_if_needed(day_of_sim, hour_of_day, hour_rolled)
