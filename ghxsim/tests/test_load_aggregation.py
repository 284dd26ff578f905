import numpy as np
import pytest

from ghxsim.errors import ConfigurationError
from ghxsim.ghe.load_aggregation import LoadHistoryAggregator


@pytest.fixture
def history():
    return LoadHistoryAggregator(max_sim_years=1, max_steps_per_hour=4)


def test_array_sizes(history):
    assert history.times.size == 16 * 4 + 1
    assert history.q_sub_hr.size == 16 * 4 + 1
    assert history.q_hr.size == 730 + 192 + 15
    assert history.q_monthly.size == 12
    assert history.last_hour_n.size == 16


def test_record_new_time_shifts(history):
    assert history.record_step(0.25, 1.0)
    assert history.record_step(0.5, 2.0)
    assert history.n == 2
    assert history.times[:3].tolist() == [0.5, 0.25, 0.0]
    assert history.q_sub_hr[:3].tolist() == [2.0, 1.0, 0.0]


def test_record_same_time_updates_in_place(history):
    history.record_step(0.25, 1.0)
    assert not history.record_step(0.25, 3.0)
    assert history.n == 1
    assert history.q_sub_hr[0] == 3.0
    assert history.q_sub_hr[1] == 0.0


def test_hour_average_empty(history):
    assert history.hour_average() == 0.0


def test_hourly_roll_equal_steps(history):
    for i, q in enumerate([1.0, 2.0, 3.0, 4.0], start=1):
        t = 0.25 * i
        history.record_step(t, q)
        history.aggregate(1, int(t % 24) + 1)

    # the pulse ending on the hour belongs to the hour just finished
    assert history.q_hr[0] == pytest.approx(2.5)
    assert history.last_hour_n[0] == 4
    assert history.prev_hour == 2


def test_hourly_roll_time_weighted(history):
    history.record_step(0.25, 4.0)
    history.aggregate(1, 1)
    history.record_step(1.0, 0.0)
    history.aggregate(1, 2)
    assert history.q_hr[0] == pytest.approx(1.0)


def test_no_roll_within_hour(history):
    history.record_step(0.25, 4.0)
    assert not history.roll_hour_if_needed(1)
    assert history.q_hr[0] == 0.0


def test_successive_hour_rolls(history):
    t = 0.0
    for hour_load in [2.0, 6.0, 4.0]:
        for _ in range(4):
            t += 0.25
            history.record_step(t, hour_load)
            history.aggregate(int(t / 24) + 1, int(t % 24) + 1)
    assert history.q_hr[:3].tolist() == pytest.approx([4.0, 6.0, 2.0])
    assert history.last_hour_n[:3].tolist() == [12, 8, 4]


def test_monthly_roll(history):
    history.q_hr[:730] = 2.0
    history.q_hr[730:] = 50.0
    # hour 730 of the simulation is hour 10 of day 31
    assert history.roll_month_if_needed(31, 10, hour_rolled=True)
    assert history.q_monthly[0] == pytest.approx(2.0)


def test_monthly_roll_needs_hour_roll(history):
    history.q_hr[:730] = 2.0
    assert not history.roll_month_if_needed(31, 10, hour_rolled=False)
    assert not history.roll_month_if_needed(31, 11, hour_rolled=True)
    assert np.all(history.q_monthly == 0.0)


def test_last_month_fits(history):
    history.q_hr[:730] = 1.0
    assert history.roll_month_if_needed(365, 24, hour_rolled=True)
    assert history.q_monthly[11] == pytest.approx(1.0)


def test_monthly_overflow(history):
    with pytest.raises(ConfigurationError):
        history.roll_month_if_needed(396, 10, hour_rolled=True)


def test_reset(history):
    history.record_step(0.25, 1.0)
    history.aggregate(1, 2)
    history.q_monthly[0] = 3.0
    history.reset()
    assert history.n == 0
    assert history.prev_hour == 1
    assert not history.times.any()
    assert not history.q_sub_hr.any()
    assert not history.q_hr.any()
    assert not history.q_monthly.any()
    assert not history.last_hour_n.any()


def test_clear_times_keeps_loads(history):
    history.record_step(0.25, 1.0)
    history.clear_times()
    assert not history.times.any()
    assert history.q_sub_hr[0] == 1.0
