import pytest

from ghxsim.errors import ConfigurationError
from ghxsim.simulation import SimulationClock, SimulationParameters


def test_clock_time():
    assert SimulationClock().current_sim_time == 0.0
    assert SimulationClock(day_of_sim=2, hour_of_day=3, sub_hour=0.5).current_sim_time == pytest.approx(26.5)


def test_clocks_without_warmup():
    clocks = list(SimulationParameters(timesteps_per_hour=2, num_days=1).clocks())
    assert len(clocks) == 48
    assert clocks[0].begin_environment
    assert not any(c.begin_environment for c in clocks[1:])
    assert [c.current_sim_time for c in clocks[:3]] == [0.0, 0.5, 1.0]
    assert clocks[-1].current_sim_time == pytest.approx(23.5)


def test_clocks_with_warmup():
    clocks = list(SimulationParameters(timesteps_per_hour=1, num_days=2, warmup_days=1).clocks())
    assert len(clocks) == 72
    assert all(c.warmup for c in clocks[:24])
    assert not any(c.warmup for c in clocks[24:])
    # each environment restarts on day 1
    assert clocks[24].begin_environment
    assert clocks[24].current_sim_time == 0.0
    assert clocks[-1].day_of_sim == 2


def test_bad_parameters():
    with pytest.raises(ConfigurationError):
        SimulationParameters(timesteps_per_hour=0, num_days=1)


def test_from_dict():
    params = SimulationParameters.init_from_dict({"timesteps_per_hour": 4, "num_days": 10})
    assert params.warmup_days == 0
    assert params.as_dict() == {"timesteps_per_hour": 4, "num_days": 10, "warmup_days": 0}
