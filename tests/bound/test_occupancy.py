import pytest

from mda_bound.algorithms.utils.occupancy import (
    event_prob,
    miss_probability,
    reach_prob,
)


@pytest.mark.parametrize(
    "n_probes,observed,total",
    [(0, 1, 2), (3, 0, 2), (3, 3, 2), (2, 3, 4)],
)
def test_impossible_events(n_probes, observed, total):
    assert event_prob(n_probes, observed, total) == 0.0


def test_single_probe_sees_one_interface():
    assert event_prob(1, 1, 5) == 1.0


@pytest.mark.parametrize("total", range(1, 6))
@pytest.mark.parametrize("n_probes", [1, 5, 12])
def test_event_probabilities_sum_to_one(total, n_probes):
    probs = [event_prob(n_probes, k, total) for k in range(1, total + 1)]
    assert all(0 <= p <= 1 for p in probs)
    assert sum(probs) == pytest.approx(1.0)


def test_two_interfaces():
    # all 9 probes on the same interface out of two
    assert reach_prob(2, 9) == 510 / 512
    assert miss_probability(2, 9) == 0.5**8


def test_many_probes_do_not_overflow():
    assert 0 < reach_prob(64, 1000) <= 1


def test_miss_probability_decreases():
    probs = [miss_probability(8, n) for n in range(8, 80)]
    assert sorted(probs, reverse=True) == probs


def test_dummy_hypotheses_never_miss():
    assert miss_probability(0, 10) == 0.0
    assert miss_probability(1, 10) == 0.0
