import pytest

from mda_bound.algorithms.utils.significance import (
    DECAY_RATIO,
    node_confidence,
    significance_table,
)


def test_single_branch_keeps_graph_confidence():
    """
    With a single branching point the node confidence is the graph one.
    1 - (1 - 0.05) gives 0.050000000000000044 in binary floating point and
    the closed form is kept as is, so the comparison is approximate.
    """
    assert node_confidence(0.05, 1) == pytest.approx(0.05)
    assert node_confidence(0.05, 1) <= 0.05 + 1e-15


@pytest.mark.parametrize("max_branch", [2, 4, 10, 30])
def test_more_branches_lower_node_confidence(max_branch):
    confidence = node_confidence(0.05, max_branch)
    assert 0 < confidence < 0.05
    # the compound of max_branch independent decisions meets the target
    assert 1 - (1 - confidence) ** max_branch == pytest.approx(0.05)


def test_node_confidence_decreases_with_branches():
    confidences = [node_confidence(0.05, b) for b in range(1, 20)]
    assert sorted(confidences, reverse=True) == confidences
    assert all(0 < c <= node_confidence(0.05, 1) for c in confidences)


@pytest.mark.parametrize("max_hypothesis", [2, 3, 16, 64])
def test_significance_table_is_geometric(max_hypothesis):
    table = significance_table(0.05, max_hypothesis)
    assert len(table) == max_hypothesis + 1
    assert table[0] == 0 and table[1] == 0
    assert float(table[2]) == pytest.approx((1 - DECAY_RATIO) * 0.05)
    for i in range(3, max_hypothesis + 1):
        assert float(table[i] / table[i - 1]) == pytest.approx(DECAY_RATIO)


def test_significance_levels_fit_in_budget():
    """
    The levels of all hypotheses sum to at most the node confidence.
    """
    table = significance_table(0.05, 200)
    assert 0 < float(table.sum()) <= 0.05


def test_significance_table_regrowth_is_stable():
    small = significance_table(0.05, 8)
    large = significance_table(0.05, 16)
    assert (large[:9] == small).all()


def test_significance_table_without_hypotheses():
    assert list(significance_table(0.05, 1)) == [0, 0]
