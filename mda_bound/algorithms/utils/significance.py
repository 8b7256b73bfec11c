import numpy as np

# Section III.B of the 2009 MDA paper finds this ratio to be a reasonable value
DECAY_RATIO = 0.9

# Hypotheses 0 and 1 (no interface, a single interface) are never tested
FIRST_HYPOTHESIS = 2


def node_confidence(graph_confidence: float, max_branch: int) -> float:
    # Equation (10) of the 2009 MDA paper: the confidence each branching point
    # must meet so that up to max_branch load balancers in the graph still
    # meet graph_confidence overall.
    return 1 - (1 - graph_confidence) ** (1.0 / max_branch)


def significance_table(confidence: float, max_hypothesis: int) -> np.ndarray:
    """
    Pre-compute the significance level of every hypothesis, following
    equations (8) and (9) of the 2009 MDA paper.

    The first hypothesis tested gets (1 - r) of the risk budget and each
    following one r times less than its predecessor, so the levels sum to
    at most `confidence`.

    :param confidence: per-node confidence, see `node_confidence`
    :param max_hypothesis: last hypothesis of the table
    :return: a long double array indexed by hypothesis, 0 and 1 set to zero
    """
    table = np.zeros(max_hypothesis + 1, dtype=np.longdouble)
    a1 = (1 - DECAY_RATIO) * confidence
    if max_hypothesis >= FIRST_HYPOTHESIS:
        table[FIRST_HYPOTHESIS] = a1
    for i in range(FIRST_HYPOTHESIS + 1, max_hypothesis + 1):
        # indexes are one larger than the ones of the paper
        table[i] = a1 * DECAY_RATIO ** (i - 2)
    return table
