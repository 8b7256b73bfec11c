from functools import cache
import math

from scipy.special import comb, stirling2


def event_prob(n_probes: int, observed_interfaces: int, total_interfaces: int) -> float:
    # P(exactly observed_interfaces distinct interfaces answered | n_probes probes
    # spread uniformly over total_interfaces interfaces)
    if (
        observed_interfaces > total_interfaces
        or n_probes <= 0
        or observed_interfaces <= 0
        or observed_interfaces > n_probes
    ):
        return 0.0

    # Surjections of the n probes onto a subset of k interfaces: S(n, k) * k!,
    # times C(K, k) subsets, out of K^n equally likely assignments.
    # Integer arithmetic until the final division, so large n stays finite.
    stirling = int(stirling2(n_probes, observed_interfaces, exact=True))
    binom = int(comb(total_interfaces, observed_interfaces, exact=True))

    return (
        stirling
        * binom
        * math.factorial(observed_interfaces)
        / total_interfaces**n_probes
    )


@cache
def reach_prob(total_interfaces: int, n_probes: int) -> float:
    # every interface of the load balancer answered at least once
    return event_prob(n_probes, total_interfaces, total_interfaces)


def miss_probability(hypothesis: int, n_probes: int) -> float:
    """
    Probability that n_probes probes leave at least one of `hypothesis`
    interfaces undiscovered, taken in isolation from the other hypotheses
    (no early termination at lower stopping points).
    """
    if hypothesis < 2:
        return 0.0
    return 1.0 - reach_prob(hypothesis, n_probes)
