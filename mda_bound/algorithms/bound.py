"""
Error bounding for the Multipath Detection Algorithm, as described in the
May 2007 Paris Traceroute workshop and the April 2009 Infocom papers.

For every hypothesis h (h interfaces behind a load balancer) the table holds
the number of probes n_h to send, having seen h - 1 interfaces, before
rejecting h, and the probability of having wrongly rejected it.
"""

from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from mda_bound.algorithms.utils.lattice import ProbabilityLattice
from mda_bound.algorithms.utils.occupancy import miss_probability
from mda_bound.algorithms.utils.significance import (
    FIRST_HYPOTHESIS,
    node_confidence,
    significance_table,
)
from mda_bound.exceptions import AllocationError, InvalidBoundError
from mda_bound.logger import logger
from mda_bound.typing import Hypothesis, Probability

DEFAULT_CONFIDENCE = 0.05
DEFAULT_MAX_INTERFACES = 16
DEFAULT_MAX_BRANCH = 1


class BoundRow(NamedTuple):
    hypothesis: Hypothesis
    stopping_point: int
    significance: Probability
    failure_probability: Probability
    # risk of the same probe count without the lower stopping points
    miss_probability: float


def num_probes(step: int, j: int) -> int:
    # Translate lattice position (step, j) into the corresponding number of probes
    return step + j - 1


class BoundTable:
    """
    Stopping points of the MDA for hypotheses 2 up to `max_hypothesis`.

    Tables are indexed by hypothesis; hypotheses 0 and 1 are dummy states
    always set to zero. The table only ever grows, see `extend`.
    """

    def __init__(
        self,
        graph_confidence: float = DEFAULT_CONFIDENCE,
        max_interfaces: int = DEFAULT_MAX_INTERFACES,
        max_branch: int = DEFAULT_MAX_BRANCH,
    ):
        self.confidence = node_confidence(graph_confidence, max_branch)
        # An empty table holding only the two dummy hypotheses,
        # grown to max_interfaces right away.
        self.max_hypothesis = FIRST_HYPOTHESIS - 1
        try:
            self.lattice: Optional[ProbabilityLattice] = ProbabilityLattice(
                FIRST_HYPOTHESIS
            )
            self.significance_table: Optional[np.ndarray] = significance_table(
                self.confidence, self.max_hypothesis
            )
            self.stopping_point_table: Optional[np.ndarray] = np.zeros(
                FIRST_HYPOTHESIS, dtype=np.int64
            )
            self.failure_probability_table: Optional[np.ndarray] = np.zeros(
                FIRST_HYPOTHESIS, dtype=np.longdouble
            )
        except (MemoryError, ValueError) as e:
            logger.error("Error allocating resources for the bound table")
            raise AllocationError("cannot allocate the bound table") from e

        logger.debug(
            "Node confidence %f (graph confidence %f, %d branching points)",
            self.confidence,
            graph_confidence,
            max_branch,
        )
        self.extend(max_interfaces)

    @property
    def complete(self) -> bool:
        return not (
            self.lattice is None
            or self.significance_table is None
            or self.stopping_point_table is None
            or self.failure_probability_table is None
        )

    def extend(self, max_hypothesis: int) -> None:
        """
        Compute the stopping points of hypotheses up to `max_hypothesis`.

        Already computed hypotheses are kept as they are. All tables are
        grown together: if one of them cannot be allocated, none is
        replaced and `AllocationError` is raised.
        """
        if not self.complete:
            raise InvalidBoundError("the bound table has been released")
        if max_hypothesis <= self.max_hypothesis:
            return

        old_max = self.max_hypothesis
        try:
            lattice = self.lattice.resized(max_hypothesis)
            # More significance levels are needed, recompute them all
            significance = significance_table(self.confidence, max_hypothesis)
            stopping_points = np.zeros(max_hypothesis + 1, dtype=np.int64)
            stopping_points[: old_max + 1] = self.stopping_point_table
            failure = np.zeros(max_hypothesis + 1, dtype=np.longdouble)
            failure[: old_max + 1] = self.failure_probability_table
        # numpy reports sizes beyond its addressable maximum with a ValueError
        except (MemoryError, ValueError) as e:
            logger.error(
                "Error allocating resources for hypotheses %d to %d",
                old_max + 1,
                max_hypothesis,
            )
            raise AllocationError(
                f"cannot grow the bound table to {max_hypothesis=}"
            ) from e

        self.lattice = lattice
        self.significance_table = significance
        self.stopping_point_table = stopping_points
        self.failure_probability_table = failure
        self.max_hypothesis = max_hypothesis

        self._solve(max(old_max + 1, FIRST_HYPOTHESIS), max_hypothesis)

    def _solve(self, start: Hypothesis, end: Hypothesis) -> None:
        # Stopping points of lower hypotheses must be final: they are used
        # to prune the state space of the following ones.
        if not self.complete:
            raise InvalidBoundError("the bound table has been released")

        lattice = self.lattice
        for hypothesis in range(start, end + 1):
            lattice.reset()
            mass = np.longdouble(1.0)
            jstart = 2
            step = 1
            while True:
                # Walk the diagonal, one more interface discovered at each level
                for j in range(jstart, hypothesis):
                    mass = lattice.advance(hypothesis, j)
                    # With j interfaces seen, the algorithm stops once it has sent
                    # the probes required to reject hypothesis j + 1:
                    # lower states are not reachable anymore.
                    if num_probes(step, j) == self.stopping_point_table[j + 1]:
                        jstart = j + 1
                        lattice.prune(j)

                # State (1, 1) is certain, level 1 is swept from the second step only
                if step == 1:
                    jstart = 1

                if (
                    jstart == hypothesis - 1
                    and mass <= self.significance_table[hypothesis]
                ):
                    break

                lattice.swap()
                step += 1

            self.stopping_point_table[hypothesis] = num_probes(step, hypothesis - 1)
            self.failure_probability_table[hypothesis] = mass
            logger.debug(
                "Stopping point for hypothesis %d: %d (failure probability %e)",
                hypothesis,
                self.stopping_point_table[hypothesis],
                mass,
            )

    def stopping_point(self, hypothesis: Hypothesis) -> int:
        if not self.complete or not 0 <= hypothesis <= self.max_hypothesis:
            return 0
        return int(self.stopping_point_table[hypothesis])

    def dump_stopping_points(self) -> List[Tuple[Hypothesis, int]]:
        if not self.complete:
            return []
        return [(h, int(n_k)) for h, n_k in enumerate(self.stopping_point_table)]

    def dump_failure_probabilities(self) -> List[Tuple[Hypothesis, Probability]]:
        if not self.complete:
            return []
        return list(enumerate(self.failure_probability_table))

    def dump_summary(self) -> List[BoundRow]:
        if not self.complete:
            return []
        return [
            BoundRow(
                hypothesis=h,
                stopping_point=int(self.stopping_point_table[h]),
                significance=self.significance_table[h],
                failure_probability=self.failure_probability_table[h],
                miss_probability=miss_probability(
                    h, int(self.stopping_point_table[h])
                ),
            )
            for h in range(FIRST_HYPOTHESIS, self.max_hypothesis + 1)
        ]

    def release(self) -> None:
        self.lattice = None
        self.significance_table = None
        self.stopping_point_table = None
        self.failure_probability_table = None


def create(
    graph_confidence: float = DEFAULT_CONFIDENCE,
    max_interfaces: int = DEFAULT_MAX_INTERFACES,
    max_branch: int = DEFAULT_MAX_BRANCH,
) -> BoundTable:
    return BoundTable(graph_confidence, max_interfaces, max_branch)


def usable(bound: Optional[BoundTable]) -> bool:
    if bound is None or not bound.complete:
        logger.error("Provided bound table was released or is None")
        return False
    return True


def build(bound: Optional[BoundTable], end: int) -> None:
    if not usable(bound):
        return
    bound.extend(end)


def get_stopping_point(bound: Optional[BoundTable], k: Hypothesis) -> int:
    if not usable(bound):
        return 0
    return bound.stopping_point(k)


def dump_stopping_points(bound: Optional[BoundTable]) -> List[Tuple[Hypothesis, int]]:
    if not usable(bound):
        return []
    return bound.dump_stopping_points()


def dump_failure_probabilities(
    bound: Optional[BoundTable],
) -> List[Tuple[Hypothesis, Probability]]:
    if not usable(bound):
        return []
    return bound.dump_failure_probabilities()


def dump_summary(bound: Optional[BoundTable]) -> List[BoundRow]:
    if not usable(bound):
        return []
    return bound.dump_summary()


def destroy(bound: Optional[BoundTable]) -> None:
    if bound is not None:
        bound.release()


if __name__ == "__main__":
    # Examples

    bound = create(DEFAULT_CONFIDENCE, DEFAULT_MAX_INTERFACES, DEFAULT_MAX_BRANCH)
    for hypothesis, n_k in dump_stopping_points(bound):
        print(f"{hypothesis} - {n_k}")

    print("Expected failure:")
    for hypothesis, failure in dump_failure_probabilities(bound):
        print(f"{hypothesis} - {failure:f}")

    for row in dump_summary(bound):
        print(
            f"h={row.hypothesis} n_k={row.stopping_point} "
            f"failure={row.failure_probability:e} unpruned={row.miss_probability:e}"
        )
    destroy(bound)
