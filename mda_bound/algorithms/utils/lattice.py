import numpy as np

from mda_bound.typing import Probability


class ProbabilityLattice:
    """
    Two rolling diagonals of the probe count x interface count state space.

    Position (i, j) means j interfaces have been discovered and
    i + j - 1 probes sent. `previous` holds diagonal i - 1 and `current`
    the diagonal i being computed, both indexed by j.
    """

    def __init__(self, size: int):
        self.previous = np.zeros(size, dtype=np.longdouble)
        self.current = np.zeros(size, dtype=np.longdouble)

    def __len__(self) -> int:
        return len(self.current)

    def resized(self, size: int) -> "ProbabilityLattice":
        lattice = ProbabilityLattice(size)
        n = min(size, len(self))
        lattice.previous[:n] = self.previous[:n]
        lattice.current[:n] = self.current[:n]
        return lattice

    def reset(self) -> None:
        # Before the first probe the process is certainly at state (1, 1)
        self.previous.fill(0.0)
        self.current.fill(0.0)
        self.current[1] = 1.0

    def advance(self, hypothesis: int, j: int) -> Probability:
        # Horizontal move: one more probe reaches an interface already seen.
        # Vertical move: one more probe discovers a new interface,
        # from the level below on the diagonal being computed.
        h = np.longdouble(hypothesis)
        mass = self.previous[j] * (np.longdouble(j) / h) + self.current[j - 1] * (
            np.longdouble(hypothesis - j + 1) / h
        )
        self.current[j] = mass
        return mass

    def prune(self, j: int) -> None:
        self.previous[j] = 0.0
        self.current[j] = 0.0

    def swap(self) -> None:
        self.previous, self.current = self.current, self.previous
