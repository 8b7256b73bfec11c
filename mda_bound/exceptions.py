class BoundError(Exception):
    """Base class for errors raised while building a bound table."""


class AllocationError(BoundError):
    """The tables could not be allocated or grown. Nothing was modified."""


class InvalidBoundError(BoundError):
    """The bound table was released or never fully constructed."""
