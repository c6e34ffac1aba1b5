"""
Errors
Failure kinds raised while turning shares back into a secret.

Per-share and per-combination failures are absorbed by the caller that
can route around them (ingestion skips a share, majority vote skips a
combination). Everything else propagates.
"""


class QuorumError(Exception):
    """Base class for every reconstruction failure."""


class MalformedInputError(QuorumError, ValueError):
    """The share container itself is unusable (missing or non-positive k)."""


class InvalidShareError(QuorumError, ValueError):
    """A single share entry has an unusable base or value."""


class InsufficientSharesError(QuorumError, ValueError):
    """Fewer valid shares remain than the threshold requires."""

    def __init__(self, available: int, threshold: int):
        self.available = available
        self.threshold = threshold
        super().__init__(
            f"Need at least {threshold} shares, got {available}"
        )


class SingularMatrixError(QuorumError, ArithmeticError):
    """A combination's linear system has no unique solution."""


class NoConsensusError(QuorumError, RuntimeError):
    """Majority vote found no combination that could be solved."""


class DivisionByZeroError(QuorumError, ZeroDivisionError):
    """A fraction was built or divided with a zero denominator."""


class CombinationLimitError(QuorumError, RuntimeError):
    """Majority vote would exceed the configured combination cap."""

    def __init__(self, combinations: int, limit: int):
        self.combinations = combinations
        self.limit = limit
        super().__init__(
            f"Majority vote needs {combinations} combinations, "
            f"limit is {limit}"
        )
