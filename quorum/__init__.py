"""
Quorum — Threshold Secret Reconstruction
Recovers a secret shared as points on a polynomial, even when some of the
shares are wrong.

Quorum interpolates the shares exactly, with fractions rather than floats,
and can cross-check every k-sized group of shares so that a minority of
corrupted shares is outvoted:

1. Shares — parse share containers into points
2. Solver — exact Vandermonde interpolation of k points
3. Selector — majority vote over every k-combination, or a direct solve

Usage:
    from quorum import Point, reconstruct
    reconstruct([Point(1, 3), Point(2, 6), Point(3, 11)], k=3)  # -> 1
"""

from quorum.fraction import Rational
from quorum.shares import Point, ShareSet, decode_value, load, parse_container
from quorum.solver import solve, solve_coefficients
from quorum.subsets import combinations, count_combinations
from quorum.selector import Strategy, Reconstruction, reconstruct, reconstruct_detailed
from quorum.config import ReconstructionConfig
from quorum.errors import (
    QuorumError,
    MalformedInputError,
    InvalidShareError,
    InsufficientSharesError,
    SingularMatrixError,
    NoConsensusError,
    DivisionByZeroError,
    CombinationLimitError,
)

__version__ = "0.1.0"
__all__ = [
    "Rational",
    "Point",
    "ShareSet",
    "decode_value",
    "load",
    "parse_container",
    "solve",
    "solve_coefficients",
    "combinations",
    "count_combinations",
    "Strategy",
    "Reconstruction",
    "reconstruct",
    "reconstruct_detailed",
    "ReconstructionConfig",
    "QuorumError",
    "MalformedInputError",
    "InvalidShareError",
    "InsufficientSharesError",
    "SingularMatrixError",
    "NoConsensusError",
    "DivisionByZeroError",
    "CombinationLimitError",
]
