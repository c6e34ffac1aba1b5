"""
Linear Solver
Exact polynomial interpolation through a Vandermonde system.

For k points the interpolating polynomial has degree k-1. Its monomial
coefficients solve the system

    c[0]·x^(k-1) + c[1]·x^(k-2) + ... + c[k-1] = y

one equation per point. The system is solved with Gaussian elimination
over exact fractions, so the constant term c[k-1] (the secret) comes out
without any rounding.
"""

from typing import Sequence

from quorum.errors import SingularMatrixError
from quorum.fraction import Rational
from quorum.shares import Point


def build_matrix(points: Sequence[Point]) -> list[list[Rational]]:
    """Build the k x (k+1) augmented Vandermonde matrix for ``points``."""
    k = len(points)
    matrix = []
    for point in points:
        row = [Rational(point.x ** (k - j - 1)) for j in range(k)]
        row.append(Rational(point.y))
        matrix.append(row)
    return matrix


def eliminate(matrix: list[list[Rational]]) -> None:
    """
    Reduce ``matrix`` to upper-triangular form in place.

    Pivot rows are chosen by the magnitude of the candidate's numerator;
    denominators are not compared. On equal magnitudes the upper row is
    kept.

    Raises:
        SingularMatrixError: If a pivot column has no non-zero entry.
    """
    k = len(matrix)
    for pivot in range(k):
        best = pivot
        for i in range(pivot + 1, k):
            if abs(matrix[i][pivot].num) > abs(matrix[best][pivot].num):
                best = i
        matrix[pivot], matrix[best] = matrix[best], matrix[pivot]

        pivot_row = matrix[pivot]
        if pivot_row[pivot].is_zero():
            raise SingularMatrixError("Matrix is singular - no unique solution")

        for i in range(pivot + 1, k):
            row = matrix[i]
            if row[pivot].is_zero():
                continue
            factor = row[pivot].divide(pivot_row[pivot])
            for j in range(pivot, k + 1):
                row[j] = row[j].subtract(factor.multiply(pivot_row[j]))


def back_substitute(matrix: list[list[Rational]]) -> list[Rational]:
    """
    Solve an upper-triangular augmented matrix.

    Returns:
        Coefficients, highest degree first.

    Raises:
        SingularMatrixError: If a diagonal entry is zero.
    """
    k = len(matrix)
    coefficients = [None] * k
    for i in range(k - 1, -1, -1):
        row = matrix[i]
        if row[i].is_zero():
            raise SingularMatrixError(f"Zero diagonal at row {i}")
        value = row[k]
        for j in range(i + 1, k):
            value = value.subtract(row[j].multiply(coefficients[j]))
        coefficients[i] = value.divide(row[i])
    return coefficients


def solve_coefficients(points: Sequence[Point]) -> list[Rational]:
    """Interpolate ``points`` and return every coefficient, highest degree first."""
    if not points:
        raise ValueError("Need at least one point to interpolate")
    matrix = build_matrix(points)
    eliminate(matrix)
    return back_substitute(matrix)


def solve(points: Sequence[Point]) -> int:
    """
    Recover the constant term of the polynomial through ``points``.

    Args:
        points: Exactly k points for a degree k-1 polynomial.

    Returns:
        The constant term, truncated toward zero.

    Raises:
        SingularMatrixError: If the points do not determine a unique
            polynomial (e.g. a repeated x).
    """
    return solve_coefficients(points)[-1].to_int()


def evaluate(coefficients: Sequence[Rational], x: int) -> Rational:
    """Evaluate a polynomial (highest degree first) at ``x`` by Horner's rule."""
    result = Rational(0)
    for coefficient in coefficients:
        result = result * x + coefficient
    return result
