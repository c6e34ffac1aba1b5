"""
Secret Selector
Chooses the secret from a set of shares that may contain bad entries.

Two strategies are available:

- Majority vote interpolates every k-combination of the shares and
  returns the secret most combinations agree on. As long as at least k
  shares are correct, every all-correct combination votes for the true
  secret, so a minority of corrupted shares cannot take over.
- Direct takes the k shares with the smallest x and interpolates once.
  It is fast and trusts its input completely.

Majority vote is the default. When two secrets tie on votes, the one
produced first in enumeration order wins; the order comes from the
combination's position, not from when a worker finished it, so a
parallel run picks the same winner as a serial one.
"""

import logging
from concurrent.futures import FIRST_COMPLETED, ProcessPoolExecutor, wait
from dataclasses import dataclass, field
from enum import Enum
from itertools import islice
from typing import Iterable, Iterator, Sequence

from quorum.digest import fingerprint
from quorum.errors import (
    CombinationLimitError,
    InsufficientSharesError,
    MalformedInputError,
    NoConsensusError,
)
from quorum.shares import Point
from quorum.solver import evaluate, solve, solve_coefficients
from quorum.subsets import combinations, count_combinations, index_combinations

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 256
IN_FLIGHT_PER_WORKER = 2  # chunks queued per worker process


class Strategy(Enum):
    """How to pick the secret from more than k shares."""
    MAJORITY_VOTE = "majority"
    DIRECT = "direct"


class Tally:
    """
    Votes per secret, plus the ordinal of the first combination that
    produced it.

    Merging two tallies adds the votes and keeps the smaller ordinal,
    so the result does not depend on merge order.
    """

    def __init__(self):
        self.votes: dict[int, int] = {}
        self.first_seen: dict[int, int] = {}

    def add(self, secret: int, ordinal: int):
        self.votes[secret] = self.votes.get(secret, 0) + 1
        if secret not in self.first_seen or ordinal < self.first_seen[secret]:
            self.first_seen[secret] = ordinal

    def merge(self, other: "Tally") -> "Tally":
        for secret, count in other.votes.items():
            self.votes[secret] = self.votes.get(secret, 0) + count
            ordinal = other.first_seen[secret]
            if secret not in self.first_seen or ordinal < self.first_seen[secret]:
                self.first_seen[secret] = ordinal
        return self

    def winner(self) -> tuple[int, int]:
        """Return ``(secret, votes)``: most votes, earliest ordinal on ties."""
        if not self.votes:
            raise NoConsensusError("No valid combinations could reconstruct the secret")
        secret = min(
            self.votes,
            key=lambda s: (-self.votes[s], self.first_seen[s]),
        )
        return secret, self.votes[secret]

    def __len__(self):
        return len(self.votes)

    def __bool__(self):
        return bool(self.votes)


@dataclass
class Reconstruction:
    """Outcome of one reconstruction, with enough detail to audit it."""
    secret: int
    strategy: Strategy
    threshold: int
    shares: int
    combinations: int = 1
    failures: int = 0
    votes: int = 1
    tally: dict[int, int] = field(default_factory=dict)
    suspects: list[int] = field(default_factory=list)  # x of shares off the polynomial

    @property
    def fingerprint(self) -> str:
        return fingerprint(self.secret)


def _tally_chunk(chunk: list[tuple[int, tuple[Point, ...]]]) -> tuple[Tally, int]:
    """Solve a batch of numbered combinations. Runs in worker processes too."""
    tally = Tally()
    failures = 0
    for ordinal, combination in chunk:
        try:
            secret = solve(combination)
        except ArithmeticError as e:
            # SingularMatrixError and DivisionByZeroError both land here
            failures += 1
            logger.warning(
                "Skipping combination %s: %s",
                [p.x for p in combination], e,
            )
            continue
        tally.add(secret, ordinal)
    return tally, failures


def _chunked(iterable: Iterable, size: int):
    iterator = iter(iterable)
    while True:
        chunk = list(islice(iterator, size))
        if not chunk:
            return
        yield chunk


def _tally_in_pool(chunks: Iterable[list], workers: int) -> Iterator[tuple[Tally, int]]:
    """
    Run ``_tally_chunk`` over ``chunks`` on a process pool.

    At most ``workers * IN_FLIGHT_PER_WORKER`` chunks are pending at a
    time; the next chunk is only pulled once one finishes. Results are
    yielded in completion order.
    """
    window = workers * IN_FLIGHT_PER_WORKER
    chunks = iter(chunks)
    with ProcessPoolExecutor(max_workers=workers) as pool:
        pending = {pool.submit(_tally_chunk, chunk) for chunk in islice(chunks, window)}
        while pending:
            done, pending = wait(pending, return_when=FIRST_COMPLETED)
            for future in done:
                yield future.result()
            for chunk in islice(chunks, window - len(pending)):
                pending.add(pool.submit(_tally_chunk, chunk))


def _check_inputs(points: Sequence[Point], k: int):
    if isinstance(k, bool) or not isinstance(k, int) or k < 1:
        raise MalformedInputError(f"Threshold must be a positive integer, got {k!r}")
    if len(points) < k:
        raise InsufficientSharesError(len(points), k)


def _find_suspects(points: Sequence[Point], combination: Sequence[Point]) -> list[int]:
    coefficients = solve_coefficients(combination)
    return [p.x for p in points if evaluate(coefficients, p.x) != p.y]


def majority_vote(
    points: Sequence[Point],
    k: int,
    workers: int = 1,
    max_combinations: int | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Reconstruction:
    """
    Interpolate every k-combination and return the most common secret.

    Args:
        points: Candidate shares.
        k: Threshold.
        workers: Processes to spread combinations over (1 = in-process).
        max_combinations: Refuse to start if C(n, k) exceeds this.
        chunk_size: Combinations handed to a worker at a time.

    Raises:
        InsufficientSharesError: If fewer than k points are given.
        CombinationLimitError: If C(n, k) exceeds ``max_combinations``.
        NoConsensusError: If no combination could be solved.
    """
    _check_inputs(points, k)
    total = count_combinations(len(points), k)
    if max_combinations is not None and total > max_combinations:
        raise CombinationLimitError(total, max_combinations)

    numbered = enumerate(combinations(points, k))
    tally = Tally()
    failures = 0

    if workers > 1 and total > chunk_size:
        for part, failed in _tally_in_pool(_chunked(numbered, chunk_size), workers):
            tally.merge(part)
            failures += failed
    else:
        for chunk in _chunked(numbered, chunk_size):
            part, failed = _tally_chunk(chunk)
            tally.merge(part)
            failures += failed

    if not tally:
        raise NoConsensusError(
            f"No valid combinations could reconstruct the secret "
            f"({failures} of {total} failed)"
        )

    secret, votes = tally.winner()
    if failures:
        logger.warning("%d of %d combinations could not be solved", failures, total)

    # Re-solve the first combination that voted for the winner to find
    # which shares sit off its polynomial.
    winning_ordinal = tally.first_seen[secret]
    winning_indices = next(islice(index_combinations(len(points), k), winning_ordinal, None))
    suspects = _find_suspects(points, [points[i] for i in winning_indices])
    if suspects:
        logger.warning("Shares %s disagree with the consensus polynomial", suspects)

    logger.info(
        "Majority vote: secret %s won %d of %d votes (%d distinct results)",
        fingerprint(secret), votes, total - failures, len(tally),
    )
    return Reconstruction(
        secret=secret,
        strategy=Strategy.MAJORITY_VOTE,
        threshold=k,
        shares=len(points),
        combinations=total,
        failures=failures,
        votes=votes,
        tally=dict(tally.votes),
        suspects=suspects,
    )


def direct(points: Sequence[Point], k: int) -> Reconstruction:
    """
    Interpolate the k shares with the smallest x once.

    Any solver failure propagates; nothing is retried.
    """
    _check_inputs(points, k)
    chosen = sorted(points, key=lambda p: p.x)[:k]
    coefficients = solve_coefficients(chosen)
    secret = coefficients[-1].to_int()
    suspects = [p.x for p in points if evaluate(coefficients, p.x) != p.y]

    logger.info(
        "Direct: secret %s from shares %s", fingerprint(secret), [p.x for p in chosen]
    )
    return Reconstruction(
        secret=secret,
        strategy=Strategy.DIRECT,
        threshold=k,
        shares=len(points),
        tally={secret: 1},
        suspects=suspects,
    )


def reconstruct_detailed(
    points: Sequence[Point],
    k: int,
    strategy: Strategy = Strategy.MAJORITY_VOTE,
    *,
    workers: int = 1,
    max_combinations: int | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Reconstruction:
    """Reconstruct with ``strategy`` and return the full Reconstruction."""
    strategy = Strategy(strategy)
    if strategy is Strategy.DIRECT:
        return direct(points, k)
    return majority_vote(
        points,
        k,
        workers=workers,
        max_combinations=max_combinations,
        chunk_size=chunk_size,
    )


def reconstruct(
    points: Sequence[Point],
    k: int,
    strategy: Strategy = Strategy.MAJORITY_VOTE,
    **options,
) -> int:
    """
    Recover the secret shared among ``points`` with threshold ``k``.

    Args:
        points: Decoded shares.
        k: Threshold.
        strategy: Strategy.MAJORITY_VOTE (default) or Strategy.DIRECT.
        **options: ``workers``, ``max_combinations`` and ``chunk_size``
            for majority vote.

    Returns:
        The secret.
    """
    return reconstruct_detailed(points, k, strategy, **options).secret
