"""
Shares
Reads threshold share containers into points.

A container is a JSON object holding the threshold and one entry per
share, keyed by the share's x-coordinate:

    {
        "keys": {"n": 4, "k": 3},
        "1": {"base": "10", "value": "4"},
        "2": {"base": "2", "value": "111"},
        ...
    }

Each value is written in its own base. A share whose base or digits are
unusable is skipped with a warning; a container without a usable
threshold is rejected outright.
"""

import json
import logging
import re
import string
from dataclasses import dataclass, field
from pathlib import Path

from quorum.errors import InvalidShareError, MalformedInputError

logger = logging.getLogger(__name__)

MIN_BASE = 2
MAX_BASE = 36
DIGITS = string.digits + string.ascii_lowercase

_SHARE_KEY = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class Point:
    """A single share: one sample of the secret polynomial."""
    x: int
    y: int

    def to_entry(self, base: int = 10) -> dict:
        """Render the y-coordinate as a container entry in ``base``."""
        return {"base": str(base), "value": encode_value(self.y, base)}


@dataclass
class ShareSet:
    """The usable contents of one container."""
    threshold: int
    points: list[Point]
    skipped: dict[str, str] = field(default_factory=dict)  # key -> reason
    declared: int | None = None  # "n" from the container, if present


def encode_value(value: int, base: int = 10) -> str:
    """Write an integer in ``base`` using 0-9a-z digits."""
    _check_base(base)
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    digits = []
    while value:
        value, rem = divmod(value, base)
        digits.append(DIGITS[rem])
    return sign + "".join(reversed(digits))


def decode_value(value: str, base) -> int:
    """
    Decode a share value written in ``base``.

    Accepts an optional sign followed by digits valid in the base, in
    either case. Anything else (prefixes such as ``0x``, underscores,
    inner whitespace) is rejected rather than guessed at.

    Raises:
        InvalidShareError: If the base is out of range or the value
            does not parse.
    """
    base = _parse_base(base)
    if not isinstance(value, str) or not value.strip():
        raise InvalidShareError("Share value is empty")

    text = value.strip().lower()
    sign = 1
    if text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if not text:
        raise InvalidShareError(f"Share value {value!r} has no digits")

    allowed = DIGITS[:base]
    bad = sorted({c for c in text if c not in allowed})
    if bad:
        raise InvalidShareError(
            f"Share value {value!r} has digits {''.join(bad)!r} not valid in base {base}"
        )
    return sign * int(text, base)


def _parse_base(base) -> int:
    if isinstance(base, bool):
        raise InvalidShareError(f"Invalid base {base!r}")
    if isinstance(base, str):
        if not base.strip().isdigit():
            raise InvalidShareError(f"Invalid base {base!r}")
        base = int(base.strip())
    if not isinstance(base, int):
        raise InvalidShareError(f"Invalid base {base!r}")
    _check_base(base)
    return base


def _check_base(base: int):
    if not MIN_BASE <= base <= MAX_BASE:
        raise InvalidShareError(f"Base {base} outside [{MIN_BASE}, {MAX_BASE}]")


def _parse_threshold(container: dict) -> tuple[int, int | None]:
    keys = container.get("keys")
    if not isinstance(keys, dict):
        keys = {}

    k = keys.get("k", container.get("k"))
    if k is None:
        raise MalformedInputError("Could not find 'k' in share container")
    if isinstance(k, bool) or not isinstance(k, (int, str)):
        raise MalformedInputError(f"Threshold 'k' must be an integer, got {k!r}")
    try:
        k = int(k)
    except ValueError:
        raise MalformedInputError(f"Threshold 'k' must be an integer, got {k!r}")
    if k <= 0:
        raise MalformedInputError("k must be positive")

    n = keys.get("n")
    if isinstance(n, bool) or not isinstance(n, int):
        n = None
    return k, n


def parse_container(container: dict) -> ShareSet:
    """
    Extract the threshold and every usable share from a container.

    Args:
        container: The decoded JSON object.

    Returns:
        ShareSet with points in container order.

    Raises:
        MalformedInputError: If the container is not an object or its
            threshold is missing or not positive.
    """
    if not isinstance(container, dict):
        raise MalformedInputError("Share container must be a JSON object")

    threshold, declared = _parse_threshold(container)
    share_set = ShareSet(threshold=threshold, points=[], declared=declared)
    seen = set()
    entries = 0

    for key, entry in container.items():
        if not _SHARE_KEY.fullmatch(key):
            continue
        entries += 1
        try:
            if not isinstance(entry, dict):
                raise InvalidShareError("Share entry is not an object")
            x = int(key)
            if x in seen:
                raise InvalidShareError(f"Duplicate share index {x}")
            y = decode_value(entry.get("value"), entry.get("base"))
        except InvalidShareError as e:
            logger.warning("Skipping share %s: %s", key, e)
            share_set.skipped[key] = str(e)
            continue
        seen.add(x)
        share_set.points.append(Point(x, y))

    if declared is not None and declared != entries:
        logger.warning(
            "Container declares n=%d but holds %d share entries", declared, entries
        )

    logger.debug(
        "Parsed %d of %d shares (k=%d)", len(share_set.points), entries, threshold
    )
    return share_set


def load(path: str | Path) -> ShareSet:
    """
    Read and parse a share container file.

    Raises:
        MalformedInputError: If the file is not UTF-8 or not valid JSON.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    try:
        container = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"Invalid JSON in {path}: {e}")
    except UnicodeDecodeError as e:
        raise MalformedInputError(f"{path} is not UTF-8 text: {e}")
    except RecursionError:
        raise MalformedInputError(f"JSON in {path} is nested too deeply")
    return parse_container(container)


def dump_container(threshold: int, points: list[Point], base: int = 10) -> dict:
    """Build a container for ``points`` with every value written in ``base``."""
    container = {"keys": {"n": len(points), "k": threshold}}
    for point in points:
        container[str(point.x)] = point.to_entry(base)
    return container
