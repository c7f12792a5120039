"""Timestamp units: suffix detection, exact encoding and unit guessing."""

import re
from datetime import timezone, tzinfo
from enum import Enum

from epoch.errors import OutOfRange, UnitMismatch, UnknownUnit
from epoch.instant import MAX_NANOS, MIN_NANOS, Instant
from epoch.util import MICROSECOND, MILLISECOND, NANOSECOND, SECOND

GUESS = "guess"

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class TimeUnit(Enum):
    """Resolution of an epoch timestamp, declared coarsest first."""

    SECONDS = "s"
    MILLISECONDS = "ms"
    MICROSECONDS = "us"
    NANOSECONDS = "ns"

    @property
    def size(self) -> int:
        """Length of one unit in nanoseconds."""
        return _SIZES[self]

    @property
    def long_name(self) -> str:
        return self.name.lower()


_SIZES: dict[TimeUnit, int] = {
    TimeUnit.SECONDS: SECOND,
    TimeUnit.MILLISECONDS: MILLISECOND,
    TimeUnit.MICROSECONDS: MICROSECOND,
    TimeUnit.NANOSECONDS: NANOSECOND,
}

_ALIASES: dict[str, TimeUnit] = {
    "s": TimeUnit.SECONDS,
    "sec": TimeUnit.SECONDS,
    "ms": TimeUnit.MILLISECONDS,
    "milli": TimeUnit.MILLISECONDS,
    "us": TimeUnit.MICROSECONDS,
    "micro": TimeUnit.MICROSECONDS,
    "ns": TimeUnit.NANOSECONDS,
    "nano": TimeUnit.NANOSECONDS,
}

# Suffixes in match order; "s" last since the others end with it too
_SUFFIXES = ("ns", "us", "ms", "s")


def parse_unit(name: "str | TimeUnit") -> TimeUnit:
    """Return the unit for a short or long unit name ('ms', 'milli', ...)."""
    if isinstance(name, TimeUnit):
        return name
    try:
        return _ALIASES[name]
    except KeyError:
        raise UnknownUnit(name) from None


def parse_integer(text: str) -> int | None:
    """Parse a signed base-10 integer that fits in 64 bits, else None."""
    if not _INTEGER.fullmatch(text):
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def strip_unit_suffix(input: str, unit: str) -> tuple[str, str]:
    """Split a unit suffix off a numeric input.

    "1595087205us" becomes ("1595087205", "us"). A suffix only counts when
    what precedes it is an integer, so zone names ending in "s" pass through.

    Args:
        input: Raw input string
        unit: Unit flag, either a unit name or "guess"

    Returns:
        The numeric remainder and the detected unit name, or the input and
        flag unchanged when no suffix applies

    Raises:
        UnitMismatch: If an explicit unit flag names a different unit
    """
    for suffix in _SUFFIXES:
        if not input.endswith(suffix):
            continue

        remainder = input[: -len(suffix)]
        if parse_integer(remainder) is None:
            continue

        if unit != GUESS and parse_unit(unit) is not parse_unit(suffix):
            raise UnitMismatch(unit, suffix)
        return remainder, suffix

    return input, unit


def to_timestamp(instant: Instant, unit: TimeUnit) -> int:
    """Encode an instant as an integer count of `unit` since the epoch.

    Sub-unit precision is dropped by floor division.
    """
    if not isinstance(unit, TimeUnit):
        raise UnknownUnit(unit)
    return instant.nanos // unit.size


def parse_timestamp(
    timestamp: int, unit: TimeUnit, zone: tzinfo = timezone.utc
) -> Instant:
    """Decode an integer count of `unit` since the epoch.

    Raises:
        UnknownUnit: If unit is not a TimeUnit
        OutOfRange: If the instant falls outside years 0 through 9999
    """
    if not isinstance(unit, TimeUnit):
        raise UnknownUnit(unit)
    nanos = timestamp * unit.size
    if not MIN_NANOS <= nanos <= MAX_NANOS:
        raise OutOfRange(timestamp, unit.long_name)
    return Instant(nanos=nanos, zone=zone)


def guess_unit(timestamp: int, reference: Instant) -> TimeUnit:
    """Guess the unit of a bare timestamp from its number of digits.

    The reference instant (usually "now") is encoded in every unit, and the
    unit whose encoding has the closest digit count wins. On a tie the
    coarser unit is kept. This is a heuristic: a timestamp far from the
    reference can be misread.
    """
    digits = len(str(timestamp))

    def distance(unit: TimeUnit) -> int:
        return abs(len(str(to_timestamp(reference, unit))) - digits)

    # min() keeps the first of equal candidates, and TimeUnit iterates
    # coarsest first
    return min(TimeUnit, key=distance)
