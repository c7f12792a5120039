"""Relative time arithmetic such as "+30m -5h +3D -2Y".

Clock units (ns, us, ms, s, m, h) move the instant by an exact duration, so
an hour is always 3600 seconds even across a DST change. Calendar units
(D, W, M, Y) move the wall clock date in the instant's zone and keep the time
of day; a day that doesn't exist in the target month rolls over into the
next one, so Jan 31 + 1M is Mar 3 (Mar 2 in leap years).
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from enum import Enum
from functools import reduce

from epoch.errors import InvalidCalculation, UnknownOperator
from epoch.instant import ERA_YEARS, MAX_NANOS, MIN_NANOS, Instant
from epoch.util import HOUR, MICROSECOND, MILLISECOND, MINUTE, NANOSECOND, SECOND

logger = logging.getLogger(__name__)


class Operator(Enum):
    ADD = "+"
    SUBTRACT = "-"


DURATIONS: dict[str, int] = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

# (years, months, days) per unit
CALENDAR: dict[str, tuple[int, int, int]] = {
    "D": (0, 0, 1),
    "W": (0, 0, 7),
    "M": (0, 1, 0),
    "Y": (1, 0, 0),
}

_BODY = re.compile(r"(?P<amount>[0-9]+)(?P<unit>[A-Za-z]+)")


@dataclass(frozen=True, kw_only=True)
class CalcStep:
    operator: Operator
    amount: int
    unit: str

    def __str__(self) -> str:
        return f"{self.operator.value}{self.amount}{self.unit}"


def to_operator(token: str) -> Operator:
    """Return the operator for "+" or "-"."""
    try:
        return Operator(token)
    except ValueError:
        raise UnknownOperator(token) from None


def parse_calc(text: str) -> list[CalcStep]:
    """Parse whitespace-separated steps like "+30m -5h +3D".

    Raises:
        UnknownOperator: If a step doesn't start with "+" or "-"
        InvalidCalculation: If a step has no amount or an unknown unit
    """
    steps: list[CalcStep] = []
    for token in text.split():
        operator = to_operator(token[:1])
        match = _BODY.fullmatch(token[1:])
        if match is None:
            raise InvalidCalculation(token, "expected <+|-><amount><unit>")

        unit = match.group("unit")
        if unit not in DURATIONS and unit not in CALENDAR:
            raise InvalidCalculation(token, f"unknown unit {unit!r}")

        steps.append(
            CalcStep(operator=operator, amount=int(match.group("amount")), unit=unit)
        )
    return steps


def calculate(instant: Instant, operator: Operator, amount: int, unit: str) -> Instant:
    """Add or subtract `amount` of `unit` to an instant.

    Raises:
        InvalidCalculation: If the unit is unknown or the result would leave
            years 0 through 9999
    """
    step = f"{operator.value}{amount}{unit}"
    if operator is Operator.SUBTRACT:
        amount = -amount

    if unit in DURATIONS:
        nanos = instant.nanos + amount * DURATIONS[unit]
        if not MIN_NANOS <= nanos <= MAX_NANOS:
            raise InvalidCalculation(step, "result is outside years 0 through 9999")
        return replace(instant, nanos=nanos)

    if unit in CALENDAR:
        years, months, days = (amount * n for n in CALENDAR[unit])
        try:
            return add_date(instant, years, months, days)
        except (ValueError, OverflowError):
            raise InvalidCalculation(
                step, "result is outside years 0 through 9999"
            ) from None

    raise InvalidCalculation(step, f"unknown unit {unit!r}")


def add_date(instant: Instant, years: int, months: int, days: int) -> Instant:
    """Shift the wall clock date of an instant, normalizing overflow forward.

    Raises:
        ValueError: If the result leaves years 0 through 9999
    """
    wall, eras = instant.era_moment()
    year, month = divmod((wall.year + years) * 12 + wall.month - 1 + months, 12)
    # Keep the target year where date can hold it
    if year < 1:
        year += ERA_YEARS
        eras += 1
    elif year > 9999:
        year -= ERA_YEARS
        eras -= 1
    day = date(year, month + 1, 1) + timedelta(days=wall.day - 1 + days)
    shifted = datetime.combine(
        day, wall.time().replace(microsecond=0), tzinfo=instant.zone
    )
    result = Instant.from_datetime(shifted, nanosecond=instant.nanosecond)
    result = result.shift_eras(-eras)
    if not MIN_NANOS <= result.nanos <= MAX_NANOS:
        raise ValueError("result is outside years 0 through 9999")
    return result


def apply_all(instant: Instant, steps: Iterable[CalcStep]) -> Instant:
    """Apply steps left to right; calendar steps don't commute."""

    def reducer(acc: Instant, step: CalcStep) -> Instant:
        logger.debug("applying %s to %s", step, acc)
        return calculate(acc, step.operator, step.amount, step.unit)

    return reduce(reducer, steps, instant)
