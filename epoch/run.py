"""One conversion from input string to output string.

The input is classified first: anything that is an integer once a unit
suffix is stripped is a timestamp and is rendered as a date; everything else
is parsed as a formatted date and becomes a timestamp, or a date again when
a timezone or format is requested. Calculations run after decoding and
before the final encoding or rendering.
"""

import logging

from epoch import zones
from epoch.calc import CalcStep, apply_all, parse_calc
from epoch.config import Options
from epoch.errors import ConflictingFlags
from epoch.formatting import formatted_string, render
from epoch.instant import Instant
from epoch.layouts import DEFAULT, parse_formatted
from epoch.units import (
    GUESS,
    TimeUnit,
    guess_unit,
    parse_integer,
    parse_timestamp,
    parse_unit,
    strip_unit_suffix,
    to_timestamp,
)

logger = logging.getLogger(__name__)


def run(input: str, options: Options | None = None, now: str | None = None) -> str:
    """Convert a timestamp to a date or a date to a timestamp.

    Args:
        input: Timestamp ("1595087205", "1595087205us") or formatted date;
            "" means now
        options: Unit, format, timezone, quiet and calc settings
        now: Reference time as a formatted date, used for empty input and
            for guessing units; defaults to the current time

    Returns:
        The converted value as a single line of text

    Raises:
        EpochError: Any of its subclasses, for input or flags that can't be
            converted

    Example:
        >>> run("1595087205", Options(tz="UTC", quiet=True))
        '2020-07-18 15:46:45 +0000 UTC'
    """
    options = options or Options()
    steps = parse_calc(options.calc)

    if now is None:
        reference = Instant.now(zones.local_zone())
        now = render(reference, DEFAULT)
    else:
        reference, _ = parse_formatted(now)

    if input == "":
        input = now

    input, unit = strip_unit_suffix(input, options.unit)

    timestamp = parse_integer(input)
    if timestamp is not None:
        return _from_timestamp(timestamp, unit, reference, steps, options)
    return _from_formatted(input, steps, options)


def _from_timestamp(
    timestamp: int,
    unit_name: str,
    reference: Instant,
    steps: list[CalcStep],
    options: Options,
) -> str:
    if unit_name == GUESS:
        unit = guess_unit(timestamp, reference)
        if not options.quiet:
            logger.info("guessed unit: %s", unit.long_name)
    else:
        unit = parse_unit(unit_name)

    instant = parse_timestamp(timestamp, unit, zones.location(options.tz))

    if steps:
        # Arithmetic on a timestamp gives a timestamp of the same unit
        return str(to_timestamp(apply_all(instant, steps), unit))

    return formatted_string(instant, options.format)


def _from_formatted(text: str, steps: list[CalcStep], options: Options) -> str:
    if options.tz or options.format:
        # The output is a date, so a unit means nothing here
        if options.unit_is_explicit:
            raise ConflictingFlags()

        instant, layout = parse_formatted(text)
        instant = apply_all(instant.in_zone(zones.location(options.tz)), steps)
        return formatted_string(instant, options.format, default=layout)

    instant, _ = parse_formatted(text)
    instant = apply_all(instant.in_zone(zones.location(options.tz)), steps)

    if options.unit_is_explicit:
        unit = parse_unit(options.unit)
    else:
        unit = TimeUnit.SECONDS
        if not options.quiet:
            logger.info("using seconds as unit")

    return str(to_timestamp(instant, unit))
