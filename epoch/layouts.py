"""Known date-time layouts and the cascade that parses formatted input.

Every layout is written in the same `{token}` mini-format users may pass as
a custom output format (see `epoch.formatting`), so a single template both
parses and renders. For example RFC 1123 is::

    {ddd}, {DD} {MMM} {YYYY} {HH}:{mm}:{ss} {z}

Parsing compiles a template into an anchored regular expression. The rules
follow the reference layouts of Go's time package:

- month and weekday names match case-insensitively; the weekday is read but
  never checked against the date
- a fractional second may follow the seconds field even when the template
  does not mention one
- two-digit years 69-99 mean 19xx, 00-68 mean 20xx
- a run of spaces in the template matches one or more spaces
- missing date fields fall on January 1 of year 0
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from functools import cache

from dateutil import tz

from epoch import zones
from epoch.errors import ParseFormattedError
from epoch.instant import ERA_YEARS, Instant
from epoch.util import DAY_NAMES, MONTH_NAMES

logger = logging.getLogger(__name__)

TOKEN = re.compile(r"\{(_?[A-Za-z]+)\}")


def _names(names: tuple[str, ...] | list[str]) -> str:
    return "(?i:" + "|".join(names) + ")"


_IMPLICIT_FRACTION = r"(?:[.,](?P<fraction>\d+))?"

_PARSE_TOKENS: dict[str, str] = {
    "YYYY": r"(?P<year>\d{4})",
    "YY": r"(?P<year2>\d{2})",
    "MMMM": rf"(?P<month_name>{_names(MONTH_NAMES)})",
    "MMM": rf"(?P<month_name>{_names([name[:3] for name in MONTH_NAMES])})",
    "MM": r"(?P<month>\d{2})",
    "M": r"(?P<month>\d{1,2})",
    "DDDD": r"(?P<yday>\d{3})",
    "DD": r"(?P<day>\d{2})",
    "_D": r" ?(?P<day>\d{1,2})",
    "D": r"(?P<day>\d{1,2})",
    "dddd": _names(DAY_NAMES),
    "ddd": _names([name[:3] for name in DAY_NAMES]),
    "HH": r"(?P<hour>\d{1,2})",
    "hh": r"(?P<hour12>\d{2})",
    "h": r"(?P<hour12>\d{1,2})",
    "A": r"(?P<ampm>AM|PM)",
    "a": r"(?P<ampm>am|pm)",
    "mm": r"(?P<minute>\d{2})",
    "m": r"(?P<minute>\d{1,2})",
    "ss": r"(?P<second>\d{2})",
    "s": r"(?P<second>\d{1,2})",
    "ZZZ": r"(?P<offset>[+-]\d{2}:\d{2})",
    "ZZ": r"(?P<offset>[+-]\d{4})",
    "Z": r"(?P<offset>[+-]\d{2})",
    "XXX": r"(?P<offset>Z|[+-]\d{2}:\d{2})",
    # "+03" style names only; "-0700" belongs to the {ZZ} layouts
    "z": r"(?P<abbr>GMT[+-]\d{1,2}|[+-]\d{2}|ChST|MeST|[A-Z]{2,3}T|[A-Z]{3})",
}
for _n in range(1, 10):
    _PARSE_TOKENS["F" * _n] = rf"[.,](?P<fraction>\d{{{_n}}})"
    _PARSE_TOKENS["f" * _n] = _IMPLICIT_FRACTION

_FRACTION_NEXT = re.compile(r"\{[Ff]+\}")


def _literal(text: str) -> str:
    return " +".join(re.escape(chunk) for chunk in re.split(" +", text))


@cache
def compile_template(template: str) -> re.Pattern[str]:
    """Compile a `{token}` template into a regular expression for parsing.

    Unknown tokens are matched literally, braces included.
    """
    parts: list[str] = []
    pos = 0
    for match in TOKEN.finditer(template):
        parts.append(_literal(template[pos : match.start()]))
        name = match.group(1)
        if name in _PARSE_TOKENS:
            parts.append(_PARSE_TOKENS[name])
            if name in ("ss", "s") and not _FRACTION_NEXT.match(
                template, match.end()
            ):
                parts.append(_IMPLICIT_FRACTION)
        else:
            parts.append(re.escape(match.group(0)))
        pos = match.end()
    parts.append(_literal(template[pos:]))
    return re.compile("".join(parts))


@dataclass(frozen=True, kw_only=True)
class Layout:
    """A named date-time layout.

    Attributes:
        name: Identifier, e.g. "RFC1123"
        template: `{token}` template used to parse and render
        trailer: Marker after which input text is ignored when parsing
        utc: Always render in UTC (the template hardcodes the zone)
    """

    name: str
    template: str
    trailer: str | None = None
    utc: bool = False

    def __str__(self) -> str:
        return self.name

    @property
    def pattern(self) -> re.Pattern[str]:
        return compile_template(self.template)

    def parse(self, text: str) -> Instant | None:
        """Return the instant `text` denotes, or None if it doesn't fit."""
        if self.trailer is not None:
            text = text.split(self.trailer, 1)[0]

        match = self.pattern.fullmatch(text)
        if match is None:
            return None

        try:
            return _build(match.groupdict())
        except (ValueError, OverflowError):
            # Out-of-range fields such as Feb 30 or hour 25
            return None


RFC1123 = Layout(name="RFC1123", template="{ddd}, {DD} {MMM} {YYYY} {HH}:{mm}:{ss} {z}")
RFC1123Z = Layout(name="RFC1123Z", template="{ddd}, {DD} {MMM} {YYYY} {HH}:{mm}:{ss} {ZZ}")
RFC3339 = Layout(name="RFC3339", template="{YYYY}-{MM}-{DD}T{HH}:{mm}:{ss}{XXX}")
RFC3339_NANO = Layout(
    name="RFC3339Nano", template="{YYYY}-{MM}-{DD}T{HH}:{mm}:{ss}{fffffffff}{XXX}"
)
RFC822 = Layout(name="RFC822", template="{DD} {MMM} {YY} {HH}:{mm} {z}")
RFC822Z = Layout(name="RFC822Z", template="{DD} {MMM} {YY} {HH}:{mm} {ZZ}")
RFC850 = Layout(name="RFC850", template="{dddd}, {DD}-{MMM}-{YY} {HH}:{mm}:{ss} {z}")
ANSIC = Layout(name="ANSIC", template="{ddd} {MMM} {_D} {HH}:{mm}:{ss} {YYYY}")
UNIX_DATE = Layout(name="UnixDate", template="{ddd} {MMM} {_D} {HH}:{mm}:{ss} {z} {YYYY}")
RUBY_DATE = Layout(name="RubyDate", template="{ddd} {MMM} {DD} {HH}:{mm}:{ss} {ZZ} {YYYY}")
KITCHEN = Layout(name="Kitchen", template="{h}:{mm}{A}")
STAMP = Layout(name="Stamp", template="{MMM} {_D} {HH}:{mm}:{ss}")
STAMP_MILLI = Layout(name="StampMilli", template="{MMM} {_D} {HH}:{mm}:{ss}{FFF}")
STAMP_MICRO = Layout(name="StampMicro", template="{MMM} {_D} {HH}:{mm}:{ss}{FFFFFF}")
STAMP_NANO = Layout(name="StampNano", template="{MMM} {_D} {HH}:{mm}:{ss}{FFFFFFFFF}")
HTTP = Layout(
    name="HTTP", template="{ddd}, {DD} {MMM} {YYYY} {HH}:{mm}:{ss} GMT", utc=True
)
# How Go prints a time.Time, e.g.
# "2019-01-26 09:43:57.377055 +0100 CET m=+0.644739467"; the monotonic clock
# reading after " m=" is dropped before matching
DEFAULT = Layout(
    name="Default",
    template="{YYYY}-{MM}-{DD} {HH}:{mm}:{ss}{fffffffff} {ZZ} {z}",
    trailer=" m=",
)
SIMPLE = Layout(name="Simple", template="{YYYY}-{MM}-{DD} {HH}:{mm}:{ss}{fffffffff}")

# Parse priority: looser layouts early in the list can claim strings meant
# for later ones, so the order is part of the behaviour
CASCADE: tuple[Layout, ...] = (
    RFC1123,
    RFC1123Z,
    RFC3339,
    RFC3339_NANO,
    RFC822,
    RFC822Z,
    RFC850,
    ANSIC,
    UNIX_DATE,
    RUBY_DATE,
    KITCHEN,
    STAMP,
    STAMP_MILLI,
    STAMP_MICRO,
    STAMP_NANO,
    HTTP,
    DEFAULT,
    SIMPLE,
)


def parse_formatted(text: str) -> tuple[Instant, Layout]:
    """Parse a formatted date-time by trying each layout of `CASCADE` in order.

    Returns:
        The parsed instant and the layout that matched, so output can keep the
        input's style

    Raises:
        ParseFormattedError: If no layout matches

    Example:
        >>> instant, layout = parse_formatted("Mon, 02 Jan 2006 15:04:05 UTC")
        >>> layout.name
        'RFC1123'
    """
    for layout in CASCADE:
        instant = layout.parse(text)
        if instant is not None:
            logger.debug("input %r matched layout %s", text, layout)
            return instant, layout
    raise ParseFormattedError(text)


def _build(fields: dict[str, str | None]) -> Instant:
    """Assemble an instant from the named groups of a layout match."""
    eras = 0
    if fields.get("year"):
        year = int(fields["year"])
    elif fields.get("year2"):
        year = int(fields["year2"])
        year += 1900 if year >= 69 else 2000
    else:
        # No year means year 0, built one era later since datetime starts at 1
        year = ERA_YEARS
        eras = 1

    if fields.get("month_name"):
        month = _month_number(fields["month_name"])
    elif fields.get("month"):
        month = int(fields["month"])
    else:
        month = 1

    day = int(fields["day"]) if fields.get("day") else 1

    if fields.get("hour12"):
        hour = int(fields["hour12"])
        if hour > 12:
            raise ValueError(f"hour {hour} out of range for a 12-hour clock")
    elif fields.get("hour"):
        hour = int(fields["hour"])
    else:
        hour = 0

    ampm = (fields.get("ampm") or "").upper()
    if ampm == "PM" and hour < 12:
        hour += 12
    elif ampm == "AM" and hour == 12:
        hour = 0

    minute = int(fields["minute"]) if fields.get("minute") else 0
    second = int(fields["second"]) if fields.get("second") else 0

    wall = datetime(year, month, day, hour, minute, second)
    if fields.get("yday"):
        wall = wall.replace(month=1, day=1) + timedelta(days=int(fields["yday"]) - 1)

    # Digits past nanoseconds are dropped
    nanosecond = int((fields.get("fraction") or "")[:9].ljust(9, "0"))

    zone = _zone(fields.get("offset"), fields.get("abbr"), wall)
    instant = Instant.from_datetime(wall.replace(tzinfo=zone), nanosecond=nanosecond)
    return instant.shift_eras(-eras)


def _month_number(name: str) -> int:
    prefix = name[:3].lower()
    for number, month in enumerate(MONTH_NAMES, start=1):
        if month[:3].lower() == prefix:
            return number
    raise ValueError(f"unknown month name {name!r}")


def _offset_seconds(offset: str) -> int:
    """Seconds east of UTC for "+07", "-0700" or "-07:00"."""
    digits = offset[1:].replace(":", "")
    hours = int(digits[:2])
    minutes = int(digits[2:4] or 0)
    seconds = hours * 3600 + minutes * 60
    return -seconds if offset[0] == "-" else seconds


def _zone(offset: str | None, abbr: str | None, wall: datetime) -> tzinfo:
    """Pick the timezone a parsed wall clock time belongs to.

    - "Z" or the abbreviation "UTC" means UTC, whatever the offset says
    - a numeric offset gives a fixed zone, named after the abbreviation if the
      layout also carries one
    - an abbreviation alone: "GMT+3" is three hours east, "+03" is its own
      offset, the local zone's abbreviation is the local zone, or a fixed
      zone at its offset when not in effect at that time (EST in July, or in
      the repeated hour), and anything else is a fixed zone of that name at
      offset zero, since abbreviations are ambiguous worldwide
    - no zone information means UTC
    """
    if offset == "Z" or abbr == "UTC":
        return timezone.utc
    if offset is not None:
        return tz.tzoffset(abbr, _offset_seconds(offset))
    if abbr is None:
        return timezone.utc

    if abbr.startswith("GMT") and len(abbr) > 3:
        return tz.tzoffset(abbr, int(abbr[3:]) * 3600)
    if abbr[0] in "+-":
        return tz.tzoffset(abbr, _offset_seconds(abbr))

    local = zones.local_zone()
    if wall.replace(tzinfo=local).tzname() == abbr:
        return local
    local_offset = zones.abbreviation_offset(local, abbr, wall)
    if local_offset is not None:
        return tz.tzoffset(abbr, local_offset)
    return tz.tzoffset(abbr, 0)
