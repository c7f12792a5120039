"""Rendering instants as text in named layouts or custom `{token}` formats.

Custom format tokens:

    {YYYY} {YY}                 year, 4 or 2 digits
    {MMMM} {MMM} {MM} {M}       month name, abbreviation, 2 or 1 digits
    {DDDD}                      day of year, 3 digits
    {DD} {_D} {D}               day of month, zero-padded, space-padded, bare
    {dddd} {ddd}                weekday name, abbreviation
    {HH} {hh} {h}               hour 24h, hour 12h 2 digits, hour 12h
    {A} {a}                     AM/PM, am/pm
    {mm} {m} {ss} {s}           minute, second, 2 or 1 digits
    {F} ... {FFFFFFFFF}         fraction with exactly n digits, e.g. ".120"
    {f} ... {fffffffff}         fraction with up to n digits, trailing zeros
                                trimmed and nothing at all for zero
    {ZZZ} {ZZ} {Z}              offset as -07:00, -0700, -07
    {XXX}                       like {ZZZ} but "Z" for UTC
    {z}                         zone abbreviation, e.g. MST

Each braced token is replaced as a whole, so `{YYYY}` never turns into two
`{YY}`. Braces around anything else are left as they are.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from epoch.errors import UnknownFormat
from epoch.instant import ERA_YEARS, Instant
from epoch.layouts import (
    ANSIC,
    DEFAULT,
    HTTP,
    KITCHEN,
    RFC822,
    RFC822Z,
    RFC850,
    RFC1123,
    RFC1123Z,
    RFC3339,
    RFC3339_NANO,
    RUBY_DATE,
    STAMP,
    STAMP_MICRO,
    STAMP_MILLI,
    STAMP_NANO,
    TOKEN,
    UNIX_DATE,
    Layout,
)
from epoch.util import DAY_NAMES, MONTH_NAMES

logger = logging.getLogger(__name__)

_NAMED: dict[str, Layout] = {
    "": DEFAULT,
    "unix": UNIX_DATE,
    "ruby": RUBY_DATE,
    "ansic": ANSIC,
    "rfc822": RFC822,
    "rfc822z": RFC822Z,
    "rfc850": RFC850,
    "rfc1123": RFC1123,
    "rfc1123z": RFC1123Z,
    "rfc3339": RFC3339,
    "rfc3339nano": RFC3339_NANO,
    "kitchen": KITCHEN,
    "stamp": STAMP,
    "stampms": STAMP_MILLI,
    "stampmilli": STAMP_MILLI,
    "stampus": STAMP_MICRO,
    "stampmicro": STAMP_MICRO,
    "stampns": STAMP_NANO,
    "stampnano": STAMP_NANO,
    "http": HTTP,
}

FORMAT_NAMES: tuple[str, ...] = tuple(name for name in _NAMED if name)

# (wall clock, true year, nanosecond of the second)
Renderer = Callable[[datetime, int, int], str]


def _year(year: int, width: int) -> str:
    # Years before 0 print like -0001
    sign = "-" if year < 0 else ""
    return f"{sign}{abs(year):0{width}d}"


def _hour12(moment: datetime) -> int:
    return moment.hour % 12 or 12


def _offset(moment: datetime, separator: str = "", minutes: bool = True) -> str:
    utcoffset = moment.utcoffset()
    seconds = int(utcoffset.total_seconds()) if utcoffset is not None else 0
    sign = "-" if seconds < 0 else "+"
    hours, mins = divmod(abs(seconds) // 60, 60)
    if not minutes:
        return f"{sign}{hours:02d}"
    return f"{sign}{hours:02d}{separator}{mins:02d}"


def _iso_offset(moment: datetime) -> str:
    utcoffset = moment.utcoffset()
    if not utcoffset:
        return "Z"
    return _offset(moment, ":")


def _abbreviation(moment: datetime) -> str:
    # Zones without a name print their offset instead
    return moment.tzname() or _offset(moment)


def _fraction(nanosecond: int, digits: int, trim: bool) -> str:
    text = f"{nanosecond:09d}"[:digits]
    if trim:
        text = text.rstrip("0")
        if not text:
            return ""
    return "." + text


_RENDER_TOKENS: dict[str, Renderer] = {
    "YYYY": lambda m, year, ns: _year(year, 4),
    "YY": lambda m, year, ns: _year(year % 100, 2),
    "MMMM": lambda m, year, ns: MONTH_NAMES[m.month - 1],
    "MMM": lambda m, year, ns: MONTH_NAMES[m.month - 1][:3],
    "MM": lambda m, year, ns: f"{m.month:02d}",
    "M": lambda m, year, ns: str(m.month),
    "DDDD": lambda m, year, ns: f"{m.timetuple().tm_yday:03d}",
    "DD": lambda m, year, ns: f"{m.day:02d}",
    "_D": lambda m, year, ns: f"{m.day:2d}",
    "D": lambda m, year, ns: str(m.day),
    "dddd": lambda m, year, ns: DAY_NAMES[m.weekday()],
    "ddd": lambda m, year, ns: DAY_NAMES[m.weekday()][:3],
    "HH": lambda m, year, ns: f"{m.hour:02d}",
    "hh": lambda m, year, ns: f"{_hour12(m):02d}",
    "h": lambda m, year, ns: str(_hour12(m)),
    "A": lambda m, year, ns: "PM" if m.hour >= 12 else "AM",
    "a": lambda m, year, ns: "pm" if m.hour >= 12 else "am",
    "mm": lambda m, year, ns: f"{m.minute:02d}",
    "m": lambda m, year, ns: str(m.minute),
    "ss": lambda m, year, ns: f"{m.second:02d}",
    "s": lambda m, year, ns: str(m.second),
    "ZZZ": lambda m, year, ns: _offset(m, ":"),
    "ZZ": lambda m, year, ns: _offset(m),
    "Z": lambda m, year, ns: _offset(m, minutes=False),
    "XXX": lambda m, year, ns: _iso_offset(m),
    "z": lambda m, year, ns: _abbreviation(m),
}
for _n in range(1, 10):
    _RENDER_TOKENS["F" * _n] = lambda m, year, ns, n=_n: _fraction(ns, n, trim=False)
    _RENDER_TOKENS["f" * _n] = lambda m, year, ns, n=_n: _fraction(ns, n, trim=True)


def format_name(name: str) -> Layout:
    """Return the layout for an output format name such as 'rfc3339'.

    Names are case-insensitive; "" is the default layout.

    Raises:
        UnknownFormat: If the name is not known; carries the default layout
    """
    try:
        return _NAMED[name.lower()]
    except KeyError:
        raise UnknownFormat(name, DEFAULT) from None


def format_simple(template: str) -> Layout:
    """Wrap a custom `{token}` format, e.g. "{YYYY}-{MM}-{DD}", as a layout."""
    return Layout(name="Custom", template=template)


def render(instant: Instant, layout: Layout) -> str:
    """Render an instant in its own zone (UTC for UTC-only layouts)."""
    if layout.utc:
        instant = instant.in_zone(timezone.utc)
    moment, eras = instant.era_moment()
    year = moment.year - eras * ERA_YEARS
    nanosecond = instant.nanosecond

    def substitute(match) -> str:
        renderer = _RENDER_TOKENS.get(match.group(1))
        if renderer is None:
            return match.group(0)
        return renderer(moment, year, nanosecond)

    return TOKEN.sub(substitute, layout.template)


def formatted_string(instant: Instant, format: str, default: Layout = DEFAULT) -> str:
    """Render an instant with a format name or a custom `{token}` format.

    Args:
        instant: Instant to render, in the zone it should be shown in
        format: Format name, custom template (anything containing "{"), or ""
        default: Layout used when format is ""

    An unknown format name is not fatal: it logs a warning and renders with
    the default layout.
    """
    if "{" in format:
        layout = format_simple(format)
    elif format == "":
        layout = default
    else:
        try:
            layout = format_name(format)
        except UnknownFormat as e:
            logger.warning("%s, using the default format", e)
            layout = e.fallback
    return render(instant, layout)
