"""Timezone resolution backed by the IANA database.

Named zones come from `zoneinfo` (the system database, or the `tzdata`
wheel where the system has none); the machine's own zone comes from
dateutil's `tzlocal`, which follows the TZ environment variable.
"""

from datetime import datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import tz

from epoch.errors import TimezoneLoadError


def local_zone() -> tzinfo:
    """Return the machine's local timezone."""
    return tz.tzlocal()


def location(name: str) -> tzinfo:
    """Resolve a --tz value to a timezone.

    Accepts "" or "Local" (any case) for the local zone, "UTC", and IANA names
    such as "Europe/Berlin".

    Raises:
        TimezoneLoadError: If the name is not in the timezone database
    """
    if name == "" or name.lower() == "local":
        return local_zone()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise TimezoneLoadError(name, e) from e


def abbreviation_offset(zone: tzinfo, abbr: str, wall: datetime) -> timedelta | None:
    """Return the UTC offset `zone` uses under the abbreviation `abbr`.

    The offset in effect at the naive wall clock time `wall` is preferred,
    including the second pass through a repeated hour; failing that, the
    zone's standard or summer offset of the same year, so "EST" still means
    -05:00 in July. None if the zone never uses the abbreviation that year.
    """
    candidates = [wall.replace(fold=0), wall.replace(fold=1)]
    candidates += [wall.replace(month=month, day=1) for month in (1, 7)]
    for candidate in candidates:
        aware = candidate.replace(tzinfo=zone)
        if aware.tzname() == abbr:
            return aware.utcoffset()
    return None
