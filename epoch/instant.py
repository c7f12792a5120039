import time
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone, tzinfo

from epoch.errors import OutOfRange
from epoch.util import DAY, MICROSECOND, SECOND

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# 400 Gregorian years: same leap years and a whole number of weeks
ERA = 146097 * DAY
ERA_YEARS = 400


@dataclass(frozen=True, kw_only=True)
class Instant:
    """An absolute point in time with nanosecond resolution.

    `nanos` counts nanoseconds since the Unix epoch and is the single source
    of truth; `zone` only decides how the instant is displayed and which wall
    clock calendar arithmetic runs on.
    """

    nanos: int
    zone: tzinfo = timezone.utc

    def __str__(self) -> str:
        """Human-friendly string with the full nanosecond fraction."""
        moment, eras = self.era_moment()
        year = moment.year - eras * ERA_YEARS
        return (
            f"Instant({year:04d}-{moment:%m-%dT%H:%M:%S}.{self.nanosecond:09d}"
            f"{moment:%z})"
        )

    @property
    def moment(self) -> datetime:
        """Aware datetime in `zone`, truncated to the microsecond.

        Raises:
            OutOfRange: If the wall clock in `zone` is outside years 1 through
                9999, which datetime can't hold; see `era_moment`
        """
        moment, eras = self.era_moment()
        if eras:
            try:
                return moment.replace(year=moment.year - eras * ERA_YEARS)
            except ValueError:
                raise OutOfRange(self.nanos, "nanoseconds") from None
        return moment

    def era_moment(self) -> tuple[datetime, int]:
        """Wall clock datetime in `zone`, moved by whole eras to fit datetime.

        Instants in year 0, or within a day of either end of datetime's range,
        are shifted by `ERA` before conversion. Weekdays and leap years are
        unchanged by the shift, so only the year needs correcting.

        Returns:
            The datetime and the number of eras it was moved forward (negative
            for backward); the true year is `moment.year - eras * ERA_YEARS`
        """
        eras = 0
        if self.nanos < _YEAR_ONE + DAY:
            eras = 1
        elif self.nanos > MAX_NANOS - DAY:
            eras = -1
        utc = EPOCH + timedelta(microseconds=(self.nanos + eras * ERA) // MICROSECOND)
        return utc.astimezone(self.zone), eras

    @property
    def nanosecond(self) -> int:
        """Fraction of the current second, 0 through 999_999_999."""
        return self.nanos % SECOND

    def in_zone(self, zone: tzinfo) -> "Instant":
        """Same instant, displayed in another timezone."""
        return replace(self, zone=zone)

    def shift_eras(self, eras: int) -> "Instant":
        """Move the instant by whole 400-year eras."""
        return replace(self, nanos=self.nanos + eras * ERA)

    @classmethod
    def from_datetime(cls, dt: datetime, nanosecond: int | None = None) -> "Instant":
        """Build an instant from an aware datetime.

        Args:
            dt: Timezone-aware datetime; its tzinfo becomes the instant's zone
            nanosecond: Sub-second fraction overriding dt.microsecond, for
                inputs more precise than datetime can hold

        Raises:
            TypeError: If dt is naive
        """
        if dt.tzinfo is None:
            raise TypeError(
                f"Instant requires a timezone-aware datetime.\n"
                f"Got naive datetime: {dt!r}\n"
                f"Hint: Add timezone info:\n"
                f"  dt = datetime(..., tzinfo=timezone.utc)"
            )
        if nanosecond is None:
            nanosecond = dt.microsecond * MICROSECOND
        whole = (dt.replace(microsecond=0) - EPOCH) // timedelta(seconds=1)
        return cls(nanos=whole * SECOND + nanosecond, zone=dt.tzinfo)

    @classmethod
    def now(cls, zone: tzinfo) -> "Instant":
        return cls(nanos=time.time_ns(), zone=zone)


# Supported range in epoch nanoseconds: January 1 of year 0 (UTC), where
# dates without a year fall, through the last instant datetime can hold
_YEAR_ONE = Instant.from_datetime(datetime.min.replace(tzinfo=timezone.utc)).nanos
MIN_NANOS = _YEAR_ONE - 366 * DAY
MAX_NANOS = Instant.from_datetime(datetime.max.replace(tzinfo=timezone.utc)).nanos
