"""Exceptions raised while converting timestamps and formatted times.

Every failure a caller can hit derives from `EpochError`, so the command
line wrapper can report them uniformly while library users can still catch
the specific kind they care about.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from epoch.layouts import Layout


class EpochError(ValueError):
    """Base class for all conversion errors."""


class UnitMismatch(EpochError):
    """The unit suffix of the input disagrees with the explicit unit flag."""

    def __init__(self, flag: str, suffix: str):
        self.flag: str = flag
        self.suffix: str = suffix
        super().__init__(
            f"mismatch between unit flag ({flag}) and input unit ({suffix})\n"
            f"Hint: omit the unit flag or drop the '{suffix}' suffix from the input"
        )


class UnknownUnit(EpochError):
    """A unit name or value outside seconds/milli/micro/nanoseconds."""

    def __init__(self, unit: object):
        self.unit: object = unit
        super().__init__(
            f"unknown unit {unit!r}\n"
            f"Valid units: s (sec), ms (milli), us (micro), ns (nano)"
        )


class ParseFormattedError(EpochError):
    """No known layout matched the input."""

    def __init__(self, input: str):
        self.input: str = input
        super().__init__(f"failed to convert string to time: {input!r}")


class UnknownOperator(EpochError):
    """A calculation token did not start with '+' or '-'."""

    def __init__(self, token: str):
        self.token: str = token
        super().__init__(f"unknown operator: {token!r}")


class InvalidCalculation(EpochError):
    """A calculation token has a missing amount or an unknown unit."""

    def __init__(self, token: str, reason: str):
        self.token: str = token
        super().__init__(
            f"invalid calculation {token!r}: {reason}\n"
            f"Example: --calc '+30m -5h +3D -2Y' "
            f"(units: ns, us, ms, s, m, h, D, W, M, Y)"
        )


class ConflictingFlags(EpochError):
    """The unit flag was combined with timezone/format on a formatted input."""

    def __init__(self) -> None:
        super().__init__(
            "can't use unit flag together with timezone or format flag "
            "on a formatted string (omit -unit flag)"
        )


class TimezoneLoadError(EpochError):
    """The requested timezone is not in the timezone database."""

    def __init__(self, name: str, reason: object = None):
        self.name: str = name
        message = f"failed loading timezone {name!r}"
        if reason:
            message += f": {reason}"
        super().__init__(
            f"{message}\n"
            f"Hint: use 'Local', 'UTC' or an IANA name such as 'America/New_York'"
        )


class InputArityError(EpochError):
    """More than one positional input was given."""

    def __init__(self, count: int):
        self.count: int = count
        super().__init__(f"takes at most one input, got {count}")


class UnknownFormat(EpochError):
    """An output format name is not recognized.

    This is the one recoverable error: it carries the layout to fall back to.
    """

    def __init__(self, name: str, fallback: "Layout"):
        self.name: str = name
        self.fallback: "Layout" = fallback
        super().__init__(f"failed to parse format {name!r}")


class OutOfRange(EpochError):
    """A timestamp falls outside the supported years 0 through 9999."""

    def __init__(self, timestamp: int, unit: object):
        self.timestamp: int = timestamp
        super().__init__(
            f"timestamp {timestamp} ({unit}) is outside the supported range "
            f"of years 0 through 9999"
        )
