from .calc import CalcStep, Operator, apply_all, calculate, parse_calc, to_operator
from .config import Options
from .errors import (
    ConflictingFlags,
    EpochError,
    InputArityError,
    InvalidCalculation,
    OutOfRange,
    ParseFormattedError,
    TimezoneLoadError,
    UnitMismatch,
    UnknownFormat,
    UnknownOperator,
    UnknownUnit,
)
from .formatting import format_name, format_simple, formatted_string, render
from .instant import Instant
from .layouts import CASCADE, Layout, parse_formatted
from .run import run
from .units import (
    TimeUnit,
    guess_unit,
    parse_timestamp,
    parse_unit,
    strip_unit_suffix,
    to_timestamp,
)
from .zones import location

__all__ = [
    "Instant",
    "TimeUnit",
    "Layout",
    "CASCADE",
    "Operator",
    "CalcStep",
    "Options",
    "run",
    "parse_unit",
    "strip_unit_suffix",
    "to_timestamp",
    "parse_timestamp",
    "guess_unit",
    "parse_formatted",
    "format_name",
    "format_simple",
    "formatted_string",
    "render",
    "to_operator",
    "parse_calc",
    "calculate",
    "apply_all",
    "location",
    "EpochError",
    "UnitMismatch",
    "UnknownUnit",
    "ParseFormattedError",
    "UnknownOperator",
    "InvalidCalculation",
    "ConflictingFlags",
    "TimezoneLoadError",
    "InputArityError",
    "UnknownFormat",
    "OutOfRange",
]
