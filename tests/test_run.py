"""End-to-end conversions through `run`."""

import logging
import time

import pytest

from epoch import Options, run
from epoch.errors import (
    ConflictingFlags,
    InvalidCalculation,
    OutOfRange,
    ParseFormattedError,
    TimezoneLoadError,
    UnitMismatch,
    UnknownOperator,
)

NOW = "2020-07-18 17:46:45.215239 +0200 CEST"


@pytest.mark.parametrize(
    "input, options, expected",
    [
        # Timestamps become dates
        ("1595087205", Options(tz="UTC"), "2020-07-18 15:46:45 +0000 UTC"),
        (
            "1595087205",
            Options(tz="Europe/Berlin"),
            "2020-07-18 17:46:45 +0200 CEST",
        ),
        (
            "1595087205us",
            Options(tz="Europe/Berlin"),
            "1970-01-01 01:26:35.087205 +0100 CET",
        ),
        (
            "1595087205",
            Options(tz="Europe/Berlin", unit="ms"),
            "1970-01-19 12:04:47.205 +0100 CET",
        ),
        (
            "1595087205",
            Options(tz="UTC", format="unix"),
            "Sat Jul 18 15:46:45 UTC 2020",
        ),
        (
            "1595087205",
            Options(tz="UTC", format="ruby"),
            "Sat Jul 18 15:46:45 +0000 2020",
        ),
        (
            "1595087205",
            Options(tz="UTC", format="{YYYY}/{MM}/{DD}"),
            "2020/07/18",
        ),
        # Dates become timestamps
        (NOW, Options(), "1595087205"),
        (NOW, Options(unit="ms"), "1595087205215"),
        (NOW, Options(unit="us"), "1595087205215239"),
        (NOW, Options(unit="ns"), "1595087205215239000"),
        ("", Options(), "1595087205"),
        # Dates to dates
        (NOW, Options(tz="MST"), "2020-07-18 08:46:45.215239 -0700 MST"),
        (NOW, Options(tz="UTC", format="unix"), "Sat Jul 18 15:46:45 UTC 2020"),
        (
            "Mon, 02 Jan 2006 15:04:05 UTC",
            Options(tz="Europe/Berlin"),
            "Mon, 02 Jan 2006 16:04:05 CET",
        ),
        ("", Options(tz="UTC"), "2020-07-18 15:46:45.215239 +0000 UTC"),
    ],
)
def test_run(input, options, expected):
    """Test conversions in every direction."""
    assert run(input, options, now=NOW) == expected


@pytest.mark.parametrize(
    "input, options, expected",
    [
        ("", Options(calc="+1h"), "1595090805"),
        ("", Options(tz="UTC", calc="+1h"), "2020-07-18 16:46:45.215239 +0000 UTC"),
        (NOW, Options(tz="MST", calc="+1h"), "2020-07-18 09:46:45.215239 -0700 MST"),
        (NOW, Options(tz="MST", calc="-1h"), "2020-07-18 07:46:45.215239 -0700 MST"),
        (
            NOW,
            Options(tz="UTC", format="unix", calc="+1h"),
            "Sat Jul 18 16:46:45 UTC 2020",
        ),
        (NOW, Options(unit="ms", calc="+1h"), "1595090805215"),
        ("1595087205us", Options(calc="+1h"), "5195087205"),
        ("1595087205", Options(unit="ms", calc="+1h"), "1598687205"),
        ("1595087205215", Options(calc="+1s"), "1595087206215"),
        (
            NOW,
            Options(tz="MST", calc="-30m +1h -5D +3W -6M +2Y"),
            "2022-02-03 09:16:45.215239 -0700 MST",
        ),
    ],
)
def test_run_with_calculations(input, options, expected):
    """Test that calculations apply before the final conversion."""
    assert run(input, options, now=NOW) == expected


def test_run_unit_with_timezone_on_formatted_input():
    """Test that a unit makes no sense when the output is a date."""
    with pytest.raises(ConflictingFlags, match="can't use unit flag"):
        run(NOW, Options(tz="MST", unit="ms"), now=NOW)

    with pytest.raises(ConflictingFlags):
        run(NOW, Options(format="unix", unit="s"), now=NOW)


def test_run_unit_mismatch():
    """Test that a suffix contradicting the unit flag is an error."""
    with pytest.raises(UnitMismatch):
        run("1595087205us", Options(unit="ms", tz="UTC"), now=NOW)


def test_run_unparseable_input():
    """Test that unknown text is reported as such."""
    with pytest.raises(ParseFormattedError, match="'yesterday'"):
        run("yesterday", Options(), now=NOW)


def test_run_unknown_timezone():
    """Test that a zone missing from the database is reported."""
    with pytest.raises(TimezoneLoadError, match="'Mars/Olympus'"):
        run("1595087205", Options(tz="Mars/Olympus"), now=NOW)


def test_run_out_of_range_timestamp():
    """Test that timestamps past year 9999 are reported."""
    with pytest.raises(OutOfRange):
        run("9000000000000000", Options(unit="s", tz="UTC"), now=NOW)


@pytest.mark.parametrize(
    "input, options, expected",
    [
        ("1:00AM", Options(tz="America/Los_Angeles"), "5:07PM"),
        (
            "Jan  1 03:00:00",
            Options(tz="America/Denver", format="rfc3339"),
            "-0001-12-31T20:00:04-06:59",
        ),
        (
            "-62135596800",
            Options(unit="s", tz="America/New_York"),
            "0000-12-31 19:03:58 -0456 LMT",
        ),
    ],
)
def test_run_earliest_dates_west_of_utc(input, options, expected):
    """Test that dates around year 0 still render in zones behind UTC."""
    assert run(input, options, now=NOW) == expected


def test_run_yearless_input_to_timestamp():
    """Test that a time of day alone is converted in year 0."""
    assert run("3:04PM", Options(quiet=True), now=NOW) == "-62167164960"


def test_run_checks_calculation_first():
    """Test that a bad calculation is reported before the input is read."""
    with pytest.raises(UnknownOperator):
        run("yesterday", Options(calc="*1h"), now=NOW)

    with pytest.raises(InvalidCalculation):
        run("1595087205", Options(calc="+1fortnight"), now=NOW)


def test_run_unknown_format_falls_back(caplog):
    """Test that an unknown format name only warns."""
    with caplog.at_level(logging.WARNING, logger="epoch"):
        result = run("1595087205", Options(tz="UTC", format="iso"), now=NOW)

    assert result == "2020-07-18 15:46:45 +0000 UTC"
    assert "failed to parse format 'iso'" in caplog.text


def test_run_reports_guessed_unit(caplog):
    """Test that guessing the unit is logged unless quiet."""
    with caplog.at_level(logging.INFO, logger="epoch"):
        run("1595087205215", Options(tz="UTC"), now=NOW)
    assert "guessed unit: milliseconds" in caplog.text

    caplog.clear()
    with caplog.at_level(logging.INFO, logger="epoch"):
        run("1595087205215", Options(tz="UTC", quiet=True), now=NOW)
    assert caplog.text == ""


def test_run_reports_default_unit(caplog):
    """Test that falling back to seconds is logged unless quiet."""
    with caplog.at_level(logging.INFO, logger="epoch"):
        run(NOW, Options(), now=NOW)
    assert "using seconds as unit" in caplog.text

    caplog.clear()
    with caplog.at_level(logging.INFO, logger="epoch"):
        run(NOW, Options(unit="s"), now=NOW)
    assert "using seconds as unit" not in caplog.text


def test_run_guesses_against_the_reference():
    """Test that the unit guess follows the digits of "now"."""
    # One second after the epoch, a 10-digit number is nanoseconds
    reference = "1970-01-01 00:00:01 +0000 UTC"

    result = run("1595087205", Options(tz="UTC", quiet=True), now=reference)

    assert result == "1970-01-01 00:00:01.595087205 +0000 UTC"


def test_run_now_defaults_to_the_clock():
    """Test that empty input without a reference is the current time."""
    result = run("", Options(quiet=True))

    assert abs(int(result) - int(time.time())) <= 5


def test_run_default_options():
    """Test that options are optional."""
    assert run(NOW, now=NOW) == "1595087205"
