"""Tests for rendering named and custom formats."""

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest
from dateutil import tz

from epoch import Instant, format_name, format_simple, formatted_string, render
from epoch.errors import UnknownFormat
from epoch.formatting import FORMAT_NAMES
from epoch.layouts import DEFAULT, RFC3339, STAMP_MILLI


def at(*args, nanosecond=None, zone=timezone.utc) -> Instant:
    return Instant.from_datetime(datetime(*args, tzinfo=zone), nanosecond=nanosecond)


# Thursday 2022-09-08 07:06:05.000000004 UTC
SAMPLE = at(2022, 9, 8, 7, 6, 5, nanosecond=4)

# Saturday 2020-07-18 15:46:45.215239 UTC
JULY = at(2020, 7, 18, 15, 46, 45, 215239)


@pytest.mark.parametrize(
    "template, expected",
    [
        ("{YYYY}-{MM}-{DD}", "2022-09-08"),
        ("{M}/{D}/{YY}", "9/8/22"),
        ("{hh}:{mm}:{ss}", "07:06:05"),
        ("{s}-{m}", "5-6"),
        ("{dddd} {MMMM} {ddd} {MMM}", "Thursday September Thu Sep"),
        ("day {DDDD}", "day 251"),
        ("[{_D}]", "[ 8]"),
        ("{h}{a}", "7am"),
    ],
)
def test_format_simple(template, expected):
    """Test custom formats token by token."""
    assert render(SAMPLE, format_simple(template)) == expected


def test_format_simple_keeps_unknown_tokens():
    """Test that unknown tokens and bare text pass through."""
    assert render(SAMPLE, format_simple("{YYYY}{Q} at noon")) == "2022{Q} at noon"


def test_format_simple_longest_token_wins():
    """Test that {YYYY} is one token, not two {YY}."""
    assert render(SAMPLE, format_simple("{YYYY}")) == "2022"
    assert render(SAMPLE, format_simple("{YY}{YY}")) == "2222"


@pytest.mark.parametrize(
    "template, expected",
    [
        ("{ss}{F}", "05.0"),
        ("{ss}{FFF}", "05.000"),
        ("{ss}{fff}", "05"),
        ("{ss}{FFFFFFFFF}", "05.000000004"),
        ("{ss}{fffffffff}", "05.000000004"),
    ],
)
def test_fraction_tokens(template, expected):
    """Test fixed and trimmed fractions of a second."""
    assert render(SAMPLE, format_simple(template)) == expected


def test_trimmed_fraction_drops_trailing_zeros():
    """Test that {f...} trims to the significant digits."""
    assert render(JULY, format_simple("{fffffffff}")) == ".215239"
    assert render(JULY, format_simple("{ff}")) == ".21"
    assert render(JULY, format_simple("{FFFFFFFFF}")) == ".215239000"


def test_twelve_hour_clock():
    """Test 12-hour tokens around noon and midnight."""
    evening = at(2022, 9, 8, 19, 6)
    midnight = at(2022, 9, 8, 0, 30)
    noon = at(2022, 9, 8, 12, 0)

    assert render(evening, format_simple("{h}:{mm} {A} {a}")) == "7:06 PM pm"
    assert render(midnight, format_simple("{hh}:{mm} {A}")) == "12:30 AM"
    assert render(noon, format_simple("{h} {A}")) == "12 PM"


def test_offset_tokens():
    """Test offset and abbreviation tokens in a DST zone."""
    instant = SAMPLE.in_zone(ZoneInfo("America/New_York"))

    assert render(instant, format_simple("{ZZZ} {ZZ} {Z} {z}")) == (
        "-04:00 -0400 -04 EDT"
    )
    assert render(instant, format_simple("{XXX}")) == "-04:00"
    assert render(SAMPLE, format_simple("{XXX}")) == "Z"


def test_abbreviation_of_unnamed_zone():
    """Test that a zone without a name prints its offset."""
    instant = SAMPLE.in_zone(tz.tzoffset(None, 19800))

    assert render(instant, format_simple("{HH}:{mm} {z}")) == "12:36 +0530"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("", "2020-07-18 15:46:45.215239 +0000 UTC"),
        ("unix", "Sat Jul 18 15:46:45 UTC 2020"),
        ("ruby", "Sat Jul 18 15:46:45 +0000 2020"),
        ("ansic", "Sat Jul 18 15:46:45 2020"),
        ("rfc822", "18 Jul 20 15:46 UTC"),
        ("rfc822z", "18 Jul 20 15:46 +0000"),
        ("rfc850", "Saturday, 18-Jul-20 15:46:45 UTC"),
        ("rfc1123", "Sat, 18 Jul 2020 15:46:45 UTC"),
        ("rfc1123z", "Sat, 18 Jul 2020 15:46:45 +0000"),
        ("rfc3339", "2020-07-18T15:46:45Z"),
        ("rfc3339nano", "2020-07-18T15:46:45.215239Z"),
        ("kitchen", "3:46PM"),
        ("stamp", "Jul 18 15:46:45"),
        ("stampms", "Jul 18 15:46:45.215"),
        ("stampus", "Jul 18 15:46:45.215239"),
        ("stampns", "Jul 18 15:46:45.215239000"),
        ("http", "Sat, 18 Jul 2020 15:46:45 GMT"),
    ],
)
def test_named_formats(name, expected):
    """Test every named output format."""
    assert formatted_string(JULY, name) == expected


def test_ansic_pads_single_digit_days():
    """Test that ANSIC pads the day with a space."""
    instant = at(2020, 7, 5, 15, 46, 45)

    assert formatted_string(instant, "ansic") == "Sun Jul  5 15:46:45 2020"


def test_http_renders_in_utc():
    """Test that HTTP dates are always GMT whatever the zone."""
    instant = JULY.in_zone(ZoneInfo("Europe/Berlin"))

    assert formatted_string(instant, "http") == "Sat, 18 Jul 2020 15:46:45 GMT"
    assert formatted_string(instant, "rfc1123") == "Sat, 18 Jul 2020 17:46:45 CEST"


def test_format_name_is_case_insensitive():
    """Test names and aliases regardless of case."""
    assert format_name("RFC3339") is RFC3339
    assert format_name("StampMilli") is STAMP_MILLI
    assert format_name("stampms") is STAMP_MILLI
    assert format_name("") is DEFAULT


def test_format_name_rejects_unknown_names():
    """Test that UnknownFormat carries the default as fallback."""
    with pytest.raises(UnknownFormat, match="failed to parse format 'iso'") as e:
        format_name("iso")

    assert e.value.fallback is DEFAULT


def test_format_names_are_listed():
    """Test the names offered on the command line."""
    assert "rfc3339" in FORMAT_NAMES
    assert "" not in FORMAT_NAMES


def test_formatted_string_unknown_name_falls_back(caplog):
    """Test that an unknown name warns and renders the default layout."""
    with caplog.at_level(logging.WARNING, logger="epoch"):
        result = formatted_string(JULY, "iso")

    assert result == "2020-07-18 15:46:45.215239 +0000 UTC"
    assert "failed to parse format 'iso', using the default format" in caplog.text


def test_formatted_string_custom_default():
    """Test that "" renders with the given default layout."""
    assert formatted_string(JULY, "", default=RFC3339) == "2020-07-18T15:46:45Z"
    assert formatted_string(JULY, "{YYYY}", default=RFC3339) == "2020"


def test_years_around_zero():
    """Test that year 0 keeps four digits and its real weekday."""
    year_one = Instant(nanos=-62135596800 * 10**9)
    new_york = year_one.in_zone(ZoneInfo("America/New_York"))

    assert render(year_one, format_simple("{YYYY}-{MM}-{DD} {ddd}")) == "0001-01-01 Mon"
    assert render(new_york, format_simple("{YYYY}/{YY} {ddd}")) == "0000/00 Sun"

    kitchen = Instant(nanos=-62167164960 * 10**9, zone=ZoneInfo("Asia/Tokyo"))
    assert render(kitchen, RFC3339) == "0000-01-02T00:22:59+09:18"
