# medcabinet/tests/unit/test_timeofday.py
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from medcabinet.core.timeofday import (
    TimeOfDay,
    TimeParseError,
    format_time_of_day,
    next_occurrence,
    parse_time_of_day,
)

UTC = ZoneInfo("UTC")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("11:18pm", (23, 18)),
        ("11:18 pm", (23, 18)),
        ("12:00am", (0, 0)),
        ("12:30pm", (12, 30)),
        ("9:00 AM", (9, 0)),
        ("  7:05Am ", (7, 5)),
        ("14:00", (14, 0)),
        ("00:45", (0, 45)),
        ("11pm", (23, 0)),
        ("7 am", (7, 0)),
        ("12am", (0, 0)),
        ("12pm", (12, 0)),
    ],
)
def test_parse_known_formats(text, expected):
    t = parse_time_of_day(text)
    assert (t.hour, t.minute) == expected


@pytest.mark.parametrize("text", ["gibberish", "", None, "9", "9:5", "25:00", "9:75pm", "noon"])
def test_parse_falls_back_to_nine(text):
    assert parse_time_of_day(text) == TimeOfDay(9, 0)


def test_parse_custom_default():
    assert parse_time_of_day("later", default=TimeOfDay(20, 0)) == TimeOfDay(20, 0)


@pytest.mark.parametrize("text", ["gibberish", "25:00", ""])
def test_strict_parse_raises(text):
    with pytest.raises(TimeParseError):
        parse_time_of_day(text, strict=True)


def test_strict_parse_accepts_valid_text():
    assert parse_time_of_day("8:30 pm", strict=True) == TimeOfDay(20, 30)


def test_round_trip_every_minute():
    for h in range(24):
        for m in range(60):
            t = TimeOfDay(h, m)
            assert parse_time_of_day(format_time_of_day(t)) == t


def test_format_examples():
    assert format_time_of_day(TimeOfDay(0, 5)) == "12:05am"
    assert format_time_of_day(TimeOfDay(12, 0)) == "12:00pm"
    assert format_time_of_day(TimeOfDay(23, 18)) == "11:18pm"


def test_time_of_day_rejects_out_of_range():
    with pytest.raises(ValueError):
        TimeOfDay(24, 0)
    with pytest.raises(ValueError):
        TimeOfDay(3, 60)


def test_next_occurrence_rolls_to_tomorrow_when_passed():
    now = datetime(2026, 10, 18, 10, 0, tzinfo=UTC)
    assert next_occurrence(TimeOfDay(9, 0), now) == datetime(2026, 10, 19, 9, 0, tzinfo=UTC)


def test_next_occurrence_today_when_ahead():
    now = datetime(2026, 10, 18, 8, 0, tzinfo=UTC)
    assert next_occurrence(TimeOfDay(9, 0), now) == datetime(2026, 10, 18, 9, 0, tzinfo=UTC)


def test_next_occurrence_exact_match_is_tomorrow():
    now = datetime(2026, 10, 18, 9, 0, tzinfo=UTC)
    assert next_occurrence(TimeOfDay(9, 0), now) == datetime(2026, 10, 19, 9, 0, tzinfo=UTC)


def test_next_occurrence_crosses_month_and_year():
    now = datetime(2026, 12, 31, 23, 30, tzinfo=UTC)
    assert next_occurrence(TimeOfDay(6, 15), now) == datetime(2027, 1, 1, 6, 15, tzinfo=UTC)


NY = ZoneInfo("America/New_York")


def test_next_occurrence_after_fall_back_is_never_in_the_past():
    # 2026-11-01 01:30 EST, second pass through the repeated hour
    now = datetime(2026, 11, 1, 1, 30, fold=1, tzinfo=NY)
    nxt = next_occurrence(TimeOfDay(1, 45), now)
    assert nxt.timestamp() > now.timestamp()
    assert nxt.timestamp() - now.timestamp() == 15 * 60


def test_next_occurrence_after_fall_back_rolls_when_repeat_has_passed():
    now = datetime(2026, 11, 1, 1, 30, fold=1, tzinfo=NY)
    nxt = next_occurrence(TimeOfDay(1, 15), now)
    assert nxt.timestamp() > now.timestamp()
    assert (nxt.year, nxt.month, nxt.day, nxt.hour, nxt.minute) == (2026, 11, 2, 1, 15)


def test_next_occurrence_first_pass_of_repeated_hour():
    # 01:30 EDT; 01:45 EDT is still ahead
    now = datetime(2026, 11, 1, 1, 30, fold=0, tzinfo=NY)
    nxt = next_occurrence(TimeOfDay(1, 45), now)
    assert nxt.timestamp() - now.timestamp() == 15 * 60
