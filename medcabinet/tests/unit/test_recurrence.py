# medcabinet/tests/unit/test_recurrence.py
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from medcabinet.core.medicines import Medicine
from medcabinet.core.recurrence import (
    Daily,
    DailyTrigger,
    OneShotTrigger,
    OneTime,
    Unscheduled,
    Weekly,
    WeeklyTrigger,
    compute_schedule,
    rule_for_medicine,
)
from medcabinet.core.timeofday import TimeOfDay

UTC = ZoneInfo("UTC")
NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)
NINE = TimeOfDay(9, 0)


def test_one_time_in_future_fires_on_that_date():
    trig = compute_schedule(OneTime(date(2026, 11, 2)), NINE, NOW)
    assert trig == [OneShotTrigger(datetime(2026, 11, 2, 9, 0, tzinfo=UTC))]


def test_one_time_in_past_still_fires_once_after_now():
    trig = compute_schedule(OneTime(NOW.date() - timedelta(days=1)), NINE, NOW)
    assert len(trig) == 1
    assert trig[0].at > NOW
    assert trig[0].at == datetime(2026, 10, 19, 9, 0, tzinfo=UTC)


def test_one_time_today_later_fires_today():
    trig = compute_schedule(OneTime(NOW.date()), TimeOfDay(18, 0), NOW)
    assert trig == [OneShotTrigger(datetime(2026, 10, 18, 18, 0, tzinfo=UTC))]


def test_one_time_on_fall_back_day_is_not_scheduled_in_the_past():
    ny = ZoneInfo("America/New_York")
    now = datetime(2026, 11, 1, 1, 30, fold=1, tzinfo=ny)
    trig = compute_schedule(OneTime(date(2026, 11, 1)), TimeOfDay(1, 45), now)
    assert len(trig) == 1
    assert trig[0].at.timestamp() > now.timestamp()


def test_weekly_one_descriptor_per_weekday_sorted():
    trig = compute_schedule(Weekly(frozenset({4, 2})), NINE, NOW)
    assert trig == [WeeklyTrigger(2, NINE), WeeklyTrigger(4, NINE)]
    assert [t.day_of_week for t in trig] == ["mon", "wed"]


def test_weekday_numbering_sunday_first():
    assert WeeklyTrigger(1, NINE).day_of_week == "sun"
    assert WeeklyTrigger(7, NINE).day_of_week == "sat"


def test_weekly_rejects_out_of_range():
    with pytest.raises(ValueError):
        Weekly(frozenset({0, 3}))


def test_daily_and_unscheduled():
    assert compute_schedule(Daily(), NINE, NOW) == [DailyTrigger(NINE)]
    assert compute_schedule(Unscheduled(), NINE, NOW) == []


def _med(**kw):
    base = dict(id="m1", name="Aspirin", time_to_take="9:00am")
    base.update(kw)
    return Medicine(**base)


def test_rule_precedence():
    today = NOW.date()
    assert rule_for_medicine(_med(time_to_take=""), today) == Unscheduled()
    assert rule_for_medicine(_med(time_to_take="   "), today) == Unscheduled()
    assert rule_for_medicine(
        _med(date="2026-11-02", days_of_week=(2,), frequency="Daily"), today
    ) == OneTime(date(2026, 11, 2))
    assert rule_for_medicine(_med(days_of_week=(2, 6), frequency="Daily"), today) == Weekly(
        frozenset({2, 6})
    )
    assert rule_for_medicine(_med(frequency="Twice daily"), today) == Daily()
    assert rule_for_medicine(_med(), today) == Daily()
    assert rule_for_medicine(_med(frequency="As needed"), today) == OneTime(today)


def test_bad_date_falls_through_to_next_rule():
    assert rule_for_medicine(_med(date="next tuesday"), NOW.date()) == Daily()


def test_invalid_weekdays_are_ignored():
    assert rule_for_medicine(_med(days_of_week=(0, 9)), NOW.date()) == Daily()
    assert rule_for_medicine(_med(days_of_week=(0, 3)), NOW.date()) == Weekly(frozenset({3}))
