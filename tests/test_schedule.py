"""Tests for the cron-style schedule."""

from datetime import datetime

import pytest

from newsparser.schedule import CronSchedule


def test_default_fires_on_twenty_minute_grid():
    schedule = CronSchedule()

    assert schedule.next_after(datetime(2024, 8, 1, 10, 7, 42)) == datetime(2024, 8, 1, 10, 20)
    assert schedule.next_after(datetime(2024, 8, 1, 10, 20)) == datetime(2024, 8, 1, 10, 40)
    assert schedule.next_after(datetime(2024, 8, 1, 23, 41)) == datetime(2024, 8, 2, 0, 0)


def test_quartz_style_start_step_matches_star_step():
    assert CronSchedule("0/20 * * * *").next_after(datetime(2024, 8, 1, 10, 1)) == datetime(
        2024, 8, 1, 10, 20
    )


def test_lists_ranges_and_hours():
    schedule = CronSchedule("5,35 9-17/4 * * *")

    assert schedule.next_after(datetime(2024, 8, 1, 8, 0)) == datetime(2024, 8, 1, 9, 5)
    assert schedule.next_after(datetime(2024, 8, 1, 9, 35)) == datetime(2024, 8, 1, 13, 5)
    assert schedule.next_after(datetime(2024, 8, 1, 17, 40)) == datetime(2024, 8, 2, 9, 5)


def test_weekday_zero_and_seven_mean_sunday():
    # 2024-08-04 is a Sunday.
    expected = datetime(2024, 8, 4, 0, 0)
    assert CronSchedule("0 0 * * 0").next_after(datetime(2024, 8, 1)) == expected
    assert CronSchedule("0 0 * * 7").next_after(datetime(2024, 8, 1)) == expected


def test_day_and_weekday_restrictions_combine_with_or():
    schedule = CronSchedule("0 12 15 * 1")

    # Monday 2024-08-05 comes before the 15th.
    assert schedule.next_after(datetime(2024, 8, 1)) == datetime(2024, 8, 5, 12, 0)


def test_month_rollover_across_year():
    assert CronSchedule("0 0 1 1 *").next_after(datetime(2024, 8, 1)) == datetime(2025, 1, 1)


def test_matches():
    schedule = CronSchedule()

    assert schedule.matches(datetime(2024, 8, 1, 10, 40))
    assert not schedule.matches(datetime(2024, 8, 1, 10, 41))


@pytest.mark.parametrize(
    "expression",
    ["*/20 * * *", "60 * * * *", "*/0 * * * *", "a * * * *", "5-1 * * * *", "1,,2 * * * *"],
)
def test_invalid_expressions_raise(expression):
    with pytest.raises(ValueError):
        CronSchedule(expression)


def test_expression_that_never_fires():
    with pytest.raises(ValueError):
        CronSchedule("0 0 31 2 *").next_after(datetime(2024, 1, 1))
