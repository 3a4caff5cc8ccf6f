from datetime import date, timedelta

import pytest

from logbot.models import LogEntry
from logbot.streak import build_report, compute_streak, select_window

TODAY = date(2024, 3, 10)


def days_ago(n: int) -> date:
    return TODAY - timedelta(days=n)


def entries(*offsets: int) -> list:
    return [LogEntry("42", days_ago(n), f"log {n}") for n in offsets]


def test_empty_history_has_no_streak():
    assert compute_streak([], TODAY) == 0


def test_only_today():
    assert compute_streak([TODAY], TODAY) == 1


def test_three_consecutive_days():
    assert compute_streak([days_ago(2), days_ago(1), TODAY], TODAY) == 3


def test_gap_ends_the_run():
    assert compute_streak([days_ago(3), days_ago(1), TODAY], TODAY) == 2


def test_no_log_today_means_zero():
    assert compute_streak([days_ago(3), days_ago(2), days_ago(1)], TODAY) == 0


def test_older_matches_after_a_gap_are_not_counted():
    dates = [days_ago(4), days_ago(3), days_ago(2), TODAY]
    assert compute_streak(dates, TODAY) == 1


def test_duplicate_dates_do_not_crash():
    assert compute_streak([days_ago(1), TODAY, TODAY], TODAY) == 1


def test_streak_across_month_boundary():
    dates = [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]
    assert compute_streak(dates, date(2024, 3, 1)) == 3


@pytest.mark.parametrize("limit", [0, 3, 10])
def test_window_returns_everything(limit):
    history = entries(2, 1, 0)
    assert select_window(history, limit) == history


def test_window_keeps_most_recent_in_order():
    history = entries(4, 3, 2, 1, 0)
    assert select_window(history, 2) == history[-2:]
    assert [e.log_date for e in select_window(history, 2)] == [days_ago(1), TODAY]


def test_window_rejects_negative_limit():
    with pytest.raises(ValueError):
        select_window(entries(0), -1)


def test_window_does_not_change_streak():
    history = entries(3, 2, 1, 0)
    report = build_report(history, 1, TODAY)
    assert report.shown == 1
    assert report.total == 4
    assert report.streak == 4
    assert report.first_day_number == 4


def test_skipped_day_scenario():
    # logs on day 1, 2, 3, nothing on day 4, log on day 5
    history = entries(4, 3, 2, 0)
    report = build_report(history, 0, TODAY)
    assert report.total == 4
    assert report.streak == 1
    assert report.first_day_number == 1
