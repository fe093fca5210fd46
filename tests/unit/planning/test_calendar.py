from datetime import date, timedelta

from sprintpilot.planning.calendar import (
    add_working_days,
    code_freeze_date,
    count_working_days,
    is_working_day,
    next_working_day,
    previous_working_day,
    sprint_end_date,
    working_days_between,
)

MONDAY = date(2024, 7, 1)


def _weekday_count(start: date, end: date) -> int:
    days = (end - start).days + 1
    return sum(1 for i in range(days) if (start + timedelta(days=i)).weekday() < 5)


class TestCountWorkingDays:
    def test_matches_weekday_count_without_holidays(self):
        ranges = [
            (MONDAY, date(2024, 7, 12)),
            (date(2024, 6, 29), date(2024, 7, 31)),
            (date(2024, 2, 26), date(2024, 3, 4)),
            (MONDAY, MONDAY),
        ]
        for start, end in ranges:
            assert count_working_days(start, end) == _weekday_count(start, end)

    def test_two_week_sprint(self):
        assert count_working_days(MONDAY, date(2024, 7, 12)) == 10

    def test_zero_when_end_before_start(self):
        assert count_working_days(date(2024, 7, 12), MONDAY) == 0

    def test_weekend_only_range(self):
        assert count_working_days(date(2024, 7, 6), date(2024, 7, 7)) == 0

    def test_holidays_excluded(self):
        holidays = {date(2024, 7, 4), date(2024, 7, 6)}  # Thursday and a Saturday
        assert count_working_days(MONDAY, date(2024, 7, 12), holidays) == 9

    def test_accepts_any_iterable(self):
        assert count_working_days(MONDAY, date(2024, 7, 5), [date(2024, 7, 2)]) == 4

    def test_lists_working_days(self):
        days = working_days_between(date(2024, 7, 5), date(2024, 7, 9))
        assert days == [date(2024, 7, 5), date(2024, 7, 8), date(2024, 7, 9)]


class TestAddWorkingDays:
    def test_zero_days_returns_anchor(self):
        assert add_working_days(MONDAY, 0) == MONDAY

    def test_nine_days_reaches_tenth_working_day(self):
        assert add_working_days(MONDAY, 9) == date(2024, 7, 12)

    def test_weekend_start_anchors_on_monday(self):
        saturday = date(2024, 6, 29)
        assert add_working_days(saturday, 0) == MONDAY
        assert add_working_days(saturday, 1) == date(2024, 7, 2)

    def test_holiday_start_moves_anchor(self):
        assert add_working_days(MONDAY, 0, {MONDAY}) == date(2024, 7, 2)

    def test_skips_holidays_and_weekends(self):
        holidays = {date(2024, 7, 4)}
        # Tue, Wed, Fri, Mon
        assert add_working_days(MONDAY, 4, holidays) == date(2024, 7, 8)

    def test_negative_days_returns_anchor(self):
        assert add_working_days(MONDAY, -3) == MONDAY


class TestSprintDates:
    def test_end_date_is_nth_working_day(self):
        for duration in range(1, 25):
            end = sprint_end_date(MONDAY, duration)
            assert count_working_days(MONDAY, end) == duration
            assert is_working_day(end)

    def test_end_date_with_holiday(self):
        assert sprint_end_date(MONDAY, 10, {date(2024, 7, 4)}) == date(2024, 7, 15)

    def test_code_freeze_walks_back(self):
        assert code_freeze_date(date(2024, 7, 12), 2) == date(2024, 7, 10)
        assert code_freeze_date(date(2024, 7, 15), 1) == date(2024, 7, 12)

    def test_code_freeze_skips_holidays(self):
        assert code_freeze_date(date(2024, 7, 12), 2, {date(2024, 7, 11)}) == date(2024, 7, 9)

    def test_neighbouring_working_days(self):
        assert next_working_day(date(2024, 7, 5)) == date(2024, 7, 8)
        assert previous_working_day(date(2024, 7, 8)) == date(2024, 7, 5)
        assert next_working_day(date(2024, 7, 3), {date(2024, 7, 4)}) == date(2024, 7, 5)
