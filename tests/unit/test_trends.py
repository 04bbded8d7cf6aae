# =============================================================================
# tests/unit/test_trends.py
# Unit Tests for feeding, sleep and attendance analytics
# =============================================================================

import pytest
import pandas as pd

from daycare_core.offline.models import DailyLog
from daycare_core.reports.trends import (
    attendance_calendar,
    monthly_attendance,
    parse_ounces,
    total_nap_minutes,
    weekly_trends,
)


def log_for(child_id, date, present=True, bottles=(), naps=(), status="Completed"):
    return DailyLog(child_id=child_id, date=date, is_present=present, status=status,
                    bottles=list(bottles), naps=list(naps))


class TestParseOunces:

    @pytest.mark.parametrize("amount,expected", [
        ("6oz", 6.0),
        ("4.5 oz", 4.5),
        ("6.5oz", 6.5),
        ("about 3", 3.0),
        ("", 0.0),
        (None, 0.0),
        ("a little", 0.0),
    ])
    def test_amounts(self, amount, expected):
        assert parse_ounces(amount) == expected


class TestWeeklyTrends:

    def test_nap_minutes_ignore_open_or_inverted_naps(self):
        log = log_for("c1", "2024-06-01", naps=[
            {"start_time": "13:00", "end_time": "14:30"},
            {"start_time": "15:00", "end_time": ""},
            {"start_time": "16:00", "end_time": "15:00"},
        ])

        assert total_nap_minutes(log) == 90

    def test_averages_over_days_with_logs(self):
        logs = [
            log_for("c1", "2024-06-07", bottles=[{"amount": "6oz"}, {"amount": "4oz"}],
                    naps=[{"start_time": "13:00", "end_time": "14:00"}]),
            log_for("c1", "2024-06-05", bottles=[{"amount": "8oz"}]),
            log_for("c2", "2024-06-07", bottles=[{"amount": "20oz"}]),
            log_for("c1", "2024-05-20", bottles=[{"amount": "30oz"}]),
        ]

        trends = weekly_trends(logs, "c1", "2024-06-07")

        assert list(trends.frame["date"]) == [
            "2024-06-01", "2024-06-02", "2024-06-03", "2024-06-04",
            "2024-06-05", "2024-06-06", "2024-06-07",
        ]
        assert trends.days_with_data == 2
        assert trends.avg_milk_oz == pytest.approx(9.0)
        assert trends.avg_nap_minutes == pytest.approx(30.0)
        assert trends.frame.loc[6, "milk_oz"] == pytest.approx(10.0)

    def test_no_data(self):
        trends = weekly_trends([], "c1", "2024-06-07")

        assert trends.has_data is False
        assert trends.avg_milk_oz == 0.0
        assert len(trends.frame) == 7

    def test_summary_lines(self):
        logs = [log_for("c1", "2024-06-07", bottles=[{"amount": "6oz"}],
                        naps=[{"start_time": "12:00", "end_time": "13:35"}])]

        lines = weekly_trends(logs, "c1", "2024-06-07").summary_lines()

        assert lines == ["7-day average milk: 6.0 oz/day", "7-day average nap: 1h 35m/day"]


class TestAttendance:

    def test_monthly_counts_present_days_only(self):
        logs = [
            log_for("c1", "2024-06-01"),
            log_for("c1", "2024-06-02"),
            log_for("c1", "2024-06-03", present=False, status="In Progress"),
            log_for("c2", "2024-06-01"),
            log_for("c1", "2024-07-01"),
        ]

        counts = monthly_attendance(logs, "2024-06")

        assert counts.name == "days_present"
        assert counts.to_dict() == {"c1": 2, "c2": 1}

    def test_monthly_counts_empty(self):
        counts = monthly_attendance([], "2024-06")

        assert counts.empty
        assert counts.name == "days_present"

    def test_calendar_sorted_by_date(self):
        logs = [
            log_for("c1", "2024-06-03"),
            log_for("c1", "2024-06-01", present=False, status="In Progress"),
            log_for("c2", "2024-06-02"),
        ]

        calendar = attendance_calendar(logs, "c1", "2024-06")

        assert list(calendar["date"]) == ["2024-06-01", "2024-06-03"]
        assert list(calendar["present"]) == [False, True]
        assert calendar.loc[0, "arrival"] == ""

    def test_calendar_empty_month(self):
        calendar = attendance_calendar([], "c1", "2024-06")

        assert isinstance(calendar, pd.DataFrame)
        assert calendar.empty
