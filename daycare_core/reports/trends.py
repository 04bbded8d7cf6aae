# =============================================================================
# daycare_core/reports/trends.py
# Feeding, sleep and attendance analytics
# =============================================================================
"""
Trend calculations over daily logs, built on pandas.

- weekly_trends: milk ounces and nap minutes per day for one child over the
  last 7 days, with averages over the days that have a log
- monthly_attendance: days present per child for a YYYY-MM month
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

import pandas as pd

from daycare_core.offline.models import DailyLog
from daycare_core.utils.dates import date_range, minutes_between


_OUNCES = re.compile(r"(\d+(?:\.\d+)?)")


def parse_ounces(amount: Optional[str]) -> float:
    """First number in a bottle amount such as "6oz" or "4.5 oz"; 0 if none."""
    if not amount:
        return 0.0
    match = _OUNCES.search(str(amount))
    return float(match.group(1)) if match else 0.0


def total_milk_oz(log: DailyLog) -> float:
    return sum(parse_ounces(b.get("amount")) for b in log.bottles)


def total_nap_minutes(log: DailyLog) -> int:
    total = 0
    for nap in log.naps:
        minutes = minutes_between(nap.get("start_time", ""), nap.get("end_time", ""))
        if minutes:
            total += minutes
    return total


@dataclass
class WeeklyTrends:
    """Per-day series plus averages over the days with data."""
    child_id: str
    frame: pd.DataFrame          # columns: date, milk_oz, nap_minutes, has_data
    avg_milk_oz: float
    avg_nap_minutes: float
    days_with_data: int

    @property
    def has_data(self) -> bool:
        return self.days_with_data > 0

    def summary_lines(self) -> List[str]:
        """Plain-text lines for the daily report."""
        hours, minutes = divmod(int(round(self.avg_nap_minutes)), 60)
        return [
            f"7-day average milk: {self.avg_milk_oz:.1f} oz/day",
            f"7-day average nap: {hours}h {minutes:02d}m/day",
        ]


def weekly_trends(
    logs: Iterable[DailyLog],
    child_id: str,
    end_date: str,
    days: int = 7,
) -> WeeklyTrends:
    """Milk and nap totals for ``child_id`` over the ``days`` ending at ``end_date``."""
    by_date = {log.date: log for log in logs if log.child_id == child_id}

    rows = []
    for date in date_range(end_date, days):
        log = by_date.get(date)
        rows.append({
            "date": date,
            "milk_oz": total_milk_oz(log) if log else 0.0,
            "nap_minutes": total_nap_minutes(log) if log else 0,
            "has_data": log is not None,
        })
    frame = pd.DataFrame(rows, columns=["date", "milk_oz", "nap_minutes", "has_data"])

    with_data = frame[frame["has_data"]]
    days_with_data = len(with_data)
    if days_with_data:
        avg_milk = float(with_data["milk_oz"].mean())
        avg_nap = float(with_data["nap_minutes"].mean())
    else:
        avg_milk = avg_nap = 0.0

    return WeeklyTrends(
        child_id=child_id,
        frame=frame,
        avg_milk_oz=avg_milk,
        avg_nap_minutes=avg_nap,
        days_with_data=days_with_data,
    )


def monthly_attendance(logs: Iterable[DailyLog], month: str) -> pd.Series:
    """
    Days present per child in ``month`` (YYYY-MM).

    Returns:
        Series indexed by child_id; children with no presence are absent
    """
    frame = pd.DataFrame(
        [
            {"child_id": log.child_id, "date": log.date, "is_present": bool(log.is_present)}
            for log in logs
        ],
        columns=["child_id", "date", "is_present"],
    )
    if frame.empty:
        return pd.Series(dtype="int64", name="days_present")

    in_month = frame[frame["date"].str.startswith(month) & frame["is_present"]]
    counts = in_month.drop_duplicates(["child_id", "date"]).groupby("child_id").size()
    return counts.rename("days_present").astype("int64")


def attendance_calendar(logs: Iterable[DailyLog], child_id: str, month: str) -> pd.DataFrame:
    """One row per logged day of the month for a child: date, present, arrival, departure."""
    rows = [
        {
            "date": log.date,
            "present": bool(log.is_present),
            "arrival": log.arrival_time if log.is_present else "",
            "departure": log.departure_time if log.status != "In Progress" else "",
            "status": log.status,
        }
        for log in logs
        if log.child_id == child_id and log.date.startswith(month)
    ]
    frame = pd.DataFrame(rows, columns=["date", "present", "arrival", "departure", "status"])
    return frame.sort_values("date").reset_index(drop=True)
