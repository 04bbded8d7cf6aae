# =============================================================================
# tests/unit/test_lifecycle.py
# Unit Tests for daily log state transitions
# =============================================================================

from datetime import datetime

import pytest

from daycare_core.errors import LifecycleError
from daycare_core.offline.models import DailyLog
from daycare_core.services import daily_log_lifecycle as lifecycle


def make_log(**fields):
    return DailyLog(child_id="c1", date="2024-06-01", **fields)


class TestCheckIn:

    def test_marks_present_with_arrival(self):
        changes = lifecycle.check_in(make_log(), "08:05")

        assert changes == {"is_present": True, "arrival_time": "08:05", "status": "In Progress"}

    def test_rejected_once_completed(self):
        with pytest.raises(LifecycleError) as exc:
            lifecycle.check_in(make_log(is_present=True, status="Completed"), "08:05")

        assert exc.value.details["status"] == "Completed"


class TestCheckOut:

    def test_completes_present_child(self):
        changes = lifecycle.check_out(make_log(is_present=True), "17:02")

        assert changes == {"departure_time": "17:02", "status": "Completed"}

    def test_absent_child_cannot_check_out(self):
        with pytest.raises(LifecycleError):
            lifecycle.check_out(make_log(is_present=False), "17:02")

    def test_already_sent_cannot_check_out(self):
        with pytest.raises(LifecycleError):
            lifecycle.check_out(make_log(is_present=True, status="Sent"), "17:02")


class TestUndoAndSend:

    def test_undo_reopens_completed(self):
        assert lifecycle.undo_check_out(make_log(status="Completed")) == {"status": "In Progress"}

    def test_undo_requires_completed(self):
        with pytest.raises(LifecycleError):
            lifecycle.undo_check_out(make_log())

    @pytest.mark.parametrize("status", ["In Progress", "Completed", "Sent"])
    def test_mark_sent_from_any_status(self, status):
        assert lifecycle.mark_sent(make_log(status=status)) == {"status": "Sent"}


class TestReset:

    def test_reset_blanks_everything_but_keeps_id(self):
        log = make_log(id="legacy-id", is_present=True, status="Sent", teacher_notes="busy day",
                       meals=[{"id": "m1", "type": "Lunch"}])

        blank = lifecycle.reset(log)

        assert blank["id"] == "legacy-id"
        assert blank["child_id"] == "c1"
        assert blank["date"] == "2024-06-01"
        assert blank["is_present"] is False
        assert blank["status"] == "In Progress"
        assert blank["teacher_notes"] == ""
        assert blank["meals"] == []


class TestSuggestedDeparture:

    def test_current_time_while_in_progress(self):
        log = make_log(is_present=True, arrival_time="08:05")

        assert lifecycle.suggested_departure(log, now=datetime(2024, 6, 1, 16, 42)) == "16:42"

    def test_recorded_time_once_checked_out(self):
        log = make_log(is_present=True, status="Completed", departure_time="17:02")

        assert lifecycle.suggested_departure(log, now=datetime(2024, 6, 1, 18, 0)) == "17:02"
