# =============================================================================
# tests/unit/test_email_template.py
# Unit Tests for daily report rendering
# =============================================================================

import pytest

from daycare_core.offline.models import Child, DailyLog, Holiday, Settings
from daycare_core.reports.email_template import (
    DEFAULT_NARRATIVE,
    compose_subject,
    narrative,
    render_html,
    render_text,
)


@pytest.fixture
def child():
    return Child(id="c1", first_name="Aisha", last_name="Khan")


@pytest.fixture
def busy_log():
    return DailyLog(
        child_id="c1",
        date="2024-06-01",
        arrival_time="08:05",
        departure_time="17:02",
        is_present=True,
        status="Completed",
        overall_mood="Good",
        teacher_notes="Painted a rainbow",
        supplies_needed="Diapers",
        meals=[{"id": "m1", "time": "12:00", "type": "Lunch", "items": "Rice", "amount": "Most"}],
        bottles=[{"id": "b1", "time": "10:00", "type": "Milk", "amount": "6oz"}],
        naps=[{"id": "n1", "start_time": "13:00", "end_time": "14:30", "quality": "Great"}],
        diapers=[{"id": "d1", "time": "09:00", "type": "Wet"}],
        incidents=[{"id": "i1", "time": "11:00", "type": "Bump", "description": "Knee",
                    "action_taken": "Ice pack"}],
    )


class TestSubjectAndNarrative:

    def test_subject(self, child, busy_log):
        assert compose_subject(child, busy_log) == "Daily Report – Aisha – 2024-06-01"

    def test_narrative_prefers_summary(self, busy_log):
        assert narrative(busy_log, "AI text") == "AI text"

    def test_narrative_falls_back_to_notes_then_default(self, busy_log):
        assert narrative(busy_log, "   ") == "Painted a rainbow"
        assert narrative(DailyLog(child_id="c1", date="2024-06-01")) == DEFAULT_NARRATIVE


class TestRenderText:

    def test_sections_present(self, child, busy_log):
        text = render_text(busy_log, child, Settings())

        assert "DAILY REPORT: Aisha Khan" in text
        assert "Arrived: 8:05 AM | Departed: 5:02 PM" in text
        assert "- [12:00] Lunch: Rice (Most eaten)" in text
        assert "- [10:00] Bottle: Milk (6oz)" in text
        assert "- [13:00-14:30] Nap (Great quality)" in text
        assert "09:00 - Wet" in text
        assert "(Action: Ice pack)" in text
        assert "* Diapers" in text
        assert text.rstrip().endswith("Honeybees Daycare Team")

    def test_empty_sections_omitted(self, child):
        text = render_text(DailyLog(child_id="c1", date="2024-06-01"), child, Settings())

        for heading in ("NUTRITION:", "REST:", "POTTY:", "INCIDENTS:", "SUPPLIES NEEDED:", "UPCOMING"):
            assert heading not in text
        assert DEFAULT_NARRATIVE in text

    def test_holidays_listed(self, child, busy_log):
        text = render_text(busy_log, child, Settings(),
                           holidays=[Holiday(name="Eid", date="2024-06-17", type="Closed")])

        assert "UPCOMING CLOSURES & EVENTS:" in text
        assert "- 2024-06-17: Eid (Closed)" in text


class TestRenderHtml:

    def test_escapes_user_text(self, child):
        log = DailyLog(child_id="c1", date="2024-06-01", teacher_notes="<script>alert(1)</script>")

        html = render_html(log, child, Settings(daycare_name="Bees & Co"))

        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "Bees &amp; Co" in html

    def test_signature_lines_become_breaks(self, child, busy_log):
        html = render_html(busy_log, child, Settings(email_signature="Love,\nThe Team"))

        assert "Love,<br>The Team" in html

    def test_sections_follow_log_contents(self, child, busy_log):
        html = render_html(busy_log, child, Settings())

        assert "Nutrition" in html
        assert "Potty" in html
        assert "Needs" in html
        assert "Medications" not in html
