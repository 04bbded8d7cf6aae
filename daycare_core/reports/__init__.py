# =============================================================================
# daycare_core/reports/__init__.py
# Report rendering and analytics
# =============================================================================

# Load the offline package first so its data_store -> services -> reports
# import chain completes before this package's submodules are initialised.
import daycare_core.offline  # noqa: F401

from .email_template import compose_subject, render_text, render_html
from .trends import (
    WeeklyTrends,
    weekly_trends,
    monthly_attendance,
    attendance_calendar,
    parse_ounces,
)

__all__ = [
    "compose_subject",
    "render_text",
    "render_html",
    "WeeklyTrends",
    "weekly_trends",
    "monthly_attendance",
    "attendance_calendar",
    "parse_ounces",
]
