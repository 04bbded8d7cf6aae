# =============================================================================
# daycare_core/services/daily_log_lifecycle.py
# Daily log state machine
# =============================================================================
"""
Transition rules for a DailyLog.

Each function validates the transition against the current log and returns
the partial field update to apply. Nothing here touches storage; the data
store applies the update through its single write path.

    (absent, In Progress) --check_in-->  (present, In Progress)
    (present, In Progress) --check_out-> Completed
    Completed --undo_check_out--> In Progress
    In Progress | Completed | Sent --mark_sent--> Sent
    any --reset--> blank (absent, In Progress)
"""

from datetime import datetime
from typing import Any, Dict, Optional

from daycare_core.errors.exceptions import LifecycleError
from daycare_core.offline.models import DailyLog, LogStatus
from daycare_core.utils.dates import current_time_str


IN_PROGRESS = LogStatus.IN_PROGRESS.value
COMPLETED = LogStatus.COMPLETED.value
SENT = LogStatus.SENT.value

SENDABLE_STATUSES = (IN_PROGRESS, COMPLETED, SENT)


def check_in(log: DailyLog, arrival_time: str) -> Dict[str, Any]:
    """Mark the child present with the given arrival time."""
    if log.status != IN_PROGRESS:
        raise LifecycleError(
            f"Cannot check in: log is {log.status}",
            action="check_in",
            status=log.status,
        )
    return {"is_present": True, "arrival_time": arrival_time, "status": IN_PROGRESS}


def check_out(log: DailyLog, departure_time: str) -> Dict[str, Any]:
    """Complete the day for a present child."""
    if not log.is_present:
        raise LifecycleError(
            "Cannot check out a child who is not checked in",
            action="check_out",
            status=log.status,
        )
    if log.status != IN_PROGRESS:
        raise LifecycleError(
            f"Cannot check out: log is {log.status}",
            action="check_out",
            status=log.status,
        )
    return {"departure_time": departure_time, "status": COMPLETED}


def undo_check_out(log: DailyLog) -> Dict[str, Any]:
    """Reopen a completed log; entries and times are kept."""
    if log.status != COMPLETED:
        raise LifecycleError(
            f"Cannot undo check-out: log is {log.status}",
            action="undo_check_out",
            status=log.status,
        )
    return {"status": IN_PROGRESS}


def mark_sent(log: DailyLog) -> Dict[str, Any]:
    if log.status not in SENDABLE_STATUSES:
        raise LifecycleError(
            f"Cannot send report: log is {log.status}",
            action="mark_sent",
            status=log.status,
        )
    return {"status": SENT}


def reset(log: DailyLog) -> Dict[str, Any]:
    """Full replacement with a blank log under the same id."""
    blank = DailyLog.blank(log.child_id, log.date)
    blank.id = log.id
    return blank.to_dict()


def suggested_departure(log: DailyLog, now: Optional[datetime] = None) -> str:
    """Departure time to prefill: the current time while the child is still in."""
    if log.status == IN_PROGRESS:
        return current_time_str(now)
    return log.departure_time
