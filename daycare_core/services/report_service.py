# =============================================================================
# daycare_core/services/report_service.py
# Daily report composition and dispatch
# =============================================================================
"""
ReportService - compose a child's daily report and get it to the parents.

Dispatch path:
1. Relay: POST to the EmailJS REST endpoint when all three relay ids are set.
2. Fallback: open a pre-filled ``mailto:`` link in the OS mail client. This
   path always runs when the relay is unconfigured or fails, so a report can
   always go out.

Every relay failure is audited as ``Failed``; the path that succeeded is
audited as ``Sent``. A non-test send then moves the daily log to ``Sent``.
"""

from __future__ import annotations
import webbrowser
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Callable, List, Optional
from urllib.parse import quote

import requests

from daycare_core.errors.exceptions import EmailRelayError, ReportDispatchError
from daycare_core.offline.models import (
    Child,
    DailyLog,
    EmailSendLog,
    SendMethod,
    SendStatus,
    Settings,
)
from daycare_core.reports.email_template import compose_subject, render_html, render_text
from daycare_core.reports.trends import weekly_trends
from .base_service import BaseService, ServiceResult

if TYPE_CHECKING:
    from daycare_core.offline.data_store import DaycareStore


EMAILJS_ENDPOINT = "https://api.emailjs.com/api/v1.0/email/send"
RELAY_TIMEOUT = 10
HOLIDAY_LOOKAHEAD_DAYS = 30


@dataclass
class ComposedReport:
    subject: str
    text: str
    html: str


@dataclass
class DispatchResult:
    """Outcome of one send attempt."""
    recipients: List[str]
    subject: str
    method: str                       # "relay" or "mailto"
    is_test: bool = False
    relay_error: Optional[str] = None
    mailto_url: Optional[str] = None
    audit: List[EmailSendLog] = field(default_factory=list)
    log: Optional[DailyLog] = None


def build_mailto_url(recipients: List[str], subject: str, body: str) -> str:
    """``mailto:`` URI with comma-joined recipients and encoded subject/body."""
    return (
        f"mailto:{','.join(recipients)}"
        f"?subject={quote(subject, safe='')}"
        f"&body={quote(body, safe='')}"
    )


class EmailRelayClient:
    """Minimal EmailJS REST client."""

    def __init__(self, endpoint: str = EMAILJS_ENDPOINT, timeout: int = RELAY_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(
        self,
        settings: Settings,
        recipients: List[str],
        child_name: str,
        report: ComposedReport,
    ) -> None:
        """
        Raises:
            EmailRelayError: when unconfigured, unreachable, or rejected
        """
        if not settings.relay_configured:
            raise EmailRelayError("Email relay is not configured")

        payload = {
            "service_id": settings.emailjs_service_id,
            "template_id": settings.emailjs_template_id,
            "user_id": settings.emailjs_public_key,
            "template_params": {
                "to_email": ", ".join(recipients),
                "child_name": child_name,
                "subject": report.subject,
                "message": report.text,
                "html_message": report.html,
                "daycare_name": settings.daycare_name,
            },
        }

        try:
            response = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise EmailRelayError(f"Email relay unreachable: {e}")

        if not 200 <= response.status_code < 300:
            raise EmailRelayError(
                f"Email relay rejected the message: {response.text[:200]}",
                status_code=response.status_code,
            )


class ReportService(BaseService):
    """
    Usage:
        service = ReportService(store)
        report = service.compose(log, child, summary=text)
        result = service.send_report(log, child, summary=text)
        if result.success:
            st.success(f"Sent via {result.data.method}")
    """

    def __init__(
        self,
        store: DaycareStore,
        relay: Optional[EmailRelayClient] = None,
        mail_opener: Optional[Callable[[str], object]] = None,
    ):
        super().__init__()
        self.store = store
        self.relay = relay or EmailRelayClient()
        self.mail_opener = mail_opener or webbrowser.open

    # =========================================================================
    # COMPOSITION
    # =========================================================================

    def compose(
        self,
        log: DailyLog,
        child: Child,
        summary: Optional[str] = None,
        settings: Optional[Settings] = None,
    ) -> ComposedReport:
        settings = settings or self.store.get_settings()
        holidays = self.store.upcoming_holidays(log.date, HOLIDAY_LOOKAHEAD_DAYS)
        trends = None
        if log.include_trends:
            trends = weekly_trends(self.store.get_daily_logs(), child.id, log.date)

        return ComposedReport(
            subject=compose_subject(child, log),
            text=render_text(log, child, settings, summary, holidays, trends),
            html=render_html(log, child, settings, summary, holidays, trends),
        )

    def resolve_recipients(
        self,
        child: Child,
        settings: Settings,
        is_test: bool = False,
        copy_to_self: Optional[bool] = None,
    ) -> List[str]:
        if is_test:
            target = settings.test_email or settings.from_email
            return [target] if target else []

        recipients = [p.email for p in self.store.get_parents_for(child, opted_in_only=True)]
        if copy_to_self is None:
            copy_to_self = settings.send_copy_to_self_default
        if copy_to_self and settings.from_email and settings.from_email not in recipients:
            recipients.append(settings.from_email)
        return recipients

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def _audit(self, log: DailyLog, recipients: List[str], subject: str,
               status: SendStatus, method: SendMethod, error: str = "") -> EmailSendLog:
        entry = EmailSendLog(
            daily_log_id=log.id,
            sent_to=list(recipients),
            subject=subject,
            sent_at=datetime.now().isoformat(),
            status=status.value,
            method=method.value,
            error_message=error,
        )
        return self.store.append_send_log(entry)

    def dispatch(
        self,
        log: DailyLog,
        child: Child,
        summary: Optional[str] = None,
        is_test: bool = False,
        copy_to_self: Optional[bool] = None,
    ) -> DispatchResult:
        """
        Send one report, relay first then mailto.

        Raises:
            ReportDispatchError: when there is nobody to send to
        """
        settings = self.store.get_settings()
        recipients = self.resolve_recipients(child, settings, is_test, copy_to_self)
        if not recipients:
            message = (
                "Please set a Test Email in Settings first"
                if is_test else "No parent has opted in to email reports"
            )
            raise ReportDispatchError(message, child_id=child.id)

        report = self.compose(log, child, summary, settings)
        result = DispatchResult(
            recipients=recipients,
            subject=report.subject,
            method=SendMethod.RELAY.value,
            is_test=is_test,
        )

        try:
            self.relay.send(settings, recipients, child.first_name, report)
            result.audit.append(
                self._audit(log, recipients, report.subject, SendStatus.SENT, SendMethod.RELAY)
            )
            self.logger.info(f"Report {log.id} sent via relay to {len(recipients)} recipient(s)")
        except EmailRelayError as e:
            result.relay_error = e.message
            if settings.relay_configured:
                self.logger.warning(f"Relay send failed for {log.id}, opening mail client: {e.message}")
                result.audit.append(
                    self._audit(log, recipients, report.subject, SendStatus.FAILED,
                                SendMethod.RELAY, e.message)
                )
            result.method = SendMethod.MAILTO.value
            result.mailto_url = build_mailto_url(recipients, report.subject, report.text)
            self.mail_opener(result.mailto_url)
            result.audit.append(
                self._audit(log, recipients, report.subject, SendStatus.SENT, SendMethod.MAILTO)
            )

        if not is_test:
            result.log = self.store.mark_sent(log.child_id, log.date)
        return result

    def send_report(self, log: DailyLog, child: Child, summary: Optional[str] = None,
                    is_test: bool = False, copy_to_self: Optional[bool] = None) -> ServiceResult:
        """``dispatch`` wrapped in a ServiceResult for the UI."""
        return self.safe_execute(
            f"Sending {'test ' if is_test else ''}report for {child.first_name}",
            self.dispatch,
            log,
            child,
            summary,
            is_test,
            copy_to_self,
        )
