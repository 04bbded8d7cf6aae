# =============================================================================
# daycare_core/services/__init__.py
# Service Layer for the Daycare App
# Separates business logic from UI presentation
# =============================================================================
"""
Service Layer

Services take the DaycareStore in their constructor and return
ServiceResult objects the pages can display directly.

Usage Example:
-------------
    from daycare_core.services import AuthService, ReportService, SummaryService

    auth = AuthService(store)
    if auth.login("admin", password):
        ...

    summary = SummaryService().summarize(log, child, parent)
    result = ReportService(store).send_report(log, child, summary=summary)
    if result.success:
        print(f"Sent via {result.data.method}")
"""

from .base_service import BaseService, ServiceResult
from .auth_service import AuthService, ADMIN_USERNAME
from .summary_service import SummaryService
from .report_service import (
    ReportService,
    EmailRelayClient,
    DispatchResult,
    ComposedReport,
    build_mailto_url,
)

__all__ = [
    "BaseService",
    "ServiceResult",
    "AuthService",
    "ADMIN_USERNAME",
    "SummaryService",
    "ReportService",
    "EmailRelayClient",
    "DispatchResult",
    "ComposedReport",
    "build_mailto_url",
]
