# =============================================================================
# daycare_core/services/auth_service.py
# Single shared admin login
# =============================================================================
"""
Admin authentication for the staff app.

⚠️ Single shared credential only. The username is fixed; the password lives
in Settings and is compared in plain text. The resulting flag is stored in
the local store so a device stays logged in across restarts.
"""

from __future__ import annotations
import hmac
from typing import TYPE_CHECKING

from .base_service import BaseService, ServiceResult

if TYPE_CHECKING:
    from daycare_core.offline.data_store import DaycareStore


ADMIN_USERNAME = "admin"


class AuthService(BaseService):

    def __init__(self, store: DaycareStore):
        super().__init__()
        self.store = store

    def login(self, username: str, password: str) -> ServiceResult:
        """Check the admin credential and set the local auth flag on success."""
        expected = self.store.get_settings().admin_password
        user_ok = hmac.compare_digest((username or "").strip(), ADMIN_USERNAME)
        password_ok = hmac.compare_digest(password or "", expected)

        if not (user_ok and password_ok):
            self.logger.warning(f"Failed login attempt for user '{username}'")
            return ServiceResult.fail("Invalid username or password", error_code="AUTH_001")

        self.store.set_authenticated(True)
        self.logger.info("Admin logged in")
        return ServiceResult.ok(ADMIN_USERNAME)

    def logout(self) -> None:
        self.store.set_authenticated(False)
        self.logger.info("Admin logged out")

    def is_authenticated(self) -> bool:
        return self.store.is_authenticated()
