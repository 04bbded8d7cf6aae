# =============================================================================
# tests/unit/test_services.py
# Unit Tests for the auth, summary and base services
# =============================================================================

import pytest
from unittest.mock import MagicMock

from daycare_core.errors import DataValidationError
from daycare_core.offline.models import Child, DailyLog, Parent, Settings
from daycare_core.services import AuthService, ServiceResult, SummaryService
from daycare_core.services.base_service import BaseService
from daycare_core.services.summary_service import DEFAULT_MODEL, build_prompt


class TestServiceResult:

    def test_ok_is_truthy(self):
        result = ServiceResult.ok({"id": 1})

        assert result
        assert result.data == {"id": 1}

    def test_from_daycare_error(self):
        result = ServiceResult.from_exception(DataValidationError("bad", field="first_name"))

        assert not result
        assert result.error_code == "DATA_001"
        assert result.metadata == {"field": "first_name"}

    def test_from_generic_exception(self):
        result = ServiceResult.from_exception(ValueError("nope"))

        assert result.error_code == "EXCEPTION"
        assert result.error == "nope"


class TestBaseServiceSafeExecute:

    class EchoService(BaseService):
        pass

    def test_success(self):
        result = self.EchoService().safe_execute("Echo", lambda x: x * 2, 21)

        assert result.success
        assert result.data == 42

    def test_domain_error_keeps_code(self):
        def reject():
            raise DataValidationError("missing name")

        result = self.EchoService().safe_execute("Reject", reject)

        assert not result.success
        assert result.error_code == "DATA_001"

    def test_unexpected_error(self):
        def explode():
            raise RuntimeError("boom")

        result = self.EchoService().safe_execute("Explode", explode)

        assert result.error == "boom"
        assert result.error_code == "UNKNOWN"


class TestAuthService:

    def test_login_with_default_password(self, store):
        auth = AuthService(store)

        result = auth.login("admin", "honeybees2025")

        assert result.success
        assert auth.is_authenticated()

    def test_username_whitespace_ignored(self, store):
        assert AuthService(store).login("  admin ", "honeybees2025").success

    def test_wrong_password(self, store):
        auth = AuthService(store)

        result = auth.login("admin", "wrong")

        assert not result.success
        assert result.error_code == "AUTH_001"
        assert not auth.is_authenticated()

    def test_wrong_username(self, store):
        assert not AuthService(store).login("teacher", "honeybees2025").success

    def test_password_from_settings(self, store):
        store.save_settings(Settings(admin_password="buzz"))
        auth = AuthService(store)

        assert not auth.login("admin", "honeybees2025").success
        assert auth.login("admin", "buzz").success

    def test_logout(self, store):
        auth = AuthService(store)
        auth.login("admin", "honeybees2025")

        auth.logout()

        assert not auth.is_authenticated()


class TestSummaryService:

    @pytest.fixture(autouse=True)
    def no_env_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    @pytest.fixture
    def log(self):
        return DailyLog(child_id="c1", date="2024-06-01", teacher_notes="Played outside",
                        meals=[{"type": "Lunch", "items": "Pasta", "amount": "All"}])

    @pytest.fixture
    def child(self):
        return Child(id="c1", first_name="Aisha")

    @staticmethod
    def client_returning(content):
        client = MagicMock()
        message = MagicMock(content=content)
        client.chat.completions.create.return_value = MagicMock(choices=[MagicMock(message=message)])
        return client

    def test_without_key_returns_teacher_notes(self, log, child):
        service = SummaryService()

        assert not service.available
        assert service.summarize(log, child) == "Played outside"

    def test_uses_model_and_prompt(self, log, child):
        client = self.client_returning("  Aisha enjoyed pasta and sunshine.  ")
        service = SummaryService(api_key="sk-test", client_factory=lambda key: client)

        text = service.summarize(log, child, Parent(preferred_language="English"))

        assert text == "Aisha enjoyed pasta and sunshine."
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == DEFAULT_MODEL
        assert "Child Name: Aisha" in kwargs["messages"][1]["content"]

    def test_api_failure_falls_back(self, log, child):
        client = MagicMock()
        client.chat.completions.create.side_effect = RuntimeError("rate limited")
        service = SummaryService(api_key="sk-test", client_factory=lambda key: client)

        assert service.summarize(log, child) == "Played outside"

    def test_empty_answer_falls_back(self, log, child):
        service = SummaryService(api_key="sk-test", client_factory=lambda key: self.client_returning(None))

        assert service.summarize(log, child) == "Played outside"

    def test_prompt_requests_parent_language(self, log, child):
        prompt = build_prompt(log, child, "Urdu")

        assert "Preferred Language: Urdu" in prompt
        assert "Write the narrative in Urdu." in prompt
        assert "Lunch: Pasta (All eaten)" in prompt

    def test_english_prompt_has_no_translation_line(self, log, child):
        assert "Write the narrative" not in build_prompt(log, child)
