"""Shared fixtures and test doubles."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from authguard.domain.models.account import ActiveSession, Actor, MfaEnrollment, MfaType
from authguard.domain.models.security import SecurityAlert, SecurityEvent
from authguard.domain.repositories.account_store import AccountStore
from authguard.domain.services.event_ids import EventIdGenerator
from authguard.infrastructure.logging import AuthGuardLogger, LogContext


FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class RecordingAccountStore(AccountStore):
    """
    In-memory account store that records every call.

    Set an entry in ``failures`` to make the matching method raise it.
    """

    def __init__(
        self,
        user: Optional[Actor] = None,
        biometric_available: bool = True,
        sessions: Optional[List[ActiveSession]] = None,
        alerts: Optional[List[SecurityAlert]] = None,
        granted: Optional[List[str]] = None,
        roles: Optional[List[str]] = None,
        google_user: Optional[Actor] = None,
        enrollment: Optional[MfaEnrollment] = None,
    ):
        self.user = user
        self.biometric_available = biometric_available
        self.sessions = sessions or []
        self.alerts = alerts or []
        self.granted = granted or []
        self.roles = roles or []
        self.google_user = google_user
        self.enrollment = enrollment or MfaEnrollment()
        self.failures: Dict[str, BaseException] = {}
        self.calls: List[tuple] = []
        self.events: List[SecurityEvent] = []

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method,) + args)
        if method in self.failures:
            raise self.failures[method]

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    async def get_current_user(self) -> Optional[Actor]:
        self._record("get_current_user")
        return self.user

    async def log_security_event(self, event: SecurityEvent) -> None:
        self._record("log_security_event", event)
        self.events.append(event)

    async def is_biometric_available(self) -> bool:
        self._record("is_biometric_available")
        return self.biometric_available

    async def enable_biometric(self) -> None:
        self._record("enable_biometric")

    async def authenticate_with_biometric(self) -> Actor:
        self._record("authenticate_with_biometric")
        return self.user

    async def update_password(self, current_password: str, new_password: str) -> None:
        self._record("update_password", current_password, new_password)

    async def get_active_sessions(self) -> List[ActiveSession]:
        self._record("get_active_sessions")
        return list(self.sessions)

    async def check_suspicious_activity(self) -> List[SecurityAlert]:
        self._record("check_suspicious_activity")
        return list(self.alerts)

    async def has_permission(self, permission: str, user_id: str) -> bool:
        self._record("has_permission", permission, user_id)
        return permission in self.granted

    async def get_user_roles(self, user_id: str) -> List[str]:
        self._record("get_user_roles", user_id)
        return list(self.roles)

    async def login_with_google(self) -> Actor:
        self._record("login_with_google")
        return self.google_user

    async def enable_mfa(self, mfa_type: MfaType) -> MfaEnrollment:
        self._record("enable_mfa", mfa_type)
        return self.enrollment


class CountingIdGenerator(EventIdGenerator):
    """Deterministic ids: ``<action>-<n>``."""

    def __init__(self):
        self.count = 0

    def next_id(self, action: str) -> str:
        self.count += 1
        return f"{action}-{self.count}"


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Each test starts with a fresh logger singleton and empty context."""
    AuthGuardLogger._instance = None
    LogContext.clear()
    yield
    AuthGuardLogger._instance = None
    LogContext.clear()


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def make_store(actor):
    """Factory for stores; the default actor is signed in unless ``user=None``."""
    def _make(**kwargs):
        kwargs.setdefault("user", actor)
        return RecordingAccountStore(**kwargs)
    return _make


@pytest.fixture
def actor():
    return Actor(id="user-123", email="jane@example.com", roles=["member"])


@pytest.fixture
def store(actor):
    return RecordingAccountStore(user=actor)


@pytest.fixture
def anonymous_store():
    return RecordingAccountStore(user=None)


@pytest.fixture
def id_generator():
    return CountingIdGenerator()


@pytest.fixture
def handler_deps(id_generator):
    """Keyword arguments shared by every handler under test."""
    return {
        "id_generator": id_generator,
        "clock": lambda: FIXED_NOW,
    }
