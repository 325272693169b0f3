"""Tests for the individual authentication use cases."""

from datetime import datetime, timedelta, timezone

import pytest

from authguard.application.commands import (
    AuthenticateWithBiometricCommand,
    AuthenticateWithBiometricHandler,
    CheckSuspiciousActivityCommand,
    CheckSuspiciousActivityHandler,
    EnableBiometricCommand,
    EnableBiometricHandler,
    EnableMfaCommand,
    EnableMfaHandler,
    GetActiveSessionsCommand,
    GetActiveSessionsHandler,
    HasPermissionCommand,
    HasPermissionHandler,
    LoginWithGoogleCommand,
    LoginWithGoogleHandler,
    UpdatePasswordCommand,
    UpdatePasswordHandler,
)
from authguard.domain.exceptions import (
    BiometricNotAvailableError,
    InputValidationError,
    InvalidCredentialsError,
    PasswordPolicyViolationError,
    UserNotAuthenticatedError,
)
from authguard.domain.models.account import ActiveSession, Actor, MfaEnrollment, MfaType
from authguard.domain.models.security import (
    RiskLevel,
    SecurityAlert,
    SecurityEventSeverity,
    SecurityEventType,
)


class TestEnableBiometric:
    @pytest.mark.asyncio
    async def test_success(self, store, handler_deps):
        handler = EnableBiometricHandler(store, **handler_deps)

        result = await handler.handle(EnableBiometricCommand())

        assert result.success is True
        assert result.message == "Biometric authentication enabled successfully"
        assert store.call_names() == [
            "get_current_user",
            "is_biometric_available",
            "enable_biometric",
            "log_security_event",
        ]
        event = store.events[0]
        assert event.type == SecurityEventType.MFA_ENABLED
        assert event.severity == SecurityEventSeverity.LOW
        assert event.details.action == "biometric_enabled"
        assert event.details.metadata == {"method": "biometric"}

    @pytest.mark.asyncio
    async def test_unavailable_device(self, make_store, handler_deps):
        store = make_store(biometric_available=False)
        handler = EnableBiometricHandler(store, **handler_deps)

        with pytest.raises(BiometricNotAvailableError) as exc_info:
            await handler.handle(EnableBiometricCommand())

        assert exc_info.value.reason == "hardware_not_supported"
        assert "enable_biometric" not in store.call_names()
        assert len(store.events) == 1
        event = store.events[0]
        assert event.type == SecurityEventType.SUSPICIOUS_ACTIVITY
        assert event.severity == SecurityEventSeverity.MEDIUM
        assert event.details.action == "biometric_enable_failed"
        assert event.details.error == "Biometric authentication not available"

    @pytest.mark.asyncio
    async def test_unauthenticated(self, anonymous_store, handler_deps):
        handler = EnableBiometricHandler(anonymous_store, **handler_deps)

        with pytest.raises(UserNotAuthenticatedError):
            await handler.handle(EnableBiometricCommand())

        assert anonymous_store.events == []


class TestAuthenticateWithBiometric:
    @pytest.mark.asyncio
    async def test_success_audits_signed_in_user(self, store, actor, handler_deps):
        handler = AuthenticateWithBiometricHandler(store, **handler_deps)

        result = await handler.handle(AuthenticateWithBiometricCommand())

        assert result.user == actor
        assert "get_current_user" not in store.call_names()
        event = store.events[0]
        assert event.type == SecurityEventType.LOGIN
        assert event.user_id == "user-123"
        assert event.details.action == "biometric_auth_success"

    @pytest.mark.asyncio
    async def test_failure_is_high_and_unknown_user(self, store, handler_deps):
        store.failures["authenticate_with_biometric"] = InvalidCredentialsError()
        handler = AuthenticateWithBiometricHandler(store, **handler_deps)

        with pytest.raises(InvalidCredentialsError):
            await handler.handle(AuthenticateWithBiometricCommand())

        event = store.events[0]
        assert event.type == SecurityEventType.SUSPICIOUS_ACTIVITY
        assert event.severity == SecurityEventSeverity.HIGH
        assert event.user_id == "unknown"
        assert event.details.action == "biometric_auth_failed"


class TestUpdatePassword:
    @pytest.mark.asyncio
    async def test_success(self, store, handler_deps):
        handler = UpdatePasswordHandler(store, **handler_deps)

        result = await handler.handle(UpdatePasswordCommand("OldPass1!", "NewPass2!"))

        assert result.success is True
        assert ("update_password", "OldPass1!", "NewPass2!") in store.calls
        event = store.events[0]
        assert event.type == SecurityEventType.PASSWORD_CHANGED
        assert event.severity == SecurityEventSeverity.MEDIUM
        assert event.id == "password-updated-1"
        assert event.details.metadata == {"method": "manual", "password_length": 9}

    @pytest.mark.asyncio
    async def test_same_password_rejected_before_any_io(self, store, handler_deps):
        handler = UpdatePasswordHandler(store, **handler_deps)

        with pytest.raises(InputValidationError) as exc_info:
            await handler.handle(UpdatePasswordCommand("Secret1!", "Secret1!"))

        assert exc_info.value.message == "New password must be different from current password"
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_missing_password_rejected(self, store, handler_deps):
        handler = UpdatePasswordHandler(store, **handler_deps)

        with pytest.raises(InputValidationError, match="are required") as exc_info:
            await handler.handle(UpdatePasswordCommand("", "NewPass2!"))

        assert exc_info.value.field_name == "current_password"
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_confirmation_mismatch_rejected(self, store, handler_deps):
        handler = UpdatePasswordHandler(store, **handler_deps)

        with pytest.raises(InputValidationError, match="do not match"):
            await handler.handle(UpdatePasswordCommand("Old1!", "New1!", "New2!"))

        assert store.calls == []

    @pytest.mark.asyncio
    async def test_policy_violation_is_audited_and_rethrown(self, store, handler_deps):
        violation = PasswordPolicyViolationError(["too short"])
        store.failures["update_password"] = violation
        handler = UpdatePasswordHandler(store, **handler_deps)

        with pytest.raises(PasswordPolicyViolationError) as exc_info:
            await handler.handle(UpdatePasswordCommand("Old1!", "New1!"))

        assert exc_info.value is violation
        event = store.events[0]
        assert event.type == SecurityEventType.SUSPICIOUS_ACTIVITY
        assert event.severity == SecurityEventSeverity.HIGH
        assert event.details.error == "Password does not meet policy requirements"
        assert event.details.metadata == {"method": "manual"}

    def test_passwords_hidden_from_repr(self):
        command = UpdatePasswordCommand("OldPass1!", "NewPass2!", "NewPass2!")

        assert "OldPass1!" not in repr(command)
        assert "NewPass2!" not in repr(command)


class TestGetActiveSessions:
    @pytest.mark.asyncio
    async def test_success(self, make_store, handler_deps):
        sessions = [ActiveSession(id="s1", is_current=True), ActiveSession(id="s2")]
        store = make_store(sessions=sessions)
        handler = GetActiveSessionsHandler(store, **handler_deps)

        result = await handler.handle(GetActiveSessionsCommand())

        assert result.sessions == sessions
        assert result.total_sessions == 2
        event = store.events[0]
        assert event.type == SecurityEventType.LOGIN
        assert event.details.action == "sessions_viewed"
        assert event.details.metadata == {"session_count": 2}

    def test_session_to_dict(self, fixed_now):
        session = ActiveSession(
            id="s1",
            device_id="pixel-8",
            created_at=fixed_now,
            ip_address="198.51.100.4",
            is_current=True,
        )

        assert session.to_dict() == {
            "id": "s1",
            "device_id": "pixel-8",
            "created_at": fixed_now.isoformat(),
            "last_active_at": None,
            "ip_address": "198.51.100.4",
            "is_current": True,
        }

    @pytest.mark.asyncio
    async def test_failure(self, store, handler_deps):
        store.failures["get_active_sessions"] = TimeoutError("timed out")
        handler = GetActiveSessionsHandler(store, **handler_deps)

        with pytest.raises(TimeoutError):
            await handler.handle(GetActiveSessionsCommand())

        event = store.events[0]
        assert event.severity == SecurityEventSeverity.MEDIUM
        assert event.details.action == "sessions_view_failed"
        assert event.details.error == "timed out"


class TestCheckSuspiciousActivity:
    @pytest.mark.asyncio
    async def test_three_high_alerts(self, make_store, handler_deps):
        alerts = [
            SecurityAlert(id=f"a{i}", type="multiple_failed_logins",
                          severity=SecurityEventSeverity.HIGH)
            for i in range(3)
        ]
        store = make_store(alerts=alerts)
        handler = CheckSuspiciousActivityHandler(store, **handler_deps)

        result = await handler.handle(CheckSuspiciousActivityCommand())

        assert result.risk_level == RiskLevel.HIGH
        assert result.has_alerts
        assert result.recommendations[0] == "Consider changing your password"
        assert "Consider enabling account lockout protection" in result.recommendations
        event = store.events[0]
        assert event.type == SecurityEventType.SUSPICIOUS_ACTIVITY
        assert event.severity == SecurityEventSeverity.HIGH
        assert event.details.metadata == {
            "alert_count": 3,
            "risk_level": "high",
            "has_alerts": True,
        }

    @pytest.mark.asyncio
    async def test_critical_alert_audited_as_critical(self, make_store, handler_deps):
        store = make_store(alerts=[
            SecurityAlert(id="a1", type="x", severity=SecurityEventSeverity.CRITICAL),
        ])
        handler = CheckSuspiciousActivityHandler(store, **handler_deps)

        result = await handler.handle(CheckSuspiciousActivityCommand())

        assert result.risk_level == RiskLevel.CRITICAL
        assert store.events[0].severity == SecurityEventSeverity.CRITICAL

    @pytest.mark.asyncio
    async def test_medium_risk_audited_as_low(self, make_store, handler_deps):
        store = make_store(alerts=[
            SecurityAlert(id="a1", type="x", severity=SecurityEventSeverity.HIGH),
        ])
        handler = CheckSuspiciousActivityHandler(store, **handler_deps)

        result = await handler.handle(CheckSuspiciousActivityCommand())

        assert result.risk_level == RiskLevel.MEDIUM
        assert store.events[0].severity == SecurityEventSeverity.LOW

    @pytest.mark.asyncio
    async def test_no_alerts(self, store, handler_deps):
        handler = CheckSuspiciousActivityHandler(store, **handler_deps)

        result = await handler.handle(CheckSuspiciousActivityCommand())

        assert result.risk_level == RiskLevel.LOW
        assert result.has_alerts is False
        assert result.recommendations == ["Continue following security best practices"]


class TestHasPermission:
    @pytest.mark.asyncio
    async def test_granted_for_current_user(self, make_store, handler_deps):
        store = make_store(granted=["read_reports"], roles=["analyst"])
        handler = HasPermissionHandler(store, **handler_deps)

        result = await handler.handle(HasPermissionCommand("read_reports"))

        assert result.has_permission is True
        assert result.reason == "Permission granted"
        assert result.user_roles == ["analyst"]
        assert ("has_permission", "read_reports", "user-123") in store.calls
        event = store.events[0]
        assert event.type == SecurityEventType.PERMISSION_CHECK
        assert event.user_id == "user-123"
        assert event.details.metadata["sensitive"] is False

    @pytest.mark.asyncio
    async def test_denied_sensitive_permission_for_explicit_user(self, store, handler_deps):
        handler = HasPermissionHandler(store, **handler_deps)

        result = await handler.handle(
            HasPermissionCommand("manage_users", user_id="user-999", resource="users")
        )

        assert result.has_permission is False
        assert result.reason == "User lacks required permission: manage_users"
        assert "get_current_user" not in store.call_names()
        event = store.events[0]
        assert event.user_id == "user-999"
        assert event.details.metadata["sensitive"] is True
        assert event.details.metadata["resource"] == "users"

    def test_custom_sensitive_list(self, store, handler_deps):
        handler = HasPermissionHandler(
            store, sensitive_permissions=["billing"], **handler_deps
        )

        assert handler.is_sensitive("billing_refund")
        assert not handler.is_sensitive("admin")

    @pytest.mark.asyncio
    async def test_backend_failure_is_audited_and_rethrown(self, store, handler_deps):
        store.failures["has_permission"] = RuntimeError("rbac down")
        handler = HasPermissionHandler(store, **handler_deps)

        with pytest.raises(RuntimeError):
            await handler.handle(HasPermissionCommand("admin_panel"))

        event = store.events[0]
        assert event.type == SecurityEventType.SUSPICIOUS_ACTIVITY
        assert event.details.metadata == {"permission": "admin_panel", "sensitive": True}


class TestLoginWithGoogle:
    @pytest.mark.asyncio
    async def test_first_login_is_new_user(self, make_store, handler_deps):
        google_user = Actor(id="g-1", email="new@example.com")
        store = make_store(user=None, google_user=google_user)
        handler = LoginWithGoogleHandler(store, **handler_deps)

        result = await handler.handle(LoginWithGoogleCommand())

        assert result.user == google_user
        assert result.is_new_user is True
        assert "get_current_user" not in store.call_names()
        event = store.events[0]
        assert event.type == SecurityEventType.LOGIN
        assert event.user_id == "g-1"
        assert event.details.metadata == {
            "method": "oauth",
            "provider": "google",
            "is_new_user": True,
        }

    @pytest.mark.asyncio
    async def test_recent_login_is_returning_user(self, make_store, handler_deps, fixed_now):
        google_user = Actor(id="g-2", last_login_at=fixed_now - timedelta(days=3))
        store = make_store(user=None, google_user=google_user)
        handler = LoginWithGoogleHandler(store, **handler_deps)

        result = await handler.handle(LoginWithGoogleCommand())

        assert result.is_new_user is False

    def test_naive_last_login_treated_as_utc(self, store, handler_deps, fixed_now):
        handler = LoginWithGoogleHandler(store, **handler_deps)
        naive = (fixed_now - timedelta(days=400)).replace(tzinfo=None)

        assert handler.is_new_user(Actor(id="g", last_login_at=naive)) is True

    @pytest.mark.asyncio
    async def test_failure_audited_against_unknown_user(self, store, handler_deps):
        store.failures["login_with_google"] = ConnectionError("oauth cancelled")
        handler = LoginWithGoogleHandler(store, **handler_deps)

        with pytest.raises(ConnectionError):
            await handler.handle(LoginWithGoogleCommand())

        event = store.events[0]
        assert event.user_id == "unknown"
        assert event.severity == SecurityEventSeverity.MEDIUM
        assert event.details.action == "google_oauth_failed"


class TestEnableMfa:
    @pytest.mark.asyncio
    async def test_totp(self, make_store, handler_deps):
        enrollment = MfaEnrollment(secret="S3CR3T", qr_code="otpauth://x", backup_codes=["1", "2"])
        store = make_store(enrollment=enrollment)
        handler = EnableMfaHandler(store, **handler_deps)

        result = await handler.handle(EnableMfaCommand(MfaType.TOTP))

        assert result.success is True
        assert result.secret == "S3CR3T"
        assert result.backup_codes == ["1", "2"]
        event = store.events[0]
        assert event.type == SecurityEventType.MFA_ENABLED
        assert event.details.metadata == {"mfa_type": "totp"}

    @pytest.mark.asyncio
    async def test_sms_requires_phone_number(self, store, handler_deps):
        handler = EnableMfaHandler(store, **handler_deps)

        with pytest.raises(InputValidationError, match="Phone number is required"):
            await handler.handle(EnableMfaCommand(MfaType.SMS))

        assert store.calls == []

    @pytest.mark.asyncio
    async def test_accepts_string_type(self, store, handler_deps):
        handler = EnableMfaHandler(store, **handler_deps)

        await handler.handle(EnableMfaCommand("email"))

        assert ("enable_mfa", MfaType.EMAIL) in store.calls


class TestEventTimestamps:
    @pytest.mark.asyncio
    async def test_clock_is_used(self, store, id_generator):
        moment = datetime(2030, 1, 1, tzinfo=timezone.utc)
        handler = EnableBiometricHandler(store, id_generator=id_generator, clock=lambda: moment)

        await handler.handle(EnableBiometricCommand())

        assert store.events[0].timestamp == moment
