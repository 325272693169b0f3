"""Command handlers for guarded authentication operations."""

from .guarded import GuardedOutcome, GuardedUseCase, describe_failure
from .authenticate_with_biometric import (
    AuthenticateWithBiometricCommand,
    AuthenticateWithBiometricHandler,
    AuthenticateWithBiometricResult,
)
from .check_suspicious_activity import (
    CheckSuspiciousActivityCommand,
    CheckSuspiciousActivityHandler,
    CheckSuspiciousActivityResult,
)
from .enable_biometric import EnableBiometricCommand, EnableBiometricHandler, EnableBiometricResult
from .enable_mfa import EnableMfaCommand, EnableMfaHandler, EnableMfaResult
from .get_active_sessions import (
    GetActiveSessionsCommand,
    GetActiveSessionsHandler,
    GetActiveSessionsResult,
)
from .has_permission import HasPermissionCommand, HasPermissionHandler, HasPermissionResult
from .login_with_google import LoginWithGoogleCommand, LoginWithGoogleHandler, LoginWithGoogleResult
from .update_password import UpdatePasswordCommand, UpdatePasswordHandler, UpdatePasswordResult

__all__ = [
    "GuardedOutcome",
    "GuardedUseCase",
    "describe_failure",
    "AuthenticateWithBiometricCommand",
    "AuthenticateWithBiometricHandler",
    "AuthenticateWithBiometricResult",
    "CheckSuspiciousActivityCommand",
    "CheckSuspiciousActivityHandler",
    "CheckSuspiciousActivityResult",
    "EnableBiometricCommand",
    "EnableBiometricHandler",
    "EnableBiometricResult",
    "EnableMfaCommand",
    "EnableMfaHandler",
    "EnableMfaResult",
    "GetActiveSessionsCommand",
    "GetActiveSessionsHandler",
    "GetActiveSessionsResult",
    "HasPermissionCommand",
    "HasPermissionHandler",
    "HasPermissionResult",
    "LoginWithGoogleCommand",
    "LoginWithGoogleHandler",
    "LoginWithGoogleResult",
    "UpdatePasswordCommand",
    "UpdatePasswordHandler",
    "UpdatePasswordResult",
]
