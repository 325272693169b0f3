"""Biometric sign-in command and handler."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ...domain.exceptions import BiometricNotAvailableError
from ...domain.models.account import Actor
from ...domain.models.security import SecurityEventSeverity, SecurityEventType
from .guarded import GuardedOutcome, GuardedUseCase


@dataclass
class AuthenticateWithBiometricCommand:
    """Command to sign in with the device biometric sensor."""
    pass


@dataclass
class AuthenticateWithBiometricResult:
    success: bool
    user: Actor
    message: str


class AuthenticateWithBiometricHandler(GuardedUseCase):
    """
    Handler for biometric sign-in.

    A failed biometric sign-in is audited at HIGH, two levels above the
    success event, and against the "unknown" user.
    """

    name = "authenticate_with_biometric"
    requires_actor = False
    success_event_type = SecurityEventType.LOGIN
    success_severity = SecurityEventSeverity.LOW
    failure_severity = SecurityEventSeverity.HIGH
    success_action = "biometric_auth_success"
    success_message = "Biometric authentication successful"
    failure_action = "biometric_auth_failed"
    failure_message = "Biometric authentication failed"

    async def execute(
        self,
        command: AuthenticateWithBiometricCommand,
        actor: Optional[Actor],
    ) -> GuardedOutcome:
        if not await self.account_store.is_biometric_available():
            raise BiometricNotAvailableError(reason="hardware_not_supported")

        user = await self.account_store.authenticate_with_biometric()

        return GuardedOutcome(
            result=AuthenticateWithBiometricResult(
                success=True,
                user=user,
                message=self.success_message,
            ),
            metadata={"method": "biometric"},
            user_id=user.id,
        )

    def failure_metadata(self, command: AuthenticateWithBiometricCommand) -> Dict[str, Any]:
        return {"method": "biometric"}
