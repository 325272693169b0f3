"""Enable biometric sign-in command and handler."""

from dataclasses import dataclass
from typing import Optional

from ...domain.exceptions import BiometricNotAvailableError
from ...domain.models.account import Actor
from ...domain.models.security import SecurityEventSeverity, SecurityEventType
from .guarded import GuardedOutcome, GuardedUseCase


@dataclass
class EnableBiometricCommand:
    """Command to turn on biometric sign-in for the current actor."""
    pass


@dataclass
class EnableBiometricResult:
    success: bool
    message: str


class EnableBiometricHandler(GuardedUseCase):
    """
    Handler for enable biometric command.

    Checks device support first; an unsupported device fails with
    BiometricNotAvailableError, which is audited like any other failure.
    """

    name = "enable_biometric"
    success_event_type = SecurityEventType.MFA_ENABLED
    success_severity = SecurityEventSeverity.LOW
    success_action = "biometric_enabled"
    success_message = "Biometric authentication enabled successfully"
    failure_action = "biometric_enable_failed"
    failure_message = "Failed to enable biometric authentication"

    async def execute(
        self,
        command: EnableBiometricCommand,
        actor: Optional[Actor],
    ) -> GuardedOutcome:
        if not await self.account_store.is_biometric_available():
            raise BiometricNotAvailableError(reason="hardware_not_supported")

        await self.account_store.enable_biometric()

        return GuardedOutcome(
            result=EnableBiometricResult(success=True, message=self.success_message),
            metadata={"method": "biometric"},
        )
