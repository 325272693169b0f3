"""Enable multi-factor authentication command and handler."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ...domain.exceptions import InputValidationError
from ...domain.models.account import Actor, MfaType
from ...domain.models.security import SecurityEventSeverity, SecurityEventType
from .guarded import GuardedOutcome, GuardedUseCase


@dataclass
class EnableMfaCommand:
    """Command to enroll a second factor. SMS needs a phone number."""
    mfa_type: MfaType
    phone_number: Optional[str] = field(default=None, repr=False)


@dataclass
class EnableMfaResult:
    success: bool
    secret: Optional[str] = None
    qr_code: Optional[str] = None
    backup_codes: List[str] = field(default_factory=list)


class EnableMfaHandler(GuardedUseCase):
    """Handler for enable MFA command."""

    name = "enable_mfa"
    success_event_type = SecurityEventType.MFA_ENABLED
    success_severity = SecurityEventSeverity.LOW
    success_action = "mfa_enabled"
    success_message = "MFA enabled successfully"
    failure_action = "mfa_enable_failed"
    failure_message = "Failed to enable MFA"

    def validate(self, command: EnableMfaCommand) -> None:
        if MfaType(command.mfa_type) == MfaType.SMS and not command.phone_number:
            raise InputValidationError(
                "Phone number is required for SMS MFA",
                field_name="phone_number",
            )

    async def execute(
        self,
        command: EnableMfaCommand,
        actor: Optional[Actor],
    ) -> GuardedOutcome:
        mfa_type = MfaType(command.mfa_type)
        enrollment = await self.account_store.enable_mfa(mfa_type)

        return GuardedOutcome(
            result=EnableMfaResult(
                success=True,
                secret=enrollment.secret,
                qr_code=enrollment.qr_code,
                backup_codes=list(enrollment.backup_codes),
            ),
            metadata={"mfa_type": mfa_type.value},
        )

    def failure_metadata(self, command: EnableMfaCommand) -> Dict[str, Any]:
        return {"mfa_type": MfaType(command.mfa_type).value}
