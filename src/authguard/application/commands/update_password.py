"""Update password command and handler."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ...domain.exceptions import InputValidationError
from ...domain.models.account import Actor
from ...domain.models.security import SecurityEventSeverity, SecurityEventType
from .guarded import GuardedOutcome, GuardedUseCase


@dataclass
class UpdatePasswordCommand:
    """
    Command to replace the current actor's password.

    ``confirm_password`` is optional; when given it must equal
    ``new_password``.
    """
    current_password: str = field(repr=False)
    new_password: str = field(repr=False)
    confirm_password: Optional[str] = field(default=None, repr=False)


@dataclass
class UpdatePasswordResult:
    success: bool
    message: str


class UpdatePasswordHandler(GuardedUseCase):
    """
    Handler for update password command.

    Input rules are enforced before any account store call:
    1. Both passwords present
    2. Confirmation, if supplied, matches the new password
    3. New password differs from the current one

    Password strength and history rules belong to the account store, which
    reports them as PasswordPolicyViolationError.
    """

    name = "update_password"
    success_event_type = SecurityEventType.PASSWORD_CHANGED
    success_severity = SecurityEventSeverity.MEDIUM
    success_action = "password_updated"
    success_message = "Password updated successfully"
    failure_action = "password_update_failed"
    failure_message = "Failed to update password"

    def validate(self, command: UpdatePasswordCommand) -> None:
        if not command.current_password or not command.new_password:
            raise InputValidationError(
                "Current password and new password are required",
                field_name="new_password" if command.current_password else "current_password",
            )

        if command.confirm_password and command.new_password != command.confirm_password:
            raise InputValidationError(
                "New password and confirmation do not match",
                field_name="confirm_password",
            )

        if command.current_password == command.new_password:
            raise InputValidationError(
                "New password must be different from current password",
                field_name="new_password",
            )

    async def execute(
        self,
        command: UpdatePasswordCommand,
        actor: Optional[Actor],
    ) -> GuardedOutcome:
        await self.account_store.update_password(
            command.current_password,
            command.new_password,
        )

        return GuardedOutcome(
            result=UpdatePasswordResult(success=True, message=self.success_message),
            metadata={
                "method": "manual",
                "password_length": len(command.new_password),
            },
        )

    def failure_metadata(self, command: UpdatePasswordCommand) -> Dict[str, Any]:
        return {"method": "manual"}
