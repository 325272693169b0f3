"""Google OAuth sign-in command and handler."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from ...domain.models.account import Actor
from ...domain.models.security import SecurityEventSeverity, SecurityEventType
from .guarded import GuardedOutcome, GuardedUseCase


NEW_USER_INACTIVITY = timedelta(days=365)


@dataclass
class LoginWithGoogleCommand:
    """Command to sign in through Google OAuth."""
    pass


@dataclass
class LoginWithGoogleResult:
    success: bool
    user: Actor
    is_new_user: bool
    message: str


class LoginWithGoogleHandler(GuardedUseCase):
    """
    Handler for Google sign-in.

    There is no actor before the sign-in, so a failed attempt is audited
    against the "unknown" user.
    """

    name = "login_with_google"
    requires_actor = False
    success_event_type = SecurityEventType.LOGIN
    success_severity = SecurityEventSeverity.LOW
    success_action = "google_oauth_login"
    success_message = "Google OAuth login successful"
    failure_action = "google_oauth_failed"
    failure_message = "Google OAuth login failed"

    def is_new_user(self, user: Actor) -> bool:
        """A user is new with no previous login, or none in the last year."""
        if user.last_login_at is None:
            return True
        last_login = user.last_login_at
        if last_login.tzinfo is None:
            last_login = last_login.replace(tzinfo=timezone.utc)
        now = self.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now - last_login > NEW_USER_INACTIVITY

    async def execute(
        self,
        command: LoginWithGoogleCommand,
        actor: Optional[Actor],
    ) -> GuardedOutcome:
        user = await self.account_store.login_with_google()
        is_new_user = self.is_new_user(user)

        return GuardedOutcome(
            result=LoginWithGoogleResult(
                success=True,
                user=user,
                is_new_user=is_new_user,
                message=self.success_message,
            ),
            metadata={
                "method": "oauth",
                "provider": "google",
                "is_new_user": is_new_user,
            },
            user_id=user.id,
        )

    def failure_metadata(self, command: LoginWithGoogleCommand) -> Dict[str, Any]:
        return {"method": "oauth", "provider": "google"}
