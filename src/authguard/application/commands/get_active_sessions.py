"""List active sessions command and handler."""

from dataclasses import dataclass, field
from typing import List, Optional

from ...domain.models.account import ActiveSession, Actor
from ...domain.models.security import SecurityEventSeverity, SecurityEventType
from .guarded import GuardedOutcome, GuardedUseCase


@dataclass
class GetActiveSessionsCommand:
    """Command to list the current actor's live sessions."""
    pass


@dataclass
class GetActiveSessionsResult:
    sessions: List[ActiveSession] = field(default_factory=list)

    @property
    def total_sessions(self) -> int:
        return len(self.sessions)


class GetActiveSessionsHandler(GuardedUseCase):
    """Handler for get active sessions command."""

    name = "get_active_sessions"
    success_event_type = SecurityEventType.LOGIN
    success_severity = SecurityEventSeverity.LOW
    success_action = "sessions_viewed"
    success_message = "User viewed active sessions"
    failure_action = "sessions_view_failed"
    failure_message = "Failed to retrieve active sessions"

    async def execute(
        self,
        command: GetActiveSessionsCommand,
        actor: Optional[Actor],
    ) -> GuardedOutcome:
        sessions = list(await self.account_store.get_active_sessions())

        return GuardedOutcome(
            result=GetActiveSessionsResult(sessions=sessions),
            metadata={"session_count": len(sessions)},
        )
