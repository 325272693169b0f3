"""
Guarded use-case template.

Every authentication use case runs the same sequence:

    validate -> authenticate -> execute -> audit -> return | raise

- validate: pure input checks on the command, before any I/O
- authenticate: look up the current actor; a missing actor raises
  UserNotAuthenticatedError and nothing is audited, since there is no
  user id to attribute the event to
- execute: the use case's call(s) into the account store
- audit: exactly one SecurityEvent, success or failure, never both

Anything raised by execute, including BaseException subclasses such as
asyncio.CancelledError, is audited as SUSPICIOUS_ACTIVITY one severity
level above the success event and then re-raised unchanged. This layer
never wraps or swallows it.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from ...domain.exceptions import AuthDomainError, UserNotAuthenticatedError
from ...domain.models.account import Actor
from ...domain.models.security import (
    SecurityEvent,
    SecurityEventDetails,
    SecurityEventSeverity,
    SecurityEventType,
    escalate,
)
from ...domain.repositories.account_store import AccountStore
from ...domain.services.event_ids import EventIdGenerator, SequentialEventIdGenerator
from ...domain.value_objects.request_context import DEFAULT_REQUEST_CONTEXT, RequestContext
from ...infrastructure.logging import AuthGuardLogger, logging_context


UNKNOWN_USER_ID = "unknown"
UNKNOWN_ERROR = "Unknown error"


def describe_failure(error: Any) -> str:
    """Best-effort, user-safe message for an audit record."""
    if isinstance(error, AuthDomainError):
        return error.message
    if isinstance(error, Exception) and str(error):
        return str(error)
    return UNKNOWN_ERROR


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class GuardedOutcome:
    """
    What a successful execute step hands back to the template.

    ``metadata`` is copied into the success event's details; ``severity``
    and ``user_id`` override the class defaults for this one event.
    """
    result: Any
    metadata: Dict[str, Any] = field(default_factory=dict)
    severity: Optional[SecurityEventSeverity] = None
    user_id: Optional[str] = None


class GuardedUseCase(ABC):
    """
    Base handler for a guarded authentication operation.

    Subclasses set the audit vocabulary as class attributes and implement
    ``execute``. They may override ``validate``, ``authenticate``,
    ``audit_user_id`` and ``failure_metadata``.

    Instances hold only immutable references and can be shared by
    concurrent callers.
    """

    name: str = "guarded_use_case"

    success_event_type: SecurityEventType = SecurityEventType.LOGIN
    success_severity: SecurityEventSeverity = SecurityEventSeverity.LOW
    failure_severity: Optional[SecurityEventSeverity] = None

    success_action: str = "operation_completed"
    success_message: str = "Operation completed"
    failure_action: str = "operation_failed"
    failure_message: str = "Operation failed"

    requires_actor: bool = True

    def __init__(
        self,
        account_store: AccountStore,
        id_generator: Optional[EventIdGenerator] = None,
        request_context: Optional[RequestContext] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize handler.

        Args:
            account_store: Port to the external account backend
            id_generator: Audit event id source (default: clock + sequence)
            request_context: Client facts stamped on events
            clock: Returns the event timestamp (default: UTC now)
        """
        if account_store is None:
            raise ValueError(f"AccountStore is required for {type(self).__name__}")
        self.account_store = account_store
        self.id_generator = id_generator or SequentialEventIdGenerator()
        self.request_context = request_context or DEFAULT_REQUEST_CONTEXT
        self.clock = clock or _utc_now
        self.logger = AuthGuardLogger.get_instance()

    async def handle(self, command: Any) -> Any:
        """
        Run the guarded sequence for ``command``.

        Args:
            command: Use-case specific command dataclass

        Returns:
            The use case's result object

        Raises:
            InputValidationError: If the command is rejected before I/O
            UserNotAuthenticatedError: If an actor is required and absent
            Exception: Any failure from the account store, unchanged
        """
        self.validate(command)

        actor = await self.authenticate(command)

        with logging_context(use_case=self.name, user_id=actor.id if actor else None):
            start_time = time.time()
            self.logger.info("Guarded operation started", extra={"action": self.success_action})

            try:
                outcome = await self.execute(command, actor)
            except BaseException as exc:
                # Cancellation and other non-Exception failures are audited too.
                self.logger.warning(
                    "Guarded operation failed",
                    extra={
                        "action": self.failure_action,
                        "error_type": type(exc).__name__,
                        "error_code": getattr(exc, "code", None),
                        "duration_seconds": round(time.time() - start_time, 3),
                    }
                )
                try:
                    await self._write_event(
                        user_id=self.audit_user_id(command, actor),
                        event_type=SecurityEventType.SUSPICIOUS_ACTIVITY,
                        severity=self.failure_severity or escalate(self.success_severity),
                        details=SecurityEventDetails(
                            action=self.failure_action,
                            message=self.failure_message,
                            error=describe_failure(exc),
                            metadata=self.failure_metadata(command),
                        ),
                    )
                except Exception as audit_exc:
                    # The operation's own failure is what callers match on.
                    self.logger.error(
                        "Failed to write security event",
                        extra={
                            "action": self.failure_action,
                            "error_type": type(audit_exc).__name__,
                        },
                        exc_info=audit_exc,
                    )
                raise

            event = await self._write_event(
                user_id=outcome.user_id or self.audit_user_id(command, actor),
                event_type=self.success_event_type,
                severity=outcome.severity or self.success_severity,
                details=SecurityEventDetails(
                    action=self.success_action,
                    message=self.success_message,
                    metadata=outcome.metadata,
                ),
            )
            self.logger.info(
                "Guarded operation completed",
                extra={
                    "action": self.success_action,
                    "event_id": event.id,
                    "duration_seconds": round(time.time() - start_time, 3),
                }
            )
            return outcome.result

    def validate(self, command: Any) -> None:
        """Reject bad input before any I/O. Default: accept everything."""
        return None

    async def authenticate(self, command: Any) -> Optional[Actor]:
        """
        Resolve the acting user.

        Returns:
            The current actor, or None for use cases that sign the user in

        Raises:
            UserNotAuthenticatedError: If an actor is required and absent
        """
        if not self.requires_actor:
            return None
        actor = await self.account_store.get_current_user()
        if actor is None:
            self.logger.info("Guarded operation rejected: no authenticated user",
                             extra={"use_case": self.name})
            raise UserNotAuthenticatedError()
        return actor

    @abstractmethod
    async def execute(self, command: Any, actor: Optional[Actor]) -> GuardedOutcome:
        """Perform the account store call(s) for this use case."""
        pass

    def audit_user_id(self, command: Any, actor: Optional[Actor]) -> str:
        """User id recorded on the audit event."""
        return actor.id if actor else UNKNOWN_USER_ID

    def failure_metadata(self, command: Any) -> Dict[str, Any]:
        """Extra details recorded on the failure event."""
        return {}

    def event_id(self, action: str) -> str:
        """Build an event id with a readable action prefix."""
        return self.id_generator.next_id(action.replace("_", "-"))

    async def _write_event(
        self,
        user_id: str,
        event_type: SecurityEventType,
        severity: SecurityEventSeverity,
        details: SecurityEventDetails,
    ) -> SecurityEvent:
        event = SecurityEvent(
            id=self.event_id(details.action),
            type=event_type,
            user_id=user_id,
            timestamp=self.clock(),
            severity=severity,
            details=details,
            ip_address=self.request_context.ip_address,
            user_agent=self.request_context.user_agent,
        )
        await self.account_store.log_security_event(event)
        self.logger.debug("Security event written", extra={"security_event": event.to_dict()})
        return event
