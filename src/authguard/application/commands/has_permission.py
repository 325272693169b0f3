"""Permission check command and handler."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ...domain.models.account import Actor
from ...domain.models.security import SecurityEventSeverity, SecurityEventType
from .guarded import GuardedOutcome, GuardedUseCase


DEFAULT_SENSITIVE_PERMISSIONS = (
    "admin",
    "delete",
    "manage_users",
    "view_sensitive_data",
    "system_config",
)


@dataclass
class HasPermissionCommand:
    """
    Command to check a permission.

    Without ``user_id`` the current actor is checked.
    """
    permission: str
    user_id: Optional[str] = None
    resource: Optional[str] = None
    action: Optional[str] = None


@dataclass
class HasPermissionResult:
    has_permission: bool
    user_roles: List[str] = field(default_factory=list)
    reason: str = ""


class HasPermissionHandler(GuardedUseCase):
    """
    Handler for has permission command.

    Every check is audited. Checks on permissions containing one of the
    sensitive fragments are flagged with ``sensitive: True``.
    """

    name = "has_permission"
    success_event_type = SecurityEventType.PERMISSION_CHECK
    success_severity = SecurityEventSeverity.LOW
    success_action = "permission_check"
    success_message = "Permission check completed"
    failure_action = "permission_check_failed"
    failure_message = "Failed to check user permission"

    def __init__(
        self,
        *args: Any,
        sensitive_permissions: Optional[Iterable[str]] = None,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.sensitive_permissions = tuple(
            sensitive_permissions if sensitive_permissions is not None
            else DEFAULT_SENSITIVE_PERMISSIONS
        )

    def is_sensitive(self, permission: str) -> bool:
        return any(fragment in permission for fragment in self.sensitive_permissions)

    async def authenticate(self, command: HasPermissionCommand) -> Optional[Actor]:
        if command.user_id:
            return None
        return await super().authenticate(command)

    def audit_user_id(self, command: HasPermissionCommand, actor: Optional[Actor]) -> str:
        return command.user_id or super().audit_user_id(command, actor)

    async def execute(
        self,
        command: HasPermissionCommand,
        actor: Optional[Actor],
    ) -> GuardedOutcome:
        target_user_id = self.audit_user_id(command, actor)

        granted = bool(await self.account_store.has_permission(command.permission, target_user_id))
        user_roles = list(await self.account_store.get_user_roles(target_user_id))

        reason = (
            "Permission granted" if granted
            else f"User lacks required permission: {command.permission}"
        )
        return GuardedOutcome(
            result=HasPermissionResult(
                has_permission=granted,
                user_roles=user_roles,
                reason=reason,
            ),
            metadata={
                "permission": command.permission,
                "resource": command.resource,
                "action_type": command.action,
                "has_permission": granted,
                "user_roles": user_roles,
                "sensitive": self.is_sensitive(command.permission),
            },
        )

    def failure_metadata(self, command: HasPermissionCommand) -> Dict[str, Any]:
        return {
            "permission": command.permission,
            "sensitive": self.is_sensitive(command.permission),
        }
