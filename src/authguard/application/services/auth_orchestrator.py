"""
Caller-facing orchestrator for the authentication use cases.

Use-case handlers re-raise whatever the account store throws. This layer
is where failures outside the error taxonomy are wrapped in
GenericAuthError, so UI code only ever has to match on taxonomy variants.
"""

from typing import Any, List, Optional

from ...domain.exceptions import AuthDomainError, GenericAuthError, UserNotAuthenticatedError
from ...domain.models.account import ActiveSession, MfaType
from ...domain.repositories.account_store import AccountStore
from ...domain.services.event_ids import EventIdGenerator, create_event_id_generator
from ...domain.value_objects.request_context import RequestContext
from ...infrastructure.config import AuthGuardConfig, ConfigLoader
from ...infrastructure.logging import AuthGuardLogger
from ..commands import (
    GuardedUseCase,
    AuthenticateWithBiometricCommand,
    AuthenticateWithBiometricHandler,
    AuthenticateWithBiometricResult,
    CheckSuspiciousActivityCommand,
    CheckSuspiciousActivityHandler,
    CheckSuspiciousActivityResult,
    EnableBiometricCommand,
    EnableBiometricHandler,
    EnableBiometricResult,
    EnableMfaCommand,
    EnableMfaHandler,
    EnableMfaResult,
    GetActiveSessionsCommand,
    GetActiveSessionsHandler,
    HasPermissionCommand,
    HasPermissionHandler,
    LoginWithGoogleCommand,
    LoginWithGoogleHandler,
    LoginWithGoogleResult,
    UpdatePasswordCommand,
    UpdatePasswordHandler,
    UpdatePasswordResult,
)


class AuthOrchestrator:
    """
    Facade over the guarded use cases.

    Taxonomy errors pass through unchanged; anything else becomes a
    GenericAuthError with the original as its cause.
    """

    def __init__(
        self,
        account_store: AccountStore,
        config: Optional[AuthGuardConfig] = None,
        id_generator: Optional[EventIdGenerator] = None,
        request_context: Optional[RequestContext] = None,
    ):
        """
        Initialize orchestrator and wire one handler per use case.

        Args:
            account_store: Port to the external account backend
            config: Loaded configuration (default: built-in defaults)
            id_generator: Audit event id source (default: from config)
            request_context: Client facts (default: from config audit section)
        """
        self.account_store = account_store
        self.config = config or AuthGuardConfig()
        self.id_generator = id_generator or create_event_id_generator(self.config.audit.id_strategy)
        self.request_context = request_context or RequestContext(
            ip_address=self.config.audit.ip_address,
            user_agent=self.config.audit.user_agent,
        )
        self.logger = AuthGuardLogger.get_instance()

        deps = dict(
            account_store=account_store,
            id_generator=self.id_generator,
            request_context=self.request_context,
        )
        self.enable_biometric_handler = EnableBiometricHandler(**deps)
        self.authenticate_with_biometric_handler = AuthenticateWithBiometricHandler(**deps)
        self.update_password_handler = UpdatePasswordHandler(**deps)
        self.get_active_sessions_handler = GetActiveSessionsHandler(**deps)
        self.check_suspicious_activity_handler = CheckSuspiciousActivityHandler(**deps)
        self.has_permission_handler = HasPermissionHandler(
            sensitive_permissions=self.config.permissions.sensitive,
            **deps,
        )
        self.login_with_google_handler = LoginWithGoogleHandler(**deps)
        self.enable_mfa_handler = EnableMfaHandler(**deps)

    @classmethod
    def create(
        cls,
        account_store: AccountStore,
        config_path: Optional[str] = None,
    ) -> "AuthOrchestrator":
        """
        Load configuration, configure logging and wire the handlers.

        Args:
            account_store: Port to the external account backend
            config_path: Optional path to configuration file

        Returns:
            Ready-to-use orchestrator
        """
        config = ConfigLoader.load(config_path)
        AuthGuardLogger.from_config(config.logging)
        return cls(account_store, config=config)

    def with_request_context(self, request_context: RequestContext) -> "AuthOrchestrator":
        """Return an orchestrator that stamps ``request_context`` on events."""
        return AuthOrchestrator(
            self.account_store,
            config=self.config,
            id_generator=self.id_generator,
            request_context=request_context,
        )

    async def _run(self, operation: str, handler: GuardedUseCase, command: Any) -> Any:
        try:
            return await handler.handle(command)
        except AuthDomainError:
            raise
        except Exception as exc:
            self.logger.error(
                "Unclassified failure wrapped",
                extra={"operation": operation, "error_type": type(exc).__name__},
            )
            raise GenericAuthError(cause=exc) from exc

    async def enable_biometric(self) -> EnableBiometricResult:
        return await self._run(
            "enable_biometric",
            self.enable_biometric_handler,
            EnableBiometricCommand(),
        )

    async def authenticate_with_biometric(self) -> AuthenticateWithBiometricResult:
        return await self._run(
            "authenticate_with_biometric",
            self.authenticate_with_biometric_handler,
            AuthenticateWithBiometricCommand(),
        )

    async def update_password(
        self,
        current_password: str,
        new_password: str,
        confirm_password: Optional[str] = None,
    ) -> UpdatePasswordResult:
        command = UpdatePasswordCommand(
            current_password=current_password,
            new_password=new_password,
            confirm_password=confirm_password,
        )
        return await self._run("update_password", self.update_password_handler, command)

    async def get_active_sessions(self) -> List[ActiveSession]:
        result = await self._run(
            "get_active_sessions",
            self.get_active_sessions_handler,
            GetActiveSessionsCommand(),
        )
        return result.sessions

    async def check_suspicious_activity(self) -> CheckSuspiciousActivityResult:
        return await self._run(
            "check_suspicious_activity",
            self.check_suspicious_activity_handler,
            CheckSuspiciousActivityCommand(),
        )

    async def has_permission(
        self,
        permission: str,
        user_id: Optional[str] = None,
        resource: Optional[str] = None,
        action: Optional[str] = None,
    ) -> bool:
        """
        Check a permission, failing closed.

        Only UserNotAuthenticatedError propagates; any other failure
        denies the permission.
        """
        command = HasPermissionCommand(
            permission=permission,
            user_id=user_id,
            resource=resource,
            action=action,
        )
        try:
            result = await self.has_permission_handler.handle(command)
        except UserNotAuthenticatedError:
            raise
        except Exception as exc:
            self.logger.warning(
                "Permission check failed, denying",
                extra={"permission": permission, "error_type": type(exc).__name__},
            )
            return False
        return result.has_permission

    async def login_with_google(self) -> LoginWithGoogleResult:
        return await self._run(
            "login_with_google",
            self.login_with_google_handler,
            LoginWithGoogleCommand(),
        )

    async def enable_mfa(
        self,
        mfa_type: MfaType,
        phone_number: Optional[str] = None,
    ) -> EnableMfaResult:
        command = EnableMfaCommand(mfa_type=mfa_type, phone_number=phone_number)
        return await self._run("enable_mfa", self.enable_mfa_handler, command)
