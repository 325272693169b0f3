"""Account store interface (Port)."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.account import Actor, ActiveSession, MfaEnrollment, MfaType
from ..models.security import SecurityAlert, SecurityEvent


class AccountStore(ABC):
    """
    Port for the external account backend.

    Credential storage, OAuth token exchange, the biometric bridge and the
    session store live behind this interface. Every method may fail; the
    use cases treat failures as opaque unless they are already domain
    errors.
    """

    @abstractmethod
    async def get_current_user(self) -> Optional[Actor]:
        """
        Look up the currently authenticated actor.

        Returns:
            The actor, or None when nobody is signed in
        """
        pass

    @abstractmethod
    async def log_security_event(self, event: SecurityEvent) -> None:
        """
        Persist an audit record.

        Args:
            event: Event to write
        """
        pass

    @abstractmethod
    async def is_biometric_available(self) -> bool:
        """Whether this device can do biometric authentication."""
        pass

    @abstractmethod
    async def enable_biometric(self) -> None:
        """Turn on biometric sign-in for the current actor."""
        pass

    @abstractmethod
    async def authenticate_with_biometric(self) -> Actor:
        """
        Sign in with the device biometric sensor.

        Returns:
            The actor that signed in
        """
        pass

    @abstractmethod
    async def update_password(self, current_password: str, new_password: str) -> None:
        """
        Replace the current actor's password.

        Args:
            current_password: Password being replaced
            new_password: Replacement password
        """
        pass

    @abstractmethod
    async def get_active_sessions(self) -> List[ActiveSession]:
        """List the current actor's live sessions."""
        pass

    @abstractmethod
    async def check_suspicious_activity(self) -> List[SecurityAlert]:
        """Fetch open security alerts for the current actor."""
        pass

    @abstractmethod
    async def has_permission(self, permission: str, user_id: str) -> bool:
        """
        Check whether a user holds a permission.

        Args:
            permission: Permission name, e.g. "manage_users"
            user_id: User to check

        Returns:
            True if granted
        """
        pass

    @abstractmethod
    async def get_user_roles(self, user_id: str) -> List[str]:
        """List role names assigned to a user."""
        pass

    @abstractmethod
    async def login_with_google(self) -> Actor:
        """
        Run the Google OAuth sign-in flow.

        Returns:
            The actor that signed in
        """
        pass

    @abstractmethod
    async def enable_mfa(self, mfa_type: MfaType) -> MfaEnrollment:
        """
        Enroll a second factor for the current actor.

        Args:
            mfa_type: Factor to enroll

        Returns:
            Enrollment data (secret, QR code, backup codes)
        """
        pass
