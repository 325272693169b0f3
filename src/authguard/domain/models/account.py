"""Account-side domain models returned by the account store."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class Actor:
    """The authenticated principal a use case runs on behalf of."""
    id: str
    email: Optional[str] = None
    roles: List[str] = field(default_factory=list)
    last_login_at: Optional[datetime] = None


@dataclass(frozen=True)
class ActiveSession:
    """A live session belonging to the current actor."""
    id: str
    device_id: Optional[str] = None
    created_at: Optional[datetime] = None
    last_active_at: Optional[datetime] = None
    ip_address: Optional[str] = None
    is_current: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "device_id": self.device_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_active_at": self.last_active_at.isoformat() if self.last_active_at else None,
            "ip_address": self.ip_address,
            "is_current": self.is_current,
        }


class MfaType(str, Enum):
    """Second factors the account store can enroll."""
    TOTP = "totp"
    SMS = "sms"
    EMAIL = "email"


@dataclass(frozen=True)
class MfaEnrollment:
    """Result of enrolling a second factor."""
    secret: Optional[str] = None
    qr_code: Optional[str] = None
    backup_codes: List[str] = field(default_factory=list)
