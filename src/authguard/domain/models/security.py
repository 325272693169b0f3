"""Security audit domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class SecurityEventType(str, Enum):
    """Kinds of audit events written through the account store."""
    LOGIN = "login"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    PASSWORD_CHANGED = "password_changed"
    MFA_ENABLED = "mfa_enabled"
    MFA_DISABLED = "mfa_disabled"
    BIOMETRIC_ENABLED = "biometric_enabled"
    PERMISSION_CHECK = "permission_check"
    SUSPICIOUS_ACTIVITY = "suspicious_activity"
    SESSION_TERMINATED = "session_terminated"


class SecurityEventSeverity(str, Enum):
    """Severity shared by audit events and security alerts."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RiskLevel(str, Enum):
    """Coarse classification of an alert set."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


_ESCALATION = {
    SecurityEventSeverity.LOW: SecurityEventSeverity.MEDIUM,
    SecurityEventSeverity.MEDIUM: SecurityEventSeverity.HIGH,
    SecurityEventSeverity.HIGH: SecurityEventSeverity.CRITICAL,
    SecurityEventSeverity.CRITICAL: SecurityEventSeverity.CRITICAL,
}


def escalate(severity: SecurityEventSeverity) -> SecurityEventSeverity:
    """Return the next severity up; CRITICAL stays CRITICAL."""
    return _ESCALATION[severity]


@dataclass(frozen=True)
class SecurityEventDetails:
    """Free-form payload of an audit event."""
    action: str
    message: Optional[str] = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Flatten into the wire shape: action, message, error, then metadata."""
        data: Dict[str, Any] = {"action": self.action}
        if self.message is not None:
            data["message"] = self.message
        if self.error is not None:
            data["error"] = self.error
        for key, value in self.metadata.items():
            data.setdefault(key, value)
        return data


@dataclass(frozen=True)
class SecurityEvent:
    """
    Immutable audit record for the outcome of one guarded operation.

    Written once through the account store and never updated or deleted
    by this layer.
    """
    id: str
    type: SecurityEventType
    user_id: str
    timestamp: datetime
    severity: SecurityEventSeverity
    details: SecurityEventDetails
    ip_address: str
    user_agent: str

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "type": self.type.value,
            "user_id": self.user_id,
            "timestamp": self.timestamp.isoformat(),
            "severity": self.severity.value,
            "details": self.details.to_dict(),
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
        }


@dataclass(frozen=True)
class SecurityAlert:
    """Alert produced by the account store, consumed read-only by risk scoring."""
    id: str
    type: str
    severity: SecurityEventSeverity
    message: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "SecurityAlert":
        """Create from dictionary."""
        return cls(
            id=str(data["id"]),
            type=str(data["type"]),
            severity=SecurityEventSeverity(str(data["severity"]).lower()),
            message=str(data.get("message", "")),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "type": self.type,
            "severity": self.severity.value,
            "message": self.message,
        }
