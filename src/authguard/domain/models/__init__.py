"""Domain models."""

from .account import ActiveSession, Actor, MfaEnrollment, MfaType
from .security import (
    RiskLevel,
    SecurityAlert,
    SecurityEvent,
    SecurityEventDetails,
    SecurityEventSeverity,
    SecurityEventType,
    escalate,
)

__all__ = [
    "ActiveSession",
    "Actor",
    "MfaEnrollment",
    "MfaType",
    "RiskLevel",
    "SecurityAlert",
    "SecurityEvent",
    "SecurityEventDetails",
    "SecurityEventSeverity",
    "SecurityEventType",
    "escalate",
]
