"""Check suspicious activity command and handler."""

from dataclasses import dataclass, field
from typing import List, Optional

from ...domain.models.account import Actor
from ...domain.models.security import (
    RiskLevel,
    SecurityAlert,
    SecurityEventSeverity,
    SecurityEventType,
)
from ...domain.services.risk_scoring import calculate_risk_level, generate_recommendations
from .guarded import GuardedOutcome, GuardedUseCase


# Risk levels without an entry are audited at LOW.
_RISK_EVENT_SEVERITY = {
    RiskLevel.CRITICAL: SecurityEventSeverity.CRITICAL,
    RiskLevel.HIGH: SecurityEventSeverity.HIGH,
}


@dataclass
class CheckSuspiciousActivityCommand:
    """Command to assess the current actor's open security alerts."""
    pass


@dataclass
class CheckSuspiciousActivityResult:
    alerts: List[SecurityAlert]
    risk_level: RiskLevel
    recommendations: List[str] = field(default_factory=list)

    @property
    def has_alerts(self) -> bool:
        return len(self.alerts) > 0


class CheckSuspiciousActivityHandler(GuardedUseCase):
    """
    Handler for check suspicious activity command.

    Orchestrates:
    1. Fetch alerts from the account store
    2. Reduce them to a risk level
    3. Build recommendations
    4. Audit the check at a severity matching the risk level
    """

    name = "check_suspicious_activity"
    success_event_type = SecurityEventType.SUSPICIOUS_ACTIVITY
    success_severity = SecurityEventSeverity.LOW
    success_action = "security_check_performed"
    success_message = "Suspicious activity check completed"
    failure_action = "security_check_failed"
    failure_message = "Failed to check suspicious activity"

    async def execute(
        self,
        command: CheckSuspiciousActivityCommand,
        actor: Optional[Actor],
    ) -> GuardedOutcome:
        alerts = list(await self.account_store.check_suspicious_activity())

        risk_level = calculate_risk_level(alerts)
        recommendations = generate_recommendations(alerts, risk_level)

        return GuardedOutcome(
            result=CheckSuspiciousActivityResult(
                alerts=alerts,
                risk_level=risk_level,
                recommendations=recommendations,
            ),
            metadata={
                "alert_count": len(alerts),
                "risk_level": risk_level.value,
                "has_alerts": len(alerts) > 0,
            },
            severity=_RISK_EVENT_SEVERITY.get(risk_level, SecurityEventSeverity.LOW),
        )
