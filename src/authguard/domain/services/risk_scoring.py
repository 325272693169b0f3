"""
Risk scoring for security alerts.

Reduces an alert collection to a coarse risk level and a list of
recommended actions. Both functions are pure: the result depends only on
the multiset of alerts, not on their order, the clock or any stored state.

Thresholds:
- any CRITICAL alert            -> critical
- more than 2 HIGH alerts       -> high
- any HIGH, or more than 3 MEDIUM -> medium
- otherwise (including no alerts) -> low
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List

from ..models.security import RiskLevel, SecurityAlert, SecurityEventSeverity


HIGH_ALERT_THRESHOLD = 2
MEDIUM_ALERT_THRESHOLD = 3

BASE_RECOMMENDATIONS = {
    RiskLevel.CRITICAL: (
        "Immediately change your password",
        "Enable MFA if not already active",
        "Review recent account activity",
        "Contact security team if suspicious activity continues",
    ),
    RiskLevel.HIGH: (
        "Consider changing your password",
        "Enable additional security measures",
        "Review login locations and devices",
    ),
    RiskLevel.MEDIUM: (
        "Monitor account activity closely",
        "Ensure MFA is enabled",
    ),
    RiskLevel.LOW: (
        "Continue following security best practices",
    ),
}

# Scanned in this order; each type adds at most one line.
ALERT_TYPE_RECOMMENDATIONS = (
    ("multiple_failed_logins", "Consider enabling account lockout protection"),
    ("unusual_location", "Verify recent login locations"),
    ("new_device", "Review authorized devices"),
)


@dataclass(frozen=True)
class RiskAssessment:
    """Risk level plus the recommendations derived from it."""
    risk_level: RiskLevel
    recommendations: List[str] = field(default_factory=list)
    alert_count: int = 0

    @property
    def has_alerts(self) -> bool:
        return self.alert_count > 0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "risk_level": self.risk_level.value,
            "recommendations": list(self.recommendations),
            "alert_count": self.alert_count,
            "has_alerts": self.has_alerts,
        }


def calculate_risk_level(alerts: Iterable[SecurityAlert]) -> RiskLevel:
    """
    Classify an alert collection.

    Args:
        alerts: Alerts reported by the account store

    Returns:
        The most severe risk level whose threshold is met
    """
    counts = Counter(SecurityEventSeverity(alert.severity) for alert in alerts)

    if counts[SecurityEventSeverity.CRITICAL] > 0:
        return RiskLevel.CRITICAL
    if counts[SecurityEventSeverity.HIGH] > HIGH_ALERT_THRESHOLD:
        return RiskLevel.HIGH
    if (
        counts[SecurityEventSeverity.HIGH] > 0
        or counts[SecurityEventSeverity.MEDIUM] > MEDIUM_ALERT_THRESHOLD
    ):
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def generate_recommendations(
    alerts: Iterable[SecurityAlert],
    risk_level: RiskLevel,
) -> List[str]:
    """
    Build the recommendation list for an assessment.

    The block for ``risk_level`` comes first, followed by one line per
    recognized alert type present in ``alerts``.

    Args:
        alerts: Alerts the risk level was computed from
        risk_level: Result of ``calculate_risk_level``

    Returns:
        Ordered list of recommendations
    """
    recommendations = list(BASE_RECOMMENDATIONS[RiskLevel(risk_level)])

    alert_types = {alert.type for alert in alerts}
    for alert_type, recommendation in ALERT_TYPE_RECOMMENDATIONS:
        if alert_type in alert_types:
            recommendations.append(recommendation)

    return recommendations


def assess_alerts(alerts: Iterable[SecurityAlert]) -> RiskAssessment:
    """Run both steps over ``alerts`` and bundle the result."""
    alerts = list(alerts)
    risk_level = calculate_risk_level(alerts)
    return RiskAssessment(
        risk_level=risk_level,
        recommendations=generate_recommendations(alerts, risk_level),
        alert_count=len(alerts),
    )
