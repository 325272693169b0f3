"""Domain services."""

from .event_ids import (
    EventIdGenerator,
    SequentialEventIdGenerator,
    UuidEventIdGenerator,
    create_event_id_generator,
)
from .risk_scoring import (
    RiskAssessment,
    assess_alerts,
    calculate_risk_level,
    generate_recommendations,
)

__all__ = [
    "EventIdGenerator",
    "SequentialEventIdGenerator",
    "UuidEventIdGenerator",
    "create_event_id_generator",
    "RiskAssessment",
    "assess_alerts",
    "calculate_risk_level",
    "generate_recommendations",
]
