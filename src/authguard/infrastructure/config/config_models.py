"""Configuration data models using Pydantic."""

from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    file: str = Field(
        default="",
        description="JSON log file path (empty disables file logging)"
    )
    console: bool = Field(
        default=True,
        description="Enable console logging"
    )
    rotation: str = Field(
        default="daily",
        description="Log rotation strategy (daily, none)"
    )
    retention_days: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Number of days to retain logs"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}")
        return v

    @field_validator('rotation')
    @classmethod
    def validate_rotation(cls, v):
        """Ensure rotation strategy is valid."""
        valid_strategies = ["daily", "none"]
        v = v.lower()
        if v not in valid_strategies:
            raise ValueError(f"rotation must be one of {valid_strategies}")
        return v


class AuditConfig(BaseModel):
    """Defaults stamped on security events."""
    ip_address: str = Field(
        default="Unknown",
        description="IP address used when the caller supplies no request context"
    )
    user_agent: str = Field(
        default="React Native App",
        description="User agent used when the caller supplies no request context"
    )
    id_strategy: str = Field(
        default="sequential",
        description="Event id suffix strategy (sequential, uuid)"
    )

    @field_validator('id_strategy')
    @classmethod
    def validate_id_strategy(cls, v):
        """Ensure id strategy is valid."""
        valid_strategies = ["sequential", "uuid"]
        v = v.lower()
        if v not in valid_strategies:
            raise ValueError(f"id_strategy must be one of {valid_strategies}")
        return v


class PermissionsConfig(BaseModel):
    """Permission check configuration."""
    sensitive: List[str] = Field(
        default_factory=lambda: [
            "admin",
            "delete",
            "manage_users",
            "view_sensitive_data",
            "system_config",
        ],
        description="Permission name fragments flagged as sensitive in audit events"
    )

    @field_validator('sensitive', mode="before")
    @classmethod
    def split_sensitive(cls, v):
        """Accept a comma separated string (e.g. from the environment)."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v


class AuthGuardConfig(BaseModel):
    """Complete authguard configuration."""
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    permissions: PermissionsConfig = Field(default_factory=PermissionsConfig)

    def to_yaml(self) -> str:
        """Convert configuration to YAML string."""
        import yaml
        return yaml.dump(self.model_dump(), default_flow_style=False, sort_keys=False)
