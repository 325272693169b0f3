"""Configuration management for authguard."""

from .config_loader import ConfigLoader
from .config_models import AuditConfig, AuthGuardConfig, LoggingConfig, PermissionsConfig

__all__ = [
    "ConfigLoader",
    "AuthGuardConfig",
    "AuditConfig",
    "LoggingConfig",
    "PermissionsConfig",
]
