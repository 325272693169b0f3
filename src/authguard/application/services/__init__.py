"""Application services."""

from .auth_orchestrator import AuthOrchestrator

__all__ = ["AuthOrchestrator"]
