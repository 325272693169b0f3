"""Repository interfaces (Ports)."""

from .account_store import AccountStore

__all__ = ["AccountStore"]
