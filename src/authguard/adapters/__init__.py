"""Adapters for external interfaces."""
