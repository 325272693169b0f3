"""Application layer: guarded use cases and the orchestrator."""
