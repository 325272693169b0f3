"""Domain layer: error taxonomy, audit models, risk scoring and ports."""
