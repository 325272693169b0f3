"""Infrastructure layer: logging, configuration and presentation."""
