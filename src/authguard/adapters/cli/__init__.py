"""Command-line interface for authguard."""
