"""Command-line interface for lift-check."""
