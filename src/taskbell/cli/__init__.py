"""Command-line entry point and wiring."""
