"""Command-line support code."""
