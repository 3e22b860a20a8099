"""Command-line support for bootcheck: exit codes, context and output helpers."""
