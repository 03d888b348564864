"""Core logging and diagnostics helpers."""
