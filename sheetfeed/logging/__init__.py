"""Logging setup and structured error log."""
