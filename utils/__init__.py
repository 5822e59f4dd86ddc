"""Shared helpers: payload validation and CLI output formatting."""
