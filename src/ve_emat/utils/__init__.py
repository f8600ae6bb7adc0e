"""Shared helpers: error taxonomy and CSV reading."""
