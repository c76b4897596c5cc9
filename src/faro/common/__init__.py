"""Shared helpers (logging, subprocess execution, timestamps)."""
