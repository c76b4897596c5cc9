"""Ecosystem updaters: one per supported package manager."""
