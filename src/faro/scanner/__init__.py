"""Ecosystem scanners: one per supported package manager."""
