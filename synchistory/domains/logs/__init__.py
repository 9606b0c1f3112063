"""Attempt log access."""
