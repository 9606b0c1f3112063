"""Temporal integration."""
