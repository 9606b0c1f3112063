"""Fakes for connection context lookups."""
