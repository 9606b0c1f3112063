"""Fakes for attempt log access."""
