"""Fakes for workflow state lookups."""
