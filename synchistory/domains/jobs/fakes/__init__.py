"""Fakes for the jobs domain."""
