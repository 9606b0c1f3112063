"""Orchestration workflow state lookups."""
