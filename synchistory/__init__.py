"""Sync job history query layer."""
