"""Scheduling of snapshot persistence, outside the core."""
