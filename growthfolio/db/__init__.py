"""growthfolio persistence layer.

Provides DuckDB-based storage for per-user portfolio snapshots. The
store is keyed by an opaque user id supplied by the identity provider;
anonymous sessions are never written.
"""
