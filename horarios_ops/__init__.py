"""Offline maintenance tooling for schedule exports (audit, migration, suggestions)."""
