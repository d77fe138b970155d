"""Use case orchestration: services and their helpers."""
