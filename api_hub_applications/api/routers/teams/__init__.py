"""
Teams router package.

Exports the router for team management endpoints.
"""

from .teams_router import router

__all__ = ["router"]
