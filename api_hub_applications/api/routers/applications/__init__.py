"""
Applications router package.

Exports the router for application management endpoints.
"""

from .applications_router import router

__all__ = ["router"]
