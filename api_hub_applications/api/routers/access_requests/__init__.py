"""
Access requests router package.

Exports the router for access request endpoints.
"""

from .access_requests_router import router

__all__ = ["router"]
