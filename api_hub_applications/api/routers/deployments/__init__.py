"""
Deployments router package.

Exports the router for API producer endpoints: deployment, promotion,
ownership and the APIM read views.
"""

from .deployments_router import router

__all__ = ["router"]
