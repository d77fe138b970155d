"""
Health check API endpoints.

Routes: GET /ping

System role: Liveness HTTP API
"""

from fastapi import APIRouter
from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(tags=["health"])


@router.get("/ping", response_model=HealthResponse)
async def ping() -> HealthResponse:
    """Basic liveness check, open to unauthenticated callers."""
    return HealthResponse(status="healthy", message="pong")
