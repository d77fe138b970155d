"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, api_hub_applications.api, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api_hub_applications import __version__
from api_hub_applications.api import api_router
from api_hub_applications.api.deps.dependencies import get_service_cache
from api_hub_applications.boundary.db.connection import close_mongo_client, get_database
from api_hub_applications.boundary.db.CRUD import AccessRequestCRUD, ApplicationCRUD, EventCRUD, TeamCRUD
from api_hub_applications.configs import get_hip_environments, get_settings
from api_hub_applications.observability.logger import configure_logging
from api_hub_applications.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = logging.getLogger("uvicorn")

    # Startup
    hip_environments = get_hip_environments()
    logger.info(
        "HIP environments loaded",
        extra={"environments": [environment.id for environment in hip_environments.environments]},
    )

    cache = get_service_cache()
    db = get_database()
    for crud in (ApplicationCRUD, TeamCRUD, AccessRequestCRUD, EventCRUD):
        await crud(db[crud.collection_name], cache.crypto).ensure_indexes()
    logger.info("Mongo indexes ensured")

    yield

    # Shutdown
    await cache.aclose()
    close_mongo_client()
    logger.info("Service cache cleared")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies and parameters as 400."""
    logging.getLogger(__name__).warning(
        "Invalid request",
        extra={"path": request.url.path, "errors": str(exc.errors())},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="API Hub Applications",
        description="Applications, teams, access requests and deployments for the API Hub",
        version=__version__,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "api_hub_applications.main:app",
        host="0.0.0.0",
        port=8000,
    )
