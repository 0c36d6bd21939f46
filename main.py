"""
FastAPI Application - Yarn Review Service
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError

from app.core.config import config
from app.core.errors import (
    ErrorResponse,
    error_response_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.core.logger import logger
from app.core.telemetry import instrument_app
from app.db.mongodb import connect_to_mongo, close_mongo_connection
from app.api import admin, authors, health, listings, operational, reviews
from app.middleware import CorrelationIdMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Yarn Review Service...")
    await connect_to_mongo()

    logger.info(
        "Yarn Review Service started successfully",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port,
        },
    )

    yield

    logger.info("Shutting down Yarn Review Service...")
    await close_mongo_connection()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Yarn Review Service",
        description="Yarn listings with author reviews and live average ratings",
        version=config.service_version,
        lifespan=lifespan,
    )

    instrument_app(app)

    app.add_exception_handler(ErrorResponse, error_response_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(operational.router, tags=["operational"])
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(authors.router, prefix="/api", tags=["authors"])
    app.include_router(listings.router, prefix="/api/listings", tags=["listings"])
    app.include_router(reviews.router, prefix="/api", tags=["reviews"])
    app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(
        f"Starting {config.service_name} on port {config.port}",
        metadata={"service_name": config.service_name, "port": config.port},
    )

    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.environment == "development",
    )
