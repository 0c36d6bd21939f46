"""
Health check endpoints
"""

import time
from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from app.core.config import config
from app.core.errors import StoreUnavailable
from app.core.logger import logger
from app.db.mongodb import get_database

router = APIRouter()


@router.get("/health")
def health_check():
    """Liveness probe"""
    return {
        "status": "healthy",
        "service": config.service_name,
        "timestamp": datetime.now().isoformat(),
        "version": config.api_version,
    }


@router.get("/health/ready")
async def readiness_check():
    """Readiness probe - the database must answer a ping"""
    check_start = time.time()
    try:
        database = await get_database()
        await database.command("ping")
    except (PyMongoError, StoreUnavailable) as e:
        logger.error(
            "Readiness check failed",
            error=e,
            metadata={"event": "readiness_check_failed"},
        )
        return JSONResponse(
            status_code=503,
            content={
                "status": "not ready",
                "service": config.service_name,
                "timestamp": datetime.now().isoformat(),
                "checks": [{"name": "database", "status": "unhealthy"}],
            },
        )

    return {
        "status": "ready",
        "service": config.service_name,
        "timestamp": datetime.now().isoformat(),
        "checks": [{
            "name": "database",
            "status": "healthy",
            "response_time_ms": round((time.time() - check_start) * 1000, 2),
        }],
    }
