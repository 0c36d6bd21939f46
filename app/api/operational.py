"""
Operational endpoints: service root and version information
"""

import time
from datetime import datetime

from fastapi import APIRouter

from app.core.config import config

router = APIRouter()

# Track service start time
start_time = time.time()


@router.get("/")
async def root():
    """Service information"""
    return {
        "service": config.service_name,
        "version": config.service_version,
        "environment": config.environment,
        "message": "Yarn Review Service is running",
        "status": "operational",
    }


@router.get("/api/version")
def get_version():
    """Service version information for deployment tracking"""
    return {
        "service": config.service_name,
        "version": config.service_version,
        "api_version": config.api_version,
        "environment": config.environment,
        "uptime_seconds": round(time.time() - start_time, 2),
        "timestamp": datetime.now().isoformat(),
    }
