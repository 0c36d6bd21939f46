"""
Admin API endpoints
Operational repair of cross-collection review references
"""

from fastapi import APIRouter, Depends, Query

from app.core.errors import ErrorResponseModel
from app.core.logger import logger
from app.dependencies.auth import require_admin
from app.dependencies.services import get_repair_service
from app.models.user import User
from app.schemas.repair import RepairReport
from app.services.repair import ConsistencyRepairService

router = APIRouter()


@router.post(
    "/repair",
    response_model=RepairReport,
    responses={401: {"model": ErrorResponseModel}, 403: {"model": ErrorResponseModel}},
    summary="Run the consistency repair pass",
)
async def run_repair(
    dry_run: bool = Query(False, description="Only report what would be repaired"),
    user: User = Depends(require_admin),
    service: ConsistencyRepairService = Depends(get_repair_service),
):
    """
    Find orphan reviews, dangling review references and drifted listing
    averages, and fix them unless ``dry_run`` is set.
    """
    logger.info("Repair requested", user_id=user.id, metadata={"event": "repair_requested", "dry_run": dry_run})
    return await service.run(dry_run=dry_run)
