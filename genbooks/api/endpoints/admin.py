import logging
from fastapi import APIRouter, Depends, HTTPException

from genbooks.api.deps import get_admin_service, get_current_admin
from genbooks.core.exceptions import StorageError
from genbooks.schemas.admin import OrdersResponse, StatsResponse
from genbooks.services.admin_service import AdminService

router = APIRouter(dependencies=[Depends(get_current_admin)])
logger = logging.getLogger(__name__)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(service: AdminService = Depends(get_admin_service)):
    """Order counts, revenue from succeeded payments and the 10 latest payments."""
    try:
        return await service.get_stats()
    except StorageError as e:
        logger.error(f"Stats error: {e}")
        raise HTTPException(status_code=500, detail="Failed to get stats")


@router.get("/orders", response_model=OrdersResponse)
async def list_orders(service: AdminService = Depends(get_admin_service)):
    try:
        orders = await service.list_all_orders()
    except StorageError as e:
        logger.error(f"Get orders error: {e}")
        raise HTTPException(status_code=500, detail="Failed to get orders")
    return {"orders": orders}
