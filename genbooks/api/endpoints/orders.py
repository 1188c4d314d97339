import logging
from fastapi import APIRouter, Depends, HTTPException

from genbooks.api.deps import get_order_service
from genbooks.core.exceptions import InvalidRequestError, StorageError
from genbooks.schemas.order import OrderCreateRequest, OrderResponse
from genbooks.services.order_service import OrderService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=OrderResponse)
async def create_order(
    order_in: OrderCreateRequest,
    service: OrderService = Depends(get_order_service),
):
    """
    Create a pending order.

    Accepts: firstName, lastName, email, phone, totalAmount, currency
    Returns: id, status
    """
    try:
        result = await service.submit_order(order_in)
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except StorageError as e:
        logger.error(f"Create order error: {e}")
        raise HTTPException(status_code=500, detail="Failed to create order")
    return OrderResponse(**result)
