import logging
from fastapi import APIRouter, Depends, HTTPException

from genbooks.api.deps import get_order_service
from genbooks.core.exceptions import InvalidRequestError, OrderNotFoundError, StorageError
from genbooks.schemas.payment import PaymentCreateRequest, PaymentResponse
from genbooks.services.order_service import OrderService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=PaymentResponse)
async def record_payment(
    payment_in: PaymentCreateRequest,
    service: OrderService = Depends(get_order_service),
):
    """
    Record a payment for an existing order.

    - A `succeeded` payment marks the order `paid` and sends the confirmation email
    - Unknown orders return 404 and no payment is stored
    """
    try:
        result = await service.record_payment(payment_in)
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except OrderNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except StorageError as e:
        logger.error(f"Record payment error: {e}")
        raise HTTPException(status_code=500, detail="Failed to record payment")
    return PaymentResponse(**result)
