import logging
from typing import Any, Dict

from genbooks.core.exceptions import InvalidRequestError, OrderNotFoundError, StorageError
from genbooks.core.helpers import new_order_id, new_payment_id, now_iso
from genbooks.schemas.order import OrderCreateRequest
from genbooks.schemas.payment import PaymentCreateRequest
from genbooks.services.notification_service import NotificationService
from genbooks.storage import OrderStore, ORDER_PENDING, ORDER_PAID, PAYMENT_SUCCEEDED

logger = logging.getLogger(__name__)

PRODUCT_NAME = "Premium Course Bundle"


class OrderService:
    def __init__(self, store: OrderStore, notifier: NotificationService):
        self.store = store
        self.notifier = notifier

    async def submit_order(self, order_in: OrderCreateRequest) -> Dict[str, Any]:
        """
        Creates a pending order. Only the email is required; identical
        submissions create distinct orders.
        """
        email = (order_in.email or "").strip()
        if not email:
            raise InvalidRequestError("Email is required")

        name_parts = [p.strip() for p in (order_in.firstName, order_in.lastName) if p and p.strip()]
        now = now_iso()
        order = {
            "id": new_order_id(),
            "customer_name": " ".join(name_parts) or None,
            "customer_email": email,
            "customer_phone": order_in.phone or None,
            "product_name": PRODUCT_NAME,
            "quantity": 1,
            "total_amount": order_in.totalAmount,
            "currency": order_in.currency,
            "status": ORDER_PENDING,
            "created_at": now,
            "updated_at": now,
        }
        created = await self.store.create_order(order)
        logger.info(f"Created order {created['id']} for {email}")
        return {"id": created["id"], "status": created["status"]}

    async def record_payment(self, payment_in: PaymentCreateRequest) -> Dict[str, Any]:
        """
        Stores a payment against an existing order.

        Amount and status are taken as reported by the caller. A `succeeded`
        payment marks the order paid and triggers the confirmation email; a
        failed email never fails the payment.
        """
        order_id = (payment_in.orderId or "").strip()
        if not order_id:
            raise InvalidRequestError("Order ID is required")

        order = await self.store.find_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        now = now_iso()
        payment = await self.store.insert_payment({
            "id": new_payment_id(),
            "order_id": order_id,
            "provider": payment_in.provider,
            "provider_payment_id": payment_in.providerPaymentId,
            "amount": payment_in.amount,
            "currency": payment_in.currency,
            "status": payment_in.status,
            "received_at": now,
        })
        logger.info(f"Recorded payment {payment['id']} for order {order_id} with status {payment['status']}")

        if payment["status"] == PAYMENT_SUCCEEDED:
            await self._mark_paid(order, payment, now)

        return {"id": payment["id"], "orderId": order_id, "status": payment["status"]}

    async def _mark_paid(self, order: Dict[str, Any], payment: Dict[str, Any], now: str) -> None:
        try:
            updated = await self.store.update_order_status(order["id"], ORDER_PAID, now)
        except StorageError as e:
            # payment is already stored; report it and skip the email
            logger.error(f"Could not mark order {order['id']} as paid: {e}")
            return

        result = await self.notifier.send_confirmation(updated or order, payment)
        if not result.get("success"):
            logger.warning(f"Confirmation email for order {order['id']} failed: {result.get('error')}")
