import logging
from typing import Any, Dict, List, Optional

from genbooks.core.exceptions import StorageError
from genbooks.core.supabase import SupabaseManager
from .base import OrderStore, Record, ORDER_PAID, PAYMENT_SUCCEEDED

logger = logging.getLogger(__name__)


class SupabaseOrderStore(OrderStore):
    """Orders and payments in the Supabase `orders` / `payments` tables."""

    backend = "supabase"

    def __init__(self, db: SupabaseManager):
        self.db = db
        self.orders_table = "orders"
        self.payments_table = "payments"

    async def initialize(self) -> None:
        # Tables are created in the Supabase dashboard (see sql/schema.sql)
        await self.db.get_service_client()
        logger.info("Using Supabase database")

    async def create_order(self, order: Record) -> Record:
        client = await self.db.get_service_client()
        try:
            result = await client.table(self.orders_table).insert(order).execute()
        except Exception as e:
            logger.error(f"Supabase error creating order {order.get('id')}: {e}")
            raise StorageError("create order") from e
        if result.data:
            return result.data[0]
        return dict(order)

    async def find_order(self, order_id: str) -> Optional[Record]:
        client = await self.db.get_service_client()
        try:
            result = await client.table(self.orders_table).select("*").eq("id", order_id).execute()
        except Exception as e:
            logger.error(f"Supabase error fetching order {order_id}: {e}")
            raise StorageError("find order") from e
        if result.data:
            return result.data[0]
        return None

    async def insert_payment(self, payment: Record) -> Record:
        client = await self.db.get_service_client()
        try:
            result = await client.table(self.payments_table).insert(payment).execute()
        except Exception as e:
            logger.error(f"Payment insert error: {e}")
            raise StorageError("record payment") from e
        if result.data:
            return result.data[0]
        return dict(payment)

    async def update_order_status(self, order_id: str, status: str, updated_at: str) -> Optional[Record]:
        client = await self.db.get_service_client()
        try:
            result = await (
                client.table(self.orders_table)
                .update({"status": status, "updated_at": updated_at})
                .eq("id", order_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Order update error for {order_id}: {e}")
            raise StorageError("update order status") from e
        if result.data:
            return result.data[0]
        return None

    async def list_orders(self) -> List[Record]:
        client = await self.db.get_service_client()
        try:
            result = await (
                client.table(self.orders_table).select("*").order("created_at", desc=True).execute()
            )
        except Exception as e:
            logger.error(f"Orders fetch error: {e}")
            raise StorageError("list orders") from e
        return result.data or []

    async def list_payments(self, status: Optional[str] = None, limit: Optional[int] = None) -> List[Record]:
        client = await self.db.get_service_client()
        try:
            query = client.table(self.payments_table).select("*")
            if status is not None:
                query = query.eq("status", status)
            query = query.order("received_at", desc=True)
            if limit is not None:
                query = query.limit(limit)
            result = await query.execute()
        except Exception as e:
            logger.error(f"Payments fetch error: {e}")
            raise StorageError("list payments") from e
        return result.data or []

    async def _count_orders(self, client, status: Optional[str] = None) -> int:
        query = client.table(self.orders_table).select("id", count="exact")
        if status is not None:
            query = query.eq("status", status)
        result = await query.execute()
        return result.count or 0

    async def aggregate_stats(self) -> Dict[str, Any]:
        client = await self.db.get_service_client()
        try:
            total_orders = await self._count_orders(client)
            paid_orders = await self._count_orders(client, ORDER_PAID)
            revenue = await (
                client.table(self.payments_table).select("amount").eq("status", PAYMENT_SUCCEEDED).execute()
            )
        except Exception as e:
            logger.error(f"Stats query error: {e}")
            raise StorageError("aggregate stats") from e

        total_revenue = sum(row.get("amount") or 0 for row in (revenue.data or []))
        return {
            "totalOrders": total_orders,
            "paidOrders": paid_orders,
            "totalRevenue": total_revenue,
        }
