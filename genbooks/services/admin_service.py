from typing import Any, Dict, List

from genbooks.storage import OrderStore
from genbooks.storage.base import RECENT_PAYMENT_FIELDS

RECENT_PAYMENTS_LIMIT = 10


class AdminService:
    def __init__(self, store: OrderStore):
        self.store = store

    async def get_stats(self) -> Dict[str, Any]:
        stats = await self.store.aggregate_stats()
        payments = await self.store.list_payments(limit=RECENT_PAYMENTS_LIMIT)
        stats["recentPayments"] = [
            {field: payment.get(field) for field in RECENT_PAYMENT_FIELDS} for payment in payments
        ]
        return stats

    async def list_all_orders(self) -> List[Dict[str, Any]]:
        return await self.store.list_orders()
