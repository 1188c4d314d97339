from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

Record = Dict[str, Any]

ORDER_PENDING = "pending"
ORDER_PAID = "paid"
PAYMENT_SUCCEEDED = "succeeded"

# columns returned in the dashboard's recent payments list
RECENT_PAYMENT_FIELDS = ("id", "order_id", "amount", "currency", "status", "received_at")


class OrderStore(ABC):
    """
    Persistence for orders and payments.

    Records are plain dicts using the column names of the `orders` and
    `payments` tables. Listing methods return records newest first.
    """

    backend: str = ""

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        pass

    @abstractmethod
    async def create_order(self, order: Record) -> Record:
        ...

    @abstractmethod
    async def find_order(self, order_id: str) -> Optional[Record]:
        ...

    @abstractmethod
    async def insert_payment(self, payment: Record) -> Record:
        ...

    @abstractmethod
    async def update_order_status(self, order_id: str, status: str, updated_at: str) -> Optional[Record]:
        ...

    @abstractmethod
    async def list_orders(self) -> List[Record]:
        ...

    @abstractmethod
    async def list_payments(self, status: Optional[str] = None, limit: Optional[int] = None) -> List[Record]:
        ...

    @abstractmethod
    async def aggregate_stats(self) -> Dict[str, Any]:
        """Returns totalOrders, paidOrders and totalRevenue (sum of succeeded payments)."""
        ...
