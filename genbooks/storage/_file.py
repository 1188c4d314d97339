import asyncio
import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from .base import OrderStore, Record, ORDER_PAID, PAYMENT_SUCCEEDED

logger = logging.getLogger(__name__)


class FileOrderStore(OrderStore):
    """
    Keeps orders and payments in memory and mirrors them to a single JSON file.

    Every mutation rewrites the whole document. Writes go to a temp file next to
    the target and are renamed over it, so a crash leaves either the old or the
    new document on disk. One lock serialises all mutations.
    """

    backend = "json-file"

    def __init__(self, path: str):
        self.path = Path(path)
        self._data: Dict[str, List[Record]] = {"orders": [], "payments": []}
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        self._data = self._load()
        async with self._lock:
            self._flush()
        logger.info(f"Using JSON file storage at {self.path}")

    def _load(self) -> Dict[str, List[Record]]:
        data: Dict[str, Any] = {}
        if self.path.exists():
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                logger.warning(f"Could not load existing data from {self.path}, starting fresh: {e}")
                data = {}
        if not isinstance(data, dict):
            logger.warning(f"Unexpected document in {self.path}, starting fresh")
            data = {}
        if not isinstance(data.get("orders"), list):
            data["orders"] = []
        if not isinstance(data.get("payments"), list):
            data["payments"] = []
        return data

    def _flush(self) -> None:
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def _find(self, order_id: str) -> Optional[Record]:
        for order in self._data["orders"]:
            if order.get("id") == order_id:
                return order
        return None

    async def create_order(self, order: Record) -> Record:
        async with self._lock:
            self._data["orders"].append(dict(order))
            self._flush()
        return dict(order)

    async def find_order(self, order_id: str) -> Optional[Record]:
        order = self._find(order_id)
        return dict(order) if order else None

    async def insert_payment(self, payment: Record) -> Record:
        async with self._lock:
            self._data["payments"].append(dict(payment))
            self._flush()
        return dict(payment)

    async def update_order_status(self, order_id: str, status: str, updated_at: str) -> Optional[Record]:
        async with self._lock:
            order = self._find(order_id)
            if order is None:
                return None
            order["status"] = status
            order["updated_at"] = updated_at
            self._flush()
            return dict(order)

    async def list_orders(self) -> List[Record]:
        orders = sorted(self._data["orders"], key=lambda o: o.get("created_at") or "", reverse=True)
        return copy.deepcopy(orders)

    async def list_payments(self, status: Optional[str] = None, limit: Optional[int] = None) -> List[Record]:
        payments = [p for p in self._data["payments"] if status is None or p.get("status") == status]
        payments.sort(key=lambda p: p.get("received_at") or "", reverse=True)
        if limit is not None:
            payments = payments[:limit]
        return copy.deepcopy(payments)

    async def aggregate_stats(self) -> Dict[str, Any]:
        orders = self._data["orders"]
        return {
            "totalOrders": len(orders),
            "paidOrders": sum(1 for o in orders if o.get("status") == ORDER_PAID),
            "totalRevenue": sum(
                p.get("amount") or 0 for p in self._data["payments"] if p.get("status") == PAYMENT_SUCCEEDED
            ),
        }
