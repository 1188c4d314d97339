from typing import Optional

from genbooks.core.config import Settings
from genbooks.core.supabase import SupabaseManager
from .base import OrderStore, ORDER_PENDING, ORDER_PAID, PAYMENT_SUCCEEDED
from ._file import FileOrderStore
from ._supabase import SupabaseOrderStore


# Factory keeps main.py free of backend specifics
def new_store(settings: Settings, *, db: Optional[SupabaseManager] = None) -> OrderStore:
    if settings.STORAGE_BACKEND == "supabase":
        db = db or SupabaseManager(settings)
        if not db.configured:
            raise RuntimeError(
                "OrderStore(supabase) requires SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY"
            )
        return SupabaseOrderStore(db=db)
    return FileOrderStore(settings.DATA_FILE)


__all__ = [
    "OrderStore",
    "FileOrderStore",
    "SupabaseOrderStore",
    "new_store",
    "ORDER_PENDING",
    "ORDER_PAID",
    "PAYMENT_SUCCEEDED",
]
