import hmac
import uuid
from datetime import datetime, timezone


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_order_id() -> str:
    return f"ORD-{datetime.now(timezone.utc).year}-{uuid.uuid4().hex[:8].upper()}"


def new_payment_id() -> str:
    return f"PAY-{uuid.uuid4().hex[:8].upper()}"


def ct_equal(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode(), b.encode())
