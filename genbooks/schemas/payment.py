from typing import Optional
from pydantic import BaseModel

class PaymentCreateRequest(BaseModel):
    orderId: Optional[str] = None
    amount: float = 399
    currency: str = "INR"
    provider: str = "manual"
    providerPaymentId: Optional[str] = None
    # Caller-reported outcome; "succeeded" marks the order paid
    status: str = "succeeded"

class PaymentResponse(BaseModel):
    id: str
    orderId: str
    status: str

class PaymentSummary(BaseModel):
    id: str
    order_id: str
    amount: float
    currency: str
    status: str
    received_at: str
