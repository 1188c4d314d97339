from typing import Optional
from pydantic import BaseModel

class OrderCreateRequest(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    totalAmount: float = 399
    currency: str = "INR"

class OrderResponse(BaseModel):
    id: str
    status: str

class Order(BaseModel):
    id: str
    customer_name: Optional[str] = None
    customer_email: str
    customer_phone: Optional[str] = None
    product_name: Optional[str] = None
    quantity: int = 1
    total_amount: float
    currency: str
    status: str
    created_at: str
    updated_at: str
