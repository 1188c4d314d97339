from typing import Any, List, Optional
from pydantic import BaseModel

from genbooks.schemas.order import Order
from genbooks.schemas.payment import PaymentSummary

class LoginRequest(BaseModel):
    # Shape is checked by validate_login_input so bad input counts as a failed attempt
    username: Any = None
    password: Any = None

class AdminUser(BaseModel):
    username: Optional[str] = None
    loginTime: Optional[str] = None

class LoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    user: AdminUser

class LogoutResponse(BaseModel):
    success: bool = True
    message: str = "Logout successful"

class SessionStatus(BaseModel):
    authenticated: bool
    user: Optional[AdminUser] = None

class StatsResponse(BaseModel):
    totalOrders: int
    paidOrders: int
    totalRevenue: float
    recentPayments: List[PaymentSummary]

class OrdersResponse(BaseModel):
    orders: List[Order]
