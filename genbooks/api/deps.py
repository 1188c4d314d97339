from fastapi import Depends, Request

from genbooks.core.rate_limit import LoginRateLimiter
from genbooks.core.security import AdminCredentials, require_admin
from genbooks.services.admin_service import AdminService
from genbooks.services.order_service import OrderService
from genbooks.storage import OrderStore

# Shared objects are created once in the app lifespan and live on app.state;
# these dependencies just hand them to the endpoints.

def get_store(request: Request) -> OrderStore:
    return request.app.state.store

def get_order_service(request: Request) -> OrderService:
    return OrderService(request.app.state.store, request.app.state.notifier)

def get_admin_service(store: OrderStore = Depends(get_store)) -> AdminService:
    return AdminService(store)

def get_rate_limiter(request: Request) -> LoginRateLimiter:
    return request.app.state.rate_limiter

def get_admin_credentials(request: Request) -> AdminCredentials:
    return request.app.state.admin_credentials

def get_client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"

async def get_current_admin(admin: dict = Depends(require_admin)) -> dict:
    return admin
