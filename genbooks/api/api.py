from fastapi import APIRouter
from genbooks.api.endpoints import admin, auth, orders, payments

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/admin", tags=["auth"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
