# app/api/v1/router.py
from fastapi import APIRouter
from app.modules.customers.router import router as customers_router
from app.modules.orders.router import router as orders_router
from app.modules.deliveries.router import router as deliveries_router


# Crear router principal de la API v1
api_router = APIRouter()

api_router.include_router(
    customers_router,
    prefix="/customers",
    tags=["Customers - Clientes"]
)

api_router.include_router(
    orders_router,
    prefix="/orders",
    tags=["Orders - Pedidos"]
)

api_router.include_router(
    deliveries_router,
    prefix="/deliveries",
    tags=["Deliveries - Entregas"]
)
