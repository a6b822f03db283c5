# app/modules/orders/router.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.config.settings import settings
from .service import OrdersService
from .schemas import (
    OrderCreateRequest, OrderUpdateRequest, OrderResponse,
    OrderListResponse, OrderQuoteResponse, OrderDeleteResponse
)

router = APIRouter()

@router.get("", response_model=OrderListResponse)
async def list_orders(
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """Listar pedidos"""
    service = OrdersService(db)
    return await service.list_orders(limit, offset)

@router.get("/health")
async def orders_health():
    """Health check del módulo de pedidos"""
    return {
        "service": "orders",
        "status": "healthy",
        "version": "1.0.0",
        "features": [
            "Registro de pedidos",
            "Cotización de entrega",
            "Actualización parcial con recálculo de entrega",
            "Eliminación en cascada de la entrega"
        ],
        "pricing": {
            "urgent_surcharge_rate": settings.pricing_urgent_rate,
            "discount_threshold": settings.pricing_discount_threshold,
            "discount_rate": settings.pricing_discount_rate,
            "heavy_threshold_kg": settings.pricing_heavy_threshold_kg,
            "heavy_fee": settings.pricing_heavy_fee
        }
    }

@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """Obtener pedido por ID"""
    service = OrdersService(db)
    return await service.get_order(order_id)

@router.get("/{order_id}/quote", response_model=OrderQuoteResponse)
async def quote_order(
    order_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """
    Cotizar la entrega del pedido

    **Cálculo:**
    - valor distancia = distancia × valor por km
    - valor peso = peso × valor por kg
    - recargo de 20% sobre la base si es urgente
    - descuento de 10% si el subtotal supera 500
    - tasa fija de 15 si el peso supera 50 kg
    """
    service = OrdersService(db)
    return await service.quote_order(order_id)

@router.post("", response_model=OrderResponse, status_code=201)
async def create_order(
    order_data: OrderCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Registrar pedido

    **Validaciones:**
    - Distancia y peso mayores que cero
    - Valores por km y por kg mayores que cero
    - Estado: calculado, entregue, em transito o cancelado
    - El cliente debe existir
    """
    service = OrdersService(db)
    return await service.create_order(order_data)

@router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    changes: OrderUpdateRequest,
    order_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """Actualizar pedido (parcial); recalcula la entrega asociada si existe"""
    service = OrdersService(db)
    return await service.update_order(order_id, changes)

@router.delete("/{order_id}", response_model=OrderDeleteResponse)
async def delete_order(
    order_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """Eliminar pedido y su entrega"""
    service = OrdersService(db)
    return await service.delete_order(order_id)
