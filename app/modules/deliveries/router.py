# app/modules/deliveries/router.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.config.settings import settings
from app.shared.schemas.common import MutationResponse
from .service import DeliveriesService
from .schemas import (
    DeliveryCreateRequest, DeliveryUpdateRequest,
    DeliveryResponse, DeliveryListResponse
)

router = APIRouter()

@router.get("", response_model=DeliveryListResponse)
async def list_deliveries(
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """Listar entregas"""
    service = DeliveriesService(db)
    return await service.list_deliveries(limit, offset)

@router.get("/health")
async def deliveries_health():
    """Health check del módulo de entregas"""
    return {
        "service": "deliveries",
        "status": "healthy",
        "version": "1.0.0",
        "features": [
            "Cálculo automático del precio de entrega",
            "Una entrega por pedido",
            "Recálculo completo en cada actualización"
        ]
    }

@router.get("/order/{order_id}", response_model=DeliveryResponse)
async def get_delivery_by_order(
    order_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """Obtener la entrega de un pedido"""
    service = DeliveriesService(db)
    return await service.get_delivery_by_order(order_id)

@router.get("/{delivery_id}", response_model=DeliveryResponse)
async def get_delivery(
    delivery_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """Obtener entrega por ID"""
    service = DeliveriesService(db)
    return await service.get_delivery(delivery_id)

@router.post("", response_model=DeliveryResponse, status_code=201)
async def create_delivery(
    delivery_data: DeliveryCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Registrar entrega de un pedido

    **Cálculo automático con los datos del pedido:**
    - valor distancia = distancia × valor por km
    - valor peso = peso × valor por kg
    - recargo de 20% si la entrega es urgente
    - descuento de 10% si el subtotal supera 500
    - tasa fija de 15 si el peso supera 50 kg

    **Validaciones:**
    - Estado: calculado, entregue, em transito o cancelado
    - El pedido debe existir y no tener otra entrega
    """
    service = DeliveriesService(db)
    return await service.create_delivery(delivery_data)

@router.put("/{delivery_id}", response_model=DeliveryResponse)
async def update_delivery(
    changes: DeliveryUpdateRequest,
    delivery_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """Actualizar entrega (parcial) recalculando todos los valores"""
    service = DeliveriesService(db)
    return await service.update_delivery(delivery_id, changes)

@router.delete("/{delivery_id}", response_model=MutationResponse)
async def delete_delivery(
    delivery_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """Eliminar entrega"""
    service = DeliveriesService(db)
    return await service.delete_delivery(delivery_id)
