# app/modules/customers/router.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.config.settings import settings
from app.modules.orders.schemas import OrderListResponse
from app.shared.schemas.common import MutationResponse
from .service import CustomersService
from .schemas import (
    CustomerCreateRequest, CustomerUpdateRequest,
    CustomerResponse, CustomerListResponse
)

router = APIRouter()

@router.get("", response_model=CustomerListResponse)
async def list_customers(
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """Listar clientes registrados"""
    service = CustomersService(db)
    return await service.list_customers(limit, offset)

@router.get("/health")
async def customers_health():
    """Health check del módulo de clientes"""
    return {
        "service": "customers",
        "status": "healthy",
        "version": "1.0.0",
        "features": [
            "Registro de clientes",
            "Validación de CPF, CEP y email",
            "Actualización parcial",
            "Bloqueo de eliminación con pedidos"
        ]
    }

@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """Obtener cliente por ID"""
    service = CustomersService(db)
    return await service.get_customer(customer_id)

@router.get("/{customer_id}/orders", response_model=OrderListResponse)
async def get_customer_orders(
    customer_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """Pedidos del cliente"""
    service = CustomersService(db)
    return await service.list_customer_orders(customer_id)

@router.post("", response_model=CustomerResponse, status_code=201)
async def create_customer(
    customer_data: CustomerCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Registrar cliente

    **Validaciones:**
    - Nombre entre 3 y 50 caracteres, apellido entre 3 y 255
    - CPF con 11 dígitos y CEP con 8 dígitos
    - Teléfono con al menos 8 caracteres
    - Email con '@' y al menos 5 caracteres
    - CPF y email no pueden repetirse
    """
    service = CustomersService(db)
    return await service.create_customer(customer_data)

@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    changes: CustomerUpdateRequest,
    customer_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """
    Actualizar cliente

    Los campos no enviados conservan su valor actual; el resultado se valida
    con las mismas reglas del registro.
    """
    service = CustomersService(db)
    return await service.update_customer(customer_id, changes)

@router.delete("/{customer_id}", response_model=MutationResponse)
async def delete_customer(
    customer_id: int = Path(..., gt=0),
    db: Session = Depends(get_db)
):
    """Eliminar cliente (solo si no tiene pedidos)"""
    service = CustomersService(db)
    return await service.delete_customer(customer_id)
