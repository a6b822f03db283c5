# app/modules/orders/schemas.py
from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal
from datetime import date, datetime
from app.shared.schemas.common import BaseResponse

class OrderCreateRequest(BaseModel):
    order_date: date = Field(..., description="Fecha del pedido (AAAA-MM-DD)")
    urgent: bool = Field(..., description="Entrega urgente (+20% sobre la base)")
    distance: Decimal = Field(..., description="Distancia en km, mayor que cero")
    weight: Decimal = Field(..., description="Peso en kg, mayor que cero")
    rate_per_km: Decimal = Field(..., description="Valor por km")
    rate_per_kg: Decimal = Field(..., description="Valor por kg")
    customer_id: int = Field(..., description="ID del cliente dueño del pedido")
    status: str = Field("calculado", description="calculado, entregue, em transito o cancelado")

class OrderUpdateRequest(BaseModel):
    """Actualización parcial: los campos omitidos conservan su valor"""
    order_date: Optional[date] = None
    urgent: Optional[bool] = None
    distance: Optional[Decimal] = None
    weight: Optional[Decimal] = None
    rate_per_km: Optional[Decimal] = None
    rate_per_kg: Optional[Decimal] = None
    customer_id: Optional[int] = None
    status: Optional[str] = None

class PricingOut(BaseModel):
    distance_cost: Decimal
    weight_cost: Decimal
    base: Decimal
    surcharge: Decimal
    subtotal: Decimal
    discount: Decimal
    heavy_fee: bool
    final_price: Decimal

class OrderOut(BaseModel):
    id: int
    order_date: date
    urgent: bool
    distance: Decimal
    weight: Decimal
    rate_per_km: Decimal
    rate_per_kg: Decimal
    customer_id: int
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class OrderResponse(BaseResponse):
    order: OrderOut
    estimated_pricing: Optional[PricingOut] = None
    delivery_repriced: bool = False

class OrderListResponse(BaseResponse):
    orders: List[OrderOut]
    total: int
    limit: Optional[int] = None
    offset: Optional[int] = None

class OrderQuoteResponse(BaseResponse):
    order_id: int
    pricing: PricingOut

class OrderDeleteResponse(BaseResponse):
    order_id: int
    affected_rows: int
    deleted_deliveries: int
