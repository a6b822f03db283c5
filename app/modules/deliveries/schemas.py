# app/modules/deliveries/schemas.py
from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal
from datetime import datetime
from app.shared.schemas.common import BaseResponse

class DeliveryCreateRequest(BaseModel):
    status: str = Field(..., description="calculado, entregue, em transito o cancelado")
    order_id: int = Field(..., description="ID del pedido a entregar")

class DeliveryUpdateRequest(BaseModel):
    """Actualización parcial; el precio se recalcula siempre completo"""
    status: Optional[str] = None
    order_id: Optional[int] = None

class DeliveryOut(BaseModel):
    id: int
    distance_cost: Decimal
    weight_cost: Decimal
    surcharge: Decimal
    discount: Decimal
    heavy_fee: bool
    final_price: Decimal
    status: str
    order_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class DeliveryResponse(BaseResponse):
    delivery: DeliveryOut

class DeliveryListResponse(BaseResponse):
    deliveries: List[DeliveryOut]
    total: int
    limit: int
    offset: int
