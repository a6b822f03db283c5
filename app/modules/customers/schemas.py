# app/modules/customers/schemas.py
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from app.shared.schemas.common import BaseResponse

class CustomerCreateRequest(BaseModel):
    name: str = Field(..., description="Nombre (3 a 50 caracteres)")
    surname: str = Field(..., description="Apellido (3 a 255 caracteres)")
    tax_id: str = Field(..., description="CPF, 11 dígitos")
    phone: str = Field(..., description="Teléfono (mínimo 8 caracteres)")
    email: str = Field(..., description="Email de contacto")
    street: str = Field(..., description="Calle / logradouro")
    number: str = Field(..., description="Número")
    neighborhood: str = Field(..., description="Barrio")
    state: str = Field(..., description="Estado")
    postal_code: str = Field(..., description="CEP, 8 dígitos")
    city: str = Field(..., description="Ciudad")

class CustomerUpdateRequest(BaseModel):
    """Actualización parcial: los campos omitidos conservan su valor"""
    name: Optional[str] = None
    surname: Optional[str] = None
    tax_id: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    street: Optional[str] = None
    number: Optional[str] = None
    neighborhood: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None

class CustomerOut(BaseModel):
    id: int
    name: str
    surname: str
    tax_id: str
    phone: str
    email: str
    street: str
    number: str
    neighborhood: str
    state: str
    postal_code: str
    city: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CustomerResponse(BaseResponse):
    customer: CustomerOut

class CustomerListResponse(BaseResponse):
    customers: List[CustomerOut]
    total: int
    limit: int
    offset: int
