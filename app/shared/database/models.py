# app/shared/database/models.py
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Date,
    Numeric, ForeignKey, UniqueConstraint, CheckConstraint,
    func
)
from sqlalchemy.orm import relationship
from enum import Enum

from app.config.database import Base


class DeliveryStatus(str, Enum):
    """Estados de pedido y entrega, tal como se almacenan"""
    CALCULATED = "calculado"
    DELIVERED = "entregue"
    IN_TRANSIT = "em transito"
    CANCELLED = "cancelado"


DELIVERY_STATUS_VALUES = tuple(status.value for status in DeliveryStatus)

# =====================================================
# MIXIN PARA TIMESTAMPS
# =====================================================
class TimestampMixin:
    """Mixin que agrega campos created_at y updated_at"""
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime, nullable=False, server_default=func.current_timestamp(), onupdate=func.current_timestamp())


# =====================================================
# CLIENTES
# =====================================================

class Customer(Base, TimestampMixin):
    """Modelo de Cliente"""
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    surname = Column(String(255), nullable=False)
    tax_id = Column(String(11), unique=True, nullable=False, index=True)
    phone = Column(String(30), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)

    # Dirección
    street = Column(String(255), nullable=False)
    number = Column(String(20), nullable=False)
    neighborhood = Column(String(100), nullable=False)
    state = Column(String(50), nullable=False)
    postal_code = Column(String(8), nullable=False)
    city = Column(String(100), nullable=False)

    # Relationships
    orders = relationship("Order", back_populates="customer")


# =====================================================
# PEDIDOS
# =====================================================

class Order(Base, TimestampMixin):
    """Modelo de Pedido"""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_date = Column(Date, nullable=False)
    urgent = Column(Boolean, nullable=False, default=False)
    distance = Column(Numeric(10, 2), nullable=False)
    weight = Column(Numeric(10, 2), nullable=False)
    rate_per_km = Column(Numeric(10, 2), nullable=False)
    rate_per_kg = Column(Numeric(10, 2), nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=DeliveryStatus.CALCULATED.value)

    # Relationships
    customer = relationship("Customer", back_populates="orders")
    delivery = relationship("Delivery", back_populates="order", uselist=False)

    __table_args__ = (
        CheckConstraint('distance > 0', name='orders_distance_positive'),
        CheckConstraint('weight > 0', name='orders_weight_positive'),
    )


# =====================================================
# ENTREGAS
# =====================================================

class Delivery(Base, TimestampMixin):
    """Modelo de Entrega (una por pedido)"""
    __tablename__ = "deliveries"

    id = Column(Integer, primary_key=True, index=True)
    distance_cost = Column(Numeric(10, 2), nullable=False)
    weight_cost = Column(Numeric(10, 2), nullable=False)
    surcharge = Column(Numeric(10, 2), nullable=False, default=0)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    heavy_fee = Column(Boolean, nullable=False, default=False)
    final_price = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=DeliveryStatus.CALCULATED.value)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)

    # Relationships
    order = relationship("Order", back_populates="delivery")

    __table_args__ = (
        UniqueConstraint('order_id', name='deliveries_one_per_order'),
    )
