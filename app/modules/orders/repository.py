# app/modules/orders/repository.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict, Any, List, Optional
import logging

from app.shared.database.models import Order, Delivery
from app.shared.services.pricing_service import PricingInput

logger = logging.getLogger(__name__)

class OrdersRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_order_by_id(self, order_id: int) -> Optional[Order]:
        return self.db.query(Order).filter(Order.id == order_id).first()

    def find_order_pricing_inputs(self, order_id: int) -> Optional[PricingInput]:
        """Atributos del pedido que alimentan el cálculo de la entrega"""
        row = self.db.query(
            Order.distance, Order.weight, Order.rate_per_km, Order.rate_per_kg, Order.urgent
        ).filter(Order.id == order_id).first()

        if row is None:
            return None
        return PricingInput.from_order(row)

    def find_orders_by_customer_id(self, customer_id: int) -> List[Order]:
        return self.db.query(Order).filter(
            Order.customer_id == customer_id
        ).order_by(Order.order_date.desc(), Order.id.desc()).all()

    def list_orders(self, limit: int, offset: int) -> List[Order]:
        return self.db.query(Order).order_by(Order.id).offset(offset).limit(limit).all()

    def count_orders(self) -> int:
        return self.db.query(Order).count()

    def insert_order(self, order_data: Dict[str, Any]) -> Order:
        """Crear pedido; el ID generado queda en order.id"""
        try:
            order = Order(**order_data)
            self.db.add(order)
            self.db.commit()
            self.db.refresh(order)
            logger.info(f"Pedido creado con ID: {order.id} (cliente {order.customer_id})")
            return order
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def update_order_and_reprice_delivery(
        self,
        order_id: int,
        order_data: Dict[str, Any],
        delivery_values: Dict[str, Any]
    ) -> Dict[str, int]:
        """
        Actualizar el pedido y el precio de su entrega (si existe) en una sola transacción.

        Returns:
            Dict con filas afectadas: {"orders": n, "deliveries": m}
        """
        try:
            orders = self.db.query(Order).filter(
                Order.id == order_id
            ).update(order_data, synchronize_session="fetch")
            deliveries = self.db.query(Delivery).filter(
                Delivery.order_id == order_id
            ).update(delivery_values, synchronize_session="fetch")
            self.db.commit()
            if deliveries:
                logger.info(f"Entrega del pedido {order_id} recalculada")
            return {"orders": orders, "deliveries": deliveries}
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def delete_order_with_delivery(self, order_id: int) -> Dict[str, int]:
        """
        Eliminar el pedido junto con su entrega en una sola transacción.

        Returns:
            Dict con filas afectadas: {"orders": n, "deliveries": m}
        """
        try:
            deliveries = self.db.query(Delivery).filter(
                Delivery.order_id == order_id
            ).delete(synchronize_session="fetch")
            orders = self.db.query(Order).filter(
                Order.id == order_id
            ).delete(synchronize_session="fetch")
            self.db.commit()
            logger.info(f"Pedido {order_id} eliminado con {deliveries} entrega(s)")
            return {"orders": orders, "deliveries": deliveries}
        except SQLAlchemyError:
            self.db.rollback()
            raise
