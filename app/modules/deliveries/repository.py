# app/modules/deliveries/repository.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict, Any, List, Optional
import logging

from app.shared.database.models import Delivery

logger = logging.getLogger(__name__)

class DeliveriesRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_delivery_by_id(self, delivery_id: int) -> Optional[Delivery]:
        return self.db.query(Delivery).filter(Delivery.id == delivery_id).first()

    def find_delivery_by_order_id(self, order_id: int) -> Optional[Delivery]:
        return self.db.query(Delivery).filter(Delivery.order_id == order_id).first()

    def list_deliveries(self, limit: int, offset: int) -> List[Delivery]:
        return self.db.query(Delivery).order_by(Delivery.id).offset(offset).limit(limit).all()

    def count_deliveries(self) -> int:
        return self.db.query(Delivery).count()

    def insert_delivery(self, delivery_data: Dict[str, Any]) -> Delivery:
        """Crear entrega; el ID generado queda en delivery.id"""
        try:
            delivery = Delivery(**delivery_data)
            self.db.add(delivery)
            self.db.commit()
            self.db.refresh(delivery)
            logger.info(f"Entrega creada con ID: {delivery.id} (pedido {delivery.order_id})")
            return delivery
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def update_delivery(self, delivery_id: int, delivery_data: Dict[str, Any]) -> int:
        """Actualizar entrega, retorna filas afectadas"""
        try:
            affected = self.db.query(Delivery).filter(
                Delivery.id == delivery_id
            ).update(delivery_data, synchronize_session="fetch")
            self.db.commit()
            return affected
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def delete_delivery(self, delivery_id: int) -> int:
        """Eliminar entrega, retorna filas afectadas"""
        try:
            affected = self.db.query(Delivery).filter(
                Delivery.id == delivery_id
            ).delete(synchronize_session="fetch")
            self.db.commit()
            logger.info(f"Entrega {delivery_id} eliminada ({affected} fila(s))")
            return affected
        except SQLAlchemyError:
            self.db.rollback()
            raise
