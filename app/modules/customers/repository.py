# app/modules/customers/repository.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict, Any, List, Optional
import logging

from app.shared.database.models import Customer

logger = logging.getLogger(__name__)

class CustomersRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_customer_by_id(self, customer_id: int) -> Optional[Customer]:
        return self.db.query(Customer).filter(Customer.id == customer_id).first()

    def find_customer_by_tax_id(self, tax_id: str) -> Optional[Customer]:
        return self.db.query(Customer).filter(Customer.tax_id == tax_id).first()

    def find_customer_by_email(self, email: str) -> Optional[Customer]:
        return self.db.query(Customer).filter(Customer.email == email).first()

    def list_customers(self, limit: int, offset: int) -> List[Customer]:
        return self.db.query(Customer).order_by(Customer.id).offset(offset).limit(limit).all()

    def count_customers(self) -> int:
        return self.db.query(Customer).count()

    def insert_customer(self, customer_data: Dict[str, Any]) -> Customer:
        """Crear cliente; el ID generado queda en customer.id"""
        try:
            customer = Customer(**customer_data)
            self.db.add(customer)
            self.db.commit()
            self.db.refresh(customer)
            logger.info(f"Cliente creado con ID: {customer.id}")
            return customer
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def update_customer(self, customer_id: int, customer_data: Dict[str, Any]) -> int:
        """Actualizar cliente, retorna filas afectadas"""
        try:
            affected = self.db.query(Customer).filter(
                Customer.id == customer_id
            ).update(customer_data, synchronize_session="fetch")
            self.db.commit()
            return affected
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def delete_customer(self, customer_id: int) -> int:
        """Eliminar cliente, retorna filas afectadas"""
        try:
            affected = self.db.query(Customer).filter(
                Customer.id == customer_id
            ).delete(synchronize_session="fetch")
            self.db.commit()
            logger.info(f"Cliente {customer_id} eliminado ({affected} fila(s))")
            return affected
        except SQLAlchemyError:
            self.db.rollback()
            raise
