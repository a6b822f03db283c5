# app/modules/customers/service.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional
import logging

from .repository import CustomersRepository
from .schemas import (
    CustomerCreateRequest, CustomerUpdateRequest, CustomerOut,
    CustomerResponse, CustomerListResponse
)
from app.core.exceptions import ErrorKind, ServiceError, internal_failure
from app.modules.orders.repository import OrdersRepository
from app.modules.orders.schemas import OrderOut, OrderListResponse
from app.shared.schemas.common import MutationResponse, MutationResult
from app.shared.services.validation_service import (
    CUSTOMER_FIELDS, validate_customer, ensure_unique_customer_field,
    ensure_customer_deletable, ensure_found, merge_update
)

logger = logging.getLogger(__name__)

class CustomersService:
    def __init__(
        self,
        db: Session,
        repository: Optional[CustomersRepository] = None,
        orders_repository: Optional[OrdersRepository] = None
    ):
        self.db = db
        self.repository = repository or CustomersRepository(db)
        self.orders_repository = orders_repository or OrdersRepository(db)

    async def list_customers(self, limit: int, offset: int) -> CustomerListResponse:
        customers = self.repository.list_customers(limit, offset)
        return CustomerListResponse(
            success=True,
            message=f"{len(customers)} cliente(s) encontrados",
            customers=[CustomerOut.model_validate(c) for c in customers],
            total=self.repository.count_customers(),
            limit=limit,
            offset=offset
        )

    async def get_customer(self, customer_id: int) -> CustomerResponse:
        customer = self._get_existing(customer_id)
        return CustomerResponse(
            success=True,
            message="Cliente encontrado",
            customer=CustomerOut.model_validate(customer)
        )

    async def list_customer_orders(self, customer_id: int) -> OrderListResponse:
        self._get_existing(customer_id)

        orders = self.orders_repository.find_orders_by_customer_id(customer_id)
        return OrderListResponse(
            success=True,
            message=f"Pedidos del cliente {customer_id}",
            orders=[OrderOut.model_validate(o) for o in orders],
            total=len(orders)
        )

    async def create_customer(self, customer_data: CustomerCreateRequest) -> CustomerResponse:
        """
        Registrar cliente.

        Valida formato completo y unicidad de CPF y email antes de insertar.
        """
        data = validate_customer(customer_data.dict()).value_or_raise()
        self._ensure_unique(data)

        try:
            customer = self.repository.insert_customer(data)
        except IntegrityError:
            # Otro request registró el mismo CPF/email entre la verificación y el insert
            raise ServiceError(ErrorKind.CONFLICT, "Ya existe un cliente registrado con este CPF o email")
        except Exception:
            logger.exception("Error inesperado creando cliente")
            raise internal_failure("Error al registrar el cliente")

        return CustomerResponse(
            success=True,
            message="Cliente registrado con éxito",
            customer=CustomerOut.model_validate(customer)
        )

    async def update_customer(self, customer_id: int, changes: CustomerUpdateRequest) -> CustomerResponse:
        """
        Actualización parcial.

        Los campos omitidos heredan el valor guardado y el candidato completo
        pasa por las mismas validaciones de la creación.
        """
        current = self._get_existing(customer_id)

        candidate = merge_update(current, changes.dict(exclude_unset=True), CUSTOMER_FIELDS)
        data = validate_customer(candidate).value_or_raise()
        self._ensure_unique(data, customer_id)

        try:
            self.repository.update_customer(customer_id, data)
        except IntegrityError:
            raise ServiceError(ErrorKind.CONFLICT, "Ya existe un cliente registrado con este CPF o email")
        except Exception:
            logger.exception(f"Error inesperado actualizando cliente {customer_id}")
            raise internal_failure("Error al actualizar el cliente")

        updated = self.repository.find_customer_by_id(customer_id)
        return CustomerResponse(
            success=True,
            message="Cliente actualizado con éxito",
            customer=CustomerOut.model_validate(updated)
        )

    async def delete_customer(self, customer_id: int) -> MutationResponse:
        """Eliminar cliente solo si no tiene pedidos"""
        self._get_existing(customer_id)

        orders = self.orders_repository.find_orders_by_customer_id(customer_id)
        ensure_customer_deletable(customer_id, orders).value_or_raise()

        try:
            affected = self.repository.delete_customer(customer_id)
        except Exception:
            logger.exception(f"Error inesperado eliminando cliente {customer_id}")
            raise internal_failure("Error al eliminar el cliente")

        return MutationResponse(
            success=True,
            message="Cliente eliminado con éxito",
            result=MutationResult(affected_rows=affected)
        )

    def _get_existing(self, customer_id: int):
        customer = self.repository.find_customer_by_id(customer_id)
        return ensure_found(customer, f"Cliente {customer_id} no encontrado").value_or_raise()

    def _ensure_unique(self, data, customer_id: Optional[int] = None):
        holder = self.repository.find_customer_by_tax_id(data["tax_id"])
        ensure_unique_customer_field("tax_id", holder, customer_id).value_or_raise()

        holder = self.repository.find_customer_by_email(data["email"])
        ensure_unique_customer_field("email", holder, customer_id).value_or_raise()
