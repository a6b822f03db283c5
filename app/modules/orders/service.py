# app/modules/orders/service.py
from sqlalchemy.orm import Session
from typing import Optional
import logging

from .repository import OrdersRepository
from .schemas import (
    OrderCreateRequest, OrderUpdateRequest, OrderOut, PricingOut,
    OrderResponse, OrderListResponse, OrderQuoteResponse, OrderDeleteResponse
)
from app.config.settings import settings
from app.core.exceptions import ErrorKind, ServiceError, internal_failure
from app.modules.customers.repository import CustomersRepository
from app.shared.services.pricing_service import (
    InvalidPricingInput, PricingInput, PricingRules, calculate_delivery_price
)
from app.shared.services.validation_service import (
    ORDER_FIELDS, validate_order, ensure_found, merge_update
)

logger = logging.getLogger(__name__)

class OrdersService:
    def __init__(
        self,
        db: Session,
        repository: Optional[OrdersRepository] = None,
        customers_repository: Optional[CustomersRepository] = None,
        rules: Optional[PricingRules] = None
    ):
        self.db = db
        self.repository = repository or OrdersRepository(db)
        self.customers_repository = customers_repository or CustomersRepository(db)
        self.rules = rules or PricingRules.from_settings(settings)

    async def list_orders(self, limit: int, offset: int) -> OrderListResponse:
        orders = self.repository.list_orders(limit, offset)
        return OrderListResponse(
            success=True,
            message=f"{len(orders)} pedido(s) encontrados",
            orders=[OrderOut.model_validate(o) for o in orders],
            total=self.repository.count_orders(),
            limit=limit,
            offset=offset
        )

    async def get_order(self, order_id: int) -> OrderResponse:
        order = self._get_existing(order_id)
        return OrderResponse(
            success=True,
            message="Pedido encontrado",
            order=OrderOut.model_validate(order)
        )

    async def quote_order(self, order_id: int) -> OrderQuoteResponse:
        """Desglose de precio del pedido sin persistir nada"""
        pricing_input = self.repository.find_order_pricing_inputs(order_id)
        ensure_found(pricing_input, f"Pedido {order_id} no encontrado").value_or_raise()

        try:
            breakdown = calculate_delivery_price(pricing_input, self.rules)
        except InvalidPricingInput as e:
            raise ServiceError(ErrorKind.INVALID_INPUT, f"El pedido {order_id} no puede cotizarse: {e}")
        return OrderQuoteResponse(
            success=True,
            message="Precio calculado",
            order_id=order_id,
            pricing=PricingOut(**breakdown.as_dict())
        )

    async def create_order(self, order_data: OrderCreateRequest) -> OrderResponse:
        """
        Crear pedido.

        Orden de las verificaciones:
        1. Formato completo del pedido
        2. Existencia del cliente
        3. Estimación del precio de entrega (no se persiste)
        """
        data = validate_order(order_data.dict()).value_or_raise()
        self._ensure_customer(data["customer_id"])

        breakdown = calculate_delivery_price(self._pricing_input(data), self.rules)

        try:
            order = self.repository.insert_order(data)
        except Exception:
            logger.exception("Error inesperado creando pedido")
            raise internal_failure("Error al registrar el pedido")

        return OrderResponse(
            success=True,
            message="Pedido registrado con éxito",
            order=OrderOut.model_validate(order),
            estimated_pricing=PricingOut(**breakdown.as_dict())
        )

    async def update_order(self, order_id: int, changes: OrderUpdateRequest) -> OrderResponse:
        """
        Actualización parcial del pedido.

        Si el pedido ya tiene entrega, su precio se recalcula completo con los
        nuevos atributos (el estado de la entrega se conserva). Pedido y entrega
        se guardan en la misma transacción.
        """
        current = self._get_existing(order_id)

        candidate = merge_update(current, changes.dict(exclude_unset=True), ORDER_FIELDS)
        data = validate_order(candidate).value_or_raise()
        self._ensure_customer(data["customer_id"])

        breakdown = calculate_delivery_price(self._pricing_input(data), self.rules)

        try:
            result = self.repository.update_order_and_reprice_delivery(
                order_id, data, breakdown.stored_values()
            )
        except Exception:
            logger.exception(f"Error inesperado actualizando pedido {order_id}")
            raise internal_failure("Error al actualizar el pedido")

        updated = self.repository.find_order_by_id(order_id)
        return OrderResponse(
            success=True,
            message="Pedido actualizado con éxito",
            order=OrderOut.model_validate(updated),
            estimated_pricing=PricingOut(**breakdown.as_dict()),
            delivery_repriced=result["deliveries"] > 0
        )

    async def delete_order(self, order_id: int) -> OrderDeleteResponse:
        """Eliminar pedido junto con su entrega"""
        self._get_existing(order_id)

        try:
            result = self.repository.delete_order_with_delivery(order_id)
        except Exception:
            logger.exception(f"Error inesperado eliminando pedido {order_id}")
            raise internal_failure("Error al eliminar el pedido")

        return OrderDeleteResponse(
            success=True,
            message="Pedido eliminado con éxito",
            order_id=order_id,
            affected_rows=result["orders"],
            deleted_deliveries=result["deliveries"]
        )

    def _get_existing(self, order_id: int):
        order = self.repository.find_order_by_id(order_id)
        return ensure_found(order, f"Pedido {order_id} no encontrado").value_or_raise()

    def _ensure_customer(self, customer_id: int):
        customer = self.customers_repository.find_customer_by_id(customer_id)
        return ensure_found(customer, f"El cliente {customer_id} no existe").value_or_raise()

    @staticmethod
    def _pricing_input(data) -> PricingInput:
        return PricingInput(
            distance=data["distance"],
            weight=data["weight"],
            rate_per_km=data["rate_per_km"],
            rate_per_kg=data["rate_per_kg"],
            urgent=data["urgent"]
        )
