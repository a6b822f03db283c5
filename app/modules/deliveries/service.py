# app/modules/deliveries/service.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional
import logging

from .repository import DeliveriesRepository
from .schemas import (
    DeliveryCreateRequest, DeliveryUpdateRequest, DeliveryOut,
    DeliveryResponse, DeliveryListResponse
)
from app.config.settings import settings
from app.core.exceptions import ErrorKind, ServiceError, internal_failure
from app.modules.orders.repository import OrdersRepository
from app.shared.schemas.common import MutationResponse, MutationResult
from app.shared.services.pricing_service import (
    InvalidPricingInput, PricingRules, calculate_delivery_price
)
from app.shared.services.validation_service import (
    DELIVERY_FIELDS, validate_delivery, ensure_order_free_for_delivery,
    ensure_found, merge_update
)

logger = logging.getLogger(__name__)

class DeliveriesService:
    def __init__(
        self,
        db: Session,
        repository: Optional[DeliveriesRepository] = None,
        orders_repository: Optional[OrdersRepository] = None,
        rules: Optional[PricingRules] = None
    ):
        self.db = db
        self.repository = repository or DeliveriesRepository(db)
        self.orders_repository = orders_repository or OrdersRepository(db)
        self.rules = rules or PricingRules.from_settings(settings)

    async def list_deliveries(self, limit: int, offset: int) -> DeliveryListResponse:
        deliveries = self.repository.list_deliveries(limit, offset)
        return DeliveryListResponse(
            success=True,
            message=f"{len(deliveries)} entrega(s) encontradas",
            deliveries=[DeliveryOut.model_validate(d) for d in deliveries],
            total=self.repository.count_deliveries(),
            limit=limit,
            offset=offset
        )

    async def get_delivery(self, delivery_id: int) -> DeliveryResponse:
        delivery = self._get_existing(delivery_id)
        return DeliveryResponse(
            success=True,
            message="Entrega encontrada",
            delivery=DeliveryOut.model_validate(delivery)
        )

    async def get_delivery_by_order(self, order_id: int) -> DeliveryResponse:
        delivery = self.repository.find_delivery_by_order_id(order_id)
        ensure_found(delivery, f"El pedido {order_id} no tiene entrega registrada").value_or_raise()
        return DeliveryResponse(
            success=True,
            message="Entrega encontrada",
            delivery=DeliveryOut.model_validate(delivery)
        )

    async def create_delivery(self, delivery_data: DeliveryCreateRequest) -> DeliveryResponse:
        """
        Crear entrega a partir de un pedido existente.

        Responsabilidades:
        - Validar estado e ID del pedido
        - Verificar que el pedido exista y no tenga entrega
        - Calcular el precio con los atributos del pedido
        - Persistir
        """
        data = validate_delivery(delivery_data.dict()).value_or_raise()
        order_id = data["order_id"]

        values = self._priced_values(data)

        existing = self.repository.find_delivery_by_order_id(order_id)
        ensure_order_free_for_delivery(order_id, existing).value_or_raise()

        try:
            delivery = self.repository.insert_delivery(values)
        except IntegrityError:
            # Dos requests concurrentes para el mismo pedido: la restricción única decide
            raise ServiceError(ErrorKind.CONFLICT, f"Ya existe una entrega relacionada al pedido {order_id}")
        except Exception:
            logger.exception(f"Error inesperado creando entrega del pedido {order_id}")
            raise internal_failure("Error al registrar la entrega")

        return DeliveryResponse(
            success=True,
            message="Entrega registrada con éxito",
            delivery=DeliveryOut.model_validate(delivery)
        )

    async def update_delivery(self, delivery_id: int, changes: DeliveryUpdateRequest) -> DeliveryResponse:
        """
        Actualización parcial de la entrega.

        El estado y el pedido omitidos conservan su valor; el precio se
        recalcula siempre completo desde el pedido resultante.
        """
        current = self._get_existing(delivery_id)

        candidate = merge_update(current, changes.dict(exclude_unset=True), DELIVERY_FIELDS)
        data = validate_delivery(candidate).value_or_raise()
        order_id = data["order_id"]

        values = self._priced_values(data)

        existing = self.repository.find_delivery_by_order_id(order_id)
        ensure_order_free_for_delivery(order_id, existing, delivery_id).value_or_raise()

        try:
            self.repository.update_delivery(delivery_id, values)
        except IntegrityError:
            raise ServiceError(ErrorKind.CONFLICT, f"Ya existe una entrega relacionada al pedido {order_id}")
        except Exception:
            logger.exception(f"Error inesperado actualizando entrega {delivery_id}")
            raise internal_failure("Error al actualizar la entrega")

        updated = self.repository.find_delivery_by_id(delivery_id)
        return DeliveryResponse(
            success=True,
            message="Entrega actualizada con éxito",
            delivery=DeliveryOut.model_validate(updated)
        )

    async def delete_delivery(self, delivery_id: int) -> MutationResponse:
        self._get_existing(delivery_id)

        try:
            affected = self.repository.delete_delivery(delivery_id)
        except Exception:
            logger.exception(f"Error inesperado eliminando entrega {delivery_id}")
            raise internal_failure("Error al eliminar la entrega")

        return MutationResponse(
            success=True,
            message="Entrega eliminada con éxito",
            result=MutationResult(affected_rows=affected)
        )

    def _get_existing(self, delivery_id: int):
        delivery = self.repository.find_delivery_by_id(delivery_id)
        return ensure_found(delivery, f"Entrega {delivery_id} no encontrada").value_or_raise()

    def _priced_values(self, data):
        """Valores completos de la entrega: estado, pedido y desglose de precio"""
        order_id = data["order_id"]
        pricing_input = self.orders_repository.find_order_pricing_inputs(order_id)
        ensure_found(pricing_input, f"Pedido {order_id} no encontrado").value_or_raise()

        try:
            breakdown = calculate_delivery_price(pricing_input, self.rules)
        except InvalidPricingInput as e:
            raise ServiceError(ErrorKind.INVALID_INPUT, f"El pedido {order_id} no puede cotizarse: {e}")

        return {
            **breakdown.stored_values(),
            "status": data["status"],
            "order_id": order_id
        }
