"""Tests unitarios para OrdersService con repositorios simulados."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import ErrorKind, ServiceError
from app.modules.orders.schemas import OrderCreateRequest, OrderUpdateRequest
from app.modules.orders.service import OrdersService
from app.shared.services.pricing_service import DEFAULT_RULES, PricingInput


ORDER_DATA = {
    "order_date": date(2025, 5, 10),
    "urgent": True,
    "distance": Decimal("200"),
    "weight": Decimal("60"),
    "rate_per_km": Decimal("3"),
    "rate_per_kg": Decimal("2"),
    "customer_id": 1,
    "status": "calculado",
}


def _order(order_id=1, **overrides):
    return SimpleNamespace(id=order_id, **{**ORDER_DATA, **overrides})


@pytest.fixture
def repository():
    return MagicMock()


@pytest.fixture
def customers_repository():
    repo = MagicMock()
    repo.find_customer_by_id.return_value = SimpleNamespace(id=1)
    return repo


@pytest.fixture
def service(repository, customers_repository):
    return OrdersService(
        MagicMock(),
        repository=repository,
        customers_repository=customers_repository,
        rules=DEFAULT_RULES,
    )


class TestCreateOrder:
    """Registro de pedidos."""

    @pytest.mark.asyncio
    async def test_create_returns_estimated_pricing(self, service, repository):
        repository.insert_order.return_value = _order(5)

        response = await service.create_order(OrderCreateRequest(**ORDER_DATA))

        assert response.order.id == 5
        assert response.estimated_pricing.final_price == Decimal("792.60")
        assert response.estimated_pricing.heavy_fee is True
        repository.insert_order.assert_called_once_with(ORDER_DATA)

    @pytest.mark.asyncio
    async def test_unknown_customer_is_not_found(self, service, repository, customers_repository):
        customers_repository.find_customer_by_id.return_value = None

        with pytest.raises(ServiceError) as exc_info:
            await service.create_order(OrderCreateRequest(**ORDER_DATA))

        assert exc_info.value.status_code == 404
        repository.insert_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_zero_distance_is_invalid_input(self, service, repository):
        payload = OrderCreateRequest(**{**ORDER_DATA, "distance": Decimal("0")})

        with pytest.raises(ServiceError) as exc_info:
            await service.create_order(payload)

        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        repository.insert_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_status_is_invalid_input(self, service):
        payload = OrderCreateRequest(**{**ORDER_DATA, "status": "extraviado"})

        with pytest.raises(ServiceError) as exc_info:
            await service.create_order(payload)

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_repository_failure_is_internal(self, service, repository):
        repository.insert_order.side_effect = RuntimeError("timeout")

        with pytest.raises(ServiceError) as exc_info:
            await service.create_order(OrderCreateRequest(**ORDER_DATA))

        assert exc_info.value.status_code == 500


class TestUpdateOrder:
    """Actualización parcial y recálculo de la entrega."""

    @pytest.mark.asyncio
    async def test_update_reprices_existing_delivery(self, service, repository):
        """Pedido y precio de la entrega se envían juntos al repositorio"""
        repository.find_order_by_id.side_effect = [_order(1, urgent=False), _order(1)]
        repository.update_order_and_reprice_delivery.return_value = {"orders": 1, "deliveries": 1}

        response = await service.update_order(1, OrderUpdateRequest(urgent=True))

        assert response.delivery_repriced is True
        order_id, data, values = repository.update_order_and_reprice_delivery.call_args.args
        assert order_id == 1
        assert data["urgent"] is True
        assert values["final_price"] == Decimal("792.60")
        assert "status" not in values

    @pytest.mark.asyncio
    async def test_update_without_delivery(self, service, repository):
        repository.find_order_by_id.return_value = _order(1)
        repository.update_order_and_reprice_delivery.return_value = {"orders": 1, "deliveries": 0}

        response = await service.update_order(1, OrderUpdateRequest(status="em transito"))

        assert response.delivery_repriced is False
        _, data, _ = repository.update_order_and_reprice_delivery.call_args.args
        assert data["status"] == "em transito"
        assert data["distance"] == Decimal("200")

    @pytest.mark.asyncio
    async def test_update_with_negative_weight(self, service, repository):
        repository.find_order_by_id.return_value = _order(1)

        with pytest.raises(ServiceError) as exc_info:
            await service.update_order(1, OrderUpdateRequest(weight=Decimal("-1")))

        assert exc_info.value.status_code == 400
        repository.update_order_and_reprice_delivery.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_storage_failure_is_internal(self, service, repository):
        repository.find_order_by_id.return_value = _order(1)
        repository.update_order_and_reprice_delivery.side_effect = SQLAlchemyError("deadlock")

        with pytest.raises(ServiceError) as exc_info:
            await service.update_order(1, OrderUpdateRequest(urgent=False))

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_update_with_three_decimals_is_rejected(self, service, repository):
        """El recálculo usa los mismos valores que se guardan (2 decimales)"""
        repository.find_order_by_id.return_value = _order(1)

        with pytest.raises(ServiceError) as exc_info:
            await service.update_order(1, OrderUpdateRequest(rate_per_km=Decimal("5.004")))

        assert exc_info.value.status_code == 400
        repository.update_order_and_reprice_delivery.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_to_unknown_customer(self, service, repository, customers_repository):
        repository.find_order_by_id.return_value = _order(1)
        customers_repository.find_customer_by_id.return_value = None

        with pytest.raises(ServiceError) as exc_info:
            await service.update_order(1, OrderUpdateRequest(customer_id=77))

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_update_missing_order(self, service, repository):
        repository.find_order_by_id.return_value = None

        with pytest.raises(ServiceError) as exc_info:
            await service.update_order(9, OrderUpdateRequest(urgent=False))

        assert exc_info.value.status_code == 404


class TestQuoteAndDelete:
    @pytest.mark.asyncio
    async def test_quote_order(self, service, repository):
        repository.find_order_pricing_inputs.return_value = PricingInput(
            distance=Decimal("10"), weight=Decimal("10"),
            rate_per_km=Decimal("5"), rate_per_kg=Decimal("2"), urgent=True,
        )

        response = await service.quote_order(1)

        assert response.pricing.base == Decimal("70")
        assert response.pricing.final_price == Decimal("84")
        repository.insert_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_quote_missing_order(self, service, repository):
        repository.find_order_pricing_inputs.return_value = None

        with pytest.raises(ServiceError) as exc_info:
            await service.quote_order(4)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_quote_stored_zero_distance_is_invalid_input(self, service, repository):
        """Una fila con distancia 0.00 no produce un 500"""
        repository.find_order_pricing_inputs.return_value = PricingInput(
            distance=Decimal("0.00"), weight=Decimal("10"),
            rate_per_km=Decimal("5"), rate_per_kg=Decimal("2"), urgent=False,
        )

        with pytest.raises(ServiceError) as exc_info:
            await service.quote_order(1)

        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_reports_cascaded_delivery(self, service, repository):
        repository.find_order_by_id.return_value = _order(1)
        repository.delete_order_with_delivery.return_value = {"orders": 1, "deliveries": 1}

        response = await service.delete_order(1)

        assert response.affected_rows == 1
        assert response.deleted_deliveries == 1

    @pytest.mark.asyncio
    async def test_delete_missing_order(self, service, repository):
        repository.find_order_by_id.return_value = None

        with pytest.raises(ServiceError) as exc_info:
            await service.delete_order(3)

        assert exc_info.value.status_code == 404
        repository.delete_order_with_delivery.assert_not_called()
